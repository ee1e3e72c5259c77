# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/helm/interface.py

from __future__ import annotations

from typing import Protocol

from kloudlib.config.models import ReleaseSpec, RepoSpec


class IHelm(Protocol):
    def add_repo(self, repo: RepoSpec, debug: bool = False) -> None: ...

    def update_repos(self, debug: bool = False) -> None: ...

    def upgrade_install(self, rel: ReleaseSpec, debug: bool = False) -> None: ...

    def uninstall(self, rel: ReleaseSpec, debug: bool = False) -> None: ...

    def template(self, rel: ReleaseSpec) -> str: ...
