# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from kloudlib.config.models import (
    ClusterConnection,
    HelmMeta,
    ReleaseSpec,
    RepoSpec,
    ValuesRef,
)

STABLE_REPO_URL = "https://charts.helm.sh/stable"


@dataclass
class ChartComponent(ABC):
    """
    Declarative definition of a chart-backed component.

    Subclasses only compute values; installing the chart is the engine's job.
    """

    # Identity
    name: str

    # Helm repository
    repo_name: str
    repo_url: str

    # Helm chart
    chart: str
    version: str

    # Helm release
    namespace: Optional[str]
    release_name: str

    # Kubernetes
    provider: Optional[ClusterConnection] = None

    @property
    def meta(self) -> HelmMeta:
        return HelmMeta(chart=self.chart, version=self.version, repo=self.repo_url)

    def repo(self) -> RepoSpec:
        return RepoSpec(name=self.repo_name, url=self.repo_url)

    @abstractmethod
    def values(self) -> dict:
        """Helm values for this component, None entries included."""

    def release(self, values: dict) -> ReleaseSpec:
        return ReleaseSpec(
            name=self.release_name,
            namespace=self.namespace,
            chart=f"{self.repo_name}/{self.chart}",
            version=self.version,
            values=ValuesRef(inline=values),
            cluster=self.provider,
        )
