# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/engine/helm_engine.py

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from kloudlib.engine.component import ChartComponent
from kloudlib.engine.values import compact
from kloudlib.helm.interface import IHelm
from kloudlib.observers.dispatcher import EventBus
from kloudlib.observers.events import (
    ReleaseFailed,
    ReleaseStarted,
    ReleaseSucceeded,
    RepoAdded,
    new_ctx,
)

log = logging.getLogger("kloudlib")


class HelmEngine:
    """
    Installs chart components through a helm runner.

    Components only describe values; repo setup, install/upgrade and
    waiting for the release belong here.
    """

    def __init__(
        self,
        *,
        helm: IHelm,
        bus: EventBus | None = None,
        env: str = "default",
        run_id: Optional[str] = None,
        debug: bool = False,
        atomic: bool = False,
    ):
        self.helm = helm
        self.bus = bus or EventBus()
        self.env = env
        self.run_id = run_id
        self.debug = debug
        self.atomic = atomic
        self._repos_added: set[str] = set()

    def _ctx(self, component: ChartComponent) -> dict:
        context = component.provider.context if component.provider else None
        return new_ctx(env=self.env, context=context, run_id=self.run_id)

    def render(self, component: ChartComponent) -> dict:
        """Final values tree for a component, unset entries removed."""
        return compact(component.values())

    def _ensure_repo(self, component: ChartComponent) -> None:
        if component.repo_name in self._repos_added:
            return

        repo = component.repo()
        self.helm.add_repo(repo, debug=self.debug)
        self.helm.update_repos(debug=self.debug)
        self._repos_added.add(component.repo_name)
        self.bus.emit(RepoAdded(**self._ctx(component), name=repo.name, url=str(repo.url)))

    def deploy(self, component: ChartComponent) -> None:
        meta = component.meta
        self.bus.emit(
            ReleaseStarted(
                **self._ctx(component),
                name=component.release_name,
                namespace=component.namespace,
                chart=meta.chart,
                version=meta.version,
            )
        )
        log.info(
            f"Deploying {component.release_name} "
            f"({meta.chart} {meta.version}) into {component.namespace or '<current namespace>'}"
        )

        start = time.monotonic()
        try:
            self._ensure_repo(component)
            release = component.release(self.render(component))
            if self.atomic:
                release = release.model_copy(update={"atomic": True})
            self.helm.upgrade_install(release, debug=self.debug)
        except Exception as e:
            self.bus.emit(
                ReleaseFailed(**self._ctx(component), name=component.release_name, error=str(e))
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        self.bus.emit(
            ReleaseSucceeded(
                **self._ctx(component),
                name=component.release_name,
                duration_ms=duration_ms,
            )
        )
        log.info(f"{component.release_name} deployed in {duration_ms} ms")

    def deploy_all(self, components: Iterable[ChartComponent]) -> None:
        for component in components:
            self.deploy(component)

    def destroy(self, component: ChartComponent) -> None:
        log.info(f"Uninstalling {component.release_name}")
        self.helm.uninstall(component.release({}), debug=self.debug)

    def template(self, component: ChartComponent) -> str:
        """Manifests the chart would produce for the component, via `helm template`."""
        self._ensure_repo(component)
        return self.helm.template(component.release(self.render(component)))
