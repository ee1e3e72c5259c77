# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/components/registry.py

from __future__ import annotations

from typing import List, Optional, Set, TypeVar

from kloudlib.components.grafana import GrafanaComponent
from kloudlib.components.metallb import MetalLBComponent
from kloudlib.components.models import ComponentInputs
from kloudlib.components.nginx_ingress import NginxIngressComponent
from kloudlib.config.models import ClusterConnection
from kloudlib.config.stack import StackConfig
from kloudlib.credentials.generator import SecretGenerator
from kloudlib.credentials.store import SecretStore
from kloudlib.engine.component import ChartComponent

InputsT = TypeVar("InputsT", bound=ComponentInputs)


def _with_cluster(inputs: InputsT, cluster: Optional[ClusterConnection]) -> InputsT:
    if inputs.provider is not None or cluster is None:
        return inputs
    return inputs.model_copy(update={"provider": cluster})


def build_components(
    cfg: StackConfig,
    *,
    selected: Optional[Set[str]] = None,
    secret_store: SecretStore | None = None,
    secret_generator: SecretGenerator | None = None,
) -> List[ChartComponent]:
    """
    Components of a stack in install order: load balancer, ingress
    controller, then applications. ``selected`` limits the result to the
    given instance names.
    """
    unknown = (selected or set()) - set(cfg.component_names())
    if unknown:
        raise ValueError(
            f"Unknown components: {', '.join(sorted(unknown))}\n"
            f"Defined in stack: {', '.join(cfg.component_names()) or '-'}"
        )

    def wanted(name: str) -> bool:
        return selected is None or name in selected

    components: List[ChartComponent] = []

    for name, inputs in cfg.metallb.items():
        if wanted(name):
            components.append(MetalLBComponent(name, _with_cluster(inputs, cfg.cluster)))

    for name, inputs in cfg.nginx_ingress.items():
        if wanted(name):
            components.append(NginxIngressComponent(name, _with_cluster(inputs, cfg.cluster)))

    for name, inputs in cfg.grafana.items():
        if wanted(name):
            components.append(
                GrafanaComponent(
                    name,
                    _with_cluster(inputs, cfg.cluster),
                    secret_store=secret_store,
                    secret_generator=secret_generator,
                )
            )

    return components
