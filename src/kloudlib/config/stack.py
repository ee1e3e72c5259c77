# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/config/stack.py

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from kloudlib.components.models import GrafanaInputs, MetalLBInputs, NginxIngressInputs
from kloudlib.config.models import ClusterConnection


class StackConfig(BaseModel):
    """
    A stack file: component inputs keyed by instance name.

        name: homelab
        cluster:
          context: homelab
        metallb:
          lb:
            addressPools: [...]
        nginx_ingress:
          ingress:
            mode: {kind: DaemonSet}
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = "default"
    cluster: Optional[ClusterConnection] = None
    metallb: Dict[str, MetalLBInputs] = Field(default_factory=dict)
    grafana: Dict[str, GrafanaInputs] = Field(default_factory=dict)
    nginx_ingress: Dict[str, NginxIngressInputs] = Field(
        default_factory=dict, alias="nginxIngress"
    )

    def component_names(self) -> list[str]:
        return [*self.metallb, *self.nginx_ingress, *self.grafana]
