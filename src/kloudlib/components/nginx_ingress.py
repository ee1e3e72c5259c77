# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/components/nginx_ingress.py

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from kloudlib.components.models import (
    DaemonSetMode,
    DeploymentMode,
    L4ServiceBackend,
    NginxIngressInputs,
)
from kloudlib.config.models import ServiceRef
from kloudlib.engine.component import ChartComponent
from kloudlib.engine.values import deep_merge

log = logging.getLogger("kloudlib")

INGRESS_CLASS = "nginx"
METRICS_PORT = 10254


def daemonset_values(mode: DaemonSetMode) -> dict:
    # no Service in this mode, nodes report their own address on ingresses
    return {
        "kind": "DaemonSet",
        "reportNodeInternalIp": True,
        "service": {
            "enabled": False,
        },
        "daemonset": {
            "useHostPort": True,
        },
    }


def anti_affinity() -> dict:
    """Prefer spreading controller pods across nodes."""
    return {
        "podAntiAffinity": {
            "preferredDuringSchedulingIgnoredDuringExecution": [
                {
                    "weight": 1,
                    "podAffinityTerm": {
                        "topologyKey": "kubernetes.io/hostname",
                        "labelSelector": {
                            "matchExpressions": [
                                {
                                    "key": "app",
                                    "operator": "In",
                                    "values": ["nginx-ingress"],
                                },
                                {
                                    "key": "component",
                                    "operator": "In",
                                    "values": ["controller"],
                                },
                            ],
                        },
                    },
                }
            ],
        },
    }


def deployment_values(mode: DeploymentMode) -> dict:
    replicas = 1 if mode.replicas is None else mode.replicas

    values = {
        "kind": "Deployment",
        "replicaCount": replicas,
        "service": {
            "type": "LoadBalancer",
            "loadBalancerIP": mode.load_balancer_ip,
            # keeps the client source IP
            "externalTrafficPolicy": "Local",
            "annotations": mode.service_annotations,
        },
    }
    # only a single replica: leave the chart's affinity untouched
    if replicas > 1:
        values["affinity"] = anti_affinity()
    return values


def controller_mode_values(mode: Optional[Union[DeploymentMode, DaemonSetMode]]) -> dict:
    if isinstance(mode, DaemonSetMode):
        return daemonset_values(mode)
    if isinstance(mode, DeploymentMode):
        return deployment_values(mode)
    return deployment_values(DeploymentMode(replicas=1))


def l4_service_values(services: Optional[Dict[int, L4ServiceBackend]]) -> Dict[int, str]:
    return {int(port): backend.locator() for port, backend in (services or {}).items()}


class NginxIngressComponent(ChartComponent):
    """
    ingress-nginx controller.

    In Deployment mode (the default) the controller runs behind a
    LoadBalancer Service, which suits cloud environments. In DaemonSet mode
    every node binds hostPorts and no Service is created, for on-premise
    clusters where no load balancer is available.
    """

    def __init__(self, name: str, inputs: NginxIngressInputs | None = None):
        inputs = inputs or NginxIngressInputs()
        super().__init__(
            name=name,
            repo_name="ingress-nginx",
            repo_url="https://kubernetes.github.io/ingress-nginx",
            chart="ingress-nginx",
            version=inputs.version or "3.9.0",
            namespace=inputs.namespace,
            release_name=name,
            provider=inputs.provider,
        )
        self.inputs = inputs

    @property
    def ingress_class(self) -> str:
        return INGRESS_CLASS

    @property
    def ingress_service(self) -> ServiceRef:
        # fullnameOverride pins the service name to <name>-controller
        return ServiceRef(namespace=self.namespace, name=f"{self.name}-controller")

    def controller_values(self) -> dict:
        common = {
            "config": self.inputs.config,
            "labels": {
                "app": "nginx-ingress",
            },
            "podLabels": {
                "app": "nginx-ingress",
            },
            "admissionWebhooks": {
                "enabled": False,
            },
            "metrics": {
                "enabled": True,
                "service": {
                    "type": "ClusterIP",
                    "servicePort": METRICS_PORT,
                    "annotations": {
                        "prometheus.io/scrape": "true",
                        "prometheus.io/port": str(METRICS_PORT),
                    },
                },
            },
            "maxmindLicenseKey": self.inputs.maxmind_license_key,
        }
        return deep_merge(controller_mode_values(self.inputs.mode), common)

    def values(self) -> dict:
        mode = self.inputs.mode.kind if self.inputs.mode else "Deployment"
        log.debug(f"[nginx-ingress] {self.name}: controller kind={mode}")

        return {
            "fullnameOverride": self.name,
            "rbac": {
                "create": True,
            },
            "defaultBackend": {
                "enabled": False,
            },
            "controller": self.controller_values(),
            "tcp": l4_service_values(self.inputs.tcp_services),
            "udp": l4_service_values(self.inputs.udp_services),
        }
