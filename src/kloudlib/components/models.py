# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/components/models.py

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from kloudlib.config.models import ClusterConnection, IngressSpec, PersistenceSpec


class ComponentInputs(BaseModel):
    """Fields every chart component accepts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    namespace: Optional[str] = None
    version: Optional[str] = None
    provider: Optional[ClusterConnection] = None


# ----------------------------------------------------------------------
# MetalLB
# ----------------------------------------------------------------------

class AddressPool(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    protocol: Literal["layer2"] = "layer2"
    addresses: List[str]


class MetalLBInputs(ComponentInputs):
    address_pools: Optional[List[AddressPool]] = Field(default=None, alias="addressPools")


# ----------------------------------------------------------------------
# Grafana
# ----------------------------------------------------------------------

class _Dashboard(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str

    def provider_entry(self) -> dict:
        """Dashboard fields as the chart expects them, without the name key."""
        return self.model_dump(by_alias=True, exclude={"name"}, exclude_none=True)


class JsonDashboard(_Dashboard):
    json_: str = Field(alias="json")


class FileDashboard(_Dashboard):
    file: str


class GnetDashboard(_Dashboard):
    gnet_id: int = Field(alias="gnetId")
    revision: Optional[int] = None
    datasource: Optional[str] = None


class UrlDashboard(_Dashboard):
    url: str
    b64content: Optional[bool] = None


DashboardSource = Union[JsonDashboard, FileDashboard, GnetDashboard, UrlDashboard]


class DataSource(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: Literal["prometheus", "loki"]
    url: str


class GrafanaInputs(ComponentInputs):
    dashboards: Optional[List[DashboardSource]] = None
    datasources: Optional[List[DataSource]] = None
    ingress: Optional[IngressSpec] = None
    persistence: Optional[PersistenceSpec] = None


# ----------------------------------------------------------------------
# ingress-nginx
# ----------------------------------------------------------------------

class DeploymentMode(BaseModel):
    """
    Controller as a Deployment behind a LoadBalancer Service.
    Intended for cloud environments.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    kind: Literal["Deployment"] = "Deployment"
    replicas: Optional[int] = None
    load_balancer_ip: Optional[str] = Field(default=None, alias="loadBalancerIP")
    service_annotations: Optional[Dict[str, str]] = Field(
        default=None, alias="serviceAnnotations"
    )


class DaemonSetMode(BaseModel):
    """
    Controller as a DaemonSet binding hostPorts, no Service.
    Intended for on-premise clusters without a load balancer.
    """

    # replica and service settings are meaningless here and dropped
    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["DaemonSet"] = "DaemonSet"


ControllerMode = Annotated[Union[DeploymentMode, DaemonSetMode], Field(discriminator="kind")]


class L4ServiceBackend(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    namespace: str
    service_name: str = Field(alias="serviceName")
    service_port: int = Field(alias="servicePort")

    def locator(self) -> str:
        return f"{self.namespace}/{self.service_name}:{self.service_port}"


class NginxIngressInputs(ComponentInputs):
    mode: Optional[ControllerMode] = None
    # nginx configmap entries
    config: Optional[Dict[str, str]] = None
    tcp_services: Optional[Dict[int, L4ServiceBackend]] = Field(default=None, alias="tcpServices")
    udp_services: Optional[Dict[int, L4ServiceBackend]] = Field(default=None, alias="udpServices")
    # GeoLite2 database download
    maxmind_license_key: Optional[str] = Field(default=None, alias="maxmindLicenseKey")
