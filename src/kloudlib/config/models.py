# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/config/models.py

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class HelmMeta(BaseModel):
    """Chart identity exposed by every component."""

    model_config = ConfigDict(frozen=True)

    chart: str
    version: str
    repo: str


class ClusterConnection(BaseModel):
    """
    Which cluster a component is installed into.
    Both fields unset means helm's own defaults ($KUBECONFIG, current context).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kubeconfig: Optional[str] = None
    context: Optional[str] = None


class IngressSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    enabled: Optional[bool] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    # unset means tls is on
    tls: Optional[bool] = None
    hosts: Optional[List[str]] = None
    annotations: Optional[Dict[str, str]] = None


class PersistenceSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    enabled: Optional[bool] = None
    size_gb: int = Field(alias="sizeGB")
    storage_class: Optional[str] = Field(default=None, alias="storageClass")


class RepoSpec(BaseModel):
    name: str
    url: HttpUrl


class ValuesRef(BaseModel):
    # Either inline dict or path(s) to YAML values
    inline: Optional[Dict] = None
    files: List[str] = Field(default_factory=list)


class ReleaseSpec(BaseModel):
    name: str                        # helm release name
    namespace: Optional[str] = None  # None -> helm's current namespace
    chart: str                       # repo/chart
    version: Optional[str] = None
    values: ValuesRef = ValuesRef()
    create_namespace: bool = True
    atomic: bool = False
    timeout_seconds: int = 600
    wait: bool = True
    cluster: Optional[ClusterConnection] = None


class ServiceRef(BaseModel):
    """Pointer to a Service created by a chart."""

    model_config = ConfigDict(frozen=True)

    namespace: Optional[str] = None
    name: str
