# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/components/grafana.py

from __future__ import annotations

import logging
from typing import List, Optional

from kloudlib.components.models import DashboardSource, DataSource, GrafanaInputs
from kloudlib.config.models import IngressSpec, PersistenceSpec
from kloudlib.credentials.generator import RandomStringGenerator, SecretGenerator
from kloudlib.credentials.store import SecretStore
from kloudlib.engine.component import STABLE_REPO_URL, ChartComponent

log = logging.getLogger("kloudlib")

ADMIN_USERNAME = "admin"
DASHBOARD_PROVIDER = "default"
DASHBOARD_PATH = "/var/lib/grafana/dashboards/default"


def ingress_values(ingress: Optional[IngressSpec], tls_secret_name: str) -> dict:
    if ingress is None:
        return {"enabled": False}

    # computed defaults first, caller annotations last so the caller wins
    annotations = {
        "kubernetes.io/ingress.class": ingress.class_name or "nginx",
        "kubernetes.io/tls-acme": "false" if ingress.tls is False else "true",
    }
    annotations.update(ingress.annotations or {})

    values = {
        "enabled": True if ingress.enabled is None else ingress.enabled,
        "annotations": annotations,
    }
    # without hosts there is nothing to issue a certificate for
    if ingress.hosts:
        values["hosts"] = list(ingress.hosts)
        values["tls"] = [
            {
                "hosts": list(ingress.hosts),
                "secretName": tls_secret_name,
            }
        ]
    return values


def persistence_values(persistence: Optional[PersistenceSpec]) -> dict:
    if persistence is None:
        return {"enabled": False}

    return {
        "enabled": persistence.enabled,
        "size": f"{persistence.size_gb}Gi",
        "storageClass": persistence.storage_class,
    }


def server_values(ingress: Optional[IngressSpec]) -> Optional[dict]:
    """grafana.ini [server] derived from the first ingress host, if there is one."""
    hosts = ingress.hosts if ingress else None
    if not hosts:
        return None

    return {
        "domain": hosts[0],
        "root_url": f"https://{hosts[0]}",
    }


def datasource_values(datasources: Optional[List[DataSource]]) -> dict:
    return {
        "datasources.yaml": {
            "apiVersion": 1,
            "datasources": [
                {
                    "name": ds.name,
                    "type": ds.type,
                    "url": ds.url,
                    "access": "proxy",
                    "basicAuth": False,
                    "editable": False,
                }
                for ds in datasources or []
            ],
        }
    }


def dashboard_values(dashboards: Optional[List[DashboardSource]]) -> Optional[dict]:
    if not dashboards:
        return None

    entries = {}
    for dashboard in dashboards:
        entries[dashboard.name] = dashboard.provider_entry()
    return {DASHBOARD_PROVIDER: entries}


def dashboard_provider_values(dashboards: Optional[List[DashboardSource]]) -> Optional[dict]:
    if not dashboards:
        return None

    return {
        "dashboardproviders.yaml": {
            "apiVersion": 1,
            "providers": [
                {
                    "name": DASHBOARD_PROVIDER,
                    "orgId": 1,
                    "folder": "",
                    "type": "file",
                    "disableDeletion": False,
                    "editable": True,
                    "options": {
                        "path": DASHBOARD_PATH,
                    },
                }
            ],
        }
    }


class GrafanaComponent(ChartComponent):
    """
    Grafana with provisioned dashboards and datasources.

    The admin password is resolved once, when the component is built. With a
    secret store it is read back under ``<name>-grafana-admin-password`` and
    only generated when the store has none, so reruns keep the same
    credential.
    """

    def __init__(
        self,
        name: str,
        inputs: GrafanaInputs | None = None,
        *,
        secret_store: SecretStore | None = None,
        secret_generator: SecretGenerator | None = None,
    ):
        inputs = inputs or GrafanaInputs()
        super().__init__(
            name=name,
            repo_name="stable",
            repo_url=STABLE_REPO_URL,
            chart="grafana",
            version=inputs.version or "4.2.2",
            namespace=inputs.namespace,
            release_name=f"{name}-grafana",
            provider=inputs.provider,
        )
        self.inputs = inputs

        generator = secret_generator or RandomStringGenerator(length=32, special=False)
        if secret_store is not None:
            self.admin_password = secret_store.get_or_create(self.password_key, generator)
        else:
            self.admin_password = generator.generate()

    @property
    def password_key(self) -> str:
        return f"{self.name}-grafana-admin-password"

    @property
    def admin_username(self) -> str:
        return ADMIN_USERNAME

    @property
    def ingress(self) -> Optional[IngressSpec]:
        return self.inputs.ingress

    @property
    def persistence(self) -> Optional[PersistenceSpec]:
        return self.inputs.persistence

    @property
    def tls_secret_name(self) -> str:
        return f"tls-grafana-{self.name}"

    def values(self) -> dict:
        log.debug(
            f"[grafana] {self.name}: "
            f"{len(self.inputs.dashboards or [])} dashboard(s), "
            f"{len(self.inputs.datasources or [])} datasource(s)"
        )

        return {
            "adminUser": self.admin_username,
            "adminPassword": self.admin_password,
            "ingress": ingress_values(self.inputs.ingress, self.tls_secret_name),
            "deploymentStrategy": {
                "type": "Recreate",
            },
            "persistence": persistence_values(self.inputs.persistence),
            "testFramework": {
                "enabled": False,
            },
            "grafana.ini": {
                "server": server_values(self.inputs.ingress),
                "auth.anonymous": {
                    "enabled": "true",
                    "org_name": "Main Org.",
                    "org_role": "Editor",
                },
                "auth.basic": {
                    "enabled": "false",
                },
            },
            "datasources": datasource_values(self.inputs.datasources),
            "dashboards": dashboard_values(self.inputs.dashboards),
            "dashboardProviders": dashboard_provider_values(self.inputs.dashboards),
        }
