# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/kube/kubectl.py

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, List, Optional

from kloudlib.config.models import ClusterConnection, ServiceRef

log = logging.getLogger("kloudlib")


class KubectlError(RuntimeError):
    pass


class KubectlRunner:
    """
    Local kubectl runner, used to read back what a chart created.
    """

    def __init__(self, cluster: Optional[ClusterConnection] = None):
        self.cluster = cluster or ClusterConnection()

    def _base(self) -> list[str]:
        cmd = ["kubectl"]
        if self.cluster.kubeconfig:
            cmd += ["--kubeconfig", self.cluster.kubeconfig]
        if self.cluster.context:
            cmd += ["--context", self.cluster.context]
        return cmd

    def _run(self, args: List[str]) -> tuple[int, str, str]:
        """
        Run a kubectl command.

        Returns:
            (rc, stdout, stderr)
        """
        argv = self._base() + args
        log.debug("kubectl: %s", " ".join(argv))
        cp = subprocess.run(argv, check=False, text=True, capture_output=True)
        return cp.returncode, cp.stdout, cp.stderr

    def get_json(self, args: List[str]) -> dict[str, Any]:
        rc, out, err = self._run(["get"] + args + ["-o", "json"])
        if rc != 0:
            raise KubectlError(f"kubectl get {' '.join(args)} failed (rc={rc}): {err.strip()}")
        return json.loads(out)

    def get_service(self, ref: ServiceRef) -> dict[str, Any]:
        args = ["service", ref.name]
        if ref.namespace:
            args += ["-n", ref.namespace]
        return self.get_json(args)

    def service_address(self, ref: ServiceRef) -> Optional[str]:
        """
        First load-balancer address (IP or hostname) of a Service.
        None while the cloud/MetalLB has not assigned one yet.
        """
        svc = self.get_service(ref)
        ingress = svc.get("status", {}).get("loadBalancer", {}).get("ingress") or []
        if not ingress:
            return None
        return ingress[0].get("ip") or ingress[0].get("hostname")
