# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import List, Optional

import yaml

from kloudlib.config.models import ClusterConnection, ReleaseSpec, RepoSpec
from .errors import HelmError

log = logging.getLogger("kloudlib")


class HelmCliRunner:
    """
    A pragmatic wrapper around the `helm` CLI.
    - Mirrors human CLI usage: 'repo add/update', 'upgrade --install', 'uninstall', 'template'.
    - Testable by mocking subprocess.run.
    """

    def __init__(
        self,
        kube_context: str | None = None,
        kubeconfig: str | None = None,
        env: dict[str, str] | None = None,
    ):
        self.kube_context = kube_context
        self.kubeconfig = kubeconfig
        self.env = env or {}

    # ------------------------- internal helpers -------------------------

    def _base(self, cluster: Optional[ClusterConnection] = None) -> list[str]:
        kubeconfig = (cluster and cluster.kubeconfig) or self.kubeconfig
        context = (cluster and cluster.context) or self.kube_context

        cmd = ["helm"]
        if kubeconfig:
            cmd += ["--kubeconfig", kubeconfig]
        if context:
            cmd += ["--kube-context", context]
        return cmd

    def _run(
        self,
        argv: List[str],
        allow_rc: set[int] | None = None,
        capture: bool = False,
        stream: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run a helm command.
        If `stream=True`, stream live stdout/stderr to the console (useful for --debug).
        If `capture=True`, capture and return output instead.
        """
        allow_rc = allow_rc or {0}
        log.debug("helm: %s", " ".join(argv))

        if stream:
            process = subprocess.Popen(
                argv,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self.env or None,
            )
            stdout_lines = []
            for line in iter(process.stdout.readline, ""):
                print(line, end="")
                stdout_lines.append(line)
            process.wait()
            cp = subprocess.CompletedProcess(argv, process.returncode, "".join(stdout_lines), "")
        else:
            cp = subprocess.run(
                argv,
                check=False,
                text=True,
                capture_output=capture,
                env=self.env or None,
            )

        if cp.returncode not in allow_rc:
            stderr = getattr(cp, "stderr", "") or ""
            raise HelmError(f"helm failed (rc={cp.returncode}) for {argv!r}\n{stderr}")
        return cp

    def _values_args(self, rel: ReleaseSpec, tmp_files: list[str]) -> list[str]:
        args: list[str] = []
        for f in rel.values.files:
            args += ["-f", f]

        # inline values -> temp file passed with -f; caller removes it
        if rel.values.inline:
            with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as tf:
                yaml.safe_dump(rel.values.inline, tf, sort_keys=False)
                tmp_files.append(tf.name)
                args += ["-f", tf.name]
        return args

    @staticmethod
    def _cleanup(tmp_files: list[str]) -> None:
        for name in tmp_files:
            try:
                os.unlink(name)
            except FileNotFoundError:
                pass

    def _namespace_args(self, rel: ReleaseSpec) -> list[str]:
        return ["-n", rel.namespace] if rel.namespace else []

    # ------------------------- IHelm methods -------------------------

    def add_repo(self, repo: RepoSpec, debug: bool = False) -> None:
        argv = self._base() + ["repo", "add", "--force-update", repo.name, str(repo.url)]
        if debug:
            argv.append("--debug")
        self._run(argv, capture=False, stream=debug)

    def update_repos(self, debug: bool = False) -> None:
        argv = self._base() + ["repo", "update"]
        if debug:
            argv.append("--debug")
        self._run(argv, capture=False, stream=debug)

    def upgrade_install(self, rel: ReleaseSpec, debug: bool = False) -> None:
        tmp_files: list[str] = []
        try:
            argv = (
                self._base(rel.cluster)
                + ["upgrade", "--install", rel.name, rel.chart]
                + self._namespace_args(rel)
                + self._values_args(rel, tmp_files)
            )
            if rel.version:
                argv += ["--version", rel.version]
            if rel.create_namespace and rel.namespace:
                argv += ["--create-namespace"]
            if rel.atomic:
                argv += ["--atomic"]
            if rel.wait:
                argv += ["--wait", "--timeout", f"{rel.timeout_seconds}s"]
            if debug:
                argv.append("--debug")

            self._run(argv, capture=False, stream=debug)
        finally:
            self._cleanup(tmp_files)

    def uninstall(self, rel: ReleaseSpec, debug: bool = False) -> None:
        argv = self._base(rel.cluster) + ["uninstall", rel.name] + self._namespace_args(rel)
        if debug:
            argv.append("--debug")
        self._run(argv, capture=False, stream=debug)

    def template(self, rel: ReleaseSpec) -> str:
        """Render the chart locally with the release values and return the manifests."""
        tmp_files: list[str] = []
        try:
            argv = (
                self._base(rel.cluster)
                + ["template", rel.name, rel.chart]
                + self._namespace_args(rel)
                + self._values_args(rel, tmp_files)
            )
            if rel.version:
                argv += ["--version", rel.version]
            cp = self._run(argv, capture=True)
            return cp.stdout
        finally:
            self._cleanup(tmp_files)
