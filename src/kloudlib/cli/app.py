# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set

import typer
import yaml

from kloudlib.components.nginx_ingress import NginxIngressComponent
from kloudlib.components.registry import build_components
from kloudlib.config.loader import ConfigError, find_secrets_file, load_config
from kloudlib.credentials.store import SecretStore
from kloudlib.engine.helm_engine import HelmEngine
from kloudlib.helm.cli_runner import HelmCliRunner
from kloudlib.helm.errors import HelmError
from kloudlib.kube.kubectl import KubectlError, KubectlRunner
from kloudlib.logging.log import init_logging
from kloudlib.observers.dispatcher import EventBus
from kloudlib.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="kloudlib chart components CLI")


def parse_component_flag(components: Optional[List[str]]) -> Optional[Set[str]]:
    """
    --component may be repeated or comma separated.
    No flag (or "all") selects every component in the stack.
    """
    if not components:
        return None

    items = {i.strip() for c in components for i in c.split(",") if i.strip()}
    if not items or "all" in items:
        return None
    return items


def _load(stack: Path, component: Optional[List[str]], *, with_secrets: bool = True):
    """
    Load and validate the stack, then build the selected components.
    Without secrets (uninstall) no credential is read, generated or written.
    """
    try:
        cfg = load_config(stack)
    except ConfigError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    store = SecretStore(find_secrets_file(stack)) if with_secrets else None
    try:
        components = build_components(
            cfg,
            selected=parse_component_flag(component),
            secret_store=store,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--component")
    return cfg, components


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def render(
    stack: Path = typer.Argument(..., help="Stack YAML file"),
    component: Optional[List[str]] = typer.Option(None, "--component", "-c", help="Only these component instances"),
    manifests: bool = typer.Option(False, "--manifests", help="Print the manifests from `helm template` instead of values"),
):
    """
    Print the Helm values of each component without touching the cluster.
    With --manifests the charts are rendered locally by helm.
    """
    _, components = _load(stack, component)
    engine = HelmEngine(helm=HelmCliRunner())

    if manifests:
        try:
            for c in components:
                typer.echo(f"# Source: kloudlib component {c.name} (release {c.release_name})")
                typer.echo(engine.template(c), nl=False)
        except HelmError as e:
            typer.secho(str(e), fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        return

    docs = []
    for c in components:
        docs.append(
            {
                "component": c.name,
                "release": c.release_name,
                "meta": c.meta.model_dump(),
                "values": engine.render(c),
            }
        )
    typer.echo(yaml.safe_dump_all(docs, sort_keys=False), nl=False)


@app.command()
def deploy(
    stack: Path = typer.Argument(..., help="Stack YAML file"),
    component: Optional[List[str]] = typer.Option(None, "--component", "-c", help="Only these component instances"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug output, including helm --debug"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
    atomic: bool = typer.Option(False, "--atomic", help="Roll a release back if its upgrade fails"),
):
    """
    Install or upgrade every component of a stack.
    """
    cfg, components = _load(stack, component)
    logger, run_id, log_path = init_logging(
        stack=cfg.name,
        command="deploy",
        components=[c.name for c in components],
        base_dir=log_dir,
        verbose=verbose,
    )

    cluster = cfg.cluster
    helm = HelmCliRunner(
        kube_context=cluster.context if cluster else None,
        kubeconfig=cluster.kubeconfig if cluster else None,
    )
    engine = HelmEngine(
        helm=helm,
        bus=EventBus(observers=[LoggerObserver(logger)]),
        env=cfg.name,
        run_id=run_id,
        debug=verbose,
        atomic=atomic,
    )

    logger.info(f"=== Deploying stack {cfg.name} ({len(components)} component(s)) ===")
    try:
        engine.deploy_all(components)
    except HelmError as e:
        logger.error(str(e))
        logger.error(f"Full log: {log_path}")
        raise typer.Exit(code=1)

    for c in components:
        if isinstance(c, NginxIngressComponent):
            _report_ingress_address(c, logger)

    logger.info("=== Done ===")


def _report_ingress_address(component: NginxIngressComponent, logger) -> None:
    svc = component.ingress_service
    kubectl = KubectlRunner(component.provider)
    try:
        address = kubectl.service_address(svc)
    except KubectlError as e:
        # DaemonSet mode has no service
        logger.debug(str(e))
        return
    logger.info(f"{component.name}: ingress class {component.ingress_class!r}, address {address or '<pending>'}")


@app.command()
def destroy(
    stack: Path = typer.Argument(..., help="Stack YAML file"),
    component: Optional[List[str]] = typer.Option(None, "--component", "-c", help="Only these component instances"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
):
    """
    Uninstall the components of a stack, in reverse install order.
    """
    cfg, components = _load(stack, component, with_secrets=False)
    logger, run_id, _ = init_logging(
        stack=cfg.name,
        command="destroy",
        components=[c.name for c in components],
        base_dir=log_dir,
        verbose=verbose,
    )

    cluster = cfg.cluster
    helm = HelmCliRunner(
        kube_context=cluster.context if cluster else None,
        kubeconfig=cluster.kubeconfig if cluster else None,
    )
    engine = HelmEngine(helm=helm, env=cfg.name, run_id=run_id, debug=verbose)
    try:
        for c in reversed(components):
            engine.destroy(c)
    except HelmError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
