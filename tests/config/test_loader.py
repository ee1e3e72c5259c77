from pathlib import Path
import textwrap

import pytest

from kloudlib.components.models import DaemonSetMode, DeploymentMode, GnetDashboard, UrlDashboard
from kloudlib.config.loader import ConfigError, find_secrets_file, load_config


def _write(tmp_path: Path, text: str) -> Path:
    f = tmp_path / "stack.yaml"
    f.write_text(textwrap.dedent(text))
    return f


def test_load_config_minimal_ok(tmp_path: Path):
    cfg = load_config(_write(tmp_path, """
        name: homelab
        metallb:
          lb:
            namespace: metallb-system
            addressPools:
              - name: default
                protocol: layer2
                addresses: ["192.168.1.240-192.168.1.250"]
    """))
    assert cfg.name == "homelab"
    pool = cfg.metallb["lb"].address_pools[0]
    assert pool.name == "default"
    assert pool.addresses == ["192.168.1.240-192.168.1.250"]


def test_load_config_resolves_unions(tmp_path: Path):
    cfg = load_config(_write(tmp_path, """
        nginxIngress:
          edge:
            mode:
              kind: DaemonSet
          cloud:
            mode:
              kind: Deployment
              replicas: 3
              loadBalancerIP: 10.0.0.10
            tcpServices:
              "5432":
                namespace: db
                serviceName: postgres
                servicePort: 5432
        grafana:
          grafana:
            dashboards:
              - name: node-exporter
                gnetId: 1860
                revision: 21
              - name: remote
                url: https://example.test/dash.json
    """))
    assert isinstance(cfg.nginx_ingress["edge"].mode, DaemonSetMode)
    cloud = cfg.nginx_ingress["cloud"]
    assert isinstance(cloud.mode, DeploymentMode)
    assert cloud.mode.load_balancer_ip == "10.0.0.10"
    assert cloud.tcp_services[5432].service_name == "postgres"

    gnet, url = cfg.grafana["grafana"].dashboards
    assert isinstance(gnet, GnetDashboard) and gnet.gnet_id == 1860
    assert isinstance(url, UrlDashboard)


def test_load_config_expands_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("MAXMIND_KEY", "abc123")
    cfg = load_config(_write(tmp_path, """
        nginxIngress:
          ingress:
            maxmindLicenseKey: ${MAXMIND_KEY}
    """))
    assert cfg.nginx_ingress["ingress"].maxmind_license_key == "abc123"


def test_load_config_rejects_unknown_fields(tmp_path: Path):
    with pytest.raises(ConfigError, match="Invalid stack file"):
        load_config(_write(tmp_path, """
            metallb:
              lb:
                pools: []
        """))


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml")


def test_find_secrets_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("KLOUDLIB_SECRETS_FILE", raising=False)
    assert find_secrets_file(tmp_path / "stack.yaml") == tmp_path / "secrets.yaml"

    monkeypatch.setenv("KLOUDLIB_SECRETS_FILE", "/elsewhere/secrets.yaml")
    assert find_secrets_file(tmp_path / "stack.yaml") == Path("/elsewhere/secrets.yaml")


@pytest.mark.parametrize(
    "stack",
    [
        # typo'd key under grafana ingress
        """
        grafana:
          grafana:
            ingress:
              host: [grafana.example.com]
        """,
        """
        grafana:
          grafana:
            persistence:
              sizeGB: 10
              storage_klass: longhorn
        """,
        """
        grafana:
          grafana:
            datasources:
              - name: Prometheus
                type: prometheus
                url: http://prom:9090
                acess: direct
        """,
        """
        metallb:
          lb:
            addressPools:
              - name: default
                adresses: ["10.0.0.0/28"]
        """,
        """
        nginxIngress:
          cloud:
            mode:
              kind: Deployment
              replica: 3
        """,
        """
        cluster:
          contxt: homelab
        """,
    ],
)
def test_load_config_rejects_unknown_nested_fields(tmp_path: Path, stack):
    with pytest.raises(ConfigError, match="Invalid stack file"):
        load_config(_write(tmp_path, stack))


def test_load_config_daemonset_drops_replica_fields(tmp_path: Path):
    cfg = load_config(_write(tmp_path, """
        nginxIngress:
          edge:
            mode:
              kind: DaemonSet
              replicas: 5
              loadBalancerIP: 10.0.0.10
    """))
    assert cfg.nginx_ingress["edge"].mode == DaemonSetMode()
