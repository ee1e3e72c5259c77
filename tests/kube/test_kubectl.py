import json
import subprocess

import pytest

from kloudlib.config.models import ClusterConnection, ServiceRef
from kloudlib.kube.kubectl import KubectlError, KubectlRunner


class DummyCP:
    def __init__(self, rc=0, out="", err=""):
        self.returncode = rc
        self.stdout = out
        self.stderr = err


def _svc(ingress):
    return json.dumps({"status": {"loadBalancer": {"ingress": ingress}}})


def test_service_address_ip(monkeypatch):
    calls = []

    def fake_run(argv, check=False, text=False, capture_output=False):
        calls.append(argv)
        return DummyCP(0, out=_svc([{"ip": "192.168.1.240"}]))

    monkeypatch.setattr(subprocess, "run", fake_run)

    kubectl = KubectlRunner(ClusterConnection(context="homelab"))
    address = kubectl.service_address(ServiceRef(namespace="ingress-nginx", name="ingress-controller"))

    assert address == "192.168.1.240"
    assert calls[0] == [
        "kubectl", "--context", "homelab",
        "get", "service", "ingress-controller", "-n", "ingress-nginx", "-o", "json",
    ]


def test_service_address_hostname(monkeypatch):
    monkeypatch.setattr(
        subprocess, "run",
        lambda argv, **kw: DummyCP(0, out=_svc([{"hostname": "lb.example.com"}])),
    )
    assert KubectlRunner().service_address(ServiceRef(name="x")) == "lb.example.com"


def test_service_address_pending(monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda argv, **kw: DummyCP(0, out=json.dumps({"status": {}})))
    assert KubectlRunner().service_address(ServiceRef(name="x")) is None


def test_missing_service_raises(monkeypatch):
    monkeypatch.setattr(
        subprocess, "run",
        lambda argv, **kw: DummyCP(1, err='services "x" not found'),
    )
    with pytest.raises(KubectlError, match="not found"):
        KubectlRunner().service_address(ServiceRef(name="x"))
