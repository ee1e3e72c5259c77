import pytest

from kloudlib.components.metallb import MetalLBComponent
from kloudlib.components.models import AddressPool, MetalLBInputs, NginxIngressInputs
from kloudlib.components.nginx_ingress import NginxIngressComponent
from kloudlib.config.models import ClusterConnection
from kloudlib.engine.helm_engine import HelmEngine
from kloudlib.helm.errors import HelmError
from kloudlib.observers.dispatcher import EventBus
from kloudlib.observers.events import ReleaseFailed, ReleaseStarted, ReleaseSucceeded, RepoAdded


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


class FakeHelm:
    def __init__(self, fail=False):
        self.fail = fail
        self.repos = []
        self.updates = 0
        self.releases = []
        self.uninstalled = []
        self.templated = []

    def add_repo(self, repo, debug=False): self.repos.append(repo)
    def update_repos(self, debug=False): self.updates += 1
    def upgrade_install(self, rel, debug=False):
        if self.fail:
            raise HelmError("helm failed (rc=1)")
        self.releases.append(rel)
    def uninstall(self, rel, debug=False): self.uninstalled.append(rel)
    def template(self, rel):
        self.templated.append(rel)
        return f"# manifests for {rel.name}\n"


def _metallb():
    return MetalLBComponent(
        "lb",
        MetalLBInputs(
            namespace="metallb-system",
            provider=ClusterConnection(context="homelab"),
            address_pools=[AddressPool(name="default", addresses=["10.0.0.0/28"])],
        ),
    )


def test_deploy_installs_rendered_values():
    helm = FakeHelm()
    cap = Capture()
    HelmEngine(helm=helm, bus=EventBus([cap]), env="homelab").deploy(_metallb())

    assert [r.name for r in helm.repos] == ["stable"]
    rel = helm.releases[0]
    assert rel.name == "lb-metallb"
    assert rel.chart == "stable/metallb"
    assert rel.version == "0.12.0"
    assert rel.namespace == "metallb-system"
    assert rel.cluster == ClusterConnection(context="homelab")
    assert rel.values.inline["configInline"]["address-pools"][0]["avoid-buggy-ips"] is True

    kinds = [e.__class__ for e in cap.events]
    assert kinds == [ReleaseStarted, RepoAdded, ReleaseSucceeded]
    assert all(e.env == "homelab" and e.context == "homelab" for e in cap.events)


def test_rendered_values_contain_no_nulls():
    helm = FakeHelm()
    HelmEngine(helm=helm).deploy(NginxIngressComponent("ingress", NginxIngressInputs()))

    def walk(v):
        if isinstance(v, dict):
            for x in v.values():
                walk(x)
        elif isinstance(v, list):
            for x in v:
                walk(x)
        else:
            assert v is not None

    walk(helm.releases[0].values.inline)


def test_repo_added_once_per_engine():
    helm = FakeHelm()
    engine = HelmEngine(helm=helm)
    engine.deploy_all([_metallb(), MetalLBComponent("lb2")])

    assert len(helm.repos) == 1
    assert helm.updates == 1
    assert [r.name for r in helm.releases] == ["lb-metallb", "lb2-metallb"]


def test_deploy_failure_emits_and_reraises():
    cap = Capture()
    engine = HelmEngine(helm=FakeHelm(fail=True), bus=EventBus([cap]))

    with pytest.raises(HelmError):
        engine.deploy(_metallb())

    failed = [e for e in cap.events if isinstance(e, ReleaseFailed)]
    assert failed and "rc=1" in failed[0].error
    assert not any(isinstance(e, ReleaseSucceeded) for e in cap.events)


def test_destroy_uninstalls_release():
    helm = FakeHelm()
    HelmEngine(helm=helm).destroy(_metallb())

    assert helm.uninstalled[0].name == "lb-metallb"
    assert helm.uninstalled[0].namespace == "metallb-system"


def test_atomic_engine_marks_releases_atomic():
    helm = FakeHelm()
    HelmEngine(helm=helm).deploy(_metallb())
    HelmEngine(helm=helm, atomic=True).deploy(_metallb())

    assert [r.atomic for r in helm.releases] == [False, True]


def test_template_renders_release_with_values():
    helm = FakeHelm()
    out = HelmEngine(helm=helm).template(_metallb())

    assert out == "# manifests for lb-metallb\n"
    assert [r.name for r in helm.repos] == ["stable"]
    rel = helm.templated[0]
    assert rel.chart == "stable/metallb"
    assert rel.values.inline["configInline"]["address-pools"][0]["name"] == "default"
    assert helm.releases == []
