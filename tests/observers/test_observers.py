import logging

from kloudlib.observers.dispatcher import EventBus
from kloudlib.observers.events import ReleaseStarted, new_ctx
from kloudlib.observers.logger import LoggerObserver


class Capture:
    def __init__(self): self.events = []
    def notify(self, event): self.events.append(event)


class Broken:
    def notify(self, event): raise RuntimeError("boom")


def _event():
    return ReleaseStarted(
        **new_ctx(env="homelab", context="ctx", run_id="run-1"),
        name="lb-metallb",
        namespace="metallb-system",
        chart="metallb",
        version="0.12.0",
    )


def test_broken_observer_does_not_stop_others():
    cap = Capture()
    EventBus([Broken(), cap]).emit(_event())
    assert len(cap.events) == 1


def test_logger_observer(caplog):
    logger = logging.getLogger("observer-test")
    with caplog.at_level(logging.INFO, logger="observer-test"):
        LoggerObserver(logger).notify(_event())

    assert "[EVENT] ReleaseStarted" in caplog.text
    assert "run_id=run-1" in caplog.text
    assert "name=lb-metallb" in caplog.text


def test_new_ctx_timestamp_format():
    ctx = new_ctx(env="e", context=None)
    assert ctx["ts"].endswith("Z")
    assert ctx["run_id"]
