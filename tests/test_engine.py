import time

from hostwatch.alerts import AlertCounter
from hostwatch.config import INTERNET_CHECK_IP
from hostwatch.engine import MonitorEngine
from hostwatch.models import HostStatus
from hostwatch.repository import HostRegistry

from conftest import FakeProbe


def wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_discovery_then_monitoring_until_stopped(resolver):
    probe = FakeProbe({"10.0.0.3": {80}, "10.0.0.7": {22}, INTERNET_CHECK_IP: {443}})
    alerts = AlertCounter()
    registry = HostRegistry(resolver=resolver)
    engine = MonitorEngine(
        registry,
        "10.0.0.",
        alert=alerts,
        probe=probe,
        start_host=1,
        end_host=10,
        workers=4,
        interval_sec=0.02,
    )

    engine.start()
    assert wait_for(lambda: engine.monitor.rounds >= 1)
    probe.set_online("10.0.0.7", False)
    assert wait_for(lambda: alerts.count == 1)

    engine.stop()
    assert engine.join(2)
    assert engine.error is None

    views = registry.snapshot()
    assert registry.active_subnet == "10.0.0."
    assert registry.discovery_complete
    assert [v.address for v in views] == ["10.0.0.3", "10.0.0.7", INTERNET_CHECK_IP]
    assert views[1].status is HostStatus.DOWN
    assert engine.discovery_result.hosts_found == 2


def test_stop_during_discovery_skips_monitoring(resolver):
    class SlowProbe(FakeProbe):
        def __call__(self, address, port, timeout_ms):
            time.sleep(0.005)
            return super().__call__(address, port, timeout_ms)

    registry = HostRegistry(resolver=resolver)
    engine = MonitorEngine(registry, "10.0.0.", probe=SlowProbe(), workers=2, interval_sec=0.01)

    engine.start()
    engine.stop()
    assert engine.join(2)
    assert registry.discovery_complete
    assert engine.monitor.rounds == 0
    assert engine.discovery_result.cancelled


def test_engine_error_is_recorded(resolver, caplog):
    class ExhaustedRegistry(HostRegistry):
        def register_sentinel(self, address, hostname):
            raise MemoryError("cannot grow host list")

    engine = MonitorEngine(
        ExhaustedRegistry(resolver=resolver), "10.0.0.", probe=FakeProbe(), start_host=1, end_host=4, workers=2
    )
    engine.start()

    assert engine.join(2)
    assert isinstance(engine.error, MemoryError)
    assert engine.stop_event.is_set()
    assert engine.monitor.rounds == 0
    assert "Network engine failed" in caplog.text


def test_worker_memory_error_stops_engine(caplog):
    def exhausted(address):
        raise MemoryError("cannot grow host list")

    registry = HostRegistry(resolver=exhausted)
    engine = MonitorEngine(
        registry,
        "10.0.0.",
        probe=FakeProbe({"10.0.0.2": {80}}),
        start_host=1,
        end_host=4,
        workers=2,
        interval_sec=0.01,
    )
    engine.start()

    assert engine.join(2)
    assert isinstance(engine.error, MemoryError)
    assert engine.monitor.rounds == 0
    assert not registry.discovery_complete
    assert "Network engine failed" in caplog.text


def test_full_list_published_once_discovery_finalizes(resolver):
    published = []
    found = []

    def on_round(hosts):
        published.append((engine.monitor.rounds, [h.address for h in hosts]))

    registry = HostRegistry(resolver=resolver)
    engine = MonitorEngine(
        registry,
        "10.0.0.",
        on_round=on_round,
        on_discovered=found.append,
        probe=FakeProbe({"10.0.0.6": {80}}),
        start_host=1,
        end_host=8,
        workers=2,
        interval_sec=0.02,
    )
    engine.start()
    assert wait_for(lambda: engine.monitor.rounds >= 1)
    engine.stop()
    assert engine.join(2)

    assert published[0] == (0, ["10.0.0.6", INTERNET_CHECK_IP])
    assert [v.address for v in found] == ["10.0.0.6"]
