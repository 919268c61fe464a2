from hostwatch.models import HostStatus, MonitoredHost


def test_new_host_starts_up():
    host = MonitoredHost(address="10.0.0.1", hostname="router")
    assert host.status is HostStatus.UP
    assert host.consecutive_failures == 0


def test_three_failures_reach_down_with_one_entered_down_event():
    host = MonitoredHost(address="10.0.0.1", hostname="router")
    changes = [host.record_probe(False, threshold=3) for _ in range(3)]

    assert host.status is HostStatus.DOWN
    assert host.consecutive_failures == 3
    assert changes[0].previous is HostStatus.UP and changes[0].current is HostStatus.UNSTABLE
    assert changes[1] is None  # still UNSTABLE
    assert changes[2].entered_down
    assert sum(1 for c in changes if c is not None and c.entered_down) == 1


def test_staying_down_emits_nothing():
    host = MonitoredHost(address="10.0.0.1", hostname="router", status=HostStatus.DOWN, consecutive_failures=3)
    assert host.record_probe(False, threshold=3) is None
    assert host.consecutive_failures == 4


def test_success_before_threshold_resets():
    host = MonitoredHost(address="10.0.0.1", hostname="router")
    host.record_probe(False, threshold=3)
    host.record_probe(False, threshold=3)
    change = host.record_probe(True, threshold=3)

    assert host.status is HostStatus.UP
    assert host.consecutive_failures == 0
    assert change.current is HostStatus.UP
    assert not change.entered_down


def test_recovery_from_down_is_not_an_alert():
    host = MonitoredHost(address="10.0.0.1", hostname="router", status=HostStatus.DOWN, consecutive_failures=5)
    change = host.record_probe(True, threshold=3)
    assert change.previous is HostStatus.DOWN
    assert change.current is HostStatus.UP
    assert not change.entered_down


def test_view_is_a_copy():
    host = MonitoredHost(address="10.0.0.1", hostname="router")
    view = host.view()
    host.record_probe(False, threshold=3)
    assert view.status is HostStatus.UP
    assert view.consecutive_failures == 0
