import logging
import threading
from types import SimpleNamespace

from hostwatch import alerts
from hostwatch.alerts import AlertCounter, DesktopAlert


def test_desktop_alert_uses_plyer(monkeypatch):
    sent = []
    monkeypatch.setattr(alerts, "notification", SimpleNamespace(notify=lambda **kwargs: sent.append(kwargs)))

    DesktopAlert(title="Net", message="host down", timeout=3, background=False)()

    assert sent == [{"title": "Net", "message": "host down", "timeout": 3}]


def test_disabled_desktop_alert_is_silent(monkeypatch):
    sent = []
    monkeypatch.setattr(alerts, "notification", SimpleNamespace(notify=lambda **kwargs: sent.append(kwargs)))
    DesktopAlert(enabled=False, background=False)()
    DesktopAlert(enabled=False)()
    assert sent == []


def test_missing_backend_is_logged_not_raised(monkeypatch, caplog):
    def no_backend(**kwargs):
        raise NotImplementedError("No usable implementation found!")

    monkeypatch.setattr(alerts, "notification", SimpleNamespace(notify=no_backend))
    with caplog.at_level(logging.WARNING, logger="hostwatch.alerts"):
        DesktopAlert(background=False)()
    assert "Desktop notification failed" in caplog.text


def test_slow_backend_does_not_block_caller(monkeypatch):
    release = threading.Event()
    delivered = threading.Event()

    def slow_notify(**kwargs):
        release.wait(2)
        delivered.set()

    monkeypatch.setattr(alerts, "notification", SimpleNamespace(notify=slow_notify))

    DesktopAlert()()

    # Returned while the backend is still blocked
    assert not delivered.is_set()
    release.set()
    assert delivered.wait(2)


def test_alert_counter():
    counter = AlertCounter()
    counter()
    counter()
    assert counter.count == 2
