import threading
from collections import Counter

import pytest


class FakeProbe:
    """
    Scripted stand-in for hostwatch.probe.probe.
    - open_ports: {address -> set of ports that answer}
    - Records every (address, port) call, thread-safely.
    """

    def __init__(self, open_ports=None):
        self.open_ports = {a: set(p) for a, p in (open_ports or {}).items()}
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, address, port, timeout_ms):
        with self._lock:
            self.calls.append((address, port))
            return port in self.open_ports.get(address, ())

    def set_online(self, address, online, port=80):
        with self._lock:
            self.open_ports[address] = {port} if online else set()

    def first_port_visits(self, first_port=21):
        with self._lock:
            return Counter(a for a, p in self.calls if p == first_port)


@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def resolver():
    return lambda address: f"host-{address.rsplit('.', 1)[-1]}"
