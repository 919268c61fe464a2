"""
Design (engine.py)
- Purpose: Own the single orchestration thread: discovery first, then monitoring until stopped.
- Inputs: HostRegistry, scan prefix, collaborators (alert / on_change / on_round / on_discovered), probe settings.
- Outputs: None (state lives in the registry).
- Side effects: Starts one thread; that thread fans out into the discovery worker pool and joins it.
- Thread-safety: stop() is safe from any thread (including signal handlers); join() before
                 dropping the registry so nothing touches it during teardown.
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence

from .config import COMMON_PORTS, CONNECT_TIMEOUT_MS, END_HOST, FAIL_THRESHOLD, MONITOR_INTERVAL_SEC, NUM_WORKERS, START_HOST
from .discovery import DiscoveryCoordinator, DiscoveryResult
from .models import HostView, StatusChange
from .monitor import HostMonitor
from .probe import Probe, probe
from .repository import HostRegistry

logger = logging.getLogger(__name__)


class MonitorEngine:
    def __init__(
        self,
        registry: HostRegistry,
        prefix: str,
        alert: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[StatusChange], None]] = None,
        on_round: Optional[Callable[[List[HostView]], None]] = None,
        on_discovered: Optional[Callable[[HostView], None]] = None,
        probe: Probe = probe,
        ports: Sequence[int] = COMMON_PORTS,
        timeout_ms: int = CONNECT_TIMEOUT_MS,
        start_host: int = START_HOST,
        end_host: int = END_HOST,
        workers: int = NUM_WORKERS,
        interval_sec: float = MONITOR_INTERVAL_SEC,
        threshold: int = FAIL_THRESHOLD,
    ):
        self.registry = registry
        self.prefix = prefix
        self.start_host = start_host
        self.end_host = end_host
        self.workers = workers
        self.stop_event = threading.Event()
        self.discovery_result: Optional[DiscoveryResult] = None
        self.error: Optional[BaseException] = None
        self._on_round = on_round

        self.coordinator = DiscoveryCoordinator(
            registry,
            self.stop_event,
            probe=probe,
            ports=ports,
            timeout_ms=timeout_ms,
            on_discovered=on_discovered,
        )
        self.monitor = HostMonitor(
            registry,
            self.stop_event,
            alert=alert,
            on_change=on_change,
            on_round=on_round,
            probe=probe,
            ports=ports,
            timeout_ms=timeout_ms,
            interval_sec=interval_sec,
            threshold=threshold,
        )
        self._thread = threading.Thread(target=self._run, daemon=True, name="hostwatch-engine")

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self.stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the engine thread; True once it has finished."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        try:
            self.registry.active_subnet = self.prefix
            self.discovery_result = self.coordinator.discover(
                self.prefix, self.start_host, self.end_host, self.workers
            )
            if not self.stop_event.is_set():
                self._publish_discovery()
                self.monitor.run()
        except Exception as exc:
            self.error = exc
            logger.exception("Network engine failed")
            self.stop_event.set()

    def _publish_discovery(self) -> None:
        # First full list (sorted, sentinel last) before the first monitoring round
        if self._on_round is None:
            return
        try:
            self._on_round(self.registry.snapshot())
        except Exception:
            logger.exception("Round callback %r failed", self._on_round)
