"""
Background monitoring loop.

Design:
- Runs on the engine's orchestration thread once discovery is complete.
- Every round:
    1) Snapshot the (frozen) address list from the registry.
    2) Probe each address on the common ports; any open port means online.
    3) Apply all results to the registry in one locked pass (state machine in MonitoredHost).
    4) Emit on_change for every status change and alert() for every transition into DOWN.
    5) Emit on_round with a fresh snapshot so the presentation side can refresh.
- Methods:
    run_round(): one sweep (tests call this directly)
    run(): loop until the stop Event is set
- Thread-safety: Registry does its own locking; probing happens outside the lock so
                 snapshots stay responsive during a slow round.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence

from .config import COMMON_PORTS, CONNECT_TIMEOUT_MS, FAIL_THRESHOLD, MONITOR_INTERVAL_SEC
from .models import HostView, StatusChange
from .probe import Probe, is_reachable, probe
from .repository import HostRegistry

logger = logging.getLogger(__name__)


class HostMonitor:
    def __init__(
        self,
        registry: HostRegistry,
        stop_event: threading.Event,
        alert: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[StatusChange], None]] = None,
        on_round: Optional[Callable[[List[HostView]], None]] = None,
        probe: Probe = probe,
        ports: Sequence[int] = COMMON_PORTS,
        timeout_ms: int = CONNECT_TIMEOUT_MS,
        interval_sec: float = MONITOR_INTERVAL_SEC,
        threshold: int = FAIL_THRESHOLD,
    ):
        self.registry = registry
        self.stop_event = stop_event
        self.alert = alert
        self.on_change = on_change
        self.on_round = on_round
        self.probe = probe
        self.ports = tuple(ports)
        self.timeout_ms = timeout_ms
        self.interval_sec = interval_sec
        self.threshold = threshold
        self.rounds = 0

    def run(self) -> None:
        logger.info("Monitoring %d hosts every %ss", len(self.registry), self.interval_sec)
        while not self.stop_event.is_set():
            self.run_round()
            # returns early when stop is set
            self.stop_event.wait(self.interval_sec)
        logger.info("Monitor stopped after %d round(s)", self.rounds)

    def run_round(self) -> Optional[List[StatusChange]]:
        """
        Purpose: Probe every registered host once and advance their state machines.
        Outputs: StatusChange list, or None if the stop Event interrupted the round
                 (partial results are discarded).
        """
        outcomes: Dict[int, bool] = {}
        for index, address in enumerate(self.registry.addresses()):
            if self.stop_event.is_set():
                return None
            outcomes[index] = is_reachable(address, self.ports, self.timeout_ms, probe=self.probe)

        changes = self.registry.apply_round(outcomes, self.threshold)
        self.rounds += 1

        for change in changes:
            logger.info(
                "%s (%s): %s -> %s (failures: %d)",
                change.address,
                change.hostname,
                change.previous.label,
                change.current.label,
                change.consecutive_failures,
            )
            self._emit(self.on_change, change)
            if change.entered_down:
                self._emit(self.alert)

        if self.on_round is not None:
            self._emit(self.on_round, self.registry.snapshot())
        return changes

    def _emit(self, callback: Optional[Callable], *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Monitor callback %r failed", callback)

