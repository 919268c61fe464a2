"""
Design (discovery.py)
- Purpose: Populate the HostRegistry by sweeping "<prefix>1".."<prefix>254" with a pool of worker threads.
- Inputs: Prefix, host range, worker count, shared stop Event.
- Outputs: DiscoveryResult; registry filled, sentinel appended, sorted and finalized.
- Side effects: Spawns and joins one thread per shard; outbound TCP connects.
- Thread-safety: Workers share nothing but the registry (which locks) and the stop Event.
                 Workers check the Event between addresses, never mid-probe.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .config import (
    COMMON_PORTS,
    CONNECT_TIMEOUT_MS,
    END_HOST,
    INTERNET_CHECK_IP,
    INTERNET_HOSTNAME,
    NUM_WORKERS,
    START_HOST,
)
from .models import HostView
from .probe import Probe, is_reachable, probe
from .repository import HostRegistry

logger = logging.getLogger(__name__)

Shard = Tuple[int, int]  # inclusive (first host, last host)


@dataclass
class DiscoveryResult:
    hosts_found: int = 0
    skipped_shards: List[Shard] = field(default_factory=list)
    cancelled: bool = False


def partition_range(start: int, end: int, workers: int) -> List[Shard]:
    """
    Purpose: Split [start, end] into `workers` contiguous, near-equal shards.
    Outputs: Inclusive (lo, hi) pairs in ascending order; any remainder goes to the last shard.
             Worker count is clamped to the range size so no shard is empty.
    Raises: ValueError for workers < 1 or start > end.
    """
    if workers < 1:
        raise ValueError(f"worker count must be at least 1, got {workers}")
    if start > end:
        raise ValueError(f"empty host range {start}-{end}")

    total = end - start + 1
    workers = min(workers, total)
    per_worker = total // workers

    shards: List[Shard] = []
    for i in range(workers):
        lo = start + i * per_worker
        hi = end if i == workers - 1 else lo + per_worker - 1
        shards.append((lo, hi))
    return shards


class DiscoveryCoordinator:
    """
    Design (DiscoveryCoordinator)
    - on_discovered: called from worker threads with a HostView for every new host, so the
                     presentation side can list hosts as they arrive.
    - A worker that dies records its exception and raises the stop Event; discover() re-raises
      it after the join instead of finalizing an incomplete registry.
    """

    def __init__(
        self,
        registry: HostRegistry,
        stop_event: threading.Event,
        probe: Probe = probe,
        ports: Sequence[int] = COMMON_PORTS,
        timeout_ms: int = CONNECT_TIMEOUT_MS,
        on_discovered: Optional[Callable[[HostView], None]] = None,
    ):
        self.registry = registry
        self.stop_event = stop_event
        self.probe = probe
        self.ports = tuple(ports)
        self.timeout_ms = timeout_ms
        self.on_discovered = on_discovered
        self._error_lock = threading.Lock()
        self._worker_error: Optional[BaseException] = None

    def discover(
        self,
        prefix: str,
        start: int = START_HOST,
        end: int = END_HOST,
        workers: int = NUM_WORKERS,
    ) -> DiscoveryResult:
        """
        Purpose: Run the discovery phase to completion (or cancellation).
        Outputs: DiscoveryResult summarizing the sweep.
        Side effects: Registers responders, then the sentinel; sorts and finalizes the registry.
        Raises: The first exception raised inside a worker (e.g. MemoryError while growing the
                registry); the registry is then left unfinalized.
        """
        result = DiscoveryResult()
        threads: List[threading.Thread] = []
        shards = partition_range(start, end, workers)

        logger.info("Discovering on %s0/24 with %d workers", prefix, len(shards))
        for lo, hi in shards:
            thread = threading.Thread(
                target=self._worker,
                args=(prefix, lo, hi),
                daemon=True,
                name=f"discovery-{lo}-{hi}",
            )
            try:
                thread.start()
            except RuntimeError as exc:
                # Shard stays unprobed for this run; no retry or redistribution
                logger.error("Failed to create discovery thread for %s%d-%d: %s", prefix, lo, hi, exc)
                result.skipped_shards.append((lo, hi))
                continue
            threads.append(thread)

        for thread in threads:
            thread.join()

        with self._error_lock:
            error = self._worker_error
        if error is not None:
            raise error

        result.cancelled = self.stop_event.is_set()
        result.hosts_found = len(self.registry)

        self.registry.register_sentinel(INTERNET_CHECK_IP, INTERNET_HOSTNAME)
        self.registry.finalize()

        logger.info(
            "Discovery complete: %d host(s) on %s0/24%s",
            result.hosts_found,
            prefix,
            " (cancelled)" if result.cancelled else "",
        )
        return result

    def _worker(self, prefix: str, lo: int, hi: int) -> None:
        try:
            for host in range(lo, hi + 1):
                if self.stop_event.is_set():
                    return
                address = f"{prefix}{host}"
                if is_reachable(address, self.ports, self.timeout_ms, probe=self.probe):
                    if self.registry.register(address):
                        logger.debug("Discovered %s", address)
                        self._announce(address)
        except BaseException as exc:
            logger.exception("Discovery worker %s%d-%d failed", prefix, lo, hi)
            with self._error_lock:
                if self._worker_error is None:
                    self._worker_error = exc
            self.stop_event.set()

    def _announce(self, address: str) -> None:
        if self.on_discovered is None:
            return
        view = self.registry.lookup(address)
        if view is None:
            return
        try:
            self.on_discovered(view)
        except Exception:
            logger.exception("Discovery callback %r failed", self.on_discovered)
