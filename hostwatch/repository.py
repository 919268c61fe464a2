"""
Design (repository.py)
- Purpose: Encapsulate all mutable host state behind a tiny API (and a lock), so discovery workers,
           the monitor and the presentation side never touch a shared list directly.
- Inputs: Addresses to register, per-round probe outcomes.
- Outputs: Snapshots (copies) of the host list, status counts, StatusChange events.
- Side effects: Appends to and mutates the internal list; reverse DNS lookups on registration.
- Thread-safety: Every public method takes the internal lock for its whole duration; snapshot returns copies.
"""

import threading
from typing import Callable, Dict, List, Optional

from .models import HostStatus, HostView, MonitoredHost, StatusChange, StatusCounts
from .utils import host_sort_key, resolve_hostname


class HostRegistry:
    """
    Design (HostRegistry)
    - State:
        _hosts: [MonitoredHost], insertion order until finalize(), then sorted once and frozen
        _index: {address -> MonitoredHost} for the duplicate check
        _discovery_complete: one-way gate opened by finalize()
        _active_subnet: prefix being scanned ("A.B.C."), for display
        _lock: threading.Lock protecting all of the above
    """

    def __init__(self, resolver: Callable[[str], str] = resolve_hostname) -> None:
        self._lock = threading.Lock()
        self._resolver = resolver
        self._hosts: List[MonitoredHost] = []
        self._index: Dict[str, MonitoredHost] = {}
        self._discovery_complete = False
        self._active_subnet = ""

    # -------- Registration (discovery phase only) --------

    def register(self, address: str, hostname_override: Optional[str] = None) -> bool:
        """
        Purpose: Add a host discovered by a successful probe.
        Inputs: address (dotted-quad), hostname_override (skip reverse lookup when given)
        Outputs: True if a new entry was created, False if the address was already present.
        Side effects: Reverse lookup (outside the lock); appends a MonitoredHost with status UP.
        Thread-safety: Lookup+insert is atomic under _lock, so racing duplicates create one entry.
        Raises: RuntimeError once discovery has been finalized.
        """
        with self._lock:
            self._check_open()
            if address in self._index:
                return False

        hostname = hostname_override if hostname_override is not None else self._resolver(address)

        with self._lock:
            self._check_open()
            if address in self._index:
                return False
            host = MonitoredHost(address=address, hostname=hostname, status=HostStatus.UP, consecutive_failures=0)
            self._hosts.append(host)
            self._index[address] = host
            return True

    def register_sentinel(self, address: str, hostname: str) -> bool:
        """Add the internet reachability entry; it always sorts last."""
        with self._lock:
            self._check_open()
            if address in self._index:
                # Scanned subnet overlaps the check address; the LAN entry takes the sentinel slot
                self._index[address].sentinel = True
                return False
            host = MonitoredHost(address=address, hostname=hostname, sentinel=True)
            self._hosts.append(host)
            self._index[address] = host
            return True

    def finalize(self) -> None:
        """
        Purpose: Sort the list exactly once (numeric address, sentinel last) and open the
                 discovery-complete gate. The order never changes afterwards.
        Raises: RuntimeError if called twice.
        """
        with self._lock:
            self._check_open()
            self._hosts.sort(key=host_sort_key)
            self._discovery_complete = True

    def _check_open(self) -> None:
        if self._discovery_complete:
            raise RuntimeError("host registry is finalized; discovery is complete")

    # -------- Status handling (monitor only) --------

    def update_status(self, index: int, online: bool, threshold: int) -> Optional[StatusChange]:
        """
        Purpose: Advance one entry's state machine with this round's probe result.
        Inputs: index into the (sorted) list, online flag, failure threshold
        Outputs: StatusChange if the entry's status changed, else None.
        Thread-safety: Protected by _lock.
        """
        with self._lock:
            return self._hosts[index].record_probe(online, threshold)

    def apply_round(self, outcomes: Dict[int, bool], threshold: int) -> List[StatusChange]:
        """
        Purpose: Apply a whole monitoring round in one lock acquisition.
        Inputs: {index -> online}, failure threshold
        Outputs: StatusChange events in list order.
        """
        changes: List[StatusChange] = []
        with self._lock:
            for index in sorted(outcomes):
                change = self._hosts[index].record_probe(outcomes[index], threshold)
                if change is not None:
                    changes.append(change)
        return changes

    # -------- Snapshots for safe reading --------

    def snapshot(self) -> List[HostView]:
        """
        Purpose: Return a consistent ordered copy of every entry.
        Thread-safety: Protected by _lock; returned views are immutable.
        """
        with self._lock:
            return [host.view() for host in self._hosts]

    def lookup(self, address: str) -> Optional[HostView]:
        """Read-only copy of one entry, or None if the address is not registered."""
        with self._lock:
            host = self._index.get(address)
            return host.view() if host is not None else None

    def addresses(self) -> List[str]:
        with self._lock:
            return [host.address for host in self._hosts]

    def counts(self) -> StatusCounts:
        """Aggregate UP / UNSTABLE / DOWN counts, excluding the sentinel."""
        with self._lock:
            hosts = [h for h in self._hosts if not h.sentinel]
            return StatusCounts(
                up=sum(1 for h in hosts if h.status is HostStatus.UP),
                unstable=sum(1 for h in hosts if h.status is HostStatus.UNSTABLE),
                down=sum(1 for h in hosts if h.status is HostStatus.DOWN),
            )

    @property
    def discovery_complete(self) -> bool:
        with self._lock:
            return self._discovery_complete

    @property
    def active_subnet(self) -> str:
        with self._lock:
            return self._active_subnet

    @active_subnet.setter
    def active_subnet(self, prefix: str) -> None:
        with self._lock:
            self._active_subnet = prefix

    def __len__(self) -> int:
        with self._lock:
            return len(self._hosts)
