"""
Design (models.py)
- Purpose: Define typed data structures for monitored hosts and the per-host liveness state machine.
- Inputs: Field values (str/int/bool) and probe outcomes.
- Outputs: Dataclass instances; StatusChange events.
- Side effects: None.
- Thread-safety: MonitoredHost is a plain mutable container; HostRegistry protects concurrent access.
                 HostView, StatusChange and StatusCounts are frozen and safe to share.
"""

from dataclasses import dataclass
from enum import Enum


class HostStatus(Enum):
    SCANNING = "Scanning..."
    UP = "Online"
    UNSTABLE = "Unstable"
    DOWN = "DOWN"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class StatusChange:
    """
    Design (StatusChange)
    - Purpose: Side-channel notification emitted whenever a host's status changes
               (drives flash effects, log lines and alerts). Not stored in the registry.
    """
    address: str
    hostname: str
    previous: HostStatus
    current: HostStatus
    consecutive_failures: int

    @property
    def entered_down(self) -> bool:
        return self.current is HostStatus.DOWN and self.previous is not HostStatus.DOWN


@dataclass(frozen=True)
class HostView:
    """Read-only copy of one registry entry, handed out by HostRegistry.snapshot()."""
    address: str
    hostname: str
    status: HostStatus
    consecutive_failures: int
    sentinel: bool = False


@dataclass(frozen=True)
class StatusCounts:
    up: int = 0
    unstable: int = 0
    down: int = 0


@dataclass
class MonitoredHost:
    """
    Design (MonitoredHost)
    - Purpose: One tracked address.
    - Fields:
        address: canonical dotted-quad; never changes after creation.
        hostname: reverse-lookup name, explicit override, or the N/A marker; set once.
        status: UP at creation (hosts are only created after a successful probe).
        consecutive_failures: failed rounds since the last success.
        sentinel: True only for the internet reachability entry.
    """
    address: str
    hostname: str
    status: HostStatus = HostStatus.UP
    consecutive_failures: int = 0
    sentinel: bool = False

    def record_probe(self, online: bool, threshold: int) -> StatusChange | None:
        """
        Purpose: Advance the liveness state machine by one monitoring round.
        Inputs: online (any port answered this round), threshold (failures before DOWN).
        Outputs: StatusChange if status changed, else None.
        Side effects: Mutates status and consecutive_failures.
        """
        previous = self.status
        if online:
            self.status = HostStatus.UP
            self.consecutive_failures = 0
        else:
            self.consecutive_failures += 1
            if self.consecutive_failures >= threshold:
                self.status = HostStatus.DOWN
            else:
                self.status = HostStatus.UNSTABLE

        if self.status is previous:
            return None
        return StatusChange(
            address=self.address,
            hostname=self.hostname,
            previous=previous,
            current=self.status,
            consecutive_failures=self.consecutive_failures,
        )

    def view(self) -> HostView:
        return HostView(
            address=self.address,
            hostname=self.hostname,
            status=self.status,
            consecutive_failures=self.consecutive_failures,
            sentinel=self.sentinel,
        )
