"""
Design (probe.py)
- Purpose: Bounded-timeout TCP reachability checks (no raw sockets, no ICMP).
- Inputs: address, port(s), timeout in milliseconds.
- Outputs: ProbeOutcome for a single port; bool for "reachable".
- Side effects: Opens and closes one outbound TCP socket per port probed.
- Thread-safety: Stateless; safe to call from any thread. Blocks the caller for at most timeout_ms per port.

Setup failures (cannot create the socket, cannot switch to non-blocking, bad address)
report ProbeOutcome.ERROR, which probe() folds into "unreachable" exactly like a refusal
or a timeout. Callers that need the distinction use check_port() directly.
"""

import errno
import logging
import select
import socket
from enum import Enum
from typing import Callable, Iterable

from .config import COMMON_PORTS, CONNECT_TIMEOUT_MS

logger = logging.getLogger(__name__)

# connect_ex() results that mean "handshake started, wait for writability"
_IN_PROGRESS = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY, getattr(errno, "WSAEWOULDBLOCK", 10035)}

Probe = Callable[[str, int, int], bool]


class ProbeOutcome(Enum):
    OPEN = "open"
    REFUSED = "refused"
    TIMEOUT = "timeout"
    ERROR = "error"


def check_port(address: str, port: int, timeout_ms: int = CONNECT_TIMEOUT_MS) -> ProbeOutcome:
    """
    Purpose: Attempt one non-blocking TCP connect and wait up to timeout_ms for it to settle.
    Inputs: address (dotted-quad str), port (int), timeout_ms (int)
    Outputs: OPEN when the handshake completed; REFUSED when the peer reset/refused;
             TIMEOUT when nothing happened in time; ERROR on any local setup failure.
    Side Effects: One socket, always closed before returning.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        logger.debug("Socket creation failed for %s:%s: %s", address, port, exc)
        return ProbeOutcome.ERROR

    with sock:
        try:
            sock.setblocking(False)
            rc = sock.connect_ex((address, port))
        except (OSError, OverflowError) as exc:
            logger.debug("Connect setup failed for %s:%s: %s", address, port, exc)
            return ProbeOutcome.ERROR

        if rc == 0:
            return ProbeOutcome.OPEN
        if rc not in _IN_PROGRESS:
            return ProbeOutcome.REFUSED if rc == errno.ECONNREFUSED else ProbeOutcome.ERROR

        try:
            # Windows reports a failed connect in the exceptional set, POSIX in the writable set
            _, writable, failed = select.select([], [sock], [sock], timeout_ms / 1000.0)
        except (OSError, ValueError) as exc:
            logger.debug("select() failed for %s:%s: %s", address, port, exc)
            return ProbeOutcome.ERROR

        if not writable and not failed:
            return ProbeOutcome.TIMEOUT

        try:
            pending = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as exc:
            logger.debug("SO_ERROR read failed for %s:%s: %s", address, port, exc)
            return ProbeOutcome.ERROR

        if pending == 0 and not failed:
            return ProbeOutcome.OPEN
        return ProbeOutcome.REFUSED


def probe(address: str, port: int, timeout_ms: int = CONNECT_TIMEOUT_MS) -> bool:
    """True only when a TCP connection to (address, port) was established within timeout_ms."""
    return check_port(address, port, timeout_ms) is ProbeOutcome.OPEN


def is_reachable(
    address: str,
    ports: Iterable[int] = COMMON_PORTS,
    timeout_ms: int = CONNECT_TIMEOUT_MS,
    probe: Probe = probe,
) -> bool:
    """
    Purpose: Decide whether a host is alive this round.
    Outputs: True on the first port that answers; remaining ports are not tried.
    """
    for port in ports:
        if probe(address, port, timeout_ms):
            return True
    return False
