"""
Design (utils.py)
- Purpose: Reusable helpers: reverse hostname lookup, numeric address ordering, logging setup.
- Inputs: Various helper parameters (address, log level).
- Outputs: Helper results (strings, ints, sort keys).
- Side effects: resolve_hostname performs a DNS reverse lookup; configure_logging installs a root handler.
- Thread-safety: Stateless; safe to call from any thread (configure_logging: call once from main).
"""

import ipaddress
import logging
import socket

from .config import HOSTNAME_NOT_AVAILABLE, LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL
from .models import MonitoredHost

logger = logging.getLogger(__name__)


def resolve_hostname(address: str) -> str:
    """
    Purpose: Reverse-resolve an IPv4 address to a hostname.
    Inputs: address (dotted-quad str)
    Outputs: Resolved name, or the N/A marker when lookup fails.
    Side Effects: Blocking DNS / hosts-file lookup.
    Thread-safety: Safe.
    """
    try:
        return socket.gethostbyaddr(address)[0]
    except (socket.herror, socket.gaierror, OSError) as exc:
        logger.debug("Reverse lookup failed for %s: %s", address, exc)
        return HOSTNAME_NOT_AVAILABLE


def address_to_int(address: str) -> int:
    """Return the 32-bit numeric value of a dotted-quad address."""
    return int(ipaddress.IPv4Address(address))


def host_sort_key(host: MonitoredHost) -> tuple[bool, int]:
    """Ascending numeric address, with the sentinel forced to the end."""
    return (host.sentinel, address_to_int(host.address))


def configure_logging(level: str | int = LOG_LEVEL) -> None:
    """
    Purpose: Install the console log handler used by the command surface.
    Inputs: level name ("INFO", "DEBUG", ...) or numeric level.
    Side Effects: Configures the root logger (no-op if already configured).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level)
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
