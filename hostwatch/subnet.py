"""
Design (subnet.py)
- Purpose: Decide which /24 prefix ("A.B.C.") to scan: a validated operator override,
           else the first physical interface's IPv4 address, else DEFAULT_SUBNET.
- Inputs: Optional override string; interface list from psutil (injectable for tests).
- Outputs: Prefix string ending with the separator.
- Side effects: Enumerates local interfaces; logs the decision (warning on fallback).
- Thread-safety: Stateless; call once at startup.
"""

import ipaddress
import logging
import socket
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

import psutil

from .config import (
    DEFAULT_SUBNET,
    POSIX_INTERFACE_PATTERNS,
    SUBNET_MAX_LEN,
    SUBNET_SEPARATOR,
    WINDOWS_INTERFACE_PATTERNS,
)

logger = logging.getLogger(__name__)

Interface = Tuple[str, str]  # (name, ipv4 address)


class SubnetError(ValueError):
    """Raised for an unusable operator-supplied subnet prefix."""


def interface_patterns(platform: str = sys.platform) -> Sequence[str]:
    """Name prefixes of wired/wireless interfaces on this platform."""
    if platform.startswith("win"):
        return WINDOWS_INTERFACE_PATTERNS
    return POSIX_INTERFACE_PATTERNS


def enumerate_ipv4_interfaces() -> List[Interface]:
    """
    Purpose: List (interface name, IPv4 address) pairs in the order the OS reports them.
    Side Effects: Queries the OS via psutil.
    """
    pairs: List[Interface] = []
    for name, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            if getattr(addr, "family", None) != socket.AF_INET or not addr.address:
                continue
            pairs.append((name, addr.address))
    return pairs


def _matches(name: str, patterns: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(lowered.startswith(p.lower()) for p in patterns)


def prefix_of(address: str) -> str:
    """Truncate a dotted-quad after its final separator: "10.1.2.7" -> "10.1.2."."""
    return address[: address.rindex(SUBNET_SEPARATOR) + 1]


def detect_subnet(
    interfaces: Optional[Iterable[Interface]] = None,
    patterns: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Purpose: Find the scan prefix from the first IPv4 unicast address on a physical interface.
    Inputs: interfaces (defaults to enumerate_ipv4_interfaces()), patterns (defaults per platform)
    Outputs: "A.B.C." or None when nothing suitable is found.
    """
    if patterns is None:
        patterns = interface_patterns()
    if interfaces is None:
        try:
            interfaces = enumerate_ipv4_interfaces()
        except (OSError, psutil.Error) as exc:
            logger.warning("Could not enumerate network interfaces: %s", exc)
            return None

    for name, address in interfaces:
        if not _matches(name, patterns):
            continue
        try:
            ip = ipaddress.IPv4Address(address)
        except ValueError:
            continue
        if ip.is_loopback or ip.is_multicast or ip.is_unspecified:
            continue
        logger.debug("Using interface %s (%s)", name, address)
        return prefix_of(str(ip))
    return None


def validate_subnet_override(value: str) -> str:
    """
    Purpose: Check an operator-supplied prefix such as "192.168.1.".
    Outputs: The value, unchanged.
    Raises: SubnetError naming the value when it is empty, too long, or lacks the trailing separator.
    """
    if not value or len(value) >= SUBNET_MAX_LEN or not value.endswith(SUBNET_SEPARATOR):
        raise SubnetError(
            f"Invalid subnet format provided: '{value}'. It should be like '{DEFAULT_SUBNET}'"
        )
    return value


def resolve_subnet(
    override: Optional[str] = None,
    interfaces: Optional[Iterable[Interface]] = None,
) -> str:
    """
    Purpose: Produce the prefix to scan.
    Inputs: override (validated and used verbatim; detection skipped), interfaces (for tests)
    Outputs: Prefix string.
    Side Effects: Logs which source was used; warning on fallback.
    """
    if override is not None:
        prefix = validate_subnet_override(override)
        logger.info("Using user-provided subnet: %s", prefix)
        return prefix

    prefix = detect_subnet(interfaces)
    if prefix is None:
        logger.warning("Could not detect local subnet. Falling back to %s0/24", DEFAULT_SUBNET)
        return DEFAULT_SUBNET

    logger.info("Detected local subnet. Scanning %s0/24", prefix)
    return prefix
