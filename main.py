"""
Entry point: discover hosts on the local /24 and keep watching them.

    python main.py              # detect the subnet from the first wired/wireless interface
    python main.py 10.0.0.      # scan an explicit prefix

An invalid prefix aborts before any socket is opened.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from hostwatch.alerts import DesktopAlert
from hostwatch.config import CHECKPOINT_SEC, LOG_LEVEL
from hostwatch.engine import MonitorEngine
from hostwatch.models import HostStatus, HostView, StatusChange
from hostwatch.repository import HostRegistry
from hostwatch.subnet import SubnetError, resolve_subnet, validate_subnet_override
from hostwatch.utils import configure_logging

logger = logging.getLogger("hostwatch")


def subnet_argument(value: str) -> str:
    try:
        return validate_subnet_override(value)
    except SubnetError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostwatch",
        description="Discover live hosts on the local subnet and monitor their reachability.",
    )
    parser.add_argument(
        "subnet",
        nargs="?",
        type=subnet_argument,
        help="subnet prefix to scan, e.g. '192.168.1.' (default: detected)",
    )
    return parser


def log_summary(registry: HostRegistry, hosts: List[HostView]) -> None:
    """Console stand-in for the presentation collaborator: one line per round, details at DEBUG."""
    counts = registry.counts()
    state = "Monitoring" if registry.discovery_complete else "Discovering on"
    logger.info(
        "%s %d hosts on %s0/24 | Online: %d  Unstable: %d  Down: %d",
        state,
        len(hosts),
        registry.active_subnet,
        counts.up,
        counts.unstable,
        counts.down,
    )
    for host in hosts:
        status = host.status.label
        if host.status is HostStatus.UNSTABLE:
            status = f"{status} ({host.consecutive_failures})"
        logger.debug("  %-15s  %-40s  %s", host.address, host.hostname, status)


def log_discovered(host: HostView) -> None:
    logger.info("Found %s (%s)", host.address, host.hostname)


def log_change(change: StatusChange) -> None:
    if change.entered_down:
        logger.warning("%s (%s) is DOWN", change.address, change.hostname)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(LOG_LEVEL)

    prefix = resolve_subnet(args.subnet)
    registry = HostRegistry()
    engine = MonitorEngine(
        registry,
        prefix,
        alert=DesktopAlert(),
        on_change=log_change,
        on_round=lambda hosts: log_summary(registry, hosts),
        on_discovered=log_discovered,
    )

    def _signal_handler(signum, frame) -> None:
        logger.warning("Received signal %d - shutting down...", signum)
        engine.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    engine.start()
    # Short joins keep the main thread responsive to signals
    while not engine.join(CHECKPOINT_SEC):
        pass

    logger.info("Network thread joined. Exiting.")
    return 1 if engine.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
