"""
Design (alerts.py)
- Purpose: Alert collaborators fired by the monitor on every transition into DOWN.
- Inputs: None per alert (fire-and-forget, no payload).
- Outputs: Desktop notification (plyer) or a counter.
- Side effects: DesktopAlert talks to the OS notification service.
- Thread-safety: Called from the engine thread. DesktopAlert hands the notify call to a short-lived
                 daemon thread so a slow notification backend never delays a monitoring round;
                 AlertCounter locks its count.
"""

import logging
import threading

from plyer import notification

from .config import ENABLE_NOTIFICATIONS, NOTIFY_MESSAGE, NOTIFY_TIMEOUT_SEC, NOTIFY_TITLE

logger = logging.getLogger(__name__)


class DesktopAlert:
    def __init__(
        self,
        title: str = NOTIFY_TITLE,
        message: str = NOTIFY_MESSAGE,
        timeout: int = NOTIFY_TIMEOUT_SEC,
        enabled: bool = ENABLE_NOTIFICATIONS,
        background: bool = True,
    ):
        self.title = title
        self.message = message
        self.timeout = timeout
        self.enabled = enabled
        self.background = background

    def __call__(self) -> None:
        if not self.enabled:
            return
        if self.background:
            threading.Thread(target=self._notify, daemon=True, name="desktop-alert").start()
        else:
            self._notify()

    def _notify(self) -> None:
        try:
            notification.notify(title=self.title, message=self.message, timeout=self.timeout)
        except Exception as exc:
            # No notification backend (headless box, missing dbus); alert is best effort
            logger.warning("Desktop notification failed: %s", exc)


class AlertCounter:
    """Counts alerts; handy for the summary line and for tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0

    def __call__(self) -> None:
        with self._lock:
            self._count += 1

    @property
    def count(self) -> int:
        with self._lock:
            return self._count
