"""
systemd integration: service state notifications and shutdown signals.
"""

import logging
import signal
from typing import Callable, Optional

import sdnotify

logger = logging.getLogger(__name__)


class ServiceNotifier:
    """
    Reports service state to systemd.

    Without NOTIFY_SOCKET (not started by systemd) sdnotify drops every
    message, so this is safe to use anywhere.
    """

    def __init__(self, notifier: Optional[sdnotify.SystemdNotifier] = None):
        self._notifier = notifier or sdnotify.SystemdNotifier()

    def ready(self, status: Optional[str] = None):
        message = "READY=1"
        if status:
            message += f"\nSTATUS={status}"
        self._notifier.notify(message)

    def watchdog(self):
        self._notifier.notify("WATCHDOG=1")

    def stopping(self):
        self._notifier.notify("STOPPING=1")


def install_shutdown_handlers(on_shutdown: Callable[[], None], service_logger: Optional[logging.Logger] = None) -> None:
    """
    Call on_shutdown on SIGTERM or SIGINT.

    on_shutdown runs inside the signal handler, so it should only flag the
    shutdown and leave the cleanup to the main loop.
    """
    log = service_logger or logger

    def handler(signum, frame):
        log.info(f"Received {signal.Signals(signum).name}, shutting down")
        on_shutdown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        signal.signal(sig, handler)
