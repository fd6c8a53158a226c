"""InactivityMonitor - periodic expiry check and activity tracking for a live session."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from ticketdesk.session_store.models import ActivitySignal

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketdesk.session_store.store import SessionStore
    from ticketdesk.timers import TimerHandle, Timers

logger = logging.getLogger("ticketdesk.session_store")


class InactivityMonitor:
    """Watches a logged-in session.

    While started, activity signals refresh the session and a periodic check
    calls on_expired once the stored session has been idle too long. Both are
    deregistered by stop().
    """

    def __init__(
        self,
        store: SessionStore,
        timers: Timers,
        on_expired: Callable[[], None],
        check_interval: float = 60.0,
    ) -> None:
        """Initialize the monitor.

        Args:
            store: Session store holding the token
            timers: Scheduler used for the periodic check
            on_expired: Called (on the timer thread) when the session expires
            check_interval: Seconds between checks
        """
        self._store = store
        self._timers = timers
        self._on_expired = on_expired
        self._check_interval = check_interval
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        """Whether the check and activity listeners are registered."""
        with self._lock:
            return self._handle is not None

    def start(self) -> None:
        """Register the periodic check and begin accepting activity signals."""
        with self._lock:
            if self._handle is not None:
                return
            self._handle = self._timers.call_every(self._check_interval, self.check_and_expire)
        logger.debug("Inactivity monitor started (interval=%ss)", self._check_interval)

    def stop(self) -> None:
        """Deregister the periodic check and ignore further activity."""
        with self._lock:
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()
            logger.debug("Inactivity monitor stopped")

    def record_activity(self, signal: ActivitySignal | str) -> bool:
        """Refresh the session on user activity.

        Returns:
            True if the session was refreshed.
        """
        if not self.running:
            return False
        try:
            ActivitySignal(signal)
        except ValueError:
            logger.debug("Ignoring unknown activity signal %r", signal)
            return False
        return self._store.touch_session() is not None

    def check_and_expire(self) -> bool:
        """Log out if the stored session has expired.

        Returns:
            True if the session was expired and on_expired was called.
        """
        if not self._store.session_expired():
            return False
        logger.info(
            "Session inactive for more than %s, logging out", self._store.inactivity_timeout
        )
        self._on_expired()
        return True
