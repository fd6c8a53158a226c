"""Delayed and periodic callbacks backed by daemon threads."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("ticketdesk.timers")


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        """Cancel the callback if it has not run yet."""
        ...


class Timers(Protocol):
    """Interface used by components that schedule work."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every interval seconds until cancelled."""
        ...

    def cancel_all(self) -> None:
        """Cancel every pending callback."""
        ...


def _run_safely(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Scheduled callback %r failed", callback)


class _PeriodicHandle:
    """Repeats a callback on a daemon thread until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self._interval = interval
        self._callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _loop(self) -> None:
        while not self._stopped.wait(self._interval):
            _run_safely(self._callback)

    def cancel(self) -> None:
        self._stopped.set()


class _OneShotHandle:
    """Wraps threading.Timer so a fired timer drops out of the registry."""

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        on_done: Callable[[_OneShotHandle], None],
    ) -> None:
        self._callback = callback
        self._on_done = on_done
        self._timer = threading.Timer(delay, self._fire)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def _fire(self) -> None:
        try:
            _run_safely(self._callback)
        finally:
            self._on_done(self)

    def cancel(self) -> None:
        self._timer.cancel()
        self._on_done(self)


class TimerRegistry:
    """Thread-backed scheduler that tracks its handles so they can all be cancelled.

    Stands in for the browser event loop's setTimeout/setInterval. Callbacks run
    on daemon threads; exceptions are logged and never propagate.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles: set[_OneShotHandle | _PeriodicHandle] = set()

    @property
    def pending_count(self) -> int:
        """Number of callbacks still scheduled."""
        with self._lock:
            return len(self._handles)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _OneShotHandle(delay, callback, self._discard)
        with self._lock:
            self._handles.add(handle)
        handle.start()
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _PeriodicHandle(interval, callback)
        with self._lock:
            self._handles.add(handle)
        handle.start()
        return _RegisteredPeriodic(handle, self._discard)

    def cancel_all(self) -> None:
        with self._lock:
            handles = list(self._handles)
            self._handles.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Cancelled %d pending timer(s)", len(handles))

    def _discard(self, handle: _OneShotHandle | _PeriodicHandle) -> None:
        with self._lock:
            self._handles.discard(handle)


class _RegisteredPeriodic:
    """Handle returned for periodic callbacks; cancelling also unregisters."""

    def __init__(
        self,
        handle: _PeriodicHandle,
        on_cancel: Callable[[_OneShotHandle | _PeriodicHandle], None],
    ) -> None:
        self._handle = handle
        self._on_cancel = on_cancel

    def cancel(self) -> None:
        self._handle.cancel()
        self._on_cancel(self._handle)
