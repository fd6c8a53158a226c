"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeHandle:
    """Handle recorded by FakeTimers."""

    def __init__(self, owner: FakeTimers, delay: float, callback: Callable[[], None]) -> None:
        self.owner = owner
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """Timers that never fire on their own; tests run callbacks explicitly."""

    def __init__(self) -> None:
        self.one_shots: list[FakeHandle] = []
        self.periodics: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, delay, callback)
        self.one_shots.append(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, interval, callback)
        self.periodics.append(handle)
        return handle

    def cancel_all(self) -> None:
        for handle in self.one_shots + self.periodics:
            handle.cancel()

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.one_shots if not h.cancelled]

    @property
    def active_periodics(self) -> list[FakeHandle]:
        return [h for h in self.periodics if not h.cancelled]

    def run_pending(self) -> int:
        """Run queued one-shot callbacks, including ones they schedule. Returns the count run."""
        ran = 0
        while True:
            due = self.pending
            if not due:
                return ran
            for handle in due:
                handle.cancelled = True
                handle.callback()
                ran += 1

    def tick(self) -> None:
        """Fire every active periodic callback once."""
        for handle in self.active_periodics:
            handle.callback()


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 15, 10, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# Shared fixtures


@pytest.fixture
def fake_timers() -> FakeTimers:
    """Timers under test control."""
    return FakeTimers()


@pytest.fixture
def clock() -> FakeClock:
    """Clock under test control."""
    return FakeClock()
