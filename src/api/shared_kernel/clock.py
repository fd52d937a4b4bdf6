"""Clock abstraction for time-dependent infrastructure.

SystemClock: real wall-clock time with asyncio-based sleeping
FrozenClock: deterministic time for tests, advanced explicitly

The cache and the outbox relay never call datetime.now() directly; they
take a Clock so expiry arithmetic and the relay's wait are testable.
"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Clock interface used by the cache and the outbox relay."""

    def now(self) -> datetime:
        """Current time as timezone-aware UTC datetime."""
        ...

    async def wait(self, stop: asyncio.Event, timeout: timedelta) -> bool:
        """Wait until ``stop`` is set or ``timeout`` elapses.

        Returns:
            True if the stop signal was set, False on timeout
        """
        ...


class SystemClock:
    """Real wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    async def wait(self, stop: asyncio.Event, timeout: timedelta) -> bool:
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop.wait(), timeout=timeout.total_seconds())
        return stop.is_set()


class FrozenClock:
    """Deterministic clock for tests.

    Time advances only when explicitly told to. ``wait`` advances the clock
    by the full timeout instead of sleeping, unless stop is already set.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._time = start or datetime(2026, 1, 1, tzinfo=UTC)
        self.waits: list[timedelta] = []

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        """Advance time. Must not go backwards."""
        if delta < timedelta(0):
            raise ValueError(f"FrozenClock cannot go backwards: {delta}")
        self._time = self._time + delta

    async def wait(self, stop: asyncio.Event, timeout: timedelta) -> bool:
        self.waits.append(timeout)
        if stop.is_set():
            return True
        self.advance(timeout)
        # Yield so a concurrent stop() gets a chance to run
        await asyncio.sleep(0)
        return stop.is_set()
