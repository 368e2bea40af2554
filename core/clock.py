"""Clock and ticker abstractions for the monitor loop.

The monitor never sleeps on the wall clock directly. It asks its ``Clock``
for a ticker and awaits ``ticker.wait()`` between cycles, so tests can swap
in ``FakeClock`` and drive ticks by hand with ``advance()``.

Tickers behave like a periodic timer with a one-slot buffer: ticks missed
while the caller was busy collapse into a single pending tick.
"""
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Ticker(Protocol):
    async def wait(self) -> None:
        """Block until the next tick."""

    def stop(self) -> None:
        """Stop delivering ticks."""


@runtime_checkable
class Clock(Protocol):
    def new_ticker(self, interval: float) -> Ticker:
        """Return a ticker firing every ``interval`` seconds."""


class IntervalTicker:
    """Ticker backed by ``asyncio.sleep`` and the monotonic clock."""

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError("ticker interval must be positive")
        self._interval = interval
        self._next = time.monotonic() + interval
        self._stopped = False

    async def wait(self) -> None:
        if self._stopped:
            # A stopped ticker never fires again.
            await asyncio.Event().wait()
        delay = self._next - time.monotonic()
        if delay > 0:
            await asyncio.sleep(delay)
        now = time.monotonic()
        while self._next <= now:
            self._next += self._interval

    def stop(self) -> None:
        self._stopped = True


class RealClock:
    def new_ticker(self, interval: float) -> IntervalTicker:
        return IntervalTicker(interval)


class FakeTicker:
    def __init__(self, clock: FakeClock, interval: float) -> None:
        if interval <= 0:
            raise ValueError("ticker interval must be positive")
        self._clock = clock
        self._interval = timedelta(seconds=interval)
        self._next = clock.now() + self._interval
        self._fired = asyncio.Event()
        self._parked = False
        self._stopped = False

    def _advance_to(self, now: datetime) -> None:
        if self._stopped or now < self._next:
            return
        while self._next <= now:
            self._next += self._interval
        self._fired.set()
        if self._parked:
            self._parked = False
            self._clock._waiting -= 1

    async def wait(self) -> None:
        self._parked = True
        await self._clock._parked()
        try:
            await self._fired.wait()
        finally:
            self._fired.clear()
            if self._parked:
                self._parked = False
                self._clock._waiting -= 1

    def stop(self) -> None:
        self._stopped = True
        self._clock._tickers.remove(self)


class FakeClock:
    """Deterministic clock for tests.

    ``advance()`` moves time forward and fires every ticker whose deadline has
    passed. ``block_until(n)`` waits until ``n`` callers are parked on a
    ticker that has not fired yet, which is how a test knows the monitor has
    finished its current cycle.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._tickers: list[FakeTicker] = []
        self._waiting = 0
        self._cond = asyncio.Condition()

    def now(self) -> datetime:
        return self._now

    def new_ticker(self, interval: float) -> FakeTicker:
        ticker = FakeTicker(self, interval)
        self._tickers.append(ticker)
        return ticker

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("advance() requires a non-negative duration")
        self._now += timedelta(seconds=seconds)
        for ticker in list(self._tickers):
            ticker._advance_to(self._now)

    async def block_until(self, waiters: int) -> None:
        async with self._cond:
            await self._cond.wait_for(lambda: self._waiting >= waiters)

    async def _parked(self) -> None:
        async with self._cond:
            self._waiting += 1
            self._cond.notify_all()
