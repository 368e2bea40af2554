from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from core.errors import DeliveryError
from models.message import Message
from models.summary import Page, Snapshot
from notifiers.base import Notifier
from providers.base import SummarySource

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def ts(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def snapshot(updated_at: datetime | None, **kwargs) -> Snapshot:
    return Snapshot(page=Page(id="page", updated_at=updated_at), **kwargs)


class FakeSource(SummarySource):
    """Summary source returning whatever the test last set."""

    def __init__(self, summary: Snapshot | None = None) -> None:
        self.summary = summary or Snapshot()
        self.error: Exception | None = None
        self.calls = 0

    @property
    def name(self) -> str:
        return "fake"

    async def fetch_summary(self) -> Snapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.summary


class QueueNotifier(Notifier):
    """Notifier pushing every message onto a queue."""

    def __init__(self, name: str = "queue") -> None:
        self._name = name
        self.queue: asyncio.Queue[Message] = asyncio.Queue()
        self.cleaned_up = False

    @property
    def name(self) -> str:
        return self._name

    async def notify(self, message: Message) -> None:
        await self.queue.put(message)

    async def cleanup(self) -> None:
        self.cleaned_up = True

    async def next_message(self, timeout: float = 2.0) -> Message:
        return await asyncio.wait_for(self.queue.get(), timeout)


class FailingNotifier(Notifier):
    def __init__(self, name: str = "failing") -> None:
        self._name = name
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def notify(self, message: Message) -> None:
        self.calls += 1
        raise DeliveryError(f"{self._name} is down")


class CrashingNotifier(FailingNotifier):
    """Notifier failing with an unexpected exception type."""

    async def notify(self, message: Message) -> None:
        self.calls += 1
        raise RuntimeError(f"{self._name} crashed")


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()
