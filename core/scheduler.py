from __future__ import annotations

import asyncio
import logging

from core.clock import Clock, RealClock, Ticker
from core.detector import detect_changes
from core.errors import DispatchError, DuplicateNotifierError, FetchError
from core.locks import ReadWriteLock
from models.message import Message
from models.summary import Snapshot
from notifiers.base import Notifier
from providers.base import SummarySource

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 60.0
# Bounds the whole fetch, provider retries included. Retries that would run
# past it surface as a FetchError and the next tick starts over.
FETCH_TIMEOUT_SECONDS = 10.0


class Monitor:
    """Polls a summary source and notifies registered notifiers of changes.

    Each tick:
    1. fetch a snapshot from the source (bounded by ``fetch_timeout``)
    2. detect changes against the last-known snapshot
    3. replace the last-known snapshot as the detector decides
    4. hand a non-empty change message to every notifier concurrently

    A failed fetch leaves the last-known snapshot untouched; the next regular
    tick retries. Notifier failures are collected per tick and never stop
    delivery to the other notifiers.
    """

    def __init__(
        self,
        source: SummarySource,
        *,
        clock: Clock | None = None,
        notify_on_first_run: bool = False,
        fetch_timeout: float = FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self._source = source
        self._clock = clock or RealClock()
        self._notify_on_first_run = notify_on_first_run
        self._fetch_timeout = fetch_timeout
        self._last_snapshot = Snapshot()

        self._notifiers_lock = ReadWriteLock()
        self._notifiers: dict[str, Notifier] = {}

    @property
    def last_snapshot(self) -> Snapshot:
        return self._last_snapshot

    @property
    def notifiers(self) -> list[Notifier]:
        with self._notifiers_lock.read():
            return list(self._notifiers.values())

    def register(self, notifier: Notifier) -> None:
        """Register a notifier; names must be unique."""
        with self._notifiers_lock.write():
            if notifier.name in self._notifiers:
                raise DuplicateNotifierError(notifier.name)
            self._notifiers[notifier.name] = notifier

    async def tick(self) -> Message | None:
        """Run one fetch-detect-dispatch cycle.

        Returns the dispatched message, or ``None`` when nothing changed.
        Raises ``FetchError`` when the source fails and ``DispatchError``
        when one or more notifiers failed.
        """
        try:
            current = await asyncio.wait_for(
                self._source.fetch_summary(), timeout=self._fetch_timeout
            )
        except asyncio.TimeoutError as exc:
            raise FetchError(
                f"fetching summary timed out after {self._fetch_timeout:g}s"
            ) from exc
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"error getting summary: {exc}") from exc

        detection = detect_changes(
            self._last_snapshot,
            current,
            notify_on_first_run=self._notify_on_first_run,
        )
        self._last_snapshot = detection.snapshot

        if detection.message is None:
            return None

        log.debug("A change was found, running through the notifiers.")
        await self._dispatch(detection.message)
        return detection.message

    async def _dispatch(self, message: Message) -> None:
        notifiers = self.notifiers
        results = await asyncio.gather(
            *(n.notify(message) for n in notifiers),
            return_exceptions=True,
        )

        errors: list[BaseException] = []
        for notifier, result in zip(notifiers, results):
            if isinstance(result, BaseException):
                log.error("Notifier %s failed: %s", notifier.name, result)
                errors.append(result)

        if errors:
            raise DispatchError(errors)

    async def run(self, stop: asyncio.Event, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        """Tick until ``stop`` is set.

        The first cycle runs immediately; later cycles follow the clock's
        ticker. Errors are logged and the loop carries on.
        """
        log.info(
            "Monitor started with %d notifier(s), interval=%gs",
            len(self.notifiers),
            poll_interval,
        )
        ticker = self._clock.new_ticker(poll_interval)
        try:
            while not stop.is_set():
                try:
                    await self.tick()
                except (FetchError, DispatchError) as exc:
                    log.error("Error during monitoring: %s", exc)

                if not await self._wait_for_tick(ticker, stop):
                    break
        finally:
            ticker.stop()
            log.info("Monitor stopped")

    @staticmethod
    async def _wait_for_tick(ticker: Ticker, stop: asyncio.Event) -> bool:
        """Wait for the next tick; return False if ``stop`` fired first."""
        if stop.is_set():
            return False

        tick = asyncio.ensure_future(ticker.wait())
        stopped = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({tick, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (tick, stopped):
                if not task.done():
                    task.cancel()
            await asyncio.gather(tick, stopped, return_exceptions=True)

        return not stop.is_set()
