"""Block-range event poller - turns chain height + cursor into bounded scans."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from rps_watch.errors import SyncError
from rps_watch.interfaces.adapter import LedgerAdapter
from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.models.outcomes import OutcomeStatus, PollerState, ScanOutcome
from rps_watch.sync.dedup import EventWindow
from rps_watch.sync.scheduler import CancelToken, SingleFlight

log = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (EventCategory.SINGLE_RESULT, EventCategory.MULTI_RESULT)


class BlockRangePoller:
    """Scans at most ``max_window`` new ledgers per call for result events.

    The cursor starts at 0, meaning "not synchronized": the first scan
    jumps it to the current height without backfilling. After that each
    scan covers ``[cursor + 1, cursor + window]`` and only advances the
    cursor once every category query in the window succeeded, so a failed
    window is retried whole on the next tick.
    """

    def __init__(
        self,
        adapter: LedgerAdapter,
        window: EventWindow | None = None,
        categories: Sequence[EventCategory] = DEFAULT_CATEGORIES,
        max_window: int = 5,
        category_pause: float = 0.1,
        on_event: Callable[[GameEvent], object] | None = None,
        token: CancelToken | None = None,
    ) -> None:
        if max_window < 1:
            raise ValueError("max_window must be positive")
        self._adapter = adapter
        self._window = window if window is not None else EventWindow()
        self._categories = tuple(categories)
        self._max_window = max_window
        self._category_pause = category_pause
        self._on_event = on_event
        self._token = token or CancelToken()
        self._guard = SingleFlight()
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def window(self) -> EventWindow:
        return self._window

    @property
    def state(self) -> PollerState:
        return PollerState(cursor=self._cursor, in_flight=self._guard.in_flight)

    def next_range(self, height: int) -> tuple[int, int] | None:
        """Window to scan for a given chain height, None if nothing is new."""
        if self._cursor == 0 or height <= self._cursor:
            return None
        start = self._cursor + 1
        size = min(height - start + 1, self._max_window)
        return start, start + size - 1

    async def scan(self) -> ScanOutcome:
        """Run one scan. Never raises adapter errors."""
        with self._guard.hold() as acquired:
            if not acquired:
                return ScanOutcome(status=OutcomeStatus.SKIPPED)
            return await self._scan()

    async def _scan(self) -> ScanOutcome:
        try:
            height = await self._adapter.current_height()
        except SyncError as exc:
            log.warning("Height read failed: %s", exc)
            return ScanOutcome(status=OutcomeStatus.FAILED, error=str(exc))

        if self._token.cancelled:
            return ScanOutcome(status=OutcomeStatus.STALE)

        if self._cursor == 0:
            self._cursor = height
            log.info("Event cursor synchronized to ledger %d", height)
            return ScanOutcome(status=OutcomeStatus.EMPTY)

        rng = self.next_range(height)
        if rng is None:
            return ScanOutcome(status=OutcomeStatus.EMPTY)
        start, end = rng

        log.debug("Polling events [%d -> %d]", start, end)
        found: list[GameEvent] = []
        for i, category in enumerate(self._categories):
            if i:
                await asyncio.sleep(self._category_pause)
            try:
                found.extend(await self._adapter.query_events(category, start, end))
            except SyncError as exc:
                log.warning(
                    "Event query %s [%d -> %d] failed, will retry: %s",
                    category.value, start, end, exc,
                )
                return ScanOutcome(
                    status=OutcomeStatus.FAILED,
                    from_height=start,
                    to_height=end,
                    error=str(exc),
                )

        if self._token.cancelled:
            return ScanOutcome(status=OutcomeStatus.STALE, from_height=start, to_height=end)

        outcome = ScanOutcome(status=OutcomeStatus.EMPTY, from_height=start, to_height=end)
        for event in found:
            if self._window.admit(event):
                outcome.admitted.append(event)
            else:
                outcome.duplicates += 1

        self._cursor = end
        if outcome.admitted:
            outcome.status = OutcomeStatus.DATA
            log.info("Admitted %d events from ledgers %d-%d", len(outcome.admitted), start, end)
            if self._on_event is not None:
                for event in outcome.admitted:
                    self._deliver(event)
        return outcome

    def _deliver(self, event: GameEvent) -> None:
        # Admitted events are never re-admitted, so delivery is at most once.
        try:
            self._on_event(event)
        except Exception as exc:
            log.error("Event callback failed for %s: %s", event.identity, exc, exc_info=True)
