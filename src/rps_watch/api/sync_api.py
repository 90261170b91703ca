"""View-facing API - subscriptions over the pollers and reconcilers."""

from __future__ import annotations

import logging
from typing import Callable

from rps_watch.errors import NotFound, SyncError
from rps_watch.interfaces.adapter import LedgerAdapter, RecordKind
from rps_watch.models.config import PollConfig
from rps_watch.models.events import GameEvent
from rps_watch.models.game import GameRecord, PlayerStats
from rps_watch.models.outcomes import (
    HistoryPage,
    LobbyOutcome,
    Milestone,
    OutcomeStatus,
)
from rps_watch.sync.dedup import EventWindow
from rps_watch.sync.paginator import HistoryPaginator
from rps_watch.sync.poller import BlockRangePoller
from rps_watch.sync.reconciler import DisplayOrder, GameReconciler, LobbyReconciler
from rps_watch.sync.scheduler import CancelToken, PeriodicTask

log = logging.getLogger(__name__)

EventCallback = Callable[[GameEvent], object]
SnapshotCallback = Callable[[GameRecord], object]
MilestoneCallback = Callable[[Milestone], object]
LobbyCallback = Callable[[LobbyOutcome], object]


class Subscription:
    """Cancellation handle returned by every subscribe call."""

    def __init__(
        self,
        name: str,
        task: PeriodicTask,
        token: CancelToken,
        on_cancel: Callable[[Subscription], None] | None = None,
    ) -> None:
        self.name = name
        self._task = task
        self._token = token
        self._on_cancel = on_cancel

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def task(self) -> PeriodicTask:
        return self._task

    async def cancel(self) -> None:
        """Stop ticking and discard anything still in flight. Idempotent."""
        if self._token.cancelled:
            return
        self._token.cancel()
        await self._task.stop()
        if self._on_cancel is not None:
            self._on_cancel(self)
        log.info("Subscription %s cancelled", self.name)


class GameSyncService:
    """Keeps the results feed, lobby, room and history views in sync.

    This is the sole interface between the ledger pollers and any UI.
    All subscriptions share one adapter; each gets its own poller or
    reconciler, schedule and cancel token.
    """

    def __init__(
        self,
        adapter: LedgerAdapter,
        config: PollConfig | None = None,
        ordering: DisplayOrder = DisplayOrder.NEWEST_FIRST,
    ) -> None:
        self._adapter = adapter
        self._config = config or PollConfig()
        self._ordering = ordering
        self._subscriptions: list[Subscription] = []
        self._paginator: HistoryPaginator | None = None
        self._paginator_account: str | None = None

    @property
    def account(self) -> str | None:
        return self._adapter.account_identity()

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions)

    # ── Subscriptions ─────────────────────────────────────

    def subscribe_events(self, on_event: EventCallback) -> Subscription:
        """Deliver each newly admitted result event, newest scan last."""
        token = CancelToken()

        def deliver(event: GameEvent) -> None:
            if not token.cancelled:
                on_event(event)

        poller = BlockRangePoller(
            self._adapter,
            window=EventWindow(self._config.dedup_capacity),
            max_window=self._config.max_block_window,
            category_pause=self._config.category_pause,
            on_event=deliver,
            token=token,
        )
        task = PeriodicTask(poller.scan, self._config.event_poll_interval, name="events")
        return self._start("events", task, token)

    def subscribe_game(
        self,
        game_id: int,
        on_snapshot: SnapshotCallback,
        on_milestone: MilestoneCallback | None = None,
    ) -> Subscription:
        """Deliver snapshots of one game on change, plus one-shot milestones."""
        token = CancelToken()
        reconciler = GameReconciler(self._adapter, game_id, self.account, token=token)

        async def tick() -> None:
            outcome = await reconciler.reconcile()
            if token.cancelled or outcome.status is not OutcomeStatus.DATA:
                return
            on_snapshot(outcome.snapshot)
            if on_milestone is not None:
                for milestone in outcome.milestones:
                    if token.cancelled:
                        return
                    on_milestone(milestone)

        task = PeriodicTask(tick, self._config.room_poll_interval, name=f"game-{game_id}")
        return self._start(f"game-{game_id}", task, token)

    def subscribe_lobby(self, on_batch: LobbyCallback) -> Subscription:
        """Deliver the ordered, capped lobby every time it changes."""
        token = CancelToken()
        reconciler = LobbyReconciler(
            self._adapter,
            self.account,
            batch_size=self._config.lobby_batch_size,
            display_cap=self._config.lobby_display_cap,
            ordering=self._ordering,
            token=token,
        )

        async def tick() -> None:
            outcome = await reconciler.reconcile()
            if token.cancelled or outcome.status is not OutcomeStatus.DATA:
                return
            on_batch(outcome)

        task = PeriodicTask(tick, self._config.lobby_poll_interval, name="lobby")
        return self._start("lobby", task, token)

    def _start(self, name: str, task: PeriodicTask, token: CancelToken) -> Subscription:
        sub = Subscription(name, task, token, on_cancel=self._forget)
        self._subscriptions.append(sub)
        task.start()
        log.info("Subscription %s started", name)
        return sub

    def _forget(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    async def close(self) -> None:
        """Cancel every live subscription."""
        for sub in list(self._subscriptions):
            await sub.cancel()

    # ── Request / response ────────────────────────────────

    async def fetch_history_page(self, index: int) -> HistoryPage | None:
        """Load one page of the local account's history.

        Returns None when there is no session or a newer page request
        superseded this one.
        """
        account = self.account
        if not account:
            return None
        if self._paginator is None or self._paginator_account != account:
            self._paginator = HistoryPaginator(
                self._adapter, account, page_size=self._config.history_page_size,
            )
            self._paginator_account = account
        return await self._paginator.page(index)

    async def fetch_player_stats(self) -> PlayerStats | None:
        """Win/loss record and per-token profits of the local account."""
        account = self.account
        if not account:
            return None
        try:
            stats: PlayerStats = await self._adapter.read_record(RecordKind.PLAYER_STATS, account)
        except NotFound:
            return PlayerStats()
        except SyncError as exc:
            log.error("Error loading stats for %s: %s", account[:16], exc)
            raise
        try:
            profits = await self._adapter.read_record(RecordKind.TOKEN_PROFITS, account)
        except NotFound:
            # Players who only played XLM games have no token ledger.
            profits = []
        except SyncError as exc:
            log.error("Error loading stats for %s: %s", account[:16], exc)
            raise
        return PlayerStats(
            wins=stats.wins,
            losses=stats.losses,
            total_profits=stats.total_profits,
            token_profits=tuple(p for p in profits if p.profit != 0),
        )
