"""Snapshot reconcilers for the room (one game) and the lobby (all games)."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Sequence

from rps_watch.errors import NotFound, SyncError
from rps_watch.game import rules
from rps_watch.interfaces.adapter import LedgerAdapter, RecordKind
from rps_watch.models.game import GameRecord, Outcome
from rps_watch.models.outcomes import (
    LobbyOutcome,
    Milestone,
    MilestoneKind,
    OutcomeStatus,
    ReconcileOutcome,
)
from rps_watch.sync.scheduler import CancelToken, SingleFlight

log = logging.getLogger(__name__)

BOTH_COMMITTED_MESSAGE = "Both players committed! Waiting for result..."


class GameReconciler:
    """Re-reads one game and reports it only when it actually changed.

    Milestones are evaluated only on ticks where the snapshot changed and
    only when the local account sits in the game. Each milestone kind fires
    at most once per reconciler.
    """

    def __init__(
        self,
        adapter: LedgerAdapter,
        game_id: int,
        account: str | None = None,
        token: CancelToken | None = None,
    ) -> None:
        self._adapter = adapter
        self._game_id = game_id
        self._account = account
        self._token = token or CancelToken()
        self._guard = SingleFlight()
        self._last: GameRecord | None = None
        self._fired: set[MilestoneKind] = set()

    @property
    def game_id(self) -> int:
        return self._game_id

    @property
    def snapshot(self) -> GameRecord | None:
        """Last delivered snapshot."""
        return self._last

    async def reconcile(self) -> ReconcileOutcome:
        with self._guard.hold() as acquired:
            if not acquired:
                return ReconcileOutcome(status=OutcomeStatus.SKIPPED)
            try:
                game: GameRecord = await self._adapter.read_record(RecordKind.GAME, self._game_id)
            except NotFound:
                log.debug("Game %d not found", self._game_id)
                return ReconcileOutcome(status=OutcomeStatus.EMPTY)
            except SyncError as exc:
                log.warning("Failed to load game %d: %s", self._game_id, exc)
                return ReconcileOutcome(status=OutcomeStatus.FAILED, error=str(exc))

            if self._token.cancelled:
                return ReconcileOutcome(status=OutcomeStatus.STALE)

            if game == self._last:
                return ReconcileOutcome(status=OutcomeStatus.EMPTY, snapshot=game)

            previous, self._last = self._last, game
            log.debug("Game %d changed", self._game_id)
            return ReconcileOutcome(
                status=OutcomeStatus.DATA,
                snapshot=game,
                milestones=self._milestones(previous, game),
            )

    def _milestones(self, previous: GameRecord | None, game: GameRecord) -> list[Milestone]:
        if not rules.is_participant(game, self._account):
            return []

        found: list[Milestone] = []
        if (
            rules.both_committed(game)
            and not game.finished
            and MilestoneKind.BOTH_COMMITTED not in self._fired
        ):
            found.append(Milestone(
                kind=MilestoneKind.BOTH_COMMITTED,
                game_id=game.id,
                message=BOTH_COMMITTED_MESSAGE,
            ))

        # Only a transition we observed counts; opening a finished game is not news.
        if (
            game.finished
            and previous is not None
            and not previous.finished
            and MilestoneKind.FINISHED not in self._fired
        ):
            outcome = rules.result_for(game, self._account)
            found.append(Milestone(
                kind=MilestoneKind.FINISHED,
                game_id=game.id,
                message=_result_message(outcome),
                winner=rules.winner_of(game),
            ))

        for m in found:
            self._fired.add(m.kind)
            log.info("Game %d milestone: %s", game.id, m.kind.value)
        return found


_RESULT_MESSAGES = {
    Outcome.DRAW: "It's a Draw!",
    Outcome.WIN: "You Won!",
    Outcome.LOSS: "You Lost",
}


def _result_message(outcome: Outcome | None) -> str:
    if outcome is None:
        return "Game finished"
    return _RESULT_MESSAGES[outcome]


class DisplayOrder(str, Enum):
    """Presentation order for lobby batches."""

    NEWEST_FIRST = "newest_first"  # highest id first
    OLDEST_FIRST = "oldest_first"


class LobbyReconciler:
    """Reads every game in fixed-size sub-batches and reports the lobby on change.

    Reads inside one sub-batch run concurrently; sub-batches run one after
    another so at most ``batch_size`` reads are outstanding.
    """

    def __init__(
        self,
        adapter: LedgerAdapter,
        account: str | None = None,
        batch_size: int = 10,
        display_cap: int = 50,
        ordering: DisplayOrder = DisplayOrder.NEWEST_FIRST,
        token: CancelToken | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self._adapter = adapter
        self._account = account
        self._batch_size = batch_size
        self._display_cap = display_cap
        self._ordering = ordering
        self._token = token or CancelToken()
        self._guard = SingleFlight()
        self._last: list[GameRecord] | None = None
        self._last_mine: list[GameRecord] = []

    @property
    def games(self) -> list[GameRecord]:
        return list(self._last or [])

    @property
    def my_active_games(self) -> list[GameRecord]:
        return list(self._last_mine)

    async def reconcile(self) -> LobbyOutcome:
        with self._guard.hold() as acquired:
            if not acquired:
                return LobbyOutcome(status=OutcomeStatus.SKIPPED)
            try:
                count = int(await self._adapter.read_record(RecordKind.GAME_COUNT))
                games = await self._read_all(count)
            except NotFound:
                # No game has been created on this contract yet.
                return LobbyOutcome(status=OutcomeStatus.EMPTY)
            except SyncError as exc:
                log.error("Failed to load lobby: %s", exc)
                return LobbyOutcome(status=OutcomeStatus.FAILED, error=str(exc))

            if self._token.cancelled:
                return LobbyOutcome(status=OutcomeStatus.STALE)

            display = self.order(games)
            mine = [
                g for g in games
                if not g.finished and rules.is_participant(g, self._account)
            ]
            if display == self._last and mine == self._last_mine:
                return LobbyOutcome(
                    status=OutcomeStatus.EMPTY, games=display,
                    my_active_games=mine, total=count,
                )

            self._last = display
            self._last_mine = mine
            log.debug("Lobby changed: %d games (%d shown)", count, len(display))
            return LobbyOutcome(
                status=OutcomeStatus.DATA, games=display,
                my_active_games=mine, total=count,
            )

    def order(self, games: Sequence[GameRecord]) -> list[GameRecord]:
        """Apply the display ordering policy and cap."""
        ordered = sorted(
            games,
            key=lambda g: g.id,
            reverse=self._ordering is DisplayOrder.NEWEST_FIRST,
        )
        return ordered[: self._display_cap]

    async def _read_all(self, count: int) -> list[GameRecord]:
        games: list[GameRecord] = []
        for start in range(0, count, self._batch_size):
            end = min(start + self._batch_size, count)
            results = await asyncio.gather(
                *(self._read_one(i) for i in range(start, end)),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
                if result is not None:
                    games.append(result)
        return games

    async def _read_one(self, game_id: int) -> GameRecord | None:
        try:
            return await self._adapter.read_record(RecordKind.GAME, game_id)
        except NotFound:
            return None
