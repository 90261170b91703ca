"""Typed per-invocation outcomes for pollers, reconcilers and the paginator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rps_watch.models.events import GameEvent
from rps_watch.models.game import GameRecord, HistoryEntry


class OutcomeStatus(str, Enum):
    DATA = "data"  # success, something new
    EMPTY = "empty"  # success, nothing new
    FAILED = "failed"  # transient failure, retried on the next tick
    SKIPPED = "skipped"  # tick dropped by the single-flight guard
    STALE = "stale"  # response superseded or cancelled, discarded


class MilestoneKind(str, Enum):
    BOTH_COMMITTED = "both_committed"
    FINISHED = "finished"


@dataclass(frozen=True)
class Milestone:
    """One-shot notification raised on a game state transition."""

    kind: MilestoneKind
    game_id: int
    message: str
    winner: str | None = None  # only for FINISHED; None on a draw


@dataclass
class PollerState:
    cursor: int = 0  # 0 = not yet synchronized to the chain head
    in_flight: bool = False


@dataclass
class ScanOutcome:
    """Result of one BlockRangePoller.scan()."""

    status: OutcomeStatus
    from_height: int | None = None
    to_height: int | None = None
    admitted: list[GameEvent] = field(default_factory=list)
    duplicates: int = 0
    error: str | None = None


@dataclass
class ReconcileOutcome:
    """Result of one reconcile() of a single game."""

    status: OutcomeStatus
    snapshot: GameRecord | None = None
    milestones: list[Milestone] = field(default_factory=list)
    error: str | None = None


@dataclass
class LobbyOutcome:
    """Result of one reconcile() of the lobby."""

    status: OutcomeStatus
    games: list[GameRecord] = field(default_factory=list)
    my_active_games: list[GameRecord] = field(default_factory=list)
    total: int = 0
    error: str | None = None


@dataclass(frozen=True)
class HistoryPage:
    """One page of an account's history plus navigation bounds."""

    index: int
    entries: tuple[HistoryEntry, ...]
    total: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return (self.index + 1) * self.page_size < self.total
