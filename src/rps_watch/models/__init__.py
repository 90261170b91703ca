"""Data models for rps_watch."""

from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.models.game import (
    UNSET_ADDRESS,
    Choice,
    GameKind,
    GameRecord,
    HistoryEntry,
    Outcome,
    PlayerStats,
    TokenProfit,
)
from rps_watch.models.outcomes import (
    HistoryPage,
    LobbyOutcome,
    Milestone,
    MilestoneKind,
    OutcomeStatus,
    PollerState,
    ReconcileOutcome,
    ScanOutcome,
)
from rps_watch.models.config import PollConfig, WatchConfig

__all__ = [
    "EventCategory", "GameEvent",
    "UNSET_ADDRESS", "Choice", "GameKind", "GameRecord", "HistoryEntry",
    "Outcome", "PlayerStats", "TokenProfit",
    "HistoryPage", "LobbyOutcome", "Milestone", "MilestoneKind",
    "OutcomeStatus", "PollerState", "ReconcileOutcome", "ScanOutcome",
    "PollConfig", "WatchConfig",
]
