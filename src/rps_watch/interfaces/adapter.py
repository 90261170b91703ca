"""LedgerAdapter protocol - read access to the game contract on the ledger."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol

from rps_watch.models.events import EventCategory, GameEvent


class RecordKind(str, Enum):
    """Contract state that can be read by kind + key."""

    GAME = "game"  # key: game id -> GameRecord
    GAME_COUNT = "game_count"  # key: None -> int
    HISTORY = "history"  # key: address -> HistoryEntry (range reads)
    HISTORY_COUNT = "history_count"  # key: address -> int
    PLAYER_STATS = "player_stats"  # key: address -> PlayerStats
    TOKEN_PROFITS = "token_profits"  # key: address -> list[TokenProfit]


class LedgerAdapter(Protocol):
    """Read-only view of the ledger shared by every poller.

    Every call is a suspension point and may fail independently with
    TransientUnavailable. Reads of missing records raise NotFound.
    """

    async def current_height(self) -> int:
        """Latest closed ledger sequence."""
        ...

    async def query_events(
        self, category: EventCategory, from_height: int, to_height: int
    ) -> list[GameEvent]:
        """Events of one category in the inclusive range, in ledger order."""
        ...

    async def read_record(self, kind: RecordKind, key: Any = None) -> Any:
        """Point-in-time read of one record."""
        ...

    async def read_range(
        self, kind: RecordKind, key: Any, start: int, count: int
    ) -> list[Any]:
        """Read up to ``count`` entries of an indexed log starting at ``start``."""
        ...

    def account_identity(self) -> str | None:
        """Local participant address, None when no session is established."""
        ...
