"""Game, history and statistics records read from contract state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

# Address stored by the contract for an empty player slot / native stake.
UNSET_ADDRESS = "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"


class Choice(IntEnum):
    """Move values as stored by the contract (0 = not yet chosen)."""

    NONE = 0
    ROCK = 1
    PAPER = 2
    SCISSORS = 3


class GameKind(IntEnum):
    SINGLE = 0
    MULTI = 1


class Outcome(IntEnum):
    """History result, from the perspective of the history owner."""

    DRAW = 0
    WIN = 1
    LOSS = 2


@dataclass(frozen=True)
class GameRecord:
    """Point-in-time snapshot of one multiplayer game.

    Snapshots are replaced wholesale on every poll and compared with
    ``==`` (field-by-field) to detect change.
    """

    id: int
    player1: str
    player2: str = UNSET_ADDRESS
    player1_choice: int = Choice.NONE
    player2_choice: int = Choice.NONE
    player1_committed: bool = False
    player2_committed: bool = False
    stake: int = 0  # stroops, or token base units when is_token_game
    finished: bool = False
    is_token_game: bool = False
    token: str = UNSET_ADDRESS


@dataclass(frozen=True)
class HistoryEntry:
    """One row of a player's append-only game history."""

    game_id: int
    kind: GameKind
    opponent: str  # UNSET_ADDRESS for the house
    player_choice: int
    opponent_choice: int
    stake: int
    token: str
    result: Outcome
    payout: int
    timestamp: int  # unix seconds


@dataclass(frozen=True)
class TokenProfit:
    token: str
    profit: int


@dataclass(frozen=True)
class PlayerStats:
    """Aggregated win/loss record for one account."""

    wins: int = 0
    losses: int = 0
    total_profits: int = 0
    token_profits: tuple[TokenProfit, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> str:
        """Win percentage with one decimal, "0.0" when nothing was played."""
        if self.total == 0:
            return "0.0"
        return f"{self.wins / self.total * 100:.1f}"
