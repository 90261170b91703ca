"""Game rules and participant-relative predicates over GameRecord snapshots.

All functions here are pure: they look only at a snapshot and, where
relevant, the local account address.
"""

from __future__ import annotations

from enum import Enum

from rps_watch.models.game import UNSET_ADDRESS, Choice, GameRecord, Outcome

# (winner, loser) pairs. Each non-equal ordered pair appears exactly once
# in either orientation.
_BEATS: frozenset[tuple[Choice, Choice]] = frozenset({
    (Choice.ROCK, Choice.SCISSORS),
    (Choice.SCISSORS, Choice.PAPER),
    (Choice.PAPER, Choice.ROCK),
})

_CHOICE_NAMES = {
    Choice.ROCK: "Rock",
    Choice.PAPER: "Paper",
    Choice.SCISSORS: "Scissors",
}


class Resolution(str, Enum):
    DRAW = "draw"
    FIRST_WINS = "first_wins"
    SECOND_WINS = "second_wins"


def resolve(first: int, second: int) -> Resolution:
    """Resolve two committed choices."""
    a, b = Choice(first), Choice(second)
    if a == b:
        return Resolution.DRAW
    if Choice.NONE in (a, b):
        raise ValueError(f"cannot resolve uncommitted choice: {a.name} vs {b.name}")
    if (a, b) in _BEATS:
        return Resolution.FIRST_WINS
    return Resolution.SECOND_WINS


def same_address(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return a.lower() == b.lower()


def is_slot_open(address: str | None) -> bool:
    return not address or address == UNSET_ADDRESS


def is_player1(game: GameRecord, account: str | None) -> bool:
    return same_address(game.player1, account)


def is_player2(game: GameRecord, account: str | None) -> bool:
    return not is_slot_open(game.player2) and same_address(game.player2, account)


def is_participant(game: GameRecord, account: str | None) -> bool:
    return is_player1(game, account) or is_player2(game, account)


def can_move(game: GameRecord, account: str | None) -> bool:
    """The account is seated and has not committed yet."""
    if game.finished:
        return False
    if is_player1(game, account):
        return not game.player1_committed
    if is_player2(game, account):
        return not game.player2_committed
    return False


def is_waiting_for_opponent(game: GameRecord, account: str | None) -> bool:
    """The account has committed and the other seat has not."""
    if game.finished:
        return False
    if is_player1(game, account):
        return game.player1_committed and not game.player2_committed
    if is_player2(game, account):
        return game.player2_committed and not game.player1_committed
    return False


def can_join(game: GameRecord, account: str | None) -> bool:
    """Open second seat, unfinished game, and the account is not the creator."""
    if not account or game.finished:
        return False
    if not is_slot_open(game.player2):
        return False
    return not is_player1(game, account)


def both_committed(game: GameRecord) -> bool:
    return game.player1_committed and game.player2_committed


def game_status(game: GameRecord) -> str:
    """Short lobby status label."""
    if game.finished:
        return "Finished"
    if is_slot_open(game.player2):
        return "Waiting for Player 2"
    if not game.player1_committed:
        return "Player 1 choosing..."
    if not game.player2_committed:
        return "Player 2 choosing..."
    return "Both committed"


def winner_of(game: GameRecord) -> str | None:
    """Winning address of a finished game; None for a draw or unfinished game."""
    if not game.finished:
        return None
    if Choice.NONE in (game.player1_choice, game.player2_choice):
        return None
    resolution = resolve(game.player1_choice, game.player2_choice)
    if resolution is Resolution.FIRST_WINS:
        return game.player1
    if resolution is Resolution.SECOND_WINS:
        return game.player2
    return None


def result_for(game: GameRecord, account: str | None) -> Outcome | None:
    """Outcome of a finished game for the account, None if not applicable."""
    if not game.finished or not is_participant(game, account):
        return None
    winner = winner_of(game)
    if winner is None:
        return Outcome.DRAW
    return Outcome.WIN if same_address(winner, account) else Outcome.LOSS


def choice_name(choice: int) -> str:
    try:
        return _CHOICE_NAMES.get(Choice(choice), "?")
    except ValueError:
        return "?"


def short_address(address: str | None, placeholder: str = "Waiting...") -> str:
    if is_slot_open(address):
        return placeholder
    return f"{address[:6]}...{address[-4:]}"
