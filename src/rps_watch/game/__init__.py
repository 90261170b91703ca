"""Game rules and view predicates."""

from rps_watch.game.rules import (
    Resolution,
    can_join,
    can_move,
    game_status,
    is_participant,
    is_waiting_for_opponent,
    resolve,
    result_for,
    winner_of,
)

__all__ = [
    "Resolution", "can_join", "can_move", "game_status", "is_participant",
    "is_waiting_for_opponent", "resolve", "result_for", "winner_of",
]
