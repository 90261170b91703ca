"""Synthetic record factories for testing."""

from __future__ import annotations

from rps_watch.models.events import EventCategory, GameEvent
from rps_watch.models.game import (
    UNSET_ADDRESS,
    Choice,
    GameKind,
    GameRecord,
    HistoryEntry,
    Outcome,
)

ALICE = "GDNAG4KFFVF5HCSGRWZIXZNL2SR2KBGJSHW2A6FI6DZI62XF6IBLO4GD"
BOB = "GB3MQVDOI6JGPQQF5IFXZPOTREQEDXDRJG2AXEMUTCOOYM7TO3R3UBGS"
CAROL = "GDCK7OQBNBJISP3ZLFDAT5D7KFDRQJCXCFCJ2AV2EMX4GUOQ7JAW6AZM"


def make_single_event(
    player: str = ALICE,
    timestamp: int = 1_700_000_000,
    block_height: int = 100,
    player_choice: int = Choice.ROCK,
    house_choice: int = Choice.SCISSORS,
    result: int = Outcome.WIN,
    payout: int = 2_000_000,
) -> GameEvent:
    return GameEvent(
        category=EventCategory.SINGLE_RESULT,
        participant=player,
        timestamp=timestamp,
        block_height=block_height,
        payload={
            "player_choice": int(player_choice),
            "house_choice": int(house_choice),
            "result": int(result),
            "payout": payout,
            "is_token_game": False,
            "token": UNSET_ADDRESS,
        },
    )


def make_multi_event(
    winner: str = ALICE,
    game_id: int = 1,
    timestamp: int = 1_700_000_000,
    block_height: int = 100,
    payout: int = 2_000_000,
) -> GameEvent:
    return GameEvent(
        category=EventCategory.MULTI_RESULT,
        participant=winner,
        timestamp=timestamp,
        block_height=block_height,
        payload={
            "game_id": game_id,
            "payout": payout,
            "is_token_game": False,
            "token": UNSET_ADDRESS,
        },
    )


def make_game(
    id: int = 0,
    player1: str = ALICE,
    player2: str = UNSET_ADDRESS,
    player1_choice: int = Choice.NONE,
    player2_choice: int = Choice.NONE,
    player1_committed: bool = False,
    player2_committed: bool = False,
    stake: int = 1_000_000,
    finished: bool = False,
) -> GameRecord:
    return GameRecord(
        id=id,
        player1=player1,
        player2=player2,
        player1_choice=player1_choice,
        player2_choice=player2_choice,
        player1_committed=player1_committed,
        player2_committed=player2_committed,
        stake=stake,
        finished=finished,
    )


def make_history_entry(
    game_id: int = 0,
    kind: GameKind = GameKind.SINGLE,
    opponent: str = UNSET_ADDRESS,
    result: Outcome = Outcome.WIN,
    timestamp: int = 1_700_000_000,
) -> HistoryEntry:
    return HistoryEntry(
        game_id=game_id,
        kind=kind,
        opponent=opponent,
        player_choice=Choice.ROCK,
        opponent_choice=Choice.SCISSORS,
        stake=1_000_000,
        token=UNSET_ADDRESS,
        result=result,
        payout=2_000_000 if result is Outcome.WIN else 0,
        timestamp=timestamp + game_id,
    )
