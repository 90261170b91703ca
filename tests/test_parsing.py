"""Decoding native contract values into models."""

from __future__ import annotations

from datetime import datetime, timezone

from stellar_sdk import Address

from rps_watch.models.events import EventCategory
from rps_watch.models.game import UNSET_ADDRESS, GameKind, Outcome
from rps_watch.stellar.parsing import (
    addr_to_str,
    parse_event,
    parse_game,
    parse_history_entry,
    parse_stats,
    parse_token_profits,
)
from tests.factories import ALICE, BOB


def test_addr_to_str():
    assert addr_to_str(Address(ALICE)) == ALICE
    assert addr_to_str(BOB) == BOB
    assert addr_to_str(None) == UNSET_ADDRESS


def test_parse_game():
    game = parse_game(4, {
        "player1": Address(ALICE),
        "player2": Address(UNSET_ADDRESS),
        "player1_choice": 0,
        "player2_choice": 0,
        "player1_committed": True,
        "player2_committed": False,
        "bet_amount": 1_000_000,
        "finished": False,
        "is_token_game": False,
        "token": Address(UNSET_ADDRESS),
    })

    assert game.id == 4
    assert game.player1 == ALICE
    assert game.player2 == UNSET_ADDRESS
    assert game.player1_committed
    assert game.stake == 1_000_000


def test_parse_game_equal_for_equal_input():
    raw = {"player1": ALICE, "player2": BOB, "bet_amount": 5}
    assert parse_game(1, raw) == parse_game(1, dict(reversed(list(raw.items()))))


def test_parse_single_event_uses_ledger_close_time():
    close_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    event = parse_event(
        EventCategory.SINGLE_RESULT,
        {
            "player": Address(ALICE),
            "player_choice": 1,
            "house_choice": 3,
            "result": 1,
            "payout": 2_000_000,
            "is_token_game": False,
            "token": Address(UNSET_ADDRESS),
        },
        ledger=1234,
        close_at=close_at,
    )

    assert event.participant == ALICE
    assert event.block_height == 1234
    assert event.timestamp == int(close_at.timestamp())
    assert event.payload["house_choice"] == 3


def test_parse_multi_event_iso_close_time():
    event = parse_event(
        EventCategory.MULTI_RESULT,
        {"game_id": 9, "winner": BOB, "payout": 10},
        ledger=55,
        close_at="2025-01-01T00:00:00Z",
    )

    assert event.participant == BOB
    assert event.payload["game_id"] == 9
    assert event.timestamp == 1735689600


def test_malformed_event_is_dropped():
    assert parse_event(EventCategory.MULTI_RESULT, {"winner": BOB}, 1, None) is None


def test_parse_history_entry():
    entry = parse_history_entry({
        "game_id": 12,
        "game_type": 1,
        "opponent": Address(BOB),
        "player_choice": 2,
        "opponent_choice": 1,
        "bet_amount": 100,
        "token": Address(UNSET_ADDRESS),
        "result": 2,
        "payout": 0,
        "timestamp": 1_700_000_000,
    })

    assert entry.kind is GameKind.MULTI
    assert entry.result is Outcome.LOSS
    assert entry.opponent == BOB


def test_parse_stats_and_token_profits():
    stats = parse_stats({"wins": 2, "losses": 2, "total_profits": -5})
    profits = parse_token_profits([[Address(ALICE), Address(BOB)], [0, 7]])

    assert stats.win_rate == "50.0"
    assert [(p.token, p.profit) for p in profits] == [(BOB, 7)]
