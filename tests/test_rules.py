"""Resolution rule and participant-relative predicates."""

from __future__ import annotations

from itertools import permutations

import pytest

from rps_watch.game import rules
from rps_watch.game.rules import Resolution, resolve
from rps_watch.models.game import UNSET_ADDRESS, Choice, Outcome
from tests.factories import ALICE, BOB, CAROL, make_game

MOVES = (Choice.ROCK, Choice.PAPER, Choice.SCISSORS)


@pytest.mark.parametrize("choice", MOVES)
def test_equal_choices_draw(choice):
    assert resolve(choice, choice) is Resolution.DRAW


@pytest.mark.parametrize("first, second", [
    (Choice.ROCK, Choice.SCISSORS),
    (Choice.SCISSORS, Choice.PAPER),
    (Choice.PAPER, Choice.ROCK),
])
def test_dominance(first, second):
    assert resolve(first, second) is Resolution.FIRST_WINS
    assert resolve(second, first) is Resolution.SECOND_WINS


def test_swapping_always_flips_decisive_result():
    flipped = {
        Resolution.FIRST_WINS: Resolution.SECOND_WINS,
        Resolution.SECOND_WINS: Resolution.FIRST_WINS,
    }
    for a, b in permutations(MOVES, 2):
        result = resolve(a, b)
        assert result is not Resolution.DRAW
        assert resolve(b, a) is flipped[result]


def test_uncommitted_choice_cannot_be_resolved():
    with pytest.raises(ValueError):
        resolve(Choice.NONE, Choice.ROCK)


def test_open_seat_sentinel():
    assert rules.is_slot_open(UNSET_ADDRESS)
    assert rules.is_slot_open("")
    assert rules.is_slot_open(None)
    assert not rules.is_slot_open(BOB)


def test_can_join():
    open_game = make_game(player1=ALICE)

    assert rules.can_join(open_game, BOB)
    assert not rules.can_join(open_game, ALICE)
    assert not rules.can_join(open_game, None)
    assert not rules.can_join(make_game(player1=ALICE, player2=CAROL), BOB)
    assert not rules.can_join(make_game(player1=ALICE, finished=True), BOB)


def test_address_comparison_ignores_case():
    game = make_game(player1=ALICE.lower(), player2=BOB)

    assert rules.is_participant(game, ALICE)
    assert rules.can_move(game, ALICE)


def test_can_move_and_waiting():
    game = make_game(player1=ALICE, player2=BOB, player1_committed=True)

    assert not rules.can_move(game, ALICE)
    assert rules.is_waiting_for_opponent(game, ALICE)
    assert rules.can_move(game, BOB)
    assert not rules.is_waiting_for_opponent(game, BOB)
    assert not rules.can_move(game, CAROL)
    assert not rules.is_waiting_for_opponent(game, CAROL)


def test_nobody_acts_on_a_finished_game():
    game = make_game(player1=ALICE, player2=BOB, finished=True)

    assert not rules.can_move(game, ALICE)
    assert not rules.is_waiting_for_opponent(game, ALICE)


def test_open_seat_never_matches_an_account():
    game = make_game(player1=ALICE)
    assert not rules.is_participant(game, UNSET_ADDRESS)


@pytest.mark.parametrize("kwargs, label", [
    (dict(finished=True), "Finished"),
    (dict(), "Waiting for Player 2"),
    (dict(player2=BOB), "Player 1 choosing..."),
    (dict(player2=BOB, player1_committed=True), "Player 2 choosing..."),
    (dict(player2=BOB, player1_committed=True, player2_committed=True), "Both committed"),
])
def test_game_status(kwargs, label):
    assert rules.game_status(make_game(**kwargs)) == label


def test_winner_and_result_for():
    game = make_game(
        player1=ALICE, player2=BOB,
        player1_choice=Choice.SCISSORS, player2_choice=Choice.PAPER,
        player1_committed=True, player2_committed=True, finished=True,
    )

    assert rules.winner_of(game) == ALICE
    assert rules.result_for(game, ALICE) is Outcome.WIN
    assert rules.result_for(game, BOB) is Outcome.LOSS
    assert rules.result_for(game, CAROL) is None


def test_draw_result():
    game = make_game(
        player1=ALICE, player2=BOB,
        player1_choice=Choice.ROCK, player2_choice=Choice.ROCK, finished=True,
    )

    assert rules.winner_of(game) is None
    assert rules.result_for(game, BOB) is Outcome.DRAW


def test_unfinished_game_has_no_winner():
    assert rules.winner_of(make_game(player2=BOB)) is None


def test_display_helpers():
    assert rules.short_address(UNSET_ADDRESS) == "Waiting..."
    assert rules.short_address(ALICE) == "GDNAG4...O4GD"
    assert rules.choice_name(Choice.PAPER) == "Paper"
    assert rules.choice_name(0) == "?"
    assert rules.choice_name(9) == "?"
