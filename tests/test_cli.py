"""Result feed formatting."""

from __future__ import annotations

from rps_watch.cli import _format_event
from rps_watch.models.game import UNSET_ADDRESS
from tests.factories import ALICE, make_multi_event, make_single_event


def test_single_result_line():
    line = _format_event(make_single_event(player=ALICE, block_height=7))

    assert line == "[7] GDNAG4...O4GD played Rock vs house Scissors: WIN payout=2000000"


def test_multi_result_winner():
    line = _format_event(make_multi_event(winner=ALICE, game_id=4, block_height=9))

    assert line == "[9] game #4 won by GDNAG4...O4GD payout=2000000"


def test_multi_result_draw():
    line = _format_event(make_multi_event(winner=UNSET_ADDRESS, game_id=4, block_height=9))

    assert line == "[9] game #4 draw payout=2000000"
    assert "won by" not in line
