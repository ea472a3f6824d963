"""Tests for beecool.core.messages – status, urgency and share text."""

from __future__ import annotations

import pytest

from beecool.core.messages import share_text, status_text, urgency_message
from beecool.core.round import Phase


class TestStatusText:
    def test_showing(self):
        assert status_text(Phase.SHOWING) == "Watch the bee dance..."

    def test_player(self):
        assert status_text(Phase.PLAYER).startswith("Repeat the dance")

    def test_recovering(self):
        assert status_text(Phase.PLAYER, is_recovering=True) == "Wrong move. Bee is stunned..."

    def test_level_clear(self):
        assert status_text(Phase.LEVEL_CLEAR) == "Sweet! Next dance gets longer."

    def test_game_over(self):
        assert status_text(Phase.GAME_OVER) == "Buzz over. Press restart."


class TestUrgencyMessage:
    def test_fixed_lines(self):
        assert urgency_message(Phase.LEVEL_CLEAR, 0.0, 5.0) == "You did it"
        assert urgency_message(Phase.GAME_OVER, 0.0, 5.0) == "You Lose"

    def test_nothing_while_showing(self):
        assert urgency_message(Phase.SHOWING, 5.0, 5.0) is None

    def test_nothing_early_in_long_countdown(self):
        assert urgency_message(Phase.PLAYER, 25.0, 30.0) is None

    def test_nothing_in_first_second_of_window(self):
        assert urgency_message(Phase.PLAYER, 19.5, 30.0) is None

    @pytest.mark.parametrize(
        "time_left, expected",
        [
            (18.5, "Hurry Up"),
            (16.5, "Running Out of Time!"),
            (15.0, "You can do it!"),
            (6.0, "You can do it!"),
            (3.0, "Quick!"),
        ],
    )
    def test_ramp_in_long_countdown(self, time_left: float, expected: str):
        assert urgency_message(Phase.PLAYER, time_left, 30.0) == expected

    def test_short_countdown_opens_with_hurry_up(self):
        assert urgency_message(Phase.PLAYER, 3.9, 5.0) == "Hurry Up"

    def test_short_countdown_ends_with_quick(self):
        assert urgency_message(Phase.PLAYER, 0.5, 5.0) == "Quick!"

    def test_nothing_at_zero(self):
        assert urgency_message(Phase.PLAYER, 0.0, 5.0) is None


class TestShareText:
    def test_mentions_level_and_best(self):
        assert share_text(4, 8) == "I reached Level 4 with a best of 8 steps! Can you beat my score?"
