"""Tests for beecool.ui.clock – Qt timers driving the session."""

from __future__ import annotations

import random
from typing import Iterator, List

import pytest
from PySide6.QtCore import QCoreApplication

from beecool.core.grid import Direction
from beecool.core.round import Phase
from beecool.core.session import GameSession
from beecool.ui.clock import SessionClock


@pytest.fixture(scope="module")
def qapp() -> QCoreApplication:
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture()
def clock(qapp: QCoreApplication) -> Iterator[SessionClock]:
    clock = SessionClock(GameSession(rng=random.Random(8)))
    clock.start()
    yield clock
    clock.stop()


def finish_reveal(clock: SessionClock) -> None:
    for _ in range(clock.session.round.step_count):
        clock._on_reveal_step()
    clock._on_handoff()


def wrong_move(session: GameSession) -> Direction:
    expected = session.round.expected_direction
    return next(d for d in Direction if d is not expected)


# ---------------------------------------------------------------------------
# Reveal and handoff
# ---------------------------------------------------------------------------

class TestReveal:
    def test_start_runs_reveal(self, clock: SessionClock):
        assert clock.session.phase is Phase.SHOWING
        assert clock._reveal_timer.isActive()
        assert clock._reveal_timer.interval() == 680

    def test_reveal_steps_then_handoff(self, clock: SessionClock):
        steps = clock.session.round.step_count
        for i in range(1, steps + 1):
            clock._on_reveal_step()
            assert clock.session.round.show_index == i
        assert not clock._reveal_timer.isActive()
        assert clock._handoff_timer.isActive()
        assert clock._handoff_timer.interval() == 900

    def test_handoff_starts_countdown(self, clock: SessionClock):
        phases: List[str] = []
        clock.phase_changed.connect(lambda phase: phases.append(phase))
        finish_reveal(clock)
        assert clock.session.phase is Phase.PLAYER
        assert phases == ["player"]
        assert clock._countdown_timer.isActive()
        assert clock._countdown_timer.interval() == 50
        assert not clock._handoff_timer.isActive()


# ---------------------------------------------------------------------------
# Player phase
# ---------------------------------------------------------------------------

class TestPlayer:
    def test_countdown_tick(self, clock: SessionClock):
        finish_reveal(clock)
        before = clock.session.round.time_left
        clock._on_countdown()
        assert clock.session.round.time_left == pytest.approx(before - 0.05)

    def test_mistake_starts_recovery_timer(self, clock: SessionClock):
        mistakes: List[bool] = []
        clock.mistake_made.connect(lambda: mistakes.append(True))
        finish_reveal(clock)
        clock.submit_move(wrong_move(clock.session))
        assert mistakes == [True]
        assert clock._recovery_timer.isActive()
        clock._on_recovery_done()
        assert not clock.session.round.is_recovering

    def test_game_over(self, clock: SessionClock):
        over: List[bool] = []
        clock.game_over.connect(lambda: over.append(True))
        finish_reveal(clock)
        while clock.session.phase is Phase.PLAYER:
            clock._on_countdown()
        assert over == [True]
        assert clock.session.phase is Phase.GAME_OVER
        assert not clock._countdown_timer.isActive()
        assert clock._game_over_timer.isActive()
        clock._on_game_over_revealed()
        assert clock.session.round.game_over_reveal_complete


# ---------------------------------------------------------------------------
# Level-clear
# ---------------------------------------------------------------------------

class TestLevelClear:
    def _clear(self, clock: SessionClock) -> None:
        finish_reveal(clock)
        for direction in clock.session.round.dance_sequence:
            clock.submit_move(direction)

    def test_clear_switches_timers(self, clock: SessionClock):
        scores: List[int] = []
        clock.high_score_changed.connect(lambda score: scores.append(score))
        self._clear(clock)
        assert clock.session.phase is Phase.LEVEL_CLEAR
        assert scores == [5]
        assert not clock._countdown_timer.isActive()
        assert clock._level_clear_timer.isActive()
        assert clock._skip_arm_timer.isActive()

    def test_skip_ignored_until_armed(self, clock: SessionClock):
        self._clear(clock)
        clock.skip()
        assert clock.session.phase is Phase.LEVEL_CLEAR
        clock._on_skip_armed()
        clock.skip()
        assert clock.session.phase is Phase.SHOWING
        assert clock.session.level == 2
        assert clock._reveal_timer.isActive()
        assert not clock._level_clear_timer.isActive()

    def test_timed_advance(self, clock: SessionClock):
        self._clear(clock)
        clock._on_level_clear_done()
        assert clock.session.level == 2
        assert clock.session.round.show_index == 0


# ---------------------------------------------------------------------------
# Restart / stop
# ---------------------------------------------------------------------------

class TestRestart:
    def test_restart_during_reveal_restarts_reveal(self, clock: SessionClock):
        clock._on_reveal_step()
        clock.restart()
        assert clock.session.round.show_index == 0
        assert clock._reveal_timer.isActive()

    def test_reset_from_player(self, clock: SessionClock):
        finish_reveal(clock)
        clock.reset()
        assert clock.session.phase is Phase.SHOWING
        assert not clock._countdown_timer.isActive()

    def test_stop_cancels_everything(self, clock: SessionClock):
        clock.stop()
        assert not any(timer.isActive() for timer in clock._timers())
