"""Qt timers that drive a GameSession through its phases."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from beecool.core.grid import Direction
from beecool.core.round import Event, Phase
from beecool.core.session import GameSession

logger = logging.getLogger(__name__)


def _ms(seconds: float) -> int:
    return max(0, int(round(seconds * 1000)))


class SessionClock(QObject):
    """Owns every timer of the game and re-emits session events as Qt signals.

    Each phase starts its own timers when it is entered and the timers of the
    phase being left are stopped, so a late timeout never reaches the session.
    """

    phase_changed = Signal(str)
    state_changed = Signal()
    step_succeeded = Signal()
    mistake_made = Signal()
    level_cleared = Signal()
    game_over = Signal()
    low_time = Signal()
    high_score_changed = Signal(int)

    def __init__(self, session: GameSession, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._session = session
        self._phase: Optional[Phase] = None
        self._reveal_index = 0
        config = session.config

        self._reveal_timer = self._make_timer(self._on_reveal_step)
        self._handoff_timer = self._make_timer(self._on_handoff, single_shot=True)
        self._countdown_timer = self._make_timer(self._on_countdown)
        self._countdown_timer.setInterval(_ms(config.tick_interval))
        self._recovery_timer = self._make_timer(self._on_recovery_done, single_shot=True)
        self._level_clear_timer = self._make_timer(self._on_level_clear_done, single_shot=True)
        self._skip_arm_timer = self._make_timer(self._on_skip_armed, single_shot=True)
        self._game_over_timer = self._make_timer(self._on_game_over_revealed, single_shot=True)

        self._emitters: dict[Event, Callable[[], None]] = {
            Event.STEP_SUCCESS: self.step_succeeded.emit,
            Event.MISTAKE: self._on_mistake,
            Event.LEVEL_CLEARED: self.level_cleared.emit,
            Event.GAME_OVER: self.game_over.emit,
            Event.LOW_TIME: self.low_time.emit,
            Event.NEW_HIGH_SCORE: lambda: self.high_score_changed.emit(self._session.high_score),
        }
        session.subscribe(self._on_event)

    @property
    def session(self) -> GameSession:
        return self._session

    def start(self) -> None:
        """Begin driving the session from its current phase."""
        self._enter_phase()

    def stop(self) -> None:
        for timer in self._timers():
            timer.stop()
        self._phase = None

    # ------------------------------------------------------------------
    # Host actions
    # ------------------------------------------------------------------

    def submit_move(self, direction: Direction) -> None:
        self._session.submit_move(direction)
        self._sync()

    def skip(self) -> None:
        """Early skip of the level-clear display (ignored until armed)."""
        if self._session.request_skip():
            self._sync()

    def restart(self) -> None:
        self._session.restart()
        self._enter_phase()

    def reset(self) -> None:
        self._session.reset()
        self._enter_phase()

    # ------------------------------------------------------------------
    # Phase bookkeeping
    # ------------------------------------------------------------------

    def _make_timer(self, slot: Callable[[], None], single_shot: bool = False) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(single_shot)
        timer.timeout.connect(slot)
        return timer

    def _timers(self) -> tuple[QTimer, ...]:
        return (
            self._reveal_timer,
            self._handoff_timer,
            self._countdown_timer,
            self._recovery_timer,
            self._level_clear_timer,
            self._skip_arm_timer,
            self._game_over_timer,
        )

    def _sync(self) -> None:
        if self._session.phase is not self._phase:
            self._enter_phase()
        else:
            self.state_changed.emit()

    def _enter_phase(self) -> None:
        for timer in self._timers():
            timer.stop()
        session = self._session
        config = session.config
        self._phase = session.phase
        logger.debug("Entering phase %s", self._phase.value)

        if self._phase is Phase.SHOWING:
            self._reveal_index = 0
            session.advance_show_index(0)
            self._reveal_timer.start(_ms(session.show_step_seconds))
        elif self._phase is Phase.PLAYER:
            self._countdown_timer.start()
        elif self._phase is Phase.LEVEL_CLEAR:
            self._level_clear_timer.start(_ms(config.level_clear))
            self._skip_arm_timer.start(_ms(config.skip_arm_delay))
        elif self._phase is Phase.GAME_OVER and not session.round.game_over_reveal_complete:
            self._game_over_timer.start(_ms(config.game_over_reveal))

        self.phase_changed.emit(self._phase.value)
        self.state_changed.emit()

    # ------------------------------------------------------------------
    # Timer slots
    # ------------------------------------------------------------------

    def _on_reveal_step(self) -> None:
        session = self._session
        self._reveal_index += 1
        session.advance_show_index(self._reveal_index)
        if self._reveal_index >= session.round.step_count:
            self._reveal_timer.stop()
            self._handoff_timer.start(_ms(session.config.show_wait))
        self._sync()

    def _on_handoff(self) -> None:
        self._session.begin_player_phase()
        self._sync()

    def _on_countdown(self) -> None:
        self._session.tick(self._session.config.tick_interval)
        self._sync()

    def _on_recovery_done(self) -> None:
        self._session.end_recovery()
        self._sync()

    def _on_level_clear_done(self) -> None:
        self._session.advance_level()
        self._sync()

    def _on_skip_armed(self) -> None:
        self._session.arm_skip()

    def _on_game_over_revealed(self) -> None:
        self._session.mark_game_over_revealed()
        self._sync()

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    def _on_event(self, event: Event) -> None:
        self._emitters[event]()

    def _on_mistake(self) -> None:
        self._recovery_timer.start(_ms(self._session.config.mistake_pause))
        self.mistake_made.emit()
