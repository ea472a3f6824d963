from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from beecool.core import round as rounds
from beecool.core.config import DEFAULT_CONFIG, GameConfig
from beecool.core.grid import Cell, Direction, build_path
from beecool.core.messages import status_text, urgency_message
from beecool.core.round import Event, Phase, Round, SessionState
from beecool.core.scores import ScoreStore
from beecool.core.timing import allotted_time, show_step_seconds

logger = logging.getLogger(__name__)

Listener = Callable[[Event], None]


class GameSession:
    """The game as seen by a host: input, clock operations and read-only views.

    Moves that arrive at the wrong moment (while the dance is being shown, during
    recovery, after game over) are dropped silently. The host's clock calls the
    ``advance_*``/``begin_*``/``tick``/``end_*`` operations; each one is a no-op
    when its phase has already been left.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        store: Optional[ScoreStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._store = store
        self._rng = rng if rng is not None else random.Random()
        self._listeners: List[Listener] = []
        self._skip_armed = False
        self._state = rounds.new_session(self._rng, self._stored_high_score(), config)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callback for discrete game events (sound, animation, storage)."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Player input
    # ------------------------------------------------------------------

    def submit_move(self, direction: Direction) -> tuple[Event, ...]:
        """Submit one directional move; returns the events it produced (possibly none)."""
        state, events = rounds.submit(self._state, direction, self._config)
        if not events:
            return ()
        if Event.MISTAKE in events:
            logger.debug(
                "Mistake at step %d of level %d (bonus used %d)",
                state.round.player_step_index,
                state.round.level,
                state.round.mistake_bonus_used,
            )
        if Event.LEVEL_CLEARED in events:
            logger.info("Level %d cleared (%d steps)", state.round.level, state.round.step_count)
        self._apply(state, events)
        return events

    def restart(self) -> None:
        """Start over at level 1 with a fresh dance, keeping the high score."""
        logger.info("Restarting from level 1")
        self._apply(rounds.restart(self._state, self._rng, self._config))

    def reset(self) -> None:
        """Back to a brand-new session, re-reading the stored high score."""
        logger.info("Resetting session")
        high_score = self.high_score
        if self._store is not None:
            self._store.reload()
            high_score = self._store.get_high_score()
        self._apply(rounds.new_session(self._rng, high_score, self._config))

    # ------------------------------------------------------------------
    # Host clock
    # ------------------------------------------------------------------

    def advance_show_index(self, index: int) -> None:
        self._apply(rounds.advance_show_index(self._state, index))

    def begin_player_phase(self, total_time: Optional[float] = None) -> None:
        """Start the countdown; defaults to the budget the timing model allots."""
        if total_time is None:
            total_time = self.total_time
        logger.debug("Player phase: %.2fs for %d steps", total_time, self.round.step_count)
        self._apply(rounds.begin_player(self._state, total_time))

    def tick(self, delta_seconds: float) -> tuple[Event, ...]:
        state, events = rounds.tick(self._state, delta_seconds, self._config)
        if Event.GAME_OVER in events:
            logger.info("Game over at level %d", state.round.level)
        self._apply(state, events)
        return events

    def end_recovery(self) -> None:
        self._apply(rounds.end_recovery(self._state))

    def advance_level(self) -> None:
        self._apply(rounds.advance_level(self._state, self._rng, self._config))

    def arm_skip(self) -> None:
        """Allow an early skip of the level-clear display (host calls this after a short delay)."""
        if self.phase is Phase.LEVEL_CLEAR:
            self._skip_armed = True

    def request_skip(self) -> bool:
        """Skip straight to the next level if level-clear is showing and skipping is armed."""
        if self.phase is not Phase.LEVEL_CLEAR or not self._skip_armed:
            return False
        self.advance_level()
        return True

    def mark_game_over_revealed(self) -> None:
        self._apply(rounds.mark_game_over_revealed(self._state))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def round(self) -> Round:
        return self._state.round

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def level(self) -> int:
        return self._state.round.level

    @property
    def high_score(self) -> int:
        return self._state.high_score

    @property
    def skip_armed(self) -> bool:
        return self._skip_armed

    @property
    def total_time(self) -> float:
        """Countdown for the current dance; the granted amount once the player phase began."""
        current = self.round
        if self.phase is not Phase.SHOWING and current.total_time > 0:
            return current.total_time
        return allotted_time(current.step_count, current.last_completed_time_per_step, self._config)

    @property
    def show_step_seconds(self) -> float:
        return show_step_seconds(self.round.step_count, self._config)

    @property
    def dance_path(self) -> List[Cell]:
        return self.round.dance_path

    @property
    def leader_cell(self) -> Cell:
        """Where the leading bee stands while the dance is revealed."""
        path = self.dance_path
        return path[min(self.round.show_index, len(path) - 1)]

    @property
    def revealed_path(self) -> List[Cell]:
        current = self.round
        return build_path(current.start_cell, current.dance_sequence[: current.show_index])

    @property
    def player_trail(self) -> List[Cell]:
        current = self.round
        return build_path(current.start_cell, current.dance_sequence[: current.player_step_index])

    @property
    def progress(self) -> float:
        """Fraction of the dance the player has reproduced so far."""
        current = self.round
        if current.step_count == 0:
            return 0.0
        return min(1.0, current.player_step_index / current.step_count)

    @property
    def time_progress(self) -> float:
        """Fraction of the countdown still left, in [0, 1]."""
        total = self.total_time
        if total <= 0:
            return 0.0
        if self.phase is Phase.SHOWING:
            return 1.0
        return max(0.0, min(1.0, self.round.time_left / total))

    @property
    def status_text(self) -> str:
        return status_text(self.phase, self.round.is_recovering)

    @property
    def urgency_message(self) -> Optional[str]:
        return urgency_message(self.phase, self.round.time_left, self.total_time, self._config.urgency_window)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stored_high_score(self) -> int:
        if self._store is None:
            return 0
        return self._store.get_high_score()

    def _apply(self, state: SessionState, events: tuple[Event, ...] = ()) -> None:
        previous = self._state
        self._state = state
        if state.phase is not previous.phase:
            self._skip_armed = False
        if state.high_score > previous.high_score:
            logger.info("New high score: %d", state.high_score)
            if self._store is not None:
                self._store.save_high_score(state.high_score)
            if Event.NEW_HIGH_SCORE not in events:
                events = events + (Event.NEW_HIGH_SCORE,)
        for event in events:
            for listener in list(self._listeners):
                listener(event)
