"""Round state machine.

Session state is an immutable record; every transition takes the current state
and returns the next one. Transitions aimed at a phase that is no longer active
return the state unchanged, so a stale timer firing late cannot corrupt anything.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from beecool.core.config import DEFAULT_CONFIG, GameConfig
from beecool.core.dance import build_initial_sequence, build_next_level_sequence, random_start_cell
from beecool.core.grid import Cell, Direction, build_path, in_bounds, move


class Phase(Enum):
    SHOWING = "showing"
    PLAYER = "player"
    LEVEL_CLEAR = "level-clear"
    GAME_OVER = "game-over"


class Event(Enum):
    STEP_SUCCESS = "step-success"
    MISTAKE = "mistake"
    LEVEL_CLEARED = "level-cleared"
    GAME_OVER = "game-over"
    LOW_TIME = "low-time"
    NEW_HIGH_SCORE = "new-high-score"


@dataclass(frozen=True)
class Round:
    """One level's dance and the player's progress through it."""

    level: int
    start_cell: Cell
    dance_sequence: Tuple[Direction, ...]
    player_pos: Cell
    show_index: int = 0
    player_step_index: int = 0
    time_left: float = 0.0
    # time granted this round, mistake bonuses included
    total_time: float = 0.0
    is_recovering: bool = False
    mistake_bonus_used: int = 0
    last_wrong_cell: Optional[Cell] = None
    last_completed_path: Tuple[Cell, ...] = ()
    # pace measured on the previous clear; None until a level has been cleared
    last_completed_time_per_step: Optional[float] = None
    low_time_warned: bool = False
    game_over_reveal_complete: bool = False

    @property
    def step_count(self) -> int:
        return len(self.dance_sequence)

    @property
    def dance_path(self) -> List[Cell]:
        return build_path(self.start_cell, self.dance_sequence)

    @property
    def expected_direction(self) -> Optional[Direction]:
        if self.player_step_index >= self.step_count:
            return None
        return self.dance_sequence[self.player_step_index]

    def allowed_bonuses(self, config: GameConfig = DEFAULT_CONFIG) -> int:
        """One mistake bonus per full ``bonus_steps`` moves in the dance."""
        return self.step_count // config.bonus_steps


@dataclass(frozen=True)
class SessionState:
    high_score: int
    phase: Phase
    round: Round


def new_round(
    level: int,
    start_cell: Cell,
    sequence: Sequence[Direction],
    last_completed_time_per_step: Optional[float] = None,
) -> Round:
    return Round(
        level=level,
        start_cell=start_cell,
        dance_sequence=tuple(sequence),
        player_pos=start_cell,
        last_completed_time_per_step=last_completed_time_per_step,
    )


def _first_round(rng: random.Random, config: GameConfig) -> Round:
    start = random_start_cell(rng, config.grid_size)
    sequence = build_initial_sequence(start, rng, config.grid_size, config.starting_steps)
    return new_round(1, start, sequence)


def new_session(
    rng: random.Random,
    high_score: int = 0,
    config: GameConfig = DEFAULT_CONFIG,
) -> SessionState:
    return SessionState(
        high_score=max(0, high_score),
        phase=Phase.SHOWING,
        round=_first_round(rng, config),
    )


def _with_round(state: SessionState, **changes) -> SessionState:
    return replace(state, round=replace(state.round, **changes))


def advance_show_index(state: SessionState, index: int) -> SessionState:
    """Reveal the first ``index`` steps of the dance (clamped to the dance length)."""
    if state.phase is not Phase.SHOWING:
        return state
    index = max(0, min(index, state.round.step_count))
    return _with_round(state, show_index=index)


def begin_player(state: SessionState, total_time: float) -> SessionState:
    """Hand over to the player with a fresh countdown of ``total_time`` seconds."""
    if state.phase is not Phase.SHOWING:
        return state
    total_time = max(0.0, total_time)
    return replace(
        state,
        phase=Phase.PLAYER,
        round=replace(
            state.round,
            player_pos=state.round.start_cell,
            player_step_index=0,
            is_recovering=False,
            last_wrong_cell=None,
            time_left=total_time,
            total_time=total_time,
            mistake_bonus_used=0,
            low_time_warned=False,
        ),
    )


def tick(
    state: SessionState,
    amount: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> Tuple[SessionState, Tuple[Event, ...]]:
    """Run the countdown down by ``amount`` seconds; frozen while recovering."""
    current = state.round
    if state.phase is not Phase.PLAYER or current.is_recovering or amount <= 0:
        return state, ()

    remaining = current.time_left - amount
    if remaining <= 0:
        game_over = replace(
            state,
            phase=Phase.GAME_OVER,
            round=replace(current, time_left=0.0, show_index=current.step_count),
        )
        return game_over, (Event.GAME_OVER,)

    events: Tuple[Event, ...] = ()
    warned = current.low_time_warned
    if not warned and current.total_time > 0 and remaining / current.total_time <= config.low_time_ratio:
        warned = True
        events = (Event.LOW_TIME,)
    return _with_round(state, time_left=remaining, low_time_warned=warned), events


def submit(
    state: SessionState,
    direction: Direction,
    config: GameConfig = DEFAULT_CONFIG,
) -> Tuple[SessionState, Tuple[Event, ...]]:
    """Check one move against the dance.

    Input outside the player phase or during recovery is ignored. A wrong
    direction, or one leading off the grid, starts recovery and may grant a
    mistake bonus. Completing the dance moves to level-clear.
    """
    if not isinstance(direction, Direction):
        raise TypeError(f"expected a Direction, got {direction!r}")
    current = state.round
    if state.phase is not Phase.PLAYER or current.is_recovering:
        return state, ()

    next_pos = move(current.player_pos, direction)
    on_grid = in_bounds(next_pos, config.grid_size)
    if not on_grid or direction is not current.expected_direction:
        return _start_recovery(state, next_pos if on_grid else None, config), (Event.MISTAKE,)

    next_index = current.player_step_index + 1
    if next_index < current.step_count:
        return _with_round(
            state,
            player_pos=next_pos,
            player_step_index=next_index,
            last_wrong_cell=None,
        ), (Event.STEP_SUCCESS,)

    high_score = max(state.high_score, current.step_count)
    cleared = replace(
        state,
        phase=Phase.LEVEL_CLEAR,
        high_score=high_score,
        round=replace(
            current,
            player_pos=next_pos,
            player_step_index=next_index,
            last_wrong_cell=None,
            last_completed_path=tuple(current.dance_path),
        ),
    )
    events = (Event.STEP_SUCCESS, Event.LEVEL_CLEARED)
    if high_score > state.high_score:
        events += (Event.NEW_HIGH_SCORE,)
    return cleared, events


def _start_recovery(state: SessionState, wrong_cell: Optional[Cell], config: GameConfig) -> SessionState:
    current = state.round
    changes = {"is_recovering": True, "last_wrong_cell": wrong_cell}
    if current.mistake_bonus_used < current.allowed_bonuses(config):
        changes.update(
            time_left=current.time_left + config.mistake_bonus,
            total_time=current.total_time + config.mistake_bonus,
            mistake_bonus_used=current.mistake_bonus_used + 1,
        )
    return _with_round(state, **changes)


def end_recovery(state: SessionState) -> SessionState:
    if not state.round.is_recovering:
        return state
    return _with_round(state, is_recovering=False, last_wrong_cell=None)


def measured_time_per_step(current: Round) -> Optional[float]:
    """Seconds per step actually spent on the round, or None for an empty dance."""
    if current.step_count <= 0:
        return None
    return max(0.0, current.total_time - current.time_left) / current.step_count


def advance_level(
    state: SessionState,
    rng: random.Random,
    config: GameConfig = DEFAULT_CONFIG,
) -> SessionState:
    """Leave level-clear for the next, one-step-longer dance from a new start cell."""
    if state.phase is not Phase.LEVEL_CLEAR:
        return state
    current = state.round
    start = random_start_cell(rng, config.grid_size)
    sequence = build_next_level_sequence(
        current.dance_sequence,
        start,
        rng,
        config.grid_size,
        config.next_level_attempts,
    )
    return SessionState(
        high_score=max(state.high_score, current.step_count),
        phase=Phase.SHOWING,
        round=new_round(current.level + 1, start, sequence, measured_time_per_step(current)),
    )


def restart(
    state: SessionState,
    rng: random.Random,
    config: GameConfig = DEFAULT_CONFIG,
) -> SessionState:
    """Start again from level 1 with a fresh dance, keeping the high score."""
    return SessionState(
        high_score=state.high_score,
        phase=Phase.SHOWING,
        round=_first_round(rng, config),
    )


def mark_game_over_revealed(state: SessionState) -> SessionState:
    if state.phase is not Phase.GAME_OVER or state.round.game_over_reveal_complete:
        return state
    return _with_round(state, game_over_reveal_complete=True)
