"""Countdown budget for a dance of a given length.

The first ``starting_steps`` moves share a fixed base time. Every extra move adds
a slice that starts at ``(base_time / starting_steps) * extra_step_initial_factor``
and shrinks by a decay factor per move. The decay gets harsher every five levels
after the gentle opening levels, and each step's decay is jittered by a seeded
generator keyed on the step count, so a given length always gets the same budget.

Once the player has cleared a level, the next budget is pulled towards their
measured seconds-per-step, clamped between a floor and a ceiling derived from the
default budget.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from beecool.core.config import DEFAULT_CONFIG, GameConfig

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_LCG_MASK = 0xFFFFFFFF
_STEP_SEED_PRIME = 7919


class SeededRandom:
    """32-bit linear congruential generator yielding floats in [0, 1]."""

    def __init__(self, seed: int) -> None:
        self._state = seed & _LCG_MASK

    def next(self) -> float:
        self._state = (self._state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        return self._state / _LCG_MASK


def decay_base(step_count: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Base decay: gentle up to ``gentle_step_limit``, then one notch harsher per 5 steps."""
    if step_count <= config.gentle_step_limit:
        return config.decay_first_levels
    tier = (step_count - config.gentle_step_limit - 1) // 5
    decay = config.decay_first_levels - (tier + 1) * config.decay_step_per_tier
    return max(config.decay_floor, decay)


@lru_cache(maxsize=512)
def _raw_total_time(step_count: int, config: GameConfig) -> float:
    if step_count <= config.starting_steps:
        return config.base_time
    amount = (config.base_time / config.starting_steps) * config.extra_step_initial_factor
    base = decay_base(step_count, config)
    rand = SeededRandom(step_count * _STEP_SEED_PRIME)
    total = 0.0
    for _ in range(step_count - config.starting_steps):
        total += amount
        decay = base + (rand.next() - 0.5) * 2 * config.decay_spread
        amount *= max(config.decay_min, min(config.decay_max, decay))
    return config.base_time + total


def compute_total_time(step_count: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Default countdown (seconds) for ``step_count`` moves.

    Never less than ``base_time`` and never smaller than the budget of a shorter
    dance, even across decay tiers.
    """
    best = config.base_time
    for count in range(config.starting_steps + 1, step_count + 1):
        best = max(best, _raw_total_time(count, config))
    return best


def adaptive_random_factor(
    step_count: int,
    seconds_per_step: float,
    config: GameConfig = DEFAULT_CONFIG,
) -> float:
    """Jitter in ``[adaptive_jitter_min, adaptive_jitter_max]`` seeded by length and pace."""
    seed = step_count * _STEP_SEED_PRIME + int(seconds_per_step * 10000)
    u = SeededRandom(seed).next()
    span = config.adaptive_jitter_max - config.adaptive_jitter_min
    return config.adaptive_jitter_min + u * span


def allotted_time(
    step_count: int,
    seconds_per_step: Optional[float] = None,
    config: GameConfig = DEFAULT_CONFIG,
) -> float:
    """Countdown for the next player phase, adapted to the last measured pace if any."""
    default = compute_total_time(step_count, config)
    if seconds_per_step is None or step_count <= 0:
        return default
    factor = adaptive_random_factor(step_count, seconds_per_step, config)
    adaptive = seconds_per_step * step_count * config.adaptive_buffer * factor
    floor = max(config.min_total_time, default * config.adaptive_min_factor)
    ceiling = default * config.adaptive_max_factor
    return max(floor, min(ceiling, adaptive))


def show_step_seconds(step_count: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Delay between revealed steps; slower for the opening levels."""
    if step_count <= config.gentle_step_limit:
        return config.show_step_gentle
    return config.show_step
