from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

logger = logging.getLogger(__name__)

BASE_TIME_ENV_VAR = "BEECOOL_PLAYER_BASE_TIME_SECONDS"


@dataclass(frozen=True)
class GameConfig:
    """Tuning constants for the dance game. Durations are in seconds."""

    grid_size: int = 4
    starting_steps: int = 5

    # countdown budget
    base_time: float = 3.0
    extra_step_initial_factor: float = 0.45
    decay_first_levels: float = 0.82
    decay_step_per_tier: float = 0.06
    decay_floor: float = 0.52
    decay_spread: float = 0.1
    decay_min: float = 0.5
    decay_max: float = 0.98
    gentle_step_limit: int = 14

    # adaptive budget
    adaptive_min_factor: float = 0.65
    adaptive_max_factor: float = 1.1
    adaptive_buffer: float = 1.05
    adaptive_jitter_min: float = 0.97
    adaptive_jitter_max: float = 1.03
    min_total_time: float = 2.0

    # pacing
    show_step_gentle: float = 0.68
    show_step: float = 0.52
    show_wait: float = 0.9
    level_clear: float = 3.0
    game_over_reveal: float = 3.0
    mistake_pause: float = 1.0
    tick_interval: float = 0.05
    skip_arm_delay: float = 0.22

    # mistakes and warnings
    mistake_bonus: float = 1.2
    bonus_steps: int = 10
    low_time_ratio: float = 0.2
    urgency_window: float = 20.0

    next_level_attempts: int = 10


DEFAULT_CONFIG = GameConfig()

# keys that must be strictly positive
POSITIVE_KEYS = (
    "bonus_steps",
    "next_level_attempts",
    "show_step_gentle",
    "show_step",
    "show_wait",
    "level_clear",
    "game_over_reveal",
    "mistake_pause",
    "tick_interval",
    "skip_arm_delay",
)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "game.yaml"


def _parse_env_number(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """Load a GameConfig from YAML, falling back to defaults for missing keys.

    The base countdown time can be overridden with ``BEECOOL_PLAYER_BASE_TIME_SECONDS``.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a YAML mapping")

    known = {f.name for f in fields(GameConfig)}
    values = {}
    for key, value in raw.items():
        if key not in known:
            raise ValueError(f"{config_path.name}: unknown key '{key}'")
        default = getattr(GameConfig, key)
        if isinstance(default, int) and not isinstance(default, bool):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{config_path.name}: '{key}' must be an integer")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{config_path.name}: '{key}' must be a number")
        elif not math.isfinite(value):
            raise ValueError(f"{config_path.name}: '{key}' must be finite")
        values[key] = type(default)(value)

    config = GameConfig(**values)
    if config.grid_size < 2:
        raise ValueError(f"{config_path.name}: 'grid_size' must be at least 2")
    if config.starting_steps < 1:
        raise ValueError(f"{config_path.name}: 'starting_steps' must be at least 1")
    for key in POSITIVE_KEYS:
        if not getattr(config, key) > 0:
            raise ValueError(f"{config_path.name}: '{key}' must be positive")

    override = _parse_env_number(os.environ.get(BASE_TIME_ENV_VAR))
    if override is not None:
        logger.info("Base countdown time overridden to %.2fs", override)
        config = replace(config, base_time=override)
    return config
