"""Player-facing text derived from the session state."""

from __future__ import annotations

from typing import Optional

from beecool.core.config import DEFAULT_CONFIG
from beecool.core.round import Phase

URGENCY_MESSAGES = (
    "Hurry Up",
    "Running Out of Time!",
    "You can do it!",
    "Quick!",
)
MIN_DISPLAY_SECONDS = 2.0
# "Hurry Up" stays up at least this long before "Quick!" replaces it
HURRY_UP_SECONDS_BEFORE_QUICK = 3.0
QUICK_ZONE_SECONDS = 4.0


def status_text(phase: Phase, is_recovering: bool = False) -> str:
    if phase is Phase.SHOWING:
        return "Watch the bee dance..."
    if phase is Phase.PLAYER:
        if is_recovering:
            return "Wrong move. Bee is stunned..."
        return "Repeat the dance: arrows / WASD or tap cells"
    if phase is Phase.LEVEL_CLEAR:
        return "Sweet! Next dance gets longer."
    return "Buzz over. Press restart."


def _countdown_message(time_left: float, total_time: float, window: float) -> Optional[str]:
    urgency_end = min(window, total_time)
    if time_left <= 0 or time_left > urgency_end - 1:
        return None
    shown = max(0.0, urgency_end - 1 - time_left)

    if time_left <= QUICK_ZONE_SECONDS:
        if shown >= HURRY_UP_SECONDS_BEFORE_QUICK:
            return URGENCY_MESSAGES[3]
        return URGENCY_MESSAGES[0]

    pre_quick = max(MIN_DISPLAY_SECONDS, urgency_end - QUICK_ZONE_SECONDS)
    elapsed = max(0.0, pre_quick - (time_left - QUICK_ZONE_SECONDS))
    stage = min(2, int(elapsed // MIN_DISPLAY_SECONDS))
    return URGENCY_MESSAGES[stage]


def urgency_message(
    phase: Phase,
    time_left: float,
    total_time: float,
    window: float = DEFAULT_CONFIG.urgency_window,
) -> Optional[str]:
    """Encouragement shown near the end of the countdown, one message at a time.

    The ramp always opens with "Hurry Up" and settles on "Quick!" for the last
    four seconds. Level-clear and game-over get their own fixed line.
    """
    if phase is Phase.LEVEL_CLEAR:
        return "You did it"
    if phase is Phase.GAME_OVER:
        return "You Lose"
    if phase is not Phase.PLAYER:
        return None
    return _countdown_message(time_left, total_time, window)


def share_text(level: int, high_score: int) -> str:
    return f"I reached Level {level} with a best of {high_score} steps! Can you beat my score?"
