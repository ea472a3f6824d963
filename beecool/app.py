"""Application entry point for the Bee Cool dance game (console host)."""

import logging
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QCoreApplication, QSocketNotifier

from beecool.core.config import load_config
from beecool.core.grid import direction_for_key
from beecool.core.messages import share_text
from beecool.core.scores import ScoreStore
from beecool.core.session import GameSession
from beecool.ui.clock import SessionClock

HELP_TEXT = "Moves: up/down/left/right or w/a/s/d. Commands: skip, restart, quit."


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_session(config_path: Optional[Path] = None, store: Optional[ScoreStore] = None) -> GameSession:
    """Load the configuration and high score and create a fresh session."""
    config = load_config(config_path)
    return GameSession(config=config, store=store if store is not None else ScoreStore())


def handle_command(clock: SessionClock, line: str) -> bool:
    """Apply one line of console input. Returns False when the player wants to quit."""
    command = line.strip().lower()
    if not command:
        return True
    if command in ("quit", "exit", "q"):
        return False
    if command == "restart":
        clock.restart()
    elif command == "reset":
        clock.reset()
    elif command == "skip":
        clock.skip()
    else:
        direction = direction_for_key(command)
        if direction is None:
            logging.info(HELP_TEXT)
        else:
            clock.submit_move(direction)
    return True


def run() -> None:
    """Initialize the session and its clock, then read moves from stdin."""
    configure_logging()
    app = QCoreApplication(sys.argv)
    app.setApplicationName("Bee Cool")

    session = build_session()
    clock = SessionClock(session, parent=app)

    def on_phase(phase: str) -> None:
        logging.info("[%s] level %d, best %d: %s", phase, session.level, session.high_score, session.status_text)
        if phase == "game-over":
            logging.info(share_text(session.level, session.high_score))

    clock.phase_changed.connect(on_phase)
    clock.mistake_made.connect(lambda: logging.info(session.status_text))
    clock.low_time.connect(lambda: logging.info(session.urgency_message or "Hurry Up"))

    notifier = QSocketNotifier(sys.stdin.fileno(), QSocketNotifier.Type.Read, app)

    def on_input() -> None:
        line = sys.stdin.readline()
        if not line or not handle_command(clock, line):
            clock.stop()
            app.quit()

    notifier.activated.connect(on_input)

    logging.info(HELP_TEXT)
    clock.start()
    sys.exit(app.exec())
