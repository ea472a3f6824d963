"""Tests for beecool.app – session wiring and console commands."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from beecool.app import build_session, handle_command
from beecool.core.config import BASE_TIME_ENV_VAR
from beecool.core.grid import Direction
from beecool.core.round import Phase
from beecool.core.scores import ScoreStore


class RecordingClock:
    """Stands in for SessionClock and records what the console asked for."""

    def __init__(self) -> None:
        self.calls: List[object] = []

    def submit_move(self, direction: Direction) -> None:
        self.calls.append(direction)

    def restart(self) -> None:
        self.calls.append("restart")

    def reset(self) -> None:
        self.calls.append("reset")

    def skip(self) -> None:
        self.calls.append("skip")


class TestBuildSession:
    def test_fresh_session(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(BASE_TIME_ENV_VAR, raising=False)
        store = ScoreStore(tmp_path / "scores.json")
        store.save_high_score(4)
        session = build_session(store=store)
        assert session.phase is Phase.SHOWING
        assert session.high_score == 4
        assert session.config.base_time == 3.0


class TestHandleCommand:
    @pytest.mark.parametrize(
        "line, expected",
        [("up\n", Direction.UP), ("A\n", Direction.LEFT), ("right", Direction.RIGHT)],
    )
    def test_moves(self, line: str, expected: Direction):
        clock = RecordingClock()
        assert handle_command(clock, line) is True
        assert clock.calls == [expected]

    @pytest.mark.parametrize("command", ["restart", "reset", "skip"])
    def test_commands(self, command: str):
        clock = RecordingClock()
        assert handle_command(clock, command + "\n") is True
        assert clock.calls == [command]

    @pytest.mark.parametrize("line", ["quit\n", "exit", "q"])
    def test_quit(self, line: str):
        assert handle_command(RecordingClock(), line) is False

    def test_blank_and_unknown_lines(self):
        clock = RecordingClock()
        assert handle_command(clock, "\n") is True
        assert handle_command(clock, "jump\n") is True
        assert clock.calls == []
