from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "beecool-highscore"


def _default_path() -> Path:
    return Path.home() / ".beecool" / "scores.json"


class ScoreStore:
    """Integer scores stored by key. Persists to disk across app restarts.
    File: ~/.beecool/scores.json. Missing or malformed values read as 0."""

    def __init__(self, file_path: Optional[Union[str, Path]] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else _default_path()
        self._scores = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> int:
        return _as_score(self._scores.get(key))

    def set(self, key: str, value: int) -> None:
        self._scores[key] = max(0, int(value))
        self._save()

    def get_high_score(self) -> int:
        return self.get(HIGH_SCORE_KEY)

    def save_high_score(self, value: int) -> None:
        self.set(HIGH_SCORE_KEY, value)

    def reload(self) -> None:
        """Re-read the file, e.g. when returning to the menu."""
        self._scores = self._load()

    def _load(self) -> Dict[str, object]:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load scores from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed scores file %s", self._file_path)
            return {}
        return payload

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._scores, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save scores to %s: %s", self._file_path, e)


def _as_score(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, str):
        try:
            number = int(value.strip(), 10)
        except ValueError:
            return 0
        return max(0, number)
    return 0
