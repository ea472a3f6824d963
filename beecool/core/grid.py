"""Grid geometry: cells, directions and paths on the square dance floor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from beecool.core.config import DEFAULT_CONFIG

GRID_SIZE = DEFAULT_CONFIG.grid_size


@dataclass(frozen=True)
class Cell:
    """A grid cell addressed by 0-based (row, col)."""

    row: int
    col: int


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Unit (d_row, d_col) step for this direction."""
        return _DELTAS[self]

    @property
    def reverse(self) -> "Direction":
        return _REVERSE[self]


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

_REVERSE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Arrow names and WASD, matched case-insensitively.
KEY_TO_DIRECTION = {
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
}


def in_bounds(cell: Cell, size: int = GRID_SIZE) -> bool:
    return 0 <= cell.row < size and 0 <= cell.col < size


def move(cell: Cell, direction: Direction) -> Cell:
    """Return the neighbour of ``cell`` in ``direction`` (not bounds-checked)."""
    d_row, d_col = direction.delta
    return Cell(cell.row + d_row, cell.col + d_col)


def direction_between(a: Cell, b: Cell) -> Optional[Direction]:
    """Direction leading from ``a`` to ``b``, or None if they are not orthogonal neighbours.

    Used to turn a tap on a cell into a directional command relative to the player.
    """
    delta = (b.row - a.row, b.col - a.col)
    for direction, step in _DELTAS.items():
        if step == delta:
            return direction
    return None


def build_path(start: Cell, sequence: Iterable[Direction]) -> List[Cell]:
    """Replay ``sequence`` from ``start``; the result has one more cell than moves."""
    cells = [start]
    cursor = start
    for step in sequence:
        cursor = move(cursor, step)
        cells.append(cursor)
    return cells


def direction_for_key(key: str) -> Optional[Direction]:
    """Translate a key name (arrow name or WASD) into a Direction."""
    return KEY_TO_DIRECTION.get(key.strip().lower())
