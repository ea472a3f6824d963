"""Procedural dance (path) generation on the bounded grid."""

from __future__ import annotations

import logging
import random
from typing import List, Sequence

from beecool.core.config import DEFAULT_CONFIG
from beecool.core.grid import GRID_SIZE, Cell, Direction, build_path, in_bounds, move

logger = logging.getLogger(__name__)

STARTING_STEPS = DEFAULT_CONFIG.starting_steps
NEXT_LEVEL_ATTEMPTS = DEFAULT_CONFIG.next_level_attempts


def random_start_cell(rng: random.Random, size: int = GRID_SIZE) -> Cell:
    return Cell(rng.randrange(size), rng.randrange(size))


def extend(
    sequence: Sequence[Direction],
    start: Cell,
    rng: random.Random,
    size: int = GRID_SIZE,
) -> List[Direction]:
    """Return ``sequence`` with exactly one more direction appended.

    Candidates are the in-bounds moves from the current head. Doubling back is
    dropped while another option exists, and moves onto unvisited cells win
    whenever there are any. The final pick is uniform among what remains.
    """
    cells = build_path(start, sequence)
    visited = set(cells)
    head = cells[-1]

    options = [d for d in Direction if in_bounds(move(head, d), size)]
    if sequence and len(options) > 1:
        backwards = sequence[-1].reverse
        options = [d for d in options if d is not backwards]

    fresh = [d for d in options if move(head, d) not in visited]
    if fresh:
        options = fresh

    return [*sequence, rng.choice(options)]


def build_sequence(
    start: Cell,
    length: int,
    rng: random.Random,
    size: int = GRID_SIZE,
) -> List[Direction]:
    sequence: List[Direction] = []
    for _ in range(length):
        sequence = extend(sequence, start, rng, size)
    return sequence


def build_initial_sequence(
    start: Cell,
    rng: random.Random,
    size: int = GRID_SIZE,
    starting_steps: int = STARTING_STEPS,
) -> List[Direction]:
    return build_sequence(start, starting_steps, rng, size)


def build_next_level_sequence(
    previous: Sequence[Direction],
    start: Cell,
    rng: random.Random,
    size: int = GRID_SIZE,
    attempts: int = NEXT_LEVEL_ATTEMPTS,
) -> List[Direction]:
    """Generate a sequence one step longer than ``previous`` from a new start cell.

    A candidate that begins with the whole previous dance is regenerated, up to
    ``attempts`` times; after that the last candidate is accepted as-is.
    """
    target = len(previous) + 1
    candidate = build_sequence(start, target, rng, size)
    for _ in range(max(0, attempts - 1)):
        if list(candidate[: len(previous)]) != list(previous):
            return candidate
        candidate = build_sequence(start, target, rng, size)
    if list(candidate[: len(previous)]) == list(previous):
        logger.debug("Accepting repeated dance prefix after %d attempts", attempts)
    return candidate
