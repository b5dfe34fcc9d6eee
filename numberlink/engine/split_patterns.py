"""Neighbourhood shapes that mark a cell as a look-ahead candidate.

An empty cell is worth re-checking one move ahead when it is the only link
between two groups of empty cells around it. The 8 cells around a point are
read as a ring (east first, clockwise) and packed into an 8-bit code, a bit
being set when the ring cell is out of bounds or not absent. Consecutive ring
cells are orthogonally adjacent, so the empty ring cells fall into maximal
cyclic runs. A run only matters if it holds an orthogonal neighbour of the
centre; a lone empty diagonal is not adjacent to the centre and is unaffected
by it. Two or more such runs mean the centre is a cut point.
"""

from __future__ import annotations

from typing import FrozenSet, List

from ..core.constants import AROUND_STEPS, Point
from ..core.geometry import arounds
from .board import Board

RING_SIZE = len(AROUND_STEPS)
FULL_RING = (1 << RING_SIZE) - 1


def empty_runs(code: int) -> List[List[int]]:
    """Return the maximal cyclic runs of empty ring positions in ``code``."""

    if code == 0:
        return [list(range(RING_SIZE))]
    if code == FULL_RING:
        return []
    # Start scanning right after an occupied position so no run wraps.
    first_occupied = next(i for i in range(RING_SIZE) if code & (1 << i))
    runs: List[List[int]] = []
    current: List[int] = []
    for step in range(1, RING_SIZE + 1):
        position = (first_occupied + step) % RING_SIZE
        if code & (1 << position):
            if current:
                runs.append(current)
                current = []
        else:
            current.append(position)
    if current:
        runs.append(current)
    return runs


def is_split_code(code: int) -> bool:
    orthogonal_runs = [run for run in empty_runs(code) if any(pos % 2 == 0 for pos in run)]
    return len(orthogonal_runs) >= 2


SPLIT_CODES: FrozenSet[int] = frozenset(
    code for code in range(FULL_RING + 1) if is_split_code(code)
)


def split_code_at(board: Board, point: Point) -> int:
    code = 0
    row, col = point
    for i, (dr, dc) in enumerate(AROUND_STEPS):
        nr, nc = row + dr, col + dc
        if not board.bounds.contains(nr, nc) or (nr, nc) in board.cells:
            code |= 1 << i
    return code


def has_split_at(board: Board, point: Point) -> bool:
    return split_code_at(board, point) in SPLIT_CODES


def refresh_forced_checks(board: Board, point: Point) -> None:
    """Update the forced-check set after ``point`` stopped being empty."""

    board.forced_checks.discard(point)
    for around in arounds(board.bounds, point):
        if not board.is_absent(around):
            continue
        if has_split_at(board, around):
            board.forced_checks.add(around)
        else:
            board.forced_checks.discard(around)
