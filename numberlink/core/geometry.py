"""Pure coordinate helpers over a rectangular board."""

from __future__ import annotations

from typing import Iterator, Tuple

from .constants import AROUND_STEPS, NEIGHBOR_STEPS, Bounds, Direction, Point


def in_bounds(bounds: Bounds, point: Point) -> bool:
    return bounds.contains(point[0], point[1])


def neighbors(bounds: Bounds, point: Point) -> Iterator[Tuple[Direction, Point]]:
    """Yield ``(direction, point)`` for every in-bounds orthogonal neighbour.

    The order is right, down, left, up; the search relies on it being stable.
    """

    row, col = point
    for direction, (dr, dc) in NEIGHBOR_STEPS.items():
        nr, nc = row + dr, col + dc
        if bounds.contains(nr, nc):
            yield direction, (nr, nc)


def arounds(bounds: Bounds, point: Point) -> Iterator[Point]:
    """Yield the in-bounds cells of the 8-neighbourhood in ring order."""

    row, col = point
    for dr, dc in AROUND_STEPS:
        nr, nc = row + dr, col + dc
        if bounds.contains(nr, nc):
            yield (nr, nc)


def all_points(bounds: Bounds) -> Iterator[Point]:
    """Yield every cell in raster order."""

    for row in range(bounds.rows):
        for col in range(bounds.cols):
            yield (row, col)
