"""Shared constants and enumerations for the NumberLink solver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

Point = Tuple[int, int]


class Direction(str, Enum):
    """Cardinal directions a path can travel, in search order."""

    RIGHT = "RIGHT"
    DOWN = "DOWN"
    LEFT = "LEFT"
    UP = "UP"

    @property
    def delta(self) -> Point:
        return NEIGHBOR_STEPS[self]

    @classmethod
    def between(cls, origin: Point, target: Point) -> Optional["Direction"]:
        """Return the direction leading from ``origin`` to an adjacent ``target``."""

        diff = (target[0] - origin[0], target[1] - origin[1])
        for direction, step in NEIGHBOR_STEPS.items():
            if step == diff:
                return direction
        return None


class Marker(str, Enum):
    """Role of an open cell, used for rendering only."""

    START = "S"
    MID = "M"
    END = "E"
    NONE = " "


class CellState(str, Enum):
    """States a non-absent cell can be in."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    FILLED = "FILLED"


NEIGHBOR_STEPS: Dict[Direction, Point] = {
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.UP: (-1, 0),
}

# Ring around a cell, clockwise from the east neighbour. Even positions are
# the orthogonal neighbours, odd positions the diagonal ones.
AROUND_STEPS: Tuple[Point, ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)

# Link id of the synthetic blocker placed by the look-ahead check.
BLOCKER_LINK = -1

CLOSE_MARK = "*"


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def area(self) -> int:
        return self.rows * self.cols
