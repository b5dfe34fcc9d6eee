"""Board representation and primitive mutators."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ..core.constants import (
    BLOCKER_LINK,
    Bounds,
    CellState,
    Direction,
    Marker,
    Point,
)
from ..core.exceptions import BoardStateError
from ..core.geometry import all_points
from ..core.models import FILLED, CellStatus, LinkSection


class Board:
    """Mutable search state: cell statuses, path directions, pending sections.

    Every container is private to the instance; :meth:`clone` copies them so a
    clone never shares mutable state with its origin. The link name table is
    immutable and therefore shared.
    """

    def __init__(self, bounds: Bounds, link_names: Sequence[str]) -> None:
        self.bounds = bounds
        self.link_names: Tuple[str, ...] = tuple(link_names)
        self.link_ids: Dict[str, int] = {name: i for i, name in enumerate(self.link_names)}
        self.cells: Dict[Point, CellStatus] = {}
        self.h_walls: Dict[Point, Direction] = {}
        self.v_walls: Dict[Point, Direction] = {}
        self.pending: List[LinkSection] = []
        self.forced_checks: Set[Point] = set()

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------
    def clone(self) -> "Board":
        twin = Board.__new__(Board)
        twin.bounds = self.bounds
        twin.link_names = self.link_names
        twin.link_ids = self.link_ids
        twin.cells = dict(self.cells)
        twin.h_walls = dict(self.h_walls)
        twin.v_walls = dict(self.v_walls)
        twin.pending = [section.copy() for section in self.pending]
        twin.forced_checks = set(self.forced_checks)
        return twin

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def status_at(self, point: Point) -> Optional[CellStatus]:
        return self.cells.get(point)

    def is_absent(self, point: Point) -> bool:
        return point not in self.cells

    def is_open(self, point: Point) -> bool:
        status = self.cells.get(point)
        return status is not None and status.state == CellState.OPEN

    def is_closed(self, point: Point) -> bool:
        status = self.cells.get(point)
        return status is not None and status.state == CellState.CLOSED

    def is_filled(self, point: Point) -> bool:
        status = self.cells.get(point)
        return status is not None and status.state == CellState.FILLED

    def is_closed_for(self, point: Point, link: int) -> bool:
        status = self.cells.get(point)
        return status is not None and status.state == CellState.CLOSED and status.link == link

    def absent_points(self) -> Iterator[Point]:
        for point in all_points(self.bounds):
            if point not in self.cells:
                yield point

    def is_covered(self) -> bool:
        return len(self.cells) == self.bounds.area

    def link_id(self, name: str) -> int:
        try:
            return self.link_ids[name]
        except KeyError:
            raise BoardStateError(f"Unknown link '{name}'") from None

    def link_name(self, link: int) -> str:
        if link == BLOCKER_LINK:
            return "0"
        return self.link_names[link]

    # ------------------------------------------------------------------
    # Cell mutators
    # ------------------------------------------------------------------
    def open_at(self, point: Point, link: int, marker: Marker = Marker.NONE) -> None:
        if self.is_closed(point):
            raise BoardStateError(f"Cannot open closed cell {list(point)}")
        self.cells[point] = CellStatus(CellState.OPEN, link, marker)

    def close_at(self, point: Point, link: Optional[int] = None) -> None:
        status = self.cells.get(point)
        if status is not None and status.state == CellState.CLOSED:
            raise BoardStateError(f"Cell {list(point)} is already closed")
        if link is None:
            if status is None or status.state != CellState.OPEN:
                raise BoardStateError(f"Cannot close cell {list(point)} without an open link")
            link = status.link
        self.cells[point] = CellStatus(CellState.CLOSED, link)

    def fill_at(self, point: Point) -> None:
        self.cells[point] = FILLED

    def record_direction(self, point: Point, direction: Direction) -> None:
        """Remember the direction the path travels when leaving ``point``.

        Horizontal moves are stored in ``v_walls`` and vertical moves in
        ``h_walls``, keyed by the upper/left cell of the pair.
        """

        row, col = point
        if direction == Direction.RIGHT:
            self.v_walls[point] = direction
        elif direction == Direction.LEFT:
            self.v_walls[(row, col - 1)] = direction
        elif direction == Direction.DOWN:
            self.h_walls[point] = direction
        elif direction == Direction.UP:
            self.h_walls[(row - 1, col)] = direction

    # ------------------------------------------------------------------
    # Section bookkeeping
    # ------------------------------------------------------------------
    @property
    def current_section(self) -> Optional[LinkSection]:
        return self.pending[0] if self.pending else None

    def add_section(self, section: LinkSection) -> None:
        last = self.pending[-1] if self.pending else None
        if last is not None and last.name == section.name:
            last.has_next = True
            section.has_prev = True
            section.index = last.index + 1
        self.pending.append(section)

    def remove_section(self, section: LinkSection) -> None:
        self.pending.remove(section)

    def sibling_of(self, section: LinkSection, offset: int) -> Optional[LinkSection]:
        """Return the pending section of the same link at ``index + offset``."""

        wanted = section.index + offset
        for other in self.pending:
            if other.name == section.name and other.index == wanted:
                return other
        return None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_jsonable(self) -> dict:
        cells: List[List[Optional[dict]]] = []
        for row in range(self.bounds.rows):
            serialized_row: List[Optional[dict]] = []
            for col in range(self.bounds.cols):
                status = self.cells.get((row, col))
                if status is None:
                    serialized_row.append(None)
                    continue
                serialized_row.append(
                    {
                        "state": status.state.value,
                        "link": None if status.is_filled else self.link_name(status.link),
                        "marker": status.marker.value.strip() or None,
                    }
                )
            cells.append(serialized_row)
        return {
            "rows": self.bounds.rows,
            "cols": self.bounds.cols,
            "cells": cells,
            "h_walls": [[r, c, d.value] for (r, c), d in sorted(self.h_walls.items())],
            "v_walls": [[r, c, d.value] for (r, c), d in sorted(self.v_walls.items())],
            "pending": [str(section) for section in self.pending],
        }
