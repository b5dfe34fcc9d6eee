"""Data models supporting the NumberLink solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Sequence, Set, Tuple

from .constants import Bounds, CellState, Marker, Point
from .exceptions import PuzzleDefinitionError


@dataclass(frozen=True)
class CellStatus:
    """State of a non-absent cell.

    Absent cells have no status at all; the board simply has no entry for them.
    """

    state: CellState
    link: int = -1
    marker: Marker = Marker.NONE

    @property
    def is_open(self) -> bool:
        return self.state == CellState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state == CellState.CLOSED

    @property
    def is_filled(self) -> bool:
        return self.state == CellState.FILLED


FILLED = CellStatus(CellState.FILLED)


@dataclass
class LinkSection:
    """A not yet connected stretch of a link between two consecutive anchors."""

    name: str
    start: Point
    end: Point
    index: int = 0
    has_next: bool = False
    has_prev: bool = False

    def copy(self) -> "LinkSection":
        return LinkSection(
            name=self.name,
            start=self.start,
            end=self.end,
            index=self.index,
            has_next=self.has_next,
            has_prev=self.has_prev,
        )

    def __str__(self) -> str:
        return f"{self.name}:{list(self.start)}-{list(self.end)}"


@dataclass(frozen=True)
class PuzzleDefinition:
    """Board size plus the ordered anchor list of every named link.

    ``columns`` defaults to ``size`` so the usual square puzzles only need one
    number. Anchors are normalised to ``(row, col)`` tuples and validated on
    construction. Equality and hashing use the normalised anchors, so a
    definition built from lists equals one built from tuples.
    """

    size: int
    links: Mapping[str, Sequence[Point]]
    columns: Optional[int] = None
    _normalized: Dict[str, Tuple[Point, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._normalized.update(self._validate())

    @property
    def rows(self) -> int:
        return self.size

    @property
    def cols(self) -> int:
        return self.size if self.columns is None else self.columns

    def bounds(self) -> Bounds:
        return Bounds(rows=self.rows, cols=self.cols)

    def anchors(self, name: str) -> Tuple[Point, ...]:
        return self._normalized[name]

    def items(self) -> Iterable[Tuple[str, Tuple[Point, ...]]]:
        return self._normalized.items()

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._normalized)

    def section_count(self) -> int:
        return sum(len(points) - 1 for points in self._normalized.values())

    def _key(self) -> Tuple[int, int, Tuple[Tuple[str, Tuple[Point, ...]], ...]]:
        return (self.rows, self.cols, tuple(self._normalized.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleDefinition):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _validate(self) -> Dict[str, Tuple[Point, ...]]:
        if not isinstance(self.size, int) or self.size < 1:
            raise PuzzleDefinitionError(f"Board size must be a positive integer, got {self.size!r}")
        if self.columns is not None and (not isinstance(self.columns, int) or self.columns < 1):
            raise PuzzleDefinitionError(
                f"Column count must be a positive integer, got {self.columns!r}"
            )
        if not self.links:
            raise PuzzleDefinitionError("Puzzle defines no links")

        bounds = self.bounds()
        seen: Set[Point] = set()
        normalized: Dict[str, Tuple[Point, ...]] = {}
        for name, raw_points in self.links.items():
            if not isinstance(name, str) or not name:
                raise PuzzleDefinitionError(f"Link name must be a non-empty string, got {name!r}")
            points = []
            for raw in raw_points:
                try:
                    row, col = raw
                    point = (int(row), int(col))
                except (TypeError, ValueError) as exc:
                    raise PuzzleDefinitionError(
                        f"Link '{name}' has a malformed point {raw!r}"
                    ) from exc
                if not bounds.contains(*point):
                    raise PuzzleDefinitionError(
                        f"Link '{name}' point {list(point)} is outside the "
                        f"{bounds.rows}x{bounds.cols} board"
                    )
                if point in seen:
                    raise PuzzleDefinitionError(f"Point {list(point)} already exists")
                seen.add(point)
                points.append(point)
            if len(points) < 2:
                raise PuzzleDefinitionError(f"Link '{name}' must have at least 2 points")
            normalized[name] = tuple(points)
        return normalized
