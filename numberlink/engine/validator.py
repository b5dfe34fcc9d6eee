"""Deterministic rule validation for solved boards."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from ..core.constants import Point
from ..core.exceptions import ValidationError
from ..core.geometry import all_points
from ..core.models import PuzzleDefinition
from ..utils.logger import get_logger
from .board import Board


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class SolutionValidator:
    """Runs deterministic validation over a final board."""

    def validate(self, board: Board, definition: PuzzleDefinition) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_all_closed(board)
            edges = self._collect_edges(board)
            self._check_edge_links(board, edges)
            for name, anchors in definition.items():
                self._check_link_path(board, name, anchors, edges)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_all_closed(self, board: Board) -> None:
        for point in all_points(board.bounds):
            if not board.is_closed(point):
                raise ValidationError(f"Cell {list(point)} is not closed")

    @staticmethod
    def _collect_edges(board: Board) -> Dict[Point, Set[Point]]:
        edges: Dict[Point, Set[Point]] = defaultdict(set)
        pairs: List[Tuple[Point, Point]] = []
        for (r, c) in board.v_walls:
            pairs.append(((r, c), (r, c + 1)))
        for (r, c) in board.h_walls:
            pairs.append(((r, c), (r + 1, c)))
        for a, b in pairs:
            if not (board.bounds.contains(*a) and board.bounds.contains(*b)):
                raise ValidationError(f"Path edge {list(a)}-{list(b)} leaves the board")
            edges[a].add(b)
            edges[b].add(a)
        return edges

    def _check_edge_links(self, board: Board, edges: Dict[Point, Set[Point]]) -> None:
        for point, others in edges.items():
            link = board.status_at(point).link
            for other in others:
                if board.status_at(other).link != link:
                    raise ValidationError(
                        f"Path edge {list(point)}-{list(other)} joins different links"
                    )
            if len(others) > 2:
                raise ValidationError(f"Path branches at {list(point)}")

    def _check_link_path(
        self,
        board: Board,
        name: str,
        anchors: Tuple[Point, ...],
        edges: Dict[Point, Set[Point]],
    ) -> None:
        link = board.link_id(name)
        cells = {point for point, status in board.cells.items() if status.link == link}
        first, last = anchors[0], anchors[-1]
        if len(edges.get(first, ())) != 1 or len(edges.get(last, ())) != 1:
            raise ValidationError(f"Link '{name}' does not end at its first and last anchors")

        path = [first]
        previous = None
        current = first
        while current != last:
            following = [p for p in edges[current] if p != previous]
            if len(following) != 1:
                raise ValidationError(f"Link '{name}' breaks off at {list(current)}")
            previous, current = current, following[0]
            if current in path:
                raise ValidationError(f"Link '{name}' loops back to {list(current)}")
            path.append(current)

        if set(path) != cells:
            stray = sorted(cells - set(path))
            raise ValidationError(f"Link '{name}' has cells off its path: {stray}")

        order = [path.index(anchor) for anchor in anchors]
        if order != sorted(order):
            raise ValidationError(f"Link '{name}' visits its anchors out of order")
