"""Depth-first search that extends one link section at a time.

The search always works on the first pending section. Before each step the
board is screened by the partition and look-ahead checks; each candidate
move is screened by the branch check. Every move is applied to a clone, so
backtracking is just dropping a frame from the search stack.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from ..core.constants import Direction, Point
from ..core.geometry import neighbors
from ..core.models import LinkSection, PuzzleDefinition
from ..utils.logger import get_logger
from .board import Board
from .checks import PruneReason, forward_failure, is_branch_safe, partition_failure
from .sections import extend, initialize_sections


LOGGER = get_logger(__name__)


class Outcome(str, Enum):
    SOLVED = "SOLVED"
    NO_SOLUTION = "NO_SOLUTION"
    ABORTED = "ABORTED"


class EventKind(str, Enum):
    STEP = "STEP"
    PRUNED = "PRUNED"
    PROGRESS = "PROGRESS"
    SOLVED = "SOLVED"
    ABORTED = "ABORTED"


@dataclass
class SearchStats:
    """Counters updated while the search runs; safe to read at any time."""

    attempts: int = 0
    pruned_branch: int = 0
    pruned_partition: int = 0
    pruned_forward: int = 0
    accepted: int = 0
    dead_end: int = 0
    dead_partition: int = 0
    split_link: int = 0
    forward_dead_partition: int = 0
    multi_split: int = 0

    def record_prune(self, reason: PruneReason) -> None:
        if reason == PruneReason.BRANCH:
            self.pruned_branch += 1
        elif reason.is_partition:
            self.pruned_partition += 1
        else:
            self.pruned_forward += 1
        detail = {
            PruneReason.DEAD_END: "dead_end",
            PruneReason.DEAD_PARTITION: "dead_partition",
            PruneReason.SPLIT_LINK: "split_link",
            PruneReason.FORWARD_DEAD_PARTITION: "forward_dead_partition",
            PruneReason.MULTI_SPLIT: "multi_split",
        }.get(reason)
        if detail:
            setattr(self, detail, getattr(self, detail) + 1)

    def as_dict(self) -> dict:
        return dict(self.__dict__)


@dataclass
class SearchEvent:
    kind: EventKind
    board: Board
    stats: SearchStats
    section: Optional[LinkSection] = None
    point: Optional[Point] = None
    direction: Optional[Direction] = None
    reason: Optional[PruneReason] = None


Tracer = Callable[[SearchEvent], None]
ProgressCallback = Callable[[SearchStats, Board], None]


@dataclass
class SolverConfig:
    """Knobs for a single search run.

    ``max_steps`` caps the number of search calls; hitting it ends the run as
    :attr:`Outcome.ABORTED`. ``progress_interval`` is counted in accepted
    steps, ``0`` disables progress reports.
    """

    max_steps: Optional[int] = None
    progress_interval: int = 1000
    tracer: Optional[Tracer] = None
    on_progress: Optional[ProgressCallback] = None


@dataclass
class SolveResult:
    outcome: Outcome
    board: Optional[Board]
    stats: SearchStats = field(default_factory=SearchStats)
    elapsed: float = 0.0

    @property
    def solved(self) -> bool:
        return self.outcome == Outcome.SOLVED


@dataclass
class _Frame:
    """An accepted board and the moves left to try from its open end."""

    board: Board
    section: LinkSection
    origin: Point
    moves: Iterator[Tuple[Direction, Point]]

    @classmethod
    def around(cls, board: Board) -> "_Frame":
        section = board.current_section
        return cls(
            board=board,
            section=section,
            origin=section.start,
            moves=neighbors(board.bounds, section.start),
        )


class NumberLinkSolver:
    """Backtracking solver for one puzzle definition."""

    def __init__(self, definition: PuzzleDefinition, config: Optional[SolverConfig] = None) -> None:
        self.definition = definition
        self.config = config or SolverConfig()
        self.stats = SearchStats()
        self.initial_board: Board = initialize_sections(definition)
        self._solution: Optional[Board] = None
        self._started = 0.0

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started if self._started else 0.0

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        self.stats = SearchStats()
        self._solution = None
        self._started = time.monotonic()
        LOGGER.info(
            "Solving %sx%s board with %d links, %d pending sections",
            self.definition.rows,
            self.definition.cols,
            len(self.definition.names),
            len(self.initial_board.pending),
        )
        outcome = self._search(self.initial_board)
        elapsed = self.elapsed
        if outcome == Outcome.SOLVED:
            LOGGER.info("Solved after %d attempts (%.2fs)", self.stats.attempts, elapsed)
        elif outcome == Outcome.ABORTED:
            LOGGER.warning(
                "Search aborted after %d attempts (limit %s)", self.stats.attempts, self.config.max_steps
            )
        else:
            LOGGER.info("No solution after %d attempts (%.2fs)", self.stats.attempts, elapsed)
        return SolveResult(
            outcome=outcome,
            board=self._solution,
            stats=self.stats,
            elapsed=elapsed,
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _search(self, root: Board) -> Outcome:
        """Depth-first search over an explicit stack of frames.

        Each frame holds an accepted board and the moves still to try from
        the current section's open end, so search depth is not bounded by
        the interpreter's recursion limit.
        """

        outcome = self._enter(root)
        if outcome is not None:
            return outcome
        stack: List[_Frame] = [_Frame.around(root)]
        while stack:
            frame = stack[-1]
            move = next(frame.moves, None)
            if move is None:
                stack.pop()
                continue

            direction, target = move
            board, section = frame.board, frame.section
            if not board.is_absent(target):
                continue
            if not is_branch_safe(board, target):
                self._prune(board, PruneReason.BRANCH, section=section, point=target)
                continue

            child = extend(board.clone(), frame.origin, target, section.name, direction)
            if self.config.tracer is not None:
                self._emit(EventKind.STEP, child, section=section, point=target, direction=direction)
            outcome = self._enter(child)
            if outcome is None:
                stack.append(_Frame.around(child))
            elif outcome != Outcome.NO_SOLUTION:
                return outcome
        return Outcome.NO_SOLUTION

    def _enter(self, board: Board) -> Optional[Outcome]:
        """Screen a freshly reached board.

        Returns the outcome when the board ends its branch, ``None`` when it
        was accepted and its moves should be explored.
        """

        stats = self.stats
        stats.attempts += 1
        if self.config.max_steps is not None and stats.attempts > self.config.max_steps:
            self._emit(EventKind.ABORTED, board)
            return Outcome.ABORTED

        if board.current_section is None:
            if board.is_covered():
                self._solution = board
                self._emit(EventKind.SOLVED, board)
                return Outcome.SOLVED
            # Every link is done but some cells are still empty.
            self._prune(board, PruneReason.DEAD_PARTITION)
            return Outcome.NO_SOLUTION

        reason = partition_failure(board)
        if reason is None:
            reason = forward_failure(board)
        if reason is not None:
            self._prune(board, reason)
            return Outcome.NO_SOLUTION

        self._accept(board)
        return None

    # ------------------------------------------------------------------
    # Instrumentation
    # ------------------------------------------------------------------
    def _prune(
        self,
        board: Board,
        reason: PruneReason,
        section: Optional[LinkSection] = None,
        point: Optional[Point] = None,
    ) -> None:
        self.stats.record_prune(reason)
        if LOGGER.isEnabledFor(logging.DEBUG):
            current = section or board.current_section
            LOGGER.debug(
                "Pruned (%s) at %s for %s",
                reason.value,
                list(point) if point else "-",
                current or "-",
            )
        if self.config.tracer is not None:
            self._emit(EventKind.PRUNED, board, section=section, point=point, reason=reason)

    def _accept(self, board: Board) -> None:
        stats = self.stats
        stats.accepted += 1
        interval = self.config.progress_interval
        if interval > 0 and stats.accepted % interval == 0:
            LOGGER.info(
                "Progress: %d accepted, %d attempts, %d pending sections",
                stats.accepted,
                stats.attempts,
                len(board.pending),
            )
            if self.config.on_progress is not None:
                self.config.on_progress(stats, board)
            self._emit(EventKind.PROGRESS, board)

    def _emit(self, kind: EventKind, board: Board, **details) -> None:
        tracer = self.config.tracer
        if tracer is None:
            return
        tracer(SearchEvent(kind=kind, board=board, stats=self.stats, **details))


def solve_puzzle(definition: PuzzleDefinition, **options) -> SolveResult:
    """Solve ``definition`` with a one-off :class:`NumberLinkSolver`.

    Keyword arguments are forwarded to :class:`SolverConfig`.
    """

    return NumberLinkSolver(definition, SolverConfig(**options)).solve()
