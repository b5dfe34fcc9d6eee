"""Pruning oracles consulted by the search before and during each step.

Each check answers whether a board can still lead to a full covering. They
never touch the board they are given; flood fills run on clones where
visited cells are marked FILLED.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Set

from ..core.constants import BLOCKER_LINK, Point
from ..core.geometry import all_points, neighbors
from ..core.models import LinkSection
from .board import Board


class PruneReason(str, Enum):
    """Why a board or a move was rejected."""

    BRANCH = "BRANCH"
    DEAD_END = "DEAD_END"
    DEAD_PARTITION = "DEAD_PARTITION"
    SPLIT_LINK = "SPLIT_LINK"
    FORWARD_DEAD_PARTITION = "FORWARD_DEAD_PARTITION"
    MULTI_SPLIT = "MULTI_SPLIT"

    @property
    def is_partition(self) -> bool:
        return self in (PruneReason.DEAD_END, PruneReason.DEAD_PARTITION, PruneReason.SPLIT_LINK)

    @property
    def is_forward(self) -> bool:
        return self in (PruneReason.FORWARD_DEAD_PARTITION, PruneReason.MULTI_SPLIT)


# ----------------------------------------------------------------------
# Branch check
# ----------------------------------------------------------------------
def is_branch_safe(board: Board, candidate: Point) -> bool:
    """Reject a step that would make the path touch a closed cell of its own link."""

    section = board.current_section
    if section is None:
        return True
    link = board.link_id(section.name)
    for _, neighbor in neighbors(board.bounds, candidate):
        if board.is_closed_for(neighbor, link):
            return False
    return True


# ----------------------------------------------------------------------
# Partition check
# ----------------------------------------------------------------------
def _fill_region(scratch: Board, seed: Point, exits: Set[Point]) -> bool:
    """Flood one region of absent cells, collecting its open exits.

    Returns False as soon as a cell with at most one non-closed neighbour is
    met: no path can pass through it.
    """

    stack = [seed]
    scratch.fill_at(seed)
    while stack:
        point = stack.pop()
        free_count = 0
        for _, neighbor in neighbors(scratch.bounds, point):
            if scratch.is_closed(neighbor):
                continue
            free_count += 1
            if scratch.is_open(neighbor):
                exits.add(neighbor)
        if free_count <= 1:
            return False
        for _, neighbor in neighbors(scratch.bounds, point):
            if scratch.is_absent(neighbor):
                scratch.fill_at(neighbor)
                stack.append(neighbor)
    return True


def _strike_served(sections: List[LinkSection], unserved: List[LinkSection], exits: Set[Point]) -> bool:
    """Strike every section with both endpoints in ``exits`` off ``unserved``."""

    served = False
    for section in sections:
        if section.start in exits and section.end in exits:
            served = True
            if section in unserved:
                unserved.remove(section)
    return served


def partition_failure(board: Board) -> Optional[PruneReason]:
    """Return why the empty regions of ``board`` cannot be covered, if they cannot."""

    scratch = board.clone()
    unserved = list(board.pending)
    for point in all_points(board.bounds):
        if not scratch.is_absent(point):
            continue
        exits: Set[Point] = set()
        if not _fill_region(scratch, point, exits):
            return PruneReason.DEAD_END
        if not _strike_served(board.pending, unserved, exits):
            return PruneReason.DEAD_PARTITION
    if unserved:
        return PruneReason.SPLIT_LINK
    return None


def is_partition_feasible(board: Board) -> bool:
    return partition_failure(board) is None


# ----------------------------------------------------------------------
# Forward-one check
# ----------------------------------------------------------------------
def _fill_region_forward(scratch: Board, seed: Point, exits: Set[Point]) -> None:
    stack = [seed]
    scratch.fill_at(seed)
    while stack:
        point = stack.pop()
        for _, neighbor in neighbors(scratch.bounds, point):
            if scratch.is_open(neighbor):
                exits.add(neighbor)
            elif scratch.is_absent(neighbor):
                scratch.fill_at(neighbor)
                stack.append(neighbor)


def forward_failure_at(board: Board, blocked: Point) -> Optional[PruneReason]:
    """Probe what happens if ``blocked`` is taken by a path one move from now."""

    scratch = board.clone()
    scratch.close_at(blocked, BLOCKER_LINK)
    unserved = list(board.pending)
    for point in all_points(board.bounds):
        if not scratch.is_absent(point):
            continue
        exits: Set[Point] = set()
        _fill_region_forward(scratch, point, exits)
        if not exits:
            return PruneReason.FORWARD_DEAD_PARTITION
        _strike_served(board.pending, unserved, exits)
    # Only one section can run through the blocked cell.
    if len(unserved) > 1:
        return PruneReason.MULTI_SPLIT
    return None


def forward_failure(board: Board) -> Optional[PruneReason]:
    for point in sorted(board.forced_checks):
        reason = forward_failure_at(board, point)
        if reason is not None:
            return reason
    return None


def is_forward_one_feasible(board: Board) -> bool:
    return forward_failure(board) is None
