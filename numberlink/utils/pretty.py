"""Pretty-print helpers for NumberLink boards."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional

from ..core.constants import CLOSE_MARK, Direction

if TYPE_CHECKING:
    from ..engine.board import Board
    from ..engine.solver import SearchStats


BLANK = "   "
FILLER = " . "
FORCED_MARK = " o "
V_WALL = "|"
H_WALL = "---"
X_WALL = "+"

WALL_MARKS = {
    Direction.RIGHT: ">",
    Direction.LEFT: "<",
    Direction.DOWN: " v ",
    Direction.UP: " ^ ",
}


def cell_symbol(board: Board, row: int, col: int) -> str:
    status = board.status_at((row, col))
    if status is None:
        return FORCED_MARK if (row, col) in board.forced_checks else BLANK
    if status.is_filled:
        return FILLER
    mark = CLOSE_MARK if status.is_closed else status.marker.value
    return f"{board.link_name(status.link):>2}{mark}"


def format_board(board: Board) -> str:
    lines: List[str] = []
    for row in range(board.bounds.rows):
        if row > 0:
            walls = [
                WALL_MARKS.get(board.h_walls.get((row - 1, col)), H_WALL)
                for col in range(board.bounds.cols)
            ]
            lines.append(X_WALL.join(walls))
        parts: List[str] = []
        for col in range(board.bounds.cols):
            if col > 0:
                parts.append(WALL_MARKS.get(board.v_walls.get((row, col - 1)), V_WALL))
            parts.append(cell_symbol(board, row, col))
        lines.append("".join(parts))
    return "\n".join(lines)


def format_elapsed(elapsed: float) -> str:
    hours, rest = divmod(int(elapsed), 60 * 60)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_status(stats: SearchStats, elapsed: float = 0.0) -> str:
    return (
        f"tm:{format_elapsed(elapsed)}, br:{stats.pruned_branch}, al:{stats.attempts}, "
        f"pt:{stats.pruned_partition}, fd:{stats.pruned_forward}, ok:{stats.accepted}"
    )


def pretty_print_board(
    board: Board,
    stats: Optional[SearchStats] = None,
    elapsed: float = 0.0,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the board, preceded by the counter header when ``stats`` is given."""

    stream = stream or sys.stdout
    print(file=stream)
    if label:
        print(label, file=stream)
    if stats is not None:
        print(format_status(stats, elapsed), file=stream)
    print(format_board(board), file=stream)
    print(file=stream)
