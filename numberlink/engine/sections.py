"""Link-section bookkeeping: initial board set-up and single search steps."""

from __future__ import annotations

from ..core.constants import Direction, Marker, Point
from ..core.exceptions import BoardStateError
from ..core.models import LinkSection, PuzzleDefinition
from ..utils.logger import get_logger
from .board import Board
from .split_patterns import refresh_forced_checks


LOGGER = get_logger(__name__)


def open_cell(board: Board, point: Point, link: int, marker: Marker = Marker.NONE) -> None:
    """Open ``point`` for ``link`` and refresh the forced-check set around it."""

    board.open_at(point, link, marker)
    refresh_forced_checks(board, point)


def initialize_sections(definition: PuzzleDefinition) -> Board:
    """Build the starting board for ``definition``.

    One section is queued per consecutive anchor pair, every anchor is opened
    and sections whose anchors already touch are closed straight away.
    """

    board = Board(definition.bounds(), definition.names)
    for name, points in definition.items():
        link = board.link_id(name)
        for start, end in zip(points, points[1:]):
            board.add_section(LinkSection(name=name, start=start, end=end))
        open_cell(board, points[0], link, Marker.START)
        for point in points[1:-1]:
            open_cell(board, point, link, Marker.MID)
        open_cell(board, points[-1], link, Marker.END)

    closed = auto_close_all(board)
    LOGGER.debug(
        "Initialised %d sections, %d closed on set-up",
        definition.section_count(),
        closed,
    )
    return board


def auto_close_all(board: Board) -> int:
    """Close every pending section whose endpoints are adjacent.

    Closing a section never moves another section's endpoints, so a single
    pass over a snapshot of the pending list is enough.
    """

    closed = 0
    for section in list(board.pending):
        if close_connected_section(board, section):
            closed += 1
    return closed


def close_connected_section(board: Board, section: LinkSection) -> bool:
    """Close ``section`` if its start is one step from its end.

    An anchor shared with a still pending sibling stays open; the sibling is
    told it is now the last one at that anchor and closes it itself.
    """

    direction = Direction.between(section.start, section.end)
    if direction is None:
        return False

    if not section.has_prev and board.is_open(section.start):
        board.close_at(section.start)
    board.record_direction(section.start, direction)
    if not section.has_next and board.is_open(section.end):
        board.close_at(section.end)
    board.remove_section(section)

    if section.has_prev:
        previous = board.sibling_of(section, -1)
        if previous is not None:
            previous.has_next = False
    if section.has_next:
        following = board.sibling_of(section, +1)
        if following is not None:
            following.has_prev = False

    LOGGER.debug("Section %s closed", section)
    return True


def extend(
    board: Board,
    from_point: Point,
    to_point: Point,
    link_name: str,
    direction: Direction,
) -> Board:
    """Move the current section's open end from ``from_point`` to ``to_point``.

    Mutates and returns ``board``; callers hand in a fresh clone.
    """

    section = board.current_section
    if section is None or section.name != link_name or section.start != from_point:
        raise BoardStateError(
            f"Cannot extend '{link_name}' from {list(from_point)}: not the current section end"
        )
    link = board.link_id(link_name)
    board.close_at(from_point)
    board.record_direction(from_point, direction)
    open_cell(board, to_point, link)
    section.start = to_point
    close_connected_section(board, section)
    return board
