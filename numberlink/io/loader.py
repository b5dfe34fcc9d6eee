"""Puzzle file loaders.

Two formats are understood. The line-oriented text format::

    # comment
    size 7
    link '1', [4,0], [4,4]
    link 'A', [0,6], [3,2], [2,2]

``size`` may also be given as ``size ROWS COLS``. The JSON format holds
``{"size": 7, "columns": 7, "links": {"1": [[4, 0], [4, 4]]}}`` with
``columns`` optional.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, List, Optional, Set

from ..core.constants import Point
from ..core.exceptions import PuzzleDefinitionError, PuzzleParseError
from ..core.models import PuzzleDefinition
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

MIN_SIZE = 1
MAX_SIZE = 99
LINK_NAME_LEN = 2

_SIZE_RE = re.compile(r"^size\s+(\S+)(?:\s+(\S+))?\s*$")
_LINK_RE = re.compile(r"^link\s+'([^']*)'\s*(.*)$")
_POINT_RE = re.compile(r",\s*\[\s*(\d+)\s*,\s*(\d+)\s*\]\s*")


def parse_puzzle(text: str, source: str = "<string>") -> PuzzleDefinition:
    """Parse the text puzzle format into a :class:`PuzzleDefinition`."""

    rows: Optional[int] = None
    cols: Optional[int] = None
    links: Dict[str, List[Point]] = {}
    seen: Set[Point] = set()

    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        method = line.split(None, 1)[0]
        if method == "size":
            rows, cols = _parse_size(line, source, line_no)
        elif method == "link":
            if rows is None or cols is None:
                raise PuzzleParseError(
                    "size must be specified before link definition.", source, line_no
                )
            name, points = _parse_link(line, rows, cols, source, line_no)
            if name in links:
                raise PuzzleParseError(f"{name} : link name already exists.", source, line_no)
            for point in points:
                if point in seen:
                    raise PuzzleParseError(
                        f"point [{point[0]},{point[1]}] already exists.", source, line_no
                    )
                seen.add(point)
            links[name] = points
        else:
            raise PuzzleParseError(f"{method} : 'size' or 'link' required.", source, line_no)

    if rows is None:
        raise PuzzleParseError("size definition missing.", source)
    try:
        definition = PuzzleDefinition(size=rows, links=links, columns=None if cols == rows else cols)
    except PuzzleDefinitionError as exc:
        raise PuzzleParseError(str(exc), source) from exc
    LOGGER.debug("Parsed %s: %sx%s board, %d links", source, rows, cols, len(links))
    return definition


def _parse_size(line: str, source: str, line_no: int):
    match = _SIZE_RE.match(line)
    if match is None:
        raise PuzzleParseError(f"{line} : syntax error.", source, line_no)
    values = []
    for token in match.groups():
        if token is None:
            continue
        if not token.isdigit() or not MIN_SIZE <= int(token) <= MAX_SIZE:
            raise PuzzleParseError(
                f"{token} : size must be between {MIN_SIZE} and {MAX_SIZE}.", source, line_no
            )
        values.append(int(token))
    rows = values[0]
    cols = values[1] if len(values) > 1 else rows
    return rows, cols


def _parse_link(line: str, rows: int, cols: int, source: str, line_no: int):
    match = _LINK_RE.match(line)
    if match is None:
        raise PuzzleParseError(f"{line} : link name must be quoted with '.", source, line_no)
    name, rest = match.group(1), match.group(2)
    if not 1 <= len(name) <= LINK_NAME_LEN:
        raise PuzzleParseError(
            f"{name} : link name length must be between 1 and {LINK_NAME_LEN}.", source, line_no
        )

    points: List[Point] = []
    position = 0
    while position < len(rest):
        point_match = _POINT_RE.match(rest, position)
        if point_match is None:
            raise PuzzleParseError(f"{rest[position:]} : malformed link point.", source, line_no)
        row, col = int(point_match.group(1)), int(point_match.group(2))
        if row >= rows:
            raise PuzzleParseError(
                f"{row} : row number must be between 0 and {rows - 1}.", source, line_no
            )
        if col >= cols:
            raise PuzzleParseError(
                f"{col} : column number must be between 0 and {cols - 1}.", source, line_no
            )
        points.append((row, col))
        position = point_match.end()

    if len(points) < 2:
        raise PuzzleParseError("link definition must have at least 2 points.", source, line_no)
    return name, points


def puzzle_from_jsonable(payload: dict, source: str = "<json>") -> PuzzleDefinition:
    try:
        size = payload["size"]
        links = {str(name): [tuple(p) for p in points] for name, points in payload["links"].items()}
        return PuzzleDefinition(size=size, links=links, columns=payload.get("columns"))
    except (KeyError, TypeError, AttributeError) as exc:
        raise PuzzleParseError(f"malformed puzzle document: {exc}", source) from exc
    except PuzzleDefinitionError as exc:
        raise PuzzleParseError(str(exc), source) from exc


def load_puzzle(path: Path | str) -> PuzzleDefinition:
    """Load a puzzle from a text or ``.json`` file."""

    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PuzzleParseError(f"invalid JSON: {exc}", str(path)) from exc
        return puzzle_from_jsonable(payload, source=str(path))
    return parse_puzzle(text, source=str(path))
