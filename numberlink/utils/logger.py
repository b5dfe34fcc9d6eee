"""Logging set-up shared by the solver modules and the CLI."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def resolve_level(level: Union[int, str, None], default: int = logging.INFO) -> int:
    """Turn ``"debug"``, ``"INFO"``, ``10`` or ``None`` into a logging level."""

    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[int, str, None] = logging.INFO) -> None:
    """Install a single stderr handler on the root logger.

    The search can visit millions of states, so per-step messages are only
    emitted at DEBUG level; INFO covers search start, progress and outcome.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "numberlink")
