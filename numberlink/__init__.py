"""NumberLink puzzle solver package.

This package exposes the public API surface via:

- ``numberlink.core.models.PuzzleDefinition``: the parsed puzzle input.
- ``numberlink.engine.solver.NumberLinkSolver``: the backtracking search.
- ``numberlink.io.loader`` helpers: text and JSON puzzle loading.
"""

from .core.models import PuzzleDefinition
from .engine.solver import NumberLinkSolver, Outcome, SearchStats, SolveResult, SolverConfig, solve_puzzle
from .io.loader import load_puzzle, parse_puzzle

__all__ = [
    "PuzzleDefinition",
    "NumberLinkSolver",
    "Outcome",
    "SearchStats",
    "SolveResult",
    "SolverConfig",
    "solve_puzzle",
    "load_puzzle",
    "parse_puzzle",
]

__version__ = "0.1.0"
