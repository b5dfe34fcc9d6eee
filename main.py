"""CLI entrypoint for the NumberLink solver."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from numberlink.core.exceptions import PuzzleDefinitionError
from numberlink.engine.solver import NumberLinkSolver, Outcome, SearchEvent, SolverConfig
from numberlink.engine.validator import SolutionValidator
from numberlink.io.loader import load_puzzle
from numberlink.utils.logger import configure_logging
from numberlink.utils.pretty import pretty_print_board

EXIT_CODES = {
    Outcome.SOLVED: 0,
    Outcome.NO_SOLUTION: 1,
    Outcome.ABORTED: 2,
}
EXIT_INVALID_INPUT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve NumberLink puzzles by constraint-pruned backtracking",
    )
    parser.add_argument("puzzle", type=Path, help="Puzzle file (text format or .json)")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Abort the search after this many search calls",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=1000,
        help="Print the board every N accepted steps (0 disables)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the board at every step and pruning decision",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.max_steps is not None and args.max_steps < 1:
        parser.error("--max-steps must be positive")
    if args.progress_every < 0:
        parser.error("--progress-every cannot be negative")

    try:
        definition = load_puzzle(args.puzzle)
    except (OSError, PuzzleDefinitionError) as exc:
        print(f"error : {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    solver: NumberLinkSolver

    def show_progress(stats, board) -> None:
        pretty_print_board(board, stats, solver.elapsed)

    def trace(event: SearchEvent) -> None:
        detail = event.reason.value if event.reason else ""
        where = list(event.point) if event.point else ""
        pretty_print_board(
            event.board,
            event.stats,
            solver.elapsed,
            label=f"----- {event.kind.value} {detail} {where} -----",
        )

    config = SolverConfig(
        max_steps=args.max_steps,
        progress_interval=args.progress_every,
        tracer=trace if args.trace else None,
        on_progress=show_progress,
    )
    solver = NumberLinkSolver(definition, config)
    pretty_print_board(solver.initial_board, solver.stats)

    result = solver.solve()

    if result.board is not None:
        pretty_print_board(result.board, result.stats, result.elapsed, label="----- solved -----")
        validation = SolutionValidator().validate(result.board, definition)
        messages = validation.messages
    else:
        label = "no solution" if result.outcome == Outcome.NO_SOLUTION else "search aborted"
        print(f"\n----- {label} -----")
        pretty_print_board(solver.initial_board, result.stats, result.elapsed)
        messages = []

    if args.output:
        payload: Dict[str, Any] = {
            "puzzle": str(args.puzzle),
            "outcome": result.outcome.value,
            "elapsed": round(result.elapsed, 3),
            "stats": result.stats.as_dict(),
            "board": result.board.to_jsonable() if result.board is not None else None,
            "validation": messages,
        }
        args.output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    return EXIT_CODES[result.outcome]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
