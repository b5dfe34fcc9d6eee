import inspect
import sys
import unittest
from typing import List

from numberlink.core.constants import CellState, Direction
from numberlink.core.exceptions import PuzzleDefinitionError
from numberlink.core.geometry import all_points
from numberlink.core.models import PuzzleDefinition
from numberlink.engine.checks import PruneReason
from numberlink.engine.solver import (
    EventKind,
    NumberLinkSolver,
    Outcome,
    SearchEvent,
    SearchStats,
    SolverConfig,
    solve_puzzle,
)
from numberlink.engine.validator import SolutionValidator
from numberlink.io.loader import parse_puzzle

ROWS_PUZZLE = {"A": [(0, 0), (0, 2)], "B": [(1, 0), (1, 2)], "C": [(2, 0), (2, 2)]}

FOUR_BY_FOUR = {
    "A": [(0, 0), (0, 3)],
    "B": [(1, 0), (3, 3)],
    "C": [(2, 0), (2, 2)],
    "D": [(3, 0), (3, 2)],
}

MID_ANCHOR_PUZZLE = {"A": [(0, 0), (0, 2), (2, 2)], "B": [(1, 0), (1, 1)], "C": [(2, 0), (2, 1)]}


def rows_puzzle_text(size: int) -> str:
    lines = [f"size {size}"]
    lines += [f"link '{row}', [{row},0], [{row},{size - 1}]" for row in range(size)]
    return "\n".join(lines) + "\n"


class SolverOutcomeTests(unittest.TestCase):
    def test_adjacent_anchors_solve_without_search(self) -> None:
        result = solve_puzzle(PuzzleDefinition(1, {"A": [(0, 0), (0, 1)]}, columns=2))
        self.assertEqual(result.outcome, Outcome.SOLVED)
        self.assertTrue(result.solved)
        self.assertEqual(result.stats.attempts, 1)
        self.assertEqual(result.stats.accepted, 0)

    def test_uncoverable_board_has_no_solution(self) -> None:
        result = solve_puzzle(PuzzleDefinition(2, {"A": [(0, 0), (1, 1)]}))
        self.assertEqual(result.outcome, Outcome.NO_SOLUTION)
        self.assertIsNone(result.board)
        self.assertEqual(result.stats.attempts, 3)
        self.assertEqual(result.stats.accepted, 1)
        self.assertEqual(result.stats.pruned_partition, 2)
        self.assertEqual(result.stats.dead_partition, 2)

    def test_rows_puzzle_is_solved_in_order(self) -> None:
        result = solve_puzzle(PuzzleDefinition(3, ROWS_PUZZLE))
        self.assertEqual(result.outcome, Outcome.SOLVED)
        stats = result.stats
        self.assertEqual(stats.attempts, 4)
        self.assertEqual(stats.accepted, 3)
        self.assertEqual(stats.pruned_branch + stats.pruned_partition + stats.pruned_forward, 0)

        board = result.board
        for point in all_points(board.bounds):
            self.assertTrue(board.is_closed(point), point)
        self.assertEqual(board.pending, [])
        self.assertEqual(
            board.v_walls,
            {(r, c): Direction.RIGHT for r in range(3) for c in range(2)},
        )
        self.assertEqual(board.h_walls, {})

    def test_single_link_cannot_snake_without_touching_itself(self) -> None:
        result = solve_puzzle(PuzzleDefinition(3, {"A": [(0, 0), (2, 2)]}))
        self.assertEqual(result.outcome, Outcome.NO_SOLUTION)
        self.assertGreater(result.stats.pruned_partition, 0)

    def test_solution_passes_validation(self) -> None:
        definition = PuzzleDefinition(4, FOUR_BY_FOUR)
        result = solve_puzzle(definition)
        self.assertEqual(result.outcome, Outcome.SOLVED)
        validation = SolutionValidator().validate(result.board, definition)
        self.assertTrue(validation.ok, validation.messages)

    def test_shared_anchor_is_passed_through_and_closed(self) -> None:
        definition = PuzzleDefinition(3, MID_ANCHOR_PUZZLE)
        result = solve_puzzle(definition)
        self.assertEqual(result.outcome, Outcome.SOLVED)
        self.assertEqual(result.stats.attempts, 3)
        self.assertEqual(result.stats.accepted, 2)
        self.assertTrue(SolutionValidator().validate(result.board, definition).ok)

        board = result.board
        shared = board.status_at((0, 2))
        self.assertEqual(shared.state, CellState.CLOSED)
        self.assertEqual(shared.link, board.link_id("A"))
        self.assertEqual(board.v_walls[(0, 1)], Direction.RIGHT)
        self.assertEqual(board.h_walls[(0, 2)], Direction.DOWN)
        self.assertEqual(board.h_walls[(1, 2)], Direction.DOWN)

    def test_initial_board_is_not_mutated(self) -> None:
        solver = NumberLinkSolver(PuzzleDefinition(3, ROWS_PUZZLE))
        before = dict(solver.initial_board.cells)
        solver.solve()
        self.assertEqual(solver.initial_board.cells, before)
        self.assertEqual(len(solver.initial_board.pending), 3)


class SolverBudgetTests(unittest.TestCase):
    def test_step_budget_aborts(self) -> None:
        result = solve_puzzle(PuzzleDefinition(3, ROWS_PUZZLE), max_steps=1)
        self.assertEqual(result.outcome, Outcome.ABORTED)
        self.assertIsNone(result.board)
        self.assertFalse(result.solved)

    def test_generous_budget_does_not_interfere(self) -> None:
        result = solve_puzzle(PuzzleDefinition(3, ROWS_PUZZLE), max_steps=4)
        self.assertEqual(result.outcome, Outcome.SOLVED)


class SolverDepthTests(unittest.TestCase):
    def test_long_paths_do_not_exhaust_the_interpreter_stack(self) -> None:
        definition = parse_puzzle(rows_puzzle_text(35))
        result = solve_puzzle(definition, progress_interval=0)
        self.assertEqual(result.outcome, Outcome.SOLVED)
        self.assertGreaterEqual(result.stats.accepted, 35 * 33)
        self.assertTrue(SolutionValidator().validate(result.board, definition).ok)

    def test_search_depth_is_independent_of_recursion_limit(self) -> None:
        definition = parse_puzzle(rows_puzzle_text(12))
        original_limit = sys.getrecursionlimit()
        # 120 accepted steps on the solution path, well past this limit.
        sys.setrecursionlimit(len(inspect.stack(0)) + 80)
        try:
            result = solve_puzzle(definition, progress_interval=0)
        finally:
            sys.setrecursionlimit(original_limit)
        self.assertEqual(result.outcome, Outcome.SOLVED)
        self.assertGreaterEqual(result.stats.accepted, 12 * 10)


class SolverHookTests(unittest.TestCase):
    def test_progress_callback_fires_per_interval(self) -> None:
        calls: List[int] = []

        def on_progress(stats: SearchStats, board) -> None:
            calls.append(stats.accepted)

        result = solve_puzzle(
            PuzzleDefinition(3, ROWS_PUZZLE), progress_interval=1, on_progress=on_progress
        )
        self.assertEqual(result.outcome, Outcome.SOLVED)
        self.assertEqual(calls, [1, 2, 3])

    def test_disabled_progress_never_fires(self) -> None:
        calls: List[int] = []
        solve_puzzle(
            PuzzleDefinition(3, ROWS_PUZZLE),
            progress_interval=0,
            on_progress=lambda stats, board: calls.append(1),
        )
        self.assertEqual(calls, [])

    def test_tracer_sees_steps_and_final_solution(self) -> None:
        events: List[SearchEvent] = []
        result = solve_puzzle(PuzzleDefinition(3, ROWS_PUZZLE), tracer=events.append)

        kinds = [event.kind for event in events]
        self.assertEqual(kinds.count(EventKind.STEP), 3)
        self.assertEqual(kinds[-1], EventKind.SOLVED)
        self.assertIs(events[-1].board, result.board)
        first_step = next(event for event in events if event.kind == EventKind.STEP)
        self.assertEqual(first_step.point, (0, 1))
        self.assertEqual(first_step.direction, Direction.RIGHT)

    def test_tracer_reports_prune_reasons(self) -> None:
        events: List[SearchEvent] = []
        solve_puzzle(PuzzleDefinition(2, {"A": [(0, 0), (1, 1)]}), tracer=events.append)
        reasons = [event.reason for event in events if event.kind == EventKind.PRUNED]
        self.assertEqual(reasons, [PruneReason.DEAD_PARTITION, PruneReason.DEAD_PARTITION])

    def test_counters_never_decrease(self) -> None:
        snapshots: List[dict] = []
        solve_puzzle(
            PuzzleDefinition(3, {"A": [(0, 0), (2, 2)]}),
            tracer=lambda event: snapshots.append(event.stats.as_dict()),
        )
        self.assertTrue(snapshots)
        for earlier, later in zip(snapshots, snapshots[1:]):
            for key, value in earlier.items():
                self.assertLessEqual(value, later[key], key)


class SearchStatsTests(unittest.TestCase):
    def test_record_prune_updates_family_and_detail(self) -> None:
        stats = SearchStats()
        stats.record_prune(PruneReason.BRANCH)
        stats.record_prune(PruneReason.SPLIT_LINK)
        stats.record_prune(PruneReason.MULTI_SPLIT)
        stats.record_prune(PruneReason.FORWARD_DEAD_PARTITION)

        self.assertEqual(stats.pruned_branch, 1)
        self.assertEqual(stats.pruned_partition, 1)
        self.assertEqual(stats.split_link, 1)
        self.assertEqual(stats.pruned_forward, 2)
        self.assertEqual(stats.multi_split, 1)
        self.assertEqual(stats.forward_dead_partition, 1)
        self.assertEqual(stats.as_dict()["pruned_forward"], 2)


class DefinitionContractTests(unittest.TestCase):
    def test_invalid_definitions_are_rejected(self) -> None:
        cases = [
            (0, {"A": [(0, 0), (0, 1)]}),
            (3, {}),
            (3, {"A": [(0, 0)]}),
            (3, {"A": [(0, 0), (3, 0)]}),
            (3, {"A": [(0, 0), (0, 2)], "B": [(0, 2), (2, 2)]}),
            (3, {"A": [(0, 0), (0, 0)]}),
            (3, {"": [(0, 0), (0, 2)]}),
            (3, {"A": [(0, 0), "x"]}),
        ]
        for size, links in cases:
            with self.subTest(size=size, links=links):
                with self.assertRaises(PuzzleDefinitionError):
                    PuzzleDefinition(size, links)

    def test_rectangular_definition(self) -> None:
        definition = PuzzleDefinition(2, {"A": [(0, 0), (1, 4)]}, columns=5)
        self.assertEqual((definition.rows, definition.cols), (2, 5))
        self.assertEqual(definition.anchors("A"), ((0, 0), (1, 4)))
        with self.assertRaises(PuzzleDefinitionError):
            PuzzleDefinition(2, {"A": [(0, 0), (0, 5)]}, columns=5)

    def test_definitions_compare_and_hash_by_anchors(self) -> None:
        from_tuples = PuzzleDefinition(3, ROWS_PUZZLE)
        from_lists = PuzzleDefinition(
            3, {name: [list(point) for point in points] for name, points in ROWS_PUZZLE.items()}
        )
        self.assertEqual(from_tuples, from_lists)
        self.assertEqual(hash(from_tuples), hash(from_lists))
        self.assertEqual(len({from_tuples, from_lists}), 1)
        self.assertNotEqual(from_tuples, PuzzleDefinition(3, ROWS_PUZZLE, columns=4))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
