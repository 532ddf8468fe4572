import logging
import random
import unittest
from unittest import mock

from dungeon.core.constants import CellState
from dungeon.core.exceptions import SearchExhaustedError
from dungeon.engine.annealer import AnnealConfig, DungeonAnnealer
from dungeon.engine.cost import cost

from layouts import (
    VALID_COL_TARGETS,
    VALID_LAYOUT,
    VALID_ROW_TARGETS,
    build_grid,
    chest_puzzle_grid,
    impossible_grid,
    solid_target_grid,
)


class AcceptanceTests(unittest.TestCase):
    def test_temperature_cools_linearly(self) -> None:
        annealer = DungeonAnnealer(AnnealConfig(max_iters=100))
        self.assertAlmostEqual(annealer.temperature(0), 1.0)
        self.assertAlmostEqual(annealer.temperature(50), 0.5)
        self.assertAlmostEqual(annealer.temperature(99), 0.01)

    def test_improvements_are_always_accepted(self) -> None:
        self.assertTrue(DungeonAnnealer.accepts(10, 9, 0.01, 0.999))

    def test_equal_cost_moves_are_accepted(self) -> None:
        self.assertTrue(DungeonAnnealer.accepts(10, 10, 0.5, 0.999))

    def test_uphill_moves_depend_on_draw_and_temperature(self) -> None:
        # exp(-2 / 1.0) ~= 0.135, exp(-2 / 0.5) ~= 0.018
        self.assertTrue(DungeonAnnealer.accepts(10, 12, 1.0, 0.10))
        self.assertFalse(DungeonAnnealer.accepts(10, 12, 1.0, 0.20))
        self.assertFalse(DungeonAnnealer.accepts(10, 12, 0.5, 0.10))

    def test_config_validation(self) -> None:
        with self.assertRaises(ValueError):
            AnnealConfig(max_iters=0)
        with self.assertRaises(ValueError):
            AnnealConfig(max_resets=-1)
        with self.assertRaises(ValueError):
            AnnealConfig(time_limit_seconds=0)


class SearchStateTests(unittest.TestCase):
    def test_start_copies_and_randomizes_the_input(self) -> None:
        grid = build_grid(VALID_LAYOUT)
        grid.cells[4][4] = CellState.UNASSIGNED
        annealer = DungeonAnnealer(AnnealConfig(seed=1))
        state = annealer.start(grid)

        self.assertEqual(grid.get(4, 4), CellState.UNASSIGNED)
        self.assertIn(state.grid.get(4, 4), (CellState.WALL, CellState.EMPTY))
        self.assertEqual(state.grid.get(0, 0), CellState.CHEST)
        self.assertEqual(state.cost, cost(state.grid))
        self.assertEqual((state.iteration, state.reset_count), (0, 0))

    def test_advance_counts_iterations(self) -> None:
        annealer = DungeonAnnealer(AnnealConfig(max_iters=100, seed=2))
        state = annealer.start(impossible_grid())
        for _ in range(10):
            annealer.advance(state)
        self.assertEqual(state.iteration, 10)
        self.assertEqual(state.total_iterations, 10)
        self.assertEqual(state.cost, cost(state.grid))

    def test_cycle_end_restarts_with_a_fresh_grid(self) -> None:
        annealer = DungeonAnnealer(AnnealConfig(max_iters=10, randomize_start=False), rng=random.Random(4))
        state = annealer.start(impossible_grid())
        state.iteration = 9

        annealer.advance(state)

        self.assertEqual(state.iteration, 0)
        self.assertEqual(state.reset_count, 1)
        self.assertEqual(state.total_iterations, 1)
        for row, col in state.grid.positions():
            self.assertIn(state.grid.get(row, col), (CellState.WALL, CellState.EMPTY))
        self.assertEqual(state.cost, cost(state.grid))
        self.assertGreater(state.cost, 0)

    def test_restart_leaves_the_accepted_grid_untouched(self) -> None:
        annealer = DungeonAnnealer(AnnealConfig(max_iters=10, randomize_start=False), rng=random.Random(4))
        state = annealer.start(impossible_grid())
        held = state.grid
        snapshot = [list(row) for row in held.cells]

        annealer.restart(state)

        self.assertIsNot(state.grid, held)
        self.assertEqual(held.cells, snapshot)
        self.assertNotEqual(state.grid.cells, snapshot)
        self.assertEqual(state.reset_count, 1)

    def test_exhausted_restart_keeps_the_last_cycle(self) -> None:
        annealer = DungeonAnnealer(AnnealConfig(max_iters=10, max_resets=0), rng=random.Random(4))
        state = annealer.start(impossible_grid())
        state.iteration = 10
        held = state.grid
        held_cost = state.cost

        with self.assertRaises(SearchExhaustedError) as ctx:
            annealer.restart(state)

        self.assertIs(ctx.exception.state, state)
        self.assertIs(state.grid, held)
        self.assertEqual(state.cost, held_cost)
        self.assertEqual((state.iteration, state.reset_count), (10, 0))


class SolveTests(unittest.TestCase):
    def test_solved_input_terminates_immediately(self) -> None:
        grid = build_grid(VALID_LAYOUT, VALID_ROW_TARGETS, VALID_COL_TARGETS)
        annealer = DungeonAnnealer(AnnealConfig(randomize_start=False, seed=0))
        result = annealer.solve(grid)

        self.assertEqual(result.iterations, 0)
        self.assertEqual(result.reset_count, 0)
        self.assertEqual(result.total_iterations, 0)
        self.assertEqual(cost(result.grid), 0)
        self.assertIsNot(result.grid, grid)

    def test_solves_board_from_random_start(self) -> None:
        config = AnnealConfig(max_iters=4000, seed=11, time_limit_seconds=120)
        result = DungeonAnnealer(config).solve(solid_target_grid())

        self.assertEqual(cost(result.grid), 0)
        self.assertEqual(result.grid.positions_of(CellState.WALL), list(result.grid.positions()))
        self.assertEqual(result.seed, 11)

    def test_seeded_runs_are_reproducible(self) -> None:
        config = AnnealConfig(max_iters=4000, seed=23, time_limit_seconds=120)
        first = DungeonAnnealer(config).solve(solid_target_grid())
        second = DungeonAnnealer(config).solve(solid_target_grid())

        self.assertEqual(
            (first.iterations, first.reset_count, first.total_iterations),
            (second.iterations, second.reset_count, second.total_iterations),
        )
        self.assertEqual(first.grid.cells, second.grid.cells)

    def test_other_seeds_terminate(self) -> None:
        for seed in (1, 2, 3):
            config = AnnealConfig(max_iters=4000, seed=seed, time_limit_seconds=120)
            result = DungeonAnnealer(config).solve(solid_target_grid())
            self.assertEqual(cost(result.grid), 0)

    def test_solves_bundled_chest_and_monster_puzzle(self) -> None:
        grid = chest_puzzle_grid()
        result = DungeonAnnealer(AnnealConfig(seed=3)).solve(grid)

        self.assertEqual(cost(result.grid), 0)
        self.assertEqual((result.iterations, result.reset_count), (801, 3))
        self.assertEqual(result.total_iterations, 3 * 40000 + 801)
        self.assertEqual(result.grid.get(0, 0), CellState.CHEST)
        self.assertEqual(result.grid.get(1, 7), CellState.MONSTER)
        self.assertEqual(result.grid.positions_of(CellState.UNASSIGNED), [])
        self.assertEqual(grid.get(0, 1), CellState.UNASSIGNED)

    def test_reset_cap_stops_unsolvable_search(self) -> None:
        config = AnnealConfig(max_iters=5, max_resets=2, seed=7)
        with self.assertRaises(SearchExhaustedError) as ctx:
            DungeonAnnealer(config).solve(impossible_grid())
        state = ctx.exception.state
        assert state is not None
        self.assertEqual(state.reset_count, 2)
        self.assertEqual(state.total_iterations, 15)
        self.assertEqual(state.iteration, 5)
        self.assertGreater(state.cost, 0)

    def test_capped_runs_are_reproducible(self) -> None:
        config = AnnealConfig(max_iters=50, max_resets=1, seed=7)
        states = []
        for _ in range(2):
            with self.assertRaises(SearchExhaustedError) as ctx:
                DungeonAnnealer(config).solve(impossible_grid())
            states.append(ctx.exception.state)
        self.assertEqual(states[0].grid.cells, states[1].grid.cells)
        self.assertEqual(states[0].cost, states[1].cost)

    def test_time_limit_stops_unsolvable_search(self) -> None:
        config = AnnealConfig(seed=5, time_limit_seconds=0.2)
        with self.assertRaises(SearchExhaustedError):
            DungeonAnnealer(config).solve(impossible_grid())

    def test_fixed_board_cannot_be_searched(self) -> None:
        grid = impossible_grid()
        for row in grid.cells:
            row[:] = [CellState.MONSTER] * 8
        with self.assertRaises(SearchExhaustedError):
            DungeonAnnealer(AnnealConfig(seed=0)).solve(grid)



class ProgressLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger("dungeon.engine.annealer")
        self.level = self.logger.level

    def tearDown(self) -> None:
        self.logger.setLevel(self.level)

    def _exhaust(self) -> None:
        config = AnnealConfig(max_iters=5, max_resets=1, seed=7, log_interval=1)
        with self.assertRaises(SearchExhaustedError):
            DungeonAnnealer(config).solve(impossible_grid())

    def test_breakdown_is_skipped_when_debug_is_off(self) -> None:
        self.logger.setLevel(logging.INFO)
        with mock.patch("dungeon.engine.annealer.evaluate") as evaluate:
            self._exhaust()
        evaluate.assert_not_called()

    def test_breakdown_is_logged_at_debug(self) -> None:
        with self.assertLogs("dungeon.engine.annealer", level="DEBUG") as logs:
            self._exhaust()
        self.assertTrue(any("walls=" in line for line in logs.output if "DEBUG" in line))

if __name__ == "__main__":  # pragma: no cover
    unittest.main()
