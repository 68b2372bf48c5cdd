import random
import unittest

from mosaic.core.constants import NO_CLUE, WALL, TileState
from mosaic.core.models import HintKind
from mosaic.engine.generator import generate_full_clue_set
from mosaic.engine.grid import Grid
from mosaic.engine.solver import UNRESOLVED, find_hint, solve_region, solve_regional


def two_regions():
    region_map = Grid([
        [0, 0, 1, 1],
        [0, 0, 1, 1],
    ])
    solution = Grid([
        [True, True, False, False],
        [True, True, False, False],
    ])
    return region_map, solution, generate_full_clue_set(solution, region_map)


class SolveRegionTests(unittest.TestCase):
    def test_centre_clue_solves_black_square(self) -> None:
        region_map = Grid.filled(3, 3, 0)
        clues = Grid.filled(3, 3, NO_CLUE)
        clues[1, 1] = 9
        result = solve_region(clues, region_map, 0)
        self.assertTrue(result.finished)
        self.assertEqual(result.remaining_tiles, 0)
        self.assertEqual(result.board_state, Grid.filled(3, 3, TileState.BLACK))
        self.assertEqual(result.replay[0, 0], 1)
        self.assertEqual(result.replay[2, 2], 9)

    def test_stall_leaves_cells_unresolved(self) -> None:
        region_map = Grid.filled(3, 3, 0)
        clues = Grid.filled(3, 3, NO_CLUE)
        clues[0, 0] = 4
        result = solve_region(clues, region_map, 0)
        self.assertFalse(result.finished)
        self.assertEqual(result.remaining_tiles, 5)
        self.assertEqual(result.board_state[1, 1], TileState.BLACK)
        self.assertEqual(result.board_state[2, 2], TileState.EMPTY)
        self.assertEqual(result.replay[2, 2], UNRESOLVED)

    def test_seeded_board_is_respected(self) -> None:
        region_map = Grid.filled(3, 3, 0)
        clues = Grid.filled(3, 3, NO_CLUE)
        clues[1, 1] = 1
        board = Grid.filled(3, 3, TileState.EMPTY)
        board[2, 2] = TileState.SOLVED_BLACK
        result = solve_region(clues, region_map, 0, board=board)
        self.assertTrue(result.finished)
        self.assertEqual(result.board_state[2, 2], TileState.SOLVED_BLACK)
        self.assertEqual(result.board_state[0, 0], TileState.WHITE)
        self.assertEqual(result.replay[2, 2], 0)
        self.assertEqual(board[0, 0], TileState.EMPTY)

    def test_negative_region_rejected(self) -> None:
        region_map = Grid.filled(2, 2, 0)
        with self.assertRaises(ValueError):
            solve_region(Grid.filled(2, 2, NO_CLUE), region_map, WALL)

    def test_regions_are_independent(self) -> None:
        region_map, _, clues = two_regions()
        baseline = solve_region(clues, region_map, 1)
        stripped = clues.copy()
        stripped[0, 0] = NO_CLUE
        stripped[1, 1] = NO_CLUE
        other = solve_region(stripped, region_map, 1)
        for coord in [(2, 0), (3, 0), (2, 1), (3, 1)]:
            self.assertEqual(baseline.board_state[coord], other.board_state[coord])
            self.assertEqual(baseline.replay[coord], other.replay[coord])

    def test_other_region_board_states_are_ignored(self) -> None:
        region_map, _, clues = two_regions()
        baseline = solve_region(clues, region_map, 1)
        states = [
            TileState.BLACK,
            TileState.WHITE,
            TileState.SOLVED_BLACK,
            TileState.SOLVED_WHITE,
            TileState.HIDDEN,
            TileState.EMPTY,
        ]
        region_one = [(2, 0), (3, 0), (2, 1), (3, 1)]
        for seed in range(8):
            rng = random.Random(seed)
            board = Grid.filled(4, 2, TileState.EMPTY)
            for coord in [(0, 0), (1, 0), (0, 1), (1, 1)]:
                board[coord] = rng.choice(states)
            seeded = solve_region(clues, region_map, 1, board=board)
            self.assertTrue(seeded.finished)
            for coord in region_one:
                self.assertEqual(baseline.board_state[coord], seeded.board_state[coord])
                self.assertEqual(baseline.replay[coord], seeded.replay[coord])

    def test_absent_region_rejected(self) -> None:
        region_map, _, clues = two_regions()
        with self.assertRaises(ValueError):
            solve_region(clues, region_map, 5)


class SolveRegionalTests(unittest.TestCase):
    def test_merges_regions_with_monotonic_replay(self) -> None:
        region_map, solution, clues = two_regions()
        result = solve_regional(clues, region_map)
        self.assertTrue(result.finished)
        for coord in solution.coords():
            expected = TileState.BLACK if solution[coord] else TileState.WHITE
            self.assertEqual(result.board_state[coord], expected)
        steps = sorted(result.replay[coord] for coord in region_map.coords())
        self.assertEqual(steps, list(range(1, 9)))
        self.assertTrue(all(result.replay[coord] > 4 for coord in [(2, 0), (3, 0), (2, 1), (3, 1)]))

    def test_thread_pool_matches_sequential(self) -> None:
        region_map, _, clues = two_regions()
        sequential = solve_regional(clues, region_map)
        pooled = solve_regional(clues, region_map, max_workers=2)
        self.assertEqual(sequential.board_state, pooled.board_state)
        self.assertEqual(sequential.replay, pooled.replay)
        self.assertEqual(sequential.tiles_attempted, pooled.tiles_attempted)


class FindHintTests(unittest.TestCase):
    def setUp(self) -> None:
        self.region_map = Grid([[0, WALL, 1]])
        self.clues = Grid([[1, NO_CLUE, 0]])
        self.board = Grid.filled(3, 1, TileState.EMPTY)

    def test_hint_inside_region(self) -> None:
        region_map, _, clues = two_regions()
        board = Grid.filled(4, 2, TileState.EMPTY)
        hint = find_hint(board, region_map, clues, (3, 1))
        self.assertEqual(hint.kind, HintKind.FOUND_SIMPLE)
        self.assertEqual(hint.first, (3, 1))

    def test_wall_origin_searches_board_with_row_major_tie_break(self) -> None:
        hint = find_hint(self.board, self.region_map, self.clues, (1, 0))
        self.assertEqual(hint.kind, HintKind.FOUND_SIMPLE)
        self.assertEqual(hint.first, (0, 0))

    def test_hidden_cells_are_never_proposed(self) -> None:
        self.board[0, 0] = TileState.HIDDEN
        hint = find_hint(self.board, self.region_map, self.clues, (1, 0))
        self.assertEqual(hint.first, (2, 0))

    def test_none_found_when_region_done(self) -> None:
        self.board[0, 0] = TileState.BLACK
        hint = find_hint(self.board, self.region_map, self.clues, (0, 0))
        self.assertEqual(hint.kind, HintKind.NONE_FOUND)

    def test_advanced_hint(self) -> None:
        region_map = Grid([[WALL] * 5, [0] * 5, [WALL] * 5])
        clues = Grid.filled(5, 3, NO_CLUE)
        clues[1, 1] = 2
        clues[2, 1] = 1
        board = Grid.filled(5, 3, TileState.EMPTY)
        self.assertEqual(find_hint(board, region_map, clues, (1, 1)).kind, HintKind.NONE_FOUND)
        hint = find_hint(board, region_map, clues, (1, 1), use_advanced=True)
        self.assertEqual(hint.kind, HintKind.FOUND_ADVANCED)
        self.assertEqual((hint.first, hint.second), ((1, 1), (2, 1)))
        wall_hint = find_hint(board, region_map, clues, (0, 0), use_advanced=True)
        self.assertEqual(wall_hint.kind, HintKind.FOUND_ADVANCED)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
