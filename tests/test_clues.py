import tempfile
import unittest
from pathlib import Path

from mosaic.core.constants import Difficulty
from mosaic.core.exceptions import ClueParseError
from mosaic.engine.grid import Grid
from mosaic.io.clues import (
    clue_file_name,
    clue_path,
    load_clues,
    load_solution,
    parse_clues,
    parse_solution,
    save_clues,
    save_solution,
    serialize_clues,
    serialize_solution,
)


class ClueCodecTests(unittest.TestCase):
    def test_serialize_format(self) -> None:
        clues = Grid([[1, -1], [0, 9]])
        self.assertEqual(serialize_clues(clues), "1,-1\n0,9\n")

    def test_parse_tolerates_whitespace_and_crlf(self) -> None:
        text = "  1, -1 \r\n0,9\r\n\r\n\n"
        self.assertEqual(parse_clues(text), Grid([[1, -1], [0, 9]]))

    def test_round_trip(self) -> None:
        clues = Grid([[-1, 3, 4], [2, -1, 8], [0, 1, -1]])
        self.assertEqual(parse_clues(serialize_clues(clues)), clues)

    def test_bad_token_reports_location(self) -> None:
        with self.assertRaises(ClueParseError) as ctx:
            parse_clues("1,2\n3,x\n")
        self.assertEqual(ctx.exception.row, 2)
        self.assertEqual(ctx.exception.column, 2)
        self.assertIn("row 2, column 2", str(ctx.exception))

    def test_ragged_rows_rejected(self) -> None:
        with self.assertRaises(ClueParseError) as ctx:
            parse_clues("1,2\n3\n")
        self.assertEqual(ctx.exception.row, 2)
        self.assertIsNone(ctx.exception.column)

    def test_empty_input_rejected(self) -> None:
        for text in ("", "   \n\n"):
            with self.assertRaises(ClueParseError):
                parse_clues(text)


class SolutionCodecTests(unittest.TestCase):
    def test_parse_and_serialize(self) -> None:
        solution = parse_solution("1,0\n0,1\n")
        self.assertEqual(solution, Grid([[True, False], [False, True]]))
        self.assertEqual(serialize_solution(solution), "1,0\n0,1\n")

    def test_non_binary_rejected(self) -> None:
        with self.assertRaises(ClueParseError) as ctx:
            parse_solution("1,2\n")
        self.assertEqual((ctx.exception.row, ctx.exception.column), (1, 2))


class ClueFileTests(unittest.TestCase):
    def test_file_names(self) -> None:
        self.assertEqual(
            [clue_file_name(level) for level in Difficulty],
            ["clues", "clues_medium", "clues_challenging", "clues_expert", "clues_master"],
        )
        with self.assertRaises(ValueError):
            clue_file_name(5)

    def test_save_and_load(self) -> None:
        clues = Grid([[2, -1], [-1, 4]])
        solution = Grid([[True, False], [True, True]])
        with tempfile.TemporaryDirectory() as tmp:
            path = clue_path(tmp, Difficulty.CHALLENGING)
            self.assertEqual(path, Path(tmp) / "clues_challenging.txt")
            save_clues(path, clues)
            self.assertEqual(path.read_text(encoding="utf-8"), "2,-1\n-1,4\n")
            self.assertEqual(load_clues(path), clues)

            solution_path = save_solution(Path(tmp) / "nested" / "solution.csv", solution)
            self.assertEqual(load_solution(solution_path), solution)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
