"""Text formats for clue grids, region maps and solutions.

Every format is one board row per line with comma-separated integers. Clue
and region files use ``-1`` for "no clue" and "wall"; solution files use
``1`` for black and ``0`` for white.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from ..core.constants import CLUE_FILE_SUFFIXES, Difficulty
from ..core.exceptions import ClueParseError
from ..engine.grid import Grid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

PathLike = Union[str, Path]

CLUE_FILE_STEM = "clues"
CLUE_FILE_EXTENSION = ".txt"


# ----------------------------------------------------------------------
# Integer grids
# ----------------------------------------------------------------------
def serialize_clues(clues: Grid[int]) -> str:
    """One line per row, values joined by commas, trailing newline."""

    return "".join(",".join(str(value) for value in row) + "\n" for row in clues.rows())


def parse_clues(text: str) -> Grid[int]:
    lines = [line.strip() for line in text.strip().splitlines()]
    if not lines or not lines[0]:
        raise ClueParseError("no clue rows found")

    rows: List[List[int]] = []
    width = None
    for row_number, line in enumerate(lines, start=1):
        tokens = line.split(",")
        if width is None:
            width = len(tokens)
        elif len(tokens) != width:
            raise ClueParseError(
                f"expected {width} values, found {len(tokens)}", row=row_number
            )
        values: List[int] = []
        for column_number, token in enumerate(tokens, start=1):
            token = token.strip()
            try:
                values.append(int(token))
            except ValueError:
                raise ClueParseError(
                    f"'{token}' is not an integer", row=row_number, column=column_number
                ) from None
        rows.append(values)
    return Grid(rows)


def parse_region_map(text: str) -> Grid[int]:
    return parse_clues(text)


# ----------------------------------------------------------------------
# Solutions
# ----------------------------------------------------------------------
def parse_solution(text: str) -> Grid[bool]:
    """Parse a ``1``/``0`` solution grid."""

    grid = parse_clues(text)
    for x, y in grid.coords():
        if grid[x, y] not in (0, 1):
            raise ClueParseError(
                f"solution values must be 0 or 1, found {grid[x, y]}", row=y + 1, column=x + 1
            )
    return grid.map(bool)


def serialize_solution(solution: Grid[bool]) -> str:
    return serialize_clues(solution.map(lambda black: 1 if black else 0))


# ----------------------------------------------------------------------
# Files
# ----------------------------------------------------------------------
def clue_file_name(difficulty: int) -> str:
    """Base file name (no extension) of a difficulty's clue file."""

    try:
        level = Difficulty(difficulty)
    except ValueError:
        raise ValueError(f"Unknown difficulty {difficulty!r}") from None
    return CLUE_FILE_STEM + CLUE_FILE_SUFFIXES[level]


def clue_path(directory: PathLike, difficulty: int) -> Path:
    return Path(directory) / (clue_file_name(difficulty) + CLUE_FILE_EXTENSION)


def load_clues(path: PathLike) -> Grid[int]:
    return parse_clues(Path(path).read_text(encoding="utf-8"))


def save_clues(path: PathLike, clues: Grid[int]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_clues(clues), encoding="utf-8")
    LOGGER.info("Wrote %dx%d clue grid to %s", clues.width, clues.height, path)
    return path


def load_region_map(path: PathLike) -> Grid[int]:
    return parse_region_map(Path(path).read_text(encoding="utf-8"))


def load_solution(path: PathLike) -> Grid[bool]:
    return parse_solution(Path(path).read_text(encoding="utf-8"))


def save_solution(path: PathLike, solution: Grid[bool]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_solution(solution), encoding="utf-8")
    return path
