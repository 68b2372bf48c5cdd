"""Shared constants and enumerations for the mosaic engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple


NO_CLUE = -1
WALL = -1
MAX_CLUE = 9


class TileState(str, Enum):
    """All supported board tile states."""

    EMPTY = "EMPTY"
    BLACK = "BLACK"
    WHITE = "WHITE"
    SOLVED_BLACK = "SOLVED_BLACK"
    SOLVED_WHITE = "SOLVED_WHITE"
    HIDDEN = "HIDDEN"
    LINKED = "LINKED"

    def is_black(self) -> bool:
        return self in (TileState.BLACK, TileState.SOLVED_BLACK)


class Difficulty(IntEnum):
    """Discrete difficulty levels, each with its own clue file."""

    CLASSIC = 0
    MEDIUM = 1
    CHALLENGING = 2
    EXPERT = 3
    MASTER = 4


CLUE_FILE_SUFFIXES = {
    Difficulty.CLASSIC: "",
    Difficulty.MEDIUM: "_medium",
    Difficulty.CHALLENGING: "_challenging",
    Difficulty.EXPERT: "_expert",
    Difficulty.MASTER: "_master",
}

# 3x3 Moore neighbourhood, self included, in row-major order.
NEIGHBOURHOOD: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
)
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


def advanced_fraction_for_difficulty(difficulty: int) -> float:
    """Share of clue removals allowed to require overlap deduction."""

    level = Difficulty(difficulty)
    # master throws every advanced deduction we have at the player
    if level == Difficulty.MASTER:
        return 1.0
    return int(level) * 0.01


def uses_advanced_solving(difficulty: int) -> bool:
    return Difficulty(difficulty) > Difficulty.CLASSIC
