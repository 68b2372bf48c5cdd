"""Data models returned by the mosaic engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from .constants import TileState

if TYPE_CHECKING:
    from ..engine.grid import Grid


Coord = Tuple[int, int]


@dataclass(frozen=True)
class CellEvaluation:
    """Classification of a single clue against the current board."""

    is_error: bool
    is_hint: bool
    is_satisfied: bool
    black_count: int = 0
    empty_count: int = 0


@dataclass
class OverlapDeduction:
    """A forced assignment derived from two overlapping clue areas."""

    a: Coord
    b: Coord
    changes: List[Tuple[Coord, TileState]] = field(default_factory=list)


@dataclass
class SolveResult:
    finished: bool
    remaining_tiles: int
    board_state: "Grid[TileState]"
    replay: "Grid[int]"
    advanced_deductions: int = 0
    advanced_changes: List[OverlapDeduction] = field(default_factory=list)
    tiles_attempted: int = 0


@dataclass
class GenerationResult:
    """Progress snapshot yielded by the generator.

    ``clues`` is always a self-consistent copy; a host may stop consuming the
    stream at any point and keep the last snapshot.
    """

    in_progress: bool
    num_steps: int
    clues_placed: int
    advanced_clues: int
    clues: "Grid[int]"
    failure: bool = False
    region_id: Optional[int] = None


class HintKind(str, Enum):
    FOUND_SIMPLE = "FOUND_SIMPLE"
    FOUND_ADVANCED = "FOUND_ADVANCED"
    NONE_FOUND = "NONE_FOUND"


@dataclass(frozen=True)
class HintInfo:
    kind: HintKind
    first: Optional[Coord] = None
    second: Optional[Coord] = None
    deduction: Optional[OverlapDeduction] = None
