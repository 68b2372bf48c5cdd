"""Two-clue deduction over intersecting areas of influence.

For clued cells A and B whose areas overlap in O, the number ``n`` of black
cells inside O is bounded three ways: by what O itself can still hold, by
what A's clue leaves after its exclusive part A' takes between its known
blacks and its known blacks plus empties, and likewise for B. When the
intersected range pins a part (O, A' or B') to its minimum or maximum, every
empty cell in that part is forced.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..core.constants import TileState
from ..core.models import Coord, OverlapDeduction
from ..utils.logger import get_logger
from .grid import Grid, region_area, require_same_shape


LOGGER = get_logger(__name__)


def try_overlap_deduction(
    board: Grid[TileState],
    region_map: Grid[int],
    clues: Grid[int],
    region_id: int,
    cells: Optional[Sequence[Coord]] = None,
) -> Optional[OverlapDeduction]:
    """Return the first clue pair (row-major) that forces at least one empty cell.

    ``cells`` may pass the region's precomputed row-major cell list.
    """

    require_same_shape(board=board, region_map=region_map, clues=clues)
    if cells is None:
        cells = [coord for coord in region_map.coords() if region_map[coord] == region_id]

    clued = [coord for coord in cells if clues[coord] >= 0]
    areas = {coord: region_area(region_map, *coord) for coord in clued}

    for index, a in enumerate(clued):
        for b in clued[index + 1:]:
            if abs(a[0] - b[0]) > 2 or abs(a[1] - b[1]) > 2:
                continue
            changes = _resolve_pair(board, clues[a], clues[b], areas[a], areas[b])
            if changes:
                LOGGER.debug(
                    "Overlap of %s (clue %d) and %s (clue %d) forces %d cells",
                    a, clues[a], b, clues[b], len(changes),
                )
                return OverlapDeduction(a=a, b=b, changes=changes)
    return None


def _resolve_pair(
    board: Grid[TileState],
    clue_a: int,
    clue_b: int,
    area_a: Sequence[Coord],
    area_b: Sequence[Coord],
) -> List[Tuple[Coord, TileState]]:
    set_a = set(area_a)
    set_b = set(area_b)
    overlap = set_a & set_b
    if not overlap or set_a == set_b:
        return []

    shared = [coord for coord in area_a if coord in overlap]
    only_a = [coord for coord in area_a if coord not in overlap]
    only_b = [coord for coord in area_b if coord not in overlap]

    known_o, empty_o = _tally(board, shared)
    known_a, empty_a = _tally(board, only_a)
    known_b, empty_b = _tally(board, only_b)
    if empty_o + empty_a + empty_b == 0:
        return []

    low = max(known_o, clue_a - known_a - empty_a, clue_b - known_b - empty_b)
    high = min(known_o + empty_o, clue_a - known_a, clue_b - known_b)
    if low > high:
        # contradictory pair; basic deduction reports it as an error
        return []

    forced: Dict[Coord, TileState] = {}
    _force_part(board, shared, low, high, known_o, empty_o, forced)
    _force_part(board, only_a, clue_a - high, clue_a - low, known_a, empty_a, forced)
    _force_part(board, only_b, clue_b - high, clue_b - low, known_b, empty_b, forced)
    return sorted(forced.items(), key=lambda item: (item[0][1], item[0][0]))


def _tally(board: Grid[TileState], part: Sequence[Coord]) -> Tuple[int, int]:
    black = 0
    empty = 0
    for coord in part:
        state = board[coord]
        if state.is_black():
            black += 1
        elif state == TileState.EMPTY:
            empty += 1
    return black, empty


def _force_part(
    board: Grid[TileState],
    part: Sequence[Coord],
    low: int,
    high: int,
    known: int,
    empty: int,
    forced: Dict[Coord, TileState],
) -> None:
    if empty == 0:
        return
    low = max(low, known)
    high = min(high, known + empty)
    if low > high:
        return
    if high == known:
        colour = TileState.WHITE
    elif low == known + empty:
        colour = TileState.BLACK
    else:
        return
    for coord in part:
        if board[coord] == TileState.EMPTY:
            forced[coord] = colour
