"""Single-clue deduction: classify a clue against the current board."""

from __future__ import annotations

from typing import Tuple

from ..core.constants import NO_CLUE, TileState
from ..core.models import CellEvaluation
from .grid import Grid, region_area, require_same_shape


_SATISFIED = CellEvaluation(is_error=False, is_hint=False, is_satisfied=True)


def local_counts(board: Grid[TileState], region_map: Grid[int], x: int, y: int) -> Tuple[int, int]:
    """Return ``(black, empty)`` counts over the same-region neighbourhood."""

    black = 0
    empty = 0
    for coord in region_area(region_map, x, y):
        state = board[coord]
        if state.is_black():
            black += 1
        elif state == TileState.EMPTY:
            empty += 1
    return black, empty


def evaluate_cell(
    board: Grid[TileState],
    region_map: Grid[int],
    clues: Grid[int],
    x: int,
    y: int,
) -> CellEvaluation:
    """Classify the clue at ``(x, y)``.

    A hint means every empty neighbour is decided: all white when the black
    count already equals the clue, all black when blacks plus empties equal
    it exactly. Unclued cells and walls are vacuously satisfied.
    """

    require_same_shape(board=board, region_map=region_map, clues=clues)
    clue = clues[x, y]
    if clue < 0 or region_map[x, y] < 0:
        return _SATISFIED

    black, empty = local_counts(board, region_map, x, y)

    if empty == 0:
        return CellEvaluation(
            is_error=black != clue,
            is_hint=False,
            is_satisfied=black == clue,
            black_count=black,
            empty_count=empty,
        )
    if black > clue or black + empty < clue:
        return CellEvaluation(
            is_error=True,
            is_hint=False,
            is_satisfied=False,
            black_count=black,
            empty_count=empty,
        )
    return CellEvaluation(
        is_error=False,
        is_hint=black == clue or black + empty == clue,
        is_satisfied=False,
        black_count=black,
        empty_count=empty,
    )


def hint_fill(evaluation: CellEvaluation, clue: int) -> TileState:
    """Colour the empty neighbours of a hinted clue must take."""

    return TileState.WHITE if evaluation.black_count == clue else TileState.BLACK


def countdown_values(board: Grid[TileState], region_map: Grid[int], clues: Grid[int]) -> Grid[int]:
    """Blacks still owed by each clue given the current board; -1 where unclued or walled."""

    require_same_shape(board=board, region_map=region_map, clues=clues)
    countdown = clues.copy()
    for x, y in clues.coords():
        clue = clues[x, y]
        if region_map[x, y] < 0:
            countdown[x, y] = NO_CLUE
            continue
        if clue < 0:
            continue
        black, _ = local_counts(board, region_map, x, y)
        countdown[x, y] = clue - black
    return countdown
