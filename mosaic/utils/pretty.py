"""Pretty-print helpers for mosaic boards and clue grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

from ..core.constants import TileState

if TYPE_CHECKING:
    from ..core.models import GenerationResult, SolveResult
    from ..engine.grid import Grid


SYMBOLS = {
    TileState.EMPTY: ".",
    TileState.BLACK: "#",
    TileState.WHITE: "-",
    TileState.SOLVED_BLACK: "X",
    TileState.SOLVED_WHITE: "_",
    TileState.HIDDEN: "?",
    TileState.LINKED: "~",
}


def _render(width: int, height: int, symbol_at) -> str:
    header_cells = [f"{x:>2}" for x in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for y in range(height):
        row_render = " ".join(f"{symbol_at(x, y):>2}" for x in range(width))
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def format_board(board: Grid[TileState], region_map: Optional[Grid[int]] = None) -> str:
    """Render tile states; walls show blank when a region map is supplied."""

    def symbol_at(x: int, y: int) -> str:
        if region_map is not None and region_map[x, y] < 0:
            return " "
        return SYMBOLS.get(board[x, y], ".")

    return _render(board.width, board.height, symbol_at)


def format_clues(clues: Grid[int], region_map: Optional[Grid[int]] = None) -> str:
    def symbol_at(x: int, y: int) -> str:
        if region_map is not None and region_map[x, y] < 0:
            return " "
        clue = clues[x, y]
        return str(clue) if clue >= 0 else "."

    return _render(clues.width, clues.height, symbol_at)


def print_solve_stats(result: SolveResult, region_map: Grid[int], *, stream=None) -> None:
    """Print the solved board and a short summary."""

    stream = stream or sys.stdout
    print(format_board(result.board_state, region_map), file=stream)
    print(file=stream)
    print("--- Solve ---", file=stream)
    print(f"  Finished:           {'yes' if result.finished else 'no'}", file=stream)
    print(f"  Tiles open:         {result.remaining_tiles}", file=stream)
    print(f"  Advanced deductions:{result.advanced_deductions:>4}", file=stream)
    print(f"  Clue evaluations:   {result.tiles_attempted}", file=stream)


def print_generation_stats(
    result: GenerationResult,
    region_map: Grid[int],
    *,
    seed: Optional[int] = None,
    stream=None,
) -> None:
    """Print the pruned clue grid + stats for a finished generation."""

    stream = stream or sys.stdout
    print(format_clues(result.clues, region_map), file=stream)

    region_cells = sum(1 for coord in region_map.coords() if region_map[coord] >= 0)
    clue_count = sum(1 for coord in result.clues.coords() if result.clues[coord] >= 0)

    print(file=stream)
    print("--- Clues ---", file=stream)
    print(f"  Size:          {region_map.width} x {region_map.height} ({region_cells} playable)", file=stream)
    if region_cells:
        print(f"  Clues kept:    {clue_count} ({clue_count / region_cells * 100:.0f}%)", file=stream)
    print(f"  Removed:       {result.clues_placed}", file=stream)
    print(f"  Advanced:      {result.advanced_clues}", file=stream)
    print(f"  Steps:         {result.num_steps}", file=stream)
    if result.failure:
        print("  Status:        FAILED", file=stream)

    if seed is not None:
        print(file=stream)
        print(f"Seed: {seed}", file=stream)
