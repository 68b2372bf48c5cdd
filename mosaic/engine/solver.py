"""Region solve orchestration: basic propagation plus optional overlap deduction.

Every call works on a private copy of the board and returns a fresh
:class:`SolveResult`; no state survives between calls, so regions can be
solved concurrently.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.constants import TileState
from ..core.models import Coord, HintInfo, HintKind, OverlapDeduction, SolveResult
from ..utils.logger import get_logger
from .deduction import evaluate_cell, hint_fill
from .grid import Grid, RegionIndex, region_area, require_same_shape
from .overlap import try_overlap_deduction


LOGGER = get_logger(__name__)

UNRESOLVED = -1


class _RegionRun:
    """Working buffers for one region solve."""

    def __init__(
        self,
        board: Grid[TileState],
        region_map: Grid[int],
        clues: Grid[int],
        region_id: int,
        cells: Sequence[Coord],
    ) -> None:
        self.board = board
        self.region_map = region_map
        self.clues = clues
        self.region_id = region_id
        self.cells = cells
        self.clued = [coord for coord in cells if clues[coord] >= 0]
        self.replay: Grid[int] = Grid.filled(board.width, board.height, 0)
        for coord in cells:
            if board[coord] == TileState.EMPTY:
                self.replay[coord] = UNRESOLVED
        self.step = 0
        self.attempts = 0
        self.advanced: List[OverlapDeduction] = []

    def run(self, use_advanced: bool) -> None:
        while True:
            self._propagate()
            if not use_advanced or self.remaining() == 0:
                return
            deduction = try_overlap_deduction(
                self.board, self.region_map, self.clues, self.region_id, cells=self.cells
            )
            if deduction is None:
                return
            self.advanced.append(deduction)
            for coord, tile in deduction.changes:
                self._write(coord, tile)

    def _propagate(self) -> None:
        changed = True
        while changed:
            changed = False
            for x, y in self.clued:
                self.attempts += 1
                evaluation = evaluate_cell(self.board, self.region_map, self.clues, x, y)
                if not evaluation.is_hint:
                    continue
                tile = hint_fill(evaluation, self.clues[x, y])
                for coord in region_area(self.region_map, x, y):
                    if self.board[coord] == TileState.EMPTY:
                        self._write(coord, tile)
                        changed = True

    def _write(self, coord: Coord, tile: TileState) -> None:
        self.step += 1
        self.board[coord] = tile
        self.replay[coord] = self.step

    def remaining(self) -> int:
        return sum(1 for coord in self.cells if self.board[coord] == TileState.EMPTY)


def solve_region(
    clues: Grid[int],
    region_map: Grid[int],
    region_id: int,
    use_advanced: bool = False,
    board: Optional[Grid[TileState]] = None,
    cells: Optional[Sequence[Coord]] = None,
) -> SolveResult:
    """Deduce one region to a fixpoint.

    ``board`` pre-seeds the private working copy (Empty everywhere if
    omitted); only Empty cells are ever written. ``cells`` may pass the
    region's precomputed row-major cell list.
    """

    require_same_shape(clues=clues, region_map=region_map, board=board)
    if region_id < 0:
        raise ValueError(f"Region id must be non-negative, got {region_id}")
    if cells is None:
        cells = [coord for coord in region_map.coords() if region_map[coord] == region_id]
    if not cells:
        raise ValueError(f"Region {region_id} has no cells")

    state = board.copy() if board is not None else Grid.filled(
        region_map.width, region_map.height, TileState.EMPTY
    )
    run = _RegionRun(state, region_map, clues, region_id, cells)
    run.run(use_advanced)
    remaining = run.remaining()

    LOGGER.debug(
        "Region %d: %s, %d/%d tiles open, %d advanced deductions, %d evaluations",
        region_id,
        "finished" if remaining == 0 else "stalled",
        remaining,
        len(cells),
        len(run.advanced),
        run.attempts,
    )
    return SolveResult(
        finished=remaining == 0,
        remaining_tiles=remaining,
        board_state=state,
        replay=run.replay,
        advanced_deductions=len(run.advanced),
        advanced_changes=run.advanced,
        tiles_attempted=run.attempts,
    )


def solve_regional(
    clues: Grid[int],
    region_map: Grid[int],
    use_advanced: bool = False,
    board: Optional[Grid[TileState]] = None,
    max_workers: Optional[int] = None,
) -> SolveResult:
    """Solve every region independently and merge the results.

    Regions share no mutable state, so with ``max_workers > 1`` they are
    dispatched on a thread pool. Replay indices are offset region by region
    in id order so the merged replay stays monotonic.
    """

    require_same_shape(clues=clues, region_map=region_map, board=board)
    index = RegionIndex(region_map)
    region_ids = index.region_ids
    results: Dict[int, SolveResult] = {}

    if max_workers is not None and max_workers > 1 and len(region_ids) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(
                    solve_region, clues, region_map, region_id, use_advanced, board, index.cells(region_id)
                ): region_id
                for region_id in region_ids
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()
    else:
        for region_id in region_ids:
            results[region_id] = solve_region(
                clues, region_map, region_id, use_advanced, board, index.cells(region_id)
            )

    merged = board.copy() if board is not None else Grid.filled(
        region_map.width, region_map.height, TileState.EMPTY
    )
    replay: Grid[int] = Grid.filled(region_map.width, region_map.height, 0)
    offset = 0
    remaining = 0
    attempts = 0
    advanced: List[OverlapDeduction] = []
    for region_id in region_ids:
        result = results[region_id]
        region_length = 0
        for coord in index.cells(region_id):
            merged[coord] = result.board_state[coord]
            step = result.replay[coord]
            if step > 0:
                replay[coord] = step + offset
                region_length = max(region_length, step)
            else:
                replay[coord] = step
        offset += region_length
        remaining += result.remaining_tiles
        attempts += result.tiles_attempted
        advanced.extend(result.advanced_changes)
        if not result.finished:
            LOGGER.info("Region %d left %d tiles undetermined", region_id, result.remaining_tiles)

    return SolveResult(
        finished=remaining == 0,
        remaining_tiles=remaining,
        board_state=merged,
        replay=replay,
        advanced_deductions=len(advanced),
        advanced_changes=advanced,
        tiles_attempted=attempts,
    )


# ----------------------------------------------------------------------
# Hint search
# ----------------------------------------------------------------------
def find_hint(
    board: Grid[TileState],
    region_map: Grid[int],
    clues: Grid[int],
    origin: Coord,
    use_advanced: bool = False,
) -> HintInfo:
    """Locate the hint nearest ``origin``.

    Inside a visible region the search stays in that region; from a wall,
    hidden or linked cell it covers the whole board.
    """

    require_same_shape(board=board, region_map=region_map, clues=clues)
    region = region_map[origin]
    index = RegionIndex(region_map)

    if region >= 0 and board[origin] not in (TileState.HIDDEN, TileState.LINKED):
        cells = index.cells(region)
        found = _nearest_simple_hint(board, region_map, clues, origin, cells)
        if found is not None:
            return HintInfo(HintKind.FOUND_SIMPLE, first=found)
        if use_advanced:
            deduction = try_overlap_deduction(board, region_map, clues, region, cells=cells)
            if deduction is not None:
                return HintInfo(HintKind.FOUND_ADVANCED, deduction.a, deduction.b, deduction)
        return HintInfo(HintKind.NONE_FOUND)

    found = _nearest_simple_hint(board, region_map, clues, origin, board.coords())
    if found is not None:
        return HintInfo(HintKind.FOUND_SIMPLE, first=found)
    if use_advanced:
        for region_id in index.region_ids:
            cells = index.cells(region_id)
            states = [board[coord] for coord in cells]
            if TileState.HIDDEN in states or TileState.EMPTY not in states:
                continue
            deduction = try_overlap_deduction(board, region_map, clues, region_id, cells=cells)
            if deduction is not None:
                return HintInfo(HintKind.FOUND_ADVANCED, deduction.a, deduction.b, deduction)
    return HintInfo(HintKind.NONE_FOUND)


def _nearest_simple_hint(
    board: Grid[TileState],
    region_map: Grid[int],
    clues: Grid[int],
    origin: Coord,
    candidates: Iterable[Coord],
) -> Optional[Coord]:
    best: Optional[Coord] = None
    best_distance = -1
    for x, y in candidates:
        if region_map[x, y] < 0 or clues[x, y] < 0:
            continue
        if board[x, y] == TileState.HIDDEN:
            continue
        if not evaluate_cell(board, region_map, clues, x, y).is_hint:
            continue
        distance = (x - origin[0]) ** 2 + (y - origin[1]) ** 2
        if best is None or distance < best_distance:
            best = (x, y)
            best_distance = distance
    return best
