"""Exhaustive CP-SAT solution counting using OR-Tools.

The propagation engine only proves what it can deduce; this module answers
the independent question of how many solutions a region's clues admit.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

from ortools.sat.python import cp_model

from ..core.constants import TileState
from ..core.models import Coord
from ..utils.logger import get_logger
from .grid import Grid, region_area, require_same_shape

LOGGER = get_logger(__name__)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Count solutions, stopping the search once ``limit`` is reached."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.count >= self.limit:
            self.stop_search()


def count_solutions(
    clues: Grid[int],
    region_map: Grid[int],
    region_id: int,
    board: Optional[Grid[TileState]] = None,
    limit: int = 2,
    timeout: float = 10.0,
) -> Optional[int]:
    """Count black/white assignments of one region consistent with its clues.

    Known cells on ``board`` are fixed (black states to 1, every other
    non-empty state to 0). Counting stops at ``limit``; ``limit=2`` is enough
    to tell unique from ambiguous. Returns ``None`` when the search times
    out before the count is settled.
    """

    require_same_shape(clues=clues, region_map=region_map, board=board)
    if limit < 1:
        raise ValueError("limit must be at least 1")

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: one boolean (or constant) per region cell
    # ------------------------------------------------------------------
    cell_vars: Dict[Coord, Union[cp_model.IntVar, int]] = {}
    for coord in region_map.coords():
        if region_map[coord] != region_id:
            continue
        state = board[coord] if board is not None else TileState.EMPTY
        if state == TileState.EMPTY:
            cell_vars[coord] = model.new_bool_var(f"B_{coord[0]}_{coord[1]}")
        else:
            cell_vars[coord] = 1 if state.is_black() else 0

    if not cell_vars:
        return 0

    # ------------------------------------------------------------------
    # Step 2: one linear equality per clue
    # ------------------------------------------------------------------
    for coord in cell_vars:
        clue = clues[coord]
        if clue < 0:
            continue
        terms = []
        known_black = 0
        for neighbour in region_area(region_map, *coord):
            var = cell_vars[neighbour]
            if isinstance(var, int):
                known_black += var
            else:
                terms.append(var)
        if not terms:
            if known_black != clue:
                return 0
            continue
        model.add(sum(terms) == clue - known_black)

    # ------------------------------------------------------------------
    # Step 3: enumerate
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.max_time_in_seconds = timeout
    counter = _SolutionCounter(limit)
    status = solver.solve(model, counter)

    if status not in (cp_model.OPTIMAL, cp_model.INFEASIBLE) and counter.count < limit:
        LOGGER.warning(
            "CP-SAT: region %d search timed out after %.1fs with %d solutions",
            region_id, timeout, counter.count,
        )
        return None
    LOGGER.debug(
        "CP-SAT: region %d has %s%d solutions (status=%s)",
        region_id,
        ">=" if counter.count >= limit else "",
        counter.count,
        solver.status_name(status),
    )
    return counter.count
