"""Puzzle generation by clue pruning.

Generation starts from the dense clue set (every region cell clued with its
true local count) and removes clues one at a time, keeping a removal only
if the region still solves. Work is surfaced as a lazy stream of
:class:`GenerationResult` snapshots so a host can show progress and stop
at any point.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ..core.constants import NO_CLUE, WALL, TileState
from ..core.models import Coord, GenerationResult
from ..utils.logger import get_logger
from .grid import Grid, RegionIndex, region_area, require_same_shape
from .solver import solve_region


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    seed: Optional[int] = None
    steps_per_yield: int = 1
    max_fix_iterations: int = 100

    def __post_init__(self) -> None:
        if self.steps_per_yield < 1:
            raise ValueError("steps_per_yield must be at least 1")
        if self.max_fix_iterations < 1:
            raise ValueError("max_fix_iterations must be at least 1")


# ----------------------------------------------------------------------
# Dense clue sets
# ----------------------------------------------------------------------
def local_solution_count(solution: Grid[bool], region_map: Grid[int], x: int, y: int) -> int:
    return sum(1 for coord in region_area(region_map, x, y) if solution[coord])


def generate_full_clue_set(solution: Grid[bool], region_map: Grid[int]) -> Grid[int]:
    """Clue every non-wall cell with its true local count."""

    require_same_shape(solution=solution, region_map=region_map)
    clues: Grid[int] = Grid.filled(solution.width, solution.height, NO_CLUE)
    for x, y in solution.coords():
        if region_map[x, y] == WALL:
            continue
        clues[x, y] = local_solution_count(solution, region_map, x, y)
    return clues


def refresh_region_clues(
    solution: Grid[bool],
    region_map: Grid[int],
    clues: Grid[int],
    cells: Sequence[Coord],
) -> None:
    """Re-derive the dense clues of one region in place."""

    for x, y in cells:
        clues[x, y] = local_solution_count(solution, region_map, x, y)


class MosaicGenerator:
    """Clue pruning and solution repair driven by an injectable RNG."""

    def __init__(self, config: Optional[GeneratorConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random(self.config.seed)

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------
    def prune_region(
        self,
        solution: Grid[bool],
        region_map: Grid[int],
        clues: Grid[int],
        region_id: int,
        advanced_fraction: float = 0.0,
    ) -> Iterator[GenerationResult]:
        """Remove as many clues from one region as solvability allows.

        ``clues`` is never modified; every yielded snapshot is an independent
        copy. Removals that need more overlap deductions than the accepted
        clue set are rationed so that ``advanced_clues`` stays within
        ``ceil(advanced_fraction * clues_placed)``.
        """

        require_same_shape(solution=solution, region_map=region_map, clues=clues)
        if not 0.0 <= advanced_fraction <= 1.0:
            raise ValueError(f"advanced_fraction must be within [0, 1], got {advanced_fraction}")
        cells = RegionIndex(region_map).cells(region_id)
        working = clues.copy()
        use_advanced = advanced_fraction > 0.0

        baseline = solve_region(working, region_map, region_id, use_advanced, cells=cells)
        if not baseline.finished:
            LOGGER.warning(
                "Region %d is not solvable from its starting clues (%d tiles open)",
                region_id, baseline.remaining_tiles,
            )
            yield GenerationResult(
                in_progress=False,
                num_steps=0,
                clues_placed=0,
                advanced_clues=0,
                clues=working.copy(),
                failure=True,
                region_id=region_id,
            )
            return
        accepted_advanced = baseline.advanced_deductions

        candidates = [coord for coord in cells if working[coord] >= 0]
        self.rng.shuffle(candidates)
        LOGGER.info(
            "Pruning region %d: %d cells, %d clues, advanced fraction %.2f",
            region_id, len(cells), len(candidates), advanced_fraction,
        )

        steps = 0
        removed = 0
        advanced_clues = 0
        for coord in candidates:
            steps += 1
            clue = working[coord]
            working[coord] = NO_CLUE
            result = solve_region(working, region_map, region_id, use_advanced, cells=cells)

            if not result.finished:
                working[coord] = clue
                LOGGER.debug("Clue %s kept: region stalls without it", coord)
            elif result.advanced_deductions > accepted_advanced:
                if self._advanced_quota_allows(advanced_fraction, advanced_clues, removed):
                    removed += 1
                    advanced_clues += 1
                    accepted_advanced = result.advanced_deductions
                    LOGGER.debug("Clue %s removed, now needs %d advanced deductions", coord, accepted_advanced)
                else:
                    working[coord] = clue
                    LOGGER.debug("Clue %s kept: advanced quota reached", coord)
            else:
                removed += 1
                accepted_advanced = result.advanced_deductions
                LOGGER.debug("Clue %s removed", coord)

            if steps % self.config.steps_per_yield == 0 and steps < len(candidates):
                yield GenerationResult(
                    in_progress=True,
                    num_steps=steps,
                    clues_placed=removed,
                    advanced_clues=advanced_clues,
                    clues=working.copy(),
                    region_id=region_id,
                )

        LOGGER.info(
            "Pruning region %d complete in %d steps: removed %d clues, %d needing advanced deductions",
            region_id, steps, removed, advanced_clues,
        )
        yield GenerationResult(
            in_progress=False,
            num_steps=steps,
            clues_placed=removed,
            advanced_clues=advanced_clues,
            clues=working.copy(),
            region_id=region_id,
        )

    @staticmethod
    def _advanced_quota_allows(advanced_fraction: float, advanced_clues: int, removed: int) -> bool:
        if advanced_fraction >= 1.0:
            return True
        return advanced_clues + 1 <= math.ceil(advanced_fraction * (removed + 1))

    def prune_regions(
        self,
        solution: Grid[bool],
        region_map: Grid[int],
        clues: Grid[int],
        advanced_fraction: float = 0.0,
        region_ids: Optional[Sequence[int]] = None,
    ) -> Iterator[GenerationResult]:
        """Prune regions one after another, carrying the merged clue grid forward.

        Counts in the yielded results are cumulative over all regions.
        """

        require_same_shape(solution=solution, region_map=region_map, clues=clues)
        if region_ids is None:
            region_ids = RegionIndex(region_map).region_ids
        merged = clues.copy()
        total_steps = 0
        total_removed = 0
        total_advanced = 0
        any_failure = False
        last_region: Optional[int] = None

        for region_id in region_ids:
            last: Optional[GenerationResult] = None
            for result in self.prune_region(solution, region_map, merged, region_id, advanced_fraction):
                last = result
                if result.in_progress:
                    yield GenerationResult(
                        in_progress=True,
                        num_steps=total_steps + result.num_steps,
                        clues_placed=total_removed + result.clues_placed,
                        advanced_clues=total_advanced + result.advanced_clues,
                        clues=result.clues,
                        failure=any_failure,
                        region_id=region_id,
                    )
            if last is None:
                continue
            merged = last.clues
            total_steps += last.num_steps
            total_removed += last.clues_placed
            total_advanced += last.advanced_clues
            any_failure = any_failure or last.failure
            last_region = region_id
            yield GenerationResult(
                in_progress=True,
                num_steps=total_steps,
                clues_placed=total_removed,
                advanced_clues=total_advanced,
                clues=merged.copy(),
                failure=any_failure,
                region_id=region_id,
            )

        yield GenerationResult(
            in_progress=False,
            num_steps=total_steps,
            clues_placed=total_removed,
            advanced_clues=total_advanced,
            clues=merged.copy(),
            failure=any_failure,
            region_id=last_region,
        )

    # ------------------------------------------------------------------
    # Solution repair
    # ------------------------------------------------------------------
    def fix_solution(
        self,
        solution: Grid[bool],
        region_map: Grid[int],
        clues: Grid[int],
        region_id: int,
        use_advanced: bool = False,
    ) -> Iterator[GenerationResult]:
        """Re-randomise a region's solution until its dense clue set solves.

        ``solution`` is mutated in place. Only cells the solver could not
        determine are re-rolled; ``clues_placed`` reports how many tiles were
        randomised. When ``max_fix_iterations`` runs out the original
        solution bits and the caller's clue values are restored and
        ``failure`` is set.
        """

        require_same_shape(solution=solution, region_map=region_map, clues=clues)
        cells = RegionIndex(region_map).cells(region_id)
        original = {coord: solution[coord] for coord in cells}
        working = clues.copy()
        original_clues = {coord: clues[coord] for coord in cells}
        randomized = 0

        for iteration in range(1, self.config.max_fix_iterations + 1):
            refresh_region_clues(solution, region_map, working, cells)
            result = solve_region(working, region_map, region_id, use_advanced, cells=cells)
            if result.finished:
                LOGGER.info(
                    "Region %d solvable after %d iterations, %d tiles randomised",
                    region_id, iteration, randomized,
                )
                yield GenerationResult(
                    in_progress=False,
                    num_steps=iteration,
                    clues_placed=randomized,
                    advanced_clues=result.advanced_deductions,
                    clues=working.copy(),
                    region_id=region_id,
                )
                return

            undetermined = [coord for coord in cells if result.board_state[coord] == TileState.EMPTY]
            flipped = self._reroll(solution, undetermined)
            randomized += len(flipped)
            LOGGER.debug(
                "Region %d iteration %d: %d tiles undetermined, re-rolled %d",
                region_id, iteration, len(undetermined), len(flipped),
            )
            if iteration % self.config.steps_per_yield == 0:
                yield GenerationResult(
                    in_progress=True,
                    num_steps=iteration,
                    clues_placed=randomized,
                    advanced_clues=0,
                    clues=working.copy(),
                    region_id=region_id,
                )

        for coord, value in original.items():
            solution[coord] = value
        for coord, value in original_clues.items():
            working[coord] = value
        LOGGER.warning(
            "Region %d still unsolvable after %d iterations; solution restored",
            region_id, self.config.max_fix_iterations,
        )
        yield GenerationResult(
            in_progress=False,
            num_steps=self.config.max_fix_iterations,
            clues_placed=randomized,
            advanced_clues=0,
            clues=working.copy(),
            failure=True,
            region_id=region_id,
        )

    def _reroll(self, solution: Grid[bool], undetermined: Sequence[Coord]) -> List[Coord]:
        flipped = [coord for coord in undetermined if self.rng.random() < 0.5]
        if not flipped and undetermined:
            flipped = [self.rng.choice(list(undetermined))]
        for coord in flipped:
            solution[coord] = not solution[coord]
        return flipped


def run(results: Iterator[GenerationResult]) -> GenerationResult:
    """Drain a generation stream and return its final snapshot."""

    last: Optional[GenerationResult] = None
    for last in results:
        pass
    if last is None:
        raise ValueError("Generation stream yielded nothing")
    return last
