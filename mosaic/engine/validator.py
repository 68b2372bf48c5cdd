"""Deterministic rule validation for authored puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.constants import MAX_CLUE, NO_CLUE, WALL
from ..core.exceptions import GridShapeError, ValidationError
from ..utils.logger import get_logger
from .exact import count_solutions
from .generator import local_solution_count
from .grid import Grid, RegionIndex, require_same_shape


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs deterministic validation over a solution, region map and clue set."""

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    def validate(
        self,
        solution: Grid[bool],
        region_map: Grid[int],
        clues: Grid[int],
        check_unique: bool = False,
    ) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_shapes(solution, region_map, clues)
            self._check_clue_range(clues)
            self._check_no_clue_on_wall(region_map, clues)
            self._check_clues_match_solution(solution, region_map, clues)
            if check_unique:
                self._check_unique(region_map, clues)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_shapes(self, solution: Grid[bool], region_map: Grid[int], clues: Grid[int]) -> None:
        try:
            require_same_shape(solution=solution, region_map=region_map, clues=clues)
        except GridShapeError as exc:
            raise ValidationError(str(exc)) from exc

    def _check_clue_range(self, clues: Grid[int]) -> None:
        for x, y in clues.coords():
            clue = clues[x, y]
            if clue < NO_CLUE or clue > MAX_CLUE:
                raise ValidationError(f"Clue {clue} at {(x, y)} outside [{NO_CLUE}, {MAX_CLUE}]")

    def _check_no_clue_on_wall(self, region_map: Grid[int], clues: Grid[int]) -> None:
        for x, y in region_map.coords():
            if region_map[x, y] == WALL and clues[x, y] != NO_CLUE:
                raise ValidationError(f"Clue {clues[x, y]} placed on wall at {(x, y)}")

    def _check_clues_match_solution(
        self, solution: Grid[bool], region_map: Grid[int], clues: Grid[int]
    ) -> None:
        for x, y in clues.coords():
            clue = clues[x, y]
            if clue < 0 or region_map[x, y] == WALL:
                continue
            actual = local_solution_count(solution, region_map, x, y)
            if actual != clue:
                raise ValidationError(
                    f"Clue {clue} at {(x, y)} disagrees with solution ({actual} black)"
                )

    def _check_unique(self, region_map: Grid[int], clues: Grid[int]) -> None:
        for region_id in RegionIndex(region_map).region_ids:
            count = count_solutions(clues, region_map, region_id, limit=2, timeout=self.timeout)
            if count is None:
                raise ValidationError(
                    f"Region {region_id} uniqueness undetermined (timed out after {self.timeout}s)"
                )
            if count == 0:
                raise ValidationError(f"Region {region_id} has no solution")
            if count > 1:
                raise ValidationError(f"Region {region_id} has more than one solution")
