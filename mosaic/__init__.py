"""Mosaic puzzle engine: region-restricted minesweeper-style logic puzzles.

This package exposes the public API surface via:

- ``mosaic.engine.solver``: region solving by clue propagation and overlap deduction.
- ``mosaic.engine.generator.MosaicGenerator``: prunes dense clue sets and repairs solutions.
- ``mosaic.engine.validator.PuzzleValidator``: consistency and uniqueness checks.
- ``mosaic.io.clues``: the clue text codec and difficulty file naming.
"""

from .engine.generator import GeneratorConfig, MosaicGenerator, generate_full_clue_set, run
from .engine.grid import Grid, RegionIndex
from .engine.solver import find_hint, solve_region, solve_regional
from .engine.validator import PuzzleValidator, ValidationResult

__all__ = [
    "GeneratorConfig",
    "Grid",
    "MosaicGenerator",
    "PuzzleValidator",
    "RegionIndex",
    "ValidationResult",
    "find_hint",
    "generate_full_clue_set",
    "run",
    "solve_region",
    "solve_regional",
]

__version__ = "0.1.0"
