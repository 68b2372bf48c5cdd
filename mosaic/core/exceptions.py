"""Custom exception hierarchy for the mosaic engine."""

from __future__ import annotations

from typing import Optional


class MosaicError(Exception):
    """Base exception for engine failures."""


class GridShapeError(MosaicError):
    """Raised when a grid is malformed or grid dimensions do not match."""


class CoordinateError(MosaicError, IndexError):
    """Raised when a coordinate falls outside the board."""


class ClueParseError(MosaicError):
    """Raised when clue text cannot be parsed."""

    def __init__(self, message: str, row: Optional[int] = None, column: Optional[int] = None) -> None:
        location = ""
        if row is not None:
            location = f"row {row}"
            if column is not None:
                location += f", column {column}"
            location += ": "
        super().__init__(f"{location}{message}")
        self.row = row
        self.column = column


class ValidationError(MosaicError):
    """Raised when puzzle integrity checks fail."""


class GenerationError(MosaicError):
    """Raised when a puzzle cannot be generated or repaired."""
