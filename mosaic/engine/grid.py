"""Grid representation and region helpers."""

from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Generic, Iterable, Iterator, List, Sequence, Tuple, TypeVar

from ..core.constants import NEIGHBOURHOOD, ORTHOGONAL_STEPS, WALL, Bounds
from ..core.exceptions import CoordinateError, GridShapeError
from ..core.models import Coord


T = TypeVar("T")
U = TypeVar("U")


class Grid(Generic[T]):
    """Owned width x height array addressed as ``grid[x, y]``.

    Rows are stored top to bottom, so ``rows()[y][x] == grid[x, y]``.
    """

    def __init__(self, rows: Sequence[Sequence[T]]) -> None:
        if not rows or not rows[0]:
            raise GridShapeError("Grid must have at least one row and one column")
        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                raise GridShapeError(
                    f"Ragged grid: row {index} has {len(row)} cells, expected {width}"
                )
        self.bounds = Bounds(width=width, height=len(rows))
        self._rows: List[List[T]] = [list(row) for row in rows]

    @classmethod
    def filled(cls, width: int, height: int, value: T) -> "Grid[T]":
        if width <= 0 or height <= 0:
            raise GridShapeError(f"Invalid grid size {width}x{height}")
        return cls([[value] * width for _ in range(height)])

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.bounds.width

    @property
    def height(self) -> int:
        return self.bounds.height

    @property
    def shape(self) -> Tuple[int, int]:
        return self.bounds.width, self.bounds.height

    def contains(self, x: int, y: int) -> bool:
        return self.bounds.contains(x, y)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def __getitem__(self, coord: Coord) -> T:
        x, y = coord
        self._check(x, y)
        return self._rows[y][x]

    def __setitem__(self, coord: Coord, value: T) -> None:
        x, y = coord
        self._check(x, y)
        self._rows[y][x] = value

    def _check(self, x: int, y: int) -> None:
        if not self.bounds.contains(x, y):
            raise CoordinateError(
                f"Coordinate {(x, y)} outside {self.width}x{self.height} grid"
            )

    def coords(self) -> Iterator[Coord]:
        """Iterate all coordinates in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def rows(self) -> List[List[T]]:
        return [list(row) for row in self._rows]

    def map(self, func: Callable[[T], U]) -> "Grid[U]":
        return Grid([[func(value) for value in row] for row in self._rows])

    def copy(self) -> "Grid[T]":
        return Grid(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"


def same_shape(*grids: Grid) -> bool:
    shapes = {grid.shape for grid in grids if grid is not None}
    return len(shapes) <= 1


def require_same_shape(**grids: Grid) -> Tuple[int, int]:
    """Ensure all named grids share one shape and return it."""

    shape = None
    first_name = ""
    for name, grid in grids.items():
        if grid is None:
            continue
        if shape is None:
            shape = grid.shape
            first_name = name
        elif grid.shape != shape:
            raise GridShapeError(
                f"Grid '{name}' is {grid.width}x{grid.height} but "
                f"'{first_name}' is {shape[0]}x{shape[1]}"
            )
    if shape is None:
        raise GridShapeError("No grids supplied")
    return shape


def region_area(region_map: Grid[int], x: int, y: int) -> List[Coord]:
    """Same-region 3x3 neighbourhood of a cell (self included), row-major."""

    region = region_map[x, y]
    area: List[Coord] = []
    for dx, dy in NEIGHBOURHOOD:
        nx, ny = x + dx, y + dy
        if region_map.contains(nx, ny) and region_map[nx, ny] == region:
            area.append((nx, ny))
    return area


class RegionIndex:
    """Precomputed region id -> cell list lookup for one board."""

    def __init__(self, region_map: Grid[int]) -> None:
        self.region_map = region_map
        cells: Dict[int, List[Coord]] = {}
        for coord in region_map.coords():
            region = region_map[coord]
            if region < 0:
                continue
            cells.setdefault(region, []).append(coord)
        self._cells: Dict[int, Tuple[Coord, ...]] = {
            region: tuple(coords) for region, coords in cells.items()
        }

    @property
    def region_ids(self) -> List[int]:
        return sorted(self._cells)

    def cells(self, region_id: int) -> Tuple[Coord, ...]:
        return self._cells.get(region_id, ())

    def size(self, region_id: int) -> int:
        return len(self._cells.get(region_id, ()))

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._cells

    def __len__(self) -> int:
        return len(self._cells)


# ----------------------------------------------------------------------
# Region map construction
# ----------------------------------------------------------------------
def build_region_map(width: int, height: int, region_coords: Sequence[Iterable[Coord]]) -> Grid[int]:
    """Number regions by their position in ``region_coords``; the rest are walls."""

    region_map: Grid[int] = Grid.filled(width, height, WALL)
    for region_id, coords in enumerate(region_coords):
        for coord in coords:
            existing = region_map[coord]
            if existing != WALL and existing != region_id:
                raise GridShapeError(
                    f"Coordinate {coord} assigned to regions {existing} and {region_id}"
                )
            region_map[coord] = region_id
    return region_map


def regions_from_labels(labels: Grid[T], wall_label: T) -> Grid[int]:
    """Flood-fill a label grid into region ids.

    Each 4-connected run of equal labels becomes one region, numbered in
    row-major discovery order. Cells carrying ``wall_label`` become walls.
    """

    region_map: Grid[int] = Grid.filled(labels.width, labels.height, WALL)
    visited = Grid.filled(labels.width, labels.height, False)
    next_region = 0
    for origin in labels.coords():
        if visited[origin]:
            continue
        visited[origin] = True
        label = labels[origin]
        if label == wall_label:
            continue
        queue = deque([origin])
        while queue:
            x, y = queue.popleft()
            region_map[x, y] = next_region
            for dx, dy in ORTHOGONAL_STEPS:
                nx, ny = x + dx, y + dy
                if not labels.contains(nx, ny) or visited[nx, ny]:
                    continue
                if labels[nx, ny] != label:
                    continue
                visited[nx, ny] = True
                queue.append((nx, ny))
        next_region += 1
    return region_map
