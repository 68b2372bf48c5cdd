import unittest

from mosaic.core.constants import WALL
from mosaic.core.exceptions import CoordinateError, GridShapeError
from mosaic.engine.grid import (
    Grid,
    RegionIndex,
    build_region_map,
    region_area,
    regions_from_labels,
    require_same_shape,
    same_shape,
)


class GridTests(unittest.TestCase):
    def test_indexing_is_column_then_row(self) -> None:
        grid = Grid([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(grid.width, 3)
        self.assertEqual(grid.height, 2)
        self.assertEqual(grid[2, 0], 3)
        self.assertEqual(grid[0, 1], 4)
        grid[1, 1] = 9
        self.assertEqual(grid.rows(), [[1, 2, 3], [4, 9, 6]])

    def test_out_of_range_raises_coordinate_error(self) -> None:
        grid = Grid.filled(2, 2, 0)
        with self.assertRaises(CoordinateError):
            grid[2, 0]
        with self.assertRaises(IndexError):
            grid[0, -1] = 1

    def test_malformed_grids_rejected(self) -> None:
        with self.assertRaises(GridShapeError):
            Grid([])
        with self.assertRaises(GridShapeError):
            Grid([[1, 2], [3]])
        with self.assertRaises(GridShapeError):
            Grid.filled(0, 3, 0)

    def test_copy_is_independent(self) -> None:
        grid = Grid([[0, 0], [0, 0]])
        clone = grid.copy()
        clone[0, 0] = 7
        self.assertEqual(grid[0, 0], 0)
        self.assertNotEqual(grid, clone)
        self.assertEqual(grid, Grid.filled(2, 2, 0))

    def test_coords_are_row_major(self) -> None:
        grid = Grid.filled(2, 2, None)
        self.assertEqual(list(grid.coords()), [(0, 0), (1, 0), (0, 1), (1, 1)])

    def test_shape_checks(self) -> None:
        a = Grid.filled(3, 2, 0)
        b = Grid.filled(3, 2, False)
        c = Grid.filled(2, 3, 0)
        self.assertTrue(same_shape(a, b))
        self.assertFalse(same_shape(a, c))
        self.assertEqual(require_same_shape(a=a, b=b, board=None), (3, 2))
        with self.assertRaises(GridShapeError):
            require_same_shape(solution=a, clues=c)


class RegionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.region_map = Grid([
            [0, 0, 1],
            [0, 0, 1],
            [1, 1, 1],
        ])

    def test_region_area_stays_in_region(self) -> None:
        self.assertEqual(
            region_area(self.region_map, 1, 1),
            [(0, 0), (1, 0), (0, 1), (1, 1)],
        )
        self.assertEqual(
            region_area(self.region_map, 2, 2),
            [(2, 1), (1, 2), (2, 2)],
        )

    def test_region_area_clipped_at_edges(self) -> None:
        region_map = Grid.filled(3, 3, 0)
        self.assertEqual(len(region_area(region_map, 0, 0)), 4)
        self.assertEqual(len(region_area(region_map, 1, 0)), 6)
        self.assertEqual(len(region_area(region_map, 1, 1)), 9)

    def test_region_index_excludes_walls(self) -> None:
        region_map = Grid([[0, WALL, 1], [0, WALL, 1]])
        index = RegionIndex(region_map)
        self.assertEqual(index.region_ids, [0, 1])
        self.assertEqual(index.cells(1), ((2, 0), (2, 1)))
        self.assertEqual(index.size(0), 2)
        self.assertNotIn(WALL, index)
        self.assertEqual(index.cells(5), ())

    def test_build_region_map(self) -> None:
        region_map = build_region_map(3, 1, [[(0, 0)], [(2, 0)]])
        self.assertEqual(region_map.rows(), [[0, WALL, 1]])
        with self.assertRaises(GridShapeError):
            build_region_map(2, 1, [[(0, 0)], [(0, 0), (1, 0)]])

    def test_regions_from_labels(self) -> None:
        labels = Grid([
            ["a", "a", "#"],
            ["b", "#", "c"],
        ])
        region_map = regions_from_labels(labels, "#")
        self.assertEqual(region_map.rows(), [[0, 0, WALL], [1, WALL, 2]])

    def test_regions_from_labels_splits_disconnected_runs(self) -> None:
        labels = Grid([["a", "#", "a"]])
        self.assertEqual(regions_from_labels(labels, "#").rows(), [[0, WALL, 1]])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
