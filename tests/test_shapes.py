"""Tests for sandfall.drawing.shapes."""

import numpy as np
import pytest
from numpy.random import Generator

from sandfall.drawing.shapes import erase_circle, stamp_circle, stamp_line, stamp_rect
from sandfall.world.grid import Grid
from sandfall.world.materials import Material


class TestStampCircle:
    """Disk stamping."""

    @pytest.mark.parametrize(("radius", "cells"), [(0, 1), (1, 5), (2, 13)])
    def test_disk_cell_count(
        self,
        small_grid: Grid,
        rng: Generator,
        radius: int,
        cells: int,
    ) -> None:
        stamp_circle(small_grid, 5, 5, Material.SAND, radius, rng)
        assert small_grid.count(Material.SAND) == cells

    def test_never_overwrites_existing(self, small_grid: Grid, rng: Generator) -> None:
        small_grid.set(5, 5, Material.WALL)
        stamp_circle(small_grid, 5, 5, Material.SAND, 2, rng)
        assert small_grid.get(5, 5) == Material.WALL
        assert small_grid.count(Material.SAND) == 12

    def test_repeat_is_idempotent(self, small_grid: Grid, rng: Generator) -> None:
        stamp_circle(small_grid, 4, 4, Material.WATER, 2, rng)
        before = small_grid.materials.copy()
        stamp_circle(small_grid, 4, 4, Material.SAND, 2, rng)
        assert np.array_equal(small_grid.materials, before)

    def test_probability_thins_the_disk(self, rng: Generator) -> None:
        grid = Grid(width=30, height=30)
        stamp_circle(grid, 15, 15, Material.SAND, 10, rng, probability=0.5)
        full = Grid(width=30, height=30)
        stamp_circle(full, 15, 15, Material.SAND, 10, rng)
        n = full.count(Material.SAND)
        assert 0.3 * n < grid.count(Material.SAND) < 0.7 * n

    def test_clipped_at_edges(self, small_grid: Grid, rng: Generator) -> None:
        stamp_circle(small_grid, 0, 0, Material.SAND, 1, rng)
        assert small_grid.count(Material.SAND) == 3

    def test_initialises_metadata(self, small_grid: Grid, rng: Generator) -> None:
        stamp_circle(small_grid, 5, 5, Material.FIRE, 0, rng)
        meta = small_grid.get_meta(5, 5)
        assert meta is not None
        assert meta.temperature == 400.0
        assert meta.lifespan == 100


class TestStampLine:
    """Bresenham lines with disk thickness."""

    def test_horizontal_single_cell_line(
        self,
        small_grid: Grid,
        rng: Generator,
    ) -> None:
        stamp_line(small_grid, 0, 0, 9, 0, Material.WALL, rng, thickness=0)
        assert small_grid.count(Material.WALL) == 10
        assert all(small_grid.get(x, 0) == Material.WALL for x in range(10))

    def test_diagonal_line(self, small_grid: Grid, rng: Generator) -> None:
        stamp_line(small_grid, 9, 9, 0, 0, Material.WALL, rng, thickness=0)
        assert all(small_grid.get(k, k) == Material.WALL for k in range(10))
        assert small_grid.count(Material.WALL) == 10

    def test_thickness_stamps_disks(self, small_grid: Grid, rng: Generator) -> None:
        stamp_line(small_grid, 2, 5, 7, 5, Material.WALL, rng, thickness=1)
        # Row 5 from x=1..8 plus rows 4 and 6 from x=2..7
        assert small_grid.count(Material.WALL) == 8 + 6 + 6

    def test_single_point(self, small_grid: Grid, rng: Generator) -> None:
        stamp_line(small_grid, 3, 3, 3, 3, Material.OIL, rng, thickness=0)
        assert small_grid.count(Material.OIL) == 1


class TestStampRect:
    """Filled and outlined rectangles."""

    def test_filled(self, small_grid: Grid) -> None:
        stamp_rect(small_grid, 4, 3, 1, 1, Material.WALL, filled=True)
        assert small_grid.count(Material.WALL) == 4 * 3

    def test_outline(self, small_grid: Grid) -> None:
        stamp_rect(small_grid, 1, 1, 4, 3, Material.WALL)
        assert small_grid.count(Material.WALL) == 10
        assert small_grid.get(2, 2) == Material.EMPTY

    def test_outline_keeps_existing_cells(self, small_grid: Grid) -> None:
        small_grid.set(1, 1, Material.SAND)
        stamp_rect(small_grid, 1, 1, 4, 3, Material.WALL)
        assert small_grid.get(1, 1) == Material.SAND

    def test_sparse_fill_needs_rng(self, small_grid: Grid) -> None:
        with pytest.raises(ValueError, match="rng"):
            stamp_rect(
                small_grid, 0, 0, 5, 5, Material.SAND, filled=True, probability=0.5
            )

    def test_sparse_fill(self, rng: Generator) -> None:
        grid = Grid(width=40, height=40)
        stamp_rect(
            grid, 0, 0, 39, 39, Material.SAND, filled=True, probability=0.7, rng=rng
        )
        assert 0.6 * 1600 < grid.count(Material.SAND) < 0.8 * 1600


class TestEdgeSafety:
    """Far out-of-range coordinates never raise or corrupt the grid."""

    def test_circle_far_away(self, small_grid: Grid, rng: Generator) -> None:
        stamp_circle(small_grid, -10000, 5, Material.SAND, 3, rng)
        stamp_circle(small_grid, 5, 10000, Material.SAND, 3, rng)
        assert small_grid.count(Material.EMPTY) == 100

    def test_huge_circle_is_clipped(self, small_grid: Grid, rng: Generator) -> None:
        stamp_circle(small_grid, 5, 5, Material.SAND, 10000, rng)
        assert small_grid.count(Material.SAND) == 100

    def test_line_across_far_bounds(self, small_grid: Grid, rng: Generator) -> None:
        stamp_line(
            small_grid, -10000, -10000, 10000, 10000, Material.WALL, rng, thickness=0
        )
        assert small_grid.count(Material.WALL) == 10

    def test_line_entirely_outside(self, small_grid: Grid, rng: Generator) -> None:
        stamp_line(small_grid, -10000, -50, -9000, -50, Material.WALL, rng, thickness=3)
        assert small_grid.count(Material.WALL) == 0

    def test_rect_far_away(self, small_grid: Grid) -> None:
        stamp_rect(small_grid, -10000, -10000, -9000, -9000, Material.WALL, filled=True)
        assert small_grid.count(Material.WALL) == 0

    def test_rect_spanning_far_bounds(self, small_grid: Grid) -> None:
        stamp_rect(small_grid, -10000, 2, 10000, 4, Material.WALL)
        assert small_grid.count(Material.WALL) == 20
        stamp_rect(small_grid, -10000, 2, 10000, 4, Material.SAND, filled=True)
        assert small_grid.count(Material.SAND) == 10

    def test_existing_cells_untouched(self, small_grid: Grid, rng: Generator) -> None:
        small_grid.set(0, 0, Material.WATER)
        stamp_circle(small_grid, -10000, -10000, Material.SAND, 5, rng)
        stamp_line(small_grid, -10000, 0, 0, 0, Material.SAND, rng, thickness=0)
        assert small_grid.get(0, 0) == Material.WATER


class TestEraseCircle:
    """The eraser overwrites anything, including walls."""

    def test_erases_everything_in_disk(self, small_grid: Grid) -> None:
        stamp_rect(small_grid, 0, 0, 9, 9, Material.WALL, filled=True)
        small_grid.set(5, 5, Material.FIRE)
        erase_circle(small_grid, 5, 5, 1)
        assert small_grid.count(Material.EMPTY) == 5
        assert small_grid.count(Material.FIRE) == 0
        meta = small_grid.get_meta(5, 5)
        assert meta is not None
        assert meta.lifespan == 0

    def test_erase_far_away(self, small_grid: Grid) -> None:
        small_grid.set(0, 0, Material.SAND)
        erase_circle(small_grid, -10000, -10000, 3)
        assert small_grid.get(0, 0) == Material.SAND
