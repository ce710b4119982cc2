"""Tests for sandfall.world.grid."""

import numpy as np
import pytest
from numpy.random import Generator

from sandfall.world.grid import CellMetadata, Grid
from sandfall.world.materials import AMBIENT_TEMPERATURE, Material


class TestConstruction:
    """Grid allocation and validation."""

    def test_dimensions(self, small_grid: Grid) -> None:
        assert small_grid.width == 10
        assert small_grid.height == 10
        assert small_grid.size == 100
        assert small_grid.materials.shape == (100,)
        assert small_grid.temperature.shape == (100,)
        assert small_grid.lifespan.shape == (100,)

    def test_starts_empty_at_ambient(self, small_grid: Grid) -> None:
        assert np.all(small_grid.materials == Material.EMPTY)
        assert np.all(small_grid.temperature == AMBIENT_TEMPERATURE)
        assert np.all(small_grid.lifespan == 0)

    @pytest.mark.parametrize(("width", "height"), [(0, 5), (5, 0), (-3, 4)])
    def test_rejects_non_positive_dimensions(self, width: int, height: int) -> None:
        with pytest.raises(ValueError, match="positive"):
            Grid(width=width, height=height)


class TestAccess:
    """get/set/get_meta with bounds handling."""

    def test_set_and_get(self, small_grid: Grid) -> None:
        small_grid.set(3, 5, Material.SAND)
        assert small_grid.get(3, 5) == Material.SAND
        assert small_grid.materials[5 * 10 + 3] == Material.SAND

    def test_get_out_of_bounds_is_none(self, small_grid: Grid) -> None:
        assert small_grid.get(-1, 0) is None
        assert small_grid.get(10, 0) is None
        assert small_grid.get(0, 10) is None
        assert small_grid.get_meta(0, -1) is None

    def test_set_out_of_bounds_is_ignored(self, small_grid: Grid) -> None:
        small_grid.set(-1, 4, Material.WALL)
        small_grid.set(4, 99, Material.WALL)
        assert small_grid.count(Material.WALL) == 0

    def test_fire_gets_heat_and_lifespan(self, small_grid: Grid) -> None:
        small_grid.set(2, 2, Material.FIRE)
        assert small_grid.get_meta(2, 2) == CellMetadata(
            temperature=400.0, lifespan=100
        )

    def test_steam_gets_heat_and_lifespan(self, small_grid: Grid) -> None:
        small_grid.set(2, 2, Material.STEAM)
        assert small_grid.get_meta(2, 2) == CellMetadata(
            temperature=110.0, lifespan=200
        )

    def test_acid_gets_lifespan_only(self, small_grid: Grid) -> None:
        small_grid.set(2, 2, Material.ACID)
        assert small_grid.get_meta(2, 2) == CellMetadata(
            temperature=AMBIENT_TEMPERATURE,
            lifespan=500,
        )

    def test_plain_material_keeps_metadata(self, small_grid: Grid) -> None:
        small_grid.temperature[0] = -5.0
        small_grid.set(0, 0, Material.WATER)
        assert small_grid.get_meta(0, 0) == CellMetadata(temperature=-5.0, lifespan=0)


class TestSwap:
    """swap exchanges material and metadata together."""

    def test_swap_moves_metadata_with_material(self, small_grid: Grid) -> None:
        small_grid.set(0, 0, Material.FIRE)
        small_grid.swap(0, 55)
        assert small_grid.get(0, 0) == Material.EMPTY
        assert small_grid.get(5, 5) == Material.FIRE
        assert small_grid.get_meta(5, 5) == CellMetadata(
            temperature=400.0, lifespan=100
        )
        assert small_grid.get_meta(0, 0) == CellMetadata(
            temperature=AMBIENT_TEMPERATURE,
            lifespan=0,
        )

    def test_swap_carries_updated_flag(self, small_grid: Grid) -> None:
        small_grid.set(0, 0, Material.WATER)
        small_grid.swap(0, 1)
        assert small_grid.updated[1]
        assert not small_grid.updated[0]

    def test_clear_resets_updated_flags(self, small_grid: Grid) -> None:
        small_grid.set(3, 3, Material.SAND)
        small_grid.clear()
        assert not small_grid.updated.any()

    def test_double_swap_restores_state(self, rng: Generator) -> None:
        grid = Grid(width=6, height=6)
        grid.materials[:] = rng.integers(0, len(Material), grid.size)
        grid.temperature[:] = rng.uniform(-20, 400, grid.size)
        grid.lifespan[:] = rng.integers(0, 500, grid.size)
        before = (grid.materials.copy(), grid.temperature.copy(), grid.lifespan.copy())

        for _ in range(50):
            i, j = (int(v) for v in rng.integers(0, grid.size, 2))
            grid.swap(i, j)
            grid.swap(i, j)

        assert np.array_equal(grid.materials, before[0])
        assert np.array_equal(grid.temperature, before[1])
        assert np.array_equal(grid.lifespan, before[2])

    def test_swap_out_of_range_is_noop(self, small_grid: Grid) -> None:
        small_grid.set(0, 0, Material.SAND)
        small_grid.swap(0, 100)
        small_grid.swap(-1, 0)
        assert small_grid.get(0, 0) == Material.SAND


class TestQueries:
    """Neighbour queries, clear and counts."""

    def test_neighbours_corner(self, small_grid: Grid) -> None:
        assert sorted(small_grid.neighbours(0, 0)) == [1, 10, 11]

    def test_neighbours_centre(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours(4, 4)) == 8
        assert small_grid.index(4, 4) not in small_grid.neighbours(4, 4)

    def test_is_near(self, small_grid: Grid) -> None:
        small_grid.set(5, 5, Material.WATER)
        assert small_grid.is_near(4, 4, Material.WATER)
        assert not small_grid.is_near(2, 2, Material.WATER)
        assert not small_grid.is_near(5, 5, Material.WATER)

    def test_clear(self, small_grid: Grid) -> None:
        small_grid.set(1, 1, Material.FIRE)
        small_grid.set(2, 2, Material.WALL)
        small_grid.clear()
        assert small_grid.count(Material.EMPTY) == 100
        assert np.all(small_grid.temperature == AMBIENT_TEMPERATURE)
        assert np.all(small_grid.lifespan == 0)

    def test_reset(self, small_grid: Grid) -> None:
        small_grid.set(1, 1, Material.FIRE)
        small_grid.reset(11)
        assert small_grid.get(1, 1) == Material.EMPTY
        assert small_grid.get_meta(1, 1) == CellMetadata(
            temperature=AMBIENT_TEMPERATURE,
            lifespan=0,
        )

    def test_as_2d_is_a_view(self, small_grid: Grid) -> None:
        small_grid.as_2d()[3, 7] = Material.OIL
        assert small_grid.get(7, 3) == Material.OIL
