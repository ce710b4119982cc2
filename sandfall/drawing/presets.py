"""Presets — canned wall structures built from shape primitives.

Presets only write through the shape rasterizer, so they never
overwrite existing material.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from sandfall.drawing.shapes import stamp_line, stamp_rect
from sandfall.world.materials import Material

if TYPE_CHECKING:
    from numpy.random import Generator

    from sandfall.world.grid import Grid

logger = logging.getLogger(__name__)

_MAZE_SIZE = 40
_MAZE_GAP = 10
_HOURGLASS_SAND_CHANCE = 0.7


class Preset(Enum):
    """Named structures the UI can place."""

    BARRIER = "barrier"
    FUNNEL = "funnel"
    CONTAINER = "container"
    HOURGLASS = "hourglass"
    MAZE = "maze"


def create_preset(
    grid: Grid,
    preset: Preset | str,
    x: int,
    y: int,
    rng: Generator,
) -> None:
    """Build a preset structure centred on ``(x, y)``.

    Args:
        grid: Target grid.
        preset: Which structure to build (enum member or its name).
        x: Centre column.
        y: Centre row.
        rng: Random source for sand fill and maze gaps.

    Raises:
        ValueError: If ``preset`` does not name a known structure.
    """
    preset = Preset(preset)
    wall = Material.WALL

    if preset is Preset.BARRIER:
        stamp_rect(grid, x - 20, y - 3, x + 20, y + 3, wall, filled=True)

    elif preset is Preset.FUNNEL:
        stamp_line(grid, x - 15, y - 15, x, y + 5, wall, rng)
        stamp_line(grid, x + 15, y - 15, x, y + 5, wall, rng)

    elif preset is Preset.CONTAINER:
        # One-cell walls with an opening in the middle of the top edge
        stamp_line(grid, x - 20, y - 20, x - 20, y + 20, wall, rng, thickness=0)
        stamp_line(grid, x + 20, y - 20, x + 20, y + 20, wall, rng, thickness=0)
        stamp_line(grid, x - 20, y + 20, x + 20, y + 20, wall, rng, thickness=0)
        stamp_line(grid, x - 20, y - 20, x - 6, y - 20, wall, rng, thickness=0)
        stamp_line(grid, x + 6, y - 20, x + 20, y - 20, wall, rng, thickness=0)

    elif preset is Preset.HOURGLASS:
        stamp_rect(grid, x - 15, y - 25, x + 15, y - 10, wall)
        stamp_rect(grid, x - 15, y + 10, x + 15, y + 25, wall)
        stamp_line(grid, x - 10, y - 10, x, y, wall, rng)
        stamp_line(grid, x + 10, y - 10, x, y, wall, rng)
        stamp_line(grid, x - 10, y + 10, x, y, wall, rng)
        stamp_line(grid, x + 10, y + 10, x, y, wall, rng)
        stamp_rect(
            grid,
            x - 14,
            y - 24,
            x + 13,
            y - 13,
            Material.SAND,
            filled=True,
            probability=_HOURGLASS_SAND_CHANCE,
            rng=rng,
        )

    elif preset is Preset.MAZE:
        _build_maze(grid, x, y, rng)

    logger.debug("Placed %s preset at (%d, %d)", preset.value, x, y)


def _build_maze(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Outer box plus two horizontal and two vertical dividers with gaps."""
    half = _MAZE_SIZE // 2
    wall = Material.WALL
    stamp_rect(grid, x - half, y - half, x + half, y + half, wall)

    gap_span = _MAZE_SIZE - 2 * _MAZE_GAP
    for i in (1, 2):
        offset = (_MAZE_SIZE // 3) * i

        y_pos = y - half + offset
        gap_x = x - half + _MAZE_GAP + int(rng.integers(0, gap_span))
        stamp_line(grid, x - half, y_pos, gap_x, y_pos, wall, rng)
        stamp_line(grid, gap_x + _MAZE_GAP, y_pos, x + half, y_pos, wall, rng)

        x_pos = x - half + offset
        gap_y = y - half + _MAZE_GAP + int(rng.integers(0, gap_span))
        stamp_line(grid, x_pos, y - half, x_pos, gap_y, wall, rng)
        stamp_line(grid, x_pos, gap_y + _MAZE_GAP, x_pos, y + half, wall, rng)
