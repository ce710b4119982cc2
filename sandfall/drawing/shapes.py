"""Shape rasterizer — turn drawing requests into cell writes.

Every stamp only fills cells that are currently Empty, so repeated
strokes never damage existing structures.  Shapes are clipped to the
grid before iterating; a request far outside the grid costs nothing
beyond the part that overlaps it.

Nothing here advances the simulation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sandfall.world.materials import Material

if TYPE_CHECKING:
    from numpy.random import Generator

    from sandfall.world.grid import Grid


def _fill_if_empty(grid: Grid, i: int, material: Material) -> None:
    if grid.materials[i] == Material.EMPTY:
        grid.set_index(i, material)


def stamp_circle(
    grid: Grid,
    cx: int,
    cy: int,
    material: Material,
    radius: int,
    rng: Generator,
    probability: float = 1.0,
) -> None:
    """Fill Empty cells inside a disk, each with independent probability.

    Args:
        grid: Target grid.
        cx: Centre column.
        cy: Centre row.
        material: Material to write.
        radius: Disk radius in cells (0 stamps a single cell).
        rng: Random source for the per-cell inclusion roll.
        probability: Chance that each cell in the disk is written.
    """
    r2 = radius * radius
    y_lo, y_hi = max(-radius, -cy), min(radius, grid.height - 1 - cy)
    x_lo, x_hi = max(-radius, -cx), min(radius, grid.width - 1 - cx)
    for dy in range(y_lo, y_hi + 1):
        row = (cy + dy) * grid.width
        for dx in range(x_lo, x_hi + 1):
            if dx * dx + dy * dy > r2:
                continue
            if probability < 1.0 and rng.random() >= probability:
                continue
            _fill_if_empty(grid, row + cx + dx, material)


def stamp_line(
    grid: Grid,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    material: Material,
    rng: Generator,
    thickness: int = 1,
) -> None:
    """Stamp a disk of radius ``thickness`` at every Bresenham step.

    Args:
        grid: Target grid.
        x1: Start column.
        y1: Start row.
        x2: End column.
        y2: End row.
        material: Material to write.
        rng: Random source passed through to ``stamp_circle``.
        thickness: Radius of the disk stamped at each step.
    """
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy
    x, y = x1, y1

    while True:
        # Skip steps whose disk cannot touch the grid
        if (
            -thickness <= x < grid.width + thickness
            and -thickness <= y < grid.height + thickness
        ):
            stamp_circle(grid, x, y, material, thickness, rng)
        if x == x2 and y == y2:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def stamp_rect(
    grid: Grid,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    material: Material,
    *,
    filled: bool = False,
    probability: float = 1.0,
    rng: Generator | None = None,
) -> None:
    """Write a filled rectangle or its one-cell outline.

    Corners may be given in any order.  Only Empty cells are written.

    Args:
        grid: Target grid.
        x1: First corner column.
        y1: First corner row.
        x2: Opposite corner column.
        y2: Opposite corner row.
        material: Material to write.
        filled: Fill the whole box instead of just its border.
        probability: Per-cell write chance for filled boxes.
        rng: Random source, required when ``probability < 1``.
    """
    if probability < 1.0 and rng is None:
        msg = "an rng is required when probability < 1"
        raise ValueError(msg)

    start_x, end_x = min(x1, x2), max(x1, x2)
    start_y, end_y = min(y1, y2), max(y1, y2)
    cx_lo, cx_hi = max(start_x, 0), min(end_x, grid.width - 1)
    cy_lo, cy_hi = max(start_y, 0), min(end_y, grid.height - 1)
    if cx_lo > cx_hi or cy_lo > cy_hi:
        return

    w = grid.width
    if filled:
        sparse = rng is not None and probability < 1.0
        for y in range(cy_lo, cy_hi + 1):
            for x in range(cx_lo, cx_hi + 1):
                if sparse and rng.random() >= probability:
                    continue
                _fill_if_empty(grid, y * w + x, material)
        return

    for y in (start_y, end_y):
        if 0 <= y < grid.height:
            for x in range(cx_lo, cx_hi + 1):
                _fill_if_empty(grid, y * w + x, material)
    for x in (start_x, end_x):
        if 0 <= x < grid.width:
            for y in range(max(start_y + 1, 0), min(end_y - 1, grid.height - 1) + 1):
                _fill_if_empty(grid, y * w + x, material)


def erase_circle(grid: Grid, cx: int, cy: int, radius: int) -> None:
    """Reset every cell inside a disk to Empty, whatever it holds.

    Args:
        grid: Target grid.
        cx: Centre column.
        cy: Centre row.
        radius: Disk radius in cells.
    """
    r2 = radius * radius
    for dy in range(max(-radius, -cy), min(radius, grid.height - 1 - cy) + 1):
        row = (cy + dy) * grid.width
        for dx in range(max(-radius, -cx), min(radius, grid.width - 1 - cx) + 1):
            if dx * dx + dy * dy <= r2:
                grid.reset(row + cx + dx)
