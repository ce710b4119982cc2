"""Update sweep — one simulation tick over the whole grid.

A tick runs three passes in a fixed order:

1. Falling materials (sand, water, oil, acid, ice), rows bottom-to-top.
2. Rising and static-reactive materials (fire, steam, plant), rows
   top-to-bottom.
3. Temperature diffusion over every cell.

Within a row the column order alternates (left-to-right on even rows,
right-to-left on odd rows) so horizontal spreading has no systematic
bias.

Each particle is evaluated at most once per tick.  The grid carries an
``updated`` flag that moves with the particle, so one that slides ahead
of the sweep, or that a rule creates in a cell not yet visited, is
skipped for the rest of the tick.

Dispatch is table-driven.  Every ``Material`` must appear in exactly one
of the rule tables or in ``INERT_MATERIALS``; the module refuses to
import otherwise, so a new material cannot be added without deciding
how each pass treats it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from sandfall.simulation.rules import (
    update_acid,
    update_fire,
    update_ice,
    update_oil,
    update_plant,
    update_sand,
    update_steam,
    update_water,
)
from sandfall.simulation.temperature import diffuse_temperature
from sandfall.world.materials import Material

if TYPE_CHECKING:
    from numpy.random import Generator

    from sandfall.world.grid import Grid

Rule = Callable[["Grid", int, int, "Generator", int], None]

FALLING_RULES: dict[Material, Rule] = {
    Material.SAND: update_sand,
    Material.WATER: update_water,
    Material.OIL: update_oil,
    Material.ACID: update_acid,
    Material.ICE: update_ice,
}

RISING_RULES: dict[Material, Rule] = {
    Material.FIRE: update_fire,
    Material.STEAM: update_steam,
    Material.PLANT: update_plant,
}

INERT_MATERIALS = frozenset({Material.EMPTY, Material.WALL})


def _check_dispatch_tables() -> None:
    """Ensure every material is handled by exactly one table."""
    tables = [set(FALLING_RULES), set(RISING_RULES), set(INERT_MATERIALS)]
    seen: set[Material] = set()
    for table in tables:
        overlap = seen & table
        if overlap:
            names = sorted(m.name for m in overlap)
            msg = f"materials dispatched more than once: {names}"
            raise RuntimeError(msg)
        seen |= table
    missing = set(Material) - seen
    if missing:
        msg = f"materials without an update rule: {sorted(m.name for m in missing)}"
        raise RuntimeError(msg)


_check_dispatch_tables()


def _sweep(
    grid: Grid,
    rules: dict[Material, Rule],
    rows: range,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Visit every cell in ``rows`` and run the rule for its material."""
    w = grid.width
    materials = grid.materials
    updated = grid.updated
    left_to_right = range(w)
    right_to_left = range(w - 1, -1, -1)

    for y in rows:
        start = y * w
        if not materials[start : start + w].any():
            continue
        columns = left_to_right if y % 2 == 0 else right_to_left
        for x in columns:
            i = start + x
            if updated[i]:
                continue
            rule = rules.get(int(materials[i]))
            if rule is not None:
                # The flag travels with the particle through every swap
                updated[i] = True
                rule(grid, x, y, rng, gravity_strength)


def update_grid(grid: Grid, rng: Generator, *, gravity_strength: int = 1) -> None:
    """Advance ``grid`` in place by one tick.

    Args:
        grid: The cell store to update.
        rng: Random source for every stochastic rule.
        gravity_strength: Sub-steps per tick for gravity-driven
            materials (must be at least 1).

    Raises:
        ValueError: If ``gravity_strength`` is below 1.
    """
    if gravity_strength < 1:
        msg = f"gravity_strength must be >= 1, got {gravity_strength}"
        raise ValueError(msg)

    grid.updated.fill(False)
    h = grid.height
    _sweep(grid, FALLING_RULES, range(h - 1, -1, -1), rng, gravity_strength)
    _sweep(grid, RISING_RULES, range(h), rng, gravity_strength)
    diffuse_temperature(grid)
