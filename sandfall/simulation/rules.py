"""Per-material transition rules.

Each rule advances the particle at ``(x, y)`` by one tick.  Rules share
one signature so the sweep can dispatch on material:

    rule(grid, x, y, rng, gravity_strength) -> None

Gravity-driven materials take up to ``gravity_strength`` sub-steps per
tick, always from the particle's current position, and stop as soon as
a sub-step fails to move them.  All randomness comes from the injected
``rng``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sandfall.world.materials import Material, can_displace, properties_of

if TYPE_CHECKING:
    from numpy.random import Generator

    from sandfall.world.grid import Grid

# -- Constants ---------------------------------------------------------------

_BOILING_POINT = 99.0
_FREEZING_POINT = 0.0
_EVAPORATE_CHANCE = 0.1
_FREEZE_CHANCE = 0.05
_EXTINGUISH_CHANCE = 0.4

_OIL_FLASH_POINT = 220.0
_OIL_IGNITE_CHANCE = 0.2
_OIL_FLOW_CHANCE = 0.3

_FIRE_HEAT = 5.0
_FIRE_SPREAD_CHANCE = 0.1
_FIRE_SMOKE_CHANCE = 0.05
_FIRE_FLICKER_BASE = 350
_FIRE_FLICKER_RANGE = 100

_STEAM_CONDENSE_POINT = 90.0
_STEAM_CONDENSE_CHANCE = 0.2
_STEAM_COOLING = 0.2

_ACID_SPREAD_CHANCE = 0.7
_ACID_RESISTANCE: dict[Material, float] = {
    Material.WALL: 0.1,
    Material.SAND: 0.5,
}
_ACID_IMMUNE = frozenset({Material.EMPTY, Material.ACID, Material.STEAM})

_MELTWATER_TEMPERATURE = 2.0
_ICE_FREEZE_ATTEMPT_CHANCE = 0.02
_ICE_FREEZE_CHANCE = 0.1
_ICE_CHILL = 1.0

_PLANT_BURN_POINT = 150.0
_PLANT_IGNITE_CHANCE = 0.1


# -- Movement helpers ---------------------------------------------------------


def _displace(grid: Grid, x: int, y: int, tx: int, ty: int) -> bool:
    """Swap into ``(tx, ty)`` if the density rule allows it."""
    if not grid.in_bounds(tx, ty):
        return False
    w = grid.width
    i, t = y * w + x, ty * w + tx
    if not can_displace(int(grid.materials[i]), int(grid.materials[t])):
        return False
    grid.swap(i, t)
    return True


def _move_into_empty(grid: Grid, x: int, y: int, tx: int, ty: int) -> bool:
    """Swap into ``(tx, ty)`` only if that cell is Empty."""
    if not grid.in_bounds(tx, ty):
        return False
    w = grid.width
    t = ty * w + tx
    if grid.materials[t] != Material.EMPTY:
        return False
    grid.swap(y * w + x, t)
    return True


def _fall_step(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    diagonal_chance: float = 1.0,
) -> tuple[int, int] | None:
    """Try down, then down-left, then down-right.

    Each diagonal is gated by its own ``diagonal_chance`` roll.

    Returns:
        The new position, or None if the particle stayed put.
    """
    if _displace(grid, x, y, x, y + 1):
        return x, y + 1
    for dx in (-1, 1):
        if diagonal_chance < 1.0 and rng.random() >= diagonal_chance:
            continue
        if _displace(grid, x, y, x + dx, y + 1):
            return x + dx, y + 1
    return None


def _spread_step(grid: Grid, x: int, y: int, rng: Generator) -> tuple[int, int] | None:
    """Try left and right in a random order."""
    order = (-1, 1) if rng.random() < 0.5 else (1, -1)
    for dx in order:
        if _displace(grid, x, y, x + dx, y):
            return x + dx, y
    return None


def _flow_step(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    *,
    diagonal_chance: float = 1.0,
    spread_chance: float = 1.0,
) -> tuple[int, int] | None:
    """One liquid sub-step: fall if possible, otherwise spread sideways."""
    moved = _fall_step(grid, x, y, rng, diagonal_chance)
    if moved is None and (spread_chance >= 1.0 or rng.random() < spread_chance):
        moved = _spread_step(grid, x, y, rng)
    return moved


def _rise_step(grid: Grid, x: int, y: int) -> tuple[int, int] | None:
    """Try up, then up-left, then up-right, into Empty cells only."""
    for dx in (0, -1, 1):
        if _move_into_empty(grid, x, y, x + dx, y - 1):
            return x + dx, y - 1
    return None


# -- Interaction helpers ------------------------------------------------------


def _ignite(grid: Grid, i: int) -> None:
    """Turn index ``i`` into fresh fire."""
    grid.set_index(i, Material.FIRE)


def _extinguish_neighbours(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Neighbouring fire may be quenched into steam."""
    for n in grid.neighbours(x, y):
        if grid.materials[n] == Material.FIRE and rng.random() < _EXTINGUISH_CHANCE:
            grid.set_index(n, Material.STEAM)


def _heat_and_ignite_neighbours(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Warm every occupied neighbour; flammable ones may catch fire."""
    for n in grid.neighbours(x, y):
        material = int(grid.materials[n])
        if material == Material.EMPTY:
            continue
        grid.temperature[n] += _FIRE_HEAT
        if properties_of(material).flammable and rng.random() < _FIRE_SPREAD_CHANCE:
            _ignite(grid, n)


def _dissolve_neighbours(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Eat away at neighbouring material.

    The base dissolve roll is applied twice: once unconditionally and
    once scaled by the neighbour's resistance.
    """
    rate = properties_of(Material.ACID).dissolve_rate
    for n in grid.neighbours(x, y):
        material = Material(int(grid.materials[n]))
        if material in _ACID_IMMUNE:
            continue
        if rng.random() >= rate:
            continue
        resist = _ACID_RESISTANCE.get(material, 1.0)
        if rng.random() < rate * resist:
            grid.reset(n)


def _freeze_neighbours(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Chill neighbouring water; water below freezing may turn to ice."""
    for n in grid.neighbours(x, y):
        if grid.materials[n] != Material.WATER:
            continue
        grid.temperature[n] -= _ICE_CHILL
        if grid.temperature[n] < _FREEZING_POINT and rng.random() < _ICE_FREEZE_CHANCE:
            grid.materials[n] = Material.ICE
            grid.updated[n] = True


def _grow_plant(grid: Grid, x: int, y: int, rng: Generator) -> None:
    """Sprout a plant in one uniformly chosen Empty neighbour."""
    empties = [n for n in grid.neighbours(x, y) if grid.materials[n] == Material.EMPTY]
    if empties:
        grid.set_index(empties[int(rng.integers(len(empties)))], Material.PLANT)


# -- Falling materials (bottom-to-top pass) -----------------------------------


def update_sand(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Fall straight down or diagonally, sinking through lighter material."""
    for _ in range(gravity_strength):
        moved = _fall_step(grid, x, y, rng)
        if moved is None:
            return
        x, y = moved


def update_water(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Flow like a liquid, quench fire, boil when hot and freeze when cold."""
    for _ in range(gravity_strength):
        moved = _flow_step(grid, x, y, rng)
        if moved is not None:
            x, y = moved
        _extinguish_neighbours(grid, x, y, rng)

        i = grid.index(x, y)
        temp = grid.temperature[i]
        if temp > _BOILING_POINT and rng.random() < _EVAPORATE_CHANCE:
            grid.set_index(i, Material.STEAM)
            return
        if temp < _FREEZING_POINT and rng.random() < _FREEZE_CHANCE:
            grid.materials[i] = Material.ICE
            return
        if moved is None:
            return


def update_oil(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Flow sluggishly and ignite near fire or when very hot.

    Oil takes one sub-step fewer than the gravity setting and only
    moves diagonally or sideways on a 30% roll per branch.
    """
    for _ in range(max(1, gravity_strength - 1)):
        moved = _flow_step(
            grid,
            x,
            y,
            rng,
            diagonal_chance=_OIL_FLOW_CHANCE,
            spread_chance=_OIL_FLOW_CHANCE,
        )
        if moved is not None:
            x, y = moved

        i = grid.index(x, y)
        hot = grid.temperature[i] > _OIL_FLASH_POINT
        near_fire = grid.is_near(x, y, Material.FIRE)
        if (hot or near_fire) and rng.random() < _OIL_IGNITE_CHANCE:
            _ignite(grid, i)
            return
        if moved is None:
            return


def update_acid(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Dissolve neighbours, then flow like water until the acid is spent."""
    i = grid.index(x, y)
    grid.lifespan[i] -= 1
    if grid.lifespan[i] <= 0:
        grid.reset(i)
        return

    _dissolve_neighbours(grid, x, y, rng)

    for _ in range(gravity_strength):
        moved = _flow_step(grid, x, y, rng, spread_chance=_ACID_SPREAD_CHANCE)
        if moved is None:
            return
        x, y = moved


def update_ice(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Stay put, melt above zero and occasionally freeze nearby water."""
    i = grid.index(x, y)
    temp = grid.temperature[i]
    if temp > _FREEZING_POINT:
        melt_chance = properties_of(Material.ICE).melt_rate * temp
        if rng.random() < melt_chance:
            grid.materials[i] = Material.WATER
            grid.temperature[i] = _MELTWATER_TEMPERATURE

    if rng.random() < _ICE_FREEZE_ATTEMPT_CHANCE:
        _freeze_neighbours(grid, x, y, rng)


# -- Rising and static materials (top-to-bottom pass) -------------------------


def update_fire(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Burn down, rise, heat the neighbourhood and spread to fuel."""
    i = grid.index(x, y)
    grid.lifespan[i] -= 1
    if grid.lifespan[i] <= 0:
        grid.reset(i)
        return

    moved = _rise_step(grid, x, y)
    if moved is not None:
        x, y = moved
        i = grid.index(x, y)

    _heat_and_ignite_neighbours(grid, x, y, rng)

    if rng.random() < _FIRE_SMOKE_CHANCE and y > 0:
        above = i - grid.width
        if grid.materials[above] == Material.EMPTY:
            grid.set_index(above, Material.STEAM)

    # Flicker
    grid.temperature[i] = _FIRE_FLICKER_BASE + int(rng.integers(_FIRE_FLICKER_RANGE))


def update_steam(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Rise and drift, cooling until it condenses or vanishes."""
    i = grid.index(x, y)
    grid.lifespan[i] -= 1
    cooled = grid.temperature[i] < _STEAM_CONDENSE_POINT
    if grid.lifespan[i] <= 0 or cooled:
        condense = cooled and rng.random() < _STEAM_CONDENSE_CHANCE
        grid.reset(i)
        if condense:
            grid.materials[i] = Material.WATER
        return

    moved = _rise_step(grid, x, y)
    if moved is None:
        order = (-1, 1) if rng.random() < 0.5 else (1, -1)
        for dx in order:
            if _move_into_empty(grid, x, y, x + dx, y):
                moved = x + dx, y
                break
    if moved is not None:
        x, y = moved

    grid.temperature[grid.index(x, y)] -= _STEAM_COOLING


def update_plant(
    grid: Grid,
    x: int,
    y: int,
    rng: Generator,
    gravity_strength: int,
) -> None:
    """Grow beside water and catch fire when hot or next to flames."""
    if grid.is_near(x, y, Material.WATER):
        if rng.random() < properties_of(Material.PLANT).growth_rate:
            _grow_plant(grid, x, y, rng)

    i = grid.index(x, y)
    hot = grid.temperature[i] > _PLANT_BURN_POINT
    near_fire = grid.is_near(x, y, Material.FIRE)
    if (hot or near_fire) and rng.random() < _PLANT_IGNITE_CHANCE:
        _ignite(grid, i)
