"""Materials — the closed set of cell kinds and their physical constants.

Every cell in the grid holds exactly one ``Material``.  Properties are
static tuning constants looked up by kind; nothing here changes at
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

AMBIENT_TEMPERATURE = 20.0
FIRE_TEMPERATURE = 400.0
STEAM_TEMPERATURE = 110.0


class Material(IntEnum):
    """Cell kinds, stored as small integers in the grid array."""

    EMPTY = 0
    SAND = 1
    WATER = 2
    WALL = 3
    FIRE = 4
    OIL = 5
    PLANT = 6
    ACID = 7
    ICE = 8
    STEAM = 9


@dataclass(frozen=True)
class MaterialProperties:
    """Physical constants for one material.

    Attributes:
        density: Relative weight used only by the displacement rule.
        flammable: Whether adjacent fire can ignite this material.
        default_lifespan: Starting lifespan in ticks (0 = unlimited).
        growth_rate: Per-tick spread chance (plant only).
        dissolve_rate: Per-neighbour dissolve chance (acid only).
        melt_rate: Melt chance per degree above zero (ice only).
    """

    density: float
    flammable: bool = False
    default_lifespan: int = 0
    growth_rate: float = 0.0
    dissolve_rate: float = 0.0
    melt_rate: float = 0.0


_PROPERTIES: dict[Material, MaterialProperties] = {
    Material.EMPTY: MaterialProperties(density=0.0),
    Material.SAND: MaterialProperties(density=3.0),
    Material.WATER: MaterialProperties(density=2.0),
    Material.WALL: MaterialProperties(density=10.0),
    Material.FIRE: MaterialProperties(density=0.5, default_lifespan=100),
    Material.OIL: MaterialProperties(density=1.5, flammable=True),
    Material.PLANT: MaterialProperties(
        density=1.0,
        flammable=True,
        growth_rate=0.01,
    ),
    Material.ACID: MaterialProperties(
        density=2.2,
        default_lifespan=500,
        dissolve_rate=0.2,
    ),
    Material.ICE: MaterialProperties(density=1.8, melt_rate=0.01),
    Material.STEAM: MaterialProperties(density=0.3, default_lifespan=200),
}


def properties_of(material: Material) -> MaterialProperties:
    """Return the static properties for ``material``."""
    return _PROPERTIES[Material(material)]


def can_displace(source: Material, target: Material) -> bool:
    """Return True if ``source`` may move into a cell holding ``target``.

    Empty space is always free.  Walls never yield.  Otherwise the
    denser material sinks through the lighter one.
    """
    if target == Material.EMPTY:
        return True
    if target == Material.WALL:
        return False
    return _PROPERTIES[source].density > _PROPERTIES[target].density
