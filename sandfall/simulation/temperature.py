"""Heat exchange between occupied cells.

Operates on the grid's temperature array as a ``(height, width)`` view
using shifted slices, in the same way a blur kernel spreads a field.
Only non-Empty cells take part; Empty cells stay where they are.

Exchange uses the temperatures at the start of the pass, so every
adjacent pair of occupied cells trades exactly equal and opposite
amounts of heat.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from sandfall.world.materials import AMBIENT_TEMPERATURE, Material

if TYPE_CHECKING:
    from sandfall.world.grid import Grid

EXCHANGE_RATE = 0.1
AMBIENT_PULL = 0.001

_OFFSETS = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


def _pair_slices(
    dy: int,
    dx: int,
    height: int,
    width: int,
) -> tuple[tuple[slice, slice], tuple[slice, slice]]:
    """Return (cell, neighbour) slices for neighbour offset ``(dy, dx)``."""
    cell = (
        slice(max(0, -dy), height - max(0, dy)),
        slice(max(0, -dx), width - max(0, dx)),
    )
    neighbour = (
        slice(max(0, dy), height - max(0, -dy)),
        slice(max(0, dx), width - max(0, -dx)),
    )
    return cell, neighbour


def exchange_heat(grid: Grid) -> None:
    """Move heat between every pair of adjacent occupied cells.

    Each cell visits its up to eight neighbours and moves half of
    ``(own - neighbour) * EXCHANGE_RATE`` across.  Because both members
    of a pair do this, the net flow per pair is the full
    ``EXCHANGE_RATE`` fraction of their difference and total heat is
    unchanged.
    """
    h, w = grid.height, grid.width
    temps = grid.temperature.reshape(h, w)
    occupied = grid.as_2d() != Material.EMPTY
    delta = np.zeros_like(temps)

    for dy, dx in _OFFSETS:
        cell, neighbour = _pair_slices(dy, dx, h, w)
        pair = occupied[cell] & occupied[neighbour]
        flow = (temps[cell] - temps[neighbour]) * EXCHANGE_RATE * 0.5
        flow *= pair
        delta[cell] -= flow
        delta[neighbour] += flow

    temps += delta


def relax_to_ambient(grid: Grid) -> None:
    """Pull every occupied cell slightly toward ambient temperature."""
    occupied = grid.materials != Material.EMPTY
    temps = grid.temperature
    temps[occupied] += (AMBIENT_TEMPERATURE - temps[occupied]) * AMBIENT_PULL


def diffuse_temperature(grid: Grid) -> None:
    """Run one full temperature pass: pairwise exchange, then relaxation."""
    exchange_heat(grid)
    relax_to_ambient(grid)
