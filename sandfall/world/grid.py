"""Grid — the fixed-size cell store for the simulation.

Materials and per-cell metadata live in flat NumPy arrays of length
``width * height`` addressed by ``index = y * width + x``.  Metadata
always travels with its particle: every swap exchanges all arrays
together, including the per-tick ``updated`` flag, so a particle that
moves ahead of the sweep is not visited a second time.

Coordinate access is deliberately lenient.  Reads outside the grid
return ``None`` and writes outside the grid are ignored, so brush
strokes near the edges never raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from sandfall.world.materials import (
    AMBIENT_TEMPERATURE,
    FIRE_TEMPERATURE,
    STEAM_TEMPERATURE,
    Material,
    properties_of,
)

_NEIGHBOUR_OFFSETS = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

# Starting temperatures applied when a material is written into a cell
_INITIAL_TEMPERATURE: dict[Material, float] = {
    Material.FIRE: FIRE_TEMPERATURE,
    Material.STEAM: STEAM_TEMPERATURE,
}

_HAS_LIFESPAN = frozenset({Material.FIRE, Material.ACID, Material.STEAM})


@dataclass(frozen=True)
class CellMetadata:
    """Read-only snapshot of one cell's metadata.

    Attributes:
        temperature: Cell temperature in degrees Celsius.
        lifespan: Remaining ticks for materials that expire.
    """

    temperature: float
    lifespan: int


@dataclass
class Grid:
    """A 2D grid of material cells with co-indexed metadata.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        materials: Material id per cell.
        temperature: Temperature per cell (degrees Celsius).
        lifespan: Remaining lifespan per cell.
        updated: Whether the particle in each cell has already been
            processed (or was created) during the current tick.
    """

    width: int
    height: int
    materials: NDArray[np.int8] = field(init=False, repr=False)
    temperature: NDArray[np.float64] = field(init=False, repr=False)
    lifespan: NDArray[np.int32] = field(init=False, repr=False)
    updated: NDArray[np.bool_] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions and allocate empty arrays."""
        if self.width <= 0 or self.height <= 0:
            msg = f"grid dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        size = self.width * self.height
        self.materials = np.zeros(size, dtype=np.int8)
        self.temperature = np.full(size, AMBIENT_TEMPERATURE, dtype=np.float64)
        self.lifespan = np.zeros(size, dtype=np.int32)
        self.updated = np.zeros(size, dtype=np.bool_)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        """Return the flat index for in-bounds coordinates."""
        return y * self.width + x

    def get(self, x: int, y: int) -> Material | None:
        """Return the material at ``(x, y)``, or None when out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return Material(int(self.materials[y * self.width + x]))

    def get_meta(self, x: int, y: int) -> CellMetadata | None:
        """Return a metadata snapshot at ``(x, y)``, or None when out of bounds."""
        if not self.in_bounds(x, y):
            return None
        i = y * self.width + x
        return CellMetadata(
            temperature=float(self.temperature[i]),
            lifespan=int(self.lifespan[i]),
        )

    def set(self, x: int, y: int, material: Material) -> None:
        """Write ``material`` at ``(x, y)``; ignored when out of bounds."""
        if self.in_bounds(x, y):
            self.set_index(y * self.width + x, material)

    def set_index(self, i: int, material: Material) -> None:
        """Write ``material`` at flat index ``i`` and initialise its metadata.

        Fire and steam start hot; fire, acid and steam get their default
        lifespan.  Other materials keep whatever metadata the cell had.
        The new particle counts as updated for the current tick.
        """
        self.materials[i] = material
        self.updated[i] = True
        if material in _INITIAL_TEMPERATURE:
            self.temperature[i] = _INITIAL_TEMPERATURE[material]
        if material in _HAS_LIFESPAN:
            self.lifespan[i] = properties_of(material).default_lifespan

    def reset(self, i: int) -> None:
        """Turn index ``i`` into Empty at ambient temperature."""
        self.materials[i] = Material.EMPTY
        self.temperature[i] = AMBIENT_TEMPERATURE
        self.lifespan[i] = 0

    def swap(self, i1: int, i2: int) -> None:
        """Exchange material and metadata between two indices.

        Out-of-range indices make this a no-op.
        """
        size = self.size
        if not (0 <= i1 < size and 0 <= i2 < size):
            return
        for arr in (self.materials, self.temperature, self.lifespan, self.updated):
            arr[i1], arr[i2] = arr[i2], arr[i1]

    def clear(self) -> None:
        """Reset every cell to Empty at ambient temperature."""
        self.materials.fill(Material.EMPTY)
        self.temperature.fill(AMBIENT_TEMPERATURE)
        self.lifespan.fill(0)
        self.updated.fill(False)

    def neighbours(self, x: int, y: int) -> list[int]:
        """Return flat indices of the in-bounds Moore neighbours of ``(x, y)``."""
        result: list[int] = []
        for dx, dy in _NEIGHBOUR_OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(ny * self.width + nx)
        return result

    def is_near(self, x: int, y: int, material: Material) -> bool:
        """Return True if any Moore neighbour of ``(x, y)`` holds ``material``."""
        return any(self.materials[n] == material for n in self.neighbours(x, y))

    def count(self, material: Material) -> int:
        """Return how many cells currently hold ``material``."""
        return int(np.count_nonzero(self.materials == material))

    def as_2d(self) -> NDArray[np.int8]:
        """Return a ``(height, width)`` view of the material array."""
        return self.materials.reshape(self.height, self.width)
