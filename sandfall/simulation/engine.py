"""SimulationEngine — owns the grid and drives it tick by tick.

The engine is the single entry point for the UI layer: it exposes the
drawing primitives, presets, ``clear`` and configuration changes, and
runs ticks with the configured gravity strength passed explicitly into
the update sweep.  It has no knowledge of rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

import numpy as np
from numpy.random import Generator

from sandfall.drawing.presets import Preset, create_preset
from sandfall.drawing.shapes import erase_circle, stamp_circle, stamp_line, stamp_rect
from sandfall.simulation.config import SimulationConfig
from sandfall.simulation.update import update_grid
from sandfall.world.grid import Grid
from sandfall.world.materials import Material

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the falling-sand simulation forward.

    Attributes:
        config: Current simulation configuration.
        grid: The cell store.
        rng: Random source shared by all rules and drawing tools.
        tick: Number of completed ticks.
    """

    config: SimulationConfig
    grid: Grid = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build the grid and RNG from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = Grid(width=self.config.grid_width, height=self.config.grid_height)
        logger.info(
            "Simulation engine created with a %dx%d grid",
            self.grid.width,
            self.grid.height,
        )

    def step(self) -> None:
        """Advance the simulation by one tick."""
        update_grid(self.grid, self.rng, gravity_strength=self.config.gravity_strength)
        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def frame(self) -> None:
        """Run the ticks belonging to one rendered frame (``sim_speed``)."""
        self.run(self.config.sim_speed)

    def configure(self, **changes: int | None) -> None:
        """Replace configuration values.

        A change of grid dimensions replaces the grid with a fresh,
        empty one.

        Args:
            **changes: ``SimulationConfig`` fields to update.

        Raises:
            ValueError: If a new value is out of range.
        """
        new_config = replace(self.config, **changes)
        resized = (new_config.grid_width, new_config.grid_height) != (
            self.grid.width,
            self.grid.height,
        )
        self.config = new_config
        if resized:
            self.grid = Grid(width=new_config.grid_width, height=new_config.grid_height)
            logger.info("Grid replaced with %dx%d", self.grid.width, self.grid.height)

    def resize(self, width: int, height: int) -> None:
        """Replace the grid with an empty one of the given size."""
        self.configure(grid_width=width, grid_height=height)

    def clear(self) -> None:
        """Empty every cell."""
        self.grid.clear()
        logger.info("Grid cleared")

    # -- Drawing -------------------------------------------------------------

    def stamp_circle(
        self,
        cx: int,
        cy: int,
        material: Material,
        radius: int | None = None,
        probability: float = 1.0,
    ) -> None:
        """Stamp a disk of ``material``; radius defaults to the brush size."""
        if radius is None:
            radius = self.config.brush_size
        stamp_circle(self.grid, cx, cy, material, radius, self.rng, probability)

    def stamp_line(
        self,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        material: Material,
        thickness: int | None = None,
    ) -> None:
        """Stamp a thick line; thickness defaults to the brush size."""
        if thickness is None:
            thickness = self.config.brush_size
        stamp_line(self.grid, x1, y1, x2, y2, material, self.rng, thickness)

    def stamp_rect(
        self,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        material: Material,
        *,
        filled: bool = False,
    ) -> None:
        """Stamp a filled or outlined rectangle."""
        stamp_rect(self.grid, x1, y1, x2, y2, material, filled=filled)

    def erase(self, cx: int, cy: int, radius: int | None = None) -> None:
        """Clear a disk of cells; radius defaults to the brush size."""
        if radius is None:
            radius = self.config.brush_size
        erase_circle(self.grid, cx, cy, radius)

    def create_preset(self, preset: Preset | str, x: int, y: int) -> None:
        """Build a preset structure centred on ``(x, y)``."""
        create_preset(self.grid, preset, x, y, self.rng)
