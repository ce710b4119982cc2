"""Config — load simulation parameters from YAML files.

Grid size, gravity strength, brush size and simulation speed live in
YAML and are parsed into a typed dataclass here.  The engine holds one
``SimulationConfig`` and passes its values explicitly into each tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

MAX_BRUSH_SIZE = 10


@dataclass(frozen=True)
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for reproducible runs; None draws fresh entropy.
        grid_width: Number of grid columns.
        grid_height: Number of grid rows.
        gravity_strength: Gravity sub-steps per tick for falling
            materials.
        brush_size: Brush radius used by the drawing tools.
        sim_speed: Ticks run per rendered frame.
    """

    seed: int | None = None
    grid_width: int = 200
    grid_height: int = 112
    gravity_strength: int = 1
    brush_size: int = 3
    sim_speed: int = 1

    def __post_init__(self) -> None:
        """Reject values the simulation cannot run with.

        Raises:
            ValueError: If any field is out of range.
        """
        if self.grid_width <= 0 or self.grid_height <= 0:
            msg = (
                "grid dimensions must be positive, got "
                f"{self.grid_width}x{self.grid_height}"
            )
            raise ValueError(msg)
        if self.gravity_strength < 1:
            msg = f"gravity_strength must be >= 1, got {self.gravity_strength}"
            raise ValueError(msg)
        if self.sim_speed < 1:
            msg = f"sim_speed must be >= 1, got {self.sim_speed}"
            raise ValueError(msg)
        if not 1 <= self.brush_size <= MAX_BRUSH_SIZE:
            msg = f"brush_size must be in [1, {MAX_BRUSH_SIZE}], got {self.brush_size}"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a value is out of range.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        logger.info("Loaded config from %s", path)
        return cls(
            seed=data.get("seed", cls.seed),
            grid_width=data.get("grid_width", cls.grid_width),
            grid_height=data.get("grid_height", cls.grid_height),
            gravity_strength=data.get("gravity_strength", cls.gravity_strength),
            brush_size=data.get("brush_size", cls.brush_size),
            sim_speed=data.get("sim_speed", cls.sim_speed),
        )
