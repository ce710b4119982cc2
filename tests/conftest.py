"""Shared fixtures for the sandfall test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from sandfall.simulation.config import SimulationConfig
from sandfall.world.grid import Grid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """A small 10x10 grid for fast tests."""
    return Grid(width=10, height=10)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Small seeded config (no YAML file needed)."""
    return SimulationConfig(seed=7, grid_width=16, grid_height=12)
