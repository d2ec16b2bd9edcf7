"""Pytest configuration and shared fixtures."""

import logging
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simulation import Simulation  # noqa: E402


@pytest.fixture
def rng():
    """A seeded generator so random draws are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def sample_config():
    """The 'simulation' section of a config file."""
    return {
        "initializer": "grid",
        "grid": {"count_per_axis": 3, "spacing": 5.0},
        "rand_distribute": {"min_corner": [-5.0, -5.0], "max_corner": [5.0, 5.0], "count": 10},
        "speed": 50.0,
        "is_running": True,
        "force_strategy": "pairwise",
        "degeneracy_policy": "warn",
    }


@pytest.fixture
def two_body():
    """Two resting particles of radius 0.5 at (-1, 0) and (1, 0)."""
    return Simulation.from_arrays(
        positions=[[-1.0, 0.0], [1.0, 0.0]],
        velocities=[[0.0, 0.0], [0.0, 0.0]],
        colors=[[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]],
        radii=[0.5, 0.5],
        speed=100.0,
    )


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Undo any handler/propagation changes made to the application logger."""
    yield
    logger = logging.getLogger("nbody_sim")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
