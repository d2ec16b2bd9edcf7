# seeding.py

"""
Seeding Utilities

Array builders for the Simulation initializers. Every function draws from the
numpy Generator it is handed; nothing here touches global random state.

Data Contract:
- Inputs: an np.random.Generator plus shape/bounds parameters.
- Outputs: float32 arrays laid out the way Simulation stores them.
"""

import numpy as np


def grid_positions(count_per_axis: int, spacing: float) -> np.ndarray:
    """
    Lattice positions, x-major: particle (x, y) sits at (x * spacing, y * spacing)
    and is stored at index x * count_per_axis + y.
    """
    if count_per_axis < 0:
        raise ValueError(f"count_per_axis must be non-negative, got {count_per_axis}")
    axis = np.arange(count_per_axis, dtype=np.float64) * spacing
    xs, ys = np.meshgrid(axis, axis, indexing='ij')
    return np.column_stack((xs.ravel(), ys.ravel())).astype(np.float32)


def random_directions(rng: np.random.Generator, count: int, magnitude: float) -> np.ndarray:
    """Uniformly random 2D directions scaled to the given magnitude."""
    angles = rng.uniform(0.0, 2.0 * np.pi, count)
    directions = np.column_stack((np.cos(angles), np.sin(angles)))
    return (directions * magnitude).astype(np.float32)


def random_unit_colors(rng: np.random.Generator, count: int) -> np.ndarray:
    """
    RGB colors drawn as three full-range 32-bit integers and normalized to unit
    length. The result is a unit vector in RGB space rather than a perceptually
    balanced color.
    """
    raw = rng.integers(0, 2**32, size=(count, 3), dtype=np.uint64).astype(np.float64)
    norms = np.linalg.norm(raw, axis=1, keepdims=True)
    # An all-zero draw stays black instead of becoming NaN
    norms[norms == 0.0] = 1.0
    return (raw / norms).astype(np.float32)


def _below(upper: np.ndarray, values: np.ndarray) -> np.ndarray:
    # float32 rounding can land a draw from [low, high) exactly on high
    limit = np.nextafter(upper.astype(np.float32), np.float32(-np.inf))
    return np.minimum(values, limit)


def uniform_positions(rng: np.random.Generator, min_corner, max_corner, count: int) -> np.ndarray:
    """Positions uniformly distributed in the half-open rectangle [min_corner, max_corner)."""
    low = np.asarray(min_corner, dtype=np.float64).reshape(-1)
    high = np.asarray(max_corner, dtype=np.float64).reshape(-1)
    if low.shape != (2,) or high.shape != (2,):
        raise ValueError("min_corner and max_corner must be 2D vectors")
    if np.any(high <= low):
        raise ValueError(f"max_corner {high.tolist()} must exceed min_corner {low.tolist()} on both axes")
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    positions = (low + rng.random((count, 2)) * (high - low)).astype(np.float32)
    return _below(high, positions)


def uniform_radii(rng: np.random.Generator, count: int, low: float, high: float) -> np.ndarray:
    """Radii uniformly drawn from [low, high)."""
    radii = rng.uniform(low, high, count).astype(np.float32)
    return _below(np.asarray(high), radii)
