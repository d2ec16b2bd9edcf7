# forces.py

import numpy as np
import numba

# --- JIT-Compiled Force Kernels ---
# Kept outside the accumulator classes and restricted to NumPy arrays and
# scalars, as Numba's nopython mode requires.
#
# Both kernels implement the same pair rule:
#   separation = p[j] - p[i], combined_radius = r[i] + r[j]
#   distance_sq > combined_radius^2  -> attraction of combined_radius / distance_sq
#   otherwise                       -> push apart along separation, zero both velocities
# A coincident pair has distance_sq == 0 and always takes the collision branch,
# so the normalization below never divides by zero while combined_radius > 0.

@numba.jit(nopython=True)
def _accumulate_pairwise_jit(positions, velocities, radii, delta, speed):
    """
    Sequential O(n^2) pass over every unordered pair (i < j).
    Modifies positions and velocities in place; later pairs see the effects of
    earlier ones. Returns the number of colliding pairs.
    """
    num_particles = positions.shape[0]
    collisions = 0
    for i in range(num_particles):
        for j in range(i + 1, num_particles):
            sep_x = positions[j, 0] - positions[i, 0]
            sep_y = positions[j, 1] - positions[i, 1]
            distance_sq = sep_x * sep_x + sep_y * sep_y
            combined_radius = radii[i] + radii[j]

            if distance_sq > combined_radius * combined_radius:
                distance = np.sqrt(distance_sq)
                attraction = combined_radius / distance_sq
                scale = attraction * delta * speed / distance
                dv_x = sep_x * scale
                dv_y = sep_y * scale
                velocities[i, 0] += dv_x
                velocities[i, 1] += dv_y
                velocities[j, 0] -= dv_x
                velocities[j, 1] -= dv_y
            else:
                push_x = sep_x * combined_radius * 0.5
                push_y = sep_y * combined_radius * 0.5
                positions[i, 0] -= push_x
                positions[i, 1] -= push_y
                positions[j, 0] += push_x
                positions[j, 1] += push_y
                velocities[i, 0] = 0.0
                velocities[i, 1] = 0.0
                velocities[j, 0] = 0.0
                velocities[j, 1] = 0.0
                collisions += 1
    return collisions


@numba.jit(nopython=True, parallel=True)
def _accumulate_owner_computes_jit(positions, radii, delta, speed, delta_v, corrections, contacts):
    """
    Parallel pass where worker i only writes row i of the output buffers.
    Reads positions as a frame-start snapshot, so no pair result depends on
    another. The caller merges the buffers afterwards.
    """
    num_particles = positions.shape[0]
    for i in numba.prange(num_particles):
        acc_x = 0.0
        acc_y = 0.0
        push_x = 0.0
        push_y = 0.0
        hits = 0
        for j in range(num_particles):
            if j == i:
                continue
            sep_x = positions[j, 0] - positions[i, 0]
            sep_y = positions[j, 1] - positions[i, 1]
            distance_sq = sep_x * sep_x + sep_y * sep_y
            combined_radius = radii[i] + radii[j]

            if distance_sq > combined_radius * combined_radius:
                distance = np.sqrt(distance_sq)
                scale = (combined_radius / distance_sq) * delta * speed / distance
                acc_x += sep_x * scale
                acc_y += sep_y * scale
            else:
                push_x -= sep_x * combined_radius * 0.5
                push_y -= sep_y * combined_radius * 0.5
                hits += 1
        delta_v[i, 0] = acc_x
        delta_v[i, 1] = acc_y
        corrections[i, 0] = push_x
        corrections[i, 1] = push_y
        contacts[i] = hits


class ForceAccumulator:
    """
    Strategy for the per-frame pairwise interaction step.

    Data Contract:
    - Inputs: positions (n,2), velocities (n,2), radii (n,) float32 arrays,
      delta (seconds) and speed (attraction multiplier).
    - Outputs: int, the number of colliding pairs resolved.
    - Side Effects: modifies positions and velocities in place.
    - Invariants: must not resize the arrays.
    """
    name = None

    def accumulate(self, positions: np.ndarray, velocities: np.ndarray, radii: np.ndarray,
                   delta: float, speed: float) -> int:
        raise NotImplementedError


class PairwiseForceAccumulator(ForceAccumulator):
    """Sequential all-pairs accumulation in index order. Deterministic for a given input."""
    name = "pairwise"

    def accumulate(self, positions, velocities, radii, delta, speed):
        if positions.shape[0] < 2:
            return 0
        return int(_accumulate_pairwise_jit(positions, velocities, radii, float(delta), float(speed)))


class ParallelPairwiseForceAccumulator(ForceAccumulator):
    """
    Multi-threaded all-pairs accumulation.

    Each particle gathers its own attraction and collision correction into
    private buffers (no locks, no atomics), then a reduction step applies them:
    velocity deltas are added, positional corrections applied, and collided
    particles have their velocity zeroed. Because every particle reads the same
    frame-start positions, chained collisions resolve differently than in the
    sequential accumulator.
    """
    name = "parallel_pairwise"

    def accumulate(self, positions, velocities, radii, delta, speed):
        num_particles = positions.shape[0]
        if num_particles < 2:
            return 0

        delta_v = np.zeros((num_particles, 2), dtype=np.float64)
        corrections = np.zeros((num_particles, 2), dtype=np.float64)
        contacts = np.zeros(num_particles, dtype=np.int64)

        _accumulate_owner_computes_jit(positions, radii, float(delta), float(speed), delta_v, corrections, contacts)

        # --- Reduction ---
        velocities += delta_v.astype(velocities.dtype)
        positions += corrections.astype(positions.dtype)
        velocities[contacts > 0] = 0.0

        # Each colliding pair is seen once from either side
        return int(contacts.sum() // 2)


_ACCUMULATORS = {
    PairwiseForceAccumulator.name: PairwiseForceAccumulator,
    ParallelPairwiseForceAccumulator.name: ParallelPairwiseForceAccumulator,
}


def get_force_accumulator(name: str) -> ForceAccumulator:
    """Resolves a configured strategy name to a new accumulator instance."""
    try:
        return _ACCUMULATORS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown force strategy '{name}'. Expected one of: {', '.join(sorted(_ACCUMULATORS))}"
        ) from None
