# simulation.py

import logging
from enum import Enum

import numpy as np
import numba

import constants
import seeding
from forces import ForceAccumulator, PairwiseForceAccumulator, get_force_accumulator
from particle import Particle
from particle_instance import instance_dtype

logger = logging.getLogger("nbody_sim")


@numba.jit(nopython=True, parallel=True)
def _integrate_positions_jit(positions, velocities, delta):
    """Explicit position step p += v * dt. Each row is independent."""
    for i in numba.prange(positions.shape[0]):
        positions[i, 0] += velocities[i, 0] * delta
        positions[i, 1] += velocities[i, 1] * delta


class DegeneracyPolicy(Enum):
    """What update() does about NaN/infinite positions or velocities."""
    PROPAGATE = "propagate"  # No check
    WARN = "warn"            # Detect and log, leave values as they are
    CLAMP = "clamp"          # Detect and log, then zero bad velocities and restore bad positions


class Simulation:
    """
    Owns a fixed set of particles and advances them with the naive all-pairs
    attraction/collision model.

    Data Contract:
    - Inputs:
        - particles (iterable of Particle): insertion order is also the pair
          visiting order of the force pass.
        - speed (float): multiplier on the attraction strength.
        - is_running (bool): when False, update() is a no-op.
        - force_accumulator (ForceAccumulator | str | None): pair interaction
          strategy, sequential pairwise by default.
        - degeneracy_policy (DegeneracyPolicy | str): non-finite value handling.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Owns the lifecycle of all particle data.
    - Invariants: The number of particles is constant for the lifetime of the
      simulation. All internal arrays keep the same length.
    - Not reentrant: callers own exclusive access for the duration of update().
    """
    def __init__(self, particles, speed: float = constants.DEFAULT_SPEED,
                 is_running: bool = constants.DEFAULT_IS_RUNNING,
                 force_accumulator=None, degeneracy_policy=DegeneracyPolicy.PROPAGATE):
        particles = list(particles)
        num_particles = len(particles)

        # --- Structure of Arrays, float32 to match the render contract ---
        self.positions = np.zeros((num_particles, 2), dtype=np.float32)
        self.velocities = np.zeros((num_particles, 2), dtype=np.float32)
        self.colors = np.zeros((num_particles, 3), dtype=np.float32)
        self.radii = np.zeros(num_particles, dtype=np.float32)
        for i, p in enumerate(particles):
            self.positions[i] = p.position
            self.velocities[i] = p.velocity
            self.colors[i] = p.color
            self.radii[i] = p.radius

        self._init_common(speed, is_running, force_accumulator, degeneracy_policy)

    @classmethod
    def from_arrays(cls, positions, velocities, colors, radii, **kwargs) -> "Simulation":
        """Builds a Simulation directly from (n,2), (n,2), (n,3), (n,) arrays."""
        sim = cls.__new__(cls)
        sim.positions = np.array(positions, dtype=np.float32).reshape(-1, 2)
        num_particles = sim.positions.shape[0]
        sim.velocities = np.array(velocities, dtype=np.float32).reshape(num_particles, 2)
        sim.colors = np.array(colors, dtype=np.float32).reshape(num_particles, 3)
        sim.radii = np.array(radii, dtype=np.float32).reshape(num_particles)
        sim._init_common(
            kwargs.pop('speed', constants.DEFAULT_SPEED),
            kwargs.pop('is_running', constants.DEFAULT_IS_RUNNING),
            kwargs.pop('force_accumulator', None),
            kwargs.pop('degeneracy_policy', DegeneracyPolicy.PROPAGATE),
        )
        if kwargs:
            raise TypeError(f"Unexpected arguments: {', '.join(sorted(kwargs))}")
        return sim

    def _init_common(self, speed, is_running, force_accumulator, degeneracy_policy):
        self.speed = float(speed)
        self.is_running = bool(is_running)

        if force_accumulator is None:
            force_accumulator = PairwiseForceAccumulator()
        elif isinstance(force_accumulator, str):
            force_accumulator = get_force_accumulator(force_accumulator)
        elif not isinstance(force_accumulator, ForceAccumulator):
            raise ValueError(f"force_accumulator must be a ForceAccumulator or name, got {force_accumulator!r}")
        self.force_accumulator = force_accumulator
        self.degeneracy_policy = DegeneracyPolicy(degeneracy_policy)

        # --- Per-update statistics for logging ---
        self.last_collision_count = 0
        self.degenerate_count = 0

        bad_radii = np.count_nonzero(~(self.radii > 0))
        if bad_radii:
            logger.warning(
                f"{bad_radii} particle(s) have a non-positive radius and will never collide. "
                f"Check the seeding configuration."
            )

        logger.info(
            f"Simulation created for {self.particle_count} particles "
            f"(speed={self.speed}, strategy={self.force_accumulator.name}, "
            f"degeneracy_policy={self.degeneracy_policy.value})."
        )

    # --- Initializers ---

    @classmethod
    def grid(cls, count_per_axis: int, spacing: float, rng: np.random.Generator = None, **kwargs) -> "Simulation":
        """
        Places count_per_axis^2 particles on a square lattice with the given
        spacing. Each particle moves in a random direction at
        GRID_INITIAL_SPEED, gets a random unit-vector color and radius
        GRID_RADIUS.
        """
        if rng is None:
            rng = np.random.default_rng()
        positions = seeding.grid_positions(count_per_axis, spacing)
        num_particles = positions.shape[0]
        velocities = seeding.random_directions(rng, num_particles, constants.GRID_INITIAL_SPEED)
        colors = seeding.random_unit_colors(rng, num_particles)
        radii = np.full(num_particles, constants.GRID_RADIUS, dtype=np.float32)
        logger.info(f"Seeding grid of {count_per_axis}x{count_per_axis} particles, spacing {spacing}.")
        return cls.from_arrays(positions, velocities, colors, radii, **kwargs)

    @classmethod
    def rand_distribute(cls, max_corner, min_corner, count: int, rng: np.random.Generator = None,
                        **kwargs) -> "Simulation":
        """
        Places count particles uniformly in [min_corner, max_corner), at rest,
        with random unit-vector colors and radii drawn from
        [RAND_RADIUS_MIN, RAND_RADIUS_MAX).
        """
        if rng is None:
            rng = np.random.default_rng()
        positions = seeding.uniform_positions(rng, min_corner, max_corner, count)
        velocities = np.zeros((count, 2), dtype=np.float32)
        colors = seeding.random_unit_colors(rng, count)
        radii = seeding.uniform_radii(rng, count, constants.RAND_RADIUS_MIN, constants.RAND_RADIUS_MAX)
        logger.info(f"Seeding {count} particles uniformly in {list(min_corner)} .. {list(max_corner)}.")
        return cls.from_arrays(positions, velocities, colors, radii, **kwargs)

    @classmethod
    def from_config(cls, config: dict, rng: np.random.Generator) -> "Simulation":
        """
        Builds a Simulation from the 'simulation' section of config.json.

        Data Contract:
        - Inputs: config (dict) with 'initializer' and a section of the same
          name holding its parameters; optional 'speed', 'is_running',
          'force_strategy' and 'degeneracy_policy'.
        - Outputs: Simulation
        - Invariants: raises ValueError for unknown names.
        """
        options = {
            'speed': config.get('speed', constants.DEFAULT_SPEED),
            'is_running': config.get('is_running', constants.DEFAULT_IS_RUNNING),
            'force_accumulator': get_force_accumulator(config.get('force_strategy', PairwiseForceAccumulator.name)),
            'degeneracy_policy': DegeneracyPolicy(config.get('degeneracy_policy', DegeneracyPolicy.PROPAGATE.value)),
        }

        initializer = config['initializer']
        if initializer == 'grid':
            params = config['grid']
            return cls.grid(params['count_per_axis'], params['spacing'], rng=rng, **options)
        elif initializer == 'rand_distribute':
            params = config['rand_distribute']
            return cls.rand_distribute(
                params['max_corner'], params['min_corner'], params['count'], rng=rng, **options
            )
        raise ValueError(f"Unknown initializer '{initializer}'. Expected 'grid' or 'rand_distribute'.")

    # --- State access ---

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self):
        return self.particle_count

    @property
    def particles(self):
        """Snapshot copies of every particle, in insertion order."""
        return [self.particle(i) for i in range(self.particle_count)]

    def particle(self, index: int) -> Particle:
        return Particle(
            position=self.positions[index],
            velocity=self.velocities[index],
            color=self.colors[index],
            radius=self.radii[index],
        )

    def toggle_running(self) -> bool:
        self.is_running = not self.is_running
        logger.info(f"Simulation {'resumed' if self.is_running else 'paused'}.")
        return self.is_running

    # --- Frame step ---

    def update(self, delta: float):
        """
        Advances every particle by one time step of delta seconds.

        1. Pairwise pass (force accumulator): attraction for separated pairs,
           push-apart and stop for touching pairs.
        2. Symplectic Euler position step with the post-interaction velocity.
        3. Optional non-finite check according to degeneracy_policy.

        Does nothing while is_running is False.
        """
        if not self.is_running:
            return

        previous_positions = None
        if self.degeneracy_policy is DegeneracyPolicy.CLAMP:
            previous_positions = self.positions.copy()

        self.last_collision_count = self.force_accumulator.accumulate(
            self.positions, self.velocities, self.radii, delta, self.speed
        )

        if self.particle_count > 0:
            _integrate_positions_jit(self.positions, self.velocities, float(delta))

        if self.degeneracy_policy is not DegeneracyPolicy.PROPAGATE:
            self._check_degeneracy(previous_positions)

    def _check_degeneracy(self, previous_positions):
        """Counts particles with non-finite state, logs them, and clamps if asked to."""
        bad_velocities = ~np.isfinite(self.velocities)
        bad_positions = ~np.isfinite(self.positions)
        bad_particles = np.any(bad_velocities | bad_positions, axis=1)
        self.degenerate_count = int(np.count_nonzero(bad_particles))

        if self.degenerate_count == 0:
            return

        indices = np.flatnonzero(bad_particles)
        logger.warning(
            f"{self.degenerate_count} particle(s) have non-finite position or velocity "
            f"(first indices: {indices[:10].tolist()})."
        )

        if previous_positions is not None:
            self.velocities[bad_velocities] = 0.0
            self.positions[bad_positions] = previous_positions[bad_positions]
            logger.warning(f"Clamped {self.degenerate_count} degenerate particle(s).")

    # --- Outputs for collaborators ---

    def instances(self, with_radius: bool = True) -> np.ndarray:
        """
        Render-ready records, one per particle in particle order, laid out as
        particle_instance.INSTANCE_DTYPE (or INSTANCE_DTYPE_NO_RADIUS).
        A fresh array every call; .tobytes() is the GPU upload payload.
        """
        out = np.empty(self.particle_count, dtype=instance_dtype(with_radius))
        out['position'] = self.positions
        out['color'] = self.colors
        if with_radius:
            out['radius'] = self.radii
        return out

    def center(self) -> np.ndarray:
        """Arithmetic mean of all particle positions."""
        if self.particle_count == 0:
            return np.zeros(2, dtype=np.float32)
        return self.positions.mean(axis=0, dtype=np.float64).astype(np.float32)

    def get_total_momentum(self) -> np.ndarray:
        """
        Sum of all velocities. The pairwise impulses are equal and opposite,
        so the attraction pass leaves this unchanged (collisions do not).
        """
        return self.velocities.sum(axis=0, dtype=np.float64)

    def get_total_kinetic_energy(self) -> float:
        """KE = sum(0.5 * v^2) with unit mass per particle."""
        vel_sq = np.sum(self.velocities.astype(np.float64)**2, axis=1)
        return float(0.5 * np.sum(vel_sq))
