# particle.py

import numpy as np

from particle_instance import ParticleInstance


def _as_vector(values, size: int, name: str) -> np.ndarray:
    vector = np.array(values, dtype=np.float32).reshape(-1)
    if vector.shape != (size,):
        raise ValueError(f"{name} must have {size} components, got {vector.shape[0]}")
    return vector


class Particle:
    """
    Represents a single point mass in the simulation.

    The Simulation keeps particle state in packed arrays; a Particle is the
    per-body value type used to seed a Simulation and to read snapshots back.

    Data Contract:
    - position (2,), velocity (2,), color (3,) are float32 vectors.
    - radius is a float and should be > 0. It is both the visual size and the
      collision envelope; a non-positive radius never collides.
    """
    def __init__(self, position, velocity=(0.0, 0.0), color=(1.0, 1.0, 1.0), radius: float = 1.0):
        self.position = _as_vector(position, 2, "position")
        self.velocity = _as_vector(velocity, 2, "velocity")
        self.color = _as_vector(color, 3, "color")
        self.radius = float(np.float32(radius))

    def __repr__(self):
        return (
            f"Particle(position={self.position.tolist()}, velocity={self.velocity.tolist()}, "
            f"color={self.color.tolist()}, radius={self.radius})"
        )

    def distance_to_squared(self, other: "Particle") -> float:
        """Squared Euclidean distance between the two positions. Avoids the sqrt."""
        diff = other.position - self.position
        return float(diff[0] * diff[0] + diff[1] * diff[1])

    def distance_to(self, other: "Particle") -> float:
        return float(np.sqrt(self.distance_to_squared(other)))

    def is_colliding_with(self, other: "Particle", radius_threshold: float) -> bool:
        """True when the distance is at most radius_threshold (touching counts)."""
        return self.distance_to(other) <= radius_threshold

    def is_colliding_with_squared(self, other: "Particle", threshold_squared: float) -> bool:
        return self.distance_to_squared(other) <= threshold_squared

    def to_instance(self) -> ParticleInstance:
        """Projects the render-facing attributes into a ParticleInstance."""
        return ParticleInstance(
            position=self.position.copy(),
            color=self.color.copy(),
            radius=np.float32(self.radius),
        )
