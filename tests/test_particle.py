import numpy as np
import pytest

from particle import Particle
from particle_instance import ParticleInstance


def test_distance_to_is_euclidean():
    a = Particle(position=(0.0, 0.0))
    b = Particle(position=(3.0, 4.0))
    assert a.distance_to(b) == pytest.approx(5.0)
    assert b.distance_to(a) == pytest.approx(5.0)


def test_distance_to_squared_skips_the_root():
    a = Particle(position=(1.0, 1.0))
    b = Particle(position=(4.0, 5.0))
    assert a.distance_to_squared(b) == pytest.approx(25.0)


def test_collision_threshold_is_inclusive():
    a = Particle(position=(0.0, 0.0))
    b = Particle(position=(2.0, 0.0))
    assert a.is_colliding_with(b, 2.0)
    assert not a.is_colliding_with(b, 1.99)
    assert a.is_colliding_with_squared(b, 4.0)
    assert not a.is_colliding_with_squared(b, 3.99)


def test_vectors_are_float32():
    p = Particle(position=[1, 2], velocity=[3, 4], color=[0.1, 0.2, 0.3], radius=2)
    assert p.position.dtype == np.float32
    assert p.velocity.dtype == np.float32
    assert p.color.dtype == np.float32
    assert p.radius == 2.0


def test_wrong_vector_size_is_rejected():
    with pytest.raises(ValueError):
        Particle(position=(1.0, 2.0, 3.0))
    with pytest.raises(ValueError):
        Particle(position=(1.0, 2.0), color=(1.0, 0.0))


def test_constructor_copies_its_inputs():
    position = np.array([1.0, 2.0], dtype=np.float32)
    p = Particle(position=position)
    position[0] = 99.0
    assert p.position[0] == 1.0


def test_to_instance_projects_render_fields():
    p = Particle(position=(1.5, -2.0), velocity=(9.0, 9.0), color=(0.2, 0.4, 0.6), radius=0.75)
    instance = p.to_instance()
    assert isinstance(instance, ParticleInstance)
    np.testing.assert_array_equal(instance.position, p.position)
    np.testing.assert_array_equal(instance.color, p.color)
    assert instance.radius == np.float32(0.75)
