import numpy as np
import pytest

import seeding


def test_grid_positions_are_x_major():
    positions = seeding.grid_positions(3, 2.0)
    assert positions.shape == (9, 2)
    assert positions.dtype == np.float32
    np.testing.assert_array_equal(positions[0], [0.0, 0.0])
    np.testing.assert_array_equal(positions[1], [0.0, 2.0])
    np.testing.assert_array_equal(positions[3], [2.0, 0.0])
    np.testing.assert_array_equal(positions[8], [4.0, 4.0])


def test_grid_positions_empty_and_negative():
    assert seeding.grid_positions(0, 1.0).shape == (0, 2)
    with pytest.raises(ValueError):
        seeding.grid_positions(-1, 1.0)


def test_random_directions_have_fixed_magnitude(rng):
    directions = seeding.random_directions(rng, 100, 5.0)
    assert directions.shape == (100, 2)
    np.testing.assert_allclose(np.linalg.norm(directions, axis=1), 5.0, rtol=1e-5)


def test_random_unit_colors_are_unit_vectors(rng):
    colors = seeding.random_unit_colors(rng, 200)
    assert colors.shape == (200, 3)
    assert np.all(colors >= 0.0)
    np.testing.assert_allclose(np.linalg.norm(colors, axis=1), 1.0, rtol=1e-5)


def test_uniform_positions_stay_in_half_open_box(rng):
    positions = seeding.uniform_positions(rng, (-5.0, -2.0), (5.0, 3.0), 1000)
    assert positions.shape == (1000, 2)
    assert np.all(positions[:, 0] >= -5.0) and np.all(positions[:, 0] < 5.0)
    assert np.all(positions[:, 1] >= -2.0) and np.all(positions[:, 1] < 3.0)


def test_uniform_positions_never_round_onto_the_upper_corner():
    class TopOfRange:
        def random(self, shape):
            return np.full(shape, np.nextafter(1.0, 0.0))

    positions = seeding.uniform_positions(TopOfRange(), (-5.0, -5.0), (5.0, 5.0), 4)
    assert np.all(positions < 5.0)


@pytest.mark.parametrize("low, high", [
    ((0.0, 0.0), (0.0, 1.0)),
    ((1.0, 1.0), (0.0, 2.0)),
    ((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)),
])
def test_uniform_positions_rejects_bad_corners(rng, low, high):
    with pytest.raises(ValueError):
        seeding.uniform_positions(rng, low, high, 5)


def test_uniform_radii_range(rng):
    radii = seeding.uniform_radii(rng, 500, 0.5, 1.5)
    assert radii.dtype == np.float32
    assert np.all(radii >= 0.5) and np.all(radii < 1.5)


def test_same_seed_same_draws():
    a = seeding.random_unit_colors(np.random.default_rng(7), 10)
    b = seeding.random_unit_colors(np.random.default_rng(7), 10)
    np.testing.assert_array_equal(a, b)
