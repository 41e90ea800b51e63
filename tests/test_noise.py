"""
Tests for the seeded coherent noise source.
"""

import numpy as np
import pytest

from py_hexmap.core.alea_prng import AleaPRNG
from py_hexmap.core.noise import NOISE_MAX, NoiseSource


class TestNoiseSource:
    def test_values_in_range(self):
        noise = NoiseSource(1234, 0.1)
        values = noise.sample_grid(40, 30)
        assert values.min() >= 0.0
        assert values.max() <= NOISE_MAX
        assert values.max() < 1.0

    def test_reproducible_for_fixed_seed(self):
        a = NoiseSource(777, 0.07).sample_grid(20, 20)
        b = NoiseSource(777, 0.07).sample_grid(20, 20)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds_differ(self):
        a = NoiseSource(1, 0.1).sample_grid(20, 20)
        b = NoiseSource(2, 0.1).sample_grid(20, 20)
        assert not np.array_equal(a, b)

    def test_offsets_come_from_stage_prng(self):
        prng = AleaPRNG([5, "lake"])
        expected_x = AleaPRNG([5, "lake"]).uniform(-10000.0, 10000.0)
        noise = NoiseSource(5, 0.1, prng)
        assert noise.offset_x == pytest.approx(expected_x)
        assert -10000.0 <= noise.offset_y < 10000.0

    def test_custom_offset_range(self):
        noise = NoiseSource(5, 0.1, offset_low=0.0, offset_high=10000.0)
        assert 0.0 <= noise.offset_x < 10000.0
        assert 0.0 <= noise.offset_y < 10000.0

    def test_spatially_coherent(self):
        noise = NoiseSource(99, 0.01)
        diffs = [
            abs(noise.sample(col, 5) - noise.sample(col + 1, 5)) for col in range(50)
        ]
        assert max(diffs) < 0.1

    def test_zero_scale_is_constant(self):
        values = NoiseSource(3, 0.0).sample_grid(5, 5)
        assert np.all(values == values[0, 0])

    def test_sample_grid_matches_sample(self):
        noise = NoiseSource(42, 0.2)
        grid = noise.sample_grid(6, 4)
        assert grid.shape == (4, 6)
        assert grid[3, 5] == noise.sample(5, 3)
