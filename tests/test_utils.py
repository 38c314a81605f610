"""
Tests for geometry and randomness helpers.
"""
import math
import random

import pytest
from game.tanks.entities import Entity
from game.tanks.utils import circle_collision, clamp, random_range, normalize, vec_len


class TestCircleCollision:
    """Tests for the circle overlap check."""

    def test_overlapping_circles_collide(self):
        """Centers closer than the radius sum collide."""
        a = Entity(x=0, y=0, radius=5)
        b = Entity(x=9.9, y=0, radius=5)
        assert circle_collision(a, b)

    def test_tangent_circles_do_not_collide(self):
        """Touching circles are not a collision (strict inequality)."""
        a = Entity(x=0, y=0, radius=5)
        b = Entity(x=10, y=0, radius=5)
        assert not circle_collision(a, b)

    def test_far_circles_do_not_collide(self):
        a = Entity(x=0, y=0, radius=5)
        b = Entity(x=100, y=100, radius=5)
        assert not circle_collision(a, b)

    def test_collision_is_symmetric(self):
        """collision(a, b) == collision(b, a) for many random pairs."""
        rng = random.Random(1234)
        for _ in range(500):
            a = Entity(x=rng.uniform(-50, 50), y=rng.uniform(-50, 50), radius=rng.uniform(0, 30))
            b = Entity(x=rng.uniform(-50, 50), y=rng.uniform(-50, 50), radius=rng.uniform(0, 30))
            assert circle_collision(a, b) == circle_collision(b, a)


class TestClamp:
    def test_inside_range_unchanged(self):
        assert clamp(5, 0, 10) == 5

    def test_clamps_low_and_high(self):
        assert clamp(-3, 0, 10) == 0
        assert clamp(13, 0, 10) == 10

    def test_degenerate_range(self):
        assert clamp(7, 4, 4) == 4


class TestRandomRange:
    def test_values_in_half_open_range(self):
        """random_range stays within [lo, hi)."""
        random.seed(7)
        for _ in range(1000):
            v = random_range(2.0, 3.0)
            assert 2.0 <= v < 3.0

    def test_seeded_rng_repeats(self):
        """A passed-in rng drives the draw instead of the module state."""
        a, b = random.Random(3), random.Random(3)
        first = [random_range(-2.5, 2.5, a) for _ in range(50)]
        random.seed(99)
        second = [random_range(-2.5, 2.5, b) for _ in range(50)]
        assert first == second
        assert all(-2.5 <= v < 2.5 for v in first)


class TestVectors:
    def test_normalize_unit_length(self):
        x, y = normalize(3.0, 4.0)
        assert x == pytest.approx(0.6)
        assert y == pytest.approx(0.8)
        assert vec_len(x, y) == pytest.approx(1.0)

    def test_normalize_zero_vector(self):
        assert normalize(0.0, 0.0) == (0.0, 0.0)

    def test_vec_len(self):
        assert vec_len(3.0, 4.0) == pytest.approx(5.0)
        assert vec_len(-1.0, 1.0) == pytest.approx(math.sqrt(2))
