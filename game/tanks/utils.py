"""
Geometry and randomness helpers for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def random_range(lo: float, hi: float, rng: Optional[random.Random] = None) -> float:
    """Uniform float in [lo, hi), drawn from rng when given"""
    r = rng.random() if rng is not None else random.random()
    return r * (hi - lo) + lo


def vec_len(x: float, y: float) -> float:
    """Calculate vector length (magnitude)"""
    return math.hypot(x, y)


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def circle_collision(a, b) -> bool:
    """
    Check if two circular entities overlap.

    Anything with ``x``, ``y`` and ``radius`` works. Tangent circles
    do not collide.
    """
    dx = a.x - b.x
    dy = a.y - b.y
    return math.hypot(dx, dy) < a.radius + b.radius


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
