"""Centralized math utilities for the simulation.

Scalar helpers shared by physics, AI and combat.  All randomness goes through
an injected ``random.Random`` and only calls ``rng.random()`` so that a
scripted RNG can drive every probabilistic branch in tests.
"""

from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

T = TypeVar("T")

TWO_PI = math.pi * 2


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def sign(value: float) -> int:
    """Return -1, 0 or 1 (``math.copysign`` has no zero case)."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def wrap_angle(angle: float) -> float:
    """Wrap an angle difference into [-pi, pi]."""
    while angle > math.pi:
        angle -= TWO_PI
    while angle < -math.pi:
        angle += TWO_PI
    return angle


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``round`` uses banker's rounding)."""
    return int(math.floor(value + 0.5))


def roll_dice(rng: random.Random, sides: int) -> int:
    """Roll a die with ``sides`` faces, returning 1..sides."""
    return int(rng.random() * sides) + 1


def pick(rng: random.Random, options: Sequence[T]) -> T:
    """Uniformly pick one element using a single ``rng.random()`` draw."""
    index = min(int(rng.random() * len(options)), len(options) - 1)
    return options[index]


def random_side(rng: random.Random) -> int:
    """Return +1 or -1 with equal probability."""
    return 1 if rng.random() > 0.5 else -1


__all__ = [
    "clamp",
    "pick",
    "random_side",
    "roll_dice",
    "round_half_up",
    "sign",
    "wrap_angle",
]
