"""Tests for math utilities."""

import math

import pytest

import core.math_utils as math_utils
from core.math_utils import (
    clamp,
    pick,
    random_side,
    roll_dice,
    sign,
    wrap_angle,
)
from tests.fakes import ScriptedRandom


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


@pytest.mark.parametrize("value, expected", [(3.2, 1), (-0.1, -1), (0, 0), (0.0, 0)])
def test_sign(value, expected):
    assert sign(value) == expected


@pytest.mark.parametrize("angle", [0.0, 1.0, -3.0, 4.0, -7.5, 20.0])
def test_wrap_angle_range(angle):
    wrapped = wrap_angle(angle)
    assert -math.pi <= wrapped <= math.pi
    assert math.isclose(math.cos(wrapped), math.cos(angle), abs_tol=1e-9)


def test_roll_dice_covers_faces():
    assert roll_dice(ScriptedRandom([0.0]), 6) == 1
    assert roll_dice(ScriptedRandom([0.999]), 6) == 6
    assert roll_dice(ScriptedRandom([0.5]), 100) == 51


def test_pick_uses_one_draw():
    rng = ScriptedRandom([0.0, 0.99])
    assert pick(rng, "abc") == "a"
    assert pick(rng, "abc") == "c"
    assert rng.remaining == 0


def test_random_side():
    assert random_side(ScriptedRandom([0.9])) == 1
    assert random_side(ScriptedRandom([0.5])) == -1


def test_public_helpers():
    assert sorted(math_utils.__all__) == [
        "clamp", "pick", "random_side", "roll_dice", "round_half_up", "sign", "wrap_angle",
    ]
    for name in math_utils.__all__:
        assert callable(getattr(math_utils, name))
