"""Test doubles for the bug fights simulation."""

from tests.fakes.fake_roster import FakeRoster
from tests.fakes.scripted_random import ScriptedRandom

__all__ = ["FakeRoster", "ScriptedRandom"]
