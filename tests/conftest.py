"""Pytest configuration and fixtures for bug fights tests."""

import random

import pytest

from core.config.simulation_config import SimulationConfig
from core.fighter import Fighter
from core.genetics import BugColor, Genome
from core.roster.protocol import RosterBug
from tests.fakes import FakeRoster, ScriptedRandom

GENOME_DEFAULTS = {
    "bulk": 50,
    "speed": 50,
    "fury": 50,
    "instinct": 50,
    "weapon": "mandibles",
    "defense": "none",
    "mobility": "ground",
    "abdomen_type": "round",
    "thorax_type": "compact",
    "head_type": "round",
    "leg_count": 6,
    "leg_style": "insect",
    "texture_type": "smooth",
    "eye_style": "compound",
    "antenna_style": "segmented",
    "wing_type": "none",
    "color": BugColor(hue=30.0, saturation=0.5, lightness=0.3),
    "accent_hue": 90.0,
}


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def make_genome():
    """Build a genome with plain defaults (all stats 50, mandibles, ground)."""

    def _make(**overrides):
        fields = dict(GENOME_DEFAULTS)
        if overrides.get("mobility") == "winged" and "wing_type" not in overrides:
            fields["wing_type"] = "fly"
        fields.update(overrides)
        return Genome(**fields)

    return _make


@pytest.fixture
def make_fighter(make_genome):
    """Build a fighter; extra keyword arguments are genome overrides."""

    def _make(side="left", name=None, *, genome=None, rng=None, stuck_detector_enabled=True, **genome_overrides):
        genome = genome or make_genome(**genome_overrides)
        return Fighter(
            genome,
            side,
            name or f"{side.title()} Bug",
            rng=rng or random.Random(1),
            stuck_detector_enabled=stuck_detector_enabled,
        )

    return _make


@pytest.fixture
def scripted_rng():
    """Factory for a ScriptedRandom that replays the given values."""

    def _make(values=(), default=None):
        return ScriptedRandom(values, default=default)

    return _make


@pytest.fixture
def quiet_config():
    """Simulation config without the fight logger attached."""
    return SimulationConfig(fight_logging=False)


@pytest.fixture
def fake_roster(make_genome):
    """Two evenly matched mandible bugs that cannot draw."""
    bugs = [
        RosterBug(id="bug-left", name="Crusher Blob", genome=make_genome()),
        RosterBug(id="bug-right", name="Gnasher Orb", genome=make_genome(abdomen_type="oval")),
    ]
    return FakeRoster(bugs)
