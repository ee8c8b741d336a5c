"""Tests for betting odds."""

import random

import pytest

from core.math_utils import round_half_up
from core.roster.protocol import RosterBug
from core.simulation import Simulation, american_odds, calculate_odds
from tests.fakes import FakeRoster


def test_even_match():
    odds = calculate_odds(200, 200, 0.05)
    assert odds == {
        "fighter1": "1.90",
        "fighter2": "1.90",
        "american1": -111,
        "american2": -111,
        "prob1": 50,
        "prob2": 50,
    }


def test_favourite_and_underdog():
    odds = calculate_odds(300, 100, 0.05)
    assert odds["fighter1"] == "1.29"
    assert odds["fighter2"] == "3.64"
    assert odds["american1"] == -344
    assert odds["american2"] == "+264"
    assert (odds["prob1"], odds["prob2"]) == (75, 25)


def test_no_house_edge_is_fair():
    odds = calculate_odds(100, 100, 0.0)
    assert odds["fighter1"] == "2.00"
    assert odds["american1"] == -100


@pytest.mark.parametrize("prob, expected", [(0.5, -100), (0.8, -400), (0.2, "+400"), (0.25, "+300")])
def test_american_odds(prob, expected):
    assert american_odds(prob) == expected


@pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-2.5, -2), (-2.51, -3), (2.49, 2)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_simulation_odds_use_power_ratings(make_genome, quiet_config):
    bugs = [
        RosterBug("a", "Alpha", make_genome(weapon="horn", defense="shell", mobility="winged")),
        RosterBug("b", "Beta", make_genome()),
    ]
    sim = Simulation(FakeRoster(bugs), config=quiet_config, rng=random.Random(1))
    assert sim.calculate_odds() == calculate_odds(235, 200, quiet_config.house_edge)
