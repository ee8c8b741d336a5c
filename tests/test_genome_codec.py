"""Tests for the genome record codec."""

import logging

import pytest

from core.exceptions import GeneticsError
from core.genetics import Genome


def test_record_uses_client_field_names(make_genome):
    record = make_genome(mobility="winged").to_dict()
    for key in ("abdomenType", "thoraxType", "headType", "legCount", "legStyle", "textureType",
                "eyeStyle", "antennaStyle", "wingType", "accentHue"):
        assert key in record
    assert record["wingType"] == "fly"
    assert record["color"] == {"hue": 30.0, "saturation": 0.5, "lightness": 0.3}


def test_random_genome_survives_record(seeded_rng):
    genome = Genome.random(seeded_rng)
    assert Genome.from_dict(genome.to_dict()) == genome


def test_missing_field_raises(make_genome):
    record = make_genome().to_dict()
    del record["weapon"]
    with pytest.raises(GeneticsError, match="weapon"):
        Genome.from_dict(record)


def test_unknown_weapon_raises(make_genome):
    record = make_genome().to_dict()
    record["weapon"] = "laser"
    with pytest.raises(GeneticsError, match="laser"):
        Genome.from_dict(record)


def test_non_numeric_stat_raises(make_genome):
    record = make_genome().to_dict()
    record["bulk"] = "heavy"
    with pytest.raises(GeneticsError, match="bulk"):
        Genome.from_dict(record)


def test_winged_record_without_wings_raises(make_genome):
    record = make_genome(mobility="winged").to_dict()
    record["wingType"] = "none"
    with pytest.raises(GeneticsError):
        Genome.from_dict(record)


def test_wings_dropped_from_ground_record(make_genome, caplog):
    record = make_genome().to_dict()
    record["wingType"] = "beetle"
    with caplog.at_level(logging.WARNING):
        genome = Genome.from_dict(record)
    assert genome.wing_type == "none"
    assert "Dropping wingType" in caplog.text


def test_non_mapping_record_raises():
    with pytest.raises(GeneticsError):
        Genome.from_dict(["not", "a", "record"])
