"""Genome class for bug fighters.

This module provides the immutable Genome that describes one bug: four combat
stats, categorical combat traits (weapon, defense, mobility), cosmetic traits
and a colour.  Genomes are created by random generation or by breeding two
parents and are never mutated afterwards.
"""

import logging
import math
import random as pyrandom
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.config.genetics import (
    ACCENT_HUE_MIN_OFFSET,
    ACCENT_HUE_SPREAD,
    BREED_STAT_JITTER,
    SIZE_MULTIPLIER_BASE,
    SIZE_MULTIPLIER_BULK_SCALE,
    STAT_CAP,
    STAT_MAX,
    STAT_MEAN,
    STAT_MIN,
    STAT_NAMES,
    STAT_STDDEV,
    TRAIT_MUTATION_CHANCE,
)
from core.exceptions import GeneticsError
from core.genetics.genome_codec import genome_from_dict, genome_to_dict
from core.genetics.traits import (
    BUG_COLORS,
    CATEGORICAL_TRAIT_SPECS,
    NAME_PREFIXES,
    NAME_SUFFIXES,
    NO_WINGS,
    WING_TYPES,
    inherit_traits_from_specs,
    random_traits_from_specs,
)
from core.genetics.validation import validate_genome
from core.math_utils import clamp, pick, round_half_up

logger = logging.getLogger(__name__)


def normal_random(rng: pyrandom.Random) -> float:
    """Standard normal sample via Box-Muller, built on ``rng.random()`` only."""
    u1 = 1.0 - rng.random()  # (0, 1] so log() is finite
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def rescale_stats_to_cap(stats: List[int]) -> List[int]:
    """Scale stats down proportionally so their sum is at most STAT_CAP.

    Stats already within the cap are returned unchanged (never scaled up).
    Rounding overshoot is removed by decrementing the current maximum.
    """
    total = sum(stats)
    if total <= STAT_CAP:
        return list(stats)
    scale = STAT_CAP / total
    scaled = [max(STAT_MIN, round_half_up(s * scale)) for s in stats]
    new_total = sum(scaled)
    while new_total > STAT_CAP:
        max_idx = scaled.index(max(scaled))
        scaled[max_idx] -= 1
        new_total -= 1
    return scaled


def blend_hue(h1: float, h2: float) -> float:
    """Midpoint of two hues along the shortest arc of the colour wheel."""
    diff = h2 - h1
    if abs(diff) > 180:
        if diff > 0:
            return (h1 + (diff - 360) / 2 + 360) % 360
        return (h1 + (diff + 360) / 2) % 360
    return (h1 + diff / 2 + 360) % 360


@dataclass(frozen=True)
class BugColor:
    """Base colour: hue in degrees, saturation and lightness in [0, 1]."""

    hue: float
    saturation: float
    lightness: float


@dataclass(frozen=True)
class Genome:
    """Represents the complete genetic makeup of a bug.

    Attributes:
        bulk, speed, fury, instinct: Combat stats in [STAT_MIN, STAT_MAX]
        weapon, defense, mobility: Categorical combat traits
        abdomen_type ... antenna_style: Cosmetic traits (flavor names only)
        wing_type: 'none' exactly when mobility is not 'winged'
        color: Base colour
        accent_hue: Accent hue in degrees
    """

    bulk: int
    speed: int
    fury: int
    instinct: int
    weapon: str
    defense: str
    mobility: str
    abdomen_type: str
    thorax_type: str
    head_type: str
    leg_count: int
    leg_style: str
    texture_type: str
    eye_style: str
    antenna_style: str
    wing_type: str
    color: BugColor
    accent_hue: float

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def stat_total(self) -> int:
        return self.bulk + self.speed + self.fury + self.instinct

    @property
    def size_multiplier(self) -> float:
        return SIZE_MULTIPLIER_BASE + (self.bulk / 100) * SIZE_MULTIPLIER_BULK_SCALE

    @property
    def is_winged(self) -> bool:
        return self.mobility == "winged"

    def stats(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in STAT_NAMES}

    def get_name(self, rng: Optional[pyrandom.Random] = None) -> str:
        """Flavor name: weapon-indexed prefix plus abdomen-indexed suffix."""
        rng = rng or pyrandom
        prefix = pick(rng, NAME_PREFIXES[self.weapon])
        suffix = pick(rng, NAME_SUFFIXES[self.abdomen_type])
        return f"{prefix} {suffix}"

    # =========================================================================
    # Serialization and validation
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize this genome into the JSON-compatible genome record."""
        return genome_to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Genome":
        """Rebuild a genome from a record produced by ``to_dict``."""
        return genome_from_dict(cls, BugColor, data)

    def validate(self) -> Dict[str, Any]:
        """Validate stat ranges and trait values; returns a dict with any issues found."""
        issues = validate_genome(self, path="genome")
        return {"ok": not issues, "issues": issues}

    def assert_valid(self) -> None:
        """Raise GeneticsError if validation finds problems."""
        result = self.validate()
        if result["ok"]:
            return
        issues = "\n".join(result["issues"])
        raise GeneticsError(f"Invalid genome:\n{issues}")

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def random(cls, rng: Optional[pyrandom.Random] = None) -> "Genome":
        """Create a random genome.

        Stats are approximately normal draws; cosmetic traits are picked with
        stat-driven weights (e.g. high fury favours a triangular head).
        """
        rng = rng or pyrandom
        stats = [
            int(clamp(round_half_up(STAT_MEAN + normal_random(rng) * STAT_STDDEV), STAT_MIN, STAT_MAX))
            for _ in STAT_NAMES
        ]
        stats = rescale_stats_to_cap(stats)
        stat_values = dict(zip(STAT_NAMES, stats))
        normalized = {name: value / 100 for name, value in stat_values.items()}

        traits = random_traits_from_specs(CATEGORICAL_TRAIT_SPECS, rng, normalized)
        wing_type = pick(rng, WING_TYPES) if traits["mobility"] == "winged" else NO_WINGS

        hue, sat, light = pick(rng, BUG_COLORS)
        color = BugColor(hue=hue, saturation=sat / 100, lightness=light / 100)
        accent_hue = (hue + ACCENT_HUE_MIN_OFFSET + rng.random() * ACCENT_HUE_SPREAD) % 360

        return cls(
            **stat_values,
            **traits,
            wing_type=wing_type,
            color=color,
            accent_hue=accent_hue,
        )

    @classmethod
    def from_parents(
        cls,
        parent1: "Genome",
        parent2: "Genome",
        *,
        mutation_chance: float = TRAIT_MUTATION_CHANCE,
        rng: Optional[pyrandom.Random] = None,
    ) -> "Genome":
        """Create an offspring genome by crossover of two parents.

        Neither parent is modified and the child shares no mutable state with them.
        """
        rng = rng or pyrandom
        stats = []
        for name in STAT_NAMES:
            avg = (getattr(parent1, name) + getattr(parent2, name)) / 2
            jitter = (rng.random() - 0.5) * 2 * BREED_STAT_JITTER
            stats.append(int(clamp(round_half_up(avg + jitter), STAT_MIN, STAT_MAX)))
        stats = rescale_stats_to_cap(stats)

        traits = inherit_traits_from_specs(
            CATEGORICAL_TRAIT_SPECS,
            parent1,
            parent2,
            mutation_chance=mutation_chance,
            rng=rng,
        )

        if traits["mobility"] == "winged":
            parent_wings = [w for w in (parent1.wing_type, parent2.wing_type) if w != NO_WINGS]
            wing_type = pick(rng, parent_wings) if parent_wings else pick(rng, WING_TYPES)
        else:
            wing_type = NO_WINGS

        color = BugColor(
            hue=blend_hue(parent1.color.hue, parent2.color.hue),
            saturation=(parent1.color.saturation + parent2.color.saturation) / 2,
            lightness=(parent1.color.lightness + parent2.color.lightness) / 2,
        )

        child = cls(
            **dict(zip(STAT_NAMES, stats)),
            **traits,
            wing_type=wing_type,
            color=color,
            accent_hue=blend_hue(parent1.accent_hue, parent2.accent_hue),
        )
        logger.debug(
            "Bred genome %s x %s -> stats=%s weapon=%s mobility=%s",
            parent1.stat_total,
            parent2.stat_total,
            child.stat_total,
            child.weapon,
            child.mobility,
        )
        return child

    def breed(self, other: "Genome", rng: Optional[pyrandom.Random] = None) -> "Genome":
        return Genome.from_parents(self, other, rng=rng)
