"""Trait catalogs and declarative categorical trait specifications.

This module provides:
- The closed value sets for every categorical genome trait
- The curated colour palette used for random generation
- CategoricalSpec: declarative description of one categorical trait, including
  the optional stat-driven weight function used by random generation
- Helpers that generate and inherit every spec'd trait in one pass
"""

import random as pyrandom
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from core.math_utils import pick

WEAPONS = ("mandibles", "stinger", "fangs", "pincers", "horn")
DEFENSES = ("shell", "none", "toxic", "camouflage")
MOBILITIES = ("ground", "winged", "wallcrawler")
WING_TYPES = ("fly", "beetle", "dragonfly")
NO_WINGS = "none"
TEXTURES = ("smooth", "plated", "rough", "spotted", "striped")
ABDOMEN_TYPES = ("round", "oval", "pointed", "bulbous", "segmented", "sac", "plated", "tailed")
THORAX_TYPES = ("compact", "elongated", "wide", "humped", "segmented")
HEAD_TYPES = ("round", "triangular", "square", "elongated", "shield")
LEG_COUNTS = (4, 6, 8)
LEG_STYLES = ("insect", "spider", "mantis", "grasshopper", "beetle", "stick", "centipede")
EYE_STYLES = ("compound", "simple", "stalked", "multiple", "sunken")
ANTENNA_STYLES = ("segmented", "clubbed", "whip", "horned", "none", "nubs")

# (hue degrees, saturation %, lightness %) - earthy, realistic insect colours
BUG_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (0, 0, 10),  # jet black
    (0, 0, 18),  # charcoal
    (0, 0, 29),  # slate
    (0, 0, 42),  # ash
    (60, 8, 51),  # stone
    (20, 40, 12),  # dark brown
    (25, 45, 17),  # chocolate
    (25, 50, 28),  # chestnut
    (28, 35, 49),  # tan
    (40, 30, 74),  # cream
    (25, 75, 31),  # rust
    (0, 60, 27),  # mahogany
    (45, 85, 38),  # amber
    (20, 60, 40),  # copper
    (35, 75, 47),  # ochre
    (120, 30, 24),  # forest
    (95, 25, 30),  # moss
    (60, 20, 30),  # olive
    (180, 25, 25),  # teal
    (215, 55, 25),  # navy
)

NAME_PREFIXES: Dict[str, Tuple[str, ...]] = {
    "mandibles": ("Crusher", "Gnasher", "Chomper", "Breaker"),
    "stinger": ("Piercer", "Stabber", "Lancer", "Spike"),
    "fangs": ("Venom", "Toxic", "Biter", "Fang"),
    "pincers": ("Gripper", "Clamper", "Pincher", "Snapper"),
    "horn": ("Charger", "Ramhorn", "Gorer", "Impaler"),
}

NAME_SUFFIXES: Dict[str, Tuple[str, ...]] = {
    "round": ("Blob", "Orb", "Ball", "Dome"),
    "oval": ("Runner", "Swift", "Dash", "Scout"),
    "pointed": ("Spike", "Lance", "Arrow", "Dart"),
    "bulbous": ("Bulk", "Mass", "Tank", "Heavy"),
    "segmented": ("Crawler", "Creep", "Chain", "Link"),
    "sac": ("Sack", "Brood", "Pouch", "Vessel"),
    "plated": ("Shell", "Armor", "Plank", "Guard"),
    "tailed": ("Tail", "Whip", "Sting", "Lash"),
}

# Stats normalised to [0, 1] (stat / 100), keyed by stat name
NormalizedStats = Mapping[str, float]
WeightFn = Callable[[NormalizedStats], Sequence[float]]


def weighted_pick(rng: pyrandom.Random, options: Sequence[Any], weights: Sequence[float]) -> Any:
    """Pick one option with probability proportional to its weight.

    Uses a single ``rng.random()`` draw. Non-positive weights are never picked
    unless every weight is non-positive, in which case the pick is uniform.
    """
    total = sum(w for w in weights if w > 0)
    if total <= 0:
        return pick(rng, options)
    roll = rng.random() * total
    for option, weight in zip(options, weights):
        if weight <= 0:
            continue
        roll -= weight
        if roll < 0:
            return option
    return options[-1]


@dataclass(frozen=True)
class CategoricalSpec:
    """Declarative specification for a categorical genome trait.

    Attributes:
        name: Attribute name on ``Genome``
        key: Field name in the serialized genome record
        options: Closed set of allowed values
        weight_fn: Optional stat-driven weights for random generation; the
            pick is uniform when absent
    """

    name: str
    key: str
    options: Tuple[Any, ...]
    weight_fn: Optional[WeightFn] = None

    def random_value(self, rng: pyrandom.Random, stats: NormalizedStats) -> Any:
        if self.weight_fn is None:
            return pick(rng, self.options)
        return weighted_pick(rng, self.options, self.weight_fn(stats))

    def inherit(
        self,
        value1: Any,
        value2: Any,
        *,
        mutation_chance: float,
        rng: pyrandom.Random,
    ) -> Any:
        """Take either parent's value 50/50, then maybe mutate to a uniform pick."""
        value = value1 if rng.random() < 0.5 else value2
        if rng.random() < mutation_chance:
            value = pick(rng, self.options)
        return value


def _abdomen_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0 + s["bulk"] * 0.5,  # round
        1.0 + s["speed"],  # oval
        1.0 + s["fury"] * 0.5,  # pointed
        0.5 + s["bulk"] * 1.5,  # bulbous
        1.0,  # segmented
        0.5 + s["bulk"] * 0.5,  # sac
        0.5 + s["bulk"],  # plated
        0.5 + (s["fury"] + s["speed"]) * 0.5,  # tailed
    )


def _thorax_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0 + s["speed"] * 0.5,  # compact
        0.5 + s["speed"],  # elongated
        0.5 + s["bulk"],  # wide
        0.5 + s["bulk"] * 0.5,  # humped
        1.0,  # segmented
    )


def _head_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0,  # round
        0.5 + s["fury"] * 1.5,  # triangular
        0.5 + s["bulk"],  # square
        0.5 + s["instinct"],  # elongated
        0.5 + s["bulk"] * 0.5 + (1.0 - s["speed"]) * 0.5,  # shield
    )


def _leg_style_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0,  # insect
        0.5 + s["instinct"],  # spider
        0.5 + s["fury"],  # mantis
        0.5 + s["speed"] * 1.5,  # grasshopper
        0.5 + s["bulk"],  # beetle
        0.5 + (1.0 - s["bulk"]),  # stick
        0.5 + s["bulk"] * 0.5,  # centipede
    )


def _eye_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0 + s["instinct"] * 0.5,  # compound
        1.0,  # simple
        0.5 + s["instinct"],  # stalked
        0.5 + s["instinct"],  # multiple
        0.5 + s["bulk"] * 0.5,  # sunken
    )


def _texture_weights(s: NormalizedStats) -> Sequence[float]:
    return (
        1.0 + s["speed"] * 0.5,  # smooth
        0.5 + s["bulk"],  # plated
        1.0,  # rough
        1.0,  # spotted
        1.0,  # striped
    )


# Combat traits are always uniform; cosmetic traits lean on the stats
COMBAT_TRAIT_SPECS: List[CategoricalSpec] = [
    CategoricalSpec("weapon", "weapon", WEAPONS),
    CategoricalSpec("defense", "defense", DEFENSES),
    CategoricalSpec("mobility", "mobility", MOBILITIES),
]

COSMETIC_TRAIT_SPECS: List[CategoricalSpec] = [
    CategoricalSpec("abdomen_type", "abdomenType", ABDOMEN_TYPES, _abdomen_weights),
    CategoricalSpec("thorax_type", "thoraxType", THORAX_TYPES, _thorax_weights),
    CategoricalSpec("head_type", "headType", HEAD_TYPES, _head_weights),
    CategoricalSpec("leg_count", "legCount", LEG_COUNTS),
    CategoricalSpec("leg_style", "legStyle", LEG_STYLES, _leg_style_weights),
    CategoricalSpec("texture_type", "textureType", TEXTURES, _texture_weights),
    CategoricalSpec("eye_style", "eyeStyle", EYE_STYLES, _eye_weights),
    CategoricalSpec("antenna_style", "antennaStyle", ANTENNA_STYLES),
]

CATEGORICAL_TRAIT_SPECS: List[CategoricalSpec] = COMBAT_TRAIT_SPECS + COSMETIC_TRAIT_SPECS


def random_traits_from_specs(
    specs: Sequence[CategoricalSpec], rng: pyrandom.Random, stats: NormalizedStats
) -> Dict[str, Any]:
    """Generate a value for every spec, returning {attribute_name: value}."""
    return {spec.name: spec.random_value(rng, stats) for spec in specs}


def inherit_traits_from_specs(
    specs: Sequence[CategoricalSpec],
    parent1: object,
    parent2: object,
    *,
    mutation_chance: float,
    rng: pyrandom.Random,
) -> Dict[str, Any]:
    """Inherit every spec'd trait from two parents, returning {attribute_name: value}."""
    inherited = {}
    for spec in specs:
        inherited[spec.name] = spec.inherit(
            getattr(parent1, spec.name),
            getattr(parent2, spec.name),
            mutation_chance=mutation_chance,
            rng=rng,
        )
    return inherited
