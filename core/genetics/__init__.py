"""Genetics package for bug fighters.

This package provides the immutable bug genome with:

- Declarative categorical trait specifications (CategoricalSpec)
- Random generation with stat-weighted cosmetic traits
- Crossover breeding that never inflates stats toward the cap
- A lossless record codec and validation helpers
"""

from core.genetics.genome import BugColor, Genome, blend_hue, rescale_stats_to_cap
from core.genetics.traits import (
    CATEGORICAL_TRAIT_SPECS,
    DEFENSES,
    MOBILITIES,
    WEAPONS,
    WING_TYPES,
    CategoricalSpec,
)
from core.genetics.validation import validate_genome

__all__ = [
    "BugColor",
    "Genome",
    "blend_hue",
    "rescale_stats_to_cap",
    "CategoricalSpec",
    "CATEGORICAL_TRAIT_SPECS",
    "WEAPONS",
    "DEFENSES",
    "MOBILITIES",
    "WING_TYPES",
    "validate_genome",
]
