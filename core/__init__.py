"""Core fight simulation.

This package contains the pure simulation logic for bug fights, with no web
dependencies. Key subpackages:

- genetics: Genome, trait catalogs, breeding and validation
- fighter: per-match fighter state, physics, mobility strategies and AI
- combat: attack/feint resolution and the damage formula
- roster: the persistent set of bugs that take turns fighting
- simulation: the countdown/fighting/victory match loop and betting odds
- diagnostics: fight observers

Use direct imports from subpackages for internal helpers.
"""

from . import genetics as genetics
from . import simulation as simulation

__all__ = [
    "genetics",
    "simulation",
]
