"""Bug Fights exception hierarchy.

Centralised base classes so broad ``except Exception`` blocks can be
replaced with narrower catches and failures become easier to diagnose.
"""


class BugFightsError(Exception):
    """Root of all Bug Fights domain exceptions."""


class SimulationError(BugFightsError):
    """Errors during simulation execution (orchestrator, combat, physics)."""


class FighterError(SimulationError):
    """A fighter-level failure (invalid side, corrupted state)."""


class GeneticsError(SimulationError):
    """Genome encoding, decoding, or breeding failure."""


class RosterError(BugFightsError):
    """The roster cannot satisfy a request (e.g. too few bugs to match)."""


class PersistenceError(BugFightsError):
    """Errors during roster save / load operations."""


class ConfigurationError(BugFightsError):
    """Invalid or missing configuration."""
