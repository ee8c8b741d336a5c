"""Lightweight simulation configuration helpers."""

import os
from dataclasses import dataclass, replace

from core.config.simulation import COUNTDOWN_SECONDS, HOUSE_EDGE, TICK_RATE, VICTORY_SECONDS
from core.exceptions import ConfigurationError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SimulationConfig:
    """Configuration toggles for the match orchestrator.

    Attributes:
        tick_rate: Ticks per simulated second (the driver calls ``update`` this often).
        countdown_seconds: Betting window before each fight.
        victory_seconds: How long the result stays on screen.
        house_edge: Added to both implied probabilities when quoting odds.
        stuck_detector_enabled: Anti-softlock burst for grounded fighters. Only
            stress tests turn this off.
        fight_logging: Whether the default fight logger is attached.
    """

    tick_rate: int = TICK_RATE
    countdown_seconds: int = COUNTDOWN_SECONDS
    victory_seconds: int = VICTORY_SECONDS
    house_edge: float = HOUSE_EDGE
    stuck_detector_enabled: bool = True
    fight_logging: bool = True

    def __post_init__(self) -> None:
        if self.tick_rate <= 0:
            raise ConfigurationError("tick_rate must be positive")
        if self.countdown_seconds < 1:
            raise ConfigurationError("countdown_seconds must be at least 1")
        if self.victory_seconds < 0:
            raise ConfigurationError("victory_seconds cannot be negative")
        if not 0.0 <= self.house_edge < 1.0:
            raise ConfigurationError("house_edge must be in [0, 1)")

    @property
    def victory_ticks(self) -> int:
        return self.tick_rate * self.victory_seconds

    def with_overrides(self, **kwargs) -> "SimulationConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """Build a config from ``BUGFIGHTS_*`` environment variables."""
        return cls(
            countdown_seconds=_env_int("BUGFIGHTS_COUNTDOWN_SECONDS", COUNTDOWN_SECONDS),
            victory_seconds=_env_int("BUGFIGHTS_VICTORY_SECONDS", VICTORY_SECONDS),
            fight_logging=_env_bool("BUGFIGHTS_FIGHT_LOGGING", True),
        )
