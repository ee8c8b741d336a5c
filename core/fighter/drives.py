"""Adaptive aggression/caution drives."""

from dataclasses import dataclass

from core.config.fighter import (
    AGGRESSION_FLOOR,
    CAUTION_CEILING,
    DRIVE_ADAPT_BASE,
    DRIVE_ADAPT_INSTINCT_SCALE,
    DRIVE_BASE,
    DRIVE_DRIFT_RATE,
    DRIVE_FURY_SPAN,
    LOW_STAMINA_RATIO,
    STALEMATE_PRESSURE_RATE,
    STALEMATE_PRESSURE_TICKS,
)


def baseline_aggression(fury_norm: float) -> float:
    return DRIVE_BASE + fury_norm * DRIVE_FURY_SPAN


def baseline_caution(fury_norm: float) -> float:
    return DRIVE_BASE + (1 - fury_norm) * DRIVE_FURY_SPAN


@dataclass
class Drives:
    """Aggression and caution in [0, 1], plus how fast they adapt.

    Fury sets the baselines both drives drift back to; instinct sets the
    adaptation rate used when hits land or are taken.
    """

    aggression: float
    caution: float
    adapt_rate: float

    @classmethod
    def from_stats(cls, fury: int, instinct: int) -> "Drives":
        fury_norm = fury / 100
        return cls(
            aggression=baseline_aggression(fury_norm),
            caution=baseline_caution(fury_norm),
            adapt_rate=DRIVE_ADAPT_BASE + (instinct / 100) * DRIVE_ADAPT_INSTINCT_SCALE,
        )

    def drift(self, fury_norm: float) -> None:
        """Move both drives a small step back toward their fury baselines."""
        self.aggression += (baseline_aggression(fury_norm) - self.aggression) * DRIVE_DRIFT_RATE
        self.caution += (baseline_caution(fury_norm) - self.caution) * DRIVE_DRIFT_RATE

    def apply_exhaustion(self, stamina_ratio: float) -> None:
        if stamina_ratio < LOW_STAMINA_RATIO:
            exhaustion = (LOW_STAMINA_RATIO - stamina_ratio) * 2
            self.caution = min(1.0, self.caution + exhaustion * 0.02)
            self.aggression = max(AGGRESSION_FLOOR, self.aggression - exhaustion * 0.02)

    def clamp(self) -> None:
        self.aggression = max(AGGRESSION_FLOOR, self.aggression)
        self.caution = min(CAUTION_CEILING, self.caution)

    def apply_stalemate_pressure(self, no_engagement_ticks: int) -> None:
        if no_engagement_ticks <= STALEMATE_PRESSURE_TICKS:
            return
        pressure = (no_engagement_ticks - STALEMATE_PRESSURE_TICKS) / STALEMATE_PRESSURE_TICKS
        self.aggression = min(1.0, self.aggression + pressure * STALEMATE_PRESSURE_RATE)
        self.caution = max(0.0, self.caution - pressure * STALEMATE_PRESSURE_RATE)

    def on_hit_landed(self) -> None:
        self.aggression = min(1.0, self.aggression + self.adapt_rate * 2)
        self.caution = max(0.0, self.caution - self.adapt_rate)

    def on_damage_taken(self, fury_norm: float) -> None:
        # Furious bugs get angrier when hurt, the rest get warier
        if fury_norm > 0.5:
            self.aggression = min(1.0, self.aggression + self.adapt_rate * fury_norm * 3)
        else:
            self.caution = min(1.0, self.caution + self.adapt_rate * (1 - fury_norm) * 3)
            self.aggression = max(0.0, self.aggression - self.adapt_rate)

    def to_dict(self) -> dict:
        return {"aggression": round(self.aggression, 2), "caution": round(self.caution, 2)}
