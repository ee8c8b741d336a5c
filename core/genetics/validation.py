"""Validation helpers for genetic data structures.

These functions are intended for debugging and safety checks, not hot-path logic.
They help catch subtle bugs (out-of-range stats, wrong types) close to the source.
"""

from __future__ import annotations

import math
from typing import List

from core.config.genetics import STAT_CAP, STAT_MAX, STAT_MIN, STAT_NAMES
from core.genetics.traits import CATEGORICAL_TRAIT_SPECS, NO_WINGS, WING_TYPES


def validate_genome(genome: object, *, path: str) -> List[str]:
    """Validate a genome's stats, categorical traits and colour.

    Returns a list of human-readable issues; empty means valid.
    """
    issues: List[str] = []
    total = 0
    for name in STAT_NAMES:
        value = getattr(genome, name, None)
        if not isinstance(value, int) or isinstance(value, bool):
            issues.append(f"{path}.{name}: expected int, got {type(value).__name__}")
            continue
        total += value
        if value < STAT_MIN or value > STAT_MAX:
            issues.append(f"{path}.{name}: {value} not in [{STAT_MIN}, {STAT_MAX}]")
    if total > STAT_CAP:
        issues.append(f"{path}: stat total {total} exceeds cap {STAT_CAP}")

    for spec in CATEGORICAL_TRAIT_SPECS:
        value = getattr(genome, spec.name, None)
        if value not in spec.options:
            issues.append(f"{path}.{spec.name}: {value!r} not in {list(spec.options)}")

    wing_type = getattr(genome, "wing_type", None)
    if getattr(genome, "mobility", None) == "winged":
        if wing_type not in WING_TYPES:
            issues.append(f"{path}.wing_type: winged genome has {wing_type!r}")
    elif wing_type != NO_WINGS:
        issues.append(f"{path}.wing_type: non-winged genome has {wing_type!r}")

    color = getattr(genome, "color", None)
    if color is None:
        issues.append(f"{path}.color: missing")
    else:
        hue = float(color.hue)
        if not math.isfinite(hue) or not (0.0 <= hue < 360.0):
            issues.append(f"{path}.color.hue: {color.hue} not in [0, 360)")
        for channel in ("saturation", "lightness"):
            val = float(getattr(color, channel))
            if not math.isfinite(val) or not (0.0 <= val <= 1.0):
                issues.append(f"{path}.color.{channel}: {val} not in [0, 1]")

    accent = float(getattr(genome, "accent_hue", float("nan")))
    if not math.isfinite(accent) or not (0.0 <= accent < 360.0):
        issues.append(f"{path}.accent_hue: {accent} not in [0, 360)")

    return issues
