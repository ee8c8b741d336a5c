"""Betting odds from the two fighters' power ratings."""

from __future__ import annotations

from typing import Any, Dict, Union

from core.config.simulation import HOUSE_EDGE
from core.math_utils import round_half_up


def american_odds(prob: float) -> Union[int, str]:
    """Moneyline: negative int for favourites, "+n" string for underdogs."""
    if prob >= 0.5:
        return round_half_up(-100 * (prob / (1 - prob)))
    return "+" + str(round_half_up(100 * ((1 - prob) / prob)))


def calculate_odds(power1: float, power2: float, house_edge: float = HOUSE_EDGE) -> Dict[str, Any]:
    """Decimal and American odds for a match between two power ratings.

    Half the house edge is added to each implied probability before
    conversion, so both payouts are slightly shorter than fair.
    """
    total = power1 + power2
    prob1 = power1 / total
    prob2 = power2 / total

    adjusted1 = prob1 + house_edge / 2
    adjusted2 = prob2 + house_edge / 2

    return {
        "fighter1": f"{1 / adjusted1:.2f}",
        "fighter2": f"{1 / adjusted2:.2f}",
        "american1": american_odds(adjusted1),
        "american2": american_odds(adjusted2),
        "prob1": round_half_up(prob1 * 100),
        "prob2": round_half_up(prob2 * 100),
    }
