"""Simulation package: match orchestration and betting odds.

Usage:
    from core.roster import RosterManager
    from core.simulation import Simulation

    sim = Simulation(RosterManager())
    while True:
        sim.update()          # once per tick, 30 times a second
        state = sim.get_state()
"""

from core.simulation.odds import american_odds, calculate_odds
from core.simulation.simulation import FighterPair, FightResult, Phase, Simulation

__all__ = [
    "FightResult",
    "FighterPair",
    "Phase",
    "Simulation",
    "american_odds",
    "calculate_odds",
]
