"""Configuration package for the bug fights simulation.

Constants are grouped by concern (arena, genetics, fighter, combat,
simulation timing, server).  ``SimulationConfig`` aggregates the tunables an
orchestrator may override at construction time.
"""
