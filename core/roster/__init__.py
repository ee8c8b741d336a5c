"""Roster of bugs that take turns fighting."""

from core.roster.protocol import RosterBug, RosterProvider
from core.roster.roster_manager import RosterManager, selection_weight

__all__ = ["RosterBug", "RosterManager", "RosterProvider", "selection_weight"]
