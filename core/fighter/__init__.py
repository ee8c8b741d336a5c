"""Fighter package: per-match combat state, physics and AI for one bug."""

from core.fighter.drives import Drives
from core.fighter.fighter import Fighter, attack_range, power_rating
from core.fighter.mobility import (
    MOBILITY_TYPES,
    Engagement,
    FlyingMobility,
    GroundMobility,
    WallcrawlerMobility,
    mobility_for,
)
from core.fighter.physics import WallImpact, resolve_fighter_collision
from core.fighter.view import AIState, AnimState, FighterView
from core.fighter.visual_state import FighterVisualState

__all__ = [
    "AIState",
    "AnimState",
    "Drives",
    "Engagement",
    "Fighter",
    "FighterView",
    "FighterVisualState",
    "FlyingMobility",
    "GroundMobility",
    "MOBILITY_TYPES",
    "WallImpact",
    "WallcrawlerMobility",
    "attack_range",
    "mobility_for",
    "power_rating",
    "resolve_fighter_collision",
]
