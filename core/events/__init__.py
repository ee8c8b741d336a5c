"""Events module for per-tick game events.

The simulation collects these during a tick and exposes them (serialized)
through its state snapshot; they are cleared at the start of every tick.
"""

from core.events.game_events import (
    AMBER,
    CYAN,
    GREEN,
    GREY,
    MAGENTA,
    ORANGE,
    RED,
    YELLOW,
    CommentaryEvent,
    EventLog,
    FeintEvent,
    FightEndEvent,
    GameEvent,
    HitEvent,
    WallImpactEvent,
)

__all__ = [
    "AMBER",
    "CYAN",
    "CommentaryEvent",
    "EventLog",
    "FeintEvent",
    "FightEndEvent",
    "GREEN",
    "GREY",
    "GameEvent",
    "HitEvent",
    "MAGENTA",
    "ORANGE",
    "RED",
    "WallImpactEvent",
    "YELLOW",
]
