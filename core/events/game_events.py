"""Per-tick game event definitions.

These events are what spectators see happen during a tick: commentary lines,
hits, feints, wall impacts and the end of a fight.  They are data-only
(frozen dataclasses) and are rebuilt every tick, never accumulated.

Every event serializes to the same wire envelope::

    {"type": <kind>, "data": <payload>, "color": <css colour or None>, "tick": <tick>}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Union

# Commentary colours
RED = "#f00"
YELLOW = "#ff0"
CYAN = "#0ff"
GREEN = "#0f0"
ORANGE = "#f80"
AMBER = "#fa0"
MAGENTA = "#f0f"
GREY = "#888"


@dataclass(frozen=True)
class CommentaryEvent:
    """A line of play-by-play commentary.

    Attributes:
        text: The line shown to spectators
        color: CSS colour for the line
        tick: Simulation tick when this occurred
    """

    kind: ClassVar[str] = "commentary"

    text: str
    color: str
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "data": self.text, "color": self.color, "tick": self.tick}


@dataclass(frozen=True)
class HitEvent:
    """Damage landed on a fighter, by an attack or by poison.

    Attributes:
        x, y: Target position at the moment of the hit
        damage: HP removed
        is_crit: Set for attacks (True on a critical hit)
        is_poison: True for poison ticks
        attacker: Attacker name (attacks only)
        target: Target name (attacks only)
        tick: Simulation tick when this occurred
    """

    kind: ClassVar[str] = "hit"

    x: float
    y: float
    damage: int
    tick: int
    is_crit: Optional[bool] = None
    is_poison: Optional[bool] = None
    attacker: Optional[str] = None
    target: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"x": self.x, "y": self.y, "damage": self.damage}
        if self.is_crit is not None:
            data["isCrit"] = self.is_crit
        if self.is_poison is not None:
            data["isPoison"] = self.is_poison
        if self.attacker is not None:
            data["attacker"] = self.attacker
        if self.target is not None:
            data["target"] = self.target
        return {"type": self.kind, "data": data, "color": None, "tick": self.tick}


@dataclass(frozen=True)
class FeintEvent:
    """A feint and how the target reacted ("read", "dodge-bait" or "flinch")."""

    kind: ClassVar[str] = "feint"

    x: float
    y: float
    attacker: str
    target: str
    result: str
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "x": self.x,
            "y": self.y,
            "attacker": self.attacker,
            "target": self.target,
            "result": self.result,
        }
        return {"type": self.kind, "data": data, "color": None, "tick": self.tick}


@dataclass(frozen=True)
class WallImpactEvent:
    """A knocked-back fighter hit an arena wall hard enough to be stunned.

    Attributes:
        x, y: Fighter position after the impact
        name: Fighter name
        velocity: Impact speed along the wall normal
        wall_side: "left", "right", "front" or "back"
        stun_applied: Stun ticks applied by the impact
        tick: Simulation tick when this occurred
    """

    kind: ClassVar[str] = "wallImpact"

    x: float
    y: float
    name: str
    velocity: float
    wall_side: str
    stun_applied: int
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "x": self.x,
            "y": self.y,
            "name": self.name,
            "velocity": self.velocity,
            "wallSide": self.wall_side,
            "stunApplied": self.stun_applied,
        }
        return {"type": self.kind, "data": data, "color": None, "tick": self.tick}


@dataclass(frozen=True)
class FightEndEvent:
    """The fight is over: winner is 1 (left), 2 (right) or 0 (draw)."""

    kind: ClassVar[str] = "fightEnd"

    winner: int
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "data": {"winner": self.winner}, "color": None, "tick": self.tick}


GameEvent = Union[CommentaryEvent, HitEvent, FeintEvent, WallImpactEvent, FightEndEvent]


class EventLog:
    """Events produced during the current tick.

    The simulation calls ``begin_tick`` at the start of every update, which
    drops the previous tick's events; the list is never cumulative.
    """

    def __init__(self) -> None:
        self.tick = 0
        self._events: List[GameEvent] = []

    def begin_tick(self, tick: int) -> None:
        self.tick = tick
        self._events = []

    def add(self, event: GameEvent) -> None:
        self._events.append(event)

    def commentary(self, text: str, color: str) -> None:
        self.add(CommentaryEvent(text=text, color=color, tick=self.tick))

    @property
    def events(self) -> List[GameEvent]:
        return list(self._events)

    def to_list(self) -> List[Dict[str, Any]]:
        return [event.to_dict() for event in self._events]

    def __len__(self) -> int:
        return len(self._events)
