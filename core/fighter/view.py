"""Shared fighter state names and the read-only opponent view.

A fighter's AI only ever reads its opponent through ``FighterView``. Anything
that provides these attributes (a real ``Fighter`` or a stub in a test) can be
passed as the opponent.

Example:
    # ❌ Bad - AI reaches into the opponent's drives or stamina
    if opponent.drives.caution > 0.5: ...

    # ✅ Good - AI reacts to what it can observe
    if opponent.is_flying or opponent.on_wall: ...
"""

from enum import Enum
from typing import Optional, Protocol, runtime_checkable


class AIState(str, Enum):
    """Behavioral state; exactly one is active at a time."""

    AGGRESSIVE = "aggressive"
    CIRCLING = "circling"
    RETREATING = "retreating"
    STUNNED = "stunned"


class AnimState(str, Enum):
    """Animation state shown by clients."""

    IDLE = "idle"
    ATTACK = "attack"
    FEINT = "feint"
    HIT = "hit"
    DEATH = "death"
    VICTORY = "victory"


WALL_SIDES = ("left", "right", "front", "back")


@runtime_checkable
class FighterView(Protocol):
    """What one fighter may observe about the other.

    Position, velocity, size, locomotion flags and the visible animation
    state. Drives, stamina and timers are private to the fighter.
    """

    name: str
    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    sprite_size: int
    on_wall: bool
    wall_side: Optional[str]
    facing_right: bool
    facing_angle: float

    @property
    def is_flying(self) -> bool: ...

    @property
    def is_alive(self) -> bool: ...

    @property
    def state(self) -> AnimState: ...
