"""Visual state containers for fighters."""

from __future__ import annotations

import math

from core.fighter.view import AnimState

# Frames per animation and ticks per frame
_FRAME_COUNTS = {
    AnimState.IDLE: 4,
    AnimState.ATTACK: 4,
    AnimState.FEINT: 2,
    AnimState.HIT: 2,
    AnimState.DEATH: 4,
    AnimState.VICTORY: 4,
}
_DEATH_FADE_DELAY = 120
_DEATH_MIN_ALPHA = 0.3


class FighterVisualState:
    """Animation and squash/stretch state for a fighter.

    This class encapsulates the rendering-facing state and its timers. It is
    part of the serialized snapshot but never feeds back into gameplay other
    than through ``state`` (a fighter only attacks while idle).
    """

    def __init__(self) -> None:
        self.state: AnimState = AnimState.IDLE
        self.anim_frame: int = 0
        self.anim_tick: int = 0
        self.state_timer: int = 0
        self.victory_bounce: float = 0.0
        self.death_rotation: float = 0.0
        self.death_alpha: float = 1.0
        self.squash: float = 1.0
        self.stretch: float = 1.0
        self.lunge_x: float = 0.0
        self.lunge_y: float = 0.0
        self.flash_timer: int = 0

    def set_state(self, new_state: AnimState) -> None:
        if self.state != new_state:
            self.state = new_state
            self.anim_frame = 0
            self.state_timer = 0

    def set_squash(self, squash: float, stretch: float) -> None:
        self.squash = squash
        self.stretch = stretch

    def set_lunge(self, lunge_x: float, lunge_y: float) -> None:
        self.lunge_x = lunge_x
        self.lunge_y = lunge_y

    def flash(self, ticks: int) -> None:
        self.flash_timer = ticks

    def update(self, *, is_alive: bool, facing_right: bool) -> None:
        """Advance animation frames and the victory/death animations by one tick."""
        self.state_timer += 1
        self.anim_tick += 1

        if self.state == AnimState.FEINT:
            frame_delay = 4
        elif self.state == AnimState.IDLE:
            frame_delay = 8
        else:
            frame_delay = 5

        if self.anim_tick >= frame_delay:
            self.anim_tick = 0
            self.anim_frame += 1
            max_frames = _FRAME_COUNTS.get(self.state, 4)
            if self.anim_frame >= max_frames:
                if self.state == AnimState.DEATH:
                    self.anim_frame = max_frames - 1
                elif self.state in (AnimState.ATTACK, AnimState.FEINT):
                    self.set_state(AnimState.IDLE)
                elif self.state == AnimState.HIT:
                    self.set_state(AnimState.IDLE if is_alive else AnimState.DEATH)
                else:
                    self.anim_frame = 0

        if self.state == AnimState.VICTORY:
            self.victory_bounce = math.sin(self.state_timer / 8) * 10
        else:
            self.victory_bounce = 0.0

        if self.state == AnimState.DEATH:
            target_rotation = math.pi / 2 if facing_right else -math.pi / 2
            self.death_rotation += (target_rotation - self.death_rotation) * 0.1
            if self.state_timer > _DEATH_FADE_DELAY:
                self.death_alpha = max(_DEATH_MIN_ALPHA, self.death_alpha - 0.005)
        else:
            self.death_rotation = 0.0
            self.death_alpha = 1.0

    def decay(self) -> None:
        """Ease squash/stretch and lunge back to rest; count down the hit flash."""
        self.squash += (1 - self.squash) * 0.2
        self.stretch += (1 - self.stretch) * 0.2
        self.lunge_x *= 0.85
        self.lunge_y *= 0.85
        if self.flash_timer > 0:
            self.flash_timer -= 1
