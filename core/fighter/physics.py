"""Arena physics for fighters.

Axis-aligned box-in-a-box integration: gravity, position integration, floor,
ceiling and four walls with mobility-dependent rules (flyers bounce off the
floor, wallcrawlers attach to walls), friction, timers, jumps, wall stun and
the two-fighter separation push.  Not a rigid-body solver.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from core.config.arena import ArenaConfig
from core.config.fighter import (
    AIR_FRICTION,
    BOUNCE_DAMPING,
    DEAD_BOUNCE_DAMPING,
    DEAD_REBOUND_MIN_SPEED,
    GROUND_FRICTION,
    GROUND_GRAVITY,
    JUMP_COOLDOWN,
    JUMP_STAMINA_PER_POWER,
    KNOCKBACK_SETTLE_SPEED,
    WALL_JUMP_HORIZONTAL,
    WALL_STUN_FLYER_SCALE,
    WALL_STUN_MIN_IMPACT,
    WALL_STUN_PER_VELOCITY,
    WALL_STUN_SHELL_SCALE,
    WALL_STUN_WALLCRAWLER_SCALE,
)
from core.fighter.view import AnimState

if TYPE_CHECKING:
    from core.fighter.fighter import Fighter

logger = logging.getLogger(__name__)

# side -> (axis, sign of the direction pointing back into the arena)
_WALL_NORMALS = {
    "left": ("x", 1),
    "right": ("x", -1),
    "front": ("z", -1),
    "back": ("z", 1),
}

# Two fighters closer than this are treated as coincident
_COINCIDENT_DISTANCE = 1
_COINCIDENT_PUSH = 10
_SEPARATION_STRENGTH = 0.5
_COLLISION_BOUNCE = 0.4


@dataclass(frozen=True)
class WallImpact:
    """Record of the last stunning wall collision, drained by the simulation."""

    velocity: float
    wall_side: str
    stun_applied: int

    def to_dict(self) -> dict:
        return {
            "velocity": self.velocity,
            "wallSide": self.wall_side,
            "stunApplied": self.stun_applied,
        }


def wall_normal(side: str) -> Tuple[str, int]:
    """Axis name and inward sign for a wall side."""
    return _WALL_NORMALS[side]


def push_off_wall(fighter: "Fighter", side: str, strength: float) -> None:
    """Set the velocity component normal to ``side`` to point away from it."""
    axis, inward = wall_normal(side)
    setattr(fighter, "v" + axis, inward * strength)


def _wall_limits(arena: ArenaConfig, half_size: float):
    # Evaluated in this order each tick
    return (
        ("left", "x", arena.min_x + half_size, 1),
        ("right", "x", arena.max_x - half_size, -1),
        ("front", "z", arena.max_z - half_size, -1),
        ("back", "z", arena.min_z + half_size, 1),
    )


def _prepare_dead_body(fighter: "Fighter") -> None:
    """A dead fighter lets go of walls and stops flying."""
    if fighter.on_wall:
        side = fighter.wall_side
        fighter.on_wall = False
        fighter.wall_side = None
        fighter.grounded = False
        fighter.gravity = GROUND_GRAVITY
        if side is not None:
            push_off_wall(fighter, side, 2)
    if fighter.is_flying:
        fighter.gravity = GROUND_GRAVITY
        fighter.grounded = False


def update_physics(fighter: "Fighter", arena: ArenaConfig) -> None:
    """Advance one fighter's physics by one tick."""
    is_dead = fighter.state == AnimState.DEATH
    if not fighter.is_alive and not is_dead:
        return

    half_size = fighter.sprite_size / 2
    floor_level = arena.min_y + half_size

    if is_dead and fighter.y <= floor_level + 1:
        fighter.y = floor_level
        fighter.grounded = True
        return

    if is_dead:
        _prepare_dead_body(fighter)

    bounce = DEAD_BOUNCE_DAMPING if is_dead else BOUNCE_DAMPING

    if not fighter.on_wall:
        fighter.vy -= fighter.gravity

    fighter.x += fighter.vx
    fighter.y += fighter.vy
    fighter.z += fighter.vz

    # Floor
    if fighter.y <= floor_level:
        fighter.y = floor_level
        if fighter.is_flying and not is_dead:
            fighter.vy = abs(fighter.vy) * bounce
        else:
            if is_dead and abs(fighter.vy) > DEAD_REBOUND_MIN_SPEED:
                fighter.vy = abs(fighter.vy) * bounce
            else:
                fighter.vy = 0.0
                fighter.grounded = True
            if fighter.on_wall:
                fighter.on_wall = False
                fighter.wall_side = None
    elif not fighter.on_wall and not fighter.is_flying:
        fighter.grounded = False

    # Ceiling
    ceiling_level = arena.max_y - half_size
    if fighter.y > ceiling_level:
        fighter.y = ceiling_level
        fighter.vy = -abs(fighter.vy) * bounce

    # Walls
    for side, axis, limit, inward in _wall_limits(arena, half_size):
        position = getattr(fighter, axis)
        if (position - limit) * inward >= 0:
            continue
        velocity_attr = "v" + axis
        impact_velocity = abs(getattr(fighter, velocity_attr))
        setattr(fighter, axis, limit)

        if fighter.can_attach_to_wall():
            fighter.on_wall = True
            fighter.wall_side = side
            setattr(fighter, velocity_attr, 0.0)
        else:
            if fighter.is_knocked_back and impact_velocity > WALL_STUN_MIN_IMPACT:
                apply_wall_stun(fighter, impact_velocity, side)
            setattr(fighter, velocity_attr, inward * impact_velocity * bounce)

    # Friction
    friction = GROUND_FRICTION if fighter.grounded else AIR_FRICTION
    fighter.vx *= friction
    fighter.vz *= friction
    if fighter.is_flying:
        fighter.vy *= AIR_FRICTION

    if fighter.jump_cooldown > 0:
        fighter.jump_cooldown -= 1
    if fighter.stun_timer > 0:
        fighter.stun_timer -= 1
    if fighter.wall_stun_timer > 0:
        fighter.wall_stun_timer -= 1
    if fighter.feint_cooldown > 0:
        fighter.feint_cooldown -= 1

    if fighter.is_knocked_back:
        speed = math.sqrt(fighter.vx ** 2 + fighter.vy ** 2 + fighter.vz ** 2)
        if speed < KNOCKBACK_SETTLE_SPEED or fighter.grounded:
            fighter.is_knocked_back = False
            fighter.knockback_velocity = 0.0

    fighter.visual.decay()


def jump(fighter: "Fighter", power: float = 1.0) -> bool:
    """Jump (or leap off a wall). Returns False when not possible right now."""
    if fighter.jump_cooldown > 0:
        return False
    if not fighter.grounded and not fighter.on_wall and not fighter.is_flying:
        return False

    if not fighter.spend_stamina(math.floor(JUMP_STAMINA_PER_POWER * power)):
        return False

    jump_force = fighter.jump_power * power

    if fighter.on_wall:
        fighter.vy = jump_force * 0.8
        if fighter.wall_side is not None:
            push_off_wall(fighter, fighter.wall_side, WALL_JUMP_HORIZONTAL)
        fighter.on_wall = False
        fighter.grounded = False
    else:
        fighter.vy = jump_force
        fighter.grounded = False

    fighter.jump_cooldown = JUMP_COOLDOWN
    fighter.visual.set_squash(0.7, 1.3)
    return True


def apply_wall_stun(fighter: "Fighter", impact_velocity: float, wall_side: str) -> WallImpact:
    """Stun a fighter slammed into a wall; duration scales with impact speed."""
    wall_stun = math.floor(impact_velocity * WALL_STUN_PER_VELOCITY)
    if fighter.is_wallcrawler:
        wall_stun = math.floor(wall_stun * WALL_STUN_WALLCRAWLER_SCALE)
    if fighter.genome.defense == "shell":
        wall_stun = math.floor(wall_stun * WALL_STUN_SHELL_SCALE)
    if fighter.is_flying:
        wall_stun = math.floor(wall_stun * WALL_STUN_FLYER_SCALE)

    fighter.wall_stun_timer = wall_stun
    fighter.stun_timer = max(fighter.stun_timer, wall_stun)
    fighter.visual.set_squash(1.4, 0.6)
    fighter.visual.flash(3)

    impact = WallImpact(velocity=impact_velocity, wall_side=wall_side, stun_applied=wall_stun)
    fighter.last_wall_impact = impact
    logger.debug("%s hit the %s wall at %.1f (stun %d)", fighter.name, wall_side, impact_velocity, wall_stun)
    return impact


def resolve_fighter_collision(f1: "Fighter", f2: "Fighter") -> None:
    """Push two overlapping living fighters apart in the XZ plane."""
    if not f1.is_alive or not f2.is_alive:
        return

    dx = f2.x - f1.x
    dz = f2.z - f1.z
    dist_xz = math.sqrt(dx * dx + dz * dz)
    min_dist = (f1.sprite_size + f2.sprite_size) / 2

    if dist_xz >= min_dist:
        return

    if dist_xz < _COINCIDENT_DISTANCE:
        f1.x -= _COINCIDENT_PUSH
        f2.x += _COINCIDENT_PUSH
        return

    overlap = min_dist - dist_xz
    nx = dx / dist_xz
    nz = dz / dist_xz

    total_mass = f1.mass + f2.mass
    f1_ratio = f2.mass / total_mass
    f2_ratio = f1.mass / total_mass

    separation = overlap * _SEPARATION_STRENGTH
    f1.x -= nx * separation * f1_ratio
    f1.z -= nz * separation * f1_ratio
    f2.x += nx * separation * f2_ratio
    f2.z += nz * separation * f2_ratio

    f1.vx -= nx * _COLLISION_BOUNCE
    f1.vz -= nz * _COLLISION_BOUNCE
    f2.vx += nx * _COLLISION_BOUNCE
    f2.vz += nz * _COLLISION_BOUNCE
