"""Locomotion strategies: one behavior implementation per mobility type.

A fighter picks its strategy once at construction from ``genome.mobility``.
Each strategy owns the mobility-specific parts of a fighter's tick:

- spawn position and starting gravity
- stamina drain and regeneration while flying or clinging
- the steering arithmetic for the aggressive, circling and retreating states
- wall climbing (wallcrawlers only)

The steering is attraction/repulsion arithmetic against the opponent's
current position, not pathfinding.
"""

from __future__ import annotations

import math
import random as pyrandom
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Tuple, Type

from core.config.arena import CORNERED_THRESHOLD, WALL_NEAR_MARGIN, ArenaConfig
from core.config.fighter import (
    CLIMB_STAMINA_COST,
    EXHAUSTED_FLYER_GRAVITY,
    EXHAUSTION_RATIO,
    FLIGHT_GRAVITY,
    FLIGHT_STAMINA_COST,
    GROUND_GRAVITY,
    RECOVERY_RATIO,
)
from core.exceptions import FighterError
from core.fighter.physics import push_off_wall
from core.fighter.view import AIState, FighterView
from core.math_utils import clamp, random_side, sign

if TYPE_CHECKING:
    from core.fighter.fighter import Fighter

SPAWN_X = 250
WALLCRAWLER_SPAWN_X = 300
SPAWN_HEIGHT = 20
FLYER_SPAWN_Y = 220
FLYER_SPAWN_Y_SPREAD = 150
FLYER_SPAWN_Z_SPREAD = 50


@dataclass(frozen=True)
class Engagement:
    """Geometry between a fighter and its opponent for one AI tick."""

    dx: float
    dy: float
    dz: float
    dist: float
    attack_range: float

    @property
    def horiz_dist(self) -> float:
        return math.sqrt(self.dx * self.dx + self.dz * self.dz)


def aggressive_speed(fighter: "Fighter") -> float:
    base_speed = 0.30 + fighter.genome.speed / 160
    stamina_factor = 0.7 + fighter.stamina_ratio * 0.3
    return base_speed * (0.7 + fighter.drives.aggression * 0.5) * stamina_factor


def circling_speed(fighter: "Fighter") -> float:
    return 0.22 + fighter.genome.speed / 180


def retreat_speed(fighter: "Fighter") -> float:
    return 0.24 + fighter.genome.speed / 180


def circle_radius(fighter: "Fighter") -> float:
    return 80 + fighter.drives.caution * 80


def _corner_mix(direction: float, escape: float, cornered: bool) -> float:
    if cornered:
        return escape * 0.8 + direction * 0.2
    return direction


def _away(delta: float, rng: pyrandom.Random) -> int:
    """Direction away from the opponent along one axis; random when aligned."""
    return -sign(delta) or random_side(rng)


class GroundMobility:
    """Walks on the floor; jumps at airborne or wall-bound opponents."""

    kind = "ground"
    is_flying = False
    is_wallcrawler = False
    can_emergency_retreat = False

    def __init__(self, arena: ArenaConfig) -> None:
        self.arena = arena

    # ------------------------------------------------------------------
    # Setup and stamina
    # ------------------------------------------------------------------

    def initial_gravity(self) -> float:
        return GROUND_GRAVITY

    def starts_grounded(self) -> bool:
        return True

    def spawn_position(self, side_sign: int, rng: pyrandom.Random) -> Tuple[float, float, float]:
        return side_sign * SPAWN_X, self.arena.min_y + SPAWN_HEIGHT, 0.0

    def update_stamina(self, fighter: "Fighter") -> None:
        """Mobility-specific stamina drain and exhaustion handling."""

    def regen_multiplier(self, fighter: "Fighter", base: float) -> float:
        return base

    def can_attach_to_wall(self, fighter: "Fighter") -> bool:
        return False

    # ------------------------------------------------------------------
    # Steering
    # ------------------------------------------------------------------

    def aggressive(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = aggressive_speed(fighter)
        forward_x = math.sin(fighter.facing_angle)
        forward_z = math.cos(fighter.facing_angle)

        fighter.vx += forward_x * speed * 0.9
        fighter.vz += forward_z * speed * 0.9

        if opponent.is_flying or opponent.on_wall or opponent.y > fighter.y + 50:
            if (
                fighter.grounded
                and eng.horiz_dist < eng.attack_range * 2.5
                and fighter.rng.random() < 0.02 + fighter.drives.aggression * 0.04
            ):
                fighter.jump(0.8)
                fighter.vx += forward_x * 3
                fighter.vz += forward_z * 2

    def circling(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = circling_speed(fighter)
        radius = circle_radius(fighter)
        instinct = fighter.instinct_factor

        forward_x = math.sin(fighter.facing_angle)
        forward_z = math.cos(fighter.facing_angle)
        strafe_x = math.cos(fighter.facing_angle)
        strafe_z = -math.sin(fighter.facing_angle)

        strafe_dir = 1 if fighter.side == "left" else -1
        fighter.vx += strafe_x * strafe_dir * speed * 0.5
        fighter.vz += strafe_z * strafe_dir * speed * 0.5

        if eng.dist < radius * 0.8:
            fighter.vx -= forward_x * speed * 0.3
            fighter.vz -= forward_z * speed * 0.3
        elif eng.dist > radius * 1.2:
            fighter.vx += forward_x * speed * 0.3
            fighter.vz += forward_z * speed * 0.3

        if fighter.is_cornered(CORNERED_THRESHOLD) and instinct > 0.3:
            fighter.vx += fighter.escape_direction() * instinct * 0.8 * 0.3

    def retreating(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = retreat_speed(fighter)
        instinct = fighter.instinct_factor
        forward_x = math.sin(fighter.facing_angle)
        forward_z = math.cos(fighter.facing_angle)

        fighter.vx -= forward_x * speed
        fighter.vz -= forward_z * speed

        if fighter.is_cornered(CORNERED_THRESHOLD) and instinct > 0.3:
            fighter.vx += fighter.escape_direction() * speed * 0.8

        if instinct > 0.3:
            strafe_x = math.cos(fighter.facing_angle)
            strafe_z = -math.sin(fighter.facing_angle)
            dodge_dir = math.sin(fighter.move_timer / 8) * instinct
            fighter.vx += strafe_x * dodge_dir * speed * 0.5
            fighter.vz += strafe_z * dodge_dir * speed * 0.5

        if fighter.grounded and fighter.rng.random() < 0.03:
            fighter.jump(0.4)

    def after_steering(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        """Hook run after the state behavior each AI tick."""


class FlyingMobility(GroundMobility):
    """Flies with low gravity, dives on grounded targets, lands when exhausted."""

    kind = "winged"
    is_flying = True
    can_emergency_retreat = True

    def initial_gravity(self) -> float:
        return FLIGHT_GRAVITY

    def starts_grounded(self) -> bool:
        return False

    def spawn_position(self, side_sign: int, rng: pyrandom.Random) -> Tuple[float, float, float]:
        y = FLYER_SPAWN_Y + rng.random() * FLYER_SPAWN_Y_SPREAD
        z = (rng.random() - 0.5) * FLYER_SPAWN_Z_SPREAD
        return side_sign * SPAWN_X, y, z

    def update_stamina(self, fighter: "Fighter") -> None:
        if not fighter.grounded:
            fighter.stamina = max(0.0, fighter.stamina - FLIGHT_STAMINA_COST)
            if fighter.stamina < fighter.max_stamina * EXHAUSTION_RATIO:
                fighter.grounded = True
                fighter.gravity = EXHAUSTED_FLYER_GRAVITY

        if fighter.grounded and fighter.stamina > fighter.max_stamina * RECOVERY_RATIO:
            fighter.grounded = False
            fighter.gravity = FLIGHT_GRAVITY

    def regen_multiplier(self, fighter: "Fighter", base: float) -> float:
        return 2.0 if fighter.grounded else 0.0

    def aggressive(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = aggressive_speed(fighter)
        instinct = fighter.instinct_factor
        stamina_ratio = fighter.stamina_ratio
        horiz_dist = eng.horiz_dist
        move_timer = fighter.move_timer

        has_height_advantage = fighter.y > opponent.y + 40
        can_dive = has_height_advantage and horiz_dist < 200 and stamina_ratio > 0.4

        if opponent.is_flying:
            target_height = opponent.y + 60 + instinct * 40
            fighter.vx += sign(eng.dx) * speed * 0.8
            fighter.vz += sign(eng.dz) * speed * 0.8

            if fighter.y < target_height:
                fighter.vy += 0.3
            elif fighter.y > target_height + 50:
                fighter.vy -= 0.2

            if eng.dist < eng.attack_range * 2 and instinct > 0.3:
                strafe = math.sin(move_timer / 15) * instinct
                perp_x = -eng.dz / (horiz_dist or 1)
                perp_z = eng.dx / (horiz_dist or 1)
                fighter.vx += perp_x * strafe * speed
                fighter.vz += perp_z * strafe * speed

            fighter.vy += math.sin(move_timer / 8) * 0.08
            fighter.vz += math.cos(move_timer / 10) * 0.05

        elif can_dive:
            dive_angle = math.atan2(opponent.y - fighter.y, horiz_dist)
            dive_speed = speed * 2
            fighter.vx += sign(eng.dx) * dive_speed * math.cos(dive_angle)
            fighter.vy -= 0.6
            fighter.vz += sign(eng.dz) * dive_speed * 0.5
            fighter.is_diving = True

        elif fighter.grounded:
            fighter.vx += sign(eng.dx) * speed * 0.5
            fighter.vz += sign(eng.dz) * speed * 0.4
            fighter.is_diving = False
            if eng.dist < eng.attack_range * 1.2:
                fighter.vx -= sign(eng.dx) * speed * 0.3
                fighter.vz -= sign(eng.dz) * speed * 0.2

        elif stamina_ratio < 0.25:
            # Tired: drift down toward the opponent
            fighter.vx += sign(eng.dx) * speed * 0.3
            fighter.vy -= 0.2
            fighter.vz += sign(eng.dz) * speed * 0.3
            fighter.is_diving = False

        else:
            # Hold a stalking orbit above a grounded opponent until a dive opens up
            ideal_height = opponent.y + 100 + instinct * 50
            ideal_dist = 120 + (1 - fighter.drives.aggression) * 80

            if fighter.y < ideal_height:
                fighter.vy += 0.25
            elif fighter.y > ideal_height + 30:
                fighter.vy -= 0.15

            phase = move_timer / 40
            target_x = opponent.x + math.cos(phase) * ideal_dist
            target_z = opponent.z + math.sin(phase * 2) * ideal_dist * 0.6
            fighter.vx += (target_x - fighter.x) * 0.015
            fighter.vz += (target_z - fighter.z) * 0.015
            fighter.vy += math.sin(move_timer / 20) * 0.1
            fighter.is_diving = False

    def circling(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        radius = circle_radius(fighter)
        instinct = fighter.instinct_factor
        vertical_angle = fighter.move_timer / 20
        angle = fighter.circle_angle
        arena = self.arena

        if not fighter.grounded:
            target_x = opponent.x + math.cos(angle) * radius
            target_z = opponent.z + math.sin(angle) * radius * 0.8
            target_y = opponent.y + 80 + math.sin(angle) * radius * 0.4
            target_y += math.sin(vertical_angle) * 30

            if instinct > 0.3:
                target_x += (arena.center_x - target_x) * instinct * 0.2
                target_z = clamp(target_z, arena.min_z + 80, arena.max_z - 80)
            target_y = clamp(target_y, arena.min_y + 60, arena.max_y - 60)

            fighter.vx += (target_x - fighter.x) * 0.035
            fighter.vy += (target_y - fighter.y) * 0.035
            fighter.vz += (target_z - fighter.z) * 0.035

            if not opponent.is_flying and fighter.y < opponent.y + 50:
                fighter.vy += 0.4
            fighter.vz += math.sin(fighter.move_timer / 8) * 0.15
            return

        # Landed to recover stamina: orbit on foot
        effective_radius = radius * (1 + math.sin(vertical_angle) * 0.2)
        target_x = opponent.x + math.cos(angle) * effective_radius
        target_z = opponent.z + math.sin(angle) * effective_radius * 0.8
        if fighter.is_cornered(CORNERED_THRESHOLD) and instinct > 0.3:
            target_x += fighter.escape_direction() * instinct * 0.8 * 50
        target_z = clamp(target_z, arena.min_z + 60, arena.max_z - 60)

        fighter.vx += (target_x - fighter.x) * 0.04
        fighter.vz += (target_z - fighter.z) * 0.04

    def retreating(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = retreat_speed(fighter)
        instinct = fighter.instinct_factor
        arena = self.arena

        cornered = fighter.is_cornered(CORNERED_THRESHOLD)
        cornered_z = fighter.z > arena.max_z - WALL_NEAR_MARGIN or fighter.z < arena.min_z + WALL_NEAR_MARGIN
        escape_x = fighter.escape_direction()
        escape_z = -1 if fighter.z > 0 else 1

        retreat_x = _corner_mix(_away(eng.dx, fighter.rng), escape_x, cornered)
        retreat_z = _corner_mix(_away(eng.dz, fighter.rng), escape_z, cornered_z)

        if fighter.grounded:
            fighter.vx += retreat_x * speed * 1.2
            fighter.vz += retreat_z * speed * 1.0
            return

        if fighter.stamina_ratio < 0.25:
            fighter.vy -= 0.4
            fighter.vx += retreat_x * speed * 1.2
            fighter.vz += retreat_z * speed * 1.0
            return

        fighter.vy += 0.7
        if instinct > 0.4:
            evade_phase = fighter.move_timer / 6
            retreat_x += math.sin(evade_phase) * instinct * 0.5
            retreat_z += math.cos(evade_phase) * instinct * 0.5

        fighter.vx += retreat_x * speed * 1.8
        fighter.vz += retreat_z * speed * 1.5

        if fighter.y > arena.max_y - 80:
            fighter.vy -= 0.5

        if opponent.is_flying and eng.dist < 150 and fighter.rng.random() < 0.03:
            fighter.vy -= 1.5
            fighter.vz += random_side(fighter.rng) * speed * 3


class WallcrawlerMobility(GroundMobility):
    """Walks, climbs walls, and pounces off them at the opponent."""

    kind = "wallcrawler"
    is_wallcrawler = True
    can_emergency_retreat = True

    def spawn_position(self, side_sign: int, rng: pyrandom.Random) -> Tuple[float, float, float]:
        return side_sign * WALLCRAWLER_SPAWN_X, self.arena.min_y + SPAWN_HEIGHT, 0.0

    def update_stamina(self, fighter: "Fighter") -> None:
        if fighter.on_wall:
            fighter.stamina = max(0.0, fighter.stamina - CLIMB_STAMINA_COST)
            if fighter.stamina < fighter.max_stamina * EXHAUSTION_RATIO:
                fighter.on_wall = False
                fighter.wall_side = None
                fighter.wall_exhausted = True

        if fighter.wall_exhausted and fighter.stamina > fighter.max_stamina * RECOVERY_RATIO:
            fighter.wall_exhausted = False

    def regen_multiplier(self, fighter: "Fighter", base: float) -> float:
        if fighter.on_wall:
            return 0.0
        if fighter.grounded:
            return 1.8
        return base

    def can_attach_to_wall(self, fighter: "Fighter") -> bool:
        return not fighter.on_wall and fighter.grounded and not fighter.wall_exhausted

    def aggressive(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        if not fighter.on_wall:
            super().aggressive(fighter, opponent, eng)
            return

        speed = aggressive_speed(fighter)
        fighter.vy = sign(eng.dy) * speed * 2

        if (
            eng.horiz_dist < 150
            and abs(eng.dy) < 60
            and fighter.rng.random() < 0.02 + fighter.drives.aggression * 0.03
        ):
            side = fighter.wall_side
            fighter.jump(1.0)
            if side in ("left", "right"):
                fighter.vx = (1 if side == "left" else -1) * 6
                fighter.vz = sign(eng.dz) * 4
            else:
                fighter.vz = (1 if side == "back" else -1) * 6
                fighter.vx = sign(eng.dx) * 4

    def circling(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        if not fighter.on_wall:
            super().circling(fighter, opponent, eng)
            return
        speed = circling_speed(fighter)
        target_y = opponent.y + math.sin(fighter.circle_angle * 2) * 50
        fighter.vy = clamp((target_y - fighter.y) * 0.1, -speed * 3, speed * 3)

    def retreating(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        speed = retreat_speed(fighter)
        if fighter.on_wall:
            fighter.vy = speed * 4
            return
        # Run for the nearest side wall to climb out of reach
        toward_wall = -1 if fighter.x < self.arena.center_x else 1
        fighter.vx += toward_wall * speed * 3
        fighter.vz += _away(eng.dz, fighter.rng) * speed * 0.5

    def after_steering(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        if fighter.on_wall:
            self._climb(fighter, opponent, eng)
        else:
            self._seek_wall(fighter, opponent, eng)

    def _climb(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        arena = self.arena
        half_size = fighter.sprite_size / 2
        stamina_ratio = fighter.stamina_ratio
        side = fighter.wall_side

        if side == "left":
            fighter.x = arena.min_x + half_size
            fighter.vx = 0.0
        elif side == "right":
            fighter.x = arena.max_x - half_size
            fighter.vx = 0.0
        elif side == "front":
            fighter.z = arena.max_z - half_size
            fighter.vz = 0.0
        elif side == "back":
            fighter.z = arena.min_z + half_size
            fighter.vz = 0.0

        fighter.y = clamp(fighter.y, arena.min_y + half_size + 10, arena.max_y - half_size - 10)
        fighter.grounded = True

        target_y = opponent.y + 30
        if stamina_ratio < 0.2:
            fighter.vy = -4.0
        elif stamina_ratio < 0.35:
            fighter.vy = -2.0
        elif fighter.ai_state == AIState.AGGRESSIVE:
            if abs(fighter.y - target_y) > 20:
                climb_speed = 4 + fighter.genome.speed / 30
                fighter.vy = sign(target_y - fighter.y) * climb_speed
            else:
                fighter.vy = math.sin(fighter.move_timer / 10)
        elif fighter.ai_state == AIState.RETREATING:
            fighter.vy = 3.5
        elif fighter.ai_state == AIState.CIRCLING:
            fighter.vy = math.sin(fighter.move_timer / 15) * 2.5
        else:
            fighter.vy = math.sin(fighter.move_timer / 20) * 2

        # Pounce off the wall at an opponent in line of sight
        horiz = abs(opponent.x - fighter.x)
        vert = abs(opponent.y - fighter.y)
        if horiz < 250 and vert < 80 and stamina_ratio > 0.3:
            pounce_chance = 0.03 + fighter.drives.aggression * 0.1
            if fighter.y > opponent.y + 10:
                pounce_chance += 0.05
            if horiz < 150:
                pounce_chance += 0.03

            if fighter.rng.random() < pounce_chance:
                fighter.on_wall = False
                fighter.grounded = False
                jump_power = 12 + fighter.genome.speed / 8
                dy = opponent.y - fighter.y
                lateral = opponent.z - fighter.z if side in ("front", "back") else opponent.x - fighter.x
                angle = math.atan2(dy, abs(lateral))
                if side in ("left", "right"):
                    fighter.vx = (1 if side == "left" else -1) * jump_power * math.cos(angle)
                    fighter.vz = sign(opponent.z - fighter.z) * 4
                else:
                    fighter.vz = (1 if side == "back" else -1) * jump_power * math.cos(angle)
                    fighter.vx = sign(opponent.x - fighter.x) * 4
                fighter.vy = 6 + max(-4, dy / 40)
                fighter.spend_stamina(5)

        # Voluntary dismount: opponent out of reach, or rested and eager
        if eng.dist > 450 or (
            stamina_ratio > 0.85
            and fighter.ai_state != AIState.RETREATING
            and fighter.drives.aggression > 0.5
        ):
            fighter.on_wall = False
            fighter.grounded = False
            if side is not None:
                push_off_wall(fighter, side, 3)

    def _seek_wall(self, fighter: "Fighter", opponent: FighterView, eng: Engagement) -> None:
        arena = self.arena
        stamina_ratio = fighter.stamina_ratio
        near = (
            ("left", fighter.x < arena.min_x + WALL_NEAR_MARGIN),
            ("right", fighter.x > arena.max_x - WALL_NEAR_MARGIN),
            ("front", fighter.z > arena.max_z - WALL_NEAR_MARGIN),
            ("back", fighter.z < arena.min_z + WALL_NEAR_MARGIN),
        )
        near_sides = [side for side, is_near in near if is_near]
        can_climb = not fighter.wall_exhausted and stamina_ratio > 0.5

        if near_sides and fighter.grounded and can_climb:
            rng = fighter.rng
            want_to_climb = (
                opponent.is_flying
                or opponent.y > fighter.y + 40
                or (fighter.drives.caution > 0.6 and rng.random() < 0.15)
                or (eng.dist < 120 and rng.random() < 0.12)
                or (fighter.ai_state == AIState.RETREATING and stamina_ratio > 0.7)
            )
            if want_to_climb:
                fighter.on_wall = True
                fighter.wall_side = near_sides[0]
                fighter.vy = 3.0

        should_seek_wall = can_climb and (
            (opponent.is_flying and not fighter.on_wall)
            or (eng.dist > 200 and opponent.y > fighter.y + 50)
        )
        if should_seek_wall:
            wall_force = 1.2 + fighter.genome.speed / 80
            fighter.vx += -wall_force if fighter.x < arena.center_x else wall_force


MOBILITY_TYPES: Dict[str, Type[GroundMobility]] = {
    "ground": GroundMobility,
    "winged": FlyingMobility,
    "wallcrawler": WallcrawlerMobility,
}


def mobility_for(kind: str, arena: ArenaConfig) -> GroundMobility:
    """Build the strategy for a genome mobility value."""
    try:
        return MOBILITY_TYPES[kind](arena)
    except KeyError:
        raise FighterError(f"Unknown mobility type: {kind!r}") from None
