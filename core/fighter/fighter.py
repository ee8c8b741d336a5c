"""Fighter: one bug's full mutable combat, physics and AI state for a match.

A Fighter wraps an immutable Genome and owns position, velocity, vitals,
drives and the AI state machine.  Per tick the simulation calls, in order:

    update_state -> update_physics -> update_drives -> update_ai(opponent)

Mobility-specific behavior is delegated to a strategy picked once at
construction (see ``core.fighter.mobility``).
"""

from __future__ import annotations

import logging
import math
import random as pyrandom
from typing import Any, Dict, Optional

from core.config.arena import ARENA, CORNERED_THRESHOLD, ArenaConfig
from core.config.combat import ATTACK_STAMINA_COST, DEFAULT_ATTACK_STAMINA_COST
from core.config.fighter import (
    ATTACK_RANGE_MARGIN,
    BASE_HP,
    BASE_STAMINA,
    CIRCLE_MIN_DWELL,
    HP_PER_BULK,
    JUMP_BASE,
    JUMP_SPEED_DIVISOR,
    LEG_JUMP_MULTIPLIERS,
    MASS_BASE,
    MASS_BULK_SCALE,
    MIN_STATE_TICKS,
    SPRITE_BASE_SIZE,
    SPRITE_MAX_SIZE,
    SPRITE_MIN_SIZE,
    STALEMATE_FORCE_TICKS,
    STAMINA_REGEN_BASE,
    STAMINA_REGEN_SPEED_SCALE,
    STUCK_RESET_TICKS,
    STUCK_SPEED,
    STUCK_TICKS,
    UNSTUCK_FORCE,
)
from core.config.simulation import POWER_RATING_BONUSES
from core.exceptions import FighterError
from core.fighter import physics
from core.fighter.drives import Drives
from core.fighter.mobility import Engagement, mobility_for
from core.fighter.physics import WallImpact
from core.fighter.view import AIState, AnimState, FighterView
from core.fighter.visual_state import FighterVisualState
from core.genetics.genome import Genome
from core.math_utils import sign, wrap_angle

logger = logging.getLogger(__name__)

SIDES = ("left", "right")


def attack_range(a: FighterView, b: FighterView) -> float:
    """Half the combined sprite sizes plus a fixed reach margin."""
    return (a.sprite_size + b.sprite_size) / 2 + ATTACK_RANGE_MARGIN


def power_rating(genome: Genome) -> int:
    """Sum of the four stats plus flat bonuses for strong traits."""
    rating = genome.stat_total
    for (trait, value), bonus in POWER_RATING_BONUSES.items():
        if getattr(genome, trait) == value:
            rating += bonus
    return rating


class Fighter:
    """One bug in the arena for the duration of a single match.

    Attributes:
        genome: The bug's immutable genome
        name: Display name
        side: "left" or "right"; fixes spawn location and default facing
        rng: Random source for every AI decision this fighter makes
    """

    def __init__(
        self,
        genome: Genome,
        side: str,
        name: str,
        *,
        rng: Optional[pyrandom.Random] = None,
        arena: ArenaConfig = ARENA,
        stuck_detector_enabled: bool = True,
    ) -> None:
        if side not in SIDES:
            raise FighterError(f"side must be 'left' or 'right', got {side!r}")

        self.genome = genome
        self.name = name
        self.side = side
        self.rng = rng or pyrandom.Random()
        self.arena = arena
        self.stuck_detector_enabled = stuck_detector_enabled
        self.mobility = mobility_for(genome.mobility, arena)

        # Position
        self.x, self.y, self.z = self.mobility.spawn_position(self.side_sign, self.rng)
        self.facing_right = side == "left"
        self.facing_angle = math.pi / 2 if side == "left" else -math.pi / 2

        # Vitals
        self.max_hp = BASE_HP + math.floor(genome.bulk * HP_PER_BULK)
        self.hp = self.max_hp
        self.poisoned = 0
        self.max_stamina = BASE_STAMINA + genome.bulk
        self.stamina: float = float(self.max_stamina)
        self.stamina_regen = STAMINA_REGEN_BASE + (genome.speed / 100) * STAMINA_REGEN_SPEED_SCALE

        # Physics
        self.vx = 0.0
        self.vy = 0.0
        self.vz = 0.0
        self.mass = MASS_BASE + (genome.bulk / 100) * MASS_BULK_SCALE
        self.grounded = self.mobility.starts_grounded()
        self.gravity = self.mobility.initial_gravity()
        self.jump_power = self._calculate_jump_power()
        self.jump_cooldown = 0
        self.on_wall = False
        self.wall_side: Optional[str] = None
        self.wall_exhausted = False
        self.is_diving = False
        self.is_knocked_back = False
        self.knockback_velocity = 0.0
        self.last_wall_impact: Optional[WallImpact] = None

        size = round(SPRITE_BASE_SIZE * genome.size_multiplier)
        self.sprite_size = max(SPRITE_MIN_SIZE, min(SPRITE_MAX_SIZE, size))

        # Combat timers (ticks)
        self.attack_cooldown = 0.0
        self.feint_cooldown = 0
        self.feint_success = False
        self.stun_timer = 0
        self.wall_stun_timer = 0

        # AI
        self.ai_state = AIState.AGGRESSIVE
        self.ai_state_timer = 0
        self.move_timer = 0
        self.circle_angle = 0.0 if side == "left" else math.pi
        self.stuck_timer = 0
        self.no_engagement_timer = 0
        self.drives = Drives.from_stats(genome.fury, genome.instinct)

        self.visual = FighterVisualState()

    def __repr__(self) -> str:
        return f"Fighter({self.name!r}, {self.side}, hp={self.hp}/{self.max_hp}, ai={self.ai_state.value})"

    # =========================================================================
    # Derived properties
    # =========================================================================

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def state(self) -> AnimState:
        return self.visual.state

    @property
    def is_flying(self) -> bool:
        return self.mobility.is_flying

    @property
    def is_wallcrawler(self) -> bool:
        return self.mobility.is_wallcrawler

    @property
    def is_ground(self) -> bool:
        return not (self.mobility.is_flying or self.mobility.is_wallcrawler)

    @property
    def side_sign(self) -> int:
        return -1 if self.side == "left" else 1

    @property
    def instinct_factor(self) -> float:
        return self.genome.instinct / 100

    @property
    def fury_factor(self) -> float:
        return self.genome.fury / 100

    @property
    def stamina_ratio(self) -> float:
        return self.stamina / self.max_stamina

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp

    def speed(self) -> float:
        return math.sqrt(self.vx * self.vx + self.vy * self.vy + self.vz * self.vz)

    def _calculate_jump_power(self) -> float:
        base_jump = JUMP_BASE + self.genome.speed / JUMP_SPEED_DIVISOR
        return base_jump * LEG_JUMP_MULTIPLIERS.get(self.genome.leg_style, 1.0)

    def power_rating(self) -> int:
        return power_rating(self.genome)

    def set_state(self, new_state: AnimState) -> None:
        self.visual.set_state(new_state)

    # =========================================================================
    # Stamina and drive hooks
    # =========================================================================

    def attack_stamina_cost(self) -> int:
        return ATTACK_STAMINA_COST.get(self.genome.weapon, DEFAULT_ATTACK_STAMINA_COST)

    def has_stamina(self, amount: float) -> bool:
        return self.stamina >= amount

    def spend_stamina(self, amount: float) -> bool:
        if self.stamina >= amount:
            self.stamina -= amount
            return True
        return False

    def on_hit_landed(self, damage: int) -> None:
        self.drives.on_hit_landed()
        self.no_engagement_timer = 0

    def on_damage_taken(self, damage: int) -> None:
        self.drives.on_damage_taken(self.fury_factor)
        self.no_engagement_timer = 0

    def on_attack_attempted(self) -> None:
        self.no_engagement_timer = 0

    def tick_attack_cooldown(self) -> None:
        self.attack_cooldown = max(0.0, self.attack_cooldown - 1)

    # =========================================================================
    # Arena geometry helpers
    # =========================================================================

    def wall_proximity(self) -> float:
        """0 at the arena centre line, 1 against a side wall."""
        return abs(self.x - self.arena.center_x) / self.arena.half_width

    def nearest_wall_side(self) -> str:
        return "left" if self.x < self.arena.center_x else "right"

    def distance_to_wall(self, side: str) -> float:
        if side == "left":
            return self.x - self.arena.min_x
        return self.arena.max_x - self.x

    def is_cornered(self, threshold: float = CORNERED_THRESHOLD) -> bool:
        return min(self.distance_to_wall("left"), self.distance_to_wall("right")) < threshold

    def escape_direction(self) -> int:
        """+1 or -1: the X direction toward the arena centre."""
        return 1 if self.x < self.arena.center_x else -1

    def can_attach_to_wall(self) -> bool:
        return self.mobility.can_attach_to_wall(self)

    # =========================================================================
    # Per-tick updates
    # =========================================================================

    def update_state(self) -> None:
        """Advance animation timers (runs alive or dead)."""
        self.visual.update(is_alive=self.is_alive, facing_right=self.facing_right)

    def update_physics(self) -> None:
        physics.update_physics(self, self.arena)

    def jump(self, power: float = 1.0) -> bool:
        return physics.jump(self, power)

    def apply_wall_stun(self, impact_velocity: float, wall_side: str) -> WallImpact:
        return physics.apply_wall_stun(self, impact_velocity, wall_side)

    def take_wall_impact(self) -> Optional[WallImpact]:
        """Return and clear the pending wall impact record, if any."""
        impact, self.last_wall_impact = self.last_wall_impact, None
        return impact

    def update_drives(self) -> None:
        """Drift drives, apply exhaustion and stalemate pressure, manage stamina."""
        self.drives.drift(self.fury_factor)
        self.drives.apply_exhaustion(self.stamina_ratio)
        self.drives.clamp()

        self.no_engagement_timer += 1
        self.drives.apply_stalemate_pressure(self.no_engagement_timer)
        if self.no_engagement_timer > STALEMATE_FORCE_TICKS and self.ai_state not in (
            AIState.AGGRESSIVE,
            AIState.STUNNED,
        ):
            self._set_ai_state(AIState.AGGRESSIVE)

        self.mobility.update_stamina(self)

        base = 1.5 if self.ai_state in (AIState.CIRCLING, AIState.RETREATING) else 1.0
        multiplier = self.mobility.regen_multiplier(self, base)
        self.stamina = min(float(self.max_stamina), self.stamina + self.stamina_regen * multiplier)

    def update_ai(self, opponent: FighterView) -> None:
        """Turn toward the opponent, run the state machine and steer."""
        if not self.is_alive or self.state == AnimState.DEATH:
            return
        if self.state in (AnimState.ATTACK, AnimState.FEINT):
            return

        self.move_timer += 1
        self.ai_state_timer += 1

        dx = opponent.x - self.x
        dy = opponent.y - self.y
        dz = opponent.z - self.z
        eng = Engagement(
            dx=dx,
            dy=dy,
            dz=dz,
            dist=math.sqrt(dx * dx + dy * dy + dz * dz),
            attack_range=attack_range(self, opponent),
        )

        self._update_facing(opponent, eng)

        if self.stun_timer > 0:
            self.ai_state = AIState.STUNNED
            return

        if self.ai_state == AIState.STUNNED:
            self._set_ai_state(AIState.AGGRESSIVE)

        self._update_ai_transitions(opponent, eng)

        if self.ai_state == AIState.AGGRESSIVE:
            self.mobility.aggressive(self, opponent, eng)
        elif self.ai_state == AIState.CIRCLING:
            self.circle_angle += (0.05 if self.side == "left" else -0.05) * (self.genome.speed / 50)
            self.mobility.circling(self, opponent, eng)
            self._check_circling_breakout(eng)
        elif self.ai_state == AIState.RETREATING:
            self.mobility.retreating(self, opponent, eng)
            self._check_retreat_over(eng)

        self.mobility.after_steering(self, opponent, eng)

        if not self.on_wall:
            self.wall_side = None

        if self.stuck_detector_enabled:
            self._update_stuck_detector()

    def _set_ai_state(self, new_state: AIState) -> None:
        self.ai_state = new_state
        self.ai_state_timer = 0

    def _update_facing(self, opponent: FighterView, eng: Engagement) -> None:
        if self.state == AnimState.IDLE and not self.on_wall:
            self.facing_right = eng.dx > 0

        instinct = self.instinct_factor
        turn_speed = 0.1 + instinct * 0.15
        angle_diff = wrap_angle(math.atan2(eng.dx, eng.dz) - self.facing_angle)
        if self.state != AnimState.HIT and self.stun_timer <= 0:
            self.facing_angle += angle_diff * turn_speed

        self.facing_right = math.sin(self.facing_angle) > 0

        if instinct > 0.5 and self.state not in (AnimState.ATTACK, AnimState.HIT):
            should_face_right = eng.dx > 0
            if self.facing_right != should_face_right and self.rng.random() < instinct * 0.3:
                self.facing_right = should_face_right

        # Sharp bugs sidestep to stop being flanked
        if instinct > 0.6 and self.grounded and not self.on_wall:
            my_facing = 1 if self.facing_right else -1
            opponent_dir = sign(opponent.x - self.x)
            flanked = opponent_dir != 0 and opponent_dir != my_facing
            flanked_z = abs(eng.dz) > abs(eng.dx) * 1.5
            if flanked or flanked_z:
                adjust = instinct * 0.08
                if flanked_z:
                    self.vz -= sign(eng.dz) * adjust
                if flanked:
                    self.vx -= opponent_dir * adjust * 0.5

    def _update_ai_transitions(self, opponent: FighterView, eng: Engagement) -> None:
        hp_ratio = self.hp_ratio
        aggression = self.drives.aggression
        caution = self.drives.caution
        instinct = self.instinct_factor
        rng = self.rng
        # A forced stalemate break must survive the rest of the tick
        stalemate_forced = self.no_engagement_timer > STALEMATE_FORCE_TICKS

        if not stalemate_forced and self.is_cornered(CORNERED_THRESHOLD) and instinct > 0.4:
            escape_urgency = self.wall_proximity() * instinct
            pressured = eng.dist < eng.attack_range * 1.5
            desperate = hp_ratio < 0.5
            if (pressured or desperate) and rng.random() < escape_urgency * 0.15:
                self._set_ai_state(AIState.RETREATING)
                return

        can_transition = self.ai_state_timer > MIN_STATE_TICKS

        if (
            not stalemate_forced
            and hp_ratio < 0.4
            and caution > 0.5
            and self.mobility.can_emergency_retreat
            and rng.random() < caution * 0.08
        ):
            self._set_ai_state(AIState.RETREATING)
        elif (
            can_transition
            and self.ai_state != AIState.AGGRESSIVE
            and eng.dist < eng.attack_range * 1.5
            and rng.random() < aggression * 0.10
        ):
            self._set_ai_state(AIState.AGGRESSIVE)
        elif (
            can_transition
            and self.ai_state != AIState.CIRCLING
            and eng.dist < eng.attack_range * 2
            and self.ai_state_timer > CIRCLE_MIN_DWELL
            and rng.random() < caution * 0.05
        ):
            self._set_ai_state(AIState.CIRCLING)
            self.circle_angle = math.atan2(self.y - opponent.y, self.x - opponent.x)
        elif (
            can_transition
            and eng.dist > eng.attack_range * 2
            and self.ai_state_timer > math.floor(60 - aggression * 40)
        ):
            self._set_ai_state(AIState.AGGRESSIVE)

    def _check_circling_breakout(self, eng: Engagement) -> None:
        aggression = self.drives.aggression
        breakout_time = math.floor(45 - aggression * 35)
        very_close = eng.dist < eng.attack_range * 0.9 and aggression > 0.5
        if self.ai_state_timer > 15 and (self.ai_state_timer > breakout_time or very_close):
            self._set_ai_state(AIState.AGGRESSIVE)

    def _check_retreat_over(self, eng: Engagement) -> None:
        duration = math.floor(40 + self.drives.caution * 40 - self.drives.aggression * 25)
        if self.ai_state_timer > duration or eng.dist > 260:
            self._set_ai_state(AIState.CIRCLING)

    def _update_stuck_detector(self) -> None:
        planar_speed = math.sqrt(self.vx * self.vx + self.vz * self.vz)
        if planar_speed < STUCK_SPEED and self.grounded and not self.on_wall:
            self.stuck_timer += 1
            if self.stuck_timer > STUCK_TICKS:
                logger.debug("%s stuck for %d ticks, forcing a push", self.name, self.stuck_timer)
                self._set_ai_state(AIState.AGGRESSIVE)
                self.vx += math.sin(self.facing_angle) * UNSTUCK_FORCE
                self.vz += math.cos(self.facing_angle) * UNSTUCK_FORCE
                self.stuck_timer = STUCK_RESET_TICKS
        else:
            self.stuck_timer = max(0, self.stuck_timer - 2)

    # =========================================================================
    # Snapshot
    # =========================================================================

    def to_state(self) -> Dict[str, Any]:
        """Serialize the client-facing snapshot of this fighter."""
        visual = self.visual
        return {
            "x": round(self.x, 1),
            "y": round(self.y, 1),
            "z": round(self.z, 1),
            "vx": round(self.vx, 1),
            "vy": round(self.vy, 1),
            "vz": round(self.vz, 1),
            "hp": self.hp,
            "maxHp": self.max_hp,
            "stamina": round(self.stamina),
            "maxStamina": self.max_stamina,
            "state": visual.state.value,
            "animFrame": visual.anim_frame,
            "aiState": self.ai_state.value,
            "facingRight": self.facing_right,
            "facingAngle": round(self.facing_angle, 2),
            "onWall": self.on_wall,
            "wallSide": self.wall_side,
            "grounded": self.grounded,
            "squash": round(visual.squash, 2),
            "stretch": round(visual.stretch, 2),
            "lungeX": round(visual.lunge_x, 1),
            "lungeY": round(visual.lunge_y, 1),
            "flashTimer": visual.flash_timer,
            "poisoned": self.poisoned,
            "drives": self.drives.to_dict(),
            "spriteSize": self.sprite_size,
            "victoryBounce": round(visual.victory_bounce, 1),
            "deathRotation": round(visual.death_rotation, 2),
            "deathAlpha": round(visual.death_alpha, 2),
            "isKnockedBack": self.is_knocked_back,
            "wallStunTimer": self.wall_stun_timer,
            "isFlying": self.is_flying,
            "isWallcrawler": self.is_wallcrawler,
            "isDiving": self.is_diving,
            "stunTimer": self.stun_timer,
            "stuckTimer": self.stuck_timer,
        }
