"""Attack and feint resolution between two fighters.

``CombatResolver.process_combat`` runs once per attacker per fighting tick
(left attacks right, then right attacks left).  It owns the gating
(alive, idle, not stunned, off cooldown, in range), the feint branch, the
physical dodge, the fallback hit roll, damage application, status effects
and the follow-up cooldown.  Poison ticks are resolved by ``process_poison``.

All randomness comes from the injected ``rng`` and only through
``rng.random()``, so tests can script every branch.
"""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Optional

from core.combat.damage import OFF_BALANCE_MOMENTUM, compute_damage, knockback_force, momentum
from core.config.combat import (
    BASE_COOLDOWN,
    COOLDOWN_JITTER,
    COOLDOWN_SPEED_DIVISOR,
    CRIT_STUN,
    FEINT_COOLDOWN_BASE,
    FEINT_COOLDOWN_JITTER,
    FEINT_FLINCH_STUN,
    FEINT_MIN_STAMINA,
    FEINT_STAMINA_COST,
    HIT_STUN,
    POISON_DAMAGE,
    POISON_STACKS,
    TOXIC_BULK_DIVISOR,
)
from core.config.simulation import TICK_RATE
from core.diagnostics.fight_logger import FightObserver, NullFightObserver
from core.events.game_events import (
    AMBER,
    CYAN,
    GREEN,
    GREY,
    MAGENTA,
    ORANGE,
    RED,
    YELLOW,
    EventLog,
    FeintEvent,
    HitEvent,
)
from core.fighter.fighter import attack_range
from core.fighter.view import AnimState
from core.math_utils import random_side, roll_dice

if TYPE_CHECKING:
    from core.fighter.fighter import Fighter

logger = logging.getLogger(__name__)


def base_cooldown(fighter: "Fighter") -> float:
    """Attack cooldown before penalties; faster bugs recover sooner."""
    return BASE_COOLDOWN - fighter.genome.speed / COOLDOWN_SPEED_DIVISOR


def feint_chance(fighter: "Fighter") -> float:
    instinct = fighter.instinct_factor
    fury = fighter.fury_factor
    return (instinct * 0.12 + fighter.drives.caution * 0.06) * (1 - fury * 0.5) + 0.04


def dodge_chance(target: "Fighter", attacker_momentum: float) -> float:
    """Chance the target physically sidesteps an incoming attack."""
    chance = target.instinct_factor * 0.6 - attacker_momentum * 0.3
    if target.is_flying:
        chance += 0.15
    if target.genome.defense == "camouflage":
        chance += 0.12
    return max(0.05, chance)


def _kill(fighter: "Fighter") -> None:
    fighter.hp = 0
    fighter.set_state(AnimState.DEATH)


class CombatResolver:
    """Resolves feints, attacks and poison for the current fight.

    Args:
        rng: Random source shared with the simulation
        events: Per-tick event collector
        observer: Diagnostics observer notified of attacks and feints
    """

    def __init__(
        self,
        rng: random.Random,
        events: EventLog,
        observer: Optional[FightObserver] = None,
    ) -> None:
        self.rng = rng
        self.events = events
        self.observer: FightObserver = observer or NullFightObserver()

    # ------------------------------------------------------------------
    # Attack
    # ------------------------------------------------------------------

    def process_combat(self, attacker: "Fighter", target: "Fighter", side: str) -> None:
        """Let ``attacker`` feint or attack ``target`` if it is able to this tick."""
        if not attacker.is_alive or attacker.state != AnimState.IDLE:
            return
        if attacker.stun_timer > 0:
            return

        attacker.tick_attack_cooldown()

        dx = target.x - attacker.x
        dy = target.y - attacker.y
        dz = target.z - attacker.z
        dist = math.sqrt(dx * dx + dy * dy + dz * dz)

        if attacker.attack_cooldown > 0 or dist >= attack_range(attacker, target):
            return

        if attacker.feint_cooldown <= 0 and attacker.stamina > FEINT_MIN_STAMINA:
            if self.rng.random() < feint_chance(attacker):
                self.execute_feint(attacker, target, side, dx, dy, dz, dist)
                return

        if not attacker.spend_stamina(attacker.attack_stamina_cost()):
            return

        attacker.set_state(AnimState.ATTACK)
        attacker.on_attack_attempted()
        attacker.facing_right = dx > 0

        attacker_momentum = momentum(attacker)
        safe_dist = dist or 1
        dir_x = dx / safe_dist
        dir_y = dy / safe_dist
        dir_z = dz / safe_dist
        lunge_mult = 1 + attacker_momentum * 0.5
        attacker.visual.set_lunge(dir_x * 25 * lunge_mult, dir_y * 15 * lunge_mult)
        attacker.visual.set_squash(0.7, 1.3)

        if self._try_physical_dodge(attacker, target, side, dx, dir_x, dir_z, attacker_momentum):
            return

        hit_roll = roll_dice(self.rng, 100) + attacker.genome.speed
        dodge_roll = roll_dice(self.rng, 100) + target.genome.instinct * 0.5
        if target.is_flying:
            dodge_roll += 10
        if target.stun_timer > 0:
            dodge_roll -= 30

        if hit_roll > dodge_roll:
            self._land_hit(attacker, target, side, dx, dz, dist, dir_x, dir_y, attacker_momentum)
        else:
            if attacker_momentum > 0.3:
                overshoot = 2 + attacker_momentum * 4
                attacker.vx += dir_x * overshoot
                attacker.vz += dir_z * overshoot * 0.5
                attacker.stun_timer = max(attacker.stun_timer, math.floor(3 + attacker_momentum * 10))
            self.events.commentary(f"{attacker.name} misses!", GREY)
            self.observer.log_attack(side, attacker.name, target.name, hit=False, momentum=attacker_momentum)

        attacker.attack_cooldown = base_cooldown(attacker) + self.rng.random() * COOLDOWN_JITTER

    def _try_physical_dodge(
        self,
        attacker: "Fighter",
        target: "Fighter",
        side: str,
        dx: float,
        dir_x: float,
        dir_z: float,
        attacker_momentum: float,
    ) -> bool:
        if target.stun_timer > 0 or target.state == AnimState.HIT:
            return False

        rng = self.rng
        if rng.random() >= dodge_chance(target, attacker_momentum):
            return False

        target_instinct = target.instinct_factor
        strength = 4 + target_instinct * 4
        dodge_y = 0.0
        if target_instinct > 0.5:
            # Sidestep perpendicular to the attack line
            dodge_x = -dir_z * strength
            dodge_z = dir_x * strength
            if rng.random() < 0.5:
                dodge_x, dodge_z = -dodge_x, -dodge_z
            dodge_type = "smart-flank"
        else:
            dodge_x = -dir_x * strength * 0.7 + (rng.random() - 0.5) * 3
            dodge_z = -dir_z * strength * 0.7 + (rng.random() - 0.5) * 3
            dodge_type = "backward"

        if target.is_flying and not target.grounded:
            dodge_y = 2 + rng.random() * 3

        target.vx += dodge_x
        target.vy += dodge_y
        target.vz += dodge_z
        if target_instinct > 0.4:
            target.facing_right = dx > 0

        # Attacker overcommits into empty space
        overshoot = 3 + attacker_momentum * 6
        attacker.vx += dir_x * overshoot
        attacker.vz += dir_z * overshoot * 0.7
        attacker.stun_timer = max(attacker.stun_timer, 5 + math.floor(attacker_momentum * 20))
        attacker.stun_timer = math.floor(attacker.stun_timer * (1 - attacker.instinct_factor * 0.4))

        self.events.commentary(f"{target.name} dodges!", CYAN)
        self.observer.log_attack(
            side,
            attacker.name,
            target.name,
            hit=False,
            dodged=True,
            momentum=attacker_momentum,
            dodge_type=dodge_type,
        )

        miss_penalty = 8 + attacker_momentum * 12
        attacker.attack_cooldown = base_cooldown(attacker) + miss_penalty + rng.random() * 10
        return True

    def _land_hit(
        self,
        attacker: "Fighter",
        target: "Fighter",
        side: str,
        dx: float,
        dz: float,
        dist: float,
        dir_x: float,
        dir_y: float,
        attacker_momentum: float,
    ) -> None:
        events = self.events
        breakdown = compute_damage(attacker, target, dx, dz, attacker_momentum, self.rng)
        damage = breakdown.damage

        if breakdown.charging:
            events.commentary("CHARGING STRIKE!", AMBER)
        if breakdown.dive:
            events.commentary("DIVE ATTACK!", ORANGE)
        if breakdown.backstab:
            events.commentary("BACKSTAB!", MAGENTA)
        if breakdown.is_crit:
            events.commentary("CRITICAL HIT!", YELLOW)

        target.hp -= damage
        target.set_state(AnimState.HIT)
        target.stun_timer = CRIT_STUN if breakdown.is_crit else HIT_STUN
        target.visual.flash(4)
        target.visual.set_squash(1.2, 0.8)

        if momentum(target) > OFF_BALANCE_MOMENTUM:
            events.commentary("CAUGHT OFF-BALANCE!", ORANGE)
        force = knockback_force(attacker, target, damage, breakdown.is_crit)

        kb_dir_z = dz / dist if dist > 0 else 0.0
        target.vx += dir_x * force
        target.vy += dir_y * force * 0.3 + 2
        target.vz += kb_dir_z * force * 0.6
        target.is_knocked_back = True
        target.knockback_velocity = force

        attacker.on_hit_landed(damage)
        target.on_damage_taken(damage)

        events.add(
            HitEvent(
                x=target.x,
                y=target.y,
                damage=damage,
                tick=events.tick,
                is_crit=breakdown.is_crit,
                attacker=attacker.name,
                target=target.name,
            )
        )
        self.observer.log_attack(
            side,
            attacker.name,
            target.name,
            hit=True,
            damage=damage,
            crit=breakdown.is_crit,
            momentum=attacker_momentum,
        )

        if attacker.genome.weapon == "fangs" and roll_dice(self.rng, 3) == 3:
            target.poisoned = POISON_STACKS
            events.commentary(f"{target.name} is poisoned!", GREEN)

        if target.genome.defense == "toxic":
            toxic_damage = math.floor(target.genome.bulk / TOXIC_BULK_DIVISOR)
            if toxic_damage > 0:
                attacker.hp -= toxic_damage
                attacker.visual.flash(4)
                events.commentary(f"{attacker.name} takes {toxic_damage} toxic damage!", GREEN)
                if attacker.hp <= 0:
                    _kill(attacker)
                    events.commentary(f"{attacker.name} is defeated!", RED)

        if target.hp <= 0:
            _kill(target)
            events.commentary(f"{target.name} is defeated!", RED)

    # ------------------------------------------------------------------
    # Feint
    # ------------------------------------------------------------------

    def execute_feint(
        self,
        attacker: "Fighter",
        target: "Fighter",
        side: str,
        dx: float,
        dy: float,
        dz: float,
        dist: float,
    ) -> str:
        """Fake an attack. Returns the outcome: wasted, read, dodge-bait or flinch."""
        rng = self.rng
        events = self.events

        attacker.spend_stamina(FEINT_STAMINA_COST)
        attacker.feint_cooldown = FEINT_COOLDOWN_BASE + math.floor(rng.random() * FEINT_COOLDOWN_JITTER)
        attacker.on_attack_attempted()

        attacker.set_state(AnimState.FEINT)
        safe_dist = dist or 1
        dir_x = dx / safe_dist
        dir_y = dy / safe_dist
        attacker.visual.set_lunge(dir_x * 15, dir_y * 8)
        attacker.visual.set_squash(0.85, 1.15)

        cooldown = base_cooldown(attacker)

        if target.stun_timer > 0 or target.state in (AnimState.HIT, AnimState.DEATH):
            attacker.attack_cooldown = cooldown * 0.7
            self.observer.log_feint(side, attacker.name, target.name, "wasted")
            return "wasted"

        target_instinct = target.instinct_factor

        if rng.random() < 0.15 + target_instinct * 0.55:
            attacker.attack_cooldown = cooldown + rng.random() * COOLDOWN_JITTER
            attacker.feint_success = False
            result = "read"
            events.commentary(f"{target.name} reads the feint!", CYAN)
        elif rng.random() < 0.4 + target_instinct * 0.2:
            strength = 3 + target_instinct * 3
            dir_z = dz / safe_dist
            juke = random_side(rng)
            target.vx += -dir_z * strength * juke
            target.vz += dir_x * strength * juke
            attacker.attack_cooldown = math.floor(cooldown * 0.3)
            attacker.feint_success = True
            result = "dodge-bait"
            events.commentary(f"{target.name} baited into dodging!", YELLOW)
        else:
            target.stun_timer = max(target.stun_timer, FEINT_FLINCH_STUN)
            target.visual.set_squash(1.1, 0.9)
            attacker.attack_cooldown = math.floor(cooldown * 0.4)
            attacker.feint_success = True
            result = "flinch"
            events.commentary(f"{target.name} flinches!", AMBER)

        events.add(
            FeintEvent(
                x=attacker.x,
                y=attacker.y,
                attacker=attacker.name,
                target=target.name,
                result=result,
                tick=events.tick,
            )
        )
        self.observer.log_feint(side, attacker.name, target.name, result)
        return result

    # ------------------------------------------------------------------
    # Poison
    # ------------------------------------------------------------------

    def process_poison(self, fighter: "Fighter", tick: int) -> None:
        """Apply one poison tick every second while stacks remain."""
        if fighter.poisoned <= 0 or tick % TICK_RATE != 0:
            return
        fighter.hp -= POISON_DAMAGE
        fighter.visual.flash(2)
        fighter.poisoned -= 1
        self.events.add(
            HitEvent(x=fighter.x, y=fighter.y, damage=POISON_DAMAGE, tick=self.events.tick, is_poison=True)
        )
        if fighter.hp <= 0:
            _kill(fighter)
            self.events.commentary(f"{fighter.name} succumbs to poison!", GREEN)
            logger.debug("%s died of poison on tick %d", fighter.name, tick)
