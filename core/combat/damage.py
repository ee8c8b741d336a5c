"""Damage and knockback formulas for a landed hit.

The modifiers apply in a fixed order, each flooring the running total:
momentum, dive or height advantage, flanking/backstab, shell reduction, crit.
Commentary is left to the caller; the breakdown only records which
modifiers fired so they can be announced in order.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.config.combat import (
    BACKSTAB_MULTIPLIER,
    CRIT_MULTIPLIER,
    DIVE_HEIGHT_DIVISOR,
    DIVE_MAX_MULTIPLIER,
    FLANK_MULTIPLIER,
    HEIGHT_ADVANTAGE_MULTIPLIER,
    HEIGHT_ADVANTAGE_THRESHOLD,
    MOMENTUM_DAMAGE_BONUS,
    MOMENTUM_SPEED_SCALE,
    SHELL_BULK_DIVISOR,
    WEAPON_KNOCKBACK,
)
from core.math_utils import roll_dice, sign

if TYPE_CHECKING:
    from core.fighter.fighter import Fighter

CHARGING_MOMENTUM = 0.6
OFF_BALANCE_MOMENTUM = 0.5
SHELL_KNOCKBACK_RESIST = 0.7


def momentum(fighter: "Fighter") -> float:
    """Speed magnitude normalized to [0, 1]."""
    return min(fighter.speed() / MOMENTUM_SPEED_SCALE, 1.0)


@dataclass
class DamageBreakdown:
    """Result of the damage pipeline for one landed hit."""

    damage: int
    is_crit: bool = False
    charging: bool = False
    dive: bool = False
    height_advantage: bool = False
    flanked: bool = False
    backstab: bool = False
    shell_reduced: bool = False


def compute_damage(
    attacker: "Fighter",
    target: "Fighter",
    dx: float,
    dz: float,
    attacker_momentum: float,
    rng: random.Random,
) -> DamageBreakdown:
    """Roll and modify the damage of a hit that connected.

    Draws exactly two dice from ``rng``: the d6 base roll, then the d100
    crit roll.
    """
    a = attacker.genome
    t = target.genome

    damage = math.floor((a.bulk + a.fury) / 10) + roll_dice(rng, 6)
    damage = math.floor(damage * (1 + attacker_momentum * MOMENTUM_DAMAGE_BONUS))
    result = DamageBreakdown(damage=damage, charging=attacker_momentum > CHARGING_MOMENTUM)

    result.dive = attacker.is_flying and attacker.is_diving and attacker.y > target.y
    if result.dive:
        height_bonus = min(DIVE_MAX_MULTIPLIER, 1 + abs(target.y - attacker.y) / DIVE_HEIGHT_DIVISOR)
        damage = math.floor(damage * height_bonus)
    elif attacker.y - target.y > HEIGHT_ADVANTAGE_THRESHOLD:
        result.height_advantage = True
        damage = math.floor(damage * HEIGHT_ADVANTAGE_MULTIPLIER)

    # Flanking: hit from the side the target is not facing, or mostly along Z
    target_facing = 1 if target.facing_right else -1
    attack_from = sign(attacker.x - target.x)
    x_flank = attack_from != 0 and attack_from != target_facing
    z_flank = abs(dz) > abs(dx) * 1.5
    if x_flank or z_flank:
        result.flanked = True
        damage = math.floor(damage * FLANK_MULTIPLIER)
        if x_flank and z_flank:
            result.backstab = True
            damage = math.floor(damage * BACKSTAB_MULTIPLIER)

    if t.defense == "shell":
        result.shell_reduced = True
        damage = max(1, damage - math.floor(t.bulk / SHELL_BULK_DIVISOR))

    result.is_crit = roll_dice(rng, 100) <= a.fury / 2
    if result.is_crit:
        damage = math.floor(damage * CRIT_MULTIPLIER)

    result.damage = max(1, damage)
    return result


def knockback_force(attacker: "Fighter", target: "Fighter", damage: int, is_crit: bool) -> float:
    """Impulse magnitude applied to the target of a hit."""
    base = 8 if is_crit else 5
    mass_ratio = attacker.mass / target.mass
    weapon = WEAPON_KNOCKBACK.get(attacker.genome.weapon, 1.0)
    resist = SHELL_KNOCKBACK_RESIST if target.genome.defense == "shell" else 1.0
    vulnerability = 1 + momentum(target) * 0.5
    return base * math.sqrt(mass_ratio) * weapon * resist * vulnerability * (0.8 + (damage / 10) * 0.3)
