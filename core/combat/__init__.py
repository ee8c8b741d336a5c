"""Combat resolution: feints, attacks, damage and poison."""

from core.combat.damage import DamageBreakdown, compute_damage, knockback_force, momentum
from core.combat.resolver import CombatResolver, base_cooldown, dodge_chance, feint_chance

__all__ = [
    "CombatResolver",
    "DamageBreakdown",
    "base_cooldown",
    "compute_damage",
    "dodge_chance",
    "feint_chance",
    "knockback_force",
    "momentum",
]
