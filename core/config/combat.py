"""Combat resolution tuning constants."""

# Cooldowns (ticks)
BASE_COOLDOWN = 48
COOLDOWN_SPEED_DIVISOR = 5
COOLDOWN_JITTER = 15
INITIAL_COOLDOWN_BASE = 25
INITIAL_COOLDOWN_JITTER = 20

# Attack stamina cost per weapon
ATTACK_STAMINA_COST = {
    "mandibles": 15,
    "stinger": 10,
    "fangs": 10,
    "pincers": 12,
    "horn": 8,
}
DEFAULT_ATTACK_STAMINA_COST = 10

# Knockback multiplier per weapon
WEAPON_KNOCKBACK = {
    "mandibles": 0.8,
    "stinger": 1.4,
    "fangs": 1.0,
    "pincers": 0.7,
    "horn": 1.5,
}

# Momentum: attacker speed / MOMENTUM_SPEED_SCALE, clamped to 1
MOMENTUM_SPEED_SCALE = 8

# Feints
FEINT_STAMINA_COST = 3
FEINT_MIN_STAMINA = 5
FEINT_COOLDOWN_BASE = 90
FEINT_COOLDOWN_JITTER = 60
FEINT_FLINCH_STUN = 8

# Damage modifiers
MOMENTUM_DAMAGE_BONUS = 0.35
DIVE_HEIGHT_DIVISOR = 200
DIVE_MAX_MULTIPLIER = 1.5
HEIGHT_ADVANTAGE_THRESHOLD = 40
HEIGHT_ADVANTAGE_MULTIPLIER = 1.15
FLANK_MULTIPLIER = 1.25
BACKSTAB_MULTIPLIER = 1.15
CRIT_MULTIPLIER = 1.5
SHELL_BULK_DIVISOR = 20
HIT_STUN = 15
CRIT_STUN = 25

# Status effects
POISON_STACKS = 4
POISON_DAMAGE = 2
TOXIC_BULK_DIVISOR = 25
