"""Fighter physics, vitals and AI tuning constants.

Unless stated otherwise values are per tick at 30 ticks per second.
"""

# Vitals
BASE_HP = 150
HP_PER_BULK = 5
BASE_STAMINA = 50
STAMINA_REGEN_BASE = 0.3
STAMINA_REGEN_SPEED_SCALE = 0.5

# Mass and body
MASS_BASE = 0.5
MASS_BULK_SCALE = 1.5
SPRITE_BASE_SIZE = 32
SPRITE_MIN_SIZE = 20
SPRITE_MAX_SIZE = 48

# Gravity and friction
GROUND_GRAVITY = 0.6
FLIGHT_GRAVITY = 0.05
EXHAUSTED_FLYER_GRAVITY = 0.4
GROUND_FRICTION = 0.75
AIR_FRICTION = 0.88
BOUNCE_DAMPING = 0.3
DEAD_BOUNCE_DAMPING = 0.15
DEAD_REBOUND_MIN_SPEED = 2

# Jumping
JUMP_BASE = 8
JUMP_SPEED_DIVISOR = 20
JUMP_STAMINA_PER_POWER = 5
JUMP_COOLDOWN = 20
WALL_JUMP_HORIZONTAL = 6
LEG_JUMP_MULTIPLIERS = {
    "grasshopper": 1.5,
    "mantis": 1.2,
    "centipede": 0.7,
    "beetle": 0.85,
}

# Knockback and wall stun
KNOCKBACK_SETTLE_SPEED = 2
WALL_STUN_MIN_IMPACT = 4
WALL_STUN_PER_VELOCITY = 3
WALL_STUN_WALLCRAWLER_SCALE = 0.3
WALL_STUN_SHELL_SCALE = 0.7
WALL_STUN_FLYER_SCALE = 1.3

# Stamina drain while airborne / clinging
FLIGHT_STAMINA_COST = 0.25
CLIMB_STAMINA_COST = 0.25
EXHAUSTION_RATIO = 0.1
RECOVERY_RATIO = 0.5

# Drives
DRIVE_BASE = 0.3
DRIVE_FURY_SPAN = 0.4
DRIVE_ADAPT_BASE = 0.02
DRIVE_ADAPT_INSTINCT_SCALE = 0.03
DRIVE_DRIFT_RATE = 0.001
AGGRESSION_FLOOR = 0.15
CAUTION_CEILING = 0.85
LOW_STAMINA_RATIO = 0.3
STALEMATE_PRESSURE_TICKS = 240
STALEMATE_FORCE_TICKS = 450
STALEMATE_PRESSURE_RATE = 0.012

# AI state machine
MIN_STATE_TICKS = 12
CIRCLE_MIN_DWELL = 40
STUCK_SPEED = 0.5
STUCK_TICKS = 45
STUCK_RESET_TICKS = 30
UNSTUCK_FORCE = 0.8

# Attack range margin added to half the combined sprite sizes
ATTACK_RANGE_MARGIN = 35
