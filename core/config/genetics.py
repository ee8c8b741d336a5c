"""Genome configuration constants."""

# Stat bounds and soft cap on the sum of the four stats
STAT_MIN = 10
STAT_MAX = 100
STAT_CAP = 350
STAT_NAMES = ("bulk", "speed", "fury", "instinct")

# Random generation: approximately normal draws
STAT_MEAN = 55
STAT_STDDEV = 20

# Breeding: child stat = mean(parents) + uniform(-BREED_STAT_JITTER, +BREED_STAT_JITTER)
BREED_STAT_JITTER = 10
# Chance that a categorical trait is replaced with a uniformly random value
TRAIT_MUTATION_CHANCE = 0.05

# Accent hue offset from the base hue, in degrees
ACCENT_HUE_MIN_OFFSET = 30
ACCENT_HUE_SPREAD = 60

# Sprite size derived from bulk
SIZE_MULTIPLIER_BASE = 0.6
SIZE_MULTIPLIER_BULK_SCALE = 0.9
