"""Match orchestration timing and betting constants."""

TICK_RATE = 30  # ticks per second
TICK_MS = 1000 / TICK_RATE

COUNTDOWN_SECONDS = 10
VICTORY_SECONDS = 5

# Added symmetrically to both implied probabilities before conversion to odds
HOUSE_EDGE = 0.05

# Flat power rating bonuses per trait
POWER_RATING_BONUSES = {
    ("weapon", "horn"): 10,
    ("weapon", "stinger"): 8,
    ("defense", "shell"): 10,
    ("mobility", "winged"): 15,
    ("mobility", "wallcrawler"): 10,
}

# Winner value reported for a mutual-death draw
DRAW = 0
