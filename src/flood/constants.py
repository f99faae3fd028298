import datetime

DEFAULT_GRID_SIZE = 9
DEFAULT_COLOR_COUNT = 5
DEFAULT_MOVE_BUDGET = 25
ORIGIN = (0, 0)

# Scoring
POINTS_PER_CELL = 20
COMBO_THRESHOLD = 4          # cells absorbed in one move to keep a combo alive
COMBO_MIN_MULTIPLIER = 2     # combo count only multiplies from this streak length upward
CASCADE_BASE = 1.5           # multiplier per wave beyond the first
END_BONUS_PER_MOVE = 50
PERFECT_BONUS = 500
TALLY_TICK_INTERVAL = 0.05   # seconds between end-bonus tally steps

# Star rating
THREE_STAR_SLACK = 1
TWO_STAR_SLACK = 3
COMBO_STAR_TIERS = ((5, 2), (3, 1))  # (max combo, moves forgiven)

# Countdown explosions scramble this many cells around the timer (Chebyshev radius).
COUNTDOWN_BLAST_RADIUS = 1

# Obstacle placement
PLACEMENT_MAX_RETRIES = 10
PLACEMENT_SEED_OFFSET = 0xDEAD

# Level table
LEVEL_COUNT = 100
LEVEL_SEED_STRIDE = 31
LEVEL_SEED_OFFSET = 7
BONUS_SEED_STRIDE = 17
BONUS_SEED_OFFSET = 3
SPLASH_TIER_LAST_LEVEL = 50
ONBOARDING_CONFIGS = (
    # (grid size, color count, move budget)
    (3, 3, 10),
    (4, 3, 12),
    (5, 4, 15),
    (7, 4, 20),
    (9, 5, 25),
)

# Daily challenge
DAILY_EPOCH = datetime.date(2026, 1, 1)
DAILY_GRID_SIZE = 9
DAILY_EXTRA_MOVES = 4
FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3

# Progress storage keys
PROGRESS_STORE_KEY = "flood.progress"
DAILY_STORE_KEY_PREFIX = "flood.daily."
