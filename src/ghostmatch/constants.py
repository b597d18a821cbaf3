BOARD_ROWS = 6
BOARD_COLS = 6

# Six ghost identities; renderers map these to sprites or emoji.
DEFAULT_TOKENS = ('ghost', 'ogre', 'goblin', 'clown', 'pumpkin', 'imp')

MATCH_MIN = 3
LARGE_MATCH_MIN = 4

INITIAL_MOVES = 25
TARGET_SCORE = 100

# Scoring: points per cleared cell, multiplied for a large match.
POINTS_PER_CELL = 10
LARGE_MATCH_MULTIPLIER = 2

# Retry ceilings for loops that only terminate almost surely.
MAX_GENERATE_ROUNDS = 500
MAX_PLAYABLE_ATTEMPTS = 200
MAX_RESHUFFLE_ATTEMPTS = 100
MAX_CASCADE_DEPTH = 100
