BOARD_ROWS = 8
BOARD_COLS = 8

# Tokens in circulation between the bag and the board.
POOL_SIZE = 88

# Enumeration order matters: the pool gives remainder tokens to the first colors.
COLORS = (
    'ruby',
    'sapphire',
    'emerald',
    'topaz',
    'amethyst',
    'citrine',
    'aquamarine',
    'rose',
)


# ============================================================================
# SCORING
# ============================================================================
BASE_CELL_SCORE = 10
LEVEL_BASE_TARGET = 300
LEVEL_TARGET_STEP = 220
LEVEL_TARGET_EXPONENT = 1.25
LEVEL_BASE_MOVES = 26
LEVEL_MIN_MOVES = 8
LEVEL_MOVES_DECAY = 1.5


# ============================================================================
# SOLVABILITY
# ============================================================================
MAX_RESHUFFLE_ATTEMPTS = 5
HINT_IDLE_SECONDS = 30.0


# ============================================================================
# CHARMS & ECONOMY
# ============================================================================
MAX_CHARMS = 5
CHARM_PRICE = 10
CHARM_MULTIPLIER_MAGNITUDE = 1   # extra base-score copies per matched cell of the color
CHARM_FLAT_MAGNITUDE = 15        # flat points per matched cell of the color
DEFAULT_SHOP_OFFER_COUNT = 3
