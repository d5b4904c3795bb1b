"""Game-wide constants for Galaxy Explorer."""

# --- Game Metadata ---
GAME_VERSION = "0.4.0"
SAVE_APP_NAME = "galaxy_explorer"
SAVE_FILE_NAME = "save.json"

# --- Galaxy dimensions (light years) ---
GALAXY_WIDTH = 100_000
GALAXY_HEIGHT = 4_000  # Disc thickness
GALAXY_DEPTH = 100_000
GALAXY_RADIUS = GALAXY_WIDTH / 2

# --- Generation defaults ---
DEFAULT_SEED = 12345
DEFAULT_NUM_SYSTEMS = 1000
DEFAULT_NUM_BLACK_HOLES = 50
DEFAULT_BINARY_FREQUENCY = 0.15
DEFAULT_TRINARY_FREQUENCY = 0.03
NUM_NEBULAE = 10

MAX_PRIMARY_PLANETS = 4
MAX_COMPANION_PLANETS = 2
MAX_CAPTURED_PLANETS = 2
MAX_MOONS = 2

# --- Central black hole ---
CENTRAL_BLACK_HOLE_ID = "central-blackhole"
CENTRAL_BLACK_HOLE_NAME = "Galactic Core"
CENTRAL_BLACK_HOLE_SIZE = 500

# --- Navigation ---
MIN_TECH_LEVEL = 1
MAX_TECH_LEVEL = 10
JUMP_RANGE_DIVISOR = 16  # Tech level 10 covers 1/16th of the galaxy width
LONG_RANGE_TECH_LEVEL = 8
BLACK_HOLE_BOOST_RADIUS = 5_000
MIN_STARTING_DESTINATIONS = 3

# --- Economy ---
REPAIR_COST = 1000
COMBAT_REPAIR_COST = 1500
NEW_GALAXY_SEED_RANGE = 1_000_000
CARGO_BASE_VALUE = 10

# --- Nebula tints ---
NEBULA_COLORS = [
    "#ff6b9d", "#6bc5ff", "#9d6bff", "#6bffb0", "#ffb36b", "#ff6b6b",
]
