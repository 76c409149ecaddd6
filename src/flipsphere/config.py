# --- Display ---
WIDTH = 800
HEIGHT = 600
FPS = 60

# --- World / Physics (per tick, one tick per frame) ---
GRAVITY = 0.5               # px/tick^2, sign comes from the session's gravity sign
FALL_MARGIN = 50            # actor is lost once y leaves [-50, HEIGHT+50]

# --- Player ---
PLAYER_RADIUS = 20
PLAYER_SPEED = 5.0
JUMP_POWER = -12.0          # applied as JUMP_POWER * gravity sign
TRAIL_LENGTH = 10
HARD_LANDING_VY = 8.0       # pre-impact |vy| above this spawns a landing burst

# --- Collectibles / Portal ---
COIN_RADIUS = 10
COIN_SCORE = 10
COIN_HOVER_SPEED = 0.05
COIN_HOVER_AMPLITUDE = 3.0
PORTAL_RADIUS = 25
PORTAL_SPIN_SPEED = 0.05
PORTAL_LIFT = 40            # portal sits this far above its anchor platform
PORTAL_FALLBACK_Y = 100     # used when no platform sits in the upper half; x is centered

# --- Particles ---
PARTICLE_SPEED = 3.0
PARTICLE_LIFE_MIN = 20
PARTICLE_LIFE_MAX = 40
PARTICLE_SIZE_MIN = 2
PARTICLE_SIZE_MAX = 5
PARTICLE_CAP = 2000
LANDING_PARTICLES = 5
COIN_PARTICLES = 15
FLIP_PARTICLES = 20
PORTAL_PARTICLES = 30

# --- Level generation ---
BASE_PLATFORM_H = 50
BASE_SHRINK_PER_LEVEL = 100
BASE_MIN_W = 160            # base platform never narrower than this
PLATFORM_MIN_W = 80
PLATFORM_W_SPAN = 200       # extra width range, shrinks by 10 per level
PLATFORM_W_SHRINK = 10
PLATFORM_MIN_H = 15
PLATFORM_MAX_H = 25
PLATFORM_TOP_MARGIN = 100
PLATFORM_BOTTOM_MARGIN = 150
MOVE_RANGE_MIN = 100
MOVE_RANGE_MAX = 200

# (platform_count, moving_chance, max_speed) for levels 0..3; level >= 4 uses
# (8 + level, LATE_MOVING_CHANCE, LATE_MAX_SPEED)
LEVEL_BRACKETS = (
    (8, 0.3, 2),
    (10, 0.5, 3),
    (12, 0.7, 4),
    (10, 0.8, 5),
)
LATE_BASE_COUNT = 8
LATE_MOVING_CHANCE = 0.9
LATE_MAX_SPEED = 5

COINS_BASE = 5
COINS_PER_LEVEL = 2
COIN_ATTEMPTS = 20
COIN_RELAX_AFTER = 15       # after this many failed attempts, any free spot is accepted
COIN_LIFT = 30              # preferred height above a platform top
COIN_BAND = 50
COIN_SIDE_SLACK = 20
COIN_MARGIN_X = 50
COIN_MARGIN_TOP = 50
COIN_MARGIN_BOTTOM = 100

# --- Session flow ---
FADE_STEP = 10
FADE_MAX = 255
LEVEL_INTRO_TICKS = 180
LEVEL_SELECT_SLOTS = 5

# --- Persistence ---
SAVE_PATH_DEFAULT = "flipsphere_save.json"
SEED_DEFAULT = None         # None -> fresh random layout each launch

# --- Colors (RGB) ---
COLOR_BG = (0, 0, 0)
COLOR_FG = (255, 255, 255)
COLOR_RED = (255, 50, 50)
COLOR_GREEN = (50, 255, 50)
COLOR_BLUE = (50, 50, 255)
COLOR_YELLOW = (255, 255, 0)
COLOR_PURPLE = (150, 50, 200)
COLOR_CYAN = (0, 255, 255)
COLOR_ORANGE = (255, 165, 0)
COLOR_PINK = (255, 192, 203)
COLOR_GOLD = (255, 215, 0)

# --- Shop: skin id -> (price, color) ---
SHOP_CATALOG = {
    "white": (0, COLOR_FG),
    "red": (100, COLOR_RED),
    "blue": (150, COLOR_BLUE),
    "orange": (200, COLOR_ORANGE),
    "pink": (300, COLOR_PINK),
    "purple": (400, COLOR_PURPLE),
    "gold": (500, COLOR_GOLD),
}
DEFAULT_SKIN = "white"
