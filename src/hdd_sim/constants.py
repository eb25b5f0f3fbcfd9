"""
constants.py: Centralized configuration for the drilling field, the drill and scoring.
"""

# -------- Field Config --------
SCREEN_WIDTH = 600
SCREEN_HEIGHT = 400
GROUND_LEVEL = 100              # y of the surface, everything below is subsurface

# -------- Goal Config --------
GOAL_X = 540                    # left edge of the goal box
GOAL_W = 20                     # goal box side
GOAL_CENTER = (GOAL_X + GOAL_W / 2, GROUND_LEVEL)

# -------- Drill Config --------
TURN_ANGLE = 0.01               # Steering rotation per tick (radians)
STARTING_ANGLE = 0.2967         # 17 degrees below horizontal
STARTING_X = 90
STARTING_DEPTH = 2
MACHINE_WIDTH = 80
MACHINE_HEIGHT = MACHINE_WIDTH * 9 / 16
PIPE_LENGTH_MULT = 0.87688219663  # relative to drilling machine width
PIPE_LENGTH = int(PIPE_LENGTH_MULT * MACHINE_WIDTH) - 2  # -2 for the rounding of the pipe
PIPE_OFFSET = 22
MAX_STUCK_TIMES = 3
CONNECTION_TICKS = 5            # Ticks spent handling a new pipe
SIDE_TRACK_DISTANCE = 1.5
FOG_CLEAR_RADIUS = GOAL_W       # goal half-width * 2
DEFAULT_RANDOMNESS = 50.0       # percent
RANDOMNESS_STEP = 5.0

# -------- Terrain Generation --------
BOULDER_COUNT = 10
BOULDER_MIN_RADIUS = 8
BOULDER_MAX_RADIUS = 36
BOULDER_MARGIN = 50             # keep boulders this far from the surface and the floor
RIVER_CENTER_X = SCREEN_WIDTH / 2 + STARTING_X / 2
RIVER_HALF_WIDTH = SCREEN_WIDTH / 4
RIVER_DEPTH = SCREEN_WIDTH / 8

# -------- Reflection Config --------
REFLECTION_SPACING = GOAL_W     # distance between emitter and receiver
REFLECTION_STEP = 1
REFLECTION_ANGLE_STEP_DEG = 10
REFLECTION_NOISE_PERCENT = 10

# -------- Scoring Config --------
WIN_REWARD = 5000
PARTIAL_REWARD = 1000

# -------- Seeds --------
MIN_SEED = 1
MAX_SEED = 999998

# -------- Palette (RGB) --------
GROUND_COLOR = (11, 106, 136)
BOULDER_COLOR = (220, 150, 130)
RIVER_COLOR = (0, 0, 255)
BACKGROUND_COLOR = (45, 197, 244)
BOUNDARY_COLOR = (0, 0, 0)
GOAL_COLOR = (252, 238, 33)
SURFACE_PIPE_COLOR = (103, 88, 76)

# -------- Client Config --------
RENDER_FPS = 60
