import json
import os
from dataclasses import dataclass, fields, replace

from .log import ROOT_DIR, log

# Window constants
WIDTH, HEIGHT = 800, 600
FPS = 60
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
SKY = (235, 242, 255)
FLOOR_COLOR = (214, 196, 170)

# --- Adjustable Parameters (Constants) ---
# Treat physics (per 60 Hz frame)
GRAVITY = 0.5
BOUNCE = 0.6                    # Restitution on floor and walls
FRICTION = 0.98                 # Horizontal velocity decay per frame
REST_EPSILON = 1.0              # Vertical speed below this after a bounce counts as resting
FLOOR_INSET = 30                # Floor sits this many pixels above the bottom edge
WALL_INSET = 20                 # Right wall sits this many pixels left of the right edge
SPAWN_JITTER = 10               # Treat appears up-left of the click so it doesn't cover the pointer
LAUNCH_SPEED_MIN = 5.0          # Upward toss speed range
LAUNCH_SPEED_MAX = 8.0
HORIZONTAL_SPEED_MAX = 1.0      # Horizontal toss speed drawn from [-max, max]
TREAT_LIFETIME = 10.0           # Seconds before an uneaten treat is cleared away
TREAT_EAT_DELAY = 0.5           # Seconds an eaten treat lingers for its disappear effect

# Kitten pursuit
PURSUIT_INTERVAL = 0.05         # Seconds between pursuit decisions
PURSUIT_RADIUS = 300.0          # Kitten ignores treats further away than this (px)
EAT_DISTANCE = 30.0             # Close enough to eat (px)
CHASE_STEP = 2.0                # Pixels moved per pursuit tick
SETTLED_SPEED = 0.5             # Airborne treats slower than this vertically are fair game
CHASE_EDGE_INSET = 20.0         # Chasing kitten stays this many pixels inside the window
EATING_DURATION = 3.5           # Seconds spent eating before going idle again
KITTEN_RADIUS = 40.0            # Pointer hit radius around the kitten centre (px)

# Idle wandering (percent of viewport)
WANDER_INTERVAL_MIN = 3.0
WANDER_INTERVAL_MAX = 5.0
WANDER_MARGIN_MIN = 10.0
WANDER_MARGIN_MAX = 90.0

# Click bounce (percent of viewport)
CLICK_BOUNCE = 5.0
CLICK_BOUNCE_TIME = 0.2
CLICK_BOUNCE_TOP = 5.0
CLICK_BOUNCE_BOTTOM = 85.0

# Speech bubble settings
DEFAULT_SPEECH = "Meow!"
CLICK_SPEECH = "Meow! Toss me a treat!"
EXCITED_SPEECH = "Ooh, a treat!"
SATISFIED_SPEECHES = (
    "Yum yum!",
    "Purrfect, thank you!",
    "Delicious!",
    "More please!",
)
CLICK_SPEECH_DURATION = 2.0
EXCITED_SPEECH_DURATION = 1.5
SATISFIED_SPEECH_DURATION = 3.0
BUBBLE_SMOOTH_ALPHA = 0.18      # Exponential smoothing of the drawn kitten position (0-1, smaller = softer)
BUBBLE_TAIL_LEN = 14
BUBBLE_TAIL_W = 12

# Frame step cap so a stalled window doesn't launch treats through the floor
MAX_FRAME_STEP = 3.0

ASSETS_DIR = os.path.join(ROOT_DIR, "assets")
CONFIG_FILE = os.path.join(ASSETS_DIR, "warp_kitten.json")


@dataclass
class SimulationConfig:
    """Tunable knobs for the treat physics and the kitten, defaults above."""
    gravity: float = GRAVITY
    bounce: float = BOUNCE
    friction: float = FRICTION
    rest_epsilon: float = REST_EPSILON
    floor_inset: float = FLOOR_INSET
    wall_inset: float = WALL_INSET
    spawn_jitter: float = SPAWN_JITTER
    launch_speed_min: float = LAUNCH_SPEED_MIN
    launch_speed_max: float = LAUNCH_SPEED_MAX
    horizontal_speed_max: float = HORIZONTAL_SPEED_MAX
    treat_lifetime: float = TREAT_LIFETIME
    treat_eat_delay: float = TREAT_EAT_DELAY
    pursuit_interval: float = PURSUIT_INTERVAL
    pursuit_radius: float = PURSUIT_RADIUS
    eat_distance: float = EAT_DISTANCE
    chase_step: float = CHASE_STEP
    settled_speed: float = SETTLED_SPEED
    chase_edge_inset: float = CHASE_EDGE_INSET
    eating_duration: float = EATING_DURATION
    kitten_radius: float = KITTEN_RADIUS
    wander_interval_min: float = WANDER_INTERVAL_MIN
    wander_interval_max: float = WANDER_INTERVAL_MAX
    wander_margin_min: float = WANDER_MARGIN_MIN
    wander_margin_max: float = WANDER_MARGIN_MAX
    click_speech_duration: float = CLICK_SPEECH_DURATION
    excited_speech_duration: float = EXCITED_SPEECH_DURATION
    satisfied_speech_duration: float = SATISFIED_SPEECH_DURATION


def load_config(path=None) -> SimulationConfig:
    """Load config overrides from a JSON object; fall back to defaults on any problem."""
    config = SimulationConfig()
    path = path or CONFIG_FILE
    try:
        if not os.path.exists(path):
            log(f"{path} not found, using default simulation settings")
            return config
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except Exception as e:
        log(f"Failed to load config {path}: {e}")
        return config
    if not isinstance(data, dict):
        log(f"Ignoring config {path}: expected a JSON object")
        return config

    known = {f.name for f in fields(SimulationConfig)}
    overrides = {}
    for key, value in data.items():
        if key not in known:
            log(f"Ignoring unknown config key: {key}")
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            log(f"Ignoring non-numeric config value: {key}={value!r}")
            continue
        overrides[key] = float(value)
    log(f"Loaded {len(overrides)} config overrides from {path}")
    return replace(config, **overrides)
