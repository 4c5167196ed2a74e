# config.py
import os

# General
FPS = 60

# State stack behaviour
# Popping the last remaining state leaves the stack empty when True.
ALLOW_EMPTY_STACK = True
# Maximum number of transitions nested inside enter/exit hooks.
MAX_TRANSITION_DEPTH = 32

# Screen Dimensions
WINDOW_WIDTH = 960
WINDOW_HEIGHT = 600
WINDOW_TITLE = "statestack demo"

# Directory Paths
# Use absolute paths based on this file's location for robustness
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
# Optional key binding overrides live in statestack/core/data/input_bindings.json,
# e.g. {"pause": ["tab"], "confirm": ["K_RETURN", "f"]}. Not shipped; create it
# to override defaults, or pass an explicit path to load_action_map().
DATA_DIR = os.path.join(PROJECT_ROOT, "data")
INPUT_BINDINGS_FILE = "input_bindings.json"

# UI Elements Fonts (Using None uses default pygame font)
DEFAULT_FONT = None
TITLE_FONT_SIZE = 56
OPTION_FONT_SIZE = 32
HINT_FONT_SIZE = 20

# Colors
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY_LIGHT = (200, 200, 200)
GRAY_DARK = (60, 60, 60)
YELLOW = (255, 220, 90)

BG_COLOR = (24, 28, 40)
TEXT_COLOR = WHITE
HIGHLIGHT_COLOR = YELLOW
HINT_COLOR = GRAY_LIGHT
# Semi-transparent veil drawn under pause/confirm overlays
OVERLAY_COLOR = (0, 0, 0, 160)
