"""Configuration constants for the Spatializer Panel."""

# =============================================================================
# Circle Geometry
# =============================================================================

# Radius (world units) that dragged objects are projected onto
DRAG_RADIUS = 3.0

# Number of tracked objects registered at session start
OBJECT_COUNT = 8

# Allowed snap bearings in degrees (clockwise, 0 = top of the circle)
# Matches a standard 8-speaker ring; override with --zones FILE
DEFAULT_ZONES = (0.0, 45.0, 90.0, 135.0, 180.0, 225.0, 270.0, 315.0)

# =============================================================================
# Selection
# =============================================================================

# Hit-test priority of an idle object and of the focus object
# The focus object is drawn (and picked) on top of the others
BASE_PRIORITY = 8
FOCUS_PRIORITY = 11

# =============================================================================
# Broadcast
# =============================================================================

# Wait after start-up before the first full position broadcast (seconds)
SETTLE_DELAY = 0.5

# Outbound OSC target (the audio system)
OSC_HOST = "127.0.0.1"
OSC_PORT = 9000

# OSC addresses
OSC_OBJECT_POSITION = "/objectPosition"
OSC_SOLO_ON = "/soloOn"
OSC_SOLO_OFF = "/soloOff"
OSC_SOLO_ALL = "/soloAll"
OSC_MASTER_FADER = "/MasterFader"
OSC_REVERB_FADER = "/ReverbFader"
OSC_CHANNEL_IN = "/channelIn/{n}"

# =============================================================================
# Mixer
# =============================================================================

# Number of input channels (meters + solo buttons)
CHANNEL_COUNT = 8

# Port the meter receiver listens on
METER_PORT = 9001

# Fader range in dB
FADER_MIN_DB = -70.0
FADER_MAX_DB = 0.0

# Slider positions (0-1) sent when the panel starts
MASTER_FADER_DEFAULT = 1.0
REVERB_FADER_DEFAULT = 0.5

# =============================================================================
# Layouts
# =============================================================================

# Directory holding saved layouts (one JSON file per layout)
LAYOUT_DIR = "~/.spatializer/layouts"

# Name the panel saves under when none is given on the command line
DEFAULT_LAYOUT_NAME = "default"

# =============================================================================
# Window
# =============================================================================

WINDOW_WIDTH = 1100
WINDOW_HEIGHT = 720
WINDOW_TITLE = "Spatializer Panel"
FPS = 60

# Pixels per world unit on screen
PIXELS_PER_UNIT = 90

# Pick radius around an object (world units)
OBJECT_PICK_RADIUS = 0.35

# Proxy label list (left column)
LABEL_WIDTH = 220
LABEL_HEIGHT = 36
LABEL_MARGIN = 16

# Colors (RGB)
COLOR_BACKGROUND = (18, 18, 26)
COLOR_CIRCLE = (70, 70, 90)
COLOR_ZONE = (45, 45, 60)
COLOR_OBJECT = (72, 28, 28)
COLOR_OBJECT_SELECTED = (255, 219, 0)
COLOR_TEXT = (230, 230, 235)
COLOR_TEXT_SELECTED = (10, 10, 10)
COLOR_METER = (90, 200, 120)
