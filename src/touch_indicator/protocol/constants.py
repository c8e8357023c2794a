# Gesture phases (closed set; canonical list lives here)

PHASE_START = "start"
PHASE_MOVE = "move"
PHASE_TAP = "tap"

PHASES = (PHASE_START, PHASE_MOVE, PHASE_TAP)

# Relay endpoint path
RELAY_PATH = "/ws"

# Client defaults
DEFAULT_RECONNECT_ATTEMPTS = 5
DEFAULT_RECONNECT_INTERVAL_MS = 1000

# Tracker defaults
DEFAULT_SENSITIVITY = 1.8
DEFAULT_SIZE = 20.0
DEFAULT_RIPPLE_DURATION_MS = 300.0
DEFAULT_TAP_DELAY_MS = 150.0
DEFAULT_TAP_MOVE_THRESHOLD_PX = 5.0
