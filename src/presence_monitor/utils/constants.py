"""
Constants used throughout the presence monitor
"""

# Sampling
DEFAULT_SAMPLE_INTERVAL = 1.0  # Seconds between detector ticks
SCHEDULER_STOP_TIMEOUT = 2.0  # Seconds to wait for the worker thread on stop

# Classification
PERSON_LABEL = "person"  # Detection label counted as a person

# Alert log
MAX_ALERTS = 50  # Oldest alerts are evicted beyond this

# Overlay
LOW_CONFIDENCE_THRESHOLD = 0.5  # Scores below this get the warning colour
DEFAULT_FRAME_WIDTH = 640  # Fallback when the frame size is unknown
DEFAULT_FRAME_HEIGHT = 480

# Camera
DEFAULT_CAMERA_WIDTH = 1280
DEFAULT_CAMERA_HEIGHT = 720
MAX_CAMERA_RECONNECT_ATTEMPTS = 2
CAMERA_RECONNECT_DELAY = 2.0  # Seconds between reconnection attempts

# Runtime
STATUS_REPORT_INTERVAL = 10  # Seconds between CLI status lines

# Environment variables
ENV_CAMERA_URL = "CAMERA_URL"
ENV_MODEL_FILE = "MODEL_FILE"
