"""
Constants used throughout the vehicle counter
"""

# Performance and monitoring
FPS_REPORT_INTERVAL = 100  # Report status every N frames
FPS_WINDOW_SIZE = 100  # Number of frames to average for FPS calculation
SUMMARY_EVENT_INTERVAL = 50  # Print summary every N events

# Detection defaults
DEFAULT_AREA_THRESHOLD = 1700  # Minimum contour area for a candidate vehicle
DEFAULT_VEHICLE_SIZE_THRESHOLD = 20000  # Area separating small from medium
DEFAULT_LINE_DISTANCE_M = 6.0  # Metres between counting and speed lines
MEDIUM_VEHICLE_FACTOR = 1.9  # area <= factor * size threshold -> medium

# Transit estimation
MIN_CROSSING_SPEED_MS = 3.0  # Slowest plausible speed (m/s) between lines
KMH_PER_MS = 3.6

# Background subtraction defaults
DEFAULT_BG_HISTORY = 1500
DEFAULT_BG_VAR_THRESHOLD = 20.0
DEFAULT_BG_LEARNING_RATE = 0.001
DEFAULT_FRAME_SIZE = (640, 360)

# Queue configuration
DEFAULT_QUEUE_SIZE = 1000  # Default max queue size if not in config

# Video source reconnection
MAX_SOURCE_OPEN_ATTEMPTS = 2
SOURCE_REOPEN_DELAY = 2.0  # Seconds between open attempts

# Environment variables
ENV_VIDEO_SOURCE = "VIDEO_SOURCE"
