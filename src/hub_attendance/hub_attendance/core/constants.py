"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HUB_LAT = 6.5244
DEFAULT_HUB_LNG = 3.3792
DEFAULT_HUB_RADIUS_M = 100.0
DEFAULT_HUB_TIMEZONE = "Africa/Lagos"

EARTH_RADIUS_M = 6_371_000.0

DEFAULT_CONFLICT_RETRIES = 3
DEFAULT_SUBSCRIBER_QUEUE_SIZE = 256
STREAM_KEEPALIVE_SECONDS = 15.0

EVENT_ATTENDANCE_UPDATED = "attendanceUpdated"
DAY_KEY_FORMAT = "%Y-%m-%d"
