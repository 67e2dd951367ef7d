import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hub_attendance_test"),
}

HUB_TOKEN = "HUB-ATTENDANCE-2025"
TOKEN_STRATEGY = "static"

HUB_LAT = 6.5244
HUB_LNG = 3.3792
HUB_RADIUS_M = 100.0
HUB_TIMEZONE = "Africa/Lagos"

MAX_CONFLICT_RETRIES = 3
SUBSCRIBER_QUEUE_SIZE = 16
STREAM_KEEPALIVE_SECONDS = 0.2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
LOG_FORMAT = "standard"

AUTO_INIT_DB = False
