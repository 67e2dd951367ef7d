import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hub_attendance"),
}

HUB_TOKEN = os.getenv("HUB_TOKEN", "HUB-ATTENDANCE-2025")
TOKEN_STRATEGY = os.getenv("TOKEN_STRATEGY", "static")

HUB_LAT = float(os.getenv("HUB_LAT", "6.5244"))
HUB_LNG = float(os.getenv("HUB_LNG", "3.3792"))
HUB_RADIUS_M = float(os.getenv("HUB_RADIUS_M", "100"))
HUB_TIMEZONE = os.getenv("HUB_TIMEZONE", "Africa/Lagos")

MAX_CONFLICT_RETRIES = int(os.getenv("MAX_CONFLICT_RETRIES", "3"))
SUBSCRIBER_QUEUE_SIZE = int(os.getenv("SUBSCRIBER_QUEUE_SIZE", "256"))
STREAM_KEEPALIVE_SECONDS = float(os.getenv("STREAM_KEEPALIVE_SECONDS", "15"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
