import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eventhub.db")

# Event locks and the Celery broker
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Name reported to the stats service with every hit
APP_NAME = os.getenv("APP_NAME", "eventhub")
STATS_SERVER_URL = os.getenv("STATS_SERVER_URL", "http://localhost:9090")
STATS_TIMEOUT = float(os.getenv("STATS_TIMEOUT", "3"))

# Per-event lock: how long a holder may keep it, how long a caller waits for it
EVENT_LOCK_TIMEOUT = int(os.getenv("EVENT_LOCK_TIMEOUT", "10"))
EVENT_LOCK_WAIT = int(os.getenv("EVENT_LOCK_WAIT", "5"))

MIN_HOURS_BEFORE_EVENT = int(os.getenv("MIN_HOURS_BEFORE_EVENT", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
