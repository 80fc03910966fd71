import os

from dotenv import load_dotenv

load_dotenv()

STATS_DATABASE_URL = os.getenv("STATS_DATABASE_URL", "sqlite:///./eventhub_stats.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
