# streeteats/backend/app/config.py
import os

from dotenv import load_dotenv

# Load settings from .env at project root
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./streeteats.db")

# Fixed service-time assumption used for every wait estimate
MINUTES_PER_ORDER = int(os.getenv("MINUTES_PER_ORDER", "5"))

# How often a join re-allocates after losing a queue-number race
JOIN_MAX_ATTEMPTS = int(os.getenv("JOIN_MAX_ATTEMPTS", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SEED_DEMO_VENDORS = os.getenv("SEED_DEMO_VENDORS", "").lower() in {"1", "true", "yes"}
