# env vars + constants
import os

PORT = int(os.getenv("PORT", "8000"))
DATA_DIR = os.getenv("VOTEAPP_DATA_DIR", "./data")

# remote sync is disabled when no endpoint is configured
API_URL = os.getenv("VOTEAPP_API_URL", "").strip().rstrip("/")
API_TIMEOUT = float(os.getenv("VOTEAPP_API_TIMEOUT", "1.5"))

SEED_DEMO = os.getenv("VOTEAPP_SEED_DEMO", "1").strip().lower() not in ("0", "false", "no", "")
LOG_LEVEL = os.getenv("VOTEAPP_LOG_LEVEL", "INFO").upper()

POLLS_KEY = "voteapp_polls_v1"
VOTES_KEY = "voteapp_votes_v1"

DEFAULT_CATEGORY = "General"
ALL_CATEGORIES = "All"
