from __future__ import annotations
import os
from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

def _get_float(name: str, default: float) -> float:
	try:
		return float(os.getenv(name, default))
	except Exception:
		return default

def _get_int(name: str, default: int) -> int:
	try:
		return int(float(os.getenv(name, default)))
	except Exception:
		return default

BACKEND_API_BASE = os.getenv("BACKEND_API_BASE", "https://inventory-backend-ivory.vercel.app/api").rstrip("/")
REQUEST_TIMEOUT_SECONDS = _get_float("REQUEST_TIMEOUT_SECONDS", 15.0)

SIZE_PREFIX_MAX_LENGTH = _get_int("SIZE_PREFIX_MAX_LENGTH", 5)

# Quantity bands used when a stock line has no thresholds of its own
DEFAULT_STATUS_LOW_BELOW = _get_int("DEFAULT_STATUS_LOW_BELOW", 200)
DEFAULT_STATUS_MEDIUM_BELOW = _get_int("DEFAULT_STATUS_MEDIUM_BELOW", 500)

# Timezone whose calendar days the register stats are computed in
LEDGER_TIMEZONE = os.getenv("LEDGER_TIMEZONE", "UTC")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
