"""
config.py
---------
Loads environment variables from the .env file and exposes them as typed
constants for the rest of the application.
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()  # searches current dir and parents


# --- MongoDB ---
MONGODB_URI: str = os.getenv("MONGODB_URI", "")
DB_NAME: str = os.getenv("DB_NAME", "finance_db")
EXPENSES_COLLECTION: str = os.getenv("EXPENSES_COLLECTION", "expenses")
INCOME_COLLECTION: str = os.getenv("INCOME_COLLECTION", "invoices")

# --- HTTP ---
_raw_origins = os.getenv("ALLOWED_ORIGINS", "*")
ALLOWED_ORIGINS: List[str] = [origin.strip() for origin in _raw_origins.split(",") if origin.strip()]
MAX_FORM_SIZE: int = int(os.getenv("MAX_FORM_SIZE", str(64 * 1024)))

# --- Rate limiting ---
DEFAULT_RATE_LIMIT: str = os.getenv("DEFAULT_RATE_LIMIT", "60/minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
