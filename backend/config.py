"""MEPCalc backend settings, read from the environment (.env supported)."""

import os

from dotenv import load_dotenv

load_dotenv()

FRONTEND_URL = os.getenv("FRONTEND_URL")
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
EXPORT_RATE_LIMIT_PER_MINUTE = int(os.getenv("EXPORT_RATE_LIMIT_PER_MINUTE", "20"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
