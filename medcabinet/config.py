"""
Runtime configuration for medcabinet.
Reminder instants are computed in TZ; override through env or a local .env file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

# --------------------------------------------------------------------------------------
# Time handling
# --------------------------------------------------------------------------------------
TIMEZONE = os.getenv("MEDCABINET_TIMEZONE", "UTC")
TZ = ZoneInfo(TIMEZONE)

# Used whenever a reminder time cannot be parsed (soft mode)
DEFAULT_REMINDER_TIME = "9:00am"

# When on, unparseable reminder times are rejected instead of defaulting to 9:00am
STRICT_TIME_PARSING = os.getenv("MEDCABINET_STRICT_TIME", "").strip().lower() in (
    "1",
    "true",
    "yes",
    "on",
)

# --------------------------------------------------------------------------------------
# Questionnaire
# --------------------------------------------------------------------------------------
QUESTIONS_FILE = os.getenv("MEDCABINET_QUESTIONS", str(PACKAGE_DIR / "questions.yaml"))

# Free-text answers longer than this are clipped in summaries
SUMMARY_CLIP = 100

# Yes/no classification (case-insensitive, whole answer)
YES_PATTERNS = [
    r"^\s*(yes|yeah|yep|y)\s*[.!]?\s*$",
]
NO_PATTERNS = [
    r"^\s*(no|nope|never|n)\s*[.!]?\s*$",
]

# --------------------------------------------------------------------------------------
# Document store collections
# --------------------------------------------------------------------------------------
USERS_COLLECTION = "users"
MEDICINES_COLLECTION = "medicines"

# --------------------------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------------------------
AUDIT_LOG_FILE = os.getenv("MEDCABINET_AUDIT_LOG", "medcabinet/logs/audit.log")
AUDIT_LOG_MAX_BYTES = 1_000_000
AUDIT_LOG_BACKUPS = 10
LOG_LEVEL = os.getenv("MEDCABINET_LOG_LEVEL", "INFO").upper()

# --------------------------------------------------------------------------------------
# Demo roster scheduled by app.py (replace with real records)
# --------------------------------------------------------------------------------------
USER_ID = os.getenv("MEDCABINET_USER_ID", "demo-user")

MEDICINES: list[dict[str, Any]] = [
    {
        "id": "med-vitd",
        "name": "Vitamin D",
        "dosage": "1000 IU",
        "timeToTake": "9:00am",
        "frequency": "Daily",
    },
    {
        "id": "med-mtx",
        "name": "Methotrexate",
        "dosage": "2.5 mg",
        "timeToTake": "8:30 pm",
        "daysOfWeek": [2, 5],
    },
    {
        "id": "med-flu",
        "name": "Flu shot",
        "timeToTake": "10am",
        "date": "2026-11-02",
    },
]
