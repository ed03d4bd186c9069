"""Configuration constants for the speed reading engine and web app.

Values come from the environment, optionally seeded from a project-root
``.env`` file. Modules import the constants from here instead of reading
``os.environ`` themselves.

Type conversion follows one pattern per kind:

    FLAG = os.getenv("FLAG", "true").lower() == "true"
    NUMBER = int(os.getenv("NUMBER", "10"))
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_ENV_FILE = PROJECT_ROOT / ".env"

if PROJECT_ROOT_ENV_FILE.exists():
    load_dotenv(PROJECT_ROOT_ENV_FILE)


def _split_csv(value: str) -> tuple:
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


# -------------------------------
# Pacing
# -------------------------------
DEFAULT_WPM = int(os.getenv("SPEEDREAD_DEFAULT_WPM", "300"))
MIN_WPM = int(os.getenv("SPEEDREAD_MIN_WPM", "100"))
MAX_WPM = int(os.getenv("SPEEDREAD_MAX_WPM", "1000"))
WPM_STEP = int(os.getenv("SPEEDREAD_WPM_STEP", "25"))

# Punctuation pause multipliers (only used when punctuation pauses are on)
COMMA_PAUSE = float(os.getenv("SPEEDREAD_COMMA_PAUSE", "1.6"))
SENTENCE_PAUSE = float(os.getenv("SPEEDREAD_SENTENCE_PAUSE", "2.2"))

# -------------------------------
# Chunking
# -------------------------------
DEFAULT_CHUNK_SIZE = int(os.getenv("SPEEDREAD_CHUNK_SIZE", "3"))
SMART_CHUNKING = os.getenv("SPEEDREAD_SMART_CHUNKING", "true").lower() == "true"
LANGUAGES = _split_csv(os.getenv("SPEEDREAD_LANGUAGES", "en,tr"))

# -------------------------------
# Logging
# -------------------------------
LOG_LEVEL = os.getenv("SPEEDREAD_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("SPEEDREAD_LOG_FILE") or None

# -------------------------------
# Web
# -------------------------------
HOST = os.getenv("SPEEDREAD_HOST", "127.0.0.1")
PORT = int(os.getenv("SPEEDREAD_PORT", "5000"))
MAX_TEXT_CHARS = int(os.getenv("SPEEDREAD_MAX_TEXT_CHARS", "2000000"))
