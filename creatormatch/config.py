"""
Creator Match - Configuration
Central configuration loaded from environment variables.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# ── App ──────────────────────────────────────────────────────────
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", os.getenv("PORT", "5173")))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ── LLM ──────────────────────────────────────────────────────────
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "claude-sonnet-4-20250514")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "512"))

# ── Roster Sheet (Google Sheets) ─────────────────────────────────
SHEET_SPREADSHEET_ID = os.getenv(
    "SHEET_SPREADSHEET_ID",
    "1QRQ_P3bi5ClIH_aD5ztTbFgxTH8XnypIWnPjsaqJ87Q"
)
SHEET_GID = os.getenv("SHEET_GID", "0")

# Explicit overrides; when empty the URLs are derived from the sheet id
ROSTER_GVIZ_URL = os.getenv("ROSTER_GVIZ_URL", "")
ROSTER_CSV_URL = os.getenv("ROSTER_CSV_URL", "")

# ── Classification Service ───────────────────────────────────────
CLASSIFIER_URL = os.getenv(
    "CLASSIFIER_URL",
    f"http://localhost:{APP_PORT}/api/classify"
)

# ── Timeouts (seconds) ───────────────────────────────────────────
ROSTER_TIMEOUT = float(os.getenv("ROSTER_TIMEOUT", "15"))
CLASSIFIER_TIMEOUT = float(os.getenv("CLASSIFIER_TIMEOUT", "30"))
SITE_FETCH_TIMEOUT = float(os.getenv("SITE_FETCH_TIMEOUT", "9"))

# ── Site Snippet Limits ──────────────────────────────────────────
SITE_HTML_MAX_CHARS = 150_000
SITE_TEXT_MAX_CHARS = 7000
SITE_USER_AGENT = "CreatorMatchClassifier/1.0 (+https://localhost) httpx"

# ── Match Timing ─────────────────────────────────────────────────
MIN_DISPLAY_SECONDS = float(os.getenv("MIN_DISPLAY_SECONDS", "4.0"))

# (offset seconds, phase) pairs announced while a match is running
PHASE_SCHEDULE = (
    (0.0, "classifying"),
    (1.6, "finding"),
    (3.0, "finalizing"),
)

# ── Confidence ───────────────────────────────────────────────────
DEFAULT_CONFIDENCE = 0.6          # Classifier omitted or sent non-numeric confidence
LOW_CONFIDENCE_THRESHOLD = 0.55   # Below this, offer category refinement
HIGH_CONFIDENCE_THRESHOLD = 0.75
REFINE_CONFIDENCE = 0.85          # User picked the category themselves

# ── Taxonomy (closed set, ordered) ───────────────────────────────
CANONICAL_CATEGORIES = [
    "Games",
    "Social",
    "Entertainment",
    "Productivity",
    "Lifestyle",
    "Health & Fitness",
    "Education",
    "Business",
    "Finance",
    "Utilities",
]

# Preselected in the fallback picker when a category has no creators
DEFAULT_FALLBACK_CATEGORY = "Lifestyle"
