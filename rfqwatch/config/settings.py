"""
Global settings — loads from .env and exposes typed config values to the rest of the app.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT_DIR / "data"
LOGS_DIR = ROOT_DIR / "logs"
SEEN_IDS_PATH = Path(os.getenv("SEEN_IDS_PATH", str(DATA_DIR / "processed_ids.json")))
SOURCES_FILE = Path(os.getenv("SOURCES_FILE", str(ROOT_DIR / "config" / "sources.yaml")))

# ── General ────────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"

# ── Polling ────────────────────────────────────────────────────────────────────
MAX_SEEN_IDS      = int(os.getenv("MAX_SEEN_IDS", "90"))
POLL_INTERVAL_S   = float(os.getenv("POLL_INTERVAL_S", "30"))
SOURCE_PAUSE_S    = float(os.getenv("SOURCE_PAUSE_S", "2"))
REQUEST_TIMEOUT_S = float(os.getenv("REQUEST_TIMEOUT_S", "10"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
)

# ── Operator alerts (WeCom group bot) ──────────────────────────────────────────
ALERT_WEBHOOK_URL = os.getenv("ALERT_WEBHOOK_URL")
