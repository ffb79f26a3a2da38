"""
Paths, logging setup, config load/save, safe_print.
"""

import os
import json
import sys
import logging
from pathlib import Path

from .constants import DEFAULT_API_BASE_URL


# ─── Paths ───────────────────────────────────────────────────────
# One config/session directory per operator account.
BASE_DIR = Path(os.environ.get("ROSTER_HOME") or Path.home() / ".roster_console")

BASE_DIR.mkdir(parents=True, exist_ok=True)

CONFIG_FILE = BASE_DIR / "config.json"
LOG_FILE = BASE_DIR / "console.log"
SESSION_FILE = BASE_DIR / "session.json"


# ─── Safe print (no crash when stdout is closed) ─────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

try:
    if LOG_FILE.exists() and LOG_FILE.stat().st_size > 1_000_000:
        LOG_FILE.write_text("")
except OSError:
    pass

logging.basicConfig(
    filename=str(LOG_FILE),
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    encoding="utf-8",
)
log = logging.getLogger("roster")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.WARNING)
console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
log.addHandler(console_handler)


# ─── Config Management ──────────────────────────────────────────

def load_config():
    """Load config from disk. Returns dict (empty when missing or unreadable)."""
    config = {}
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, "r") as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError):
            log.warning("Config file %s unreadable — using defaults", CONFIG_FILE)
            config = {}
    if not isinstance(config, dict):
        config = {}
    return config


def save_config(config):
    """Save config dict to disk."""
    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)
    log.info("Config saved to %s", CONFIG_FILE)


def api_base_url(config=None):
    """Resolve the API origin: env var → config file → default."""
    if config is None:
        config = load_config()
    url = os.environ.get("ROSTER_API_URL") or config.get("apiBaseUrl") or DEFAULT_API_BASE_URL
    return url.rstrip("/")
