"""
polytree configuration.

Override with environment variables:
    POLYTREE_DEBUG          : Run Flask in debug mode (default off)
    POLYTREE_LOG_LEVEL      : Logging level name (default INFO)
    POLYTREE_MAX_INPUT      : Longest polymer / license accepted, in characters
    POLYTREE_MAX_IMAGE      : Largest rendered image side, in pixels
    POLYTREE_DPI            : Resolution used when rasterizing drawings
    POLYTREE_CORS_ORIGINS   : Comma separated origins allowed by CORS ("*" for any)
"""
import os
from pathlib import Path


def _env_bool(name, default=False):
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name, default):
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        return default


# ── Paths ──────────────────────────────────────────────────────
REPO_ROOT = Path(__file__).resolve().parent
TEMPLATES_DIR = REPO_ROOT / "templates"

# ── Server ─────────────────────────────────────────────────────
DEBUG = _env_bool("POLYTREE_DEBUG", False)
LOG_LEVEL = os.getenv("POLYTREE_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("POLYTREE_CORS_ORIGINS", "*").split(",") if o.strip()]

# ── Limits ─────────────────────────────────────────────────────
MAX_INPUT_LENGTH = _env_int("POLYTREE_MAX_INPUT", 100_000)
MAX_IMAGE_SIZE = _env_int("POLYTREE_MAX_IMAGE", 4096)
DPI = _env_int("POLYTREE_DPI", 100)

# ── Embedded examples (used when nothing is uploaded) ──────────
EXAMPLE_POLYMER = "dabAcCaCBAcCcaDA"
EXAMPLE_LICENSE = "2 3 0 3 10 11 12 1 1 0 1 99 2 1 1 2"
DEFAULT_IGNORED = "c"
