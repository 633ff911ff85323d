"""Identifier keys and artifact path conventions."""

import re
import unicodedata
from pathlib import Path

UNKNOWN_KEY = "unknown"

FALLBACK_LOG_NAME = "error-log.log"


def identifier_key(name: str) -> str:
    """Convert a character name to a filesystem-safe log identifier.

    "Mx. Foo!" → "mx_foo"; "mx foo" → "mx_foo"; "" → "unknown"
    """
    text = unicodedata.normalize("NFKD", name)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"[^a-z0-9\s]", "", text)
    text = re.sub(r"\s+", "_", text.strip())
    return text or UNKNOWN_KEY


def log_filename(key: str) -> str:
    return f"request_{key}.log"


def raw_filename(key: str) -> str:
    return f"request_{key}_raw.json"


def init_logs_dir(logs_dir: Path) -> Path:
    """Create the logs directory if needed and return it."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
