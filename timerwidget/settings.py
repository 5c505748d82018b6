"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/TimerWidget/settings.json

Usage::

    settings = load_settings()
    settings.always_on_top = False
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same directory the database lives in
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "TimerWidget"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── window ────────────────────────────────────────────────────────
    always_on_top: bool = True
    window_x: int | None = None
    window_y: int | None = None

    # ── storage ───────────────────────────────────────────────────────
    db_path: str | None = None             # None → default location

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", SETTINGS_PATH)
        return Settings()

    # Only use keys that exist in the dataclass
    valid_keys = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    settings = Settings(**filtered)
    if str(settings.log_level).upper() not in LOG_LEVELS:
        logger.warning("Unknown log level %r, using INFO", settings.log_level)
        settings.log_level = "INFO"
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
