"""Application settings with JSON persistence.

Settings are stored at:
    ~/.pomodorise/settings.json

Usage::

    settings = load_settings()
    settings.log_level = "DEBUG"
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".pomodorise"
SETTINGS_PATH = APP_DIR / "settings.json"
DEFAULT_DB_PATH = APP_DIR / "pomodorise.db"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── storage ───────────────────────────────────────────────────────
    database_url: str = f"sqlite:///{DEFAULT_DB_PATH}"

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── interval defaults (minutes) ───────────────────────────────────
    work_duration: int = 25
    break_duration: int = 5
    long_break_duration: int = 15

    # ── validation bounds ─────────────────────────────────────────────
    min_duration_minutes: int = 1
    max_duration_minutes: int = 120

    def default_duration(self, kind: str) -> int:
        """Default length in minutes for an interval kind value."""
        return {
            "work": self.work_duration,
            "break": self.break_duration,
            "long_break": self.long_break_duration,
        }[kind]


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return Settings()
    # Only use keys that exist in the dataclass, with the default's type
    defaults = {f.name: f.default for f in fields(Settings)}
    filtered = {}
    for key, value in data.items():
        if key not in defaults:
            continue
        expected = type(defaults[key])
        if isinstance(value, bool) or not isinstance(value, expected):
            logger.warning(
                "Ignoring setting %s=%r: expected %s", key, value, expected.__name__,
            )
            continue
        filtered[key] = value
    return Settings(**filtered)


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
