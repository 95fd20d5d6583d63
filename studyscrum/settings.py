"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/StudyScrum/settings.json

or under ``$STUDYSCRUM_HOME`` when that variable is set.

Usage::

    settings = load_settings()
    settings.max_target_minutes = 240
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path


logger = logging.getLogger(__name__)


def app_support_dir() -> Path:
    override = os.environ.get("STUDYSCRUM_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "StudyScrum"


def settings_path() -> Path:
    return app_support_dir() / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    min_target_minutes: int = 1
    max_target_minutes: int = 180
    tick_interval_ms: int = 100

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 560
    window_height: int = 760
    always_on_top: bool = False


def _fits(value, annotation: str) -> bool:
    """Whether a JSON value matches a field annotation such as ``"int | None"``."""
    if value is None:
        return "None" in annotation
    if annotation.startswith("bool"):
        return isinstance(value, bool)
    return isinstance(value, int) and not isinstance(value, bool)


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = settings_path()
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        # Only use keys that exist in the dataclass and hold the right type
        filtered = {}
        for f in fields(Settings):
            if f.name not in data:
                continue
            value = data[f.name]
            if _fits(value, f.type):
                filtered[f.name] = value
            else:
                logger.warning("Ignoring setting %s=%r", f.name, value)
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", path, exc)
        return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    path = settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
