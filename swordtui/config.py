"""Persistent JSON settings helpers.

Stores the selected translation, the last reading position and the theme.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .state import DEFAULT_BOOK_ID, DEFAULT_CHAPTER, DEFAULT_TRANSLATION
from .ui_theme import normalize_theme_name

logger = logging.getLogger(__name__)

APP_NAME = "sword-tui"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
MAX_BOOK_ID = 66


@dataclass(frozen=True)
class Settings:
    """User preferences restored at startup."""

    selected_translation: str = DEFAULT_TRANSLATION
    current_book: int = DEFAULT_BOOK_ID
    current_chapter: int = DEFAULT_CHAPTER
    current_theme: str = "catppuccin-mocha"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("Could not save settings to %s: %s", CONFIG_PATH, exc)


def _coerce_positive_int(value: object, default: int, upper: int | None = None) -> int:
    """Booleans, non-integers and out-of-range values fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < 1 or (upper is not None and value > upper):
        return default
    return value


def load_settings() -> Settings:
    """Read settings, dropping any value with the wrong type or range."""
    data = load_config()
    translation = data.get("selected_translation")
    if not isinstance(translation, str) or not translation.strip():
        translation = DEFAULT_TRANSLATION
    theme = data.get("current_theme")
    theme_name = normalize_theme_name(theme if isinstance(theme, str) else None)
    return Settings(
        selected_translation=translation.strip().upper(),
        current_book=_coerce_positive_int(data.get("current_book"), DEFAULT_BOOK_ID, MAX_BOOK_ID),
        current_chapter=_coerce_positive_int(data.get("current_chapter"), DEFAULT_CHAPTER),
        current_theme=theme_name,
    )


def save_settings(settings: Settings) -> None:
    """Merge ``settings`` into the config file, keeping unknown keys."""
    config = load_config()
    config["selected_translation"] = settings.selected_translation
    config["current_book"] = settings.current_book
    config["current_chapter"] = settings.current_chapter
    config["current_theme"] = settings.current_theme
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "Settings",
    "load_config",
    "load_settings",
    "save_config",
    "save_settings",
]
