"""Helpers shared by the per-screen key handlers."""

from __future__ import annotations

from ..events import Effect, Quit
from ..reader import settings_effect
from ..state import AppState

SEARCH_QUERY_LIMIT = 50
FILTER_TEXT_LIMIT = 40


def is_text_key(key: str) -> bool:
    """Whether ``key`` is a single printable character rather than a named token."""
    return len(key) == 1 and key.isprintable()


def edit_buffer(buffer: str, key: str, limit: int) -> str | None:
    """Apply a text-editing key to ``buffer``; ``None`` when the key is not an edit."""
    if key == "BACKSPACE":
        return buffer[:-1]
    if key == "CTRL_U":
        return ""
    if is_text_key(key):
        if len(buffer) >= limit:
            return buffer
        return buffer + key
    return None


def request_quit(state: AppState, effects: list[Effect]) -> None:
    effects.append(settings_effect(state))
    effects.append(Quit())


def clamp_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(count - 1, index))
