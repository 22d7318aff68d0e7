"""Input-layer public API for key decoding and per-screen key handlers.

``read_key`` turns raw terminal bytes into key tokens; ``handle_key`` routes
a token to the handler of the active screen.
"""

from __future__ import annotations

from ..events import Effect
from ..state import AppState, Screen
from .key_common import request_quit
from .key_miller import handle_miller_key
from .key_panels import handle_about_key, handle_list_key, handle_search_key, handle_sidebar_key
from .key_reader import handle_comparison_key, handle_reader_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import ESC_SEQUENCE_TIMEOUT_MS, parse_mouse_token, read_key


def handle_key(state: AppState, key: str, effects: list[Effect]) -> None:
    """Route ``key`` to the active screen; ``CTRL_C`` quits from anywhere."""
    if key == "CTRL_C":
        request_quit(state, effects)
        return
    screen = state.screen
    if screen is Screen.SEARCH:
        handle_search_key(state, key, effects)
    elif screen is Screen.MILLER:
        handle_miller_key(state, key, effects)
    elif screen is Screen.SIDEBAR:
        handle_sidebar_key(state, key, effects)
    elif screen is Screen.COMPARISON:
        handle_comparison_key(state, key, effects)
    elif screen in (Screen.TRANSLATION_SELECT, Screen.THEME_SELECT, Screen.CACHE_MANAGER):
        handle_list_key(state, key, effects)
    elif screen is Screen.ABOUT:
        handle_about_key(state, key, effects)
    else:
        handle_reader_key(state, key, effects)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "handle_key",
    "parse_mouse_token",
    "read_key",
]
