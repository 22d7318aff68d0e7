"""Key hint content for the status bar and the About page.

Hints are stored as ``(keys, action)`` pairs so the same table renders both
as a compact one-line status hint and as the About shortcut list.
"""

from __future__ import annotations

from ..state import AppState, Screen
from ..ui_theme import UITheme

KeyHint = tuple[str, str]

READER_HINTS: tuple[KeyHint, ...] = (
    ("↑/↓", "verse"),
    ("n/p", "chapter"),
    ("v", "picker"),
    ("[", "books"),
    ("/", "search"),
    ("c", "compare"),
    ("y", "copy"),
    ("t", "translation"),
    ("?", "about"),
    ("q", "quit"),
)

SIDEBAR_HINTS: tuple[KeyHint, ...] = (
    ("↑/↓", "move"),
    ("enter", "open book"),
    ("/", "search"),
    ("[/esc", "close"),
)

MILLER_HINTS: tuple[KeyHint, ...] = (
    ("←/→", "column"),
    ("↑/↓", "move"),
    ("/", "filter"),
    ("enter", "go"),
    ("v/esc", "close"),
)

MILLER_FILTER_HINTS: tuple[KeyHint, ...] = (
    ("type", "filter"),
    ("ctrl+u", "clear"),
    ("enter/esc", "done"),
)

SEARCH_HINTS: tuple[KeyHint, ...] = (
    ("enter", "go"),
    ("esc", "cancel"),
    ("e.g.", "John 3:16, Gen 1:1-3, 43 3:16"),
)

COMPARISON_HINTS: tuple[KeyHint, ...] = (
    ("↑/↓", "scroll"),
    ("space/b", "page"),
    ("r/esc", "back"),
)

LIST_HINTS: tuple[KeyHint, ...] = (
    ("↑/↓", "move"),
    ("enter", "select"),
    ("r/esc", "back"),
)

CACHE_HINTS: tuple[KeyHint, ...] = (
    ("↑/↓", "move"),
    ("enter", "download"),
    ("x", "remove"),
    ("X", "clear all"),
    ("r/esc", "back"),
)

ABOUT_HINTS: tuple[KeyHint, ...] = (("r/esc", "back"), ("q", "quit"))

ABOUT_SHORTCUTS: tuple[KeyHint, ...] = (
    ("↑/↓ or j/k", "previous/next verse"),
    ("space/f, b", "page down/up"),
    ("ctrl+d/ctrl+u", "half page down/up"),
    ("g/G", "top/bottom of chapter"),
    ("n/p, pgdn/pgup", "next/previous chapter"),
    ("v", "book/chapter/verse picker"),
    ("[", "book list"),
    ("/", "search reference, or filter in the picker"),
    ("c", "compare translations"),
    ("y", "copy highlighted verses"),
    ("t", "choose translation"),
    ("T", "choose theme"),
    ("d", "offline downloads"),
    ("r/esc", "back to reader"),
    ("q/ctrl+c", "quit"),
)


def hints_for(state: AppState) -> tuple[KeyHint, ...]:
    screen = state.screen
    if screen is Screen.MILLER:
        return MILLER_FILTER_HINTS if state.miller.filter_editing else MILLER_HINTS
    if screen is Screen.SIDEBAR:
        return SIDEBAR_HINTS
    if screen is Screen.SEARCH:
        return SEARCH_HINTS
    if screen is Screen.COMPARISON:
        return COMPARISON_HINTS
    if screen is Screen.CACHE_MANAGER:
        return CACHE_HINTS
    if screen in {Screen.TRANSLATION_SELECT, Screen.THEME_SELECT}:
        return LIST_HINTS
    if screen is Screen.ABOUT:
        return ABOUT_HINTS
    return READER_HINTS


def format_hints(hints: tuple[KeyHint, ...], theme: UITheme) -> str:
    """Render hints as ``key action • key action`` with highlighted keys."""
    parts = [f"{theme.accent}{keys}{theme.reset} {theme.muted}{action}{theme.reset}" for keys, action in hints]
    return f" {theme.muted}•{theme.reset} ".join(parts)
