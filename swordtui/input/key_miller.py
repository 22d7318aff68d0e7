"""Key handling for the miller-column picker overlay.

While filter editing is active every key feeds the filter buffer; only
``enter``, ``esc`` and ``/`` leave it.
"""

from __future__ import annotations

from dataclasses import replace

from .. import miller as miller_ops
from ..events import Effect, FetchChapter
from ..reader import apply_chapter, relayout, request_chapter, scroll_to_verse, set_highlight
from ..scroll_sync import verse_at_offset
from ..state import AppState, Screen
from .key_common import FILTER_TEXT_LIMIT, edit_buffer, request_quit
from .key_registry import KeyComboBinding, KeyComboRegistry


def close_miller(state: AppState) -> None:
    state.screen = Screen.READER
    state.dirty = True


def ensure_column_verses(state: AppState, effects: list[Effect]) -> None:
    """Make sure the verse column has the verses of the targeted chapter."""
    m = state.miller
    key = miller_ops.target_key(m, state.books, state.translation)
    if key is None or miller_ops.verses_ready(m, state.books, state.translation):
        return
    if key == state.chapter_key and state.verses is not None:
        state.miller = miller_ops.set_verses(m, key, state.verses)
        return
    token = state.issue_token()
    state.miller = replace(m, pending_token=token)
    effects.append(FetchChapter(token=token, key=key, preview=True))


def move_column(state: AppState, delta: int, effects: list[Effect]) -> None:
    state.miller = miller_ops.move_column(state.miller, delta)
    if state.miller.column == miller_ops.VERSE_COLUMN:
        ensure_column_verses(state, effects)
    state.dirty = True


def move_selection(state: AppState, delta: int) -> None:
    state.miller = miller_ops.move_selection(state.miller, state.books, state.translation, delta)
    state.dirty = True


def _show_current_chapter_at(state: AppState, verse_number: int) -> None:
    state.highlight_start = state.highlight_end = 0
    state.scroll_offset = 0
    relayout(state)
    if verse_number:
        scroll_to_verse(state, verse_number)
    set_highlight(state, verse_at_offset(state.verses or (), state.width, state.scroll_offset))


def commit(state: AppState, effects: list[Effect]) -> None:
    """Jump the reader to the picked chapter (and verse) and close the picker."""
    m = state.miller
    key = miller_ops.target_key(m, state.books, state.translation)
    close_miller(state)
    if key is None:
        return
    verse = None
    if m.column == miller_ops.VERSE_COLUMN:
        verse = miller_ops.selected_verse(m, state.books, state.translation)
    verse_number = verse.number if verse is not None else 0

    if key == state.chapter_key and state.verses is not None:
        state.pending_chapter = None
        _show_current_chapter_at(state, verse_number)
        return
    if m.verses_key == key and m.verses is not None:
        state.pending_chapter = None
        apply_chapter(state, key, m.verses, effects, scroll_verse=verse_number)
        return
    request_chapter(state, key, effects, scroll_verse=verse_number)


def toggle_filter(state: AppState) -> None:
    state.miller = miller_ops.toggle_filter(state.miller, state.books)
    state.dirty = True


def _handle_filter_key(state: AppState, key: str) -> None:
    if key in {"ENTER", "ESC", "/"}:
        toggle_filter(state)
        return
    text = edit_buffer(state.miller.filter_text, key, FILTER_TEXT_LIMIT)
    if text is None:
        return
    state.miller = miller_ops.set_filter_text(state.miller, state.books, text)
    state.dirty = True


def handle_miller_key(state: AppState, key: str, effects: list[Effect]) -> None:
    """Dispatch one key while the picker overlay is open."""
    if state.miller.filter_editing:
        _handle_filter_key(state, key)
        return
    KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("v", "ESC"), lambda: close_miller(state)),
        KeyComboBinding(("/",), lambda: toggle_filter(state)),
        KeyComboBinding(("LEFT", "h"), lambda: move_column(state, -1, effects)),
        KeyComboBinding(("RIGHT", "l"), lambda: move_column(state, 1, effects)),
        KeyComboBinding(("UP", "k"), lambda: move_selection(state, -1)),
        KeyComboBinding(("DOWN", "j"), lambda: move_selection(state, 1)),
        KeyComboBinding(("ENTER",), lambda: commit(state, effects)),
    ).dispatch(key)
