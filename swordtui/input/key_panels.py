"""Key handling for the sidebar, search prompt, list screens and About."""

from __future__ import annotations

from ..events import ClearTranslationCache, DownloadTranslation, Effect, FetchBooks, RemoveCachedTranslation
from ..reader import (
    navigation_base,
    relayout,
    request_chapter,
    return_to_reader,
    scroll_to_verse,
    set_highlight,
    settings_effect,
)
from ..references import ReferenceParseError, parse_reference
from ..render.panels import sidebar_book_at
from ..state import AppState, ChapterKey, Screen
from ..ui_theme import available_theme_names
from .key_common import SEARCH_QUERY_LIMIT, clamp_index, edit_buffer, request_quit
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import parse_mouse_token


def close_sidebar(state: AppState) -> None:
    state.screen = Screen.READER
    state.dirty = True


def open_book(state: AppState, book_index: int, effects: list[Effect]) -> None:
    """Load chapter 1 of the chosen book and return to the reader."""
    if not 0 <= book_index < len(state.books):
        return
    book = state.books[book_index]
    state.screen = Screen.READER
    base = navigation_base(state)
    request_chapter(state, ChapterKey(base.translation, book.id, 1), effects)


def move_sidebar(state: AppState, delta: int) -> None:
    state.sidebar_selected = clamp_index(state.sidebar_selected + delta, len(state.books))
    state.dirty = True


def _handle_sidebar_mouse(state: AppState, key: str, effects: list[Effect]) -> None:
    mouse = parse_mouse_token(key)
    if mouse is None:
        return
    kind, col, row = mouse
    if kind == "MOUSE_WHEEL_UP":
        move_sidebar(state, -1)
    elif kind == "MOUSE_WHEEL_DOWN":
        move_sidebar(state, 1)
    elif kind == "MOUSE_LEFT_DOWN":
        book_index = sidebar_book_at(state, col, row)
        if book_index is not None:
            state.sidebar_selected = book_index
            open_book(state, book_index, effects)


def enter_search_from_sidebar(state: AppState) -> None:
    state.search_query = ""
    state.screen = Screen.SEARCH
    state.dirty = True


def handle_sidebar_key(state: AppState, key: str, effects: list[Effect]) -> None:
    registry = KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("[", "ESC"), lambda: close_sidebar(state)),
        KeyComboBinding(("/",), lambda: enter_search_from_sidebar(state)),
        KeyComboBinding(("UP", "k"), lambda: move_sidebar(state, -1)),
        KeyComboBinding(("DOWN", "j"), lambda: move_sidebar(state, 1)),
        KeyComboBinding(("ENTER",), lambda: open_book(state, state.sidebar_selected, effects)),
    )
    if registry.dispatch(key):
        return
    _handle_sidebar_mouse(state, key, effects)


def submit_search(state: AppState, effects: list[Effect]) -> None:
    """Jump to the typed reference; unparseable input keeps the prompt open."""
    try:
        reference = parse_reference(state.search_query, state.books)
    except ReferenceParseError:
        return
    highlight = (reference.verse_start, reference.verse_end)
    base = navigation_base(state)
    key = ChapterKey(base.translation, reference.book_id, reference.chapter)
    state.screen = Screen.READER
    state.dirty = True
    if key == state.chapter_key and state.verses is not None:
        state.pending_chapter = None
        if reference.verse_start > 0:
            set_highlight(state, *highlight)
            scroll_to_verse(state, reference.verse_start)
        relayout(state)
        return
    request_chapter(state, key, effects, highlight=highlight, scroll_verse=reference.verse_start)


def handle_search_key(state: AppState, key: str, effects: list[Effect]) -> None:
    if key == "ESC":
        return_to_reader(state)
        return
    if key == "ENTER":
        submit_search(state, effects)
        return
    query = edit_buffer(state.search_query, key, SEARCH_QUERY_LIMIT)
    if query is not None and query != state.search_query:
        state.search_query = query
        state.dirty = True


def choose_translation(state: AppState, effects: list[Effect]) -> None:
    if not state.translations:
        return
    code = state.translations[clamp_index(state.translation_selected, len(state.translations))].code
    return_to_reader(state)
    if code == navigation_base(state).translation:
        return
    token = state.issue_token()
    state.pending_books_token = token
    effects.append(FetchBooks(token=token, translation=code))
    base = navigation_base(state)
    request_chapter(state, ChapterKey(code, base.book_id, base.chapter), effects)


def choose_theme(state: AppState, effects: list[Effect]) -> None:
    names = available_theme_names()
    state.theme_name = names[clamp_index(state.theme_selected, len(names))]
    return_to_reader(state)
    effects.append(settings_effect(state))


def download_selected(state: AppState, effects: list[Effect]) -> None:
    codes = state.cache_manager_codes()
    if not codes or state.downloading or not state.cache_available:
        return
    code = codes[clamp_index(state.cache_selected, len(codes))]
    if code in state.cached_translations:
        return
    state.downloading = code
    state.dirty = True
    effects.append(DownloadTranslation(code))


def remove_selected(state: AppState, effects: list[Effect]) -> None:
    codes = state.cache_manager_codes()
    if not codes:
        return
    code = codes[clamp_index(state.cache_selected, len(codes))]
    if code not in state.cached_translations or code == state.downloading:
        return
    effects.append(RemoveCachedTranslation(code))


def clear_cached(state: AppState, effects: list[Effect]) -> None:
    if not state.cached_translations or state.downloading:
        return
    effects.append(ClearTranslationCache())


def _list_length(state: AppState) -> int:
    if state.screen is Screen.TRANSLATION_SELECT:
        return len(state.translations)
    if state.screen is Screen.THEME_SELECT:
        return len(available_theme_names())
    return len(state.cache_manager_codes())


def move_list(state: AppState, delta: int) -> None:
    count = _list_length(state)
    if state.screen is Screen.TRANSLATION_SELECT:
        state.translation_selected = clamp_index(state.translation_selected + delta, count)
    elif state.screen is Screen.THEME_SELECT:
        state.theme_selected = clamp_index(state.theme_selected + delta, count)
    else:
        state.cache_selected = clamp_index(state.cache_selected + delta, count)
    state.dirty = True


def handle_list_key(state: AppState, key: str, effects: list[Effect]) -> None:
    """Translation, theme and cache lists share movement and return keys."""
    registry = KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("r", "ESC"), lambda: return_to_reader(state)),
        KeyComboBinding(("UP", "k"), lambda: move_list(state, -1)),
        KeyComboBinding(("DOWN", "j"), lambda: move_list(state, 1)),
    )
    if state.screen is Screen.TRANSLATION_SELECT:
        registry.register_binding(KeyComboBinding(("ENTER",), lambda: choose_translation(state, effects)))
    elif state.screen is Screen.THEME_SELECT:
        registry.register_binding(KeyComboBinding(("ENTER",), lambda: choose_theme(state, effects)))
    else:
        registry.register_bindings(
            KeyComboBinding(("ENTER",), lambda: download_selected(state, effects)),
            KeyComboBinding(("x",), lambda: remove_selected(state, effects)),
            KeyComboBinding(("X",), lambda: clear_cached(state, effects)),
        )
    registry.dispatch(key)


def handle_about_key(state: AppState, key: str, effects: list[Effect]) -> None:
    KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("r", "ESC"), lambda: return_to_reader(state)),
    ).dispatch(key)
