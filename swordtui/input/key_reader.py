"""Key handling for the reader and the comparison view.

The reader owns the mode-switching keys; the comparison view only scrolls
and returns.
"""

from __future__ import annotations

from ..events import CopyToClipboard, Effect, FetchCacheList, FetchParallel
from ..miller import seed_miller
from ..reader import (
    WHEEL_SCROLL_LINES,
    change_chapter,
    navigation_base,
    relayout,
    return_to_reader,
    scroll_by,
    scroll_to,
    select_adjacent_verse,
    yank_text,
)
from ..state import COMPARISON_VERSE_LIMIT, AppState, Screen
from ..ui_theme import available_theme_names
from .key_common import request_quit
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import parse_mouse_token


def _scroll_bindings(state: AppState) -> list[KeyComboBinding]:
    """Freeform viewport scrolling shared by reader and comparison."""
    page = max(1, state.viewport_height)
    half = max(1, page // 2)
    return [
        KeyComboBinding((" ", "f"), lambda: scroll_by(state, page)),
        KeyComboBinding(("b",), lambda: scroll_by(state, -page)),
        KeyComboBinding(("CTRL_D",), lambda: scroll_by(state, half)),
        KeyComboBinding(("CTRL_U",), lambda: scroll_by(state, -half)),
        KeyComboBinding(("g", "HOME"), lambda: scroll_to(state, 0)),
        KeyComboBinding(("G", "END"), lambda: scroll_to(state, state.max_scroll)),
    ]


def handle_wheel(state: AppState, key: str) -> bool:
    mouse = parse_mouse_token(key)
    if mouse is None:
        return False
    kind = mouse[0]
    if kind == "MOUSE_WHEEL_UP":
        scroll_by(state, -WHEEL_SCROLL_LINES)
    elif kind == "MOUSE_WHEEL_DOWN":
        scroll_by(state, WHEEL_SCROLL_LINES)
    return True


def open_sidebar(state: AppState) -> None:
    state.sidebar_selected = state.book_index(state.book_id)
    state.screen = Screen.SIDEBAR
    state.dirty = True


def open_miller(state: AppState) -> None:
    state.miller = seed_miller(state.books, state.book_id, state.chapter)
    state.screen = Screen.MILLER
    state.dirty = True


def open_search(state: AppState) -> None:
    state.search_query = ""
    state.screen = Screen.SEARCH
    state.dirty = True


def open_comparison(state: AppState, effects: list[Effect]) -> None:
    token = state.issue_token()
    key = navigation_base(state)
    state.pending_parallel_token = token
    state.parallel_verses = None
    state.parallel_key = None
    state.screen = Screen.COMPARISON
    state.scroll_offset = 0
    relayout(state)
    effects.append(
        FetchParallel(
            token=token,
            key=key,
            translations=state.comparison_translations,
            verse_numbers=tuple(range(1, COMPARISON_VERSE_LIMIT + 1)),
        )
    )


def open_translation_select(state: AppState) -> None:
    codes = [translation.code for translation in state.translations]
    state.translation_selected = codes.index(state.translation) if state.translation in codes else 0
    state.screen = Screen.TRANSLATION_SELECT
    state.dirty = True


def open_theme_select(state: AppState) -> None:
    names = available_theme_names()
    state.theme_selected = names.index(state.theme_name) if state.theme_name in names else 0
    state.screen = Screen.THEME_SELECT
    state.dirty = True


def open_cache_manager(state: AppState, effects: list[Effect]) -> None:
    codes = state.cache_manager_codes()
    state.cache_selected = codes.index(state.translation) if state.translation in codes else 0
    state.screen = Screen.CACHE_MANAGER
    state.dirty = True
    effects.append(FetchCacheList())


def open_about(state: AppState) -> None:
    state.screen = Screen.ABOUT
    state.dirty = True


def copy_selection(state: AppState, effects: list[Effect]) -> None:
    text = yank_text(state)
    if text:
        effects.append(CopyToClipboard(text))


def handle_reader_key(state: AppState, key: str, effects: list[Effect]) -> None:
    """Dispatch one key on the plain reader screen."""
    registry = KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("[",), lambda: open_sidebar(state)),
        KeyComboBinding(("v",), lambda: open_miller(state)),
        KeyComboBinding(("/",), lambda: open_search(state)),
        KeyComboBinding(("c",), lambda: open_comparison(state, effects)),
        KeyComboBinding(("t",), lambda: open_translation_select(state)),
        KeyComboBinding(("T",), lambda: open_theme_select(state)),
        KeyComboBinding(("d",), lambda: open_cache_manager(state, effects)),
        KeyComboBinding(("?",), lambda: open_about(state)),
        KeyComboBinding(("n", "PAGE_DOWN"), lambda: change_chapter(state, 1, effects)),
        KeyComboBinding(("p", "PAGE_UP"), lambda: change_chapter(state, -1, effects)),
        KeyComboBinding(("y",), lambda: copy_selection(state, effects)),
        KeyComboBinding(("UP", "k"), lambda: select_adjacent_verse(state, -1)),
        KeyComboBinding(("DOWN", "j"), lambda: select_adjacent_verse(state, 1)),
        *_scroll_bindings(state),
    )
    if registry.dispatch(key):
        return
    handle_wheel(state, key)


def handle_comparison_key(state: AppState, key: str, effects: list[Effect]) -> None:
    registry = KeyComboRegistry().register_bindings(
        KeyComboBinding(("q",), lambda: request_quit(state, effects)),
        KeyComboBinding(("r", "ESC"), lambda: return_to_reader(state)),
        KeyComboBinding(("UP", "k"), lambda: scroll_by(state, -1)),
        KeyComboBinding(("DOWN", "j"), lambda: scroll_by(state, 1)),
        KeyComboBinding(("PAGE_DOWN",), lambda: scroll_by(state, max(1, state.viewport_height))),
        KeyComboBinding(("PAGE_UP",), lambda: scroll_by(state, -max(1, state.viewport_height))),
        *_scroll_bindings(state),
    )
    if registry.dispatch(key):
        return
    handle_wheel(state, key)
