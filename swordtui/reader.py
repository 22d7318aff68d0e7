"""Reader-level operations shared by key handlers and result handlers.

Every function mutates the ``AppState`` it is given, which is always the
private copy ``update`` works on, and appends effect descriptors to the
``effects`` list instead of performing I/O.
"""

from __future__ import annotations

from collections.abc import Sequence

from .events import Effect, FetchChapter, SaveSettings
from .models import Verse
from .render.chapter import format_chapter_lines, format_parallel_lines
from .scroll_sync import offset_for_verse, verse_at_offset
from .state import AppState, ChapterKey, ChapterRequest, Screen
from .text_layout import strip_markup_and_decode_entities
from .ui_theme import UITheme, resolve_theme

WHEEL_SCROLL_LINES = 3


def theme_for(state: AppState) -> UITheme:
    return resolve_theme(state.theme_name, no_color=state.no_color)


def relayout(state: AppState) -> None:
    """Rebuild viewport content for the current screen and clamp the offset."""
    theme = theme_for(state)
    if state.screen is Screen.COMPARISON:
        lines = format_parallel_lines(state.parallel_verses or (), state.width, theme)
    else:
        highlight = (state.highlight_start, state.highlight_end)
        lines = format_chapter_lines(state.verses or (), state.width, highlight, theme)
    state.content_lines = tuple(lines)
    state.scroll_offset = max(0, min(state.scroll_offset, state.max_scroll))
    state.dirty = True


def set_highlight(state: AppState, start: int, end: int | None = None) -> None:
    end = start if end is None else end
    if start > 0 and end < start:
        end = start
    if (state.highlight_start, state.highlight_end) == (start, end):
        return
    state.highlight_start = start
    state.highlight_end = end
    relayout(state)


def shows_reader_content(state: AppState) -> bool:
    return state.screen is not Screen.COMPARISON


def scroll_to(state: AppState, offset: int) -> bool:
    """Freeform scroll; re-derives the highlighted verse when the offset moves."""
    target = max(0, min(offset, state.max_scroll))
    if target == state.scroll_offset:
        return False
    state.scroll_offset = target
    state.dirty = True
    if shows_reader_content(state) and state.verses:
        verse = verse_at_offset(state.verses, state.width, target)
        if verse and (verse, verse) != (state.highlight_start, state.highlight_end):
            set_highlight(state, verse)
    return True


def scroll_by(state: AppState, delta: int) -> bool:
    return scroll_to(state, state.scroll_offset + delta)


def scroll_to_verse(state: AppState, verse_number: int) -> None:
    """Explicit selection: place ``verse_number`` at the viewport top."""
    if not state.verses:
        state.scroll_offset = 0
        return
    state.scroll_offset = offset_for_verse(state.verses, state.width, verse_number, state.viewport_height)
    state.dirty = True


def select_adjacent_verse(state: AppState, delta: int) -> bool:
    """Move the single-verse highlight by list position and follow it."""
    verses = state.verses or ()
    index = next((i for i, verse in enumerate(verses) if verse.number == state.highlight_start), -1)
    if index < 0:
        return False
    target = index + delta
    if target < 0 or target >= len(verses):
        return False
    number = verses[target].number
    set_highlight(state, number)
    scroll_to_verse(state, number)
    return True


def navigation_base(state: AppState) -> ChapterKey:
    """Chapter subsequent navigation is relative to, pending loads included."""
    if state.pending_chapter is not None:
        return state.pending_chapter.key
    return state.chapter_key


def request_chapter(
    state: AppState,
    key: ChapterKey,
    effects: list[Effect],
    *,
    highlight: tuple[int, int] = (0, 0),
    scroll_verse: int = 0,
) -> None:
    token = state.issue_token()
    state.pending_chapter = ChapterRequest(token=token, key=key, highlight=highlight, scroll_verse=scroll_verse)
    state.dirty = True
    effects.append(FetchChapter(token=token, key=key))


def settings_effect(state: AppState) -> SaveSettings:
    return SaveSettings(
        translation=state.translation,
        book_id=state.book_id,
        chapter=state.chapter,
        theme=state.theme_name,
    )


def apply_chapter(
    state: AppState,
    key: ChapterKey,
    verses: Sequence[Verse],
    effects: list[Effect],
    *,
    highlight: tuple[int, int] = (0, 0),
    scroll_verse: int = 0,
) -> None:
    """Replace the reading position and verses in one step.

    Without an explicit highlight the verse at the resulting viewport top is
    highlighted, which is the first verse unless ``scroll_verse`` is set.
    """
    translation_changed = key.translation != state.translation
    state.translation = key.translation
    state.book_id = key.book_id
    state.chapter = key.chapter
    book = state.book_by_id(key.book_id)
    if book is not None:
        state.book_name = book.name
    state.verses = tuple(verses)
    if state.parallel_key != key:
        state.parallel_verses = None
        state.parallel_key = None
    state.error = ""
    state.highlight_start, state.highlight_end = highlight
    state.scroll_offset = 0
    relayout(state)
    if scroll_verse > 0:
        scroll_to_verse(state, scroll_verse)
    if state.highlight_start == 0:
        first = verse_at_offset(state.verses, state.width, state.scroll_offset)
        set_highlight(state, first)
    if translation_changed:
        effects.append(settings_effect(state))


def change_chapter(state: AppState, delta: int, effects: list[Effect]) -> bool:
    """Next/previous chapter within the current book; no-op at either end."""
    base = navigation_base(state)
    target = base.chapter + delta
    if target < 1:
        return False
    if delta > 0:
        book = state.book_by_id(base.book_id)
        if book is None or target > book.chapter_count:
            return False
    set_highlight(state, 0, 0)
    request_chapter(state, ChapterKey(base.translation, base.book_id, target), effects)
    return True


def return_to_reader(state: AppState) -> None:
    """Leave any non-reader screen and re-show the loaded chapter."""
    was_comparison = state.screen is Screen.COMPARISON
    state.screen = Screen.READER
    relayout(state)
    if was_comparison and state.highlight_start > 0:
        scroll_to_verse(state, state.highlight_start)
    state.dirty = True


def yank_text(state: AppState) -> str | None:
    """Serialize the highlighted range, or the whole chapter, for the clipboard."""
    verses = state.verses or ()
    if not verses:
        return None
    start, end = state.highlight_start, state.highlight_end
    label = f"{state.translation} {state.book_name} {state.chapter}"
    if start > 0:
        chosen = [verse for verse in verses if start <= verse.number <= end]
        label = f"{label}:{start}" if end == start else f"{label}:{start}-{end}"
    else:
        chosen = list(verses)
    if not chosen:
        return None
    body = "".join(f"{verse.number}. {strip_markup_and_decode_entities(verse.text)}\n\n" for verse in chosen)
    return f"{label}\n\n{body}"

