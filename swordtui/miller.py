"""Miller-column book/chapter/verse selector.

Every function takes a :class:`MillerState` and returns a new one, leaving
the input untouched. Column 0 lists books, column 1 the chapters of the
selected book, and column 2 the verses of the selected chapter once loaded.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import TypeVar

from .models import Book, Verse
from .state import ChapterKey, MillerState
from .text_layout import strip_markup_and_decode_entities

T = TypeVar("T")

BOOK_COLUMN = 0
CHAPTER_COLUMN = 1
VERSE_COLUMN = 2
LAST_COLUMN = VERSE_COLUMN


def visible_window(items: Sequence[T], selected: int, size: int) -> tuple[Sequence[T], int, int]:
    """Return ``(slice, start, end)`` of at most ``size`` items around ``selected``.

    The window is centred on the selection and clamped so it never runs past
    either end of ``items``.
    """
    total = len(items)
    if total == 0 or size <= 0:
        return items[0:0], 0, 0
    size = min(size, total)
    selected = max(0, min(selected, total - 1))
    start = max(0, selected - size // 2)
    end = start + size
    if end > total:
        end = total
        start = max(0, end - size)
    return items[start:end], start, end


def seed_miller(books: Sequence[Book], book_id: int, chapter: int) -> MillerState:
    """Fresh picker positioned on the current reading location."""
    book_index = 0
    for index, book in enumerate(books):
        if book.id == book_id:
            book_index = index
            break
    return MillerState(book_index=book_index, chapter_index=max(0, chapter - 1))


def displayed_books(miller: MillerState, books: Sequence[Book]) -> Sequence[Book]:
    return miller.filtered_books if miller.filtered_books is not None else books


def selected_book(miller: MillerState, books: Sequence[Book]) -> Book | None:
    shown = displayed_books(miller, books)
    if 0 <= miller.book_index < len(shown):
        return shown[miller.book_index]
    return None


def displayed_chapters(miller: MillerState, books: Sequence[Book]) -> Sequence[int]:
    if miller.filtered_chapters is not None:
        return miller.filtered_chapters
    book = selected_book(miller, books)
    if book is None:
        return ()
    return tuple(range(1, book.chapter_count + 1))


def selected_chapter(miller: MillerState, books: Sequence[Book]) -> int | None:
    shown = displayed_chapters(miller, books)
    if 0 <= miller.chapter_index < len(shown):
        return shown[miller.chapter_index]
    return None


def target_key(miller: MillerState, books: Sequence[Book], translation: str) -> ChapterKey | None:
    """Chapter the picker currently points at, if any."""
    book = selected_book(miller, books)
    chapter = selected_chapter(miller, books)
    if book is None or chapter is None:
        return None
    return ChapterKey(translation, book.id, chapter)


def verses_ready(miller: MillerState, books: Sequence[Book], translation: str) -> bool:
    """Whether the loaded verse list belongs to the targeted chapter."""
    key = target_key(miller, books, translation)
    return key is not None and miller.verses is not None and miller.verses_key == key


def displayed_verses(miller: MillerState, books: Sequence[Book], translation: str) -> Sequence[Verse]:
    if not verses_ready(miller, books, translation):
        return ()
    if miller.filtered_verses is not None:
        return miller.filtered_verses
    return miller.verses or ()


def selected_verse(miller: MillerState, books: Sequence[Book], translation: str) -> Verse | None:
    shown = displayed_verses(miller, books, translation)
    if 0 <= miller.verse_index < len(shown):
        return shown[miller.verse_index]
    return None


def book_matches(book: Book, text: str) -> bool:
    return text.lower() in book.name.lower()


def verse_matches(verse: Verse, text: str) -> bool:
    """Match stripped verse text case-insensitively or the verse number literally."""
    if text in str(verse.number):
        return True
    return text.lower() in strip_markup_and_decode_entities(verse.text).lower()


def _apply_filter(miller: MillerState, books: Sequence[Book]) -> MillerState:
    text = miller.filter_text
    column = miller.filter_column
    if column == BOOK_COLUMN:
        filtered_books = None if not text else tuple(book for book in books if book_matches(book, text))
        return replace(
            miller,
            filtered_books=filtered_books,
            book_index=0,
            chapter_index=0,
            verse_index=0,
        )
    if column == CHAPTER_COLUMN:
        unfiltered = replace(miller, filtered_chapters=None)
        chapters = displayed_chapters(unfiltered, books)
        filtered_chapters = None if not text else tuple(c for c in chapters if text in str(c))
        return replace(miller, filtered_chapters=filtered_chapters, chapter_index=0, verse_index=0)
    verses = miller.verses or ()
    filtered_verses = None if not text else tuple(v for v in verses if verse_matches(v, text))
    return replace(miller, filtered_verses=filtered_verses, verse_index=0)


def _index_of(items: Sequence[T], item: T | None) -> int:
    if item is None:
        return 0
    for index, candidate in enumerate(items):
        if candidate == item:
            return index
    return 0


def clear_filter(miller: MillerState, books: Sequence[Book]) -> MillerState:
    """Drop any filter while keeping the same underlying selection."""
    book = selected_book(miller, books)
    chapter = selected_chapter(miller, books)
    verse_list = miller.filtered_verses if miller.filtered_verses is not None else (miller.verses or ())
    verse = verse_list[miller.verse_index] if 0 <= miller.verse_index < len(verse_list) else None
    cleared = replace(
        miller,
        filter_text="",
        filter_editing=False,
        filtered_books=None,
        filtered_chapters=None,
        filtered_verses=None,
    )
    chapters = displayed_chapters(replace(cleared, book_index=_index_of(books, book)), books)
    return replace(
        cleared,
        book_index=_index_of(books, book),
        chapter_index=_index_of(chapters, chapter),
        verse_index=_index_of(miller.verses or (), verse),
    )


def toggle_filter(miller: MillerState, books: Sequence[Book]) -> MillerState:
    """Enter or leave filter editing for the active column."""
    if miller.filter_editing:
        return replace(miller, filter_editing=False)
    if miller.filter_column != miller.column or not miller.filter_text:
        miller = clear_filter(miller, books)
        miller = replace(miller, filter_column=miller.column)
    return replace(miller, filter_editing=True)


def set_filter_text(miller: MillerState, books: Sequence[Book], text: str) -> MillerState:
    """Replace the filter text and recompute the filtered list."""
    return _apply_filter(replace(miller, filter_text=text), books)


def move_selection(miller: MillerState, books: Sequence[Book], translation: str, delta: int) -> MillerState:
    """Move the active column's index by ``delta`` within its bounds."""
    if miller.column == BOOK_COLUMN:
        count = len(displayed_books(miller, books))
        index = max(0, min(count - 1, miller.book_index + delta))
        if count == 0 or index == miller.book_index:
            return miller
        moved = replace(miller, book_index=index, chapter_index=0, verse_index=0)
        if moved.filter_column == CHAPTER_COLUMN and moved.filtered_chapters is not None:
            moved = _apply_filter(moved, books)
        return moved
    if miller.column == CHAPTER_COLUMN:
        count = len(displayed_chapters(miller, books))
        index = max(0, min(count - 1, miller.chapter_index + delta))
        if count == 0 or index == miller.chapter_index:
            return miller
        return replace(miller, chapter_index=index, verse_index=0)
    count = len(displayed_verses(miller, books, translation))
    index = max(0, min(count - 1, miller.verse_index + delta))
    if count == 0 or index == miller.verse_index:
        return miller
    return replace(miller, verse_index=index)


def move_column(miller: MillerState, delta: int) -> MillerState:
    column = max(BOOK_COLUMN, min(LAST_COLUMN, miller.column + delta))
    if column == miller.column:
        return miller
    return replace(miller, column=column)


def set_verses(miller: MillerState, key: ChapterKey, verses: Sequence[Verse]) -> MillerState:
    """Attach the verse list for ``key`` to column 2."""
    updated = replace(miller, verses=tuple(verses), verses_key=key, filtered_verses=None, pending_token=0)
    if updated.filter_column == VERSE_COLUMN and updated.filter_text:
        return _apply_filter(updated, ())
    count = len(updated.verses or ())
    return replace(updated, verse_index=max(0, min(updated.verse_index, count - 1)))


__all__ = [
    "BOOK_COLUMN",
    "CHAPTER_COLUMN",
    "LAST_COLUMN",
    "VERSE_COLUMN",
    "book_matches",
    "clear_filter",
    "displayed_books",
    "displayed_chapters",
    "displayed_verses",
    "move_column",
    "move_selection",
    "seed_miller",
    "selected_book",
    "selected_chapter",
    "selected_verse",
    "set_filter_text",
    "set_verses",
    "target_key",
    "toggle_filter",
    "verse_matches",
    "verses_ready",
    "visible_window",
]
