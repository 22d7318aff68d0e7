"""Application state model for the reader runtime.

``AppState`` is the single explicit state record passed through
``update(state, event)``. Screens are a closed enum so overlay and mode
combinations that make no sense cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .models import Book, Translation, Verse

DEFAULT_TRANSLATION = "NLT"
DEFAULT_BOOK_ID = 1
DEFAULT_BOOK_NAME = "Genesis"
DEFAULT_CHAPTER = 1
COMPARISON_TRANSLATIONS: tuple[str, ...] = ("NLT", "KJV", "WEB")
COMPARISON_VERSE_LIMIT = 31
CHROME_ROWS = 5


class Screen(Enum):
    """Screen variants, overlay-on-reader combinations included."""

    READER = "reader"
    SIDEBAR = "sidebar"
    MILLER = "miller"
    SEARCH = "search"
    COMPARISON = "comparison"
    TRANSLATION_SELECT = "translation_select"
    THEME_SELECT = "theme_select"
    CACHE_MANAGER = "cache_manager"
    ABOUT = "about"


@dataclass(frozen=True)
class ChapterKey:
    """Identity of one chapter of one translation."""

    translation: str
    book_id: int
    chapter: int


@dataclass(frozen=True)
class ChapterRequest:
    """Outstanding reader chapter load.

    ``highlight`` is applied and ``scroll_verse`` is scrolled to when the
    matching result arrives.
    """

    token: int
    key: ChapterKey
    highlight: tuple[int, int] = (0, 0)
    scroll_verse: int = 0


@dataclass
class MillerState:
    """Three-column book/chapter/verse picker state."""

    column: int = 0
    book_index: int = 0
    chapter_index: int = 0
    verse_index: int = 0
    filter_text: str = ""
    filter_column: int = 0
    filter_editing: bool = False
    filtered_books: tuple[Book, ...] | None = None
    filtered_chapters: tuple[int, ...] | None = None
    filtered_verses: tuple[Verse, ...] | None = None
    verses: tuple[Verse, ...] | None = None
    verses_key: ChapterKey | None = None
    pending_token: int = 0


@dataclass
class AppState:
    """Complete reader state; cheap to copy because collections are tuples."""

    screen: Screen = Screen.READER
    translation: str = DEFAULT_TRANSLATION
    translations: tuple[Translation, ...] = ()
    books: tuple[Book, ...] = ()
    book_id: int = DEFAULT_BOOK_ID
    book_name: str = DEFAULT_BOOK_NAME
    chapter: int = DEFAULT_CHAPTER
    verses: tuple[Verse, ...] | None = None
    highlight_start: int = 0
    highlight_end: int = 0
    scroll_offset: int = 0
    width: int = 80
    height: int = 24
    content_lines: tuple[str, ...] = ()
    sidebar_selected: int = 0
    miller: MillerState = field(default_factory=MillerState)
    search_query: str = ""
    comparison_translations: tuple[str, ...] = COMPARISON_TRANSLATIONS
    parallel_verses: tuple[tuple[str, tuple[Verse, ...]], ...] | None = None
    parallel_key: ChapterKey | None = None
    translation_selected: int = 0
    theme_selected: int = 0
    cache_selected: int = 0
    theme_name: str = "catppuccin-mocha"
    no_color: bool = False
    cached_translations: frozenset[str] = frozenset()
    cache_size: int = 0
    cache_available: bool = True
    downloading: str = ""
    status_message: str = ""
    error: str = ""
    pending_chapter: ChapterRequest | None = None
    pending_books_token: int = 0
    pending_parallel_token: int = 0
    next_token: int = 1
    dirty: bool = True

    @property
    def loading(self) -> bool:
        return (
            self.pending_chapter is not None
            or self.pending_parallel_token != 0
            or self.pending_books_token != 0
        )

    @property
    def viewport_height(self) -> int:
        return max(1, self.height - CHROME_ROWS)

    @property
    def chapter_key(self) -> ChapterKey:
        return ChapterKey(self.translation, self.book_id, self.chapter)

    @property
    def max_scroll(self) -> int:
        return max(0, len(self.content_lines) - self.viewport_height)

    def copy(self) -> AppState:
        """Return a copy safe to mutate without touching this instance."""
        return replace(self, miller=replace(self.miller))

    def issue_token(self) -> int:
        token = self.next_token
        self.next_token += 1
        return token

    def book_by_id(self, book_id: int) -> Book | None:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def book_index(self, book_id: int) -> int:
        for index, book in enumerate(self.books):
            if book.id == book_id:
                return index
        return 0

    def cache_manager_codes(self) -> tuple[str, ...]:
        """Translation codes listed by the cache manager, cached extras last."""
        codes = [translation.code for translation in self.translations]
        known = set(codes)
        codes.extend(sorted(code for code in self.cached_translations if code not in known))
        return tuple(codes)


__all__ = [
    "AppState",
    "COMPARISON_TRANSLATIONS",
    "COMPARISON_VERSE_LIMIT",
    "ChapterKey",
    "ChapterRequest",
    "MillerState",
    "Screen",
]
