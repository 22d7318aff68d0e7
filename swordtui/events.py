"""Typed events consumed by ``update`` and effect descriptors it returns.

Events describe something that happened (a key, a resize, a finished
fetch). Effects describe work the runtime must perform; ``update`` never
performs I/O itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Book, Translation, Verse
from .state import ChapterKey


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class TranslationsLoaded:
    translations: tuple[Translation, ...]


@dataclass(frozen=True)
class BooksLoaded:
    token: int
    translation: str
    books: tuple[Book, ...]


@dataclass(frozen=True)
class ChapterLoaded:
    token: int
    key: ChapterKey
    verses: tuple[Verse, ...]


@dataclass(frozen=True)
class PreviewLoaded:
    """Verse list fetched for the picker's verse column."""

    token: int
    key: ChapterKey
    verses: tuple[Verse, ...]


@dataclass(frozen=True)
class ParallelLoaded:
    token: int
    key: ChapterKey
    verses: tuple[tuple[str, tuple[Verse, ...]], ...]


@dataclass(frozen=True)
class CacheListLoaded:
    cached: tuple[str, ...]
    size_bytes: int
    available: bool = True


@dataclass(frozen=True)
class DownloadFinished:
    translation: str


@dataclass(frozen=True)
class FetchFailed:
    """A collaborator call failed; ``kind`` names which one."""

    kind: str
    token: int
    message: str


Event = (
    KeyPressed
    | Resized
    | TranslationsLoaded
    | BooksLoaded
    | ChapterLoaded
    | PreviewLoaded
    | ParallelLoaded
    | CacheListLoaded
    | DownloadFinished
    | FetchFailed
)


@dataclass(frozen=True)
class FetchTranslations:
    pass


@dataclass(frozen=True)
class FetchBooks:
    token: int
    translation: str


@dataclass(frozen=True)
class FetchChapter:
    token: int
    key: ChapterKey
    preview: bool = False


@dataclass(frozen=True)
class FetchParallel:
    token: int
    key: ChapterKey
    translations: tuple[str, ...]
    verse_numbers: tuple[int, ...]


@dataclass(frozen=True)
class FetchCacheList:
    pass


@dataclass(frozen=True)
class DownloadTranslation:
    translation: str


@dataclass(frozen=True)
class RemoveCachedTranslation:
    translation: str


@dataclass(frozen=True)
class ClearTranslationCache:
    pass


@dataclass(frozen=True)
class CopyToClipboard:
    text: str


@dataclass(frozen=True)
class SaveSettings:
    translation: str
    book_id: int
    chapter: int
    theme: str


@dataclass(frozen=True)
class Quit:
    pass


Effect = (
    FetchTranslations
    | FetchBooks
    | FetchChapter
    | FetchParallel
    | FetchCacheList
    | DownloadTranslation
    | RemoveCachedTranslation
    | ClearTranslationCache
    | CopyToClipboard
    | SaveSettings
    | Quit
)

FETCH_EFFECTS = (
    FetchTranslations,
    FetchBooks,
    FetchChapter,
    FetchParallel,
    FetchCacheList,
    DownloadTranslation,
    RemoveCachedTranslation,
    ClearTranslationCache,
)
