"""Free-form scripture reference parsing.

Accepts inputs such as ``Gen 1:1-3``, ``john 3:16``, ``43 3:16`` or just
``Psalms 23``. Book tokens resolve by full name, then a fixed abbreviation
table, then name prefix.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .models import Book

_STRUCTURED_RE = re.compile(r"^([a-zA-Z0-9\s]+)\s+(\d+):(\d+)(?:-(\d+))?$")
_CHAPTER_SEGMENT_RE = re.compile(r"^\d[^\s]*$")

BOOK_ABBREVIATIONS: dict[str, tuple[str, ...]] = {
    "genesis": ("gen", "ge", "gn"),
    "exodus": ("exo", "ex", "exod"),
    "leviticus": ("lev", "le", "lv"),
    "numbers": ("num", "nu", "nm", "nb"),
    "deuteronomy": ("deut", "de", "dt"),
    "joshua": ("josh", "jos", "jsh"),
    "judges": ("judg", "jdg", "jg", "jdgs"),
    "ruth": ("rut", "ru", "rth"),
    "1 samuel": ("1sam", "1sa", "1samuel", "1 sam", "1 sa", "1s"),
    "2 samuel": ("2sam", "2sa", "2samuel", "2 sam", "2 sa", "2s"),
    "1 kings": ("1king", "1kgs", "1ki", "1k", "1 kgs"),
    "2 kings": ("2king", "2kgs", "2ki", "2k", "2 kgs"),
    "1 chronicles": ("1chron", "1chr", "1ch", "1 chr"),
    "2 chronicles": ("2chron", "2chr", "2ch", "2 chr"),
    "ezra": ("ezr", "ez"),
    "nehemiah": ("neh", "ne"),
    "esther": ("est", "es"),
    "job": ("jb",),
    "psalms": ("psalm", "psa", "ps", "pss"),
    "proverbs": ("prov", "pro", "pr", "prv"),
    "ecclesiastes": ("eccl", "ecc", "ec", "qoh"),
    "song of solomon": ("song", "sos", "so", "canticle", "canticles", "song of songs"),
    "isaiah": ("isa", "is"),
    "jeremiah": ("jer", "je", "jr"),
    "lamentations": ("lam", "la"),
    "ezekiel": ("ezek", "eze", "ezk"),
    "daniel": ("dan", "da", "dn"),
    "hosea": ("hos", "ho"),
    "joel": ("joe", "jl"),
    "amos": ("amo", "am"),
    "obadiah": ("obad", "ob"),
    "jonah": ("jon", "jnh"),
    "micah": ("mic", "mi"),
    "nahum": ("nah", "na"),
    "habakkuk": ("hab", "hb"),
    "zephaniah": ("zeph", "zep", "zp"),
    "haggai": ("hag", "hg"),
    "zechariah": ("zech", "zec", "zc"),
    "malachi": ("mal", "ml"),
    "matthew": ("matt", "mat", "mt"),
    "mark": ("mar", "mrk", "mk", "mr"),
    "luke": ("luk", "lk"),
    "john": ("joh", "jhn", "jn"),
    "acts": ("act", "ac"),
    "romans": ("rom", "ro", "rm"),
    "1 corinthians": ("1cor", "1co", "1 cor"),
    "2 corinthians": ("2cor", "2co", "2 cor"),
    "galatians": ("gal", "ga"),
    "ephesians": ("eph", "ephes"),
    "philippians": ("phil", "php", "pp"),
    "colossians": ("col", "co"),
    "1 thessalonians": ("1thess", "1th", "1 thess"),
    "2 thessalonians": ("2thess", "2th", "2 thess"),
    "1 timothy": ("1tim", "1ti", "1 tim"),
    "2 timothy": ("2tim", "2ti", "2 tim"),
    "titus": ("tit", "ti"),
    "philemon": ("philem", "phm", "pm"),
    "hebrews": ("heb", "he"),
    "james": ("jam", "jas", "jm"),
    "1 peter": ("1pet", "1pe", "1pt", "1p", "1 pet"),
    "2 peter": ("2pet", "2pe", "2pt", "2p", "2 pet"),
    "1 john": ("1john", "1jn", "1jo", "1j"),
    "2 john": ("2john", "2jn", "2jo", "2j"),
    "3 john": ("3john", "3jn", "3jo", "3j"),
    "jude": ("jud", "jd"),
    "revelation": ("rev", "re", "rv"),
}


class ReferenceParseError(ValueError):
    """Base class for rejected reference input."""


class EmptyReferenceError(ReferenceParseError):
    def __init__(self) -> None:
        super().__init__("empty reference")


class BookNotFoundError(ReferenceParseError):
    def __init__(self, token: str) -> None:
        super().__init__(f"book not found: {token}")
        self.token = token


class InvalidChapterError(ReferenceParseError):
    def __init__(self, segment: str) -> None:
        super().__init__(f"invalid chapter: {segment}")
        self.segment = segment


class InvalidVerseError(ReferenceParseError):
    def __init__(self, segment: str) -> None:
        super().__init__(f"invalid verse: {segment}")
        self.segment = segment


@dataclass(frozen=True)
class Reference:
    """Parsed reference. ``verse_start == 0`` means the whole chapter."""

    book_id: int
    chapter: int
    verse_start: int = 0
    verse_end: int = 0


def match_book(token: str, books: Sequence[Book]) -> Book | None:
    """Resolve a book name or abbreviation against ``books``.

    Tries exact case-insensitive names first, then the abbreviation table,
    then the first book whose name starts with ``token``.
    """
    query = " ".join(token.lower().split())
    if not query:
        return None
    for book in books:
        if book.name.lower() == query:
            return book
    for book in books:
        if query in BOOK_ABBREVIATIONS.get(book.name.lower(), ()):
            return book
    for book in books:
        if book.name.lower().startswith(query):
            return book
    return None


def _resolve_book_id(token: str, books: Sequence[Book]) -> int:
    token = token.strip()
    if token.isdecimal():
        book_id = int(token)
        if books and not any(book.id == book_id for book in books):
            raise BookNotFoundError(token)
        if book_id <= 0:
            raise BookNotFoundError(token)
        return book_id
    if not books:
        raise BookNotFoundError(token)
    book = match_book(token, books)
    if book is None:
        raise BookNotFoundError(token)
    return book.id


def _check_chapter(book_id: int, chapter: int, books: Sequence[Book], segment: str) -> None:
    if chapter <= 0:
        raise InvalidChapterError(segment)
    for book in books:
        if book.id == book_id and book.chapter_count and chapter > book.chapter_count:
            raise InvalidChapterError(segment)


def _parse_verse_range(segment: str) -> tuple[int, int]:
    start_text, sep, end_text = segment.partition("-")
    if not start_text.isdecimal() or (sep and not end_text.isdecimal()):
        raise InvalidVerseError(segment)
    start = int(start_text)
    end = int(end_text) if sep else start
    if start <= 0 or end < start:
        raise InvalidVerseError(segment)
    return start, end


def _parse_structured(text: str, books: Sequence[Book]) -> Reference | None:
    match = _STRUCTURED_RE.match(text)
    if match is None:
        return None
    book_id = _resolve_book_id(match.group(1), books)
    chapter = int(match.group(2))
    _check_chapter(book_id, chapter, books, match.group(2))
    verse_segment = match.group(3) if match.group(4) is None else f"{match.group(3)}-{match.group(4)}"
    verse_start, verse_end = _parse_verse_range(verse_segment)
    return Reference(book_id, chapter, verse_start, verse_end)


def _parse_fallback(text: str, books: Sequence[Book]) -> Reference:
    parts = text.split()
    if len(parts) >= 2 and _CHAPTER_SEGMENT_RE.match(parts[-1]):
        book_token = " ".join(parts[:-1])
        segment = parts[-1]
    else:
        book_token = " ".join(parts)
        segment = ""

    book_id = _resolve_book_id(book_token, books)
    if not segment:
        return Reference(book_id, 1)

    chapter_text, sep, verse_text = segment.partition(":")
    if not chapter_text.isdecimal():
        raise InvalidChapterError(chapter_text)
    chapter = int(chapter_text)
    _check_chapter(book_id, chapter, books, chapter_text)
    if not sep:
        return Reference(book_id, chapter)
    verse_start, verse_end = _parse_verse_range(verse_text)
    return Reference(book_id, chapter, verse_start, verse_end)


def parse_reference(text: str, books: Sequence[Book]) -> Reference:
    """Parse user reference input into a :class:`Reference`.

    The structured ``<book> <chapter>:<verse>[-<verse>]`` grammar is tried
    first, then the whitespace-split form where chapter and verse are
    optional. Raises a :class:`ReferenceParseError` subclass on rejection.
    """
    stripped = (text or "").strip()
    if not stripped:
        raise EmptyReferenceError()
    parsed = _parse_structured(stripped, books)
    if parsed is not None:
        return parsed
    return _parse_fallback(stripped, books)


__all__ = [
    "BOOK_ABBREVIATIONS",
    "BookNotFoundError",
    "EmptyReferenceError",
    "InvalidChapterError",
    "InvalidVerseError",
    "Reference",
    "ReferenceParseError",
    "match_book",
    "parse_reference",
]
