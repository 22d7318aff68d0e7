"""Immutable scripture records and their JSON payload decoding.

Payload shapes follow the bolls.life endpoints and the offline translation
dumps, which share field names.
"""

from __future__ import annotations

from dataclasses import dataclass

OLD_TESTAMENT_LAST_BOOK = 39


@dataclass(frozen=True)
class Verse:
    """One verse of one chapter, text kept exactly as received."""

    number: int
    text: str
    book_id: int
    chapter: int

    @classmethod
    def from_payload(cls, payload: dict, *, book_id: int = 0, chapter: int = 0) -> Verse:
        """Build a verse from an API/cache record, filling missing location fields."""
        return cls(
            number=int(payload["verse"]),
            text=str(payload.get("text") or ""),
            book_id=int(payload.get("book") or book_id),
            chapter=int(payload.get("chapter") or chapter),
        )


@dataclass(frozen=True)
class Book:
    """Book metadata for one translation."""

    id: int
    name: str
    chapter_count: int

    @property
    def is_old_testament(self) -> bool:
        return self.id <= OLD_TESTAMENT_LAST_BOOK

    @classmethod
    def from_payload(cls, payload: dict) -> Book:
        return cls(
            id=int(payload["bookid"]),
            name=str(payload.get("name") or "").strip(),
            chapter_count=max(0, int(payload.get("chapters") or 0)),
        )


@dataclass(frozen=True)
class Translation:
    """Selectable translation as listed by the service."""

    code: str
    full_name: str
    updated: int = 0
    direction: str = "ltr"

    @classmethod
    def from_payload(cls, payload: dict) -> Translation:
        return cls(
            code=str(payload["short_name"]),
            full_name=str(payload.get("full_name") or payload["short_name"]),
            updated=int(payload.get("updated") or 0),
            direction=str(payload.get("dir") or "ltr"),
        )


def verses_from_payload(payload: object, *, book_id: int, chapter: int) -> tuple[Verse, ...]:
    """Decode a chapter payload, skipping entries that are not verse records."""
    if not isinstance(payload, list):
        raise ValueError("chapter payload is not a list")
    verses: list[Verse] = []
    for item in payload:
        if not isinstance(item, dict) or "verse" not in item:
            continue
        verses.append(Verse.from_payload(item, book_id=book_id, chapter=chapter))
    return tuple(verses)


def books_from_payload(payload: object) -> tuple[Book, ...]:
    """Decode a book list payload in canonical id order."""
    if not isinstance(payload, list):
        raise ValueError("book payload is not a list")
    books = [Book.from_payload(item) for item in payload if isinstance(item, dict) and "bookid" in item]
    return tuple(sorted(books, key=lambda book: book.id))


__all__ = [
    "Book",
    "OLD_TESTAMENT_LAST_BOOK",
    "Translation",
    "Verse",
    "books_from_payload",
    "verses_from_payload",
]
