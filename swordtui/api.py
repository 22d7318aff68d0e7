"""HTTP client for the bolls.life scripture service.

Chapter and parallel-verse reads go to the offline cache first when the
requested translations have been downloaded.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import requests

from .cache import CacheError, TranslationCache
from .models import Book, Translation, Verse, books_from_payload, verses_from_payload

logger = logging.getLogger(__name__)

BASE_URL = "https://bolls.life"
DEFAULT_TIMEOUT_SECONDS = 15.0
TRANSLATION_LANGUAGE = "English"


class ApiError(Exception):
    """Raised when the service is unreachable or replies with something unusable."""


class BollsClient:
    """Thin wrapper over a ``requests.Session`` bound to one base URL."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        cache: TranslationCache | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.cache = cache

    def _decode(self, response: requests.Response) -> object:
        if response.status_code != 200:
            raise ApiError(f"API returned status {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"malformed response: {exc}") from exc

    def _get(self, path: str) -> object:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(f"request failed: {exc}") from exc
        return self._decode(response)

    def _post(self, path: str, payload: dict) -> object:
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(f"request failed: {exc}") from exc
        return self._decode(response)

    def _cached(self, translation: str) -> bool:
        return self.cache is not None and self.cache.is_cached(translation)

    def get_translations(self) -> tuple[Translation, ...]:
        """Translations of the English language group."""
        groups = self._get("/static/bolls/app/views/languages.json")
        if not isinstance(groups, list):
            raise ApiError("malformed response: translation list is not a list")
        for group in groups:
            if isinstance(group, dict) and group.get("language") == TRANSLATION_LANGUAGE:
                items = group.get("translations") or []
                return tuple(
                    Translation.from_payload(item)
                    for item in items
                    if isinstance(item, dict) and item.get("short_name")
                )
        return ()

    def get_books(self, translation: str) -> tuple[Book, ...]:
        payload = self._get(f"/get-books/{translation}/")
        try:
            return books_from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"malformed response: {exc}") from exc

    def get_chapter(self, translation: str, book_id: int, chapter: int) -> tuple[Verse, ...]:
        if self._cached(translation):
            try:
                return self.cache.get_chapter(translation, book_id, chapter)
            except CacheError as exc:
                logger.warning("Cache read failed, using the API: %s", exc)
        payload = self._get(f"/get-text/{translation}/{book_id}/{chapter}/")
        try:
            return verses_from_payload(payload, book_id=book_id, chapter=chapter)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"malformed response: {exc}") from exc

    def get_parallel_verses(
        self,
        translations: Sequence[str],
        book_id: int,
        chapter: int,
        verse_numbers: Sequence[int],
    ) -> dict[str, tuple[Verse, ...]]:
        """Map each translation to its verses among ``verse_numbers``.

        Verses past the end of the chapter are simply absent.
        """
        wanted = set(verse_numbers)
        if translations and all(self._cached(code) for code in translations):
            try:
                return {
                    code: tuple(
                        verse for verse in self.cache.get_chapter(code, book_id, chapter) if verse.number in wanted
                    )
                    for code in translations
                }
            except CacheError as exc:
                logger.warning("Cache read failed, using the API: %s", exc)

        payload = self._post(
            "/get-parallel-verses/",
            {
                "translations": list(translations),
                "verses": list(verse_numbers),
                "chapter": chapter,
                "book": book_id,
            },
        )
        if not isinstance(payload, list):
            raise ApiError("malformed response: parallel verses are not a list")
        result: dict[str, tuple[Verse, ...]] = {}
        for index, code in enumerate(translations):
            if index >= len(payload):
                break
            entries = payload[index]
            if not isinstance(entries, list):
                continue
            try:
                verses = verses_from_payload(entries, book_id=book_id, chapter=chapter)
            except (KeyError, TypeError, ValueError) as exc:
                raise ApiError(f"malformed response: {exc}") from exc
            result[code] = tuple(verse for verse in verses if verse.number in wanted)
        return result


__all__ = ["ApiError", "BASE_URL", "BollsClient"]
