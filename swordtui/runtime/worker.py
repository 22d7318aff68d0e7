"""Background execution of fetch effects.

Each effect runs on its own daemon thread and reports one or more result
events on a queue that the main loop drains between key reads. Collaborator
failures become ``FetchFailed`` events; nothing raised here reaches the loop.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue

from ..api import ApiError, BollsClient
from ..cache import CacheError, TranslationCache
from ..events import (
    BooksLoaded,
    CacheListLoaded,
    ChapterLoaded,
    ClearTranslationCache,
    DownloadFinished,
    DownloadTranslation,
    Effect,
    Event,
    FetchBooks,
    FetchCacheList,
    FetchChapter,
    FetchFailed,
    FetchParallel,
    FetchTranslations,
    ParallelLoaded,
    PreviewLoaded,
    RemoveCachedTranslation,
    TranslationsLoaded,
)

logger = logging.getLogger(__name__)


def failure_kind(effect: Effect) -> str:
    if isinstance(effect, FetchChapter):
        return "preview" if effect.preview else "chapter"
    if isinstance(effect, FetchBooks):
        return "books"
    if isinstance(effect, FetchParallel):
        return "parallel"
    if isinstance(effect, FetchTranslations):
        return "translations"
    if isinstance(effect, DownloadTranslation):
        return "download"
    if isinstance(effect, RemoveCachedTranslation):
        return "remove"
    if isinstance(effect, ClearTranslationCache):
        return "clear"
    return "cache_list"


class FetchWorker:
    """Runs fetch effects against the API client and the offline cache."""

    def __init__(self, client: BollsClient, cache: TranslationCache | None) -> None:
        self.client = client
        self.cache = cache
        self._results: Queue[Event] = Queue()

    def submit(self, effect: Effect) -> threading.Thread:
        worker = threading.Thread(
            target=self._run,
            args=(effect,),
            name=f"sword-tui-{failure_kind(effect)}",
            daemon=True,
        )
        worker.start()
        return worker

    def _run(self, effect: Effect) -> None:
        try:
            events = self.perform(effect)
        except (ApiError, CacheError) as exc:
            logger.warning("%s failed: %s", type(effect).__name__, exc)
            events = [FetchFailed(failure_kind(effect), getattr(effect, "token", 0), str(exc))]
        except Exception as exc:
            logger.exception("Unexpected failure running %s", type(effect).__name__)
            events = [FetchFailed(failure_kind(effect), getattr(effect, "token", 0), str(exc) or type(exc).__name__)]
        for event in events:
            self._results.put(event)

    def _cache_list_event(self) -> CacheListLoaded:
        if self.cache is None:
            return CacheListLoaded(cached=(), size_bytes=0, available=False)
        return CacheListLoaded(cached=tuple(self.cache.list_cached()), size_bytes=self.cache.cache_size())

    def _require_cache(self) -> TranslationCache:
        if self.cache is None:
            raise CacheError("offline cache is unavailable")
        return self.cache

    def perform(self, effect: Effect) -> list[Event]:
        """Run ``effect`` synchronously and return the resulting events."""
        if isinstance(effect, FetchTranslations):
            return [TranslationsLoaded(self.client.get_translations())]
        if isinstance(effect, FetchBooks):
            books = self.client.get_books(effect.translation)
            return [BooksLoaded(token=effect.token, translation=effect.translation, books=books)]
        if isinstance(effect, FetchChapter):
            key = effect.key
            verses = self.client.get_chapter(key.translation, key.book_id, key.chapter)
            if effect.preview:
                return [PreviewLoaded(token=effect.token, key=key, verses=verses)]
            return [ChapterLoaded(token=effect.token, key=key, verses=verses)]
        if isinstance(effect, FetchParallel):
            key = effect.key
            found = self.client.get_parallel_verses(
                effect.translations, key.book_id, key.chapter, effect.verse_numbers
            )
            ordered = tuple((code, found[code]) for code in effect.translations if code in found)
            return [ParallelLoaded(token=effect.token, key=key, verses=ordered)]
        if isinstance(effect, FetchCacheList):
            return [self._cache_list_event()]
        if isinstance(effect, DownloadTranslation):
            self._require_cache().download_translation(effect.translation)
            return [DownloadFinished(effect.translation)]
        if isinstance(effect, RemoveCachedTranslation):
            self._require_cache().remove_translation(effect.translation)
            return [self._cache_list_event()]
        if isinstance(effect, ClearTranslationCache):
            self._require_cache().clear_cache()
            return [self._cache_list_event()]
        raise TypeError(f"not a fetch effect: {effect!r}")

    def drain_results(self) -> list[Event]:
        """Drain all completed result events."""
        out: list[Event] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = ["FetchWorker", "failure_kind"]
