"""Background fetch worker tests with a fake client and cache."""

from __future__ import annotations

import time
import unittest
from unittest import mock

from swordtui.api import ApiError
from swordtui.events import (
    BooksLoaded,
    CacheListLoaded,
    ChapterLoaded,
    ClearTranslationCache,
    DownloadFinished,
    DownloadTranslation,
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
from swordtui.models import Book, Translation, Verse
from swordtui.runtime.worker import FetchWorker, failure_kind
from swordtui.state import ChapterKey

KEY = ChapterKey("KJV", 43, 3)
VERSES = (Verse(16, "For God so loved", 43, 3),)


def _worker(cache=None) -> tuple[FetchWorker, mock.Mock]:
    client = mock.Mock()
    client.get_translations.return_value = (Translation("KJV", "King James"),)
    client.get_books.return_value = (Book(43, "John", 21),)
    client.get_chapter.return_value = VERSES
    client.get_parallel_verses.return_value = {"WEB": VERSES, "KJV": VERSES}
    return FetchWorker(client, cache), client


def _drain_until(worker: FetchWorker, count: int, timeout: float = 2.0) -> list:
    deadline = time.monotonic() + timeout
    events: list = []
    while len(events) < count and time.monotonic() < deadline:
        events.extend(worker.drain_results())
        time.sleep(0.005)
    return events


class PerformTests(unittest.TestCase):
    def test_fetch_results(self) -> None:
        worker, client = _worker()
        self.assertEqual(worker.perform(FetchTranslations()), [TranslationsLoaded(client.get_translations.return_value)])
        self.assertEqual(
            worker.perform(FetchBooks(4, "KJV")),
            [BooksLoaded(4, "KJV", (Book(43, "John", 21),))],
        )
        self.assertEqual(worker.perform(FetchChapter(5, KEY)), [ChapterLoaded(5, KEY, VERSES)])
        self.assertEqual(worker.perform(FetchChapter(6, KEY, preview=True)), [PreviewLoaded(6, KEY, VERSES)])
        client.get_chapter.assert_called_with("KJV", 43, 3)

    def test_parallel_keeps_requested_order(self) -> None:
        worker, client = _worker()
        events = worker.perform(FetchParallel(7, KEY, ("NLT", "KJV", "WEB"), (16,)))
        self.assertEqual(events, [ParallelLoaded(7, KEY, (("KJV", VERSES), ("WEB", VERSES)))])
        client.get_parallel_verses.assert_called_once_with(("NLT", "KJV", "WEB"), 43, 3, (16,))

    def test_cache_operations(self) -> None:
        cache = mock.Mock()
        cache.list_cached.return_value = ["KJV"]
        cache.cache_size.return_value = 1234
        worker, _client = _worker(cache)

        self.assertEqual(worker.perform(FetchCacheList()), [CacheListLoaded(("KJV",), 1234)])
        self.assertEqual(worker.perform(DownloadTranslation("WEB")), [DownloadFinished("WEB")])
        cache.download_translation.assert_called_once_with("WEB")
        self.assertEqual(worker.perform(RemoveCachedTranslation("KJV")), [CacheListLoaded(("KJV",), 1234)])
        cache.remove_translation.assert_called_once_with("KJV")
        self.assertEqual(worker.perform(ClearTranslationCache()), [CacheListLoaded(("KJV",), 1234)])
        cache.clear_cache.assert_called_once_with()

    def test_missing_cache_reports_unavailable(self) -> None:
        worker, _client = _worker(None)
        self.assertEqual(worker.perform(FetchCacheList()), [CacheListLoaded((), 0, available=False)])


class SubmitTests(unittest.TestCase):
    def test_result_arrives_on_queue(self) -> None:
        worker, _client = _worker()
        worker.submit(FetchChapter(3, KEY)).join(timeout=2)
        self.assertEqual(_drain_until(worker, 1), [ChapterLoaded(3, KEY, VERSES)])
        self.assertEqual(worker.drain_results(), [])

    def test_api_error_becomes_failure_event(self) -> None:
        worker, client = _worker()
        client.get_chapter.side_effect = ApiError("API returned status 500")
        with self.assertLogs("swordtui.runtime.worker", level="WARNING"):
            worker.submit(FetchChapter(9, KEY, preview=True)).join(timeout=2)
        self.assertEqual(_drain_until(worker, 1), [FetchFailed("preview", 9, "API returned status 500")])

    def test_download_without_cache_fails(self) -> None:
        worker, _client = _worker(None)
        with self.assertLogs("swordtui.runtime.worker", level="WARNING"):
            worker.submit(DownloadTranslation("KJV")).join(timeout=2)
        events = _drain_until(worker, 1)
        self.assertEqual(len(events), 1)
        self.assertEqual((events[0].kind, events[0].token), ("download", 0))

    def test_unexpected_error_is_reported(self) -> None:
        worker, client = _worker()
        client.get_books.side_effect = RuntimeError("boom")
        with self.assertLogs("swordtui.runtime.worker", level="ERROR"):
            worker.submit(FetchBooks(2, "KJV")).join(timeout=2)
        self.assertEqual(_drain_until(worker, 1), [FetchFailed("books", 2, "boom")])


class FailureKindTests(unittest.TestCase):
    def test_kinds(self) -> None:
        self.assertEqual(failure_kind(FetchChapter(1, KEY)), "chapter")
        self.assertEqual(failure_kind(FetchChapter(1, KEY, preview=True)), "preview")
        self.assertEqual(failure_kind(FetchParallel(1, KEY, (), ())), "parallel")
        self.assertEqual(failure_kind(RemoveCachedTranslation("KJV")), "remove")
        self.assertEqual(failure_kind(ClearTranslationCache()), "clear")
        self.assertEqual(failure_kind(FetchCacheList()), "cache_list")


if __name__ == "__main__":
    unittest.main()
