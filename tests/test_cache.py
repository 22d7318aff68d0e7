"""Offline translation cache tests against a temporary directory."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest import mock

import requests

from swordtui.cache import CacheError, TranslationCache, open_cache
from swordtui.models import Verse

RECORDS = [
    {"pk": 1, "translation": "KJV", "book": 43, "chapter": 3, "verse": 16, "text": "For God so loved"},
    {"pk": 2, "translation": "KJV", "book": 43, "chapter": 3, "verse": 17, "text": "For God sent not"},
    {"pk": 3, "translation": "KJV", "book": 43, "chapter": 4, "verse": 1, "text": "When therefore"},
]


def _zip_bytes(members: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def _session(status: int = 200, body: bytes = b"") -> mock.Mock:
    response = mock.Mock(status_code=status)
    response.iter_content.return_value = [body[:10], body[10:]]
    session = mock.Mock()
    session.get.return_value = response
    return session


class TranslationCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cache_dir = Path(self._tmp.name) / "translations"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _cache(self, session: mock.Mock | None = None) -> TranslationCache:
        return TranslationCache(self.cache_dir, session=session or _session())

    def test_download_stores_json_member(self) -> None:
        session = _session(body=_zip_bytes({"KJV/KJV.json": json.dumps(RECORDS)}))
        cache = self._cache(session)
        cache.download_translation("KJV")

        session.get.assert_called_once()
        self.assertTrue(session.get.call_args.args[0].endswith("/KJV.zip"))
        self.assertTrue(cache.is_cached("KJV"))
        self.assertEqual(cache.list_cached(), ["KJV"])
        self.assertFalse(list(self.cache_dir.glob("*.part")))

    def test_chapter_read_filters_records(self) -> None:
        self.cache_dir.mkdir(parents=True)
        (self.cache_dir / "KJV.json").write_text(json.dumps(RECORDS), encoding="utf-8")
        verses = self._cache().get_chapter("KJV", 43, 3)
        self.assertEqual(
            verses,
            (Verse(16, "For God so loved", 43, 3), Verse(17, "For God sent not", 43, 3)),
        )

    def test_uncached_chapter_read_raises(self) -> None:
        with self.assertRaises(CacheError):
            self._cache().get_chapter("WEB", 1, 1)

    def test_bad_status_raises(self) -> None:
        with self.assertRaisesRegex(CacheError, "status 404"):
            self._cache(_session(status=404)).download_translation("NOPE")

    def test_archive_without_json_raises(self) -> None:
        cache = self._cache(_session(body=_zip_bytes({"readme.txt": "hello"})))
        with self.assertRaisesRegex(CacheError, "no JSON"):
            cache.download_translation("KJV")
        self.assertFalse(cache.is_cached("KJV"))

    def test_corrupt_archive_raises(self) -> None:
        with self.assertRaises(CacheError):
            self._cache(_session(body=b"not a zip at all")).download_translation("KJV")

    def test_network_error_raises_cache_error(self) -> None:
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("offline")
        with self.assertRaisesRegex(CacheError, "offline"):
            self._cache(session).download_translation("KJV")

    def test_remove_size_and_clear(self) -> None:
        cache = self._cache()
        (self.cache_dir / "KJV.json").write_text("[]", encoding="utf-8")
        (self.cache_dir / "WEB.json").write_text("[1]", encoding="utf-8")
        self.assertEqual(cache.cache_size(), 5)

        cache.remove_translation("KJV")
        self.assertEqual(cache.list_cached(), ["WEB"])
        with self.assertRaises(CacheError):
            cache.remove_translation("KJV")

        cache.clear_cache()
        self.assertEqual(cache.list_cached(), [])
        self.assertTrue(self.cache_dir.is_dir())

    def test_open_cache_returns_none_when_directory_unusable(self) -> None:
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("", encoding="utf-8")
        with self.assertLogs("swordtui.cache", level="WARNING"):
            self.assertIsNone(open_cache(blocker / "translations", session=mock.Mock()))


if __name__ == "__main__":
    unittest.main()
