"""Offline translation cache.

A downloaded translation is one JSON array of verse records stored as
``<cache_dir>/<CODE>.json``. Chapters are served from it without network
access once the file exists.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
import zipfile
from pathlib import Path

import requests
from platformdirs import user_cache_dir

from .models import Verse, verses_from_payload

logger = logging.getLogger(__name__)

APP_NAME = "sword-tui"
DOWNLOAD_BASE_URL = "https://bolls.life/static/translations"
DOWNLOAD_TIMEOUT_SECONDS = 120.0
DOWNLOAD_CHUNK_BYTES = 1024 * 1024


class CacheError(Exception):
    """Raised when a translation cannot be downloaded, read or removed."""


def default_cache_dir() -> Path:
    return Path(user_cache_dir(APP_NAME, appauthor=False)) / "translations"


class TranslationCache:
    """Translation files on disk plus an in-memory copy of the last one read."""

    def __init__(self, cache_dir: Path | None = None, session: requests.Session | None = None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._loaded: tuple[str, list[dict]] | None = None

    def _path(self, translation: str) -> Path:
        return self.cache_dir / f"{translation}.json"

    def is_cached(self, translation: str) -> bool:
        return self._path(translation).is_file()

    def download_translation(self, translation: str) -> None:
        """Fetch the translation archive and store its JSON member."""
        url = f"{DOWNLOAD_BASE_URL}/{translation}.zip"
        logger.info("Downloading %s from %s", translation, url)
        try:
            response = self._session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            raise CacheError(f"failed to download {translation}: {exc}") from exc
        if response.status_code != 200:
            raise CacheError(f"download failed with status {response.status_code}")

        fd, archive_name = tempfile.mkstemp(prefix=f"{translation}-", suffix=".zip")
        archive_path = Path(archive_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_BYTES):
                    if chunk:
                        handle.write(chunk)
            self._extract_json(archive_path, translation)
        except (OSError, zipfile.BadZipFile, requests.RequestException) as exc:
            raise CacheError(f"failed to store {translation}: {exc}") from exc
        finally:
            archive_path.unlink(missing_ok=True)
        with self._lock:
            if self._loaded is not None and self._loaded[0] == translation:
                self._loaded = None

    def _extract_json(self, archive_path: Path, translation: str) -> None:
        with zipfile.ZipFile(archive_path) as archive:
            member = next((info for info in archive.infolist() if info.filename.endswith(".json")), None)
            if member is None:
                raise CacheError("no JSON file found in ZIP")
            target = self._path(translation)
            partial = target.with_suffix(".json.part")
            with archive.open(member) as source, partial.open("wb") as out:
                shutil.copyfileobj(source, out)
            partial.replace(target)

    def _records(self, translation: str) -> list[dict]:
        with self._lock:
            if self._loaded is not None and self._loaded[0] == translation:
                return self._loaded[1]
        if not self.is_cached(translation):
            raise CacheError(f"translation {translation} not cached")
        try:
            data = json.loads(self._path(translation).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CacheError(f"cannot read cached {translation}: {exc}") from exc
        if not isinstance(data, list):
            raise CacheError(f"cached {translation} is not a verse list")
        records = [item for item in data if isinstance(item, dict)]
        with self._lock:
            self._loaded = (translation, records)
        return records

    def get_chapter(self, translation: str, book_id: int, chapter: int) -> tuple[Verse, ...]:
        records = self._records(translation)
        matching = [item for item in records if item.get("book") == book_id and item.get("chapter") == chapter]
        return verses_from_payload(matching, book_id=book_id, chapter=chapter)

    def list_cached(self) -> list[str]:
        try:
            entries = list(self.cache_dir.iterdir())
        except OSError as exc:
            raise CacheError(f"cannot list cache: {exc}") from exc
        return sorted(entry.stem for entry in entries if entry.is_file() and entry.suffix == ".json")

    def remove_translation(self, translation: str) -> None:
        try:
            self._path(translation).unlink()
        except OSError as exc:
            raise CacheError(f"cannot remove {translation}: {exc}") from exc
        with self._lock:
            if self._loaded is not None and self._loaded[0] == translation:
                self._loaded = None
        logger.info("Removed cached translation %s", translation)

    def clear_cache(self) -> None:
        try:
            shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheError(f"cannot clear cache: {exc}") from exc
        with self._lock:
            self._loaded = None

    def cache_size(self) -> int:
        """Total bytes of the files directly under the cache directory."""
        total = 0
        try:
            entries = list(self.cache_dir.iterdir())
        except OSError as exc:
            raise CacheError(f"cannot size cache: {exc}") from exc
        for entry in entries:
            try:
                if entry.is_file():
                    total += entry.stat().st_size
            except OSError:
                continue
        return total


def open_cache(cache_dir: Path | None = None, session: requests.Session | None = None) -> TranslationCache | None:
    """Create the cache, or return ``None`` when its directory is unusable."""
    try:
        return TranslationCache(cache_dir, session=session)
    except OSError as exc:
        logger.warning("Translation cache unavailable: %s", exc)
        return None


__all__ = ["CacheError", "TranslationCache", "default_cache_dir", "open_cache"]
