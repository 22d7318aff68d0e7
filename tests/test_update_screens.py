"""Overlay and secondary-screen flows through ``update``."""

from __future__ import annotations

import unittest

from swordtui import __version__
from swordtui.ansi import strip_ansi
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
    KeyPressed,
    ParallelLoaded,
    PreviewLoaded,
    Quit,
    RemoveCachedTranslation,
    SaveSettings,
    TranslationsLoaded,
)
from swordtui.models import Book, Translation, Verse
from swordtui.render import render_frame
from swordtui.scroll_sync import offset_for_verse
from swordtui.state import AppState, ChapterKey, ChapterRequest, Screen
from swordtui.ui_theme import available_theme_names
from swordtui.update import update

BOOKS = (
    Book(1, "Genesis", 50),
    Book(2, "Exodus", 40),
    Book(43, "John", 21),
    Book(65, "Jude", 1),
)
TRANSLATIONS = (
    Translation("KJV", "King James Version"),
    Translation("WEB", "World English Bible"),
)
JOHN_3 = ChapterKey("KJV", 43, 3)
JOHN_4 = ChapterKey("KJV", 43, 4)


def _verses(book_id: int, chapter: int, count: int) -> tuple[Verse, ...]:
    return tuple(
        Verse(n, f"Verse {n} speaks of grace and truth for everyone who listens.", book_id, chapter)
        for n in range(1, count + 1)
    )


def _reader(highlight: tuple[int, int] = (0, 0), scroll_verse: int = 0) -> AppState:
    state = AppState(
        translation="KJV",
        books=BOOKS,
        width=60,
        height=20,
        pending_chapter=ChapterRequest(1, JOHN_3, highlight, scroll_verse),
        next_token=2,
    )
    state, _effects = update(state, ChapterLoaded(1, JOHN_3, _verses(43, 3, 20)))
    state, _effects = update(state, TranslationsLoaded(TRANSLATIONS))
    return state


def _press(state: AppState, *keys: str) -> tuple[AppState, list]:
    effects: list = []
    for key in keys:
        state, produced = update(state, KeyPressed(key))
        effects.extend(produced)
    return state, effects


def _frame_text(state: AppState) -> list[str]:
    return [strip_ansi(row) for row in render_frame(state)]


class MillerTests(unittest.TestCase):
    def test_open_seeds_current_location(self) -> None:
        state, effects = _press(_reader(), "v")
        self.assertIs(state.screen, Screen.MILLER)
        self.assertEqual((state.miller.book_index, state.miller.chapter_index), (2, 2))
        self.assertEqual(effects, [])

    def test_commit_from_verse_column_uses_preview_without_refetch(self) -> None:
        state, effects = _press(_reader(), "v", "UP", "RIGHT", "DOWN", "RIGHT")
        self.assertEqual(len(effects), 1)
        preview = effects[0]
        self.assertIsInstance(preview, FetchChapter)
        self.assertTrue(preview.preview)
        self.assertEqual(preview.key, ChapterKey("KJV", 2, 2))
        self.assertFalse(state.loading)

        state, _ = update(state, PreviewLoaded(preview.token, preview.key, _verses(2, 2, 10)))
        state, effects = _press(state, "DOWN", "DOWN", "ENTER")

        self.assertEqual(effects, [])
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual((state.book_id, state.chapter, state.book_name), (2, 2, "Exodus"))
        self.assertEqual((state.highlight_start, state.highlight_end), (3, 3))
        self.assertEqual(state.scroll_offset, offset_for_verse(state.verses, 60, 3, state.viewport_height))

    def test_verse_column_of_current_chapter_needs_no_fetch(self) -> None:
        state, effects = _press(_reader(), "v", "RIGHT", "RIGHT")
        self.assertEqual(effects, [])
        self.assertEqual(state.miller.verses, state.verses)

    def test_stale_preview_is_ignored(self) -> None:
        state, _ = _press(_reader(), "v", "UP", "RIGHT", "RIGHT")
        updated, _ = update(state, PreviewLoaded(99, ChapterKey("KJV", 2, 1), _verses(2, 1, 3)))
        self.assertIsNone(updated.miller.verses)

    def test_preview_failure_sets_error(self) -> None:
        state, effects = _press(_reader(), "v", "UP", "RIGHT", "RIGHT")
        failed, _ = update(state, FetchFailed("preview", effects[0].token, "API returned status 500"))
        self.assertEqual(failed.error, "API returned status 500")
        self.assertEqual(failed.miller.pending_token, 0)

    def test_commit_from_chapter_column_requests_chapter_top(self) -> None:
        state, effects = _press(_reader(), "v", "RIGHT", "DOWN", "ENTER")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(len(effects), 1)
        self.assertEqual(effects[0].key, ChapterKey("KJV", 43, 4))
        self.assertFalse(effects[0].preview)
        self.assertEqual(state.pending_chapter.scroll_verse, 0)

    def test_filter_without_matches_renders_placeholder(self) -> None:
        state, _ = _press(_reader(), "v", "/", "z", "z", "z")
        self.assertEqual(state.miller.filtered_books, ())
        frame = _frame_text(state)
        self.assertEqual(len(frame), state.height)
        self.assertTrue(any("No matches" in row for row in frame))

        state, effects = _press(state, "ENTER", "RIGHT", "DOWN", "ENTER")
        self.assertEqual(effects, [])
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(state.chapter_key, JOHN_3)

    def test_quit_key_is_text_while_filtering(self) -> None:
        state, effects = _press(_reader(), "v", "/", "q")
        self.assertEqual(state.miller.filter_text, "q")
        self.assertEqual(effects, [])
        state, effects = _press(state, "CTRL_C")
        self.assertEqual(effects[-1], Quit())

    def test_escape_leaves_filter_then_picker(self) -> None:
        state, _ = _press(_reader(), "v", "/", "o", "ESC")
        self.assertIs(state.screen, Screen.MILLER)
        self.assertFalse(state.miller.filter_editing)
        self.assertEqual(state.miller.filter_text, "o")
        state, _ = _press(state, "ESC")
        self.assertIs(state.screen, Screen.READER)
        state, effects = _press(state, "ESC")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(effects, [])


class SidebarTests(unittest.TestCase):
    def test_open_selects_current_book(self) -> None:
        state, _ = _press(_reader(), "[")
        self.assertIs(state.screen, Screen.SIDEBAR)
        self.assertEqual(state.sidebar_selected, 2)

    def test_enter_opens_chapter_one(self) -> None:
        state, effects = _press(_reader(), "[", "DOWN", "ENTER")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual([effect.key for effect in effects], [ChapterKey("KJV", 65, 1)])

    def test_click_on_book_row_opens_it(self) -> None:
        state, effects = _press(_reader(), "[", "MOUSE_LEFT_DOWN:5:8")
        self.assertEqual(state.sidebar_selected, 2)
        self.assertEqual([effect.key for effect in effects], [ChapterKey("KJV", 43, 1)])

    def test_click_on_heading_or_outside_does_nothing(self) -> None:
        for token in ("MOUSE_LEFT_DOWN:5:4", "MOUSE_LEFT_DOWN:50:8"):
            with self.subTest(token=token):
                state, effects = _press(_reader(), "[", token)
                self.assertIs(state.screen, Screen.SIDEBAR)
                self.assertEqual(effects, [])

    def test_escape_closes(self) -> None:
        state, _ = _press(_reader(), "[", "ESC")
        self.assertIs(state.screen, Screen.READER)

    def test_slash_switches_to_search(self) -> None:
        state, _ = _press(_reader(), "[", "/")
        self.assertIs(state.screen, Screen.SEARCH)

    def test_frame_keeps_height_with_sidebar(self) -> None:
        state, _ = _press(_reader(), "[")
        frame = _frame_text(state)
        self.assertEqual(len(frame), 20)
        self.assertIn("OLD TESTAMENT", frame[3])


class SearchScreenTests(unittest.TestCase):
    def test_escape_cancels(self) -> None:
        state, effects = _press(_reader(), "/", "x", "ESC")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(effects, [])

    def test_query_is_capped(self) -> None:
        state, _ = _press(_reader(), "/", *("a" * 60))
        self.assertEqual(len(state.search_query), 50)


class ComparisonTests(unittest.TestCase):
    def test_open_requests_first_verses_in_comparison_translations(self) -> None:
        state, effects = _press(_reader(), "c")
        self.assertIs(state.screen, Screen.COMPARISON)
        self.assertTrue(state.loading)
        self.assertEqual(len(effects), 1)
        fetch = effects[0]
        self.assertIsInstance(fetch, FetchParallel)
        self.assertEqual(fetch.key, JOHN_3)
        self.assertEqual(fetch.translations, ("NLT", "KJV", "WEB"))
        self.assertEqual(fetch.verse_numbers, tuple(range(1, 32)))

    def test_loaded_comparison_renders_translation_labels(self) -> None:
        state, effects = _press(_reader(), "c")
        parallel = (("NLT", _verses(43, 3, 2)), ("KJV", _verses(43, 3, 2)))
        state, _ = update(state, ParallelLoaded(effects[0].token, JOHN_3, parallel))
        self.assertFalse(state.loading)
        text = "\n".join(_frame_text(state))
        self.assertIn("Verse 1", text)
        self.assertIn("[NLT]", text)
        self.assertIn("[KJV]", text)

    def test_stale_comparison_is_ignored(self) -> None:
        state, _ = _press(_reader(), "c")
        updated, _ = update(state, ParallelLoaded(99, JOHN_3, (("KJV", _verses(43, 3, 1)),)))
        self.assertIsNone(updated.parallel_verses)

    def test_compare_during_chapter_load_targets_the_pending_chapter(self) -> None:
        state, effects = _press(_reader(), "n", "c")
        chapter, fetch = effects
        self.assertEqual(fetch.key, JOHN_4)

        state, _ = update(state, ChapterLoaded(chapter.token, JOHN_4, _verses(43, 4, 5)))
        parallel = (("NLT", _verses(43, 4, 5)),)
        state, _ = update(state, ParallelLoaded(fetch.token, JOHN_4, parallel))

        self.assertIs(state.screen, Screen.COMPARISON)
        self.assertEqual(state.chapter, 4)
        self.assertEqual(state.parallel_key, JOHN_4)
        self.assertFalse(state.loading)
        text = "\n".join(_frame_text(state))
        self.assertIn("John 4", text)
        self.assertIn("[NLT]", text)

    def test_comparison_arriving_before_its_chapter_waits_for_it(self) -> None:
        state, effects = _press(_reader(), "n", "c")
        chapter, fetch = effects
        parallel = (("KJV", _verses(43, 4, 5)),)

        state, _ = update(state, ParallelLoaded(fetch.token, JOHN_4, parallel))
        self.assertEqual(state.parallel_key, JOHN_4)
        self.assertIn("Loading comparison...", "\n".join(_frame_text(state)))

        state, _ = update(state, ChapterLoaded(chapter.token, JOHN_4, _verses(43, 4, 5)))
        self.assertEqual(state.parallel_verses, parallel)
        text = "\n".join(_frame_text(state))
        self.assertNotIn("Loading comparison...", text)
        self.assertIn("[KJV]", text)

    def test_comparison_for_another_chapter_is_ignored(self) -> None:
        state, effects = _press(_reader(), "n", "c")
        chapter, fetch = effects
        state, _ = update(state, ChapterLoaded(chapter.token, JOHN_4, _verses(43, 4, 5)))
        state, _ = update(state, ParallelLoaded(fetch.token, JOHN_3, (("KJV", _verses(43, 3, 20)),)))
        self.assertIsNone(state.parallel_verses)
        self.assertIsNone(state.parallel_key)

    def test_return_scrolls_back_to_highlight(self) -> None:
        state = _reader(highlight=(10, 10), scroll_verse=10)
        expected = offset_for_verse(state.verses, 60, 10, state.viewport_height)
        state, _ = _press(state, "c")
        self.assertEqual(state.scroll_offset, 0)
        state, _ = _press(state, "ESC")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(state.scroll_offset, expected)
        self.assertEqual(state.highlight_start, 10)


class TranslationSelectTests(unittest.TestCase):
    def test_choosing_translation_reloads_books_and_chapter(self) -> None:
        state, _ = _press(_reader(), "t")
        self.assertIs(state.screen, Screen.TRANSLATION_SELECT)
        self.assertEqual(state.translation_selected, 0)

        state, effects = _press(state, "DOWN", "ENTER")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(len(effects), 2)
        books, chapter = effects
        self.assertEqual(books, FetchBooks(books.token, "WEB"))
        self.assertEqual(chapter.key, ChapterKey("WEB", 43, 3))

        state, _ = update(state, BooksLoaded(books.token, "WEB", BOOKS))
        state, effects = update(state, ChapterLoaded(chapter.token, chapter.key, _verses(43, 3, 5)))
        self.assertEqual(state.translation, "WEB")
        self.assertFalse(state.loading)
        self.assertEqual(effects, [SaveSettings("WEB", 43, 3, state.theme_name)])

    def test_choosing_current_translation_does_nothing(self) -> None:
        state, effects = _press(_reader(), "t", "ENTER")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(effects, [])

    def test_books_failure_sets_error(self) -> None:
        state, effects = _press(_reader(), "t", "DOWN", "ENTER")
        failed, _ = update(state, FetchFailed("books", effects[0].token, "network down"))
        self.assertEqual(failed.error, "network down")
        self.assertEqual(failed.pending_books_token, 0)


class ThemeSelectTests(unittest.TestCase):
    def test_choose_theme_saves_settings(self) -> None:
        names = available_theme_names()
        state, _ = _press(_reader(), "T")
        self.assertIs(state.screen, Screen.THEME_SELECT)
        self.assertEqual(state.theme_selected, names.index(state.theme_name))
        state, effects = _press(state, "DOWN", "ENTER")
        self.assertEqual(state.theme_name, names[1])
        self.assertEqual(effects, [SaveSettings("KJV", 43, 3, names[1])])

    def test_return_key_leaves_theme_unchanged(self) -> None:
        state, effects = _press(_reader(), "T", "DOWN", "r")
        self.assertIs(state.screen, Screen.READER)
        self.assertEqual(state.theme_name, "catppuccin-mocha")
        self.assertEqual(effects, [])


class CacheManagerTests(unittest.TestCase):
    def _opened(self) -> AppState:
        state, effects = _press(_reader(), "d")
        self.assertEqual(effects, [FetchCacheList()])
        state, _ = update(state, CacheListLoaded(("KJV", "YLT"), 2048))
        return state

    def test_lists_known_and_cached_extra_codes(self) -> None:
        state = self._opened()
        self.assertIs(state.screen, Screen.CACHE_MANAGER)
        self.assertEqual(state.cache_manager_codes(), ("KJV", "WEB", "YLT"))
        self.assertEqual(state.cache_selected, 0)
        self.assertTrue(any("2.0 KB" in row for row in _frame_text(state)))

    def test_download_then_refresh(self) -> None:
        state, effects = _press(self._opened(), "DOWN", "ENTER")
        self.assertEqual(effects, [DownloadTranslation("WEB")])
        self.assertEqual(state.downloading, "WEB")

        state, effects = _press(state, "ENTER")
        self.assertEqual(effects, [])

        state, effects = update(state, DownloadFinished("WEB"))
        self.assertEqual(state.downloading, "")
        self.assertEqual(state.status_message, "Downloaded WEB")
        self.assertEqual(effects, [FetchCacheList()])

        state, _ = _press(state, "DOWN")
        self.assertEqual(state.status_message, "")

    def test_download_failure_clears_progress(self) -> None:
        state, _ = _press(self._opened(), "DOWN", "ENTER")
        state, _ = update(state, FetchFailed("download", 0, "download failed"))
        self.assertEqual(state.downloading, "")
        self.assertEqual(state.error, "download failed")

    def test_remove_only_cached_translations(self) -> None:
        state, effects = _press(self._opened(), "DOWN", "x")
        self.assertEqual(effects, [])
        state, effects = _press(state, "UP", "x")
        self.assertEqual(effects, [RemoveCachedTranslation("KJV")])
        state, effects = _press(state, "ENTER")
        self.assertEqual(effects, [])

    def test_clear_all_needs_cached_translations_and_no_download(self) -> None:
        state, effects = _press(self._opened(), "X")
        self.assertEqual(effects, [ClearTranslationCache()])

        state, _ = update(state, CacheListLoaded((), 0))
        state, effects = _press(state, "X")
        self.assertEqual(effects, [])
        self.assertTrue(any("0 cached" in row for row in _frame_text(state)))

        state, _ = update(state, CacheListLoaded(("KJV",), 1024))
        state, _ = _press(state, "DOWN", "ENTER")
        self.assertEqual(state.downloading, "WEB")
        state, effects = _press(state, "X")
        self.assertEqual(effects, [])

    def test_unavailable_cache_disables_downloads(self) -> None:
        state, _ = _press(_reader(), "d")
        state, _ = update(state, CacheListLoaded((), 0, available=False))
        state, effects = _press(state, "DOWN", "ENTER")
        self.assertEqual(effects, [])
        self.assertTrue(any("unavailable" in row for row in _frame_text(state)))


class AboutTests(unittest.TestCase):
    def test_about_shows_version_and_returns(self) -> None:
        state, _ = _press(_reader(), "?")
        self.assertIs(state.screen, Screen.ABOUT)
        self.assertTrue(any(f"sword-tui {__version__}" in row for row in _frame_text(state)))
        state, _ = _press(state, "r")
        self.assertIs(state.screen, Screen.READER)

    def test_quit_from_about(self) -> None:
        state, effects = _press(_reader(), "?", "q")
        self.assertEqual(effects[-1], Quit())


if __name__ == "__main__":
    unittest.main()
