"""Pure state transition function.

``update(state, event)`` returns a new state and the effects the runtime
must perform. The input state is never mutated: handlers work on a copy.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from . import miller as miller_ops
from .events import (
    BooksLoaded,
    CacheListLoaded,
    ChapterLoaded,
    DownloadFinished,
    Effect,
    Event,
    FetchCacheList,
    FetchFailed,
    KeyPressed,
    ParallelLoaded,
    PreviewLoaded,
    Resized,
    TranslationsLoaded,
)
from .input import handle_key
from .reader import apply_chapter, navigation_base, relayout, scroll_to_verse, shows_reader_content
from .state import AppState, Screen

logger = logging.getLogger(__name__)


def _on_key(state: AppState, event: KeyPressed, effects: list[Effect]) -> None:
    if state.status_message:
        state.status_message = ""
        state.dirty = True
    handle_key(state, event.key, effects)


def _on_resize(state: AppState, event: Resized) -> None:
    if (event.width, event.height) == (state.width, state.height):
        return
    state.width = max(1, event.width)
    state.height = max(1, event.height)
    relayout(state)
    if shows_reader_content(state) and state.highlight_start > 0:
        scroll_to_verse(state, state.highlight_start)
    state.dirty = True


def _on_translations(state: AppState, event: TranslationsLoaded) -> None:
    state.translations = tuple(event.translations)
    codes = [translation.code for translation in state.translations]
    state.translation_selected = codes.index(state.translation) if state.translation in codes else 0
    state.dirty = True


def _on_books(state: AppState, event: BooksLoaded) -> None:
    if event.token != state.pending_books_token:
        logger.debug("Discarding stale book list for %s", event.translation)
        return
    state.pending_books_token = 0
    state.books = tuple(event.books)
    book = state.book_by_id(state.book_id)
    if book is not None:
        state.book_name = book.name
    state.sidebar_selected = state.book_index(state.book_id)
    state.error = ""
    state.dirty = True


def _on_chapter(state: AppState, event: ChapterLoaded, effects: list[Effect]) -> None:
    request = state.pending_chapter
    if request is None or request.token != event.token or request.key != event.key:
        logger.debug("Discarding stale chapter %s", event.key)
        return
    state.pending_chapter = None
    apply_chapter(
        state,
        event.key,
        event.verses,
        effects,
        highlight=request.highlight,
        scroll_verse=request.scroll_verse,
    )


def _on_preview(state: AppState, event: PreviewLoaded) -> None:
    if event.token != state.miller.pending_token:
        logger.debug("Discarding stale picker verses %s", event.key)
        return
    state.miller = miller_ops.set_verses(state.miller, event.key, event.verses)
    state.error = ""
    state.dirty = True


def _on_parallel(state: AppState, event: ParallelLoaded) -> None:
    if event.token != state.pending_parallel_token or event.key != navigation_base(state):
        logger.debug("Discarding stale comparison %s", event.key)
        return
    state.pending_parallel_token = 0
    state.parallel_verses = tuple(event.verses)
    state.parallel_key = event.key
    state.error = ""
    if state.screen is Screen.COMPARISON:
        relayout(state)
    state.dirty = True


def _on_cache_list(state: AppState, event: CacheListLoaded) -> None:
    state.cached_translations = frozenset(event.cached)
    state.cache_size = event.size_bytes
    state.cache_available = event.available
    codes = state.cache_manager_codes()
    state.cache_selected = max(0, min(state.cache_selected, len(codes) - 1))
    state.dirty = True


def _on_download(state: AppState, event: DownloadFinished, effects: list[Effect]) -> None:
    if state.downloading == event.translation:
        state.downloading = ""
    state.status_message = f"Downloaded {event.translation}"
    state.error = ""
    state.dirty = True
    effects.append(FetchCacheList())


def _on_failure(state: AppState, event: FetchFailed) -> None:
    kind = event.kind
    if kind == "chapter":
        if state.pending_chapter is None or state.pending_chapter.token != event.token:
            return
        state.pending_chapter = None
    elif kind == "preview":
        if state.miller.pending_token != event.token:
            return
        state.miller = replace(state.miller, pending_token=0)
    elif kind == "parallel":
        if state.pending_parallel_token != event.token:
            return
        state.pending_parallel_token = 0
    elif kind == "books":
        if state.pending_books_token != event.token:
            return
        state.pending_books_token = 0
    elif kind == "download":
        state.downloading = ""
    logger.debug("%s fetch failed: %s", kind, event.message)
    state.error = event.message
    state.dirty = True


def update(state: AppState, event: Event) -> tuple[AppState, list[Effect]]:
    """Apply ``event`` to a copy of ``state``; return it with pending effects."""
    new_state = state.copy()
    effects: list[Effect] = []
    if isinstance(event, KeyPressed):
        _on_key(new_state, event, effects)
    elif isinstance(event, Resized):
        _on_resize(new_state, event)
    elif isinstance(event, TranslationsLoaded):
        _on_translations(new_state, event)
    elif isinstance(event, BooksLoaded):
        _on_books(new_state, event)
    elif isinstance(event, ChapterLoaded):
        _on_chapter(new_state, event, effects)
    elif isinstance(event, PreviewLoaded):
        _on_preview(new_state, event)
    elif isinstance(event, ParallelLoaded):
        _on_parallel(new_state, event)
    elif isinstance(event, CacheListLoaded):
        _on_cache_list(new_state, event)
    elif isinstance(event, DownloadFinished):
        _on_download(new_state, event, effects)
    elif isinstance(event, FetchFailed):
        _on_failure(new_state, event)
    return new_state, effects


__all__ = ["update"]
