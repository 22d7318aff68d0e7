"""Runtime composition layer for sword-tui.

Builds the initial state from saved settings, wires the API client, the
offline cache and the worker into loop callbacks, and starts the loop.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable
from functools import partial

import requests

from ..api import BollsClient
from ..cache import open_cache
from ..clipboard import copy_text_to_clipboard
from ..config import Settings, load_settings, save_settings
from ..events import (
    FETCH_EFFECTS,
    CopyToClipboard,
    Effect,
    FetchBooks,
    FetchCacheList,
    FetchTranslations,
    SaveSettings,
)
from ..reader import relayout, request_chapter
from ..render import render_frame, write_frame
from ..state import AppState, ChapterKey
from ..ui_theme import normalize_theme_name
from .loop import RuntimeLoopCallbacks, run_main_loop
from .terminal import TerminalController
from .worker import FetchWorker

logger = logging.getLogger(__name__)


def initial_state(
    settings: Settings,
    width: int,
    height: int,
    *,
    translation: str | None = None,
    theme: str | None = None,
    no_color: bool = False,
) -> tuple[AppState, list[Effect]]:
    """Return the startup state and the fetches that populate it.

    Command-line ``translation`` and ``theme`` override saved settings.
    """
    code = (translation or settings.selected_translation).strip().upper()
    state = AppState(
        translation=code,
        book_id=settings.current_book,
        chapter=settings.current_chapter,
        theme_name=normalize_theme_name(theme or settings.current_theme),
        no_color=no_color,
        width=max(1, width),
        height=max(1, height),
    )
    relayout(state)
    effects: list[Effect] = [FetchTranslations()]
    books_token = state.issue_token()
    state.pending_books_token = books_token
    effects.append(FetchBooks(token=books_token, translation=code))
    request_chapter(state, ChapterKey(code, state.book_id, state.chapter), effects)
    effects.append(FetchCacheList())
    return state, effects


def execute_effect(
    effect: Effect,
    worker: FetchWorker,
    copy: Callable[[str], bool] = copy_text_to_clipboard,
    save: Callable[[Settings], None] = save_settings,
) -> None:
    """Perform one non-quit effect; fetches go to the background worker."""
    if isinstance(effect, FETCH_EFFECTS):
        worker.submit(effect)
    elif isinstance(effect, CopyToClipboard):
        copy(effect.text)
    elif isinstance(effect, SaveSettings):
        save(
            Settings(
                selected_translation=effect.translation,
                current_book=effect.book_id,
                current_chapter=effect.chapter,
                current_theme=effect.theme,
            )
        )
    else:
        logger.warning("Ignoring unknown effect %r", effect)


def _terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


def run_app(translation: str | None = None, theme: str | None = None, no_color: bool = False) -> None:
    """Start the interactive reader on the controlling terminal."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        raise SystemExit("sword-tui needs an interactive terminal.")

    session = requests.Session()
    cache = open_cache(session=session)
    client = BollsClient(session=session, cache=cache)
    worker = FetchWorker(client, cache)

    width, height = _terminal_size()
    state, startup_effects = initial_state(
        load_settings(),
        width,
        height,
        translation=translation,
        theme=theme,
        no_color=no_color,
    )
    logger.info("Starting at %s %s:%s", state.translation, state.book_id, state.chapter)

    callbacks = RuntimeLoopCallbacks(
        render=lambda current: write_frame(render_frame(current)),
        run_effect=partial(execute_effect, worker=worker),
        drain_results=worker.drain_results,
        terminal_size=_terminal_size,
    )
    terminal = TerminalController(stdin_fd, stdout_fd)
    try:
        run_main_loop(state, terminal, stdin_fd, callbacks, startup_effects)
    finally:
        session.close()


__all__ = ["execute_effect", "initial_state", "run_app"]
