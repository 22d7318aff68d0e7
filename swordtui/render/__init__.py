"""Frame composition for the terminal UI.

``render_frame`` is a pure function from state to exactly ``state.height``
screen rows; ``write_frame`` is the only place that touches stdout.
"""

from __future__ import annotations

import os
import sys

from .. import __version__
from ..ansi import display_width, fit_ansi_line, slice_ansi_line, strip_ansi
from ..state import AppState, Screen
from ..ui_theme import UITheme, resolve_theme
from .help import format_hints, hints_for
from .panels import (
    render_about,
    render_cache_manager,
    render_miller,
    render_sidebar,
    render_theme_list,
    render_translation_list,
)

APP_TITLE = "SWORD-TUI"
SCREEN_TITLES = {
    Screen.SEARCH: "Search",
    Screen.COMPARISON: "Compare",
    Screen.TRANSLATION_SELECT: "Translations",
    Screen.THEME_SELECT: "Themes",
    Screen.CACHE_MANAGER: "Downloads",
    Screen.ABOUT: "About",
}


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    """Left-aligned hint text with ``right_text`` pinned to the right edge."""
    right_width = display_width(right_text)
    if right_width >= width:
        return fit_ansi_line(right_text, width)
    left = fit_ansi_line(left_text, width - right_width)
    return f"{left}{right_text}"


def _header_title(state: AppState, theme: UITheme) -> str:
    parts = [f" {theme.accent}{APP_TITLE}{theme.reset}"]
    parts.append(f"{theme.primary}{theme.bold}{state.book_name} {state.chapter}{theme.reset}")
    parts.append(f"{theme.secondary}{state.translation}{theme.reset}")
    if state.translation in state.cached_translations:
        parts.append(f"{theme.success}● offline{theme.reset}")
    title = SCREEN_TITLES.get(state.screen)
    if title:
        parts.append(f"{theme.muted}│ {title}{theme.reset}")
    if state.loading:
        parts.append(f"{theme.warning}Loading...{theme.reset}")
    return "  ".join(parts)


def _header_second_line(state: AppState, theme: UITheme) -> str:
    if state.screen is Screen.SEARCH:
        return f" {theme.warning}Go to:{theme.reset} {theme.primary}{state.search_query}█{theme.reset}"
    return f"{theme.border}{'─' * state.width}{theme.reset}"


def _viewport_rows(state: AppState, theme: UITheme) -> list[str]:
    rows = state.viewport_height
    if state.screen is Screen.TRANSLATION_SELECT:
        return render_translation_list(state, theme, rows)
    if state.screen is Screen.THEME_SELECT:
        return render_theme_list(state, theme, rows)
    if state.screen is Screen.CACHE_MANAGER:
        return render_cache_manager(state, theme, rows)
    if state.screen is Screen.ABOUT:
        return render_about(state, theme)
    comparison_ready = state.parallel_verses is not None and state.parallel_key == state.chapter_key
    if state.screen is Screen.COMPARISON and not comparison_ready:
        return [f"  {theme.muted}Loading comparison...{theme.reset}"]
    if state.screen is not Screen.COMPARISON and state.verses is None:
        return [f"  {theme.muted}Loading chapter...{theme.reset}"]
    if not state.content_lines:
        return [f"  {theme.muted}No verses.{theme.reset}"]
    start = state.scroll_offset
    return list(state.content_lines[start : start + rows])


def _dim_row(row: str, theme: UITheme) -> str:
    plain = strip_ansi(row)
    if not theme.dim:
        return plain
    return f"{theme.dim}{plain}{theme.reset}"


def _overlay_rows(base: list[str], overlay: list[str], width: int, theme: UITheme) -> list[str]:
    """Draw ``overlay`` rows from the top-left corner over a dimmed ``base``."""
    out = list(base)
    for index, row in enumerate(overlay):
        if index >= len(out):
            break
        cover = min(width, display_width(row))
        rest = slice_ansi_line(_dim_row(base[index], theme), cover, width - cover)
        out[index] = f"{row}{theme.reset}{rest}"
    return out


def render_frame(state: AppState) -> list[str]:
    """Return the complete screen as ``state.height`` rows of ``state.width`` columns."""
    theme = resolve_theme(state.theme_name, no_color=state.no_color)
    width = max(1, state.width)
    body = _viewport_rows(state, theme)
    body = (body + [""] * state.viewport_height)[: state.viewport_height]

    rows = [_header_title(state, theme), _header_second_line(state, theme)] + body
    rows = [fit_ansi_line(row, width, theme.reset) for row in rows]

    if state.screen is Screen.SIDEBAR:
        rows = _overlay_rows(rows, render_sidebar(state, theme), width, theme)
    elif state.screen is Screen.MILLER:
        rows = _overlay_rows(rows, render_miller(state, theme), width, theme)

    version = f"{theme.muted}v{__version__} {theme.reset}"
    rows.append(fit_ansi_line(f"{theme.border}{'─' * width}{theme.reset}", width, theme.reset))
    rows.append(fit_ansi_line(build_status_line(" " + format_hints(hints_for(state), theme), width, version), width, theme.reset))
    if state.error:
        message = f"{theme.error}Error: {state.error}{theme.reset}"
    elif state.status_message:
        message = f"{theme.success}{state.status_message}{theme.reset}"
    else:
        message = ""
    rows.append(fit_ansi_line(message, width, theme.reset))
    return rows[-state.height :] if len(rows) > state.height else rows


def write_frame(rows: list[str]) -> None:
    """Write a full frame to stdout in one call."""
    out = ["\033[H\033[J", "\r\n".join(rows)]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))


__all__ = ["build_status_line", "render_frame", "write_frame"]
