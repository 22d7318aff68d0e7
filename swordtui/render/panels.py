"""Overlay and list-screen rendering.

Covers the book sidebar, the miller-column picker, the translation, theme
and cache lists, and the About page. Geometry helpers are public so mouse
handling maps clicks with exactly the layout that was drawn.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .. import __version__
from .. import miller as miller_ops
from ..ansi import fit_ansi_line
from ..state import AppState
from ..text_layout import strip_markup_and_decode_entities, truncate
from ..ui_theme import UITheme, available_theme_names, resolve_theme
from .help import ABOUT_SHORTCUTS

SIDEBAR_WIDTH = 32
SIDEBAR_HEADER_ROWS = 3
MILLER_COLUMN_MAX_WIDTH = 30
MILLER_COLUMN_MIN_WIDTH = 12
MILLER_TITLES = ("BOOKS", "CHAPTERS", "VERSES")
LIST_HEADER_ROWS = 3
OVERLAY_FOOTER_ROWS = 3
API_HOST = "bolls.life"


@dataclass(frozen=True)
class SidebarRow:
    """One sidebar line: a testament heading or a book."""

    label: str
    book_index: int | None = None


def overlay_height(state: AppState) -> int:
    """Rows an overlay may cover; the status rule and lines stay visible."""
    return max(1, state.height - OVERLAY_FOOTER_ROWS)


def _more_line(count: int, arrow: str, theme: UITheme) -> str:
    if count <= 0:
        return ""
    return f"{theme.muted}{arrow} {count} more{theme.reset}"


def sidebar_rows(state: AppState) -> list[SidebarRow]:
    rows: list[SidebarRow] = []
    old = [(index, book) for index, book in enumerate(state.books) if book.is_old_testament]
    new = [(index, book) for index, book in enumerate(state.books) if not book.is_old_testament]
    if old:
        rows.append(SidebarRow("OLD TESTAMENT"))
        rows.extend(SidebarRow(book.name, index) for index, book in old)
    if new:
        rows.append(SidebarRow("NEW TESTAMENT"))
        rows.extend(SidebarRow(book.name, index) for index, book in new)
    return rows


def sidebar_item_rows(state: AppState) -> int:
    return max(1, overlay_height(state) - SIDEBAR_HEADER_ROWS - 1)


def sidebar_window(state: AppState) -> tuple[Sequence[SidebarRow], int, int, int]:
    """Return ``(visible rows, start, end, total)`` centred on the selected book."""
    rows = sidebar_rows(state)
    selected_row = next(
        (i for i, row in enumerate(rows) if row.book_index == state.sidebar_selected),
        0,
    )
    shown, start, end = miller_ops.visible_window(rows, selected_row, sidebar_item_rows(state))
    return shown, start, end, len(rows)


def sidebar_book_at(state: AppState, col: int, row: int) -> int | None:
    """Map a 1-based mouse cell to a book index, or ``None`` outside book rows."""
    if col < 1 or col > min(SIDEBAR_WIDTH, state.width):
        return None
    item = row - 1 - SIDEBAR_HEADER_ROWS
    shown, _start, _end, _total = sidebar_window(state)
    if item < 0 or item >= len(shown):
        return None
    return shown[item].book_index


def render_sidebar(state: AppState, theme: UITheme) -> list[str]:
    width = min(SIDEBAR_WIDTH, state.width)
    inner = max(1, width - 1)
    shown, start, end, total = sidebar_window(state)
    lines = [
        f" {theme.accent}BOOKS{theme.reset} {theme.muted}({len(state.books)}){theme.reset}",
        f"{theme.border}{'─' * inner}{theme.reset}",
        _more_line(start, "↑", theme),
    ]
    if not state.books:
        lines.append(f" {theme.muted}Loading books...{theme.reset}")
    for row in shown:
        if row.book_index is None:
            lines.append(f" {theme.secondary}{theme.bold}{row.label}{theme.reset}")
        elif row.book_index == state.sidebar_selected:
            lines.append(f"{theme.reverse}{theme.border_active} ▸ {truncate(row.label, inner - 4)}{theme.reset}")
        elif state.books[row.book_index].id == state.book_id:
            lines.append(f"   {theme.accent}{truncate(row.label, inner - 4)}{theme.reset}")
        else:
            lines.append(f"   {theme.primary}{truncate(row.label, inner - 4)}{theme.reset}")
    lines.append(_more_line(total - end, "↓", theme))
    height = overlay_height(state)
    lines = (lines + [""] * height)[:height]
    edge = f"{theme.border_active}│{theme.reset}"
    return [fit_ansi_line(line, inner, theme.reset) + edge for line in lines]


def miller_column_width(total_width: int) -> int:
    return max(MILLER_COLUMN_MIN_WIDTH, min(MILLER_COLUMN_MAX_WIDTH, total_width // 3))


def miller_item_rows(state: AppState) -> int:
    # top border, filter line, two "more" lines, bottom border
    return max(1, overlay_height(state) - 5)


def _miller_column_items(state: AppState, column: int) -> tuple[list[str], int, str]:
    """Labels, selected index, and placeholder text for one picker column."""
    m = state.miller
    if column == miller_ops.BOOK_COLUMN:
        books = miller_ops.displayed_books(m, state.books)
        placeholder = "No matches" if m.filtered_books is not None else "Loading books..."
        return [book.name for book in books], m.book_index, placeholder
    if column == miller_ops.CHAPTER_COLUMN:
        chapters = miller_ops.displayed_chapters(m, state.books)
        return [f"Chapter {number}" for number in chapters], m.chapter_index, "No chapters"
    if not miller_ops.verses_ready(m, state.books, state.translation):
        placeholder = "Loading..." if m.pending_token else "→ to load verses"
        return [], 0, placeholder
    verses = miller_ops.displayed_verses(m, state.books, state.translation)
    labels = [f"{verse.number}. {strip_markup_and_decode_entities(verse.text)}" for verse in verses]
    return labels, m.verse_index, "No matches" if m.filtered_verses is not None else "No verses"


def _miller_filter_line(state: AppState, column: int, theme: UITheme) -> str:
    m = state.miller
    if m.filter_column != column or (not m.filter_text and not m.filter_editing):
        return ""
    cursor = "█" if m.filter_editing else ""
    return f"{theme.warning}/{theme.reset}{theme.primary}{m.filter_text}{cursor}{theme.reset}"


def render_miller_column(state: AppState, column: int, width: int, theme: UITheme) -> list[str]:
    """One boxed picker column with a windowed item list."""
    inner = max(1, width - 2)
    active = state.miller.column == column
    border = theme.border_active if active else theme.border
    title = f" {MILLER_TITLES[column]} "
    top = f"{border}┌{title}{'─' * max(0, inner - len(title))}┐{theme.reset}"
    bottom = f"{border}└{'─' * inner}┘{theme.reset}"
    side = f"{border}│{theme.reset}"

    labels, selected, placeholder = _miller_column_items(state, column)
    shown, start, end = miller_ops.visible_window(labels, selected, miller_item_rows(state))
    body = [_miller_filter_line(state, column, theme), _more_line(start, "↑", theme)]
    if not labels:
        body.append(f" {theme.muted}{placeholder}{theme.reset}")
    for offset, label in enumerate(shown):
        text = truncate(label, inner - 2)
        if start + offset == selected:
            style = f"{theme.reverse}{theme.border_active}" if active else theme.accent
            body.append(f"{style} {text}{theme.reset}")
        else:
            body.append(f" {theme.primary}{text}{theme.reset}")
    body.append(_more_line(len(labels) - end, "↓", theme))

    rows = max(0, overlay_height(state) - 2)
    body = (body + [""] * rows)[:rows]
    return [top] + [side + fit_ansi_line(line, inner, theme.reset) + side for line in body] + [bottom]


def render_miller(state: AppState, theme: UITheme) -> list[str]:
    width = miller_column_width(state.width)
    columns = [render_miller_column(state, column, width, theme) for column in range(3)]
    return ["".join(parts) for parts in zip(*columns)]


def _list_rows(
    labels: Sequence[str],
    selected: int,
    rows: int,
    theme: UITheme,
) -> list[str]:
    shown, start, end = miller_ops.visible_window(labels, selected, max(1, rows - 2))
    out = [_more_line(start, "↑", theme)]
    for offset, label in enumerate(shown):
        if start + offset == selected:
            out.append(f"{theme.reverse}{theme.border_active} ▸ {label} {theme.reset}")
        else:
            out.append(f"   {label}")
    out.append(_more_line(len(labels) - end, "↓", theme))
    return out


def render_translation_list(state: AppState, theme: UITheme, rows: int) -> list[str]:
    lines = [
        f" {theme.accent}Select translation{theme.reset}",
        f" {theme.muted}Current: {state.translation}{theme.reset}",
        "",
    ]
    if not state.translations:
        lines.append(f" {theme.muted}Loading translations...{theme.reset}")
        return lines
    labels = []
    for translation in state.translations:
        marker = " ●" if translation.code in state.cached_translations else ""
        labels.append(f"{translation.code:<8} {translation.full_name}{marker}")
    lines.extend(_list_rows(labels, state.translation_selected, rows - LIST_HEADER_ROWS, theme))
    return lines


def render_theme_list(state: AppState, theme: UITheme, rows: int) -> list[str]:
    lines = [f" {theme.accent}Select theme{theme.reset}", "", ""]
    labels = []
    for name in available_theme_names():
        current = " (current)" if name == state.theme_name else ""
        labels.append(f"{resolve_theme(name).title}{current}")
    lines.extend(_list_rows(labels, state.theme_selected, rows - LIST_HEADER_ROWS, theme))
    return lines


def format_size(size_bytes: int) -> str:
    size = float(max(0, size_bytes))
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def render_cache_manager(state: AppState, theme: UITheme, rows: int) -> list[str]:
    if not state.cache_available:
        return [
            f" {theme.accent}Offline translations{theme.reset}",
            "",
            f" {theme.error}Cache directory unavailable; downloads are disabled.{theme.reset}",
        ]
    summary = f"{len(state.cached_translations)} cached, {format_size(state.cache_size)} on disk"
    if state.downloading:
        summary = f"{summary}  {theme.warning}downloading {state.downloading}...{theme.reset}"
    lines = [
        f" {theme.accent}Offline translations{theme.reset}",
        f" {theme.muted}{summary}{theme.reset}",
        "",
    ]
    codes = state.cache_manager_codes()
    if not codes:
        lines.append(f" {theme.muted}No translations listed yet.{theme.reset}")
        return lines
    names = {translation.code: translation.full_name for translation in state.translations}
    labels = []
    for code in codes:
        mark = "[✓]" if code in state.cached_translations else "[ ]"
        if code == state.downloading:
            mark = "[…]"
        labels.append(f"{mark} {code:<8} {names.get(code, '')}".rstrip())
    lines.extend(_list_rows(labels, state.cache_selected, rows - LIST_HEADER_ROWS, theme))
    return lines


def render_about(state: AppState, theme: UITheme) -> list[str]:
    lines = [
        f" {theme.accent}sword-tui {__version__}{theme.reset}",
        f" {theme.secondary}A terminal Bible reader{theme.reset}",
        "",
        f" {theme.primary}Text source: {API_HOST}{theme.reset}",
        f" {theme.primary}Theme: {theme.title}{theme.reset}",
        "",
        f" {theme.warning}Shortcuts{theme.reset}",
    ]
    key_width = max(len(keys) for keys, _action in ABOUT_SHORTCUTS)
    for keys, action in ABOUT_SHORTCUTS:
        lines.append(f"   {theme.accent}{keys:<{key_width}}{theme.reset}  {theme.muted}{action}{theme.reset}")
    return lines
