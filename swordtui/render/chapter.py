"""Reader and comparison content layout.

Both functions return styled content lines for the scrollable viewport.
The reader layout must stay in lock-step with ``scroll_sync.verse_block_size``.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models import Verse
from ..text_layout import (
    VERSE_MARGIN,
    chapter_text_width,
    strip_markup_and_decode_entities,
    verse_body_lines,
    wrap_lines,
)
from ..ui_theme import UITheme

GUTTER_MARK = "▌"
COMPARISON_RULE_MAX = 80


def _in_range(number: int, highlight: tuple[int, int]) -> bool:
    start, end = highlight
    return start > 0 and start <= number <= end


def format_chapter_lines(
    verses: Sequence[Verse],
    width: int,
    highlight: tuple[int, int],
    theme: UITheme,
) -> list[str]:
    """Lay out a chapter as number line, wrapped body, and blank separator per verse."""
    lines: list[str] = []
    for verse in verses:
        marked = _in_range(verse.number, highlight)
        gutter = f"{theme.border_active}{GUTTER_MARK}{theme.reset} " if marked else " " * VERSE_MARGIN
        number_style = theme.accent if marked else theme.warning
        text_style = f"{theme.bold}{theme.primary}" if marked else theme.primary
        lines.append(f"{gutter}{number_style}{verse.number}{theme.reset}")
        for body in verse_body_lines(verse.text, width):
            lines.append(f"{gutter}{text_style}{body}{theme.reset}")
        lines.append("")
    return lines


def format_parallel_lines(
    parallel: Sequence[tuple[str, Sequence[Verse]]],
    width: int,
    theme: UITheme,
) -> list[str]:
    """Lay out verse-by-verse comparison across translations.

    Each verse number present in any translation gets a heading and a rule,
    then one ``[TR] text`` block per translation that has that verse.
    """
    by_translation = {code: {verse.number: verse for verse in verses} for code, verses in parallel}
    numbers = sorted({number for table in by_translation.values() for number in table})
    text_width = chapter_text_width(width)
    rule = "─" * max(1, min(width - VERSE_MARGIN, COMPARISON_RULE_MAX))
    margin = " " * VERSE_MARGIN

    lines: list[str] = []
    for number in numbers:
        lines.append(f"{margin}{theme.warning}Verse {number}{theme.reset}")
        lines.append(f"{margin}{theme.border}{rule}{theme.reset}")
        for code, _verses in parallel:
            verse = by_translation[code].get(number)
            if verse is None:
                continue
            label = f"[{code}]"
            plain = strip_markup_and_decode_entities(verse.text)
            body = wrap_lines(f"{label} {plain}", text_width, len(label) + 1)
            first, rest = body[0], body[1:]
            lines.append(
                f"{margin}{theme.accent}{label}{theme.reset}{theme.primary}{first[len(label):]}{theme.reset}"
            )
            for line in rest:
                lines.append(f"{margin}{theme.primary}{line}{theme.reset}")
            lines.append("")
        lines.append("")
    return lines
