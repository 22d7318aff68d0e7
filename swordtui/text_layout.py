"""Verse text cleanup and width-aware wrapping.

Verse payloads arrive with inline markup (``<i>``, ``<S>``, ``<br/>``) and
HTML entities. Everything here is pure and never raises on malformed input.
"""

from __future__ import annotations

import re

from .ansi import char_display_width

MIN_TEXT_WIDTH = 20
VERSE_MARGIN = 2
VERSE_INDENT = 4

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")
_WHITESPACE_RE = re.compile(r"\s+")
_MAX_CODE_POINT = 0x110000

NAMED_ENTITIES: dict[str, str] = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "ldquo": "“",
    "rdquo": "”",
    "lsquo": "‘",
    "rsquo": "’",
    "mdash": "—",
    "ndash": "–",
    "hellip": "…",
}


def _decode_entity(match: re.Match[str]) -> str:
    body = match.group(1)
    if not body.startswith("#"):
        return NAMED_ENTITIES.get(body, match.group(0))
    try:
        if body[1:2] in {"x", "X"}:
            code_point = int(body[2:], 16)
        else:
            code_point = int(body[1:])
    except ValueError:
        return match.group(0)
    if code_point >= _MAX_CODE_POINT:
        return match.group(0)
    return chr(code_point)


def strip_markup_and_decode_entities(raw: str) -> str:
    """Return plain display text for one raw verse payload.

    Tags become a single space so adjacent words never fuse, entities are
    decoded in one pass (``&amp;lt;`` yields ``&lt;``), and whitespace runs
    collapse to one space with the ends trimmed.
    """
    if not raw:
        return ""
    text = _TAG_RE.sub(" ", raw)
    text = _ENTITY_RE.sub(_decode_entity, text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def text_display_width(text: str) -> int:
    """Return display columns for plain (escape-free) text."""
    return sum(char_display_width(ch) for ch in text)


def wrap_lines(text: str, width: int, indent: int = 0) -> list[str]:
    """Greedy word wrap returning the individual lines.

    Continuation lines carry ``indent`` leading spaces and count them toward
    ``width``. A word wider than the available room sits alone on its line.
    """
    words = text.split()
    if not words:
        return [""]
    pad = " " * max(0, indent)
    lines: list[str] = []
    current = words[0]
    current_width = text_display_width(current)
    for word in words[1:]:
        word_width = text_display_width(word)
        if current_width + 1 + word_width <= width:
            current = f"{current} {word}"
            current_width += 1 + word_width
            continue
        lines.append(current)
        current = f"{pad}{word}"
        current_width = len(pad) + word_width
    lines.append(current)
    return lines


def wrap_with_indent(text: str, width: int, indent: int) -> str:
    """Wrap ``text`` to ``width`` columns with a hanging ``indent``.

    ``width <= 0`` returns ``text`` unchanged.
    """
    if width <= 0:
        return text
    return "\n".join(wrap_lines(text, width, indent))


def wrap_text(text: str, width: int) -> str:
    """Wrap ``text`` to ``width`` columns without indentation."""
    return wrap_with_indent(text, width, 0)


def chapter_text_width(width: int) -> int:
    """Return body width used for verse text at terminal ``width``."""
    text_width = max(MIN_TEXT_WIDTH, width - 6)
    return max(1, min(text_width, width - VERSE_MARGIN))


def verse_body_lines(raw_text: str, width: int) -> list[str]:
    """Return the unstyled body lines one verse renders to at ``width``."""
    plain = strip_markup_and_decode_entities(raw_text)
    return wrap_lines(plain, chapter_text_width(width), VERSE_INDENT)


def truncate(text: str, max_cols: int, ellipsis: str = "...") -> str:
    """Shorten ``text`` to ``max_cols`` display columns with an ellipsis."""
    if max_cols <= 0:
        return ""
    if text_display_width(text) <= max_cols:
        return text
    room = max(0, max_cols - len(ellipsis))
    out: list[str] = []
    used = 0
    for ch in text:
        w = char_display_width(ch)
        if used + w > room:
            break
        out.append(ch)
        used += w
    return "".join(out) + ellipsis[:max_cols]
