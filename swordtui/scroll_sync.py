"""Mapping between verse numbers and scroll offsets in wrapped-line space.

A verse block is its number line, its wrapped body lines, and one blank
separator. The reader renderer lays verses out with the same helper, so
offsets computed here always line up with what is drawn.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import Verse
from .text_layout import verse_body_lines


def verse_block_size(verse: Verse, width: int) -> int:
    """Return rendered line count of one verse block at ``width``."""
    return len(verse_body_lines(verse.text, width)) + 2


def block_sizes(verses: Sequence[Verse], width: int) -> list[int]:
    return [verse_block_size(verse, width) for verse in verses]


def total_lines(verses: Sequence[Verse], width: int) -> int:
    return sum(block_sizes(verses, width))


def verse_at_offset(verses: Sequence[Verse], width: int, offset: int) -> int:
    """Return the verse number whose block contains line ``offset``.

    Offsets past the end map to the last verse. An empty chapter yields 0.
    """
    if not verses:
        return 0
    cumulative = 0
    for verse, size in zip(verses, block_sizes(verses, width)):
        cumulative += size
        if cumulative > offset:
            return verse.number
    return verses[-1].number


def offset_for_verse(verses: Sequence[Verse], width: int, verse_number: int, viewport_height: int) -> int:
    """Return the scroll offset that puts ``verse_number`` at the viewport top.

    Blocks of verses listed before the first verse numbered at or above
    ``verse_number`` are summed, then the result is clamped so the viewport
    never scrolls past the end of the content.
    """
    sizes = block_sizes(verses, width)
    offset = 0
    for verse, size in zip(verses, sizes):
        if verse.number >= verse_number:
            break
        offset += size
    max_offset = max(0, sum(sizes) - max(1, viewport_height))
    return max(0, min(offset, max_offset))
