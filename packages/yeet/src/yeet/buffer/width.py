"""Display-width measurement for buffer content.

Cursor positions are stored as character indices, but scrolling, gutter
alignment and clipping work in terminal display columns. The helpers here
convert between the two using grapheme-cluster widths.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

TAB_WIDTH = 3

_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Tabs -> ``TAB_WIDTH``
    2. Zero-width characters (control, combining marks, etc.) -> 0
    3. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    4. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if g == "\t":
        return TAB_WIDTH

    # Single codepoint fast path
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def _is_ascii(text: str) -> bool:
    for ch in text:
        cp = ord(ch)
        if cp < 0x20 or cp > 0x7E:
            return False
    return True


# ---------------------------------------------------------------------------
# display_width
# ---------------------------------------------------------------------------


def display_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies.

    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    if _is_ascii(text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(text):
        total += grapheme_width(g)

    return _cache_width(text, total)


def char_index_to_column(text: str, index: int) -> int:
    """Return the display column at which character *index* of *text* starts."""
    if index <= 0:
        return 0
    return display_width(text[:index])


def column_to_char_index(text: str, column: int) -> int:
    """Return the largest grapheme-aligned character index starting at or before *column*.

    Indices past the end of *text* are never returned; a column beyond the
    last glyph maps to ``len(text)``.
    """
    if column <= 0 or not text:
        return 0

    index = 0
    col = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if col + w > column:
            return index
        col += w
        index += len(g)
        if col == column:
            return index

    return index


# ---------------------------------------------------------------------------
# slice_columns
# ---------------------------------------------------------------------------


def slice_columns(text: str, start_col: int, length: int) -> tuple[str, int, int, int]:
    """Extract *length* display columns of *text* starting at *start_col*.

    Wide glyphs that straddle either boundary are replaced with spaces for the
    visible part, so the result never exceeds *length* columns.

    Returns ``(clipped, first_index, last_index, padding)``: the clipped text,
    the half-open source character range ``[first_index, last_index)`` that is
    fully visible, and the number of padding spaces emitted before the first
    visible source character.
    """
    if length <= 0:
        return ("", 0, 0, 0)

    end_col = start_col + length
    result: list[str] = []
    first_index: int | None = None
    last_index = 0
    padding = 0
    col = 0
    index = 0

    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        g_start = col
        g_end = col + w
        col = g_end

        # zero-width glyphs at the left edge stay visible
        if g_end < start_col or (g_end == start_col and w > 0):
            index += len(g)
            continue
        if g_start >= end_col:
            break

        if g_start < start_col:
            # wide glyph cut by the left edge
            pad = g_end - start_col
            result.append(" " * pad)
            padding += pad
        elif g_end > end_col:
            # wide glyph cut by the right edge
            result.append(" " * (end_col - g_start))
            break
        else:
            if first_index is None:
                first_index = index
            text_g = " " * TAB_WIDTH if g == "\t" else g
            result.append(text_g)
            last_index = index + len(g)

        index += len(g)

    if first_index is None:
        first_index = last_index = index

    return ("".join(result), first_index, last_index, padding)


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


def is_punctuation_char(char: str) -> bool:
    """Return ``True`` if *char* is a punctuation character."""
    return bool(_PUNCTUATION_REGEX.match(char))
