"""Search highlighting across buffer lines."""

from __future__ import annotations

import re

from yeet.buffer.model import BufferLine, StyleSpan

SEARCH_HIGHLIGHT = ("background", "yellow")


def is_case_sensitive(pattern: str) -> bool:
    """Smartcase: a pattern with an uppercase character matches case-sensitively."""
    return any(char.isupper() for char in pattern)


def find_matches(content: str, pattern: str) -> list[tuple[int, int]]:
    """Return non-overlapping ``(start, end)`` character ranges of *pattern* in *content*."""
    if not pattern:
        return []

    # offsets come from the original content; lower() can change its length
    flags = 0 if is_case_sensitive(pattern) else re.IGNORECASE
    return [match.span() for match in re.finditer(re.escape(pattern), content, flags)]


def set_search(lines: list[BufferLine], pattern: str | None) -> int:
    """Populate ``search`` spans on every line matching *pattern*.

    Lines without a match get ``search = None``. Returns the number of
    matching lines.
    """
    kind, value = SEARCH_HIGHLIGHT
    matched = 0
    for line in lines:
        ranges = find_matches(line.content, pattern) if pattern else []
        if ranges:
            line.search = [StyleSpan(start, end, kind, value) for start, end in ranges]  # type: ignore[arg-type]
            matched += 1
        else:
            line.search = None
    return matched


def clear_search(lines: list[BufferLine]) -> None:
    for line in lines:
        line.search = None
