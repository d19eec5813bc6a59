"""Cursor motions and clamping.

Motions never fail: they clamp at the buffer and line bounds. Horizontal
motions keep ``current`` (character index) and ``expanded`` (display column)
in lock-step; vertical motions keep ``expanded`` sticky and derive ``current``
from it on the target line.
"""

from __future__ import annotations

from yeet.buffer.message import FindChar, Motion
from yeet.buffer.mode import get_index_correction
from yeet.buffer.model import (
    Absolute,
    Buffer,
    BufferLine,
    Cursor,
    CursorPosition,
    End,
    Mode,
    NoPosition,
)
from yeet.buffer.width import (
    char_index_to_column,
    column_to_char_index,
    is_punctuation_char,
    is_whitespace_char,
)

# ---------------------------------------------------------------------------
# Position helpers
# ---------------------------------------------------------------------------


def get_max_index(mode: Mode, line: BufferLine) -> int:
    """Largest legal character index for the cursor on *line* in *mode*."""
    return max(0, len(line) - get_index_correction(mode))


def absolute_at(line: BufferLine, index: int) -> Absolute:
    return Absolute(current=index, expanded=char_index_to_column(line.content, index))


def get_cursor_index(mode: Mode, line: BufferLine, position: CursorPosition) -> int | None:
    """Resolve *position* to a character index on *line*, ``None`` for no position."""
    match position:
        case Absolute(current=current):
            return min(current, get_max_index(mode, line))
        case End():
            return get_max_index(mode, line)
        case NoPosition():
            return None
    return None


def get_position(mode: Mode, line: BufferLine, position: CursorPosition) -> CursorPosition:
    """Place a sticky-column position onto *line*, clamping ``current``."""
    match position:
        case Absolute(expanded=expanded):
            index = column_to_char_index(line.content, expanded)
            return Absolute(current=min(index, get_max_index(mode, line)), expanded=expanded)
        case _:
            return position


def clamp_position(mode: Mode, line: BufferLine, position: CursorPosition) -> CursorPosition:
    """Clamp ``current`` into the legal range, recomputing ``expanded`` if it moved."""
    match position:
        case Absolute(current=current, expanded=expanded):
            max_index = get_max_index(mode, line)
            if current > max_index:
                return absolute_at(line, max_index)
            if current < 0:
                return Absolute()
            column = char_index_to_column(line.content, current)
            if expanded < column:
                return Absolute(current=current, expanded=column)
            return position
        case _:
            return position


def set_outbound_cursor_to_inbound_position(mode: Mode, buffer: Buffer) -> None:
    """Re-establish the cursor invariants after any change to lines or mode.

    The cursor exists exactly when the buffer has lines, sits on an existing
    line, and its horizontal position is legal for *mode*.
    """
    if not buffer.lines:
        buffer.cursor = None
        return

    if buffer.cursor is None:
        buffer.cursor = Cursor()

    cursor = buffer.cursor
    max_line = len(buffer.lines) - 1
    if cursor.vertical_index > max_line:
        cursor.vertical_index = max_line
    elif cursor.vertical_index < 0:
        cursor.vertical_index = 0

    line = buffer.lines[cursor.vertical_index]
    cursor.horizontal_index = clamp_position(mode, line, cursor.horizontal_index)


# ---------------------------------------------------------------------------
# Motions
# ---------------------------------------------------------------------------


def update_by_direction(mode: Mode, buffer: Buffer, count: int, direction: Motion) -> None:
    """Apply *direction* *count* times to the buffer's cursor."""
    cursor = buffer.cursor
    if not buffer.lines or cursor is None:
        return

    for _ in range(max(count, 1)):
        _move(mode, buffer.lines, cursor, direction)


def _move(mode: Mode, lines: list[BufferLine], cursor: Cursor, direction: Motion) -> None:
    line = lines[cursor.vertical_index]

    match direction:
        case FindChar(kind, char):
            found = _find(mode, line, cursor.horizontal_index, kind, char)
            if found is not None:
                cursor.horizontal_index = absolute_at(line, found)
        case "up":
            if cursor.vertical_index > 0:
                _move_vertical(mode, lines, cursor, cursor.vertical_index - 1)
        case "down":
            if cursor.vertical_index < len(lines) - 1:
                _move_vertical(mode, lines, cursor, cursor.vertical_index + 1)
        case "top":
            _move_vertical(mode, lines, cursor, 0)
        case "bottom":
            _move_vertical(mode, lines, cursor, len(lines) - 1)
        case "left":
            index = get_cursor_index(mode, line, cursor.horizontal_index)
            if index is not None and index > 0:
                cursor.horizontal_index = absolute_at(line, index - 1)
        case "right":
            if isinstance(cursor.horizontal_index, (End, NoPosition)):
                return
            index = get_cursor_index(mode, line, cursor.horizontal_index)
            if index is not None and index < get_max_index(mode, line):
                cursor.horizontal_index = absolute_at(line, index + 1)
        case "line_start":
            if not isinstance(cursor.horizontal_index, NoPosition):
                cursor.horizontal_index = Absolute()
        case "line_end":
            if not isinstance(cursor.horizontal_index, NoPosition):
                cursor.horizontal_index = End()
        case "word_start_forward" | "word_start_backward" | "word_end_forward":
            index = get_cursor_index(mode, line, cursor.horizontal_index)
            if index is None:
                return
            target = _word_motion(mode, line, index, direction)
            cursor.horizontal_index = absolute_at(line, target)
        case "search_next":
            select_search_match(cursor, lines, "down")
        case "search_previous":
            select_search_match(cursor, lines, "up")


def _move_vertical(mode: Mode, lines: list[BufferLine], cursor: Cursor, index: int) -> None:
    cursor.vertical_index = index
    cursor.horizontal_index = get_position(mode, lines[index], cursor.horizontal_index)


# ---------------------------------------------------------------------------
# Find character
# ---------------------------------------------------------------------------


def _find(
    mode: Mode, line: BufferLine, position: CursorPosition, kind: str, char: str
) -> int | None:
    if not char:
        return None

    index = get_cursor_index(mode, line, position)
    if index is None:
        return None

    content = line.content
    if kind in ("find_forward", "till_forward"):
        found = content.find(char, index + 1)
        if found < 0:
            return None
        if kind == "till_forward":
            return max(index, found - 1)
        return found

    found = content.rfind(char, 0, index)
    if found < 0:
        return None
    if kind == "till_backward":
        return min(index, found + 1)
    return found


def find_char(mode: Mode, line: BufferLine, position: CursorPosition, motion: FindChar) -> int | None:
    return _find(mode, line, position, motion.kind, motion.char)


# ---------------------------------------------------------------------------
# Word motions (line-local)
# ---------------------------------------------------------------------------


def _char_class(char: str) -> int:
    if is_whitespace_char(char):
        return 0
    if is_punctuation_char(char):
        return 1
    return 2


def _word_motion(mode: Mode, line: BufferLine, index: int, direction: str) -> int:
    content = line.content
    length = len(content)
    max_index = get_max_index(mode, line)
    if length == 0:
        return 0

    if direction == "word_start_forward":
        i = index
        if i < length and _char_class(content[i]) != 0:
            start_class = _char_class(content[i])
            while i < length and _char_class(content[i]) == start_class:
                i += 1
        while i < length and _char_class(content[i]) == 0:
            i += 1
        return min(i, max_index)

    if direction == "word_end_forward":
        i = index + 1
        while i < length and _char_class(content[i]) == 0:
            i += 1
        if i >= length:
            return max_index
        end_class = _char_class(content[i])
        while i + 1 < length and _char_class(content[i + 1]) == end_class:
            i += 1
        return min(i, max_index)

    # word_start_backward
    i = min(index, length) - 1
    while i >= 0 and _char_class(content[i]) == 0:
        i -= 1
    if i < 0:
        return 0
    start_class = _char_class(content[i])
    while i > 0 and _char_class(content[i - 1]) == start_class:
        i -= 1
    return i


# ---------------------------------------------------------------------------
# Search match selection
# ---------------------------------------------------------------------------


def select_search_match(cursor: Cursor, lines: list[BufferLine], direction: str) -> bool:
    """Move to the next search match in *direction*, wrapping at the buffer ends.

    Cursors without a horizontal position jump line-wise, skipping the
    current line. Returns ``True`` if the cursor moved to a match.
    """
    line_wise = isinstance(cursor.horizontal_index, NoPosition)

    matches: list[tuple[int, int]] = []
    for i, line in enumerate(lines):
        if not line.search:
            continue
        starts = sorted({span.start for span in line.search})
        if line_wise:
            matches.append((i, starts[0]))
        else:
            matches.extend((i, start) for start in starts)

    if not matches:
        return False

    if line_wise:
        here = (cursor.vertical_index, -1)
        if direction == "down":
            candidates = [m for m in matches if m[0] > cursor.vertical_index]
        else:
            candidates = [m for m in matches if m[0] < cursor.vertical_index]
    else:
        line = lines[cursor.vertical_index]
        current = get_cursor_index("insert", line, cursor.horizontal_index) or 0
        here = (cursor.vertical_index, current)
        if direction == "down":
            candidates = [m for m in matches if m > here]
        else:
            candidates = [m for m in matches if m < here]

    if direction == "down":
        target = candidates[0] if candidates else matches[0]
    else:
        target = candidates[-1] if candidates else matches[-1]

    if line_wise and target[0] == here[0]:
        return False

    cursor.vertical_index = target[0]
    if not line_wise:
        cursor.horizontal_index = absolute_at(lines[target[0]], target[1])
    return True


# ---------------------------------------------------------------------------
# Content lookup
# ---------------------------------------------------------------------------


def set_cursor_to_line_content(mode: Mode, buffer: Buffer, content: str) -> bool:
    """Move the cursor to the first line whose content equals *content*.

    A missing cursor is created on a hit. Returns ``False`` and leaves the
    buffer untouched when no line matches.
    """
    for index, line in enumerate(buffer.lines):
        if line.content != content:
            continue

        if buffer.cursor is None:
            buffer.cursor = Cursor()
        buffer.cursor.vertical_index = index
        buffer.cursor.horizontal_index = clamp_position(
            mode, line, buffer.cursor.horizontal_index
        )
        return True

    return False


def reset_cursor(buffer: Buffer) -> None:
    cursor = buffer.cursor
    if cursor is None:
        return

    cursor.vertical_index = 0
    match cursor.horizontal_index:
        case Absolute():
            cursor.horizontal_index = Absolute()
        case _:
            pass
