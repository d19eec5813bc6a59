"""Text modifications applied at the cursor, each reported as a list of changes."""

from __future__ import annotations

import copy

from yeet.buffer import cursor as cursor_ops
from yeet.buffer.message import (
    DeleteCharBeforeCursor,
    DeleteCharOnCursor,
    DeleteLine,
    DeleteMotion,
    FindChar,
    InsertLineBreak,
    InsertNewLine,
    InsertText,
    Motion,
    ReplaceChar,
    TextModification,
)
from yeet.buffer.model import Absolute, Buffer, BufferLine, Cursor, Mode, NoPosition
from yeet.buffer.undo import BufferChange, ContentChanged, LineAdded, LineRemoved

_LINE_WISE_MOTIONS = frozenset({"up", "down", "top", "bottom"})
_INCLUSIVE_MOTIONS = frozenset({"line_end", "word_end_forward"})


def is_line_wise(motion: Motion) -> bool:
    return not isinstance(motion, FindChar) and motion in _LINE_WISE_MOTIONS


def is_inclusive(motion: Motion) -> bool:
    if isinstance(motion, FindChar):
        return True
    return motion in _INCLUSIVE_MOTIONS


def update(
    mode: Mode, buffer: Buffer, count: int, modification: TextModification
) -> list[BufferChange]:
    """Apply *modification* *count* times and return the resulting changes.

    An empty list means nothing changed.
    """
    cursor = buffer.cursor
    if cursor is None and not isinstance(modification, InsertText):
        return []

    match modification:
        case InsertText(text):
            changes: list[BufferChange] = []
            for _ in range(max(count, 1)):
                changes.extend(_insert_text(mode, buffer, text))
            return changes
        case DeleteLine():
            return _delete_lines(mode, buffer, max(count, 1))
        case DeleteMotion(motion, delete_count):
            changes = []
            for _ in range(max(count, 1)):
                changes.extend(_delete_motion(mode, buffer, delete_count, motion))
            return changes
        case DeleteCharBeforeCursor():
            return _delete_chars(mode, buffer, max(count, 1), before=True)
        case DeleteCharOnCursor():
            return _delete_chars(mode, buffer, max(count, 1), before=False)
        case InsertNewLine(direction):
            return _insert_new_line(buffer, direction)
        case InsertLineBreak():
            return _insert_line_break(mode, buffer)
        case ReplaceChar(char):
            return _replace_chars(mode, buffer, max(count, 1), char)
    return []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _current_line(buffer: Buffer) -> tuple[Cursor, BufferLine] | None:
    cursor = buffer.cursor
    if cursor is None or isinstance(cursor.horizontal_index, NoPosition):
        return None
    if not 0 <= cursor.vertical_index < len(buffer.lines):
        return None
    return (cursor, buffer.lines[cursor.vertical_index])


def _edit_index(cursor: Cursor, line: BufferLine) -> int:
    # edits resolve End/Absolute against the full line, independent of mode
    index = cursor_ops.get_cursor_index("insert", line, cursor.horizontal_index)
    return index if index is not None else 0


def _set_content(buffer: Buffer, index: int, new: str) -> list[BufferChange]:
    line = buffer.lines[index]
    if line.content == new:
        return []
    changed = ContentChanged(index, line.content, new)
    line.content = new
    line.style = []
    line.search = None
    return [changed]


# ---------------------------------------------------------------------------
# Modifications
# ---------------------------------------------------------------------------


def _insert_text(mode: Mode, buffer: Buffer, text: str) -> list[BufferChange]:
    if not text:
        return []

    changes: list[BufferChange] = []
    if not buffer.lines:
        if buffer.cursor is not None and isinstance(buffer.cursor.horizontal_index, NoPosition):
            return []
        buffer.lines.append(BufferLine())
        changes.append(LineAdded(0, ""))
    if buffer.cursor is None:
        buffer.cursor = Cursor()

    found = _current_line(buffer)
    if found is None:
        return changes
    cursor, line = found

    if isinstance(cursor.horizontal_index, Absolute) or mode == "insert":
        index = _edit_index(cursor, line)
    else:
        # End outside insert mode appends after the last character
        index = len(line)

    new = line.content[:index] + text + line.content[index:]
    changes.extend(_set_content(buffer, cursor.vertical_index, new))
    cursor.horizontal_index = cursor_ops.absolute_at(line, index + len(text))
    return changes


def _delete_lines(mode: Mode, buffer: Buffer, count: int) -> list[BufferChange]:
    cursor = buffer.cursor
    if cursor is None:
        return []

    changes: list[BufferChange] = []
    for _ in range(count):
        if not buffer.lines:
            break

        line_index = min(cursor.vertical_index, len(buffer.lines) - 1)
        line = buffer.lines.pop(line_index)
        changes.append(LineRemoved(line_index, line.content))

        line_count = len(buffer.lines)
        if line_count == 0:
            cursor.vertical_index = 0
        elif line_index >= line_count:
            cursor.vertical_index = line_count - 1

    cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)
    return changes


def _delete_motion(mode: Mode, buffer: Buffer, count: int, motion: Motion) -> list[BufferChange]:
    found = _current_line(buffer)
    if found is None and not is_line_wise(motion):
        return []

    cursor = buffer.cursor
    if cursor is None:
        return []

    pre_motion = copy.deepcopy(cursor)
    # deletes may reach one past the motion target, so move as in insert mode
    cursor_ops.update_by_direction("insert", buffer, count, motion)
    post_motion = copy.deepcopy(cursor)

    if is_line_wise(motion):
        pre_index = pre_motion.vertical_index
        post_index = post_motion.vertical_index
        if pre_index == post_index:
            buffer.cursor = pre_motion
            return []

        if post_index > pre_index:
            buffer.cursor = pre_motion
        return _delete_lines(mode, buffer, abs(post_index - pre_index) + 1)

    line_index = pre_motion.vertical_index
    line = buffer.lines[line_index]
    pre_index = _edit_index(pre_motion, line)
    if post_motion.vertical_index > line_index:
        post_index = len(line)
    elif post_motion.vertical_index < line_index:
        post_index = 0
    else:
        post_index = _edit_index(post_motion, line)

    if isinstance(motion, FindChar) and post_index == pre_index:
        # find without a hit deletes nothing
        buffer.cursor = pre_motion
        return []

    if pre_index > post_index:
        start, length = post_index, pre_index - post_index
        buffer.cursor = post_motion
        buffer.cursor.vertical_index = line_index
        buffer.cursor.horizontal_index = cursor_ops.absolute_at(line, start)
    else:
        start, length = pre_index, post_index - pre_index
        buffer.cursor = pre_motion
        if is_inclusive(motion) and post_index < len(line):
            length += 1

    if length == 0:
        buffer.cursor = pre_motion
        return []

    new = line.content[:start] + line.content[start + length :]
    changes = _set_content(buffer, line_index, new)
    buffer.cursor.horizontal_index = cursor_ops.absolute_at(buffer.lines[line_index], start)
    cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)
    return changes


def _delete_chars(mode: Mode, buffer: Buffer, count: int, before: bool) -> list[BufferChange]:
    found = _current_line(buffer)
    if found is None:
        return []
    cursor, line = found

    index = _edit_index(cursor, line)
    if before:
        start = max(0, index - count)
        end = index
    else:
        if isinstance(cursor.horizontal_index, Absolute) or mode == "insert":
            start = index
        else:
            start = max(0, len(line) - 1)
        end = min(len(line), start + count)

    if start >= end:
        return []

    new = line.content[:start] + line.content[end:]
    changes = _set_content(buffer, cursor.vertical_index, new)
    cursor.horizontal_index = cursor_ops.absolute_at(line, start)
    cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)
    return changes


def _replace_chars(mode: Mode, buffer: Buffer, count: int, char: str) -> list[BufferChange]:
    found = _current_line(buffer)
    if found is None or not char:
        return []
    cursor, line = found

    index = cursor_ops.get_cursor_index(mode, line, cursor.horizontal_index)
    if index is None or index + count > len(line):
        return []

    new = line.content[:index] + char * count + line.content[index + count :]
    changes = _set_content(buffer, cursor.vertical_index, new)
    cursor.horizontal_index = cursor_ops.absolute_at(line, index + count - 1)
    return changes


def _insert_new_line(buffer: Buffer, direction: str) -> list[BufferChange]:
    cursor = buffer.cursor
    if cursor is None:
        return []

    if direction == "up" or not buffer.lines:
        index = min(cursor.vertical_index, len(buffer.lines))
    else:
        index = cursor.vertical_index + 1

    buffer.lines.insert(index, BufferLine())
    cursor.vertical_index = index
    cursor.horizontal_index = Absolute()
    return [LineAdded(index, "")]


def _insert_line_break(mode: Mode, buffer: Buffer) -> list[BufferChange]:
    if not buffer.lines and buffer.cursor is not None:
        return _insert_new_line(buffer, "down")

    found = _current_line(buffer)
    if found is None:
        return []
    cursor, line = found

    index = _edit_index(cursor, line)
    head = line.content[:index]
    tail = line.content[index:]

    changes = _set_content(buffer, cursor.vertical_index, head)
    vertical = cursor.vertical_index + 1
    buffer.lines.insert(vertical, BufferLine(content=tail))
    changes.append(LineAdded(vertical, tail))

    cursor.vertical_index = vertical
    cursor.horizontal_index = Absolute()
    return changes
