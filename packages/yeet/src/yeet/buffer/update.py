"""Message-driven state machine over ``{buffer, cursor, viewport}``."""

from __future__ import annotations

import copy
import logging

from yeet.buffer import cursor as cursor_ops
from yeet.buffer import modification, search, viewport
from yeet.buffer.message import (
    BufferMessage,
    ChangeMode,
    ClearSearch,
    Modification,
    MoveCursor,
    MoveViewPort,
    Redo,
    RemoveLine,
    ResetCursor,
    Resize,
    SaveBuffer,
    Search,
    SetContent,
    SetCursorToLineContent,
    SortContent,
    Undo,
)
from yeet.buffer.mode import get_rules
from yeet.buffer.model import Buffer, BufferLine, BufferResult, Mode, ResultKind
from yeet.buffer.undo import BufferChange, LineRemoved, invert

logger = logging.getLogger(__name__)


def update(mode: Mode, buffer: Buffer, message: BufferMessage) -> BufferResult:
    """Apply *message* to *buffer* in *mode* and describe what changed.

    The cursor is re-validated after every message: it is ``None`` exactly
    when the buffer has no lines, otherwise it is clamped to a legal position.
    """
    cursor_before = copy.deepcopy(buffer.cursor)
    viewport_before = (buffer.view_port.vertical_index, buffer.view_port.horizontal_index)

    changes: list[BufferChange] = []
    forced: ResultKind | None = None

    match message:
        case ChangeMode(from_mode, to_mode):
            if from_mode == "insert" and to_mode != "insert":
                buffer.undo.close_transaction()
            mode = to_mode

        case MoveCursor(direction, count):
            cursor_ops.update_by_direction(mode, buffer, count, direction)

        case Modification(text_modification, count):
            if not get_rules(mode).editable:
                logger.debug("Ignoring %s in read-only mode %s", text_modification, mode)
                return BufferResult()

            cursor_snapshot = copy.deepcopy(buffer.cursor)
            changes = modification.update(mode, buffer, count, text_modification)
            cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)
            buffer.undo.add(mode, changes, cursor_snapshot, copy.deepcopy(buffer.cursor))

        case MoveViewPort(direction):
            viewport.update_by_direction(buffer, direction)
            if buffer.cursor is not None and buffer.lines:
                line = buffer.lines[buffer.cursor.vertical_index]
                buffer.cursor.horizontal_index = cursor_ops.get_position(
                    mode, line, buffer.cursor.horizontal_index
                )

        case SetContent(lines):
            set_content(mode, buffer, list(lines))
            buffer.undo.clear()
            forced = "content_changed"

        case SetCursorToLineContent(content):
            if not cursor_ops.set_cursor_to_line_content(mode, buffer, content):
                return BufferResult()
            forced = "cursor_position_changed"

        case ResetCursor():
            reset_view(buffer)

        case RemoveLine(index):
            changes = _remove_line(buffer, index)

        case SortContent(key):
            _sort_content(buffer, key)
            forced = "content_changed"

        case Search(pattern, direction):
            matched = search.set_search(buffer.lines, pattern)
            if matched and buffer.cursor is not None:
                cursor_ops.select_search_match(buffer.cursor, buffer.lines, direction)

        case ClearSearch():
            search.clear_search(buffer.lines)

        case Undo():
            entry = buffer.undo.undo(buffer.lines)
            if entry is not None:
                changes = [invert(change) for change in reversed(entry.changes)]
                buffer.cursor = copy.deepcopy(entry.cursor)

        case Redo():
            entry = buffer.undo.redo(buffer.lines)
            if entry is not None:
                changes = list(entry.changes)
                buffer.cursor = copy.deepcopy(entry.cursor_after)

        case SaveBuffer():
            changes = buffer.undo.save()

        case Resize(width, height):
            viewport.resize(buffer, width, height)

    cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)
    viewport.update_by_cursor(buffer)

    if forced is not None:
        kind: ResultKind = forced
    elif changes:
        kind = "content_changed"
    elif buffer.cursor != cursor_before:
        kind = "cursor_position_changed"
    elif (buffer.view_port.vertical_index, buffer.view_port.horizontal_index) != viewport_before:
        kind = "viewport_changed"
    else:
        kind = "unchanged"

    return BufferResult(kind=kind, changes=tuple(changes))


# ---------------------------------------------------------------------------
# Collaborator helpers
# ---------------------------------------------------------------------------


def set_content(mode: Mode, buffer: Buffer, lines: list[BufferLine]) -> None:
    buffer.lines = lines
    cursor_ops.set_outbound_cursor_to_inbound_position(mode, buffer)


def reset_view(buffer: Buffer) -> None:
    buffer.view_port.vertical_index = 0
    buffer.view_port.horizontal_index = 0
    cursor_ops.reset_cursor(buffer)


def focus_buffer(buffer: Buffer) -> None:
    if buffer.cursor is not None:
        buffer.cursor.hide_cursor = False


def unfocus_buffer(buffer: Buffer) -> None:
    if buffer.cursor is not None:
        buffer.cursor.hide_cursor = True


def _remove_line(buffer: Buffer, index: int) -> list[BufferChange]:
    if not 0 <= index < len(buffer.lines):
        return []

    line = buffer.lines.pop(index)
    cursor = buffer.cursor
    if cursor is not None and cursor.vertical_index > index:
        cursor.vertical_index -= 1
    return [LineRemoved(index, line.content)]


def _sort_content(buffer: Buffer, key) -> None:
    selected = None
    if buffer.cursor is not None and 0 <= buffer.cursor.vertical_index < len(buffer.lines):
        selected = buffer.lines[buffer.cursor.vertical_index]

    buffer.lines.sort(key=key)

    if selected is not None and buffer.cursor is not None:
        for index, line in enumerate(buffer.lines):
            if line is selected:
                buffer.cursor.vertical_index = index
                break
