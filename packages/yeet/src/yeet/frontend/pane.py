"""Panes and the collaborator messages that fill them.

Directory reading, previews and error reporting happen outside the buffer
engine; their results arrive here as messages and are turned into buffer
updates by :func:`apply`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Union

from yeet.buffer.ansi import parse_ansi
from yeet.buffer.message import Resize, SetContent, SetCursorToLineContent
from yeet.buffer.model import (
    Buffer,
    BufferLine,
    BufferResult,
    Cursor,
    Mode,
    NoPosition,
    StyleSpan,
)
from yeet.buffer.update import update

logger = logging.getLogger(__name__)

PaneKind = Literal["parent", "current", "preview"]

EntryKind = Literal["directory", "file", "text"]

DIRECTORY_STYLE: tuple[tuple[str, str], ...] = (("foreground", "blue"), ("modifier", "bold"))
ERROR_STYLE = ("foreground", "red")


# ============================================================================
# Messages
# ============================================================================


@dataclass(frozen=True)
class Entry:
    """One line of pane content.

    ``text`` entries are preview output and may carry ANSI styling.
    """

    content: str
    kind: EntryKind = "file"


@dataclass(frozen=True)
class ContentReplaced:
    pane: PaneKind
    path: str
    entries: tuple[Entry, ...] = ()


@dataclass(frozen=True)
class RestoreSelection:
    """Put the cursor on the remembered child ``selection`` of ``path``."""

    pane: PaneKind
    path: str
    selection: str | None = None


@dataclass(frozen=True)
class Resized:
    pane: PaneKind
    width: int
    height: int


@dataclass(frozen=True)
class LoadFailed:
    pane: PaneKind
    path: str
    error: str


PaneMessage = Union[ContentReplaced, RestoreSelection, Resized, LoadFailed]


# ============================================================================
# Pane
# ============================================================================


@dataclass
class Pane:
    kind: PaneKind
    buffer: Buffer = field(default_factory=Buffer)
    path: str | None = None

    def selected(self) -> BufferLine | None:
        """Line under the cursor, if any."""
        cursor = self.buffer.cursor
        if cursor is None or not self.buffer.lines:
            return None
        return self.buffer.lines[cursor.vertical_index]


def to_line(entry: Entry) -> BufferLine:
    match entry.kind:
        case "directory":
            end = len(entry.content)
            style = [StyleSpan(0, end, kind, value) for kind, value in DIRECTORY_STYLE]  # type: ignore[arg-type]
            return BufferLine(content=entry.content, style=style if end else [])
        case "text":
            plain, spans = parse_ansi(entry.content)
            return BufferLine(content=plain, style=spans)
        case _:
            return BufferLine(content=entry.content)


def apply(mode: Mode, pane: Pane, message: PaneMessage) -> BufferResult:
    """Turn a collaborator message into updates of *pane*'s buffer."""
    match message:
        case ContentReplaced(_, path, entries):
            if pane.path != path:
                pane.buffer.cursor = None
                pane.path = path
            result = update(mode, pane.buffer, SetContent([to_line(e) for e in entries]))
            if pane.kind == "preview" and pane.buffer.cursor is not None:
                pane.buffer.cursor.hide_cursor = True
                pane.buffer.cursor.hide_cursor_line = True
            return result

        case RestoreSelection(_, path, selection):
            if pane.path != path or selection is None:
                return BufferResult()
            return update(mode, pane.buffer, SetCursorToLineContent(selection))

        case Resized(_, width, height):
            return update(mode, pane.buffer, Resize(width, height))

        case LoadFailed(_, path, error):
            logger.error("Failed to load %s: %s", path, error)
            pane.path = path
            line = BufferLine(
                content=error, style=[StyleSpan(0, len(error), *ERROR_STYLE)]  # type: ignore[arg-type]
            )
            pane.buffer.cursor = Cursor(
                horizontal_index=NoPosition(), hide_cursor=True, hide_cursor_line=True
            )
            return update(mode, pane.buffer, SetContent([line]))

    return BufferResult()
