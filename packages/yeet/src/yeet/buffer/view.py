"""Render projection: turns a buffer into the rows visible in its viewport.

``view`` is a pure function. It clips each visible line to the viewport's
content area in display-column space, re-bases style and search spans onto the
clipped text and prepends the gutter (sign column, line number, custom prefix
and border).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from yeet.buffer.ansi import to_ansi
from yeet.buffer.cursor import get_cursor_index
from yeet.buffer.model import Buffer, BufferLine, Cursor, Mode, NoPosition, StyleSpan, ViewPort
from yeet.buffer.width import TAB_WIDTH, char_index_to_column, column_to_char_index, slice_columns

CursorStyle = Literal["block", "underline", "none"]

CURSOR_LINE_STYLE = ("background", "bright_black")


@dataclass
class RenderedLine:
    gutter: str = ""
    content: str = ""
    style: list[StyleSpan] = field(default_factory=list)
    search: list[StyleSpan] = field(default_factory=list)
    cursor_column: int | None = None
    """Display column of the cursor relative to the start of ``content``."""
    cursor_style: CursorStyle = "none"
    cursor_line: bool = False

    def to_ansi(self) -> str:
        spans = list(self.style) + list(self.search)
        if self.cursor_line and self.content:
            spans.insert(0, StyleSpan(0, len(self.content), *CURSOR_LINE_STYLE))

        content = self.content
        if self.cursor_column is not None and self.cursor_style != "none":
            index = column_to_char_index(content, self.cursor_column)
            if index >= len(content):
                content = content + " "
            value = "reversed" if self.cursor_style == "block" else "underline"
            spans.append(StyleSpan(index, index + 1, "modifier", value))

        return self.gutter + to_ansi(content, spans)


def view(viewport: ViewPort, mode: Mode, cursor: Cursor | None, buffer: Buffer) -> list[RenderedLine]:
    """Project the visible part of *buffer* into at most ``viewport.height`` rows."""
    if viewport.width <= 0 or viewport.height <= 0:
        return []

    start = max(0, viewport.vertical_index)
    end = min(start + viewport.height, len(buffer.lines))

    rows: list[RenderedLine] = []
    for index in range(start, end):
        line = buffer.lines[index]
        rows.append(_render_line(viewport, mode, cursor, line, index))
    return rows


def _render_line(
    viewport: ViewPort, mode: Mode, cursor: Cursor | None, line: BufferLine, index: int
) -> RenderedLine:
    gutter = get_gutter(viewport, cursor, line, index)
    content_width = viewport.get_content_width(line)
    if content_width <= 0:
        return RenderedLine(gutter=gutter)

    clipped, first, last, padding = slice_columns(
        line.content, viewport.horizontal_index, content_width
    )

    def _rebase(spans: list[StyleSpan] | None) -> list[StyleSpan]:
        rebased: list[StyleSpan] = []
        for span in spans or []:
            span_start = max(span.start, first)
            span_end = min(span.end, last)
            if span_start >= span_end:
                continue
            rebased.append(
                StyleSpan(
                    _clipped_index(line.content, first, padding, span_start),
                    _clipped_index(line.content, first, padding, span_end),
                    span.kind,
                    span.value,
                )
            )
        return rebased

    rendered = RenderedLine(
        gutter=gutter,
        content=clipped,
        style=_rebase(line.style),
        search=_rebase(line.search),
    )

    if cursor is None or cursor.vertical_index != index:
        return rendered

    rendered.cursor_line = not cursor.hide_cursor_line
    if cursor.hide_cursor or isinstance(cursor.horizontal_index, NoPosition):
        return rendered

    position = get_cursor_index(mode, line, cursor.horizontal_index)
    if position is None:
        return rendered

    column = char_index_to_column(line.content, position) - viewport.horizontal_index
    if 0 <= column < content_width:
        rendered.cursor_column = column
        rendered.cursor_style = "underline" if mode in ("insert", "command") else "block"

    return rendered


def _clipped_index(content: str, first: int, padding: int, index: int) -> int:
    # tabs are expanded to TAB_WIDTH spaces in the clipped text
    segment = content[first:index]
    return padding + len(segment) + segment.count("\t") * (TAB_WIDTH - 1)


# ---------------------------------------------------------------------------
# Gutter
# ---------------------------------------------------------------------------


def get_gutter(viewport: ViewPort, cursor: Cursor | None, line: BufferLine, index: int) -> str:
    parts = [
        get_signs(viewport, line),
        get_line_number(viewport, cursor, index),
        line.prefix or "",
        " " * viewport.get_border_width(),
    ]
    return "".join(parts)


def get_signs(viewport: ViewPort, line: BufferLine) -> str:
    width = viewport.sign_column_width
    if width <= 0:
        return ""

    signs = [sign for sign in line.signs if sign.id not in viewport.hidden_sign_ids]
    signs.sort(key=lambda sign: sign.priority, reverse=True)
    glyphs = "".join(sign.content for sign in signs)[:width]
    return glyphs.ljust(width)


def get_line_number(viewport: ViewPort, cursor: Cursor | None, index: int) -> str:
    width = viewport.get_line_number_width()
    if width <= 0:
        return ""

    number = index + 1
    if viewport.line_number == "relative" and cursor is not None:
        if cursor.vertical_index == index:
            return str(number)[-width:].ljust(width)
        number = abs(cursor.vertical_index - index)

    return str(number)[-width:].rjust(width)
