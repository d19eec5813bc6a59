"""Viewport scrolling driven by the cursor or by explicit scroll commands."""

from __future__ import annotations

from yeet.buffer.message import ViewPortDirection
from yeet.buffer.model import Absolute, Buffer, End, NoPosition
from yeet.buffer.width import display_width


def update_by_cursor(buffer: Buffer) -> None:
    """Scroll the viewport the minimum amount needed to show the cursor."""
    viewport = buffer.view_port
    cursor = buffer.cursor

    if not buffer.lines or cursor is None:
        viewport.vertical_index = 0
        viewport.horizontal_index = 0
        return

    height = viewport.height
    if height > 0:
        if cursor.vertical_index < viewport.vertical_index:
            viewport.vertical_index = cursor.vertical_index
        elif cursor.vertical_index >= viewport.vertical_index + height:
            viewport.vertical_index = cursor.vertical_index - height + 1

    if len(buffer.lines) <= height:
        viewport.vertical_index = 0

    line = buffer.lines[cursor.vertical_index]
    match cursor.horizontal_index:
        case Absolute(expanded=expanded):
            column = expanded
        case End():
            column = display_width(line.content)
        case NoPosition():
            viewport.horizontal_index = 0
            return
        case _:
            return

    content_width = viewport.get_content_width(line)
    if content_width <= 0:
        return

    if column < viewport.horizontal_index:
        viewport.horizontal_index = column
    elif column >= viewport.horizontal_index + content_width:
        viewport.horizontal_index = column - content_width + 1


def update_by_direction(buffer: Buffer, direction: ViewPortDirection) -> None:
    """Scroll by page, half page or anchor the cursor line; the cursor follows."""
    viewport = buffer.view_port
    cursor = buffer.cursor
    line_count = len(buffer.lines)
    if line_count == 0 or cursor is None:
        return

    height = max(viewport.height, 1)
    max_start = max(0, line_count - height)

    match direction:
        case "bottom_on_cursor":
            viewport.vertical_index = max(0, cursor.vertical_index - height + 1)
        case "center_on_cursor":
            viewport.vertical_index = max(0, cursor.vertical_index - height // 2)
        case "top_on_cursor":
            viewport.vertical_index = cursor.vertical_index
        case "half_page_down" | "page_down":
            offset = height // 2 if direction == "half_page_down" else height
            viewport.vertical_index = min(viewport.vertical_index + offset, max_start)
            cursor.vertical_index = min(cursor.vertical_index + offset, line_count - 1)
        case "half_page_up" | "page_up":
            offset = height // 2 if direction == "half_page_up" else height
            viewport.vertical_index = max(0, viewport.vertical_index - offset)
            cursor.vertical_index = max(0, cursor.vertical_index - offset)


def resize(buffer: Buffer, width: int, height: int) -> None:
    buffer.view_port.width = width
    buffer.view_port.height = height
