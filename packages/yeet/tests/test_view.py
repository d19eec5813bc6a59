"""Tests for yeet.buffer.view -- projecting buffers into visible rows."""

from __future__ import annotations

import copy

from yeet.buffer.model import (
    Absolute,
    Buffer,
    BufferLine,
    Cursor,
    End,
    NoPosition,
    Sign,
    StyleSpan,
    ViewPort,
)
from yeet.buffer.view import RenderedLine, get_line_number, get_signs, view


def render(buffer: Buffer, mode: str = "navigation") -> list[RenderedLine]:
    return view(buffer.view_port, mode, buffer.cursor, buffer)


class TestView:
    def test_rows_limited_to_height(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("a"), BufferLine("b"), BufferLine("c")],
            cursor=Cursor(),
            view_port=ViewPort(height=2, width=10),
        )
        rows = render(buffer)
        assert [row.content for row in rows] == ["a", "b"]

    def test_rows_start_at_viewport(self) -> None:
        buffer = Buffer(
            lines=[BufferLine(str(i)) for i in range(5)],
            cursor=Cursor(vertical_index=4),
            view_port=ViewPort(height=2, width=10, vertical_index=3),
        )
        assert [row.content for row in render(buffer)] == ["3", "4"]

    def test_empty_geometry_renders_nothing(self) -> None:
        buffer = Buffer(lines=[BufferLine("a")], cursor=Cursor(), view_port=ViewPort(height=0, width=10))
        assert render(buffer) == []

    def test_cursor_row(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("a"), BufferLine("b")],
            cursor=Cursor(),
            view_port=ViewPort(height=2, width=10),
        )
        first, second = render(buffer)
        assert first.cursor_line
        assert first.cursor_column == 0
        assert first.cursor_style == "block"
        assert not second.cursor_line
        assert second.cursor_column is None

    def test_insert_mode_cursor_after_last_char(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("ab")],
            cursor=Cursor(horizontal_index=End()),
            view_port=ViewPort(height=1, width=10),
        )
        (row,) = render(buffer, "insert")
        assert row.cursor_column == 2
        assert row.cursor_style == "underline"

    def test_hidden_cursor_keeps_cursor_line(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("ab")],
            cursor=Cursor(hide_cursor=True),
            view_port=ViewPort(height=1, width=10),
        )
        (row,) = render(buffer)
        assert row.cursor_line
        assert row.cursor_column is None

    def test_hidden_cursor_line(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("ab")],
            cursor=Cursor(hide_cursor_line=True),
            view_port=ViewPort(height=1, width=10),
        )
        (row,) = render(buffer)
        assert not row.cursor_line

    def test_no_position_has_no_cursor_column(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("ab")],
            cursor=Cursor(horizontal_index=NoPosition()),
            view_port=ViewPort(height=1, width=10),
        )
        (row,) = render(buffer)
        assert row.cursor_line
        assert row.cursor_column is None


class TestClipping:
    """Content and spans are clipped in display-column space."""

    def test_horizontal_scroll_rebases_spans_and_cursor(self) -> None:
        line = BufferLine("abcdefgh", style=[StyleSpan(0, 4, "foreground", "red")])
        buffer = Buffer(
            lines=[line],
            cursor=Cursor(horizontal_index=Absolute(3, 3)),
            view_port=ViewPort(height=1, width=4, horizontal_index=2),
        )
        (row,) = render(buffer)
        assert row.content == "cdef"
        assert row.style == [StyleSpan(0, 2, "foreground", "red")]
        assert row.cursor_column == 1

    def test_tab_expands_in_output(self) -> None:
        line = BufferLine("\tab", search=[StyleSpan(1, 2, "background", "yellow")])
        buffer = Buffer(lines=[line], cursor=Cursor(), view_port=ViewPort(height=1, width=10))
        (row,) = render(buffer)
        assert row.content == "   ab"
        assert row.search == [StyleSpan(3, 4, "background", "yellow")]

    def test_spans_outside_window_are_dropped(self) -> None:
        line = BufferLine("abcdefgh", style=[StyleSpan(0, 2, "foreground", "red")])
        buffer = Buffer(
            lines=[line],
            cursor=Cursor(),
            view_port=ViewPort(height=1, width=3, horizontal_index=4),
        )
        (row,) = render(buffer)
        assert row.content == "efg"
        assert row.style == []

    def test_zero_width_char_left_of_window_keeps_spans_aligned(self) -> None:
        line = BufferLine("ab\x07cd", style=[StyleSpan(0, 5, "foreground", "red")])
        buffer = Buffer(
            lines=[line],
            cursor=Cursor(),
            view_port=ViewPort(height=1, width=5, horizontal_index=3),
        )
        (row,) = render(buffer)
        assert row.content == "d"
        assert row.style == [StyleSpan(0, 1, "foreground", "red")]


class TestPurity:
    def make_buffer(self) -> Buffer:
        lines = [
            BufferLine(
                f"line {index}\tend",
                style=[StyleSpan(0, 4, "foreground", "blue")],
                search=[StyleSpan(5, 6, "background", "yellow")],
                signs=[Sign("mark", "m", priority=index)],
            )
            for index in range(8)
        ]
        return Buffer(
            lines=lines,
            cursor=Cursor(vertical_index=4, horizontal_index=Absolute(6, 6)),
            view_port=ViewPort(
                height=3,
                width=12,
                vertical_index=3,
                horizontal_index=2,
                line_number="relative",
                line_number_width=2,
                sign_column_width=1,
            ),
        )

    def test_repeated_calls_are_identical(self) -> None:
        buffer = self.make_buffer()
        first = render(buffer, "normal")
        second = render(buffer, "normal")
        assert first == second
        assert len(first) == 3

    def test_model_is_not_modified(self) -> None:
        buffer = self.make_buffer()
        before = copy.deepcopy(buffer)
        render(buffer, "normal")
        assert buffer.lines == before.lines
        assert buffer.cursor == before.cursor
        assert buffer.view_port == before.view_port


class TestGutter:
    def test_relative_line_numbers(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("a"), BufferLine("b"), BufferLine("c")],
            cursor=Cursor(vertical_index=1),
            view_port=ViewPort(
                height=3, width=10, line_number="relative", line_number_width=3, sign_column_width=2
            ),
        )
        assert [row.gutter for row in render(buffer)] == ["    1 ", "  2   ", "    1 "]

    def test_absolute_line_numbers(self) -> None:
        viewport = ViewPort(line_number="absolute", line_number_width=2)
        assert get_line_number(viewport, Cursor(), 9) == "10"
        assert get_line_number(viewport, Cursor(), 0) == " 1"

    def test_relative_without_cursor_is_absolute(self) -> None:
        viewport = ViewPort(line_number="relative", line_number_width=2)
        assert get_line_number(viewport, None, 4) == " 5"

    def test_signs_by_priority(self) -> None:
        line = BufferLine(
            "a", signs=[Sign("mark", "m", priority=1), Sign("quickfix", "q", priority=5)]
        )
        assert get_signs(ViewPort(sign_column_width=2), line) == "qm"

    def test_hidden_signs(self) -> None:
        line = BufferLine(
            "a", signs=[Sign("mark", "m", priority=1), Sign("quickfix", "q", priority=5)]
        )
        viewport = ViewPort(sign_column_width=2, hidden_sign_ids={"quickfix"})
        assert get_signs(viewport, line) == "m "

    def test_custom_prefix(self) -> None:
        buffer = Buffer(
            lines=[BufferLine("a", prefix="> ")],
            cursor=Cursor(),
            view_port=ViewPort(height=1, width=10),
        )
        (row,) = render(buffer)
        assert row.gutter == "> "


class TestRenderedLineAnsi:
    def test_block_cursor(self) -> None:
        row = RenderedLine(gutter="1 ", content="ab", cursor_column=0, cursor_style="block")
        assert row.to_ansi() == "1 \x1b[7ma\x1b[0mb"

    def test_cursor_past_end_pads(self) -> None:
        row = RenderedLine(content="ab", cursor_column=2, cursor_style="block")
        assert row.to_ansi() == "ab\x1b[7m \x1b[0m"

    def test_plain(self) -> None:
        assert RenderedLine(gutter="  ", content="ab").to_ansi() == "  ab"
