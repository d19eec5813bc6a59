"""Tests for yeet.buffer.modification -- text edits at the cursor."""

from __future__ import annotations

from yeet.buffer.message import (
    DeleteCharBeforeCursor,
    DeleteCharOnCursor,
    DeleteLine,
    DeleteMotion,
    FindChar,
    InsertLineBreak,
    InsertNewLine,
    InsertText,
    ReplaceChar,
)
from yeet.buffer.model import Absolute, Buffer, BufferLine, Cursor, End, NoPosition, StyleSpan
from yeet.buffer.modification import is_inclusive, is_line_wise, update
from yeet.buffer.undo import ContentChanged, LineAdded, LineRemoved


def make_buffer(*contents: str, vertical: int = 0, current: int = 0) -> Buffer:
    return Buffer(
        lines=[BufferLine(content=c) for c in contents],
        cursor=Cursor(vertical_index=vertical, horizontal_index=Absolute(current, current)),
    )


def contents(buffer: Buffer) -> list[str]:
    return [line.content for line in buffer.lines]


class TestMotionKinds:
    def test_line_wise(self) -> None:
        assert is_line_wise("down")
        assert is_line_wise("top")
        assert not is_line_wise("word_start_forward")
        assert not is_line_wise(FindChar("find_forward", "x"))

    def test_inclusive(self) -> None:
        assert is_inclusive("line_end")
        assert is_inclusive("word_end_forward")
        assert is_inclusive(FindChar("till_forward", "x"))
        assert not is_inclusive("word_start_forward")


class TestInsertText:
    """Insert at the cursor and advance past the inserted text."""

    def test_insert_in_middle(self) -> None:
        buffer = make_buffer("hed", current=2)
        changes = update("insert", buffer, 1, InsertText("llo worl"))
        assert contents(buffer) == ["hello world"]
        assert changes == [ContentChanged(0, "hed", "hello world")]
        assert buffer.cursor.horizontal_index == Absolute(10, 10)

    def test_insert_with_count(self) -> None:
        buffer = make_buffer("")
        update("insert", buffer, 3, InsertText("ab"))
        assert contents(buffer) == ["ababab"]

    def test_insert_into_empty_buffer_creates_line(self) -> None:
        buffer = Buffer()
        changes = update("insert", buffer, 1, InsertText("x"))
        assert contents(buffer) == ["x"]
        assert changes == [LineAdded(0, ""), ContentChanged(0, "", "x")]
        assert buffer.cursor is not None

    def test_insert_at_end_position_appends(self) -> None:
        buffer = make_buffer("abc")
        buffer.cursor.horizontal_index = End()
        update("normal", buffer, 1, InsertText("d"))
        assert contents(buffer) == ["abcd"]

    def test_edit_clears_styles_and_search(self) -> None:
        buffer = make_buffer("abc")
        buffer.lines[0].style = [StyleSpan(0, 3, "foreground", "blue")]
        buffer.lines[0].search = [StyleSpan(0, 1, "background", "yellow")]
        update("insert", buffer, 1, InsertText("x"))
        assert buffer.lines[0].style == []
        assert buffer.lines[0].search is None

    def test_no_position_cursor_is_not_edited(self) -> None:
        buffer = make_buffer("abc")
        buffer.cursor.horizontal_index = NoPosition()
        assert update("insert", buffer, 1, InsertText("x")) == []
        assert contents(buffer) == ["abc"]


class TestDeleteChars:
    def test_delete_on_cursor(self) -> None:
        buffer = make_buffer("abcd", current=1)
        changes = update("normal", buffer, 2, DeleteCharOnCursor())
        assert contents(buffer) == ["ad"]
        assert changes == [ContentChanged(0, "abcd", "ad")]
        assert buffer.cursor.horizontal_index == Absolute(1, 1)

    def test_delete_last_char_clamps_cursor(self) -> None:
        buffer = make_buffer("abc", current=2)
        update("normal", buffer, 1, DeleteCharOnCursor())
        assert contents(buffer) == ["ab"]
        assert buffer.cursor.horizontal_index == Absolute(1, 1)

    def test_delete_before_cursor(self) -> None:
        buffer = make_buffer("abcd", current=2)
        update("insert", buffer, 1, DeleteCharBeforeCursor())
        assert contents(buffer) == ["acd"]
        assert buffer.cursor.horizontal_index == Absolute(1, 1)

    def test_delete_before_at_line_start_is_noop(self) -> None:
        buffer = make_buffer("abc")
        assert update("insert", buffer, 1, DeleteCharBeforeCursor()) == []

    def test_delete_on_empty_line_is_noop(self) -> None:
        buffer = make_buffer("")
        assert update("normal", buffer, 1, DeleteCharOnCursor()) == []


class TestDeleteLines:
    def test_delete_line(self) -> None:
        buffer = make_buffer("a", "b", "c", vertical=1)
        changes = update("normal", buffer, 1, DeleteLine())
        assert contents(buffer) == ["a", "c"]
        assert changes == [LineRemoved(1, "b")]
        assert buffer.cursor.vertical_index == 1

    def test_delete_last_line_moves_cursor_up(self) -> None:
        buffer = make_buffer("a", "b", vertical=1)
        update("normal", buffer, 1, DeleteLine())
        assert buffer.cursor.vertical_index == 0

    def test_delete_more_lines_than_exist(self) -> None:
        buffer = make_buffer("a", "b")
        changes = update("normal", buffer, 5, DeleteLine())
        assert contents(buffer) == []
        assert len(changes) == 2
        assert buffer.cursor is None


class TestDeleteMotion:
    """d followed by a motion."""

    def test_delete_word(self) -> None:
        buffer = make_buffer("foo bar baz", current=4)
        update("normal", buffer, 1, DeleteMotion("word_start_forward"))
        assert contents(buffer) == ["foo baz"]
        assert buffer.cursor.horizontal_index == Absolute(4, 4)

    def test_delete_last_word_reaches_line_end(self) -> None:
        buffer = make_buffer("foo bar", current=4)
        update("normal", buffer, 1, DeleteMotion("word_start_forward"))
        assert contents(buffer) == ["foo "]

    def test_delete_word_backward(self) -> None:
        buffer = make_buffer("foo bar", current=4)
        update("normal", buffer, 1, DeleteMotion("word_start_backward"))
        assert contents(buffer) == ["bar"]
        assert buffer.cursor.horizontal_index == Absolute(0, 0)

    def test_delete_to_line_end(self) -> None:
        buffer = make_buffer("hello world", current=5)
        update("normal", buffer, 1, DeleteMotion("line_end"))
        assert contents(buffer) == ["hello"]
        assert buffer.cursor.horizontal_index == Absolute(4, 4)

    def test_delete_to_line_start(self) -> None:
        buffer = make_buffer("hello world", current=6)
        update("normal", buffer, 1, DeleteMotion("line_start"))
        assert contents(buffer) == ["world"]

    def test_delete_to_word_end_is_inclusive(self) -> None:
        buffer = make_buffer("foo bar", current=0)
        update("normal", buffer, 1, DeleteMotion("word_end_forward"))
        assert contents(buffer) == [" bar"]

    def test_delete_find_is_inclusive(self) -> None:
        buffer = make_buffer("a-b-c")
        update("normal", buffer, 1, DeleteMotion(FindChar("find_forward", "b")))
        assert contents(buffer) == ["-c"]

    def test_delete_till(self) -> None:
        buffer = make_buffer("a-b-c")
        update("normal", buffer, 1, DeleteMotion(FindChar("till_forward", "b")))
        assert contents(buffer) == ["b-c"]

    def test_delete_find_miss_is_noop(self) -> None:
        buffer = make_buffer("abc", current=1)
        assert update("normal", buffer, 1, DeleteMotion(FindChar("find_forward", "z"))) == []
        assert buffer.cursor.horizontal_index == Absolute(1, 1)

    def test_delete_line_down(self) -> None:
        buffer = make_buffer("a", "b", "c", "d", vertical=1)
        changes = update("normal", buffer, 1, DeleteMotion("down"))
        assert contents(buffer) == ["a", "d"]
        assert changes == [LineRemoved(1, "b"), LineRemoved(1, "c")]
        assert buffer.cursor.vertical_index == 1

    def test_delete_line_up(self) -> None:
        buffer = make_buffer("a", "b", "c", "d", vertical=2)
        update("normal", buffer, 1, DeleteMotion("up"))
        assert contents(buffer) == ["a", "d"]
        assert buffer.cursor.vertical_index == 1

    def test_delete_to_bottom(self) -> None:
        buffer = make_buffer("a", "b", "c", vertical=1)
        update("normal", buffer, 1, DeleteMotion("bottom"))
        assert contents(buffer) == ["a"]

    def test_delete_down_on_last_line_is_noop(self) -> None:
        buffer = make_buffer("a", "b", vertical=1)
        assert update("normal", buffer, 1, DeleteMotion("down")) == []
        assert contents(buffer) == ["a", "b"]


class TestLineInsertion:
    def test_open_line_below(self) -> None:
        buffer = make_buffer("a", "b")
        changes = update("normal", buffer, 1, InsertNewLine("down"))
        assert contents(buffer) == ["a", "", "b"]
        assert changes == [LineAdded(1, "")]
        assert buffer.cursor.vertical_index == 1

    def test_open_line_above(self) -> None:
        buffer = make_buffer("a", "b", vertical=1)
        update("normal", buffer, 1, InsertNewLine("up"))
        assert contents(buffer) == ["a", "", "b"]
        assert buffer.cursor.vertical_index == 1

    def test_line_break_splits_line(self) -> None:
        buffer = make_buffer("hello world", current=5)
        changes = update("insert", buffer, 1, InsertLineBreak())
        assert contents(buffer) == ["hello", " world"]
        assert changes == [ContentChanged(0, "hello world", "hello"), LineAdded(1, " world")]
        assert buffer.cursor == Cursor(vertical_index=1)


class TestReplaceChar:
    def test_replace(self) -> None:
        buffer = make_buffer("abc", current=1)
        changes = update("normal", buffer, 1, ReplaceChar("x"))
        assert contents(buffer) == ["axc"]
        assert changes == [ContentChanged(0, "abc", "axc")]

    def test_replace_with_count(self) -> None:
        buffer = make_buffer("abcd")
        update("normal", buffer, 3, ReplaceChar("x"))
        assert contents(buffer) == ["xxxd"]
        assert buffer.cursor.horizontal_index == Absolute(2, 2)

    def test_replace_past_line_end_is_noop(self) -> None:
        buffer = make_buffer("ab", current=1)
        assert update("normal", buffer, 3, ReplaceChar("x")) == []

    def test_modification_without_cursor_is_noop(self) -> None:
        buffer = Buffer(lines=[BufferLine("a")])
        assert update("normal", buffer, 1, DeleteLine()) == []
