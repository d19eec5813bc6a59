"""Tests for yeet.frontend.pane -- collaborator messages applied to pane buffers."""

from __future__ import annotations

from yeet.buffer.model import Buffer, NoPosition, StyleSpan, ViewPort
from yeet.frontend.pane import (
    ContentReplaced,
    Entry,
    LoadFailed,
    Pane,
    Resized,
    RestoreSelection,
    apply,
    to_line,
)


def make_pane(kind: str = "current") -> Pane:
    return Pane(kind, Buffer(view_port=ViewPort(height=5, width=20)))


def listing(path: str, *names: str) -> ContentReplaced:
    return ContentReplaced("current", path, tuple(Entry(name) for name in names))


class TestToLine:
    def test_file(self) -> None:
        line = to_line(Entry("notes.txt"))
        assert line.content == "notes.txt"
        assert line.style == []

    def test_directory_is_styled(self) -> None:
        line = to_line(Entry("src", "directory"))
        assert line.style == [
            StyleSpan(0, 3, "foreground", "blue"),
            StyleSpan(0, 3, "modifier", "bold"),
        ]

    def test_text_parses_ansi(self) -> None:
        line = to_line(Entry("\x1b[31mred\x1b[0m plain", "text"))
        assert line.content == "red plain"
        assert line.style == [StyleSpan(0, 3, "foreground", "red")]


class TestContentReplaced:
    def test_fills_buffer(self) -> None:
        pane = make_pane()
        result = apply("navigation", pane, listing("/home", "a", "b"))
        assert [line.content for line in pane.buffer.lines] == ["a", "b"]
        assert pane.path == "/home"
        assert pane.buffer.cursor is not None
        assert result.kind == "content_changed"

    def test_same_path_keeps_cursor(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/home", "a", "b", "c"))
        pane.buffer.cursor.vertical_index = 2
        apply("navigation", pane, listing("/home", "a", "b", "c", "d"))
        assert pane.buffer.cursor.vertical_index == 2

    def test_new_path_resets_cursor(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/home", "a", "b", "c"))
        pane.buffer.cursor.vertical_index = 2
        apply("navigation", pane, listing("/srv", "x", "y", "z"))
        assert pane.buffer.cursor.vertical_index == 0

    def test_empty_listing_has_no_cursor(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/empty"))
        assert pane.buffer.cursor is None
        assert pane.selected() is None

    def test_preview_hides_cursor(self) -> None:
        pane = make_pane("preview")
        apply("navigation", pane, ContentReplaced("preview", "/a.txt", (Entry("hi", "text"),)))
        assert pane.buffer.cursor.hide_cursor
        assert pane.buffer.cursor.hide_cursor_line


class TestRestoreSelection:
    def test_restores_matching_line(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/home", "bin", "src", "docs"))
        result = apply("navigation", pane, RestoreSelection("current", "/home", "src"))
        assert pane.buffer.cursor.vertical_index == 1
        assert pane.selected().content == "src"
        assert result.kind == "cursor_position_changed"

    def test_missing_selection_is_noop(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/home", "bin", "src", "docs"))
        result = apply("navigation", pane, RestoreSelection("current", "/home", "missing"))
        assert result.is_unchanged
        assert pane.buffer.cursor.vertical_index == 0

    def test_stale_path_is_ignored(self) -> None:
        pane = make_pane()
        apply("navigation", pane, listing("/home", "bin", "src"))
        result = apply("navigation", pane, RestoreSelection("current", "/srv", "src"))
        assert result.is_unchanged
        assert pane.buffer.cursor.vertical_index == 0


class TestOtherMessages:
    def test_resized(self) -> None:
        pane = make_pane()
        apply("navigation", pane, Resized("current", 40, 12))
        assert (pane.buffer.view_port.width, pane.buffer.view_port.height) == (40, 12)

    def test_load_failed_shows_error(self) -> None:
        pane = make_pane()
        apply("navigation", pane, LoadFailed("current", "/root", "Permission denied"))
        (line,) = pane.buffer.lines
        assert line.content == "Permission denied"
        assert line.style == [StyleSpan(0, 17, "foreground", "red")]
        assert pane.path == "/root"
        assert pane.buffer.cursor.horizontal_index == NoPosition()
        assert pane.buffer.cursor.hide_cursor
