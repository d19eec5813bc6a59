"""Tests for yeet.buffer.undo -- transactional undo/redo and the save log."""

from __future__ import annotations

from yeet.buffer.model import Absolute, BufferLine, Cursor
from yeet.buffer.undo import (
    ContentChanged,
    LineAdded,
    LineRemoved,
    Undo,
    apply_change,
    consolidate_changes,
    invert,
)


def lines_of(*contents: str) -> list[BufferLine]:
    return [BufferLine(content=c) for c in contents]


def contents(lines: list[BufferLine]) -> list[str]:
    return [line.content for line in lines]


class TestChangeRecords:
    """Inverting and applying single changes."""

    def test_invert(self) -> None:
        assert invert(ContentChanged(1, "a", "b")) == ContentChanged(1, "b", "a")
        assert invert(LineAdded(2, "x")) == LineRemoved(2, "x")
        assert invert(LineRemoved(0, "y")) == LineAdded(0, "y")

    def test_apply(self) -> None:
        lines = lines_of("a", "b")
        apply_change(lines, ContentChanged(0, "a", "z"))
        apply_change(lines, LineAdded(1, "new"))
        apply_change(lines, LineRemoved(2, "b"))
        assert contents(lines) == ["z", "new"]

    def test_apply_out_of_range_is_ignored(self) -> None:
        lines = lines_of("a")
        apply_change(lines, ContentChanged(5, "x", "y"))
        apply_change(lines, LineRemoved(5, "x"))
        assert contents(lines) == ["a"]


class TestUndoRedo:
    """Undo reverts whole transactions; redo re-applies them."""

    def test_undo_then_redo_reproduces_content(self) -> None:
        lines = lines_of("a", "b")
        undo = Undo()
        apply_change(lines, ContentChanged(0, "a", "A"))
        undo.add("normal", [ContentChanged(0, "a", "A")])
        apply_change(lines, LineRemoved(1, "b"))
        undo.add("normal", [LineRemoved(1, "b")])
        after = contents(lines)

        undo.undo(lines)
        undo.undo(lines)
        assert contents(lines) == ["a", "b"]

        undo.redo(lines)
        undo.redo(lines)
        assert contents(lines) == after

    def test_undo_past_history_is_noop(self) -> None:
        lines = lines_of("a")
        undo = Undo()
        assert undo.undo(lines) is None
        assert contents(lines) == ["a"]

    def test_redo_without_undo_is_noop(self) -> None:
        lines = lines_of("a")
        assert Undo().redo(lines) is None

    def test_new_change_clears_redo(self) -> None:
        lines = lines_of("a")
        undo = Undo()
        apply_change(lines, ContentChanged(0, "a", "b"))
        undo.add("normal", [ContentChanged(0, "a", "b")])
        undo.undo(lines)
        assert undo.redo_length == 1

        undo.add("normal", [ContentChanged(0, "a", "c")])
        assert undo.redo_length == 0

    def test_empty_changes_are_not_recorded(self) -> None:
        undo = Undo()
        undo.add("normal", [])
        assert undo.length == 0

    def test_entry_keeps_cursor_snapshots(self) -> None:
        lines = lines_of("abc")
        undo = Undo()
        before = Cursor(horizontal_index=Absolute(2, 2))
        undo.add("normal", [ContentChanged(0, "abc", "ab")], before, Cursor())
        before.vertical_index = 9

        entry = undo.undo(lines)
        assert entry is not None
        assert entry.cursor == Cursor(horizontal_index=Absolute(2, 2))
        assert entry.cursor_after == Cursor()


class TestInsertTransactions:
    """Changes made in insert mode form one transaction."""

    def test_insert_changes_undo_together(self) -> None:
        lines = lines_of("")
        undo = Undo()
        for old, new in (("", "a"), ("a", "ab"), ("ab", "abc")):
            apply_change(lines, ContentChanged(0, old, new))
            undo.add("insert", [ContentChanged(0, old, new)])

        assert undo.has_open_transaction
        undo.undo(lines)
        assert contents(lines) == [""]
        assert not undo.has_open_transaction

    def test_close_transaction_commits(self) -> None:
        undo = Undo()
        undo.add("insert", [ContentChanged(0, "", "a")])
        undo.close_transaction()
        assert undo.length == 1
        assert not undo.has_open_transaction

    def test_normal_change_closes_open_transaction(self) -> None:
        undo = Undo()
        undo.add("insert", [ContentChanged(0, "", "a")])
        undo.add("normal", [LineRemoved(0, "a")])
        assert undo.length == 2

    def test_added_line_absorbs_edits(self) -> None:
        lines: list[BufferLine] = []
        undo = Undo()
        apply_change(lines, LineAdded(0, ""))
        apply_change(lines, ContentChanged(0, "", "x"))
        undo.add("insert", [LineAdded(0, ""), ContentChanged(0, "", "x")])
        undo.undo(lines)
        assert lines == []


class TestSaveLog:
    """save returns the net changes since the previous save."""

    def test_uncommitted_changes_follow_transactions(self) -> None:
        undo = Undo()
        assert undo.save() == []

        undo = Undo()
        undo.add("insert", [LineAdded(0, "a"), LineRemoved(4, "m")])
        assert undo.get_uncommitted_changes() == []

        undo.close_transaction()
        assert undo.get_uncommitted_changes() == [LineAdded(0, "a"), LineRemoved(4, "m")]

        undo.add("normal", [LineAdded(2, "h")])
        assert undo.get_uncommitted_changes() == [
            LineAdded(0, "a"),
            LineRemoved(4, "m"),
            LineAdded(2, "h"),
        ]

        undo.add("insert", [LineRemoved(5, "m")])
        assert undo.save() == [
            LineAdded(0, "a"),
            LineRemoved(4, "m"),
            LineAdded(2, "h"),
            LineRemoved(5, "m"),
        ]

        undo.add("normal", [LineAdded(2, "s")])
        assert undo.get_uncommitted_changes() == [LineAdded(2, "s")]
        assert undo.save() == [LineAdded(2, "s")]
        assert undo.save() == []

    def test_save_includes_undo_reversals(self) -> None:
        lines = lines_of("a")
        undo = Undo()
        apply_change(lines, ContentChanged(0, "a", "b"))
        undo.add("normal", [ContentChanged(0, "a", "b")])
        undo.undo(lines)
        # the edit and its reversal cancel out
        assert undo.save() == []

    def test_consolidate_folds_content_into_added_line(self) -> None:
        changes = [LineAdded(1, ""), ContentChanged(1, "", "new")]
        assert consolidate_changes(changes) == [LineAdded(1, "new")]

    def test_consolidate_drops_removed_additions(self) -> None:
        changes = [LineAdded(1, "x"), LineRemoved(1, "x")]
        assert consolidate_changes(changes) == []

    def test_consolidate_tracks_shifted_indices(self) -> None:
        changes = [ContentChanged(3, "a", "b"), LineAdded(0, "top"), ContentChanged(4, "b", "c")]
        assert consolidate_changes(changes) == [ContentChanged(3, "a", "c"), LineAdded(0, "top")]

    def test_clear_drops_everything(self) -> None:
        undo = Undo()
        undo.add("normal", [LineAdded(0, "a")])
        undo.clear()
        assert undo.length == 0
        assert undo.save() == []
