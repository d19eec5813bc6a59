"""Transactional undo/redo history over buffer lines.

Each transaction stores the changes it made together with the prior content,
so it can be reverted exactly. Changes made in insert mode accumulate in an
open transaction until the mode is left.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Union

from yeet.buffer.model import BufferLine, Cursor, Mode

# ---------------------------------------------------------------------------
# Change records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContentChanged:
    index: int
    old: str
    new: str


@dataclass(frozen=True)
class LineAdded:
    index: int
    content: str


@dataclass(frozen=True)
class LineRemoved:
    index: int
    content: str


BufferChange = Union[ContentChanged, LineAdded, LineRemoved]


@dataclass(frozen=True)
class UndoEntry:
    """One transaction with the cursor before and after it was applied."""

    changes: tuple[BufferChange, ...]
    cursor: Cursor | None = None
    cursor_after: Cursor | None = None


def invert(change: BufferChange) -> BufferChange:
    match change:
        case ContentChanged(index, old, new):
            return ContentChanged(index, new, old)
        case LineAdded(index, content):
            return LineRemoved(index, content)
        case LineRemoved(index, content):
            return LineAdded(index, content)
    raise TypeError(f"Unknown change: {change!r}")


def apply_change(lines: list[BufferLine], change: BufferChange) -> None:
    match change:
        case ContentChanged(index, _, new):
            if 0 <= index < len(lines):
                lines[index].content = new
        case LineAdded(index, content):
            lines.insert(min(index, len(lines)), BufferLine(content=content))
        case LineRemoved(index, _):
            if 0 <= index < len(lines):
                del lines[index]


def _merge(current: BufferChange | None, new: BufferChange) -> BufferChange | None:
    """Fold *new* into *current* when both touch the same freshly edited line."""
    if current is None or not isinstance(new, ContentChanged):
        return None
    match current:
        case ContentChanged(index, old, _) if index == new.index:
            return ContentChanged(index, old, new.new)
        case LineAdded(index, _) if index == new.index:
            return LineAdded(index, new.new)
    return None


def consolidate_changes(changes: list[BufferChange]) -> list[BufferChange]:
    """Collapse a change log into the minimal list with the same net effect.

    Content edits fold into an earlier edit or addition of the same line, and
    removing a line that was added or edited earlier in the log cancels out
    the earlier record. Indices are tracked across intervening additions and
    removals.
    """
    consolidated: list[BufferChange] = []
    for change in changes:
        if isinstance(change, LineAdded):
            consolidated.append(change)
            continue

        index = change.index
        folded = False
        for position in range(len(consolidated) - 1, -1, -1):
            previous = consolidated[position]
            match previous:
                case ContentChanged(p_index, p_old, _):
                    if p_index == index:
                        if isinstance(change, ContentChanged):
                            consolidated[position] = ContentChanged(p_index, p_old, change.new)
                        else:
                            del consolidated[position]
                        folded = True
                        break
                case LineAdded(p_index, _):
                    if p_index == index:
                        if isinstance(change, ContentChanged):
                            consolidated[position] = LineAdded(p_index, change.new)
                        else:
                            del consolidated[position]
                        folded = True
                        break
                    if index >= p_index:
                        index -= 1
                case LineRemoved(p_index, _):
                    if index > p_index:
                        index += 1

        if not folded:
            consolidated.append(change)

    return consolidated


# ---------------------------------------------------------------------------
# Undo history
# ---------------------------------------------------------------------------


class Undo:
    """Undo/redo stacks plus the change log consumed by :meth:`save`.

    Cursors are stored as deep clones so later cursor mutation does not leak
    into the history.
    """

    def __init__(self) -> None:
        self._undo_stack: list[UndoEntry] = []
        self._redo_stack: list[UndoEntry] = []
        self._pending: list[BufferChange] = []
        self._pending_cursor: Cursor | None = None
        self._pending_cursor_after: Cursor | None = None
        self._unsaved: list[BufferChange] = []

    def add(
        self,
        mode: Mode,
        changes: list[BufferChange],
        cursor: Cursor | None = None,
        cursor_after: Cursor | None = None,
    ) -> None:
        """Record *changes* made in *mode*; *cursor* is the position before them."""
        if not changes:
            return

        self._redo_stack.clear()

        if mode == "insert":
            if not self._pending:
                self._pending_cursor = copy.deepcopy(cursor)
            for change in changes:
                merged = _merge(self._pending[-1] if self._pending else None, change)
                if merged is not None:
                    self._pending[-1] = merged
                else:
                    self._pending.append(change)
            self._pending_cursor_after = copy.deepcopy(cursor_after)
            return

        self.close_transaction()
        self._unsaved.extend(changes)
        self._undo_stack.append(
            UndoEntry(tuple(changes), copy.deepcopy(cursor), copy.deepcopy(cursor_after))
        )

    def close_transaction(self) -> None:
        """Commit the open insert-mode transaction, if any."""
        if not self._pending:
            return
        self._unsaved.extend(self._pending)
        self._undo_stack.append(
            UndoEntry(tuple(self._pending), self._pending_cursor, self._pending_cursor_after)
        )
        self._pending = []
        self._pending_cursor = None
        self._pending_cursor_after = None

    def undo(self, lines: list[BufferLine]) -> UndoEntry | None:
        """Revert the newest transaction in place; ``None`` when history is empty."""
        self.close_transaction()
        if not self._undo_stack:
            return None

        entry = self._undo_stack.pop()
        for change in reversed(entry.changes):
            reverted = invert(change)
            apply_change(lines, reverted)
            self._unsaved.append(reverted)

        self._redo_stack.append(entry)
        return entry

    def redo(self, lines: list[BufferLine]) -> UndoEntry | None:
        """Re-apply the most recently undone transaction; ``None`` when nothing to redo."""
        if not self._redo_stack:
            return None

        entry = self._redo_stack.pop()
        for change in entry.changes:
            apply_change(lines, change)
            self._unsaved.append(change)

        self._undo_stack.append(entry)
        return entry

    def get_uncommitted_changes(self) -> list[BufferChange]:
        """Net changes of committed transactions since the last save."""
        return consolidate_changes(self._unsaved)

    def save(self) -> list[BufferChange]:
        """Return the net changes since the previous save and start a new log."""
        self.close_transaction()
        changes = [
            change
            for change in consolidate_changes(self._unsaved)
            if not (isinstance(change, ContentChanged) and change.old == change.new)
        ]
        self._unsaved = []
        return changes

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._pending = []
        self._pending_cursor = None
        self._pending_cursor_after = None
        self._unsaved = []

    @property
    def length(self) -> int:
        return len(self._undo_stack) + (1 if self._pending else 0)

    @property
    def redo_length(self) -> int:
        return len(self._redo_stack)

    @property
    def has_open_transaction(self) -> bool:
        return bool(self._pending)
