"""Actions produced by the keystroke resolver and the registry of named actions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Union

from yeet.buffer.message import (
    BufferMessage,
    DeleteCharBeforeCursor,
    DeleteCharOnCursor,
    DeleteLine,
    DeleteMotion,
    FindChar,
    InsertLineBreak,
    InsertNewLine,
    InsertText,
    Modification,
    MoveCursor,
    MoveViewPort,
    Redo,
    ReplaceChar,
    Undo,
)
from yeet.buffer.model import Mode

KeymapCommand = Literal[
    # Navigation
    "navigate_to_parent",
    "navigate_to_selected",
    "open_selected",
    # Command line
    "execute_command",
    "start_search",
    # Application
    "quit",
    # Registers
    "yank_selected",
    "paste",
    "trash",
    # Search
    "clear_search_highlight",
]


@dataclass(frozen=True)
class AppCommand:
    """An application-level command handled outside the buffer engine."""

    command: KeymapCommand
    count: int = 1


ActionMessage = Union[BufferMessage, AppCommand]


@dataclass(frozen=True)
class Action:
    """What a resolved key sequence does.

    ``mode`` switches the active mode before ``message`` is applied.
    ``expects_char`` makes the resolver consume the next keystroke as the
    character argument (``f``, ``t``, ``r``).
    """

    name: str
    message: ActionMessage | None = None
    mode: Mode | None = None
    expects_char: bool = False

    def with_count(self, count: int) -> Action:
        """Return a copy repeating the action *count* times."""
        match self.message:
            case MoveCursor() | Modification() | AppCommand():
                return replace(self, message=replace(self.message, count=count))
        return self

    def with_char(self, char: str) -> Action:
        """Return a copy with *char* filled in as the pending character argument."""
        message = self.message
        match message:
            case MoveCursor(FindChar() as motion, count):
                message = MoveCursor(replace(motion, char=char), count)
            case Modification(ReplaceChar(), count):
                message = Modification(ReplaceChar(char), count)
            case Modification(DeleteMotion(FindChar() as motion, delete_count), count):
                message = Modification(DeleteMotion(replace(motion, char=char), delete_count), count)
        return replace(self, message=message, expects_char=False)


def insert_text(text: str) -> Action:
    return Action("insert_text", Modification(InsertText(text)))


def _move(direction) -> MoveCursor:
    return MoveCursor(direction)


def _delete(motion) -> Modification:
    return Modification(DeleteMotion(motion))


ACTIONS: dict[str, Action] = {
    action.name: action
    for action in [
        # Motions
        Action("move_up", _move("up")),
        Action("move_down", _move("down")),
        Action("move_left", _move("left")),
        Action("move_right", _move("right")),
        Action("move_line_start", _move("line_start")),
        Action("move_line_end", _move("line_end")),
        Action("move_top", _move("top")),
        Action("move_bottom", _move("bottom")),
        Action("move_word_start_forward", _move("word_start_forward")),
        Action("move_word_start_backward", _move("word_start_backward")),
        Action("move_word_end_forward", _move("word_end_forward")),
        Action("search_next", _move("search_next")),
        Action("search_previous", _move("search_previous")),
        Action("find_forward", _move(FindChar("find_forward")), expects_char=True),
        Action("find_backward", _move(FindChar("find_backward")), expects_char=True),
        Action("till_forward", _move(FindChar("till_forward")), expects_char=True),
        Action("till_backward", _move(FindChar("till_backward")), expects_char=True),
        # Viewport
        Action("scroll_half_page_down", MoveViewPort("half_page_down")),
        Action("scroll_half_page_up", MoveViewPort("half_page_up")),
        Action("scroll_page_down", MoveViewPort("page_down")),
        Action("scroll_page_up", MoveViewPort("page_up")),
        Action("scroll_bottom_on_cursor", MoveViewPort("bottom_on_cursor")),
        Action("scroll_center_on_cursor", MoveViewPort("center_on_cursor")),
        Action("scroll_top_on_cursor", MoveViewPort("top_on_cursor")),
        # Modes
        Action("enter_navigation_mode", mode="navigation"),
        Action("enter_normal_mode", mode="normal"),
        Action("enter_command_mode", mode="command"),
        Action("insert", mode="insert"),
        Action("insert_after", _move("right"), mode="insert"),
        Action("insert_line_end", _move("line_end"), mode="insert"),
        Action("insert_line_start", _move("line_start"), mode="insert"),
        Action("open_line_below", Modification(InsertNewLine("down")), mode="insert"),
        Action("open_line_above", Modification(InsertNewLine("up")), mode="insert"),
        # Modifications
        Action("delete_char_before_cursor", Modification(DeleteCharBeforeCursor())),
        Action("delete_char_on_cursor", Modification(DeleteCharOnCursor())),
        Action("delete_line", Modification(DeleteLine())),
        Action("delete_word", _delete("word_start_forward")),
        Action("delete_word_backward", _delete("word_start_backward")),
        Action("delete_word_end", _delete("word_end_forward")),
        Action("delete_to_line_end", _delete("line_end")),
        Action("delete_to_line_start", _delete("line_start")),
        Action("delete_line_down", _delete("down")),
        Action("delete_line_up", _delete("up")),
        Action("delete_to_top", _delete("top")),
        Action("delete_to_bottom", _delete("bottom")),
        Action("delete_find_forward", _delete(FindChar("find_forward")), expects_char=True),
        Action("delete_find_backward", _delete(FindChar("find_backward")), expects_char=True),
        Action("delete_till_forward", _delete(FindChar("till_forward")), expects_char=True),
        Action("delete_till_backward", _delete(FindChar("till_backward")), expects_char=True),
        Action("change_to_line_end", _delete("line_end"), mode="insert"),
        Action("replace_char", Modification(ReplaceChar()), expects_char=True),
        Action("insert_line_break", Modification(InsertLineBreak())),
        Action("undo", Undo()),
        Action("redo", Redo()),
        # Application commands
        Action("navigate_to_parent", AppCommand("navigate_to_parent")),
        Action("navigate_to_selected", AppCommand("navigate_to_selected")),
        Action("open_selected", AppCommand("open_selected")),
        Action("execute_command", AppCommand("execute_command"), mode="navigation"),
        Action("start_search", AppCommand("start_search"), mode="command"),
        Action("quit", AppCommand("quit")),
        Action("yank_selected", AppCommand("yank_selected")),
        Action("paste", AppCommand("paste")),
        Action("trash", AppCommand("trash")),
        Action("clear_search_highlight", AppCommand("clear_search_highlight")),
    ]
}
