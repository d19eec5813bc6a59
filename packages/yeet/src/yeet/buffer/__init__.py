"""yeet.buffer: text buffer, cursor, viewport, undo and render projection."""

# ANSI conversion
from yeet.buffer.ansi import parse_ansi, strip_ansi, to_ansi

# Messages
from yeet.buffer.message import (
    BufferMessage,
    ChangeMode,
    ClearSearch,
    CursorDirection,
    DeleteCharBeforeCursor,
    DeleteCharOnCursor,
    DeleteLine,
    DeleteMotion,
    FindChar,
    InsertLineBreak,
    InsertNewLine,
    InsertText,
    LineDirection,
    Modification,
    Motion,
    MoveCursor,
    MoveViewPort,
    Redo,
    RemoveLine,
    ReplaceChar,
    ResetCursor,
    Resize,
    SaveBuffer,
    Search,
    SearchDirection,
    SetContent,
    SetCursorToLineContent,
    SortContent,
    TextModification,
    Undo,
    ViewPortDirection,
)

# Mode rules
from yeet.buffer.mode import DEFAULT_MODE, MODE_RULES, MODES, ModeRules, get_rules

# Model
from yeet.buffer.model import (
    Absolute,
    Buffer,
    BufferLine,
    BufferResult,
    Cursor,
    CursorPosition,
    End,
    Mode,
    NoPosition,
    Sign,
    StyleSpan,
    ViewPort,
)

# Undo history
from yeet.buffer.undo import BufferChange, ContentChanged, LineAdded, LineRemoved, UndoEntry

# Update engine
from yeet.buffer.update import focus_buffer, reset_view, set_content, unfocus_buffer, update

# Render projection
from yeet.buffer.view import RenderedLine, view

# Width helpers
from yeet.buffer.width import display_width

__all__ = [
    # ANSI conversion
    "parse_ansi",
    "strip_ansi",
    "to_ansi",
    # Messages
    "BufferMessage",
    "ChangeMode",
    "ClearSearch",
    "CursorDirection",
    "DeleteCharBeforeCursor",
    "DeleteCharOnCursor",
    "DeleteLine",
    "DeleteMotion",
    "FindChar",
    "InsertLineBreak",
    "InsertNewLine",
    "InsertText",
    "LineDirection",
    "Modification",
    "Motion",
    "MoveCursor",
    "MoveViewPort",
    "Redo",
    "RemoveLine",
    "ReplaceChar",
    "ResetCursor",
    "Resize",
    "SaveBuffer",
    "Search",
    "SearchDirection",
    "SetContent",
    "SetCursorToLineContent",
    "SortContent",
    "TextModification",
    "Undo",
    "ViewPortDirection",
    # Mode rules
    "DEFAULT_MODE",
    "MODE_RULES",
    "MODES",
    "ModeRules",
    "get_rules",
    # Model
    "Absolute",
    "Buffer",
    "BufferLine",
    "BufferResult",
    "Cursor",
    "CursorPosition",
    "End",
    "Mode",
    "NoPosition",
    "Sign",
    "StyleSpan",
    "ViewPort",
    # Undo history
    "BufferChange",
    "ContentChanged",
    "LineAdded",
    "LineRemoved",
    "UndoEntry",
    # Update engine
    "focus_buffer",
    "reset_view",
    "set_content",
    "unfocus_buffer",
    "update",
    # Render projection
    "RenderedLine",
    "view",
    # Width helpers
    "display_width",
]
