"""Messages accepted by the buffer update engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Union

from yeet.buffer.model import BufferLine, Mode

# ---------------------------------------------------------------------------
# Motions
# ---------------------------------------------------------------------------

CursorDirection = Literal[
    "up",
    "down",
    "left",
    "right",
    "line_start",
    "line_end",
    "top",
    "bottom",
    "word_start_forward",
    "word_start_backward",
    "word_end_forward",
    "search_next",
    "search_previous",
]

FindKind = Literal["find_forward", "find_backward", "till_forward", "till_backward"]


@dataclass(frozen=True)
class FindChar:
    """``f``/``F``/``t``/``T`` motion; ``char`` is filled in once typed."""

    kind: FindKind
    char: str = ""


Motion = Union[CursorDirection, FindChar]

LineDirection = Literal["up", "down"]

ViewPortDirection = Literal[
    "bottom_on_cursor",
    "center_on_cursor",
    "half_page_down",
    "half_page_up",
    "page_down",
    "page_up",
    "top_on_cursor",
]

SearchDirection = Literal["down", "up"]

# ---------------------------------------------------------------------------
# Text modifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InsertText:
    text: str


@dataclass(frozen=True)
class DeleteCharBeforeCursor:
    pass


@dataclass(frozen=True)
class DeleteCharOnCursor:
    pass


@dataclass(frozen=True)
class DeleteLine:
    pass


@dataclass(frozen=True)
class DeleteMotion:
    motion: Motion
    count: int = 1


@dataclass(frozen=True)
class InsertNewLine:
    direction: LineDirection


@dataclass(frozen=True)
class InsertLineBreak:
    """Split the line at the cursor, moving the tail onto a new line below."""


@dataclass(frozen=True)
class ReplaceChar:
    char: str = ""


TextModification = Union[
    InsertText,
    DeleteCharBeforeCursor,
    DeleteCharOnCursor,
    DeleteLine,
    DeleteMotion,
    InsertNewLine,
    InsertLineBreak,
    ReplaceChar,
]

# ---------------------------------------------------------------------------
# Buffer messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChangeMode:
    from_mode: Mode
    to_mode: Mode


@dataclass(frozen=True)
class MoveCursor:
    direction: Motion
    count: int = 1


@dataclass(frozen=True)
class Modification:
    modification: TextModification
    count: int = 1


@dataclass(frozen=True)
class MoveViewPort:
    direction: ViewPortDirection


@dataclass(frozen=True)
class SetContent:
    lines: list[BufferLine] = field(default_factory=list, hash=False)


@dataclass(frozen=True)
class SetCursorToLineContent:
    content: str


@dataclass(frozen=True)
class ResetCursor:
    pass


@dataclass(frozen=True)
class RemoveLine:
    index: int


@dataclass(frozen=True)
class SortContent:
    key: Callable[[BufferLine], object]


@dataclass(frozen=True)
class Search:
    pattern: str | None
    direction: SearchDirection = "down"


@dataclass(frozen=True)
class ClearSearch:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class SaveBuffer:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


BufferMessage = Union[
    ChangeMode,
    MoveCursor,
    Modification,
    MoveViewPort,
    SetContent,
    SetCursorToLineContent,
    ResetCursor,
    RemoveLine,
    SortContent,
    Search,
    ClearSearch,
    Undo,
    Redo,
    SaveBuffer,
    Resize,
]
