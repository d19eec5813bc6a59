"""Data model shared by every pane buffer: lines, cursor, viewport and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Union

from yeet.buffer.width import display_width

if TYPE_CHECKING:
    from yeet.buffer.undo import BufferChange, Undo

Mode = Literal["navigation", "normal", "insert", "command"]

LineNumber = Literal["none", "absolute", "relative"]

StyleKind = Literal["foreground", "background", "modifier"]

ResultKind = Literal[
    "unchanged",
    "cursor_position_changed",
    "viewport_changed",
    "content_changed",
]

# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Absolute:
    """Character index ``current`` with its sticky display column ``expanded``."""

    current: int = 0
    expanded: int = 0


@dataclass(frozen=True)
class End:
    """Logically after the last character of the line."""


@dataclass(frozen=True)
class NoPosition:
    """The buffer has no per-character addressing (list-only panes)."""


CursorPosition = Union[Absolute, End, NoPosition]


@dataclass
class Cursor:
    vertical_index: int = 0
    horizontal_index: CursorPosition = field(default_factory=Absolute)
    hide_cursor: bool = False
    hide_cursor_line: bool = False


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyleSpan:
    """Half-open ``[start, end)`` character range carrying one style attribute.

    ``value`` is a color name (``"red"``, ``"bright_blue"``) for foreground and
    background spans, or a modifier name (``"bold"``, ``"underline"``, ...).
    """

    start: int
    end: int
    kind: StyleKind
    value: str


@dataclass(frozen=True)
class Sign:
    """A single glyph shown in the sign column, e.g. a mark or quickfix entry."""

    id: str
    content: str
    priority: int = 0
    style: tuple[StyleSpan, ...] = ()


@dataclass
class BufferLine:
    content: str = ""
    prefix: str | None = None
    style: list[StyleSpan] = field(default_factory=list)
    search: list[StyleSpan] | None = None
    signs: list[Sign] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.content)

    def is_empty(self) -> bool:
        return not self.content


# ---------------------------------------------------------------------------
# ViewPort
# ---------------------------------------------------------------------------


@dataclass
class ViewPort:
    """Visible window of a buffer plus its gutter configuration.

    All derived widths are computed on demand from the current geometry.
    """

    height: int = 0
    width: int = 0
    vertical_index: int = 0
    horizontal_index: int = 0
    line_number: LineNumber = "none"
    line_number_width: int = 0
    sign_column_width: int = 0
    hidden_sign_ids: set[str] = field(default_factory=set)
    show_border: bool = True

    def get_line_number_width(self) -> int:
        if self.line_number == "none":
            return 0
        return self.line_number_width

    def get_prefix_width(self) -> int:
        return self.sign_column_width + self.get_line_number_width()

    def get_border_width(self) -> int:
        if self.show_border and self.get_prefix_width() > 0:
            return 1
        return 0

    def get_custom_prefix_width(self, line: BufferLine) -> int:
        if line.prefix is None:
            return 0
        return display_width(line.prefix)

    def get_offset_width(self, line: BufferLine) -> int:
        return (
            self.get_prefix_width()
            + self.get_border_width()
            + self.get_custom_prefix_width(line)
        )

    def get_content_width(self, line: BufferLine) -> int:
        return max(0, self.width - self.get_offset_width(line))


# ---------------------------------------------------------------------------
# Buffer
# ---------------------------------------------------------------------------


def _new_undo() -> Undo:
    from yeet.buffer.undo import Undo

    return Undo()


@dataclass
class Buffer:
    """Lines of one pane together with the state the update engine owns.

    ``cursor`` is ``None`` exactly when ``lines`` is empty after any update.
    """

    lines: list[BufferLine] = field(default_factory=list)
    cursor: Cursor | None = None
    undo: Undo = field(default_factory=_new_undo)
    view_port: ViewPort = field(default_factory=ViewPort)


@dataclass(frozen=True)
class BufferResult:
    kind: ResultKind = "unchanged"
    changes: tuple[BufferChange, ...] = ()

    @property
    def is_unchanged(self) -> bool:
        return self.kind == "unchanged"
