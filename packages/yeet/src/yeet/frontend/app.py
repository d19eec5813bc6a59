"""Application state: three panes, the command line and the key resolver.

The app owns every piece of state explicitly; nothing is global. Keystrokes
go through :meth:`App.handle_key`, collaborator results through
:meth:`App.handle_pane_message` and :meth:`App.handle_task_message`.
Commands that need the file system (opening, yanking, trashing) are returned
to the caller as effects instead of being carried out here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Union

from yeet.buffer.message import ChangeMode, ClearSearch, Resize, SaveBuffer, Search, SetContent
from yeet.buffer.mode import DEFAULT_MODE
from yeet.buffer.model import Buffer, BufferLine, BufferResult, Mode
from yeet.buffer.undo import BufferChange
from yeet.buffer.update import focus_buffer, unfocus_buffer, update
from yeet.buffer.view import RenderedLine, view
from yeet.frontend.history import History
from yeet.frontend.pane import (
    ContentReplaced,
    LoadFailed,
    Pane,
    PaneKind,
    PaneMessage,
    Resized,
    RestoreSelection,
    apply,
)
from yeet.frontend.settings import Settings
from yeet.frontend.task import TaskFailed, TaskFinished, TaskManager, TaskMessage
from yeet.keymap.actions import AppCommand
from yeet.keymap.keymap import KeyMap
from yeet.keymap.keys import KeyStroke
from yeet.keymap.resolver import MessageResolver

logger = logging.getLogger(__name__)

PANE_KINDS: tuple[PaneKind, ...] = ("parent", "current", "preview")

COMMAND_PREFIX = ":"
SEARCH_PREFIX = "/"


@dataclass(frozen=True)
class BufferSaved:
    """Edits of the current directory listing, to be turned into file operations."""

    path: str | None
    changes: tuple[BufferChange, ...]


Effect = Union[AppCommand, BufferSaved]


class App:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        keymap: KeyMap | None = None,
        tasks: TaskManager | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.keymap = keymap or KeyMap(self.settings.keymap)
        self.resolver = MessageResolver(self.keymap.into_tree())
        self.tasks = tasks or TaskManager()
        self.history = History()

        self.mode: Mode = DEFAULT_MODE
        # mode of the current pane; command mode leaves it untouched
        self._buffer_mode: Mode = DEFAULT_MODE
        self.panes: dict[PaneKind, Pane] = {kind: Pane(kind) for kind in PANE_KINDS}
        self.command_line = Buffer()
        self.search_pattern: str | None = None
        self.quit_requested = False

        self.settings.apply_to(self.current.buffer.view_port)

    @property
    def current(self) -> Pane:
        return self.panes["current"]

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def focused_buffer(self) -> Buffer:
        if self.mode == "command":
            return self.command_line
        return self.current.buffer

    def mode_for(self, pane: Pane) -> Mode:
        """Mode the buffer of *pane* is updated in."""
        if pane.kind == "current":
            return self._buffer_mode
        return "navigation"

    def _sync_focus(self) -> None:
        if self.mode in ("normal", "insert"):
            focus_buffer(self.current.buffer)
        else:
            unfocus_buffer(self.current.buffer)

        for kind in ("parent", "preview"):
            unfocus_buffer(self.panes[kind].buffer)  # type: ignore[index]

        if self.mode == "command":
            focus_buffer(self.command_line)
        else:
            unfocus_buffer(self.command_line)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def handle_key(self, key: KeyStroke) -> list[Effect]:
        """Feed *key* to the resolver and apply the resulting action."""
        action = self.resolver.feed(key)
        if action is None:
            return []

        previous = self.mode
        effects: list[Effect] = []
        if action.mode is not None and action.mode != previous:
            effects.extend(self.change_mode(action.mode))

        message = action.message
        match message:
            case None:
                pass
            case AppCommand():
                effects.extend(self._execute(message))
            case _:
                update(self.mode, self.focused_buffer(), message)

        if previous == "command" and self.mode != "command":
            update("command", self.command_line, SetContent([]))

        return effects

    def change_mode(self, mode: Mode) -> list[Effect]:
        """Switch to *mode*, telling the affected buffers about it."""
        previous = self.mode
        if mode == previous:
            return []

        logger.debug("Mode changed: %s -> %s", previous, mode)
        self.mode = mode
        if self.resolver.mode != mode:
            self.resolver.set_mode(mode)

        effects: list[Effect] = []
        if mode == "command":
            update(mode, self.command_line, SetContent([BufferLine(prefix=COMMAND_PREFIX)]))
            update(mode, self.command_line, ChangeMode(previous, mode))
        else:
            if previous == "command":
                update(mode, self.command_line, ChangeMode(previous, mode))
            if self._buffer_mode != mode:
                update(mode, self.current.buffer, ChangeMode(self._buffer_mode, mode))
                self._buffer_mode = mode
                if mode == "navigation":
                    effects.extend(self._save_current())

        self._sync_focus()
        return effects

    def _save_current(self) -> list[Effect]:
        result = update(self._buffer_mode, self.current.buffer, SaveBuffer())
        if not result.changes:
            return []
        return [BufferSaved(self.current.path, result.changes)]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _execute(self, command: AppCommand) -> list[Effect]:
        match command.command:
            case "execute_command":
                return self._execute_command_line()
            case "start_search":
                update("command", self.command_line, SetContent([BufferLine(prefix=SEARCH_PREFIX)]))
                return []
            case "clear_search_highlight":
                self.search_pattern = None
                for pane in self.panes.values():
                    update(self.mode_for(pane), pane.buffer, ClearSearch())
                return []
            case "quit":
                self.quit_requested = True
            case "navigate_to_parent":
                if self.current.path is not None:
                    self.history.add(self.current.path)
            case "navigate_to_selected" | "open_selected":
                selected = self.selected_path()
                if selected is None:
                    return []
                self.history.add(selected)
        return [command]

    def _execute_command_line(self) -> list[Effect]:
        if not self.command_line.lines:
            return []

        line = self.command_line.lines[0]
        text = line.content
        if line.prefix == SEARCH_PREFIX:
            self.search(text or None)
            return []

        match text.strip():
            case "":
                return []
            case "q" | "quit":
                self.quit_requested = True
                return [AppCommand("quit")]
            case "w" | "write":
                return self._save_current()
            case other:
                logger.warning("Unknown command: %s", other)
                return []

    def search(self, pattern: str | None) -> BufferResult:
        """Highlight *pattern* in every pane and jump to the next match."""
        self.search_pattern = pattern
        for kind in ("parent", "preview"):
            pane = self.panes[kind]  # type: ignore[index]
            update(self.mode_for(pane), pane.buffer, Search(pattern))
        return update(self.mode_for(self.current), self.current.buffer, Search(pattern))

    def selected_path(self) -> str | None:
        line = self.current.selected()
        if line is None or self.current.path is None:
            return None
        return os.path.join(self.current.path, line.content)

    # ------------------------------------------------------------------
    # Collaborator messages
    # ------------------------------------------------------------------

    def handle_pane_message(self, message: PaneMessage) -> BufferResult:
        pane = self.panes[message.pane]
        path_before = pane.path
        result = apply(self.mode_for(pane), pane, message)

        if isinstance(message, ContentReplaced) and pane.path != path_before:
            selection = self.history.get_selection(message.path)
            if selection is not None:
                apply(self.mode_for(pane), pane, RestoreSelection(pane.kind, pane.path, selection))

        if self.search_pattern is not None and result.kind == "content_changed":
            update(self.mode_for(pane), pane.buffer, Search(self.search_pattern))

        self._sync_focus()
        return result

    def handle_task_message(self, message: TaskMessage) -> BufferResult | None:
        match message:
            case TaskFinished(result=ContentReplaced() | RestoreSelection() | Resized() | LoadFailed()):
                return self.handle_pane_message(message.result)
            case TaskFailed(identifier=identifier, error=error):
                logger.debug("Ignoring failed task %s: %s", identifier, error)
        return None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Lay the panes out side by side (1:2:3) above a one-row command line."""
        pane_height = max(0, height - 1)
        parent_width = width // 6
        current_width = width // 3
        widths = {
            "parent": parent_width,
            "current": current_width,
            "preview": max(0, width - parent_width - current_width),
        }
        for kind, pane in self.panes.items():
            update(self.mode_for(pane), pane.buffer, Resize(widths[kind], pane_height))
        update(self.mode, self.command_line, Resize(width, 1))

    def render(self) -> dict[str, list[RenderedLine]]:
        rows: dict[str, list[RenderedLine]] = {}
        for kind, pane in self.panes.items():
            buffer = pane.buffer
            rows[kind] = view(buffer.view_port, self.mode_for(pane), buffer.cursor, buffer)

        command_mode: Mode = "command" if self.mode == "command" else "navigation"
        buffer = self.command_line
        rows["command_line"] = view(buffer.view_port, command_mode, buffer.cursor, buffer)
        return rows

    def status(self) -> str:
        """Mode and pending keys, e.g. ``"normal 3d"``."""
        pending = self.resolver.key_sequence
        return f"{self.mode} {pending}" if pending else self.mode
