"""Default key bindings and user overrides, compiled into a :class:`KeyTree`."""

from __future__ import annotations

import logging

from yeet.buffer.mode import is_mode
from yeet.buffer.model import Mode
from yeet.keymap.actions import ACTIONS, Action
from yeet.keymap.tree import KeyMapError, KeyTree

logger = logging.getLogger(__name__)

# sequence -> action name, or None to unbind a default
KeyMapConfig = dict[str, dict[str, "str | None"]]

_SHARED_NAVIGATION_NORMAL: dict[str, str] = {
    # Cursor movement
    "j": "move_down",
    "k": "move_up",
    "<down>": "move_down",
    "<up>": "move_up",
    "gg": "move_top",
    "G": "move_bottom",
    "n": "search_next",
    "N": "search_previous",
    # Viewport
    "<C-d>": "scroll_half_page_down",
    "<C-u>": "scroll_half_page_up",
    "<C-f>": "scroll_page_down",
    "<C-b>": "scroll_page_up",
    "zb": "scroll_bottom_on_cursor",
    "zt": "scroll_top_on_cursor",
    "zz": "scroll_center_on_cursor",
    # Modes
    ":": "enter_command_mode",
    "/": "start_search",
    "i": "insert",
    "a": "insert_after",
    "A": "insert_line_end",
    "I": "insert_line_start",
    "o": "open_line_below",
    "O": "open_line_above",
}

DEFAULT_BINDINGS: dict[Mode, dict[str, str]] = {
    "navigation": {
        **_SHARED_NAVIGATION_NORMAL,
        "<esc>": "clear_search_highlight",
        "h": "navigate_to_parent",
        "l": "navigate_to_selected",
        "<left>": "navigate_to_parent",
        "<right>": "navigate_to_selected",
        "<cr>": "open_selected",
        "m": "enter_normal_mode",
        "yy": "yank_selected",
        "p": "paste",
        "dd": "trash",
        "q": "quit",
    },
    "normal": {
        **_SHARED_NAVIGATION_NORMAL,
        "<esc>": "enter_navigation_mode",
        # Cursor movement
        "h": "move_left",
        "l": "move_right",
        "<left>": "move_left",
        "<right>": "move_right",
        "0": "move_line_start",
        "$": "move_line_end",
        "w": "move_word_start_forward",
        "b": "move_word_start_backward",
        "e": "move_word_end_forward",
        "f": "find_forward",
        "F": "find_backward",
        "t": "till_forward",
        "T": "till_backward",
        # Modifications
        "x": "delete_char_on_cursor",
        "r": "replace_char",
        "dd": "delete_line",
        "dw": "delete_word",
        "db": "delete_word_backward",
        "de": "delete_word_end",
        "d$": "delete_to_line_end",
        "d0": "delete_to_line_start",
        "dj": "delete_line_down",
        "dk": "delete_line_up",
        "dgg": "delete_to_top",
        "dG": "delete_to_bottom",
        "df": "delete_find_forward",
        "dF": "delete_find_backward",
        "dt": "delete_till_forward",
        "dT": "delete_till_backward",
        "D": "delete_to_line_end",
        "C": "change_to_line_end",
        "u": "undo",
        "<C-r>": "redo",
    },
    "insert": {
        "<esc>": "enter_normal_mode",
        "<bs>": "delete_char_before_cursor",
        "<del>": "delete_char_on_cursor",
        "<left>": "move_left",
        "<right>": "move_right",
        "<home>": "move_line_start",
        "<end>": "move_line_end",
        "<cr>": "insert_line_break",
    },
    "command": {
        "<esc>": "enter_navigation_mode",
        "<bs>": "delete_char_before_cursor",
        "<del>": "delete_char_on_cursor",
        "<left>": "move_left",
        "<right>": "move_right",
        "<home>": "move_line_start",
        "<end>": "move_line_end",
        "<cr>": "execute_command",
    },
}


def get_action(name: str) -> Action:
    action = ACTIONS.get(name)
    if action is None:
        raise KeyMapError(f"Unknown action: {name!r}")
    return action


class KeyMap:
    """Bindings per mode: the defaults with user overrides applied on top."""

    def __init__(self, overrides: KeyMapConfig | None = None) -> None:
        self._bindings: dict[Mode, dict[str, str]] = {}
        self._build_maps(overrides or {})

    def _build_maps(self, overrides: KeyMapConfig) -> None:
        self._bindings.clear()

        # Start with defaults
        for mode, bindings in DEFAULT_BINDINGS.items():
            self._bindings[mode] = dict(bindings)

        # Override with user config
        for mode, bindings in overrides.items():
            if not is_mode(mode):
                raise KeyMapError(f"Unknown mode in keymap overrides: {mode!r}")
            current = self._bindings[mode]  # type: ignore[index]
            for sequence, name in bindings.items():
                if name is None:
                    logger.debug("Unbinding %s in mode %s", sequence, mode)
                    current.pop(sequence, None)
                    continue
                get_action(name)
                current[sequence] = name

    def get_bindings(self, mode: Mode) -> dict[str, str]:
        """Get the ``sequence -> action name`` table of *mode*."""
        return dict(self._bindings.get(mode, {}))

    def get_sequences(self, mode: Mode, action: str) -> list[str]:
        """Get every sequence bound to *action* in *mode*."""
        return [seq for seq, name in self._bindings.get(mode, {}).items() if name == action]

    def set_config(self, overrides: KeyMapConfig) -> None:
        """Rebuild from the defaults with new overrides."""
        self._build_maps(overrides)

    def into_tree(self) -> KeyTree:
        """Compile the bindings; raises :class:`KeyMapError` on ambiguous sequences."""
        return KeyTree.from_bindings(
            {
                mode: [(sequence, get_action(name)) for sequence, name in bindings.items()]
                for mode, bindings in self._bindings.items()
            }
        )
