"""Turns a stream of keystrokes into actions, one keystroke at a time."""

from __future__ import annotations

import logging

from yeet.buffer.mode import DEFAULT_MODE, get_rules
from yeet.buffer.model import Mode
from yeet.keymap.actions import Action, insert_text
from yeet.keymap.keys import KeyStroke, sequence_to_string
from yeet.keymap.tree import Continue, KeyTree, Terminal

logger = logging.getLogger(__name__)


class KeyBuffer:
    """Pending keystrokes of a partially typed sequence."""

    def __init__(self) -> None:
        self._keys: list[KeyStroke] = []

    def add_key(self, key: KeyStroke) -> None:
        self._keys.append(key)

    def get_keys(self) -> list[KeyStroke]:
        return list(self._keys)

    def clear(self) -> None:
        self._keys.clear()

    def to_keycode_string(self) -> str:
        return sequence_to_string(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)


class MessageResolver:
    """Resolve keystrokes against the trie of the active mode.

    Besides plain trie lookup this handles repeat counts (``3j``), bindings
    that take the next keystroke as a character argument (``fx``), escape
    cancelling a pending sequence, and text pass-through in insert and
    command mode.
    """

    def __init__(self, tree: KeyTree, mode: Mode = DEFAULT_MODE) -> None:
        self.tree = tree
        self.mode: Mode = mode
        self._buffer = KeyBuffer()
        self._count = ""
        self._pending: Action | None = None
        self._pending_sequence = ""

    @property
    def key_sequence(self) -> str:
        """Pending input as shown in the status line, e.g. ``"3d"``."""
        return self._count + self._pending_sequence + self._buffer.to_keycode_string()

    @property
    def is_pending(self) -> bool:
        return bool(self._count or self._pending or self._buffer)

    def reset(self) -> None:
        self._buffer.clear()
        self._count = ""
        self._pending = None
        self._pending_sequence = ""

    def set_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            logger.debug("Mode changed: %s -> %s", self.mode, mode)
        self.mode = mode
        self.reset()

    def feed(self, key: KeyStroke) -> Action | None:
        """Add *key* to the pending sequence; return the action it completes, if any."""
        if key.is_escape and self.is_pending:
            logger.debug("Escape cancelled pending sequence %r", self.key_sequence)
            self.reset()
            return None

        if self._pending is not None:
            return self._resolve_char_argument(key)

        rules = get_rules(self.mode)
        digit = key.digit
        if rules.counts and not self._buffer and digit is not None and (self._count or digit != 0):
            self._count += key.code
            return None

        self._buffer.add_key(key)
        keys = self._buffer.get_keys()
        node = self.tree.get_node(self.mode, keys)

        match node:
            case Continue():
                return None
            case Terminal(action):
                sequence = self._buffer.to_keycode_string()
                self._buffer.clear()
                if self._count:
                    action = action.with_count(int(self._count))
                    self._count = ""
                if action.expects_char:
                    self._pending = action
                    self._pending_sequence = sequence
                    return None
                return self._finish(action)

        self._buffer.clear()
        self._count = ""

        if rules.passthrough:
            chars = [k.char for k in keys]
            if all(c is not None for c in chars):
                return insert_text("".join(chars))  # type: ignore[arg-type]

        logger.debug("No binding for %r in mode %s", sequence_to_string(keys), self.mode)
        return None

    def _resolve_char_argument(self, key: KeyStroke) -> Action | None:
        action = self._pending
        self._pending = None
        self._pending_sequence = ""

        char = key.char
        if action is None or char is None:
            logger.debug("Discarding %s: %s is not a character", action, key)
            return None
        return self._finish(action.with_char(char))

    def _finish(self, action: Action) -> Action:
        if action.mode is not None and action.mode != self.mode:
            logger.debug("Mode changed: %s -> %s via %s", self.mode, action.mode, action.name)
            self.mode = action.mode
        return action
