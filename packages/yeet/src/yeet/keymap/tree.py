"""Per-mode keystroke trie."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from yeet.buffer.mode import MODES
from yeet.buffer.model import Mode
from yeet.keymap.actions import Action
from yeet.keymap.keys import KeyStroke, parse_sequence, sequence_to_string


class KeyMapError(ValueError):
    """Raised when a binding table cannot be compiled into a trie."""


@dataclass
class Continue:
    """Inner node: more keystrokes are needed."""

    children: dict[KeyStroke, Node] = field(default_factory=dict)


@dataclass(frozen=True)
class Terminal:
    """Leaf node: the sequence so far resolves to ``action``."""

    action: Action


Node = Union[Continue, Terminal]

Binding = tuple[Union[str, list[KeyStroke]], Action]


class KeyTree:
    """One trie per mode; no bound sequence may equal or prefix another."""

    def __init__(self) -> None:
        self._modes: dict[Mode, Continue] = {mode: Continue() for mode in MODES}

    def add_mapping(self, mode: Mode, keys: list[KeyStroke], action: Action) -> None:
        """Bind *keys* to *action* in *mode*.

        Raises :class:`KeyMapError` for an unknown mode, an empty sequence, or
        a sequence that equals, extends or prefixes an existing binding.
        """
        root = self._modes.get(mode)
        if root is None:
            raise KeyMapError(f"Unknown mode: {mode!r}")
        if not keys:
            raise KeyMapError(f"Empty key sequence for {action.name!r} in mode {mode}")

        node = root
        for depth, key in enumerate(keys):
            is_last = depth == len(keys) - 1
            child = node.children.get(key)

            match child:
                case None:
                    if is_last:
                        node.children[key] = Terminal(action)
                        return
                    new_node = Continue()
                    node.children[key] = new_node
                    node = new_node
                case Terminal(existing):
                    raise KeyMapError(
                        f"Binding {sequence_to_string(keys)!r} for {action.name!r} in mode "
                        f"{mode} conflicts with {sequence_to_string(keys[: depth + 1])!r} "
                        f"bound to {existing.name!r}"
                    )
                case Continue():
                    if is_last:
                        raise KeyMapError(
                            f"Binding {sequence_to_string(keys)!r} for {action.name!r} in mode "
                            f"{mode} is a prefix of longer bindings"
                        )
                    node = child

    def get_node(self, mode: Mode, keys: list[KeyStroke]) -> Node | None:
        """Walk *keys* from the root of *mode*; ``None`` when nothing matches."""
        node: Node | None = self._modes.get(mode)
        if node is None or not keys:
            return None

        for key in keys:
            match node:
                case Continue(children):
                    node = children.get(key)
                    if node is None:
                        return None
                case Terminal():
                    return None
        return node

    def bindings(self, mode: Mode) -> list[tuple[list[KeyStroke], Action]]:
        """List every bound sequence of *mode* in insertion order."""
        result: list[tuple[list[KeyStroke], Action]] = []

        def _walk(node: Node, prefix: list[KeyStroke]) -> None:
            match node:
                case Terminal(action):
                    result.append((prefix, action))
                case Continue(children):
                    for key, child in children.items():
                        _walk(child, prefix + [key])

        _walk(self._modes[mode], [])
        return result

    @classmethod
    def from_bindings(cls, bindings: dict[Mode, Iterable[Binding]]) -> KeyTree:
        """Compile ``{mode: [(sequence, action), ...]}`` into a tree."""
        tree = cls()
        for mode, entries in bindings.items():
            for sequence, action in entries:
                keys = parse_sequence(sequence) if isinstance(sequence, str) else list(sequence)
                tree.add_mapping(mode, keys, action)
        return tree
