"""yeet.keymap: keystrokes, bindings and the modal keystroke resolver."""

# Actions
from yeet.keymap.actions import ACTIONS, Action, AppCommand, KeymapCommand, insert_text

# Bindings
from yeet.keymap.keymap import DEFAULT_BINDINGS, KeyMap, KeyMapConfig, get_action

# Keys
from yeet.keymap.keys import (
    ESCAPE,
    KeyParseError,
    KeyStroke,
    from_key_id,
    parse_key,
    parse_sequence,
    sequence_to_string,
)

# Resolver
from yeet.keymap.resolver import KeyBuffer, MessageResolver

# Trie
from yeet.keymap.tree import Continue, KeyMapError, KeyTree, Node, Terminal

__all__ = [
    # Actions
    "ACTIONS",
    "Action",
    "AppCommand",
    "KeymapCommand",
    "insert_text",
    # Bindings
    "DEFAULT_BINDINGS",
    "KeyMap",
    "KeyMapConfig",
    "get_action",
    # Keys
    "ESCAPE",
    "KeyParseError",
    "KeyStroke",
    "from_key_id",
    "parse_key",
    "parse_sequence",
    "sequence_to_string",
    # Resolver
    "KeyBuffer",
    "MessageResolver",
    # Trie
    "Continue",
    "KeyMapError",
    "KeyTree",
    "Node",
    "Terminal",
]
