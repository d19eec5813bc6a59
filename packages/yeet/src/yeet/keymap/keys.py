"""Keystrokes, vim-style keycode strings and raw terminal key parsing.

A :class:`KeyStroke` is a key code plus a set of modifiers. Letters are
stored lowercase; an uppercase letter is the lowercase code with ``shift``.
Keycode strings follow vim notation (``"j"``, ``"G"``, ``"<C-d>"``,
``"<esc>"``, ``"<A-C-lt>"``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class KeyParseError(ValueError):
    """Raised for malformed keycode strings."""


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# vim name -> literal text the key produces when typed
NAMED_KEYS: dict[str, str | None] = {
    "bs": None,
    "cr": None,
    "esc": None,
    "del": None,
    "tab": "\t",
    "space": " ",
    "lt": "<",
    "bar": "|",
    "bslash": "\\",
    "up": None,
    "down": None,
    "left": None,
    "right": None,
    "home": None,
    "end": None,
    "pageup": None,
    "pagedown": None,
    "insert": None,
    "nul": None,
}

for _n in range(1, 13):
    NAMED_KEYS[f"f{_n}"] = None

# literal characters that are always spelled with a name
_CHAR_TO_NAME: dict[str, str] = {
    " ": "space",
    "<": "lt",
    "|": "bar",
    "\\": "bslash",
    "\t": "tab",
}

_NAME_ALIASES: dict[str, str] = {
    "backspace": "bs",
    "enter": "cr",
    "return": "cr",
    "escape": "esc",
    "delete": "del",
}

# Modifier name -> vim prefix letter, in output order
MODIFIERS: dict[str, str] = {
    "alt": "A",
    "ctrl": "C",
    "cmd": "D",
    "shift": "S",
}

_PREFIX_TO_MODIFIER: dict[str, str] = {
    "A": "alt",
    "M": "alt",
    "C": "ctrl",
    "D": "cmd",
    "S": "shift",
}

# ---------------------------------------------------------------------------
# KeyStroke
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyStroke:
    """A pressed key. Equal when code and modifier set are equal."""

    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_char(cls, char: str, modifiers: frozenset[str] | set[str] = frozenset()) -> KeyStroke:
        """Build a keystroke from a typed character, folding uppercase into ``shift``."""
        mods = set(modifiers)
        if char in _CHAR_TO_NAME:
            return cls(_CHAR_TO_NAME[char], frozenset(mods))
        if len(char) == 1 and char.isalpha() and char != char.lower():
            mods.add("shift")
            char = char.lower()
        return cls(char, frozenset(mods))

    @property
    def is_escape(self) -> bool:
        return self.code == "esc" and not self.modifiers

    @property
    def char(self) -> str | None:
        """Text this key types, or ``None`` for control and special keys."""
        if self.modifiers - {"shift"}:
            return None
        if self.code in NAMED_KEYS:
            if self.modifiers:
                return None
            return NAMED_KEYS[self.code]
        if len(self.code) != 1:
            return None
        if "shift" in self.modifiers:
            return self.code.upper()
        return self.code

    @property
    def digit(self) -> int | None:
        if not self.modifiers and len(self.code) == 1 and self.code.isdigit():
            return int(self.code)
        return None

    def to_keycode_string(self) -> str:
        mods = set(self.modifiers)
        code = self.code
        named = code in NAMED_KEYS

        if not named and "shift" in mods and code.isalpha():
            mods.discard("shift")
            code = code.upper()

        if not mods and not named:
            return code

        prefix = "".join(f"{MODIFIERS[m]}-" for m in MODIFIERS if m in mods)
        return f"<{prefix}{code}>"

    @classmethod
    def from_keycode_string(cls, keycode: str) -> KeyStroke:
        """Parse a single vim keycode such as ``"G"``, ``"<C-d>"`` or ``"<esc>"``."""
        if not keycode:
            raise KeyParseError("Empty keycode")

        if len(keycode) == 1:
            return cls.from_char(keycode)

        if not (keycode.startswith("<") and keycode.endswith(">")):
            raise KeyParseError(f"Invalid keycode: {keycode!r}")

        inner = keycode[1:-1]
        if inner.endswith("--"):
            parts = inner[:-2].split("-") if inner[:-2] else []
            parts = [p for p in parts if p] + ["-"]
        else:
            parts = inner.split("-")
        if not parts or not parts[-1]:
            raise KeyParseError(f"Invalid keycode: {keycode!r}")

        *prefixes, last = parts
        mods: set[str] = set()
        for prefix in prefixes:
            modifier = _PREFIX_TO_MODIFIER.get(prefix.upper())
            if modifier is None:
                raise KeyParseError(f"Unknown modifier {prefix!r} in {keycode!r}")
            mods.add(modifier)

        if len(last) == 1:
            if "ctrl" in mods:
                # <C-D> and <C-d> are the same key
                last = last.lower()
            return cls.from_char(last, mods)

        name = _NAME_ALIASES.get(last.lower(), last.lower())
        if name not in NAMED_KEYS:
            raise KeyParseError(f"Unknown key name {last!r} in {keycode!r}")
        return cls(name, frozenset(mods))

    def __str__(self) -> str:
        return self.to_keycode_string()


ESCAPE = KeyStroke("esc")

_TOKEN_RE = re.compile(r"<[^<>\s]+>|<-->|.", re.DOTALL)


def parse_sequence(sequence: str) -> list[KeyStroke]:
    """Split a binding sequence like ``"gg"`` or ``"<C-w>j"`` into keystrokes."""
    keys: list[KeyStroke] = []
    for token in _TOKEN_RE.findall(sequence):
        keys.append(KeyStroke.from_keycode_string(token))
    return keys


def sequence_to_string(keys: list[KeyStroke]) -> str:
    return "".join(key.to_keycode_string() for key in keys)


def from_key_id(key_id: str) -> KeyStroke:
    """Convert a ``"ctrl+shift+a"`` style key identifier into a keystroke."""
    if not key_id:
        raise KeyParseError("Empty key id")

    if key_id == "+":
        return KeyStroke("+")

    parts = key_id.split("+")
    if key_id.endswith("++"):
        parts = parts[:-2] + ["+"]
    *mods, last = parts

    modifiers = set()
    for mod in mods:
        if mod.lower() not in MODIFIERS:
            raise KeyParseError(f"Unknown modifier {mod!r} in {key_id!r}")
        modifiers.add(mod.lower())

    if len(last) == 1:
        return KeyStroke.from_char(last, modifiers)

    name = _NAME_ALIASES.get(last.lower(), last.lower())
    if name not in NAMED_KEYS:
        raise KeyParseError(f"Unknown key {last!r} in {key_id!r}")
    return KeyStroke(name, frozenset(modifiers))


# ---------------------------------------------------------------------------
# Raw terminal input
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "del",
    "\x1b[4~": "end",
    "\x1b[5~": "pageup",
    "\x1b[6~": "pagedown",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[15~": "f5",
    "\x1b[17~": "f6",
    "\x1b[18~": "f7",
    "\x1b[19~": "f8",
    "\x1b[20~": "f9",
    "\x1b[21~": "f10",
    "\x1b[23~": "f11",
    "\x1b[24~": "f12",
}

_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "del",
    4: "end",
    5: "pageup",
    6: "pagedown",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

_KITTY_CODEPOINTS: dict[int, str] = {
    27: "esc",
    9: "tab",
    13: "cr",
    32: "space",
    127: "bs",
    57414: "cr",
}

_MODIFIER_BITS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
    "cmd": 8,
}

LOCK_MASK = 64 + 128

# xterm style modified keys: \x1b[1;<mod>X and \x1b[<num>;<mod>~
_MODIFIED_LETTER_RE = re.compile(r"\x1b\[1;(\d+)(?::\d+)?([ABCDHFPQRS])$")
_MODIFIED_TILDE_RE = re.compile(r"\x1b\[(\d+);(\d+)(?::\d+)?~$")

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(r"\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$")

# modifyOtherKeys: CSI 27;modifier;keycode ~
_MODIFY_OTHER_KEYS_RE = re.compile(r"\x1b\[27;(\d+);(\d+)~$")


def _decode_modifiers(value: int) -> set[str]:
    mod = (value - 1) & ~LOCK_MASK
    return {name for name, bit in _MODIFIER_BITS.items() if mod & bit}


def _from_codepoint(codepoint: int, modifiers: set[str]) -> KeyStroke | None:
    name = _KITTY_CODEPOINTS.get(codepoint)
    if name is not None:
        return KeyStroke(name, frozenset(modifiers))
    if codepoint <= 0:
        return None
    ch = chr(codepoint)
    if not ch.isprintable():
        return None
    return KeyStroke.from_char(ch, modifiers)


def parse_key(data: str) -> KeyStroke | None:  # noqa: C901
    """Parse one raw terminal input chunk into a keystroke, or ``None``.

    Handles kitty CSI-u sequences, modifyOtherKeys, legacy and xterm-modified
    escape sequences, control bytes, ESC-prefixed alt keys and printable
    characters.
    """
    if not data:
        return None

    # --- Kitty protocol ---
    m = _KITTY_CSI_U_RE.match(data)
    if m:
        modifiers = _decode_modifiers(int(m.group(4)) if m.group(4) else 1)
        event_type = int(m.group(5)) if m.group(5) else 1
        if event_type == 3:
            # key release
            return None
        return _from_codepoint(int(m.group(1)), modifiers)

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        return _from_codepoint(int(m.group(2)), _decode_modifiers(int(m.group(1))))

    # --- Legacy escape sequences ---
    if data in LEGACY_KEY_SEQUENCES:
        return KeyStroke(LEGACY_KEY_SEQUENCES[data])
    if data == "\x1b[Z":
        return KeyStroke("tab", frozenset({"shift"}))

    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        return KeyStroke(_LETTER_KEYS[m.group(2)], frozenset(_decode_modifiers(int(m.group(1)))))

    m = _MODIFIED_TILDE_RE.match(data)
    if m:
        name = _TILDE_KEYS.get(int(m.group(1)))
        if name is None:
            return None
        return KeyStroke(name, frozenset(_decode_modifiers(int(m.group(2)))))

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return ESCAPE
    if data in ("\r", "\n"):
        return KeyStroke("cr")
    if data == "\t":
        return KeyStroke("tab")
    if data in ("\x7f", "\x08"):
        return KeyStroke("bs")
    if data == "\x00":
        return KeyStroke("space", frozenset({"ctrl"}))

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyStroke(chr(ord(data) + ord("a") - 1), frozenset({"ctrl"}))

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is None:
            return None
        return KeyStroke(inner.code, inner.modifiers | {"alt"})

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return KeyStroke.from_char(data)

    return None
