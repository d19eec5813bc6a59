"""Per-mode legality rules.

Every mode-dependent decision in the buffer engine and the keystroke
resolver reads this table instead of matching on the mode itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from yeet.buffer.model import Mode

DEFAULT_MODE: Mode = "navigation"

MODES: tuple[Mode, ...] = ("navigation", "normal", "insert", "command")


@dataclass(frozen=True)
class ModeRules:
    index_correction: int
    """How many characters before the line length the cursor may sit."""
    editable: bool
    """Whether text modifications apply."""
    passthrough: bool
    """Whether unmatched printable keys are inserted as text."""
    counts: bool
    """Whether a leading digit run is read as a repeat count."""


MODE_RULES: dict[Mode, ModeRules] = {
    "navigation": ModeRules(index_correction=1, editable=False, passthrough=False, counts=True),
    "normal": ModeRules(index_correction=1, editable=True, passthrough=False, counts=True),
    "insert": ModeRules(index_correction=0, editable=True, passthrough=True, counts=False),
    "command": ModeRules(index_correction=0, editable=True, passthrough=True, counts=False),
}


def get_rules(mode: Mode) -> ModeRules:
    return MODE_RULES[mode]


def get_index_correction(mode: Mode) -> int:
    return MODE_RULES[mode].index_correction


def is_mode(value: str) -> bool:
    return value in MODE_RULES
