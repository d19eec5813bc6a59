"""Conversion between ANSI SGR text and buffer style spans.

Preview output from external tools arrives as ANSI-colored text. Buffers
store plain content plus :class:`~yeet.buffer.model.StyleSpan` ranges, so the
text is split here and re-joined when a rendered line is written out.
"""

from __future__ import annotations

import re

from yeet.buffer.model import StyleSpan

_ANSI_REGEX = re.compile(r"\x1b\[([0-9;]*)m")
_OTHER_ESCAPE_REGEX = re.compile(r"\x1b(?:\][^\x07]*\x07|_[^\x07]*\x07|\[[0-9;?]*[A-Za-ln-z])")

COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

MODIFIER_CODES: dict[str, int] = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "reversed": 7,
    "hidden": 8,
    "crossed_out": 9,
}

_MODIFIER_BY_CODE = {code: name for name, code in MODIFIER_CODES.items()}

# SGR parameters that switch a modifier off
_MODIFIER_RESETS: dict[int, tuple[str, ...]] = {
    22: ("bold", "dim"),
    23: ("italic",),
    24: ("underline",),
    25: ("blink",),
    27: ("reversed",),
    28: ("hidden",),
    29: ("crossed_out",),
}


class AnsiStyleTracker:
    """Track the active SGR state as named colors and modifiers.

    Colors are ``"red"`` / ``"bright_red"`` for the 16 base colors,
    ``"color(N)"`` for the 256-color palette and ``"#rrggbb"`` for RGB.
    """

    def __init__(self) -> None:
        self.foreground: str | None = None
        self.background: str | None = None
        self.modifiers: set[str] = set()

    def process(self, params_str: str) -> None:
        """Update tracked state from the parameter part of ``ESC[...m``."""
        if not params_str:
            self.clear()
            return

        params = params_str.split(";")
        i = 0
        while i < len(params):
            p = params[i]
            val = int(p) if p else 0

            if val == 0:
                self.clear()
            elif val in _MODIFIER_BY_CODE:
                self.modifiers.add(_MODIFIER_BY_CODE[val])
            elif val in _MODIFIER_RESETS:
                self.modifiers.difference_update(_MODIFIER_RESETS[val])
            elif 30 <= val <= 37:
                self.foreground = COLOR_NAMES[val - 30]
            elif 90 <= val <= 97:
                self.foreground = f"bright_{COLOR_NAMES[val - 90]}"
            elif val == 39:
                self.foreground = None
            elif 40 <= val <= 47:
                self.background = COLOR_NAMES[val - 40]
            elif 100 <= val <= 107:
                self.background = f"bright_{COLOR_NAMES[val - 100]}"
            elif val == 49:
                self.background = None
            elif val in (38, 48):
                color, consumed = _parse_extended_color(params, i)
                if val == 38:
                    self.foreground = color
                else:
                    self.background = color
                i += consumed

            i += 1

    def clear(self) -> None:
        self.foreground = None
        self.background = None
        self.modifiers = set()

    def snapshot(self) -> tuple[tuple[str, str], ...]:
        state: list[tuple[str, str]] = []
        if self.foreground is not None:
            state.append(("foreground", self.foreground))
        if self.background is not None:
            state.append(("background", self.background))
        for modifier in sorted(self.modifiers):
            state.append(("modifier", modifier))
        return tuple(state)


def _parse_extended_color(params: list[str], i: int) -> tuple[str | None, int]:
    if i + 1 >= len(params):
        return (None, 0)

    mode = int(params[i + 1]) if params[i + 1] else 0
    if mode == 5 and i + 2 < len(params):
        return (f"color({params[i + 2]})", 2)
    if mode == 2 and i + 4 < len(params):
        r, g, b = (int(v) if v else 0 for v in params[i + 2 : i + 5])
        return (f"#{r:02x}{g:02x}{b:02x}", 4)
    return (None, 1)


def strip_ansi(text: str) -> str:
    return _OTHER_ESCAPE_REGEX.sub("", _ANSI_REGEX.sub("", text))


def parse_ansi(text: str) -> tuple[str, list[StyleSpan]]:
    """Split *text* into plain content and style spans over character indices.

    Non-SGR escape sequences (cursor movement, OSC, APC) are dropped.
    """
    text = _OTHER_ESCAPE_REGEX.sub("", text)

    tracker = AnsiStyleTracker()
    plain: list[str] = []
    open_spans: dict[tuple[str, str], int] = {}
    spans: list[StyleSpan] = []
    index = 0
    pos = 0

    def _sync() -> None:
        active = set(tracker.snapshot())
        for key in [k for k in open_spans if k not in active]:
            start = open_spans.pop(key)
            if start < index:
                spans.append(StyleSpan(start, index, key[0], key[1]))  # type: ignore[arg-type]
        for key in tracker.snapshot():
            open_spans.setdefault(key, index)

    for match in _ANSI_REGEX.finditer(text):
        chunk = text[pos : match.start()]
        plain.append(chunk)
        index += len(chunk)
        tracker.process(match.group(1))
        _sync()
        pos = match.end()

    tail = text[pos:]
    plain.append(tail)
    index += len(tail)

    for key, start in open_spans.items():
        if start < index:
            spans.append(StyleSpan(start, index, key[0], key[1]))  # type: ignore[arg-type]

    spans.sort(key=lambda s: (s.start, s.end))
    return ("".join(plain), spans)


# ---------------------------------------------------------------------------
# Rendering spans back to SGR
# ---------------------------------------------------------------------------


def color_code(color: str, background: bool = False) -> str:
    """Return the SGR parameter string for a named color."""
    base = 40 if background else 30
    if color.startswith("bright_") and color[7:] in COLOR_NAMES:
        return str(base + 60 + COLOR_NAMES.index(color[7:]))
    if color in COLOR_NAMES:
        return str(base + COLOR_NAMES.index(color))
    if color.startswith("color(") and color.endswith(")"):
        return f"{base + 8};5;{color[6:-1]}"
    if color.startswith("#") and len(color) == 7:
        r, g, b = (int(color[i : i + 2], 16) for i in (1, 3, 5))
        return f"{base + 8};2;{r};{g};{b}"
    return str(base + 9)


def style_code(kind: str, value: str) -> str:
    if kind == "foreground":
        return color_code(value)
    if kind == "background":
        return color_code(value, background=True)
    return str(MODIFIER_CODES.get(value, 0))


def to_ansi(text: str, spans: list[StyleSpan]) -> str:
    """Render *text* with *spans* applied as SGR sequences.

    Later spans win over earlier spans for the same color kind.
    """
    if not spans:
        return text

    out: list[str] = []
    current: tuple[str, ...] = ()
    for index, char in enumerate(text):
        active: dict[str, str] = {}
        modifiers: list[str] = []
        for span in spans:
            if span.start <= index < span.end:
                if span.kind == "modifier":
                    if span.value not in modifiers:
                        modifiers.append(span.value)
                else:
                    active[span.kind] = span.value

        codes = [style_code(k, v) for k, v in sorted(active.items())]
        codes.extend(style_code("modifier", m) for m in modifiers)
        state = tuple(codes)
        if state != current:
            if current:
                out.append("\x1b[0m")
            if state:
                out.append(f"\x1b[{';'.join(state)}m")
            current = state
        out.append(char)

    if current:
        out.append("\x1b[0m")
    return "".join(out)
