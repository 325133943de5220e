from __future__ import annotations

import re

from hexnav.core.input_widget import (
    BEEP,
    IGNORE,
    PROPAGATE,
    REDRAW,
    WidgetResult,
    is_typed_character,
)
from hexnav.core.term_editing import EditBuffer, EditStrategy

MAX_LENGTH = 20
_NUMBER_RE = re.compile(r"([+-]?)(0[xX][0-9a-fA-F]+|[0-9]+)")
_ACCEPTED = set("0123456789abcdefABCDEFxX+-")


def parse_offset(text: str, *, relative: bool = False) -> int:
    """Parse a decimal or 0x-prefixed hex offset.

    Raises:
        ValueError: If the text is not a number, or is negative for an
            absolute offset
    """
    m = _NUMBER_RE.fullmatch(text.strip())
    if not m:
        raise ValueError(f"not a number: {text!r}")
    sign, digits = m.groups()
    if sign == "-" and not relative:
        raise ValueError("offset cannot be negative")
    value = int(digits, 0) if digits[:2].lower() == "0x" else int(digits, 10)
    return -value if sign == "-" else value


class NumberField:
    """Single-line numeric prompt for goto-offset and relative moves."""

    def __init__(self, *, relative: bool = False) -> None:
        self.relative = relative
        self.buffer = EditBuffer()
        self.focused = False
        self.error = False
        self._edit = EditStrategy()

    def has_focus(self) -> bool:
        return self.focused

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def set_value(self, value: int) -> None:
        self.error = False
        self.buffer.set(str(value))

    def start_relative(self, sign: str) -> None:
        """Prime the buffer with '+' or '-' for a relative move."""
        self.error = False
        self.buffer.set(sign)

    @property
    def text(self) -> str:
        return self.buffer.text

    def _check(self) -> None:
        if not self.buffer.text:
            self.error = False
            return
        try:
            parse_offset(self.buffer.text, relative=self.relative)
        except ValueError:
            self.error = True
        else:
            self.error = False

    def handle(self, key: str, character: str | None = None) -> WidgetResult[int]:
        if not self.focused:
            return PROPAGATE
        buf = self.buffer

        if key == "escape" or character == "q":
            self.blur()
            return REDRAW
        if key == "enter":
            try:
                value = parse_offset(buf.text, relative=self.relative)
            except ValueError:
                self.error = True
                return BEEP
            self.focused = False
            self.error = False
            return WidgetResult.of(value)
        if key == "home":
            buf.home()
            return REDRAW
        if key == "end":
            buf.end()
            return REDRAW
        if key == "left":
            return REDRAW if self._edit.left(buf) else IGNORE
        if key == "right":
            return REDRAW if self._edit.right(buf) else IGNORE
        if key in ("backspace", "delete"):
            changed = self._edit.backspace(buf) if key == "backspace" else self._edit.delete(buf)
            if not changed:
                return IGNORE
            self._check()
            return REDRAW
        if key in ("up", "down"):
            return IGNORE

        if is_typed_character(character) and character in _ACCEPTED:
            if len(buf.text) >= MAX_LENGTH:
                return IGNORE
            self._edit.insert(buf, character)
            self._check()
            return REDRAW
        return PROPAGATE
