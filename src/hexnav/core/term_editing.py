"""Edit-buffer behavior for each search mode.

The search bar keeps a plain string plus a cursor index. How characters are
inserted, removed and stepped over depends on the mode:

- text: free-form insertion
- binary: the buffer is "AB CD EF " style; the cursor only ever rests on a
  nibble, typing overwrites digits and a new pair is opened with a "0"
  placeholder, and deletions remove a whole pair with its separator
- integer: a character is accepted only if the buffer still parses (a lone
  leading sign is allowed while the number is being started)
"""

from __future__ import annotations

from dataclasses import dataclass

from hexnav.core.search_term import SearchMode, SearchTermError

_HEX = "0123456789ABCDEF"


@dataclass
class EditBuffer:
    text: str = ""
    cursor: int = 0

    def set(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)

    def home(self) -> bool:
        self.cursor = 0
        return True

    def end(self) -> bool:
        self.cursor = len(self.text)
        return True


class EditStrategy:
    """Plain text editing; the other modes override what differs."""

    closes_on_q = False

    def insert(self, buf: EditBuffer, ch: str) -> bool:
        buf.text = buf.text[: buf.cursor] + ch + buf.text[buf.cursor :]
        buf.cursor += 1
        return True

    def backspace(self, buf: EditBuffer) -> bool:
        if buf.cursor == 0:
            return False
        buf.text = buf.text[: buf.cursor - 1] + buf.text[buf.cursor :]
        buf.cursor -= 1
        return True

    def delete(self, buf: EditBuffer) -> bool:
        if buf.cursor >= len(buf.text):
            return False
        buf.text = buf.text[: buf.cursor] + buf.text[buf.cursor + 1 :]
        return True

    def left(self, buf: EditBuffer) -> bool:
        if buf.cursor == 0:
            return False
        buf.cursor -= 1
        return True

    def right(self, buf: EditBuffer) -> bool:
        if buf.cursor >= len(buf.text):
            return False
        buf.cursor += 1
        return True

    def insert_pair(self, buf: EditBuffer) -> bool:
        return False


class TextStrategy(EditStrategy):
    pass


class BinaryStrategy(EditStrategy):
    closes_on_q = True

    @staticmethod
    def _remove_pair(buf: EditBuffer) -> None:
        # pair plus its separator, if there is one
        buf.text = buf.text[: buf.cursor] + buf.text[buf.cursor + 3 :]

    def insert(self, buf: EditBuffer, ch: str) -> bool:
        ch = ch.upper()
        if len(ch) != 1 or ch not in _HEX:
            return False
        text = buf.text
        if buf.cursor >= len(text):
            buf.text = text + ch + "0"
            buf.cursor += 1
        elif buf.cursor % 3 == 0:
            buf.text = text[: buf.cursor] + ch + text[buf.cursor + 1 :]
            buf.cursor += 1
        else:
            buf.text = text[: buf.cursor] + ch + text[buf.cursor + 1 :]
            buf.cursor += 1
            if buf.cursor == len(buf.text):
                buf.text += " "
            buf.cursor += 1
        return True

    def backspace(self, buf: EditBuffer) -> bool:
        if buf.cursor == 0:
            return False
        rem = buf.cursor % 3
        buf.cursor -= 3 if rem == 0 else rem
        self._remove_pair(buf)
        return True

    def delete(self, buf: EditBuffer) -> bool:
        if buf.cursor >= len(buf.text):
            return False
        buf.cursor -= buf.cursor % 3
        self._remove_pair(buf)
        return True

    def left(self, buf: EditBuffer) -> bool:
        if buf.cursor == 0:
            return False
        buf.cursor -= 1
        if buf.text[buf.cursor] == " ":
            buf.cursor -= 1
        return True

    def right(self, buf: EditBuffer) -> bool:
        if buf.cursor >= len(buf.text):
            return False
        buf.cursor += 1
        if buf.cursor < len(buf.text) and buf.text[buf.cursor] == " ":
            buf.cursor += 1
        return True

    def insert_pair(self, buf: EditBuffer) -> bool:
        buf.cursor -= buf.cursor % 3
        buf.text = buf.text[: buf.cursor] + "00 " + buf.text[buf.cursor :]
        return True


class IntegerStrategy(EditStrategy):
    closes_on_q = True

    def __init__(self, mode: SearchMode) -> None:
        self.mode = mode

    def insert(self, buf: EditBuffer, ch: str) -> bool:
        if not buf.text and (ch == "+" or (ch == "-" and self.mode.sign.is_signed)):
            return super().insert(buf, ch)
        candidate = buf.text[: buf.cursor] + ch + buf.text[buf.cursor :]
        try:
            self.mode.parse(candidate)
        except SearchTermError:
            return False
        buf.text = candidate
        buf.cursor += 1
        return True


def strategy_for(mode: SearchMode) -> EditStrategy:
    if mode.is_binary:
        return BinaryStrategy()
    if mode.is_integer:
        return IntegerStrategy(mode)
    return TextStrategy()
