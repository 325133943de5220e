from __future__ import annotations

import logging

from hexnav.core.input_widget import (
    IGNORE,
    PROPAGATE,
    REDRAW,
    WidgetResult,
    is_typed_character,
)
from hexnav.core.search_term import SearchMode, SearchTermError, convert_term
from hexnav.core.term_editing import EditBuffer, EditStrategy, strategy_for

logger = logging.getLogger(__name__)

MODE_KEYS = {
    "f5": SearchMode.next_major,
    "shift+f5": SearchMode.prev_major,
    "f6": SearchMode.next_sign,
    "f7": SearchMode.next_size,
    "f8": SearchMode.next_endian,
}


class SearchField:
    """Model of the search bar: a mode, an edit buffer and focus state.

    Submitting (Enter or F3) decodes the buffer with the current mode and
    returns the resulting bytes as a VALUE result; the buffer is kept so the
    next search starts from it.
    """

    def __init__(self, mode: SearchMode | None = None) -> None:
        self.mode = mode or SearchMode.text()
        self.buffer = EditBuffer()
        self.focused = False
        self._strategy: EditStrategy = strategy_for(self.mode)

    # ---- InputWidget ----
    def has_focus(self) -> bool:
        return self.focused

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def set_value(self, value: bytes) -> None:
        """Show `value` in the current mode.

        Raises:
            SearchTermError: If the bytes cannot be shown in this mode
        """
        self.buffer.set(self.mode.stringify(value))

    def handle(self, key: str, character: str | None = None) -> WidgetResult[bytes]:
        if not self.focused:
            return PROPAGATE
        buf = self.buffer
        strategy = self._strategy

        if key == "escape":
            self.blur()
            return REDRAW
        if key in ("enter", "f3"):
            return self.submit()
        if key in MODE_KEYS:
            self.set_search_mode(MODE_KEYS[key](self.mode))
            return REDRAW
        if key == "home":
            return REDRAW if buf.home() else IGNORE
        if key == "end":
            return REDRAW if buf.end() else IGNORE
        if key == "left":
            return REDRAW if strategy.left(buf) else IGNORE
        if key == "right":
            return REDRAW if strategy.right(buf) else IGNORE
        if key == "backspace":
            return REDRAW if strategy.backspace(buf) else IGNORE
        if key == "delete":
            return REDRAW if strategy.delete(buf) else IGNORE
        if key == "insert":
            return REDRAW if strategy.insert_pair(buf) else IGNORE
        if key in ("up", "down"):
            return IGNORE

        if is_typed_character(character):
            if character == "q" and strategy.closes_on_q:
                self.blur()
                return REDRAW
            if strategy.insert(buf, character):
                return REDRAW
        return PROPAGATE

    # ---- Mode & value ----
    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def cursor(self) -> int:
        return self.buffer.cursor

    @property
    def invalid(self) -> bool:
        if not self.buffer.text:
            return False
        try:
            self.mode.parse(self.buffer.text)
        except SearchTermError:
            return True
        return False

    def value(self) -> bytes:
        return self.mode.parse(self.buffer.text)

    def set_search_mode(self, mode: SearchMode) -> None:
        if mode == self.mode:
            return
        self.buffer.set(convert_term(self.buffer.text, self.mode, mode))
        logger.debug("search mode %s -> %s", self.mode.short_label, mode.short_label)
        self.mode = mode
        self._strategy = strategy_for(mode)

    def set_mode_and_value(self, mode: SearchMode, value: bytes) -> None:
        text = mode.stringify(value)
        self.mode = mode
        self._strategy = strategy_for(mode)
        self.buffer.set(text)

    def submit(self) -> WidgetResult[bytes]:
        if not self.buffer.text:
            return IGNORE
        try:
            data = self.mode.parse(self.buffer.text)
        except SearchTermError as exc:
            logger.debug("search term rejected: %s", exc)
            return IGNORE
        return WidgetResult.of(data)

    def visible(self, width: int) -> tuple[str, int]:
        """Slice of the buffer that fits `width` cells, plus the cursor column.

        One cell is reserved for the cursor block past the end of the text.
        """
        text = self.buffer.text
        cursor = self.buffer.cursor
        if width <= 0:
            return "", 0
        start = max(0, cursor - width + 1)
        return text[start : start + width], cursor - start
