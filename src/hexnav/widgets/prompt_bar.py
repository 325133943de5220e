"""One-line bar under the grid: the open prompt, or the last error message."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from hexnav.core.number_field import NumberField
from hexnav.core.search_field import SearchField
from hexnav.ui.palette import DARK, Palette

SEARCH_LABEL = "Search: "
OFFSET_LABEL = "Offset: "
REL_OFFSET_LABEL = "Relative Offset: "


def _with_cursor(text: Text, value: str, cursor: int, style: Style | None, cursor_style: Style) -> None:
    text.append(value[:cursor], style=style)
    if cursor < len(value):
        text.append(value[cursor], style=cursor_style)
        text.append(value[cursor + 1 :], style=style)
    else:
        text.append(" ", style=cursor_style)


class PromptBar(Static):
    def __init__(self, *, palette: Palette = DARK, id: str | None = None) -> None:  # noqa: A002
        super().__init__(id=id)
        self.palette = palette

    def show_search(self, field: SearchField, message: str | None = None) -> None:
        p = self.palette
        width = max(1, (self.size.width or 80) - len(SEARCH_LABEL) - 14)
        value, cursor = field.visible(width)
        style = Style(color=p.input_error_fg, bgcolor=p.input_error_bg) if field.invalid else None
        text = Text(SEARCH_LABEL, style="bold")
        _with_cursor(text, value, cursor, style, Style(reverse=True))
        text.append(f"  [{field.mode.label}]", style=Style(color=p.accent))
        if message:
            text.append(f"  {message}", style=Style(color=p.error_message_fg))
        self.update(text)

    def show_number(self, label: str, field: NumberField) -> None:
        p = self.palette
        style = Style(color=p.input_error_fg, bgcolor=p.input_error_bg) if field.error else None
        text = Text(label, style="bold")
        _with_cursor(text, field.text, field.buffer.cursor, style, Style(reverse=True))
        self.update(text)

    def show_message(self, message: str, *, error: bool = True) -> None:
        if error:
            text = Text(f"Error: {message.replace(chr(10), ' ')}")
            text.stylize(Style(color=self.palette.error_message_fg))
        else:
            text = Text(message)
        self.update(text)

    def clear(self) -> None:
        self.update("")
