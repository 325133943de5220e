from __future__ import annotations

import logging
import os
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, Static

from hexnav.config import ViewerConfig
from hexnav.core.endian import flip_endian
from hexnav.core.input_widget import InputWidget, ResultKind
from hexnav.core.io import PagedReader, write_range
from hexnav.core.navigation import NavigationController
from hexnav.core.number_field import NumberField
from hexnav.core.numbers import inspect_at
from hexnav.core.rows import is_printable_ascii
from hexnav.core.search import SearchController
from hexnav.core.search_field import SearchField
from hexnav.core.search_term import SearchMode, SearchTermError
from hexnav.widgets.hex_view import HexView
from hexnav.widgets.prompt_bar import OFFSET_LABEL, REL_OFFSET_LABEL, PromptBar

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Hotkeys
═══════
h or F1 ... show this help message
q ......... quit
e ......... toggle between big and little endian
i ......... toggle between signed and unsigned
o ......... enter offset to jump to
+ or - .... enter relative offset to jump to
s ......... toggle select mode
Enter ..... finish selecting
Escape .... cancel selecting
S ......... clear selection
w ......... write selection to file
f / or F3 . open search bar (and search for current selection)
F ......... clear search
n or P .... find next
p or N .... find previous
# ......... select ASCII line under cursor

Search
──────
Enter or F3 ... find (next)
F5 ............ switch through input modes: Text/Binary/Integer
Shift+F5 ...... switch through input modes in reverse
Escape ........ close search bar

Non-Text Search
───────────────
Escape or q ... close search bar
Insert ........ insert a 00 byte (Binary)
(all other global hotkeys that aren't allowed input characters are active)

Integer Search
──────────────
F6 ... toggle signed/unsigned
F7 ... switch through integer sizes: 64/32/16/8
F8 ... toggle little endian/big endian

Navigation
──────────
← ↑ ↓ → .......... move cursor
Home ............. move cursor to start of line
End .............. move cursor to end of line
0 or Ctrl+Home ... move cursor to start of file
$ or Ctrl+End .... move cursor to end of file
1 to 9 ........... move cursor to 10 * x percent of the file
Page Up .......... move view up one page
Page Down ........ move view down one page
"""


class HexnavApp(App):
    """Textual application shell for hexnav."""

    CSS = """
    HexView {
        height: 1fr;
    }
    #prompt {
        height: 1;
    }
    #inspector {
        height: 2;
    }
    #status {
        height: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("h", "open_help", "Help"),
        ("f1", "open_help", "Help"),
        ("e", "toggle_endian", "Endian"),
        ("i", "toggle_signed", "Signed"),
        ("s", "toggle_select", "Select"),
        ("enter", "finish_select", "Finish selection"),
        ("escape", "cancel_select", "Cancel selection"),
        ("S", "clear_selection", "Clear selection"),
        ("number_sign", "select_ascii", "Select ASCII"),
        ("o", "goto_offset", "Offset"),
        ("plus", "relative_offset('+')", "Offset +"),
        ("minus", "relative_offset('-')", "Offset -"),
        ("f", "open_search", "Search"),
        ("slash", "open_search", "Search"),
        ("f3", "open_search", "Search"),
        ("F", "clear_search", "Clear search"),
        ("n", "search_next", "Next"),
        ("P", "search_next", "Next"),
        ("p", "search_previous", "Previous"),
        ("N", "search_previous", "Previous"),
        ("w", "write_selection", "Write selection"),
        ("0", "goto_start", "Start"),
        ("dollar_sign", "goto_end", "End"),
    ] + [(str(d), f"goto_percent({d * 10})", f"{d * 10}%") for d in range(1, 10)]

    def __init__(self, config: ViewerConfig, *, reader: PagedReader | None = None) -> None:
        super().__init__()
        self.config = config
        self.palette = config.palette
        self.endian = config.endian
        self.signed = config.signed
        self._reader = reader
        self.nav: NavigationController | None = None
        self.search: SearchController | None = None
        self.hex_view: HexView | None = None
        self.title = f"hexnav: {os.path.basename(config.path)}"
        self.prompt = PromptBar(palette=self.palette, id="prompt")
        self.inspector = Static(id="inspector")
        self.status = Static(id="status")
        self.search_field = SearchField()
        self.offset_field = NumberField()
        self.rel_offset_field = NumberField(relative=True)
        self._message: str | None = None

    def compose(self) -> ComposeResult:  # noqa: D401 - Textual API
        # Delay opening until compose to give clear UI errors
        if self._reader is None:
            try:
                self._reader = PagedReader(self.config.path)
            except (FileNotFoundError, PermissionError) as exc:
                logger.error("cannot open %s: %s", self.config.path, exc)
                yield Static(f"Error: {exc}")
                return

        self.nav = NavigationController(self._reader)
        self.search = SearchController(self.nav)
        self.hex_view = HexView(
            self.nav,
            self.search,
            palette=self.palette,
            bytes_per_row=self.config.bytes_per_row,
            id="hex",
        )
        yield Header(show_clock=False, id="header")
        yield self.hex_view
        yield self.prompt
        yield self.inspector
        yield self.status
        yield Footer(id="footer")

    def on_mount(self) -> None:
        self.screen.styles.background = self.palette.normal_bg
        self.screen.styles.color = self.palette.normal_fg
        self.status.styles.background = self.palette.footer_bg
        self.status.styles.color = self.palette.footer_fg
        self.update_status()
        if self.hex_view is not None:
            self.set_focus(self.hex_view)

    def on_unmount(self) -> None:
        if self._reader is not None:
            self._reader.close()

    # ---- Prompts ----
    def _active_prompt(self) -> InputWidget[Any, Any] | None:
        for field in (self.search_field, self.offset_field, self.rel_offset_field):
            if field.has_focus():
                return field
        return None

    def _blur_prompts(self) -> None:
        self.search_field.blur()
        self.offset_field.blur()
        self.rel_offset_field.blur()

    def route_prompt_key(self, key: str, character: str | None) -> bool:
        """Feed a key to the open prompt; False hands it to the bindings."""
        field = self._active_prompt()
        if field is None:
            if self._message is not None and key not in ("shift", "ctrl", "alt"):
                self.set_message(None)
            return False

        self._message = None
        result = field.handle(key, character)
        if result.kind is ResultKind.PROPAGATE:
            self.refresh_prompt()
            return False
        if result.kind is ResultKind.BEEP:
            self.bell()
        elif result.is_value:
            self._prompt_value(field, result.value)
        self.refresh_prompt()
        return True

    def _prompt_value(self, field: InputWidget[Any, Any], value: Any) -> None:
        if self.nav is None or self.search is None:
            return
        if field is self.search_field:
            self.search.set_pattern(value, self.search_field.mode)
            self._find(self.search.find_next)
        elif field is self.offset_field:
            self.nav.set_cursor(value)
        else:
            self.nav.move_relative(value)
        self._refresh_view()

    def refresh_prompt(self) -> None:
        if self.search_field.has_focus():
            self.prompt.show_search(self.search_field, self._message)
        elif self.offset_field.has_focus():
            self.prompt.show_number(OFFSET_LABEL, self.offset_field)
        elif self.rel_offset_field.has_focus():
            self.prompt.show_number(REL_OFFSET_LABEL, self.rel_offset_field)
        elif self._message:
            self.prompt.show_message(self._message)
        else:
            self.prompt.clear()

    def set_message(self, message: str | None) -> None:
        self._message = message
        if message:
            logger.info("status: %s", message)
        self.refresh_prompt()

    # ---- Status ----
    def update_status(self) -> None:
        if self.nav is None or self._reader is None:
            self.status.update(Text("hexnav"))
            return
        nav = self.nav
        sel = nav.selection
        line = Text(f" Offset: 0x{nav.cursor:X} ({nav.cursor})")
        line.append(f"  Selection: {sel.start} - {sel.end}")
        if nav.selecting:
            line.append(" selecting", style="bold")
        if self.search is not None and self.search.has_active_search and self.search.mode:
            line.append(f"  Search: {self.search.mode.short_label} ({len(self.search.pattern)} bytes)")
        line.append("\n")
        line.append(" [ Little Endian ]" if self.endian == "little" else " [  Big Endian   ]")
        line.append("  [  Signed  ]" if self.signed else "  [ Unsigned ]")
        line.append("  [ Help ]  [ Quit ]")
        line.append(f"  {nav.percent:>3}%", style="bold")
        self.status.update(line)

        cells = inspect_at(self._reader, nav.cursor, endian=self.endian, signed=self.signed)
        ints, floats = cells[:4], cells[4:]
        rows = []
        for int_a, int_b, flt in ((ints[0], ints[2], floats[0]), (ints[1], ints[3], floats[1])):
            rows.append(
                f" {int_a.label}: {int_a.text:>6}  {int_b.label}: {int_b.text:>20}  "
                f"{flt.label}: {flt.text:>20}"
            )
        self.inspector.update(Text("\n".join(rows)))

    def _refresh_view(self) -> None:
        if self.hex_view is not None:
            self.hex_view.refresh()
        self.update_status()

    def _find(self, finder) -> None:  # type: ignore[no-untyped-def]
        if finder() is None and self.search is not None and self.search.message:
            self.bell()
            self.set_message(self.search.message)
        self._refresh_view()

    # ---- Actions ----
    def action_toggle_endian(self) -> None:
        self.endian = flip_endian(self.endian)
        self.set_message(None)
        self.update_status()

    def action_toggle_signed(self) -> None:
        self.signed = not self.signed
        self.set_message(None)
        self.update_status()

    def action_toggle_select(self) -> None:
        if self.nav is not None:
            self.nav.toggle_selecting()
            self._refresh_view()

    def action_finish_select(self) -> None:
        if self.nav is not None and self.nav.selecting:
            self.nav.finish_selection()
            self._refresh_view()

    def action_cancel_select(self) -> None:
        if self.nav is not None and self.nav.cancel_selection():
            self._refresh_view()
        self.set_message(None)

    def action_clear_selection(self) -> None:
        if self.nav is not None:
            self.nav.clear_selection()
            self._refresh_view()

    def action_select_ascii(self) -> None:
        if self.nav is None:
            return
        if not self.nav.select_ascii_run() and self.nav.size > 0:
            self.bell()
            self.set_message("No ASCII character under cursor")
        self._refresh_view()

    def action_goto_offset(self) -> None:
        if self.nav is None:
            return
        self._blur_prompts()
        self.offset_field.set_value(self.nav.cursor)
        self.offset_field.focus()
        self.refresh_prompt()

    def action_relative_offset(self, sign: str) -> None:
        self._blur_prompts()
        self.rel_offset_field.start_relative(sign)
        self.rel_offset_field.focus()
        self.refresh_prompt()

    def action_open_search(self) -> None:
        if self.nav is None:
            return
        self._blur_prompts()
        self.nav.selecting = False
        data = self.nav.selected_bytes()
        try:
            if data:
                mode = (
                    SearchMode.text()
                    if all(is_printable_ascii(b) for b in data)
                    else SearchMode.binary()
                )
                self.search_field.set_mode_and_value(mode, data)
            else:
                self.search_field.set_value(b"")
        except SearchTermError as exc:
            logger.debug("cannot prefill search: %s", exc)
        self.search_field.focus()
        self.set_message(None)
        self._refresh_view()

    def action_clear_search(self) -> None:
        if self.search is None:
            return
        self.search_field.blur()
        self.search.clear()
        self.set_message(None)
        self._refresh_view()

    def action_search_next(self) -> None:
        if self.search is not None:
            self._find(self.search.find_next)

    def action_search_previous(self) -> None:
        if self.search is not None:
            self._find(self.search.find_previous)

    def action_goto_start(self) -> None:
        if self.nav is not None:
            self.nav.file_start()
            self._refresh_view()

    def action_goto_end(self) -> None:
        if self.nav is not None:
            self.nav.file_end()
            self._refresh_view()

    def action_goto_percent(self, percent: int) -> None:
        if self.nav is not None:
            self.nav.goto_percent(percent)
            self._refresh_view()

    def action_write_selection(self) -> None:
        if self.nav is None:
            return
        if self.nav.selection.is_empty:
            self.bell()
            self.set_message("Nothing selected")
            return
        self.nav.selecting = False
        self._blur_prompts()
        self.set_message(None)
        self.push_screen(SaveSelectionScreen(), self._write_selection_submit)

    def action_open_help(self) -> None:
        if self.nav is not None:
            self.nav.selecting = False
        self.push_screen(HelpScreen())

    # ---- Callbacks ----
    def _write_selection_submit(self, path: str | None) -> None:
        if not path or self.nav is None or self._reader is None:
            return
        start, end = self.nav.selection.as_tuple()
        try:
            write_range(self._reader, start, end, path)
        except OSError as exc:
            logger.info("writing selection failed: %s", exc)
            self.bell()
            self.set_message(f"{exc}: {path!r}")
            return
        self.prompt.show_message(f"Wrote {end - start} bytes to {path}", error=False)


# ---- Simple modals ----


class SaveSelectionScreen(ModalScreen[str | None]):
    """Ask for the file name the selection is written to."""

    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Label("Write selection to file:")
        self._input = Input(placeholder="path/to/file.bin")
        yield self._input
        with Horizontal():
            yield Button("Save", id="save-btn", variant="primary")
            yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:  # type: ignore[override]
        self.set_focus(self._input)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.dismiss(self._input.value.strip() or None)
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:  # type: ignore[override]
        self.dismiss(event.value.strip() or None)

    def on_key(self, event) -> None:  # type: ignore[override]
        if event.key == "escape":
            self.dismiss(None)


class HelpScreen(ModalScreen[None]):
    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Static(HELP_TEXT, id="help-text")

    def on_mount(self) -> None:  # type: ignore[override]
        panel = self.query_one("#help-text", Static)
        panel.styles.border = ("round", self.app.palette.panel_border)  # type: ignore[attr-defined]
        panel.styles.width = "auto"

    def on_key(self, event) -> None:  # type: ignore[override]
        if event.key in {"escape", "enter", "q", "h", "f1"}:
            event.stop()
            self.dismiss(None)
