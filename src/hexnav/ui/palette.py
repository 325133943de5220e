from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    normal_fg: str
    normal_bg: str
    offsets_fg: str
    non_ascii_fg: str
    cursor_fg: str
    cursor_bg: str
    selection_fg: str
    selection_bg: str
    selected_cursor_bg: str
    selection_match_fg: str
    selection_match_bg: str
    search_match_fg: str
    search_match_bg: str
    search_match_cursor_bg: str
    input_error_fg: str
    input_error_bg: str
    error_message_fg: str
    footer_fg: str
    footer_bg: str
    accent: str
    panel_border: str


DARK = Palette(
    normal_fg="#e5e5e5",
    normal_bg="#000000",
    offsets_fg="#af5f00",
    non_ascii_fg="#d7af87",
    cursor_fg="#ffffff",
    cursor_bg="#cd0000",
    selection_fg="#ffffff",
    selection_bg="#0000d7",
    selected_cursor_bg="#af00d7",
    selection_match_fg="#ffffff",
    selection_match_bg="#303030",
    search_match_fg="#000000",
    search_match_bg="#ff5f00",
    search_match_cursor_bg="#ff005f",
    input_error_fg="#ffffff",
    input_error_bg="#cd0000",
    error_message_fg="#ff5555",
    footer_fg="#000000",
    footer_bg="#e5e5e5",
    accent="#5ea1ff",
    panel_border="#3b4252",
)

LIGHT = Palette(
    normal_fg="#000000",
    normal_bg="#ffffff",
    offsets_fg="#af5f00",
    non_ascii_fg="#d78787",
    cursor_fg="#ffffff",
    cursor_bg="#cd0000",
    selection_fg="#ffffff",
    selection_bg="#0000d7",
    selected_cursor_bg="#af00d7",
    selection_match_fg="#ffffff",
    selection_match_bg="#303030",
    search_match_fg="#000000",
    search_match_bg="#ff5f00",
    search_match_cursor_bg="#ff005f",
    input_error_fg="#ffffff",
    input_error_bg="#cd0000",
    error_message_fg="#cd0000",
    footer_fg="#ffffff",
    footer_bg="#000000",
    accent="#4c75c6",
    panel_border="#888888",
)

PALETTES = {"dark": DARK, "light": LIGHT}


def palette_for(theme: str) -> Palette:
    try:
        return PALETTES[theme]
    except KeyError:
        raise ValueError(f"Unknown theme '{theme}'. Expected 'dark' or 'light'.") from None
