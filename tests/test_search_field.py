from __future__ import annotations

from hexnav.core.input_widget import ResultKind
from hexnav.core.search_field import SearchField
from hexnav.core.search_term import IntSize, SearchMode


def press(field: SearchField, *keys: str) -> list[ResultKind]:
    """Feed keys; single characters are typed, anything else is a key name."""
    kinds = []
    for key in keys:
        character = key if len(key) == 1 else None
        kinds.append(field.handle(key, character).kind)
    return kinds


def test_unfocused_field_hands_keys_back() -> None:
    field = SearchField()
    assert press(field, "a", "enter") == [ResultKind.PROPAGATE, ResultKind.PROPAGATE]
    assert field.text == ""


def test_text_search_submit() -> None:
    field = SearchField()
    field.focus()
    assert press(field, "h", "i") == [ResultKind.REDRAW, ResultKind.REDRAW]
    result = field.handle("enter")
    assert result.is_value
    assert result.value == b"hi"
    # the term is kept for the next search
    assert field.text == "hi"
    assert field.handle("f3").value == b"hi"


def test_empty_or_invalid_submit_is_ignored() -> None:
    field = SearchField(SearchMode.binary())
    field.focus()
    assert field.handle("enter").kind is ResultKind.IGNORE
    field.buffer.set("123")
    assert field.invalid
    assert field.handle("enter").kind is ResultKind.IGNORE


def test_mode_keys_convert_the_term() -> None:
    field = SearchField()
    field.focus()
    press(field, "h", "i", "f5")
    assert field.mode == SearchMode.binary()
    assert (field.text, field.cursor) == ("68 69 ", 6)
    press(field, "f5")
    assert field.mode == SearchMode.integer()
    assert field.text == ""  # two bytes do not make a 64-bit integer
    press(field, "shift+f5")
    assert field.mode == SearchMode.binary()
    press(field, "shift+f5")
    assert field.mode == SearchMode.text()


def test_integer_parameter_keys() -> None:
    field = SearchField(SearchMode.integer())
    field.focus()
    press(field, "-", "1")
    press(field, "f7")
    assert field.mode.size is IntSize.I32
    assert field.text == "-1"
    press(field, "f6")
    assert not field.mode.sign.is_signed
    assert field.text == "4294967295"
    press(field, "f8")
    assert field.mode.endian == "big"
    assert field.handle("enter").value == b"\xff\xff\xff\xff"


def test_q_closes_only_non_text_modes() -> None:
    field = SearchField()
    field.focus()
    press(field, "q")
    assert field.has_focus()
    assert field.text == "q"

    field = SearchField(SearchMode.binary())
    field.focus()
    assert press(field, "q") == [ResultKind.REDRAW]
    assert not field.has_focus()


def test_binary_rejected_character_propagates() -> None:
    field = SearchField(SearchMode.binary())
    field.focus()
    assert press(field, "z", "n") == [ResultKind.PROPAGATE, ResultKind.PROPAGATE]
    assert field.text == ""


def test_insert_key() -> None:
    field = SearchField(SearchMode.binary())
    field.focus()
    press(field, "a", "b")
    assert press(field, "insert") == [ResultKind.REDRAW]
    assert field.text == "AB 00 "
    press(field, "home", "insert")
    assert field.text == "00 AB 00 "

    text_field = SearchField()
    text_field.focus()
    assert press(text_field, "insert", "up", "down") == [ResultKind.IGNORE] * 3


def test_escape_blurs() -> None:
    field = SearchField()
    field.focus()
    assert press(field, "escape") == [ResultKind.REDRAW]
    assert not field.has_focus()


def test_set_mode_and_value() -> None:
    field = SearchField()
    field.set_mode_and_value(SearchMode.binary(), b"\x01\x02")
    assert field.mode == SearchMode.binary()
    assert (field.text, field.cursor) == ("01 02 ", 6)
    assert field.value() == b"\x01\x02"


def test_visible_window_follows_cursor() -> None:
    field = SearchField()
    field.buffer.set("abcdefghij")
    assert field.visible(5) == ("ghij", 4)
    field.buffer.cursor = 0
    assert field.visible(5) == ("abcde", 0)
    assert field.visible(0) == ("", 0)
