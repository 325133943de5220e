from __future__ import annotations

import pytest

from hexnav.core.input_widget import ResultKind
from hexnav.core.number_field import MAX_LENGTH, NumberField, parse_offset


@pytest.mark.parametrize(
    ("text", "relative", "expected"),
    [("42", False, 42), ("0x1F", False, 31), ("0X10", False, 16), ("+0x10", True, 16), ("-5", True, -5)],
)
def test_parse_offset(text: str, relative: bool, expected: int) -> None:
    assert parse_offset(text, relative=relative) == expected


@pytest.mark.parametrize("text", ["", "abc", "0x", "1 2", "-5"])
def test_parse_offset_rejects(text: str) -> None:
    with pytest.raises(ValueError):
        parse_offset(text)


def test_goto_prompt_submits_value() -> None:
    field = NumberField()
    field.set_value(10)
    field.focus()
    assert field.handle("0", "0").kind is ResultKind.REDRAW
    result = field.handle("enter")
    assert result.is_value
    assert result.value == 100
    assert not field.has_focus()


def test_relative_prompt() -> None:
    field = NumberField(relative=True)
    field.start_relative("-")
    field.focus()
    field.handle("5", "5")
    assert field.handle("enter").value == -5


def test_bad_number_beeps_and_flags_error() -> None:
    field = NumberField(relative=True)
    field.start_relative("+")
    field.focus()
    assert field.handle("enter").kind is ResultKind.BEEP
    assert field.error
    assert field.has_focus()
    field.handle("backspace")
    assert field.text == ""
    assert not field.error


def test_negative_absolute_offset_is_flagged_while_typing() -> None:
    field = NumberField()
    field.focus()
    field.handle("minus", "-")
    field.handle("5", "5")
    assert field.error
    assert field.handle("enter").kind is ResultKind.BEEP


def test_q_and_escape_close() -> None:
    field = NumberField()
    field.focus()
    field.handle("q", "q")
    assert not field.has_focus()
    field.focus()
    field.handle("escape")
    assert not field.has_focus()


def test_other_keys_propagate() -> None:
    field = NumberField()
    field.focus()
    assert field.handle("g", "g").kind is ResultKind.PROPAGATE
    assert field.handle("f1").kind is ResultKind.PROPAGATE
    assert field.handle("up").kind is ResultKind.IGNORE


def test_length_is_capped() -> None:
    field = NumberField()
    field.focus()
    for _ in range(MAX_LENGTH + 5):
        field.handle("9", "9")
    assert len(field.text) == MAX_LENGTH
