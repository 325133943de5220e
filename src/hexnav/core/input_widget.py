"""Shared contract for the single-line editors (search bar, offset prompts).

Editors receive key presses as the Textual key name plus the printable
character, if any, so the models stay independent of the terminal layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

V = TypeVar("V")
InT = TypeVar("InT", contravariant=True)
OutT = TypeVar("OutT", covariant=True)


class ResultKind(Enum):
    PROPAGATE = "propagate"
    REDRAW = "redraw"
    IGNORE = "ignore"
    BEEP = "beep"
    VALUE = "value"


@dataclass(frozen=True)
class WidgetResult(Generic[V]):
    """Outcome of feeding one key to an editor.

    PROPAGATE hands the key back to the caller's own bindings, REDRAW and
    IGNORE report whether anything visible changed, BEEP flags rejected
    input, and VALUE carries a submitted value.
    """

    kind: ResultKind
    value: V | None = None

    @classmethod
    def of(cls, value: V) -> WidgetResult[V]:
        return cls(ResultKind.VALUE, value)

    @property
    def is_value(self) -> bool:
        return self.kind is ResultKind.VALUE


PROPAGATE: WidgetResult[Any] = WidgetResult(ResultKind.PROPAGATE)
REDRAW: WidgetResult[Any] = WidgetResult(ResultKind.REDRAW)
IGNORE: WidgetResult[Any] = WidgetResult(ResultKind.IGNORE)
BEEP: WidgetResult[Any] = WidgetResult(ResultKind.BEEP)


class InputWidget(Protocol[InT, OutT]):
    def has_focus(self) -> bool: ...

    def set_value(self, value: InT) -> None: ...

    def focus(self) -> None: ...

    def blur(self) -> None: ...

    def handle(self, key: str, character: str | None = None) -> WidgetResult[OutT]: ...


def is_typed_character(character: str | None) -> bool:
    """True for a single printable character (no control codes)."""
    if not character or len(character) != 1:
        return False
    cp = ord(character)
    return cp > 0x1F and cp != 0x7F
