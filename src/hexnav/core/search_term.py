"""Search term model: turning typed text into byte patterns and back.

A search term is edited as text and decoded into bytes according to a
`SearchMode`:

- Text: the characters encoded as UTF-8
- Binary: hex digit pairs separated by single spaces ("DE AD BE EF ")
- Integer: a decimal literal serialized to 1/2/4/8 bytes with a given
  signedness and byte order

`convert_term` carries an in-progress term across a mode switch whenever the
conversion is meaningful and falls back to a safe default otherwise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Literal

from hexnav.core.endian import Endian, decode_int, encode_int, flip_endian, int_range, wrap_int
from hexnav.core.rows import is_printable_ascii

ModeKind = Literal["text", "binary", "integer"]

_HEX_DIGITS = "0123456789abcdefABCDEF"
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


class SearchTermError(ValueError):
    """Raised when a search term cannot be parsed or stringified."""


class IntSize(IntEnum):
    """Integer width in bytes."""

    I8 = 1
    I16 = 2
    I32 = 4
    I64 = 8

    @property
    def bits(self) -> int:
        return int(self) * 8

    def next(self) -> IntSize:
        # 64 -> 32 -> 16 -> 8 -> 64
        order = (IntSize.I64, IntSize.I32, IntSize.I16, IntSize.I8)
        return order[(order.index(self) + 1) % len(order)]


class Sign(Enum):
    SIGNED = "signed"
    UNSIGNED = "unsigned"

    @property
    def is_signed(self) -> bool:
        return self is Sign.SIGNED

    def next(self) -> Sign:
        return Sign.UNSIGNED if self is Sign.SIGNED else Sign.SIGNED


@dataclass(frozen=True)
class SearchMode:
    """Encoding that governs how a typed term becomes bytes.

    The integer parameters are only meaningful for integer mode; text and
    binary modes always carry the defaults so that equal modes compare equal.
    """

    kind: ModeKind = "text"
    size: IntSize = IntSize.I64
    sign: Sign = Sign.SIGNED
    endian: Endian = "little"

    @classmethod
    def text(cls) -> SearchMode:
        return cls("text")

    @classmethod
    def binary(cls) -> SearchMode:
        return cls("binary")

    @classmethod
    def integer(
        cls,
        size: IntSize = IntSize.I64,
        sign: Sign = Sign.SIGNED,
        endian: Endian = "little",
    ) -> SearchMode:
        return cls("integer", IntSize(size), sign, endian)

    @property
    def is_text(self) -> bool:
        return self.kind == "text"

    @property
    def is_binary(self) -> bool:
        return self.kind == "binary"

    @property
    def is_integer(self) -> bool:
        return self.kind == "integer"

    @property
    def width(self) -> int:
        """Byte width of an integer term (0 for text/binary)."""
        return int(self.size) if self.is_integer else 0

    @property
    def label(self) -> str:
        """Fixed-width label as shown next to the search bar."""
        if self.is_text:
            return "Text"
        if self.is_binary:
            return "Binary"
        sign = "Int  " if self.sign.is_signed else "UInt "
        return f"{sign}{self.size.bits:<2} {'LE' if self.endian == 'little' else 'BE'}"

    @property
    def short_label(self) -> str:
        if not self.is_integer:
            return self.label
        sign = "Int" if self.sign.is_signed else "UInt"
        return f"{sign} {self.size.bits} {'LE' if self.endian == 'little' else 'BE'}"

    def __str__(self) -> str:
        return self.label

    # ---- Decoding ----
    def parse(self, text: str) -> bytes:
        """Decode a typed term into the byte pattern it denotes.

        Raises:
            SearchTermError: If the term is malformed for this mode
        """
        if self.is_text:
            return text.encode("utf-8")
        if self.is_binary:
            return _parse_hex_pairs(text)
        if not text:
            return bytes(self.width)
        value = _parse_decimal(text, self.width, self.sign.is_signed)
        return encode_int(value, self.width, self.endian, self.sign.is_signed)

    def stringify(self, data: bytes) -> str:
        """Render bytes as the term that would parse back to them.

        Raises:
            SearchTermError: If the bytes cannot be shown in this mode
        """
        if self.is_binary:
            return "".join(f"{b:02X} " for b in data)
        if self.is_text:
            try:
                return bytes(data).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise SearchTermError(str(exc)) from None
        if not data:
            return "0"
        if len(data) < self.width:
            raise SearchTermError("not enough bytes")
        value = decode_int(bytes(data[: self.width]), self.endian, self.sign.is_signed)
        return str(value)

    # ---- Mode cycling ----
    def next_major(self) -> SearchMode:
        if self.is_text:
            return SearchMode.binary()
        if self.is_binary:
            return SearchMode.integer()
        return SearchMode.text()

    def prev_major(self) -> SearchMode:
        if self.is_text:
            return SearchMode.integer()
        if self.is_binary:
            return SearchMode.text()
        return SearchMode.binary()

    def next_size(self) -> SearchMode:
        return replace(self, size=self.size.next()) if self.is_integer else self

    def next_sign(self) -> SearchMode:
        return replace(self, sign=self.sign.next()) if self.is_integer else self

    def next_endian(self) -> SearchMode:
        return replace(self, endian=flip_endian(self.endian)) if self.is_integer else self


def _hex_value(ch: str, source: str) -> int:
    if ch not in _HEX_DIGITS:
        raise SearchTermError(f"illegal byte in hex string: {source!r}")
    return int(ch, 16)


def _parse_hex_pairs(text: str) -> bytes:
    # The edit buffer always looks like "AB CD E" or "AB CD ", so a trailing
    # separator and a trailing lone nibble are both accepted.
    data = bytearray()
    pos = 0
    length = len(text)
    while pos < length:
        byte = _hex_value(text[pos], text)
        pos += 1
        if pos == length:
            data.append(byte)
            break
        byte = (byte << 4) | _hex_value(text[pos], text)
        pos += 1
        data.append(byte)
        if pos == length:
            break
        if text[pos] != " ":
            raise SearchTermError(f"illegal byte in hex string: {text!r}")
        pos += 1
    return bytes(data)


def _parse_decimal(text: str, width: int, signed: bool) -> int:
    if not _DECIMAL_RE.fullmatch(text) or (not signed and text.startswith("-")):
        raise SearchTermError(f"invalid digit found in string: {text!r}")
    value = int(text, 10)
    low, high = int_range(width, signed)
    if not low <= value <= high:
        raise SearchTermError(f"number too large to fit in target type: {text!r}")
    return value


def convert_term(text: str, from_mode: SearchMode, to_mode: SearchMode) -> str:
    """Re-derive the edit buffer when the search mode changes.

    Never raises: a term that cannot be carried over becomes a safe default
    (empty, or "0" between integer modes).
    """
    if from_mode == to_mode:
        return text

    if to_mode.is_text:
        if from_mode.is_binary:
            try:
                data = from_mode.parse(text)
            except SearchTermError:
                return text
            if all(is_printable_ascii(b) for b in data):
                return data.decode("ascii")
        return text

    if to_mode.is_binary:
        if from_mode.is_text:
            return to_mode.stringify(text.encode("utf-8"))
        try:
            return to_mode.stringify(from_mode.parse(text))
        except SearchTermError:
            return ""

    if from_mode.is_binary:
        try:
            return to_mode.stringify(from_mode.parse(text))
        except SearchTermError:
            return ""

    if from_mode.is_text:
        try:
            return str(_parse_decimal(text, 8, to_mode.sign.is_signed))
        except SearchTermError:
            return ""

    try:
        value = _parse_decimal(text, 8, from_mode.sign.is_signed)
    except SearchTermError:
        return "0"
    return str(wrap_int(value, to_mode.width, to_mode.sign.is_signed))
