"""Endianness support for hexnav: types, normalization, and integer casts."""

from __future__ import annotations

import struct
from typing import Literal

# Byte order names as accepted by int.from_bytes
Endian = Literal["little", "big"]

ENDIANS: tuple[Endian, ...] = ("little", "big")


def normalize_endian(value: str | None) -> Endian | None:
    """Lower-case a byte-order name given on the command line; None passes through.

    Raises:
        ValueError: If value is neither "little" nor "big"
    """
    if value is None:
        return None
    lowered = value.lower()
    if lowered not in ENDIANS:
        raise ValueError(f"Invalid endian '{value}'. Expected 'little' or 'big'.")
    return lowered  # type: ignore[return-value]


def flip_endian(endian: Endian) -> Endian:
    return "big" if endian == "little" else "little"


def int_range(width: int, signed: bool) -> tuple[int, int]:
    """Inclusive (min, max) of an integer of `width` bytes."""
    bits = width * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def wrap_int(value: int, width: int, signed: bool) -> int:
    """Cast `value` to `width` bytes with two's-complement wraparound.

    Matches a C-style narrowing/widening cast: the low `width * 8` bits are
    kept and reinterpreted with the target signedness.
    """
    bits = width * 8
    value &= (1 << bits) - 1
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def decode_int(data: bytes, endian: Endian, signed: bool) -> int:
    return int.from_bytes(data, byteorder=endian, signed=signed)


def encode_int(value: int, width: int, endian: Endian, signed: bool) -> bytes:
    """Encode `value` into exactly `width` bytes.

    Raises:
        OverflowError: If value does not fit the width/signedness
    """
    return value.to_bytes(width, byteorder=endian, signed=signed)


def _unpack_float(data: bytes, endian: Endian, code: str) -> float:
    return struct.unpack(("<" if endian == "little" else ">") + code, data)[0]


def decode_float32(data: bytes, endian: Endian) -> float:
    """IEEE-754 single from exactly 4 bytes."""
    return _unpack_float(data, endian, "f")


def decode_float64(data: bytes, endian: Endian) -> float:
    """IEEE-754 double from exactly 8 bytes."""
    return _unpack_float(data, endian, "d")
