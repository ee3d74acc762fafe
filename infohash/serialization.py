"""Canonical byte encoding of field values.

Every value is written as a one-byte ASCII tag followed by its payload.
Lengths and counts are 4-byte little-endian unsigned integers, so the
encoding is self-delimiting and two different values never share bytes:

    N            None
    T / F        True / False
    I <len> dec  int, ASCII decimal
    D <8>        float, IEEE-754 big-endian, NaNs collapsed to one pattern,
                 -0.0 written as 0.0
    S <len> utf8 str
    B <len> raw  bytes, bytearray, memoryview
    L <n> ...    list, tuple
    E <n> ...    set, frozenset, items sorted by their encoding
    M <n> ...    mapping, pairs sorted by the encoding of the key
    V ...        Enum, encoded value
    d <len> str  Decimal, trailing zeros stripped: 1.10 as 1.1, -0 as 0,
                 any NaN as NaN
    t <len> iso  datetime, date, time
    R S M        dataclass or pydantic model: class name then fields
    X <len> raw  object providing ``__infohash__() -> bytes``

The format is fixed. Changing it changes every stored fingerprint, so bump
``SERIALIZATION_VERSION`` alongside any edit here.
"""

from __future__ import annotations

import dataclasses
import math
import struct
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import MAX_EMAX, MIN_EMIN, Context, Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from infohash.config import LENGTH_PREFIX_BYTES
from infohash.errors import UnsupportedValueError

_CANONICAL_NAN = b"\x7f\xf8\x00\x00\x00\x00\x00\x00"
_MAX_LENGTH = (1 << (8 * LENGTH_PREFIX_BYTES)) - 1


def _length(size: int) -> bytes:
    if size > _MAX_LENGTH:
        raise UnsupportedValueError(f"value too large to encode ({size} units)")
    return size.to_bytes(LENGTH_PREFIX_BYTES, "little")


def length_prefixed(data: bytes) -> bytes:
    """Prefix raw bytes with their 4-byte little-endian length."""
    return _length(len(data)) + data


def _encode_float(value: float) -> bytes:
    if math.isnan(value):
        return b"D" + _CANONICAL_NAN
    # -0.0 + 0.0 is 0.0
    return b"D" + struct.pack(">d", value + 0.0)


def _decimal_text(value: Decimal) -> str:
    if value.is_nan():
        return "NaN"
    if value.is_zero():
        return "0"
    if value.is_infinite():
        return str(value)
    # enough precision that normalize() only strips trailing zeros
    digits = len(value.as_tuple().digits)
    context = Context(prec=digits, Emax=MAX_EMAX, Emin=MIN_EMIN)
    return str(value.normalize(context))


def _encode_items(tag: bytes, items: list[bytes]) -> bytes:
    return tag + _length(len(items)) + b"".join(items)


def _encode_mapping(value: Mapping) -> bytes:
    pairs = sorted(
        (canonical_bytes(key), canonical_bytes(item)) for key, item in value.items()
    )
    return _encode_items(b"M", [key + item for key, item in pairs])


def _encode_record(name: str, values: Mapping) -> bytes:
    return b"R" + canonical_bytes(name) + _encode_mapping(values)


def canonical_bytes(value: Any) -> bytes:
    """Encode ``value`` into its canonical, deterministic byte form.

    Raises UnsupportedValueError for types without a pinned encoding.
    """
    # bool before int: bool is an int subclass
    if value is None:
        return b"N"
    if value is True:
        return b"T"
    if value is False:
        return b"F"

    custom = getattr(type(value), "__infohash__", None)
    if custom is not None:
        data = custom(value)
        if not isinstance(data, (bytes, bytearray)):
            raise UnsupportedValueError(
                f"{type(value).__name__}.__infohash__ must return bytes, "
                f"got {type(data).__name__}"
            )
        return b"X" + length_prefixed(bytes(data))

    if isinstance(value, Enum):
        return b"V" + canonical_bytes(value.value)
    if isinstance(value, int):
        return b"I" + length_prefixed(str(value).encode("ascii"))
    if isinstance(value, float):
        return _encode_float(value)
    if isinstance(value, str):
        return b"S" + length_prefixed(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return b"B" + length_prefixed(bytes(value))
    if isinstance(value, Decimal):
        return b"d" + length_prefixed(_decimal_text(value).encode("ascii"))
    if isinstance(value, (datetime, date, time)):
        return b"t" + length_prefixed(value.isoformat().encode("ascii"))
    if isinstance(value, (list, tuple)):
        return _encode_items(b"L", [canonical_bytes(item) for item in value])
    if isinstance(value, (set, frozenset)):
        return _encode_items(b"E", sorted(canonical_bytes(item) for item in value))
    if isinstance(value, Mapping):
        return _encode_mapping(value)
    if isinstance(value, BaseModel):
        return _encode_record(type(value).__name__, value.model_dump())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _encode_record(
            type(value).__name__,
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)},
        )

    raise UnsupportedValueError(
        f"no canonical encoding for values of type {type(value).__name__}"
    )
