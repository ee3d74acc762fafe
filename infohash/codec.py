"""Fingerprint byte layout: full checksum then parity words, little-endian."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from dataclasses import dataclass

from infohash.config import (
    FIELD_CHECKSUM_BYTES,
    FIELD_CHECKSUM_MASK,
    FULL_CHECKSUM_BYTES,
    FULL_CHECKSUM_MASK,
)
from infohash.errors import MalformedFingerprintError


@dataclass(frozen=True)
class Fingerprint:
    """Decoded fingerprint of one record snapshot."""

    full: int
    parity: tuple[int, ...]

    @property
    def field_capacity(self) -> int:
        """Largest field count the parity words can address."""
        return (1 << len(self.parity)) - 1

    def to_bytes(self) -> bytes:
        return encode_fingerprint(self.full, self.parity)

    def hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_bytes(cls, data: bytes) -> Fingerprint:
        return decode_fingerprint(data)

    @classmethod
    def from_hex(cls, text: str) -> Fingerprint:
        try:
            data = bytes.fromhex(text.strip())
        except ValueError as e:
            raise MalformedFingerprintError(f"invalid fingerprint hex: {e}") from e
        return decode_fingerprint(data)


def fingerprint_length(parity_words: int) -> int:
    return FULL_CHECKSUM_BYTES + FIELD_CHECKSUM_BYTES * parity_words


def encode_fingerprint(full: int, parity: Sequence[int]) -> bytes:
    """Pack a full checksum and parity words into fingerprint bytes."""
    if not 0 <= full <= FULL_CHECKSUM_MASK:
        raise ValueError(f"full checksum out of range: {full}")
    for word in parity:
        if not 0 <= word <= FIELD_CHECKSUM_MASK:
            raise ValueError(f"parity word out of range: {word}")
    return struct.pack(f"<Q{len(parity)}I", full, *parity)


def decode_fingerprint(data: bytes) -> Fingerprint:
    """Unpack fingerprint bytes.

    Raises MalformedFingerprintError unless ``len(data) == 8 + 4k``.
    """
    data = bytes(data)
    size = len(data)
    if size < FULL_CHECKSUM_BYTES or (size - FULL_CHECKSUM_BYTES) % FIELD_CHECKSUM_BYTES:
        raise MalformedFingerprintError(
            f"fingerprint must be {FULL_CHECKSUM_BYTES} + "
            f"{FIELD_CHECKSUM_BYTES}k bytes long, got {size}"
        )
    words = (size - FULL_CHECKSUM_BYTES) // FIELD_CHECKSUM_BYTES
    full, *parity = struct.unpack(f"<Q{words}I", data)
    return Fingerprint(full=full, parity=tuple(parity))
