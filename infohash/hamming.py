"""Hamming-style parity over per-field checksums.

Field positions are 1-based. Parity word ``k`` is the XOR of every field
checksum whose position has bit ``k`` set, so ``ceil(log2(n + 1))`` words
address any single field and still leave the all-zero "no change" syndrome.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from infohash.errors import MalformedFingerprintError

logger = logging.getLogger(__name__)


def parity_count(field_count: int) -> int:
    """Number of parity words for ``field_count`` fields (``ceil(log2(n+1))``)."""
    if field_count < 0:
        raise ValueError(f"field count must not be negative, got {field_count}")
    return field_count.bit_length()


def encode_parity(checksums: Sequence[int]) -> list[int]:
    """Parity words for checksums in canonical order."""
    parity = [0] * parity_count(len(checksums))
    for position, checksum in enumerate(checksums, start=1):
        for bit in range(len(parity)):
            if position & (1 << bit):
                parity[bit] ^= checksum
    return parity


def syndrome(checksums: Sequence[int], stored_parity: Sequence[int]) -> list[int]:
    """Per-word XOR of recomputed and stored parity.

    Raises MalformedFingerprintError when the stored parity was built for a
    different number of fields.
    """
    expected = encode_parity(checksums)
    if len(stored_parity) != len(expected):
        raise MalformedFingerprintError(
            f"fingerprint carries {len(stored_parity)} parity words, "
            f"expected {len(expected)} for {len(checksums)} fields"
        )
    return [new ^ old for new, old in zip(expected, stored_parity)]


def locate(checksums: Sequence[int], stored_parity: Sequence[int]) -> int | None:
    """0-based index of the single changed field, or None.

    None means nothing changed in the parity, or the syndrome does not
    describe exactly one changed field.
    """
    words = syndrome(checksums, stored_parity)

    location = 0
    for bit, word in enumerate(words):
        if word:
            location |= 1 << bit

    if location == 0 or location > len(checksums):
        logger.debug(f"Syndrome {location} does not address a field")
        return None

    # One changed field shifts every parity word it belongs to by the same delta.
    deltas = {word for word in words if word}
    if len(deltas) != 1:
        logger.debug(f"Syndrome {location} is inconsistent across parity words")
        return None

    return location - 1
