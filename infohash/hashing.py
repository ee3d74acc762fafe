"""One-pass full-record and per-field checksums."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from blake3 import blake3

from infohash.config import FIELD_CHECKSUM_BYTES, FULL_CHECKSUM_BYTES
from infohash.errors import InvalidRecordShapeError
from infohash.schema import FieldValue, identifier_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldHashes:
    """Checksums of one record snapshot, fields in canonical order."""

    identifiers: tuple[str, ...]
    full: int
    fields: tuple[int, ...]


def _read_le(hasher: blake3, length: int) -> int:
    return int.from_bytes(hasher.digest(length=length), "little")


def hash_fields(fields: Iterable[FieldValue]) -> FieldHashes:
    """Hash serialized fields into a 64-bit full and 32-bit field checksums.

    Each field's bytes are written to the running full-record hasher and to
    a fresh per-field hasher. The full hasher is never reset, so it covers
    content and order; each field checksum covers only its own field.
    """
    ordered = sorted(fields, key=lambda value: value.identifier)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.identifier == current.identifier:
            raise InvalidRecordShapeError(
                f"the tag '{current.identifier}' is used more than once"
            )

    full = blake3()
    checksums = []
    for value in ordered:
        field_hasher = blake3()
        for chunk in (identifier_bytes(value.identifier), value.data):
            full.update(chunk)
            field_hasher.update(chunk)
        checksums.append(_read_le(field_hasher, FIELD_CHECKSUM_BYTES))

    hashes = FieldHashes(
        identifiers=tuple(value.identifier for value in ordered),
        full=_read_le(full, FULL_CHECKSUM_BYTES),
        fields=tuple(checksums),
    )
    logger.debug(f"Hashed {len(ordered)} fields (full checksum {hashes.full:016x})")
    return hashes
