"""Record-level encode and compare.

``Infohash`` binds a ``RecordSchema`` and runs the whole pipeline:
extract fields, hash them, build the parity code and pack the fingerprint;
or, on compare, rehash and check against a stored fingerprint.
"""

from __future__ import annotations

import logging
from typing import Any

from infohash.codec import Fingerprint, encode_fingerprint
from infohash.compare import Comparison, compare
from infohash.hamming import encode_parity
from infohash.hashing import FieldHashes, hash_fields
from infohash.schema import RecordSchema

logger = logging.getLogger(__name__)


class Infohash:
    """Fingerprints records of one schema and localizes single-field changes."""

    def __init__(self, schema: RecordSchema):
        self.schema = schema

    @classmethod
    def for_dataclass(cls, record_type: type) -> Infohash:
        return cls(RecordSchema.from_dataclass(record_type))

    @property
    def schema_digest(self) -> str:
        return self.schema.hexdigest()

    def _hash(self, record: Any) -> FieldHashes:
        return hash_fields(self.schema.extract(record))

    def fingerprint(self, record: Any) -> Fingerprint:
        hashes = self._hash(record)
        return Fingerprint(full=hashes.full, parity=tuple(encode_parity(hashes.fields)))

    def encode(self, record: Any) -> bytes:
        """Fingerprint bytes for the current state of ``record``."""
        hashes = self._hash(record)
        encoded = encode_fingerprint(hashes.full, encode_parity(hashes.fields))
        logger.debug(
            f"Encoded {len(hashes.fields)} fields into {len(encoded)} fingerprint bytes"
        )
        return encoded

    def compare(self, record: Any, stored: bytes | Fingerprint) -> Comparison:
        """Compare ``record`` with a fingerprint produced by ``encode``."""
        hashes = self._hash(record)
        return compare(hashes.identifiers, hashes.fields, hashes.full, stored)

    def verify(self, record: Any, stored: bytes | Fingerprint) -> None:
        """Raise FieldChangedError if ``record`` differs from ``stored``.

        The error names the changed field, or carries ``None`` when more
        than one field changed.
        """
        self.compare(record, stored).raise_for_change()


def hash_record(schema: RecordSchema, record: Any) -> bytes:
    return Infohash(schema).encode(record)


def compare_record(
    schema: RecordSchema, record: Any, stored: bytes | Fingerprint
) -> Comparison:
    return Infohash(schema).compare(record, stored)
