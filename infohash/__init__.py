"""Compact record fingerprints that localize single-field changes."""

from infohash.codec import Fingerprint, decode_fingerprint, encode_fingerprint
from infohash.compare import ChangeStatus, Comparison, compare
from infohash.errors import (
    FieldChangedError,
    InfohashError,
    InvalidRecordShapeError,
    MalformedFingerprintError,
    SchemaChangedError,
    SchemaLockError,
    UnsupportedValueError,
)
from infohash.hamming import encode_parity, locate, parity_count
from infohash.hashing import FieldHashes, hash_fields
from infohash.infohash import Infohash, compare_record, hash_record
from infohash.schema import FieldSpec, FieldValue, RecordSchema, attribute, item
from infohash.schema_lock import SchemaLock, check_schema, load_schema_lock, save_schema_lock
from infohash.serialization import canonical_bytes

__all__ = [
    "ChangeStatus",
    "Comparison",
    "FieldChangedError",
    "FieldHashes",
    "FieldSpec",
    "FieldValue",
    "Fingerprint",
    "Infohash",
    "InfohashError",
    "InvalidRecordShapeError",
    "MalformedFingerprintError",
    "RecordSchema",
    "SchemaChangedError",
    "SchemaLock",
    "SchemaLockError",
    "UnsupportedValueError",
    "attribute",
    "canonical_bytes",
    "check_schema",
    "compare",
    "compare_record",
    "decode_fingerprint",
    "encode_fingerprint",
    "encode_parity",
    "hash_fields",
    "hash_record",
    "item",
    "load_schema_lock",
    "locate",
    "parity_count",
    "save_schema_lock",
]
