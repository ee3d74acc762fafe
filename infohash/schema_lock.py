"""Schema lock files.

A fingerprint is only meaningful for the exact field list it was built
from. The lock file records the identifier list and its digest for each
named schema, so a renamed, added or removed field is caught before stored
fingerprints are compared against the wrong layout.

    schema: infohash.lock.v1
    records:
      app.models:User:
        digest: 3f0c9a1be27d5a44
        fields: [email, name]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from infohash.config import LOCK_SCHEMA
from infohash.errors import SchemaChangedError, SchemaLockError
from infohash.schema import RecordSchema

logger = logging.getLogger(__name__)


class _RawLockEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    digest: str
    fields: list[str] = Field(default_factory=list)

    @field_validator("digest")
    @classmethod
    def _validate_digest(cls, value: str) -> str:
        normalized = value.strip().lower()
        if len(normalized) != 16 or any(c not in "0123456789abcdef" for c in normalized):
            raise ValueError("must be 16 hexadecimal characters")
        return normalized


class _RawLockFile(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_name: str = Field(default=LOCK_SCHEMA, alias="schema")
    records: dict[str, _RawLockEntry] = Field(default_factory=dict)

    @field_validator("schema_name")
    @classmethod
    def _validate_schema(cls, value: str) -> str:
        normalized = value.strip()
        if normalized != LOCK_SCHEMA:
            raise ValueError(f"must equal '{LOCK_SCHEMA}'")
        return normalized


@dataclass(frozen=True)
class LockEntry:
    digest: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class SchemaLock:
    """Locked schema digests keyed by record name."""

    records: dict[str, LockEntry] = field(default_factory=dict)

    def record(self, name: str, schema: RecordSchema) -> SchemaLock:
        """Return a new lock with ``name`` pinned to ``schema``."""
        records = dict(self.records)
        records[name] = LockEntry(digest=schema.hexdigest(), fields=schema.identifiers)
        return SchemaLock(records=records)

    def check(self, name: str, schema: RecordSchema) -> None:
        """Raise SchemaChangedError if ``schema`` no longer matches its entry."""
        entry = self.records.get(name)
        if entry is None:
            raise SchemaLockError(f"No lock entry for '{name}'")

        if entry.digest == schema.hexdigest():
            return

        current = set(schema.identifiers)
        locked = set(entry.fields)
        added = tuple(sorted(current - locked))
        removed = tuple(sorted(locked - current))
        details = []
        if added:
            details.append(f"added {', '.join(added)}")
        if removed:
            details.append(f"removed {', '.join(removed)}")
        summary = "; ".join(details) or "identifier list differs"
        raise SchemaChangedError(
            f"Schema '{name}' changed since it was locked ({summary}); "
            "stored fingerprints are no longer valid",
            added=added,
            removed=removed,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": LOCK_SCHEMA,
            "records": {
                name: {"digest": entry.digest, "fields": list(entry.fields)}
                for name, entry in sorted(self.records.items())
            },
        }


def check_schema(schema: RecordSchema, expected_digest: str) -> None:
    """Raise SchemaChangedError if ``schema`` does not hash to ``expected_digest``."""
    actual = schema.hexdigest()
    if actual != expected_digest.strip().lower():
        raise SchemaChangedError(
            f"Schema digest {actual} does not match expected {expected_digest}"
        )


def load_schema_lock(path: Path) -> SchemaLock:
    """Load and validate a lock file; a missing file is an empty lock."""
    if not path.exists():
        logger.debug(f"No lock file at {path}")
        return SchemaLock()
    if not path.is_file():
        raise SchemaLockError(f"Lock path is not a file: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SchemaLockError(f"Cannot read lock file '{path}': {e}") from e
    if not isinstance(raw, dict):
        raise SchemaLockError(f"Lock file must be a YAML mapping: {path}")

    try:
        parsed = _RawLockFile.model_validate(raw)
    except ValidationError as error:
        first = error.errors()[0]
        field_path = ".".join(str(part) for part in first.get("loc", ()))
        detail = first.get("msg", "invalid value")
        if field_path:
            raise SchemaLockError(
                f"Invalid lock file '{path}' field '{field_path}': {detail}"
            ) from None
        raise SchemaLockError(f"Invalid lock file '{path}': {detail}") from None

    return SchemaLock(
        records={
            name: LockEntry(digest=entry.digest, fields=tuple(entry.fields))
            for name, entry in parsed.records.items()
        }
    )


def save_schema_lock(path: Path, lock: SchemaLock) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(lock.to_dict(), handle, sort_keys=False)
    logger.debug(f"Wrote {len(lock.records)} lock entries to {path}")
