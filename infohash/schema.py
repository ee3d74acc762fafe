"""Explicit record schemas and field extraction.

A schema is a statically declared list of ``(identifier, accessor)`` pairs.
It fixes the canonical field order (identifiers sorted) once, at definition
time, and reads records into immutable tuples of serialized field values.
"""

from __future__ import annotations

import dataclasses
import logging
import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from blake3 import blake3

from infohash.config import DEFAULT_TAG, FULL_CHECKSUM_BYTES
from infohash.errors import InvalidRecordShapeError
from infohash.serialization import canonical_bytes, length_prefixed

logger = logging.getLogger(__name__)

Accessor = Callable[[Any], Any]
Serializer = Callable[[Any], bytes]


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one hashed field."""

    identifier: str
    accessor: Accessor = field(compare=False)
    serializer: Serializer = field(default=canonical_bytes, compare=False)


@dataclass(frozen=True)
class FieldValue:
    """A field read from a record: identifier plus canonical value bytes."""

    identifier: str
    data: bytes


def attribute(identifier: str, name: str | None = None) -> FieldSpec:
    """Field read with ``getattr``; ``name`` may be a dotted path."""
    return FieldSpec(identifier, operator.attrgetter(name or identifier))


def item(identifier: str, key: Any = None) -> FieldSpec:
    """Field read with ``record[key]`` (``key`` defaults to the identifier)."""
    return FieldSpec(identifier, operator.itemgetter(identifier if key is None else key))


def identifier_bytes(identifier: str) -> bytes:
    """Length-prefixed UTF-8 form of an identifier.

    The prefix keeps identifier "AB" + value "C" apart from "A" + "BC".
    """
    return length_prefixed(identifier.encode("utf-8"))


def _validate_identifiers(identifiers: Iterable[Any]) -> None:
    seen: set[str] = set()
    for identifier in identifiers:
        if not isinstance(identifier, str) or not identifier:
            raise InvalidRecordShapeError(
                f"field identifiers must be non-empty strings, got {identifier!r}"
            )
        if identifier in seen:
            raise InvalidRecordShapeError(
                f"the tag '{identifier}' is used more than once"
            )
        seen.add(identifier)


class RecordSchema:
    """Ordered, validated set of field declarations for one record type."""

    def __init__(self, fields: Iterable[FieldSpec], name: str | None = None):
        specs = list(fields)
        _validate_identifiers(spec.identifier for spec in specs)
        self._fields: tuple[FieldSpec, ...] = tuple(
            sorted(specs, key=lambda spec: spec.identifier)
        )
        self.name = name

    @classmethod
    def from_dataclass(cls, record_type: type, tag: str = DEFAULT_TAG) -> RecordSchema:
        """Build a schema from ``field(metadata={"infohash": ...})`` tags.

        Every dataclass field must carry a non-empty, unique tag. The tag is
        the identifier; the value is read from the attribute.
        """
        if not isinstance(record_type, type) or not dataclasses.is_dataclass(
            record_type
        ):
            raise InvalidRecordShapeError(
                f"{record_type!r} is not a dataclass type"
            )

        specs: list[FieldSpec] = []
        for dc_field in dataclasses.fields(record_type):
            identifier = dc_field.metadata.get(tag, "")
            if not identifier:
                raise InvalidRecordShapeError(
                    f"the field {dc_field.name} has no tag {tag}"
                )
            specs.append(attribute(identifier, dc_field.name))

        # duplicate tags are reported by __init__
        return cls(specs, name=record_type.__qualname__)

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return self._fields

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(spec.identifier for spec in self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"RecordSchema({label}{list(self.identifiers)!r})"

    def extract(self, record: Any) -> tuple[FieldValue, ...]:
        """Read every field of ``record`` in canonical order.

        Accessor failures become InvalidRecordShapeError; serializer errors
        propagate unchanged.
        """
        values = []
        for spec in self._fields:
            try:
                raw = spec.accessor(record)
            except (AttributeError, KeyError, IndexError, TypeError) as e:
                raise InvalidRecordShapeError(
                    f"cannot read field '{spec.identifier}' from "
                    f"{type(record).__name__}: {e}"
                ) from e
            values.append(FieldValue(spec.identifier, spec.serializer(raw)))
        return tuple(values)

    def digest(self) -> int:
        """64-bit identity of the canonical identifier list."""
        hasher = blake3()
        for identifier in self.identifiers:
            hasher.update(identifier_bytes(identifier))
        return int.from_bytes(hasher.digest(length=FULL_CHECKSUM_BYTES), "little")

    def hexdigest(self) -> str:
        return f"{self.digest():016x}"
