"""Domain exceptions for infohash."""

from __future__ import annotations


class InfohashError(Exception):
    """Base exception for all infohash failures."""


class InvalidRecordShapeError(InfohashError, ValueError):
    """Record or schema violates the field extraction contract."""


class UnsupportedValueError(InfohashError, TypeError):
    """Value has no canonical byte encoding."""


class MalformedFingerprintError(InfohashError, ValueError):
    """Stored fingerprint cannot be decoded or does not fit the schema."""


class SchemaChangedError(InfohashError):
    """Record schema no longer matches its locked digest."""

    def __init__(
        self,
        message: str,
        *,
        added: tuple[str, ...] = (),
        removed: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.added = added
        self.removed = removed


class SchemaLockError(InfohashError):
    """Schema lock file is missing, unreadable or invalid."""


class FieldChangedError(InfohashError):
    """A record's field values differ from its stored fingerprint.

    ``field`` names the changed field, or is ``None`` when more than one
    field changed and the change could not be localized.
    """

    def __init__(self, field: str | None = None):
        self.field = field
        if field is None:
            message = "a field value changed"
        else:
            message = f"the field '{field}''s value changed"
        super().__init__(message)
