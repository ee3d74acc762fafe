"""Compare fresh checksums against a stored fingerprint."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

from infohash.codec import Fingerprint, decode_fingerprint
from infohash.errors import FieldChangedError
from infohash.hamming import locate

logger = logging.getLogger(__name__)


class ChangeStatus(Enum):
    UNCHANGED = auto()
    CHANGED_AT = auto()
    CHANGED_UNKNOWN = auto()


@dataclass(frozen=True)
class Comparison:
    """Outcome of comparing a record with its stored fingerprint.

    ``CHANGED_UNKNOWN`` is a valid outcome, not an error: more than one
    field differs and the change cannot be pinned to one of them.
    """

    status: ChangeStatus
    field: str | None = None
    index: int | None = None

    @classmethod
    def unchanged(cls) -> Comparison:
        return cls(ChangeStatus.UNCHANGED)

    @classmethod
    def changed_at(cls, field: str, index: int) -> Comparison:
        return cls(ChangeStatus.CHANGED_AT, field=field, index=index)

    @classmethod
    def changed_unknown(cls) -> Comparison:
        return cls(ChangeStatus.CHANGED_UNKNOWN)

    @property
    def changed(self) -> bool:
        return self.status is not ChangeStatus.UNCHANGED

    def raise_for_change(self) -> None:
        """Raise FieldChangedError unless the record is unchanged."""
        if self.changed:
            raise FieldChangedError(self.field)


def compare(
    identifiers: Sequence[str],
    checksums: Sequence[int],
    full: int,
    stored: bytes | Fingerprint,
) -> Comparison:
    """Decide whether a record changed since ``stored`` was produced.

    ``identifiers`` and ``checksums`` must be in the same canonical order
    that was used to build ``stored``.
    """
    if len(identifiers) != len(checksums):
        raise ValueError(
            f"got {len(identifiers)} identifiers for {len(checksums)} checksums"
        )

    fingerprint = stored if isinstance(stored, Fingerprint) else decode_fingerprint(stored)

    if full == fingerprint.full:
        return Comparison.unchanged()

    index = locate(checksums, fingerprint.parity)
    if index is None:
        logger.debug(f"Change across {len(checksums)} fields is not localizable")
        return Comparison.changed_unknown()

    logger.debug(f"Change localized to field '{identifiers[index]}'")
    return Comparison.changed_at(identifiers[index], index)
