"""Fixed constants for infohash.

Nothing here is meant to be tuned at runtime: changing any width or the
serialization version invalidates every stored fingerprint.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

FULL_CHECKSUM_BYTES = 8
FIELD_CHECKSUM_BYTES = 4
LENGTH_PREFIX_BYTES = 4

FULL_CHECKSUM_MASK = (1 << (8 * FULL_CHECKSUM_BYTES)) - 1
FIELD_CHECKSUM_MASK = (1 << (8 * FIELD_CHECKSUM_BYTES)) - 1

SERIALIZATION_VERSION = 1

DEFAULT_TAG = "infohash"

LOCK_FILE = "infohash.lock.yaml"
LOCK_SCHEMA = "infohash.lock.v1"
LOCK_FILE_ENV = "INFOHASH_LOCK_FILE"


def get_lock_path() -> Path:
    """Get the schema lock file path.

    ``INFOHASH_LOCK_FILE`` overrides the default ``./infohash.lock.yaml``.
    """
    override = os.environ.get(LOCK_FILE_ENV, "").strip()
    if override:
        logger.debug(f"Using lock file from {LOCK_FILE_ENV}: {override}")
        return Path(override)
    return Path.cwd() / LOCK_FILE
