"""Logging setup for the infohash command line."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path


class _LevelFormatter(logging.Formatter):
    """Plain messages for INFO, level-prefixed messages otherwise."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname}: {message}"


def configure_logging(
    stream_level: int = logging.INFO,
    ignore_libs: list[str] | None = None,
) -> None:
    """Attach a single stderr handler to the root logger.

    Loggers named in ``ignore_libs`` are raised to WARNING so their debug
    output does not drown ours.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(stream_level)
    handler.setFormatter(_LevelFormatter())
    root.addHandler(handler)
    root.setLevel(stream_level)

    for name in ignore_libs or []:
        logging.getLogger(name).setLevel(logging.WARNING)


def clickable_path(path: Path) -> str:
    """Render a path as an OSC-8 terminal hyperlink.

    Falls back to plain text when ``NO_COLOR`` is set.
    """
    resolved = Path(path).resolve()
    label = f"FILE {resolved}"
    if os.environ.get("NO_COLOR"):
        return label
    return f"\033]8;;{resolved.as_uri()}\033\\{label}\033]8;;\033\\"
