"""Fixtures for logging-aware unit tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Undo handler changes made by configure_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
