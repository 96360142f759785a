"""Root test configuration: isolate each test from env config and logging handlers"""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop DIFFREPORT_* env vars so settings come only from what a test sets."""
    for name in list(os.environ):
        if name.startswith("DIFFREPORT_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI runs replace root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
