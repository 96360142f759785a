"""Logging setup with the path of the file being diffed injected into each record"""

import logging
from contextvars import ContextVar
from typing import Optional

# Worker threads set this around each file so their records are tagged.
current_path: ContextVar[Optional[str]] = ContextVar("current_path", default=None)


class ContextFilter(logging.Filter):
    """Prefixes log records with the current file path if one is set."""

    def filter(self, record):
        path = current_path.get()
        if path:
            record.msg = f"[{path}] {record.msg}"
        return True


def setup_logging(level: str = "WARNING") -> None:
    """Call this once at CLI startup."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())
