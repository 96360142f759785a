"""Shared fixtures for core unit tests"""

import threading
import time

import pytest

from diffreport.core.errors import ContentNotFoundError
from diffreport.core.models import RevisionPair
from diffreport.core.sources.base import ContentFetcher


class FakeFetcher(ContentFetcher):
    """In-memory ContentFetcher keyed by (path, revision).

    Values may be text or an exception instance to raise. Missing keys raise
    ContentNotFoundError. Every call is recorded; delays maps path -> seconds.
    """

    def __init__(self, contents: dict = None, delays: dict = None, on_fetch=None):
        self.contents = contents or {}
        self.delays = delays or {}
        self.on_fetch = on_fetch
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def fetch(self, path: str, revision: str) -> str:
        with self._lock:
            self.calls.append((path, revision))
        if self.on_fetch:
            self.on_fetch(path, revision)
        if path in self.delays:
            time.sleep(self.delays[path])
        value = self.contents.get((path, revision))
        if value is None:
            raise ContentNotFoundError(path, revision)
        if isinstance(value, Exception):
            raise value
        return value

    @property
    def paths(self) -> set[str]:
        return {p for p, _ in self.calls}


@pytest.fixture(name="revisions")
def revisions_fixture():
    return RevisionPair(before="base", after="head")


@pytest.fixture(name="fetcher_factory")
def fetcher_factory_fixture():
    return FakeFetcher
