"""Collaborator contracts: change enumeration and per-revision content retrieval"""

from abc import ABC, abstractmethod
from typing import Optional

from diffreport.core.models import FileChange, RevisionPair


class ChangeListProvider(ABC):
    @abstractmethod
    def list_changes(self, revisions: RevisionPair) -> Optional[list[FileChange]]:
        """Return changed files in a stable order, or None if the revision pair cannot be resolved."""
        raise NotImplementedError


class ContentFetcher(ABC):
    @abstractmethod
    def fetch(self, path: str, revision: str) -> str:
        """Return the file's text at revision.

        Raises ContentNotFoundError if the file does not exist there and
        FetchError for any other failure.
        """
        raise NotImplementedError
