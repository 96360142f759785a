"""Typed errors raised by the diff engine and its content collaborators"""


class ContentNotFoundError(Exception):
    """The requested file does not exist at the given revision (expected for adds/deletes)."""

    def __init__(self, path: str, revision: str):
        super().__init__(f"{path} not found at {revision}")
        self.path = path
        self.revision = revision


class FetchError(Exception):
    """Content could not be retrieved for a reason other than the file being absent."""


class MalformedInputError(ValueError):
    """An index or size handed to the engine violates an upstream invariant."""
