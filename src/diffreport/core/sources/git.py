"""Git refs as revisions: changes from `git diff --name-status`, content from the object store"""

import subprocess
from pathlib import Path
from typing import Optional

from diffreport.core.errors import ContentNotFoundError, FetchError
from diffreport.core.models import ChangeType, FileChange, RevisionPair
from diffreport.core.sources.base import ChangeListProvider, ContentFetcher


STATUS_MAP: dict[str, ChangeType] = {
    "A": ChangeType.add,
    "C": ChangeType.add,
    "D": ChangeType.delete,
    "M": ChangeType.edit,
    "T": ChangeType.edit,
    "R": ChangeType.rename,
}


def parse_name_status(output: str) -> list[FileChange]:
    """Parse NUL-separated `git diff --name-status -z` output into FileChanges.

    Rename and copy entries carry two paths (source, destination); every other
    status carries one.
    """
    fields = output.split("\0")
    changes: list[FileChange] = []
    i = 0
    while i < len(fields) and fields[i]:
        status = fields[i][0]
        if status in ("R", "C"):
            src, dst = fields[i + 1], fields[i + 2]
            renamed_from = src if status == "R" else None
            changes.append(FileChange(path=dst, change_type=STATUS_MAP[status], renamed_from=renamed_from))
            i += 3
        else:
            change_type = STATUS_MAP.get(status, ChangeType.edit)
            changes.append(FileChange(path=fields[i + 1], change_type=change_type))
            i += 2
    return changes


class GitSource(ChangeListProvider, ContentFetcher):
    """Read changes and file content from a local git repository."""

    def __init__(self, repo: Path, timeout: float = 30.0, encoding: str = "utf-8"):
        self.repo = Path(repo)
        self.timeout = timeout
        self.encoding = encoding

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", "-C", str(self.repo), *args],
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FetchError(f"git {args[0]} timed out after {self.timeout}s") from e
        except OSError as e:
            raise FetchError(f"Could not run git: {e}") from e

    def _resolves(self, rev: str) -> bool:
        return self._git("rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}").returncode == 0

    def list_changes(self, revisions: RevisionPair) -> Optional[list[FileChange]]:
        if not (self._resolves(revisions.before) and self._resolves(revisions.after)):
            return None
        result = self._git("diff", "--name-status", "-M", "-z", revisions.before, revisions.after)
        if result.returncode != 0:
            raise FetchError(result.stderr.decode(self.encoding, "replace").strip())
        try:
            return parse_name_status(result.stdout.decode(self.encoding))
        except UnicodeDecodeError as e:
            raise FetchError(f"changed paths are not {self.encoding}: {e}") from e

    def _blob_id(self, path: str, revision: str) -> str:
        """Object id of path at revision; a path absent or not a file there is not found."""
        result = self._git("ls-tree", "-z", revision, "--", path)
        if result.returncode != 0:
            raise FetchError(result.stderr.decode(self.encoding, "replace").strip() or f"cannot list {revision}")
        entry = result.stdout.split(b"\0", 1)[0]
        if not entry:
            raise ContentNotFoundError(path, revision)
        _mode, kind, oid = entry.split(b"\t", 1)[0].split(b" ")
        if kind != b"blob":
            raise ContentNotFoundError(path, revision)
        return oid.decode("ascii")

    def fetch(self, path: str, revision: str) -> str:
        result = self._git("cat-file", "blob", self._blob_id(path, revision))
        if result.returncode != 0:
            raise FetchError(result.stderr.decode(self.encoding, "replace").strip() or f"cannot read {revision}:{path}")
        try:
            return result.stdout.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise FetchError(f"{path} at {revision} is not {self.encoding} text: {e}") from e
