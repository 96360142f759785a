"""Directory snapshots as revisions: each revision id is a directory path"""

from pathlib import Path
from typing import Optional

from diffreport.core.errors import ContentNotFoundError, FetchError
from diffreport.core.models import ChangeType, FileChange, RevisionPair
from diffreport.core.sources.base import ChangeListProvider, ContentFetcher
from diffreport.core.utils.hashing import file_sha256


def iter_files(root: Path) -> dict[str, Path]:
    """Map POSIX-style relative path -> absolute path for every file under root."""
    return {
        p.relative_to(root).as_posix(): p
        for p in root.rglob("*")
        if p.is_file()
    }


class DirectorySource(ChangeListProvider, ContentFetcher):
    """Compare two directory trees; a removed and an added file with equal bytes is a rename."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def list_changes(self, revisions: RevisionPair) -> Optional[list[FileChange]]:
        before_root, after_root = Path(revisions.before), Path(revisions.after)
        if not before_root.is_dir() or not after_root.is_dir():
            return None

        before, after = iter_files(before_root), iter_files(after_root)
        removed = sorted(set(before) - set(after))
        added = sorted(set(after) - set(before))

        # First removed file with identical content claims each added file.
        removed_by_hash: dict[str, list[str]] = {}
        for rel in removed:
            removed_by_hash.setdefault(file_sha256(before[rel]), []).append(rel)

        changes: dict[str, FileChange] = {}
        for rel in added:
            candidates = removed_by_hash.get(file_sha256(after[rel]))
            if candidates:
                src = candidates.pop(0)
                removed.remove(src)
                changes[rel] = FileChange(path=rel, change_type=ChangeType.rename, renamed_from=src)
            else:
                changes[rel] = FileChange(path=rel, change_type=ChangeType.add)
        for rel in removed:
            changes[rel] = FileChange(path=rel, change_type=ChangeType.delete)
        for rel in sorted(set(before) & set(after)):
            if file_sha256(before[rel]) != file_sha256(after[rel]):
                changes[rel] = FileChange(path=rel, change_type=ChangeType.edit)

        return [changes[k] for k in sorted(changes)]

    def fetch(self, path: str, revision: str) -> str:
        target = Path(revision) / path
        if not target.is_file():
            raise ContentNotFoundError(path, revision)
        try:
            return target.read_bytes().decode(self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(f"Failed to read {target}: {e}") from e
