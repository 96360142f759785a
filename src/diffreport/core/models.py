"""Data models shared by the splitter, classifier, windower, renderer, and pipeline"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class RegionKind(str, Enum):
    unchanged = "unchanged"
    added     = "added"
    removed   = "removed"


class ChangeType(str, Enum):
    add    = "add"
    edit   = "edit"
    delete = "delete"
    rename = "rename"


class ReportStatus(str, Enum):
    ok      = "ok"
    partial = "partial"     # at least one file degraded to an inline error note
    fatal   = "fatal"


class LineSequence(BaseModel):
    """Ordered, 0-indexed lines of one snapshot. Zero lines means no content on that axis."""
    model_config = ConfigDict(frozen=True)

    lines:      tuple[str, ...] = ()
    terminated: bool = False    # text ended with a line feed

    @classmethod
    def empty(cls) -> "LineSequence":
        return cls(lines=())

    def __len__(self) -> int:
        return len(self.lines)


class Region(BaseModel):
    """A maximal span expressed in both coordinate spaces; all ranges are half-open."""
    model_config = ConfigDict(frozen=True)

    kind:         RegionKind
    before_start: int
    before_end:   int
    after_start:  int
    after_end:    int

    @model_validator(mode="after")
    def _check_spans(self) -> "Region":
        if min(self.before_start, self.after_start) < 0:
            raise ValueError("region offsets must be non-negative")
        if self.before_end < self.before_start or self.after_end < self.after_start:
            raise ValueError("region end precedes start")
        if self.kind == RegionKind.unchanged and self.before_len != self.after_len:
            raise ValueError("unchanged region spans must have equal length")
        if self.kind == RegionKind.added and self.before_len:
            raise ValueError("added region must have an empty before span")
        if self.kind == RegionKind.removed and self.after_len:
            raise ValueError("removed region must have an empty after span")
        return self

    @property
    def before_len(self) -> int:
        return self.before_end - self.before_start

    @property
    def after_len(self) -> int:
        return self.after_end - self.after_start


class NumberedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int     # 1-based display number
    text:   str


class ContextWindow(BaseModel):
    """Context-before, changed span, and context-after slices for one axis."""
    model_config = ConfigDict(frozen=True)

    before:  tuple[NumberedLine, ...] = ()
    changed: tuple[NumberedLine, ...] = ()
    after:   tuple[NumberedLine, ...] = ()
    no_newline_at_end: bool = False   # window reaches the last line of unterminated text

    @property
    def is_empty(self) -> bool:
        return not (self.before or self.changed or self.after)


class FileChange(BaseModel):
    """Changed-file descriptor as enumerated by a ChangeListProvider."""
    model_config = ConfigDict(frozen=True)

    path:         str
    change_type:  ChangeType
    renamed_from: Optional[str] = None


class RevisionPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    before: str     # revision the change merges into
    after:  str     # revision the change brings in


class Hunk(BaseModel):
    """One non-unchanged region with its windows on both axes."""
    model_config = ConfigDict(frozen=True)

    region: Region
    before: ContextWindow
    after:  ContextWindow


class ChangedFile(BaseModel):
    """Everything the renderer needs for one file; built once per report."""
    model_config = ConfigDict(frozen=True)

    path:          str
    change_type:   ChangeType
    renamed_from:  Optional[str] = None
    regions:       tuple[Region, ...] = ()
    hunks:         tuple[Hunk, ...] = ()
    before_window: Optional[ContextWindow] = None   # unchanged-file fallback view
    after_window:  Optional[ContextWindow] = None
    before_lines:  int = 0
    after_lines:   int = 0
    error:         Optional[str] = None             # inline fetch-failure note
    content:       bool = False                     # False renders the header only

    @classmethod
    def header_only(cls, change: FileChange) -> "ChangedFile":
        return cls(path=change.path, change_type=change.change_type, renamed_from=change.renamed_from)


class ReportResult(BaseModel):
    """Outcome of one report generation: Ok, PartialFailure, or Fatal."""
    status:    ReportStatus
    text:      str = ""
    notes:     list[str] = []
    error:     Optional[str] = None
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.status == ReportStatus.ok
