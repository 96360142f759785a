"""Pipeline step functions: paginate, fetch, classify, window, and render a diff report"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from diffreport.config import Settings
from diffreport.core.diff.lines import split_lines
from diffreport.core.diff.regions import classify, is_unchanged
from diffreport.core.diff.window import head_tail, window
from diffreport.core.errors import ContentNotFoundError, FetchError, MalformedInputError
from diffreport.core.models import (
    ChangedFile, ChangeType, FileChange, Hunk, LineSequence,
    RegionKind, ReportResult, ReportStatus, RevisionPair,
)
from diffreport.core.render import render, render_no_revisions
from diffreport.core.sources.base import ChangeListProvider, ContentFetcher
from diffreport.logs import current_path


logger = logging.getLogger(__name__)


def paginate(changes: list[FileChange], skip: int, top: int) -> list[FileChange]:
    """Return the page changes[skip:skip+top]. Raises MalformedInputError on negative bounds."""
    if skip < 0 or top < 0:
        raise MalformedInputError(f"skip and top must be >= 0, got skip={skip} top={top}")
    return changes[skip:skip + top]


def _load_axis(fetcher: ContentFetcher, path: str, revision: str) -> LineSequence:
    """Fetch and split one side; a file absent at revision is an empty axis."""
    try:
        return split_lines(fetcher.fetch(path, revision))
    except ContentNotFoundError:
        logger.debug("%s not present at %s", path, revision)
        return LineSequence.empty()


def diff_file(
    change: FileChange,
    before: LineSequence,
    after: LineSequence,
    context_size: int = 5,
    fallback_line_cap: int = 50,
    ) -> ChangedFile:
    """Classify before/after and window every changed region on both axes.

    A file with no differences gets head/tail views of each side instead of hunks.
    """
    regions = classify(before, after)
    common = {
        "path": change.path,
        "change_type": change.change_type,
        "renamed_from": change.renamed_from,
        "regions": tuple(regions),
        "before_lines": len(before),
        "after_lines": len(after),
        "content": True,
    }
    if not regions or is_unchanged(regions, before, after):
        return ChangedFile(
            **common,
            before_window=head_tail(before, fallback_line_cap),
            after_window=head_tail(after, fallback_line_cap),
        )

    hunks = tuple(
        Hunk(
            region=r,
            before=window(before, r.before_start, r.before_end, context_size),
            after=window(after, r.after_start, r.after_end, context_size),
        )
        for r in regions
        if r.kind != RegionKind.unchanged
    )
    return ChangedFile(**common, hunks=hunks)


def _failed(change: FileChange, message: str) -> ChangedFile:
    return ChangedFile(
        path=change.path, change_type=change.change_type,
        renamed_from=change.renamed_from, content=True, error=message,
    )


def build_file(
    change: FileChange,
    fetcher: ContentFetcher,
    revisions: RevisionPair,
    context_size: int = 5,
    fallback_line_cap: int = 50,
    ) -> ChangedFile:
    """Fetch both sides of one change and diff them; fetch failures become an inline error."""
    before = after = LineSequence.empty()
    try:
        if change.change_type != ChangeType.add:
            before = _load_axis(fetcher, change.renamed_from or change.path, revisions.before)
        if change.change_type != ChangeType.delete:
            after = _load_axis(fetcher, change.path, revisions.after)
    except FetchError as e:
        logger.warning("Could not retrieve content: %s", e)
        return _failed(change, str(e))
    except MalformedInputError:
        raise
    except Exception as e:
        logger.exception("Unexpected error retrieving content")
        return _failed(change, f"{type(e).__name__}: {e}")
    return diff_file(change, before, after, context_size, fallback_line_cap)


def _build_all(
    page: list[FileChange],
    fetcher: ContentFetcher,
    revisions: RevisionPair,
    context_size: int,
    fallback_line_cap: int,
    max_workers: int,
    cancel: Optional[threading.Event],
    ) -> list[Optional[ChangedFile]]:
    """Build files on a bounded pool; slot i always holds page[i] so input order survives."""
    slots: list[Optional[ChangedFile]] = [None] * len(page)

    def _work(i: int, change: FileChange) -> None:
        if cancel is not None and cancel.is_set():
            return
        token = current_path.set(change.path)
        try:
            slots[i] = build_file(change, fetcher, revisions, context_size, fallback_line_cap)
        finally:
            current_path.reset(token)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(_work, i, c) for i, c in enumerate(page)]
        for fut in futures:
            fut.result()
    return slots


def generate_report(
    changes: Optional[list[FileChange]],
    fetcher: ContentFetcher,
    revisions: RevisionPair,
    *,
    skip: int = 0,
    top: int = 100,
    include_content: bool = False,
    context_size: int = 5,
    fallback_line_cap: int = 50,
    max_workers: int = 4,
    cancel: Optional[threading.Event] = None,
    title: str = "File Diffs",
    ) -> ReportResult:
    """Render one report for a page of changes.

    changes=None means the revision pair could not be resolved; that and an
    empty list both produce an ok result. Pagination is applied before any
    fetch. Setting cancel stops new fetches; files already built are kept
    and a truncation note is appended. MalformedInputError yields a fatal result.
    """
    if changes is None:
        return ReportResult(status=ReportStatus.ok, text=render_no_revisions(title))

    try:
        page = paginate(changes, skip, top)
        logger.info("Reporting %d of %d changed files (skip=%d, top=%d)", len(page), len(changes), skip, top)

        if not include_content:
            files = [ChangedFile.header_only(c) for c in page]
            return ReportResult(status=ReportStatus.ok, text=render(files, title))

        slots = _build_all(page, fetcher, revisions, context_size, fallback_line_cap, max_workers, cancel)
    except MalformedInputError as e:
        logger.error("Report generation failed: %s", e)
        return ReportResult(
            status=ReportStatus.fatal,
            text=f"# {title}\n\n*Report generation failed: {e}*\n",
            error=str(e),
        )

    files = [f for f in slots if f is not None]
    truncated = len(files) < len(page)
    note = None
    if truncated:
        note = f"Report truncated: cancelled after {len(files)} of {len(page)} files."
        logger.warning(note)

    notes = [f"{f.path}: {f.error}" for f in files if f.error is not None]
    return ReportResult(
        status=ReportStatus.partial if notes else ReportStatus.ok,
        text=render(files, title, truncation_note=note),
        notes=notes,
        truncated=truncated,
    )


def run_report(
    provider: ChangeListProvider,
    fetcher: ContentFetcher,
    revisions: RevisionPair,
    settings: Settings,
    cancel: Optional[threading.Event] = None,
    ) -> ReportResult:
    """List changes for revisions and generate a report using the configured knobs."""
    changes = provider.list_changes(revisions)
    return generate_report(
        changes, fetcher, revisions,
        skip=settings.skip,
        top=settings.top,
        include_content=settings.include_content,
        context_size=settings.context_size,
        fallback_line_cap=settings.fallback_line_cap,
        max_workers=settings.max_workers,
        cancel=cancel,
        title=settings.title,
    )
