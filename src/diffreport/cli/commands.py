"""CLI command implementations"""

import threading
from pathlib import Path
from typing import Annotated, Optional

import typer

from diffreport.config import CONFIG_FILE, Settings, default_config_yaml, load_config
from diffreport.core.errors import FetchError
from diffreport.core.models import ReportResult, ReportStatus, RevisionPair
from diffreport.core.pipeline import run_report
from diffreport.core.sources.base import ChangeListProvider, ContentFetcher
from diffreport.core.sources.directory import DirectorySource
from diffreport.core.sources.git import GitSource
from diffreport.logs import setup_logging

PARTIAL_EXIT_CODE = 2

TopOpt      = Annotated[Optional[int],  typer.Option("--top", help="Max files per report page")]
SkipOpt     = Annotated[Optional[int],  typer.Option("--skip", help="Files to skip before the page starts")]
ContentOpt  = Annotated[Optional[bool], typer.Option("--content/--no-content", help="Include region blocks with line-numbered context")]
ContextOpt  = Annotated[Optional[int],  typer.Option("--context", help="Context lines around each changed region")]
FallbackOpt = Annotated[Optional[int],  typer.Option("--fallback-lines", help="Head/tail lines shown for unchanged files")]
WorkersOpt  = Annotated[Optional[int],  typer.Option("--workers", help="Concurrent file fetches")]
OutOpt      = Annotated[Optional[Path], typer.Option("--out", help="Write the report to this file instead of stdout")]
StrictOpt   = Annotated[bool,           typer.Option("--strict", help="Exit 2 if any file's content could not be retrieved")]
DeadlineOpt = Annotated[Optional[float], typer.Option("--deadline", help="Stop starting new fetches after this many seconds")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _report(
    source: ChangeListProvider,
    fetcher: ContentFetcher,
    revisions: RevisionPair,
    settings: Settings,
    out: Optional[Path],
    strict: bool,
    deadline: Optional[float],
    ) -> None:
    """Generate, emit, and map the report status to an exit code."""
    setup_logging(settings.log_level)
    cancel = threading.Event()
    timer = threading.Timer(deadline, cancel.set) if deadline is not None else None
    if timer:
        timer.start()
    try:
        result: ReportResult = run_report(source, fetcher, revisions, settings, cancel=cancel)
    except FetchError as e:
        _fail("Could not list changes", e)
    finally:
        if timer:
            timer.cancel()

    if result.status == ReportStatus.fatal:
        _fail("Report generation failed", Exception(result.error))

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.text, encoding="utf-8")
        typer.echo(f"Report written to {out}")
    else:
        typer.echo(result.text, nl=False)

    for note in result.notes:
        typer.echo(f"  failed: {note}", err=True)
    if strict and result.status == ReportStatus.partial:
        raise typer.Exit(PARTIAL_EXIT_CODE)


def dirs_cmd(
    before: Annotated[Path, typer.Argument(help="Directory holding the before snapshot")],
    after: Annotated[Path, typer.Argument(help="Directory holding the after snapshot")],
    top: TopOpt = None,
    skip: SkipOpt = None,
    content: ContentOpt = None,
    context: ContextOpt = None,
    fallback_lines: FallbackOpt = None,
    workers: WorkersOpt = None,
    out: OutOpt = None,
    strict: StrictOpt = False,
    deadline: DeadlineOpt = None,
    ):
    """Report changes between two directory snapshots."""
    settings = _settings(overrides={
        "top": top, "skip": skip, "include_content": content, "context_size": context,
        "fallback_line_cap": fallback_lines, "max_workers": workers,
    })
    source = DirectorySource()
    _report(source, source, RevisionPair(before=str(before), after=str(after)), settings, out, strict, deadline)


def git_cmd(
    before: Annotated[str, typer.Argument(help="Ref the change merges into, e.g. main")],
    after: Annotated[str, typer.Argument(help="Ref the change brings in, e.g. HEAD")],
    repo: Annotated[Path, typer.Option("--repo", help="Path to the git repository")] = Path("."),
    top: TopOpt = None,
    skip: SkipOpt = None,
    content: ContentOpt = None,
    context: ContextOpt = None,
    fallback_lines: FallbackOpt = None,
    workers: WorkersOpt = None,
    out: OutOpt = None,
    strict: StrictOpt = False,
    deadline: DeadlineOpt = None,
    ):
    """Report changes between two git refs."""
    settings = _settings(overrides={
        "top": top, "skip": skip, "include_content": content, "context_size": context,
        "fallback_line_cap": fallback_lines, "max_workers": workers,
    })
    source = GitSource(repo)
    _report(source, source, RevisionPair(before=before, after=after), settings, out, strict, deadline)


def init_cmd(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config file")] = False,
    ):
    """Write a diffreport.yaml with default settings to the current directory."""
    path = Path(CONFIG_FILE)
    if path.exists() and not force:
        typer.echo(f"{CONFIG_FILE} already exists; use --force to overwrite.")
        raise typer.Exit(1)
    path.write_text(default_config_yaml())
    typer.echo(f"Wrote {path}")
