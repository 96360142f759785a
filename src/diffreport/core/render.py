"""Markdown report rendering: file headers, region blocks, and line-numbered context"""

from typing import Optional

from diffreport.core.models import ChangedFile, ContextWindow, Hunk, NumberedLine
from diffreport.core.utils.diff import diff_summary


LINE_NUMBER_WIDTH = 4
FENCE_OPEN = "```diff\n"
FENCE_CLOSE = "```\n"
SEPARATOR = "\n---\n"
NO_NEWLINE_MARKER = "\\ No newline at end of file"


def format_line(line: NumberedLine) -> str:
    return f"{line.number:>{LINE_NUMBER_WIDTH}}: {line.text}"


def _fenced(lines: list[str]) -> str:
    return FENCE_OPEN + "".join(f"{ln}\n" for ln in lines) + FENCE_CLOSE


def render_window(w: ContextWindow) -> str:
    """Fenced block of context-before, changed, and context-after lines."""
    lines = [format_line(ln) for ln in (*w.before, *w.changed, *w.after)]
    if w.no_newline_at_end:
        lines.append(NO_NEWLINE_MARKER)
    return _fenced(lines)


def render_hunk(h: Hunk) -> str:
    r = h.region
    out = (
        f"### Diff Region ({r.kind.value}) - Lines "
        f"{r.before_start + 1}-{r.before_end} → {r.after_start + 1}-{r.after_end}\n\n"
    )
    if not h.before.is_empty:
        out += "**Before:**\n\n" + render_window(h.before)
    if not h.after.is_empty:
        out += "\n**After:**\n\n" + render_window(h.after)
    return out


def _render_head_tail(label: str, w: ContextWindow, total: int) -> str:
    """Head/tail view used for files whose content did not change."""
    if w.after:
        heading = f"### {label} (first {len(w.before)} and last {len(w.after)} of {total} lines)\n\n"
        body = [format_line(ln) for ln in w.before] + ["..."] + [format_line(ln) for ln in w.after]
    else:
        heading = f"### {label} (first {len(w.before)} lines)\n\n"
        body = [format_line(ln) for ln in w.before]
    if w.no_newline_at_end:
        body.append(NO_NEWLINE_MARKER)
    return heading + _fenced(body)


def render_header(f: ChangedFile) -> str:
    out = f"## {f.path}\n"
    out += f"- **Change Type:** {f.change_type.value}\n"
    if f.renamed_from and f.renamed_from != f.path:
        out += f"- **Renamed from:** {f.renamed_from}\n"
    if f.content and f.error is None and f.regions:
        counts = diff_summary(list(f.regions))
        out += f"- **Lines:** +{counts['added']} -{counts['removed']} ={counts['unchanged']}\n"
    return out + "\n"


def render_file(f: ChangedFile) -> str:
    """Header plus, when content was requested, the error note or region blocks."""
    out = render_header(f)
    if not f.content:
        return out
    if f.error is not None:
        return out + f"*Could not retrieve file content: {f.error}*\n\n"

    if f.hunks:
        blocks = [render_hunk(h) for h in f.hunks]
        return out + "\n".join(blocks)

    parts = []
    if f.before_window is not None and not f.before_window.is_empty:
        parts.append(_render_head_tail("Before", f.before_window, f.before_lines))
    if f.after_window is not None and not f.after_window.is_empty:
        parts.append(_render_head_tail("After", f.after_window, f.after_lines))
    if not parts:
        return out + "*No content.*\n"
    return out + "\n".join(parts)


def render(files: list[ChangedFile], title: str = "File Diffs", truncation_note: Optional[str] = None) -> str:
    """Render files in input order into one markdown report."""
    report = f"# {title}\n\n"
    if not files and truncation_note is None:
        return report + "No changed files.\n"
    for f in files:
        report += render_file(f) + SEPARATOR
    if truncation_note:
        report += f"\n*{truncation_note}*\n"
    return report


def render_no_revisions(title: str = "File Diffs") -> str:
    return f"# {title}\n\nNo revisions found for this comparison.\n"
