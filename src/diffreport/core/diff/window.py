"""Context windows around changed spans, clipped to document bounds"""

from diffreport.core.errors import MalformedInputError
from diffreport.core.models import ContextWindow, LineSequence, NumberedLine


def _numbered(seq: LineSequence, start: int, end: int, first_line_number: int) -> tuple[NumberedLine, ...]:
    return tuple(
        NumberedLine(number=i + first_line_number, text=seq.lines[i])
        for i in range(start, end)
    )


def window(
    seq: LineSequence,
    start: int,
    end: int,
    context_size: int = 5,
    first_line_number: int = 1,
    ) -> ContextWindow:
    """Return before/changed/after slices for seq[start:end] with context_size lines each side.

    start == end yields an empty changed slice; the surrounding context still
    shows where an insertion landed. Raises MalformedInputError when the span
    lies outside [0, len(seq)] or is inverted.
    """
    n = len(seq)
    if not 0 <= start <= end <= n:
        raise MalformedInputError(f"span [{start}, {end}) outside sequence of {n} lines")
    if context_size < 0:
        raise MalformedInputError(f"context size must be >= 0, got {context_size}")

    lo = max(0, start - context_size)
    hi = min(n, end + context_size)
    return ContextWindow(
        before=_numbered(seq, lo, start, first_line_number),
        changed=_numbered(seq, start, end, first_line_number),
        after=_numbered(seq, end, hi, first_line_number),
        no_newline_at_end=lo < hi == n and not seq.terminated,
    )


def head_tail(seq: LineSequence, cap: int = 50, first_line_number: int = 1) -> ContextWindow:
    """First cap lines as before, last cap lines not already shown as after."""
    if cap < 0:
        raise MalformedInputError(f"line cap must be >= 0, got {cap}")
    n = len(seq)
    head_end = min(n, cap)
    tail_start = max(head_end, n - cap)
    return ContextWindow(
        before=_numbered(seq, 0, head_end, first_line_number),
        after=_numbered(seq, tail_start, n, first_line_number),
        no_newline_at_end=n > 0 and not seq.terminated,
    )
