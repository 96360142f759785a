"""Split raw snapshot text into a LineSequence"""

from diffreport.core.models import LineSequence


def split_lines(text: str) -> LineSequence:
    """Split text on line feeds into a LineSequence.

    Only '\\n' is a boundary; a '\\r' before it stays part of the line.
    A single trailing '\\n' terminates the last line instead of opening a new
    empty one, so "a\\nb\\n" and "a\\nb" both give two lines; the sequences
    still differ through `terminated`. An empty string gives one empty line;
    use LineSequence.empty() for an axis with no content.
    """
    lines = text.split("\n")
    terminated = text.endswith("\n")
    if terminated:
        lines.pop()
    return LineSequence(lines=tuple(lines), terminated=terminated)
