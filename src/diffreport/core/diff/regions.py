"""Line-granularity region classification between two LineSequences"""

import difflib

from diffreport.core.models import LineSequence, Region, RegionKind


def _coalesce(regions: list[Region]) -> list[Region]:
    """Merge consecutive same-kind regions into one maximal region."""
    merged: list[Region] = []
    for r in regions:
        if merged and merged[-1].kind == r.kind:
            prev = merged[-1]
            merged[-1] = Region(
                kind=r.kind,
                before_start=prev.before_start, before_end=r.before_end,
                after_start=prev.after_start, after_end=r.after_end,
            )
        else:
            merged.append(r)
    return merged


def _split_final_line(regions: list[Region], before: LineSequence, after: LineSequence) -> list[Region]:
    """Report a matched last line as removed then added when only one side ends with a line feed."""
    if not regions or before.terminated == after.terminated:
        return regions
    last = regions[-1]
    if last.kind != RegionKind.unchanged:
        return regions
    nb, na = last.before_end, last.after_end
    head = []
    if last.before_len > 1:
        head.append(Region(kind=RegionKind.unchanged, before_start=last.before_start, before_end=nb - 1, after_start=last.after_start, after_end=na - 1))
    return regions[:-1] + head + [
        Region(kind=RegionKind.removed, before_start=nb - 1, before_end=nb, after_start=na - 1, after_end=na - 1),
        Region(kind=RegionKind.added, before_start=nb, before_end=nb, after_start=na - 1, after_end=na),
    ]


def classify(before: LineSequence, after: LineSequence) -> list[Region]:
    """Return the ordered regions that partition both sequences.

    A 'replace' run is reported as a removed region followed by an added region;
    removals always come first when both sides change at the same position.
    Adding or dropping the final line feed changes the last line.
    """
    matcher = difflib.SequenceMatcher(None, before.lines, after.lines, autojunk=False)
    regions: list[Region] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            regions.append(Region(kind=RegionKind.unchanged, before_start=i1, before_end=i2, after_start=j1, after_end=j2))
        elif tag == "delete":
            regions.append(Region(kind=RegionKind.removed, before_start=i1, before_end=i2, after_start=j1, after_end=j1))
        elif tag == "insert":
            regions.append(Region(kind=RegionKind.added, before_start=i1, before_end=i1, after_start=j1, after_end=j2))
        elif tag == "replace":
            regions.append(Region(kind=RegionKind.removed, before_start=i1, before_end=i2, after_start=j1, after_end=j1))
            regions.append(Region(kind=RegionKind.added, before_start=i2, before_end=i2, after_start=j1, after_end=j2))

    return _coalesce(_split_final_line(regions, before, after))


def is_unchanged(regions: list[Region], before: LineSequence, after: LineSequence) -> bool:
    """True when a single unchanged region spans both whole documents."""
    if len(regions) != 1:
        return False
    r = regions[0]
    return (
        r.kind == RegionKind.unchanged
        and (r.before_start, r.before_end) == (0, len(before))
        and (r.after_start, r.after_end) == (0, len(after))
    )
