"""Compact change statistics over classified regions"""

from diffreport.core.models import Region, RegionKind


def diff_summary(regions: list[Region]) -> dict[str, int]:
    """Return added/removed/unchanged line counts. Useful for compact change stats."""
    added = removed = unchanged = 0

    for r in regions:
        if r.kind == RegionKind.unchanged:
            unchanged += r.before_len
        elif r.kind == RegionKind.added:
            added += r.after_len
        elif r.kind == RegionKind.removed:
            removed += r.before_len

    return {"added": added, "removed": removed, "unchanged": unchanged}
