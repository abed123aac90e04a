"""Scroll offsets ("shifts") of the column listings."""

from __future__ import annotations

from typing import Optional


def siblings_shift_for(
    gap: int,
    viewport: int,
    index: int,
    length: int,
    previous_shift: Optional[int],
) -> int:
    """Return the index of the first visible row of a listing.

    The cursor at ``index`` is kept at least ``gap`` rows away from both edges
    of the ``viewport`` whenever the list allows it.  With a ``previous_shift``
    the window only moves as far as needed to restore the gap; without one the
    cursor is placed ``gap`` rows below the top.

    The caller guarantees ``2 * gap < viewport``.
    """
    if length <= viewport:
        return 0
    if index < gap:
        return 0
    if index >= length - gap:
        return length - viewport

    if previous_shift is not None:
        shift = index - gap
        if shift < previous_shift:
            return shift
        shift = index + 1 - viewport + gap
        if shift > previous_shift:
            return shift
        return min(previous_shift, length - viewport)

    shift = index - gap
    left_at_bottom = length - shift - viewport
    if left_at_bottom < 0:
        shift += left_at_bottom
    return shift


def resize_scrolling_gap_until_fits(gap: int, viewport: int) -> int:
    """Shrink ``gap`` until two of them fit in ``viewport``."""
    while gap > 0 and 2 * gap >= viewport:
        gap -= 1
    return gap


__all__ = ["siblings_shift_for", "resize_scrolling_gap_until_fits"]
