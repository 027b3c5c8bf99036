"""Overlay passes that restyle parts of already-wrapped segments.

Two passes run on every rendered line, always in this order: edit-diff
highlighting, then the user's selection. Both cut segments at the overlay
boundaries and merge the overlay style into the covered part only. Text
and source offsets are never changed, so the concatenated text of a line
is the same before and after.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from .constants import DIFF_STYLES, SELECTION_STYLE
from .model import DocumentDiff, OverlayRange, RenderedLine, Segment


def _overlaps(segment: Segment, overlay: OverlayRange) -> bool:
    return overlay.start_offset < segment.source_end and overlay.end_offset > segment.source_offset


def _split_segment(segment: Segment, overlays: list[OverlayRange]) -> list[Segment]:
    """Split one segment at the boundaries of the overlays that touch it."""
    if segment.is_atomic:
        # Decorations cannot be cut against the source; style them whole
        style = segment.style
        for overlay in overlays:
            style = style.merged(overlay.style)
        return [replace(segment, style=style)]

    result: list[Segment] = []
    length = len(segment.text)
    text_pos = 0

    for overlay in overlays:
        inside_start = max(0, overlay.start_offset - segment.source_offset, text_pos)
        inside_end = min(length, overlay.end_offset - segment.source_offset)

        # Text before the overlay
        if inside_start > text_pos:
            result.append(segment.slice(text_pos, inside_start))

        # Overlay region; an empty inside part is skipped
        if inside_end > inside_start:
            inside = segment.slice(inside_start, inside_end)
            result.append(replace(inside, style=inside.style.merged(overlay.style)))

        text_pos = max(text_pos, inside_end)

    # Text after all overlays
    if text_pos < length:
        result.append(segment.slice(text_pos, length))

    return result


def apply_overlays(segments: Sequence[Segment], overlays: Iterable[OverlayRange]) -> list[Segment]:
    """Apply style overlays expressed in source offsets to a list of segments.

    Degenerate ranges (start >= end) are dropped before anything else.
    Segments without any overlapping range, and empty segments, pass through
    unchanged.
    """
    ranges = sorted(
        (o for o in overlays if o.end_offset > o.start_offset),
        key=lambda o: (o.start_offset, o.end_offset),
    )
    if not ranges:
        return list(segments)

    result: list[Segment] = []
    for segment in segments:
        touching = [o for o in ranges if _overlaps(segment, o)]
        if not touching or not segment.text:
            result.append(segment)
            continue
        result.extend(_split_segment(segment, touching))
    return result


def apply_diffs(segments: Sequence[Segment], diffs: Iterable[DocumentDiff]) -> list[Segment]:
    """Highlight added and deleted source ranges."""
    return apply_overlays(
        segments,
        [OverlayRange(d.start_offset, d.end_offset, DIFF_STYLES[d.type]) for d in diffs],
    )


def apply_selection(segments: Sequence[Segment], selection_start: Optional[int],
                    selection_end: Optional[int]) -> list[Segment]:
    """Highlight the selected source range, whichever way round it was given."""
    if selection_start is None or selection_end is None:
        return list(segments)
    start = min(selection_start, selection_end)
    end = max(selection_start, selection_end)
    return apply_overlays(segments, [OverlayRange(start, end, SELECTION_STYLE)])


def overlay_line(line: RenderedLine, diffs: Iterable[DocumentDiff] = (),
                 selection: Optional[tuple[int, int]] = None) -> RenderedLine:
    """Run the diff pass, then the selection pass, over one rendered line."""
    segments = apply_diffs(line.segments, diffs)
    if selection is not None:
        segments = apply_selection(segments, selection[0], selection[1])
    if tuple(segments) == line.segments:
        return line
    return replace(line, segments=tuple(segments))
