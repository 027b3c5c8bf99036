from typing import Optional, Sequence

from .model import RenderedLine, Segment


def wrap_ranges(text: str, width: int) -> list[tuple[int, int]]:
    """Greedy word wrap returning [start, end) character ranges into text.

    Breaks at the last space at or before the width column; when a line has
    no usable space the word is broken hard at the width. Spaces at a break
    are dropped: they belong to neither the line before nor the line after.
    """
    width = max(1, width)
    if len(text) <= width:
        return [(0, len(text))]

    ranges: list[tuple[int, int]] = []
    pos = 0
    while len(text) - pos > width:
        # A space exactly at the width column still allows a full line
        break_at = text.rfind(" ", pos, pos + width + 1)
        end = break_at
        # Trailing spaces before the break are dropped with it
        while end > pos and text[end - 1] == " ":
            end -= 1
        if break_at <= pos or end <= pos:
            # No space found, force break at width
            end = pos + width
            next_pos = end
        else:
            next_pos = break_at + 1
            # Skip the rest of the break spaces so the next line starts on a word
            while next_pos < len(text) and text[next_pos] == " ":
                next_pos += 1
        ranges.append((pos, end))
        pos = next_pos

    if pos < len(text):
        ranges.append((pos, len(text)))
    return ranges


def word_wrap(text: str, width: int) -> list[str]:
    """Render text into a list of wrapped lines."""
    return [text[start:end] for start, end in wrap_ranges(text, width)]


def wrap_segments(segments: Sequence[Segment], width: int,
                  anchor_offset: Optional[int] = None) -> list[RenderedLine]:
    """Word-wrap a run of segments into rendered lines.

    The run is wrapped as one string, then each wrapped range is cut back
    into the segments it overlaps. Every piece keeps its segment's source
    offset plus its position inside the segment, so offsets stay traceable.

    Args:
        segments: Flat run of one logical line (paragraph, item, heading)
        width: Target column width
        anchor_offset: Offset for the blank line produced by an empty run
            when there are no segments to anchor it

    Returns:
        Rendered lines with line_number 1; callers number them.
    """
    full_text = "".join(s.text for s in segments)

    if not full_text:
        if segments:
            anchor = segments[0].source_offset
        else:
            anchor = anchor_offset or 0
        return [RenderedLine(
            line_number=1,
            source_offset=anchor,
            source_length=0,
            segments=(Segment(text="", source_offset=anchor, source_length=0),),
            is_blank=True,
        )]

    # Display start of every segment within full_text
    starts = []
    cursor = 0
    for segment in segments:
        starts.append(cursor)
        cursor += len(segment.text)

    lines: list[RenderedLine] = []
    for line_start, line_end in wrap_ranges(full_text, width):
        pieces: list[Segment] = []
        for segment, seg_start in zip(segments, starts):
            seg_end = seg_start + len(segment.text)
            if seg_end <= line_start or seg_start >= line_end:
                continue
            overlap_start = max(seg_start, line_start) - seg_start
            overlap_end = min(seg_end, line_end) - seg_start
            if overlap_end > overlap_start:
                pieces.append(segment.slice(overlap_start, overlap_end))

        if pieces:
            lines.append(RenderedLine(
                line_number=1,
                source_offset=pieces[0].source_offset,
                source_length=sum(p.source_length for p in pieces),
                segments=tuple(pieces),
            ))

    return lines
