"""Inline markup (bold, italic, code, links) inside a block's text."""

import re
from dataclasses import replace
from typing import Optional, Sequence

from .constants import MARKDOWN_STYLES
from .model import Segment, SegmentStyle

# Order matters: ** before *, so bold wins over two italics
INLINE_RE = re.compile(
    r"\*\*(.+?)\*\*"          # 1: bold
    r"|\*(.+?)\*"             # 2: italic
    r"|`([^`]+)`"             # 3: code
    r"|\[([^\]]+)\]\(([^)]+)\)"  # 4: link text, 5: url
)

# (match group holding the content, style key)
_RULES = (
    (1, "bold"),
    (2, "italic"),
    (3, "code"),
    (4, "link"),
)


def join_soft_wrapped(source_text: str, source_offset: int) -> tuple[str, list[int]]:
    """Join soft-wrapped source lines with single spaces.

    Each line is stripped before joining, so the joined text no longer lines
    up index-for-index with the source. The returned table holds the source
    offset of every joined character; a joining space maps to the newline it
    replaces.
    """
    pieces: list[str] = []
    offsets: list[int] = []
    line_offset = source_offset
    lines = source_text.split("\n")
    if source_text.endswith("\n"):
        lines.pop()

    for line in lines:
        stripped = line.strip()
        if stripped:
            if pieces:
                pieces.append(" ")
                # The newline ending the previous line
                offsets.append(line_offset - 1)
            lead = len(line) - len(line.lstrip())
            pieces.append(stripped)
            offsets.extend(range(line_offset + lead, line_offset + lead + len(stripped)))
        line_offset += len(line) + 1

    return ("".join(pieces), offsets)


def _plain_style(base: SegmentStyle) -> SegmentStyle:
    if base.kind is None:
        return replace(base, kind="body")
    return base


def _split_contiguous(text: str, start: int, end: int, offsets: Sequence[int],
                      style: SegmentStyle) -> list[Segment]:
    """Cut text[start:end] wherever the offset table jumps."""
    segments = []
    run_start = start
    for i in range(start + 1, end + 1):
        if i == end or offsets[i] != offsets[i - 1] + 1:
            segments.append(Segment(
                text=text[run_start:i],
                source_offset=offsets[run_start],
                source_length=i - run_start,
                style=style,
            ))
            run_start = i
    return segments


def parse_inline(text: str, base_offset: int = 0, base_style: Optional[SegmentStyle] = None,
                 offsets: Optional[Sequence[int]] = None) -> list[Segment]:
    """Scan text for inline markup and return styled segments.

    Matches are taken left to right with the first matching rule winning;
    nothing is parsed inside a match. A matched segment starts at its content,
    past the opening delimiter, and its length is the content length.

    Args:
        text: Display text of the block (already joined if soft-wrapped)
        base_offset: Source offset of text[0] when the text is contiguous
        base_style: Style every segment starts from
        offsets: Per-character source offsets for non-contiguous text

    Returns:
        Segments in display order whose texts concatenate to the display text
        with markup delimiters removed.
    """
    base = base_style or SegmentStyle()
    if offsets is None:
        offsets = range(base_offset, base_offset + len(text))

    segments: list[Segment] = []
    last_end = 0

    for match in INLINE_RE.finditer(text):
        if match.start() > last_end:
            segments.extend(_split_contiguous(text, last_end, match.start(), offsets, _plain_style(base)))

        for group, key in _RULES:
            content = match.group(group)
            if content is not None:
                content_start = match.start(group)
                segments.extend(_split_contiguous(
                    text, content_start, content_start + len(content), offsets,
                    base.merged(MARKDOWN_STYLES[key]),
                ))
                break

        last_end = match.end()

    if last_end < len(text):
        segments.extend(_split_contiguous(text, last_end, len(text), offsets, _plain_style(base)))

    if not segments:
        anchor = offsets[0] if len(offsets) else base_offset
        segments.append(Segment(text=text, source_offset=anchor, source_length=len(text),
                                style=_plain_style(base)))

    return segments


def parse_inline_lines(source_text: str, source_offset: int,
                       base_style: Optional[SegmentStyle] = None) -> list[Segment]:
    """Parse a soft-wrapped multi-line run, keeping exact source offsets."""
    joined, offsets = join_soft_wrapped(source_text, source_offset)
    if not joined:
        return parse_inline("", source_offset, base_style)
    return parse_inline(joined, source_offset, base_style, offsets=offsets)
