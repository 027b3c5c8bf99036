"""Block rendering and the scrollable document view."""

import re
from bisect import bisect_right
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from .blocks import FENCE, LIST_ITEM_RE, parse_blocks
from .constants import (
    BULLET_STYLE,
    MARKDOWN_STYLES,
    QUOTE_BAR_STYLE,
    RULE_STYLE,
    RendererConstants,
)
from .inline import parse_inline, parse_inline_lines
from .model import Block, BlockKind, DocumentDiff, RenderedLine, Segment, SegmentStyle
from .overlay import overlay_line
from .position_map import PositionIndex, build_position_map, line_starts
from .reflow import wrap_segments

QUOTE_PREFIX_RE = re.compile(r"^>\s?")
HEADING_PREFIX_RE = re.compile(r"^#+\s+")


def _with_prefix(line: RenderedLine, prefix: Segment, indent: int) -> RenderedLine:
    """Put a decoration segment in front of the first wrapped line."""
    return replace(
        line,
        source_offset=prefix.source_offset,
        source_length=line.source_length + prefix.source_length,
        segments=(prefix,) + line.segments,
        indent=indent,
        is_blank=False,
    )


def _hang(lines: list[RenderedLine], prefix: Segment, indent: int, hanging: int) -> list[RenderedLine]:
    """First line gets the prefix at `indent`, the rest line up at `hanging`."""
    result = [_with_prefix(lines[0], prefix, indent)]
    result.extend(replace(line, indent=hanging) for line in lines[1:])
    return result


def _render_blank(block: Block, width: int) -> list[RenderedLine]:
    text, offset = block.source_lines()[0]
    return [RenderedLine(
        line_number=1,
        source_offset=offset,
        source_length=len(text),
        segments=(Segment(text="", source_offset=offset, source_length=len(text)),),
        is_blank=True,
    )]


def _render_heading(block: Block, width: int) -> list[RenderedLine]:
    text, offset = block.source_lines()[0]
    level = block.level or 1
    style = MARKDOWN_STYLES.get(f"h{level}", MARKDOWN_STYLES["h1"])
    prefix_len = HEADING_PREFIX_RE.match(text).end()
    marker = Segment(
        text="#" * level + " ",
        source_offset=offset,
        source_length=prefix_len,
        style=style.merged(SegmentStyle(dim=True)),
    )
    segments = [marker] + parse_inline(text[prefix_len:], offset + prefix_len, style)
    return wrap_segments(segments, width, anchor_offset=offset)


def _render_rule(block: Block, width: int) -> list[RenderedLine]:
    text, offset = block.source_lines()[0]
    rule_width = max(1, min(width - RendererConstants.RULE_MARGIN, RendererConstants.RULE_MAX_WIDTH))
    rule = Segment(text="─" * rule_width, source_offset=offset, source_length=len(text), style=RULE_STYLE)
    return [RenderedLine(line_number=1, source_offset=offset, source_length=len(text), segments=(rule,))]


def _render_code(block: Block, width: int) -> list[RenderedLine]:
    style = MARKDOWN_STYLES["codeBlock"]
    lines: list[RenderedLine] = []
    for text, offset in block.source_lines():
        # Fence lines are not displayed
        if text.startswith(FENCE):
            continue
        # Code keeps its spacing, so long lines are cut at the width, not word-wrapped
        for start in range(0, max(len(text), 1), max(1, width)):
            chunk = text[start:start + width]
            lines.append(RenderedLine(
                line_number=1,
                source_offset=offset + start,
                source_length=len(chunk),
                segments=(Segment(chunk, offset + start, len(chunk), style),),
            ))
    return lines


def _render_quote(block: Block, width: int) -> list[RenderedLine]:
    hanging = RendererConstants.HANGING_INDENT
    style = MARKDOWN_STYLES["blockquote"]
    lines: list[RenderedLine] = []
    for text, offset in block.source_lines():
        match = QUOTE_PREFIX_RE.match(text)
        prefix_len = match.end() if match else 0
        content = parse_inline(text[prefix_len:], offset + prefix_len, style)
        wrapped = wrap_segments(content, width - hanging, anchor_offset=offset + prefix_len)
        bar = Segment(text="│ ", source_offset=offset, source_length=prefix_len, style=QUOTE_BAR_STYLE)
        lines.extend(_hang(wrapped, bar, 0, hanging))
    return lines


def _render_list(block: Block, width: int) -> list[RenderedLine]:
    style = MARKDOWN_STYLES["listItem"]
    lines: list[RenderedLine] = []
    # Item counters per indentation depth, for renumbered ordered lists
    counters: dict[int, int] = {}
    text_column = RendererConstants.HANGING_INDENT

    for text, offset in block.source_lines():
        if not text.strip():
            continue
        match = LIST_ITEM_RE.match(text)
        if match is None:
            # Continuation text lines up with the item text above it
            lead = len(text) - len(text.lstrip())
            content = parse_inline(text[lead:], offset + lead, style)
            wrapped = wrap_segments(content, width - text_column, anchor_offset=offset + lead)
            lines.extend(replace(line, indent=text_column) for line in wrapped)
            continue

        lead = len(match.group(1))
        marker = match.group(2)
        prefix_len = match.end()
        for depth in [d for d in counters if d > lead]:
            del counters[depth]
        counters[lead] = counters.get(lead, 0) + 1
        bullet = f"{counters[lead]}. " if marker[0].isdigit() else "• "
        # Deep nesting is clamped so at least one text column stays on the row
        indent = min(lead, max(0, width - len(bullet) - 1))
        text_column = indent + len(bullet)

        content = parse_inline(text[prefix_len:], offset + prefix_len, style)
        wrapped = wrap_segments(content, width - text_column, anchor_offset=offset + prefix_len)
        prefix = Segment(text=bullet, source_offset=offset + lead,
                         source_length=prefix_len - lead, style=BULLET_STYLE)
        lines.extend(_hang(wrapped, prefix, indent, text_column))
    return lines


def _render_paragraph(block: Block, width: int) -> list[RenderedLine]:
    # Soft-wrapped source lines are joined before wrapping to the screen
    segments = parse_inline_lines(block.source_text, block.source_offset)
    return wrap_segments(segments, width, anchor_offset=block.source_offset)


_RENDERERS = {
    BlockKind.BLANK: _render_blank,
    BlockKind.HEADING: _render_heading,
    BlockKind.HR: _render_rule,
    BlockKind.CODE_BLOCK: _render_code,
    BlockKind.BLOCKQUOTE: _render_quote,
    BlockKind.LIST: _render_list,
    BlockKind.PARAGRAPH: _render_paragraph,
}


def render_blocks(blocks: Sequence[Block], width: int) -> list[RenderedLine]:
    """Lay out parsed blocks as terminal rows of at most `width` columns.

    Every line is numbered with the 1-based source line its first segment
    comes from.
    """
    width = max(1, width)
    starts = line_starts("".join(b.source_text for b in blocks))
    lines: list[RenderedLine] = []
    for block in blocks:
        for line in _RENDERERS[block.kind](block, width):
            lines.append(replace(line, line_number=bisect_right(starts, line.source_offset)))
    return lines


def render(content: str, diffs: Iterable[DocumentDiff] = (),
           selection_range: Optional[tuple[int, int]] = None,
           width: int = RendererConstants.DEFAULT_WIDTH, scroll_offset: int = 0,
           viewport_height: Optional[int] = None) -> list[RenderedLine]:
    """Render markup to lines, keep the viewport, then overlay diffs and selection.

    Pure function of its arguments. Without a viewport height every line is
    returned and the scroll offset is ignored.
    """
    lines = render_blocks(parse_blocks(content), width)
    if viewport_height is not None:
        lines = lines[scroll_offset:scroll_offset + viewport_height]
    diffs = tuple(diffs)
    return [overlay_line(line, diffs, selection_range) for line in lines]


class DocumentView:
    """Scrollable rendering of one document at a fixed width.

    Layout (blocks, wrapped lines, position map) is recomputed only when
    the content or width changes; overlays are applied to the visible rows
    on every render.
    """

    def __init__(self, content: str = "", diffs: Iterable[DocumentDiff] = (),
                 num_columns: int = RendererConstants.DEFAULT_WIDTH, num_rows: int = 24,
                 start_row: int = 1, start_col: int = 0):
        self.content = content
        self.diffs: tuple[DocumentDiff, ...] = tuple(diffs)
        self.num_columns = num_columns
        self.num_rows = num_rows
        self.start_row = start_row  # Screen row of the first content line
        self.start_col = start_col  # Columns left of the content area
        self.scroll_offset = 0
        self.selection: Optional[tuple[int, int]] = None
        self.visible_lines: list[RenderedLine] = []
        self._lines: Optional[list[RenderedLine]] = None
        self._position_map = None
        self._index: Optional[PositionIndex] = None
        self._layout_key: Optional[tuple[int, int]] = None

    def set_content(self, content: str) -> None:
        self.content = content
        self.selection = None
        self._invalidate()

    def set_diffs(self, diffs: Iterable[DocumentDiff]) -> None:
        self.diffs = tuple(diffs)

    def set_width(self, num_columns: int) -> None:
        if num_columns != self.num_columns:
            self.num_columns = num_columns
            self._invalidate()

    def _invalidate(self) -> None:
        self._lines = None
        self._position_map = None
        self._index = None

    def _layout(self) -> None:
        if self._lines is not None and self._layout_key == (self.num_columns, self.start_row):
            return
        self._lines = render_blocks(parse_blocks(self.content), self.num_columns)
        # Built from pre-overlay lines; overlays never change character counts
        self._position_map = build_position_map(self._lines, self.start_row, self.num_columns)
        self._index = PositionIndex(self._position_map)
        self._layout_key = (self.num_columns, self.start_row)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll)

    @property
    def lines(self) -> list[RenderedLine]:
        """Every rendered line of the document, before overlays."""
        self._layout()
        return self._lines

    @property
    def position_map(self):
        self._layout()
        return self._position_map

    @property
    def position_index(self) -> PositionIndex:
        self._layout()
        return self._index

    @property
    def max_scroll(self) -> int:
        total = len(self._lines) if self._lines is not None else len(self.lines)
        return max(0, total - self.num_rows)

    def render(self) -> list[RenderedLine]:
        """Overlay diffs and selection on the rows inside the viewport."""
        visible = self.lines[self.scroll_offset:self.scroll_offset + self.num_rows]
        self.visible_lines = [overlay_line(line, self.diffs, self.selection) for line in visible]
        return self.visible_lines

    def set_selection(self, start: Optional[int], end: Optional[int]) -> None:
        if start is None or end is None or start == end:
            self.selection = None
        else:
            self.selection = (min(start, end), max(start, end))

    def clear_selection(self) -> None:
        self.selection = None

    # --- Scrolling ---
    def scroll_to(self, offset: int) -> bool:
        """Set the first visible line; returns True if the view moved."""
        new_offset = max(0, min(offset, self.max_scroll))
        if new_offset == self.scroll_offset:
            return False
        self.scroll_offset = new_offset
        return True

    def scroll_by(self, delta: int) -> bool:
        return self.scroll_to(self.scroll_offset + delta)

    def scroll_page_down(self) -> bool:
        # One screenful minus context
        return self.scroll_by(max(1, self.num_rows - RendererConstants.CONTEXT_LINES))

    def scroll_page_up(self) -> bool:
        return self.scroll_by(-max(1, self.num_rows - RendererConstants.CONTEXT_LINES))

    def scroll_to_top(self) -> bool:
        return self.scroll_to(0)

    def scroll_to_bottom(self) -> bool:
        return self.scroll_to(self.max_scroll)
