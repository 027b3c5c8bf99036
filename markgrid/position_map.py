"""Mapping between screen cells and source offsets."""

from bisect import bisect_right
from typing import Iterable, Optional, Sequence

from .constants import RendererConstants
from .model import PositionMapping, RenderedLine


def build_position_map(lines: Iterable[RenderedLine], start_row: int = 1,
                       width: int = RendererConstants.DEFAULT_WIDTH) -> list[PositionMapping]:
    """Emit one (row, col, offset) entry per displayed character.

    Rows and columns are 1-based. Each rendered line starts a new row at
    column 1 + indent. If a character would land past `width` the row
    advances and the column resets to 1; reflowed lines never need this, but
    indentation can push a full-width line over the edge.
    """
    mappings: list[PositionMapping] = []
    row = start_row

    for line in lines:
        col = 1 + line.indent
        for segment in line.segments:
            for i in range(len(segment.text)):
                if col > width:
                    row += 1
                    col = 1
                mappings.append(PositionMapping(row, col, segment.offset_at(i)))
                col += 1
        row += 1

    return mappings


class PositionIndex:
    """Row-indexed view of a position map for pointer lookups."""

    def __init__(self, mappings: Iterable[PositionMapping] = ()):
        self._cells: dict[tuple[int, int], int] = {}
        self._rows: dict[int, list[PositionMapping]] = {}
        for mapping in mappings:
            self._cells.setdefault((mapping.terminal_row, mapping.terminal_col), mapping.source_offset)
            self._rows.setdefault(mapping.terminal_row, []).append(mapping)
        self._sorted_rows = sorted(self._rows)

    def __len__(self) -> int:
        return len(self._cells)

    def resolve(self, x: int, y: int) -> Optional[int]:
        """Resolve screen column x, row y to the nearest source offset.

        Exact cell first; otherwise the nearest column on the same row;
        otherwise the nearest row (the earlier one on a tie), taking its
        first offset when the pointer is above it and its last when below.
        Returns None only when the map is empty.
        """
        exact = self._cells.get((y, x))
        if exact is not None:
            return exact

        row_entries = self._rows.get(y)
        if row_entries:
            closest = min(row_entries, key=lambda m: abs(m.terminal_col - x))
            return closest.source_offset

        if not self._sorted_rows:
            return None

        closest_row = min(self._sorted_rows, key=lambda r: abs(r - y))
        offsets = [m.source_offset for m in self._rows[closest_row]]
        if y < closest_row:
            return min(offsets)
        return max(offsets)


def terminal_to_offset(x: int, y: int, mappings: Sequence[PositionMapping]) -> Optional[int]:
    """One-off lookup; build a PositionIndex when resolving repeatedly."""
    return PositionIndex(mappings).resolve(x, y)


def line_starts(content: str) -> list[int]:
    """Offsets at which each source line begins."""
    starts = [0]
    for i, ch in enumerate(content):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def offset_to_line_col(offset: int, content: str,
                       starts: Optional[Sequence[int]] = None) -> tuple[int, int]:
    """Return the 1-based (line, column) of a source offset."""
    offset = max(0, min(offset, len(content)))
    if starts is None:
        starts = line_starts(content)
    index = bisect_right(starts, offset) - 1
    return (index + 1, offset - starts[index] + 1)
