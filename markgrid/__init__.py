"""markgrid - Markup rendering onto a terminal grid with source-offset selection."""

from .blocks import parse_blocks
from .inline import parse_inline
from .model import (
    Block,
    BlockKind,
    DiffType,
    DocumentDiff,
    DocumentSelection,
    EmailHeader,
    PositionMapping,
    RenderedLine,
    Segment,
    SegmentStyle,
)
from .position_map import PositionIndex, build_position_map, offset_to_line_col
from .reflow import word_wrap, wrap_segments
from .selection import SelectionController
from .view import DocumentView, render

__all__ = [
    'parse_blocks',
    'parse_inline',
    'Block',
    'BlockKind',
    'DiffType',
    'DocumentDiff',
    'DocumentSelection',
    'EmailHeader',
    'PositionMapping',
    'RenderedLine',
    'Segment',
    'SegmentStyle',
    'PositionIndex',
    'build_position_map',
    'offset_to_line_col',
    'word_wrap',
    'wrap_segments',
    'SelectionController',
    'DocumentView',
    'render',
]
