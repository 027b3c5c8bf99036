"""Tests for the screen-cell to source-offset map."""

from markgrid.model import PositionMapping, RenderedLine, Segment
from markgrid.position_map import (
    PositionIndex,
    build_position_map,
    line_starts,
    offset_to_line_col,
    terminal_to_offset,
)
from markgrid.view import render


def test_single_line_maps_one_to_one():
    lines = render("hello world")
    mappings = build_position_map(lines)

    assert len(mappings) == len("hello world")
    assert [m.terminal_row for m in mappings] == [1] * 11
    assert [m.terminal_col for m in mappings] == list(range(1, 12))
    assert [m.source_offset for m in mappings] == list(range(11))


def test_start_row_shifts_rows():
    mappings = build_position_map(render("ab"), start_row=3)
    assert mappings == [PositionMapping(3, 1, 0), PositionMapping(3, 2, 1)]


def test_hidden_markup_is_skipped():
    mappings = build_position_map(render("**bold** text"))
    assert [m.source_offset for m in mappings] == [2, 3, 4, 5, 8, 9, 10, 11, 12]


def test_hanging_indent_starts_columns_later():
    lines = render("- aaaa bbbb", width=8)
    assert [line.text for line in lines] == ["• aaaa", "bbbb"]
    mappings = build_position_map(lines, width=8)

    second_row = [(m.terminal_col, m.source_offset) for m in mappings if m.terminal_row == 2]
    assert second_row == [(3, 7), (4, 8), (5, 9), (6, 10)]


def test_overlong_line_wraps_to_column_one():
    line = RenderedLine(1, 0, 4, (Segment("abcd", 0, 4),), indent=3)
    assert build_position_map([line], width=5) == [
        PositionMapping(1, 4, 0),
        PositionMapping(1, 5, 1),
        PositionMapping(2, 1, 2),
        PositionMapping(2, 2, 3),
    ]


def test_blank_lines_take_a_row_but_no_cells():
    mappings = build_position_map(render("ab\n\ncd"))
    assert {m.terminal_row for m in mappings} == {1, 3}


def test_empty_document_has_empty_map():
    lines = render("")
    assert len(lines) == 1
    assert lines[0].is_blank
    assert build_position_map(lines) == []


class TestPositionIndex:

    def setup_method(self):
        # Row 1: "ab" (0-1), row 2: blank, row 3: "cd" (4-5)
        self.index = PositionIndex(build_position_map(render("ab\n\ncd")))

    def test_exact_cell(self):
        assert self.index.resolve(2, 1) == 1
        assert self.index.resolve(1, 3) == 4

    def test_past_end_of_row_takes_nearest_column(self):
        assert self.index.resolve(40, 1) == 1
        assert self.index.resolve(40, 3) == 5

    def test_row_without_cells_prefers_earlier_row(self):
        # Rows 1 and 3 are equally far from row 2
        assert self.index.resolve(1, 2) == 1

    def test_above_and_below_the_document(self):
        assert self.index.resolve(5, 0) == 0
        assert self.index.resolve(1, 99) == 5

    def test_empty_index_resolves_nothing(self):
        assert PositionIndex().resolve(1, 1) is None
        assert len(PositionIndex()) == 0

    def test_terminal_to_offset(self):
        mappings = build_position_map(render("hello"))
        assert terminal_to_offset(3, 1, mappings) == 2
        assert terminal_to_offset(3, 1, []) is None


def test_line_starts():
    assert line_starts("ab\ncd\n") == [0, 3, 6]
    assert line_starts("") == [0]


def test_offset_to_line_col():
    content = "ab\ncd"
    assert offset_to_line_col(0, content) == (1, 1)
    assert offset_to_line_col(2, content) == (1, 3)
    assert offset_to_line_col(3, content) == (2, 1)
    assert offset_to_line_col(5, content) == (2, 3)
    # Clamped to the document
    assert offset_to_line_col(99, content) == (2, 3)
    assert offset_to_line_col(-4, content) == (1, 1)
