"""Tests for block rendering and the scrollable document view."""

import pytest

from markgrid.blocks import parse_blocks
from markgrid.model import BlockKind, DiffType, DocumentDiff
from markgrid.position_map import build_position_map
from markgrid.view import DocumentView, render


def test_heading_keeps_marker_and_offsets():
    blocks = parse_blocks("# Hello")
    assert len(blocks) == 1
    assert (blocks[0].kind, blocks[0].level, blocks[0].source_offset) == (BlockKind.HEADING, 1, 0)

    lines = render("# Hello", width=80)
    assert len(lines) == 1
    assert [s.text for s in lines[0].segments] == ["# ", "Hello"]
    assert lines[0].segments[1].source_offset == 2
    assert lines[0].segments[1].style.bold is True


def test_heading_marker_is_normalized():
    lines = render("##   Sub")
    assert lines[0].text == "## Sub"
    marker = lines[0].segments[0]
    assert marker.source_length == 5
    assert lines[0].segments[1].source_offset == 5


def test_line_numbers_follow_source_lines():
    lines = render("one\n\ntwo\n\n- a\n- b")
    assert [line.line_number for line in lines] == [1, 2, 3, 4, 5, 6]


def test_paragraph_soft_wraps_are_joined():
    lines = render("one\ntwo")
    assert [line.text for line in lines] == ["one two"]


def test_paragraph_is_wrapped_to_width():
    lines = render("aaaa bbbb cccc", width=9)
    assert [line.text for line in lines] == ["aaaa bbbb", "cccc"]
    assert lines[1].source_offset == 10


def test_rule_width():
    assert render("---", width=80)[0].text == "─" * 60
    assert render("---", width=30)[0].text == "─" * 26


def test_code_block_hides_fences_and_keeps_spacing():
    lines = render("```\nx  =  1\n```")
    assert [line.text for line in lines] == ["x  =  1"]
    assert lines[0].source_offset == 4
    assert lines[0].segments[0].style.kind == "codeBlock"


def test_long_code_lines_are_cut_at_width():
    lines = render("```\nabcdefgh\n```", width=3)
    assert [line.text for line in lines] == ["abc", "def", "gh"]
    assert [line.source_offset for line in lines] == [4, 7, 10]


def test_blockquote_bar():
    lines = render("> hello")
    assert [s.text for s in lines[0].segments] == ["│ ", "hello"]
    assert lines[0].segments[1].source_offset == 2
    assert lines[0].segments[1].style.kind == "blockquote"


def test_blockquote_wraps_under_the_bar():
    lines = render("> aaaa bbbb", width=8)
    assert [line.text for line in lines] == ["│ aaaa", "bbbb"]
    assert lines[1].indent == 2


def test_unordered_list_bullets():
    lines = render("- one\n* two")
    assert [line.text for line in lines] == ["• one", "• two"]


def test_ordered_list_is_renumbered():
    lines = render("3. a\n7. b")
    assert [line.text for line in lines] == ["1. a", "2. b"]


def test_nested_list_items_are_indented():
    lines = render("- a\n  - b\n- c")
    assert [line.text for line in lines] == ["• a", "• b", "• c"]
    assert [line.indent for line in lines] == [0, 2, 0]


def test_deeply_nested_item_is_clamped_to_width():
    content = "- a\n" + " " * 18 + "- word\n- b"
    lines = render(content, width=20)
    assert [line.text for line in lines] == ["• a", "• w", "o", "r", "d", "• b"]
    assert all(len(line.text) + line.indent <= 20 for line in lines)

    # Map rows stay in step with the rendered rows
    mappings = build_position_map(lines, start_row=1, width=20)
    assert max(m.terminal_row for m in mappings) == len(lines)
    b_offset = content.rindex("b")
    assert [m.terminal_row for m in mappings if m.source_offset == b_offset] == [6]


def test_inline_markup_in_list_item():
    lines = render("- **bold** item")
    bold = [s for s in lines[0].segments if s.style.bold]
    assert bold[0].text == "bold"
    assert bold[0].source_offset == 4


def test_viewport_slicing():
    content = "# a\n# b\n# c\n# d"
    assert [line.text for line in render(content, scroll_offset=1, viewport_height=2)] == ["# b", "# c"]
    # Without a viewport every line comes back
    assert len(render(content, scroll_offset=1)) == 4


def test_render_applies_diffs_then_selection():
    lines = render(
        "hello world",
        diffs=[DocumentDiff(0, 5, DiffType.DELETE)],
        selection_range=(6, 11),
    )
    segments = lines[0].segments
    assert [s.text for s in segments] == ["hello", " ", "world"]
    assert segments[0].style.strikethrough is True
    assert segments[1].style.background_color is None
    assert segments[2].style.background_color == "blue"


def test_render_is_pure():
    content = "# Title\n\nSome **bold** text"
    assert render(content, width=20) == render(content, width=20)


class TestDocumentView:

    def setup_method(self):
        self.view = DocumentView("\n".join(f"# line {i}" for i in range(10)), num_rows=4)

    def test_render_returns_visible_rows(self):
        rows = self.view.render()
        assert [row.text for row in rows] == ["# line 0", "# line 1", "# line 2", "# line 3"]
        assert self.view.visible_lines == rows

    def test_scrolling_is_clamped(self):
        assert self.view.max_scroll == 6
        assert self.view.scroll_by(-1) is False
        assert self.view.scroll_to_bottom() is True
        assert self.view.scroll_offset == 6
        assert self.view.scroll_by(5) is False
        assert self.view.scroll_to_top() is True
        assert self.view.scroll_offset == 0

    def test_paging_keeps_context(self):
        # Four rows minus two lines of context
        assert self.view.scroll_page_down() is True
        assert self.view.scroll_offset == 2
        assert self.view.scroll_page_up() is True
        assert self.view.scroll_offset == 0

    def test_selection_is_normalized(self):
        self.view.set_selection(12, 3)
        assert self.view.selection == (3, 12)
        self.view.set_selection(5, 5)
        assert self.view.selection is None

    def test_selection_is_drawn(self):
        self.view.set_selection(2, 6)
        first = self.view.render()[0]
        assert any(s.style.background_color == "blue" for s in first.segments)
        self.view.clear_selection()
        assert all(s.style.background_color is None for s in self.view.render()[0].segments)

    def test_width_change_relayouts(self):
        view = DocumentView("aaaa bbbb cccc", num_columns=80)
        assert len(view.lines) == 1
        view.set_width(9)
        assert len(view.lines) == 2
        assert len(view.position_index) == 13

    def test_position_map_uses_start_row(self):
        view = DocumentView("ab", start_row=2)
        assert view.position_index.resolve(1, 2) == 0

    def test_set_content_clears_selection(self):
        self.view.set_selection(0, 3)
        self.view.set_content("new text")
        assert self.view.selection is None
        assert [line.text for line in self.view.lines] == ["new text"]

    @pytest.mark.parametrize("width", [20, 33, 80])
    def test_lines_fit_the_width(self, width):
        view = DocumentView("word " * 60, num_columns=width)
        assert all(len(line.text) + line.indent <= width for line in view.lines)
