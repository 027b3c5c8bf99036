"""Tests for word wrapping of text and segment runs."""

import pytest

from markgrid.inline import parse_inline
from markgrid.model import Segment
from markgrid.reflow import word_wrap, wrap_ranges, wrap_segments


def test_break_space_belongs_to_neither_line():
    assert word_wrap("aaaa bbbb cccc", 9) == ["aaaa bbbb", "cccc"]
    assert wrap_ranges("aaaa bbbb cccc", 9) == [(0, 9), (10, 14)]


def test_short_text_is_one_line():
    assert word_wrap("short", 80) == ["short"]
    assert word_wrap("", 10) == [""]


def test_long_word_is_broken_at_width():
    assert word_wrap("abcdefghij", 4) == ["abcd", "efgh", "ij"]


def test_runs_of_spaces_are_dropped_at_break():
    assert wrap_ranges("aaaa   bbbb", 5) == [(0, 4), (7, 11)]


def test_greedy_wrap():
    text = "the quick brown fox jumps over the lazy dog"
    assert word_wrap(text, 10) == ["the quick", "brown fox", "jumps over", "the lazy", "dog"]


@pytest.mark.parametrize("width", [12, 17, 40])
def test_rewrapping_is_idempotent(width):
    text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor"
    lines = word_wrap(text, width)
    assert all(len(line) <= width for line in lines)
    for line in lines:
        assert word_wrap(line, width) == [line]
    assert word_wrap(" ".join(lines), width) == lines


def test_wrap_segments_keeps_source_offsets():
    segments = parse_inline("**bold** text")
    lines = wrap_segments(segments, 6)

    assert [line.text for line in lines] == ["bold", "text"]
    assert lines[0].source_offset == 2
    assert lines[0].source_length == 4
    # The piece after the dropped space starts one past it
    assert lines[1].segments[0].source_offset == 9
    assert lines[1].segments[0].style.kind == "body"


def test_wrap_segments_line_spans_skip_break_space():
    lines = wrap_segments([Segment("aaaa bbbb cccc", 0, 14)], 9)
    assert [(line.source_offset, line.source_length) for line in lines] == [(0, 9), (10, 4)]


def test_wrap_segments_empty_run_is_blank_line():
    lines = wrap_segments([], 10, anchor_offset=7)
    assert len(lines) == 1
    assert lines[0].is_blank
    assert lines[0].source_offset == 7
    assert lines[0].text == ""


def test_segment_split_across_lines():
    segments = [Segment("one two", 0, 7), Segment("three", 20, 5)]
    lines = wrap_segments(segments, 8)
    assert [line.text for line in lines] == ["one", "twothree"]
    assert [(s.text, s.source_offset) for s in lines[1].segments] == [("two", 4), ("three", 20)]
