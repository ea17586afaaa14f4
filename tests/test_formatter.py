"""Unit tests for the result grid formatter."""
from __future__ import annotations

import pytest
from prompt_toolkit.utils import get_cwidth

from browseql.db import cell_text
from browseql.tui.formatter import (
    MAX_COLUMN_WIDTH,
    NO_DATA,
    column_widths,
    fit_cell,
    format_table,
    format_table_lines,
)


def test_format_table_exact_layout():
    """Test exact grid layout for a small table."""
    lines = format_table_lines(["id", "name"], [["1", "alice"]])
    assert lines == [
        "┌────┬───────┐",
        "│ id │ name  │",
        "├────┼───────┤",
        "│ 1  │ alice │",
    ]


@pytest.mark.parametrize("n_rows", [0, 1, 3, 25])
@pytest.mark.parametrize("n_cols", [1, 2, 5])
def test_line_count_and_delimiters(n_rows, n_cols):
    """The grid has rows + 3 lines with a delimiter per column."""
    headers = [f"col{c}" for c in range(n_cols)]
    rows = [[f"r{r}c{c}" for c in range(n_cols)] for r in range(n_rows)]

    lines = format_table_lines(headers, rows)

    assert len(lines) == n_rows + 3
    for line in [lines[1], *lines[3:]]:
        assert line.count("│") == n_cols + 1
    assert len({len(line) for line in lines}) == 1


def test_headers_without_rows_render_borders_and_header():
    """Headers alone still render the borders and header line."""
    out = format_table(["id", "name"], [])
    assert out.splitlines() == [
        "┌────┬──────┐",
        "│ id │ name │",
        "├────┼──────┤",
    ]


def test_no_headers_renders_no_data_message():
    """No headers renders the no-data message."""
    assert format_table_lines([], []) == [NO_DATA]
    assert format_table([], [["ignored"]]) == NO_DATA


def test_column_width_is_capped():
    """Column widths never exceed the cap."""
    widths = column_widths(["short", "h"], [["x" * 80, "abc"]])
    assert widths == [MAX_COLUMN_WIDTH, 3]


def test_long_cell_is_truncated_with_ellipsis():
    """Long cells are cut to the cap with an ellipsis."""
    lines = format_table_lines(["text"], [["y" * 45]])
    assert lines[3] == "│ " + "y" * 27 + "... │"
    assert len(lines[3]) == len(lines[0])


def test_custom_max_width():
    """A custom cap is honoured."""
    lines = format_table_lines(["value"], [["abcdefghij"]], max_width=6)
    assert lines[3] == "│ abc... │"


@pytest.mark.parametrize("width", [0, 1, 2, 3, 4, 10])
def test_fit_cell_never_exceeds_width(width):
    """Fitted cells are exactly the requested width."""
    assert len(fit_cell("abcdefghijklmnop", width)) == width


def test_fit_cell_short_values_round_trip():
    """Short values are padded and keep their text."""
    for value in ["", "a", "hello", "with space"]:
        padded = fit_cell(value, 12)
        assert len(padded) == 12
        assert padded.rstrip() == value.rstrip()


def test_null_renders_as_literal():
    """NULL cells show the literal NULL text."""
    row = [cell_text(None), cell_text("")]
    lines = format_table_lines(["a", "b"], [row])
    assert "NULL" in lines[3]
    assert lines[3] == "│ NULL │   │"


def test_formatter_is_deterministic():
    """The same input always renders the same grid."""
    headers = ["id", "name", "note"]
    rows = [["1", "alice", "x" * 50], ["2", "bob", ""]]
    assert format_table(headers, rows) == format_table(headers, rows)
    assert format_table_lines(headers, rows) == format_table_lines(headers, rows)


def test_formatter_does_not_mutate_input():
    """Formatting leaves its input untouched."""
    headers = ["id"]
    rows = [["1"], ["2"]]
    format_table(headers, rows)
    assert headers == ["id"]
    assert rows == [["1"], ["2"]]


def test_wide_characters_keep_columns_aligned():
    """CJK cells count two columns per character so borders line up."""
    lines = format_table_lines(["name"], [["日本語テキスト"], ["abc"]])

    assert column_widths(["name"], [["日本語テキスト"]]) == [14]
    assert len({get_cwidth(line) for line in lines}) == 1
    assert lines[3] == "│ 日本語テキスト │"
    assert lines[4] == "│ abc            │"


def test_wide_characters_are_truncated_by_display_width():
    """Truncation never splits a wide character past the column edge."""
    assert fit_cell("日本語テキスト", 6) == "日... "
    assert fit_cell("日本語", 3) == "日 "
    lines = format_table_lines(["id", "note"], [["1", "漢字" * 20]], max_width=10)
    assert len({get_cwidth(line) for line in lines}) == 1
    assert lines[3] == "│ 1  │ 漢字漢...  │"
