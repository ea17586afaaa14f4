"""Bordered text grid for result sets."""
from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit.utils import get_cwidth

MAX_COLUMN_WIDTH = 30
ELLIPSIS = "..."
NO_DATA = "No data available"


def column_widths(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    max_width: int = MAX_COLUMN_WIDTH,
) -> list[int]:
    """Widest header or cell per column in terminal columns, capped at `max_width`.

    Wide (CJK, emoji) characters count as two columns.
    """
    widths = [get_cwidth(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], get_cwidth(cell))
    return [min(w, max_width) for w in widths]


def _cut(text: str, width: int) -> str:
    # Longest prefix that fits in `width` columns.
    used = 0
    for i, ch in enumerate(text):
        used += get_cwidth(ch)
        if used > width:
            return text[:i]
    return text


def fit_cell(text: str, width: int) -> str:
    """Pad or truncate `text` to exactly `width` terminal columns."""
    size = get_cwidth(text)
    if size > width:
        if width <= len(ELLIPSIS):
            text = _cut(text, width)
        else:
            text = _cut(text, width - len(ELLIPSIS)) + ELLIPSIS
        size = get_cwidth(text)
    return text + " " * (width - size)



def _border(widths: Sequence[int], left: str, mid: str, right: str) -> str:
    return left + mid.join("─" * (w + 2) for w in widths) + right


def _content(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "│" + "".join(f" {fit_cell(cell, w)} │" for cell, w in zip(cells, widths))


def format_table_lines(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    max_width: int = MAX_COLUMN_WIDTH,
) -> list[str]:
    """Render headers and rows as grid lines.

    Layout is top border, header row, separator, then one line per row.
    Without headers the grid collapses to a single "no data" line.
    """
    if not headers:
        return [NO_DATA]

    widths = column_widths(headers, rows, max_width)
    lines = [
        _border(widths, "┌", "┬", "┐"),
        _content(headers, widths),
        _border(widths, "├", "┼", "┤"),
    ]
    lines.extend(_content(row, widths) for row in rows)
    return lines


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    max_width: int = MAX_COLUMN_WIDTH,
) -> str:
    return "\n".join(format_table_lines(headers, rows, max_width))
