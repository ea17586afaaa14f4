"""Result grid screen."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..components import render_help, render_title
from ..formatter import format_table_lines
from ..router import register_screen
from ..state import Mode

if TYPE_CHECKING:
    from ..components import Fragments, RenderConfig
    from ..state import Session

HELP_TABLE = "↑↓/jk: Scroll • u/d: Half page • r: Refresh • Esc: Back • q: Quit"
HELP_QUERY = "↑↓/jk: Scroll • u/d: Half page • Esc: Back • q: Quit"

# Index of the header row within the grid lines.
_HEADER_LINE = 1


def title_for(session: Session) -> str:
    if session.selected_table:
        return f"Table: {session.selected_table}"
    if session.result_query:
        return f"Query: {session.result_query}"
    return "Result"


@register_screen(Mode.DATA)
def render_data(session: Session, config: RenderConfig) -> Fragments:
    rows = len(session.result_rows)
    title = f"{title_for(session)}  ({rows} row{'s' if rows != 1 else ''})"
    out = render_title(config, title)

    lines = format_table_lines(session.result_headers, session.result_rows, config.max_column_width)
    height = session.viewport_height
    offset = max(0, min(session.viewport_offset, max(0, len(lines) - height)))
    for i, line in enumerate(lines[offset : offset + height], start=offset):
        style = config.cls("header") if i == _HEADER_LINE and session.result_headers else config.cls("grid")
        out.append((style, line))
        out.append(("", "\n"))

    out.extend(render_help(config, HELP_TABLE if session.selected_table else HELP_QUERY))
    return out
