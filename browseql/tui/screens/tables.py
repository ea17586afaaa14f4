"""Table list screen."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..components import render_help, render_title
from ..router import register_screen
from ..state import Mode

if TYPE_CHECKING:
    from ..components import Fragments, RenderConfig
    from ..state import Session

HELP = "↑↓/jk: Navigate • Enter: Select • :: Query • r: Reload • q: Quit"
NO_TABLES = "No tables found in this database."


def _window(count: int, cursor: int, height: int) -> tuple[int, int]:
    """Index range of the list to show so the cursor stays visible."""
    if count <= height:
        return 0, count
    start = min(max(0, cursor - height + 1), count - height)
    return start, start + height


@register_screen(Mode.TABLES)
def render_tables(session: Session, config: RenderConfig) -> Fragments:
    out = render_title(config, config.tables_title)

    if not session.tables:
        out.append((config.cls("empty"), NO_TABLES))
        out.append(("", "\n"))
    else:
        start, end = _window(len(session.tables), session.cursor, session.viewport_height)
        pad = " " * len(config.cursor_marker)
        for i in range(start, end):
            name = session.tables[i]
            if i == session.cursor:
                out.append((config.cls("selected"), f"{config.cursor_marker}{name}"))
            else:
                out.append(("", f"{pad}{name}"))
            out.append(("", "\n"))

    out.extend(render_help(config, HELP))
    return out
