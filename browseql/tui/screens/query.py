"""Query input screen."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..components import render_help, render_title
from ..router import register_screen
from ..state import Mode

if TYPE_CHECKING:
    from ..components import Fragments, RenderConfig
    from ..state import Session

HELP = "Enter: Run • Ctrl-U: Clear • Esc: Back • Ctrl-C: Quit"


@register_screen(Mode.QUERY)
def render_query(session: Session, config: RenderConfig) -> Fragments:
    out = render_title(config, "Query")
    out.append((config.cls("prompt"), config.query_prompt))
    if session.query_text:
        out.append(("", session.query_text))
        out.append(("reverse", " "))
    else:
        out.append(("reverse", " "))
        out.append((config.cls("placeholder"), config.query_placeholder))
    out.append(("", "\n"))
    out.extend(render_help(config, HELP))
    return out
