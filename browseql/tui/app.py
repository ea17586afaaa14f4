"""Full-screen prompt_toolkit application wiring."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from prompt_toolkit.application import Application
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl

from .components import RenderConfig
from .dispatcher import Dispatcher
from .events import Resize
from .keymap import build_key_bindings
from .router import Router

if TYPE_CHECKING:
    from ..db import Gateway

logger = logging.getLogger(__name__)


def build_application(router: Router) -> Application:
    """Create the application that renders `router` and feeds it input.

    Resolved loads are applied right before each redraw, so the session is
    only touched on the event loop.
    """
    control = FormattedTextControl(router.render, focusable=True, show_cursor=False)
    app: Application = Application(
        layout=Layout(Window(control, wrap_lines=False)),
        key_bindings=build_key_bindings(router),
        style=router.config.style(),
        full_screen=True,
        mouse_support=False,
    )
    # Esc is a binding of its own, so don't wait long for escape sequences.
    app.ttimeoutlen = 0.05

    def _before_render(_app: Application) -> None:
        size = _app.output.get_size()
        if (size.columns, size.rows) != (router.session.width, router.session.height):
            router.handle(Resize(size.columns, size.rows))
        router.drain()

    app.before_render += _before_render
    router.dispatcher.notify = app.invalidate
    return app


def run(gateway: Gateway, *, row_limit: int, max_column_width: int, title: str | None = None) -> None:
    """Run the interactive browser until the user quits."""
    from . import screens  # noqa: F401

    config = RenderConfig(max_column_width=max_column_width)
    if title:
        config = replace(config, tables_title=f"{config.tables_title} · {title}")

    dispatcher = Dispatcher(gateway, row_limit=row_limit)
    router = Router(dispatcher, config)
    app = build_application(router)

    logger.info("Starting UI (row_limit=%d)", row_limit)
    try:
        app.run(pre_run=router.start)
    finally:
        router.close()
        logger.info("UI stopped")
