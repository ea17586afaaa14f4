"""Main loop and per-mode screen registry for the TUI."""
from __future__ import annotations

import logging
import queue
from typing import TYPE_CHECKING, Callable

from .components import RenderConfig, Screen, render_error, render_loading
from .events import Event, Request
from .machine import new_session, transition
from .state import Mode, Session

if TYPE_CHECKING:
    from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class Router:
    """Owns the session and is the only place it is mutated.

    Input events are handled as they arrive; resolved background loads are
    taken from the dispatcher's channel in order by `drain()`. Requests
    produced by a transition are handed to the dispatcher.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        config: RenderConfig | None = None,
        session: Session | None = None,
    ):
        """Initialize router with dependencies.

        Args:
            dispatcher: Dispatcher running background loads
            config: Presentation constants for rendering
            session: Existing session; a fresh one is created if omitted
        """
        self.dispatcher = dispatcher
        self.config = config or RenderConfig()
        self._initial: Request | None = None
        if session is None:
            session, self._initial = new_session()
        self.session = session

    @property
    def channel(self) -> queue.SimpleQueue:
        return self.dispatcher.channel

    def start(self) -> None:
        """Issue the load that a fresh session starts with."""
        if self._initial is not None:
            self.dispatcher.submit(self._initial)
            self._initial = None

    def handle(self, event: Event) -> Request | None:
        """Apply one event and dispatch whatever it triggers."""
        request = transition(self.session, event)
        if request is not None:
            self.dispatcher.submit(request)
        return request

    def drain(self) -> int:
        """Apply every resolved load waiting on the channel.

        Returns the number of events taken.
        """
        count = 0
        while True:
            try:
                event = self.channel.get_nowait()
            except queue.Empty:
                return count
            count += 1
            self.handle(event)

    def render(self) -> list[tuple[str, str]]:
        """Produce the full screen for the current session."""
        if self.session.loading:
            return render_loading(self.session, self.config)
        if self.session.last_error:
            return render_error(self.session, self.config)

        screen_fn = SCREENS.get(self.session.mode)
        if screen_fn is None:
            logger.warning("No screen registered for mode %s", self.session.mode)
            return [("", f"Unknown mode: {self.session.mode.value}")]
        return screen_fn(self.session, self.config)

    def close(self) -> None:
        # Bounded wait; the worker is a daemon, so a stuck load never blocks exit.
        self.dispatcher.shutdown(wait=True)


# Screen registry - maps modes to render functions
SCREENS: dict[Mode, Screen] = {}


def register_screen(mode: Mode):
    """Decorator to register a screen renderer.

    Usage:
        @register_screen(Mode.TABLES)
        def render_tables(session: Session, config: RenderConfig) -> list[tuple[str, str]]:
            ...
    """
    def decorator(fn: Callable[[Session, RenderConfig], list[tuple[str, str]]]):
        SCREENS[mode] = fn
        return fn
    return decorator
