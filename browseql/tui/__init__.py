"""Terminal UI for browsing a SQLite database.

The session state machine lives in `machine`, background loads in
`dispatcher`, and the main loop plus screen registry in `router`.
"""
from .dispatcher import Dispatcher
from .router import Router
from .state import Mode, Session

__all__ = ["Dispatcher", "Mode", "Router", "Session"]
