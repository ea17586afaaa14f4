"""Session state machine.

`transition()` applies one event to the session in place and returns the
background request it triggers, if any. It is only ever called from the main
loop, so a transition is never observed half-applied.

Rules that apply regardless of mode:

- Quit closes the session; every later event is discarded.
- Resize updates the terminal size and re-clamps the scroll position.
- Resolved loads always apply and always clear the loading overlay.
- While `loading` is set, mode-specific keys are ignored. This gate is what
  keeps at most one background load outstanding.
- While an error banner is shown, Esc/Enter dismiss it and other mode keys
  are ignored.
"""
from __future__ import annotations

import logging

from .events import (
    Action,
    ClearLine,
    DeleteBackward,
    Event,
    Execute,
    InsertText,
    KeyAction,
    LoadFailed,
    LoadRows,
    LoadTables,
    Request,
    Resize,
    RowsLoaded,
    TablesLoaded,
)
from .state import Mode, Session

logger = logging.getLogger(__name__)

_DISMISS = {Action.ESCAPE, Action.SELECT, Action.SUBMIT}


def new_session(width: int = 80, height: int = 24) -> tuple[Session, Request]:
    """Create the startup session together with its initial table load."""
    return Session(width=width, height=height), LoadTables()


def transition(session: Session, event: Event) -> Request | None:
    if session.closed:
        logger.debug("Discarding %s after quit", type(event).__name__)
        return None

    if isinstance(event, KeyAction) and event.action is Action.QUIT:
        session.closed = True
        return None
    if isinstance(event, Resize):
        _resize(session, event)
        return None
    if isinstance(event, (TablesLoaded, RowsLoaded, LoadFailed)):
        _resolve(session, event)
        return None
    if not isinstance(event, (KeyAction, InsertText, DeleteBackward, ClearLine)):
        raise TypeError(f"unhandled event: {event!r}")

    if session.loading:
        return None

    if session.last_error:
        if isinstance(event, KeyAction) and event.action in _DISMISS:
            session.last_error = None
        return None

    if session.mode is Mode.TABLES:
        return _tables_mode(session, event)
    if session.mode is Mode.DATA:
        return _data_mode(session, event)
    return _query_mode(session, event)


def _resize(session: Session, event: Resize) -> None:
    session.width = max(1, event.width)
    session.height = max(1, event.height)
    session.viewport_offset = min(session.viewport_offset, session.max_offset)


def _resolve(session: Session, event: TablesLoaded | RowsLoaded | LoadFailed) -> None:
    if isinstance(event, TablesLoaded):
        session.loading = False
        session.last_error = None
        session.tables = list(event.tables)
        session.cursor = min(session.cursor, max(len(session.tables) - 1, 0))
    elif isinstance(event, RowsLoaded):
        session.loading = False
        session.last_error = None
        session.result_headers = list(event.headers)
        session.result_rows = [list(row) for row in event.rows]
        session.selected_table = event.table
        session.result_query = event.statement
        session.viewport_offset = 0
        session.mode = Mode.DATA
    else:
        session.fail(event.message)


def _move(position: int, delta: int, upper: int) -> int:
    return max(0, min(position + delta, upper))


def _tables_mode(session: Session, event: Event) -> Request | None:
    if not isinstance(event, KeyAction):
        return None

    last = max(len(session.tables) - 1, 0)
    page = session.viewport_height
    action = event.action

    if action is Action.UP:
        session.cursor = _move(session.cursor, -1, last)
    elif action is Action.DOWN:
        session.cursor = _move(session.cursor, 1, last)
    elif action is Action.PAGE_UP:
        session.cursor = _move(session.cursor, -page, last)
    elif action is Action.PAGE_DOWN:
        session.cursor = _move(session.cursor, page, last)
    elif action is Action.TOP:
        session.cursor = 0
    elif action is Action.BOTTOM:
        session.cursor = last
    elif action is Action.SELECT:
        if session.tables:
            session.start_loading()
            return LoadRows(session.tables[session.cursor])
    elif action is Action.REFRESH:
        session.start_loading()
        return LoadTables()
    elif action is Action.QUERY:
        session.query_text = ""
        session.mode = Mode.QUERY
    return None


def _data_mode(session: Session, event: Event) -> Request | None:
    if not isinstance(event, KeyAction):
        return None

    half_page = max(1, session.viewport_height // 2)
    action = event.action

    if action is Action.UP:
        session.viewport_offset = _move(session.viewport_offset, -1, session.max_offset)
    elif action is Action.DOWN:
        session.viewport_offset = _move(session.viewport_offset, 1, session.max_offset)
    elif action is Action.PAGE_UP:
        session.viewport_offset = _move(session.viewport_offset, -half_page, session.max_offset)
    elif action is Action.PAGE_DOWN:
        session.viewport_offset = _move(session.viewport_offset, half_page, session.max_offset)
    elif action is Action.TOP:
        session.viewport_offset = 0
    elif action is Action.BOTTOM:
        session.viewport_offset = session.max_offset
    elif action is Action.REFRESH:
        if session.selected_table:
            session.start_loading()
            return LoadRows(session.selected_table)
    elif action is Action.ESCAPE:
        session.clear_result()
        session.mode = Mode.TABLES
    return None


def _query_mode(session: Session, event: Event) -> Request | None:
    if isinstance(event, InsertText):
        session.query_text += event.text
        return None
    if isinstance(event, DeleteBackward):
        session.query_text = session.query_text[:-1]
        return None
    if isinstance(event, ClearLine):
        session.query_text = ""
        return None

    action = event.action
    if action is Action.SUBMIT:
        statement = session.query_text.strip()
        if not statement:
            return None
        session.query_text = ""
        session.start_loading()
        return Execute(statement)
    if action is Action.ESCAPE:
        session.query_text = ""
        session.mode = Mode.TABLES
    return None
