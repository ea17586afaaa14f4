"""Keyboard mapping for the TUI.

Keys:
  up/k, down/j        move the cursor or scroll one line
  pageup/u, pagedown/d  page (half a screen when scrolling results)
  home/g, end/G       jump to the first/last line
  enter/space         select table, dismiss error
  esc                 back to the table list, dismiss error
  :                   enter query mode
  r                   reload the table list or refresh the current table
  q / ctrl-c          quit

Query mode:
  printable keys edit the query, backspace deletes, ctrl-u clears,
  enter runs it, esc leaves, ctrl-c quits.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys

from .events import Action, ClearLine, DeleteBackward, Event, InsertText, KeyAction
from .state import Mode

if TYPE_CHECKING:
    from .router import Router

NAV_KEYS: dict[str, Action] = {
    "up": Action.UP,
    "k": Action.UP,
    "down": Action.DOWN,
    "j": Action.DOWN,
    "pageup": Action.PAGE_UP,
    "u": Action.PAGE_UP,
    "pagedown": Action.PAGE_DOWN,
    "d": Action.PAGE_DOWN,
    "home": Action.TOP,
    "g": Action.TOP,
    "end": Action.BOTTOM,
    "G": Action.BOTTOM,
    "enter": Action.SELECT,
    " ": Action.SELECT,
    "escape": Action.ESCAPE,
    ":": Action.QUERY,
    "r": Action.REFRESH,
    "q": Action.QUIT,
    "c-c": Action.QUIT,
}

QUERY_KEYS: dict[str, Action] = {
    "enter": Action.SUBMIT,
    "escape": Action.ESCAPE,
    "c-c": Action.QUIT,
}


def event_for_key(key: str, mode: Mode, data: str = "") -> Event | None:
    """Translate a key press into a session event for the given mode.

    `data` is the text the key produced, used for typing in query mode.
    """
    if mode is Mode.QUERY:
        if key in QUERY_KEYS:
            return KeyAction(QUERY_KEYS[key])
        if key in ("backspace", "c-h"):
            return DeleteBackward()
        if key == "c-u":
            return ClearLine()
        if key == Keys.BracketedPaste.value:
            text = " ".join(data.split())
            return InsertText(text) if text else None
        if data and data.isprintable():
            return InsertText(data)
        return None

    action = NAV_KEYS.get(key)
    return KeyAction(action) if action is not None else None


def build_key_bindings(router: Router) -> KeyBindings:
    kb = KeyBindings()
    in_query = Condition(lambda: router.session.mode is Mode.QUERY)

    def _feed(key: str, data: str = "") -> None:
        event = event_for_key(key, router.session.mode, data)
        if event is not None:
            router.handle(event)

    def _bind(key: str, filter) -> None:
        @kb.add(key, filter=filter)
        def _handler(event):
            _feed(key, event.data)
            if router.session.closed:
                event.app.exit()

    for key in NAV_KEYS:
        _bind(key, ~in_query)
    for key in (*QUERY_KEYS, "backspace", "c-u"):
        _bind(key, in_query)

    @kb.add(Keys.Any, filter=in_query)
    def _insert(event):
        _feed("<any>", event.data)

    @kb.add(Keys.BracketedPaste, filter=in_query)
    def _paste(event):
        _feed(Keys.BracketedPaste.value, event.data)

    return kb
