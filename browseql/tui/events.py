"""Events consumed by the session state machine and the requests it emits."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Action(str, Enum):
    """Logical key actions, independent of the physical key bindings."""

    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOP = "top"
    BOTTOM = "bottom"
    SELECT = "select"
    ESCAPE = "escape"
    QUERY = "query"
    REFRESH = "refresh"
    SUBMIT = "submit"
    QUIT = "quit"


# ── input events ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KeyAction:
    action: Action


@dataclass(frozen=True)
class InsertText:
    text: str


@dataclass(frozen=True)
class DeleteBackward:
    pass


@dataclass(frozen=True)
class ClearLine:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


# ── resolved background loads ───────────────────────────────────────────────

@dataclass(frozen=True)
class TablesLoaded:
    tables: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RowsLoaded:
    """A result set; `table` is set for table fetches, `statement` for queries."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    table: str | None = None
    statement: str | None = None


@dataclass(frozen=True)
class LoadFailed:
    message: str


TextEdit = Union[InsertText, DeleteBackward, ClearLine]
Resolved = Union[TablesLoaded, RowsLoaded, LoadFailed]
Event = Union[KeyAction, InsertText, DeleteBackward, ClearLine, Resize, TablesLoaded, RowsLoaded, LoadFailed]


# ── background requests ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class LoadTables:
    pass


@dataclass(frozen=True)
class LoadRows:
    table: str


@dataclass(frozen=True)
class Execute:
    statement: str


Request = Union[LoadTables, LoadRows, Execute]
