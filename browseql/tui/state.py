"""Session state for one running browser instance."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Mode(str, Enum):
    """Top-level view of the session."""

    TABLES = "tables"
    DATA = "data"
    QUERY = "query"


# Lines of the screen not available to grid content (title, spacing, help).
CHROME_LINES = 4


@dataclass
class Session:
    """Live UI state, owned and mutated by the main loop only.

    `loading` and `last_error` are overlays on top of `mode`; at most one of
    them is active at a time.
    """

    mode: Mode = Mode.TABLES
    tables: list[str] = field(default_factory=list)
    cursor: int = 0

    # Result set currently on display (a table or a query result)
    selected_table: str | None = None
    result_query: str | None = None
    result_headers: list[str] = field(default_factory=list)
    result_rows: list[list[str]] = field(default_factory=list)
    viewport_offset: int = 0

    query_text: str = ""

    loading: bool = True
    last_error: str | None = None
    closed: bool = False

    # Terminal size
    width: int = 80
    height: int = 24

    @property
    def viewport_height(self) -> int:
        return max(1, self.height - CHROME_LINES)

    @property
    def content_lines(self) -> int:
        """Number of grid lines the current result renders to."""
        if not self.result_headers:
            return 1
        return len(self.result_rows) + 3

    @property
    def max_offset(self) -> int:
        return max(0, self.content_lines - self.viewport_height)

    @property
    def has_result(self) -> bool:
        return bool(self.result_headers)

    def start_loading(self) -> None:
        self.loading = True
        self.last_error = None

    def fail(self, message: str) -> None:
        self.loading = False
        self.last_error = message or "unknown error"

    def clear_result(self) -> None:
        """Drop the displayed result set."""
        self.selected_table = None
        self.result_query = None
        self.result_headers = []
        self.result_rows = []
        self.viewport_offset = 0
