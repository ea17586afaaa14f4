"""Reusable render pieces for the TUI.

Screens return prompt_toolkit style fragments (`(style, text)` pairs). All
presentation constants come from a `RenderConfig` passed in by the caller.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable

from prompt_toolkit.styles import Style

from .formatter import MAX_COLUMN_WIDTH

if TYPE_CHECKING:
    from .state import Session

Fragments = list[tuple[str, str]]
Screen = Callable[["Session", "RenderConfig"], Fragments]


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_STYLES = {
    "title": "fg:#ff5fd7 bold",          # Pink accent
    "selected": "fg:#ff87d7 bold",
    "header": "fg:#ffffff bold",
    "grid": "",
    "help": "fg:#8a8a8a",
    "error": "fg:#ff5f5f bold",
    "loading": "fg:#00b4d8",
    "prompt": "fg:#00b4d8 bold",
    "placeholder": "fg:#6c6c6c italic",
    "empty": "fg:#d7af00",
}


@dataclass(frozen=True)
class RenderConfig:
    """Immutable presentation settings handed to every screen."""

    max_column_width: int = MAX_COLUMN_WIDTH
    tables_title: str = "🗄️  Database Tables"
    query_prompt: str = "SQL> "
    query_placeholder: str = "Enter SQL query (e.g., SELECT * FROM users)..."
    cursor_marker: str = "> "
    styles: Mapping[str, str] = field(default_factory=lambda: DEFAULT_STYLES)

    def __post_init__(self):
        # Frozen all the way down, detached from the caller's dict.
        object.__setattr__(self, "styles", MappingProxyType(dict(self.styles)))

    def style(self) -> Style:
        return Style.from_dict(dict(self.styles))

    def cls(self, name: str) -> str:
        return f"class:{name}"


# ═══════════════════════════════════════════════════════════════════════════════
# SHARED PIECES
# ═══════════════════════════════════════════════════════════════════════════════

def render_title(config: RenderConfig, title: str) -> Fragments:
    return [(config.cls("title"), title), ("", "\n\n")]


def render_help(config: RenderConfig, text: str) -> Fragments:
    return [("", "\n"), (config.cls("help"), text)]


def render_loading(session: Session, config: RenderConfig) -> Fragments:
    """Loading overlay shown while a background load is outstanding."""
    return [
        (config.cls("loading"), "Loading..."),
        ("", "\n\n"),
        (config.cls("help"), "Press q to quit"),
    ]


def render_error(session: Session, config: RenderConfig) -> Fragments:
    """Error banner for a failed load.

    Dismissing it returns to whatever mode the session is in.
    """
    return [
        (config.cls("error"), f"Error: {session.last_error}"),
        ("", "\n\n"),
        (config.cls("help"), "Esc/Enter: Dismiss • q: Quit"),
    ]
