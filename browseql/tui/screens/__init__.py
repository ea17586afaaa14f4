"""Screen modules for the TUI."""
from __future__ import annotations

# Import all screen modules to register them with the router
from . import (
    data,
    query,
    tables,
)

__all__ = [
    "data",
    "query",
    "tables",
]
