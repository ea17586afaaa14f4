"""Interactive terminal browser for SQLite databases."""

__version__ = "0.1.0"
