from __future__ import annotations

import os
import queue
import sqlite3
import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `browseql/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """A small database: `users` (3 rows, 2 columns) and an empty `orders`."""
    path = tmp_path / "sample.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT);
        INSERT INTO users (id, name) VALUES (1, 'alice'), (2, 'bob'), (3, NULL);
        CREATE TABLE orders (id INTEGER PRIMARY KEY AUTOINCREMENT, user_id INTEGER, total REAL);
        """
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def gateway(sample_db: Path):
    from browseql.db import Gateway, connect

    gw = Gateway(connect(sample_db))
    yield gw
    gw.close()


class FakeDispatcher:
    """Records submitted requests instead of running them."""

    def __init__(self):
        self.channel: queue.SimpleQueue = queue.SimpleQueue()
        self.submitted: list = []
        self.notify = None
        self.closed = False

    def submit(self, request):
        self.submitted.append(request)

    def shutdown(self, wait: bool = False) -> None:
        self.closed = True


@pytest.fixture
def fake_dispatcher() -> FakeDispatcher:
    return FakeDispatcher()
