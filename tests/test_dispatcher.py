"""Tests for background load dispatching."""
from __future__ import annotations

import os
import queue
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path

import pytest

from browseql.db import Gateway, GatewayError
from browseql.tui.dispatcher import Dispatcher
from browseql.tui.events import Execute, LoadFailed, LoadRows, LoadTables, RowsLoaded, TablesLoaded


def test_resolve_load_tables(gateway: Gateway):
    """LoadTables resolves to the sorted table list."""
    dispatcher = Dispatcher(gateway)
    try:
        assert dispatcher.resolve(LoadTables()) == TablesLoaded(["orders", "users"])
    finally:
        dispatcher.shutdown()


def test_resolve_load_rows_applies_limit(gateway: Gateway):
    """LoadRows uses the configured row limit."""
    dispatcher = Dispatcher(gateway, row_limit=2)
    try:
        event = dispatcher.resolve(LoadRows("users"))
    finally:
        dispatcher.shutdown()

    assert isinstance(event, RowsLoaded)
    assert event.table == "users"
    assert event.statement is None
    assert event.headers == ["id", "name"]
    assert event.rows == [["1", "alice"], ["2", "bob"]]


def test_resolve_execute(gateway: Gateway):
    """Execute resolves to the statement's result."""
    dispatcher = Dispatcher(gateway)
    try:
        event = dispatcher.resolve(Execute("DELETE FROM users"))
    finally:
        dispatcher.shutdown()

    assert event == RowsLoaded(
        ["Result"],
        [["Query executed successfully"], ["Rows affected: 3"]],
        statement="DELETE FROM users",
    )


def test_resolve_failures_pass_messages_through(gateway: Gateway):
    """Gateway failures become LoadFailed with their message."""
    dispatcher = Dispatcher(gateway)
    try:
        fetch = dispatcher.resolve(LoadRows("nope"))
        query = dispatcher.resolve(Execute("SELECT * FROM nope"))
    finally:
        dispatcher.shutdown()

    assert isinstance(fetch, LoadFailed)
    assert fetch.message == "no such table: nope"
    assert isinstance(query, LoadFailed)
    assert query.message == "SQL error: no such table: nope"


def test_unexpected_exception_becomes_failure():
    """Unexpected exceptions still resolve to LoadFailed."""
    class _Broken:
        def list_tables(self):
            raise RuntimeError("boom")

    dispatcher = Dispatcher(_Broken())
    try:
        assert dispatcher.resolve(LoadTables()) == LoadFailed("boom")
    finally:
        dispatcher.shutdown()


def test_submit_posts_one_event_and_notifies(gateway: Gateway):
    """Each request posts exactly one event and wakes the UI."""
    channel: queue.SimpleQueue = queue.SimpleQueue()
    woken = []
    dispatcher = Dispatcher(gateway, channel, notify=lambda: woken.append(True))
    try:
        dispatcher.submit(LoadTables()).result(timeout=5)
        dispatcher.submit(LoadRows("users")).result(timeout=5)
    finally:
        dispatcher.shutdown(wait=True)

    first = channel.get(timeout=1)
    second = channel.get(timeout=1)
    assert isinstance(first, TablesLoaded)
    assert isinstance(second, RowsLoaded)
    assert channel.empty()
    assert woken == [True, True]


def test_failing_notify_still_delivers(gateway: Gateway):
    """A failing wake-up callback does not lose the event."""
    def _boom():
        raise RuntimeError("no app")

    dispatcher = Dispatcher(gateway, notify=_boom)
    try:
        dispatcher.submit(LoadTables()).result(timeout=5)
    finally:
        dispatcher.shutdown(wait=True)

    assert isinstance(dispatcher.channel.get(timeout=1), TablesLoaded)


class _Blocking:
    """Gateway whose table listing blocks until it is interrupted."""

    def __init__(self):
        self.started = threading.Event()
        self.interrupted = threading.Event()

    def list_tables(self):
        self.started.set()
        if not self.interrupted.wait(5):
            return []
        raise GatewayError("interrupted")

    def interrupt(self):
        self.interrupted.set()


def test_shutdown_interrupts_running_load():
    """Shutting down aborts the running load and cancels queued ones."""
    gw = _Blocking()
    dispatcher = Dispatcher(gw)
    running = dispatcher.submit(LoadTables())
    queued = dispatcher.submit(LoadTables())
    assert gw.started.wait(5)

    started = time.monotonic()
    dispatcher.shutdown(wait=True)

    assert time.monotonic() - started < 2
    assert running.done()
    assert queued.cancelled()
    assert dispatcher.channel.get(timeout=1) == LoadFailed("interrupted")
    assert dispatcher.channel.empty()


def test_submit_after_shutdown_is_rejected(gateway: Gateway):
    """No new work is accepted once the dispatcher is shut down."""
    dispatcher = Dispatcher(gateway)
    dispatcher.shutdown(wait=True)
    with pytest.raises(RuntimeError):
        dispatcher.submit(LoadTables())


def test_quit_during_slow_load_exits_promptly():
    """Quitting while a load that cannot be interrupted is running still exits quickly."""
    project_root = Path(__file__).resolve().parents[1]
    script = textwrap.dedent(
        """
        import time

        from browseql.tui.dispatcher import Dispatcher
        from browseql.tui.events import Action, KeyAction
        from browseql.tui.router import Router


        class Slow:
            def list_tables(self):
                time.sleep(30)
                return []


        router = Router(Dispatcher(Slow()))
        router.start()
        time.sleep(0.2)
        router.handle(KeyAction(Action.QUIT))
        router.close()
        """
    )
    env = dict(os.environ, PYTHONPATH=str(project_root))

    started = time.monotonic()
    result = subprocess.run(
        [sys.executable, "-c", script],
        cwd=project_root,
        env=env,
        capture_output=True,
        text=True,
        timeout=20,
    )
    elapsed = time.monotonic() - started

    assert result.returncode == 0, result.stderr
    assert elapsed < 5
