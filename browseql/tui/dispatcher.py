"""Background execution of storage requests."""
from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from typing import Callable

from ..db import Gateway, GatewayError
from .events import Execute, LoadFailed, LoadRows, LoadTables, Request, Resolved, RowsLoaded, TablesLoaded

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs gateway calls off the main loop and posts their outcome as events.

    Every submitted request produces exactly one resolved event on `channel`,
    in completion order. A single worker thread is used, so the SQLite
    connection is never touched concurrently.

    The worker is a daemon thread: a load still running when the user quits
    never keeps the process alive.
    """

    def __init__(
        self,
        gateway: Gateway,
        channel: queue.SimpleQueue | None = None,
        *,
        row_limit: int = 100,
        notify: Callable[[], None] | None = None,
    ):
        self.gateway = gateway
        self.channel: queue.SimpleQueue = channel if channel is not None else queue.SimpleQueue()
        self.row_limit = row_limit
        self.notify = notify
        self._requests: queue.SimpleQueue = queue.SimpleQueue()
        self._busy = threading.Event()
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._work, name="browseql-load", daemon=True)
        self._thread.start()

    @property
    def busy(self) -> bool:
        return self._busy.is_set()

    def submit(self, request: Request) -> Future:
        if self._stopped.is_set():
            raise RuntimeError("dispatcher is shut down")
        logger.debug("Dispatching %r", request)
        future: Future = Future()
        self._requests.put((request, future))
        return future

    def _work(self) -> None:
        while True:
            item = self._requests.get()
            if item is None:
                return
            request, future = item
            if self._stopped.is_set():
                future.cancel()
                continue
            if not future.set_running_or_notify_cancel():
                continue

            self._busy.set()
            try:
                self._run(request)
            except Exception as e:
                logger.exception("Posting %r failed", request)
                future.set_exception(e)
            else:
                future.set_result(None)
            finally:
                self._busy.clear()

    def _run(self, request: Request) -> None:
        event = self.resolve(request)
        self.channel.put(event)
        if self.notify is not None:
            try:
                self.notify()
            except Exception:
                logger.exception("Wake-up callback failed")

    def resolve(self, request: Request) -> Resolved:
        """Perform `request` synchronously and return its resolved event."""
        try:
            if isinstance(request, LoadTables):
                event: Resolved = TablesLoaded(self.gateway.list_tables())
            elif isinstance(request, LoadRows):
                headers, rows = self.gateway.fetch_rows(request.table, self.row_limit)
                event = RowsLoaded(headers, rows, table=request.table)
            elif isinstance(request, Execute):
                headers, rows = self.gateway.execute(request.statement)
                event = RowsLoaded(headers, rows, statement=request.statement)
            else:
                raise TypeError(f"unknown request: {request!r}")
        except Exception as e:
            logger.warning("%r failed: %s", request, e, exc_info=not isinstance(e, GatewayError))
            return LoadFailed(str(e) or type(e).__name__)

        logger.info("%r resolved: %s", request, type(event).__name__)
        return event

    def shutdown(self, wait: bool = False, timeout: float = 1.0) -> None:
        """Stop the worker.

        Queued requests are cancelled and a running one is interrupted when
        the gateway supports it. With `wait`, block up to `timeout` seconds
        for the worker to let go of the connection.
        """
        if not self._stopped.is_set():
            self._stopped.set()
            self._requests.put(None)
            interrupt = getattr(self.gateway, "interrupt", None)
            if self._busy.is_set() and interrupt is not None:
                logger.info("Interrupting running load")
                interrupt()
        if wait:
            self._thread.join(timeout)
