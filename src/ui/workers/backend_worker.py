# ui/workers/backend_worker.py
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, QThread, Signal, Slot

from core.errors import AppError

logger = logging.getLogger(__name__)


class BackendWorker(QThread):
    succeeded = Signal(int, object)   # ticket, result
    failed = Signal(int, object)      # ticket, exception

    def __init__(self, ticket: int, fn: Callable[[], Any], parent=None):
        super().__init__(parent)
        self.ticket = ticket
        self.fn = fn

    def run(self):
        try:
            result = self.fn()
        except Exception as e:
            if isinstance(e, AppError):
                logger.debug("worker %s failed: %s", self.ticket, e.message)
            else:
                logger.exception("worker %s raised unexpectedly", self.ticket)
            self.failed.emit(self.ticket, e)
            return
        self.succeeded.emit(self.ticket, result)


class WorkerDispatcher(QObject):
    """
    Runs each backend call on its own QThread.

    Worker signals are connected to slots of this object, which lives on
    the GUI thread, so callbacks always run there (queued connection).
    Workers are parented to the dispatcher and delete themselves once
    their thread has finished.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tickets = itertools.count(1)
        self._pending: dict[int, tuple[Callable, Callable]] = {}

    def submit(self, fn, on_done, on_error) -> None:
        ticket = next(self._tickets)
        worker = BackendWorker(ticket, fn, parent=self)
        worker.succeeded.connect(self._on_succeeded)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(worker.deleteLater)
        self._pending[ticket] = (on_done, on_error)
        worker.start()

    @Slot(int, object)
    def _on_succeeded(self, ticket: int, result) -> None:
        entry = self._pending.pop(ticket, None)
        if entry is None:
            return
        on_done, _on_error = entry
        on_done(result)

    @Slot(int, object)
    def _on_failed(self, ticket: int, exc) -> None:
        entry = self._pending.pop(ticket, None)
        if entry is None:
            return
        _on_done, on_error = entry
        on_error(exc)

    def wait_all(self, msecs: int = 3000) -> None:
        for worker in self.findChildren(BackendWorker):
            worker.wait(msecs)
