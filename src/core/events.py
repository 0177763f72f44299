# core/events.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from PySide6.QtCore import QObject, Signal

from core.models import ImportProgress

logger = logging.getLogger(__name__)


class ProgressStream(QObject):
    """
    Named "progress" event stream fed by the import backend.

    `publish` may be called from a worker thread; subscribers that are
    methods of QObjects living on the GUI thread receive the event queued.
    """
    progress = Signal(object)   # ImportProgress

    def publish(self, event: ImportProgress) -> None:
        self.progress.emit(event)

    @contextmanager
    def subscribe(self, handler: Callable[[ImportProgress], None]) -> Iterator[None]:
        self.progress.connect(handler)
        logger.debug("progress stream: subscribed %r", handler)
        try:
            yield
        finally:
            self.progress.disconnect(handler)
            logger.debug("progress stream: released %r", handler)
