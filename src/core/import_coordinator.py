# core/import_coordinator.py
from __future__ import annotations

import itertools
import logging
from contextlib import ExitStack

from PySide6.QtCore import QObject, Signal

from core.dispatch import Dispatcher
from core.errors import ImportFailure, as_app_error
from core.models import ImportResult, ImportSummary

logger = logging.getLogger(__name__)


class ImportCoordinator(QObject):
    """
    Runs add-files / add-folder jobs and tracks the visible one.

    The progress subscription is held while at least one job is in flight
    and released when the last one settles or on shutdown(). Whatever the
    outcome, the track source is refreshed afterwards: files imported
    before a failure stay imported.
    """
    progressChanged = Signal(float, str)   # percent, file name
    busyChanged = Signal(bool)
    finished = Signal(object)              # ImportResult

    def __init__(self, backend, dispatcher: Dispatcher, track_source, parent=None):
        super().__init__(parent)
        self.backend = backend
        self.dispatcher = dispatcher
        self.track_source = track_source

        self.progress_percent = 0.0
        self.current_file_name = ""
        self.last_result: ImportResult | None = None

        self._job_ids = itertools.count(1)
        self._current_job = 0
        self._in_flight: set[int] = set()
        self._subscription: ExitStack | None = None
        self._disposed = False

    @property
    def is_busy(self) -> bool:
        return bool(self._in_flight)

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None

    # -------------------------
    # jobs
    # -------------------------
    def add_files(self, paths: list[str]) -> int | None:
        paths = [p for p in (paths or []) if p]
        if not paths:
            return None

        job_id = next(self._job_ids)
        backend = self.backend
        self._run(job_id, lambda: backend.ingest_files(paths, job_id))
        return job_id

    def add_folder(self, path: str) -> int | None:
        if not path:
            return None
        job_id = next(self._job_ids)
        backend = self.backend
        self._run(job_id, lambda: backend.ingest_folder(path, job_id))
        return job_id

    def _run(self, job_id: int, job) -> None:
        logger.info("Import job %s started", job_id)
        self._current_job = job_id
        self.progress_percent = 0.0
        self.current_file_name = ""
        self.last_result = None
        self.busyChanged.emit(True)
        self.progressChanged.emit(0.0, "")

        with ExitStack() as stack:
            if self._subscription is None:
                stack.enter_context(self.backend.progress_stream.subscribe(self._on_progress))

            self._in_flight.add(job_id)
            try:
                self.dispatcher.submit(
                    job,
                    lambda summary: self._on_settled(job_id, summary, None),
                    lambda exc: self._on_settled(job_id, None, exc),
                )
            except Exception:
                self._in_flight.discard(job_id)
                raise

            # a job may settle inside submit(); then the stack releases on exit
            if job_id in self._in_flight and self._subscription is None:
                self._subscription = stack.pop_all()

    def shutdown(self) -> None:
        self._disposed = True
        self._release_subscription()

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    # -------------------------
    # events
    # -------------------------
    def _on_progress(self, event: ImportProgress) -> None:
        if self._disposed or event.job_id != self._current_job:
            return
        self.progress_percent = min(100.0, max(0.0, float(event.progress_percent)))
        self.current_file_name = event.file_name
        self.progressChanged.emit(self.progress_percent, self.current_file_name)

    def _on_settled(self, job_id: int, summary: str | None, exc: Exception | None) -> None:
        self._in_flight.discard(job_id)
        if not self._in_flight:
            self._release_subscription()
        if self._disposed:
            return

        if exc is None:
            result = ImportResult(job_id=job_id, summary=ImportSummary(summary or ""))
            logger.info("Import job %s finished", job_id)
        else:
            result = ImportResult(job_id=job_id, error=as_app_error(exc, ImportFailure))
            logger.warning("Import job %s failed", job_id)

        if job_id == self._current_job:
            self.progress_percent = 0.0
            self.current_file_name = ""
            self.last_result = result
            self.progressChanged.emit(0.0, "")
        if not self._in_flight:
            self.busyChanged.emit(False)

        self.track_source.refresh()
        self.finished.emit(result)
