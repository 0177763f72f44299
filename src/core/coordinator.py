# core/coordinator.py
from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from core.dispatch import Dispatcher
from core.errors import AppError, DeleteFailure, ErrorKind, FetchFailure, as_app_error
from core.import_coordinator import ImportCoordinator
from core.models import ImportResult
from core.pagination import PaginationController
from core.playback import PlaybackSession
from core.state import AppState
from core.track_source import SourceMode, TrackSource
from db.models import Track

logger = logging.getLogger(__name__)


class LibraryCoordinator(QObject):
    """
    Composes the track source, pagination, imports and playback, and owns
    the rules that cross them:

      - a deleted track leaves playback before it leaves the track lists;
      - auto-advance follows the tracks currently on screen;
      - every failure lands in the single notification slot.
    """
    deleteFinished = Signal(int, bool)   # track_id, ok

    def __init__(self, app_state: AppState, backend, dispatcher: Dispatcher, element, config=None, parent=None):
        super().__init__(parent)
        self.app_state = app_state
        self.backend = backend
        self.dispatcher = dispatcher
        self.config = config

        page_size = config.page_size if config else 10
        self.track_source = TrackSource(backend, dispatcher, page_size=page_size, parent=self)
        self.pagination = PaginationController(self.track_source)
        self.imports = ImportCoordinator(backend, dispatcher, self.track_source, parent=self)

        session_kwargs = {}
        if config is not None:
            session_kwargs = dict(volume=config.default_volume, auto_play_next=config.auto_play_next)
        self.playback = PlaybackSession(
            element,
            ordering=lambda: self.track_source.visible_tracks,
            parent=self,
            **session_kwargs,
        )

        self.track_source.failed.connect(self._on_failure)
        self.playback.failed.connect(self._on_failure)
        self.imports.finished.connect(self._on_import_finished)

    # ------------------ browsing ------------------
    def start(self) -> None:
        self.track_source.set_library_mode()

    def search(self, query: str) -> None:
        self.track_source.set_search_mode(query)

    def show_library(self) -> None:
        self.track_source.set_library_mode()

    def paginate(self, page: int) -> bool:
        return self.pagination.paginate(page)

    # ------------------ playback ------------------
    def play_track(self, track: Track) -> None:
        self.playback.select_track(track)

    def play_random(self) -> None:
        if self.track_source.mode is SourceMode.SEARCH:
            self.playback.play_random(self.track_source.search_results)
            return

        self.dispatcher.submit(
            self.backend.get_random_track,
            self._on_random_track,
            lambda exc: self._on_failure(as_app_error(exc, FetchFailure)),
        )

    def _on_random_track(self, track: Track | None) -> None:
        if track is None:
            logger.info("Library is empty, nothing to play")
            return
        self.playback.select_track(track)

    def set_auto_play_next(self, enabled: bool) -> None:
        self.playback.set_auto_play_next(enabled)

    # ------------------ deletion ------------------
    def delete_track(self, track_id: int) -> None:
        self.dispatcher.submit(
            lambda: self.backend.delete_track(track_id),
            lambda _result: self._on_track_deleted(track_id),
            lambda exc: self._on_delete_failed(track_id, exc),
        )

    def _on_track_deleted(self, track_id: int) -> None:
        logger.info("Track deleted: %s", track_id)
        self.playback.on_track_deleted(track_id)
        self.track_source.remove_track(track_id)
        self.deleteFinished.emit(track_id, True)

    def _on_delete_failed(self, track_id: int, exc: Exception) -> None:
        self._on_failure(as_app_error(exc, DeleteFailure))
        self.deleteFinished.emit(track_id, False)

    # ------------------ imports ------------------
    def add_files(self, paths: list[str]) -> None:
        self.imports.add_files(paths)

    def add_folder(self, path: str) -> None:
        self.imports.add_folder(path)

    def _on_import_finished(self, result: ImportResult) -> None:
        if result.ok:
            self.app_state.notify("Import complete", result.summary.text, "success")
        else:
            self._on_failure(result.error)

    # ------------------ misc ------------------
    def open_data_dir(self) -> None:
        if self.config is None:
            return
        self.backend.reveal_in_file_manager(self.config.app_data_dir)

    def dismiss_notification(self) -> None:
        self.app_state.dismiss_notification()

    def _on_failure(self, error: AppError) -> None:
        if error.kind is ErrorKind.ATTACH:
            logger.error("Playback failed: %s", error.message)
        self.app_state.notify_error(error)

    def shutdown(self) -> None:
        self.imports.shutdown()
        self.playback.stop()
