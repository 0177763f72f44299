# core/backend.py
from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import closing
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

from core.errors import DeleteFailure, FetchFailure, ImportFailure
from core.events import ProgressStream
from core.models import ImportProgress
from db import database
from db.models import Track
from library.scan_library import iter_audio_paths, read_track_metadata

logger = logging.getLogger(__name__)


def format_import_report(imported: int, skipped: int, errors: list[str]) -> str:
    lines = list(errors)
    lines.append(f"Imported {imported} file(s), skipped {skipped} already in the library.")
    return "\n".join(lines)


def file_error_line(path: str, reason: str) -> str:
    return f"Failed to add file '{path}': {reason}"


class LibraryBackend:
    """
    Command surface consumed by the coordinators.

    Every call opens its own connection so it can run on a worker thread
    (sqlite3 connections are bound to the thread that created them).
    """

    def __init__(self, db_path: str, progress_stream: ProgressStream | None = None):
        self.db_path = db_path
        self.progress_stream = progress_stream or ProgressStream()

    def _connect(self) -> sqlite3.Connection:
        return database.connect(self.db_path)

    # -------------------------------
    # queries
    # -------------------------------
    def get_track_count(self) -> int:
        try:
            with closing(self._connect()) as db:
                return database.get_track_count(db)
        except sqlite3.Error as e:
            raise FetchFailure(f"Failed to count tracks: {e}") from e

    def get_tracks_page(self, page: int, page_size: int) -> list[Track]:
        try:
            with closing(self._connect()) as db:
                return database.get_tracks_page(db, page, page_size)
        except sqlite3.Error as e:
            raise FetchFailure(f"Failed to get tracks: {e}") from e

    def search_tracks(self, query: str) -> list[Track]:
        try:
            with closing(self._connect()) as db:
                return database.search_tracks(db, query)
        except sqlite3.Error as e:
            raise FetchFailure(f"Search failed: {e}") from e

    def get_random_track(self) -> Optional[Track]:
        try:
            with closing(self._connect()) as db:
                return database.get_random_track(db)
        except sqlite3.Error as e:
            raise FetchFailure(f"Failed to pick a random track: {e}") from e

    # -------------------------------
    # commands
    # -------------------------------
    def delete_track(self, track_id: int) -> None:
        try:
            with closing(self._connect()) as db:
                deleted = database.delete_track(db, track_id)
        except sqlite3.Error as e:
            raise DeleteFailure(f"Could not delete track {track_id}: {e}") from e
        if not deleted:
            raise DeleteFailure(f"Track {track_id} does not exist.")

    def ingest_file(self, path: str) -> bool:
        """Returns True when inserted, False when the path was already imported."""
        fs_track = read_track_metadata(path)
        try:
            with closing(self._connect()) as db:
                return database.add_track(db, fs_track)
        except sqlite3.Error as e:
            raise ImportFailure(f"Error saving track: {e}") from e

    def ingest_files(self, paths: list[str], job_id: int = 0) -> str:
        """
        Imports each path in order, publishing one progress event per file.
        A failing file does not stop the batch; its error line goes into the
        report, which is raised as an ImportFailure if any file failed.
        """
        total = len(paths)
        imported = skipped = 0
        errors: list[str] = []

        for i, file_path in enumerate(paths):
            try:
                if self.ingest_file(file_path):
                    imported += 1
                else:
                    skipped += 1
            except ImportFailure as e:
                logger.warning("Failed to add file %s: %s", file_path, e.message)
                errors.append(file_error_line(file_path, e.message))

            self.progress_stream.publish(ImportProgress(
                job_id=job_id,
                progress_percent=(i + 1) / total * 100.0,
                file_name=os.path.basename(file_path),
            ))

        report = format_import_report(imported, skipped, errors)
        if errors:
            raise ImportFailure(report)
        return report

    def ingest_folder(self, path: str, job_id: int = 0) -> str:
        return self.ingest_files(iter_audio_paths(path), job_id)

    def reveal_in_file_manager(self, path: str) -> None:
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(path)):
            logger.warning("Could not open %s in the file manager", path)
