# core/track_source.py
from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple, Optional

from PySide6.QtCore import QObject, Signal

from core.config import PAGE_SIZE
from core.dispatch import Dispatcher
from core.errors import FetchFailure, as_app_error
from core.pagination import total_pages
from db.models import Track

logger = logging.getLogger(__name__)


class SourceMode(Enum):
    LIBRARY = "library"
    SEARCH = "search"


class _Navigation(NamedTuple):
    """Where an in-flight request is taking the view."""
    mode: SourceMode
    page: int = 1
    query: str = ""
    switch_to_library: bool = False


class TrackSource(QObject):
    """
    The collection currently being browsed: the paginated library or an
    in-memory search result set, plus the page on screen.

    Every navigation action takes a new request token; a response whose
    token is no longer the latest is dropped, so a slow fetch can never
    overwrite a newer page. A refresh (after an import or a deletion)
    re-issues the navigation still in flight rather than the page on
    screen, so it never cancels what the user asked for.
    """
    changed = Signal()          # mode/page/count/visible tracks changed
    failed = Signal(object)     # AppError

    def __init__(self, backend, dispatcher: Dispatcher, page_size: int = PAGE_SIZE, parent=None):
        super().__init__(parent)
        self.backend = backend
        self.dispatcher = dispatcher
        self.page_size = page_size

        self.mode = SourceMode.LIBRARY
        self.current_page = 1
        self.count = 0
        self.visible_tracks: list[Track] = []
        self.search_query = ""
        self._results: list[Track] = []
        self._token = 0
        self._pending: Optional[_Navigation] = None

    # -------------------------
    # derived
    # -------------------------
    @property
    def total_pages(self) -> int:
        return total_pages(self.count, self.page_size)

    @property
    def search_results(self) -> list[Track]:
        return list(self._results)

    def _next_token(self, pending: Optional[_Navigation] = None) -> int:
        self._token += 1
        self._pending = pending
        return self._token

    def _is_stale(self, token: int, what: str) -> bool:
        if token != self._token:
            logger.debug("dropping stale %s response (token %s, latest %s)", what, token, self._token)
            return True
        self._pending = None
        return False

    def _slice(self, page: int) -> list[Track]:
        start = (page - 1) * self.page_size
        return self._results[start:start + self.page_size]

    # -------------------------
    # mode switching
    # -------------------------
    def set_library_mode(self) -> None:
        self._fetch_library_page(1, switch_to_library=True)

    def set_search_mode(self, query: str) -> None:
        query = (query or "").strip()
        token = self._next_token(_Navigation(SourceMode.SEARCH, query=query))

        if not query:
            self._apply_search(token, query, [])
            return

        self.dispatcher.submit(
            lambda: self.backend.search_tracks(query),
            lambda results: self._apply_search(token, query, results),
            lambda exc: self._on_fetch_error(token, exc, "search"),
        )

    def _apply_search(self, token: int, query: str, results: list[Track]) -> None:
        if self._is_stale(token, "search"):
            return
        self.mode = SourceMode.SEARCH
        self.search_query = query
        self._results = list(results)
        self.count = len(self._results)
        self.current_page = 1
        self.visible_tracks = self._slice(1)
        self.changed.emit()

    # -------------------------
    # paging
    # -------------------------
    def load_page(self, page: int) -> None:
        if self.mode is SourceMode.SEARCH:
            self._next_token()
            self.current_page = page
            self.visible_tracks = self._slice(page)
            self.changed.emit()
            return
        self._fetch_library_page(page)

    def refresh(self) -> None:
        pending = self._pending
        if pending is not None:
            if pending.mode is SourceMode.SEARCH:
                self.set_search_mode(pending.query)
            else:
                self._fetch_library_page(pending.page, pending.switch_to_library)
            return

        if self.mode is SourceMode.SEARCH:
            self._next_token()
            last = max(1, self.total_pages)
            self.current_page = min(self.current_page, last)
            self.visible_tracks = self._slice(self.current_page)
            self.changed.emit()
            return
        self._fetch_library_page(self.current_page)

    def _fetch_library_page(self, page: int, switch_to_library: bool = False) -> None:
        token = self._next_token(_Navigation(SourceMode.LIBRARY, page=page, switch_to_library=switch_to_library))
        backend = self.backend
        page_size = self.page_size

        def job():
            count = backend.get_track_count()
            # the requested page may no longer exist after deletions
            target = max(1, min(page, total_pages(count, page_size)))
            return count, target, backend.get_tracks_page(target, page_size)

        self.dispatcher.submit(
            job,
            lambda result: self._apply_library_page(token, result, switch_to_library),
            lambda exc: self._on_fetch_error(token, exc, "page"),
        )

    def _apply_library_page(self, token: int, result, switch_to_library: bool) -> None:
        if self._is_stale(token, "page"):
            return
        count, page, tracks = result
        if switch_to_library:
            self.mode = SourceMode.LIBRARY
            self.search_query = ""
            self._results = []
        self.count = count
        self.current_page = page
        self.visible_tracks = list(tracks)
        self.changed.emit()

    def _on_fetch_error(self, token: int, exc: Exception, what: str) -> None:
        if self._is_stale(token, what):
            return
        self.failed.emit(as_app_error(exc, FetchFailure))

    # -------------------------
    # deletions
    # -------------------------
    def remove_track(self, track_id: int) -> None:
        self._results = [t for t in self._results if t.id != track_id]
        before = len(self.visible_tracks)
        self.visible_tracks = [t for t in self.visible_tracks if t.id != track_id]

        if self.mode is SourceMode.SEARCH:
            self.count = len(self._results)
            self.refresh()
            return

        if len(self.visible_tracks) != before:
            self.count = max(0, self.count - 1)
            self.changed.emit()
        # refill the page from the store
        self.refresh()
