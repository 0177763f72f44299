"""
Tests for TrackSource - library/search modes, paging, stale responses, failures.
"""
import pytest

from core.errors import ErrorKind
from core.import_coordinator import ImportCoordinator
from core.track_source import SourceMode, TrackSource

from fakes import FakeBackend, make_track


def ids(tracks):
    return [t.id for t in tracks]


@pytest.fixture
def source(backend, sync_dispatcher):
    src = TrackSource(backend, sync_dispatcher)
    src.set_library_mode()
    return src


class TestLibraryMode:

    def test_first_page(self, source):
        assert source.mode is SourceMode.LIBRARY
        assert source.count == 25
        assert source.total_pages == 3
        assert source.current_page == 1
        assert ids(source.visible_tracks) == list(range(1, 11))

    def test_last_page_is_short(self, source):
        source.load_page(3)
        assert ids(source.visible_tracks) == list(range(21, 26))

    def test_count_comes_from_the_count_query(self, source, backend):
        backend.calls.clear()
        source.load_page(2)
        assert "get_track_count" in backend.calls
        assert ("get_tracks_page", 2, 10) in backend.calls

    def test_empty_library(self, sync_dispatcher):
        src = TrackSource(FakeBackend([]), sync_dispatcher)
        src.set_library_mode()
        assert src.count == 0
        assert src.total_pages == 0
        assert src.visible_tracks == []

    def test_changed_emitted(self, backend, sync_dispatcher):
        src = TrackSource(backend, sync_dispatcher)
        seen = []
        src.changed.connect(lambda: seen.append(src.current_page))
        src.set_library_mode()
        src.load_page(2)
        assert seen == [1, 2]


class TestSearchMode:

    def test_search_caches_all_results(self, source, backend):
        backend.calls.clear()
        source.set_search_mode("track 1")

        # Track 1, Track 10..19
        assert source.mode is SourceMode.SEARCH
        assert source.count == 11
        assert source.total_pages == 2
        assert source.current_page == 1
        assert len(source.visible_tracks) == 10
        assert backend.calls == [("search_tracks", "track 1")]

    def test_paging_search_results_never_requeries(self, source, backend):
        source.set_search_mode("track 1")
        backend.calls.clear()

        source.load_page(2)
        assert len(source.visible_tracks) == 1
        assert source.current_page == 2
        assert backend.calls == []

    def test_blank_query_gives_empty_results(self, source, backend):
        backend.calls.clear()
        source.set_search_mode("   ")
        assert source.mode is SourceMode.SEARCH
        assert source.count == 0
        assert source.visible_tracks == []
        assert backend.calls == []

    def test_switching_modes_resets_page(self, source):
        source.load_page(3)
        source.set_search_mode("track")
        assert source.current_page == 1

        source.load_page(2)
        source.set_library_mode()
        assert source.mode is SourceMode.LIBRARY
        assert source.current_page == 1
        assert source.count == 25
        assert source.search_query == ""


class TestStaleResponses:

    def test_older_page_response_is_dropped(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        src.load_page(2)
        src.load_page(3)

        # the newer request settles first, then the older one arrives
        deferred_dispatcher.settle(1)
        deferred_dispatcher.settle(0)

        assert src.current_page == 3
        assert ids(src.visible_tracks) == list(range(21, 26))

    def test_page_response_after_search_is_dropped(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        src.load_page(2)
        src.set_search_mode("track 2")

        deferred_dispatcher.settle(1)
        deferred_dispatcher.settle(0)

        assert src.mode is SourceMode.SEARCH
        assert src.search_query == "track 2"
        assert all("track 2" in t.title.lower() for t in src.visible_tracks)

    def test_import_refresh_keeps_a_pending_search(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        imports = ImportCoordinator(backend, deferred_dispatcher, src)

        imports.add_files(["/in/new.mp3"])
        src.set_search_mode("Track 1")

        # the import settles while the search is still in flight
        deferred_dispatcher.settle(0)
        deferred_dispatcher.settle_all()

        assert src.mode is SourceMode.SEARCH
        assert src.search_query == "Track 1"
        assert src.count == 11

    def test_refresh_while_idle_reloads_the_current_page(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        src.load_page(2)
        deferred_dispatcher.settle_all()
        backend.calls.clear()

        src.refresh()
        deferred_dispatcher.settle_all()

        assert ("get_tracks_page", 2, 10) in backend.calls
        assert src.current_page == 2

    def test_deletion_refills_the_page_being_navigated_to(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        src.set_library_mode()
        deferred_dispatcher.settle_all()

        src.load_page(3)
        backend.delete_track(2)
        src.remove_track(2)
        deferred_dispatcher.settle_all()

        assert src.current_page == 3
        assert src.count == 24
        assert ids(src.visible_tracks) == list(range(22, 26))

    def test_stale_failure_is_ignored(self, backend, deferred_dispatcher):
        src = TrackSource(backend, deferred_dispatcher)
        errors = []
        src.failed.connect(errors.append)

        src.load_page(2)
        backend.fail.add("page")
        deferred_dispatcher.settle(0)   # fails, but it is still the latest
        assert len(errors) == 1

        src.load_page(1)
        src.load_page(3)
        deferred_dispatcher.settle(0)   # stale failure
        assert len(errors) == 1


class TestFailures:

    def test_fetch_failure_keeps_displayed_tracks(self, source, backend):
        errors = []
        source.failed.connect(errors.append)
        before = list(source.visible_tracks)

        backend.fail.add("page")
        source.load_page(2)

        assert source.visible_tracks == before
        assert source.current_page == 1
        assert source.count == 25
        assert len(errors) == 1
        assert errors[0].kind is ErrorKind.FETCH

    def test_search_failure_keeps_library_mode(self, source, backend):
        errors = []
        source.failed.connect(errors.append)
        backend.fail.add("search")

        source.set_search_mode("track")
        assert source.mode is SourceMode.LIBRARY
        assert ids(source.visible_tracks) == list(range(1, 11))
        assert len(errors) == 1


class TestRemoveTrack:

    def test_library_page_is_refilled(self, source, backend):
        backend.delete_track(3)
        source.remove_track(3)
        assert source.count == 24
        assert ids(source.visible_tracks) == [1, 2, 4, 5, 6, 7, 8, 9, 10, 11]

    def test_last_page_emptied_moves_back(self, backend, sync_dispatcher):
        src = TrackSource(FakeBackend([make_track(i) for i in range(1, 12)]), sync_dispatcher)
        src.set_library_mode()
        src.load_page(2)
        assert ids(src.visible_tracks) == [11]

        src.backend.delete_track(11)
        src.remove_track(11)
        assert src.current_page == 1
        assert src.total_pages == 1
        assert ids(src.visible_tracks) == list(range(1, 11))

    def test_search_results_shrink(self, source):
        source.set_search_mode("track 1")
        source.remove_track(1)
        assert source.count == 10
        assert 1 not in ids(source.search_results)
        assert 1 not in ids(source.visible_tracks)
