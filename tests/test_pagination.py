"""
Tests for page counting, the page-button window and the jump box.
"""
import pytest

from core.pagination import ELLIPSIS, PaginationController, page_window, parse_page, total_pages
from core.track_source import TrackSource

from fakes import FakeBackend, make_track


class TestTotalPages:

    @pytest.mark.parametrize("count,expected", [
        (0, 0),
        (1, 1),
        (10, 1),
        (11, 2),
        (25, 3),
        (100, 10),
    ])
    def test_ceil_of_count_over_page_size(self, count, expected):
        assert total_pages(count, 10) == expected


class TestPageWindow:

    def test_small_totals_render_every_page(self):
        assert page_window(3, 7) == [1, 2, 3, 4, 5, 6, 7]
        assert page_window(1, 10) == list(range(1, 11))

    def test_no_pages(self):
        assert page_window(1, 0) == []

    def test_first_page_of_fifteen(self):
        assert page_window(1, 15) == [1, 2, 3, ELLIPSIS, 15]

    def test_middle_page_has_both_ellipses(self):
        assert page_window(8, 15) == [1, ELLIPSIS, 6, 7, 8, 9, 10, ELLIPSIS, 15]

    def test_last_page(self):
        assert page_window(15, 15) == [1, ELLIPSIS, 13, 14, 15]

    def test_ellipsis_thresholds(self):
        # currentPage > 4 opens the leading ellipsis
        assert page_window(4, 20)[:2] == [1, 2]
        assert page_window(5, 20)[:2] == [1, ELLIPSIS]
        # currentPage < totalPages - 3 keeps the trailing one
        assert page_window(16, 20)[-2:] == [ELLIPSIS, 20]
        assert page_window(17, 20)[-2:] == [19, 20]


class TestParsePage:

    @pytest.mark.parametrize("text,expected", [
        ("3", 3),
        (" 2 ", 2),
        ("1", 1),
        ("5", 5),
        ("0", None),
        ("6", None),
        ("", None),
        ("abc", None),
        ("2.5", None),
        (None, None),
    ])
    def test_only_integers_in_range(self, text, expected):
        assert parse_page(text, 5) == expected


class TestPaginationController:

    @pytest.fixture
    def source(self, sync_dispatcher):
        src = TrackSource(FakeBackend([make_track(i) for i in range(1, 26)]), sync_dispatcher)
        src.set_library_mode()
        return src

    def test_paginate_loads_the_page(self, source):
        pagination = PaginationController(source)
        assert pagination.paginate(2)
        assert source.current_page == 2
        assert [t.id for t in source.visible_tracks] == list(range(11, 21))

    @pytest.mark.parametrize("page", [0, -1, 4, 100])
    def test_out_of_range_is_a_noop(self, source, page):
        pagination = PaginationController(source)
        before = list(source.visible_tracks)
        calls = len(source.backend.calls)

        assert not pagination.paginate(page)
        assert source.current_page == 1
        assert source.visible_tracks == before
        assert len(source.backend.calls) == calls

    def test_jump_text_is_kept_until_go(self, source):
        pagination = PaginationController(source)
        pagination.set_jump_text("3")
        assert source.current_page == 1

        assert pagination.jump()
        assert source.current_page == 3
        assert pagination.jump_text == ""

    def test_invalid_jump_keeps_text(self, source):
        pagination = PaginationController(source)
        pagination.set_jump_text("12")
        assert not pagination.jump()
        assert pagination.jump_text == "12"
        assert source.current_page == 1

    def test_buttons_follow_source(self, source):
        pagination = PaginationController(source)
        assert pagination.total_pages == 3
        assert pagination.buttons() == [1, 2, 3]
