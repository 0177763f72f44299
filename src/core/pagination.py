# core/pagination.py
from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
MAX_FULL_PAGES = 10


def total_pages(count: int, page_size: int) -> int:
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def page_window(current_page: int, total: int) -> list[int | str]:
    """
    Page buttons to render, with ELLIPSIS markers for elided ranges.

    >>> page_window(1, 15)
    [1, 2, 3, '...', 15]
    """
    if total <= MAX_FULL_PAGES:
        return list(range(1, total + 1))

    pages: list[int | str] = [1]
    if current_page > 4:
        pages.append(ELLIPSIS)

    start = max(2, current_page - 2)
    end = min(total - 1, current_page + 2)
    pages.extend(range(start, end + 1))

    if current_page < total - 3:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages


def parse_page(text: str, total: int) -> int | None:
    """Integer page in [1, total] or None."""
    try:
        page = int((text or "").strip(), 10)
    except ValueError:
        return None
    if 1 <= page <= total:
        return page
    return None


class PaginationController:
    def __init__(self, source):
        self.source = source
        self.jump_text = ""

    @property
    def current_page(self) -> int:
        return self.source.current_page

    @property
    def total_pages(self) -> int:
        return self.source.total_pages

    def buttons(self) -> list[int | str]:
        return page_window(self.current_page, self.total_pages)

    def paginate(self, page: int) -> bool:
        if not 1 <= page <= self.total_pages:
            logger.debug("paginate(%s) ignored, total pages %s", page, self.total_pages)
            return False
        self.source.load_page(page)
        return True

    def set_jump_text(self, text: str) -> None:
        self.jump_text = text

    def jump(self) -> bool:
        page = parse_page(self.jump_text, self.total_pages)
        if page is None:
            return False
        self.jump_text = ""
        return self.paginate(page)
