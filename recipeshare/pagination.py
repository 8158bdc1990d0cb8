"""
Pagination state and page-number controls for the search view.

The Paginator holds the last Page the server returned. It decides whether a
page request is allowed; the search controller performs the request and hands
the fresh Page back, which replaces the tracked metadata in one assignment.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from recipeshare.models import Page

logger = logging.getLogger(__name__)

# Marker for a collapsed run of page numbers
ELLIPSIS = "..."

# Pages shown on each side of the current page
PAGE_WINDOW = 2

PageControl = Union[int, str]


@dataclass
class PaginationControls:
    """
    What the pagination bar should render.

    Attributes:
        items: Page numbers and ELLIPSIS markers, in display order
        current_page: Page to highlight
        prev_enabled: Whether the Previous control is clickable
        next_enabled: Whether the Next control is clickable
    """
    items: List[PageControl] = field(default_factory=list)
    current_page: int = 1
    prev_enabled: bool = False
    next_enabled: bool = False


def page_numbers(current_page: int, total_pages: int, window: int = PAGE_WINDOW) -> List[PageControl]:
    """
    Page numbers to show, with skipped runs collapsed into a single ELLIPSIS.

    The first and last pages are always shown, as are pages within `window` of
    the current page.

    Examples:
        >>> page_numbers(5, 10)
        [1, '...', 3, 4, 5, 6, 7, '...', 10]
        >>> page_numbers(1, 3)
        [1, 2, 3]
    """
    items: List[PageControl] = []
    for number in range(1, total_pages + 1):
        if number in (1, total_pages) or abs(number - current_page) <= window:
            items.append(number)
        elif not items or items[-1] != ELLIPSIS:
            items.append(ELLIPSIS)
    return items


class Paginator:
    """Tracks the server's Page for the current result set."""

    def __init__(self) -> None:
        self._page: Optional[Page] = None

    @property
    def page(self) -> Optional[Page]:
        return self._page

    @property
    def current_page(self) -> int:
        return self._page.current_page if self._page else 1

    @property
    def total_pages(self) -> Optional[int]:
        """None until the first Page has been received."""
        return self._page.total_pages if self._page else None

    def can_go_to(self, page: int) -> bool:
        """
        Whether a request for `page` is allowed.

        Pages below 1 are always rejected; pages past the end are rejected once
        the total is known.
        """
        if page < 1:
            logger.debug("Rejecting page request %d: below first page", page)
            return False
        total = self.total_pages
        if total is not None and page > total:
            logger.debug("Rejecting page request %d: only %d pages", page, total)
            return False
        return True

    def replace(self, page: Page) -> None:
        """Swap in the server's fresh metadata."""
        self._page = page

    def reset(self) -> None:
        self._page = None

    def controls(self) -> PaginationControls:
        """Controls for the current page; empty when there is nothing to page through."""
        if self._page is None:
            return PaginationControls()
        return PaginationControls(
            items=page_numbers(self._page.current_page, self._page.total_pages),
            current_page=self._page.current_page,
            prev_enabled=self._page.has_prev,
            next_enabled=self._page.has_next,
        )
