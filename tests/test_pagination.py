"""
Tests for pagination state and the page-number controls.
"""

import pytest

from recipeshare.models import Page
from recipeshare.pagination import ELLIPSIS, PaginationControls, Paginator, page_numbers


class TestPageModel:
    """Tests for Page metadata invariants."""

    @pytest.mark.parametrize("current,total", [(1, 1), (1, 5), (3, 5), (5, 5), (1, 0)])
    def test_navigation_flags_follow_page_numbers(self, current, total):
        """Test that hasPrev/hasNext always agree with currentPage and totalPages."""
        page = Page(current_page=current, total_pages=total)

        assert page.has_prev == (current > 1)
        assert page.has_next == (current < total)

    def test_server_flags_are_rederived(self):
        """Test that inconsistent server flags are corrected."""
        page = Page.model_validate({"currentPage": 1, "totalPages": 3, "hasPrev": True, "hasNext": False})

        assert page.has_prev is False
        assert page.has_next is True

    def test_total_recipes_alias(self):
        """Test that the server's totalRecipes count populates total_items."""
        page = Page.model_validate({"currentPage": 2, "totalPages": 4, "totalRecipes": 45})

        assert page.total_items == 45


class TestPageNumbers:
    """Tests for page_numbers()."""

    def test_windowed_with_ellipses(self):
        """Test collapsed runs on both sides of the current page."""
        assert page_numbers(5, 10) == [1, ELLIPSIS, 3, 4, 5, 6, 7, ELLIPSIS, 10]

    def test_small_total_has_no_ellipsis(self):
        """Test that every page shows when there are few."""
        assert page_numbers(1, 3) == [1, 2, 3]

    def test_near_start(self):
        """Test a window touching the first page."""
        assert page_numbers(2, 10) == [1, 2, 3, 4, ELLIPSIS, 10]

    def test_near_end(self):
        """Test a window touching the last page."""
        assert page_numbers(10, 10) == [1, ELLIPSIS, 8, 9, 10]

    def test_no_pages(self):
        """Test that zero pages give no controls."""
        assert page_numbers(1, 0) == []


class TestPaginator:
    """Tests for Paginator."""

    def test_initial_state(self):
        """Test defaults before any response arrives."""
        paginator = Paginator()

        assert paginator.page is None
        assert paginator.current_page == 1
        assert paginator.total_pages is None
        assert paginator.controls() == PaginationControls()

    def test_rejects_out_of_range(self):
        """Test that pages outside [1, totalPages] are rejected."""
        paginator = Paginator()
        paginator.replace(Page(current_page=1, total_pages=10))

        assert not paginator.can_go_to(0)
        assert not paginator.can_go_to(11)
        assert paginator.can_go_to(1)
        assert paginator.can_go_to(10)

    def test_below_first_rejected_before_total_known(self):
        """Test that page 0 is rejected even with no metadata yet."""
        paginator = Paginator()

        assert not paginator.can_go_to(0)
        assert paginator.can_go_to(1)

    def test_replace_swaps_metadata(self):
        """Test that a fresh Page replaces the tracked one."""
        paginator = Paginator()
        paginator.replace(Page(current_page=1, total_pages=3, total_items=30))
        paginator.replace(Page(current_page=2, total_pages=3, total_items=30))

        assert paginator.current_page == 2

    def test_controls(self):
        """Test that controls reflect the tracked page."""
        paginator = Paginator()
        paginator.replace(Page(current_page=1, total_pages=3))

        controls = paginator.controls()

        assert controls.items == [1, 2, 3]
        assert controls.current_page == 1
        assert controls.prev_enabled is False
        assert controls.next_enabled is True

    def test_reset(self):
        """Test that reset forgets the metadata."""
        paginator = Paginator()
        paginator.replace(Page(current_page=2, total_pages=3))
        paginator.reset()

        assert paginator.page is None
        assert paginator.current_page == 1
