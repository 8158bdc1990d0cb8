"""
Tests for the search view controller.

These tests verify the three submission policies (search-only, apply filters,
clear all), pagination requests and stale-response discarding. The API is a
Mock whose list_recipes returns canned responses.
"""

from unittest.mock import Mock

import pytest
from pydantic import ValidationError as PydanticValidationError

from recipeshare.errors import RequestFailed
from recipeshare.models import FilterSet, Page, RecipeListResponse, RecipeSummary
from recipeshare.search import SearchController


def make_response(current_page: int = 1, total_pages: int = 3, ids=("r1",)) -> RecipeListResponse:
    return RecipeListResponse(
        recipes=[RecipeSummary(id=recipe_id, title=f"Recipe {recipe_id}") for recipe_id in ids],
        pagination=Page(current_page=current_page, total_pages=total_pages, total_items=total_pages * 12),
    )


def make_api(response: RecipeListResponse = None) -> Mock:
    api = Mock()
    api.list_recipes.return_value = response or make_response()
    return api


def last_query(api: Mock) -> dict:
    return api.list_recipes.call_args[0][0]


class TestSubmissionPolicies:
    """Tests for search-only, apply-filters and clear-all submissions."""

    def test_submit_search_resets_other_filters(self):
        """Test that a free-text search drops every other criterion and goes to page 1."""
        api = make_api()
        controller = SearchController(api, page_size=12)
        controller.set_filter("cuisine", "Thai")
        controller.set_filter("maxPrepTime", 20)

        controller.submit_search("curry")

        assert last_query(api) == {"search": "curry", "page": 1, "limit": 12}
        assert controller.filters == FilterSet(search="curry")

    def test_apply_filters_keeps_search_term(self):
        """Test that Apply Filters sends the search term with the other criteria."""
        api = make_api()
        controller = SearchController(api, page_size=12, url_params={"q": "pasta"})
        controller.set_filter("diet", "Vegan")

        controller.apply_filters()

        assert last_query(api) == {"search": "pasta", "diet": "Vegan", "page": 1, "limit": 12}

    def test_apply_changed_filters_resets_page(self):
        """Test that changed criteria restart paging."""
        api = make_api(make_response(current_page=2))
        controller = SearchController(api, page_size=12)
        controller.apply_filters()
        controller.set_filter("cuisine", "Italian")

        controller.apply_filters()

        assert last_query(api)["page"] == 1

    def test_apply_unchanged_filters_keeps_page(self):
        """Test that re-applying the same criteria stays on the current page."""
        api = make_api(make_response(current_page=2))
        controller = SearchController(api, page_size=12)
        controller.set_filter("cuisine", "Italian")
        controller.apply_filters()

        controller.apply_filters()

        assert last_query(api)["page"] == 2

    def test_clear_all(self):
        """Test that Clear All sends an unfiltered page-1 query."""
        api = make_api()
        controller = SearchController(api, page_size=12, url_params={"q": "soup"})
        controller.set_filter("maxCalories", 400)

        controller.clear_all()

        assert last_query(api) == {"page": 1, "limit": 12}
        assert controller.filters.is_empty()


class TestSetFilter:
    """Tests for set_filter()."""

    def test_attribute_and_wire_names(self):
        """Test that both naming styles are accepted."""
        controller = SearchController(make_api(), page_size=12)
        controller.set_filter("max_cook_time", 15)
        controller.set_filter("maxPrepTime", "10")

        assert controller.filters.max_cook_time == 15
        assert controller.filters.max_prep_time == 10

    def test_blank_numeric_clears(self):
        """Test that an emptied numeric input removes the criterion."""
        controller = SearchController(make_api(), page_size=12)
        controller.set_filter("maxCalories", 300)
        controller.set_filter("maxCalories", " ")

        assert controller.filters.max_calories is None

    def test_unknown_filter(self):
        """Test that unknown criteria are rejected."""
        controller = SearchController(make_api(), page_size=12)

        with pytest.raises(KeyError):
            controller.set_filter("rating", 5)

    def test_negative_bound_rejected(self):
        """Test that negative maxima never reach the composer."""
        controller = SearchController(make_api(), page_size=12)

        with pytest.raises(PydanticValidationError):
            controller.set_filter("maxPrepTime", -1)

        assert controller.filters.max_prep_time is None


class TestPaging:
    """Tests for go_to()."""

    def test_go_to_out_of_range_is_noop(self):
        """Test that page 11 of 10 makes no request."""
        api = make_api(make_response(current_page=5, total_pages=10))
        controller = SearchController(api, page_size=12)
        controller.apply_filters()
        api.list_recipes.reset_mock()

        assert controller.go_to(11) is False
        assert controller.go_to(0) is False
        api.list_recipes.assert_not_called()

    def test_go_to_uses_applied_filters(self):
        """Test that paging ignores half-edited criteria."""
        api = make_api(make_response(current_page=1, total_pages=3))
        controller = SearchController(api, page_size=12)
        controller.set_filter("cuisine", "Thai")
        controller.apply_filters()
        controller.set_filter("cuisine", "Indian")

        controller.go_to(2)

        assert last_query(api) == {"cuisine": "Thai", "page": 2, "limit": 12}

    def test_controls_follow_response(self):
        """Test that controls come from the server's page metadata."""
        controller = SearchController(make_api(make_response(current_page=5, total_pages=10)), page_size=12)
        controller.apply_filters()

        controls = controller.controls()

        assert controls.items == [1, "...", 3, 4, 5, 6, 7, "...", 10]
        assert controls.prev_enabled and controls.next_enabled
        assert controller.total_items == 120


class TestRequestLifecycle:
    """Tests for generation tagging and failures."""

    def test_stale_response_is_discarded(self):
        """Test that an older request resolving late does not overwrite newer results."""
        controller = SearchController(make_api(), page_size=12)
        old = controller.begin_request(1)
        new = controller.begin_request(1)

        assert controller.receive(new, make_response(ids=("new",))) is True
        assert controller.receive(old, make_response(ids=("old",))) is False
        assert [r.id for r in controller.recipes] == ["new"]

    def test_leave_discards_in_flight(self):
        """Test that leaving the view makes pending responses stale."""
        controller = SearchController(make_api(), page_size=12)
        ticket = controller.begin_request(1)
        controller.leave()

        assert controller.receive(ticket, make_response()) is False
        assert controller.recipes == []
        assert controller.loading is False

    def test_failure_keeps_previous_results(self):
        """Test that a failed search leaves the old results and re-raises."""
        api = make_api(make_response(ids=("r1", "r2")))
        controller = SearchController(api, page_size=12)
        controller.apply_filters()
        api.list_recipes.side_effect = RequestFailed("Failed to load recipes")

        with pytest.raises(RequestFailed):
            controller.submit_search("soup")

        assert [r.id for r in controller.recipes] == ["r1", "r2"]
        assert controller.loading is False

    def test_ticket_snapshot_is_independent(self):
        """Test that editing filters after dispatch does not change the ticket."""
        controller = SearchController(make_api(), page_size=12)
        controller.set_filter("cuisine", "Thai")
        ticket = controller.begin_request(1)
        controller.set_filter("cuisine", "Indian")

        assert ticket.filters.cuisine == "Thai"
        assert ticket.query["cuisine"] == "Thai"


class TestUrlState:
    """Tests for URL hydration and mirroring."""

    def test_hydrate_from_url(self):
        """Test that ?q= sets the search term and loads page 1."""
        api = make_api()
        controller = SearchController(api, page_size=12)

        controller.hydrate_from_url({"q": "lasagna"})

        assert last_query(api) == {"search": "lasagna", "page": 1, "limit": 12}

    def test_hydrate_from_url_clears_applied_filters(self):
        """Test that a navbar hand-off drops filters applied earlier in the session."""
        api = make_api()
        controller = SearchController(api, page_size=12)
        controller.set_filter("cuisine", "Italian")
        controller.apply_filters()

        controller.hydrate_from_url({"q": "pasta"})

        assert last_query(api) == {"search": "pasta", "page": 1, "limit": 12}
        assert controller.filters.cuisine == ""

    def test_url_params_after_search(self):
        """Test that the applied term is mirrored for the address bar."""
        controller = SearchController(make_api(), page_size=12)
        controller.submit_search("  ramen ")

        assert controller.url_params() == {"q": "ramen"}
