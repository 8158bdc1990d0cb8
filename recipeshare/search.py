"""
Search view controller: filters, paginated results and URL state.

This module provides the state behind the recipe search page:
- The editable FilterSet (what the user is typing) and the applied FilterSet
  (what the displayed results were fetched with)
- The Paginator holding the server's Page metadata
- The three submission policies:
    * submit_search(term): free-text search, every other criterion cleared, page 1
    * apply_filters(): keep all criteria; page 1 only if the criteria changed
    * clear_all(): empty criteria, page 1
- Request generation tagging, so a response that resolves after the user has
  issued a newer search (or left the page) is dropped instead of overwriting
  the current results

Search flow: page -> SearchController -> compose() -> RecipeApiClient.list_recipes() -> receive()
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from recipeshare.config import ApiConfig
from recipeshare.errors import RequestFailed
from recipeshare.filters import FILTER_KEYS, compose, filters_from_url, same_filters, url_params_for
from recipeshare.models import FilterSet, RecipeListResponse, RecipeSummary
from recipeshare.pagination import PaginationControls, Paginator

logger = logging.getLogger(__name__)

# FilterSet attributes holding numeric upper bounds
NUMERIC_FILTERS = {"max_prep_time", "max_cook_time", "max_calories"}


@dataclass(frozen=True)
class SearchTicket:
    """
    Identity of one in-flight list request.

    Attributes:
        generation: Request counter value when the request was issued
        filters: Criteria the request was composed from
        query: Composed query parameters
    """
    generation: int
    filters: FilterSet
    query: Dict[str, Any]


class SearchController:
    """
    State owner of one search view instance.

    Args:
        api: RecipeApiClient (or any object with list_recipes)
        page_size: Recipes per page (defaults to RECIPES_PAGE_SIZE)
        url_params: Query parameters of the URL the view was opened with
    """

    def __init__(self, api, page_size: Optional[int] = None, url_params: Optional[Mapping[str, Any]] = None):
        self.api = api
        self.page_size = page_size or ApiConfig.get_page_size()
        self.filters = filters_from_url(url_params or {})
        self.applied_filters: Optional[FilterSet] = None
        self.paginator = Paginator()
        self.recipes: List[RecipeSummary] = []
        self.loading = False
        self._generation = 0

    # Filter editing

    def set_filter(self, name: str, value: Any) -> None:
        """
        Update one criterion of the editable FilterSet.

        Args:
            name: Wire name ("maxPrepTime") or attribute name ("max_prep_time")
            value: New value; blank strings clear numeric criteria

        Raises:
            KeyError: If the criterion is unknown
            pydantic.ValidationError: If a numeric bound is negative or not a number
        """
        attribute = FILTER_KEYS.get(name, name)
        if attribute not in FILTER_KEYS.values():
            raise KeyError(f"Unknown filter {name!r}")
        if attribute in NUMERIC_FILTERS and isinstance(value, str) and not value.strip():
            value = None
        if attribute not in NUMERIC_FILTERS and value is None:
            value = ""
        setattr(self.filters, attribute, value)

    def hydrate_from_url(self, params: Mapping[str, Any]) -> bool:
        """
        Take the free-text term from the URL (`q`) and load page 1.

        Arriving from the navbar, the landing page or a shared link counts as a
        search-only submission, so every other criterion is cleared.
        """
        return self.submit_search(filters_from_url(params).search)

    # Submission policies

    def submit_search(self, term: str) -> bool:
        """Run a free-text search: every other criterion is cleared and paging restarts."""
        self.filters = FilterSet(search=term or "")
        return self._load(1)

    def apply_filters(self) -> bool:
        """
        Run the search with every criterion currently entered.

        Paging restarts only when the criteria differ from the ones the current
        results were fetched with; re-applying unchanged criteria stays on the
        current page.
        """
        changed = self.applied_filters is None or not same_filters(self.filters, self.applied_filters)
        page = 1 if changed else self.paginator.current_page
        return self._load(page)

    def clear_all(self) -> bool:
        """Drop every criterion and load the unfiltered first page."""
        self.filters = FilterSet()
        return self._load(1)

    def go_to(self, page: int) -> bool:
        """
        Load another page of the current results.

        Uses the applied criteria, not half-edited ones in the filter panel.

        Returns:
            False without making a request when the page is out of range
        """
        if not self.paginator.can_go_to(page):
            return False
        return self._load(page, filters=self.applied_filters or self.filters)

    # Request lifecycle

    def begin_request(self, page: int, filters: Optional[FilterSet] = None) -> SearchTicket:
        """Issue a new request generation; older in-flight responses become stale."""
        snapshot = (filters or self.filters).model_copy()
        self._generation += 1
        self.loading = True
        return SearchTicket(
            generation=self._generation,
            filters=snapshot,
            query=compose(snapshot, page, self.page_size),
        )

    def is_current(self, ticket: SearchTicket) -> bool:
        return ticket.generation == self._generation

    def receive(self, ticket: SearchTicket, response: RecipeListResponse) -> bool:
        """
        Apply a list response if it belongs to the newest request.

        Results, page metadata and applied criteria are replaced together.

        Returns:
            False if the response was stale and discarded
        """
        if not self.is_current(ticket):
            logger.debug("Discarding stale search response (generation %d, current %d)",
                         ticket.generation, self._generation)
            return False
        self.recipes = list(response.recipes)
        self.paginator.replace(response.pagination)
        self.applied_filters = ticket.filters
        self.loading = False
        return True

    def fail(self, ticket: SearchTicket) -> None:
        """Mark a request as failed; the previous results stay on screen."""
        if self.is_current(ticket):
            self.loading = False

    def _load(self, page: int, filters: Optional[FilterSet] = None) -> bool:
        ticket = self.begin_request(page, filters)
        logger.info("Search request: %r", ticket.query)
        try:
            response = self.api.list_recipes(ticket.query)
        except RequestFailed:
            self.fail(ticket)
            raise
        return self.receive(ticket, response)

    def leave(self) -> None:
        """The user left the search view: anything still in flight is stale."""
        self._generation += 1
        self.loading = False

    # Read side

    @property
    def total_items(self) -> int:
        page = self.paginator.page
        return page.total_items if page else 0

    def url_params(self) -> Dict[str, str]:
        """Shareable URL parameters for the displayed results."""
        return url_params_for(self.applied_filters or self.filters)

    def controls(self) -> PaginationControls:
        return self.paginator.controls()
