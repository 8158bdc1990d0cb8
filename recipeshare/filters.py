"""
Filter/query composition for recipe searches.

compose() turns a sparse FilterSet plus a page number into the query parameters
sent to GET /recipes. It is a pure function: dispatching the request and syncing
the URL bar are the caller's job.

Rules:
- A text criterion is sent only when its trimmed value is non-empty, and it is
  sent trimmed
- A numeric criterion is sent only when it is set (0 is a real bound)
- page and limit are always sent
- Keys come out in a fixed order so the same inputs always give the same query
"""

from typing import Any, Dict, Mapping, Optional

from recipeshare.models import FilterSet

# Wire name -> FilterSet attribute, in transmission order
FILTER_KEYS = {
    "search": "search",
    "cuisine": "cuisine",
    "diet": "diet",
    "difficulty": "difficulty",
    "maxPrepTime": "max_prep_time",
    "maxCookTime": "max_cook_time",
    "maxCalories": "max_calories",
    "ingredients": "ingredients",
}

# Query-string parameter the shareable search URL carries
URL_SEARCH_PARAM = "q"


def active_filters(filters: FilterSet) -> Dict[str, Any]:
    """
    Return only the criteria that are actually set, keyed by wire name.

    Args:
        filters: FilterSet as edited in the search view

    Returns:
        Ordered dict of wire name -> value, with text values trimmed
    """
    active: Dict[str, Any] = {}
    for wire_name, attribute in FILTER_KEYS.items():
        value = getattr(filters, attribute)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        active[wire_name] = value
    return active


def compose(filters: FilterSet, page: int, page_size: int) -> Dict[str, Any]:
    """
    Build the query parameters for one page of a filtered recipe listing.

    Args:
        filters: Criteria to apply; blank criteria are left out entirely
        page: 1-based page number
        page_size: Recipes per page, sent as `limit`

    Returns:
        Ordered dict ready to pass as `params=` to requests

    Examples:
        >>> compose(FilterSet(search=" pasta ", cuisine=""), page=2, page_size=12)
        {'search': 'pasta', 'page': 2, 'limit': 12}
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    params = active_filters(filters)
    params["page"] = page
    params["limit"] = page_size
    return params


def same_filters(first: FilterSet, second: FilterSet) -> bool:
    """True when both sets would produce the same criteria on the wire."""
    return active_filters(first) == active_filters(second)


def filters_from_url(params: Mapping[str, Any]) -> FilterSet:
    """
    Rebuild the initial FilterSet from the search URL.

    Only the free-text term travels in the URL; every other criterion starts
    blank. Streamlit's query params may hand back lists for repeated keys, in
    which case the last value wins.
    """
    term = params.get(URL_SEARCH_PARAM, "")
    if isinstance(term, (list, tuple)):
        term = term[-1] if term else ""
    return FilterSet(search=str(term or ""))


def url_params_for(filters: FilterSet) -> Dict[str, str]:
    """Shareable URL parameters for the given criteria ({} when there is no search term)."""
    term = filters.search.strip()
    return {URL_SEARCH_PARAM: term} if term else {}


def search_url_params(term: Optional[str]) -> Dict[str, str]:
    """URL parameters for navigating to the search view with a free-text term."""
    return url_params_for(FilterSet(search=term or ""))
