"""
Landing page controller: popular recipes and the hero search box.
"""

import logging
from typing import Dict, List, Optional

from recipeshare.errors import RequestFailed
from recipeshare.filters import search_url_params
from recipeshare.models import RecipeSummary

logger = logging.getLogger(__name__)


class HomeController:
    """State owner of the landing page."""

    def __init__(self, api):
        self.api = api
        self.popular: List[RecipeSummary] = []

    def load(self) -> List[RecipeSummary]:
        """
        Fetch the popular recipes.

        Raises:
            RequestFailed: If the list cannot be fetched (the previous list is kept)
        """
        try:
            self.popular = self.api.get_popular_recipes()
        except RequestFailed as e:
            logger.error("Failed to load popular recipes: %s", e.message)
            raise
        return self.popular


def hero_search(term: Optional[str]) -> Optional[Dict[str, str]]:
    """
    URL parameters for the search view, or None when the term is blank.

    Used by both the navbar and the landing page search boxes.
    """
    params = search_url_params(term)
    return params or None
