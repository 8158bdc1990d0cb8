"""
Recipe detail view controller.

The controller shows one recipe at a time. Changing the recipe id resets the
engagement state and closes the previous tracker, and every load is tagged with
a generation so a slow response for a recipe the user already left never
replaces the one on screen.

Engagement (favorite, rating) is only available once the recipe has loaded:
the user's prior rating is read from the fetched ratings list, never from a
partially loaded document.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from recipeshare.engagement import EngagementTracker
from recipeshare.errors import AuthRequired, RequestFailed, ValidationError, ValidationReason
from recipeshare.models import AuthSession, EngagementState, RecipeDetail

logger = logging.getLogger(__name__)


class RecipeNotLoaded(RuntimeError):
    """An engagement action was attempted before the recipe finished loading."""


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    recipe_id: str


class RecipeDetailController:
    """
    State owner of the recipe detail view.

    Args:
        api: RecipeApiClient
        auth: Current auth session
    """

    def __init__(self, api, auth: AuthSession):
        self.api = api
        self.auth = auth
        self.recipe_id: Optional[str] = None
        self.recipe: Optional[RecipeDetail] = None
        self.engagement: Optional[EngagementTracker] = None
        self.loading = False
        self.posting_comment = False
        self._generation = 0

    # Loading

    def begin_load(self, recipe_id: str) -> LoadTicket:
        """Start loading `recipe_id`; switching recipes drops the old recipe's state."""
        if recipe_id != self.recipe_id:
            self._reset()
            self.recipe_id = recipe_id
        self._generation += 1
        self.loading = True
        return LoadTicket(generation=self._generation, recipe_id=recipe_id)

    def receive_recipe(self, ticket: LoadTicket, recipe: RecipeDetail, favorited: bool = False) -> bool:
        """
        Apply a fetched recipe if it is still the one being shown.

        Args:
            ticket: Ticket from begin_load()
            recipe: Fetched document
            favorited: Whether the user has favorited it (only used on first load)

        Returns:
            False if the response was stale and discarded
        """
        if ticket.generation != self._generation or ticket.recipe_id != self.recipe_id:
            logger.debug("Discarding stale recipe %s (generation %d, current %d)",
                         ticket.recipe_id, ticket.generation, self._generation)
            return False

        self.recipe = recipe
        if self.engagement is not None and not self.engagement.closed:
            self.engagement.refresh_from(recipe)
        else:
            self.engagement = EngagementTracker.from_recipe(
                recipe, self.api, self.auth, favorited=favorited, on_refresh=self._on_refresh,
            )
        self.loading = False
        return True

    def fail(self, ticket: LoadTicket) -> None:
        if ticket.generation == self._generation:
            self.loading = False

    def load(self, recipe_id: str) -> bool:
        """
        Fetch and show a recipe.

        Raises:
            RequestFailed: If the recipe cannot be fetched
        """
        ticket = self.begin_load(recipe_id)
        try:
            recipe = self.api.get_recipe(recipe_id)
        except RequestFailed:
            self.fail(ticket)
            raise
        favorited = self._is_favorited(recipe_id) if self.engagement is None else False
        return self.receive_recipe(ticket, recipe, favorited=favorited)

    def _is_favorited(self, recipe_id: str) -> bool:
        """Best-effort lookup in the user's favorites; failures just show 'not favorited'."""
        if not self.auth.is_authenticated:
            return False
        try:
            favorites = self.api.get_user_favorites(self.auth.user.id)
        except RequestFailed as e:
            logger.warning("Could not check favorites for recipe %s: %s", recipe_id, e.message)
            return False
        return any(summary.id == recipe_id for summary in favorites)

    def _on_refresh(self, recipe: RecipeDetail) -> None:
        if recipe.id == self.recipe_id:
            self.recipe = recipe

    def _reset(self) -> None:
        if self.engagement is not None:
            self.engagement.close()
        self.engagement = None
        self.recipe = None
        self.posting_comment = False

    def leave(self) -> None:
        """The user navigated away; late responses for this view are discarded."""
        self._generation += 1
        self._reset()
        self.recipe_id = None
        self.loading = False

    # Engagement

    @property
    def state(self) -> Optional[EngagementState]:
        return self.engagement.state if self.engagement else None

    def _tracker(self) -> EngagementTracker:
        if self.engagement is None or self.recipe is None:
            raise RecipeNotLoaded("Recipe is still loading")
        return self.engagement

    def toggle_favorite(self) -> bool:
        return self._tracker().toggle_favorite()

    def submit_rating(self, value: int) -> EngagementState:
        return self._tracker().submit_rating(value)

    def add_comment(self, text: str) -> bool:
        """
        Post a comment and reload the recipe so the new comment shows.

        Returns:
            False if a comment is already being posted

        Raises:
            AuthRequired: If nobody is signed in
            ValidationError: If the text is blank
            RequestFailed: If the comment is rejected
        """
        if not self.auth.is_authenticated:
            raise AuthRequired("comment")
        if not (text or "").strip():
            raise ValidationError(ValidationReason.EMPTY_COMMENT)
        self._tracker()
        if self.posting_comment:
            logger.debug("Ignoring duplicate comment submission")
            return False

        recipe_id = self.recipe_id
        self.posting_comment = True
        try:
            self.api.add_comment(recipe_id, text)
        finally:
            self.posting_comment = False
        logger.info("Added comment to recipe %s", recipe_id)

        try:
            self.load(recipe_id)
        except RequestFailed as e:
            logger.warning("Comment saved but reloading recipe %s failed: %s", recipe_id, e.message)
        return True
