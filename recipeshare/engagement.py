"""
Engagement state for one recipe: star ratings and favorite status.

The tracker applies the user's favorite toggles and ratings optimistically and
reconciles them with the API:

- Every mutation is an EngagementAction that moves from PENDING to CONFIRMED
  (the API accepted it) or ROLLED_BACK (the API rejected it, or a failure
  invalidated it while it was still in flight).
- The favorite flag shown is the target of the newest live toggle, or the last
  server-confirmed value when nothing is live. A failed toggle invalidates
  every unconfirmed toggle, so the flag falls back to the confirmed value.
- Ratings follow the same rule: the newest rating in flight is shown, or the
  last server-confirmed rating when none is. A rejected rating never leaves an
  older rejected value on screen.
- A successful rating triggers a refetch of the recipe: the average is computed
  server-side from the full rating distribution, so the client never
  recomputes it locally.

Actions carry the tracker they were issued by. Once the detail view moves on
to another recipe the old tracker is closed and late results are discarded.
"""

import itertools
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional

from recipeshare.errors import AuthRequired, RequestFailed, ValidationError, ValidationReason
from recipeshare.models import AuthSession, EngagementState, RecipeDetail

logger = logging.getLogger(__name__)

FAVORITE = "favorite"
RATING = "rating"

MAX_STARS = 5

_sequence = itertools.count(1)


class StarBreakdown(NamedTuple):
    """How many full, half and empty stars to draw; always sums to 5."""
    filled: int
    half: int
    empty: int


def compute_stars(rating: float) -> StarBreakdown:
    """
    Split a 0-5 rating into star glyphs.

    Any fractional part shows as one half star.

    Examples:
        >>> compute_stars(3.5)
        StarBreakdown(filled=3, half=1, empty=1)
        >>> compute_stars(4.2)
        StarBreakdown(filled=4, half=1, empty=0)

    Raises:
        ValueError: If rating is outside [0, 5]
    """
    if rating < 0 or rating > MAX_STARS:
        raise ValueError(f"rating must be between 0 and {MAX_STARS}, got {rating}")
    filled = math.floor(rating)
    half = 1 if rating % 1 != 0 else 0
    empty = MAX_STARS - math.ceil(rating)
    return StarBreakdown(filled=filled, half=half, empty=empty)


class ActionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolledBack"


@dataclass(eq=False)
class EngagementAction:
    """
    One optimistic mutation awaiting the API's verdict.

    Attributes:
        kind: FAVORITE or RATING
        recipe_id: Recipe the action was issued for
        target: Value applied optimistically (bool for favorites, stars for ratings)
        previous: Value shown before the action was applied
        seq: Issue order across all actions
        status: Where the action is in its lifecycle
    """
    kind: str
    recipe_id: str
    target: Any
    previous: Any
    seq: int
    status: ActionStatus = ActionStatus.PENDING
    owner: Optional[object] = None


def user_rating_from(recipe: RecipeDetail, auth: Optional[AuthSession]) -> int:
    """
    The signed-in user's existing rating of `recipe`, or 0 if unrated.

    Matching is on user id; with nobody signed in the answer is always 0.
    """
    if auth is None or not auth.is_authenticated:
        return 0
    for entry in recipe.ratings:
        if entry.user is not None and entry.user.id == auth.user.id:
            return entry.rating
    return 0


def state_from_recipe(recipe: RecipeDetail, auth: Optional[AuthSession], favorited: bool = False) -> EngagementState:
    """Build the engagement view of a freshly fetched recipe."""
    return EngagementState(
        average_rating=recipe.average_rating,
        rating_count=recipe.rating_count,
        user_rating=user_rating_from(recipe, auth),
        favorited=favorited,
    )


class EngagementTracker:
    """
    Per-recipe engagement state with optimistic updates.

    The one-call methods (toggle_favorite, submit_rating) run the full
    begin -> request -> settle cycle. The begin_*/settle_* pairs are the same
    cycle split at the network boundary, for callers that dispatch requests
    themselves.

    Args:
        recipe_id: Recipe this tracker belongs to
        api: RecipeApiClient (or any object with the engagement endpoints)
        auth: Current auth session
        state: Initial state, usually from state_from_recipe()
        on_refresh: Called with the refetched recipe after a successful rating
    """

    def __init__(
        self,
        recipe_id: str,
        api,
        auth: AuthSession,
        state: Optional[EngagementState] = None,
        on_refresh: Optional[Callable[[RecipeDetail], None]] = None,
    ):
        self.recipe_id = recipe_id
        self.on_refresh = on_refresh
        self.api = api
        self.auth = auth
        self.state = state or EngagementState()
        self.closed = False
        self._confirmed_favorited = self.state.favorited
        self._confirmed_seq = 0
        self._confirmed_rating = self.state.user_rating
        self._confirmed_rating_seq = 0
        self._pending: List[EngagementAction] = []

    @classmethod
    def from_recipe(
        cls,
        recipe: RecipeDetail,
        api,
        auth: AuthSession,
        favorited: bool = False,
        on_refresh: Optional[Callable[[RecipeDetail], None]] = None,
    ) -> "EngagementTracker":
        state = state_from_recipe(recipe, auth, favorited=favorited)
        return cls(recipe.id, api, auth, state, on_refresh=on_refresh)

    @property
    def stars(self) -> StarBreakdown:
        return compute_stars(self.state.average_rating)

    def is_pending(self, kind: str) -> bool:
        """Whether an action of this kind is still waiting for the API."""
        return any(action.kind == kind for action in self._pending)

    def refresh_from(self, recipe: RecipeDetail) -> None:
        """
        Take the rating aggregate from a reloaded copy of the recipe.

        The favorite flag and any in-flight rating are kept as shown.
        """
        if self.closed or recipe.id != self.recipe_id:
            return
        fresh = state_from_recipe(recipe, self.auth, favorited=self.state.favorited)
        if self.is_pending(RATING):
            fresh = fresh.model_copy(update={"user_rating": self.state.user_rating})
        else:
            self._confirmed_rating = fresh.user_rating
        self.state = fresh

    def close(self) -> None:
        """Stop accepting results; called when the view leaves this recipe."""
        self.closed = True
        self._pending.clear()

    def _require_auth(self, action: str) -> None:
        if not self.auth.is_authenticated:
            raise AuthRequired(action)

    def _accepts(self, action: EngagementAction) -> bool:
        if self.closed or action.owner is not self:
            logger.debug("Discarding %s result for recipe %s: view has moved on", action.kind, action.recipe_id)
            return False
        return True

    def _issue(self, kind: str, target: Any, previous: Any) -> EngagementAction:
        action = EngagementAction(
            kind=kind,
            recipe_id=self.recipe_id,
            target=target,
            previous=previous,
            seq=next(_sequence),
            owner=self,
        )
        self._pending.append(action)
        return action

    # Favorites

    def _shown_favorited(self) -> bool:
        live = [a for a in self._pending if a.kind == FAVORITE and a.seq > self._confirmed_seq]
        return live[-1].target if live else self._confirmed_favorited

    def begin_favorite_toggle(self) -> EngagementAction:
        """
        Flip the favorite flag optimistically.

        Raises:
            AuthRequired: If nobody is signed in (state is left untouched)
        """
        self._require_auth("add favorites")
        previous = self.state.favorited
        action = self._issue(FAVORITE, not previous, previous)
        self.state = self.state.model_copy(update={"favorited": action.target})
        logger.debug("Favorite on recipe %s -> %s (pending)", self.recipe_id, action.target)
        return action

    def settle_favorite(self, action: EngagementAction, succeeded: bool) -> bool:
        """
        Apply the API's verdict on a favorite toggle.

        A toggle already rolled back by an earlier failure stays rolled back,
        even if its own request later succeeds.

        Returns:
            False if the result was discarded (view moved on, or action already rolled back)
        """
        if not self._accepts(action):
            return False
        if action.status is ActionStatus.ROLLED_BACK:
            logger.debug("Ignoring late %s result for recipe %s: already rolled back", action.kind, action.recipe_id)
            return False
        if action in self._pending:
            self._pending.remove(action)

        if succeeded:
            action.status = ActionStatus.CONFIRMED
            if action.seq > self._confirmed_seq:
                self._confirmed_favorited = action.target
                self._confirmed_seq = action.seq
        else:
            action.status = ActionStatus.ROLLED_BACK
            for other in [a for a in self._pending if a.kind == FAVORITE]:
                other.status = ActionStatus.ROLLED_BACK
                self._pending.remove(other)
            logger.debug("Favorite on recipe %s rolled back to %s", self.recipe_id, self._confirmed_favorited)

        self.state = self.state.model_copy(update={"favorited": self._shown_favorited()})
        return True

    def toggle_favorite(self) -> bool:
        """
        Add or remove the recipe from the user's favorites.

        Returns:
            The new favorite flag

        Raises:
            AuthRequired: If nobody is signed in (no request is made)
            RequestFailed: If the API call fails (the flag is rolled back)
        """
        action = self.begin_favorite_toggle()
        try:
            if action.target:
                self.api.add_favorite(self.recipe_id)
            else:
                self.api.remove_favorite(self.recipe_id)
        except RequestFailed:
            self.settle_favorite(action, succeeded=False)
            raise
        self.settle_favorite(action, succeeded=True)
        logger.info("%s recipe %s %s favorites", "Added" if action.target else "Removed",
                    self.recipe_id, "to" if action.target else "from")
        return self.state.favorited

    # Ratings

    def _shown_rating(self) -> int:
        live = [a for a in self._pending if a.kind == RATING]
        return live[-1].target if live else self._confirmed_rating

    def begin_rating(self, value: int) -> EngagementAction:
        """
        Show the user's new rating optimistically.

        Raises:
            AuthRequired: If nobody is signed in
            ValidationError: If value is not an integer from 1 to 5
        """
        self._require_auth("rate recipes")
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_STARS:
            raise ValidationError(ValidationReason.INVALID_RATING)
        action = self._issue(RATING, value, self.state.user_rating)
        self.state = self.state.model_copy(update={"user_rating": value})
        logger.debug("Rating on recipe %s -> %d (pending)", self.recipe_id, value)
        return action

    def settle_rating(self, action: EngagementAction, succeeded: bool, refreshed: Optional[RecipeDetail] = None) -> bool:
        """
        Apply the API's verdict on a rating.

        The rating shown is the target of the newest rating still in flight, or
        the last server-confirmed rating when none is. On success with a
        refreshed recipe the average and count are replaced from the server
        copy. Without one (the refetch failed) the aggregate waits for the next
        load.

        Returns:
            False if the result was discarded because the view moved on
        """
        if not self._accepts(action):
            return False
        if action in self._pending:
            self._pending.remove(action)

        if not succeeded:
            action.status = ActionStatus.ROLLED_BACK
            self.state = self.state.model_copy(update={"user_rating": self._shown_rating()})
            logger.debug("Rating on recipe %s rolled back to %d", self.recipe_id, self.state.user_rating)
            return True

        action.status = ActionStatus.CONFIRMED
        if action.seq > self._confirmed_rating_seq:
            self._confirmed_rating = action.target
            self._confirmed_rating_seq = action.seq
        if refreshed is not None:
            server_state = state_from_recipe(refreshed, self.auth, favorited=self.state.favorited)
            if server_state.user_rating and action.seq >= self._confirmed_rating_seq:
                self._confirmed_rating = server_state.user_rating
            self.state = server_state
            if self.on_refresh is not None:
                self.on_refresh(refreshed)
        self.state = self.state.model_copy(update={"user_rating": self._shown_rating()})
        return True

    def submit_rating(self, value: int) -> EngagementState:
        """
        Rate the recipe and refresh the aggregate from the server.

        Returns:
            The engagement state after reconciliation

        Raises:
            AuthRequired: If nobody is signed in
            ValidationError: If value is outside 1..5
            RequestFailed: If the rating is rejected (user rating is rolled back)
        """
        action = self.begin_rating(value)
        try:
            self.api.rate_recipe(self.recipe_id, value)
        except RequestFailed:
            self.settle_rating(action, succeeded=False)
            raise
        logger.info("Rated recipe %s with %d stars", self.recipe_id, value)

        refreshed = None
        try:
            refreshed = self.api.get_recipe(self.recipe_id)
        except RequestFailed as e:
            logger.warning("Rating saved but refreshing recipe %s failed: %s", self.recipe_id, e.message)
        self.settle_rating(action, succeeded=True, refreshed=refreshed)
        return self.state
