"""
Tests for the engagement state tracker: stars, favorites and ratings.

The API collaborator is a Mock, so every test can control whether a request
succeeds and inspect which endpoints were called.
"""

from unittest.mock import Mock

import pytest

from recipeshare.engagement import (
    RATING,
    ActionStatus,
    EngagementTracker,
    StarBreakdown,
    compute_stars,
    state_from_recipe,
    user_rating_from,
)
from recipeshare.errors import AuthRequired, RequestFailed, ValidationError, ValidationReason
from recipeshare.models import AuthSession, EngagementState, RecipeDetail, UserProfile


def make_auth(user_id: str = "u1") -> AuthSession:
    return AuthSession(token="token-123", user=UserProfile(id=user_id, username="cook"))


def make_recipe(average: float = 4.0, ratings=None, recipe_id: str = "r1") -> RecipeDetail:
    return RecipeDetail.model_validate({
        "_id": recipe_id,
        "title": "Tomato Soup",
        "averageRating": average,
        "ratings": ratings if ratings is not None else [{"user": "u2", "rating": 4}],
    })


class TestComputeStars:
    """Tests for compute_stars()."""

    @pytest.mark.parametrize("rating,expected", [
        (0, StarBreakdown(0, 0, 5)),
        (5, StarBreakdown(5, 0, 0)),
        (3.5, StarBreakdown(3, 1, 1)),
        (4.2, StarBreakdown(4, 1, 0)),
        (1, StarBreakdown(1, 0, 4)),
    ])
    def test_known_values(self, rating, expected):
        """Test the documented star breakdowns."""
        assert compute_stars(rating) == expected

    @pytest.mark.parametrize("rating", [x / 10 for x in range(0, 51)])
    def test_always_five_stars(self, rating):
        """Test that filled + half + empty is 5 across [0, 5]."""
        stars = compute_stars(rating)

        assert stars.filled + stars.half + stars.empty == 5

    @pytest.mark.parametrize("rating", [-0.1, 5.1])
    def test_out_of_range(self, rating):
        """Test that ratings outside [0, 5] are rejected."""
        with pytest.raises(ValueError):
            compute_stars(rating)


class TestInitialState:
    """Tests for reading engagement from a fetched recipe."""

    def test_user_rating_found_by_identity(self):
        """Test that the signed-in user's prior rating is picked from the list."""
        recipe = make_recipe(ratings=[{"user": "u2", "rating": 2}, {"user": {"_id": "u1"}, "rating": 5}])

        assert user_rating_from(recipe, make_auth("u1")) == 5

    def test_user_rating_defaults_to_zero(self):
        """Test that an unrated recipe gives 0."""
        assert user_rating_from(make_recipe(), make_auth("u1")) == 0

    def test_signed_out_user_rating_is_zero(self):
        """Test that nobody signed in means no user rating."""
        recipe = make_recipe(ratings=[{"user": "u1", "rating": 3}])

        assert user_rating_from(recipe, AuthSession()) == 0

    def test_state_from_recipe(self):
        """Test aggregate fields come from the server document."""
        recipe = make_recipe(average=3.5, ratings=[{"user": "u1", "rating": 3}, {"user": "u2", "rating": 4}])

        state = state_from_recipe(recipe, make_auth("u1"), favorited=True)

        assert state == EngagementState(average_rating=3.5, rating_count=2, user_rating=3, favorited=True)


class TestToggleFavorite:
    """Tests for favorite toggling with optimistic updates."""

    def test_requires_auth(self):
        """Test that signed-out toggles fail without a request or state change."""
        api = Mock()
        tracker = EngagementTracker("r1", api, AuthSession())

        with pytest.raises(AuthRequired):
            tracker.toggle_favorite()

        assert tracker.state.favorited is False
        api.add_favorite.assert_not_called()
        api.remove_favorite.assert_not_called()

    def test_add_favorite(self):
        """Test that an unfavorited recipe is added."""
        api = Mock()
        tracker = EngagementTracker("r1", api, make_auth())

        assert tracker.toggle_favorite() is True

        api.add_favorite.assert_called_once_with("r1")
        assert tracker.state.favorited is True
        assert not tracker.is_pending("favorite")

    def test_remove_favorite(self):
        """Test that a favorited recipe is removed."""
        api = Mock()
        tracker = EngagementTracker("r1", api, make_auth(), EngagementState(favorited=True))

        assert tracker.toggle_favorite() is False

        api.remove_favorite.assert_called_once_with("r1")

    def test_failure_rolls_back(self):
        """Test that a failed request restores the previous flag and re-raises."""
        api = Mock()
        api.add_favorite.side_effect = RequestFailed("Failed to update favorites", status_code=500)
        tracker = EngagementTracker("r1", api, make_auth())

        with pytest.raises(RequestFailed):
            tracker.toggle_favorite()

        assert tracker.state.favorited is False

    def test_double_toggle_second_fails(self):
        """Test that two quick toggles, the second failing, end at the original value."""
        tracker = EngagementTracker("r1", Mock(), make_auth())

        first = tracker.begin_favorite_toggle()
        second = tracker.begin_favorite_toggle()
        assert tracker.state.favorited is False

        tracker.settle_favorite(second, succeeded=False)
        assert tracker.state.favorited is False
        assert first.status is ActionStatus.ROLLED_BACK
        assert second.status is ActionStatus.ROLLED_BACK

        # The first response arriving late does not resurrect it
        assert tracker.settle_favorite(first, succeeded=True) is False
        assert tracker.state.favorited is False

    def test_double_toggle_both_succeed(self):
        """Test that two successful toggles land back where they started."""
        tracker = EngagementTracker("r1", Mock(), make_auth())

        first = tracker.begin_favorite_toggle()
        second = tracker.begin_favorite_toggle()
        tracker.settle_favorite(first, succeeded=True)
        assert tracker.state.favorited is False
        tracker.settle_favorite(second, succeeded=True)

        assert tracker.state.favorited is False
        assert first.status is ActionStatus.CONFIRMED
        assert second.status is ActionStatus.CONFIRMED

    def test_closed_tracker_discards_results(self):
        """Test that results for an abandoned recipe are ignored."""
        tracker = EngagementTracker("r1", Mock(), make_auth())
        action = tracker.begin_favorite_toggle()
        tracker.close()

        assert tracker.settle_favorite(action, succeeded=False) is False


class TestSubmitRating:
    """Tests for rating submission and server reconciliation."""

    def test_requires_auth(self):
        """Test that signed-out ratings fail without a request."""
        api = Mock()
        tracker = EngagementTracker("r1", api, AuthSession())

        with pytest.raises(AuthRequired):
            tracker.submit_rating(4)

        api.rate_recipe.assert_not_called()
        assert tracker.state.user_rating == 0

    @pytest.mark.parametrize("value", [0, 6, -1, True, 2.5])
    def test_invalid_values(self, value):
        """Test that only integers 1..5 are accepted."""
        api = Mock()
        tracker = EngagementTracker("r1", api, make_auth())

        with pytest.raises(ValidationError) as exc_info:
            tracker.submit_rating(value)

        assert exc_info.value.reason is ValidationReason.INVALID_RATING
        api.rate_recipe.assert_not_called()

    def test_success_replaces_state_from_refetch(self):
        """Test that the whole state comes from the refetched recipe."""
        api = Mock()
        api.get_recipe.return_value = make_recipe(
            average=4.5, ratings=[{"user": "u1", "rating": 5}, {"user": "u2", "rating": 4}],
        )
        refreshed = []
        tracker = EngagementTracker.from_recipe(make_recipe(), api, make_auth("u1"), on_refresh=refreshed.append)

        state = tracker.submit_rating(5)

        api.rate_recipe.assert_called_once_with("r1", 5)
        api.get_recipe.assert_called_once_with("r1")
        assert state.average_rating == 4.5
        assert state.rating_count == 2
        assert state.user_rating == 5
        assert refreshed == [api.get_recipe.return_value]

    def test_failure_reverts_user_rating(self):
        """Test that a rejected rating restores the previous user rating."""
        api = Mock()
        api.rate_recipe.side_effect = RequestFailed("Failed to submit rating")
        recipe = make_recipe(ratings=[{"user": "u1", "rating": 2}])
        tracker = EngagementTracker.from_recipe(recipe, api, make_auth("u1"))

        with pytest.raises(RequestFailed):
            tracker.submit_rating(5)

        assert tracker.state.user_rating == 2
        api.get_recipe.assert_not_called()

    def test_refetch_failure_keeps_rating(self):
        """Test that a failed refetch keeps the accepted rating without raising."""
        api = Mock()
        api.get_recipe.side_effect = RequestFailed("Failed to load recipe")
        tracker = EngagementTracker.from_recipe(make_recipe(average=4.0), api, make_auth("u1"))

        state = tracker.submit_rating(3)

        assert state.user_rating == 3
        assert state.average_rating == 4.0

    def test_refresh_keeps_favorite_flag(self):
        """Test that reloading the recipe does not touch the favorite flag."""
        tracker = EngagementTracker.from_recipe(make_recipe(), Mock(), make_auth(), favorited=True)

        tracker.refresh_from(make_recipe(average=2.0))

        assert tracker.state.favorited is True
        assert tracker.state.average_rating == 2.0

    def test_stars_property(self):
        """Test that stars follow the current average."""
        tracker = EngagementTracker.from_recipe(make_recipe(average=3.5), Mock(), make_auth())

        assert tracker.stars == StarBreakdown(3, 1, 1)

    def test_overlapping_ratings_both_fail(self):
        """Test that two rejected ratings fall back to the last confirmed rating."""
        tracker = EngagementTracker.from_recipe(make_recipe(), Mock(), make_auth())
        first = tracker.begin_rating(3)
        second = tracker.begin_rating(4)

        tracker.settle_rating(first, succeeded=False)
        assert tracker.state.user_rating == 4

        tracker.settle_rating(second, succeeded=False)
        assert tracker.state.user_rating == 0
        assert first.status is ActionStatus.ROLLED_BACK
        assert second.status is ActionStatus.ROLLED_BACK

    def test_newer_rating_fails_after_older_confirmed(self):
        """Test that a rejected rating reverts to an older rating the server accepted."""
        tracker = EngagementTracker.from_recipe(make_recipe(), Mock(), make_auth())
        first = tracker.begin_rating(3)
        second = tracker.begin_rating(4)

        tracker.settle_rating(first, succeeded=True)
        assert tracker.state.user_rating == 4

        tracker.settle_rating(second, succeeded=False)
        assert tracker.state.user_rating == 3

    def test_late_older_success_keeps_newer_rating(self):
        """Test that an older rating confirmed late does not replace a newer confirmed one."""
        tracker = EngagementTracker.from_recipe(make_recipe(), Mock(), make_auth())
        first = tracker.begin_rating(2)
        second = tracker.begin_rating(5)

        tracker.settle_rating(second, succeeded=True)
        tracker.settle_rating(first, succeeded=True)

        assert tracker.state.user_rating == 5
        assert not tracker.is_pending(RATING)
