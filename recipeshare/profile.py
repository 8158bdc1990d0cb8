"""
Profile view controller: the user's own recipes, favorites and profile editing.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from recipeshare.errors import AuthRequired
from recipeshare.models import AuthSession, RecipeSummary, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class ProfileForm:
    """Editable profile fields."""
    username: str = ""
    bio: str = ""
    avatar: str = ""

    @classmethod
    def from_user(cls, user: Optional[UserProfile]) -> "ProfileForm":
        if user is None:
            return cls()
        return cls(username=user.username or "", bio=user.bio or "", avatar=user.avatar or "")


class ProfileController:
    """
    State owner of the profile view.

    Args:
        api: RecipeApiClient
        auth: Current auth session; updated in place after a successful save
    """

    def __init__(self, api, auth: AuthSession):
        self.api = api
        self.auth = auth
        self.user_recipes: List[RecipeSummary] = []
        self.favorite_recipes: List[RecipeSummary] = []
        self.editing = False
        self.saving = False
        self.form = ProfileForm.from_user(auth.user)

    def _require_auth(self) -> UserProfile:
        if not self.auth.is_authenticated:
            raise AuthRequired("view your profile")
        return self.auth.user

    def load(self) -> None:
        """
        Fetch the user's recipes and favorites.

        Both lists are replaced only when both requests succeed.

        Raises:
            AuthRequired: If nobody is signed in
            RequestFailed: If either request fails
        """
        user = self._require_auth()
        recipes = self.api.get_user_recipes(user.id)
        favorites = self.api.get_user_favorites(user.id)
        self.user_recipes = recipes
        self.favorite_recipes = favorites
        logger.debug("Loaded %d recipes and %d favorites for user %s", len(recipes), len(favorites), user.id)

    def start_editing(self) -> None:
        self.form = ProfileForm.from_user(self.auth.user)
        self.editing = True

    def cancel_editing(self) -> None:
        """Discard edits and restore the stored values."""
        self.form = ProfileForm.from_user(self.auth.user)
        self.editing = False

    def save(self) -> bool:
        """
        Send the edited profile.

        Edit mode is left only when the server reports success.

        Returns:
            Whether the profile was saved

        Raises:
            AuthRequired: If nobody is signed in
            RequestFailed: If the request fails (edit mode is kept)
        """
        user = self._require_auth()
        if self.saving:
            return False
        self.saving = True
        try:
            result = self.api.update_profile({
                "username": self.form.username.strip(),
                "bio": self.form.bio,
                "avatar": self.form.avatar,
            })
        finally:
            self.saving = False

        if not result.get("success"):
            logger.warning("Profile update for user %s was not accepted", user.id)
            return False

        updated = result.get("user")
        if isinstance(updated, dict):
            self.auth.user = UserProfile.model_validate(updated)
        else:
            self.auth.user = user.model_copy(update={
                "username": self.form.username.strip(),
                "bio": self.form.bio,
                "avatar": self.form.avatar,
            })
        self.editing = False
        logger.info("Updated profile for user %s", user.id)
        return True

