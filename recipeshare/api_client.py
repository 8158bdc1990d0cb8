"""
Recipe API Client Module.

This module is the **single source of truth** for all communication with the
recipe API. Every HTTP call made by the controllers goes through RecipeApiClient.

Key principles:
- Centralized error handling: every transport or HTTP failure becomes RequestFailed
- Consistent timeout for every request
- Responses are validated into pydantic models before they leave this module
- No retries: the user re-triggers a failed action

# NOTE: When adding new endpoints, follow this pattern:
    - Add a method that takes the parameters the endpoint needs
    - Call self._request() with the method, path and params/json
    - Validate the JSON into a model from recipeshare.models
    - Let RequestFailed propagate; pages decide how to show it
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from recipeshare.config import ApiConfig
from recipeshare.errors import RequestFailed
from recipeshare.models import (
    AuthSession,
    RecipeDetail,
    RecipeListResponse,
    RecipePayload,
    RecipeSummary,
    UserProfile,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_message(response: Optional[requests.Response], fallback: str) -> str:
    """Prefer the server's {"message": ...} body, like the API's own error responses."""
    if response is None:
        return fallback
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class RecipeApiClient:
    """
    HTTP client for the recipe API.

    Args:
        base_url: API base URL (defaults to RECIPES_API_URL)
        token: Bearer token of the signed-in user, if any
        timeout: Per-request timeout in seconds (defaults to RECIPES_API_TIMEOUT)
        session: requests.Session to use (a new one is created if omitted)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or ApiConfig.get_base_url()).rstrip("/")
        self.token = token
        self.timeout = timeout or ApiConfig.get_timeout()
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        failure: str = "Request failed",
    ) -> Any:
        """
        Perform one request and return the decoded JSON body (None for empty bodies).

        Raises:
            RequestFailed: On timeout, connection error, non-2xx status or undecodable body
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.error("%s %s timed out after %ss", method, path, self.timeout)
            raise RequestFailed("Request timed out. The recipe server may be slow or unreachable.")
        except requests.exceptions.ConnectionError:
            logger.error("%s %s could not connect to %s", method, path, self.base_url)
            raise RequestFailed("Could not connect to the recipe server. Please check your connection.")
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            message = _error_message(e.response, failure)
            logger.error("%s %s returned %s: %s", method, path, status_code, message)
            raise RequestFailed(message, status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise RequestFailed(f"{failure}: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body", method, path)
            raise RequestFailed(f"{failure}: unexpected response from server", status_code=response.status_code) from e

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, failure: str) -> ModelT:
        """Validate a response body, reporting a malformed one as RequestFailed."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error("Malformed %s in response: %s", model.__name__, e)
            raise RequestFailed(f"{failure}: unexpected response from server") from e

    @classmethod
    def _parse_list(cls, model: Type[ModelT], data: Any, failure: str) -> List[ModelT]:
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error("Expected a list of %s, got %s", model.__name__, type(data).__name__)
            raise RequestFailed(f"{failure}: unexpected response from server")
        return [cls._parse(model, item, failure) for item in data]

    # Recipes

    def list_recipes(self, query: Mapping[str, Any]) -> RecipeListResponse:
        """
        Fetch one page of recipes.

        Args:
            query: Parameters produced by recipeshare.filters.compose()

        Returns:
            RecipeListResponse with recipes and pagination metadata
        """
        data = self._request("GET", "/recipes", params=query, failure="Failed to load recipes")
        return self._parse(RecipeListResponse, data or {}, "Failed to load recipes")

    def get_recipe(self, recipe_id: str) -> RecipeDetail:
        """Fetch a full recipe document including ratings and comments."""
        data = self._request("GET", f"/recipes/{recipe_id}", failure="Failed to load recipe")
        return self._parse(RecipeDetail, data, "Failed to load recipe")

    def get_popular_recipes(self) -> List[RecipeSummary]:
        data = self._request("GET", "/recipes/popular", failure="Failed to load recipes")
        return self._parse_list(RecipeSummary, data, "Failed to load recipes")

    def create_recipe(self, payload: RecipePayload) -> str:
        """
        Submit a new recipe.

        Returns:
            Identifier of the created recipe
        """
        data = self._request("POST", "/recipes", json=payload.to_request_body(), failure="Failed to add recipe")
        if not isinstance(data, dict) or not (data.get("_id") or data.get("id")):
            raise RequestFailed("Failed to add recipe: server did not return an id")
        return str(data.get("_id") or data.get("id"))

    def rate_recipe(self, recipe_id: str, rating: int) -> None:
        self._request("POST", f"/recipes/{recipe_id}/rate", json={"rating": rating}, failure="Failed to submit rating")

    def add_favorite(self, recipe_id: str) -> None:
        self._request("POST", f"/recipes/{recipe_id}/favorite", failure="Failed to update favorites")

    def remove_favorite(self, recipe_id: str) -> None:
        self._request("DELETE", f"/recipes/{recipe_id}/favorite", failure="Failed to update favorites")

    def add_comment(self, recipe_id: str, text: str) -> None:
        self._request("POST", f"/recipes/{recipe_id}/comment", json={"text": text}, failure="Failed to add comment")

    # Users

    def get_user_recipes(self, user_id: str) -> List[RecipeSummary]:
        data = self._request("GET", f"/recipes/user/{user_id}", failure="Failed to load profile data")
        return self._parse_list(RecipeSummary, data, "Failed to load profile data")

    def get_user_favorites(self, user_id: str) -> List[RecipeSummary]:
        data = self._request("GET", f"/users/{user_id}/favorites", failure="Failed to load profile data")
        return self._parse_list(RecipeSummary, data, "Failed to load profile data")

    def update_profile(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Update the signed-in user's profile.

        Returns:
            Dictionary with at least `success` (bool) and, when present, the updated `user`
        """
        data = self._request("PUT", "/users/profile", json=dict(fields), failure="Failed to update profile")
        if not isinstance(data, dict):
            return {"success": False}
        data.setdefault("success", "user" in data)
        return data

    # Auth collaborator boundary

    def login(self, email: str, password: str) -> AuthSession:
        """
        Exchange credentials for a token.

        The returned session is also applied to this client, so subsequent calls
        are authenticated.
        """
        data = self._request("POST", "/auth/login", json={"email": email, "password": password}, failure="Login failed")
        if not isinstance(data, dict) or not data.get("token") or not data.get("user"):
            raise RequestFailed("Login failed: server did not return a session")
        session = AuthSession(token=data["token"], user=self._parse(UserProfile, data["user"], "Login failed"))
        self.token = session.token
        return session
