"""
Error taxonomy for the recipe client.

Three kinds of failure reach the UI:
- ValidationError: detected locally, the action never reaches the network
- AuthRequired: the action needs a signed-in user
- RequestFailed: the API rejected the request or could not be reached

None of them is fatal. Pages catch RecipeClientError and render a notification,
while the controllers guarantee state is left at its last valid value.
"""

from enum import Enum
from typing import Optional


class ValidationReason(str, Enum):
    """Named reasons a local check can block an action."""
    MISSING_TITLE = "MissingTitle"
    MISSING_DESCRIPTION = "MissingDescription"
    MISSING_IMAGE = "MissingImage"
    MISSING_CUISINE = "MissingCuisine"
    NO_VALID_INGREDIENTS = "NoValidIngredients"
    NO_VALID_INSTRUCTIONS = "NoValidInstructions"
    INVALID_NUMBER = "InvalidNumber"
    INVALID_RATING = "InvalidRating"
    EMPTY_COMMENT = "EmptyComment"


# User-facing messages shown as form notifications
VALIDATION_MESSAGES = {
    ValidationReason.MISSING_TITLE: "Please enter a recipe title",
    ValidationReason.MISSING_DESCRIPTION: "Please enter a recipe description",
    ValidationReason.MISSING_IMAGE: "Please upload a recipe image",
    ValidationReason.MISSING_CUISINE: "Please enter the cuisine type",
    ValidationReason.NO_VALID_INGREDIENTS: "Please add at least one ingredient",
    ValidationReason.NO_VALID_INSTRUCTIONS: "Please add at least one instruction",
    ValidationReason.INVALID_NUMBER: "Please enter a whole number",
    ValidationReason.INVALID_RATING: "Ratings must be between 1 and 5 stars",
    ValidationReason.EMPTY_COMMENT: "Please enter a comment",
}


class RecipeClientError(Exception):
    """Base class for every error the recipe client surfaces to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecipeClientError):
    """
    A client-side check failed.

    Attributes:
        reason: Which check failed
        field: Optional name of the offending field (used for InvalidNumber)
    """

    def __init__(self, reason: ValidationReason, field: Optional[str] = None, message: Optional[str] = None):
        text = message or VALIDATION_MESSAGES[reason]
        if field and not message:
            text = f"{text} ({field})"
        super().__init__(text)
        self.reason = reason
        self.field = field


class AuthRequired(RecipeClientError):
    """The action requires an authenticated user."""

    def __init__(self, action: str = "continue"):
        super().__init__(f"Please login to {action}")
        self.action = action


class RequestFailed(RecipeClientError):
    """
    The API call was rejected or never completed.

    Attributes:
        status_code: HTTP status code, or None for transport failures (timeout, DNS, refused)
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
