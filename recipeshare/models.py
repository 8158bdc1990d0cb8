"""
Recipe, filter and engagement models for the recipe client.

This module defines the pydantic schemas the client exchanges with the recipe API.
All API responses are validated into these models before any view state is
updated, so the controllers never read half-shaped dictionaries.

# NOTE: The API is a Mongo-backed service. Identifiers arrive as "_id" on most
    documents and as "id" on the authenticated user, so every identifier field
    accepts both. Wire names are camelCase; Python attributes are snake_case and
    models are populated by either name.

Current field expectations:
- GET /recipes returns {"recipes": [...], "pagination": {...}} where pagination may
  report the item count as "totalRecipes"
- GET /recipes/{id} embeds ratings (with rater identity), comments and author
- Rating.user is an embedded user object on detail responses, a bare id elsewhere
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

# Identifiers are opaque strings, even when a server sends numbers
Identifier = Annotated[str, BeforeValidator(lambda value: str(value))]

DIFFICULTIES = ["Easy", "Medium", "Hard"]

CUISINES = [
    "Italian",
    "Mexican",
    "Asian",
    "American",
    "French",
    "Indian",
    "Mediterranean",
    "Thai",
    "Chinese",
    "Japanese",
]

DIETS = ["Regular", "Vegetarian", "Vegan", "Gluten-Free", "Keto", "Paleo"]


class UserRef(BaseModel):
    """Embedded user identity (author, rater, commenter or the signed-in user)."""
    id: Identifier = Field(..., validation_alias=AliasChoices("_id", "id"), description="User identifier")
    username: Optional[str] = Field(None, description="Display name")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class UserProfile(UserRef):
    """Editable profile of the signed-in user."""
    email: Optional[str] = Field(None, description="Account email")
    bio: Optional[str] = Field(None, description="Short biography")
    avatar: Optional[str] = Field(None, description="Avatar image URL")


class AuthSession(BaseModel):
    """
    Client view of the auth collaborator.

    The session is created by the sign-in flow and only read by the engine:
    is_authenticated gates engagement actions, user identifies the rater.
    """
    token: Optional[str] = Field(None, description="Bearer token for authenticated calls")
    user: Optional[UserProfile] = Field(None, description="Signed-in user")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None


class Rating(BaseModel):
    """A single user's star rating of a recipe."""
    user: Optional[UserRef] = Field(None, description="Who rated")
    rating: int = Field(..., ge=1, le=5, description="Stars given (1-5)")

    model_config = ConfigDict(extra="allow")

    @field_validator("user", mode="before")
    @classmethod
    def _wrap_bare_id(cls, value: Any) -> Any:
        if isinstance(value, (str, int)):
            return {"id": value}
        return value


class Comment(BaseModel):
    """A comment left on a recipe."""
    user: Optional[UserRef] = Field(None, description="Commenter")
    text: str = Field(..., description="Comment body")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="When the comment was posted")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Ingredient(BaseModel):
    """Ingredient line as stored by the API."""
    name: str
    amount: str


class Instruction(BaseModel):
    """Numbered instruction step as stored by the API."""
    step: int = Field(..., ge=1)
    description: str


class RecipeSummary(BaseModel):
    """
    Recipe card data as returned by list endpoints.

    Times are in minutes. average_rating is computed by the server.
    """
    id: Identifier = Field(..., validation_alias=AliasChoices("_id", "id"), description="Recipe identifier")
    title: str = Field(..., description="Recipe title")
    description: str = Field("", description="Short description")
    image: Optional[str] = Field(None, description="Image URL or data URL")

    prep_time: int = Field(0, ge=0, alias="prepTime", description="Preparation time in minutes")
    cook_time: int = Field(0, ge=0, alias="cookTime", description="Cooking time in minutes")
    total_time: Optional[int] = Field(None, ge=0, alias="totalTime", description="Total time if the server precomputes it")
    servings: Optional[int] = Field(None, ge=0, description="Number of servings")

    difficulty: Optional[str] = Field(None, description="Easy, Medium or Hard")
    cuisine: Optional[str] = Field(None, description="Cuisine name")
    diet: Optional[str] = Field(None, description="Diet label")

    average_rating: float = Field(0.0, ge=0, le=5, alias="averageRating", description="Server-computed mean rating")
    ratings: List[Rating] = Field(default_factory=list, description="Individual ratings")
    author: Optional[UserRef] = Field(None, description="Recipe author")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("average_rating", mode="before")
    @classmethod
    def _null_rating_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @property
    def rating_count(self) -> int:
        """Number of ratings behind average_rating."""
        return len(self.ratings)


class RecipeDetail(RecipeSummary):
    """Full recipe document as returned by GET /recipes/{id}."""
    calories: Optional[int] = Field(None, ge=0, description="Calories per serving")
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[Instruction] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class FilterSet(BaseModel):
    """
    Sparse set of search criteria edited in the search view.

    Blank strings and None numbers mean "criterion absent". Negative maxima are
    rejected here, at construction, so the query composer never sees them.
    """
    search: str = Field("", description="Free-text search")
    cuisine: str = Field("", description="Cuisine name")
    diet: str = Field("", description="Diet label")
    difficulty: str = Field("", description="Easy, Medium or Hard")
    max_prep_time: Optional[int] = Field(None, ge=0, alias="maxPrepTime", description="Upper bound on prep minutes")
    max_cook_time: Optional[int] = Field(None, ge=0, alias="maxCookTime", description="Upper bound on cook minutes")
    max_calories: Optional[int] = Field(None, ge=0, alias="maxCalories", description="Upper bound on calories")
    ingredients: str = Field("", description="Comma-delimited ingredient names")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, value: str) -> str:
        if value.strip() and value.strip() not in DIFFICULTIES:
            raise ValueError(f"difficulty must be one of {', '.join(DIFFICULTIES)}")
        return value

    def is_empty(self) -> bool:
        """True when no criterion is set (whitespace-only text counts as unset)."""
        for name, value in self:
            if isinstance(value, str) and value.strip():
                return False
            if value is not None and not isinstance(value, str):
                return False
        return True


class Page(BaseModel):
    """
    Pagination metadata returned with every list query.

    has_prev / has_next are re-derived from current_page and total_pages after
    validation, so they cannot disagree with the page numbers.
    """
    current_page: int = Field(1, ge=1, alias="currentPage")
    total_pages: int = Field(0, ge=0, alias="totalPages")
    has_next: bool = Field(False, alias="hasNext")
    has_prev: bool = Field(False, alias="hasPrev")
    total_items: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("totalItems", "totalRecipes", "total_items"),
        serialization_alias="totalItems",
    )

    model_config = ConfigDict(populate_by_name=True)

    def model_post_init(self, __context: Any) -> None:
        """Derive navigation flags from the page numbers."""
        object.__setattr__(self, "has_prev", self.current_page > 1)
        object.__setattr__(self, "has_next", self.current_page < self.total_pages)


class RecipeListResponse(BaseModel):
    """Body of GET /recipes."""
    recipes: List[RecipeSummary] = Field(default_factory=list)
    pagination: Page = Field(default_factory=Page)


class EngagementState(BaseModel):
    """
    Client view of one recipe's rating and favorite status.

    user_rating is 0 when the signed-in user has not rated the recipe.
    """
    average_rating: float = Field(0.0, ge=0, le=5, alias="averageRating")
    rating_count: int = Field(0, ge=0, alias="ratingCount")
    user_rating: int = Field(0, ge=0, le=5, alias="userRating")
    favorited: bool = False

    model_config = ConfigDict(populate_by_name=True)


class RecipePayload(BaseModel):
    """
    Body of POST /recipes, built only from a validated draft.

    Serialise with to_request_body() so an absent calories value is omitted
    instead of being sent as null.
    """
    title: str
    description: str
    image: str
    prep_time: int = Field(..., ge=0, alias="prepTime")
    cook_time: int = Field(..., ge=0, alias="cookTime")
    servings: int = Field(..., ge=0)
    calories: Optional[int] = Field(None, ge=0)
    difficulty: str
    cuisine: str
    diet: str
    ingredients: List[Ingredient]
    instructions: List[Instruction]

    model_config = ConfigDict(populate_by_name=True)

    def to_request_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
