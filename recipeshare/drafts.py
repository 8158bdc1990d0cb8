"""
Recipe authoring: the draft record, its field reducers and submission.

A RecipeDraft is created empty when the user opens the authoring form, updated
one field at a time through update_draft(), and discarded after a successful
submission or when the user leaves the form.

Submission runs the checks below in order and stops at the first failure:
    1. title            -> MissingTitle
    2. description      -> MissingDescription
    3. image            -> MissingImage
    4. cuisine          -> MissingCuisine
    5. ingredients      -> NoValidIngredients (needs a row with name and amount)
    6. instructions     -> NoValidInstructions (needs a row with a description)
    7. numeric fields   -> InvalidNumber
Blank rows are dropped from the payload, and calories is omitted when left empty.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from recipeshare.errors import AuthRequired, ValidationError, ValidationReason
from recipeshare.models import DIETS, DIFFICULTIES, AuthSession, Ingredient, Instruction, RecipePayload
from recipeshare.rows import IngredientRow, InstructionRow, RowCollection, ingredient_rows, instruction_rows

logger = logging.getLogger(__name__)


@dataclass
class RecipeDraft:
    """
    Form state of a recipe being authored.

    Numeric fields hold the raw text typed by the user; they are parsed only on
    submission so a half-typed value never blocks editing.
    """
    title: str = ""
    description: str = ""
    image: Optional[str] = None
    prep_time: str = ""
    cook_time: str = ""
    servings: str = ""
    calories: str = ""
    difficulty: str = "Easy"
    cuisine: str = ""
    diet: str = "Regular"
    ingredients: RowCollection[IngredientRow] = field(default_factory=ingredient_rows)
    instructions: RowCollection[InstructionRow] = field(default_factory=instruction_rows)


class DraftField(str, Enum):
    """Scalar draft fields that can be set from a form input."""
    TITLE = "title"
    DESCRIPTION = "description"
    IMAGE = "image"
    PREP_TIME = "prep_time"
    COOK_TIME = "cook_time"
    SERVINGS = "servings"
    CALORIES = "calories"
    DIFFICULTY = "difficulty"
    CUISINE = "cuisine"
    DIET = "diet"


def _set_text(name: str) -> Callable[[RecipeDraft, Any], RecipeDraft]:
    def reducer(draft: RecipeDraft, value: Any) -> RecipeDraft:
        return replace(draft, **{name: "" if value is None else str(value)})
    return reducer


def _set_image(draft: RecipeDraft, value: Any) -> RecipeDraft:
    return replace(draft, image=value or None)


def _set_choice(name: str, allowed: list) -> Callable[[RecipeDraft, Any], RecipeDraft]:
    def reducer(draft: RecipeDraft, value: Any) -> RecipeDraft:
        if value not in allowed:
            raise ValueError(f"{name} must be one of {', '.join(allowed)}, got {value!r}")
        return replace(draft, **{name: value})
    return reducer


_REDUCERS: Dict[DraftField, Callable[[RecipeDraft, Any], RecipeDraft]] = {
    DraftField.TITLE: _set_text("title"),
    DraftField.DESCRIPTION: _set_text("description"),
    DraftField.IMAGE: _set_image,
    DraftField.PREP_TIME: _set_text("prep_time"),
    DraftField.COOK_TIME: _set_text("cook_time"),
    DraftField.SERVINGS: _set_text("servings"),
    DraftField.CALORIES: _set_text("calories"),
    DraftField.DIFFICULTY: _set_choice("difficulty", DIFFICULTIES),
    DraftField.CUISINE: _set_text("cuisine"),
    DraftField.DIET: _set_choice("diet", DIETS),
}


def update_draft(draft: RecipeDraft, draft_field: DraftField, value: Any) -> RecipeDraft:
    """
    Return a copy of `draft` with one scalar field replaced.

    The row collections are shared with the original draft; edit them through
    their own insert/remove_at/update_field operations.

    Raises:
        ValueError: If a choice field (difficulty, diet) gets an unknown value
    """
    return _REDUCERS[DraftField(draft_field)](draft, value)


def _parse_whole_number(raw: str, name: str) -> int:
    text = (raw or "").strip()
    try:
        number = int(text)
    except ValueError:
        raise ValidationError(ValidationReason.INVALID_NUMBER, field=name) from None
    if number < 0:
        raise ValidationError(ValidationReason.INVALID_NUMBER, field=name)
    return number


def validate_draft(draft: RecipeDraft) -> RecipePayload:
    """
    Check a draft and build the payload for POST /recipes.

    Returns:
        RecipePayload containing only the filled-in ingredient and instruction rows;
        instruction steps are renumbered 1..N after blank rows are dropped

    Raises:
        ValidationError: For the first failed check, in the order listed in the module docstring
    """
    if not draft.title.strip():
        raise ValidationError(ValidationReason.MISSING_TITLE)
    if not draft.description.strip():
        raise ValidationError(ValidationReason.MISSING_DESCRIPTION)
    if not draft.image:
        raise ValidationError(ValidationReason.MISSING_IMAGE)
    if not draft.cuisine.strip():
        raise ValidationError(ValidationReason.MISSING_CUISINE)

    valid_ingredients = draft.ingredients.complete_rows()
    if not valid_ingredients:
        raise ValidationError(ValidationReason.NO_VALID_INGREDIENTS)

    valid_instructions = draft.instructions.complete_rows()
    if not valid_instructions:
        raise ValidationError(ValidationReason.NO_VALID_INSTRUCTIONS)

    prep_time = _parse_whole_number(draft.prep_time, "prep time")
    cook_time = _parse_whole_number(draft.cook_time, "cook time")
    servings = _parse_whole_number(draft.servings, "servings")
    calories = _parse_whole_number(draft.calories, "calories") if draft.calories.strip() else None

    return RecipePayload(
        title=draft.title.strip(),
        description=draft.description.strip(),
        image=draft.image,
        prep_time=prep_time,
        cook_time=cook_time,
        servings=servings,
        calories=calories,
        difficulty=draft.difficulty,
        cuisine=draft.cuisine.strip(),
        diet=draft.diet,
        ingredients=[Ingredient(name=row.name.strip(), amount=row.amount.strip()) for row in valid_ingredients],
        instructions=[
            Instruction(step=position, description=row.description.strip())
            for position, row in enumerate(valid_instructions, start=1)
        ],
    )


class RecipeAuthoring:
    """
    Authoring form controller: owns the draft and submits it.

    Args:
        api: RecipeApiClient (or any object with create_recipe)
        auth: Current auth session
    """

    def __init__(self, api, auth: AuthSession):
        self.api = api
        self.auth = auth
        self.draft = RecipeDraft()
        self.submitting = False

    def update(self, draft_field: DraftField, value: Any) -> None:
        self.draft = update_draft(self.draft, draft_field, value)

    def discard(self) -> None:
        """Throw the draft away (navigation away from the form)."""
        self.draft = RecipeDraft()

    def submit(self) -> Optional[str]:
        """
        Validate and create the recipe.

        Returns:
            The new recipe id, or None if a submission is already in flight

        Raises:
            AuthRequired: If nobody is signed in
            ValidationError: If the draft fails a check (the API is not called)
            RequestFailed: If the API rejects the recipe (the draft is kept)
        """
        if not self.auth.is_authenticated:
            raise AuthRequired("add recipes")
        if self.submitting:
            logger.debug("Ignoring duplicate recipe submission")
            return None

        payload = validate_draft(self.draft)
        self.submitting = True
        try:
            recipe_id = self.api.create_recipe(payload)
        finally:
            self.submitting = False

        logger.info("Created recipe %s (%r)", recipe_id, payload.title)
        self.discard()
        return recipe_id
