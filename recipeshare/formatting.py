"""
Display helpers shared by the recipe cards, detail page and profile lists.
"""

import base64
from typing import Optional

from recipeshare.models import RecipeSummary


def format_time(minutes: Optional[int], long: bool = False) -> str:
    """
    Human-readable duration.

    Examples:
        >>> format_time(45)
        '45m'
        >>> format_time(90)
        '1h 30m'
        >>> format_time(120, long=True)
        '2 hours'
    """
    minutes = int(minutes or 0)
    if minutes < 60:
        return f"{minutes} minutes" if long else f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    if long:
        return f"{hours} hours {mins} minutes" if mins else f"{hours} hours"
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def total_time(recipe: RecipeSummary) -> int:
    """Total minutes: the server's totalTime when present, else prep + cook."""
    if recipe.total_time:
        return recipe.total_time
    return recipe.prep_time + recipe.cook_time


def encode_image(data: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode an uploaded image as a data: URL, the form the API stores inline images in."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
