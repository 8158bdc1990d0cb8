"""
UI Styling and Components Module.

This module provides global CSS styling and reusable UI components
for the Recipe Share Streamlit app.
"""

from ui.styles import load_global_styles
from ui.layout import page_header, recipe_card, recipe_grid, star_rating, pagination_bar, sidebar

__all__ = [
    "load_global_styles",
    "page_header",
    "recipe_card",
    "recipe_grid",
    "star_rating",
    "pagination_bar",
    "sidebar",
]
