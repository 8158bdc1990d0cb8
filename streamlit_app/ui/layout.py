"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, recipe cards, star ratings,
the pagination bar and the sidebar (navbar search and sign-in).
"""

from typing import Callable, List, Optional
import streamlit as st

from recipeshare.engagement import compute_stars
from recipeshare.errors import RecipeClientError
from recipeshare.formatting import format_time, total_time
from recipeshare.home import hero_search
from recipeshare.models import RecipeSummary
from recipeshare.pagination import ELLIPSIS, PaginationControls

from ui.feedback import show_client_error
from utils.api_client import get_api_client
from utils.session import (
    ADD_RECIPE_PAGE,
    PROFILE_PAGE,
    get_auth_session,
    open_recipe,
    open_search,
    set_auth_session,
    sign_out,
)

PLACEHOLDER_IMAGE = "https://via.placeholder.com/300x200?text=No+Image"


def page_header(title: str, subtitle: Optional[str] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
    """
    st.markdown('<div class="rs-page-header">', unsafe_allow_html=True)
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="subtitle">{subtitle}</div>', unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


def pill_tag(text: str) -> str:
    return f'<span class="pill-tag">{text}</span>'


def star_rating(rating: float, count: Optional[int] = None) -> str:
    """
    HTML for a 5-star display of `rating`, with an optional "(n ratings)" suffix.
    """
    stars = compute_stars(rating)
    html = (
        '<span class="rs-stars">'
        + '<span class="rs-star-filled">★</span>' * stars.filled
        + '<span class="rs-star-half">★</span>' * stars.half
        + '<span class="rs-star-empty">★</span>' * stars.empty
        + '</span>'
    )
    if count is not None:
        html += f'<span class="rs-rating-count">({count} ratings)</span>'
    return html


def recipe_card(recipe: RecipeSummary, key_prefix: str) -> None:
    """
    Render one recipe card with a button that opens the detail page.

    Args:
        recipe: Recipe to show
        key_prefix: Unique prefix for widget keys (cards appear on several pages)
    """
    with st.container(border=True):
        st.image(recipe.image or PLACEHOLDER_IMAGE, use_container_width=True)
        st.markdown(f'<div class="rs-card-title">{recipe.title}</div>', unsafe_allow_html=True)

        meta = [f"⏱ {format_time(total_time(recipe))}"]
        if recipe.servings:
            meta.append(f"👥 {recipe.servings} servings")
        if recipe.difficulty:
            meta.append(recipe.difficulty)
        st.markdown(f'<div class="rs-card-meta">{" · ".join(meta)}</div>', unsafe_allow_html=True)

        if recipe.description:
            st.markdown(f'<div class="rs-card-description">{recipe.description}</div>', unsafe_allow_html=True)

        st.markdown(star_rating(recipe.average_rating, recipe.rating_count), unsafe_allow_html=True)

        tags = [pill_tag(value) for value in (recipe.cuisine, recipe.diet) if value]
        if tags:
            st.markdown("".join(tags), unsafe_allow_html=True)

        if st.button("View recipe", key=f"{key_prefix}_open_{recipe.id}", use_container_width=True):
            open_recipe(recipe.id)


def recipe_grid(recipes: List[RecipeSummary], key_prefix: str, columns: int = 3) -> None:
    """Lay recipe cards out in rows of `columns`."""
    for start in range(0, len(recipes), columns):
        row = st.columns(columns)
        for col, recipe in zip(row, recipes[start:start + columns]):
            with col:
                recipe_card(recipe, key_prefix)


def pagination_bar(controls: PaginationControls, on_page: Callable[[int], None], key_prefix: str = "page") -> None:
    """
    Render Previous, page numbers (with ellipses) and Next.

    Nothing is rendered when there is at most one page.

    Args:
        controls: Output of Paginator.controls()
        on_page: Called with the requested page number when a control is clicked
        key_prefix: Unique prefix for widget keys
    """
    numbered = [item for item in controls.items if item != ELLIPSIS]
    if len(numbered) <= 1:
        return

    cols = st.columns(len(controls.items) + 2)
    with cols[0]:
        if st.button("Previous", key=f"{key_prefix}_prev", disabled=not controls.prev_enabled):
            on_page(controls.current_page - 1)

    for col, item in zip(cols[1:-1], controls.items):
        with col:
            if item == ELLIPSIS:
                st.markdown('<div class="rs-ellipsis">…</div>', unsafe_allow_html=True)
            elif st.button(
                str(item),
                key=f"{key_prefix}_{item}",
                type="primary" if item == controls.current_page else "secondary",
            ):
                on_page(item)

    with cols[-1]:
        if st.button("Next", key=f"{key_prefix}_next", disabled=not controls.next_enabled):
            on_page(controls.current_page + 1)


def sidebar() -> None:
    """
    Shared sidebar: navbar search, navigation links and sign-in.
    """
    auth = get_auth_session()
    with st.sidebar:
        st.markdown("### 🍳 **Recipe Share**")

        with st.form("navbar_search", clear_on_submit=True):
            term = st.text_input("Search recipes", placeholder="Search recipes...", label_visibility="collapsed")
            if st.form_submit_button("🔍 Search", use_container_width=True):
                params = hero_search(term)
                if params:
                    open_search(params)

        st.divider()

        if auth.is_authenticated:
            st.markdown(f"Signed in as **{auth.user.username or auth.user.id}**")
            if st.button("➕ Add Recipe", use_container_width=True):
                st.switch_page(ADD_RECIPE_PAGE)
            if st.button("👤 Profile", use_container_width=True):
                st.switch_page(PROFILE_PAGE)
            if st.button("Logout", use_container_width=True):
                sign_out()
                st.rerun()
        else:
            with st.form("sign_in"):
                st.markdown("#### Sign in")
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                if st.form_submit_button("Login", use_container_width=True):
                    try:
                        set_auth_session(get_api_client().login(email, password))
                    except RecipeClientError as e:
                        show_client_error(e)
                    else:
                        st.rerun()
