"""
Error, empty-result and busy indicators shared by the recipe pages.

Every page reports RecipeClientError through show_client_error, so sign-in
prompts, server rejections and form problems look the same wherever they occur.
"""

from contextlib import contextmanager
from typing import Optional
import streamlit as st

from recipeshare.errors import AuthRequired, RecipeClientError, RequestFailed, ValidationError


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Show a failed action, e.g. a rejected rating or an unreachable API.

    Args:
        message: What went wrong, as the user should read it
        hint: Optional next step shown underneath
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_client_error(error: RecipeClientError) -> None:
    """
    Render any recipe client error with a hint matching its kind.

    AuthRequired points to the sign-in form, RequestFailed invites a retry,
    ValidationError just shows what to fix.
    """
    if isinstance(error, AuthRequired):
        show_error(error.message, hint="Sign in from the sidebar to continue.")
    elif isinstance(error, RequestFailed):
        show_error(error.message, hint="Nothing was changed. Please try again.")
    elif isinstance(error, ValidationError):
        st.warning(error.message)
    else:
        show_error(error.message)


def show_success(message: str) -> None:
    st.success(f"✅ {message}")


def show_empty_state(
    title: str,
    subtitle: Optional[str] = None,
    action_label: str = "Browse recipes",
    action_page_path: Optional[str] = None,
) -> None:
    """
    Placeholder for a list with nothing in it: no search hits, no favorites yet.

    When action_page_path is given, a button leads to the page where the list
    can be filled (the search page, the add-recipe form).
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)
    if action_page_path and st.button(action_label, use_container_width=True, type="primary"):
        st.switch_page(action_page_path)


@contextmanager
def working_spinner(label: str = "Loading recipes…"):
    """Spinner shown while a blocking API call runs."""
    with st.spinner(label):
        yield
