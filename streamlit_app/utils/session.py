"""
Session management utilities for Streamlit pages.

This module keeps everything that must survive page navigation inside one
browser session in st.session_state:
- the AuthSession of the signed-in user
- one controller per view (search, recipe detail, authoring, profile, home)
- navigation hand-offs (the recipe to open, the search term to run)

Each view owns its controller exclusively; no page mutates another page's
controller except through the hand-off keys below.
"""

from typing import Any, Callable, Dict, MutableMapping, Optional

import streamlit as st

from recipeshare.models import AuthSession

AUTH_KEY = "auth_session"

# Navigation hand-off keys
OPEN_RECIPE_KEY = "open_recipe_id"
SEARCH_PARAMS_KEY = "pending_search_params"

SEARCH_PAGE = "pages/01_🔍_Search.py"
RECIPE_PAGE = "pages/02_📖_Recipe.py"
ADD_RECIPE_PAGE = "pages/03_➕_Add_Recipe.py"
PROFILE_PAGE = "pages/04_👤_Profile.py"

CONTROLLER_KEYS = ("search_controller", "detail_controller", "authoring_controller", "profile_controller")

ACTIVE_VIEW_KEY = "active_view"

# Controller method run when the user navigates from that view to another page
LEAVE_HOOKS = {
    "search_controller": "leave",
    "detail_controller": "leave",
    "authoring_controller": "discard",
}


def get_auth_session() -> AuthSession:
    """Get the current AuthSession (signed out if nobody has signed in yet)."""
    if AUTH_KEY not in st.session_state:
        st.session_state[AUTH_KEY] = AuthSession()
    return st.session_state[AUTH_KEY]


def set_auth_session(session: AuthSession) -> None:
    """
    Replace the auth session.

    Controllers capture the session when they are built, so they are dropped
    and rebuilt against the new identity on next use.
    """
    st.session_state[AUTH_KEY] = session
    for key in CONTROLLER_KEYS:
        st.session_state.pop(key, None)


def sign_out() -> None:
    set_auth_session(AuthSession())


def get_controller(key: str, factory: Callable[[], Any]) -> Any:
    """Get the controller stored under `key`, building it with `factory` on first use."""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def open_recipe(recipe_id: str) -> None:
    """Navigate to the detail page for `recipe_id`."""
    st.session_state[OPEN_RECIPE_KEY] = recipe_id
    st.switch_page(RECIPE_PAGE)


def open_search(params: Dict[str, str]) -> None:
    """Navigate to the search page as if opened with ?q=<term>."""
    st.session_state[SEARCH_PARAMS_KEY] = dict(params)
    st.switch_page(SEARCH_PAGE)


def enter_view(key: str, state: Optional[MutableMapping[str, Any]] = None) -> bool:
    """
    Mark `key` as the active view and run the leave hook of the view before it.

    Leaving the search or recipe page makes late responses stale; leaving the
    add-recipe form throws the draft away.

    Returns:
        True if the user arrived from a different page
    """
    state = st.session_state if state is None else state
    previous = state.get(ACTIVE_VIEW_KEY)
    state[ACTIVE_VIEW_KEY] = key
    if previous == key:
        return False
    controller = state.get(previous) if previous else None
    hook = LEAVE_HOOKS.get(previous)
    if controller is not None and hook:
        getattr(controller, hook)()
    return True
