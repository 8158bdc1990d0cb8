"""
Per-session access to the recipe API.

All pages get their RecipeApiClient from get_api_client() so the bearer token of
the signed-in user is applied consistently. The client itself (and all of its
error handling) lives in recipeshare.api_client.
"""

import streamlit as st

from recipeshare.api_client import RecipeApiClient
from utils.session import get_auth_session

API_CLIENT_KEY = "api_client"


def get_api_client() -> RecipeApiClient:
    """
    Get or create the RecipeApiClient stored in st.session_state.

    The token is refreshed from the auth session on every call, so signing in
    or out takes effect on the next request without rebuilding controllers.
    """
    if API_CLIENT_KEY not in st.session_state:
        st.session_state[API_CLIENT_KEY] = RecipeApiClient()
    client = st.session_state[API_CLIENT_KEY]
    client.token = get_auth_session().token
    return client
