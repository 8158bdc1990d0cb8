"""
Recipe Share - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point and the landing page. It sets
up the page configuration, the shared sidebar (search and sign-in) and shows the
hero search box with the currently popular recipes.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_🔍_Search.py`) will appear
as pages in the sidebar navigation.
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import recipeshare
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import recipeshare.config  # noqa: F401

import streamlit as st

from recipeshare.errors import RecipeClientError
from recipeshare.home import HomeController, hero_search
from ui.styles import load_global_styles
from ui.layout import page_header, recipe_grid, sidebar
from ui.feedback import show_client_error, show_empty_state, working_spinner
from utils.api_client import get_api_client
from utils.session import SEARCH_PAGE, enter_view, get_controller, open_search

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Share",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded"
)

load_global_styles()
sidebar()
enter_view("home_controller")

page_header(
    "Recipe Share",
    subtitle="Discover, cook and share recipes from home cooks everywhere."
)

# Hero search
with st.form("hero_search"):
    col_input, col_button = st.columns([5, 1])
    with col_input:
        term = st.text_input(
            "What do you want to cook?",
            placeholder="Search by recipe, ingredient or cuisine...",
            label_visibility="collapsed",
        )
    with col_button:
        submitted = st.form_submit_button("Search", use_container_width=True, type="primary")
    if submitted:
        params = hero_search(term)
        if params:
            open_search(params)
        else:
            st.switch_page(SEARCH_PAGE)

st.markdown("## 🔥 Popular recipes")

home = get_controller("home_controller", lambda: HomeController(get_api_client()))
if not home.popular:
    try:
        with working_spinner("Loading popular recipes…"):
            home.load()
    except RecipeClientError as e:
        show_client_error(e)

if home.popular:
    recipe_grid(home.popular, key_prefix="popular")
else:
    show_empty_state(
        "No popular recipes yet",
        subtitle="Be the first to share one, or browse everything on the search page.",
        action_label="Browse recipes",
        action_page_path=SEARCH_PAGE,
    )
