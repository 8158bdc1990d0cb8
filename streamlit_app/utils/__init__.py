"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Construction of the per-session RecipeApiClient
- session: Auth session, navigation hand-off and controller storage in st.session_state
"""
