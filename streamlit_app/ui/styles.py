"""
Global CSS Styling for Recipe Share.

This module provides load_global_styles() to inject consistent styling
across all pages. Focuses on typography, recipe cards, star ratings and the
pagination bar.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Recipe Share app.

    This function:
    - Imports Google Fonts (Nunito) for friendly typography
    - Styles recipe cards with rounded corners and subtle borders
    - Colors star ratings (filled, half, empty)
    - Keeps page headers and pagination compact
    """
    css = """
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        /* Global font family */
        html, body, [class*="css"] {
            font-family: 'Nunito', 'sans serif' !important;
        }

        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        /* Buttons - rounded pills */
        .stButton > button {
            border-radius: 50px !important;
            font-weight: 600 !important;
        }

        /* Main app container */
        .main .block-container {
            max-width: 1200px !important;
            padding-top: 1.5rem !important;
            padding-bottom: 2.5rem !important;
        }

        /* Recipe card */
        .rs-card-title {
            font-size: 1.15rem !important;
            font-weight: 700 !important;
            margin: 0.5rem 0 0.25rem 0 !important;
        }

        .rs-card-meta {
            color: #666 !important;
            font-size: 0.85rem !important;
            margin-bottom: 0.25rem !important;
        }

        .rs-card-description {
            color: #444 !important;
            font-size: 0.9rem !important;
            display: -webkit-box;
            -webkit-line-clamp: 3;
            -webkit-box-orient: vertical;
            overflow: hidden;
        }

        /* Star ratings */
        .rs-stars {
            font-size: 1.1rem;
            letter-spacing: 0.05em;
        }

        .rs-star-filled {
            color: #f5a623;
        }

        .rs-star-half {
            color: #f5a623;
            opacity: 0.5;
        }

        .rs-star-empty {
            color: #d0d0d0;
        }

        .rs-rating-count {
            color: #888;
            font-size: 0.85rem;
            margin-left: 0.4rem;
        }

        /* Pill tags (cuisine, diet) */
        .pill-tag {
            display: inline-block;
            padding: 0.25rem 0.75rem;
            border-radius: 50px;
            background: #FDEFE3;
            color: #C0612B;
            font-size: 0.75rem;
            font-weight: 600;
            margin: 0 0.25rem 0 0;
        }

        /* Page header */
        .rs-page-header {
            margin-bottom: 1.25rem !important;
        }

        .rs-page-header .subtitle {
            color: #666 !important;
            font-size: 1rem !important;
        }

        /* Pagination ellipsis */
        .rs-ellipsis {
            text-align: center;
            padding-top: 0.4rem;
            color: #888;
        }

        /* Instruction numbers */
        .rs-step-number {
            display: inline-block;
            min-width: 1.8rem;
            height: 1.8rem;
            line-height: 1.8rem;
            border-radius: 50%;
            background: #C0612B;
            color: white;
            text-align: center;
            font-weight: 700;
            margin-right: 0.5rem;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
