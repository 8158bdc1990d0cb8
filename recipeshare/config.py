"""
Configuration management for the Recipe Share client.

This module centralizes environment variable loading from the .env file at the
project root. It is imported by the API client and by the Streamlit entry point,
so .env is loaded before anything reads the environment.

In deployments without a .env file load_dotenv() is a no-op and platform
environment variables are used instead.

Environment Variables:
- RECIPES_API_URL: Optional, base URL of the recipe API (default: http://localhost:5000/api)
- RECIPES_PAGE_SIZE: Optional, recipes per search page (default: 12)
- RECIPES_API_TIMEOUT: Optional, per-request timeout in seconds (default: 15)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_PAGE_SIZE = 12
DEFAULT_TIMEOUT_SECONDS = 15


def load_env_file() -> None:
    """
    Load environment variables from .env at the project root.

    Safe to call multiple times. override=False means variables already set in
    the environment take precedence over the file.
    """
    # recipeshare/config.py -> recipeshare/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


load_env_file()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


class ApiConfig:
    """Configuration for the recipe API collaborator."""

    @staticmethod
    def get_base_url() -> str:
        """
        Get the recipe API base URL.

        Returns:
            URL string with trailing slashes removed
        """
        return os.getenv("RECIPES_API_URL", DEFAULT_API_URL).rstrip("/")

    @staticmethod
    def get_page_size() -> int:
        """Recipes requested per search page (sent as `limit`)."""
        return _int_from_env("RECIPES_PAGE_SIZE", DEFAULT_PAGE_SIZE)

    @staticmethod
    def get_timeout() -> int:
        """Per-request timeout in seconds."""
        return _int_from_env("RECIPES_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)


def validate_config() -> None:
    """
    Validate the configured values.

    Raises:
        RuntimeError: If any setting is unusable
    """
    problems = []

    url = ApiConfig.get_base_url()
    if not url.startswith(("http://", "https://")):
        problems.append(f"RECIPES_API_URL must be an http(s) URL, got {url!r}")

    if ApiConfig.get_page_size() < 1:
        problems.append("RECIPES_PAGE_SIZE must be at least 1")

    if ApiConfig.get_timeout() < 1:
        problems.append("RECIPES_API_TIMEOUT must be at least 1 second")

    if problems:
        raise RuntimeError(
            "Invalid configuration:\n" +
            "\n".join(f"  - {problem}" for problem in problems) +
            "\n\nCheck the .env file at the project root."
        )
