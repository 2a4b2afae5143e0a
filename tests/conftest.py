"""Shared fixtures for the WordPress configuration test suite."""

from __future__ import annotations

import secrets

import pytest

from backend.config import SECRET_NAMES
from backend.config.wordpress_config import reset_configuration

CONNECTION_ENV = {
    "WORDPRESS_DB_NAME": "blog",
    "WORDPRESS_DB_USER": "blog_user",
    "WORDPRESS_DB_PASSWORD": "s3cret-db-pass",
    "WORDPRESS_DB_HOST": "db.internal:3306",
}


@pytest.fixture(autouse=True)
def _reset_global_config():
    reset_configuration()
    yield
    reset_configuration()


@pytest.fixture
def strong_secrets() -> dict[str, str]:
    """Eight distinct 40-character random secrets keyed by env var."""
    return {f"WORDPRESS_{name}": secrets.token_urlsafe(30) for name in SECRET_NAMES}


@pytest.fixture
def production_env(strong_secrets) -> dict[str, str]:
    """A complete, valid production environment."""
    return {"APP_ENV": "production", **CONNECTION_ENV, **strong_secrets}
