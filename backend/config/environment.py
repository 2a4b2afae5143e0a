"""
Environment Detection

Decides whether the WordPress configuration is validated in production mode.
"""

import logging
import os
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

EnvLookup = Callable[[str], str | None]

# Checked in order of precedence
ENVIRONMENT_VARIABLES = ("APP_ENV", "ENVIRONMENT", "ENV")


class Environment(str, Enum):
    """Deployment environment types."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, env_str: str | None) -> "Environment":
        """Convert string to Environment enum, defaulting to development."""
        if not env_str:
            return cls.DEVELOPMENT

        return cls.parse(env_str) or cls.DEVELOPMENT

    @classmethod
    def parse(cls, env_str: str) -> "Environment | None":
        """Convert string to Environment enum, or None if not recognised."""
        env_mapping = {
            "dev": cls.DEVELOPMENT,
            "develop": cls.DEVELOPMENT,
            "development": cls.DEVELOPMENT,
            "test": cls.TESTING,
            "testing": cls.TESTING,
            "stage": cls.STAGING,
            "staging": cls.STAGING,
            "prod": cls.PRODUCTION,
            "production": cls.PRODUCTION,
        }

        return env_mapping.get(env_str.lower().strip())

    def is_production(self) -> bool:
        """Check if secrets must pass the strict strength checks."""
        return self == self.PRODUCTION

    def is_development(self) -> bool:
        return self == self.DEVELOPMENT


def get_current_environment(lookup: EnvLookup | None = None) -> Environment:
    """
    Detect the current environment.

    Checks APP_ENV, ENVIRONMENT and ENV in that order; the first one that is
    set wins. Nothing set means development.

    Args:
        lookup: Environment lookup function (defaults to os.environ.get)

    Returns:
        Environment enum value
    """
    setting = find_environment_setting(lookup)
    if setting is not None:
        env_var, env_value = setting
        environment = Environment.from_string(env_value)
        if Environment.parse(env_value) is None:
            logger.warning(
                f"Unrecognised {env_var} value '{env_value}', using development"
            )
        else:
            logger.debug(f"Environment detected from {env_var}: {environment.value}")
        return environment

    logger.debug("Environment defaulted to: development")
    return Environment.DEVELOPMENT


def find_environment_setting(lookup: EnvLookup | None = None) -> tuple[str, str] | None:
    """Return the (variable, value) pair that selects the mode, if any is set."""
    lookup = lookup or os.environ.get

    for env_var in ENVIRONMENT_VARIABLES:
        env_value = lookup(env_var)
        if env_value:
            return env_var, env_value
    return None
