"""
WordPress Configuration

Assembles validated settings into one immutable configuration value and
exposes the process-wide instance with explicit reload.
"""

import logging
import os
import secrets
import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .environment import Environment, EnvLookup, get_current_environment
from .fields import SECRET_NAMES, WORDPRESS_FIELDS
from .resolver import ResolvedField, resolve_fields
from .validation import (
    ConfigurationError,
    ConfigValidator,
    ValidationIssue,
    validate_environment_setting,
    validate_fields,
)

logger = logging.getLogger(__name__)

# Constant name -> WordPressConfig attribute for scalar string fields
_STRING_ATTRIBUTES = {
    "DB_NAME": "db_name",
    "DB_USER": "db_user",
    "DB_PASSWORD": "db_password",
    "DB_HOST": "db_host",
    "DB_CHARSET": "db_charset",
    "DB_COLLATE": "db_collate",
    "TABLE_PREFIX": "table_prefix",
}

_FLAG_ATTRIBUTES = {
    "WP_DEBUG": "debug",
    "WP_DEBUG_LOG": "debug_log",
    "WP_DEBUG_DISPLAY": "debug_display",
}

# Same alphabet as the WordPress secret-key service
SECRET_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()-_[]{}<>~`+=,.;:/?|"


def mask_value(value: str) -> str:
    """Keep first and last 2 characters of a sensitive value."""
    if len(value) > 4:
        return value[:2] + "*" * (len(value) - 4) + value[-2:]
    return "*" * len(value)


@dataclass(frozen=True)
class WordPressConfig:
    """Validated WordPress bootstrap configuration."""

    db_name: str
    db_user: str
    db_password: str
    db_host: str
    db_charset: str
    db_collate: str
    table_prefix: str
    # Read-only mapping; left out of the generated __hash__
    secrets: Mapping[str, str] = field(hash=False)
    debug: bool = False
    debug_log: bool = False
    debug_display: bool = False
    environment: Environment = Environment.DEVELOPMENT
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def db_host_parts(self) -> tuple[str, int | None]:
        """Database host and port (None when the default port applies)."""
        host, port = ConfigValidator.split_host_port(self.db_host)
        return host, int(port) if port is not None else None

    def to_constants(self) -> dict[str, Any]:
        """Values keyed by the constant names wp-config.php defines."""
        constants: dict[str, Any] = {
            name: getattr(self, attribute)
            for name, attribute in _STRING_ATTRIBUTES.items()
        }
        constants.update(self.secrets)
        constants.update(
            {name: getattr(self, attribute) for name, attribute in _FLAG_ATTRIBUTES.items()}
        )
        return constants

    def to_safe_dict(self) -> dict[str, Any]:
        """Configuration for display, with the password and secrets masked."""
        return {
            "environment": self.environment.value,
            "database": {
                "name": self.db_name,
                "user": self.db_user,
                "password": mask_value(self.db_password),
                "host": self.db_host,
                "charset": self.db_charset,
                "collate": self.db_collate,
            },
            "table_prefix": self.table_prefix,
            "secrets": {name: mask_value(value) for name, value in self.secrets.items()},
            "debug": {
                "enabled": self.debug,
                "log": self.debug_log,
                "display": self.debug_display,
            },
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


def build_config(
    resolved: Iterable[ResolvedField],
    issues: Iterable[ValidationIssue],
    environment: Environment = Environment.DEVELOPMENT,
) -> WordPressConfig:
    """
    Build the configuration from validated fields.

    Args:
        resolved: Output of resolve_fields over WORDPRESS_FIELDS
        issues: Output of validate_fields for the same fields
        environment: Mode the fields were validated in

    Returns:
        Fully populated WordPressConfig; warning issues are attached

    Raises:
        ConfigurationError: If any error-severity issue is present
    """
    issues = list(issues)
    if any(issue.is_error for issue in issues):
        raise ConfigurationError(issues)

    values = {item.name: item.value for item in resolved}
    missing = [spec.name for spec in WORDPRESS_FIELDS if spec.name not in values]
    if missing:
        raise ValueError(f"Resolved fields missing: {', '.join(missing)}")

    kwargs: dict[str, Any] = {
        attribute: values[name] for name, attribute in _STRING_ATTRIBUTES.items()
    }
    kwargs.update(
        {
            attribute: bool(ConfigValidator.parse_flag(values[name]))
            for name, attribute in _FLAG_ATTRIBUTES.items()
        }
    )
    return WordPressConfig(
        secrets=MappingProxyType({name: values[name] for name in SECRET_NAMES}),
        environment=environment,
        warnings=tuple(issues),
        **kwargs,
    )


def load_wordpress_config(
    lookup: EnvLookup | None = None,
    environment: Environment | None = None,
) -> WordPressConfig:
    """
    Resolve, validate and build the configuration in one pass.

    Args:
        lookup: Environment lookup function (defaults to os.environ.get)
        environment: Validation mode (detected through lookup if omitted; an
            unrecognised APP_ENV/ENVIRONMENT/ENV value is then an error)

    Returns:
        WordPressConfig

    Raises:
        ConfigurationError: With every issue found
    """
    lookup = lookup or os.environ.get
    issues: list[ValidationIssue] = []
    if environment is None:
        issues.extend(validate_environment_setting(lookup))
        environment = get_current_environment(lookup)

    resolved = resolve_fields(WORDPRESS_FIELDS, lookup)
    issues.extend(validate_fields(resolved, environment))
    return build_config(resolved, issues, environment)


def generate_secret_values(length: int = 64) -> dict[str, str]:
    """Generate a fresh random value for each of the eight keys and salts."""
    return {
        name: "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))
        for name in SECRET_NAMES
    }


# Global configuration instance
_config: WordPressConfig | None = None


def get_wordpress_config(reload: bool = False) -> WordPressConfig:
    """
    Get the process-wide WordPress configuration.

    Args:
        reload: If True, rebuild from the current environment

    Returns:
        WordPressConfig instance

    Raises:
        ConfigurationError: If the environment does not validate
    """
    global _config

    if _config is None or reload:
        try:
            config = load_wordpress_config()
        except ConfigurationError as e:
            logger.error(
                f"WordPress configuration rejected with {len(e.errors)} error(s)"
            )
            raise

        for issue in config.warnings:
            logger.warning(f"Configuration issue: {issue}")
        _config = config
        logger.info(
            f"WordPress configuration loaded for {config.environment.value} environment"
        )

    return _config


def reload_wordpress_config() -> WordPressConfig:
    """Rebuild the configuration from the current environment."""
    return get_wordpress_config(reload=True)


def reset_configuration() -> None:
    """Reset global configuration (useful for testing)."""
    global _config
    _config = None
