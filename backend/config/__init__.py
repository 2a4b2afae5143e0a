"""
WordPress Configuration Management

Turns the environment a WordPress container starts with into one validated,
immutable configuration value.

Key properties:
- Environment access is injected, so any mapping can stand in for os.environ
- Every problem is reported at once, in field declaration order
- Placeholder keys and salts still resolve, but are rejected in production
"""

from .environment import Environment, get_current_environment
from .fields import PLACEHOLDER_SECRET, SECRET_NAMES, WORDPRESS_FIELDS, FieldKind, FieldSpec
from .resolver import Origin, ResolvedField, resolve_fields
from .validation import (
    ConfigurationError,
    ConfigValidationError,
    IssueCode,
    IssueSeverity,
    ValidationIssue,
    validate_environment_setting,
    validate_fields,
)
from .wordpress_config import (
    WordPressConfig,
    build_config,
    get_wordpress_config,
    load_wordpress_config,
    reload_wordpress_config,
)

__all__ = [
    "Environment",
    "get_current_environment",
    "PLACEHOLDER_SECRET",
    "SECRET_NAMES",
    "WORDPRESS_FIELDS",
    "FieldKind",
    "FieldSpec",
    "Origin",
    "ResolvedField",
    "resolve_fields",
    "ConfigurationError",
    "ConfigValidationError",
    "IssueCode",
    "IssueSeverity",
    "ValidationIssue",
    "validate_environment_setting",
    "validate_fields",
    "WordPressConfig",
    "build_config",
    "get_wordpress_config",
    "load_wordpress_config",
    "reload_wordpress_config",
]
