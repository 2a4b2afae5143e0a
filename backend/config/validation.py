"""
Configuration Validation

Checks resolved WordPress settings against per-kind rules and collects every
problem found instead of stopping at the first one.
"""

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .environment import (
    ENVIRONMENT_VARIABLES,
    Environment,
    EnvLookup,
    find_environment_setting,
)
from .fields import ALLOWED_CHARSETS, PLACEHOLDER_SECRET, FieldKind
from .resolver import Origin, ResolvedField

MIN_SECRET_LENGTH = 32
MIN_SECRET_ENTROPY_PER_CHAR = 3.0

TABLE_PREFIX_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
HOSTNAME_PATTERN = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_.-]*[A-Za-z0-9_])?$")
IPV6_LITERAL_PATTERN = re.compile(r"^\[[0-9A-Fa-f:.]+\]$")
COLLATION_PATTERN = re.compile(r"^[A-Za-z0-9]+_[A-Za-z0-9_]+$")

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})

# Debug flags that leak information when enabled in production
PRODUCTION_UNSAFE_FLAGS = frozenset({"WP_DEBUG", "WP_DEBUG_DISPLAY"})


class IssueCode(str, Enum):
    """Category of a validation problem."""

    MISSING_REQUIRED_VALUE = "missing_required_value"
    INVALID_FORMAT = "invalid_format"
    WEAK_SECRET = "weak_secret"
    UNRECOGNIZED_CHARSET = "unrecognized_charset"


class IssueSeverity(str, Enum):
    """Whether an issue blocks building the configuration."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found with one field."""

    field_name: str
    message: str
    code: IssueCode
    severity: IssueSeverity = IssueSeverity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is IssueSeverity.ERROR

    def to_dict(self) -> dict[str, str]:
        return {
            "field": self.field_name,
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.field_name}: {self.message}"


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(
        self, message: str, field: str | None = None, issues: list[Any] | None = None
    ):
        super().__init__(message)
        self.field = field
        self.issues = issues or []


class ConfigurationError(ConfigValidationError):
    """
    Raised when the WordPress configuration cannot be built.

    Carries every issue found, errors and warnings, in field declaration
    order.
    """

    def __init__(self, issues: Iterable[ValidationIssue]):
        issues = list(issues)
        errors = [issue for issue in issues if issue.is_error]
        message = f"Invalid WordPress configuration: {len(errors)} error(s)"
        if errors:
            message += "; " + "; ".join(str(issue) for issue in errors)
        super().__init__(message, field=errors[0].field_name if errors else None)
        self.issues = tuple(issues)

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.is_error)

    @property
    def warnings(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if not issue.is_error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
            "issues": [issue.to_dict() for issue in self.issues],
        }


def calculate_entropy(text: str) -> float:
    """Calculate Shannon entropy of text in bits."""
    if not text:
        return 0.0

    char_counts: dict[str, int] = {}
    for char in text:
        char_counts[char] = char_counts.get(char, 0) + 1

    text_len = len(text)
    entropy = 0.0

    for count in char_counts.values():
        probability = count / text_len
        entropy -= probability * math.log2(probability)

    return entropy * text_len


class ConfigValidator:
    """Single-value validation predicates."""

    @staticmethod
    def validate_not_blank(value: str) -> bool:
        return bool(value and value.strip())

    @staticmethod
    def validate_port(port: int | str) -> bool:
        """
        Validate port number.

        Args:
            port: Port number to validate

        Returns:
            True if port is valid
        """
        if isinstance(port, str) and not (port.isascii() and port.isdigit()):
            return False
        try:
            port_int = int(port)
            return 1 <= port_int <= 65535
        except (ValueError, TypeError):
            return False

    @staticmethod
    def split_host_port(value: str) -> tuple[str, str | None]:
        """Split `host[:port]`, keeping bracketed IPv6 literals intact."""
        if value.startswith("["):
            host, bracket, rest = value.partition("]")
            if not rest:
                return host + bracket, None
            if rest.startswith(":"):
                return host + bracket, rest[1:]
            return value, None
        host, sep, port = value.partition(":")
        return host, port if sep else None

    @staticmethod
    def validate_host_port(value: str) -> bool:
        """
        Validate a `host` or `host:port` database address.

        Args:
            value: Address to validate

        Returns:
            True if the host is well formed and the port, if any, is in range
        """
        if not value or value != value.strip():
            return False

        host, port = ConfigValidator.split_host_port(value)
        if host.startswith("["):
            if not IPV6_LITERAL_PATTERN.match(host):
                return False
        elif not HOSTNAME_PATTERN.match(host):
            return False

        if port is None:
            return True
        return ConfigValidator.validate_port(port)

    @staticmethod
    def validate_table_prefix(prefix: str) -> bool:
        return bool(TABLE_PREFIX_PATTERN.match(prefix))

    @staticmethod
    def validate_charset(charset: str) -> bool:
        return charset in ALLOWED_CHARSETS

    @staticmethod
    def validate_collation(collation: str) -> bool:
        return not collation or bool(COLLATION_PATTERN.match(collation))

    @staticmethod
    def parse_flag(value: str) -> bool | None:
        """Parse a boolean flag; None if the value is not recognised."""
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        return None

    @staticmethod
    def secret_strength_problems(
        secret: str, min_length: int = MIN_SECRET_LENGTH
    ) -> list[str]:
        """
        Check secret key strength.

        Args:
            secret: Secret key to check
            min_length: Minimum required length

        Returns:
            Human-readable reasons the secret is weak (empty if strong)
        """
        if secret == PLACEHOLDER_SECRET:
            return ["still set to the placeholder phrase"]

        problems = []
        if len(secret) < min_length:
            problems.append(
                f"must be at least {min_length} characters (got {len(secret)})"
            )
        if secret and calculate_entropy(secret) / len(secret) < MIN_SECRET_ENTROPY_PER_CHAR:
            problems.append("is too repetitive (low entropy)")
        return problems


def _error(field: ResolvedField, code: IssueCode, message: str) -> ValidationIssue:
    return ValidationIssue(field.name, message, code, IssueSeverity.ERROR)


def _warning(field: ResolvedField, code: IssueCode, message: str) -> ValidationIssue:
    return ValidationIssue(field.name, message, code, IssueSeverity.WARNING)


def _check_not_blank(field: ResolvedField) -> list[ValidationIssue]:
    if ConfigValidator.validate_not_blank(field.value):
        return []
    return [_error(field, IssueCode.INVALID_FORMAT, "must not be blank")]


def _check_table_prefix(field: ResolvedField) -> list[ValidationIssue]:
    issues = _check_not_blank(field)
    if not issues and not ConfigValidator.validate_table_prefix(field.value):
        issues.append(
            _error(
                field,
                IssueCode.INVALID_FORMAT,
                f"'{field.value}' is not a valid identifier prefix "
                "(letters, digits and underscores, not starting with a digit)",
            )
        )
    return issues


def _check_host_port(field: ResolvedField) -> list[ValidationIssue]:
    if ConfigValidator.validate_host_port(field.value):
        return []
    return [
        _error(
            field,
            IssueCode.INVALID_FORMAT,
            f"'{field.value}' is not a valid host or host:port (port 1-65535)",
        )
    ]


def _check_charset(field: ResolvedField) -> list[ValidationIssue]:
    if ConfigValidator.validate_charset(field.value):
        return []
    return [
        _error(
            field,
            IssueCode.UNRECOGNIZED_CHARSET,
            f"'{field.value}' is not one of: {', '.join(ALLOWED_CHARSETS)}",
        )
    ]


def _check_collation(field: ResolvedField) -> list[ValidationIssue]:
    if ConfigValidator.validate_collation(field.value):
        return []
    return [
        _error(
            field, IssueCode.INVALID_FORMAT, f"'{field.value}' is not a collation name"
        )
    ]


def _check_flag(field: ResolvedField, environment: Environment) -> list[ValidationIssue]:
    enabled = ConfigValidator.parse_flag(field.value)
    if enabled is None:
        return [
            _error(
                field,
                IssueCode.INVALID_FORMAT,
                f"'{field.value}' is not a boolean (use true/false, 1/0, yes/no, on/off)",
            )
        ]
    if enabled and environment.is_production() and field.name in PRODUCTION_UNSAFE_FLAGS:
        return [
            _warning(
                field, IssueCode.INVALID_FORMAT, "should not be enabled in production"
            )
        ]
    return []


def _check_secret(
    field: ResolvedField, environment: Environment, seen: dict[str, str]
) -> list[ValidationIssue]:
    if environment.is_production():
        problems = ConfigValidator.secret_strength_problems(field.value)
        issues = [_error(field, IssueCode.WEAK_SECRET, problem) for problem in problems]
        if not issues and field.value in seen:
            issues.append(
                _warning(
                    field,
                    IssueCode.WEAK_SECRET,
                    f"reuses the value of {seen[field.value]}",
                )
            )
        seen.setdefault(field.value, field.name)
        return issues

    issues = _check_not_blank(field)
    if not issues and field.value == PLACEHOLDER_SECRET:
        issues.append(
            _warning(field, IssueCode.WEAK_SECRET, "still set to the placeholder phrase")
        )
    return issues


def validate_field(
    field: ResolvedField,
    environment: Environment,
    seen_secrets: dict[str, str] | None = None,
) -> list[ValidationIssue]:
    """
    Validate one resolved field.

    Args:
        field: Resolved field to check
        environment: Mode that decides how strict secret checks are
        seen_secrets: Secret value -> first field name using it

    Returns:
        Issues found for this field, possibly empty
    """
    if field.origin is Origin.UNSET:
        if field.spec.required:
            return [
                _error(
                    field,
                    IssueCode.MISSING_REQUIRED_VALUE,
                    f"{field.spec.env_var} is not set and has no default",
                )
            ]
        return []

    kind = field.spec.kind
    if kind in (FieldKind.DATABASE_NAME, FieldKind.CREDENTIAL):
        return _check_not_blank(field)
    if kind is FieldKind.TABLE_PREFIX:
        return _check_table_prefix(field)
    if kind is FieldKind.HOST_PORT:
        return _check_host_port(field)
    if kind is FieldKind.CHARSET:
        return _check_charset(field)
    if kind is FieldKind.COLLATION:
        return _check_collation(field)
    if kind is FieldKind.FLAG:
        return _check_flag(field, environment)
    if kind is FieldKind.SECRET:
        return _check_secret(
            field, environment, seen_secrets if seen_secrets is not None else {}
        )
    raise ValueError(f"Unknown field kind: {kind}")


def validate_fields(
    resolved: Iterable[ResolvedField], environment: Environment
) -> list[ValidationIssue]:
    """
    Validate every resolved field.

    Each field is checked on its own so all problems surface together.
    Issues come back in the order the fields were declared.

    Args:
        resolved: Output of resolve_fields
        environment: Mode that decides how strict secret checks are

    Returns:
        All issues found, possibly empty
    """
    issues: list[ValidationIssue] = []
    seen_secrets: dict[str, str] = {}
    for field in resolved:
        issues.extend(validate_field(field, environment, seen_secrets))
    return issues


def validate_environment_setting(lookup: EnvLookup) -> list[ValidationIssue]:
    """
    Check the variable that selects the validation mode.

    Nothing set is fine (development). A value that is set but not a known
    mode is an error, so a typo cannot silently relax the secret checks.

    Args:
        lookup: Environment lookup function

    Returns:
        At most one issue, reported against the mode variable
    """
    setting = find_environment_setting(lookup)
    if setting is None:
        return []

    env_var, env_value = setting
    if Environment.parse(env_value) is not None:
        return []
    known = ", ".join(environment.value for environment in Environment)
    return [
        ValidationIssue(
            env_var,
            f"'{env_value}' is not a recognised mode (one of: {known}; "
            f"checked in order {', '.join(ENVIRONMENT_VARIABLES)})",
            IssueCode.INVALID_FORMAT,
            IssueSeverity.ERROR,
        )
    ]
