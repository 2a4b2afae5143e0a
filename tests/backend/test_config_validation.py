"""Tests for per-field validation rules and issue ordering."""

import pytest

from backend.config import (
    PLACEHOLDER_SECRET,
    SECRET_NAMES,
    WORDPRESS_FIELDS,
    Environment,
    FieldKind,
    FieldSpec,
    IssueCode,
    IssueSeverity,
    resolve_fields,
    validate_environment_setting,
    validate_fields,
)
from backend.config.validation import ConfigValidator, calculate_entropy

DEV = Environment.DEVELOPMENT
PROD = Environment.PRODUCTION


def _issues(env, environment=DEV):
    return validate_fields(resolve_fields(WORDPRESS_FIELDS, env.get), environment)


def _errors(issues):
    return [issue for issue in issues if issue.severity is IssueSeverity.ERROR]


@pytest.mark.parametrize(
    "value",
    ["mysql", "mysql:3306", "db.example.com:1", "10.0.0.5:65535", "wordpress_db", "[::1]", "[::1]:3306"],
)
def test_valid_host_port(value):
    assert ConfigValidator.validate_host_port(value)


@pytest.mark.parametrize(
    "value",
    ["", "myhost:999999", "myhost:0", "myhost:", ":3306", "my host", "host:33a", "a:1:2", "[::1", "-db", "mysql:٣٣٠٦"],
)
def test_invalid_host_port(value):
    assert not ConfigValidator.validate_host_port(value)


def test_out_of_range_port_only_affects_host_field():
    issues = _issues({"WORDPRESS_DB_HOST": "myhost:999999"})

    errors = _errors(issues)
    assert [(issue.field_name, issue.code) for issue in errors] == [
        ("DB_HOST", IssueCode.INVALID_FORMAT)
    ]


@pytest.mark.parametrize("prefix", ["wp_", "_wp", "Blog2_", "x"])
def test_table_prefix_accepted(prefix):
    assert _errors(_issues({"WORDPRESS_TABLE_PREFIX": prefix})) == []


@pytest.mark.parametrize("prefix", ["1wp_", "wp-", "wp prefix", "   "])
def test_table_prefix_rejected(prefix):
    errors = _errors(_issues({"WORDPRESS_TABLE_PREFIX": prefix}))

    assert len(errors) == 1
    assert errors[0].field_name == "TABLE_PREFIX"
    assert errors[0].code is IssueCode.INVALID_FORMAT


def test_blank_credential_is_invalid():
    errors = _errors(_issues({"WORDPRESS_DB_USER": "   "}))

    assert [(issue.field_name, issue.code) for issue in errors] == [
        ("DB_USER", IssueCode.INVALID_FORMAT)
    ]


def test_unrecognized_charset():
    errors = _errors(_issues({"WORDPRESS_DB_CHARSET": "latin1"}))

    assert errors[0].field_name == "DB_CHARSET"
    assert errors[0].code is IssueCode.UNRECOGNIZED_CHARSET


def test_utf8_charset_accepted():
    assert _errors(_issues({"WORDPRESS_DB_CHARSET": "utf8"})) == []


def test_collation_optional_but_checked_when_set():
    assert _errors(_issues({"WORDPRESS_DB_COLLATE": "utf8mb4_unicode_ci"})) == []

    errors = _errors(_issues({"WORDPRESS_DB_COLLATE": "not a collation"}))
    assert errors[0].field_name == "DB_COLLATE"


def test_missing_required_value_without_default():
    specs = [
        FieldSpec("API_TOKEN", "API_TOKEN", None, True, FieldKind.CREDENTIAL),
        FieldSpec("OPTIONAL", "OPTIONAL", None, False, FieldKind.CREDENTIAL),
    ]

    issues = validate_fields(resolve_fields(specs, {}.get), DEV)

    assert len(issues) == 1
    assert issues[0].field_name == "API_TOKEN"
    assert issues[0].code is IssueCode.MISSING_REQUIRED_VALUE
    assert "API_TOKEN" in issues[0].message


def test_development_placeholder_secrets_are_warnings():
    issues = _issues({})

    assert _errors(issues) == []
    assert [issue.field_name for issue in issues] == list(SECRET_NAMES)
    assert all(issue.code is IssueCode.WEAK_SECRET for issue in issues)
    assert all(issue.severity is IssueSeverity.WARNING for issue in issues)


def test_development_accepts_short_secrets(strong_secrets):
    env = {**strong_secrets, "WORDPRESS_AUTH_KEY": "short"}

    assert _issues(env) == []


def test_development_blank_secret_is_invalid(strong_secrets):
    env = {**strong_secrets, "WORDPRESS_LOGGED_IN_SALT": "   "}

    issues = _issues(env)

    assert [(issue.field_name, issue.code) for issue in _errors(issues)] == [
        ("LOGGED_IN_SALT", IssueCode.INVALID_FORMAT)
    ]
    assert "must not be blank" in issues[0].message


def test_production_placeholder_secret_is_error(strong_secrets):
    env = dict(strong_secrets)
    del env["WORDPRESS_AUTH_KEY"]

    errors = _errors(_issues(env, PROD))

    assert [(issue.field_name, issue.code) for issue in errors] == [
        ("AUTH_KEY", IssueCode.WEAK_SECRET)
    ]


def test_production_short_secret_is_error(strong_secrets):
    env = {**strong_secrets, "WORDPRESS_NONCE_SALT": "x7Gq2"}

    errors = _errors(_issues(env, PROD))

    assert errors[0].field_name == "NONCE_SALT"
    assert "at least 32" in errors[0].message


def test_production_low_entropy_secret_is_error(strong_secrets):
    env = {**strong_secrets, "WORDPRESS_LOGGED_IN_KEY": "ab" * 20}

    errors = _errors(_issues(env, PROD))

    assert [issue.field_name for issue in errors] == ["LOGGED_IN_KEY"]
    assert "entropy" in errors[0].message


def test_production_reused_secret_is_warning(strong_secrets):
    env = {
        **strong_secrets,
        "WORDPRESS_NONCE_KEY": strong_secrets["WORDPRESS_AUTH_KEY"],
    }

    issues = _issues(env, PROD)

    assert _errors(issues) == []
    assert [issue.field_name for issue in issues] == ["NONCE_KEY"]
    assert "AUTH_KEY" in issues[0].message


def test_production_strong_secrets_pass(strong_secrets):
    assert _issues(strong_secrets, PROD) == []


def test_debug_flags():
    errors = _errors(_issues({"WORDPRESS_DEBUG": "maybe"}))
    assert [issue.field_name for issue in errors] == ["WP_DEBUG"]

    assert _errors(_issues({"WORDPRESS_DEBUG": "TRUE", "WORDPRESS_DEBUG_LOG": "1"})) == []


def test_debug_enabled_in_production_is_warning(strong_secrets):
    env = {**strong_secrets, "WORDPRESS_DEBUG": "true", "WORDPRESS_DEBUG_LOG": "true"}

    issues = _issues(env, PROD)

    assert [(issue.field_name, issue.severity) for issue in issues] == [
        ("WP_DEBUG", IssueSeverity.WARNING)
    ]


def test_every_problem_reported_in_declaration_order():
    env = {
        "WORDPRESS_DEBUG": "sometimes",
        "WORDPRESS_TABLE_PREFIX": "1wp_",
        "WORDPRESS_DB_HOST": "db:99999",
        "WORDPRESS_DB_CHARSET": "ascii",
    }

    errors = _errors(_issues(env))

    assert [issue.field_name for issue in errors] == [
        "DB_HOST",
        "DB_CHARSET",
        "TABLE_PREFIX",
        "WP_DEBUG",
    ]


def test_secret_strength_problems_for_placeholder():
    assert ConfigValidator.secret_strength_problems(PLACEHOLDER_SECRET) == [
        "still set to the placeholder phrase"
    ]


def test_calculate_entropy():
    assert calculate_entropy("") == 0.0
    assert calculate_entropy("aaaa") == 0.0
    assert calculate_entropy("abcd") == pytest.approx(8.0)


def test_parse_flag():
    assert ConfigValidator.parse_flag(" Yes ") is True
    assert ConfigValidator.parse_flag("off") is False
    assert ConfigValidator.parse_flag("2") is None


@pytest.mark.parametrize("env", [{}, {"APP_ENV": "prod"}, {"ENV": "Staging"}])
def test_recognised_or_absent_mode_setting_passes(env):
    assert validate_environment_setting(env.get) == []


def test_misspelled_mode_setting_is_invalid():
    (issue,) = validate_environment_setting({"APP_ENV": "prodution"}.get)

    assert issue.field_name == "APP_ENV"
    assert issue.code is IssueCode.INVALID_FORMAT
    assert issue.severity is IssueSeverity.ERROR
    assert "prodution" in issue.message


def test_mode_setting_checks_the_variable_that_wins():
    env = {"ENVIRONMENT": "production", "ENV": "nonsense"}
    assert validate_environment_setting(env.get) == []

    (issue,) = validate_environment_setting({"ENVIRONMENT": "live", "ENV": "prod"}.get)
    assert issue.field_name == "ENVIRONMENT"
