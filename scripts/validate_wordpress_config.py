"""WordPress configuration checker.

Usage examples:
    python scripts/validate_wordpress_config.py
    python scripts/validate_wordpress_config.py --env-file .env --environment production
    python scripts/validate_wordpress_config.py --format json --show
    python scripts/validate_wordpress_config.py --generate-secrets >> .env

Exit codes: 0 valid, 1 invalid, 2 warnings only with --strict.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import dotenv_values

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.config import (
    ConfigurationError,
    Environment,
    ValidationIssue,
    WordPressConfig,
    get_current_environment,
    load_wordpress_config,
)
from backend.config.environment import EnvLookup
from backend.config.wordpress_config import generate_secret_values

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_WARNINGS = 2


def build_lookup(env_file: Path | None, use_os_environ: bool = True) -> EnvLookup:
    """Layer an optional .env file over (or instead of) the process environment."""
    values: dict[str, str] = {}
    if use_os_environ:
        values.update(os.environ)
    if env_file is not None:
        file_values = dotenv_values(env_file)
        values.update({key: value for key, value in file_values.items() if value is not None})
        logger.debug(f"Loaded {len(file_values)} variables from {env_file}")
    return values.get


def format_issue(issue: ValidationIssue) -> str:
    return (
        f"{issue.severity.value.upper():7} {issue.field_name} "
        f"[{issue.code.value}]: {issue.message}"
    )


def render_text(
    environment: Environment,
    issues: tuple[ValidationIssue, ...],
    config: WordPressConfig | None,
    show: bool,
) -> str:
    lines = [format_issue(issue) for issue in issues]
    if config is None:
        errors = sum(1 for issue in issues if issue.is_error)
        lines.append(
            f"WordPress configuration is INVALID ({environment.value}): {errors} error(s)"
        )
    else:
        lines.append(f"WordPress configuration is valid ({environment.value})")
        if show:
            lines.append(json.dumps(config.to_safe_dict(), indent=2))
    return "\n".join(lines)


def render_json(
    environment: Environment,
    issues: tuple[ValidationIssue, ...],
    config: WordPressConfig | None,
    show: bool,
) -> str:
    payload = {
        "valid": config is not None,
        "environment": environment.value,
        "issues": [issue.to_dict() for issue in issues],
    }
    if config is not None and show:
        payload["config"] = config.to_safe_dict()
    return json.dumps(payload, indent=2)


def print_generated_secrets() -> None:
    for name, value in generate_secret_values().items():
        print(f"WORDPRESS_{name}='{value}'")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate WordPress configuration")
    parser.add_argument("--env-file", type=Path, help="read variables from a .env file")
    parser.add_argument(
        "--no-os-environ",
        action="store_true",
        help="ignore the process environment (use only --env-file)",
    )
    parser.add_argument(
        "--environment",
        choices=[environment.value for environment in Environment],
        help="override APP_ENV/ENVIRONMENT/ENV detection",
    )
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument(
        "--show", action="store_true", help="print the masked configuration when valid"
    )
    parser.add_argument(
        "--strict", action="store_true", help="exit with status 2 on warnings"
    )
    parser.add_argument(
        "--generate-secrets",
        action="store_true",
        help="print fresh keys and salts as .env lines and exit",
    )
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.generate_secrets:
        print_generated_secrets()
        return EXIT_OK

    if args.env_file is not None and not args.env_file.is_file():
        parser.error(f"env file not found: {args.env_file}")
    if args.no_os_environ and args.env_file is None:
        parser.error("--no-os-environ requires --env-file")

    lookup = build_lookup(args.env_file, use_os_environ=not args.no_os_environ)
    override = Environment(args.environment) if args.environment else None
    environment = override or get_current_environment(lookup)

    config: WordPressConfig | None
    try:
        config = load_wordpress_config(lookup, override)
        issues = config.warnings
    except ConfigurationError as e:
        config = None
        issues = e.issues

    render = render_json if args.format == "json" else render_text
    print(render(environment, issues, config, args.show))

    if config is None:
        return EXIT_INVALID
    if args.strict and issues:
        return EXIT_WARNINGS
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
