"""
WordPress Configuration Fields

Declares every value the WordPress bootstrap reads from the environment,
the variable it comes from, and its fallback.
"""

from dataclasses import dataclass
from enum import Enum

PLACEHOLDER_SECRET = "put your unique phrase here"

ALLOWED_CHARSETS = ("utf8mb4", "utf8")

SECRET_NAMES = (
    "AUTH_KEY",
    "SECURE_AUTH_KEY",
    "LOGGED_IN_KEY",
    "NONCE_KEY",
    "AUTH_SALT",
    "SECURE_AUTH_SALT",
    "LOGGED_IN_SALT",
    "NONCE_SALT",
)


class FieldKind(str, Enum):
    """Validation rule family a field belongs to."""

    DATABASE_NAME = "database_name"
    CREDENTIAL = "credential"
    HOST_PORT = "host_port"
    SECRET = "secret"
    CHARSET = "charset"
    TABLE_PREFIX = "table_prefix"
    COLLATION = "collation"
    FLAG = "flag"


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one environment-driven setting."""

    name: str
    env_var: str
    default: str | None = None
    required: bool = True
    kind: FieldKind = FieldKind.CREDENTIAL


def _secret(name: str) -> FieldSpec:
    return FieldSpec(
        name=name,
        env_var=f"WORDPRESS_{name}",
        default=PLACEHOLDER_SECRET,
        required=True,
        kind=FieldKind.SECRET,
    )


# Declaration order is also the order issues are reported in
WORDPRESS_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("DB_NAME", "WORDPRESS_DB_NAME", "wordpress", True, FieldKind.DATABASE_NAME),
    FieldSpec("DB_USER", "WORDPRESS_DB_USER", "wpuser", True, FieldKind.CREDENTIAL),
    FieldSpec("DB_PASSWORD", "WORDPRESS_DB_PASSWORD", "wppass", True, FieldKind.CREDENTIAL),
    FieldSpec("DB_HOST", "WORDPRESS_DB_HOST", "mysql:3306", True, FieldKind.HOST_PORT),
    FieldSpec("DB_CHARSET", "WORDPRESS_DB_CHARSET", "utf8mb4", True, FieldKind.CHARSET),
    FieldSpec("DB_COLLATE", "WORDPRESS_DB_COLLATE", "", False, FieldKind.COLLATION),
    FieldSpec("TABLE_PREFIX", "WORDPRESS_TABLE_PREFIX", "wp_", True, FieldKind.TABLE_PREFIX),
    *(_secret(name) for name in SECRET_NAMES),
    FieldSpec("WP_DEBUG", "WORDPRESS_DEBUG", "false", False, FieldKind.FLAG),
    FieldSpec("WP_DEBUG_LOG", "WORDPRESS_DEBUG_LOG", "false", False, FieldKind.FLAG),
    FieldSpec("WP_DEBUG_DISPLAY", "WORDPRESS_DEBUG_DISPLAY", "false", False, FieldKind.FLAG),
)


def get_field(name: str) -> FieldSpec:
    """Look up a WordPress field by its constant name."""
    for spec in WORDPRESS_FIELDS:
        if spec.name == name:
            return spec
    raise KeyError(name)
