"""
Environment Resolution

Turns field declarations into concrete values, remembering whether each
value was supplied by the environment or fell back to its default.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .environment import EnvLookup
from .fields import FieldSpec


class Origin(str, Enum):
    """Where a resolved value came from."""

    EXPLICIT = "explicit"
    DEFAULTED = "defaulted"
    UNSET = "unset"


@dataclass(frozen=True)
class ResolvedField:
    """A field paired with the value resolution produced for it."""

    spec: FieldSpec
    value: str
    origin: Origin

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def is_set(self) -> bool:
        return self.origin is not Origin.UNSET


def resolve_field(spec: FieldSpec, lookup: EnvLookup) -> ResolvedField:
    """
    Resolve a single field.

    An empty string counts as unset, so `VAR=` falls back to the default
    the same way an absent variable does.
    """
    raw = lookup(spec.env_var)
    if raw:
        return ResolvedField(spec=spec, value=raw, origin=Origin.EXPLICIT)
    if spec.default is not None:
        return ResolvedField(spec=spec, value=spec.default, origin=Origin.DEFAULTED)
    return ResolvedField(spec=spec, value="", origin=Origin.UNSET)


def resolve_fields(
    specs: Iterable[FieldSpec], lookup: EnvLookup
) -> tuple[ResolvedField, ...]:
    """
    Resolve every field, preserving declaration order.

    Never raises for missing values; those are reported by validation.

    Args:
        specs: Field declarations
        lookup: Environment lookup function, e.g. os.environ.get

    Returns:
        One ResolvedField per spec
    """
    return tuple(resolve_field(spec, lookup) for spec in specs)
