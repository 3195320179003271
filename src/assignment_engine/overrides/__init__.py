"""Per-assignment customization: override patches and exclusions."""

from assignment_engine.overrides.exclusions import ExclusionSet
from assignment_engine.overrides.persistence import (
    build_persistable_patch,
    parse_persisted_overrides,
)
from assignment_engine.overrides.resolver import OverrideResolver

__all__ = [
    "ExclusionSet",
    "OverrideResolver",
    "build_persistable_patch",
    "parse_persisted_overrides",
]
