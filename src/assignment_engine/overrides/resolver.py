"""Cascading value lookup and sparse per-patient override patches.

Resolution order for any field, first non-None wins:

    1. the assignment's override patch for the mapping
    2. the template mapping
    3. the library exercise
    4. the builtin default (sets=3, reps=10, rest_sets=60)

Patches are plain dicts in which key presence is the only signal that a
field is set. Clearing a field deletes its key, and a patch left with no
keys is removed altogether, so "no override" is always represented by
absence rather than by stored ``None`` values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from assignment_engine.exceptions import UnknownOverrideFieldError
from assignment_engine.models.enums import (
    BUILTIN_DEFAULTS,
    DOSAGE_FIELDS,
    LIBRARY_FIELD_ALIASES,
    OVERRIDE_FIELDS,
)
from assignment_engine.models.exercise import ExerciseMapping


def _check_field(field_name: str) -> None:
    if field_name not in OVERRIDE_FIELDS:
        raise UnknownOverrideFieldError(field_name)


class OverrideResolver:
    """Reads and edits the override patches of one assignment draft.

    The resolver holds a reference to the draft's ``overrides`` dict and
    edits it in place; it keeps no state of its own.
    """

    def __init__(self, overrides: dict[str, dict[str, Any]]) -> None:
        self._overrides = overrides

    @property
    def overrides(self) -> dict[str, dict[str, Any]]:
        return self._overrides

    # -- Lookup -----------------------------------------------------------

    def get_effective_value(self, mapping: ExerciseMapping, field_name: str) -> Any:
        """Resolve *field_name* for *mapping* through all four layers."""
        _check_field(field_name)

        patch = self._overrides.get(mapping.id)
        if patch is not None and patch.get(field_name) is not None:
            return patch[field_name]

        template_value = getattr(mapping, field_name, None)
        if template_value is not None:
            return template_value

        if mapping.exercise is not None:
            library_field = LIBRARY_FIELD_ALIASES.get(field_name, field_name)
            library_value = getattr(mapping.exercise, library_field, None)
            if library_value is not None:
                if isinstance(library_value, Enum):
                    return library_value.value
                return library_value

        return BUILTIN_DEFAULTS.get(field_name)

    def effective_dosage(self, mapping: ExerciseMapping) -> dict[str, Any]:
        """All dosage fields of *mapping*, resolved."""
        return {f: self.get_effective_value(mapping, f) for f in DOSAGE_FIELDS}

    # -- Patch editing ----------------------------------------------------

    def update_override(self, mapping_id: str, field_name: str, value: Any) -> None:
        """Set one field of a patch, or clear it when *value* is None."""
        _check_field(field_name)

        if value is None:
            patch = self._overrides.get(mapping_id)
            if patch is None:
                return
            patch.pop(field_name, None)
            if not patch:
                del self._overrides[mapping_id]
            return

        self._overrides.setdefault(mapping_id, {})[field_name] = value

    def reset_override(self, mapping_id: str) -> None:
        """Drop every override for *mapping_id*."""
        self._overrides.pop(mapping_id, None)

    # -- Queries ----------------------------------------------------------

    def has_override(self, mapping_id: str) -> bool:
        patch = self._overrides.get(mapping_id)
        if not patch:
            return False
        return any(v is not None for v in patch.values())

    def is_overridden_field(self, mapping_id: str, field_name: str) -> bool:
        _check_field(field_name)
        patch = self._overrides.get(mapping_id)
        return patch is not None and patch.get(field_name) is not None

    def override_count(self, mappings: Iterable[ExerciseMapping]) -> int:
        """Number of *mappings* carrying at least one override."""
        return sum(1 for m in mappings if self.has_override(m.id))
