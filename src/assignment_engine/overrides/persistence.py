"""Override persistence: building, re-hydrating and editing the stored patch map.

The persisted form is a JSON object keyed by mapping id whose entries use
the wire (camelCase) field names plus an optional ``hidden: true`` flag:

    {"m-1": {"sets": 5, "restSets": 30}, "m-2": {"hidden": true}}

Exclusions and field overrides are unioned per entry, never replacing each
other. A missing key means "use the template/library value".

All functions are pure and return new dicts; inputs are never mutated.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping

from assignment_engine.exceptions import UnknownOverrideFieldError
from assignment_engine.models.enums import DOSAGE_FIELDS, OVERRIDE_FIELDS

if TYPE_CHECKING:
    from assignment_engine.models.draft import AssignmentDraft

logger = logging.getLogger(__name__)

HIDDEN_KEY = "hidden"

# Engine field name -> wire field name
WIRE_NAMES: dict[str, str] = {
    "sets": "sets",
    "reps": "reps",
    "duration": "duration",
    "rest_sets": "restSets",
    "rest_reps": "restReps",
    "preparation_time": "preparationTime",
    "execution_time": "executionTime",
    "custom_name": "customName",
    "custom_description": "customDescription",
    "notes": "notes",
    "video_url": "videoUrl",
    "image_url": "imageUrl",
    "images": "images",
    "exercise_side": "exerciseSide",
    "custom_images": "customImages",
}

ENGINE_NAMES: dict[str, str] = {wire: name for name, wire in WIRE_NAMES.items()}

LIST_FIELDS = frozenset({"images", "custom_images"})


def _valid_value(name: str, value: Any) -> bool:
    """Stored values must have the type the resolver and dosage math expect."""
    if name in DOSAGE_FIELDS:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if name in LIST_FIELDS:
        return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
    return isinstance(value, str)


def _wire_value(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


def patch_to_wire(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Translate one engine-side patch to wire field names, dropping None."""
    return {
        WIRE_NAMES[name]: _wire_value(value)
        for name, value in patch.items()
        if value is not None
    }


def build_persistable_patch(draft: AssignmentDraft) -> dict[str, dict[str, Any]] | None:
    """Build the override payload for an assignment, or None if there is nothing to send.

    Every excluded mapping gets ``hidden: True`` merged into its entry,
    keeping any field overrides it already has.
    """
    if not draft.overrides and not draft.excluded:
        return None

    result: dict[str, dict[str, Any]] = {}
    for mapping_id, patch in draft.overrides.items():
        entry = patch_to_wire(patch)
        if entry:
            result[mapping_id] = entry

    for mapping_id in draft.excluded:
        result.setdefault(mapping_id, {})[HIDDEN_KEY] = True

    return result or None


def overrides_to_json(patch: Mapping[str, Mapping[str, Any]] | None) -> str | None:
    if patch is None:
        return None
    return json.dumps(patch, sort_keys=True)


def parse_persisted_overrides(raw: str | Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    """Re-hydrate a stored override map.

    Corrupted input never raises: invalid JSON or a non-object document
    yields an empty map, and entries that are not objects are dropped.
    """
    if raw is None or raw == "":
        return {}

    data: Any = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (ValueError, TypeError) as exc:
            logger.warning("Ignoring malformed override JSON: %s", exc)
            return {}

    if not isinstance(data, Mapping):
        logger.warning(
            "Ignoring override document of type %s", type(data).__name__
        )
        return {}

    result: dict[str, dict[str, Any]] = {}
    for mapping_id, entry in data.items():
        if not isinstance(entry, Mapping):
            logger.warning("Dropping malformed override entry for %s", mapping_id)
            continue
        cleaned = {k: v for k, v in entry.items() if v is not None}
        if cleaned.get(HIDDEN_KEY) is not True:
            cleaned.pop(HIDDEN_KEY, None)
        if cleaned:
            result[str(mapping_id)] = cleaned
    return result


def load_into_draft(draft: AssignmentDraft, persisted: Mapping[str, Mapping[str, Any]]) -> None:
    """Seed a draft's overrides and exclusions from a persisted map.

    Unknown wire fields are skipped so that newer server-side fields do not
    break older clients. Values of the wrong type are dropped with a warning.
    """
    for mapping_id, entry in persisted.items():
        patch: dict[str, Any] = {}
        for wire_name, value in entry.items():
            if wire_name == HIDDEN_KEY:
                if value is True:
                    draft.excluded.exclude(mapping_id)
                continue
            name = ENGINE_NAMES.get(wire_name)
            if name is None:
                logger.debug("Skipping unknown override field %s", wire_name)
                continue
            if value is None:
                continue
            if not _valid_value(name, value):
                logger.warning(
                    "Dropping override %s for %s: unexpected %s",
                    wire_name, mapping_id, type(value).__name__,
                )
                continue
            patch[name] = value
        if patch:
            draft.overrides[mapping_id] = patch


def set_hidden(
    persisted: Mapping[str, Mapping[str, Any]], mapping_id: str, hidden: bool
) -> dict[str, dict[str, Any]]:
    """Return a copy of *persisted* with the hidden flag of one entry set or cleared."""
    result = {k: dict(v) for k, v in persisted.items()}
    entry = result.get(mapping_id, {})
    if hidden:
        entry[HIDDEN_KEY] = True
    else:
        entry.pop(HIDDEN_KEY, None)
    if entry:
        result[mapping_id] = entry
    else:
        result.pop(mapping_id, None)
    return result


def toggle_hidden(
    persisted: Mapping[str, Mapping[str, Any]], mapping_id: str
) -> dict[str, dict[str, Any]]:
    currently_hidden = persisted.get(mapping_id, {}).get(HIDDEN_KEY) is True
    return set_hidden(persisted, mapping_id, not currently_hidden)


def merge_override(
    persisted: Mapping[str, Mapping[str, Any]],
    mapping_id: str,
    fields: Mapping[str, Any],
) -> dict[str, dict[str, Any]]:
    """Replace the field overrides of one persisted entry, keeping its hidden flag.

    *fields* uses engine field names; None values are left out. An entry
    that ends up empty is removed.
    """
    for name in fields:
        if name not in OVERRIDE_FIELDS:
            raise UnknownOverrideFieldError(name)

    result = {k: dict(v) for k, v in persisted.items()}
    entry = patch_to_wire(fields)
    if result.get(mapping_id, {}).get(HIDDEN_KEY) is True:
        entry[HIDDEN_KEY] = True

    if entry:
        result[mapping_id] = entry
    else:
        result.pop(mapping_id, None)
    return result
