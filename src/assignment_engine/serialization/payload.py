"""Wire payloads sent to the persistence collaborator.

Converts the draft into the variables of one per-patient assignment call.
Numbers in the frequency block travel as strings; ``timesPerWeek`` is always
recomputed from the frequency's current mode, never copied from a stored
value that may be stale.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from assignment_engine.math.schedule import effective_weekly_frequency
from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import WEEKDAYS
from assignment_engine.models.exercise import Patient
from assignment_engine.models.frequency import Frequency
from assignment_engine.overrides.persistence import (
    build_persistable_patch,
    overrides_to_json,
)


def frequency_to_wire(frequency: Frequency) -> dict[str, Any]:
    """Frequency block of an assignment call."""
    payload: dict[str, Any] = {
        "timesPerDay": str(frequency.times_per_day),
        "timesPerWeek": str(effective_weekly_frequency(frequency)),
        "breakBetweenSets": str(frequency.break_between_sets),
    }
    for day in WEEKDAYS:
        payload[day] = bool(getattr(frequency, day))
    return payload


def date_to_wire(value: date) -> str:
    """Midnight UTC ISO-8601 timestamp for a calendar date."""
    moment = datetime.combine(value, time(0, 0), tzinfo=timezone.utc)
    return moment.isoformat().replace("+00:00", "Z")


def assignment_variables(draft: AssignmentDraft, patient: Patient) -> dict[str, Any]:
    """Variables for assigning the draft's set to one patient.

    Raises:
        ValueError: If the draft has no selected set.
    """
    if draft.selected_set is None:
        raise ValueError("Cannot build an assignment without a selected set")

    variables: dict[str, Any] = {
        "exerciseSetId": draft.selected_set.id,
        "patientId": patient.id,
        "startDate": date_to_wire(draft.start_date),
        "endDate": date_to_wire(draft.end_date),
        "frequency": frequency_to_wire(draft.frequency),
    }

    overrides_json = overrides_to_json(build_persistable_patch(draft))
    if overrides_json is not None:
        variables["exerciseOverrides"] = overrides_json

    return variables
