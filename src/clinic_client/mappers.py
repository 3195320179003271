"""Pure functions mapping clinic API response dicts to engine models.

No I/O, takes raw dicts from ClinicClient methods. Missing or malformed
values map to None instead of raising, so partial records still load.
"""

from __future__ import annotations

from typing import Any, Optional

from assignment_engine.models.enums import (
    DEFAULT_BREAK_BETWEEN_SETS_H,
    WEEKDAYS,
    ExerciseSide,
    ExerciseType,
)
from assignment_engine.models.exercise import (
    ExerciseLibraryItem,
    ExerciseMapping,
    ExerciseSet,
    Patient,
)
from assignment_engine.models.frequency import Frequency


def map_exercise_set(raw: dict[str, Any]) -> ExerciseSet:
    """Map one ``exerciseSets`` entry to an ExerciseSet ordered by mapping order."""
    mappings = [
        map_mapping(m)
        for m in raw.get("exerciseMappings") or []
        if isinstance(m, dict) and m.get("id")
    ]
    return ExerciseSet.from_mappings(
        str(raw["id"]),
        raw.get("name") or "",
        *mappings,
        description=raw.get("description"),
        frequency=map_frequency(raw.get("frequency")),
    )


def map_mapping(raw: dict[str, Any]) -> ExerciseMapping:
    exercise_raw = raw.get("exercise")
    exercise = map_exercise(exercise_raw) if isinstance(exercise_raw, dict) else None
    return ExerciseMapping(
        id=str(raw["id"]),
        exercise_id=str(raw.get("exerciseId") or (exercise.id if exercise else "")),
        exercise=exercise,
        order=_to_int(raw.get("order")) or 0,
        sets=_to_int(raw.get("sets")),
        reps=_to_int(raw.get("reps")),
        duration=_to_int(raw.get("duration")),
        rest_sets=_to_int(raw.get("restSets")),
        rest_reps=_to_int(raw.get("restReps")),
        preparation_time=_to_int(raw.get("preparationTime")),
        execution_time=_to_int(raw.get("executionTime")),
        custom_name=raw.get("customName") or None,
        custom_description=raw.get("customDescription") or None,
        notes=raw.get("notes") or None,
        video_url=raw.get("videoUrl") or None,
        image_url=raw.get("imageUrl") or None,
        images=_to_str_tuple(raw.get("images")),
    )


def map_exercise(raw: dict[str, Any]) -> ExerciseLibraryItem:
    """Map a library exercise. Accepts both ``default*`` and legacy field names."""
    return ExerciseLibraryItem(
        id=str(raw.get("id") or ""),
        name=raw.get("name") or "",
        exercise_type=ExerciseType.parse(raw.get("type")),
        side=ExerciseSide.parse(raw.get("side") or raw.get("exerciseSide")),
        sets=_first_int(raw, "defaultSets", "sets"),
        reps=_first_int(raw, "defaultReps", "reps"),
        duration=_first_int(raw, "defaultDuration", "duration"),
        rest_between_sets=_first_int(raw, "defaultRestBetweenSets", "restSets"),
        rest_between_reps=_first_int(raw, "defaultRestBetweenReps", "restReps"),
        execution_time=_first_int(raw, "defaultExecutionTime", "executionTime"),
        preparation_time=_to_int(raw.get("preparationTime")),
        description=raw.get("patientDescription") or raw.get("description"),
        notes=raw.get("notes"),
        image_url=raw.get("imageUrl") or raw.get("thumbnailUrl"),
        video_url=raw.get("videoUrl"),
        images=_to_str_tuple(raw.get("images")) or (),
    )


def map_frequency(raw: Any) -> Optional[Frequency]:
    """Map a frequency block; numbers may arrive as strings."""
    if not isinstance(raw, dict):
        return None
    times_per_day = _to_int(raw.get("timesPerDay")) or 1
    break_h = _to_int(raw.get("breakBetweenSets"))
    return Frequency(
        times_per_day=max(times_per_day, 1),
        times_per_week=_to_int(raw.get("timesPerWeek")),
        break_between_sets=DEFAULT_BREAK_BETWEEN_SETS_H if break_h is None else break_h,
        **{day: bool(raw.get(day)) for day in WEEKDAYS},
    )


def map_patient(raw: dict[str, Any]) -> Optional[Patient]:
    """Map one ``therapistPatients`` entry; entries without an id are skipped."""
    patient = raw.get("patient") if isinstance(raw.get("patient"), dict) else {}
    patient_id = patient.get("id") or raw.get("patientId")
    if not patient_id:
        return None
    return Patient(
        id=str(patient_id),
        name=patient.get("fullname") or patient.get("name") or "Unknown",
        email=patient.get("email"),
    )


# ---------------------------------------------------------------------------
# Internal converters, each handles None input gracefully
# ---------------------------------------------------------------------------


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _first_int(raw: dict[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        value = _to_int(raw.get(key))
        if value is not None:
            return value
    return None


def _to_str_tuple(value: Any) -> Optional[tuple[str, ...]]:
    if not isinstance(value, list):
        return None
    return tuple(str(v) for v in value if v) or None
