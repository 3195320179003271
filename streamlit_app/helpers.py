"""Utility helpers bridging the Streamlit UI and the assignment engine.

Pure functions for labels, formatting, summary tables and submit reports,
plus a small demo catalogue used when no clinic API is configured.
"""

from __future__ import annotations

import pandas as pd

from assignment_engine.engine import AssignmentEngine
from assignment_engine.math.dosage import exercise_estimates, format_estimated_time
from assignment_engine.math.schedule import effective_weekly_frequency, is_flexible
from assignment_engine.models.enums import (
    WEEKDAYS,
    ExerciseSide,
    ExerciseType,
    StepId,
    SubmissionStatus,
)
from assignment_engine.models.exercise import (
    ExerciseLibraryItem,
    ExerciseMapping,
    ExerciseSet,
    Patient,
)
from assignment_engine.models.frequency import Frequency
from assignment_engine.submission import BulkAssignResult

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

TYPE_LABELS: dict[ExerciseType, str] = {
    ExerciseType.REPS: "Repetitions",
    ExerciseType.TIME: "Timed",
}

STEP_TITLES: dict[StepId, str] = {
    StepId.SELECT_SET: "Choose an exercise set",
    StepId.SELECT_PATIENTS: "Choose patients",
    StepId.CUSTOMIZE: "Personalize exercises",
    StepId.SCHEDULE: "Schedule",
    StepId.SUMMARY: "Summary",
}


def side_indicator(side: ExerciseSide | str | None) -> tuple[str, str, bool]:
    """Return (icon, label, show_badge) for an exercise side.

    Both sides and "none" are the default and get no badge.
    """
    if isinstance(side, ExerciseSide):
        side = side.value
    normalized = (side or "none").lower()
    if normalized == "left":
        return ("L", "Left side", True)
    if normalized == "right":
        return ("R", "Right side", True)
    if normalized == "alternating":
        return ("⟳", "Alternating", True)
    return ("↔", "Both sides", False)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_frequency(frequency: Frequency) -> str:
    """e.g. '3x/week (flexible)' or 'Mon, Wed, Fri', with a per-day suffix."""
    if is_flexible(frequency):
        text = f"{effective_weekly_frequency(frequency)}x/week (flexible)"
    else:
        text = ", ".join(
            DAY_NAMES[i] for i, day in enumerate(WEEKDAYS) if getattr(frequency, day)
        )
    if frequency.times_per_day > 1:
        text += f", {frequency.times_per_day}x/day"
    return text


def format_duration(days: int, weeks: int) -> str:
    return f"{days} days ({weeks} wk)"


def exercise_table(engine: AssignmentEngine) -> pd.DataFrame:
    """One row per mapping of the selected set, with effective values."""
    draft = engine.draft
    if draft.selected_set is None:
        return pd.DataFrame()

    resolver = engine.resolver
    mappings = draft.selected_set.mappings
    estimates = {e.mapping_id: e for e in exercise_estimates(mappings, resolver)}

    rows = []
    for m in mappings:
        estimate = estimates[m.id]
        rows.append(
            {
                "Exercise": m.display_name,
                "Sets": resolver.get_effective_value(m, "sets"),
                "Reps": None if estimate.time_based else resolver.get_effective_value(m, "reps"),
                "Duration (s)": resolver.get_effective_value(m, "duration") if estimate.time_based else None,
                "Rest (s)": resolver.get_effective_value(m, "rest_sets"),
                "Est. time": format_estimated_time(estimate.seconds),
                "Customized": resolver.has_override(m.id),
                "Excluded": m.id in draft.excluded,
            }
        )
    return pd.DataFrame(rows)


def submission_message(result: BulkAssignResult, set_name: str) -> tuple[str, str]:
    """Return (level, text) for reporting a bulk assignment to the user.

    level is one of "success", "warning", "error".
    """
    if result.status == SubmissionStatus.COMPLETE:
        count = len(result.succeeded)
        noun = "patient" if count == 1 else "patients"
        return ("success", f'Set "{set_name}" assigned to {count} {noun}.')

    if result.status == SubmissionStatus.NOT_READY:
        return ("error", "Select a set and at least one patient before assigning.")

    failed = result.failed_patient.name if result.failed_patient else "unknown patient"
    if result.status == SubmissionStatus.PARTIAL:
        done = ", ".join(p.name for p in result.succeeded_patients)
        pending = ", ".join(p.name for p in result.not_attempted)
        text = f"Assigned to {done}. Failed for {failed}: {result.error}."
        if pending:
            text += f" Not attempted: {pending}."
        return ("warning", text + " Submitting again is safe.")

    return ("error", f"Could not assign the set to {failed}: {result.error}")


# ---------------------------------------------------------------------------
# Demo catalogue (no API configured)
# ---------------------------------------------------------------------------


def demo_exercise_sets() -> list[ExerciseSet]:
    squat = ExerciseLibraryItem(
        id="ex-squat", name="Wall squat", exercise_type=ExerciseType.REPS,
        side=ExerciseSide.BOTH, sets=3, reps=12, execution_time=4,
    )
    plank = ExerciseLibraryItem(
        id="ex-plank", name="Front plank", exercise_type=ExerciseType.TIME,
        duration=30, rest_between_sets=45,
    )
    lunge = ExerciseLibraryItem(
        id="ex-lunge", name="Split lunge", exercise_type=ExerciseType.REPS,
        side=ExerciseSide.ALTERNATING, reps=8,
    )
    knee = ExerciseSet.from_mappings(
        "set-knee",
        "Knee rehab, phase 1",
        ExerciseMapping(id="m-squat", exercise_id=squat.id, exercise=squat, order=1),
        ExerciseMapping(id="m-plank", exercise_id=plank.id, exercise=plank, order=2, sets=2),
        ExerciseMapping(id="m-lunge", exercise_id=lunge.id, exercise=lunge, order=3, rest_sets=90),
        description="Quadriceps and core strengthening",
    )
    return [knee]


def demo_patients() -> list[Patient]:
    return [
        Patient(id="p-1", name="Anna Nowak", email="anna@example.com"),
        Patient(id="p-2", name="Jan Kowalski"),
        Patient(id="p-3", name="Maria Wiśniewska"),
    ]
