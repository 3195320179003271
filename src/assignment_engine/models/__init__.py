"""Data models for the assignment engine."""

from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import (
    AssignmentMode,
    ExerciseSide,
    ExerciseType,
    SchedulePreset,
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

__all__ = [
    "AssignmentDraft",
    "AssignmentMode",
    "ExerciseLibraryItem",
    "ExerciseMapping",
    "ExerciseSet",
    "ExerciseSide",
    "ExerciseType",
    "Frequency",
    "Patient",
    "SchedulePreset",
    "StepId",
    "SubmissionStatus",
]
