"""Shared test fixtures: library exercises, template sets, patients, drafts."""

from __future__ import annotations

from datetime import date

import pytest

from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import ExerciseSide, ExerciseType
from assignment_engine.models.exercise import (
    ExerciseLibraryItem,
    ExerciseMapping,
    ExerciseSet,
    Patient,
)
from assignment_engine.overrides.resolver import OverrideResolver

TODAY = date(2024, 1, 1)


@pytest.fixture
def squat() -> ExerciseLibraryItem:
    """Rep-based library exercise with full default dosage."""
    return ExerciseLibraryItem(
        id="ex-squat",
        name="Squat",
        exercise_type=ExerciseType.REPS,
        side=ExerciseSide.BOTH,
        sets=3,
        reps=12,
        rest_between_sets=60,
        execution_time=4,
    )


@pytest.fixture
def plank() -> ExerciseLibraryItem:
    """Time-based library exercise: 30 s holds."""
    return ExerciseLibraryItem(
        id="ex-plank",
        name="Plank",
        exercise_type=ExerciseType.TIME,
        side=ExerciseSide.NONE,
        duration=30,
        rest_between_sets=45,
    )


@pytest.fixture
def bare() -> ExerciseLibraryItem:
    """Library exercise without any default dosage."""
    return ExerciseLibraryItem(id="ex-bare", name="Heel slide")


@pytest.fixture
def squat_mapping(squat) -> ExerciseMapping:
    return ExerciseMapping(id="m-1", exercise_id=squat.id, exercise=squat, order=1, sets=4)


@pytest.fixture
def plank_mapping(plank) -> ExerciseMapping:
    return ExerciseMapping(id="m-2", exercise_id=plank.id, exercise=plank, order=2)


@pytest.fixture
def bare_mapping(bare) -> ExerciseMapping:
    return ExerciseMapping(id="m-3", exercise_id=bare.id, exercise=bare, order=3)


@pytest.fixture
def knee_set(squat_mapping, plank_mapping, bare_mapping) -> ExerciseSet:
    # Deliberately passed out of order
    return ExerciseSet.from_mappings(
        "set-knee", "Knee rehab", bare_mapping, squat_mapping, plank_mapping
    )


@pytest.fixture
def other_set(squat) -> ExerciseSet:
    return ExerciseSet.from_mappings(
        "set-other",
        "Other",
        ExerciseMapping(id="o-1", exercise_id=squat.id, exercise=squat, order=1),
    )


@pytest.fixture
def anna() -> Patient:
    return Patient(id="p-1", name="Anna", email="anna@example.com")


@pytest.fixture
def jan() -> Patient:
    return Patient(id="p-2", name="Jan")


@pytest.fixture
def maria() -> Patient:
    return Patient(id="p-3", name="Maria")


@pytest.fixture
def draft() -> AssignmentDraft:
    """Fresh draft opened on 2024-01-01 with nothing selected."""
    return AssignmentDraft.new(TODAY)


@pytest.fixture
def ready_draft(knee_set, anna, jan) -> AssignmentDraft:
    """Draft with a set and two patients selected."""
    d = AssignmentDraft.new(TODAY, preselected_set=knee_set)
    d.add_patient(anna)
    d.add_patient(jan)
    return d


@pytest.fixture
def resolver(draft) -> OverrideResolver:
    return OverrideResolver(draft.overrides)


@pytest.fixture
def raw_exercise_set_for_flow() -> dict:
    """Minimal API-shaped set with two mappings, for end-to-end tests."""
    return {
        "id": "set-flow",
        "name": "Lower back",
        "exerciseMappings": [
            {
                "id": "m-1",
                "exerciseId": "ex-bridge",
                "order": 1,
                "exercise": {"id": "ex-bridge", "name": "Bridge", "type": "reps", "defaultReps": 12},
            },
            {
                "id": "m-2",
                "exerciseId": "ex-bird",
                "order": 2,
                "exercise": {"id": "ex-bird", "name": "Bird dog", "type": "time", "defaultDuration": 20},
            },
        ],
    }
