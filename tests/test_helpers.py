"""Tests for the Streamlit shell's pure helpers (streamlit_app/helpers.py)."""

from __future__ import annotations

from datetime import date

import pytest

from assignment_engine import AssignmentEngine
from assignment_engine.models.enums import AssignmentMode, ExerciseSide, SubmissionStatus
from assignment_engine.models.frequency import Frequency
from assignment_engine.submission import AssignedPatient, BulkAssignResult
from helpers import (
    demo_exercise_sets,
    demo_patients,
    exercise_table,
    format_frequency,
    side_indicator,
    submission_message,
)


class TestSideIndicator:
    @pytest.mark.parametrize(
        "side,badge",
        [
            (ExerciseSide.LEFT, True),
            ("right", True),
            ("ALTERNATING", True),
            (ExerciseSide.BOTH, False),
            ("none", False),
            (None, False),
        ],
    )
    def test_badge(self, side, badge):
        assert side_indicator(side)[2] is badge


class TestFormatFrequency:
    def test_flexible(self):
        assert format_frequency(Frequency()) == "3x/week (flexible)"

    def test_specific_days(self):
        assert format_frequency(Frequency(monday=True, friday=True, times_per_day=2)) == "Mon, Fri, 2x/day"


class TestExerciseTable:
    def test_rows(self, knee_set, anna):
        engine = AssignmentEngine(
            AssignmentMode.FROM_SET, preselected_set=knee_set, preselected_patient=anna, today=date(2024, 1, 1)
        )
        engine.resolver.update_override("m-1", "sets", 6)
        engine.draft.excluded.exclude("m-3")

        df = exercise_table(engine)
        assert list(df["Exercise"]) == ["Squat", "Plank", "Heel slide"]
        assert df.loc[0, "Sets"] == 6
        assert bool(df.loc[0, "Customized"])
        assert bool(df.loc[2, "Excluded"])
        assert df.loc[1, "Est. time"] == "~3 min"

    def test_empty_without_set(self):
        engine = AssignmentEngine(AssignmentMode.FROM_PATIENT, today=date(2024, 1, 1))
        assert exercise_table(engine).empty


class TestSubmissionMessage:
    def test_complete(self, anna, jan):
        result = BulkAssignResult(
            status=SubmissionStatus.COMPLETE,
            succeeded=(AssignedPatient(anna, "a"), AssignedPatient(jan, "b")),
        )
        assert submission_message(result, "Knee") == ("success", 'Set "Knee" assigned to 2 patients.')

    def test_partial_names_everyone(self, anna, jan, maria):
        result = BulkAssignResult(
            status=SubmissionStatus.PARTIAL,
            succeeded=(AssignedPatient(anna, "a"),),
            failed_patient=jan,
            error="timeout",
            not_attempted=(maria,),
        )
        level, text = submission_message(result, "Knee")
        assert level == "warning"
        assert "Anna" in text and "Jan" in text and "Maria" in text

    def test_failed(self, anna):
        result = BulkAssignResult(status=SubmissionStatus.FAILED, failed_patient=anna, error="down")
        assert submission_message(result, "Knee")[0] == "error"


def test_demo_catalogue_is_consistent():
    sets = demo_exercise_sets()
    assert sets and all(s.mappings for s in sets)
    assert len({p.id for p in demo_patients()}) == len(demo_patients())
