"""Tests for exercise time estimation (math/dosage.py)."""

from __future__ import annotations

import pytest

from assignment_engine.math.dosage import (
    estimate_seconds,
    exercise_estimates,
    format_estimated_time,
    is_time_based,
    plan_total_seconds,
)
from assignment_engine.models.exercise import ExerciseMapping
from assignment_engine.overrides.exclusions import ExclusionSet


class TestEstimateSeconds:
    def test_rep_based_with_builtin_defaults(self):
        """3 sets x 10 reps x 3 s + 2 rests x 60 s = 210 s."""
        assert estimate_seconds(sets=3, reps=10, execution_time=None, rest=60) == 210

    def test_time_based(self):
        """3 sets x 30 s + 2 rests x 45 s."""
        assert estimate_seconds(sets=3, duration=30, rest=45) == 180

    def test_time_based_inferred_from_duration(self):
        assert estimate_seconds(sets=2, reps=10, duration=20, rest=0) == 40

    def test_forced_rep_based_ignores_duration(self):
        assert estimate_seconds(sets=2, reps=5, duration=20, rest=0, time_based=False) == 30

    def test_single_set_has_no_rest(self):
        assert estimate_seconds(sets=1, reps=10, execution_time=2, rest=600) == 20

    def test_missing_inputs_contribute_zero(self):
        assert estimate_seconds() == 0.0
        assert estimate_seconds(sets=3) == 0.0

    def test_negative_inputs_never_negative(self):
        assert estimate_seconds(sets=-2, reps=10, rest=60) == 0.0
        assert estimate_seconds(sets=2, reps=-5, rest=-10) == 0.0


class TestIsTimeBased:
    def test_library_type_decides(self, squat_mapping, plank_mapping, resolver):
        assert not is_time_based(squat_mapping, resolver)
        assert is_time_based(plank_mapping, resolver)

    def test_override_duration_cannot_flip_rep_exercise(self, squat_mapping, resolver):
        resolver.update_override(squat_mapping.id, "duration", 40)
        assert not is_time_based(squat_mapping, resolver)

    def test_untyped_falls_back_to_duration(self, bare_mapping, resolver):
        assert not is_time_based(bare_mapping, resolver)
        resolver.update_override(bare_mapping.id, "duration", 25)
        assert is_time_based(bare_mapping, resolver)

    def test_mapping_without_exercise(self, resolver):
        orphan = ExerciseMapping(id="x", exercise_id="gone", duration=10)
        assert is_time_based(orphan, resolver)


class TestExerciseEstimates:
    def test_resolved_values_used(self, knee_set, resolver):
        by_id = {e.mapping_id: e for e in exercise_estimates(knee_set.mappings, resolver)}
        # squat: 4 x 12 x 4 s + 3 x 60 s
        assert by_id["m-1"].seconds == 372
        assert not by_id["m-1"].time_based
        # plank: builtin 3 sets x 30 s + 2 x 45 s
        assert by_id["m-2"].seconds == 180
        assert by_id["m-2"].time_based
        # bare: all builtin defaults
        assert by_id["m-3"].seconds == 210

    def test_overrides_change_estimate(self, bare_mapping, resolver):
        resolver.update_override(bare_mapping.id, "sets", 1)
        (estimate,) = exercise_estimates([bare_mapping], resolver)
        assert estimate.seconds == 30

    def test_excluded_mappings_skipped(self, knee_set, resolver):
        estimates = exercise_estimates(knee_set.mappings, resolver, ExclusionSet({"m-2"}))
        assert [e.mapping_id for e in estimates] == ["m-1", "m-3"]

    def test_empty(self, resolver):
        assert exercise_estimates([], resolver) == ()

    def test_plan_total(self, knee_set, resolver):
        assert plan_total_seconds(knee_set.mappings, resolver) == 372 + 180 + 210
        assert plan_total_seconds(knee_set.mappings, resolver, ExclusionSet({"m-1"})) == 390


class TestFormatEstimatedTime:
    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "~0 min"),
            (-5, "~0 min"),
            (20, "~1 min"),
            (90, "~2 min"),
            (150, "~3 min"),  # halves round up
            (210, "~4 min"),
            (762, "~13 min"),
        ],
    )
    def test_rounding(self, seconds, expected):
        assert format_estimated_time(seconds) == expected
