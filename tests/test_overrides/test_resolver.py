"""Tests for cascading value resolution and override patches (overrides/resolver.py)."""

from __future__ import annotations

import pytest

from assignment_engine.exceptions import UnknownOverrideFieldError
from assignment_engine.models.exercise import ExerciseLibraryItem, ExerciseMapping
from assignment_engine.overrides.resolver import OverrideResolver


def _mapping(template_sets=None, library_sets=None, with_exercise=True) -> ExerciseMapping:
    exercise = ExerciseLibraryItem(id="ex", name="Ex", sets=library_sets) if with_exercise else None
    return ExerciseMapping(id="m", exercise_id="ex", exercise=exercise, sets=template_sets)


class TestGetEffectiveValue:
    @pytest.mark.parametrize(
        "override,template,library,expected",
        [
            (5, 4, 2, 5),
            (None, 4, 2, 4),
            (None, None, 2, 2),
            (None, None, None, 3),
            (5, None, None, 5),
        ],
    )
    def test_precedence(self, override, template, library, expected):
        overrides = {"m": {"sets": override}} if override is not None else {}
        resolver = OverrideResolver(overrides)
        assert resolver.get_effective_value(_mapping(template, library), "sets") == expected

    def test_stored_none_falls_through(self):
        resolver = OverrideResolver({"m": {"sets": None}})
        assert resolver.get_effective_value(_mapping(4, 2), "sets") == 4

    def test_zero_override_is_a_value(self):
        resolver = OverrideResolver({"m": {"rest_sets": 0}})
        assert resolver.get_effective_value(_mapping(), "rest_sets") == 0

    def test_builtin_defaults(self):
        resolver = OverrideResolver({})
        mapping = _mapping(with_exercise=False)
        assert resolver.get_effective_value(mapping, "sets") == 3
        assert resolver.get_effective_value(mapping, "reps") == 10
        assert resolver.get_effective_value(mapping, "rest_sets") == 60
        assert resolver.get_effective_value(mapping, "duration") is None
        assert resolver.get_effective_value(mapping, "notes") is None

    def test_library_aliases(self, squat_mapping, plank_mapping):
        resolver = OverrideResolver({})
        assert resolver.get_effective_value(squat_mapping, "rest_sets") == 60
        assert resolver.get_effective_value(plank_mapping, "rest_sets") == 45
        assert resolver.get_effective_value(squat_mapping, "exercise_side") == "both"

    def test_unknown_field_raises(self, squat_mapping):
        resolver = OverrideResolver({})
        with pytest.raises(UnknownOverrideFieldError) as excinfo:
            resolver.get_effective_value(squat_mapping, "weight")
        assert excinfo.value.field_name == "weight"
        assert isinstance(excinfo.value, KeyError)

    def test_effective_dosage(self, squat_mapping):
        dosage = OverrideResolver({"m-1": {"reps": 8}}).effective_dosage(squat_mapping)
        assert dosage["sets"] == 4
        assert dosage["reps"] == 8
        assert dosage["execution_time"] == 4
        assert dosage["duration"] is None


class TestUpdateOverride:
    def test_set_and_read_back(self, squat_mapping):
        overrides: dict = {}
        resolver = OverrideResolver(overrides)
        resolver.update_override("m-1", "sets", 5)
        assert overrides == {"m-1": {"sets": 5}}
        assert resolver.get_effective_value(squat_mapping, "sets") == 5

    def test_clearing_field_removes_key(self):
        overrides: dict = {}
        resolver = OverrideResolver(overrides)
        resolver.update_override("m-1", "sets", 5)
        resolver.update_override("m-1", "reps", 8)
        resolver.update_override("m-1", "sets", None)
        assert overrides == {"m-1": {"reps": 8}}

    def test_clearing_last_field_removes_patch(self):
        overrides: dict = {}
        resolver = OverrideResolver(overrides)
        resolver.update_override("m-1", "sets", 5)
        resolver.update_override("m-1", "sets", None)
        assert overrides == {}
        assert not resolver.has_override("m-1")

    def test_clearing_absent_is_noop(self):
        overrides: dict = {}
        OverrideResolver(overrides).update_override("m-1", "sets", None)
        assert overrides == {}

    def test_other_mappings_untouched(self):
        overrides = {"m-2": {"reps": 6}}
        resolver = OverrideResolver(overrides)
        resolver.update_override("m-1", "sets", 5)
        resolver.reset_override("m-1")
        assert overrides == {"m-2": {"reps": 6}}

    def test_unknown_field_rejected(self):
        with pytest.raises(UnknownOverrideFieldError):
            OverrideResolver({}).update_override("m-1", "colour", "red")


class TestQueries:
    def test_has_override_and_field(self):
        resolver = OverrideResolver({"m-1": {"sets": 5}})
        assert resolver.has_override("m-1")
        assert not resolver.has_override("m-2")
        assert resolver.is_overridden_field("m-1", "sets")
        assert not resolver.is_overridden_field("m-1", "reps")

    def test_patch_of_only_none_is_not_an_override(self):
        assert not OverrideResolver({"m-1": {"sets": None}}).has_override("m-1")

    def test_override_count(self, knee_set):
        resolver = OverrideResolver({"m-1": {"sets": 5}, "m-3": {"notes": "slow"}, "zzz": {"sets": 1}})
        assert resolver.override_count(knee_set.mappings) == 2
