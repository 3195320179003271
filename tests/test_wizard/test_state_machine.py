"""Tests for wizard navigation and gating (wizard/state_machine.py)."""

from __future__ import annotations

from datetime import date

import pytest

from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import AssignmentMode, StepId
from assignment_engine.wizard.state_machine import WizardStateMachine, can_proceed
from assignment_engine.wizard.step_graph import compute_steps


@pytest.fixture
def full_machine(draft) -> WizardStateMachine:
    """From a patient, nothing preselected: all five steps."""
    return WizardStateMachine(compute_steps(AssignmentMode.FROM_PATIENT, False, False), draft)


class TestCanProceed:
    def test_select_set_needs_set(self, draft, knee_set):
        assert not can_proceed(StepId.SELECT_SET, draft)
        draft.select_set(knee_set)
        assert can_proceed(StepId.SELECT_SET, draft)

    def test_select_patients_needs_patient(self, draft, anna):
        assert not can_proceed(StepId.SELECT_PATIENTS, draft)
        draft.add_patient(anna)
        assert can_proceed(StepId.SELECT_PATIENTS, draft)

    @pytest.mark.parametrize("step", [StepId.CUSTOMIZE, StepId.SCHEDULE, StepId.SUMMARY])
    def test_optional_steps_always_pass(self, draft, step):
        assert can_proceed(step, draft)


class TestNavigation:
    def test_starts_on_first_step(self, full_machine):
        assert full_machine.current_step is StepId.SELECT_SET
        assert full_machine.is_first_step
        assert full_machine.completed_steps == frozenset()

    def test_next_blocked_until_satisfied(self, full_machine, draft, knee_set):
        assert full_machine.go_next() is False
        assert full_machine.current_step is StepId.SELECT_SET

        draft.select_set(knee_set)
        assert full_machine.go_next() is True
        assert full_machine.current_step is StepId.SELECT_PATIENTS
        assert StepId.SELECT_SET in full_machine.completed_steps

    def test_patients_step_gated(self, draft, anna):
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, True, False), draft)
        assert machine.go_next() is False
        assert machine.current_step is StepId.SELECT_PATIENTS

        draft.add_patient(anna)
        assert machine.go_next() is True
        assert machine.current_step is StepId.CUSTOMIZE
        assert StepId.SELECT_PATIENTS in machine.completed_steps

    def test_back_from_first_is_ignored(self, full_machine):
        assert full_machine.go_back() is False

    def test_back_keeps_completion(self, full_machine, draft, knee_set):
        draft.select_set(knee_set)
        full_machine.go_next()
        assert full_machine.go_back() is True
        assert full_machine.current_step is StepId.SELECT_SET
        assert StepId.SELECT_SET in full_machine.completed_steps

    def test_jump_only_to_completed_or_earlier(self, full_machine, draft, knee_set, anna):
        draft.select_set(knee_set)
        draft.add_patient(anna)
        full_machine.go_next()
        full_machine.go_next()
        assert full_machine.current_step is StepId.CUSTOMIZE

        assert full_machine.go_to_step(StepId.SUMMARY) is False
        assert full_machine.go_to_step(StepId.SELECT_SET) is True
        assert full_machine.go_to_step(StepId.SELECT_PATIENTS) is True
        assert full_machine.current_step is StepId.SELECT_PATIENTS

    def test_jump_to_absent_step_ignored(self, draft):
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, True, True), draft)
        assert machine.go_to_step(StepId.SELECT_SET) is False

    def test_jump_by_raw_step_id(self, full_machine, draft, knee_set):
        draft.select_set(knee_set)
        full_machine.go_next()
        assert full_machine.go_to_step("summary") is False
        assert full_machine.go_to_step("select-set") is True
        assert full_machine.current_step is StepId.SELECT_SET

    @pytest.mark.parametrize("target", ["nope", 42, None])
    def test_jump_to_unknown_id_ignored(self, full_machine, target):
        assert full_machine.go_to_step(target) is False
        assert full_machine.current_step is StepId.SELECT_SET

    def test_next_on_last_step_stays(self, draft):
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, True, True), draft)
        machine.go_next()
        machine.go_next()
        assert machine.is_last_step
        assert machine.go_next() is False
        assert machine.current_step is StepId.SUMMARY

    def test_progress_and_reset(self, full_machine, draft, knee_set):
        draft.select_set(knee_set)
        full_machine.go_next()
        assert full_machine.progress == pytest.approx(0.2)
        full_machine.reset()
        assert full_machine.current_step is StepId.SELECT_SET
        assert full_machine.progress == 0.0

    def test_empty_step_list_rejected(self, draft):
        with pytest.raises(ValueError):
            WizardStateMachine((), draft)


class TestSubmitGate:
    def test_requires_last_step(self, knee_set, anna):
        draft = AssignmentDraft.new(date(2024, 1, 1), preselected_set=knee_set, preselected_patient=anna)
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, True, True), draft)
        assert not machine.can_submit()
        machine.go_next()
        machine.go_next()
        assert machine.can_submit()

    def test_from_set_without_set_never_submits(self, anna):
        draft = AssignmentDraft.new(date(2024, 1, 1), preselected_patient=anna)
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, False, True), draft)
        machine.go_next()
        machine.go_next()
        assert machine.is_last_step
        assert not machine.can_submit()

    def test_patients_removed_after_step_blocks_submit(self, draft, knee_set, anna):
        draft.select_set(knee_set)
        machine = WizardStateMachine(compute_steps(AssignmentMode.FROM_SET, True, False), draft)
        draft.add_patient(anna)
        for _ in range(3):
            machine.go_next()
        assert machine.can_submit()
        draft.remove_patient(anna.id)
        assert not machine.can_submit()


class TestIndicator:
    def test_navigation_enabled_after_first_completion(self, full_machine, draft, knee_set):
        state = full_machine.indicator()
        assert not state.allow_navigation
        assert state.current_step is StepId.SELECT_SET
        assert len(state.steps) == 5

        draft.select_set(knee_set)
        full_machine.go_next()
        state = full_machine.indicator()
        assert state.allow_navigation
        assert state.completed_steps == frozenset({StepId.SELECT_SET})
