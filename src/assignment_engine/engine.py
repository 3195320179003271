"""AssignmentEngine: one assignment wizard, from opening to submit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from assignment_engine.math.dosage import format_estimated_time, plan_total_seconds
from assignment_engine.math.schedule import (
    duration_days,
    duration_weeks,
    effective_weekly_frequency,
    is_flexible,
    total_sessions,
)
from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import AssignmentMode, StepId, SubmissionStatus
from assignment_engine.models.exercise import ExerciseSet, Patient
from assignment_engine.overrides.resolver import OverrideResolver
from assignment_engine.submission import (
    AssignmentGateway,
    BulkAssignResult,
    submit_assignments,
)
from assignment_engine.wizard.state_machine import StepIndicatorState, WizardStateMachine
from assignment_engine.wizard.step_graph import StepDescriptor, compute_steps


@dataclass(frozen=True)
class AssignmentSummary:
    """Read-only figures shown on the summary step."""

    set_name: str | None
    patient_names: tuple[str, ...] = field(default_factory=tuple)
    exercise_count: int = 0
    excluded_count: int = 0
    customized_count: int = 0
    estimated_seconds: float = 0.0
    estimated_time: str = "~0 min"
    duration_days: int = 0
    duration_weeks: int = 0
    weekly_frequency: int = 0
    times_per_day: int = 1
    is_flexible: bool = True
    total_sessions: int = 0


class AssignmentEngine:
    """Owns the draft, step list and state machine of one wizard instance.

    A new engine is built every time the wizard opens; dropping it discards
    the draft, whether or not it was submitted.

    Usage:
        engine = AssignmentEngine(AssignmentMode.FROM_SET, preselected_set=s, today=d)
        engine.draft.add_patient(p)
        engine.go_next()
        result = engine.submit(gateway)
    """

    def __init__(
        self,
        mode: AssignmentMode,
        preselected_set: ExerciseSet | None = None,
        preselected_patient: Patient | None = None,
        today: date | None = None,
    ) -> None:
        self.mode = mode
        self.steps: tuple[StepDescriptor, ...] = compute_steps(
            mode,
            has_preselected_set=preselected_set is not None,
            has_preselected_patient=preselected_patient is not None,
        )
        self.draft = AssignmentDraft.new(
            today or date.today(),
            preselected_set=preselected_set,
            preselected_patient=preselected_patient,
        )
        self.machine = WizardStateMachine(self.steps, self.draft)
        self.resolver = OverrideResolver(self.draft.overrides)

    # -- Navigation pass-throughs -----------------------------------------

    @property
    def current_step(self) -> StepId:
        return self.machine.current_step

    def go_next(self) -> bool:
        return self.machine.go_next()

    def go_back(self) -> bool:
        return self.machine.go_back()

    def go_to_step(self, step: StepId | str) -> bool:
        return self.machine.go_to_step(step)

    def indicator(self) -> StepIndicatorState:
        return self.machine.indicator()

    # -- Summary ----------------------------------------------------------

    def summary(self) -> AssignmentSummary:
        draft = self.draft
        mappings = draft.selected_set.mappings if draft.selected_set else ()
        visible = draft.excluded.visible(mappings)
        seconds = plan_total_seconds(mappings, self.resolver, draft.excluded)

        return AssignmentSummary(
            set_name=draft.selected_set.name if draft.selected_set else None,
            patient_names=tuple(p.name for p in draft.selected_patients),
            exercise_count=len(visible),
            excluded_count=len(mappings) - len(visible),
            customized_count=self.resolver.override_count(visible),
            estimated_seconds=seconds,
            estimated_time=format_estimated_time(seconds),
            duration_days=duration_days(draft.start_date, draft.end_date),
            duration_weeks=duration_weeks(draft.start_date, draft.end_date),
            weekly_frequency=effective_weekly_frequency(draft.frequency),
            times_per_day=draft.frequency.times_per_day,
            is_flexible=is_flexible(draft.frequency),
            total_sessions=total_sessions(
                draft.start_date, draft.end_date, draft.frequency
            ),
        )

    # -- Submission -------------------------------------------------------

    def submit(self, gateway: AssignmentGateway) -> BulkAssignResult:
        """Commit the draft to every selected patient.

        Returns a NOT_READY result without calling the gateway unless the
        wizard is on its terminal step with a set and patients selected.
        """
        if not self.machine.can_submit():
            return BulkAssignResult(status=SubmissionStatus.NOT_READY)
        return submit_assignments(self.draft, gateway)
