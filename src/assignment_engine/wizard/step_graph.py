"""Wizard step graph: which steps exist for a given opening context.

A single total function over (mode, preselection flags) replaces the
step-by-step "push if" construction a UI would otherwise do inline.

Rules, in order:
    1. ``select-set`` iff opened from a patient without a preselected set.
       Opened from a set, the step never appears, even without a set.
    2. ``select-patients`` iff no patient was preselected.
    3. ``customize``, ``schedule``, ``summary`` always, in that order.
"""

from __future__ import annotations

from dataclasses import dataclass

from assignment_engine.models.enums import AssignmentMode, StepId


@dataclass(frozen=True)
class StepDescriptor:
    """One wizard step as shown by the step indicator."""

    id: StepId
    label: str
    description: str


STEP_DESCRIPTORS: dict[StepId, StepDescriptor] = {
    StepId.SELECT_SET: StepDescriptor(
        StepId.SELECT_SET, "Set", "Choose an exercise set"
    ),
    StepId.SELECT_PATIENTS: StepDescriptor(
        StepId.SELECT_PATIENTS, "Patients", "Choose patients"
    ),
    StepId.CUSTOMIZE: StepDescriptor(
        StepId.CUSTOMIZE, "Customize", "Tailor exercises (optional)"
    ),
    StepId.SCHEDULE: StepDescriptor(
        StepId.SCHEDULE, "Schedule", "Set dates and frequency"
    ),
    StepId.SUMMARY: StepDescriptor(
        StepId.SUMMARY, "Summary", "Review and confirm"
    ),
}

_ALWAYS = (StepId.CUSTOMIZE, StepId.SCHEDULE, StepId.SUMMARY)


def compute_steps(
    mode: AssignmentMode,
    has_preselected_set: bool,
    has_preselected_patient: bool,
) -> tuple[StepDescriptor, ...]:
    """Ordered steps for a wizard opened in *mode* with the given preselections.

    Returns between 3 and 5 descriptors; ``summary`` is always last.
    """
    ids: list[StepId] = []
    if mode is AssignmentMode.FROM_PATIENT and not has_preselected_set:
        ids.append(StepId.SELECT_SET)
    if not has_preselected_patient:
        ids.append(StepId.SELECT_PATIENTS)
    ids.extend(_ALWAYS)
    return tuple(STEP_DESCRIPTORS[step_id] for step_id in ids)
