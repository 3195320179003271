"""Bulk assignment: commit one draft to every selected patient.

Patients are assigned one at a time, in selection order. The run is not
transactional: the first failure stops the loop and patients already
processed stay assigned. Re-submitting is safe because the collaborator's
assignment call is an upsert keyed by (set, patient).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import SubmissionStatus
from assignment_engine.models.exercise import Patient
from assignment_engine.serialization.payload import assignment_variables

logger = logging.getLogger(__name__)


class AssignmentGateway(Protocol):
    """Persistence collaborator used by submit_assignments()."""

    def assign_exercise_set(self, variables: dict[str, Any]) -> str:
        """Create or update one assignment. Returns the assignment id."""
        ...


@dataclass(frozen=True)
class AssignedPatient:
    patient: Patient
    assignment_id: str


@dataclass(frozen=True)
class BulkAssignResult:
    """What happened during one bulk assignment run."""

    status: SubmissionStatus
    succeeded: tuple[AssignedPatient, ...] = field(default_factory=tuple)
    failed_patient: Patient | None = None
    error: str | None = None
    not_attempted: tuple[Patient, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.COMPLETE

    @property
    def succeeded_patients(self) -> tuple[Patient, ...]:
        return tuple(a.patient for a in self.succeeded)


def submit_assignments(
    draft: AssignmentDraft, gateway: AssignmentGateway
) -> BulkAssignResult:
    """Assign the draft's set to each selected patient, sequentially.

    Never raises for collaborator failures: they are reported in the
    result so the caller can tell the user who was and was not assigned.
    The draft is left untouched and can be re-submitted.
    """
    if draft.selected_set is None or not draft.selected_patients:
        return BulkAssignResult(status=SubmissionStatus.NOT_READY)

    patients = tuple(draft.selected_patients)
    succeeded: list[AssignedPatient] = []

    for index, patient in enumerate(patients):
        try:
            assignment_id = gateway.assign_exercise_set(
                assignment_variables(draft, patient)
            )
        except Exception as exc:
            logger.error(
                "Assignment of set %s to patient %s failed after %d of %d: %s",
                draft.selected_set.id,
                patient.id,
                len(succeeded),
                len(patients),
                exc,
            )
            return BulkAssignResult(
                status=SubmissionStatus.PARTIAL if succeeded else SubmissionStatus.FAILED,
                succeeded=tuple(succeeded),
                failed_patient=patient,
                error=str(exc),
                not_attempted=patients[index + 1:],
            )

        logger.info(
            "Assigned set %s to patient %s (assignment %s)",
            draft.selected_set.id,
            patient.id,
            assignment_id,
        )
        succeeded.append(AssignedPatient(patient=patient, assignment_id=str(assignment_id)))

    return BulkAssignResult(
        status=SubmissionStatus.COMPLETE, succeeded=tuple(succeeded)
    )
