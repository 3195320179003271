"""AssignmentDraft: the working state of one assignment wizard.

A draft is created when the wizard opens and thrown away when it closes,
whether the assignment was submitted or cancelled. It is the only mutable
object in the engine; every editor below keeps the draft's invariants:

- ``selected_patients`` is ordered and unique by patient id.
- ``end_date >= start_date``.
- ``active_preset`` is cleared by any manual date edit.
- Override and exclusion keys always belong to ``selected_set``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable

from assignment_engine.math.schedule import extend_end_date, preset_end_date
from assignment_engine.models.enums import (
    DEFAULT_ASSIGNMENT_DAYS,
    END_DATE_REPAIR_DAYS,
    SchedulePreset,
)
from assignment_engine.models.exercise import ExerciseSet, Patient
from assignment_engine.models.frequency import Frequency
from assignment_engine.overrides.exclusions import ExclusionSet


@dataclass
class AssignmentDraft:
    """Mutable aggregate of all in-progress assignment choices."""

    start_date: date
    end_date: date
    selected_set: ExerciseSet | None = None
    selected_patients: list[Patient] = field(default_factory=list)
    overrides: dict[str, dict[str, Any]] = field(default_factory=dict)
    excluded: ExclusionSet = field(default_factory=ExclusionSet)
    frequency: Frequency = field(default_factory=Frequency)
    active_preset: SchedulePreset | None = None

    # Snapshot of the opening state, used by has_changes
    _baseline: tuple = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            self.end_date = self.start_date
        self.selected_patients = _unique_by_id(self.selected_patients)
        self._baseline = self._snapshot()

    @classmethod
    def new(
        cls,
        today: date,
        preselected_set: ExerciseSet | None = None,
        preselected_patient: Patient | None = None,
    ) -> AssignmentDraft:
        """Fresh draft with default dates and frequency."""
        return cls(
            start_date=today,
            end_date=today + timedelta(days=DEFAULT_ASSIGNMENT_DAYS),
            selected_set=preselected_set,
            selected_patients=[preselected_patient] if preselected_patient else [],
        )

    # -- Set & patients ---------------------------------------------------

    def select_set(self, exercise_set: ExerciseSet | None) -> None:
        """Choose the template set.

        Switching to a different set drops overrides and exclusions, since
        their keys are mapping ids of the previous set.
        """
        previous = self.selected_set.id if self.selected_set else None
        new = exercise_set.id if exercise_set else None
        if previous != new:
            self.overrides.clear()
            self.excluded.clear()
        self.selected_set = exercise_set

    def add_patient(self, patient: Patient) -> None:
        if not self.has_patient(patient.id):
            self.selected_patients.append(patient)

    def remove_patient(self, patient_id: str) -> None:
        self.selected_patients = [
            p for p in self.selected_patients if p.id != patient_id
        ]

    def toggle_patient(self, patient: Patient) -> bool:
        """Flip selection of *patient*. Returns True if now selected."""
        if self.has_patient(patient.id):
            self.remove_patient(patient.id)
            return False
        self.add_patient(patient)
        return True

    def set_patients(self, patients: Iterable[Patient]) -> None:
        self.selected_patients = _unique_by_id(patients)

    def has_patient(self, patient_id: str) -> bool:
        return any(p.id == patient_id for p in self.selected_patients)

    # -- Dates ------------------------------------------------------------

    def set_start_date(self, start: date) -> None:
        """Manual start edit. Repairs the end date if it would precede start."""
        self.start_date = start
        if start > self.end_date:
            self.end_date = start + timedelta(days=END_DATE_REPAIR_DAYS)
        self.active_preset = None

    def set_end_date(self, end: date) -> None:
        """Manual end edit, clamped so the range is never negative."""
        self.end_date = max(end, self.start_date)
        self.active_preset = None

    def apply_preset(self, preset: SchedulePreset) -> None:
        self.end_date = preset_end_date(self.start_date, preset)
        self.active_preset = preset

    def extend_end_date(self, days: int) -> None:
        """Lengthen the assignment by *days* past the current end date."""
        self.end_date = extend_end_date(self.end_date, days)
        self.active_preset = None

    # -- Frequency --------------------------------------------------------

    def set_frequency(self, frequency: Frequency) -> None:
        self.frequency = frequency

    # -- Change tracking --------------------------------------------------

    @property
    def has_changes(self) -> bool:
        """True once the user changed anything since the wizard opened."""
        return self._snapshot() != self._baseline

    def _snapshot(self) -> tuple:
        overrides = tuple(
            (mapping_id, tuple(sorted(patch.items())))
            for mapping_id, patch in sorted(self.overrides.items())
        )
        return (
            self.selected_set.id if self.selected_set else None,
            tuple(p.id for p in self.selected_patients),
            overrides,
            tuple(self.excluded),
            self.start_date,
            self.end_date,
            self.frequency,
        )


def _unique_by_id(patients: Iterable[Patient]) -> list[Patient]:
    seen: set[str] = set()
    result: list[Patient] = []
    for p in patients:
        if p.id not in seen:
            seen.add(p.id)
            result.append(p)
    return result
