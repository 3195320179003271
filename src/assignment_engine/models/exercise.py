"""Reference data: library exercises, template mappings, sets and patients.

These are read-only inputs to the assignment flow. Template editing happens
elsewhere; nothing in the engine mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from assignment_engine.models.enums import ExerciseSide, ExerciseType
from assignment_engine.models.frequency import Frequency


@dataclass(frozen=True)
class ExerciseLibraryItem:
    """A library exercise with its default dosage."""

    id: str
    name: str
    exercise_type: ExerciseType | None = None
    side: ExerciseSide | None = None

    # Default dosage
    sets: int | None = None
    reps: int | None = None
    duration: int | None = None  # seconds, time-based exercises
    rest_between_sets: int | None = None  # seconds
    rest_between_reps: int | None = None  # seconds
    execution_time: int | None = None  # seconds per repetition
    preparation_time: int | None = None  # seconds

    # Content and media
    description: str | None = None
    notes: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    images: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExerciseMapping:
    """One exercise entry inside a template set.

    Template-level fields are authored once and shared by every patient the
    set is assigned to. ``None`` means "fall through to the library item".
    """

    id: str
    exercise_id: str
    exercise: ExerciseLibraryItem | None = None
    order: int = 0

    sets: int | None = None
    reps: int | None = None
    duration: int | None = None
    rest_sets: int | None = None
    rest_reps: int | None = None
    preparation_time: int | None = None
    execution_time: int | None = None

    custom_name: str | None = None
    custom_description: str | None = None
    notes: str | None = None
    video_url: str | None = None
    image_url: str | None = None
    images: tuple[str, ...] | None = None

    @property
    def display_name(self) -> str:
        if self.custom_name:
            return self.custom_name
        if self.exercise is not None:
            return self.exercise.name
        return "Unknown exercise"


@dataclass(frozen=True)
class ExerciseSet:
    """Reusable template: an ordered collection of exercise mappings."""

    id: str
    name: str
    description: str | None = None
    mappings: tuple[ExerciseMapping, ...] = field(default_factory=tuple)
    frequency: Frequency | None = None

    @classmethod
    def from_mappings(
        cls,
        id: str,
        name: str,
        *mappings: ExerciseMapping,
        description: str | None = None,
        frequency: Frequency | None = None,
    ) -> ExerciseSet:
        """Create an ExerciseSet with mappings sorted by display order."""
        ordered = tuple(sorted(mappings, key=lambda m: m.order))
        return cls(
            id=id,
            name=name,
            description=description,
            mappings=ordered,
            frequency=frequency,
        )

    def mapping(self, mapping_id: str) -> ExerciseMapping | None:
        """Return the mapping with *mapping_id*, or None."""
        for m in self.mappings:
            if m.id == mapping_id:
                return m
        return None

    @property
    def mapping_ids(self) -> frozenset[str]:
        return frozenset(m.id for m in self.mappings)


@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    email: str | None = None
