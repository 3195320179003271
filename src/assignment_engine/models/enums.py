"""Enumerations and builtin defaults for the assignment engine.

Builtin defaults are the last layer of value resolution: they apply only
when neither the per-patient override, the template mapping nor the
library exercise defines a value.
"""

from enum import Enum, IntEnum, auto


class AssignmentMode(Enum):
    """Where the wizard was opened from."""

    FROM_SET = "from-set"
    FROM_PATIENT = "from-patient"


class StepId(Enum):
    """Wizard step identifiers, in canonical order."""

    SELECT_SET = "select-set"
    SELECT_PATIENTS = "select-patients"
    CUSTOMIZE = "customize"
    SCHEDULE = "schedule"
    SUMMARY = "summary"


class ExerciseType(Enum):
    """How an exercise's work is measured."""

    REPS = "reps"
    TIME = "time"

    @classmethod
    def parse(cls, value: str | None) -> "ExerciseType | None":
        """Case-insensitive parse; unknown values map to None."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class ExerciseSide(Enum):
    """Body side an exercise is performed on."""

    NONE = "none"
    BOTH = "both"
    LEFT = "left"
    RIGHT = "right"
    ALTERNATING = "alternating"

    @classmethod
    def parse(cls, value: str | None) -> "ExerciseSide | None":
        """Case-insensitive parse; unknown values map to None."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class SchedulePreset(IntEnum):
    """Quick duration presets for the assignment date range."""

    ONE_WEEK = auto()
    TWO_WEEKS = auto()
    ONE_MONTH = auto()
    TWO_MONTHS = auto()
    THREE_MONTHS = auto()


class SubmissionStatus(IntEnum):
    """Outcome of a bulk assignment run."""

    COMPLETE = auto()
    PARTIAL = auto()    # Some patients assigned before a failure
    FAILED = auto()     # First patient failed, nothing assigned
    NOT_READY = auto()  # Draft missing set or patients, nothing attempted


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------

# Fields a per-assignment override may carry (snake_case, engine-side names)
OVERRIDE_FIELDS = frozenset({
    "sets",
    "reps",
    "duration",
    "rest_sets",
    "rest_reps",
    "preparation_time",
    "execution_time",
    "custom_name",
    "custom_description",
    "notes",
    "video_url",
    "image_url",
    "images",
    "exercise_side",
    "custom_images",
})

# Numeric fields that drive the dosage estimate
DOSAGE_FIELDS = (
    "sets",
    "reps",
    "duration",
    "rest_sets",
    "rest_reps",
    "preparation_time",
    "execution_time",
)

# Library items name some fields differently from mappings and overrides
LIBRARY_FIELD_ALIASES = {
    "rest_sets": "rest_between_sets",
    "rest_reps": "rest_between_reps",
    "exercise_side": "side",
}

BUILTIN_DEFAULTS = {
    "sets": 3,
    "reps": 10,
    "rest_sets": 60,
}

# ---------------------------------------------------------------------------
# Dosage estimation
# ---------------------------------------------------------------------------
DEFAULT_EXECUTION_TIME_S = 3  # Seconds per repetition when unspecified

# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------
DEFAULT_ASSIGNMENT_DAYS = 30   # Initial end date = start + 30 days
END_DATE_REPAIR_DAYS = 30      # Start moved past end => end = start + 30 days
DEFAULT_TIMES_PER_WEEK = 3     # Flexible mode without an explicit count
DEFAULT_TIMES_PER_DAY = 1
DEFAULT_BREAK_BETWEEN_SETS_H = 4

# Preset -> calendar offset (weeks, months)
PRESET_OFFSETS = {
    SchedulePreset.ONE_WEEK: {"weeks": 1},
    SchedulePreset.TWO_WEEKS: {"weeks": 2},
    SchedulePreset.ONE_MONTH: {"months": 1},
    SchedulePreset.TWO_MONTHS: {"months": 2},
    SchedulePreset.THREE_MONTHS: {"months": 3},
}

PRESET_LABELS = {
    SchedulePreset.ONE_WEEK: "1 week",
    SchedulePreset.TWO_WEEKS: "2 weeks",
    SchedulePreset.ONE_MONTH: "1 month",
    SchedulePreset.TWO_MONTHS: "2 months",
    SchedulePreset.THREE_MONTHS: "3 months",
}
