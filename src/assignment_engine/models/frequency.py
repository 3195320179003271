"""Dosing frequency: how often the assigned set is performed.

Specific-days mode is never stored. It is derived on every read from the
seven weekday flags, so a stale mode flag cannot disagree with the days.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from assignment_engine.models.enums import (
    DEFAULT_BREAK_BETWEEN_SETS_H,
    DEFAULT_TIMES_PER_DAY,
    WEEKDAYS,
)

_WORKDAYS = WEEKDAYS[:5]


@dataclass(frozen=True)
class Frequency:
    """Immutable frequency value. Editors return a new instance."""

    times_per_day: int = DEFAULT_TIMES_PER_DAY
    times_per_week: int | None = None  # Flexible mode only
    break_between_sets: int = DEFAULT_BREAK_BETWEEN_SETS_H  # hours

    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False

    def __post_init__(self) -> None:
        if self.times_per_day < 1:
            raise ValueError(
                f"times_per_day must be at least 1, got {self.times_per_day}"
            )

    # -- Derived ----------------------------------------------------------

    def selected_days(self) -> tuple[str, ...]:
        """Weekday names that are switched on, Monday first."""
        return tuple(day for day in WEEKDAYS if getattr(self, day))

    @property
    def is_specific_days(self) -> bool:
        return any(getattr(self, day) for day in WEEKDAYS)

    # -- Editors ----------------------------------------------------------

    def with_day(self, day: str, on: bool) -> Frequency:
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown weekday: {day!r}")
        return dataclasses.replace(self, **{day: on})

    def toggled(self, day: str) -> Frequency:
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown weekday: {day!r}")
        return self.with_day(day, not getattr(self, day))

    def with_all_days(self) -> Frequency:
        return dataclasses.replace(self, **{day: True for day in WEEKDAYS})

    def with_weekdays(self) -> Frequency:
        """Monday to Friday on, weekend off."""
        return dataclasses.replace(
            self, **{day: day in _WORKDAYS for day in WEEKDAYS}
        )

    def with_no_days(self) -> Frequency:
        """Clear every weekday, switching back to flexible mode."""
        return dataclasses.replace(self, **{day: False for day in WEEKDAYS})
