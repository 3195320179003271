"""Schedule math: assignment duration, weekly cadence, session projection.

Two frequency models share one Frequency value:
- Flexible: no weekday selected, cadence is ``times_per_week`` (default 3).
- Specific days: cadence is the number of selected weekdays.

The mode is derived from the weekday flags on every call.

All functions are pure (no I/O, no clock reads).
"""

from __future__ import annotations

import math
from datetime import date, timedelta

import pandas as pd

from assignment_engine.models.enums import (
    DEFAULT_TIMES_PER_WEEK,
    PRESET_OFFSETS,
    WEEKDAYS,
    SchedulePreset,
)
from assignment_engine.models.frequency import Frequency


def days_between(start: date, end: date) -> int:
    """Signed whole days from *start* to *end*."""
    return (end - start).days


def duration_days(start: date, end: date) -> int:
    """Length of the assignment in days, never negative."""
    return max(days_between(start, end), 0)


def duration_weeks(start: date, end: date) -> int:
    """Length in started weeks (a 31-day range is 5 weeks)."""
    return math.ceil(duration_days(start, end) / 7)


def count_selected_days(frequency: Frequency) -> int:
    return sum(1 for day in WEEKDAYS if getattr(frequency, day))


def is_flexible(frequency: Frequency) -> bool:
    """True when no specific weekday is selected."""
    return count_selected_days(frequency) == 0


def effective_weekly_frequency(frequency: Frequency) -> int:
    """Sessions-days per week under the frequency's current mode.

    Flexible mode uses the stored ``times_per_week`` (default 3). In
    specific-days mode any stored ``times_per_week`` is stale and ignored.
    """
    if is_flexible(frequency):
        if frequency.times_per_week is None:
            return DEFAULT_TIMES_PER_WEEK
        return frequency.times_per_week
    return count_selected_days(frequency)


def total_sessions(start: date, end: date, frequency: Frequency) -> int:
    """Projected number of sessions over the date range.

    sessions = round(days / 7 * weekly_frequency * times_per_day),
    rounding halves up.
    """
    raw = (
        duration_days(start, end)
        / 7
        * effective_weekly_frequency(frequency)
        * frequency.times_per_day
    )
    return int(math.floor(raw + 0.5))


def preset_end_date(start: date, preset: SchedulePreset) -> date:
    """End date for a preset using calendar-aware week/month addition.

    Month arithmetic clamps to the last day of the month, so Jan 31 plus one
    month is the last day of February.
    """
    offset = pd.DateOffset(**PRESET_OFFSETS[preset])
    return (pd.Timestamp(start) + offset).date()


def matching_preset(start: date, end: date) -> SchedulePreset | None:
    """Return the preset whose end date equals *end*, if any."""
    for preset in SchedulePreset:
        if preset_end_date(start, preset) == end:
            return preset
    return None


def extend_end_date(end: date, days: int) -> date:
    """Push an end date back by *days* (negative values are ignored)."""
    return end + timedelta(days=max(days, 0))


def session_dates(
    start: date, end: date, frequency: Frequency
) -> tuple[date, ...]:
    """Concrete training dates in [start, end] for specific-days mode.

    Flexible mode has no fixed calendar, so it yields an empty tuple.
    """
    if is_flexible(frequency) or end < start:
        return ()
    wanted = {i for i, day in enumerate(WEEKDAYS) if getattr(frequency, day)}
    days = pd.date_range(start=start, end=end, freq="D")
    selected = days[days.dayofweek.isin(sorted(wanted))]
    return tuple(ts.date() for ts in selected)
