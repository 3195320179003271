"""Dosage math: estimated time to perform an exercise and a whole plan.

Time-based exercise:
    work = sets × duration
Rep-based exercise:
    work = sets × reps × execution_time   (execution_time defaults to 3 s)

Rest is counted between sets only:
    rest = max(sets − 1, 0) × rest_between_sets

Missing inputs contribute zero instead of raising; negative inputs are
treated as zero so the estimate is never negative.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import numpy as np

from assignment_engine.models.enums import DEFAULT_EXECUTION_TIME_S, ExerciseType
from assignment_engine.models.exercise import ExerciseMapping

if TYPE_CHECKING:
    from assignment_engine.overrides.exclusions import ExclusionSet
    from assignment_engine.overrides.resolver import OverrideResolver


@dataclass(frozen=True)
class ExerciseEstimate:
    """Estimated duration of one exercise, after override resolution."""

    mapping_id: str
    seconds: float
    time_based: bool


def _non_negative(value: float | None) -> float:
    if value is None:
        return 0.0
    return max(float(value), 0.0)


def estimate_seconds(
    sets: float | None = None,
    reps: float | None = None,
    duration: float | None = None,
    execution_time: float | None = None,
    rest: float | None = None,
    time_based: bool | None = None,
) -> float:
    """Estimated seconds for one exercise.

    Args:
        sets: Number of sets.
        reps: Repetitions per set (rep-based exercises).
        duration: Seconds of work per set (time-based exercises).
        execution_time: Seconds per repetition; defaults to 3 when None.
        rest: Seconds of rest between consecutive sets.
        time_based: Force the exercise kind. When None, a positive
            ``duration`` makes the exercise time-based.

    Returns:
        Total seconds, never negative.
    """
    n_sets = _non_negative(sets)
    if time_based is None:
        time_based = _non_negative(duration) > 0

    if time_based:
        work = n_sets * _non_negative(duration)
    else:
        per_rep = (
            DEFAULT_EXECUTION_TIME_S
            if execution_time is None
            else _non_negative(execution_time)
        )
        work = n_sets * _non_negative(reps) * per_rep

    rest_total = max(n_sets - 1, 0.0) * _non_negative(rest)
    return max(work + rest_total, 0.0)


def is_time_based(mapping: ExerciseMapping, resolver: OverrideResolver) -> bool:
    """Whether *mapping* is measured in time rather than repetitions.

    The library exercise type decides when known; otherwise a positive
    effective duration marks the exercise as time-based.
    """
    if mapping.exercise is not None and mapping.exercise.exercise_type is not None:
        return mapping.exercise.exercise_type is ExerciseType.TIME
    duration = resolver.get_effective_value(mapping, "duration")
    return duration is not None and duration > 0


def _dosage_row(mapping: ExerciseMapping, resolver: OverrideResolver) -> list[float]:
    execution_time = resolver.get_effective_value(mapping, "execution_time")
    return [
        _non_negative(resolver.get_effective_value(mapping, "sets")),
        _non_negative(resolver.get_effective_value(mapping, "reps")),
        _non_negative(resolver.get_effective_value(mapping, "duration")),
        float(DEFAULT_EXECUTION_TIME_S) if execution_time is None else _non_negative(execution_time),
        _non_negative(resolver.get_effective_value(mapping, "rest_sets")),
        1.0 if is_time_based(mapping, resolver) else 0.0,
    ]


def _estimate_rows(rows: np.ndarray) -> np.ndarray:
    """Vectorised estimate over rows of (sets, reps, duration, exec, rest, time_based)."""
    sets, reps, duration, execution, rest, time_based = rows.T
    work = np.where(time_based > 0, sets * duration, sets * reps * execution)
    rest_total = np.maximum(sets - 1, 0) * rest
    return np.maximum(work + rest_total, 0)


def exercise_estimates(
    mappings: Iterable[ExerciseMapping],
    resolver: OverrideResolver,
    excluded: ExclusionSet | None = None,
) -> tuple[ExerciseEstimate, ...]:
    """Per-exercise estimates for all non-excluded mappings, in order."""
    visible = [m for m in mappings if excluded is None or m.id not in excluded]
    if not visible:
        return ()
    rows = np.array([_dosage_row(m, resolver) for m in visible], dtype=np.float64)
    seconds = _estimate_rows(rows)
    return tuple(
        ExerciseEstimate(
            mapping_id=m.id,
            seconds=float(s),
            time_based=bool(row[5] > 0),
        )
        for m, s, row in zip(visible, seconds, rows)
    )


def plan_total_seconds(
    mappings: Iterable[ExerciseMapping],
    resolver: OverrideResolver,
    excluded: ExclusionSet | None = None,
) -> float:
    """Sum of effective estimates over every non-excluded exercise."""
    return float(sum(e.seconds for e in exercise_estimates(mappings, resolver, excluded)))


def format_estimated_time(seconds: float) -> str:
    """Human display of an estimate, rounded to the nearest minute.

    e.g. 90 -> '~2 min', 20 -> '~1 min', 0 -> '~0 min'.
    """
    if seconds <= 0:
        return "~0 min"
    minutes = int(math.floor(seconds / 60 + 0.5))
    return f"~{max(minutes, 1)} min"
