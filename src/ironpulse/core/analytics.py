"""
Pure statistics over the workout history.

All functions are stateless: they take a history snapshot (any order
unless stated otherwise) and recompute from scratch on every call.
"""

from datetime import tzinfo
from typing import Sequence

from .clock import local_date
from .config import (
    DAYS_PER_WEEK,
    DEFAULT_ACTIVITY_WEEKS,
    EPLEY_REPS_DIVISOR,
    MS_PER_DAY,
    RECENT_HISTORY_LIMIT,
    week_label,
)
from .models import ExerciseLog, HistoryRecord, HistorySummary, ProgressionPoint, WeeklyBucket


def epley_1rm(weight: float, reps: float) -> float:
    """
    Estimate 1RM using Epley formula.

    1RM = weight * (1 + reps/30)

    Strictly increasing in reps for a fixed positive weight and in weight
    for a fixed rep count.

    Args:
        weight: Load lifted
        reps: Reps performed

    Returns:
        Estimated 1RM in the same unit as weight
    """
    return weight * (1 + reps / EPLEY_REPS_DIVISOR)


def sort_newest_first(history: Sequence[HistoryRecord]) -> list[HistoryRecord]:
    """Stable sort by completion timestamp, newest first."""
    return sorted(history, key=lambda r: r.date, reverse=True)


def recent_records(
    history: Sequence[HistoryRecord],
    limit: int = RECENT_HISTORY_LIMIT,
) -> list[HistoryRecord]:
    """The newest `limit` records, newest first."""
    return sort_newest_first(history)[:limit]


def exercise_names(history: Sequence[HistoryRecord]) -> list[str]:
    """Sorted distinct exercise names appearing in detailed logs."""
    names: set[str] = set()
    for record in history:
        for entry in record.exercises or ():
            names.add(entry.name)
    return sorted(names)


def _progression_point(date: int, entry: ExerciseLog) -> ProgressionPoint | None:
    """Aggregate one detail entry over its completed sets; None if no volume."""
    max_weight = 0.0
    volume = 0.0
    best_1rm = 0.0

    for s in entry.sets:
        if not s.completed:
            continue
        volume += s.volume
        max_weight = max(max_weight, s.weight)
        best_1rm = max(best_1rm, epley_1rm(s.weight, s.reps))

    if volume <= 0:
        return None
    return ProgressionPoint(
        date=date,
        max_weight=max_weight,
        volume=volume,
        est_one_rep_max=best_1rm,
    )


def exercise_progression(
    history: Sequence[HistoryRecord],
    exercise_name: str,
) -> list[ProgressionPoint]:
    """
    Per-record progression series for one exercise.

    For every record whose detailed log contains the exercise:
      max_weight      = max completed weight
      volume          = Σ weight × reps over completed sets
      est_one_rep_max = max Epley estimate over completed sets

    Records contributing zero volume are left out.

    Args:
        history: History records in any order
        exercise_name: Exact exercise display name

    Returns:
        Points sorted oldest first; points sharing a date are ordered by
        value, so the series does not depend on the order of history
    """
    points: list[ProgressionPoint] = []
    for record in history:
        entry = record.find_exercise(exercise_name)
        if entry is None:
            continue
        point = _progression_point(record.date, entry)
        if point is not None:
            points.append(point)

    points.sort(key=lambda p: (p.date, p.max_weight, p.volume, p.est_one_rep_max))
    return points


def latest_one_rep_max(history: Sequence[HistoryRecord], exercise_name: str) -> float | None:
    """Estimated 1RM from the most recent session of an exercise, or None."""
    points = exercise_progression(history, exercise_name)
    return points[-1].est_one_rep_max if points else None


def weekly_activity(
    history: Sequence[HistoryRecord],
    now: int,
    weeks: int = DEFAULT_ACTIVITY_WEEKS,
) -> list[WeeklyBucket]:
    """
    Workout count and volume per 7-day window ending at `now`.

    days_ago = floor((now - date) / 1 day)
    bucket   = floor(days_ago / 7)

    Windows are anchored to `now`, not to calendar weeks.  A record dated
    exactly 7 × 24 h before now lands in bucket 1.  Records outside the
    horizon, or dated after now, are ignored.

    Args:
        history: History records in any order
        now: Reference timestamp in epoch ms
        weeks: Number of buckets

    Returns:
        Buckets oldest first: bucket weeks-1 … bucket 0 ("this week")
    """
    workouts = [0] * weeks
    volume = [0.0] * weeks

    for record in history:
        days_ago = (now - record.date) // MS_PER_DAY
        bucket = int(days_ago // DAYS_PER_WEEK)
        if 0 <= bucket < weeks:
            workouts[bucket] += 1
            volume[bucket] += record.total_volume

    return [
        WeeklyBucket(label=week_label(i), workouts=workouts[i], volume=volume[i])
        for i in range(weeks - 1, -1, -1)
    ]


def history_summary(history: Sequence[HistoryRecord], tz: tzinfo | None = None) -> HistorySummary:
    """
    Totals over the whole history.

    active_days counts distinct calendar dates in local time (or tz), so
    two workouts on the same evening count once.
    """
    return HistorySummary(
        total_workouts=len(history),
        total_volume=sum(r.total_volume for r in history),
        active_days=len({local_date(r.date, tz) for r in history}),
    )
