"""
Session finalization.

Turns a finished live session into a permanent HistoryRecord.  The
finalizer only builds the record; persisting it is the caller's job
(HistoryStore.append).
"""

import logging
from typing import Callable

from .config import MS_PER_SECOND, UNKNOWN_EXERCISE_NAME
from .errors import EmptySessionError
from .models import ExerciseLog, HistoryRecord, LoggedSet, Session, WorkoutDay, new_id

logger = logging.getLogger(__name__)


def is_empty_session(session: Session) -> bool:
    """
    True when no set in the session is marked completed.

    Finishing such a session is valid but almost always a user mistake,
    so front ends should warn before calling finish_session().
    """
    return session.completed_set_count == 0


def session_duration_seconds(session: Session, finished_at: int) -> int:
    """
    Whole seconds elapsed between session start and finished_at.

    Raises:
        ValueError: If finished_at is before the session start
    """
    elapsed_ms = finished_at - session.start_time
    if elapsed_ms < 0:
        raise ValueError(
            f"finished_at ({finished_at}) is before session start ({session.start_time})"
        )
    return elapsed_ms // MS_PER_SECOND


def finish_session(
    session: Session,
    day: WorkoutDay,
    plan_name: str,
    finished_at: int,
    *,
    id_factory: Callable[[], str] = new_id,
    allow_empty: bool = True,
) -> HistoryRecord:
    """
    Convert a live session into a HistoryRecord.

    Only completed sets count: they make up total_volume (Σ weight × reps)
    and the detailed log.  An exercise without completed sets gets no
    detail entry and does not count towards exercises_completed.

    Args:
        session: Finished live session
        day: Day the session was started from (resolves exercise names)
        plan_name: Plan name, captured by value into the record
        finished_at: Completion timestamp in epoch ms
        id_factory: Identity generator for the record
        allow_empty: If False, refuse sessions without completed sets

    Returns:
        New HistoryRecord (not yet persisted)

    Raises:
        EmptySessionError: allow_empty is False and nothing was completed
        ValueError: finished_at precedes the session start
    """
    if not allow_empty and is_empty_session(session):
        raise EmptySessionError(f"Session {session.id} has no completed sets")

    duration = session_duration_seconds(session, finished_at)

    total_volume = 0.0
    exercises_completed = 0
    details: list[ExerciseLog] = []

    for exercise_id, sets in session.exercises.items():
        exercise = day.find_exercise(exercise_id)
        name = exercise.name if exercise is not None else UNKNOWN_EXERCISE_NAME

        completed = [s for s in sets if s.completed]
        if not completed:
            continue

        exercises_completed += 1
        total_volume += sum(s.volume for s in completed)
        details.append(
            ExerciseLog(
                name=name,
                sets=tuple(
                    LoggedSet(weight=s.weight, reps=s.reps, completed=s.completed)
                    for s in completed
                ),
            )
        )

    record = HistoryRecord(
        id=id_factory(),
        date=finished_at,
        plan_name=plan_name,
        day_name=day.name,
        duration_seconds=duration,
        total_volume=total_volume,
        exercises_completed=exercises_completed,
        exercises=tuple(details),
    )
    logger.info(
        "Finished %s / %s: %d exercises, volume %.1f, %ds",
        plan_name, day.name, exercises_completed, total_volume, duration,
    )
    return record
