"""
Live session construction and set mutations.

initialize_session() builds a fresh Session from a plan day, pre-filling
every set with the most recent weight used for that exercise.  The
mutators below are pure: each returns a new Session that shares every
untouched set list with its input, so a rejected mutation leaves the
caller's session exactly as it was.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterable, Sequence

from .clock import now_ms
from .errors import OutOfRangeError
from .models import SET_FIELDS, HistoryRecord, Session, SetLog, WorkoutDay, new_id

logger = logging.getLogger(__name__)


# =============================================================================
# CARRY-FORWARD WEIGHT
# =============================================================================


def _carried_weight(sets: Sequence) -> float:
    """Weight of the last completed set, else of the last set."""
    for s in reversed(sets):
        if s.completed:
            return s.weight
    return sets[-1].weight


def last_weight_for_exercise(exercise_name: str, history: Sequence[HistoryRecord]) -> float:
    """
    Find the weight to carry forward for an exercise.

    Scans history (newest first) for the first record holding a non-empty
    detail entry with this exact name.

    Args:
        exercise_name: Display name to match
        history: History records, newest first

    Returns:
        Last completed set's weight in that entry, the last set's weight if
        none was completed, or 0.0 if the exercise was never logged
    """
    for record in history:
        entry = record.find_exercise(exercise_name)
        if entry is not None and entry.sets:
            return _carried_weight(entry.sets)
    return 0.0


def last_weights_by_name(
    exercise_names: Iterable[str],
    history: Sequence[HistoryRecord],
) -> dict[str, float]:
    """
    Carry-forward weights for several exercises in a single history pass.

    Equivalent to calling last_weight_for_exercise() for each name.
    """
    pending = set(exercise_names)
    weights = {name: 0.0 for name in pending}

    for record in history:
        if not pending:
            break
        if not record.exercises:
            continue
        for name in list(pending):
            entry = record.find_exercise(name)
            if entry is not None and entry.sets:
                weights[name] = _carried_weight(entry.sets)
                pending.discard(name)

    return weights


# =============================================================================
# SESSION INITIALIZER
# =============================================================================


def initialize_session(
    plan_id: str,
    day: WorkoutDay,
    history: Sequence[HistoryRecord],
    *,
    now: int | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Session:
    """
    Build a fresh live session for a plan day.

    Each exercise gets exactly target_sets slots with reps=0, the carried
    forward weight and completed=False.  history is not modified.

    Args:
        plan_id: Identity of the plan the day belongs to
        day: Workout day to train
        history: History records, newest first
        now: Start timestamp in epoch ms (default: current time)
        id_factory: Identity generator for the session and its sets

    Returns:
        New Session
    """
    start_time = now_ms() if now is None else now
    weights = last_weights_by_name((ex.name for ex in day.exercises), history)

    exercises: dict[str, list[SetLog]] = {}
    last_weights: dict[str, float] = {}
    for exercise in day.exercises:
        weight = weights[exercise.name]
        logger.debug("Carry-forward weight for %r: %s", exercise.name, weight)
        last_weights[exercise.id] = weight
        exercises[exercise.id] = [
            SetLog(id=id_factory(), reps=0, weight=weight, completed=False)
            for _ in range(exercise.target_sets)
        ]

    return Session(
        id=id_factory(),
        plan_id=plan_id,
        day_id=day.id,
        start_time=start_time,
        exercises=exercises,
        last_weights=last_weights,
    )


# =============================================================================
# SESSION MUTATOR
# =============================================================================


def _get_sets(session: Session, exercise_id: str) -> list[SetLog]:
    sets = session.exercises.get(exercise_id)
    if sets is None:
        raise OutOfRangeError(
            f"Exercise {exercise_id!r} is not part of this session",
            exercise_id=exercise_id,
        )
    return sets


def _check_index(sets: list[SetLog], exercise_id: str, set_index: int) -> None:
    if not 0 <= set_index < len(sets):
        raise OutOfRangeError(
            f"Set index {set_index} out of range for {exercise_id!r} "
            f"({len(sets)} sets)",
            exercise_id=exercise_id,
            set_index=set_index,
        )


def _with_sets(session: Session, exercise_id: str, sets: list[SetLog]) -> Session:
    """Copy of session with one exercise's set list replaced."""
    return replace(session, exercises={**session.exercises, exercise_id: sets})


def update_set_field(
    session: Session,
    exercise_id: str,
    set_index: int,
    field: str,
    value: float | bool,
) -> Session:
    """
    Replace one field of one set.

    Args:
        session: Live session
        exercise_id: Exercise key in session.exercises
        set_index: 0-based index into that exercise's sets
        field: "reps", "weight" or "completed"
        value: New value

    Returns:
        New Session with the set replaced

    Raises:
        OutOfRangeError: Unknown exercise id or index out of range
        ValueError: Unknown field, or negative reps/weight
    """
    if field not in SET_FIELDS:
        raise ValueError(f"Unknown set field: {field!r}. Must be one of {SET_FIELDS}")

    sets = _get_sets(session, exercise_id)
    _check_index(sets, exercise_id, set_index)

    if field == "completed":
        value = bool(value)

    new_sets = list(sets)
    new_sets[set_index] = replace(sets[set_index], **{field: value})
    return _with_sets(session, exercise_id, new_sets)


def toggle_completed(session: Session, exercise_id: str, set_index: int) -> Session:
    """Flip the completed flag of one set."""
    sets = _get_sets(session, exercise_id)
    _check_index(sets, exercise_id, set_index)
    return update_set_field(
        session, exercise_id, set_index, "completed", not sets[set_index].completed
    )


def add_set(
    session: Session,
    exercise_id: str,
    *,
    id_factory: Callable[[], str] = new_id,
) -> Session:
    """
    Append a set copying weight and reps from the current last set.

    An empty list yields a zero set.  The new set is never completed.
    """
    sets = _get_sets(session, exercise_id)
    if sets:
        weight, reps = sets[-1].weight, sets[-1].reps
    else:
        weight, reps = 0.0, 0

    new_set = SetLog(id=id_factory(), reps=reps, weight=weight, completed=False)
    return _with_sets(session, exercise_id, [*sets, new_set])


def remove_set(session: Session, exercise_id: str) -> Session:
    """
    Remove the last set of an exercise.

    An exercise keeps at least one set slot while the session is live;
    removing the only remaining set is a no-op.
    """
    sets = _get_sets(session, exercise_id)
    if len(sets) <= 1:
        return session
    return _with_sets(session, exercise_id, sets[:-1])
