"""
Data models for ironpulse.

All core dataclasses representing training plans, live sessions and the
history records produced from them.  Timestamps are integer epoch
milliseconds; identities are opaque strings from new_id().
"""

import uuid
from dataclasses import dataclass, field

SET_FIELDS = ("reps", "weight", "completed")


def new_id() -> str:
    """Return a fresh collision-resistant identity (random 128-bit, hex)."""
    return uuid.uuid4().hex


# =============================================================================
# PLAN MODEL (read-only once published)
# =============================================================================


@dataclass(frozen=True)
class Exercise:
    """
    One planned exercise within a workout day.

    target_reps is free-form ("8-12", "5", "AMRAP") and only displayed.
    """

    id: str
    name: str
    target_sets: int
    target_reps: str
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.name.strip():
            raise ValueError("Exercise name must be non-empty")
        if self.target_sets < 1:
            raise ValueError("target_sets must be at least 1")


@dataclass(frozen=True)
class WorkoutDay:
    """A named day of a plan; exercise order is the traversal order."""

    id: str
    name: str
    exercises: tuple[Exercise, ...] = ()

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        """Return the exercise with the given id, or None."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None


@dataclass(frozen=True)
class TrainingPlan:
    """
    A training program: ordered days of ordered exercises.

    is_ai_generated records provenance (authored by hand vs produced by a
    plan-generation service).
    """

    id: str
    name: str
    description: str
    days: tuple[WorkoutDay, ...] = ()
    is_ai_generated: bool = False
    created_at: int = 0

    def find_day(self, day_id: str) -> WorkoutDay | None:
        """Return the day with the given id, or None."""
        for day in self.days:
            if day.id == day_id:
                return day
        return None

    @property
    def exercise_count(self) -> int:
        """Number of exercises across all days."""
        return sum(len(d.exercises) for d in self.days)


# =============================================================================
# LIVE SESSION (transient, one at a time)
# =============================================================================


@dataclass(frozen=True)
class SetLog:
    """
    A single set slot in a live session.

    Instances are never modified; mutators build a replacement with
    dataclasses.replace().
    """

    id: str
    reps: float = 0
    weight: float = 0.0
    completed: bool = False

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")

    @property
    def volume(self) -> float:
        """weight × reps for this set, regardless of completion."""
        return self.weight * self.reps


@dataclass
class Session:
    """
    A live, in-progress workout tied to one plan day.

    exercises maps exercise id → ordered set slots.  Only keys of exercises
    present in the originating day are ever created.  last_weights holds
    the carried-forward weight per exercise id; set edits never touch it,
    so it stays a reference to the previous performance.
    """

    id: str
    plan_id: str
    day_id: str
    start_time: int
    exercises: dict[str, list[SetLog]] = field(default_factory=dict)
    last_weights: dict[str, float] = field(default_factory=dict)

    def sets_for(self, exercise_id: str) -> list[SetLog] | None:
        """Return the set list for an exercise, or None if not in this session."""
        return self.exercises.get(exercise_id)

    def last_weight(self, exercise_id: str) -> float:
        """Carried-forward weight for an exercise (0 if never logged)."""
        return self.last_weights.get(exercise_id, 0.0)

    @property
    def completed_set_count(self) -> int:
        """Number of sets currently marked completed."""
        return sum(1 for sets in self.exercises.values() for s in sets if s.completed)


# =============================================================================
# HISTORY (immutable once appended)
# =============================================================================


@dataclass(frozen=True)
class LoggedSet:
    """A completed set captured by value in a history record."""

    weight: float
    reps: float
    completed: bool = True

    @property
    def volume(self) -> float:
        """weight × reps."""
        return self.weight * self.reps


@dataclass(frozen=True)
class ExerciseLog:
    """Per-exercise detail of a history record."""

    name: str
    sets: tuple[LoggedSet, ...] = ()


@dataclass(frozen=True)
class HistoryRecord:
    """
    A finalized workout.

    Plan and day names are copied in so the record stays interpretable
    after the plan is edited or deleted.  exercises is None for records
    written without a detailed log.
    """

    id: str
    date: int  # completion timestamp, epoch ms
    plan_name: str
    day_name: str
    duration_seconds: int
    total_volume: float
    exercises_completed: int
    exercises: tuple[ExerciseLog, ...] | None = None

    def __post_init__(self) -> None:
        """Validate record data."""
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if self.total_volume < 0:
            raise ValueError("total_volume must be non-negative")
        if self.exercises_completed < 0:
            raise ValueError("exercises_completed must be non-negative")

    def find_exercise(self, name: str) -> ExerciseLog | None:
        """Return the first detail entry with the given exercise name, or None."""
        if not self.exercises:
            return None
        for entry in self.exercises:
            if entry.name == name:
                return entry
        return None


# =============================================================================
# DERIVED STATISTICS
# =============================================================================


@dataclass(frozen=True)
class ProgressionPoint:
    """One point of an exercise's progression series."""

    date: int
    max_weight: float
    volume: float
    est_one_rep_max: float


@dataclass(frozen=True)
class WeeklyBucket:
    """Workouts and volume within one 7-day window ending at 'now'."""

    label: str
    workouts: int = 0
    volume: float = 0.0


@dataclass(frozen=True)
class HistorySummary:
    """Aggregate totals over the whole history."""

    total_workouts: int
    total_volume: float
    active_days: int
