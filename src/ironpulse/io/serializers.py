"""
JSON serialization for ironpulse data models.

Handles conversion between dataclasses and JSON-compatible dicts, for the
history file, the user plan file and imported plan documents.
"""

import json
from typing import Any

from ..core.models import (
    Exercise,
    ExerciseLog,
    HistoryRecord,
    LoggedSet,
    TrainingPlan,
    WorkoutDay,
    new_id,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_non_negative(value: Any, name: str) -> int | float:
    """
    Validate that a value is a non-negative number.

    Args:
        value: Value to validate
        name: Name for error message

    Returns:
        The value unchanged

    Raises:
        ValidationError: If value is not a number or is negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_text(value: Any, name: str) -> str:
    """
    Validate that a value is a non-empty string.

    Raises:
        ValidationError: If value is missing, not a string, or blank
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string, got {value!r}")
    return value


def _require(data: Any, key: str, context: str) -> Any:
    if not isinstance(data, dict):
        raise ValidationError(f"{context}: expected a mapping, got {type(data).__name__}")
    if key not in data:
        raise ValidationError(f"{context}: missing field '{key}'")
    return data[key]


def _list_field(data: dict[str, Any], key: str, context: str) -> list[Any]:
    """Return data[key] as a list (missing or null reads as empty)."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{context}: '{key}' must be a list, got {type(value).__name__}")
    return value


# =============================================================================
# HISTORY RECORDS
# =============================================================================


def logged_set_to_dict(s: LoggedSet) -> dict[str, Any]:
    """Convert LoggedSet to JSON-compatible dict."""
    return {"weight": s.weight, "reps": s.reps, "completed": s.completed}


def dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    """
    Convert dict to LoggedSet.

    Raises:
        ValidationError: If data is invalid
    """
    return LoggedSet(
        weight=validate_non_negative(_require(data, "weight", "set"), "weight"),
        reps=validate_non_negative(_require(data, "reps", "set"), "reps"),
        completed=bool(data.get("completed", True)),
    )


def exercise_log_to_dict(entry: ExerciseLog) -> dict[str, Any]:
    """Convert ExerciseLog to JSON-compatible dict."""
    return {"name": entry.name, "sets": [logged_set_to_dict(s) for s in entry.sets]}


def dict_to_exercise_log(data: dict[str, Any]) -> ExerciseLog:
    """
    Convert dict to ExerciseLog.

    Raises:
        ValidationError: If data is invalid
    """
    return ExerciseLog(
        name=validate_text(_require(data, "name", "exercise log"), "name"),
        sets=tuple(dict_to_logged_set(s) for s in _list_field(data, "sets", "exercise log")),
    )


def history_record_to_dict(record: HistoryRecord) -> dict[str, Any]:
    """
    Convert HistoryRecord to JSON-compatible dict.

    The detailed log is omitted (rather than written as null) for records
    that have none.

    Args:
        record: HistoryRecord to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "id": record.id,
        "date": record.date,
        "plan_name": record.plan_name,
        "day_name": record.day_name,
        "duration_seconds": record.duration_seconds,
        "total_volume": record.total_volume,
        "exercises_completed": record.exercises_completed,
    }
    if record.exercises is not None:
        d["exercises"] = [exercise_log_to_dict(e) for e in record.exercises]
    return d


def dict_to_history_record(data: dict[str, Any]) -> HistoryRecord:
    """
    Convert dict to HistoryRecord.

    Args:
        data: Dict representation

    Returns:
        HistoryRecord instance

    Raises:
        ValidationError: If data is invalid
    """
    ctx = "history record"
    date = validate_non_negative(_require(data, "date", ctx), "date")
    raw_exercises = data.get("exercises")

    try:
        return HistoryRecord(
            id=validate_text(_require(data, "id", ctx), "id"),
            date=int(date),
            plan_name=str(_require(data, "plan_name", ctx)),
            day_name=str(_require(data, "day_name", ctx)),
            duration_seconds=int(validate_non_negative(data.get("duration_seconds", 0), "duration_seconds")),
            total_volume=validate_non_negative(data.get("total_volume", 0), "total_volume"),
            exercises_completed=int(
                validate_non_negative(data.get("exercises_completed", 0), "exercises_completed")
            ),
            exercises=(
                tuple(dict_to_exercise_log(e) for e in _list_field(data, "exercises", ctx))
                if raw_exercises is not None
                else None
            ),
        )
    except ValueError as e:
        raise ValidationError(f"Invalid {ctx}: {e}") from e


def record_to_json_line(record: HistoryRecord) -> str:
    """
    Serialize a record to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(history_record_to_dict(record), separators=(",", ":"))


def json_line_to_record(line: str) -> HistoryRecord:
    """
    Deserialize a JSON line to a HistoryRecord.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")
    return dict_to_history_record(data)


# =============================================================================
# TRAINING PLANS
# =============================================================================


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to JSON-compatible dict."""
    d: dict[str, Any] = {
        "id": exercise.id,
        "name": exercise.name,
        "target_sets": exercise.target_sets,
        "target_reps": exercise.target_reps,
    }
    if exercise.notes:
        d["notes"] = exercise.notes
    return d


def plan_to_dict(plan: TrainingPlan) -> dict[str, Any]:
    """
    Convert TrainingPlan to JSON-compatible dict.

    Args:
        plan: TrainingPlan to convert

    Returns:
        Dict representation (the same shape plan_from_dict accepts)
    """
    return {
        "id": plan.id,
        "name": plan.name,
        "description": plan.description,
        "is_ai_generated": plan.is_ai_generated,
        "created_at": plan.created_at,
        "days": [
            {
                "id": day.id,
                "name": day.name,
                "exercises": [exercise_to_dict(e) for e in day.exercises],
            }
            for day in plan.days
        ],
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    A missing id gets a fresh one; target_reps may be given as a number.

    Raises:
        ValidationError: If data is invalid
    """
    target_sets = _require(data, "target_sets", "exercise")
    if isinstance(target_sets, bool) or not isinstance(target_sets, (int, float)):
        raise ValidationError(f"target_sets must be a number, got {target_sets!r}")

    try:
        return Exercise(
            id=str(data.get("id") or new_id()),
            name=validate_text(_require(data, "name", "exercise"), "exercise name"),
            target_sets=int(target_sets),
            target_reps=str(_require(data, "target_reps", "exercise")),
            notes=data.get("notes") or None,
        )
    except ValueError as e:
        raise ValidationError(f"Invalid exercise {data.get('name')!r}: {e}") from e


def plan_from_dict(data: dict[str, Any], *, now: int = 0) -> TrainingPlan:
    """
    Convert an authored plan document (YAML or JSON) to a TrainingPlan.

    Day and exercise ids are optional and generated when absent; the plan
    id, if absent, is generated too.

    Args:
        data: Dict representation
        now: created_at used when the document has none

    Returns:
        TrainingPlan instance

    Raises:
        ValidationError: If data is invalid
    """
    name = validate_text(_require(data, "name", "plan"), "plan name")
    raw_days = _require(data, "days", f"plan {name!r}")
    if not isinstance(raw_days, list) or not raw_days:
        raise ValidationError(f"plan {name!r}: 'days' must be a non-empty list")

    days = []
    for raw_day in raw_days:
        day_name = validate_text(_require(raw_day, "name", "day"), "day name")
        raw_exercises = _list_field(raw_day, "exercises", f"day {day_name!r}")
        days.append(
            WorkoutDay(
                id=str(raw_day.get("id") or new_id()),
                name=day_name,
                exercises=tuple(dict_to_exercise(e) for e in raw_exercises),
            )
        )

    return TrainingPlan(
        id=str(data.get("id") or new_id()),
        name=name,
        description=str(data.get("description") or ""),
        days=tuple(days),
        is_ai_generated=bool(data.get("is_ai_generated", False)),
        created_at=int(data.get("created_at") or now),
    )


def plan_from_generated(data: dict[str, Any], *, now: int = 0) -> TrainingPlan:
    """
    Convert a plan-generation service response to a TrainingPlan.

    The response uses camelCase keys and carries no identities:

        {"planName": ..., "description": ...,
         "days": [{"name": ..., "exercises": [
             {"name": ..., "targetSets": 3, "targetReps": "8-12", "notes": ...}]}]}

    Every plan, day and exercise gets a fresh id and the plan is flagged
    as AI-generated.

    Raises:
        ValidationError: If the response is missing required fields
    """
    authored = {
        "name": _require(data, "planName", "generated plan"),
        "description": data.get("description", ""),
        "is_ai_generated": True,
        "days": [
            {
                "name": _require(day, "name", "generated day"),
                "exercises": [
                    {
                        "name": _require(ex, "name", "generated exercise"),
                        "target_sets": _require(ex, "targetSets", "generated exercise"),
                        "target_reps": _require(ex, "targetReps", "generated exercise"),
                        "notes": ex.get("notes"),
                    }
                    for ex in _list_field(day, "exercises", "generated day")
                ],
            }
            for day in _list_field(data, "days", "generated plan")
        ],
    }
    return plan_from_dict(authored, now=now)
