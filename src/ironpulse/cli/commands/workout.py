"""Live workout command: start a session from a plan day, log sets, finish."""

import json
from typing import Annotated, Optional

import typer

from ...core.clock import now_ms
from ...core.errors import OutOfRangeError, StoreError
from ...core.finalizer import finish_session, is_empty_session
from ...core.models import Session, TrainingPlan, WorkoutDay
from ...core.session import add_set, initialize_session, remove_set, toggle_completed, update_set_field
from ...io.serializers import ValidationError, history_record_to_dict
from .. import views
from ..app import HistoryPathOption, PlansPathOption, app, get_plan_store, get_store


class CommandError(ValueError):
    """An in-workout command could not be understood."""


def _choose_day(plan: TrainingPlan) -> WorkoutDay:
    """Prompt for a day of the plan by number or id."""
    for i, day in enumerate(plan.days, 1):
        views.console.print(f"  \\[{i}] {day.name}  [dim]{day.id}[/dim]")
    while True:
        raw = views.console.input("Day [1]: ").strip() or "1"
        if raw.isdigit() and 1 <= int(raw) <= len(plan.days):
            return plan.days[int(raw) - 1]
        day = plan.find_day(raw)
        if day is not None:
            return day
        views.print_error(f"Choose 1–{len(plan.days)} or type a day id")


def _exercise_id(day: WorkoutDay, token: str) -> str:
    """Map a 1-based exercise number to the exercise id."""
    try:
        n = int(token)
    except ValueError:
        raise CommandError(f"Exercise must be a number, got {token!r}") from None
    if not 1 <= n <= len(day.exercises):
        raise CommandError(f"Exercise must be between 1 and {len(day.exercises)}")
    return day.exercises[n - 1].id


def _set_index(token: str) -> int:
    """Map a 1-based set number to a 0-based index."""
    try:
        return int(token) - 1
    except ValueError:
        raise CommandError(f"Set must be a number, got {token!r}") from None


def _number(token: str, name: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise CommandError(f"{name} must be a number, got {token!r}") from None
    if value < 0:
        raise CommandError(f"{name} must be non-negative")
    return value


def _expect_args(args: list[str], n: int, usage: str) -> None:
    if len(args) != n:
        raise CommandError(f"Usage: {usage}")


def apply_command(session: Session, day: WorkoutDay, raw: str) -> tuple[Session, str]:
    """
    Apply one in-workout command line to the session.

    Returns:
        (new session, action) where action is "edit", "view", "help",
        "finish" or "cancel"

    Raises:
        CommandError: The command line could not be parsed
        OutOfRangeError: The command addressed a set that does not exist
    """
    parts = raw.split()
    if not parts:
        return session, "view"
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("f", "finish"):
        return session, "finish"
    if cmd in ("q", "quit", "cancel"):
        return session, "cancel"
    if cmd in ("?", "h", "help"):
        return session, "help"
    if cmd in ("v", "view"):
        return session, "view"

    if cmd == "l":
        _expect_args(args, 4, "l EX SET WEIGHT REPS")
        ex_id, idx = _exercise_id(day, args[0]), _set_index(args[1])
        weight, reps = _number(args[2], "Weight"), _number(args[3], "Reps")
        session = update_set_field(session, ex_id, idx, "weight", weight)
        session = update_set_field(session, ex_id, idx, "reps", reps)
        return update_set_field(session, ex_id, idx, "completed", True), "edit"
    if cmd == "w":
        _expect_args(args, 3, "w EX SET WEIGHT")
        ex_id, idx = _exercise_id(day, args[0]), _set_index(args[1])
        return update_set_field(session, ex_id, idx, "weight", _number(args[2], "Weight")), "edit"
    if cmd == "r":
        _expect_args(args, 3, "r EX SET REPS")
        ex_id, idx = _exercise_id(day, args[0]), _set_index(args[1])
        return update_set_field(session, ex_id, idx, "reps", _number(args[2], "Reps")), "edit"
    if cmd == "c":
        _expect_args(args, 2, "c EX SET")
        return toggle_completed(session, _exercise_id(day, args[0]), _set_index(args[1])), "edit"
    if cmd == "+":
        _expect_args(args, 1, "+ EX")
        return add_set(session, _exercise_id(day, args[0])), "edit"
    if cmd == "-":
        _expect_args(args, 1, "- EX")
        return remove_set(session, _exercise_id(day, args[0])), "edit"

    raise CommandError(f"Unknown command {cmd!r}. Type ? for help.")


@app.command()
def workout(
    plan_id: Annotated[str, typer.Argument(help="Plan ID (see 'ironpulse plans')")],
    day_id: Annotated[
        Optional[str],
        typer.Argument(help="Day ID (prompted when omitted)"),
    ] = None,
    history_path: HistoryPathOption = None,
    plans_path: PlansPathOption = None,
) -> None:
    """
    Start a live workout from a plan day.

    Each set is pre-filled with the weight you last used for that
    exercise.  Log sets interactively, then finish to save the workout
    to history (only sets marked done are recorded).
    """
    try:
        plan = get_plan_store(plans_path).get_plan(plan_id)
    except (StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if plan is None:
        views.print_error(f"Unknown plan: {plan_id}")
        views.print_info("Run 'ironpulse plans' to list available plans.")
        raise typer.Exit(1)

    if day_id is None:
        day = _choose_day(plan)
    else:
        found = plan.find_day(day_id)
        if found is None:
            valid = ", ".join(d.id for d in plan.days)
            views.print_error(f"Unknown day '{day_id}' in plan {plan.id}. Valid IDs: {valid}")
            raise typer.Exit(1)
        day = found

    store = get_store(history_path)
    try:
        history = store.load()
    except (StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = initialize_session(plan.id, day, history)

    views.print_workout_help()
    views.print_session(session, day, 0)

    while True:
        try:
            raw = views.console.input("\n> ")
        except EOFError:
            views.print_warning("Input closed; workout discarded.")
            raise typer.Exit(1)

        try:
            session, action = apply_command(session, day, raw)
        except (CommandError, OutOfRangeError) as e:
            views.print_error(str(e))
            continue

        if action == "help":
            views.print_workout_help()
        elif action in ("view", "edit"):
            views.print_session(session, day, (now_ms() - session.start_time) // 1000)
        elif action == "cancel":
            if views.confirm_action("Are you sure? Progress will be lost."):
                views.print_info("Workout cancelled.")
                return
        elif action == "finish":
            if is_empty_session(session) and not views.confirm_action(
                "No sets are marked done. Finish anyway?"
            ):
                continue
            break

    record = finish_session(session, day, plan.name, now_ms())

    try:
        store.append(record)
    except StoreError as e:
        views.print_error(str(e))
        views.print_warning("The workout was NOT saved. Record follows so it is not lost:")
        print(json.dumps(history_record_to_dict(record), indent=2))
        raise typer.Exit(1)

    views.print_success(f"Workout saved: {plan.name} / {day.name}")
    views.print_record_summary(record)
