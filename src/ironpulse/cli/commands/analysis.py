"""Analysis commands: progress, volume, summary."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Optional, cast

import typer

from ...core.analytics import exercise_names, exercise_progression, history_summary, weekly_activity
from ...core.ascii_plot import ProgressionMetric
from ...core.clock import now_ms
from ...core.config import DEFAULT_ACTIVITY_WEEKS
from ...core.engine.config_loader import get_setting
from ...core.errors import StoreError
from ...core.models import HistoryRecord
from ...io.serializers import ValidationError
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store

_METRICS: tuple[str, ...] = ("max_weight", "est_one_rep_max", "volume")


def _load_history(history_path: Path | None) -> list[HistoryRecord]:
    try:
        return get_store(history_path).load()
    except (StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _resolve_exercise_name(history: list[HistoryRecord], name: str) -> str:
    """Match an exercise name exactly, else case-insensitively, else return it unchanged."""
    known = exercise_names(history)
    if name in known:
        return name
    for candidate in known:
        if candidate.lower() == name.lower():
            return candidate
    return name


@app.command()
def progress(
    exercise: Annotated[str, typer.Argument(help="Exercise name, e.g. 'Bench Press'")],
    metric: Annotated[
        str,
        typer.Option("--metric", "-m", help="Chart metric: max_weight | est_one_rep_max | volume"),
    ] = "max_weight",
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show progression for one exercise: max weight, volume and estimated 1RM
    per workout, with an ASCII chart.
    """
    if metric not in _METRICS:
        views.print_error(f"Unknown metric {metric!r}. Choose one of: {', '.join(_METRICS)}")
        raise typer.Exit(1)

    records = _load_history(history_path)
    name = _resolve_exercise_name(records, exercise)
    points = exercise_progression(records, name)

    if json_out:
        print(json.dumps({
            "exercise": name,
            "points": [asdict(p) for p in points],
            "latest_est_one_rep_max": points[-1].est_one_rep_max if points else None,
        }, indent=2))
        return

    chart_metric = cast(ProgressionMetric, metric)
    views.print_progression(name, points, chart_metric)
    if not points:
        known = exercise_names(records)
        if known:
            views.print_info(f"Logged exercises: {', '.join(known)}")


@app.command()
def volume(
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", help="Number of weeks to show", min=1),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show workouts and volume per week (7-day windows ending now).
    """
    if weeks is None:
        weeks = int(get_setting("analytics", "weeks", DEFAULT_ACTIVITY_WEEKS))

    buckets = weekly_activity(_load_history(history_path), now_ms(), weeks)

    if json_out:
        print(json.dumps({"weeks": [asdict(b) for b in buckets]}, indent=2))
        return

    views.print_volume_chart(buckets)


@app.command()
def summary(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show totals: workouts, volume, distinct active days.
    """
    records = _load_history(history_path)
    totals = history_summary(records)
    names = exercise_names(records)

    if json_out:
        print(json.dumps({**asdict(totals), "exercises": names}, indent=2))
        return

    views.console.print(views.format_summary(totals, names))
