"""History commands: history, show-record, delete-record."""

import json
from typing import Annotated, Optional

import typer

from ...core.analytics import recent_records
from ...core.config import RECENT_HISTORY_LIMIT
from ...core.engine.config_loader import get_setting
from ...core.errors import StoreError
from ...core.models import HistoryRecord
from ...io.history_store import HistoryStore
from ...io.serializers import ValidationError, history_record_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store


def _load_or_exit(store: HistoryStore) -> list[HistoryRecord]:
    """Load history newest first, exiting with an error message on failure."""
    try:
        return store.load()
    except (StoreError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _record_at(records: list[HistoryRecord], number: int) -> HistoryRecord:
    """Return the record shown as #number in 'history' (1 = newest)."""
    if not records:
        views.print_error("No workouts in history.")
        raise typer.Exit(1)
    if number < 1 or number > len(records):
        views.print_error(f"Record number must be between 1 and {len(records)}")
        raise typer.Exit(1)
    return records[number - 1]


@app.command()
def history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Number of records to show (0 = all)", min=0),
    ] = None,
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show recent workouts, newest first.
    """
    records = _load_or_exit(get_store(history_path))

    if limit is None:
        limit = int(get_setting("history", "recent_limit", RECENT_HISTORY_LIMIT))
    shown = recent_records(records, limit) if limit else records

    if json_out:
        print(json.dumps([history_record_to_dict(r) for r in shown], indent=2))
        return

    views.print_history(shown)
    if len(shown) < len(records):
        views.console.print(f"[dim]Showing {len(shown)} of {len(records)} workouts.[/dim]")


@app.command("show-record")
def show_record(
    number: Annotated[int, typer.Argument(help="Record # as listed by 'history'")],
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show one workout with its per-exercise set log.
    """
    record = _record_at(_load_or_exit(get_store(history_path)), number)

    if json_out:
        print(json.dumps(history_record_to_dict(record), indent=2))
        return

    views.print_record_detail(record)


@app.command("delete-record")
def delete_record(
    number: Annotated[int, typer.Argument(help="Record # as listed by 'history'")],
    history_path: HistoryPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
) -> None:
    """
    Delete a workout from history.
    """
    store = get_store(history_path)
    target = _record_at(_load_or_exit(store), number)
    label = f"{target.plan_name} / {target.day_name}"

    views.console.print(f"Workout to delete: [bold]#{number}[/bold]")
    views.print_record_summary(target)

    if not force and not views.confirm_action(f"Delete {label}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        store.delete_record(target.id)
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted workout #{number}: {label}")
