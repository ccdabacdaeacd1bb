"""Shared Typer app object, shared option types, and store utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..io.history_store import HistoryStore, get_default_history_path
from ..io.plan_store import PlanStore, get_default_plans_path
from . import views

# Shared --history-path option type used across all commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]

# Shared --plans-path option type for commands that read plans
PlansPathOption = Annotated[
    Optional[Path],
    typer.Option("--plans-path", help="Path to user plans JSON file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="ironpulse",
    help="Workout tracker: follow a plan, log live sessions, review progress.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Workout tracker: follow a plan, log live sessions, review progress.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=views.err_console, rich_tracebacks=True)],
        force=True,
    )


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def get_plan_store(plans_path: Path | None) -> PlanStore:
    """Get plan store from path or default location."""
    if plans_path is None:
        plans_path = get_default_plans_path()
    return PlanStore(plans_path)
