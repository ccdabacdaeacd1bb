"""
CLI entry point using Typer.

Provides commands for following a plan and reviewing progress:
- plans / plan-show / plan-import / plan-delete: manage training plans
- workout: run a live session from a plan day
- history / show-record / delete-record: browse saved workouts
- progress / volume / summary: statistics over the history
"""

from .app import app

# Command modules register themselves on the shared app when imported
from .commands import analysis, history, plans, workout  # noqa: F401


def main() -> None:
    app()


if __name__ == "__main__":
    main()
