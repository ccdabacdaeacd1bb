"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, live sessions, history
and statistics.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.ascii_plot import ProgressionMetric, create_progression_plot, create_weekly_activity_chart
from ..core.clock import format_duration, format_timestamp
from ..core.models import (
    HistoryRecord,
    HistorySummary,
    ProgressionPoint,
    Session,
    TrainingPlan,
    WeeklyBucket,
    WorkoutDay,
)

console = Console()
err_console = Console(stderr=True)


def _fmt_num(value: float) -> str:
    """Format a weight/reps value without a trailing .0 for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def _fmt_volume(value: float) -> str:
    return f"{value:,.0f}"


# =============================================================================
# PLANS
# =============================================================================


def format_plans_table(plans: list[TrainingPlan]) -> Table:
    """
    Create a Rich table listing plans.

    Args:
        plans: Plans to display

    Returns:
        Rich Table object
    """
    table = Table(title="Training Plans")

    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Days", justify="right")
    table.add_column("Ex", justify="right")
    table.add_column("Source", style="magenta")

    for plan in plans:
        table.add_row(
            escape(plan.id),
            escape(plan.name),
            str(len(plan.days)),
            str(plan.exercise_count),
            "AI" if plan.is_ai_generated else "authored",
        )

    return table


def print_plans(plans: list[TrainingPlan]) -> None:
    """Print the plan list."""
    if not plans:
        console.print("[yellow]No plans yet.[/yellow]")
        return
    console.print(format_plans_table(plans))


def print_plan(plan: TrainingPlan) -> None:
    """
    Print one plan with its days and exercises.

    Args:
        plan: Plan to display
    """
    console.print()
    console.print(f"[bold cyan]{escape(plan.name)}[/bold cyan]  [dim]({escape(plan.id)})[/dim]")
    if plan.description:
        console.print(escape(plan.description))

    for day in plan.days:
        table = Table(title=f"{escape(day.name)}  [dim]{escape(day.id)}[/dim]", title_justify="left")
        table.add_column("#", justify="right", style="dim", width=3)
        table.add_column("Exercise", style="bold")
        table.add_column("Sets", justify="right")
        table.add_column("Reps", justify="right")
        table.add_column("Notes", style="dim")
        for i, ex in enumerate(day.exercises, 1):
            table.add_row(
                str(i),
                escape(ex.name),
                str(ex.target_sets),
                escape(ex.target_reps),
                escape(ex.notes or ""),
            )
        console.print(table)


# =============================================================================
# LIVE SESSION
# =============================================================================


def format_session_table(session: Session, day: WorkoutDay) -> Table:
    """
    Create a Rich table of a live session's set slots.

    Exercises are numbered in day order; sets are numbered from 1.  The
    Last column shows the weight carried forward from history, and
    exercise notes are listed in the caption.
    """
    notes = [
        f"{ex_num}. {escape(exercise.notes)}"
        for ex_num, exercise in enumerate(day.exercises, 1)
        if exercise.notes
    ]
    table = Table(
        show_header=True,
        header_style="dim",
        caption="\n".join(notes) or None,
        caption_justify="left",
    )
    table.add_column("Ex", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="bold")
    table.add_column("Target")
    table.add_column("Last", justify="right", style="dim", no_wrap=True)
    table.add_column("Set", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Done", justify="center")

    for ex_num, exercise in enumerate(day.exercises, 1):
        sets = session.sets_for(exercise.id) or []
        last = session.last_weight(exercise.id)
        for set_num, s in enumerate(sets, 1):
            first = set_num == 1
            table.add_row(
                str(ex_num) if first else "",
                escape(exercise.name) if first else "",
                f"{exercise.target_sets}x{escape(exercise.target_reps)}" if first else "",
                f"{_fmt_num(last)} kg" if first and last > 0 else "",
                str(set_num),
                _fmt_num(s.weight),
                _fmt_num(s.reps),
                "[green]✓[/green]" if s.completed else "·",
            )

    return table


def print_session(session: Session, day: WorkoutDay, elapsed_seconds: int) -> None:
    """Print the live session with its elapsed time."""
    console.print()
    console.print(
        f"[bold]{escape(day.name)}[/bold]  [dim]elapsed {format_duration(elapsed_seconds)}[/dim]"
    )
    console.print(format_session_table(session, day))


def print_workout_help() -> None:
    """Print the in-workout command reference."""
    console.print(
        "[bold]Commands[/bold] (EX = exercise #, SET = set #):\n"
        "  [cyan]l EX SET WEIGHT REPS[/cyan]  log a set and mark it done\n"
        "  [cyan]w EX SET WEIGHT[/cyan]       set weight\n"
        "  [cyan]r EX SET REPS[/cyan]         set reps\n"
        "  [cyan]c EX SET[/cyan]              toggle done\n"
        "  [cyan]+ EX[/cyan] / [cyan]- EX[/cyan]            add / remove last set\n"
        "  [cyan]v[/cyan] view   [cyan]f[/cyan] finish   [cyan]q[/cyan] cancel   [cyan]?[/cyan] help"
    )


# =============================================================================
# HISTORY
# =============================================================================


def format_history_table(records: list[HistoryRecord]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        records: Records to display, newest first

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Plan / Day", style="bold")
    table.add_column("Time", justify="right")
    table.add_column("Ex", justify="right")
    table.add_column("Volume", justify="right", style="green")

    for i, record in enumerate(records, 1):
        table.add_row(
            str(i),
            format_timestamp(record.date),
            f"{escape(record.plan_name)} / {escape(record.day_name)}",
            format_duration(record.duration_seconds),
            str(record.exercises_completed),
            _fmt_volume(record.total_volume),
        )

    return table


def print_history(records: list[HistoryRecord]) -> None:
    """
    Print workout history to console.

    Args:
        records: Records to display, newest first
    """
    if not records:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(records))


def print_record_detail(record: HistoryRecord) -> None:
    """Print one record with its per-exercise set log."""
    console.print()
    console.print(f"[bold]{escape(record.day_name)}[/bold]  [dim]{escape(record.plan_name)}[/dim]")
    console.print(
        f"{format_timestamp(record.date)}  ·  {format_duration(record.duration_seconds)}"
        f"  ·  volume {_fmt_volume(record.total_volume)}"
        f"  ·  {record.exercises_completed} exercises"
    )

    if not record.exercises:
        console.print("[dim]No detailed log for this workout.[/dim]")
        return

    for entry in record.exercises:
        table = Table(title=escape(entry.name), title_justify="left", show_header=True, header_style="dim")
        table.add_column("Set", justify="right", width=4)
        table.add_column("Weight", justify="right")
        table.add_column("Reps", justify="right")
        for i, s in enumerate(entry.sets, 1):
            table.add_row(str(i), _fmt_num(s.weight), _fmt_num(s.reps))
        console.print(table)


def print_record_summary(record: HistoryRecord) -> None:
    """One-line summary printed after a workout is saved."""
    console.print(
        f"Duration {format_duration(record.duration_seconds)}  ·  "
        f"Volume {_fmt_volume(record.total_volume)}  ·  "
        f"Exercises {record.exercises_completed}"
    )


# =============================================================================
# STATISTICS
# =============================================================================


def format_progression_table(points: list[ProgressionPoint]) -> Table:
    """Create a Rich table of a progression series (oldest first)."""
    table = Table(show_header=True, header_style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Max weight", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Est. 1RM", justify="right", style="bold")

    for p in points:
        table.add_row(
            format_timestamp(p.date),
            _fmt_num(p.max_weight),
            _fmt_volume(p.volume),
            f"{p.est_one_rep_max:.1f}",
        )
    return table


def print_progression(
    exercise_name: str,
    points: list[ProgressionPoint],
    metric: ProgressionMetric = "max_weight",
) -> None:
    """
    Print progression table, ASCII chart and current estimated 1RM.

    Args:
        exercise_name: Exercise display name
        points: Progression series, oldest first
        metric: Metric plotted in the chart
    """
    if not points:
        console.print(f"[yellow]No completed sets logged for {escape(exercise_name)}.[/yellow]")
        return

    console.print()
    console.print(f"[bold]{escape(exercise_name)}[/bold]")
    console.print(format_progression_table(points))
    console.print()
    console.print(
        escape(create_progression_plot(points, metric=metric, exercise_name=exercise_name))
    )
    console.print()
    console.print(f"Current est. 1RM: [bold]{points[-1].est_one_rep_max:.1f}[/bold]")


def print_volume_chart(buckets: list[WeeklyBucket]) -> None:
    """
    Print weekly activity chart.

    Args:
        buckets: Weekly buckets, oldest first
    """
    console.print(create_weekly_activity_chart(buckets))


def format_summary(summary: HistorySummary, exercise_names: list[str]) -> str:
    """
    Format aggregate totals as text block.

    Args:
        summary: Aggregate totals
        exercise_names: Distinct exercise names in history

    Returns:
        Formatted string
    """
    lines = [
        "Summary",
        f"- Workouts: {summary.total_workouts}",
        f"- Total volume: {summary.total_volume / 1000:.0f}k ({_fmt_volume(summary.total_volume)})",
        f"- Active days: {summary.active_days}",
    ]
    if exercise_names:
        lines.append(f"- Exercises logged: {', '.join(exercise_names)}")
    return "\n".join(lines)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{escape(message)} \\[y/N]: ")
    return response.strip().lower() in ("y", "yes")
