"""
ASCII plotting for progression and weekly activity.

Creates terminal-friendly charts from the analytics series.
"""

from typing import Literal, Sequence

from .clock import to_datetime
from .models import ProgressionPoint, WeeklyBucket

ProgressionMetric = Literal["max_weight", "est_one_rep_max", "volume"]

_METRIC_TITLES: dict[str, str] = {
    "max_weight": "Max Weight",
    "est_one_rep_max": "Est. 1RM",
    "volume": "Volume",
}


def create_progression_plot(
    points: Sequence[ProgressionPoint],
    metric: ProgressionMetric = "max_weight",
    width: int = 60,
    height: int = 16,
    exercise_name: str = "",
) -> str:
    """
    Create an ASCII plot of one progression metric over time.

    Points are placed by date on the x-axis and joined with a staircase
    line (╭─╯).

    Args:
        points: Progression series, oldest first
        metric: Which ProgressionPoint field to plot
        width: Plot width in characters
        height: Plot height in lines
        exercise_name: Display name shown in the chart title

    Returns:
        ASCII art string
    """
    if len(points) < 2:
        return "Not enough data to chart (need at least two sessions)."

    values = [float(getattr(p, metric)) for p in points]
    min_date = to_datetime(points[0].date)
    max_date = to_datetime(points[-1].date)
    date_range = (points[-1].date - points[0].date) or 1

    # Pad the y range by 10% on both sides, as a flat series still needs height
    y_min = min(values) * 0.9
    y_max = max(values) * 1.1
    y_range = (y_max - y_min) or 10.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    plot_points: list[tuple[int, int]] = []
    for p, v in zip(points, values):
        x = int(((p.date - points[0].date) / date_range) * (plot_width - 1))
        y = int(((v - y_min) / y_range) * (plot_height - 1))
        plot_points.append((x, plot_height - 1 - y))  # Flip y-axis

    def _p(x: int, r: int, ch: str) -> None:
        if 0 <= x < plot_width and 0 <= r < plot_height and grid[r][x] == " ":
            grid[r][x] = ch

    # Staircase connecting lines
    for (col1, row1), (col2, row2) in zip(plot_points, plot_points[1:]):
        if row1 == row2:
            for x in range(col1 + 1, col2):
                _p(x, row1, "─")
            continue

        row_dir = -1 if row2 < row1 else 1  # -1 = going up (higher value)
        up = row_dir == -1
        corner_exit = "╯" if up else "╮"
        corner_entry = "╭" if up else "╰"
        n_segs = abs(row2 - row1) + 1

        for step in range(n_segs):
            row = row1 + row_dir * step
            pivot_in = col1 + (col2 - col1) * step // n_segs
            pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs
            if step > 0:
                _p(pivot_in, row, corner_entry)
            start = col1 + 1 if step == 0 else pivot_in + 1
            stop = col2 if step == n_segs - 1 else pivot_out
            for x in range(start, stop):
                _p(x, row, "─")
            if step < n_segs - 1:
                _p(pivot_out, row, corner_exit)

    for x, y in plot_points:
        if 0 <= x < plot_width and 0 <= y < plot_height:
            grid[y][x] = "●"

    title = f"{_METRIC_TITLES[metric]} Progress"
    if exercise_name:
        title += f" ({exercise_name})"

    lines = [title, "─" * width]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:6.0f} ┤" + "".join(row))
    lines.append("─" * width)

    label_line = [" "] * plot_width
    for x_pos, date in ((0, min_date), (plot_width - 6, max_date)):
        for i, c in enumerate(date.strftime("%b %d")):
            if 0 <= x_pos + i < plot_width:
                label_line[x_pos + i] = c
    lines.append(" " * 8 + "".join(label_line))

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(label) for label in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:.1f}")

    return "\n".join(lines)


def create_weekly_activity_chart(buckets: Sequence[WeeklyBucket]) -> str:
    """
    Create a chart showing weekly training volume and workout counts.

    Args:
        buckets: Weekly buckets, oldest first

    Returns:
        ASCII chart string
    """
    if not buckets or all(b.workouts == 0 for b in buckets):
        return "No workouts in this period."

    labels = [f"{b.label} ({b.workouts})" for b in buckets]
    values = [b.volume for b in buckets]
    return create_simple_bar_chart(labels, values, title="Weekly Volume (workouts in brackets)")
