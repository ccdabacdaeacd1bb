"""
Configuration constants for the session logging and analytics engine.

All adjustable parameters are centralized here.  Values that users may
want to tune without touching code (default chart horizon, history page
size, data directory) are also exposed through settings.yaml; see
core/engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# TIME
# =============================================================================

MS_PER_SECOND: Final[int] = 1000
MS_PER_DAY: Final[int] = 1000 * 60 * 60 * 24
DAYS_PER_WEEK: Final[int] = 7

# =============================================================================
# ONE-REP-MAX ESTIMATION
# =============================================================================

# Epley: 1RM = weight * (1 + reps / 30)
EPLEY_REPS_DIVISOR: Final[float] = 30.0

# =============================================================================
# ANALYTICS
# =============================================================================

DEFAULT_ACTIVITY_WEEKS: Final[int] = 4  # Weekly activity rollup horizon
RECENT_HISTORY_LIMIT: Final[int] = 10  # Records shown in "recent history"

# =============================================================================
# SESSION FINALIZATION
# =============================================================================

# Display name used when a session references an exercise id the day no
# longer defines (the day definition changed after the session started).
UNKNOWN_EXERCISE_NAME: Final[str] = "Unknown Exercise"

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_NAME: Final[str] = ".ironpulse"
DATA_DIR_ENV: Final[str] = "IRONPULSE_HOME"
HISTORY_FILE_NAME: Final[str] = "history.jsonl"
PLANS_FILE_NAME: Final[str] = "plans.json"
SETTINGS_FILE_NAME: Final[str] = "settings.yaml"


def week_label(weeks_ago: int) -> str:
    """
    Label for a weekly activity bucket.

    Args:
        weeks_ago: Bucket index (0 = the seven days ending now)

    Returns:
        "this week" for bucket 0, otherwise "<k> weeks ago"
    """
    if weeks_ago == 0:
        return "this week"
    return f"{weeks_ago} weeks ago"
