"""
Unit tests for the session engine and analytics.

Values are hand-computed so each test pins one rule of the engine:
carry-forward, set mutation, finalization and the derived statistics.
"""

from itertools import count

import pytest

from ironpulse.core.analytics import (
    epley_1rm,
    exercise_names,
    exercise_progression,
    history_summary,
    latest_one_rep_max,
    recent_records,
    weekly_activity,
)
from ironpulse.core.ascii_plot import create_progression_plot, create_weekly_activity_chart
from ironpulse.core.clock import format_duration
from ironpulse.core.config import MS_PER_DAY, UNKNOWN_EXERCISE_NAME
from ironpulse.core.errors import EmptySessionError, OutOfRangeError
from ironpulse.core.finalizer import finish_session, is_empty_session, session_duration_seconds
from ironpulse.core.models import (
    Exercise,
    ExerciseLog,
    HistoryRecord,
    LoggedSet,
    SetLog,
    WorkoutDay,
)
from ironpulse.core.session import (
    add_set,
    initialize_session,
    last_weight_for_exercise,
    last_weights_by_name,
    remove_set,
    toggle_completed,
    update_set_field,
)

START = 1_700_000_000_000

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


def _day(*exercises: tuple[str, str, int]) -> WorkoutDay:
    return WorkoutDay(
        id="day-1",
        name="Push Day",
        exercises=tuple(
            Exercise(id=ex_id, name=name, target_sets=sets, target_reps="8-12")
            for ex_id, name, sets in exercises
        ),
    )


def _record(
    date: int,
    entries: dict[str, list[tuple[float, float, bool]]] | None = None,
    *,
    volume: float = 0.0,
    record_id: str = "r",
) -> HistoryRecord:
    exercises = None
    if entries is not None:
        exercises = tuple(
            ExerciseLog(name=name, sets=tuple(LoggedSet(w, r, c) for w, r, c in sets))
            for name, sets in entries.items()
        )
    return HistoryRecord(
        id=record_id,
        date=date,
        plan_name="Plan",
        day_name="Day",
        duration_seconds=60,
        total_volume=volume,
        exercises_completed=len(entries or {}),
        exercises=exercises,
    )


# ---------------------------------------------------------------------------
# Carry-forward weight
# ---------------------------------------------------------------------------


class TestCarryForward:

    def test_last_completed_set_wins(self):
        history = [
            _record(START, {"Bench Press": [(100, 8, True), (105, 6, True), (90, 10, False)]}),
        ]
        assert last_weight_for_exercise("Bench Press", history) == 105

    def test_falls_back_to_last_set_when_none_completed(self):
        history = [_record(START, {"Bench Press": [(80, 10, False)]})]
        assert last_weight_for_exercise("Bench Press", history) == 80

    def test_unseen_exercise_is_zero(self):
        history = [_record(START, {"Squat": [(120, 5, True)]})]
        assert last_weight_for_exercise("Bench Press", history) == 0.0

    def test_most_recent_record_wins(self):
        history = [
            _record(START + 2, {"Bench Press": [(110, 5, True)]}),
            _record(START + 1, {"Bench Press": [(70, 5, True)]}),
        ]
        assert last_weight_for_exercise("Bench Press", history) == 110

    def test_records_without_detail_are_skipped(self):
        history = [
            _record(START + 2, None),
            _record(START + 1, {"Bench Press": []}),
            _record(START, {"Bench Press": [(95, 5, True)]}),
        ]
        assert last_weight_for_exercise("Bench Press", history) == 95

    def test_batch_matches_single_lookup(self):
        history = [
            _record(START + 2, {"Squat": [(140, 3, True)]}),
            _record(START + 1, {"Bench Press": [(100, 8, True)], "Squat": [(130, 5, True)]}),
        ]
        weights = last_weights_by_name(["Bench Press", "Squat", "Row"], history)
        assert weights == {"Bench Press": 100, "Squat": 140, "Row": 0.0}


# ---------------------------------------------------------------------------
# Session initializer
# ---------------------------------------------------------------------------


class TestInitializeSession:

    def test_slots_per_target_sets(self):
        day = _day(("ex-1", "Bench Press", 3), ("ex-2", "Dips", 2))
        history = [_record(START, {"Bench Press": [(100, 8, True), (105, 6, True), (90, 10, False)]})]

        session = initialize_session("plan-1", day, history, now=START, id_factory=_ids())

        assert session.plan_id == "plan-1"
        assert session.day_id == "day-1"
        assert session.start_time == START
        assert list(session.exercises) == ["ex-1", "ex-2"]
        assert [s.weight for s in session.exercises["ex-1"]] == [105, 105, 105]
        assert [s.weight for s in session.exercises["ex-2"]] == [0.0, 0.0]
        for sets in session.exercises.values():
            assert all(s.reps == 0 and not s.completed for s in sets)

    def test_last_weights_kept_per_exercise(self):
        day = _day(("ex-1", "Bench Press", 2), ("ex-2", "Dips", 1))
        history = [_record(START, {"Bench Press": [(100, 8, True), (105, 6, True)]})]

        session = initialize_session("plan-1", day, history, now=START)
        edited = update_set_field(session, "ex-1", 0, "weight", 110)
        edited = add_set(edited, "ex-2")

        assert session.last_weights == {"ex-1": 105, "ex-2": 0.0}
        assert edited.last_weights == {"ex-1": 105, "ex-2": 0.0}
        assert edited.last_weight("ex-1") == 105
        assert edited.last_weight("ex-9") == 0.0

    def test_set_ids_are_unique(self):
        day = _day(("ex-1", "Bench Press", 4))
        session = initialize_session("plan-1", day, [], now=START)
        ids = [s.id for s in session.exercises["ex-1"]] + [session.id]
        assert len(set(ids)) == len(ids)

    def test_history_is_not_modified(self):
        history = [_record(START, {"Bench Press": [(100, 8, True)]})]
        snapshot = list(history)
        initialize_session("plan-1", _day(("ex-1", "Bench Press", 1)), history, now=START)
        assert history == snapshot


# ---------------------------------------------------------------------------
# Session mutator
# ---------------------------------------------------------------------------


@pytest.fixture
def session():
    day = _day(("ex-1", "Bench Press", 3))
    return initialize_session("plan-1", day, [], now=START, id_factory=_ids())


class TestMutator:

    def test_update_replaces_one_field(self, session):
        updated = update_set_field(session, "ex-1", 1, "weight", 62.5)
        assert updated.exercises["ex-1"][1].weight == 62.5
        assert updated.exercises["ex-1"][1].reps == 0
        assert session.exercises["ex-1"][1].weight == 0.0

    def test_update_keeps_set_identity(self, session):
        updated = update_set_field(session, "ex-1", 0, "reps", 10)
        assert updated.exercises["ex-1"][0].id == session.exercises["ex-1"][0].id

    def test_update_unknown_field(self, session):
        with pytest.raises(ValueError):
            update_set_field(session, "ex-1", 0, "tempo", 3)

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_update_index_out_of_range(self, session, index):
        with pytest.raises(OutOfRangeError) as exc_info:
            update_set_field(session, "ex-1", index, "reps", 5)
        assert exc_info.value.set_index == index
        assert all(s.reps == 0 for s in session.exercises["ex-1"])

    def test_update_unknown_exercise(self, session):
        with pytest.raises(OutOfRangeError):
            update_set_field(session, "ex-9", 0, "reps", 5)

    def test_out_of_range_is_an_index_error(self, session):
        with pytest.raises(IndexError):
            toggle_completed(session, "ex-1", 7)

    def test_toggle_completed_flips(self, session):
        once = toggle_completed(session, "ex-1", 2)
        twice = toggle_completed(once, "ex-1", 2)
        assert once.exercises["ex-1"][2].completed is True
        assert twice.exercises["ex-1"][2].completed is False

    def test_add_set_copies_last(self, session):
        session = update_set_field(session, "ex-1", 2, "weight", 60)
        session = update_set_field(session, "ex-1", 2, "reps", 8)
        session = update_set_field(session, "ex-1", 2, "completed", True)

        grown = add_set(session, "ex-1")

        new = grown.exercises["ex-1"][-1]
        assert len(grown.exercises["ex-1"]) == 4
        assert (new.weight, new.reps, new.completed) == (60, 8, False)
        assert new.id not in {s.id for s in session.exercises["ex-1"]}

    def test_remove_set_drops_last(self, session):
        shrunk = remove_set(session, "ex-1")
        assert [s.id for s in shrunk.exercises["ex-1"]] == [s.id for s in session.exercises["ex-1"][:2]]

    def test_remove_set_never_below_one(self, session):
        for _ in range(5):
            session = remove_set(session, "ex-1")
        assert len(session.exercises["ex-1"]) == 1

    def test_negative_values_rejected(self, session):
        with pytest.raises(ValueError):
            update_set_field(session, "ex-1", 0, "weight", -5)


# ---------------------------------------------------------------------------
# Finalizer
# ---------------------------------------------------------------------------


class TestFinishSession:

    def test_end_to_end_three_sets(self):
        day = _day(("ex-1", "Bench Press", 3))
        session = initialize_session("plan-1", day, [], now=START)
        assert [s.weight for s in session.exercises["ex-1"]] == [0, 0, 0]

        session = update_set_field(session, "ex-1", 0, "weight", 60)
        session = update_set_field(session, "ex-1", 0, "reps", 10)
        session = update_set_field(session, "ex-1", 0, "completed", True)

        record = finish_session(session, day, "Push Pull Legs", START + 125_000)

        assert record.date == START + 125_000
        assert record.duration_seconds == 125
        assert record.total_volume == 600
        assert record.exercises_completed == 1
        assert record.plan_name == "Push Pull Legs"
        assert record.day_name == "Push Day"
        assert record.exercises == (ExerciseLog("Bench Press", (LoggedSet(60, 10, True),)),)

    def test_volume_counts_only_completed_sets(self):
        day = _day(("ex-1", "Bench Press", 2), ("ex-2", "Dips", 1))
        session = initialize_session("plan-1", day, [], now=START)
        session.exercises["ex-1"] = [
            SetLog(id="a", reps=5, weight=100, completed=True),
            SetLog(id="b", reps=5, weight=100, completed=False),
        ]
        session.exercises["ex-2"] = [SetLog(id="c", reps=12, weight=20, completed=False)]

        record = finish_session(session, day, "Plan", START + 1000)

        assert record.total_volume == 500
        assert record.exercises_completed == 1
        assert [e.name for e in record.exercises] == ["Bench Press"]

    def test_total_volume_is_sum_of_set_volumes(self):
        day = _day(("ex-1", "Bench Press", 2))
        session = initialize_session("plan-1", day, [], now=START)
        sets = [
            SetLog(id="a", reps=8, weight=62.5, completed=True),
            SetLog(id="b", reps=6, weight=70, completed=True),
        ]
        session.exercises["ex-1"] = sets

        record = finish_session(session, day, "Plan", START + 1000)

        assert [s.volume for s in sets] == [500, 420]
        assert record.total_volume == 920
        assert sum(s.volume for s in record.exercises[0].sets) == record.total_volume

    def test_unknown_exercise_name(self):
        day = _day(("ex-1", "Bench Press", 1))
        session = initialize_session("plan-1", day, [], now=START)
        session.exercises["ex-gone"] = [SetLog(id="x", reps=5, weight=40, completed=True)]

        record = finish_session(session, day, "Plan", START)

        assert record.find_exercise(UNKNOWN_EXERCISE_NAME) is not None

    def test_empty_session_allowed_by_default(self):
        day = _day(("ex-1", "Bench Press", 2))
        session = initialize_session("plan-1", day, [], now=START)
        assert is_empty_session(session)

        record = finish_session(session, day, "Plan", START + 5000)

        assert record.total_volume == 0
        assert record.exercises_completed == 0
        assert record.exercises == ()

    def test_empty_session_refused_on_request(self):
        day = _day(("ex-1", "Bench Press", 2))
        session = initialize_session("plan-1", day, [], now=START)
        with pytest.raises(EmptySessionError):
            finish_session(session, day, "Plan", START, allow_empty=False)

    def test_duration_truncates_to_seconds(self):
        session = initialize_session("p", _day(("ex-1", "Row", 1)), [], now=START)
        assert session_duration_seconds(session, START + 59_999) == 59

    def test_finish_before_start_rejected(self):
        day = _day(("ex-1", "Row", 1))
        session = initialize_session("p", day, [], now=START)
        with pytest.raises(ValueError):
            finish_session(session, day, "Plan", START - 1)


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


class TestEpley:

    def test_formula(self):
        assert epley_1rm(100, 10) == pytest.approx(133.333, rel=1e-4)
        assert epley_1rm(100, 0) == 100

    def test_monotonic_in_reps_and_weight(self):
        assert epley_1rm(100, 6) > epley_1rm(100, 5)
        assert epley_1rm(105, 5) > epley_1rm(100, 5)


class TestProgression:

    def test_points_oldest_first(self):
        history = [
            _record(START + 2 * MS_PER_DAY, {"Squat": [(110, 5, True), (120, 3, True)]}),
            _record(START, {"Squat": [(100, 5, True)]}),
        ]
        points = exercise_progression(history, "Squat")

        assert [p.date for p in points] == [START, START + 2 * MS_PER_DAY]
        assert points[1].max_weight == 120
        assert points[1].volume == 110 * 5 + 120 * 3
        assert points[1].est_one_rep_max == pytest.approx(max(epley_1rm(110, 5), epley_1rm(120, 3)))

    def test_zero_volume_records_excluded(self):
        history = [
            _record(START + 1, {"Plank": [(0, 60, True)]}),
            _record(START, {"Squat": [(100, 5, True)]}),
        ]
        assert exercise_progression(history, "Plank") == []

    def test_latest_one_rep_max(self):
        history = [
            _record(START + 1, {"Squat": [(100, 3, True)]}),
            _record(START, {"Squat": [(90, 10, True)]}),
        ]
        assert latest_one_rep_max(history, "Squat") == pytest.approx(110.0)
        assert latest_one_rep_max(history, "Deadlift") is None

    def test_exercise_names(self):
        history = [
            _record(START, {"Squat": [(100, 5, True)], "Bench Press": [(80, 5, True)]}),
            _record(START, None),
        ]
        assert exercise_names(history) == ["Bench Press", "Squat"]


class TestWeeklyActivity:

    NOW = START + 30 * MS_PER_DAY

    def test_exactly_seven_days_is_last_week(self):
        history = [_record(self.NOW - 7 * MS_PER_DAY, volume=1000)]
        buckets = weekly_activity(history, self.NOW, weeks=4)

        assert [b.label for b in buckets] == ["3 weeks ago", "2 weeks ago", "1 weeks ago", "this week"]
        assert buckets[-2].workouts == 1
        assert buckets[-2].volume == 1000
        assert buckets[-1].workouts == 0

    def test_just_under_seven_days_is_this_week(self):
        history = [_record(self.NOW - 7 * MS_PER_DAY + 1, volume=10)]
        assert weekly_activity(history, self.NOW)[-1].workouts == 1

    def test_out_of_horizon_and_future_ignored(self):
        history = [
            _record(self.NOW - 28 * MS_PER_DAY, volume=5),
            _record(self.NOW + MS_PER_DAY, volume=5),
        ]
        buckets = weekly_activity(history, self.NOW, weeks=4)
        assert sum(b.workouts for b in buckets) == 0

    def test_volume_sums_within_bucket(self):
        history = [
            _record(self.NOW - 1, volume=300),
            _record(self.NOW - 2 * MS_PER_DAY, volume=200),
        ]
        this_week = weekly_activity(history, self.NOW)[-1]
        assert (this_week.workouts, this_week.volume) == (2, 500)


class TestSummary:

    def test_totals_and_distinct_days(self):
        history = [
            _record(START, volume=100),
            _record(START + 60_000, volume=200),
            _record(START + 3 * MS_PER_DAY, volume=50),
        ]
        summary = history_summary(history)

        assert summary.total_workouts == 3
        assert summary.total_volume == 350
        assert summary.active_days in (2, 3)

    def test_empty_history(self):
        summary = history_summary([])
        assert (summary.total_workouts, summary.total_volume, summary.active_days) == (0, 0, 0)

    def test_recent_records_newest_first(self):
        history = [_record(START + i, record_id=str(i)) for i in range(5)]
        assert [r.id for r in recent_records(history, 2)] == ["4", "3"]


# ---------------------------------------------------------------------------
# Charts and formatting
# ---------------------------------------------------------------------------


class TestCharts:

    def test_progression_plot_needs_two_points(self):
        history = [_record(START, {"Squat": [(100, 5, True)]})]
        text = create_progression_plot(exercise_progression(history, "Squat"))
        assert "Not enough data" in text

    def test_progression_plot_renders(self):
        history = [
            _record(START + i * MS_PER_DAY, {"Squat": [(100 + 5 * i, 5, True)]})
            for i in range(4)
        ]
        text = create_progression_plot(exercise_progression(history, "Squat"), exercise_name="Squat")
        assert "Squat" in text
        assert len(text.splitlines()) > 5

    def test_weekly_chart_empty(self):
        buckets = weekly_activity([], START)
        assert create_weekly_activity_chart(buckets) == "No workouts in this period."

    def test_weekly_chart_bars(self):
        now = START + 30 * MS_PER_DAY
        history = [_record(now - 1, volume=800), _record(now - 8 * MS_PER_DAY, volume=400)]
        text = create_weekly_activity_chart(weekly_activity(history, now, weeks=2))

        lines = text.splitlines()
        assert lines[0] == "Weekly Volume (workouts in brackets)"
        assert "1 weeks ago (1)" in lines[2]
        assert lines[3].count("█") == 40
        assert lines[2].count("█") == 20

    def test_format_duration(self):
        assert format_duration(125) == "2:05"
        assert format_duration(3725) == "1:02:05"
