"""
Tests for JSONL history storage and record serialization.
"""

import json

import pytest

from ironpulse.core.analytics import exercise_progression, weekly_activity
from ironpulse.core.errors import StoreError
from ironpulse.core.models import ExerciseLog, HistoryRecord, LoggedSet
from ironpulse.io.history_store import HistoryStore, get_default_history_path
from ironpulse.io.serializers import (
    ValidationError,
    history_record_to_dict,
    json_line_to_record,
    record_to_json_line,
)


def _record(record_id: str, date: int, *, detail: bool = True) -> HistoryRecord:
    return HistoryRecord(
        id=record_id,
        date=date,
        plan_name="Push Pull Legs",
        day_name="Legs",
        duration_seconds=3120,
        total_volume=4250.0,
        exercises_completed=1,
        exercises=(
            (ExerciseLog("Squat", (LoggedSet(100, 5), LoggedSet(102.5, 5))),)
            if detail
            else None
        ),
    )


@pytest.fixture
def store(tmp_path):
    return HistoryStore(tmp_path / "data" / "history.jsonl")


class TestSerialization:

    def test_record_is_one_line(self):
        line = record_to_json_line(_record("a", 1000))
        assert "\n" not in line
        assert json.loads(line)["plan_name"] == "Push Pull Legs"

    def test_detail_survives(self):
        record = _record("a", 1000)
        assert json_line_to_record(record_to_json_line(record)) == record

    def test_missing_detail_is_omitted_not_null(self):
        d = history_record_to_dict(_record("a", 1000, detail=False))
        assert "exercises" not in d
        assert json_line_to_record(json.dumps(d)).exercises is None

    def test_empty_detail_list_kept(self):
        record = HistoryRecord(
            id="e", date=5, plan_name="P", day_name="D",
            duration_seconds=0, total_volume=0, exercises_completed=0, exercises=(),
        )
        assert json_line_to_record(record_to_json_line(record)).exercises == ()

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            json_line_to_record("{not json")

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            json_line_to_record(json.dumps({"id": "x", "plan_name": "P", "day_name": "D"}))

    def test_negative_volume_rejected(self):
        d = history_record_to_dict(_record("a", 1000))
        d["total_volume"] = -1
        with pytest.raises(ValidationError):
            json_line_to_record(json.dumps(d))

    @pytest.mark.parametrize("exercises", [
        ["Squat"],
        [{"name": "Squat", "sets": ["100x5"]}],
        [{"name": "Squat", "sets": 5}],
        {"name": "Squat"},
    ])
    def test_malformed_detail_rejected(self, exercises):
        d = history_record_to_dict(_record("a", 1000))
        d["exercises"] = exercises
        with pytest.raises(ValidationError):
            json_line_to_record(json.dumps(d))

    def test_null_sets_read_as_empty(self):
        d = history_record_to_dict(_record("a", 1000))
        d["exercises"] = [{"name": "Squat", "sets": None}]
        assert json_line_to_record(json.dumps(d)).exercises == (ExerciseLog("Squat", ()),)


class TestHistoryStore:

    def test_missing_file_is_empty_history(self, store):
        assert not store.exists()
        assert store.load() == []
        assert store.get_latest_record() is None

    def test_init_creates_file_and_parents(self, store):
        store.init()
        assert store.exists()
        assert store.load() == []

    def test_append_then_load(self, store):
        record = _record("a", 1_700_000_000_000)
        store.append(record)
        assert store.load() == [record]

    def test_load_is_newest_first(self, store):
        store.append(_record("old", 1000))
        store.append(_record("new", 3000))
        store.append(_record("mid", 2000))
        assert [r.id for r in store.load()] == ["new", "mid", "old"]
        assert store.get_latest_record().id == "new"

    def test_equal_dates_keep_last_appended_first(self, store):
        store.append(_record("first", 1000))
        store.append(_record("second", 1000))
        assert [r.id for r in store.load()] == ["second", "first"]

    def test_append_only(self, store):
        store.append(_record("a", 1000))
        before = store.history_path.read_text(encoding="utf-8")
        store.append(_record("b", 2000))
        after = store.history_path.read_text(encoding="utf-8")
        assert after.startswith(before)
        assert len(after.splitlines()) == 2

    def test_blank_lines_ignored(self, store):
        store.append(_record("a", 1000))
        with open(store.history_path, "a", encoding="utf-8") as f:
            f.write("\n\n")
        assert len(store.load()) == 1

    def test_corrupt_line_reports_line_number(self, store):
        store.append(_record("a", 1000))
        with open(store.history_path, "a", encoding="utf-8") as f:
            f.write("garbage\n")
        with pytest.raises(ValidationError, match="line 2"):
            store.load()

    def test_non_utf8_file(self, store):
        store.append(_record("a", 1000))
        with open(store.history_path, "ab") as f:
            f.write(b"\xff\xfe\n")
        with pytest.raises(ValidationError, match="UTF-8"):
            store.load()

    def test_delete_record(self, store):
        for i, rid in enumerate(["a", "b", "c"]):
            store.append(_record(rid, 1000 * (i + 1)))

        removed = store.delete_record("b")

        assert removed.id == "b"
        assert [r.id for r in store.load()] == ["c", "a"]
        lines = store.history_path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["id"] for line in lines] == ["a", "c"]

    def test_delete_unknown_record(self, store):
        store.append(_record("a", 1000))
        with pytest.raises(KeyError):
            store.delete_record("zzz")

    def test_clear(self, store):
        store.append(_record("a", 1000))
        store.clear()
        assert store.load() == []

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = HistoryStore(blocker / "history.jsonl")
        with pytest.raises(StoreError) as exc_info:
            store.append(_record("a", 1000))
        assert exc_info.value.path == store.history_path
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_default_path_follows_data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("IRONPULSE_HOME", str(tmp_path))
        assert get_default_history_path() == tmp_path / "history.jsonl"


class TestStatisticsAfterReload:
    """Statistics computed from reloaded history match the records as appended."""

    NOW = 1_700_000_000_000
    DAY = 86_400_000

    def _workouts(self) -> list[HistoryRecord]:
        def workout(record_id, days_ago, sets, volume):
            return HistoryRecord(
                id=record_id,
                date=self.NOW - days_ago * self.DAY,
                plan_name="Push Pull Legs",
                day_name="Legs",
                duration_seconds=1800,
                total_volume=volume,
                exercises_completed=1,
                exercises=(ExerciseLog("Squat", tuple(LoggedSet(w, r) for w, r in sets)),),
            )

        return [
            workout("w1", 20, [(90, 5)], 450),
            workout("w2", 9, [(100, 5), (100, 5)], 1000),
            workout("w3", 3, [(110, 3)], 330),
            workout("w4", 3, [(105, 5)], 525),
            workout("w5", 0, [(112.5, 2), (80, 8)], 865),
        ]

    def test_weekly_activity_and_progression_survive_reload(self, store):
        appended = self._workouts()
        for record in appended:
            store.append(record)

        reloaded = store.load()

        assert sorted(r.id for r in reloaded) == sorted(r.id for r in appended)
        assert weekly_activity(reloaded, self.NOW) == weekly_activity(appended, self.NOW)
        assert exercise_progression(reloaded, "Squat") == exercise_progression(appended, "Squat")

    def test_same_timestamp_workouts_both_counted(self, store):
        for record in self._workouts():
            store.append(record)

        buckets = weekly_activity(store.load(), self.NOW)
        points = exercise_progression(store.load(), "Squat")

        assert [(b.workouts, b.volume) for b in buckets[-3:]] == [(1, 450), (1, 1000), (3, 1720)]
        same_day = [p for p in points if p.date == self.NOW - 3 * self.DAY]
        assert [p.max_weight for p in same_day] == [105, 110]
