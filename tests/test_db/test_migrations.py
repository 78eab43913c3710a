"""Tests for stored-record normalization."""

from quranpath.tracker.db.migrations import (
    normalize_challenge,
    normalize_goal,
    normalize_habit_plan,
)


class TestNormalizeChallenge:
    """Tests for challenge records."""

    def test_legacy_field_names(self):
        record = normalize_challenge(
            {
                "id": "1",
                "type": "ALL",
                "totalPages": 604,
                "startPage": 1,
                "endPage": 604,
                "duration": 30,
                "completedDays": [2, 0],
                "startDate": "2024-01-01T00:00:00.000Z",
                "timesCompleted": 2,
            }
        )

        assert record["scope"] == "whole_book"
        assert record["completed_days"] == [0, 2]
        assert record["cycles_completed"] == 2
        assert record["start_date"] == "2024-01-01T00:00:00.000Z"
        assert "totalPages" not in record
        assert record["title"] == "Khatmul Quran"

    def test_current_names_win(self):
        record = normalize_challenge(
            {"id": "1", "scope": "whole_book", "cycles_completed": 3, "timesCompleted": 1, "duration": 5}
        )

        assert record["cycles_completed"] == 3

    def test_missing_fields_defaulted(self):
        record = normalize_challenge({"id": "1"})

        assert record["start_unit"] == 1
        assert record["end_unit"] == 604
        assert record["duration"] == 30
        assert record["cycles_completed"] == 0
        assert record["completed_days"] == []

    def test_surah_without_chapter_becomes_whole_book(self):
        record = normalize_challenge({"id": "1", "type": "SURAH", "duration": 10})

        assert record["scope"] == "whole_book"
        assert record["chapter"] is None

    def test_surah_title_from_chapter(self):
        record = normalize_challenge(
            {
                "id": "1",
                "type": "SURAH",
                "targetSurah": {"id": 36, "name_simple": "Ya-Sin", "pages": [440, 445]},
                "duration": 6,
            }
        )

        assert record["scope"] == "single_chapter"
        assert record["title"] == "Surat Ya-Sin"

    def test_negative_cycles_clamped(self):
        assert normalize_challenge({"id": "1", "timesCompleted": -4})["cycles_completed"] == 0

    def test_bad_day_indices_dropped(self):
        record = normalize_challenge(
            {"id": "1", "duration": 3, "completedDays": [0, "1", None, 3, -1, "x"]}
        )

        assert record["completed_days"] == [0, 1]


class TestNormalizeHabitPlan:
    """Tests for habit plan records."""

    def test_string_day_keys(self):
        record = normalize_habit_plan(
            {
                "id": "1",
                "habits": ["a", "b"],
                "duration": 2,
                "dayProgress": {"0": [1, 0, 1], "1": [], "2": [0], "x": [0]},
            }
        )

        assert record["day_progress"] == {0: [0, 1]}
        assert record["cycles_completed"] == 0


class TestNormalizeGoal:
    """Tests for goal records."""

    def test_daily_target_computed(self):
        record = normalize_goal({"id": "1", "type": "KHATMAH", "totalPages": 604, "durationDays": 7})

        assert record["kind"] == "whole_book"
        assert record["daily_target_units"] == 87
        assert record["start_unit"] == 1

    def test_completed_clamped(self):
        record = normalize_goal(
            {"id": "1", "totalPages": 10, "durationDays": 2, "completedPages": 15, "isCompleted": False}
        )

        assert record["completed_units"] == 10
        assert record["is_completed"] is True

    def test_progress_date_truncated(self):
        record = normalize_goal({"id": "1", "lastProgressDate": "2024-03-02T09:30:00.000Z"})

        assert record["last_progress_date"] == "2024-03-02"
