"""Tests for the goal ledger and streak tracking."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from quranpath.tracker.db import GOALS_KEY, STREAK_COUNT_KEY, STREAK_DATE_KEY
from quranpath.tracker.plans import OutcomeStatus, PlanScope
from quranpath.tracker.streaks import (
    GoalCreate,
    GoalManager,
    StreakState,
    StreakTracker,
    advance_streak,
    pages_per_day,
)

DAY_ONE = date(2024, 3, 1)


@pytest.fixture
def kahf_goal(goals, kahf):
    """Al-Kahf in five days: three pages a day."""
    return goals.add_goal(
        GoalCreate(kind=PlanScope.SINGLE_CHAPTER, chapter=kahf, duration_days=5)
    )


class TestAdvanceStreak:
    """Tests for the streak transition rule."""

    def test_first_activity(self):
        state = advance_streak(StreakState(), DAY_ONE)

        assert state == StreakState(count=1, last_streak_date=DAY_ONE)

    def test_same_day_unchanged(self):
        state = StreakState(count=4, last_streak_date=DAY_ONE)

        assert advance_streak(state, DAY_ONE) == state

    def test_next_day_extends(self):
        state = StreakState(count=4, last_streak_date=DAY_ONE)

        assert advance_streak(state, DAY_ONE + timedelta(days=1)).count == 5

    def test_gap_resets(self):
        state = StreakState(count=4, last_streak_date=DAY_ONE)

        assert advance_streak(state, DAY_ONE + timedelta(days=2)).count == 1

    def test_month_boundary(self):
        state = StreakState(count=2, last_streak_date=date(2024, 2, 29))

        assert advance_streak(state, date(2024, 3, 1)).count == 3


class TestStreakTracker:
    """Tests for persisted streak state."""

    def test_empty_state(self, streaks):
        assert streaks.get_state() == StreakState(count=0, last_streak_date=None)

    def test_record_activity(self, db, streaks):
        state, changed = streaks.record_activity(DAY_ONE)

        assert changed is True
        assert state.count == 1
        assert db.get_value(STREAK_COUNT_KEY) == "1"
        assert db.get_value(STREAK_DATE_KEY) == "2024-03-01"

    def test_same_day_is_idempotent(self, streaks):
        streaks.record_activity(DAY_ONE)

        state, changed = streaks.record_activity(DAY_ONE)

        assert changed is False
        assert state.count == 1

    def test_consecutive_days(self, streaks):
        for offset in range(4):
            streaks.record_activity(DAY_ONE + timedelta(days=offset))

        assert streaks.get_state().count == 4

    def test_gap_resets(self, streaks):
        streaks.record_activity(DAY_ONE)
        streaks.record_activity(DAY_ONE + timedelta(days=1))

        state, _ = streaks.record_activity(DAY_ONE + timedelta(days=5))

        assert state.count == 1
        assert state.last_streak_date == DAY_ONE + timedelta(days=5)

    def test_malformed_count(self, db, streaks):
        db.set_value(STREAK_COUNT_KEY, "lots")
        db.set_value(STREAK_DATE_KEY, "2024-03-01")

        state = streaks.get_state()

        assert state.count == 0
        assert state.last_streak_date == DAY_ONE

    def test_malformed_date(self, db, streaks):
        db.set_value(STREAK_COUNT_KEY, "3")
        db.set_value(STREAK_DATE_KEY, "yesterday")

        state, changed = streaks.record_activity(DAY_ONE)

        assert changed is True
        assert state.count == 1

    def test_full_timestamp_date(self, db, streaks):
        db.set_value(STREAK_COUNT_KEY, "3")
        db.set_value(STREAK_DATE_KEY, "2024-03-01T21:15:00.000Z")

        assert streaks.get_state().last_streak_date == DAY_ONE

    def test_at_risk(self, streaks):
        streaks.record_activity(DAY_ONE)

        assert streaks.is_at_risk(DAY_ONE) is False
        assert streaks.is_at_risk(DAY_ONE + timedelta(days=1)) is True
        assert streaks.is_at_risk(DAY_ONE + timedelta(days=2)) is False


class TestAddGoal:
    """Tests for goal creation."""

    def test_chapter_goal(self, kahf_goal):
        assert kahf_goal.title == "Surat Al-Kahf"
        assert kahf_goal.chapter_id == 18
        assert kahf_goal.total_units == 12
        assert kahf_goal.start_unit == 293
        assert kahf_goal.daily_target_units == 3
        assert kahf_goal.completed_units == 0
        assert kahf_goal.is_completed is False

    def test_whole_book_goal(self, goals):
        goal = goals.add_goal(GoalCreate(kind=PlanScope.WHOLE_BOOK, duration_days=7))

        assert goal.title == "Khatmul Quran"
        assert goal.total_units == 604
        assert goal.daily_target_units == 87

    def test_requires_chapter(self):
        with pytest.raises(ValidationError):
            GoalCreate(kind=PlanScope.SINGLE_CHAPTER, duration_days=7)

    def test_rejects_zero_days(self, kahf):
        with pytest.raises(ValidationError):
            GoalCreate(chapter=kahf, duration_days=0)

    def test_pages_per_day(self):
        assert pages_per_day(604, 30) == 21
        assert pages_per_day(12, 4) == 3
        with pytest.raises(ValueError):
            pages_per_day(12, 0)


class TestMarkDailyProgress:
    """Tests for marking goal progress."""

    def test_mark(self, goals, kahf_goal):
        mark = goals.mark_daily_progress(kahf_goal.id, DAY_ONE)

        assert mark.ok
        assert mark.goal.completed_units == 3
        assert mark.goal.last_progress_date == DAY_ONE
        assert mark.streak.count == 1
        assert mark.streak_changed is True
        assert goals.get_plan(kahf_goal.id).completed_units == 3

    def test_completes_and_caps(self, goals, kahf_goal):
        for offset in range(4):
            mark = goals.mark_daily_progress(kahf_goal.id, DAY_ONE + timedelta(days=offset))

        assert mark.goal.completed_units == 12
        assert mark.goal.is_completed is True
        assert mark.streak.count == 4

        mark = goals.mark_daily_progress(kahf_goal.id, DAY_ONE + timedelta(days=4))

        assert mark.goal.completed_units == 12
        assert mark.goal.progress_percent == 100

    def test_same_day_marks_once(self, goals, kahf_goal):
        goals.mark_daily_progress(kahf_goal.id, DAY_ONE)

        mark = goals.mark_daily_progress(kahf_goal.id, DAY_ONE)

        assert mark.status == OutcomeStatus.ALREADY_MARKED
        assert mark.goal.completed_units == 3
        assert mark.streak.count == 1
        assert mark.streak_changed is False

    def test_goals_share_streak(self, goals, kahf_goal):
        other = goals.add_goal(GoalCreate(kind=PlanScope.WHOLE_BOOK, duration_days=30))

        goals.mark_daily_progress(kahf_goal.id, DAY_ONE)
        mark = goals.mark_daily_progress(other.id, DAY_ONE)

        assert mark.ok
        assert mark.streak.count == 1
        assert mark.streak_changed is False

    def test_unknown_goal(self, goals, streaks):
        mark = goals.mark_daily_progress("missing", DAY_ONE)

        assert mark.status == OutcomeStatus.NOT_FOUND
        assert mark.goal is None
        assert streaks.get_state().count == 0

    def test_delete_keeps_streak(self, goals, streaks, kahf_goal):
        goals.mark_daily_progress(kahf_goal.id, DAY_ONE)

        assert goals.delete_goal(kahf_goal.id) is True
        assert goals.list_plans() == []
        assert streaks.get_state().count == 1

    def test_delete_unknown(self, goals):
        assert goals.delete_goal("missing") is False

    def test_reader_page(self, goals, kahf_goal):
        assert goals.reader_page(kahf_goal) == 293

        for offset in range(4):
            mark = goals.mark_daily_progress(kahf_goal.id, DAY_ONE + timedelta(days=offset))
            last = mark.goal

        assert goals.reader_page(last) == 304

    def test_default_tracker(self, db, kahf):
        manager = GoalManager(db)
        goal = manager.add_goal(GoalCreate(chapter=kahf, duration_days=4))

        manager.mark_daily_progress(goal.id, DAY_ONE)

        assert StreakTracker(db).get_state().count == 1


class TestStoredGoals:
    """Tests for loading stored goals."""

    def test_legacy_goal(self, db, goals):
        db.write_json(
            GOALS_KEY,
            [
                {
                    "id": "1709280000000",
                    "type": "SURAH",
                    "targetId": 18,
                    "title": "Surat Al-Kahf",
                    "totalPages": 12,
                    "startPageNumber": 293,
                    "durationDays": 4,
                    "dailyTargetPages": 3,
                    "completedPages": 6,
                    "startDate": "2024-03-01T08:00:00.000Z",
                    "lastProgressDate": "2024-03-02T09:30:00.000Z",
                    "isCompleted": False,
                }
            ],
        )

        goal = goals.get_plan("1709280000000")

        assert goal.kind == PlanScope.SINGLE_CHAPTER
        assert goal.completed_units == 6
        assert goal.last_progress_date == date(2024, 3, 2)
        assert goals.reader_page(goal) == 299

    def test_legacy_goal_without_target(self, db, goals):
        db.write_json(
            GOALS_KEY,
            [
                {
                    "id": "1",
                    "type": "KHATMAH",
                    "title": "Khatmul Quran",
                    "totalPages": 604,
                    "durationDays": 30,
                    "completedPages": 700,
                    "startDate": "2024-03-01T08:00:00.000Z",
                }
            ],
        )

        goal = goals.get_plan("1")

        assert goal.kind == PlanScope.WHOLE_BOOK
        assert goal.daily_target_units == 21
        assert goal.completed_units == 604
        assert goal.is_completed is True
