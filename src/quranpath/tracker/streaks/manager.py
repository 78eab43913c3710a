"""Streak tracking and the cumulative goal ledger."""

import logging
from datetime import date, timedelta
from typing import Optional

from ..catalog.schemas import WHOLE_BOOK_PAGES, chapter_title
from ..db import GOALS_KEY, STREAK_COUNT_KEY, STREAK_DATE_KEY, Database, get_db
from ..db.migrations import normalize_goal
from ..plans.base import PlanStore
from ..plans.schemas import OutcomeStatus, PlanScope
from .schemas import Goal, GoalCreate, ProgressMark, StreakState

logger = logging.getLogger(__name__)


def advance_streak(state: StreakState, today: date) -> StreakState:
    """Apply one day of activity to a streak.

    Same-day activity leaves the streak unchanged. Activity the day after
    the last one extends it; anything else starts a new streak of 1.
    """
    if state.last_streak_date == today:
        return state
    if state.last_streak_date == today - timedelta(days=1):
        return StreakState(count=state.count + 1, last_streak_date=today)
    return StreakState(count=1, last_streak_date=today)


class StreakTracker:
    """Owns the global daily streak.

    The state is read from storage on every call and written back only by
    ``record_activity``.
    """

    def __init__(self, db: Optional[Database] = None):
        """Initialize streak tracker.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def get_state(self) -> StreakState:
        """Load the current streak state."""
        count = 0
        raw_count = self.db.get_value(STREAK_COUNT_KEY)
        if raw_count is not None:
            try:
                count = max(0, int(raw_count.strip()))
            except ValueError:
                logger.warning("Stored streak count %r is malformed; using 0", raw_count)

        last = None
        raw_date = self.db.get_value(STREAK_DATE_KEY)
        if raw_date:
            try:
                last = date.fromisoformat(raw_date.strip().strip('"')[:10])
            except ValueError:
                logger.warning("Stored streak date %r is malformed; ignoring it", raw_date)

        return StreakState(count=count, last_streak_date=last)

    def save_state(self, state: StreakState) -> None:
        self.db.set_value(STREAK_COUNT_KEY, str(state.count))
        if state.last_streak_date is not None:
            self.db.set_value(STREAK_DATE_KEY, state.last_streak_date.isoformat())

    def record_activity(self, today: Optional[date] = None) -> tuple[StreakState, bool]:
        """Register qualifying activity for a day.

        Args:
            today: Local calendar date of the activity (default: today)

        Returns:
            New state and whether it changed
        """
        today = today or date.today()
        current = self.get_state()
        updated = advance_streak(current, today)
        if updated == current:
            return current, False

        self.save_state(updated)
        logger.debug("Streak is now %d (last active %s)", updated.count, today)
        return updated, True

    def is_at_risk(self, today: Optional[date] = None) -> bool:
        """True when the streak is alive but nothing is recorded today."""
        today = today or date.today()
        state = self.get_state()
        return state.count > 0 and state.last_streak_date == today - timedelta(days=1)


class GoalManager(PlanStore[Goal]):
    """Manages cumulative goals and feeds the global streak."""

    storage_key = GOALS_KEY
    record_type = Goal

    def __init__(self, db: Optional[Database] = None, streaks: Optional[StreakTracker] = None):
        """Initialize goal manager.

        Args:
            db: Database instance
            streaks: Streak tracker updated by daily progress
        """
        super().__init__(db)
        self.streaks = streaks or StreakTracker(self.db)

    def normalize(self, raw: dict) -> dict:
        return normalize_goal(raw)

    def add_goal(self, data: GoalCreate) -> Goal:
        """Create a new goal.

        Args:
            data: Goal creation data

        Returns:
            Created goal
        """
        if data.kind == PlanScope.SINGLE_CHAPTER:
            start, total, chapter_id = data.chapter.first_page, data.chapter.page_count, data.chapter.id
        else:
            start, total, chapter_id = 1, WHOLE_BOOK_PAGES, None

        goal = Goal(
            kind=data.kind,
            title=chapter_title(data.chapter),
            chapter_id=chapter_id,
            total_units=total,
            start_unit=start,
            duration_days=data.duration_days,
        )
        return self._add(goal)

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal. The global streak is not affected.

        Returns:
            True if deleted, False if not found
        """
        return self._delete(goal_id)

    def mark_daily_progress(self, goal_id: str, on_date: Optional[date] = None) -> ProgressMark:
        """Record a day's reading for a goal and update the streak.

        A goal advances at most once per calendar day; repeated calls that
        day return ``ALREADY_MARKED``. The streak update is idempotent for
        the same day as well.

        Args:
            goal_id: Goal id
            on_date: Local calendar date (default: today)

        Returns:
            ProgressMark with the updated goal and streak
        """
        on_date = on_date or date.today()
        goals = self.load()
        idx = self._index_of(goals, goal_id)
        if idx < 0:
            return ProgressMark(
                goal_id=goal_id,
                status=OutcomeStatus.NOT_FOUND,
                streak=self.streaks.get_state(),
            )

        goal = goals[idx]
        if goal.last_progress_date == on_date:
            status = OutcomeStatus.ALREADY_MARKED
        else:
            goal.apply_daily_progress(on_date)
            self.save(goals)
            status = OutcomeStatus.OK
            if goal.is_completed:
                logger.info("Goal %s (%s) completed", goal.id, goal.title)

        streak, changed = self.streaks.record_activity(on_date)
        return ProgressMark(
            goal_id=goal_id, status=status, goal=goal, streak=streak, streak_changed=changed
        )

    @staticmethod
    def reader_page(goal: Goal) -> int:
        """Page to open next for a goal."""
        return min(goal.start_unit + goal.completed_units, goal.start_unit + goal.total_units - 1)
