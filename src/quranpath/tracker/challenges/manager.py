"""Challenge manager for day-by-day reading plans."""

import logging
from typing import Optional

from ..catalog.schemas import WHOLE_BOOK_PAGES, chapter_title
from ..db import CHALLENGES_KEY, LEGACY_CHALLENGE_KEY, Database, MalformedValueError
from ..db.migrations import normalize_challenge
from ..plans.base import PlanStore
from ..plans.partition import compute_day_range
from ..plans.schemas import DayState, OutcomeStatus, PlanEvent, PlanScope, ToggleOutcome
from .schemas import ChallengePlan, ChallengePlanCreate, DayTask

logger = logging.getLogger(__name__)


class ChallengeManager(PlanStore[ChallengePlan]):
    """Manages reading challenges.

    Days unlock in order: day ``n`` can be checked once day ``n - 1`` is
    checked. Unchecking is always allowed.
    """

    storage_key = CHALLENGES_KEY
    record_type = ChallengePlan

    def __init__(self, db: Optional[Database] = None, enforce_day_lock: bool = True):
        """Initialize challenge manager.

        Args:
            db: Database instance
            enforce_day_lock: Reject checking a day whose predecessor is open
        """
        super().__init__(db)
        self.enforce_day_lock = enforce_day_lock

    def normalize(self, raw: dict) -> dict:
        return normalize_challenge(raw)

    def _read_raw(self) -> list:
        if self.db.get_value(self.storage_key) is None:
            self._migrate_legacy_challenge()
        return super()._read_raw()

    def _migrate_legacy_challenge(self) -> None:
        """Move a single-challenge record from the old key into the array key."""
        try:
            legacy = self.db.read_json(LEGACY_CHALLENGE_KEY)
        except MalformedValueError as e:
            logger.warning("%s; skipping legacy challenge migration", e)
            return
        if not isinstance(legacy, dict):
            return

        logger.info("Migrating legacy single challenge into %r", self.storage_key)
        self.db.write_json(self.storage_key, [normalize_challenge(legacy)])

    # -------------------------------------------------------------------------
    # Plan CRUD
    # -------------------------------------------------------------------------

    def create_plan(self, data: ChallengePlanCreate) -> ChallengePlan:
        """Create a new challenge.

        Single-chapter plans take their page range from the chapter; whole
        book plans cover every page.

        Args:
            data: Challenge creation data

        Returns:
            Created challenge
        """
        if data.scope == PlanScope.SINGLE_CHAPTER:
            start, end = data.chapter.first_page, data.chapter.last_page
        else:
            start, end = 1, WHOLE_BOOK_PAGES

        plan = ChallengePlan(
            scope=data.scope,
            title=chapter_title(data.chapter),
            chapter=data.chapter,
            start_unit=start,
            end_unit=end,
            duration=data.duration,
        )
        return self._add(plan)

    def delete_plan(self, plan_id: str) -> bool:
        """Delete a challenge.

        Returns:
            True if deleted, False if not found
        """
        return self._delete(plan_id)

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def toggle_day(self, plan_id: str, day_index: int) -> ToggleOutcome:
        """Check or uncheck a day.

        Args:
            plan_id: Challenge id
            day_index: Zero-based day

        Returns:
            Outcome; ``LOCKED`` when checking a day before its predecessor

        Raises:
            PlanValidationError: If the day is outside the plan
        """
        plans = self.load()
        idx = self._index_of(plans, plan_id)
        if idx < 0:
            return ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.NOT_FOUND)

        plan = plans[idx]
        plan.check_day_index(day_index)

        if plan.is_day_completed(day_index):
            plan.completed_days = [d for d in plan.completed_days if d != day_index]
            outcome = ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.OK, checked=False)
        else:
            if self.enforce_day_lock and self.day_state(plan, day_index) == DayState.LOCKED:
                return ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.LOCKED)
            plan.completed_days = sorted(plan.completed_days + [day_index])
            outcome = ToggleOutcome(
                plan_id=plan_id,
                status=OutcomeStatus.OK,
                checked=True,
                events=[PlanEvent.PROGRESS],
            )

        self._notify(plan, outcome)
        self.save(plans)
        return outcome

    @staticmethod
    def day_state(plan: ChallengePlan, day_index: int) -> DayState:
        """Get whether a day is locked, open or done."""
        if plan.is_day_completed(day_index):
            return DayState.COMPLETED
        if day_index == 0 or plan.is_day_completed(day_index - 1):
            return DayState.UNLOCKED
        return DayState.LOCKED

    @staticmethod
    def next_open_day(plan: ChallengePlan) -> Optional[int]:
        """First day that is not yet checked, or None when all are."""
        for day in range(plan.duration):
            if not plan.is_day_completed(day):
                return day
        return None

    # -------------------------------------------------------------------------
    # Day tasks
    # -------------------------------------------------------------------------

    def get_day_task(self, plan: ChallengePlan, day_index: int) -> DayTask:
        """Describe the pages to read on a day.

        Raises:
            PlanValidationError: If the day is outside the plan
        """
        plan.check_day_index(day_index)
        day_range = compute_day_range(
            plan.total_units, plan.duration, day_index, base_unit=plan.start_unit
        )

        if plan.chapter is not None:
            prefix, subtext = "Read Page", plan.chapter.name_simple
        else:
            prefix, subtext = "Page", "Quran"

        if day_range.is_empty:
            label = "Review"
        elif day_range.is_single:
            label = f"{prefix} {day_range.start}"
        else:
            label = f"{prefix} {day_range.start} - {day_range.end}"

        return DayTask(
            day_index=day_index,
            start_page=day_range.start,
            end_page=day_range.end,
            state=self.day_state(plan, day_index),
            label=label,
            subtext=subtext,
        )

    def get_day_tasks(self, plan: ChallengePlan) -> list[DayTask]:
        """Describe every day of a challenge."""
        return [self.get_day_task(plan, day) for day in range(plan.duration)]
