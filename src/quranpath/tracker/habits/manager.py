"""Habit plan manager."""

from ..db import HABIT_PLANS_KEY
from ..db.migrations import normalize_habit_plan
from ..plans.base import PlanStore
from ..plans.errors import PlanValidationError
from ..plans.schemas import OutcomeStatus, PlanEvent, ToggleOutcome
from .schemas import HabitPlan, HabitPlanCreate


class HabitPlanManager(PlanStore[HabitPlan]):
    """Manages habit plans. Any habit on any day can be toggled."""

    storage_key = HABIT_PLANS_KEY
    record_type = HabitPlan

    def normalize(self, raw: dict) -> dict:
        return normalize_habit_plan(raw)

    def create_habit_plan(self, data: HabitPlanCreate) -> HabitPlan:
        """Create a new habit plan.

        Args:
            data: Habit plan creation data

        Returns:
            Created plan
        """
        plan = HabitPlan(title=data.title, habits=data.habits, duration=data.duration)
        return self._add(plan)

    def delete_habit_plan(self, plan_id: str) -> bool:
        """Delete a habit plan.

        Returns:
            True if deleted, False if not found
        """
        return self._delete(plan_id)

    def toggle_habit(self, plan_id: str, day_index: int, habit_index: int) -> ToggleOutcome:
        """Check or uncheck one habit on one day.

        Args:
            plan_id: Habit plan id
            day_index: Zero-based day
            habit_index: Index into the plan's habits

        Returns:
            Outcome; ``DAY_COMPLETE`` is added when the day's list fills up

        Raises:
            PlanValidationError: If the day or habit is outside the plan
        """
        plans = self.load()
        idx = self._index_of(plans, plan_id)
        if idx < 0:
            return ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.NOT_FOUND)

        plan = plans[idx]
        plan.check_day_index(day_index)
        if not 0 <= habit_index < len(plan.habits):
            raise PlanValidationError(
                f"Habit {habit_index} is outside 0-{len(plan.habits) - 1}"
            )

        done = plan.completed_habits(day_index)
        if habit_index in done:
            remaining = [i for i in done if i != habit_index]
            if remaining:
                plan.day_progress[day_index] = remaining
            else:
                plan.day_progress.pop(day_index, None)
            outcome = ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.OK, checked=False)
        else:
            plan.day_progress[day_index] = sorted(done + [habit_index])
            events = [PlanEvent.PROGRESS]
            if plan.is_day_complete(day_index):
                events.append(PlanEvent.DAY_COMPLETE)
            outcome = ToggleOutcome(
                plan_id=plan_id, status=OutcomeStatus.OK, checked=True, events=events
            )

        self._notify(plan, outcome)
        self.save(plans)
        return outcome

    @staticmethod
    def get_checklist(plan: HabitPlan, day_index: int) -> list[tuple[str, bool]]:
        """Habit names paired with whether each is done on a day."""
        plan.check_day_index(day_index)
        done = set(plan.completed_habits(day_index))
        return [(name, i in done) for i, name in enumerate(plan.habits)]

    @staticmethod
    def completed_day_count(plan: HabitPlan) -> int:
        """Number of days with every habit checked."""
        return sum(1 for day in plan.day_progress if plan.is_day_complete(day))
