"""Whole-plan completion detection and the restart cycle."""

import logging
from typing import Optional

from .base import PlanStore
from .schemas import CyclicPlan, OutcomeStatus, PlanEvent, ToggleOutcome, utcnow

logger = logging.getLogger(__name__)


class CompletionController:
    """Watches plan stores and drives the complete-then-restart cycle.

    Completion is edge-triggered: the first toggle that makes a plan complete
    stamps ``completed_at`` and emits ``PLAN_COMPLETE``. While the stamp is
    set, unticking and re-ticking does not emit again. ``finish_and_restart``
    clears progress, counts the cycle and removes the stamp.
    """

    def __init__(self, *stores: PlanStore, reset_start_date: bool = True):
        """Initialize controller and subscribe to the given stores.

        Args:
            stores: Plan stores holding cyclic plans
            reset_start_date: Whether a restart moves ``start_date`` to now
        """
        self.stores = list(stores)
        self.reset_start_date = reset_start_date
        for store in self.stores:
            store.subscribe(self.evaluate)

    def evaluate(self, plan: CyclicPlan, outcome: ToggleOutcome) -> None:
        """Check the completion predicate after a toggle."""
        if not outcome.ok or not plan.is_complete or plan.completed_at is not None:
            return

        plan.completed_at = utcnow()
        # Plan completion supersedes the minor progress signals
        outcome.events = [PlanEvent.PLAN_COMPLETE]
        logger.info(
            "Plan %s (%s) completed cycle %d", plan.id, plan.title, plan.cycles_completed + 1
        )

    def _find(self, plan_id: str) -> tuple[Optional[PlanStore], Optional[CyclicPlan]]:
        for store in self.stores:
            plan = store.get_plan(plan_id)
            if plan is not None:
                return store, plan
        return None, None

    def pending_completions(self) -> list[CyclicPlan]:
        """Complete plans whose completion has fired but not been acknowledged."""
        return [
            plan
            for store in self.stores
            for plan in store.list_plans()
            if plan.completed_at is not None and plan.is_complete
        ]

    def finish_and_restart(self, plan_id: str) -> ToggleOutcome:
        """Acknowledge a completed plan and start its next cycle.

        Duration, habits and page range are kept, so the same plan repeats.

        Returns:
            Outcome with ``RESTARTED`` on success, ``NOT_FOUND`` for an
            unknown id or ``NOT_COMPLETE`` if the plan is not finished
        """
        store, plan = self._find(plan_id)
        if plan is None:
            return ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.NOT_FOUND)
        if not plan.is_complete:
            return ToggleOutcome(plan_id=plan_id, status=OutcomeStatus.NOT_COMPLETE)

        plan.clear_progress()
        plan.cycles_completed += 1
        plan.completed_at = None
        if self.reset_start_date:
            plan.start_date = utcnow()

        store.replace_plan(plan)
        logger.info("Plan %s restarted; %d cycles completed", plan.id, plan.cycles_completed)
        return ToggleOutcome(
            plan_id=plan_id, status=OutcomeStatus.OK, events=[PlanEvent.RESTARTED]
        )
