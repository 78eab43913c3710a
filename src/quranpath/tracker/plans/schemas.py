"""Pydantic schemas shared by every progress plan."""

from abc import abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .errors import PlanValidationError


def generate_id() -> str:
    """Generate a UUID string for record ids."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanScope(str, Enum):
    """What material a reading plan covers."""

    WHOLE_BOOK = "whole_book"
    SINGLE_CHAPTER = "single_chapter"


class DayState(str, Enum):
    """Display state of one day in a sequential plan."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


class OutcomeStatus(str, Enum):
    """Result of a plan operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    LOCKED = "locked"
    NOT_COMPLETE = "not_complete"
    ALREADY_MARKED = "already_marked"


class PlanEvent(str, Enum):
    """Signals surfaced to the caller after an operation."""

    PROGRESS = "progress"  # a day or habit was checked
    DAY_COMPLETE = "day_complete"  # every habit of a day is checked
    PLAN_COMPLETE = "plan_complete"
    RESTARTED = "restarted"


class ProgressRecord(BaseModel):
    """Common shape of every progress plan.

    Subclasses define how progress is counted through ``units_done`` and
    ``units_total``; completion and percentage derive from those.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=generate_id)
    title: str = Field(..., min_length=1, max_length=200)
    start_date: datetime = Field(default_factory=utcnow)

    @property
    @abstractmethod
    def units_done(self) -> int:
        """Units of progress recorded so far."""

    @property
    @abstractmethod
    def units_total(self) -> int:
        """Units needed to complete the plan."""

    @property
    def is_complete(self) -> bool:
        return self.units_total > 0 and self.units_done >= self.units_total

    @property
    def progress_percent(self) -> int:
        """Progress as a rounded percentage (0-100)."""
        if self.units_total <= 0:
            return 0
        return min(100, round(self.units_done / self.units_total * 100))


class CyclicPlan(ProgressRecord):
    """A fixed-duration plan that restarts after each completed cycle."""

    duration: int = Field(..., ge=1, description="Number of days in the plan")
    cycles_completed: int = Field(0, ge=0)
    # Set when the current cycle first completed; cleared on restart.
    completed_at: Optional[datetime] = None

    @abstractmethod
    def clear_progress(self) -> None:
        """Drop all progress of the current cycle."""

    def check_day_index(self, day_index: int) -> None:
        if not 0 <= day_index < self.duration:
            raise PlanValidationError(
                f"Day {day_index} is outside plan range 0-{self.duration - 1}"
            )


class ToggleOutcome(BaseModel):
    """What happened when a plan operation ran."""

    plan_id: str
    status: OutcomeStatus
    checked: bool = False
    events: list[PlanEvent] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    @property
    def plan_completed(self) -> bool:
        return PlanEvent.PLAN_COMPLETE in self.events
