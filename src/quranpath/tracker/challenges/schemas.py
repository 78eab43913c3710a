"""Pydantic schemas for reading challenges."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..catalog.schemas import WHOLE_BOOK_PAGES, Chapter
from ..plans.schemas import CyclicPlan, DayState, PlanScope


class ChallengePlanCreate(BaseModel):
    """Schema for creating a reading challenge."""

    scope: PlanScope = PlanScope.SINGLE_CHAPTER
    chapter: Optional[Chapter] = None
    duration: int = Field(30, ge=1, description="Days to finish the material")

    @model_validator(mode="after")
    def chapter_matches_scope(self):
        """A chapter is required for, and only for, single-chapter plans."""
        if self.scope == PlanScope.SINGLE_CHAPTER and self.chapter is None:
            raise ValueError("a chapter is required for a single-chapter plan")
        if self.scope == PlanScope.WHOLE_BOOK and self.chapter is not None:
            raise ValueError("a whole-book plan cannot target a chapter")
        return self


class ChallengePlan(CyclicPlan):
    """A reading challenge: pages split across a fixed number of days."""

    scope: PlanScope
    chapter: Optional[Chapter] = None
    start_unit: int = Field(1, ge=1)
    end_unit: int = Field(WHOLE_BOOK_PAGES, ge=1)
    completed_days: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_invariants(self):
        """Validate page range, chapter reference and completed days."""
        if self.end_unit < self.start_unit:
            raise ValueError("end_unit must not be before start_unit")
        if (self.scope == PlanScope.SINGLE_CHAPTER) != (self.chapter is not None):
            raise ValueError("chapter must be set exactly for single-chapter plans")
        if len(set(self.completed_days)) != len(self.completed_days):
            raise ValueError("completed_days contains duplicates")
        if any(not 0 <= d < self.duration for d in self.completed_days):
            raise ValueError("completed_days contains a day outside the plan")
        return self

    @property
    def total_units(self) -> int:
        return self.end_unit - self.start_unit + 1

    @property
    def units_done(self) -> int:
        return len(self.completed_days)

    @property
    def units_total(self) -> int:
        return self.duration

    def is_day_completed(self, day_index: int) -> bool:
        return day_index in self.completed_days

    def clear_progress(self) -> None:
        self.completed_days = []


class DayTask(BaseModel):
    """What to read on one day of a challenge."""

    day_index: int
    start_page: int
    end_page: int
    state: DayState
    label: str
    subtext: str

    @property
    def day_number(self) -> int:
        """One-based day number for display."""
        return self.day_index + 1

    @property
    def is_rest_day(self) -> bool:
        """True when rounding left this day without pages."""
        return self.end_page < self.start_page
