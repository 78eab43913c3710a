"""Pydantic schemas for cumulative goals and the daily streak."""

import math
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..catalog.schemas import Chapter
from ..plans.schemas import OutcomeStatus, PlanScope, ProgressRecord


def pages_per_day(total_units: int, duration_days: int) -> int:
    """Daily page target for a goal (rounded up)."""
    if duration_days <= 0:
        raise ValueError("duration_days must be positive")
    return math.ceil(total_units / duration_days)


class GoalCreate(BaseModel):
    """Schema for creating a goal."""

    kind: PlanScope = PlanScope.SINGLE_CHAPTER
    chapter: Optional[Chapter] = None
    duration_days: int = Field(7, ge=1)

    @model_validator(mode="after")
    def chapter_matches_kind(self):
        """A chapter is required for, and only for, single-chapter goals."""
        if self.kind == PlanScope.SINGLE_CHAPTER and self.chapter is None:
            raise ValueError("a chapter is required for a single-chapter goal")
        if self.kind == PlanScope.WHOLE_BOOK and self.chapter is not None:
            raise ValueError("a whole-book goal cannot target a chapter")
        return self


class Goal(ProgressRecord):
    """A cumulative page goal advanced by a fixed daily target."""

    kind: PlanScope
    chapter_id: Optional[int] = None
    total_units: int = Field(..., ge=1)
    start_unit: int = Field(1, ge=1)
    duration_days: int = Field(..., ge=1)
    daily_target_units: int = Field(0, ge=0)
    completed_units: int = Field(0, ge=0)
    last_progress_date: Optional[date] = None
    is_completed: bool = False

    @model_validator(mode="after")
    def sync_derived_fields(self):
        """Fill the daily target and keep ``is_completed`` consistent."""
        if self.completed_units > self.total_units:
            raise ValueError("completed_units cannot exceed total_units")
        if self.daily_target_units == 0:
            self.daily_target_units = pages_per_day(self.total_units, self.duration_days)
        self.is_completed = self.completed_units >= self.total_units
        return self

    @property
    def units_done(self) -> int:
        return self.completed_units

    @property
    def units_total(self) -> int:
        return self.total_units

    @property
    def remaining_units(self) -> int:
        return self.total_units - self.completed_units

    def apply_daily_progress(self, on_date: date) -> None:
        """Add one day's target, capped at the goal total."""
        self.completed_units = min(self.completed_units + self.daily_target_units, self.total_units)
        self.last_progress_date = on_date
        self.is_completed = self.completed_units >= self.total_units


class StreakState(BaseModel):
    """Process-wide count of consecutive active days."""

    count: int = Field(0, ge=0)
    last_streak_date: Optional[date] = None


class ProgressMark(BaseModel):
    """Result of marking a day of progress on a goal."""

    goal_id: str
    status: OutcomeStatus
    goal: Optional[Goal] = None
    streak: StreakState
    streak_changed: bool = False

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK
