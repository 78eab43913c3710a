"""Pydantic schemas for habit plans."""

from pydantic import BaseModel, Field, field_validator, model_validator

from ..plans.schemas import CyclicPlan


def _clean_habits(habits: list[str]) -> list[str]:
    cleaned = [h.strip() for h in habits]
    if any(not h for h in cleaned):
        raise ValueError("habit names cannot be blank")
    if len(set(cleaned)) != len(cleaned):
        raise ValueError("habit names must be distinct")
    return cleaned


class HabitPlanCreate(BaseModel):
    """Schema for creating a habit plan."""

    title: str = Field(..., min_length=1, max_length=200)
    habits: list[str] = Field(..., min_length=1)
    duration: int = Field(30, ge=1)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        if not v.strip():
            raise ValueError("title cannot be blank")
        return v.strip()

    @field_validator("habits")
    @classmethod
    def habits_distinct(cls, v):
        return _clean_habits(v)


class HabitPlan(CyclicPlan):
    """A checklist of habits repeated every day of the plan."""

    habits: list[str] = Field(..., min_length=1)
    # day index -> indices of habits done that day
    day_progress: dict[int, list[int]] = Field(default_factory=dict)

    @field_validator("habits")
    @classmethod
    def habits_distinct(cls, v):
        return _clean_habits(v)

    @model_validator(mode="after")
    def check_progress(self):
        """Validate day keys and habit indices."""
        for day, indices in self.day_progress.items():
            if not 0 <= day < self.duration:
                raise ValueError(f"day {day} is outside the plan")
            if len(set(indices)) != len(indices):
                raise ValueError(f"day {day} lists a habit twice")
            if any(not 0 <= i < len(self.habits) for i in indices):
                raise ValueError(f"day {day} references an unknown habit")
        return self

    @property
    def units_done(self) -> int:
        return sum(len(indices) for indices in self.day_progress.values())

    @property
    def units_total(self) -> int:
        return self.duration * len(self.habits)

    def completed_habits(self, day_index: int) -> list[int]:
        return self.day_progress.get(day_index, [])

    def is_day_complete(self, day_index: int) -> bool:
        return len(self.completed_habits(day_index)) == len(self.habits)

    def clear_progress(self) -> None:
        self.day_progress = {}
