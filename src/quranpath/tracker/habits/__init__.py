"""Habit plans module."""

from .manager import HabitPlanManager
from .schemas import HabitPlan, HabitPlanCreate

__all__ = ["HabitPlanManager", "HabitPlan", "HabitPlanCreate"]
