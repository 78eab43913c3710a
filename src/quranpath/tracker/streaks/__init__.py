"""Daily streak and cumulative goals module."""

from .manager import GoalManager, StreakTracker, advance_streak
from .schemas import Goal, GoalCreate, ProgressMark, StreakState, pages_per_day

__all__ = [
    "GoalManager",
    "StreakTracker",
    "advance_streak",
    "Goal",
    "GoalCreate",
    "ProgressMark",
    "StreakState",
    "pages_per_day",
]
