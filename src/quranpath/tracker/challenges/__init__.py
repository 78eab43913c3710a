"""Reading challenges module.

Provides functionality for:
- Creating whole-book and single-chapter reading challenges
- Splitting the pages of a challenge across its days
- Checking days off in order
"""

from .manager import ChallengeManager
from .schemas import ChallengePlan, ChallengePlanCreate, DayTask

__all__ = [
    "ChallengeManager",
    "ChallengePlan",
    "ChallengePlanCreate",
    "DayTask",
]
