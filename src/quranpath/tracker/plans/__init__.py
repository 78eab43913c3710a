"""Shared progress-plan machinery.

Provides:
- The common progress-plan interface and outcome types
- A generic JSON-backed plan store
- Day range partitioning
- Completion detection and plan restarts
"""

from .base import PlanStore
from .completion import CompletionController
from .errors import PlanValidationError
from .partition import DayRange, compute_day_range, partition_units
from .schemas import (
    CyclicPlan,
    DayState,
    OutcomeStatus,
    PlanEvent,
    PlanScope,
    ProgressRecord,
    ToggleOutcome,
)

__all__ = [
    "PlanStore",
    "CompletionController",
    "PlanValidationError",
    "DayRange",
    "compute_day_range",
    "partition_units",
    "CyclicPlan",
    "DayState",
    "OutcomeStatus",
    "PlanEvent",
    "PlanScope",
    "ProgressRecord",
    "ToggleOutcome",
]
