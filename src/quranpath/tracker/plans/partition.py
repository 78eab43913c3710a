"""Split a plan's material into per-day unit ranges.

Day ``i`` of a plan covering ``total_units`` units over ``duration`` days
gets offsets ``floor(i * total / duration)`` through
``floor((i + 1) * total / duration) - 1``. Integer arithmetic keeps the
floors exact, so the last day always ends on the final unit.

When there are fewer units than days some ranges are empty
(``end < start``); callers must not assume every day has work.
"""

from typing import NamedTuple


class DayRange(NamedTuple):
    """Inclusive unit range assigned to one day."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    @property
    def is_single(self) -> bool:
        return self.start == self.end

    @property
    def unit_count(self) -> int:
        return max(0, self.end - self.start + 1)


def compute_day_range(
    total_units: int,
    duration: int,
    day_index: int,
    base_unit: int = 0,
) -> DayRange:
    """Compute the units assigned to a day.

    Args:
        total_units: Number of units in the plan (>= 0)
        duration: Number of days (> 0)
        day_index: Zero-based day offset
        base_unit: Unit number of the first unit (e.g. the first page)

    Returns:
        DayRange clamped to the plan's last unit

    Raises:
        ValueError: For a non-positive duration, negative total or a day
            index outside the plan
    """
    if duration <= 0:
        raise ValueError("duration must be positive")
    if total_units < 0:
        raise ValueError("total_units cannot be negative")
    if not 0 <= day_index < duration:
        raise ValueError(f"day_index {day_index} outside 0-{duration - 1}")

    offset_start = day_index * total_units // duration
    offset_end = (day_index + 1) * total_units // duration - 1
    last_unit = base_unit + total_units - 1

    return DayRange(base_unit + offset_start, min(base_unit + offset_end, last_unit))


def partition_units(total_units: int, duration: int, base_unit: int = 0) -> list[DayRange]:
    """Compute every day's range for a plan."""
    return [
        compute_day_range(total_units, duration, day, base_unit)
        for day in range(duration)
    ]
