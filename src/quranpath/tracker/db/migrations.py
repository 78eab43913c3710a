"""Normalization of stored records applied on every load.

Older records use the camelCase field names of the first storage format and
may lack fields added later. Each function returns a new dict in the
current snake_case shape; validation happens afterwards in the schemas.
"""

import math
from typing import Any, Optional

from ..catalog.schemas import WHOLE_BOOK_PAGES, WHOLE_BOOK_TITLE

WHOLE_BOOK = "whole_book"
SINGLE_CHAPTER = "single_chapter"

_SCOPE_ALIASES = {
    "all": WHOLE_BOOK,
    "khatmah": WHOLE_BOOK,
    "whole_book": WHOLE_BOOK,
    "surah": SINGLE_CHAPTER,
    "single_chapter": SINGLE_CHAPTER,
}

CHALLENGE_FIELDS = {
    "type": "scope",
    "targetSurah": "chapter",
    "startPage": "start_unit",
    "endPage": "end_unit",
    "completedDays": "completed_days",
    "startDate": "start_date",
    "timesCompleted": "cycles_completed",
    "cyclesCompleted": "cycles_completed",
    "completedAt": "completed_at",
}

HABIT_FIELDS = {
    "dayProgress": "day_progress",
    "startDate": "start_date",
    "timesCompleted": "cycles_completed",
    "cyclesCompleted": "cycles_completed",
    "completedAt": "completed_at",
}

GOAL_FIELDS = {
    "type": "kind",
    "targetId": "chapter_id",
    "totalPages": "total_units",
    "startPageNumber": "start_unit",
    "durationDays": "duration_days",
    "dailyTargetPages": "daily_target_units",
    "completedPages": "completed_units",
    "startDate": "start_date",
    "lastProgressDate": "last_progress_date",
    "isCompleted": "is_completed",
}


def _rename(raw: dict, mapping: dict[str, str]) -> dict:
    record = {}
    for key, value in raw.items():
        new_key = mapping.get(key, key)
        # Current-format keys win over legacy aliases
        if new_key in record and key != new_key:
            continue
        record[new_key] = value
    return record


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _scope(value: Any) -> str:
    return _SCOPE_ALIASES.get(str(value or "").lower(), WHOLE_BOOK)


def _day_indices(values: Any, duration: int) -> list[int]:
    if not isinstance(values, (list, tuple, set)):
        return []
    days = {_as_int(v) for v in values}
    return sorted(d for d in days if d is not None and 0 <= d < duration)


def normalize_challenge(raw: dict) -> dict:
    """Normalize a stored reading challenge."""
    record = _rename(raw, CHALLENGE_FIELDS)
    record.pop("totalPages", None)

    record["scope"] = _scope(record.get("scope"))
    chapter = record.get("chapter") if isinstance(record.get("chapter"), dict) else None
    if record["scope"] == SINGLE_CHAPTER and chapter is None:
        record["scope"] = WHOLE_BOOK
    if record["scope"] == WHOLE_BOOK:
        chapter = None
    record["chapter"] = chapter

    if not record.get("title"):
        record["title"] = (
            f"Surat {chapter.get('name_simple', '')}".strip() if chapter else WHOLE_BOOK_TITLE
        )

    record["start_unit"] = _as_int(record.get("start_unit")) or 1
    record["end_unit"] = _as_int(record.get("end_unit")) or WHOLE_BOOK_PAGES
    record["duration"] = _as_int(record.get("duration")) or 30
    record["cycles_completed"] = max(0, _as_int(record.get("cycles_completed"), 0))
    record["completed_days"] = _day_indices(record.get("completed_days"), record["duration"])
    return record


def normalize_habit_plan(raw: dict) -> dict:
    """Normalize a stored habit plan."""
    record = _rename(raw, HABIT_FIELDS)
    record["cycles_completed"] = max(0, _as_int(record.get("cycles_completed"), 0))

    duration = _as_int(record.get("duration"), 0)
    habits = record.get("habits") if isinstance(record.get("habits"), list) else []
    progress = record.get("day_progress")

    cleaned: dict[int, list[int]] = {}
    if isinstance(progress, dict):
        for day_key, indices in progress.items():
            day = _as_int(day_key)
            if day is None or not 0 <= day < duration:
                continue
            valid = sorted(
                {i for i in map(_as_int, indices or []) if i is not None and 0 <= i < len(habits)}
            )
            if valid:
                cleaned[day] = valid
    record["day_progress"] = cleaned
    return record


def normalize_goal(raw: dict) -> dict:
    """Normalize a stored cumulative goal."""
    record = _rename(raw, GOAL_FIELDS)
    record["kind"] = _scope(record.get("kind"))
    record["start_unit"] = _as_int(record.get("start_unit")) or 1

    total = _as_int(record.get("total_units"), 0)
    duration = _as_int(record.get("duration_days"), 0)
    if total > 0 and duration > 0 and not _as_int(record.get("daily_target_units")):
        record["daily_target_units"] = math.ceil(total / duration)

    completed = _as_int(record.get("completed_units"), 0)
    record["completed_units"] = min(max(completed, 0), max(total, 0))
    record["is_completed"] = total > 0 and record["completed_units"] >= total

    if isinstance(record.get("last_progress_date"), str):
        # Older records stored a full timestamp here
        record["last_progress_date"] = record["last_progress_date"][:10]
    return record
