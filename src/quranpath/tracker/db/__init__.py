"""Database module for local SQLite key-value storage."""

from .models import KeyValue
from .sqlite import Database, MalformedValueError, get_db, reset_db

# Logical storage keys
CHALLENGES_KEY = "quran_app_challenges"
LEGACY_CHALLENGE_KEY = "quran_app_custom_challenge"
HABIT_PLANS_KEY = "quran_app_habit_plans"
GOALS_KEY = "quran_app_goals"
STREAK_COUNT_KEY = "quran_app_streak"
STREAK_DATE_KEY = "quran_app_last_streak_date"

__all__ = [
    "KeyValue",
    "Database",
    "MalformedValueError",
    "get_db",
    "reset_db",
    "CHALLENGES_KEY",
    "LEGACY_CHALLENGE_KEY",
    "HABIT_PLANS_KEY",
    "GOALS_KEY",
    "STREAK_COUNT_KEY",
    "STREAK_DATE_KEY",
]
