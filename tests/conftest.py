"""Pytest configuration and shared fixtures.

Provides in-memory databases, plan stores and sample chapter metadata.
"""

import os
from pathlib import Path
from typing import Generator

import pytest

from quranpath.tracker.catalog import Chapter
from quranpath.tracker.challenges import ChallengeManager
from quranpath.tracker.config import reset_config
from quranpath.tracker.db import Database, reset_db
from quranpath.tracker.habits import HabitPlanManager
from quranpath.tracker.plans import CompletionController
from quranpath.tracker.streaks import GoalManager, StreakTracker


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def challenges(db: Database) -> ChallengeManager:
    return ChallengeManager(db)


@pytest.fixture
def habits(db: Database) -> HabitPlanManager:
    return HabitPlanManager(db)


@pytest.fixture
def controller(challenges: ChallengeManager, habits: HabitPlanManager) -> CompletionController:
    """Completion controller watching both plan stores."""
    return CompletionController(challenges, habits)


@pytest.fixture
def streaks(db: Database) -> StreakTracker:
    return StreakTracker(db)


@pytest.fixture
def goals(db: Database, streaks: StreakTracker) -> GoalManager:
    return GoalManager(db, streaks)


# ============================================================================
# Sample Chapters
# ============================================================================


@pytest.fixture
def fatiha() -> Chapter:
    """A one-page chapter."""
    return Chapter(
        id=1,
        name_simple="Al-Fatihah",
        name_arabic="الفاتحة",
        revelation_place="makkah",
        verses_count=7,
        pages=(1, 1),
    )


@pytest.fixture
def kahf() -> Chapter:
    """A twelve-page chapter."""
    return Chapter(
        id=18,
        name_simple="Al-Kahf",
        name_arabic="الكهف",
        revelation_place="makkah",
        verses_count=110,
        pages=(293, 304),
    )


@pytest.fixture
def chapters_payload() -> dict:
    """Catalog response body for /chapters."""
    return {
        "chapters": [
            {
                "id": 2,
                "revelation_place": "madinah",
                "revelation_order": 87,
                "bismillah_pre": True,
                "name_simple": "Al-Baqarah",
                "name_complex": "Al-Baqarah",
                "name_arabic": "البقرة",
                "verses_count": 286,
                "pages": [2, 49],
                "translated_name": {"language_name": "english", "name": "The Cow"},
            },
            {
                "id": 1,
                "revelation_place": "makkah",
                "revelation_order": 5,
                "bismillah_pre": False,
                "name_simple": "Al-Fatihah",
                "name_complex": "Al-Fātiĥah",
                "name_arabic": "الفاتحة",
                "verses_count": 7,
                "pages": [1, 1],
                "translated_name": {"language_name": "english", "name": "The Opener"},
            },
            {
                "id": 18,
                "revelation_place": "makkah",
                "revelation_order": 69,
                "bismillah_pre": True,
                "name_simple": "Al-Kahf",
                "name_complex": "Al-Kahf",
                "name_arabic": "الكهف",
                "verses_count": 110,
                "pages": [293, 304],
                "translated_name": {"language_name": "english", "name": "The Cave"},
            },
        ]
    }


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_env(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the CLI at a temporary database."""
    reset_db()
    reset_config()
    db_path = tmp_path / "tracker.db"
    os.environ["QURANPATH_DB_PATH"] = str(db_path)
    yield db_path
    reset_db()
    reset_config()
    del os.environ["QURANPATH_DB_PATH"]


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from quranpath.tracker.cli import app

    return app
