"""SQLite key-value storage.

Handles database connection, session management and JSON value access.
"""

import json
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, KeyValue


class MalformedValueError(ValueError):
    """Raised when a stored value is not valid JSON."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored value for {key!r} is malformed: {reason}")
        self.key = key


class Database:
    """Database connection and key-value operations."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     QURANPATH_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "QURANPATH_DB_PATH",
                str(Path.home() / ".quranpath" / "tracker.db"),
            )

        self.db_path = Path(db_path).expanduser()
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases need a single shared connection
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Raw Values
    # ========================================================================

    def get_value(self, key: str) -> Optional[str]:
        """Get the raw stored text for a key, or None if unset."""
        with self.get_session() as s:
            item = s.get(KeyValue, key)
            return item.value if item else None

    def set_value(self, key: str, value: str) -> None:
        """Create or replace the value stored under a key."""
        with self.get_session() as s:
            item = s.get(KeyValue, key)
            if item:
                item.value = value
                item.updated_at = datetime.now(timezone.utc).isoformat()
            else:
                s.add(KeyValue(key=key, value=value))

    def delete_value(self, key: str) -> bool:
        """Delete a key. Returns False if it was not set."""
        with self.get_session() as s:
            item = s.get(KeyValue, key)
            if not item:
                return False
            s.delete(item)
            return True

    def keys(self) -> list[str]:
        """List all stored keys."""
        with self.get_session() as s:
            stmt = select(KeyValue.key).order_by(KeyValue.key)
            return list(s.execute(stmt).scalars().all())

    # ========================================================================
    # JSON Values
    # ========================================================================

    def read_json(self, key: str) -> Optional[Any]:
        """Read and decode a JSON value.

        Returns:
            The decoded value, or None if the key is unset

        Raises:
            MalformedValueError: If the stored text is not valid JSON
        """
        raw = self.get_value(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedValueError(key, str(e)) from e

    def write_json(self, key: str, value: Any) -> None:
        """Encode and store a JSON-serializable value."""
        self.set_value(key, json.dumps(value, ensure_ascii=False))


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
