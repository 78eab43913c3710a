"""Tests for SQLite key-value storage."""

import pytest

from quranpath.tracker.db import Database, KeyValue, MalformedValueError


class TestDatabaseCreation:
    """Tests for database initialization."""

    def test_database_creates_tables(self, db: Database):
        """Test that the key-value table exists after initialization."""
        with db.get_session() as session:
            session.query(KeyValue).first()

    def test_database_file_created(self, tmp_path):
        """Test that a file database creates its directory and file."""
        database = Database(str(tmp_path / "nested" / "tracker.db"))
        database.create_tables()

        assert database.db_path.exists()

    def test_env_path(self, tmp_path, monkeypatch):
        """Test that the path falls back to QURANPATH_DB_PATH."""
        monkeypatch.setenv("QURANPATH_DB_PATH", str(tmp_path / "env.db"))

        assert Database().db_path == tmp_path / "env.db"


class TestRawValues:
    """Tests for raw text values."""

    def test_missing_key(self, db: Database):
        assert db.get_value("nothing") is None

    def test_set_and_get(self, db: Database):
        db.set_value("quran_app_streak", "3")

        assert db.get_value("quran_app_streak") == "3"

    def test_overwrite(self, db: Database):
        db.set_value("k", "one")
        db.set_value("k", "two")

        assert db.get_value("k") == "two"
        assert db.keys() == ["k"]

    def test_delete(self, db: Database):
        db.set_value("k", "one")

        assert db.delete_value("k") is True
        assert db.delete_value("k") is False
        assert db.get_value("k") is None

    def test_keys_sorted(self, db: Database):
        for key in ["b", "a", "c"]:
            db.set_value(key, "x")

        assert db.keys() == ["a", "b", "c"]

    def test_updated_at_set(self, db: Database):
        db.set_value("k", "one")

        with db.get_session() as session:
            assert session.get(KeyValue, "k").updated_at


class TestJsonValues:
    """Tests for JSON values."""

    def test_round_trip_keeps_arabic(self, db: Database):
        db.write_json("k", [{"name_arabic": "الكهف"}])

        assert "الكهف" in db.get_value("k")
        assert db.read_json("k") == [{"name_arabic": "الكهف"}]

    def test_read_missing(self, db: Database):
        assert db.read_json("missing") is None

    def test_read_malformed(self, db: Database):
        db.set_value("k", "[1, 2")

        with pytest.raises(MalformedValueError) as exc_info:
            db.read_json("k")

        assert exc_info.value.key == "k"
        assert isinstance(exc_info.value, ValueError)
