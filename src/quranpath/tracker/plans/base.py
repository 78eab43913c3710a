"""Generic persistence for collections of progress plans.

Each store keeps its records as one JSON array under a logical key. Every
operation reads the array, applies the change and writes the whole array
back before returning.
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from ..db import Database, MalformedValueError, get_db
from .schemas import ProgressRecord, ToggleOutcome

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=ProgressRecord)

# Called with the mutated record before it is persisted
ToggleListener = Callable[[Any, ToggleOutcome], None]


class PlanStore(Generic[RecordT]):
    """Owns one persisted collection of plan records."""

    storage_key: str = ""
    record_type: type[RecordT]

    def __init__(self, db: Optional[Database] = None):
        """Initialize store.

        Args:
            db: Database instance
        """
        self.db = db or get_db()
        self._listeners: list[ToggleListener] = []
        # Stored entries the last load could not read; written back untouched
        self._unreadable: list = []

    def subscribe(self, listener: ToggleListener) -> None:
        """Register a callback run after each toggle, before saving."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Loading and saving
    # -------------------------------------------------------------------------

    def normalize(self, raw: dict) -> dict:
        """Bring a stored record up to the current shape."""
        return raw

    def _read_raw(self) -> list:
        try:
            data = self.db.read_json(self.storage_key)
        except MalformedValueError as e:
            logger.warning("%s; treating collection as empty", e)
            return []

        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(
                "Stored value for %r is not a list; treating collection as empty",
                self.storage_key,
            )
            return []
        return data

    def load(self) -> list[RecordT]:
        """Load, migrate and validate all records.

        Entries that fail validation are left out of the result but kept
        aside, so the next ``save`` writes them back unchanged.
        """
        records = []
        self._unreadable = []
        for raw in self._read_raw():
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object record in %r", self.storage_key)
                self._unreadable.append(raw)
                continue
            try:
                records.append(self.record_type.model_validate(self.normalize(raw)))
            except (ValueError, TypeError) as e:
                logger.warning(
                    "Skipping invalid record %s in %r: %s", raw.get("id"), self.storage_key, e
                )
                self._unreadable.append(raw)
        return records

    def save(self, records: list[RecordT]) -> None:
        """Persist the full collection."""
        self.db.write_json(
            self.storage_key,
            [r.model_dump(mode="json") for r in records] + self._unreadable,
        )

    # -------------------------------------------------------------------------
    # Collection operations
    # -------------------------------------------------------------------------

    @staticmethod
    def _index_of(records: list[RecordT], record_id: str) -> int:
        for i, record in enumerate(records):
            if record.id == record_id:
                return i
        return -1

    def list_plans(self) -> list[RecordT]:
        """Get all records in creation order."""
        return self.load()

    def get_plan(self, record_id: str) -> Optional[RecordT]:
        """Get a record by id."""
        records = self.load()
        idx = self._index_of(records, record_id)
        return records[idx] if idx >= 0 else None

    def _add(self, record: RecordT) -> RecordT:
        records = self.load()
        records.append(record)
        self.save(records)
        return record

    def _delete(self, record_id: str) -> bool:
        records = self.load()
        idx = self._index_of(records, record_id)
        if idx < 0:
            return False
        del records[idx]
        self.save(records)
        return True

    def replace_plan(self, record: RecordT) -> bool:
        """Overwrite the stored record with the same id."""
        records = self.load()
        idx = self._index_of(records, record.id)
        if idx < 0:
            return False
        records[idx] = record
        self.save(records)
        return True

    def _notify(self, record: RecordT, outcome: ToggleOutcome) -> None:
        for listener in self._listeners:
            listener(record, outcome)
