"""Record-store interface used by the Jale core, plus an in-memory implementation.

The core only ever needs four operations against a collection-addressed
store: keyed lookup, field-equality query, create and partial update.
``jale.db.SupabaseRecordStore`` implements them on Supabase;
``MemoryRecordStore`` backs the demo CLI and the tests.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .errors import RecordNotFoundError

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "jobs", "matches", "messages", "interviews", "notifications")

DEMO_SEED_PATH = Path(__file__).parent / "data" / "demo_seed.json"


@runtime_checkable
class RecordStore(Protocol):
    """Collection-addressed record store.

    Records are plain dicts with a string ``id``.  Implementations raise
    ``jale.errors.PersistenceError`` (or a subclass) on any failure.
    """

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return the record with *record_id*, or None."""
        ...

    def query(self, collection: str, **equals: Any) -> list[dict[str, Any]]:
        """Return records whose fields equal every keyword given."""
        ...

    def create(self, collection: str, record: dict[str, Any]) -> str:
        """Insert *record* and return its id."""
        ...

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> None:
        """Merge *fields* into an existing record.

        Raises:
            RecordNotFoundError: If *record_id* does not exist.
        """
        ...


class MemoryRecordStore:
    """Thread-safe dict-backed ``RecordStore``."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._collections.get(collection, {}).get(str(record_id))
            return copy.deepcopy(record) if record is not None else None

    def query(self, collection: str, **equals: Any) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(r)
                for r in self._collections.get(collection, {}).values()
                if all(r.get(field) == value for field, value in equals.items())
            ]

    def create(self, collection: str, record: dict[str, Any]) -> str:
        record_id = str(record.get("id") or uuid.uuid4())
        with self._lock:
            self._collections.setdefault(collection, {})[record_id] = {**copy.deepcopy(record), "id": record_id}
        return record_id

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> None:
        with self._lock:
            record = self._collections.get(collection, {}).get(str(record_id))
            if record is None:
                raise RecordNotFoundError(collection, str(record_id))
            record.update(copy.deepcopy(fields))

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    @classmethod
    def from_seed(cls, path: Path = DEMO_SEED_PATH) -> MemoryRecordStore:
        """Build a store pre-filled from a ``{collection: [records]}`` JSON file."""
        store = cls()
        data = json.loads(path.read_text(encoding="utf-8"))
        for collection, records in data.items():
            for record in records:
                store.create(collection, record)
        logger.info("Seeded in-memory store from %s", path)
        return store
