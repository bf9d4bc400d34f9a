"""Supabase database layer for Jale."""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from .errors import PersistenceError, RecordNotFoundError

logger = logging.getLogger(__name__)


def _execute(builder: Any, action: str) -> list[dict]:
    """Run a query builder and return its rows.

    Raises:
        PersistenceError: If the client raises or reports an error.
    """
    try:
        result = builder.execute()
    except Exception as exc:
        raise PersistenceError(f"Supabase {action} failed: {exc}") from exc
    if getattr(result, "error", None):
        raise PersistenceError(f"Supabase {action} failed: {result.error}")
    return list(getattr(result, "data", None) or [])


class SupabaseRecordStore:
    """``RecordStore`` backed by Supabase tables (one table per collection)."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        rows = _execute(
            self.client.table(collection).select("*").eq("id", record_id),
            f"get {collection}/{record_id}",
        )
        return rows[0] if rows else None

    def query(self, collection: str, **equals: Any) -> list[dict[str, Any]]:
        builder = self.client.table(collection).select("*")
        for field, value in equals.items():
            builder = builder.eq(field, value)
        return _execute(builder, f"query {collection}")

    def create(self, collection: str, record: dict[str, Any]) -> str:
        rows = _execute(self.client.table(collection).insert(record), f"insert into {collection}")
        if not rows or "id" not in rows[0]:
            raise PersistenceError(f"Supabase insert into {collection} returned no id")
        return str(rows[0]["id"])

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> None:
        rows = _execute(
            self.client.table(collection).update(fields).eq("id", record_id),
            f"update {collection}/{record_id}",
        )
        if not rows:
            raise RecordNotFoundError(collection, record_id)
        logger.debug("Updated %s/%s: %s", collection, record_id, ", ".join(sorted(fields)))
