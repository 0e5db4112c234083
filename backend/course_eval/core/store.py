# backend/course_eval/core/store.py
"""
Persistence collaborator over Supabase (PostgREST).

One ``SupabaseStore`` is built in the application lifespan and attached to
``app.state.store``; handlers receive it through ``get_store``. Rows travel
as plain dicts keyed by column name. Missing rows come back as ``None``.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from fastapi import HTTPException, Request
from postgrest.exceptions import APIError
from supabase import Client, create_client

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

# Tables
USERS = "users"
SCHOOLS = "schools"
COURSES = "courses"
SUBJECTS = "subjects"
RATINGS = "ratings"
COMMENTS = "comments"
PERIODS = "periods"
PASSWORD_RESETS = "password_resets"


class StoreError(Exception):
    """Persistence call failed."""


class ConflictError(StoreError):
    """A unique constraint rejected the write."""


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill in the id/created_at columns the database would otherwise default."""
    out = dict(row)
    out.setdefault("id", str(uuid.uuid4()))
    out.setdefault("created_at", utc_now_iso())
    return out


class SupabaseStore:
    def __init__(self, client: Client, page_size: int = 1000):
        self.client = client
        self.page_size = page_size

    @classmethod
    def connect(cls, url: str, key: str) -> "SupabaseStore":
        return cls(create_client(url, key))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _execute(self, query, table: str):
        try:
            return query.execute()
        except APIError as e:
            code = getattr(e, "code", None)
            if code == UNIQUE_VIOLATION:
                raise ConflictError(getattr(e, "message", None) or f"Duplicate row in {table}") from e
            raise StoreError(f"{table}: {getattr(e, 'message', None) or e!r}") from e

    def _filtered(self, query, eq: Optional[Mapping[str, Any]], in_: Optional[Mapping[str, Sequence[Any]]]):
        for col, val in (eq or {}).items():
            query = query.eq(col, val)
        for col, vals in (in_ or {}).items():
            query = query.in_(col, list(vals))
        return query

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def insert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        resp = self._execute(self.client.table(table).insert(new_row(row)), table)
        data = resp.data or []
        if not data:
            raise StoreError(f"{table}: insert returned no row")
        return data[0]

    def insert_many(self, table: str, rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """
        Bulk insert in a single request. PostgREST runs it as one INSERT
        statement, so either every row is stored or none is.
        """
        payload = [new_row(r) for r in rows]
        if not payload:
            return []
        resp = self._execute(self.client.table(table).insert(payload), table)
        return list(resp.data or [])

    def update(self, table: str, entity_id: str, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        resp = self._execute(
            self.client.table(table).update(dict(values)).eq("id", entity_id), table
        )
        data = resp.data or []
        return data[0] if data else None

    def delete(self, table: str, entity_id: str) -> bool:
        resp = self._execute(self.client.table(table).delete().eq("id", entity_id), table)
        return bool(resp.data)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get(self, table: str, entity_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one(table, id=entity_id)

    def find_one(self, table: str, **eq: Any) -> Optional[Dict[str, Any]]:
        query = self._filtered(self.client.table(table).select("*"), eq, None).limit(1)
        rows = self._execute(query, table).data or []
        return rows[0] if rows else None

    def find(
        self,
        table: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        in_: Optional[Mapping[str, Sequence[Any]]] = None,
        order: Optional[str] = None,
        desc: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        """
        Select rows matching the filters. Without a limit, pages through the
        table with a stable ORDER BY so no row is duplicated or missed.
        """
        for vals in (in_ or {}).values():
            if not vals:
                return []

        def page(start: int, end: int):
            q = self._filtered(self.client.table(table).select(columns), eq, in_)
            q = q.order(order or "id", desc=desc)
            return self._execute(q.range(start, end), table).data or []

        if limit is not None:
            return page(offset, offset + limit - 1) if limit > 0 else []

        out: List[Dict[str, Any]] = []
        start = offset
        while True:
            rows = page(start, start + self.page_size - 1)
            out.extend(rows)
            if len(rows) < self.page_size:
                break
            start += self.page_size
        return out

    def count(self, table: str, eq: Optional[Mapping[str, Any]] = None) -> int:
        query = self._filtered(self.client.table(table).select("id", count="exact"), eq, None)
        resp = self._execute(query.range(0, 0), table)
        return int(getattr(resp, "count", 0) or 0)


def get_store(request: Request):
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Store not available on app state.")
    return store
