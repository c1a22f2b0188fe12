"""
Record Store - Access to the managed backend's relational tables.

Two implementations share one interface:

- RestRecordStore talks to the backend's REST layer (PostgREST dialect:
  ``/rest/v1/<table>?col=eq.value&order=col.desc&limit=n``).
- InMemoryRecordStore keeps rows in process, for development and tests.

Both raise BackendError on failure; callers decide how to surface it.
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import httpx
from loguru import logger

from mediconnect.config import Settings, get_settings
from mediconnect.exceptions import BackendError
from mediconnect.models.account import AuthSession

# Table names in the managed backend
PATIENTS_TABLE = "patients"
HEALTH_METRICS_TABLE = "health_metrics"
ALERTS_TABLE = "alerts"
DOCTOR_NOTES_TABLE = "doctor_notes"

# Column defaults the backend fills in on insert
TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    HEALTH_METRICS_TABLE: {"recorded_at": None},
    ALERTS_TABLE: {"is_resolved": False},
    PATIENTS_TABLE: {"updated_at": None},
    DOCTOR_NOTES_TABLE: {"updated_at": None},
}


class RecordStore(ABC):
    """
    Table-level create/read/update/delete with equality filters,
    single-column ordering and a row limit.
    """

    @abstractmethod
    async def insert(self, table: str, rows: List[dict]) -> List[dict]:
        """Insert rows and return them as stored (ids and timestamps filled in)."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[dict]:
        """Return rows matching every equality filter."""

    @abstractmethod
    async def update(self, table: str, values: dict, filters: Dict[str, Any]) -> List[dict]:
        """Update matching rows and return them."""

    @abstractmethod
    async def delete(self, table: str, filters: Dict[str, Any]) -> List[dict]:
        """Delete matching rows and return them."""

    async def insert_one(self, table: str, row: dict) -> dict:
        rows = await self.insert(table, [row])
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        return rows[0]

    async def select_one(self, table: str, filters: Dict[str, Any]) -> Optional[dict]:
        rows = await self.select(table, filters, limit=1)
        return rows[0] if rows else None

    async def close(self) -> None:
        """Release any held resources."""


# ============================================================================
# In-Memory Store
# ============================================================================


class InMemoryRecordStore(RecordStore):
    """
    In-process record store with lock-protected writes.

    Mirrors the backend's behaviour closely enough for the flows: ids and
    timestamps are assigned on insert, column defaults are applied, and
    returned rows are copies so callers cannot mutate stored state.
    """

    def __init__(self):
        self._tables: Dict[str, List[dict]] = {}
        self._lock = asyncio.Lock()

    # Public accessor for testing
    @property
    def tables(self) -> Dict[str, List[dict]]:
        """Access to the raw table rows."""
        return self._tables

    def clear(self) -> None:
        self._tables.clear()

    async def insert(self, table: str, rows: List[dict]) -> List[dict]:
        async with self._lock:
            now = datetime.now(timezone.utc)
            stored = []
            for row in rows:
                record = {"id": str(uuid4()), "created_at": now}
                for column, default in TABLE_DEFAULTS.get(table, {}).items():
                    record[column] = now if default is None else default
                record.update({k: v for k, v in row.items() if v is not None})
                stored.append(record)
            self._tables.setdefault(table, []).extend(stored)
            return copy.deepcopy(stored)

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[dict]:
        rows = [row for row in self._tables.get(table, []) if _matches(row, filters)]
        if order_by:
            # Insertion order breaks ties, so equal timestamps still sort newest-first
            ordered = sorted(
                enumerate(rows),
                key=lambda pair: (pair[1].get(order_by), pair[0]),
                reverse=descending,
            )
            rows = [row for _, row in ordered]
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    async def update(self, table: str, values: dict, filters: Dict[str, Any]) -> List[dict]:
        async with self._lock:
            updated = []
            for row in self._tables.get(table, []):
                if _matches(row, filters):
                    row.update(values)
                    if "updated_at" in row:
                        row["updated_at"] = datetime.now(timezone.utc)
                    updated.append(row)
            return copy.deepcopy(updated)

    async def delete(self, table: str, filters: Dict[str, Any]) -> List[dict]:
        async with self._lock:
            rows = self._tables.get(table, [])
            removed = [row for row in rows if _matches(row, filters)]
            self._tables[table] = [row for row in rows if not _matches(row, filters)]
            return removed


def _matches(row: dict, filters: Optional[Dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(row.get(column) == value for column, value in filters.items())


# ============================================================================
# REST Store
# ============================================================================


class RestRecordStore(RecordStore):
    """
    Async client for the backend's REST table API.

    Requests carry the project's anon key and, when a session is given,
    the user's bearer token so row-level security applies.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[AuthSession] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._session = session
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.backend_url,
                timeout=httpx.Timeout(self.settings.backend_timeout),
                limits=httpx.Limits(
                    max_connections=self.settings.connection_pool_size,
                    max_keepalive_connections=self.settings.connection_pool_size // 2,
                ),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _headers(self, prefer_representation: bool = False) -> Dict[str, str]:
        token = self._session.access_token if self._session else self.settings.backend_anon_key
        headers = {
            "apikey": self.settings.backend_anon_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if prefer_representation:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(self, method: str, table: str, **kwargs) -> List[dict]:
        client = await self._get_client()
        try:
            response = await client.request(method, f"/rest/v1/{table}", **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error on {method} {table}: {e}")
            raise BackendError(_error_message(e.response), e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"Request error on {method} {table}: {e}")
            raise BackendError("Network error") from e

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    async def insert(self, table: str, rows: List[dict]) -> List[dict]:
        return await self._request(
            "POST",
            table,
            params={"select": "*"},
            json=[_jsonable(row) for row in rows],
            headers=self._headers(prefer_representation=True),
        )

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[dict]:
        params = {"select": "*", **_filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._request("GET", table, params=params, headers=self._headers())

    async def update(self, table: str, values: dict, filters: Dict[str, Any]) -> List[dict]:
        return await self._request(
            "PATCH",
            table,
            params=_filter_params(filters),
            json=_jsonable(values),
            headers=self._headers(prefer_representation=True),
        )

    async def delete(self, table: str, filters: Dict[str, Any]) -> List[dict]:
        return await self._request(
            "DELETE",
            table,
            params=_filter_params(filters),
            headers=self._headers(prefer_representation=True),
        )


def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
    params = {}
    for column, value in (filters or {}).items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[column] = f"eq.{value}"
    return params


def _jsonable(row: dict) -> dict:
    return {k: (v.isoformat() if isinstance(v, datetime) else v) for k, v in row.items()}


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "API request failed"
    if isinstance(payload, dict) and payload.get("message"):
        return payload["message"]
    return "API request failed"


# Singleton in-memory store shared by the process
_memory_store: Optional[InMemoryRecordStore] = None


def get_memory_store() -> InMemoryRecordStore:
    """Get the singleton in-memory record store."""
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryRecordStore()
    return _memory_store


def get_record_store(session: Optional[AuthSession] = None) -> RecordStore:
    """
    Get the record store selected by the RECORD_STORE setting.

    The REST store is created per session so every request carries that
    user's token; the in-memory store is shared.
    """
    settings = get_settings()
    if settings.record_store == "rest":
        return RestRecordStore(settings=settings, session=session)
    return get_memory_store()
