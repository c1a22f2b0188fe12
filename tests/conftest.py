"""
Shared fixtures for the MediConnect test suite.
"""

import asyncio
from typing import List, Set, Tuple

import pytest

from mediconnect.exceptions import BackendError
from mediconnect.models.account import AuthSession, UserIdentity
from mediconnect.services.doctor_notes import DoctorNotesService
from mediconnect.services.metrics import HealthMetricsService
from mediconnect.services.records import InMemoryRecordStore


class FlakyRecordStore(InMemoryRecordStore):
    """In-memory store that fails chosen (operation, table) pairs.

    `delay` makes every call suspend, so concurrent callers interleave.
    """

    def __init__(self):
        super().__init__()
        self.delay = 0.0
        self.fail_on: Set[Tuple[str, str]] = set()
        self.calls: List[Tuple[str, str]] = []

    async def _enter(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if self.delay:
            await asyncio.sleep(self.delay)
        if (operation, table) in self.fail_on:
            raise BackendError(f"{operation} on {table} failed", 500)

    async def insert(self, table, rows):
        await self._enter("insert", table)
        return await super().insert(table, rows)

    async def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        await self._enter("select", table)
        return await super().select(table, filters, order_by, descending, limit)

    async def update(self, table, values, filters):
        await self._enter("update", table)
        return await super().update(table, values, filters)

    async def delete(self, table, filters):
        await self._enter("delete", table)
        return await super().delete(table, filters)


@pytest.fixture
def store():
    """Fresh in-memory record store."""
    return FlakyRecordStore()


@pytest.fixture
def metrics_service(store):
    return HealthMetricsService(store=store)


@pytest.fixture
def notes_service(store):
    return DoctorNotesService(store=store)


@pytest.fixture
def user():
    return UserIdentity(id="user-1", email="asha@example.com", full_name="Asha Verma")


@pytest.fixture
def session(user):
    return AuthSession(access_token="access-token", user=user)
