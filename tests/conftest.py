"""
Shared fixtures — in-memory cache slots, fast hashing, and async fakes
of the remote table API and identity provider.
"""

from __future__ import annotations

import asyncio
import itertools
from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import pytest
from django.core.cache import caches

from maintenance.errors import RemoteError
from maintenance.events import ChangeBus
from maintenance.remote import SIGNED_IN, SIGNED_OUT, AuthSession, MaintenanceApi
from maintenance.store import MaintenanceStore, RemoteBackend, reset_store
from maintenance.auth import RemoteAuth
from maintenance.time import FixedClock

TODAY = date(2024, 3, 15)

LOCMEM = "django.core.cache.backends.locmem.LocMemCache"
ALIASES = ("default", "maintenance", "maintenance_session")


@pytest.fixture(autouse=True)
def memory_slots(settings):
    settings.CACHES = {
        alias: {"BACKEND": LOCMEM, "LOCATION": f"tests-{alias}", "TIMEOUT": None}
        for alias in ALIASES
    }
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.MAINTENANCE_REMOTE_URL = ""
    settings.MAINTENANCE_REMOTE_KEY = ""
    for alias in ALIASES:
        caches[alias].clear()
    yield
    reset_store()


@pytest.fixture
def clock():
    return FixedClock.on(TODAY)


# ══════════════════════════════════════════════════════════════
# FAKE REMOTE TABLES
# ══════════════════════════════════════════════════════════════

class FakeTables:
    """In-memory stand-in for the REST table client."""

    def __init__(self) -> None:
        self.rows: Dict[str, List[dict]] = defaultdict(list)
        self.calls: List[Tuple[str, str]] = []
        self.failing: Set[Tuple[str, str]] = set()
        self.gate: Optional[asyncio.Event] = None
        self._ids = itertools.count(1)

    def fail_on(self, op: str, table: str) -> None:
        self.failing.add((op, table))

    def writes(self) -> List[Tuple[str, str]]:
        return [c for c in self.calls if c[0] != "select"]

    async def _enter(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        if self.gate is not None and op != "select":
            await self.gate.wait()
        if (op, table) in self.failing:
            raise RemoteError(f"{op} on {table} refused", status_code=500, retryable=True)

    @staticmethod
    def _match(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
        return all(str(row.get(k)) == str(v) for k, v in filters.items())

    async def select(self, table, *, filters=None, order=None, descending=False, single=False):
        await self._enter("select", table)
        found = [dict(r) for r in self.rows[table] if self._match(r, filters or {})]
        if order:
            found.sort(key=lambda r: str(r.get(order) or ""), reverse=descending)
        if single:
            return found[0] if found else None
        return found

    async def insert(self, table, row):
        await self._enter("insert", table)
        stored = dict(row)
        stored.setdefault("id", f"{table}-{next(self._ids)}")
        self.rows[table].append(stored)
        return dict(stored)

    async def update(self, table, row, *, filters):
        await self._enter("update", table)
        for stored in self.rows[table]:
            if self._match(stored, filters):
                stored.update(row)
                return dict(stored)
        return None

    async def delete(self, table, *, filters):
        await self._enter("delete", table)
        self.rows[table] = [r for r in self.rows[table] if not self._match(r, filters)]


class FakeIdentity:
    """Identity provider whose sign-up creates the linked profile row."""

    def __init__(self, tables: FakeTables) -> None:
        self.tables = tables
        self.signups: List[Tuple[str, str, dict]] = []
        self.refuse = False
        self.session: Optional[AuthSession] = None
        self.revoked: List[str] = []
        self._listeners: List[Any] = []

    def on_auth_state_change(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self.session)

    def signed_in_as(self, user_id: str) -> None:
        self.session = AuthSession(access_token=f"tok-{user_id}", user_id=user_id)
        self._emit(SIGNED_IN)

    async def get_session(self):
        return self.session

    async def sign_up(self, email, password, metadata=None):
        self.signups.append((email, password, dict(metadata or {})))
        if self.refuse:
            return None
        user_id = f"auth-{len(self.signups)}"
        self.tables.rows["profiles"].append(
            {"id": user_id, "name": metadata["name"], "role": metadata["role"], "email": email}
        )
        return user_id

    def drop_session(self):
        session, self.session = self.session, None
        if session is not None:
            self._emit(SIGNED_OUT)
        return session

    async def revoke(self, session):
        self.revoked.append(session.access_token)

    async def sign_out(self):
        session = self.drop_session()
        if session is not None:
            await self.revoke(session)


def seed_remote(tables: FakeTables) -> None:
    tables.rows["hotels"] = [
        {"id": "skye", "name": "Skye", "address": "123 Skyline Drive", "total_rooms": 120},
        {"id": "clarence", "name": "The Clarence Hotel", "total_rooms": 85, "color": "#8b5cf6"},
    ]
    tables.rows["profiles"] = [
        {"id": "u-super", "name": "Ana Super", "role": "superadmin", "email": "ana@hotel.com"},
        {"id": "u-admin", "name": "Ben Admin", "role": "admin", "email": "ben@hotel.com"},
        {"id": "u-fix", "name": "Cy Fixer", "role": "handyman"},
    ]
    tables.rows["rooms"] = [
        {"hotel_id": "skye", "number": "101", "floor": 1, "type": "Standard", "status": "available"},
        {"hotel_id": "skye", "number": "205", "floor": 2, "type": "Deluxe", "status": "occupied"},
        {"hotel_id": "clarence", "number": "3", "floor": 1, "type": "Standard", "status": "available"},
    ]
    tables.rows["damages"] = [
        {
            "id": "d-1", "hotel_id": "skye", "room_number": "101", "category": "plumbing",
            "description": "Leaking tap", "status": "completed", "priority": "medium",
            "reported_date": "2024-03-01", "completed_date": "2024-03-02", "cost": "45.50",
        },
        {
            "id": "d-2", "hotel_id": "skye", "room_number": "205", "category": "electrical",
            "description": "Dead socket", "status": "pending", "priority": "high",
            "reported_date": "2024-03-10",
        },
        {
            "id": "d-3", "hotel_id": "clarence", "room_number": "3", "category": "hvac",
            "description": "Noisy AC", "status": "pending", "priority": "low",
            "reported_date": "2024-03-11",
        },
    ]
    tables.rows["preventive_maintenance"] = [
        {
            "id": "p-1", "hotel_id": "skye", "category": "hvac", "title": "Filter swap",
            "frequency": "monthly", "next_due_date": "2024-03-01", "status": "pending",
        },
    ]


@pytest.fixture
def tables():
    t = FakeTables()
    seed_remote(t)
    return t


@pytest.fixture
def identity(tables):
    return FakeIdentity(tables)


@pytest.fixture
def remote_store(tables, identity, clock):
    bus = ChangeBus()
    api = MaintenanceApi(tables)
    backend = RemoteBackend(api, identity, bus=bus)
    return MaintenanceStore(backend, RemoteAuth(identity, api), bus=bus, clock=clock)
