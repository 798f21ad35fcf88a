"""
Hotel Maintenance Store — Facade
===================================
The single surface presentation code talks to. One backend (local
slots or remote caches) is chosen when the store is built and every
operation delegates to it.

Business rules live here, above the backend:
- authorization for deletes (None / False, never an exception)
- damage completion stamping and last-edited stamping
- preventive recurrence on completion and effective status on read
- statistics and export

Doctrine:
- Not-found → None / False
- Insufficient role → False, nothing mutated
- Remote read failures raise RemoteError from initialize_data() and
  set_current_hotel()
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from maintenance.auth import AuthAdapter, LocalAuth, RemoteAuth
from maintenance.conf import BackendMode, RemoteSettings
from maintenance.entities import (
    CategoryStats,
    Damage,
    DateRange,
    Hotel,
    MaintenanceStats,
    MonthlyStats,
    PreventiveTask,
    Room,
    User,
)
from maintenance.events import ChangeBus, Listener
from maintenance.remote import IdentityProvider, MaintenanceApi, RemoteClient
from maintenance.storage import PERSISTENT_ALIAS, SESSION_ALIAS, KeyValueStore
from maintenance.store import stats
from maintenance.store.damages import (
    damage_update_values,
    filter_by_date_range,
    new_damage_values,
)
from maintenance.store.local import LocalBackend
from maintenance.store.ports import StoragePort
from maintenance.store.preventive import completion_updates, with_effective_status
from maintenance.store.remote import RemoteBackend
from maintenance.time import Clock, get_default_clock

logger = logging.getLogger("maintenance.store")


# ══════════════════════════════════════════════════════════════
# AUTHORIZATION
# ══════════════════════════════════════════════════════════════

def can_delete_user(actor: Optional[User]) -> bool:
    """Only a superadmin deletes users."""
    return actor is not None and actor.is_superadmin


def can_manage_users(actor: Optional[User]) -> bool:
    return actor is not None and actor.is_admin


def can_delete_hotel(actor: Optional[User]) -> bool:
    return actor is not None and actor.is_admin


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

class MaintenanceStore:
    """Data access and session scope for the maintenance tracker."""

    def __init__(
        self,
        backend: StoragePort,
        auth: AuthAdapter,
        *,
        bus: ChangeBus,
        clock: Optional[Clock] = None,
        client: Optional[RemoteClient] = None,
    ) -> None:
        self._backend = backend
        self._auth = auth
        self._bus = bus
        self._clock = clock or get_default_clock()
        self._client = client

    @property
    def mode(self) -> BackendMode:
        return self._backend.mode

    @property
    def backend(self) -> StoragePort:
        return self._backend

    @property
    def auth(self) -> AuthAdapter:
        return self._auth

    @property
    def bus(self) -> ChangeBus:
        return self._bus

    @property
    def clock(self) -> Clock:
        return self._clock

    async def initialize_data(self) -> None:
        await self._backend.initialize()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        return self._bus.subscribe(callback)

    # ── hotels ────────────────────────────────────────────────

    def get_hotels(self) -> List[Hotel]:
        return self._backend.list_hotels()

    def get_hotel_by_id(self, hotel_id: str) -> Optional[Hotel]:
        return next((h for h in self.get_hotels() if h.id == hotel_id), None)

    def add_hotel(self, data: Mapping[str, Any]) -> Hotel:
        return self._backend.add_hotel(data)

    def update_hotel(self, hotel_id: str, updates: Mapping[str, Any]) -> Optional[Hotel]:
        return self._backend.update_hotel(hotel_id, updates)

    def delete_hotel(self, hotel_id: str, acting_user: Optional[User]) -> bool:
        if not can_delete_hotel(acting_user):
            logger.info(f"Hotel {hotel_id} not deleted: insufficient role")
            return False
        return self._backend.delete_hotel(hotel_id)

    # ── users ─────────────────────────────────────────────────

    def get_users(self) -> List[User]:
        return self._backend.list_users()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.get_users() if u.id == user_id), None)

    def add_user(self, data: Mapping[str, Any]) -> User:
        """`data` may carry a plaintext "password"; it is never stored as given."""
        values = dict(data)
        password = values.pop("password", None)
        return self._backend.add_user(values, password=password)

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        values = dict(updates)
        password = values.pop("password", None)
        return self._backend.update_user(user_id, values, password=password)

    def delete_user(self, user_id: str, acting_user: Optional[User]) -> bool:
        if not can_delete_user(acting_user):
            logger.info(f"User {user_id} not deleted: insufficient role")
            return False
        return self._backend.delete_user(user_id)

    can_delete_user = staticmethod(can_delete_user)
    can_manage_users = staticmethod(can_manage_users)
    can_delete_hotel = staticmethod(can_delete_hotel)

    # ── session scope ─────────────────────────────────────────

    def get_current_user(self) -> Optional[User]:
        return self._backend.get_current_user()

    def set_current_user(self, user: Optional[User]) -> None:
        self._backend.set_current_user(user)

    def get_current_hotel(self) -> Optional[Hotel]:
        return self._backend.get_current_hotel()

    async def set_current_hotel(self, hotel: Optional[Hotel]) -> None:
        await self._backend.set_current_hotel(hotel)

    def logout(self) -> None:
        """Drop the auth session, every session selection and cache."""
        self._backend.logout()
        self._auth.clear_session()
        logger.info("Session cleared")

    # ── damages ───────────────────────────────────────────────

    def get_damages(
        self,
        hotel_id: Optional[str] = None,
        date_range: Optional[DateRange] = None,
    ) -> List[Damage]:
        return filter_by_date_range(self._backend.list_damages(hotel_id), date_range)

    def add_damage(self, data: Mapping[str, Any]) -> Damage:
        return self._backend.add_damage(new_damage_values(data, self._clock.today()))

    def update_damage(self, damage_id: str, updates: Mapping[str, Any]) -> Optional[Damage]:
        existing = self._backend.find_damage(damage_id)
        if existing is None:
            return None
        values = damage_update_values(
            existing, updates, self._clock.today(), self._clock.now_utc()
        )
        return self._backend.update_damage(damage_id, values)

    def delete_damage(self, damage_id: str) -> bool:
        return self._backend.delete_damage(damage_id)

    # ── rooms ─────────────────────────────────────────────────

    def get_rooms(self, hotel_id: Optional[str] = None) -> List[Room]:
        return self._backend.list_rooms(hotel_id)

    def update_room(
        self, hotel_id: str, number: str, updates: Mapping[str, Any]
    ) -> Optional[Room]:
        return self._backend.update_room(hotel_id, number, updates)

    # ── preventive maintenance ────────────────────────────────

    def get_preventive_maintenance(
        self,
        hotel_id: Optional[str] = None,
        room_number: Optional[str] = None,
    ) -> List[PreventiveTask]:
        """Tasks with their effective status for today. Nothing is written back."""
        today = self._clock.today()
        tasks = self._backend.list_preventive(hotel_id)
        if room_number is not None:
            tasks = [t for t in tasks if t.room_number == str(room_number)]
        return [with_effective_status(t, today) for t in tasks]

    def add_preventive_maintenance(self, data: Mapping[str, Any]) -> PreventiveTask:
        return self._backend.add_preventive(data)

    def update_preventive_maintenance(
        self, task_id: str, updates: Mapping[str, Any]
    ) -> Optional[PreventiveTask]:
        existing = self._backend.find_preventive(task_id)
        if existing is None:
            return None
        today = self._clock.today()
        updated = self._backend.update_preventive(
            task_id, completion_updates(existing, updates, today)
        )
        return with_effective_status(updated, today) if updated is not None else None

    def delete_preventive_maintenance(self, task_id: str) -> bool:
        return self._backend.delete_preventive(task_id)

    # ── statistics ────────────────────────────────────────────

    def get_maintenance_stats(
        self, hotel_id: str, date_range: Optional[DateRange] = None
    ) -> MaintenanceStats:
        return stats.maintenance_stats(
            self.get_damages(hotel_id, date_range), self._clock.today()
        )

    def get_category_stats(
        self, hotel_id: str, date_range: Optional[DateRange] = None
    ) -> List[CategoryStats]:
        return stats.category_stats(self.get_damages(hotel_id, date_range))

    def get_monthly_stats(
        self, hotel_id: str, date_range: Optional[DateRange] = None
    ) -> List[MonthlyStats]:
        return stats.monthly_stats(
            self.get_damages(hotel_id, date_range), self._clock.today(), date_range
        )

    # ── export / reset ────────────────────────────────────────

    def export_data(self, hotel_id: str) -> Dict[str, Any]:
        """Everything the CSV / PDF exporters read for one hotel."""
        return {
            "damages": self.get_damages(hotel_id),
            "rooms": self.get_rooms(hotel_id),
            "stats": self.get_maintenance_stats(hotel_id),
            "category_stats": self.get_category_stats(hotel_id),
            "monthly_stats": self.get_monthly_stats(hotel_id),
        }

    def reset_data(self) -> bool:
        return self._backend.reset_data()

    # ── lifecycle ─────────────────────────────────────────────

    async def drain(self) -> None:
        await self._backend.drain()

    async def aclose(self) -> None:
        await self.drain()
        if isinstance(self._auth, RemoteAuth):
            self._auth.close()
        if self._client is not None:
            await self._client.aclose()


# ══════════════════════════════════════════════════════════════
# CONSTRUCTION
# ══════════════════════════════════════════════════════════════

def build_store(
    remote: Optional[RemoteSettings] = None,
    *,
    clock: Optional[Clock] = None,
    transport: Any = None,
) -> MaintenanceStore:
    """
    Pick the backend once: remote when both URL and key are set,
    local persistence otherwise.
    """
    remote = remote or RemoteSettings.from_django()
    clock = clock or get_default_clock()
    bus = ChangeBus()
    session_kv = KeyValueStore(SESSION_ALIAS)

    if remote.is_configured:
        client = RemoteClient.from_settings(remote, transport=transport)
        api = MaintenanceApi(client)
        identity = IdentityProvider(client)
        backend: StoragePort = RemoteBackend(api, identity, session_kv=session_kv, bus=bus)
        auth: AuthAdapter = RemoteAuth(identity, api)
        logger.info(f"Store using remote backend at {remote.url}")
        return MaintenanceStore(backend, auth, bus=bus, clock=clock, client=client)

    kv = KeyValueStore(PERSISTENT_ALIAS)
    local = LocalBackend(kv, session_kv, bus=bus, clock=clock)
    auth = LocalAuth(kv, local.list_users, clock=clock)
    logger.warning("Remote backend not configured; store using local persistence")
    return MaintenanceStore(local, auth, bus=bus, clock=clock)


_store: Optional[MaintenanceStore] = None
_store_lock = threading.Lock()


def get_store() -> MaintenanceStore:
    """Process-wide store, built on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = build_store()
        return _store


def reset_store() -> None:
    """Forget the process-wide store (testing only)."""
    global _store
    with _store_lock:
        _store = None
