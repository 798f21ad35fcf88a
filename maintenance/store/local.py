"""
Hotel Maintenance Store — Local Backend
==========================================
Every collection is one persisted JSON slot. Reads load the whole
collection and filter in process; writes load, change by id and write
the whole collection back. Synchronous and immediately consistent:
there is no cache layer in this mode.

A record that no longer decodes is skipped with a warning; the next
write of that collection drops it for good.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from typing import Any, Callable, List, Mapping, Optional, Tuple, Type, TypeVar

from maintenance.auth.passwords import hash_password
from maintenance.conf import BackendMode
from maintenance.entities import (
    Damage,
    Hotel,
    PreventiveTask,
    Room,
    User,
    build,
    merge,
)
from maintenance.entities.codec import from_record, to_record
from maintenance.events import ChangeBus
from maintenance.storage import PERSISTENT_ALIAS, SESSION_ALIAS, KeyValueStore, StorageKeys
from maintenance.store.seed import (
    seed_damages,
    seed_hotels,
    seed_preventive,
    seed_rooms,
    seed_users,
)
from maintenance.store.ports import StoragePort
from maintenance.time import Clock, get_default_clock

logger = logging.getLogger("maintenance.store")

T = TypeVar("T")

ROOM_IDENTITY = ("hotel_id", "number")


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class LocalBackend(StoragePort):
    mode = BackendMode.LOCAL

    def __init__(
        self,
        kv: Optional[KeyValueStore] = None,
        session_kv: Optional[KeyValueStore] = None,
        bus: Optional[ChangeBus] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._kv = kv or KeyValueStore(PERSISTENT_ALIAS)
        self._session_kv = session_kv or KeyValueStore(SESSION_ALIAS)
        self._bus = bus or ChangeBus()
        self._clock = clock or get_default_clock()

    @property
    def kv(self) -> KeyValueStore:
        return self._kv

    # ══════════════════════════════════════════════════════════
    # SLOT I/O
    # ══════════════════════════════════════════════════════════

    def _load(self, key: str, cls: Type[T]) -> List[T]:
        items: List[T] = []
        for record in self._kv.read_list(key):
            try:
                items.append(from_record(cls, record))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning(f"Skipping unreadable {cls.__name__} record in '{key}': {exc}")
        return items

    def _save(self, key: str, items: List[Any]) -> None:
        self._kv.write(key, [to_record(item) for item in items])

    def _seeds(self) -> List[Tuple[str, Callable[[], List[Any]]]]:
        today = self._clock.today()
        return [
            (StorageKeys.DAMAGES, lambda: seed_damages(today)),
            (StorageKeys.ROOMS, seed_rooms),
            (StorageKeys.USERS, seed_users),
            (StorageKeys.HOTELS, seed_hotels),
            (StorageKeys.PREVENTIVE, seed_preventive),
        ]

    async def initialize(self) -> None:
        for key, factory in self._seeds():
            if not self._kv.has(key):
                logger.info(f"Seeding local slot '{key}'")
                self._save(key, factory())

    def reset_data(self) -> bool:
        for key, factory in self._seeds():
            self._save(key, factory())
        logger.info("Local data reset to seed")
        return True

    # ── generic collection helpers ────────────────────────────

    def _add(self, key: str, cls: Type[T], values: Mapping[str, Any], **identity: Any) -> T:
        items = self._load(key, cls)
        record = build(cls, values, **identity)
        items.append(record)
        self._save(key, items)
        return record

    def _update(
        self,
        key: str,
        cls: Type[T],
        match: Callable[[T], bool],
        updates: Mapping[str, Any],
        identity: Tuple[str, ...] = ("id",),
    ) -> Optional[T]:
        items = self._load(key, cls)
        for i, item in enumerate(items):
            if match(item):
                items[i] = merge(item, updates, identity=identity)
                self._save(key, items)
                return items[i]
        return None

    def _delete(self, key: str, cls: Type[T], match: Callable[[T], bool]) -> bool:
        items = self._load(key, cls)
        kept = [item for item in items if not match(item)]
        if len(kept) == len(items):
            return False
        self._save(key, kept)
        return True

    # ══════════════════════════════════════════════════════════
    # HOTELS
    # ══════════════════════════════════════════════════════════

    def list_hotels(self) -> List[Hotel]:
        return self._load(StorageKeys.HOTELS, Hotel)

    def add_hotel(self, values: Mapping[str, Any]) -> Hotel:
        return self._add(StorageKeys.HOTELS, Hotel, values, id=new_id("hotel"))

    def update_hotel(self, hotel_id: str, updates: Mapping[str, Any]) -> Optional[Hotel]:
        updated = self._update(StorageKeys.HOTELS, Hotel, lambda h: h.id == hotel_id, updates)
        current = self.get_current_hotel()
        if updated is not None and current is not None and current.id == hotel_id:
            self._kv.write(StorageKeys.CURRENT_HOTEL, to_record(updated))
        return updated

    def delete_hotel(self, hotel_id: str) -> bool:
        if not self._delete(StorageKeys.HOTELS, Hotel, lambda h: h.id == hotel_id):
            return False

        def owned(record: Any) -> bool:
            return record.hotel_id == hotel_id

        self._delete(StorageKeys.DAMAGES, Damage, owned)
        self._delete(StorageKeys.ROOMS, Room, owned)
        self._delete(StorageKeys.PREVENTIVE, PreventiveTask, owned)
        logger.info(f"Deleted hotel {hotel_id} and its damages, rooms and preventive tasks")

        current = self.get_current_hotel()
        if current is not None and current.id == hotel_id:
            self._kv.delete(StorageKeys.CURRENT_HOTEL)
            self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)
            self._bus.notify()
        return True

    # ══════════════════════════════════════════════════════════
    # USERS
    # ══════════════════════════════════════════════════════════

    def list_users(self) -> List[User]:
        return self._load(StorageKeys.USERS, User)

    def add_user(self, values: Mapping[str, Any], password: Optional[str] = None) -> User:
        return self._add(
            StorageKeys.USERS, User, values,
            id=new_id("user"),
            password_hash=hash_password(password) if password else None,
        )

    def update_user(
        self,
        user_id: str,
        updates: Mapping[str, Any],
        password: Optional[str] = None,
    ) -> Optional[User]:
        updates = dict(updates)
        if password:
            updates["password_hash"] = hash_password(password)
        updated = self._update(StorageKeys.USERS, User, lambda u: u.id == user_id, updates)
        current = self.get_current_user()
        if updated is not None and current is not None and current.id == user_id:
            self._write_current_user(updated)
        return updated

    def delete_user(self, user_id: str) -> bool:
        if not self._delete(StorageKeys.USERS, User, lambda u: u.id == user_id):
            return False
        current = self.get_current_user()
        if current is not None and current.id == user_id:
            self._kv.delete(StorageKeys.CURRENT_USER)
            self._bus.notify()
        return True

    # ══════════════════════════════════════════════════════════
    # SESSION SCOPE
    # ══════════════════════════════════════════════════════════

    def _read_current(self, key: str, cls: Type[T]) -> Optional[T]:
        record = self._kv.read(key)
        if not isinstance(record, dict):
            return None
        try:
            return from_record(cls, record)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Discarding unreadable '{key}': {exc}")
            self._kv.delete(key)
            return None

    def _write_current_user(self, user: User) -> None:
        self._kv.write(
            StorageKeys.CURRENT_USER,
            to_record(dataclasses.replace(user, password_hash=None)),
        )

    def get_current_user(self) -> Optional[User]:
        return self._read_current(StorageKeys.CURRENT_USER, User)

    def set_current_user(self, user: Optional[User]) -> None:
        if user is None:
            self._kv.delete(StorageKeys.CURRENT_USER)
        else:
            self._write_current_user(user)
        self._bus.notify()

    def get_current_hotel(self) -> Optional[Hotel]:
        return self._read_current(StorageKeys.CURRENT_HOTEL, Hotel)

    async def set_current_hotel(self, hotel: Optional[Hotel]) -> None:
        if hotel is None:
            self._kv.delete(StorageKeys.CURRENT_HOTEL)
            self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)
        else:
            self._kv.write(StorageKeys.CURRENT_HOTEL, to_record(hotel))
            self._session_kv.write(StorageKeys.CURRENT_HOTEL_ID, hotel.id)
        self._bus.notify()

    def logout(self) -> None:
        self._kv.delete_many(
            [StorageKeys.CURRENT_USER, StorageKeys.CURRENT_HOTEL, StorageKeys.SESSION]
        )
        self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)
        self._bus.notify()

    # ══════════════════════════════════════════════════════════
    # DAMAGES
    # ══════════════════════════════════════════════════════════

    def list_damages(self, hotel_id: Optional[str] = None) -> List[Damage]:
        damages = self._load(StorageKeys.DAMAGES, Damage)
        if hotel_id is None:
            return damages
        return [d for d in damages if d.hotel_id == hotel_id]

    def find_damage(self, damage_id: str) -> Optional[Damage]:
        return next((d for d in self.list_damages() if d.id == damage_id), None)

    def add_damage(self, values: Mapping[str, Any]) -> Damage:
        return self._add(StorageKeys.DAMAGES, Damage, values, id=new_id("damage"))

    def update_damage(self, damage_id: str, updates: Mapping[str, Any]) -> Optional[Damage]:
        return self._update(StorageKeys.DAMAGES, Damage, lambda d: d.id == damage_id, updates)

    def delete_damage(self, damage_id: str) -> bool:
        return self._delete(StorageKeys.DAMAGES, Damage, lambda d: d.id == damage_id)

    # ══════════════════════════════════════════════════════════
    # ROOMS
    # ══════════════════════════════════════════════════════════

    def list_rooms(self, hotel_id: Optional[str] = None) -> List[Room]:
        rooms = self._load(StorageKeys.ROOMS, Room)
        if hotel_id is None:
            return rooms
        return [r for r in rooms if r.hotel_id == hotel_id]

    def update_room(
        self, hotel_id: str, number: str, updates: Mapping[str, Any]
    ) -> Optional[Room]:
        return self._update(
            StorageKeys.ROOMS, Room,
            lambda r: r.key == (hotel_id, str(number)),
            updates,
            identity=ROOM_IDENTITY,
        )

    # ══════════════════════════════════════════════════════════
    # PREVENTIVE MAINTENANCE
    # ══════════════════════════════════════════════════════════

    def list_preventive(self, hotel_id: Optional[str] = None) -> List[PreventiveTask]:
        tasks = self._load(StorageKeys.PREVENTIVE, PreventiveTask)
        if hotel_id is None:
            return tasks
        return [t for t in tasks if t.hotel_id == hotel_id]

    def find_preventive(self, task_id: str) -> Optional[PreventiveTask]:
        return next((t for t in self.list_preventive() if t.id == task_id), None)

    def add_preventive(self, values: Mapping[str, Any]) -> PreventiveTask:
        return self._add(StorageKeys.PREVENTIVE, PreventiveTask, values, id=new_id("preventive"))

    def update_preventive(
        self, task_id: str, updates: Mapping[str, Any]
    ) -> Optional[PreventiveTask]:
        return self._update(
            StorageKeys.PREVENTIVE, PreventiveTask, lambda t: t.id == task_id, updates
        )

    def delete_preventive(self, task_id: str) -> bool:
        return self._delete(StorageKeys.PREVENTIVE, PreventiveTask, lambda t: t.id == task_id)
