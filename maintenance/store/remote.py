"""
Hotel Maintenance Store — Remote Backend
===========================================
In-memory caches mirror the remote tables:

    hotels       flat list
    users        flat list (profiles)
    damages      hotel id → list
    rooms        hotel id → list
    preventive   hotel id → list

Only the selected hotel's buckets are loaded. Reads never touch the
network.

Write protocol (optimistic):
1. apply the change to the cache and return at once (adds carry a
   provisional "<kind>-temp-…" id)
2. issue the remote write as a background task
3. success → swap the provisional / optimistic record for the
   authoritative one, notify
4. failure → log, roll the cache back to its state before the call,
   notify. An insert or update that comes back without a row is a
   failure too.

Provisional records may be edited or deleted before their insert lands.
Such writes wait for the insert and go out against the real id; if the
insert fails, an edit fails with it and a delete has nothing left to do.
An edited provisional record keeps its provisional id in the cache until
the edit itself reconciles.

Writes must be issued from inside a running event loop. drain() waits
for every background write still in flight.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Tuple

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
from maintenance.errors import RemoteError
from maintenance.events import ChangeBus
from maintenance.remote import IdentityProvider, MaintenanceApi
from maintenance.storage import SESSION_ALIAS, KeyValueStore, StorageKeys
from maintenance.store.ports import StoragePort

logger = logging.getLogger("maintenance.store")

DEFAULT_USER_PASSWORD = "changeme123"
DEFAULT_EMAIL_DOMAIN = "hotel.local"

ROOM_IDENTITY = ("hotel_id", "number")


def temp_id(kind: str) -> str:
    return f"{kind}-temp-{uuid.uuid4().hex[:12]}"


def default_email(name: str) -> str:
    return f"{''.join(name.split()).lower()}@{DEFAULT_EMAIL_DOMAIN}"


def _payload(record: Any, exclude: Tuple[str, ...] = ("id",)) -> Dict[str, Any]:
    """All field values of a record, minus store-assigned identity."""
    return {
        f.name: getattr(record, f.name)
        for f in dataclasses.fields(record)
        if f.name not in exclude
    }


def _without(updates: Mapping[str, Any], keys: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: v for k, v in updates.items() if k not in keys}


def _index_of(items: Optional[List[Any]], record: Any) -> int:
    """Position of this exact object, -1 if it is gone."""
    if items is None:
        return -1
    for i, item in enumerate(items):
        if item is record:
            return i
    return -1


def _swap(items: Optional[List[Any]], old: Any, new: Any) -> bool:
    i = _index_of(items, old)
    if i < 0 or new is None:
        return False
    items[i] = new
    return True


def _discard_id(items: Optional[List[Any]], record_id: str) -> None:
    """Drop whatever version of the record the cache holds."""
    if items is None:
        return
    items[:] = [item for item in items if item.id != record_id]


def _resolve(future: "asyncio.Future[Optional[str]]", real_id: Optional[str]) -> None:
    if not future.done():
        future.set_result(real_id)


class RemoteBackend(StoragePort):
    mode = BackendMode.REMOTE

    def __init__(
        self,
        api: MaintenanceApi,
        identity: IdentityProvider,
        session_kv: Optional[KeyValueStore] = None,
        bus: Optional[ChangeBus] = None,
    ) -> None:
        self._api = api
        self._identity = identity
        self._session_kv = session_kv or KeyValueStore(SESSION_ALIAS)
        self._bus = bus or ChangeBus()

        self._hotels: List[Hotel] = []
        self._users: List[User] = []
        self._damages: Dict[str, List[Damage]] = {}
        self._rooms: Dict[str, List[Room]] = {}
        self._preventive: Dict[str, List[PreventiveTask]] = {}
        self._current_user: Optional[User] = None
        self._current_hotel: Optional[Hotel] = None

        self._pending: Set[asyncio.Task] = set()
        # provisional id → real id once its insert lands (None if it failed)
        self._created: Dict[str, "asyncio.Future[Optional[str]]"] = {}

    # ══════════════════════════════════════════════════════════
    # BACKGROUND RECONCILIATION
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def _require_loop() -> asyncio.AbstractEventLoop:
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise RuntimeError(
                "Remote writes must be issued from inside a running event loop."
            ) from exc

    def _spawn(
        self,
        loop: asyncio.AbstractEventLoop,
        call: Awaitable[Any],
        *,
        apply: Callable[[Any], None],
        rollback: Callable[[], None],
        what: str,
        returns_row: bool = False,
    ) -> None:
        task = loop.create_task(self._reconcile(call, apply, rollback, what, returns_row))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _reconcile(
        self,
        call: Awaitable[Any],
        apply: Callable[[Any], None],
        rollback: Callable[[], None],
        what: str,
        returns_row: bool,
    ) -> None:
        try:
            result = await call
        except Exception:
            logger.error(f"Remote {what} failed; rolling back", exc_info=True)
            rollback()
            self._bus.notify()
            return
        if returns_row and result is None:
            logger.error(f"Remote {what} matched no row; rolling back")
            rollback()
            self._bus.notify()
            return
        apply(result)
        logger.debug(f"Reconciled {what}")
        self._bus.notify()

    # ── provisional records ───────────────────────────────────

    def _track_insert(
        self, loop: asyncio.AbstractEventLoop, provisional_id: str
    ) -> "asyncio.Future[Optional[str]]":
        future = loop.create_future()
        self._created[provisional_id] = future
        return future

    def _against_real_id(
        self,
        record_id: str,
        send: Callable[[str], Awaitable[Any]],
        *,
        gone_ok: bool = False,
    ) -> Awaitable[Any]:
        """The remote call for a record, held back until its insert lands."""
        created = self._created.get(record_id)
        if created is None:
            return send(record_id)
        return self._after_insert(record_id, created, send, gone_ok)

    @staticmethod
    async def _after_insert(
        record_id: str,
        created: "asyncio.Future[Optional[str]]",
        send: Callable[[str], Awaitable[Any]],
        gone_ok: bool,
    ) -> Any:
        real_id = await created
        if real_id is None:
            if gone_ok:
                logger.info(f"{record_id} was never created remotely; nothing to do")
                return None
            raise RemoteError(f"{record_id} was never created remotely")
        return await send(real_id)

    def _settled(self, record: Any) -> Any:
        """The record under its real id when its insert has already landed."""
        created = self._created.get(getattr(record, "id", None))
        if created is None or not created.done() or created.cancelled():
            return record
        if created.result() is None:
            return record
        return dataclasses.replace(record, id=created.result())

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ══════════════════════════════════════════════════════════
    # LOADING
    # ══════════════════════════════════════════════════════════

    def _evict_buckets(self) -> None:
        self._damages = {}
        self._rooms = {}
        self._preventive = {}

    async def _load_hotel(self, hotel_id: str) -> None:
        damages, rooms, preventive = await asyncio.gather(
            self._api.fetch_damages(hotel_id),
            self._api.fetch_rooms(hotel_id),
            self._api.fetch_preventive(hotel_id),
        )
        self._damages[hotel_id] = damages
        self._rooms[hotel_id] = rooms
        self._preventive[hotel_id] = preventive

    async def initialize(self) -> None:
        hotel_id = self._session_kv.read(StorageKeys.CURRENT_HOTEL_ID)
        try:
            hotels, users = await asyncio.gather(
                self._api.fetch_hotels(), self._api.fetch_profiles()
            )
            current = await self._api.fetch_hotel(hotel_id) if hotel_id else None
            self._evict_buckets()
            if current is not None:
                await self._load_hotel(current.id)
        except RemoteError:
            logger.error("Remote initialization failed", exc_info=True)
            self._hotels = []
            self._users = []
            self._evict_buckets()
            raise
        self._hotels = hotels
        self._users = users
        self._current_hotel = current
        logger.info(
            f"Loaded {len(hotels)} hotel(s), {len(users)} profile(s)"
            + (f", hotel {current.id} selected" if current else "")
        )
        self._bus.notify()

    def reset_data(self) -> bool:
        logger.warning("reset_data is only available with local persistence")
        return False

    # ══════════════════════════════════════════════════════════
    # HOTELS
    # ══════════════════════════════════════════════════════════

    def list_hotels(self) -> List[Hotel]:
        return list(self._hotels)

    def add_hotel(self, values: Mapping[str, Any]) -> Hotel:
        loop = self._require_loop()
        provisional = build(Hotel, values, id=temp_id("hotel"))
        self._hotels.append(provisional)
        created = self._track_insert(loop, provisional.id)

        def apply(inserted: Hotel) -> None:
            _resolve(created, inserted.id)
            if _swap(self._hotels, provisional, inserted) and self._current_hotel is provisional:
                self._current_hotel = inserted

        def rollback() -> None:
            _resolve(created, None)
            _discard_id(self._hotels, provisional.id)
            if self._current_hotel is not None and self._current_hotel.id == provisional.id:
                self._current_hotel = None
                self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)

        self._spawn(
            loop, self._api.insert_hotel(_payload(provisional)),
            apply=apply, rollback=rollback, what=f"insert hotel '{provisional.name}'",
            returns_row=True,
        )
        return provisional

    def update_hotel(self, hotel_id: str, updates: Mapping[str, Any]) -> Optional[Hotel]:
        loop = self._require_loop()
        previous = next((h for h in self._hotels if h.id == hotel_id), None)
        if previous is None:
            return None
        updated = merge(previous, updates)
        _swap(self._hotels, previous, updated)
        if self._current_hotel is not None and self._current_hotel.id == hotel_id:
            self._current_hotel = updated

        def apply(result: Optional[Hotel]) -> None:
            if _swap(self._hotels, updated, result) and self._current_hotel is updated:
                self._current_hotel = result

        def rollback() -> None:
            restored = self._settled(previous)
            _swap(self._hotels, updated, restored)
            if self._current_hotel is updated:
                self._current_hotel = restored

        changes = _without(updates, ("id",))
        self._spawn(
            loop,
            self._against_real_id(hotel_id, lambda real_id: self._api.update_hotel(real_id, changes)),
            apply=apply, rollback=rollback, what=f"update hotel {hotel_id}",
            returns_row=True,
        )
        return updated

    def delete_hotel(self, hotel_id: str) -> bool:
        loop = self._require_loop()
        hotel = next((h for h in self._hotels if h.id == hotel_id), None)
        if hotel is None:
            return False
        position = self._hotels.index(hotel)
        buckets = (
            self._damages.pop(hotel_id, None),
            self._rooms.pop(hotel_id, None),
            self._preventive.pop(hotel_id, None),
        )
        was_current = self._current_hotel is not None and self._current_hotel.id == hotel_id
        self._hotels.remove(hotel)
        if was_current:
            self._current_hotel = None
            self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)

        def rollback() -> None:
            restored = self._settled(hotel)
            self._hotels.insert(min(position, len(self._hotels)), restored)
            for cache, bucket in zip((self._damages, self._rooms, self._preventive), buckets):
                if bucket is not None:
                    cache[restored.id] = bucket
            if was_current and self._current_hotel is None:
                self._current_hotel = restored
                self._session_kv.write(StorageKeys.CURRENT_HOTEL_ID, restored.id)

        self._spawn(
            loop,
            self._against_real_id(hotel_id, self._api.delete_hotel, gone_ok=True),
            apply=lambda _: None, rollback=rollback, what=f"delete hotel {hotel_id}",
        )
        return True

    # ══════════════════════════════════════════════════════════
    # USERS
    # ══════════════════════════════════════════════════════════

    def list_users(self) -> List[User]:
        return list(self._users)

    def add_user(self, values: Mapping[str, Any], password: Optional[str] = None) -> User:
        """
        Registers the identity with the provider, then fills in the
        profile row the provider created and reloads all profiles.
        """
        loop = self._require_loop()
        provisional = build(User, values, id=temp_id("user"), password_hash=None)
        self._users.append(provisional)
        created = self._track_insert(loop, provisional.id)

        def apply(registered: Tuple[str, List[User]]) -> None:
            user_id, profiles = registered
            _resolve(created, user_id)
            current = next((u for u in self._users if u.id == provisional.id), None)
            if current is None:
                # deleted while registering; its delete goes out against user_id
                profiles = [u for u in profiles if u.id != user_id]
            elif current is not provisional:
                # edited while registering; the edit swaps in the real profile
                profiles = [current if u.id == user_id else u for u in profiles]
            self._users = profiles

        def rollback() -> None:
            _resolve(created, None)
            _discard_id(self._users, provisional.id)

        self._spawn(
            loop, self._register(provisional, password),
            apply=apply, rollback=rollback, what=f"add user '{provisional.name}'",
        )
        return provisional

    async def _register(
        self, user: User, password: Optional[str]
    ) -> Tuple[str, List[User]]:
        email = user.email or default_email(user.name)
        profile = _payload(user, exclude=("id", "password_hash"))
        profile["email"] = email
        metadata = {
            "name": user.name,
            "role": user.role.value,
            "phone": user.phone,
            "color": user.color,
            "avatar": user.avatar.value if user.avatar else None,
            "can_delete": user.can_delete,
        }
        user_id = await self._identity.sign_up(
            email, password or DEFAULT_USER_PASSWORD, metadata
        )
        if user_id is None:
            raise RemoteError(f"Identity provider did not register {email}")
        try:
            await self._api.update_profile(user_id, profile)
        except RemoteError as exc:
            logger.warning(f"Profile row for {user_id} not updated: {exc}")
        return user_id, await self._api.fetch_profiles()

    def update_user(
        self,
        user_id: str,
        updates: Mapping[str, Any],
        password: Optional[str] = None,
    ) -> Optional[User]:
        loop = self._require_loop()
        if password:
            logger.warning("Passwords are managed by the identity provider; ignoring it")
        previous = next((u for u in self._users if u.id == user_id), None)
        if previous is None:
            return None
        updated = merge(previous, _without(updates, ("password_hash",)))
        _swap(self._users, previous, updated)
        was_current = self._current_user is not None and self._current_user.id == user_id
        if was_current:
            self._current_user = updated

        def apply(result: Optional[User]) -> None:
            if _swap(self._users, updated, result) and self._current_user is updated:
                self._current_user = result

        def rollback() -> None:
            restored = self._settled(previous)
            _swap(self._users, updated, restored)
            if self._current_user is updated:
                self._current_user = restored

        changes = _without(updates, ("id", "password_hash"))
        self._spawn(
            loop,
            self._against_real_id(user_id, lambda real_id: self._api.update_profile(real_id, changes)),
            apply=apply, rollback=rollback, what=f"update profile {user_id}",
            returns_row=True,
        )
        return updated

    def delete_user(self, user_id: str) -> bool:
        loop = self._require_loop()
        user = next((u for u in self._users if u.id == user_id), None)
        if user is None:
            return False
        position = self._users.index(user)
        self._users.remove(user)
        current = self._current_user
        if current is not None and current.id == user_id:
            self._current_user = None

        def rollback() -> None:
            self._users.insert(min(position, len(self._users)), self._settled(user))
            if current is not None and current.id == user_id and self._current_user is None:
                self._current_user = self._settled(current)

        self._spawn(
            loop,
            self._against_real_id(user_id, self._api.delete_profile, gone_ok=True),
            apply=lambda _: None, rollback=rollback, what=f"delete profile {user_id}",
        )
        return True

    # ══════════════════════════════════════════════════════════
    # SESSION SCOPE
    # ══════════════════════════════════════════════════════════

    def get_current_user(self) -> Optional[User]:
        return self._current_user

    def set_current_user(self, user: Optional[User]) -> None:
        self._current_user = user
        self._bus.notify()

    def get_current_hotel(self) -> Optional[Hotel]:
        return self._current_hotel

    async def set_current_hotel(self, hotel: Optional[Hotel]) -> None:
        self._current_hotel = hotel
        self._evict_buckets()
        if hotel is None:
            self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)
            self._bus.notify()
            return
        self._session_kv.write(StorageKeys.CURRENT_HOTEL_ID, hotel.id)
        try:
            await self._load_hotel(hotel.id)
        except RemoteError:
            logger.error(f"Failed to load data for hotel {hotel.id}", exc_info=True)
            self._evict_buckets()
            raise
        self._bus.notify()

    def logout(self) -> None:
        """
        Drops the provider session at once; telling the provider runs in
        the background when an event loop is running.
        """
        session = self._identity.drop_session()
        if session is not None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("No running event loop; provider session dropped without revoking it")
            else:
                self._spawn(
                    loop, self._identity.revoke(session),
                    apply=lambda _: None, rollback=lambda: None, what="sign-out",
                )
        self._current_user = None
        self._current_hotel = None
        self._session_kv.delete(StorageKeys.CURRENT_HOTEL_ID)
        self._evict_buckets()
        self._created = {k: f for k, f in self._created.items() if not f.done()}
        self._bus.notify()

    # ══════════════════════════════════════════════════════════
    # HOTEL-SCOPED BUCKETS
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def _locate(buckets: Dict[str, List[Any]], record_id: str) -> Tuple[Optional[List[Any]], Any]:
        for bucket in buckets.values():
            for item in bucket:
                if item.id == record_id:
                    return bucket, item
        return None, None

    def _add_scoped(
        self,
        loop: asyncio.AbstractEventLoop,
        buckets: Dict[str, List[Any]],
        provisional: Any,
        call: Awaitable[Any],
        *,
        front: bool,
        what: str,
    ) -> Any:
        """Provisional records join a bucket only when that bucket is loaded."""
        hotel_id = provisional.hotel_id
        bucket = buckets.get(hotel_id)
        if bucket is not None:
            if front:
                bucket.insert(0, provisional)
            else:
                bucket.append(provisional)
        created = self._track_insert(loop, provisional.id)

        def apply(inserted: Any) -> None:
            _resolve(created, inserted.id)
            _swap(buckets.get(hotel_id), provisional, inserted)

        def rollback() -> None:
            _resolve(created, None)
            _discard_id(buckets.get(hotel_id), provisional.id)

        self._spawn(loop, call, apply=apply, rollback=rollback, what=what, returns_row=True)
        return provisional

    def _update_scoped(
        self,
        loop: asyncio.AbstractEventLoop,
        bucket: List[Any],
        previous: Any,
        updated: Any,
        call: Awaitable[Any],
        what: str,
    ) -> Any:
        _swap(bucket, previous, updated)

        def apply(result: Any) -> None:
            _swap(bucket, updated, result)

        def rollback() -> None:
            _swap(bucket, updated, self._settled(previous))

        self._spawn(loop, call, apply=apply, rollback=rollback, what=what, returns_row=True)
        return updated

    def _delete_scoped(
        self,
        loop: asyncio.AbstractEventLoop,
        bucket: List[Any],
        record: Any,
        call: Awaitable[Any],
        what: str,
    ) -> bool:
        position = bucket.index(record)
        del bucket[position]

        def rollback() -> None:
            bucket.insert(min(position, len(bucket)), self._settled(record))

        self._spawn(loop, call, apply=lambda _: None, rollback=rollback, what=what)
        return True

    # ── damages ───────────────────────────────────────────────

    def list_damages(self, hotel_id: Optional[str] = None) -> List[Damage]:
        if hotel_id is None:
            return []
        return list(self._damages.get(hotel_id, ()))

    def find_damage(self, damage_id: str) -> Optional[Damage]:
        return self._locate(self._damages, damage_id)[1]

    def add_damage(self, values: Mapping[str, Any]) -> Damage:
        loop = self._require_loop()
        provisional = build(Damage, values, id=temp_id("damage"))
        return self._add_scoped(
            loop, self._damages, provisional,
            self._api.insert_damage(_payload(provisional)),
            front=True, what=f"insert damage for room {provisional.room_number}",
        )

    def update_damage(self, damage_id: str, updates: Mapping[str, Any]) -> Optional[Damage]:
        loop = self._require_loop()
        bucket, previous = self._locate(self._damages, damage_id)
        if previous is None:
            return None
        changes = _without(updates, ("id",))
        return self._update_scoped(
            loop, bucket, previous, merge(previous, updates),
            self._against_real_id(
                damage_id, lambda real_id: self._api.update_damage(real_id, changes)
            ),
            what=f"update damage {damage_id}",
        )

    def delete_damage(self, damage_id: str) -> bool:
        loop = self._require_loop()
        bucket, record = self._locate(self._damages, damage_id)
        if record is None:
            return False
        return self._delete_scoped(
            loop, bucket, record,
            self._against_real_id(damage_id, self._api.delete_damage, gone_ok=True),
            what=f"delete damage {damage_id}",
        )

    # ── rooms ─────────────────────────────────────────────────

    def list_rooms(self, hotel_id: Optional[str] = None) -> List[Room]:
        if hotel_id is None:
            return []
        return list(self._rooms.get(hotel_id, ()))

    def update_room(
        self, hotel_id: str, number: str, updates: Mapping[str, Any]
    ) -> Optional[Room]:
        loop = self._require_loop()
        bucket = self._rooms.get(hotel_id)
        previous = next((r for r in bucket or () if r.number == str(number)), None)
        if previous is None:
            return None
        return self._update_scoped(
            loop, bucket, previous, merge(previous, updates, identity=ROOM_IDENTITY),
            self._api.update_room(hotel_id, str(number), _without(updates, ROOM_IDENTITY)),
            what=f"update room {hotel_id}/{number}",
        )

    # ── preventive maintenance ────────────────────────────────

    def list_preventive(self, hotel_id: Optional[str] = None) -> List[PreventiveTask]:
        if hotel_id is None:
            return []
        return list(self._preventive.get(hotel_id, ()))

    def find_preventive(self, task_id: str) -> Optional[PreventiveTask]:
        return self._locate(self._preventive, task_id)[1]

    def add_preventive(self, values: Mapping[str, Any]) -> PreventiveTask:
        loop = self._require_loop()
        provisional = build(PreventiveTask, values, id=temp_id("preventive"))
        return self._add_scoped(
            loop, self._preventive, provisional,
            self._api.insert_preventive(_payload(provisional)),
            front=False, what=f"insert preventive task '{provisional.title}'",
        )

    def update_preventive(
        self, task_id: str, updates: Mapping[str, Any]
    ) -> Optional[PreventiveTask]:
        loop = self._require_loop()
        bucket, previous = self._locate(self._preventive, task_id)
        if previous is None:
            return None
        changes = _without(updates, ("id",))
        return self._update_scoped(
            loop, bucket, previous, merge(previous, updates),
            self._against_real_id(
                task_id, lambda real_id: self._api.update_preventive(real_id, changes)
            ),
            what=f"update preventive task {task_id}",
        )

    def delete_preventive(self, task_id: str) -> bool:
        loop = self._require_loop()
        bucket, record = self._locate(self._preventive, task_id)
        if record is None:
            return False
        return self._delete_scoped(
            loop, bucket, record,
            self._against_real_id(task_id, self._api.delete_preventive, gone_ok=True),
            what=f"delete preventive task {task_id}",
        )
