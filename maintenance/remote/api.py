"""
Hotel Maintenance Remote — Table API
=======================================
Fetch and mutate entities in the remote tables. Rows go through the
row mapper in both directions; this module never sees a raw row
outside of that translation.

Tables: hotels, profiles, damages, rooms, preventive_maintenance.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol

from maintenance.entities import Damage, Hotel, PreventiveTask, Room, User
from maintenance.remote import rows

HOTELS = "hotels"
PROFILES = "profiles"
DAMAGES = "damages"
ROOMS = "rooms"
PREVENTIVE = "preventive_maintenance"


class TableClient(Protocol):
    """What the table API needs from a REST client."""

    async def select(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = False,
        single: bool = False,
    ) -> Any: ...

    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[dict]: ...

    async def update(
        self, table: str, row: Mapping[str, Any], *, filters: Mapping[str, Any]
    ) -> Optional[dict]: ...

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None: ...


class MaintenanceApi:
    def __init__(self, client: TableClient) -> None:
        self._client = client

    # ── reads ─────────────────────────────────────────────────

    async def fetch_hotels(self) -> List[Hotel]:
        data = await self._client.select(HOTELS, order="name")
        return [rows.hotel_from_row(r) for r in data]

    async def fetch_hotel(self, hotel_id: str) -> Optional[Hotel]:
        row = await self._client.select(HOTELS, filters={"id": hotel_id}, single=True)
        return rows.hotel_from_row(row) if row else None

    async def fetch_profiles(self) -> List[User]:
        data = await self._client.select(PROFILES, order="name")
        return [rows.user_from_row(r) for r in data]

    async def fetch_profile(self, user_id: str) -> Optional[User]:
        row = await self._client.select(PROFILES, filters={"id": user_id}, single=True)
        return rows.user_from_row(row) if row else None

    async def fetch_damages(self, hotel_id: str) -> List[Damage]:
        data = await self._client.select(
            DAMAGES, filters={"hotel_id": hotel_id}, order="reported_date", descending=True
        )
        return [rows.damage_from_row(r) for r in data]

    async def fetch_rooms(self, hotel_id: str) -> List[Room]:
        data = await self._client.select(ROOMS, filters={"hotel_id": hotel_id}, order="number")
        return [rows.room_from_row(r) for r in data]

    async def fetch_preventive(self, hotel_id: str) -> List[PreventiveTask]:
        data = await self._client.select(
            PREVENTIVE, filters={"hotel_id": hotel_id}, order="next_due_date"
        )
        return [rows.preventive_from_row(r) for r in data]

    # ── hotels ────────────────────────────────────────────────

    async def insert_hotel(self, data: Mapping[str, Any]) -> Optional[Hotel]:
        row = await self._client.insert(HOTELS, rows.hotel_to_row(data))
        return rows.hotel_from_row(row) if row else None

    async def update_hotel(self, hotel_id: str, updates: Mapping[str, Any]) -> Optional[Hotel]:
        row = await self._client.update(HOTELS, rows.hotel_to_row(updates), filters={"id": hotel_id})
        return rows.hotel_from_row(row) if row else None

    async def delete_hotel(self, hotel_id: str) -> None:
        await self._client.delete(HOTELS, filters={"id": hotel_id})

    # ── profiles ──────────────────────────────────────────────

    async def update_profile(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        row = await self._client.update(PROFILES, rows.user_to_row(updates), filters={"id": user_id})
        return rows.user_from_row(row) if row else None

    async def delete_profile(self, user_id: str) -> None:
        await self._client.delete(PROFILES, filters={"id": user_id})

    # ── damages ───────────────────────────────────────────────

    async def insert_damage(self, data: Mapping[str, Any]) -> Optional[Damage]:
        row = await self._client.insert(DAMAGES, rows.damage_to_row(data))
        return rows.damage_from_row(row) if row else None

    async def update_damage(self, damage_id: str, updates: Mapping[str, Any]) -> Optional[Damage]:
        row = await self._client.update(DAMAGES, rows.damage_to_row(updates), filters={"id": damage_id})
        return rows.damage_from_row(row) if row else None

    async def delete_damage(self, damage_id: str) -> None:
        await self._client.delete(DAMAGES, filters={"id": damage_id})

    # ── rooms ─────────────────────────────────────────────────

    async def update_room(
        self, hotel_id: str, number: str, updates: Mapping[str, Any]
    ) -> Optional[Room]:
        row = await self._client.update(
            ROOMS, rows.room_to_row(updates), filters={"hotel_id": hotel_id, "number": number}
        )
        return rows.room_from_row(row) if row else None

    # ── preventive maintenance ────────────────────────────────

    async def insert_preventive(self, data: Mapping[str, Any]) -> Optional[PreventiveTask]:
        row = await self._client.insert(PREVENTIVE, rows.preventive_to_row(data))
        return rows.preventive_from_row(row) if row else None

    async def update_preventive(
        self, task_id: str, updates: Mapping[str, Any]
    ) -> Optional[PreventiveTask]:
        row = await self._client.update(
            PREVENTIVE, rows.preventive_to_row(updates), filters={"id": task_id}
        )
        return rows.preventive_from_row(row) if row else None

    async def delete_preventive(self, task_id: str) -> None:
        await self._client.delete(PREVENTIVE, filters={"id": task_id})
