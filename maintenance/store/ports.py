"""
Hotel Maintenance Store — Storage Port
=========================================
The contract both backends implement. The facade picks one at start-up
and delegates to it; no operation branches on the mode.

Backends own persistence and caching only. Business rules (completion
stamping, recurrence, effective status, authorization, statistics)
live in the facade and arrive here as plain field values.

Conventions:
- add_* take caller field values (no id) and return the created record
- update_* take a partial; unknown fields raise ValueError
- update_* / delete_* on a missing record return None / False
"""

from __future__ import annotations

import abc
from typing import Any, List, Mapping, Optional

from maintenance.conf import BackendMode
from maintenance.entities import Damage, Hotel, PreventiveTask, Room, User


class StoragePort(abc.ABC):
    mode: BackendMode

    @abc.abstractmethod
    async def initialize(self) -> None:
        """Seed or load hotels and users, plus the selected hotel's data."""

    # ── hotels ────────────────────────────────────────────────

    @abc.abstractmethod
    def list_hotels(self) -> List[Hotel]: ...

    @abc.abstractmethod
    def add_hotel(self, values: Mapping[str, Any]) -> Hotel: ...

    @abc.abstractmethod
    def update_hotel(self, hotel_id: str, updates: Mapping[str, Any]) -> Optional[Hotel]: ...

    @abc.abstractmethod
    def delete_hotel(self, hotel_id: str) -> bool:
        """Delete a hotel together with its damages, rooms and preventive tasks."""

    # ── users ─────────────────────────────────────────────────

    @abc.abstractmethod
    def list_users(self) -> List[User]: ...

    @abc.abstractmethod
    def add_user(self, values: Mapping[str, Any], password: Optional[str] = None) -> User: ...

    @abc.abstractmethod
    def update_user(
        self,
        user_id: str,
        updates: Mapping[str, Any],
        password: Optional[str] = None,
    ) -> Optional[User]: ...

    @abc.abstractmethod
    def delete_user(self, user_id: str) -> bool: ...

    # ── session scope ─────────────────────────────────────────

    @abc.abstractmethod
    def get_current_user(self) -> Optional[User]: ...

    @abc.abstractmethod
    def set_current_user(self, user: Optional[User]) -> None: ...

    @abc.abstractmethod
    def get_current_hotel(self) -> Optional[Hotel]: ...

    @abc.abstractmethod
    async def set_current_hotel(self, hotel: Optional[Hotel]) -> None: ...

    # ── damages ───────────────────────────────────────────────

    @abc.abstractmethod
    def list_damages(self, hotel_id: Optional[str] = None) -> List[Damage]: ...

    @abc.abstractmethod
    def find_damage(self, damage_id: str) -> Optional[Damage]: ...

    @abc.abstractmethod
    def add_damage(self, values: Mapping[str, Any]) -> Damage: ...

    @abc.abstractmethod
    def update_damage(self, damage_id: str, updates: Mapping[str, Any]) -> Optional[Damage]: ...

    @abc.abstractmethod
    def delete_damage(self, damage_id: str) -> bool: ...

    # ── rooms ─────────────────────────────────────────────────

    @abc.abstractmethod
    def list_rooms(self, hotel_id: Optional[str] = None) -> List[Room]: ...

    @abc.abstractmethod
    def update_room(
        self, hotel_id: str, number: str, updates: Mapping[str, Any]
    ) -> Optional[Room]: ...

    # ── preventive maintenance ────────────────────────────────

    @abc.abstractmethod
    def list_preventive(self, hotel_id: Optional[str] = None) -> List[PreventiveTask]: ...

    @abc.abstractmethod
    def find_preventive(self, task_id: str) -> Optional[PreventiveTask]: ...

    @abc.abstractmethod
    def add_preventive(self, values: Mapping[str, Any]) -> PreventiveTask: ...

    @abc.abstractmethod
    def update_preventive(
        self, task_id: str, updates: Mapping[str, Any]
    ) -> Optional[PreventiveTask]: ...

    @abc.abstractmethod
    def delete_preventive(self, task_id: str) -> bool: ...

    # ── lifecycle ─────────────────────────────────────────────

    @abc.abstractmethod
    def logout(self) -> None:
        """Clear current user, current hotel, session token and every cache."""

    @abc.abstractmethod
    def reset_data(self) -> bool:
        """Rewrite the seed collections. False where the backend cannot."""

    async def drain(self) -> None:
        """Wait for outstanding background writes. Nothing to wait for by default."""
        return None
