"""
Hotel Maintenance — Key-Value Slots
======================================
One JSON blob per key, kept in a Django cache alias:

    "maintenance"          persisted slots (file-based cache, no expiry)
    "maintenance_session"  session-scoped slots (process memory)

Malformed JSON in a slot reads as "nothing stored"; the next write
overwrites it with valid JSON.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List

from django.core.cache import caches
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger("maintenance.storage")

PERSISTENT_ALIAS = "maintenance"
SESSION_ALIAS = "maintenance_session"


class StorageKeys:
    DAMAGES = "hotel_maintenance_damages"
    ROOMS = "hotel_maintenance_rooms"
    USERS = "hotel_maintenance_users"
    HOTELS = "hotel_maintenance_hotels"
    PREVENTIVE = "hotel_maintenance_preventive"
    CURRENT_USER = "hotel_maintenance_current_user"
    CURRENT_HOTEL = "hotel_maintenance_current_hotel"
    SESSION = "hotel_maintenance_session"
    # session-scoped
    CURRENT_HOTEL_ID = "hotel_maintenance_current_hotel_id"

    COLLECTIONS = (DAMAGES, ROOMS, USERS, HOTELS, PREVENTIVE)


class KeyValueStore:
    """JSON slots over a Django cache alias."""

    def __init__(self, alias: str = PERSISTENT_ALIAS):
        self._alias = alias

    @property
    def _cache(self):
        # Resolved per call so settings overrides (tests) take effect.
        return caches[self._alias]

    def has(self, key: str) -> bool:
        return self._cache.get(key) is not None

    def set_text(self, key: str, text: str) -> None:
        self._cache.set(key, text, timeout=None)

    def read(self, key: str, default: Any = None) -> Any:
        text = self._cache.get(key)
        if text is None:
            return default
        try:
            return json.loads(text)
        except (TypeError, ValueError):
            logger.warning(f"Malformed JSON in slot '{key}' ({self._alias}); ignoring it")
            return default

    def read_list(self, key: str) -> List[Any]:
        value = self.read(key)
        if not isinstance(value, list):
            if value is not None:
                logger.warning(f"Slot '{key}' does not hold a list; ignoring it")
            return []
        return value

    def write(self, key: str, value: Any) -> None:
        self.set_text(key, json.dumps(value, cls=DjangoJSONEncoder))

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def delete_many(self, keys: Iterable[str]) -> None:
        self._cache.delete_many(list(keys))
