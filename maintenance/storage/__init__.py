"""
Hotel Maintenance Storage — Public API
=========================================
"""

from maintenance.storage.kv import (
    PERSISTENT_ALIAS,
    SESSION_ALIAS,
    KeyValueStore,
    StorageKeys,
)

__all__ = [
    "PERSISTENT_ALIAS",
    "SESSION_ALIAS",
    "KeyValueStore",
    "StorageKeys",
]
