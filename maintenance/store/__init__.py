"""
Hotel Maintenance Store — Public API
=======================================
"""

from maintenance.store.facade import (
    MaintenanceStore,
    build_store,
    can_delete_hotel,
    can_delete_user,
    can_manage_users,
    get_store,
    reset_store,
)
from maintenance.store.local import LocalBackend
from maintenance.store.ports import StoragePort
from maintenance.store.remote import RemoteBackend

__all__ = [
    "MaintenanceStore",
    "build_store",
    "can_delete_hotel",
    "can_delete_user",
    "can_manage_users",
    "get_store",
    "reset_store",
    "LocalBackend",
    "StoragePort",
    "RemoteBackend",
]
