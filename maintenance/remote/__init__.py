"""
Hotel Maintenance Remote — Public API
========================================
Only used when a remote backend is configured.
"""

from maintenance.remote.api import MaintenanceApi, TableClient
from maintenance.remote.client import RemoteClient
from maintenance.remote.identity import (
    SIGNED_IN,
    SIGNED_OUT,
    AuthSession,
    IdentityProvider,
)

__all__ = [
    "MaintenanceApi",
    "TableClient",
    "RemoteClient",
    "SIGNED_IN",
    "SIGNED_OUT",
    "AuthSession",
    "IdentityProvider",
]
