"""
Hotel Maintenance Auth — Public API
======================================
"""

from maintenance.auth.contracts import AuthAdapter, SignInResult
from maintenance.auth.local import LocalAuth, LocalSession, authenticate_user
from maintenance.auth.passwords import hash_password, verify_password
from maintenance.auth.remote import RemoteAuth

__all__ = [
    "AuthAdapter",
    "SignInResult",
    "LocalAuth",
    "LocalSession",
    "authenticate_user",
    "hash_password",
    "verify_password",
    "RemoteAuth",
]
