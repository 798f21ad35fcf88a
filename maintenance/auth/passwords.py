"""
Hotel Maintenance Auth — Local Password Hashing
==================================================
Local-mode users carry a password hash. Hashing uses Django's
configured PASSWORD_HASHERS (PBKDF2 by default), never a home-made
checksum.
"""

from __future__ import annotations

from typing import Optional

from django.contrib.auth.hashers import check_password, make_password


def hash_password(raw_password: str) -> str:
    if not isinstance(raw_password, str) or not raw_password:
        raise ValueError("password must be a non-empty string.")
    return make_password(raw_password)


def verify_password(raw_password: str, password_hash: Optional[str]) -> bool:
    if not password_hash or not password_hash.strip():
        return False
    return check_password(raw_password, password_hash)
