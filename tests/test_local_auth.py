"""
Tests — Local Authentication and Sessions
============================================
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from maintenance.auth import LocalAuth, authenticate_user, hash_password, verify_password
from maintenance.entities import User, UserRole
from maintenance.errors import InvalidCredentials
from maintenance.storage import KeyValueStore, StorageKeys


def _users():
    return [
        User("u1", "Ana", UserRole.SUPERADMIN, email="Ana@Hotel.com",
             password_hash=hash_password("secret")),
        User("u2", "Ben", UserRole.ADMIN, email="ben@hotel.com"),
    ]


@pytest.fixture
def auth(clock):
    return LocalAuth(KeyValueStore(), _users, clock=clock, duration=timedelta(hours=24))


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("secret")
        assert hashed != "secret"
        assert verify_password("secret", hashed)
        assert not verify_password("wrong", hashed)

    def test_blank_hash_never_verifies(self):
        assert not verify_password("secret", None)
        assert not verify_password("secret", "  ")

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")


class TestAuthenticateUser:
    def test_email_match_is_case_insensitive(self):
        assert authenticate_user(" ana@hotel.COM ", "secret", _users()).id == "u1"

    def test_wrong_password(self):
        assert authenticate_user("ana@hotel.com", "nope", _users()) is None

    def test_user_without_hash_cannot_sign_in(self):
        assert authenticate_user("ben@hotel.com", "", _users()) is None

    def test_unknown_email(self):
        assert authenticate_user("zed@hotel.com", "secret", _users()) is None


class TestLocalSessions:
    def test_sign_in_opens_session(self, auth):
        user = asyncio.run(auth.sign_in("ana@hotel.com", "secret"))
        assert user.id == "u1"
        assert auth.is_authenticated()
        assert auth.current_user_id() == "u1"

    def test_bad_credentials_raise_uniform_message(self, auth):
        with pytest.raises(InvalidCredentials) as exc:
            asyncio.run(auth.sign_in("ana@hotel.com", "nope"))
        assert exc.value.message == "Invalid email or password."
        assert not auth.is_authenticated()

    def test_session_expires(self, auth, clock):
        asyncio.run(auth.sign_in("ana@hotel.com", "secret"))
        clock.advance(days=1, seconds=-1)
        assert auth.is_authenticated()
        clock.advance(seconds=1)
        assert not auth.is_authenticated()
        assert not KeyValueStore().has(StorageKeys.SESSION)

    def test_sign_out(self, auth):
        asyncio.run(auth.sign_in("ana@hotel.com", "secret"))
        asyncio.run(auth.sign_out())
        assert auth.current_user_id() is None

    def test_unreadable_session_discarded(self, auth):
        KeyValueStore().write(StorageKeys.SESSION, {"userId": "u1"})
        assert not auth.is_authenticated()
        assert not KeyValueStore().has(StorageKeys.SESSION)

    def test_fetch_user(self, auth):
        assert asyncio.run(auth.fetch_user("u2")).name == "Ben"
        assert asyncio.run(auth.fetch_user("nope")) is None
