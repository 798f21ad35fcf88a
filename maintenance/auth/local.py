"""
Hotel Maintenance Auth — Local Mode
======================================
Sessions are a persisted slot holding {userId, expiresAt}. A session is
live while its expiry is in the future; an expired slot is evicted the
first time it is read.

Credential checks run against the store's user list: case-insensitive
email match, users without a stored hash are rejected. Every failure
is reported as the same "invalid email or password" message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from maintenance.auth.passwords import verify_password
from maintenance.conf import BackendMode, session_hours
from maintenance.entities import User
from maintenance.entities.coerce import to_datetime
from maintenance.errors import InvalidCredentials
from maintenance.storage import KeyValueStore, StorageKeys
from maintenance.time import Clock, get_default_clock

logger = logging.getLogger("maintenance.auth")


@dataclass(frozen=True)
class LocalSession:
    user_id: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


def authenticate_user(email: str, password: str, users: Iterable[User]) -> Optional[User]:
    wanted = (email or "").strip().lower()
    user = next(
        (u for u in users if u.email is not None and u.email.lower() == wanted),
        None,
    )
    if user is None or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


class LocalAuth:
    mode = BackendMode.LOCAL

    def __init__(
        self,
        kv: KeyValueStore,
        users: Callable[[], Iterable[User]],
        *,
        clock: Optional[Clock] = None,
        duration: Optional[timedelta] = None,
    ) -> None:
        self._kv = kv
        self._users = users
        self._clock = clock or get_default_clock()
        self._duration = duration or timedelta(hours=session_hours())

    async def initialize(self) -> None:
        return None

    # ── sessions ──────────────────────────────────────────────

    def create_session(self, user_id: str) -> LocalSession:
        session = LocalSession(
            user_id=user_id,
            expires_at=self._clock.now_utc() + self._duration,
        )
        self._kv.write(
            StorageKeys.SESSION,
            {"userId": session.user_id, "expiresAt": session.expires_at.isoformat()},
        )
        return session

    def get_session(self) -> Optional[LocalSession]:
        data = self._kv.read(StorageKeys.SESSION)
        if not isinstance(data, dict):
            return None
        try:
            session = LocalSession(
                user_id=str(data["userId"]),
                expires_at=to_datetime(data["expiresAt"]),
            )
        except (KeyError, ValueError):
            logger.warning("Discarding unreadable local session")
            self._kv.delete(StorageKeys.SESSION)
            return None
        if session.is_expired(self._clock.now_utc()):
            self._kv.delete(StorageKeys.SESSION)
            return None
        return session

    def clear_session(self) -> None:
        self._kv.delete(StorageKeys.SESSION)

    def is_authenticated(self) -> bool:
        return self.get_session() is not None

    def current_user_id(self) -> Optional[str]:
        session = self.get_session()
        return session.user_id if session else None

    # ── credentials ───────────────────────────────────────────

    async def sign_in(self, email: str, password: str) -> User:
        user = authenticate_user(email, password, self._users())
        if user is None:
            raise InvalidCredentials()
        self.create_session(user.id)
        logger.info(f"Local sign-in for user {user.id}")
        return user

    async def sign_out(self) -> None:
        self.clear_session()

    async def fetch_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self._users() if u.id == user_id), None)
