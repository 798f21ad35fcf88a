"""
Hotel Maintenance Auth — Remote Mode
=======================================
Credentials are verified by the remote identity provider. The signed-in
identity is resolved to a domain User through its linked profile row.

The current user id is cached here and kept fresh by the provider's
auth-state stream; is_authenticated() is true iff that cache is set.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from maintenance.conf import BackendMode
from maintenance.entities import User
from maintenance.errors import ProfileMissing
from maintenance.remote import AuthSession, IdentityProvider, MaintenanceApi

logger = logging.getLogger("maintenance.auth")


class RemoteAuth:
    mode = BackendMode.REMOTE

    def __init__(self, identity: IdentityProvider, api: MaintenanceApi) -> None:
        self._identity = identity
        self._api = api
        self._user_id: Optional[str] = None
        self._unsubscribe = identity.on_auth_state_change(self._on_auth_state)

    def _on_auth_state(self, event: str, session: Optional[AuthSession]) -> None:
        self._user_id = session.user_id if session else None
        logger.debug(f"Auth state {event}: user={self._user_id}")

    async def initialize(self) -> None:
        session = await self._identity.get_session()
        self._user_id = session.user_id if session else None

    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def current_user_id(self) -> Optional[str]:
        return self._user_id

    async def sign_in(self, email: str, password: str) -> User:
        """Raises InvalidCredentials, EmailNotConfirmed or ProfileMissing."""
        session = await self._identity.sign_in_with_password(email, password)
        self._user_id = session.user_id
        profile = await self._api.fetch_profile(session.user_id)
        if profile is None:
            logger.warning(f"Remote user {session.user_id} has no profile row")
            await self.sign_out()
            raise ProfileMissing()
        return profile

    async def sign_out(self) -> None:
        await self._identity.sign_out()
        self._user_id = None

    def clear_session(self) -> None:
        """Drop the session in process only; revoking it is the caller's job."""
        self._identity.drop_session()
        self._user_id = None

    async def fetch_user(self, user_id: str) -> Optional[User]:
        return await self._api.fetch_profile(user_id)

    async def register(
        self, email: str, password: str, metadata: Mapping[str, Any]
    ) -> Optional[str]:
        return await self._identity.sign_up(email, password, metadata)

    def close(self) -> None:
        self._unsubscribe()
