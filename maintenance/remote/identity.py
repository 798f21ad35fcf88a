"""
Hotel Maintenance Remote — Identity Provider
===============================================
GoTrue-style password auth against the remote backend.

    POST /auth/v1/token?grant_type=password   sign in
    POST /auth/v1/signup                      register (admin "add user")
    POST /auth/v1/logout                      sign out
    GET  /auth/v1/user                        who owns the current token

The provider keeps the current session in process and publishes every
change to auth-state listeners (event name, session or None).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from maintenance.errors import (
    AuthError,
    EmailNotConfirmed,
    InvalidCredentials,
    RemoteError,
)
from maintenance.remote.client import RemoteClient

logger = logging.getLogger("maintenance.remote")

AUTH_PREFIX = "/auth/v1"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthStateListener = Callable[[str, Optional["AuthSession"]], None]


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user_id: str
    email: Optional[str] = None
    refresh_token: Optional[str] = None


def auth_error_from_remote(exc: RemoteError) -> AuthError:
    """Map a provider error to the category shown to users."""
    text = f"{exc.code or ''} {exc}".lower()
    if "email_not_confirmed" in text or "email not confirmed" in text:
        return EmailNotConfirmed()
    if (
        "invalid_credentials" in text
        or "invalid login credentials" in text
        or "invalid_grant" in text
    ):
        return InvalidCredentials()
    return AuthError(str(exc))


class IdentityProvider:
    """Remote identity provider sharing the REST client's connection."""

    def __init__(self, client: RemoteClient) -> None:
        self._client = client
        self._session: Optional[AuthSession] = None
        self._listeners: List[AuthStateListener] = []

    # ── auth-state stream ─────────────────────────────────────

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self._session)

    def _set_session(self, session: Optional[AuthSession]) -> None:
        self._session = session
        self._client.set_access_token(session.access_token if session else None)

    # ── operations ────────────────────────────────────────────

    async def get_session(self) -> Optional[AuthSession]:
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Raises InvalidCredentials, EmailNotConfirmed or AuthError."""
        try:
            body = await self._client.send(
                "POST", f"{AUTH_PREFIX}/token",
                params=[("grant_type", "password")],
                body={"email": email, "password": password},
            )
        except RemoteError as exc:
            raise auth_error_from_remote(exc) from exc

        user = (body or {}).get("user") or {}
        if not body or not body.get("access_token") or not user.get("id"):
            raise InvalidCredentials()

        self._set_session(
            AuthSession(
                access_token=body["access_token"],
                user_id=str(user["id"]),
                email=user.get("email"),
                refresh_token=body.get("refresh_token"),
            )
        )
        logger.info(f"Signed in remote user {user['id']}")
        self._emit(SIGNED_IN)
        return self._session

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Register a new identity. Returns its user id, None on failure."""
        try:
            body = await self._client.send(
                "POST", f"{AUTH_PREFIX}/signup",
                body={"email": email, "password": password, "data": dict(metadata or {})},
            )
        except RemoteError as exc:
            logger.error(f"Sign-up failed for {email}: {exc}")
            return None
        if not isinstance(body, dict):
            return None
        user: Dict[str, Any] = body.get("user") or body
        user_id = user.get("id")
        return None if user_id is None else str(user_id)

    async def fetch_user_id(self) -> Optional[str]:
        """Ask the provider who owns the current access token."""
        if self._session is None:
            return None
        body = await self._client.send("GET", f"{AUTH_PREFIX}/user")
        if not isinstance(body, dict) or body.get("id") is None:
            return None
        return str(body["id"])

    def drop_session(self) -> Optional[AuthSession]:
        """
        Forget the session in process and tell listeners at once.
        Returns the dropped session so its token can still be revoked.
        """
        session = self._session
        self._set_session(None)
        if session is not None:
            self._emit(SIGNED_OUT)
        return session

    async def revoke(self, session: AuthSession) -> None:
        """Ask the provider to end a session already dropped in process."""
        try:
            await self._client.send(
                "POST", f"{AUTH_PREFIX}/logout",
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
        except RemoteError as exc:
            logger.warning(f"Remote sign-out failed: {exc}")

    async def sign_out(self) -> None:
        session = self.drop_session()
        if session is not None:
            await self.revoke(session)
