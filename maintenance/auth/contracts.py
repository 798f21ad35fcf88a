"""
Hotel Maintenance Auth — Adapter Contract
============================================
Local and remote auth answer the same questions:

    is_authenticated()   is there a live session?
    current_user_id()    whose session is it?
    sign_in(...)         verify credentials, open a session, return the User
    sign_out()           drop the session
    clear_session()      drop the session without waiting on anything

sign_in raises an AuthError subclass whose `message` is user-facing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from maintenance.conf import BackendMode
from maintenance.entities import User


class AuthAdapter(Protocol):
    mode: BackendMode

    async def initialize(self) -> None: ...

    def is_authenticated(self) -> bool: ...

    def current_user_id(self) -> Optional[str]: ...

    async def sign_in(self, email: str, password: str) -> User: ...

    async def sign_out(self) -> None: ...

    def clear_session(self) -> None: ...

    async def fetch_user(self, user_id: str) -> Optional[User]: ...


@dataclass(frozen=True)
class SignInResult:
    user: Optional[User] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.error is None
