"""
Hotel Maintenance Session — Screen Flow
==========================================
Which screen a client should show, derived from persisted session state:

    no live session                  → login
    session, no current user         → user-selection
    user, no current hotel           → hotel-selection
    user and hotel                   → main

log_out() always lands on login with every selection and cache cleared.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Tuple

from maintenance.auth import AuthAdapter, SignInResult
from maintenance.conf import BackendMode
from maintenance.errors import AuthError

logger = logging.getLogger("maintenance.auth")


class Screen(Enum):
    LOGIN = "login"
    USER_SELECTION = "user-selection"
    HOTEL_SELECTION = "hotel-selection"
    MAIN = "main"


def resolve_screen(store, auth: AuthAdapter) -> Screen:
    if not auth.is_authenticated():
        return Screen.LOGIN
    if store.get_current_user() is None:
        return Screen.USER_SELECTION
    if store.get_current_hotel() is None:
        return Screen.HOTEL_SELECTION
    return Screen.MAIN


async def start_session(store, auth: AuthAdapter) -> Screen:
    """
    Start-up sequence. In remote mode a surviving provider session is
    resolved to its profile and made the current user.
    """
    await auth.initialize()
    await store.initialize_data()

    if auth.mode == BackendMode.REMOTE and store.get_current_user() is None:
        user_id = auth.current_user_id()
        if user_id is not None:
            user = await auth.fetch_user(user_id)
            if user is not None:
                store.set_current_user(user)
                await store.initialize_data()
            else:
                logger.warning(f"Session user {user_id} has no profile")

    return resolve_screen(store, auth)


async def sign_in(store, auth: AuthAdapter, email: str, password: str) -> Tuple[SignInResult, Screen]:
    try:
        user = await auth.sign_in(email, password)
    except AuthError as exc:
        logger.info(f"Sign-in rejected for {email}: {exc.message}")
        return SignInResult(error=exc.message), Screen.LOGIN

    store.set_current_user(user)
    if auth.mode == BackendMode.REMOTE:
        await store.initialize_data()
    return SignInResult(user=user), resolve_screen(store, auth)


async def log_out(store, auth: AuthAdapter) -> Screen:
    await auth.sign_out()
    store.logout()
    await store.drain()
    return Screen.LOGIN
