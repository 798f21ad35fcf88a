"""
Hotel Maintenance — Error Hierarchy
======================================
Expected conditions (not-found, insufficient role) are NOT errors:
the store answers them with None / False.

These types cover the genuinely exceptional paths: remote I/O and
authentication against the identity provider.
"""

from __future__ import annotations

from typing import Optional


class MaintenanceError(Exception):
    """Base error for the maintenance data layer."""
    pass


# ══════════════════════════════════════════════════════════════
# REMOTE BACKEND
# ══════════════════════════════════════════════════════════════

class RemoteError(MaintenanceError):
    """A request to the remote backend failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retryable: bool = False,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
        self.code = code


class RemoteNotConfigured(RemoteError):
    """Remote endpoint or access key is missing."""

    def __init__(self):
        super().__init__(
            "Remote backend is not configured "
            "(MAINTENANCE_REMOTE_URL / MAINTENANCE_REMOTE_KEY)."
        )


# ══════════════════════════════════════════════════════════════
# AUTHENTICATION
# ══════════════════════════════════════════════════════════════

class AuthError(MaintenanceError):
    """Sign-in failed. `message` is safe to show to the user."""

    default_message = "Sign-in failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    default_message = "Invalid email or password."


class EmailNotConfirmed(AuthError):
    default_message = (
        "Email not confirmed. Check your inbox for the confirmation link."
    )


class ProfileMissing(AuthError):
    default_message = (
        "No profile found for this user. "
        "Ask an administrator to create your profile."
    )
