"""
Hotel Maintenance — Backend Mode Selection
=============================================
Remote mode is active iff both the remote endpoint and the access key
are present and non-blank. The mode is resolved once, when the store
is built, and never switches afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from django.conf import settings


class BackendMode(Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class RemoteSettings:
    url: str = ""
    key: str = ""
    timeout_seconds: float = 10.0

    @classmethod
    def from_django(cls) -> "RemoteSettings":
        return cls(
            url=(getattr(settings, "MAINTENANCE_REMOTE_URL", "") or "").strip(),
            key=(getattr(settings, "MAINTENANCE_REMOTE_KEY", "") or "").strip(),
            timeout_seconds=float(getattr(settings, "MAINTENANCE_REMOTE_TIMEOUT", 10.0)),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.url) and bool(self.key)

    @property
    def mode(self) -> BackendMode:
        return BackendMode.REMOTE if self.is_configured else BackendMode.LOCAL


def session_hours() -> int:
    return int(getattr(settings, "MAINTENANCE_SESSION_HOURS", 24))
