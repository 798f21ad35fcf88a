"""
Hotel Maintenance — Change Notification Bus
==============================================
Tells presentation code "re-read the store, your view is stale".

Rules:
- Callbacks take no arguments; the signal carries no payload
- notify() calls every callback synchronously, in registration order
- A raising callback propagates to whoever called notify()
- One bus per store instance (tests never share subscribers)
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List

logger = logging.getLogger("maintenance.events")

Listener = Callable[[], None]


class ChangeBus:
    """Registry of zero-argument change listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = Lock()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a listener. Returns the function that unregisters it."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                # Remove this registration only; the same callable may be
                # subscribed more than once.
                for i, registered in enumerate(self._listeners):
                    if registered is callback:
                        del self._listeners[i]
                        break

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        logger.debug(f"Notifying {len(listeners)} listener(s)")
        for listener in listeners:
            listener()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)
