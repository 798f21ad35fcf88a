"""
Hotel Maintenance Events — Public API
========================================
"""

from maintenance.events.bus import ChangeBus, Listener

__all__ = [
    "ChangeBus",
    "Listener",
]
