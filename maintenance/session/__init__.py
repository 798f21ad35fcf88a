"""
Hotel Maintenance Session — Public API
=========================================
"""

from maintenance.session.flow import (
    Screen,
    log_out,
    resolve_screen,
    sign_in,
    start_session,
)

__all__ = [
    "Screen",
    "log_out",
    "resolve_screen",
    "sign_in",
    "start_session",
]
