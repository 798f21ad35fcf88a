"""
Hotel Maintenance — App Configuration
========================================
Reports the backend mode once Django has loaded settings.
"""

import logging

from django.apps import AppConfig

from maintenance.conf import RemoteSettings

logger = logging.getLogger("maintenance.bootstrap")


class MaintenanceConfig(AppConfig):
    name = "maintenance"
    label = "maintenance"
    verbose_name = "Hotel Maintenance"

    def ready(self):
        remote = RemoteSettings.from_django()
        if remote.is_configured:
            logger.info(f"Remote backend configured at {remote.url}")
        else:
            logger.warning(
                "Missing MAINTENANCE_REMOTE_URL or MAINTENANCE_REMOTE_KEY; "
                "using local persistence."
            )
