"""
Hotel Maintenance – Django Settings (Infrastructure Only)
==========================================================
Django serves as the framework container for the maintenance data layer:
cache framework (persisted key-value slots), password hashers, date
parsing and JSON encoding.

Remote mode is switched on by the joint presence of the remote endpoint
and access key. Both are read from the environment.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "MAINTENANCE_SECRET_KEY", "maintenance-dev-key-replace-before-deployment"
)

DEBUG = os.environ.get("MAINTENANCE_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "maintenance.apps.MaintenanceConfig",
]

# ── Database ──────────────────────────────────────────────────
# The data layer keeps no relational tables of its own.
DATABASES = {}

# ── Key-Value Persistence ─────────────────────────────────────
# "maintenance"          → persisted slots (local mode collections + session)
# "maintenance_session"  → session-scoped slots (cleared at process end)
MAINTENANCE_STORE_DIR = os.environ.get(
    "MAINTENANCE_STORE_DIR", str(BASE_DIR / "var" / "store")
)

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    },
    "maintenance": {
        "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
        "LOCATION": MAINTENANCE_STORE_DIR,
        "TIMEOUT": None,
        "OPTIONS": {"MAX_ENTRIES": 10000},
    },
    "maintenance_session": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "maintenance-session",
        "TIMEOUT": None,
    },
}

# ── Remote Backend ────────────────────────────────────────────
MAINTENANCE_REMOTE_URL = os.environ.get(
    "MAINTENANCE_REMOTE_URL", os.environ.get("SUPABASE_URL", "")
)
MAINTENANCE_REMOTE_KEY = os.environ.get(
    "MAINTENANCE_REMOTE_KEY", os.environ.get("SUPABASE_ANON_KEY", "")
)
MAINTENANCE_REMOTE_TIMEOUT = float(os.environ.get("MAINTENANCE_REMOTE_TIMEOUT", "10"))

# ── Local Sessions ────────────────────────────────────────────
MAINTENANCE_SESSION_HOURS = int(os.environ.get("MAINTENANCE_SESSION_HOURS", "24"))

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher",
]

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "maintenance": {
            "handlers": ["console"],
            "level": os.environ.get("MAINTENANCE_LOG_LEVEL", "INFO"),
        },
    },
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
