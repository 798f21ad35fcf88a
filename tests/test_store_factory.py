"""
Tests — Backend Mode Selection and the Process-Wide Store
============================================================
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

import httpx
from django.apps import apps

from maintenance.auth import LocalAuth, RemoteAuth
from maintenance.conf import BackendMode, RemoteSettings
from maintenance.store import LocalBackend, RemoteBackend, build_store, get_store, reset_store
from maintenance.time import FixedClock, SystemClock, set_default_clock


class TestRemoteSettings:
    def test_both_values_required(self):
        assert RemoteSettings("https://db.example.test", "k").mode is BackendMode.REMOTE
        assert RemoteSettings("https://db.example.test", "").mode is BackendMode.LOCAL
        assert RemoteSettings("", "k").mode is BackendMode.LOCAL

    def test_blank_settings_read_as_missing(self, settings):
        settings.MAINTENANCE_REMOTE_URL = "https://db.example.test"
        settings.MAINTENANCE_REMOTE_KEY = "   "
        assert not RemoteSettings.from_django().is_configured


class TestBuildStore:
    def test_local_when_unconfigured(self, caplog):
        with caplog.at_level(logging.WARNING, logger="maintenance.store"):
            store = build_store()
        assert store.mode is BackendMode.LOCAL
        assert isinstance(store.backend, LocalBackend)
        assert isinstance(store.auth, LocalAuth)
        assert "local persistence" in caplog.text

    def test_remote_when_configured(self):
        store = build_store(
            RemoteSettings("https://db.example.test", "anon-key"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
        )
        assert store.mode is BackendMode.REMOTE
        assert isinstance(store.backend, RemoteBackend)
        assert isinstance(store.auth, RemoteAuth)
        asyncio.run(store.aclose())

    def test_default_clock_used_when_none_given(self):
        fixed = FixedClock.on(date(2023, 12, 31))
        set_default_clock(fixed)
        try:
            store = build_store()
        finally:
            set_default_clock(SystemClock())
        assert store.clock is fixed
        assert [m.month for m in store.get_monthly_stats("skye")][-1] == "Dec 2023"

    def test_stores_do_not_share_listeners(self):
        a, b = build_store(), build_store()
        calls = []
        a.subscribe(lambda: calls.append("a"))
        b.set_current_user(None)
        assert calls == []


class TestProcessStore:
    def test_singleton_until_reset(self):
        first = get_store()
        assert get_store() is first
        reset_store()
        assert get_store() is not first

    def test_mode_follows_django_settings(self, settings):
        settings.MAINTENANCE_REMOTE_URL = "https://db.example.test"
        settings.MAINTENANCE_REMOTE_KEY = "anon-key"
        reset_store()
        store = get_store()
        assert store.mode is BackendMode.REMOTE
        asyncio.run(store.aclose())


class TestAppConfig:
    def test_ready_reports_local_mode(self, caplog):
        with caplog.at_level(logging.WARNING, logger="maintenance.bootstrap"):
            apps.get_app_config("maintenance").ready()
        assert "using local persistence" in caplog.text

    def test_ready_reports_remote_mode(self, settings, caplog):
        settings.MAINTENANCE_REMOTE_URL = "https://db.example.test"
        settings.MAINTENANCE_REMOTE_KEY = "anon-key"
        with caplog.at_level(logging.INFO, logger="maintenance.bootstrap"):
            apps.get_app_config("maintenance").ready()
        assert "Remote backend configured" in caplog.text
