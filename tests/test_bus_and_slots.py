"""
Tests — Change Notification Bus and Key-Value Slots
======================================================
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal

import pytest

from maintenance.events import ChangeBus
from maintenance.storage import PERSISTENT_ALIAS, SESSION_ALIAS, KeyValueStore


class TestChangeBus:
    def test_notify_calls_in_registration_order(self):
        bus = ChangeBus()
        calls = []
        bus.subscribe(lambda: calls.append("a"))
        bus.subscribe(lambda: calls.append("b"))
        bus.notify()
        assert calls == ["a", "b"]

    def test_unsubscribe_stops_delivery(self):
        bus = ChangeBus()
        calls = []
        unsubscribe = bus.subscribe(lambda: calls.append(1))
        unsubscribe()
        bus.notify()
        assert calls == []
        assert bus.listener_count == 0

    def test_unsubscribe_removes_one_registration_only(self):
        bus = ChangeBus()
        calls = []

        def listener():
            calls.append(1)

        first = bus.subscribe(listener)
        bus.subscribe(listener)
        first()
        bus.notify()
        assert calls == [1]

    def test_raising_listener_propagates(self):
        bus = ChangeBus()

        def broken():
            raise RuntimeError("render failed")

        bus.subscribe(broken)
        with pytest.raises(RuntimeError):
            bus.notify()

    def test_listener_may_unsubscribe_during_notify(self):
        bus = ChangeBus()
        calls = []
        holder = {}

        def once():
            calls.append("once")
            holder["unsub"]()

        holder["unsub"] = bus.subscribe(once)
        bus.subscribe(lambda: calls.append("other"))
        bus.notify()
        bus.notify()
        assert calls == ["once", "other", "other"]

    def test_buses_do_not_share_listeners(self):
        a, b = ChangeBus(), ChangeBus()
        calls = []
        a.subscribe(lambda: calls.append("a"))
        b.notify()
        assert calls == []

    def test_listener_count_waits_for_the_registry_lock(self):
        bus = ChangeBus()
        bus.subscribe(lambda: None)
        seen = []
        with bus._lock:
            reader = threading.Thread(target=lambda: seen.append(bus.listener_count))
            reader.start()
            reader.join(timeout=0.05)
            assert seen == []
        reader.join()
        assert seen == [1]


class TestKeyValueStore:
    def test_write_then_read(self):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        kv.write("slot", [{"cost": Decimal("45.50")}])
        assert kv.read("slot") == [{"cost": "45.50"}]
        assert kv.has("slot")

    def test_missing_slot_reads_default(self):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        assert kv.read("missing") is None
        assert kv.read("missing", default=[]) == []
        assert kv.read_list("missing") == []

    def test_malformed_json_reads_as_empty(self, caplog):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        kv.set_text("slot", "{not json")
        with caplog.at_level(logging.WARNING, logger="maintenance.storage"):
            assert kv.read_list("slot") == []
        assert "Malformed JSON" in caplog.text

    def test_next_write_heals_malformed_slot(self):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        kv.set_text("slot", "{not json")
        kv.write("slot", [1, 2])
        assert kv.read_list("slot") == [1, 2]

    def test_non_list_slot_reads_as_empty_list(self):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        kv.write("slot", {"a": 1})
        assert kv.read_list("slot") == []

    def test_aliases_are_separate(self):
        persistent = KeyValueStore(PERSISTENT_ALIAS)
        session = KeyValueStore(SESSION_ALIAS)
        session.write("hotel", "skye")
        assert not persistent.has("hotel")
        assert session.read("hotel") == "skye"

    def test_delete_many(self):
        kv = KeyValueStore(PERSISTENT_ALIAS)
        kv.write("a", 1)
        kv.write("b", 2)
        kv.delete_many(["a", "b"])
        assert not kv.has("a") and not kv.has("b")
