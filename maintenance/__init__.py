"""
Hotel Maintenance — Data Access & Session Layer
==================================================
Entities, a backend-selecting store (local persistence or a remote
REST backend), auth/session handling and a change-notification bus.

Entry point for callers:

    from maintenance.store import get_store

    store = get_store()
    await store.initialize_data()
"""
