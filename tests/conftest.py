"""Shared fixtures for record-export tests."""

from datetime import datetime, timezone

import pytest

from record_export.coordinator import ExportCoordinator
from record_export.reference import PermanentReference, TimeLimitedReference
from record_export.stores.memory import MemoryBlobStore, MemoryChannel, MemoryStore

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def todo_records():
    """Heterogeneous records: fields vary from item to item."""
    return [
        {"id": "1", "status": "pending"},
        {"id": "2", "priority": "high"},
    ]


@pytest.fixture
def mixed_records():
    return [
        {"id": "a", "title": 'he said "hi"', "done": False, "count": 3, "tags": ["x", "y"]},
        {"id": "b", "title": "plain", "done": True, "meta": {"a": 1}, "note": None},
        {"id": "c", "count": 2.5},
    ]


@pytest.fixture
def blob_store():
    return MemoryBlobStore(base_url="https://exports.example.com")


@pytest.fixture
def channel():
    return MemoryChannel()


@pytest.fixture
def make_coordinator(blob_store, channel, fixed_clock):
    def _make(records=None, policy=None, store=None, blob=None, notifier=None, page_size=None):
        return ExportCoordinator(
            store=store or MemoryStore(records or [], page_size=2),
            blob_store=blob or blob_store,
            notifier=notifier or channel,
            reference_policy=policy or TimeLimitedReference(300),
            key_prefix="todo-export",
            page_size=page_size,
            clock=fixed_clock,
        )

    return _make


@pytest.fixture
def permanent_policy():
    return PermanentReference()
