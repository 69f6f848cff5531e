"""Unit tests for the durable notification store."""

from __future__ import annotations

import json
import sys
import threading
import time
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.domain.entities import NotificationAction, NotificationPriority, NotificationType
from app.infrastructure.notifications import NotificationStore, loads_records
from app.infrastructure.storage import MemoryStorage

STORAGE_KEY = "adminNotifications"


class FailingStorage(MemoryStorage):
    """Storage whose writes always fail, as when the quota is exhausted."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


class SlowFirstWriteStorage(MemoryStorage):
    """Storage whose first write stalls while other writers queue up."""

    def __init__(self) -> None:
        super().__init__()
        self.first_write_started = threading.Event()
        self.writes = 0

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        if self.writes == 1:
            self.first_write_started.set()
            time.sleep(0.2)
        super().set_item(key, value)


class FixedClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage) -> NotificationStore:
    return NotificationStore(storage, storage_key=STORAGE_KEY).initialize()


def _add(store: NotificationStore, title: str = "New Tapper Request", **overrides):
    values = {
        "type": NotificationType.TAPPER_REQUEST,
        "title": title,
        "message": "Asha has requested tapping services for 500 trees",
        "data": {"numberOfTrees": 500},
    }
    values.update(overrides)
    return store.add(**values)


def test_add_assigns_unique_ids_and_prepends(store: NotificationStore) -> None:
    first = _add(store, "first")
    second = _add(store, "second")
    third = _add(store, "third")

    records = store.get_all()
    assert [record.title for record in records] == ["third", "second", "first"]
    assert len({record.id for record in records}) == 3
    assert records[0] == third
    assert first.read is False and second.read is False


def test_add_rejects_missing_title(store: NotificationStore) -> None:
    with pytest.raises(ValueError):
        _add(store, "")
    assert store.get_all() == ()


def test_id_factory_collisions_are_skipped(storage: MemoryStorage) -> None:
    ids = iter(["a", "a", "b"])
    store = NotificationStore(storage, id_factory=lambda: next(ids)).initialize()

    _add(store)
    _add(store)

    assert [record.id for record in store.get_all()] == ["b", "a"]


def test_unread_count_scenario_with_mark_all(store: NotificationStore) -> None:
    _add(store)
    assert store.get_unread_count() == 1

    store.mark_all_as_read()

    assert store.get_unread_count() == 0
    assert all(record.read for record in store.get_all())


def test_mark_as_read_is_monotonic_and_idempotent(store: NotificationStore) -> None:
    record = _add(store)
    _add(store, "other")
    calls = []
    store.subscribe(calls.append)

    store.mark_as_read(record.id)
    state_after_first = store.get_all()
    store.mark_as_read(record.id)

    assert store.get_all() == state_after_first
    assert store.get(record.id).read is True
    assert len(calls) == 1
    assert store.get_unread_count() == sum(1 for r in store.get_all() if not r.read)

    _add(store, "later")
    assert store.get(record.id).read is True


def test_unknown_ids_are_ignored(store: NotificationStore) -> None:
    _add(store)
    before = store.get_all()
    calls = []
    store.subscribe(calls.append)

    store.delete("missing")
    store.mark_as_read("missing")

    assert store.get_all() == before
    assert calls == []


def test_delete_and_clear(store: NotificationStore, storage: MemoryStorage) -> None:
    keep = _add(store, "keep")
    drop = _add(store, "drop")

    store.delete(drop.id)
    assert [record.id for record in store.get_all()] == [keep.id]

    store.clear()
    assert store.get_all() == ()
    assert store.get_unread_count() == 0
    assert json.loads(storage.get_item(STORAGE_KEY)) == []


def test_two_subscribers_receive_identical_snapshot_once(store: NotificationStore) -> None:
    first, second = [], []
    store.subscribe(first.append)
    store.subscribe(second.append)

    record = _add(store)

    assert len(first) == 1 and len(second) == 1
    assert first[0] == second[0]
    assert first[0].records == (record,)
    assert first[0].unread_count == 1


def test_unsubscribe_is_independent_and_idempotent(store: NotificationStore) -> None:
    kept, dropped = [], []
    store.subscribe(kept.append)
    unsubscribe = store.subscribe(dropped.append)

    unsubscribe()
    unsubscribe()
    _add(store)

    assert len(kept) == 1
    assert dropped == []

    store.dispose()
    unsubscribe()
    _add(store)
    assert len(kept) == 1


def test_failing_listener_does_not_block_others(store: NotificationStore, caplog) -> None:
    received = []

    def broken(snapshot):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(received.append)

    with caplog.at_level("ERROR"):
        _add(store)

    assert len(received) == 1
    assert "listener" in caplog.text


def test_mutations_persist_full_collection(store: NotificationStore, storage: MemoryStorage) -> None:
    record = _add(store)
    store.mark_as_read(record.id)

    persisted = loads_records(storage.get_item(STORAGE_KEY))
    assert persisted == list(store.get_all())
    assert persisted[0].read is True


def test_storage_failure_keeps_memory_state_and_notifies(caplog) -> None:
    store = NotificationStore(FailingStorage()).initialize()
    received = []
    store.subscribe(received.append)

    with caplog.at_level("WARNING"):
        record = _add(store)
        store.mark_as_read(record.id)

    assert store.get(record.id).read is True
    assert len(received) == 2
    assert "quota exceeded" in caplog.text


def test_corrupt_persisted_state_starts_empty(caplog) -> None:
    storage = MemoryStorage({STORAGE_KEY: "{not json"})

    with caplog.at_level("WARNING"):
        store = NotificationStore(storage, storage_key=STORAGE_KEY).initialize()

    assert store.get_all() == ()
    assert "unreadable" in caplog.text


def test_non_array_persisted_state_starts_empty() -> None:
    storage = MemoryStorage({STORAGE_KEY: json.dumps({"id": 1})})

    store = NotificationStore(storage, storage_key=STORAGE_KEY).initialize()

    assert store.get_all() == ()


def test_reload_restores_records_field_for_field(store: NotificationStore, storage: MemoryStorage) -> None:
    _add(
        store,
        priority=NotificationPriority.HIGH,
        actions=[NotificationAction("Assign Tapper", "assign_tapper")],
    )
    read = _add(store, "read one")
    store.mark_as_read(read.id)

    reloaded = NotificationStore(storage, storage_key=STORAGE_KEY).initialize()

    assert reloaded.get_all() == store.get_all()


def test_secondary_queries(storage: MemoryStorage) -> None:
    clock = FixedClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    store = NotificationStore(storage, clock=clock).initialize()

    old = _add(store, "old")
    clock.now += timedelta(hours=30)
    lease = _add(store, "lease", type=NotificationType.LAND_LEASE)
    urgent = _add(store, "urgent", priority=NotificationPriority.HIGH)
    urgent_read = _add(store, "urgent read", priority="high")
    store.mark_as_read(urgent_read.id)

    assert store.by_type(NotificationType.LAND_LEASE) == [lease]
    assert [r.id for r in store.by_type("tapper_request")] == [urgent_read.id, urgent.id, old.id]
    assert old not in store.recent()
    assert store.recent(timedelta(hours=48))[-1] == old
    assert store.high_priority_unread() == [urgent]


def test_concurrent_adds_persist_in_mutation_order() -> None:
    storage = SlowFirstWriteStorage()
    store = NotificationStore(storage, storage_key=STORAGE_KEY).initialize()
    unread_counts = []
    store.subscribe(lambda snapshot: unread_counts.append(snapshot.unread_count))

    first = threading.Thread(target=_add, args=(store, "first"))
    first.start()
    assert storage.first_write_started.wait(timeout=5)
    others = [threading.Thread(target=_add, args=(store, f"later {n}")) for n in range(3)]
    for thread in others:
        thread.start()
    for thread in [first, *others]:
        thread.join(timeout=5)

    persisted = loads_records(storage.get_item(STORAGE_KEY))
    assert len(store.get_all()) == 4
    assert persisted == list(store.get_all())
    assert unread_counts == [1, 2, 3, 4]


def test_records_handed_out_cannot_change_store_state(store: NotificationStore) -> None:
    record = _add(store)
    store.mark_as_read(record.id)

    with pytest.raises(FrozenInstanceError):
        store.get_all()[0].read = False
    with pytest.raises(FrozenInstanceError):
        store.snapshot().records[0].read = False
    store.get(record.id).data["numberOfTrees"] = 1
    record.data["numberOfTrees"] = 2

    assert store.get_unread_count() == 0
    assert store.get(record.id).read is True
    assert store.get(record.id).data == {"numberOfTrees": 500}


def test_caller_data_is_copied_on_add(store: NotificationStore) -> None:
    data = {"farmer": {"name": "Asha"}}
    record = _add(store, data=data)
    data["farmer"]["name"] = "changed"

    assert store.get(record.id).data == {"farmer": {"name": "Asha"}}
