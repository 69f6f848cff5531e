"""Tests for the notification JSON layout and the SQLAlchemy-backed storage."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.domain.entities import (
    NotificationAction,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from app.infrastructure.database import build_engine, initialize_database
from app.infrastructure.notifications import (
    NotificationStore,
    deserialize_record,
    loads_records,
    parse_timestamp,
    serialize_record,
)
from app.infrastructure.storage import DurableStorage


def _record(**overrides) -> NotificationRecord:
    values = dict(
        id="abc",
        type=NotificationType.SERVICE_REQUEST,
        title="New Fertilizer Application Request",
        message="Asha has requested fertilizer application for 120 trees",
        timestamp=datetime(2024, 5, 1, 8, 30, 15, 250000, tzinfo=timezone.utc),
        priority=NotificationPriority.HIGH,
        data={"requestId": "SR1", "numberOfTrees": 120},
        actions=[NotificationAction("Assign Provider", "assign_provider", primary=True)],
        actionable=True,
    )
    values.update(overrides)
    return NotificationRecord(**values)


def test_serialized_layout_uses_dashboard_keys() -> None:
    payload = serialize_record(_record())

    assert payload["type"] == "service_request"
    assert payload["priority"] == "high"
    assert payload["timestamp"] == "2024-05-01T08:30:15.250000+00:00"
    assert payload["actions"] == [
        {"label": "Assign Provider", "action": "assign_provider", "primary": True}
    ]
    assert "ephemeral" not in payload


def test_record_survives_serialization() -> None:
    record = _record()

    assert deserialize_record(json.loads(json.dumps(serialize_record(record)))) == record


def test_legacy_entries_without_optional_fields_are_accepted() -> None:
    record = deserialize_record(
        {
            "id": 1700000000000,
            "type": "tapper_request",
            "title": "New Tapper Request",
            "message": "Ravi has requested tapping services for 40 trees",
            "timestamp": "2024-05-01T08:30:00.000Z",
            "actions": [{"label": "Assign Tapper", "action": "assign_tapper"}],
        }
    )

    assert record.id == "1700000000000"
    assert record.read is False
    assert record.priority is NotificationPriority.NORMAL
    assert record.actionable is True
    assert record.timestamp == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


def test_missing_required_field_is_rejected() -> None:
    with pytest.raises(ValueError, match="title"):
        deserialize_record({"id": "x", "type": "land_lease", "message": "m", "timestamp": "2024-01-01"})


def test_malformed_entries_are_dropped_from_collection() -> None:
    good = serialize_record(_record())
    raw = json.dumps([good, {"id": "broken"}, "junk", {**good, "id": "other", "type": "unknown"}])

    assert [record.id for record in loads_records(raw)] == ["abc"]


def test_non_array_blob_raises() -> None:
    with pytest.raises(ValueError):
        loads_records(json.dumps({"records": []}))


def test_parse_timestamp_keeps_explicit_offsets() -> None:
    parsed = parse_timestamp("2024-05-01T14:00:00+05:30")

    assert parsed.utcoffset().total_seconds() == 5.5 * 3600


@pytest.fixture()
def durable_storage(tmp_path: Path) -> DurableStorage:
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}")
    initialize_database(bind=engine)
    yield DurableStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


def test_durable_storage_overwrites_and_removes(durable_storage: DurableStorage) -> None:
    assert durable_storage.get_item("adminNotifications") is None

    durable_storage.set_item("adminNotifications", "[]")
    durable_storage.set_item("adminNotifications", '[{"id": "1"}]')
    assert durable_storage.get_item("adminNotifications") == '[{"id": "1"}]'

    durable_storage.remove_item("adminNotifications")
    durable_storage.remove_item("adminNotifications")
    assert durable_storage.get_item("adminNotifications") is None


def test_store_state_survives_restart_with_database(durable_storage: DurableStorage) -> None:
    store = NotificationStore(durable_storage).initialize()
    first = store.add(
        type=NotificationType.LAND_REGISTRATION,
        title="New Land Registration",
        message="Asha has registered a new land: North Plot in Kottayam",
    )
    store.add(
        type=NotificationType.LEAVE_REQUEST,
        title="New Staff Leave Request",
        message="Ravi (tapper) has requested sick leave for 2 day(s)",
        priority="high",
    )
    store.mark_as_read(first.id)

    restarted = NotificationStore(durable_storage).initialize()

    assert restarted.get_all() == store.get_all()
    assert restarted.get_unread_count() == 1
