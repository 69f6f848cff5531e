"""JSON representation of notification records.

The persisted layout is a single JSON array of objects. Action entries keep
the ``{"label", "action"}`` shape the dashboard has always stored, plus an
optional ``primary`` flag.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable, Mapping

from app.domain.entities import (
    NotificationAction,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from app.utils import ensure_app_timezone

_REQUIRED_FIELDS = ("id", "type", "title", "message", "timestamp")


def serialize_record(record: NotificationRecord) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``record``."""

    payload: dict[str, Any] = {
        "id": record.id,
        "type": record.type.value,
        "title": record.title,
        "message": record.message,
        "timestamp": record.timestamp.isoformat(),
        "read": record.read,
        "priority": record.priority.value,
        "data": _normalize_datetime_values(dict(record.data)),
        "actions": [
            {"label": action.label, "action": action.action_key, "primary": action.primary}
            for action in record.actions
        ],
        "actionable": record.actionable,
    }
    if record.ephemeral:
        payload["ephemeral"] = True
    return payload


def deserialize_record(payload: Mapping[str, Any]) -> NotificationRecord:
    """Rebuild a :class:`NotificationRecord` from ``payload``.

    Raises ``ValueError`` when a required field is missing or holds a value
    that cannot be interpreted.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("Notification entries must be JSON objects")
    missing = [name for name in _REQUIRED_FIELDS if payload.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Notification entry is missing fields: {', '.join(missing)}")

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise ValueError("Notification data must be a JSON object")

    return NotificationRecord(
        id=str(payload["id"]),
        type=NotificationType(payload["type"]),
        title=str(payload["title"]),
        message=str(payload["message"]),
        timestamp=parse_timestamp(payload["timestamp"]),
        read=bool(payload.get("read", False)),
        priority=NotificationPriority(payload.get("priority") or NotificationPriority.NORMAL.value),
        data=data,
        actions=[_deserialize_action(item) for item in payload.get("actions") or []],
        actionable=bool(payload.get("actionable", bool(payload.get("actions")))),
        ephemeral=bool(payload.get("ephemeral", False)),
    )


def dumps_records(records: Iterable[NotificationRecord]) -> str:
    """Serialize ``records`` into the persisted JSON array."""

    return json.dumps([serialize_record(record) for record in records])


def loads_records(raw: str) -> list[NotificationRecord]:
    """Parse the persisted JSON array.

    A blob that is not a JSON array raises ``ValueError``. Entries that cannot
    be decoded individually are dropped so one bad entry does not hide the
    rest of the collection.
    """

    decoded = json.loads(raw)
    if not isinstance(decoded, list):
        raise ValueError("Persisted notifications must be a JSON array")

    records: list[NotificationRecord] = []
    for entry in decoded:
        try:
            records.append(deserialize_record(entry))
        except (TypeError, ValueError):
            continue
    return records


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the ``Z`` suffix browsers emit."""

    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        parsed = datetime.fromisoformat(text)
    localized = ensure_app_timezone(parsed) if parsed.tzinfo is None else parsed
    return localized


def _deserialize_action(item: Any) -> NotificationAction:
    if not isinstance(item, Mapping):
        raise ValueError("Notification actions must be JSON objects")
    action_key = item.get("action") or item.get("action_key")
    label = item.get("label")
    if not action_key or not label:
        raise ValueError("Notification actions require a label and an action key")
    return NotificationAction(
        label=str(label), action_key=str(action_key), primary=bool(item.get("primary", False))
    )


def _normalize_datetime_values(data: Any) -> Any:
    """Convert ``datetime`` instances nested inside ``data`` into ISO strings."""

    if isinstance(data, dict):
        return {key: _normalize_datetime_values(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_normalize_datetime_values(item) for item in data]
    if isinstance(data, datetime):
        return data.isoformat()
    return data


__all__ = [
    "deserialize_record",
    "dumps_records",
    "loads_records",
    "parse_timestamp",
    "serialize_record",
]
