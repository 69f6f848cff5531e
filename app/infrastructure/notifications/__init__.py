"""Notification storage and realtime helpers for the infrastructure layer."""

from .codec import (
    deserialize_record,
    dumps_records,
    loads_records,
    parse_timestamp,
    serialize_record,
)
from .handoff import HandoffChannel, HandoffListener, HandoffMessage
from .manager import NotificationConnectionManager
from .publisher import NotificationPublisher, serialize_snapshot
from .realtime import RealtimeEventPublisher
from .store import (
    DEFAULT_RECENT_WINDOW,
    Listener,
    NotificationSnapshot,
    NotificationStore,
    Unsubscribe,
)

__all__ = [
    "deserialize_record",
    "dumps_records",
    "loads_records",
    "parse_timestamp",
    "serialize_record",
    "HandoffChannel",
    "HandoffListener",
    "HandoffMessage",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "serialize_snapshot",
    "RealtimeEventPublisher",
    "DEFAULT_RECENT_WINDOW",
    "Listener",
    "NotificationSnapshot",
    "NotificationStore",
    "Unsubscribe",
]
