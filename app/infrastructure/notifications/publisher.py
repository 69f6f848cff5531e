"""Push notification store snapshots to websocket subscribers."""

from __future__ import annotations

from typing import Any

from .codec import serialize_record
from .manager import NotificationConnectionManager
from .store import NotificationSnapshot


class NotificationPublisher:
    """Store listener that mirrors every snapshot to connected panels."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def __call__(self, snapshot: NotificationSnapshot) -> None:
        self.dispatch(snapshot)

    def dispatch(self, snapshot: NotificationSnapshot) -> None:
        """Schedule ``snapshot`` to be delivered to every open panel."""

        self._manager.schedule_broadcast(
            {"type": "snapshot", "data": serialize_snapshot(snapshot)}
        )


def serialize_snapshot(snapshot: NotificationSnapshot) -> dict[str, Any]:
    """Return the websocket payload representation for ``snapshot``."""

    return {
        "records": [serialize_record(record) for record in snapshot.records],
        "unread_count": snapshot.unread_count,
    }


__all__ = [
    "NotificationPublisher",
    "serialize_snapshot",
]
