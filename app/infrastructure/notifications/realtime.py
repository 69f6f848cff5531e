"""Helpers to broadcast realtime events to connected clients."""

from __future__ import annotations

import copy
from typing import Any

from .handoff import HandoffMessage
from .manager import NotificationConnectionManager


class RealtimeEventPublisher:
    """Dispatch structured realtime events to websocket subscribers."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, *, event_type: str, payload: Any) -> None:
        """Schedule a realtime ``event_type`` event for every open panel."""

        message = {"type": event_type, "data": copy.deepcopy(payload)}
        self._manager.schedule_broadcast(message)

    def dispatch_handoff(self, message: HandoffMessage) -> None:
        """Announce an assign handoff so mounted views can react immediately."""

        self.dispatch(
            event_type="handoff",
            payload={
                "target_view": message.target_view,
                "notification_id": message.notification_id,
                "payload": message.payload,
            },
        )


__all__ = ["RealtimeEventPublisher"]
