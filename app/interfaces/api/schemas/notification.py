"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.entities import (
    ContactChannel,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)


class NotificationActionRead(BaseModel):
    """Action button offered by a notification."""

    label: str
    action: str
    primary: bool = False


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    read: bool = False
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: dict[str, Any] = Field(default_factory=dict)
    actions: list[NotificationActionRead] = Field(default_factory=list)
    actionable: bool = False
    ephemeral: bool = False

    @classmethod
    def from_record(cls, record: NotificationRecord) -> "NotificationRead":
        return cls(
            id=record.id,
            type=record.type,
            title=record.title,
            message=record.message,
            timestamp=record.timestamp,
            read=record.read,
            priority=record.priority,
            data=record.data,
            actions=[
                NotificationActionRead(
                    label=action.label, action=action.action_key, primary=action.primary
                )
                for action in record.actions
            ],
            actionable=record.actionable,
            ephemeral=record.ephemeral,
        )


class NotificationFeedRead(BaseModel):
    """Merged feed for the active filter together with every tab badge."""

    filter: str
    items: list[NotificationRead]
    counts: dict[str, int]
    unread_count: int


class UnreadCountRead(BaseModel):
    """Number of durable notifications that have not been read."""

    unread_count: int


class NotificationActionRequest(BaseModel):
    """Action picked by the user, plus the contact channel when relevant."""

    action: str = Field(..., min_length=1, description="Declared action key")
    channel: ContactChannel | None = Field(
        default=None,
        description="Contact channel chosen by the user; omitted means cancelled",
    )


class ContactOptionRead(BaseModel):
    """Link the client should hand to the operating system."""

    channel: ContactChannel
    label: str
    uri: str
    target: str


class NotificationActionResult(BaseModel):
    """Outcome of dispatching an action."""

    kind: str
    notification_id: str
    target_view: str | None = None
    close_panel: bool = False
    options: list[ContactOptionRead] = Field(default_factory=list)
    selected: ContactOptionRead | None = None


class HandoffRead(BaseModel):
    """Payload handed from the notification panel to another view."""

    target_view: str
    notification_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "ContactOptionRead",
    "HandoffRead",
    "NotificationActionRead",
    "NotificationActionRequest",
    "NotificationActionResult",
    "NotificationFeedRead",
    "NotificationRead",
    "UnreadCountRead",
]
