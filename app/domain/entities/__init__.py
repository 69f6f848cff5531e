"""Domain entities exposed by the application."""

from .notification import (
    NotificationAction,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from .notification_action import (
    ASSIGN_TARGET_VIEWS,
    CONTACT_ACTION_KEYS,
    AcknowledgeAction,
    AssignAction,
    ContactAction,
    ContactChannel,
    ResolvedAction,
    resolve_action,
)

__all__ = [
    "NotificationAction",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationType",
    "ASSIGN_TARGET_VIEWS",
    "CONTACT_ACTION_KEYS",
    "AcknowledgeAction",
    "AssignAction",
    "ContactAction",
    "ContactChannel",
    "ResolvedAction",
    "resolve_action",
]
