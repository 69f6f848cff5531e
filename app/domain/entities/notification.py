"""Domain entity representing a dashboard notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Categories a notification can belong to."""

    TAPPER_REQUEST = "tapper_request"
    STAFF_REQUEST = "staff_request"
    LAND_REGISTRATION = "land_registration"
    LAND_LEASE = "land_lease"
    SERVICE_REQUEST = "service_request"
    TENANCY_OFFERING = "tenancy_offering"
    LEAVE_REQUEST = "leave_request"


class NotificationPriority(str, Enum):
    """Urgency attached to a notification when it is created."""

    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True)
class NotificationAction:
    """Action a notification offers to the user interface."""

    label: str
    action_key: str
    primary: bool = False


@dataclass(frozen=True)
class NotificationRecord:
    """Information message shown in the admin notification feed.

    Records are immutable; the store marks one as read by replacing it with
    a copy whose ``read`` is ``True``. Ephemeral records are rebuilt from
    pending counters on every feed computation and never enter the store.
    """

    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    read: bool = False
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: dict[str, Any] = field(default_factory=dict)
    actions: tuple[NotificationAction, ...] = ()
    actionable: bool = False
    ephemeral: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", dict(self.data))
        object.__setattr__(self, "actions", tuple(self.actions))

    @property
    def is_high_priority(self) -> bool:
        return self.priority is NotificationPriority.HIGH


__all__ = [
    "NotificationAction",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationType",
]
