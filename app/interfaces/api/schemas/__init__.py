from .notification import (
    ContactOptionRead,
    HandoffRead,
    NotificationActionRead,
    NotificationActionRequest,
    NotificationActionResult,
    NotificationFeedRead,
    NotificationRead,
    UnreadCountRead,
)
from .notification_event import (
    ActorPayload,
    LandLeaseApplicationPayload,
    LandLeaseEvent,
    LandRegistrationEvent,
    LandRegistrationPayload,
    LeaveRequestEvent,
    LeaveRequestPayload,
    ServiceRequestEvent,
    ServiceRequestPayload,
    TapperRequestEvent,
    TapperRequestPayload,
    TenancyOfferingEvent,
    TenancyOfferingPayload,
)

__all__ = [
    "ContactOptionRead",
    "HandoffRead",
    "NotificationActionRead",
    "NotificationActionRequest",
    "NotificationActionResult",
    "NotificationFeedRead",
    "NotificationRead",
    "UnreadCountRead",
    "ActorPayload",
    "LandLeaseApplicationPayload",
    "LandLeaseEvent",
    "LandRegistrationEvent",
    "LandRegistrationPayload",
    "LeaveRequestEvent",
    "LeaveRequestPayload",
    "ServiceRequestEvent",
    "ServiceRequestPayload",
    "TapperRequestEvent",
    "TapperRequestPayload",
    "TenancyOfferingEvent",
    "TenancyOfferingPayload",
]
