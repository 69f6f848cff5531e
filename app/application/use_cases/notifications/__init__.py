"""Public helpers for producing, merging and acting on notifications."""

from .actions import (
    ActionDispatcher,
    ActionOutcome,
    ContactOption,
    PresentationSurface,
    build_contact_options,
    choose_by_channel,
)
from .ephemeral import PendingCounters, build_pending_notifications, pending_message
from .events import (
    notify_land_lease_application,
    notify_land_registration,
    notify_service_request,
    notify_staff_leave_request,
    notify_tapper_request,
    notify_tenancy_offering,
)
from .feed import (
    FeedFilter,
    NotificationFeed,
    NotificationFeedController,
    compose_feed,
)

__all__ = [
    "ActionDispatcher",
    "ActionOutcome",
    "ContactOption",
    "PresentationSurface",
    "build_contact_options",
    "choose_by_channel",
    "PendingCounters",
    "build_pending_notifications",
    "pending_message",
    "notify_land_lease_application",
    "notify_land_registration",
    "notify_service_request",
    "notify_staff_leave_request",
    "notify_tapper_request",
    "notify_tenancy_offering",
    "FeedFilter",
    "NotificationFeed",
    "NotificationFeedController",
    "compose_feed",
]
