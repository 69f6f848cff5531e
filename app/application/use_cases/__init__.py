"""Aggregate application use cases."""

from .notifications import ActionDispatcher, NotificationFeedController, compose_feed

__all__ = [
    "ActionDispatcher",
    "NotificationFeedController",
    "compose_feed",
]
