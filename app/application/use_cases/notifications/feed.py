"""Merge durable and pending notifications into the feed shown to admins."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from app.domain.entities import NotificationRecord, NotificationType
from app.infrastructure.notifications import NotificationSnapshot, NotificationStore

from .ephemeral import PendingCounters, build_pending_notifications


class FeedFilter(str, Enum):
    """Filter tabs offered by the notification panel."""

    ALL = "all"
    UNREAD = "unread"
    STAFF_REQUEST = "staff_request"
    TAPPER_REQUEST = "tapper_request"
    LAND_LEASE = "land_lease"
    SERVICE_REQUEST = "service_request"
    HIGH_PRIORITY = "high_priority"


# Tabs whose category also has a pending-counter projection.
_BLENDED_TYPES = {
    FeedFilter.STAFF_REQUEST: NotificationType.STAFF_REQUEST,
    FeedFilter.TAPPER_REQUEST: NotificationType.TAPPER_REQUEST,
}
_DURABLE_ONLY_TYPES = {
    FeedFilter.LAND_LEASE: NotificationType.LAND_LEASE,
    FeedFilter.SERVICE_REQUEST: NotificationType.SERVICE_REQUEST,
}


@dataclass(frozen=True)
class NotificationFeed:
    """Records to render for the active filter plus the badge per tab."""

    active_filter: FeedFilter
    items: tuple[NotificationRecord, ...]
    counts: dict[FeedFilter, int]
    unread_count: int


def filter_feed(
    durable: Sequence[NotificationRecord],
    ephemeral: Sequence[NotificationRecord],
    active_filter: FeedFilter,
) -> list[NotificationRecord]:
    """Return the ordered records for ``active_filter``, pending ones first."""

    if active_filter is FeedFilter.ALL:
        return [*ephemeral, *durable]
    if active_filter is FeedFilter.UNREAD:
        return [*ephemeral, *(record for record in durable if not record.read)]
    if active_filter is FeedFilter.HIGH_PRIORITY:
        return [
            *(record for record in ephemeral if record.is_high_priority),
            *(record for record in durable if record.is_high_priority),
        ]
    if active_filter in _BLENDED_TYPES:
        wanted = _BLENDED_TYPES[active_filter]
        return [
            *(record for record in ephemeral if record.type is wanted),
            *(record for record in durable if record.type is wanted),
        ]
    wanted = _DURABLE_ONLY_TYPES[active_filter]
    return [record for record in durable if record.type is wanted]


def count_tabs(
    durable: Sequence[NotificationRecord],
    ephemeral: Sequence[NotificationRecord],
    unread_count: int,
    counters: PendingCounters,
) -> dict[FeedFilter, int]:
    """Compute the badge shown next to every filter tab."""

    def durable_of(notification_type: NotificationType) -> int:
        return sum(1 for record in durable if record.type is notification_type)

    return {
        FeedFilter.ALL: len(ephemeral) + len(durable),
        FeedFilter.UNREAD: unread_count + counters.total(),
        FeedFilter.STAFF_REQUEST: max(counters.staff_applications, 0)
        + durable_of(NotificationType.STAFF_REQUEST),
        FeedFilter.TAPPER_REQUEST: max(counters.tapping_requests, 0)
        + durable_of(NotificationType.TAPPER_REQUEST),
        FeedFilter.LAND_LEASE: durable_of(NotificationType.LAND_LEASE),
        FeedFilter.SERVICE_REQUEST: durable_of(NotificationType.SERVICE_REQUEST),
        FeedFilter.HIGH_PRIORITY: len(ephemeral)
        + sum(1 for record in durable if record.is_high_priority),
    }


def compose_feed(
    snapshot: NotificationSnapshot,
    counters: PendingCounters,
    active_filter: FeedFilter | str = FeedFilter.ALL,
    *,
    now: datetime | None = None,
) -> NotificationFeed:
    """Build the feed for ``snapshot`` without touching the store."""

    active_filter = FeedFilter(active_filter)
    ephemeral = build_pending_notifications(counters, now=now)
    durable = snapshot.records
    return NotificationFeed(
        active_filter=active_filter,
        items=tuple(filter_feed(durable, ephemeral, active_filter)),
        counts=count_tabs(durable, ephemeral, snapshot.unread_count, counters),
        unread_count=snapshot.unread_count,
    )


class NotificationFeedController:
    """Keep a feed up to date for one open notification panel.

    The controller subscribes to ``store`` when created and recomputes the
    feed whenever the store notifies or the filter or counters change.
    ``on_change`` receives each recomputed feed. Call :meth:`dispose` when
    the panel closes.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        counters: PendingCounters | None = None,
        active_filter: FeedFilter | str = FeedFilter.ALL,
        on_change: Callable[[NotificationFeed], Any] | None = None,
    ) -> None:
        self._counters = counters or PendingCounters()
        self._filter = FeedFilter(active_filter)
        self._on_change = on_change
        self._snapshot = store.snapshot()
        self._feed = self._recompute()
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_store_change)

    @property
    def feed(self) -> NotificationFeed:
        return self._feed

    @property
    def counters(self) -> PendingCounters:
        return self._counters

    @property
    def active_filter(self) -> FeedFilter:
        return self._filter

    def set_filter(self, active_filter: FeedFilter | str) -> NotificationFeed:
        self._filter = FeedFilter(active_filter)
        return self._refresh()

    def set_counters(self, counters: PendingCounters) -> NotificationFeed:
        self._counters = counters
        return self._refresh()

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_store_change(self, snapshot: NotificationSnapshot) -> None:
        self._snapshot = snapshot
        self._refresh()

    def _refresh(self) -> NotificationFeed:
        self._feed = self._recompute()
        if self._on_change is not None:
            self._on_change(self._feed)
        return self._feed

    def _recompute(self) -> NotificationFeed:
        return compose_feed(self._snapshot, self._counters, self._filter)


__all__ = [
    "FeedFilter",
    "NotificationFeed",
    "NotificationFeedController",
    "compose_feed",
    "count_tabs",
    "filter_feed",
]
