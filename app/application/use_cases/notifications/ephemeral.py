"""Transient notifications derived from pending work counters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final

from app.domain.entities import NotificationPriority, NotificationRecord, NotificationType
from app.utils import now_in_app_timezone


@dataclass(frozen=True)
class PendingCounters:
    """Current number of items waiting on the admin, per category."""

    staff_applications: int = 0
    tapping_requests: int = 0
    land_registrations: int = 0

    def total(self) -> int:
        return sum(
            max(count, 0)
            for count in (
                self.staff_applications,
                self.tapping_requests,
                self.land_registrations,
            )
        )


@dataclass(frozen=True)
class _PendingCategory:
    id: str
    type: NotificationType
    title: str
    noun: str
    state: str
    counter: str


PENDING_CATEGORIES: Final[tuple[_PendingCategory, ...]] = (
    _PendingCategory(
        id="pending-staff-requests",
        type=NotificationType.STAFF_REQUEST,
        title="Staff Applications",
        noun="staff application",
        state="pending review",
        counter="staff_applications",
    ),
    _PendingCategory(
        id="pending-tapping-requests",
        type=NotificationType.TAPPER_REQUEST,
        title="Tapping Requests",
        noun="tapping request",
        state="pending assignment",
        counter="tapping_requests",
    ),
    _PendingCategory(
        id="pending-land-registrations",
        type=NotificationType.LAND_REGISTRATION,
        title="Land Registration",
        noun="land registration",
        state="pending verification",
        counter="land_registrations",
    ),
)


def pending_message(count: int, noun: str, state: str) -> str:
    """Return ``"<count> new <noun>[s] <state>"`` with singular for exactly one."""

    suffix = "" if count == 1 else "s"
    return f"{count} new {noun}{suffix} {state}"


def build_pending_notifications(
    counters: PendingCounters, *, now: datetime | None = None
) -> list[NotificationRecord]:
    """Project ``counters`` into one unread, high priority record per category.

    Categories whose counter is zero or negative produce nothing. Identifiers
    depend only on the category, so repeated calls yield the same ids.
    """

    timestamp = now or now_in_app_timezone()
    records: list[NotificationRecord] = []
    for category in PENDING_CATEGORIES:
        count = getattr(counters, category.counter)
        if count <= 0:
            continue
        records.append(
            NotificationRecord(
                id=category.id,
                type=category.type,
                title=category.title,
                message=pending_message(count, category.noun, category.state),
                timestamp=timestamp,
                read=False,
                priority=NotificationPriority.HIGH,
                data={"count": count},
                actions=[],
                actionable=True,
                ephemeral=True,
            )
        )
    return records


__all__ = [
    "PENDING_CATEGORIES",
    "PendingCounters",
    "build_pending_notifications",
    "pending_message",
]
