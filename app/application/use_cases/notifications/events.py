"""Factories that turn dashboard submissions into stored notifications."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from app.domain.entities import (
    NotificationAction,
    NotificationPriority,
    NotificationRecord,
    NotificationType,
)
from app.infrastructure.email import send_admin_notification_email
from app.infrastructure.notifications import NotificationStore
from app.utils import epoch_millis, now_in_app_timezone

logger = logging.getLogger(__name__)

Mailer = Callable[[NotificationRecord], Any]

TAPPER_REQUEST_ACTIONS = (
    NotificationAction("View Details", "view_details"),
    NotificationAction("Assign Tapper", "assign_tapper"),
    NotificationAction("Contact Farmer", "contact_farmer"),
)
LAND_LEASE_ACTIONS = (
    NotificationAction("Review Application", "review_application"),
    NotificationAction("Contact Applicant", "contact_applicant"),
)
SERVICE_REQUEST_ACTIONS = (
    NotificationAction("View Details", "view_details"),
    NotificationAction("Assign Provider", "assign_provider"),
    NotificationAction("Contact Farmer", "contact_farmer"),
)
LAND_REGISTRATION_ACTIONS = (
    NotificationAction("View Details", "view_land_details"),
    NotificationAction("Verify Land", "verify_land"),
    NotificationAction("Contact Farmer", "contact_farmer"),
)
TENANCY_OFFERING_ACTIONS = (
    NotificationAction("View Details", "view_offering_details"),
    NotificationAction("Contact Owner", "contact_owner"),
    NotificationAction("Apply for Tenancy", "apply_tenancy"),
)
LEAVE_REQUEST_ACTIONS = (
    NotificationAction("Approve", "approve_leave", primary=True),
    NotificationAction("Reject", "reject_leave"),
    NotificationAction("View Details", "view_leave_details"),
)

SERVICE_TYPE_LABELS = {
    "fertilizer": "Fertilizer Application",
    "rain_guard": "Rain Guard Installation",
}


def _priority_for_urgency(urgency: Any, *, high_levels: tuple[str, ...] = ("high",)) -> NotificationPriority:
    if urgency in high_levels:
        return NotificationPriority.HIGH
    return NotificationPriority.NORMAL


def _submitted_at() -> str:
    return now_in_app_timezone().isoformat()


def _fallback_id(prefix: str) -> str:
    return f"{prefix}{epoch_millis()}"


def _contact_fields(actor: Mapping[str, Any], prefix: str = "farmer") -> dict[str, Any]:
    return {
        f"{prefix}Name": actor.get("name"),
        f"{prefix}Email": actor.get("email"),
        f"{prefix}Phone": actor.get("phone"),
    }


def _store_and_forward(
    store: NotificationStore,
    mailer: Mailer | None,
    *,
    type: NotificationType,
    title: str,
    message: str,
    priority: NotificationPriority,
    data: dict[str, Any],
    actions: tuple[NotificationAction, ...],
) -> NotificationRecord:
    record = store.add(
        type=type,
        title=title,
        message=message,
        priority=priority,
        data=data,
        actions=actions,
    )
    if mailer is not None:
        try:
            mailer(record)
        except Exception:
            logger.exception("Could not forward notification %s by email", record.id)
    return record


def notify_tapper_request(
    store: NotificationStore,
    request: Mapping[str, Any],
    farmer: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a farmer asking for tapping services."""

    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.TAPPER_REQUEST,
        title="New Tapper Request",
        message=(
            f"{farmer.get('name')} has requested tapping services for "
            f"{request.get('numberOfTrees')} trees"
        ),
        priority=_priority_for_urgency(request.get("urgency")),
        data={
            "requestId": request.get("id") or _fallback_id("TR"),
            **_contact_fields(farmer),
            "farmLocation": request.get("farmLocation"),
            "farmSize": request.get("farmSize"),
            "numberOfTrees": request.get("numberOfTrees"),
            "tappingType": request.get("tappingType"),
            "startDate": request.get("startDate"),
            "urgency": request.get("urgency"),
            "preferredTime": request.get("preferredTime"),
            "budgetRange": request.get("budgetRange"),
            "specialRequirements": request.get("specialRequirements"),
            "contactPreference": request.get("contactPreference"),
            "submittedAt": _submitted_at(),
        },
        actions=TAPPER_REQUEST_ACTIONS,
    )


def notify_land_lease_application(
    store: NotificationStore,
    application: Mapping[str, Any],
    farmer: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a farmer applying to lease land."""

    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.LAND_LEASE,
        title="New Land Lease Application",
        message=(
            f"{farmer.get('name')} has applied for {application.get('landSize')} "
            f"land lease in {application.get('desiredLocation')}"
        ),
        priority=NotificationPriority.NORMAL,
        data={
            "applicationId": application.get("id") or _fallback_id("LA"),
            **_contact_fields(farmer),
            "desiredLocation": application.get("desiredLocation"),
            "landSize": application.get("landSize"),
            "leaseDuration": application.get("leaseDuration"),
            "proposedRent": application.get("proposedRent"),
            "intendedUse": application.get("intendedUse"),
            "farmingExperience": application.get("farmingExperience"),
            "submittedAt": _submitted_at(),
        },
        actions=LAND_LEASE_ACTIONS,
    )


def notify_service_request(
    store: NotificationStore,
    request: Mapping[str, Any],
    farmer: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a fertilizer or rain guard service request."""

    service_type = request.get("serviceType")
    label = SERVICE_TYPE_LABELS["fertilizer" if service_type == "fertilizer" else "rain_guard"]
    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.SERVICE_REQUEST,
        title=f"New {label} Request",
        message=(
            f"{farmer.get('name')} has requested {label.lower()} for "
            f"{request.get('numberOfTrees')} trees"
        ),
        priority=_priority_for_urgency(request.get("urgency")),
        data={
            "requestId": request.get("id") or _fallback_id("SR"),
            "serviceType": service_type,
            **_contact_fields(farmer),
            "farmLocation": request.get("farmLocation"),
            "farmSize": request.get("farmSize"),
            "numberOfTrees": request.get("numberOfTrees"),
            "preferredDate": request.get("preferredDate"),
            "urgency": request.get("urgency"),
            "budgetRange": request.get("budgetRange"),
            "specialRequirements": request.get("specialRequirements"),
            "submittedAt": _submitted_at(),
        },
        actions=SERVICE_REQUEST_ACTIONS,
    )


def notify_land_registration(
    store: NotificationStore,
    land: Mapping[str, Any],
    farmer: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a newly registered plot awaiting verification."""

    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.LAND_REGISTRATION,
        title="New Land Registration",
        message=(
            f"{farmer.get('name')} has registered a new land: "
            f"{land.get('landTitle')} in {land.get('district')}"
        ),
        priority=NotificationPriority.NORMAL,
        data={
            "registrationId": land.get("registrationId") or _fallback_id("LR"),
            **_contact_fields(farmer),
            "landTitle": land.get("landTitle"),
            "landLocation": land.get("landLocation"),
            "district": land.get("district"),
            "totalArea": land.get("totalArea"),
            "surveyNumber": land.get("surveyNumber"),
            "status": land.get("status") or "pending_verification",
            "submittedAt": _submitted_at(),
        },
        actions=LAND_REGISTRATION_ACTIONS,
    )


def notify_tenancy_offering(
    store: NotificationStore,
    offering: Mapping[str, Any],
    land: Mapping[str, Any],
    farmer: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a land owner offering a plot for tapping tenancy."""

    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.TENANCY_OFFERING,
        title="New Tenancy Offering Available",
        message=(
            f"{farmer.get('name')} has offered {land.get('landTitle')} "
            "for rubber tapping tenancy"
        ),
        priority=NotificationPriority.HIGH,
        data={
            "offeringId": offering.get("offeringId") or _fallback_id("TO"),
            **_contact_fields(farmer),
            "landTitle": land.get("landTitle"),
            "landLocation": land.get("landLocation"),
            "district": land.get("district"),
            "totalArea": land.get("totalArea"),
            "tenancyRate": offering.get("tenancyRate"),
            "rateType": offering.get("rateType"),
            "leaseDuration": offering.get("leaseDuration"),
            "availableFrom": offering.get("availableFrom"),
            "allowedActivities": offering.get("allowedActivities"),
            "status": "available",
            "submittedAt": _submitted_at(),
        },
        actions=TENANCY_OFFERING_ACTIONS,
    )


def notify_staff_leave_request(
    store: NotificationStore,
    leave: Mapping[str, Any],
    staff: Mapping[str, Any],
    *,
    mailer: Mailer | None = send_admin_notification_email,
) -> NotificationRecord:
    """Record a staff member asking for leave."""

    return _store_and_forward(
        store,
        mailer,
        type=NotificationType.LEAVE_REQUEST,
        title="New Staff Leave Request",
        message=(
            f"{staff.get('name')} ({staff.get('role')}) has requested "
            f"{leave.get('leaveType')} leave for {leave.get('totalDays')} day(s)"
        ),
        priority=_priority_for_urgency(
            leave.get("urgency"), high_levels=("emergency", "high")
        ),
        data={
            "requestId": leave.get("requestId"),
            "staffName": staff.get("name"),
            "staffEmail": staff.get("email"),
            "staffRole": staff.get("role"),
            "staffDepartment": staff.get("department"),
            "leaveType": leave.get("leaveType"),
            "startDate": leave.get("startDate"),
            "endDate": leave.get("endDate"),
            "totalDays": leave.get("totalDays"),
            "reason": leave.get("reason"),
            "urgency": leave.get("urgency"),
            "contactDuringLeave": leave.get("contactDuringLeave"),
            "submittedAt": leave.get("submittedAt") or _submitted_at(),
        },
        actions=LEAVE_REQUEST_ACTIONS,
    )


__all__ = [
    "LAND_LEASE_ACTIONS",
    "LAND_REGISTRATION_ACTIONS",
    "LEAVE_REQUEST_ACTIONS",
    "Mailer",
    "SERVICE_REQUEST_ACTIONS",
    "TAPPER_REQUEST_ACTIONS",
    "TENANCY_OFFERING_ACTIONS",
    "notify_land_lease_application",
    "notify_land_registration",
    "notify_service_request",
    "notify_staff_leave_request",
    "notify_tapper_request",
    "notify_tenancy_offering",
]
