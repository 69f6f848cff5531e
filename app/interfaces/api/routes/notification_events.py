"""Endpoints the dashboard screens call to raise admin notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.application.use_cases.notifications import (
    notify_land_lease_application,
    notify_land_registration,
    notify_service_request,
    notify_staff_leave_request,
    notify_tapper_request,
    notify_tenancy_offering,
)
from app.infrastructure.notifications import NotificationStore
from app.interfaces.api.dependencies import get_notification_store
from app.interfaces.api.schemas import (
    LandLeaseEvent,
    LandRegistrationEvent,
    LeaveRequestEvent,
    NotificationRead,
    ServiceRequestEvent,
    TapperRequestEvent,
    TenancyOfferingEvent,
)

router = APIRouter(prefix="/notification-events", tags=["notifications"])


@router.post(
    "/tapper-requests",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_tapper_request_notification(
    event: TapperRequestEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_tapper_request(
        store, event.request.to_payload(), event.farmer.to_payload()
    )
    return NotificationRead.from_record(record)


@router.post(
    "/land-leases",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_land_lease_notification(
    event: LandLeaseEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_land_lease_application(
        store, event.application.to_payload(), event.farmer.to_payload()
    )
    return NotificationRead.from_record(record)


@router.post(
    "/service-requests",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_service_request_notification(
    event: ServiceRequestEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_service_request(
        store, event.request.to_payload(), event.farmer.to_payload()
    )
    return NotificationRead.from_record(record)


@router.post(
    "/land-registrations",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_land_registration_notification(
    event: LandRegistrationEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_land_registration(
        store, event.land.to_payload(), event.farmer.to_payload()
    )
    return NotificationRead.from_record(record)


@router.post(
    "/tenancy-offerings",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_tenancy_offering_notification(
    event: TenancyOfferingEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_tenancy_offering(
        store,
        event.offering.to_payload(),
        event.land.to_payload(),
        event.farmer.to_payload(),
    )
    return NotificationRead.from_record(record)


@router.post(
    "/leave-requests",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_leave_request_notification(
    event: LeaveRequestEvent,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    record = notify_staff_leave_request(
        store, event.leave.to_payload(), event.staff.to_payload()
    )
    return NotificationRead.from_record(record)
