"""Request bodies submitted by the dashboard screens that raise notifications."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accept both ``snake_case`` and the dashboard's ``camelCase`` keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ActorPayload(_CamelModel):
    """Person who originated the request."""

    name: str = Field(..., min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    role: str | None = None
    department: str | None = None


class TapperRequestPayload(_CamelModel):
    id: str | None = None
    farm_location: str | None = None
    farm_size: str | None = None
    number_of_trees: int | None = Field(default=None, ge=0)
    tapping_type: str | None = None
    start_date: str | None = None
    urgency: str | None = None
    preferred_time: str | None = None
    budget_range: str | None = None
    special_requirements: str | None = None
    contact_preference: str | None = None


class LandLeaseApplicationPayload(_CamelModel):
    id: str | None = None
    desired_location: str | None = None
    land_size: str | None = None
    lease_duration: str | None = None
    proposed_rent: str | None = None
    intended_use: str | None = None
    farming_experience: str | None = None


class ServiceRequestPayload(_CamelModel):
    id: str | None = None
    service_type: str = Field(default="fertilizer", description="fertilizer or rain_guard")
    farm_location: str | None = None
    farm_size: str | None = None
    number_of_trees: int | None = Field(default=None, ge=0)
    preferred_date: str | None = None
    urgency: str | None = None
    budget_range: str | None = None
    special_requirements: str | None = None


class LandRegistrationPayload(_CamelModel):
    registration_id: str | None = None
    land_title: str | None = None
    land_location: str | None = None
    district: str | None = None
    total_area: str | None = None
    survey_number: str | None = None
    status: str | None = None


class TenancyOfferingPayload(_CamelModel):
    offering_id: str | None = None
    tenancy_rate: float | None = None
    rate_type: str | None = None
    lease_duration: str | None = None
    available_from: str | None = None
    allowed_activities: list[str] = Field(default_factory=list)


class LeaveRequestPayload(_CamelModel):
    request_id: str | None = None
    leave_type: str = Field(..., min_length=1)
    start_date: str | None = None
    end_date: str | None = None
    total_days: int | None = Field(default=None, ge=0)
    reason: str | None = None
    urgency: str | None = None
    contact_during_leave: str | None = None
    submitted_at: str | None = None


class TapperRequestEvent(BaseModel):
    request: TapperRequestPayload
    farmer: ActorPayload


class LandLeaseEvent(BaseModel):
    application: LandLeaseApplicationPayload
    farmer: ActorPayload


class ServiceRequestEvent(BaseModel):
    request: ServiceRequestPayload
    farmer: ActorPayload


class LandRegistrationEvent(BaseModel):
    land: LandRegistrationPayload
    farmer: ActorPayload


class TenancyOfferingEvent(BaseModel):
    offering: TenancyOfferingPayload
    land: LandRegistrationPayload
    farmer: ActorPayload


class LeaveRequestEvent(BaseModel):
    leave: LeaveRequestPayload
    staff: ActorPayload


__all__ = [
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
