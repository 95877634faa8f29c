"""Provider domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...models import Provider
from ...shared.validators import validate_email, validate_phone
from ..facilities.schemas import FacilitySummary

ProviderRole = Literal["doctor", "nurse", "admin", "coordinator"]
Permission = Literal["create_referrals", "manage_slots", "view_analytics", "manage_events"]

MIN_PASSWORD_LENGTH = 8


class ProviderCreate(BaseModel):
    """Schema for creating a provider account"""

    email: str
    password: str
    name: str
    phone: Optional[str] = None
    # Required for platform admins; facility admins always create in their own facility
    facilityId: Optional[int] = None
    departmentId: Optional[int] = None
    role: ProviderRole
    permissions: list[Permission] = []

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v):
        return list(dict.fromkeys(v))


class ProviderUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    departmentId: Optional[int] = None
    role: Optional[ProviderRole] = None
    permissions: Optional[list[Permission]] = None
    isActive: Optional[bool] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v):
        return list(dict.fromkeys(v)) if v is not None else v


class ProviderResponse(BaseModel):
    """Schema for provider response (never includes the password hash)"""

    id: int
    email: str
    name: str
    phone: Optional[str] = None
    facilityId: int
    departmentId: Optional[int] = None
    department: Optional[str] = None
    role: str
    permissions: list[str]
    isActive: bool
    lastLogin: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, provider: Provider) -> "ProviderResponse":
        return cls(
            id=provider.id,
            email=provider.email,
            name=provider.name,
            phone=provider.phone,
            facilityId=provider.facility_id,
            departmentId=provider.department_id,
            department=provider.department.name if provider.department else None,
            role=provider.role,
            permissions=provider.permissions or [],
            isActive=provider.is_active,
            lastLogin=provider.last_login,
            createdAt=provider.created_at,
        )


class ProviderLoginResponse(BaseModel):
    token: str
    provider: ProviderResponse


class ProviderDashboardStats(BaseModel):
    openSlots: int
    bookedSlots: int
    activeReferrals: int
    upcomingEvents: int


class ProviderDashboardResponse(BaseModel):
    provider: ProviderResponse
    facility: Optional[FacilitySummary] = None
    stats: ProviderDashboardStats


class EventTotals(BaseModel):
    total: int
    totalRsvps: int
    totalCapacity: int
    capacityUtilization: float  # percent


class ProviderAnalyticsResponse(BaseModel):
    referrals: dict[str, int]
    slots: dict[str, int]
    events: EventTotals
