"""Platform admin schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Admin


class AdminResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    lastLogin: Optional[datetime] = None

    @classmethod
    def from_model(cls, admin: Admin) -> "AdminResponse":
        return cls(
            id=admin.id,
            email=admin.email,
            name=admin.name,
            role=admin.role,
            lastLogin=admin.last_login,
        )


class AdminLoginResponse(BaseModel):
    token: str
    admin: AdminResponse


class DashboardStatsResponse(BaseModel):
    totalFacilities: int
    totalProviders: int
    totalPatients: int
    activeReferrals: int
