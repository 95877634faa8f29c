import logging
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Admin, FacilityAdmin, Patient, Provider
from .security_utils import InvalidTokenError, TokenExpiredError, decode_access_token

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_PROVIDER = "provider"
ROLE_PATIENT = "patient"
ROLE_FACILITY_ADMIN = "facility-admin"

ACCOUNT_MODELS = {
    ROLE_ADMIN: Admin,
    ROLE_PROVIDER: Provider,
    ROLE_PATIENT: Patient,
    ROLE_FACILITY_ADMIN: FacilityAdmin,
}

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)

Account = Union[Admin, Provider, Patient, FacilityAdmin]


@dataclass
class AuthenticatedAccount:
    """The caller behind a verified bearer token"""

    role: str
    account: Account

    @property
    def id(self) -> int:
        return self.account.id


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthenticatedAccount:
    """Resolve the bearer token on this request to an active account"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"Malformed token received: length {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = decode_access_token(token)
    except TokenExpiredError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please log in again.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except InvalidTokenError as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e

    role = payload.get("role")
    model = ACCOUNT_MODELS.get(role)
    try:
        account_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        account_id = None

    if model is None or account_id is None:
        logger.warning(f"Token with unusable claims: role={role!r}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    account = db.get(model, account_id)
    if account is None or not getattr(account, "is_active", True):
        logger.warning(f"Token for missing or inactive {role} {account_id}")
        raise HTTPException(status_code=401, detail="Invalid token or user inactive.")

    return AuthenticatedAccount(role=role, account=account)


def require_roles(*roles: str):
    """Dependency factory: allow only callers whose token carries one of `roles`"""

    async def checker(
        current: AuthenticatedAccount = Depends(get_current_account),
    ) -> AuthenticatedAccount:
        if current.role not in roles:
            logger.warning(f"{current.role} {current.id} denied, requires one of {roles}")
            raise HTTPException(
                status_code=403, detail=f"{' or '.join(roles).capitalize()} access required."
            )
        return current

    return checker


async def get_current_admin(
    current: AuthenticatedAccount = Depends(require_roles(ROLE_ADMIN)),
) -> Admin:
    return current.account


async def get_current_provider(
    current: AuthenticatedAccount = Depends(require_roles(ROLE_PROVIDER)),
) -> Provider:
    return current.account


async def get_current_patient(
    current: AuthenticatedAccount = Depends(require_roles(ROLE_PATIENT)),
) -> Patient:
    return current.account


async def get_current_facility_admin(
    current: AuthenticatedAccount = Depends(require_roles(ROLE_FACILITY_ADMIN)),
) -> FacilityAdmin:
    return current.account


def require_permission(permission: str):
    """
    Dependency factory for permission-gated provider endpoints.

    Example usage:
        @router.get("/slots")
        async def list_slots(provider: Provider = Depends(require_permission("manage_slots"))):
            ...
    """

    async def checker(provider: Provider = Depends(get_current_provider)) -> Provider:
        permissions = provider.permissions if isinstance(provider.permissions, list) else []
        if permission not in permissions:
            logger.warning(f"Provider {provider.id} lacks permission {permission}")
            raise HTTPException(status_code=403, detail=f"Permission denied: {permission}")
        return provider

    return checker
