"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.membership import (
    MembershipInviteRequest,
    MembershipResponse,
    MembershipRoleUpdate,
)
from app.schemas.permission import (
    EffectivePermissionsResponse,
    OverrideResponse,
    OverrideUpsert,
    PermissionCheckResponse,
)

__all__ = [
    "EffectivePermissionsResponse",
    "HealthResponse",
    "MembershipInviteRequest",
    "MembershipResponse",
    "MembershipRoleUpdate",
    "OverrideResponse",
    "OverrideUpsert",
    "PermissionCheckResponse",
    "ReadinessResponse",
]
