"""Membership API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CenterRole, MembershipStatus


class MembershipInviteRequest(BaseModel):
    """Request body for inviting a user to a center."""

    user_id: str = Field(..., min_length=1, max_length=64)
    role: CenterRole


class MembershipRoleUpdate(BaseModel):
    """Request body for changing a member's role."""

    role: CenterRole


class MembershipResponse(BaseModel):
    """Membership response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    center_id: str
    user_id: str
    role: CenterRole
    status: MembershipStatus
    created_at: datetime | None = None
