"""Memberships API: member listing, lifecycle changes and per-membership permission overrides."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from app.api.v1.dependencies import (
    get_current_user_id,
    get_membership_service,
    get_permission_admin_service,
    require_permission,
)
from app.application.services.membership_service import MembershipService
from app.application.services.permission_admin_service import PermissionAdminService
from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.membership import (
    MembershipInviteRequest,
    MembershipResponse,
    MembershipRoleUpdate,
)
from app.schemas.permission import OverrideResponse, OverrideUpsert

router = APIRouter()


@router.get("/members", response_model=list[MembershipResponse])
async def list_members(
    center_id: str,
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
    _: Annotated[str, Depends(require_permission("user.view"))],
    role: CenterRole | None = Query(None, description="Filter by role"),
    status: MembershipStatus | None = Query(None, description="Filter by status"),
):
    """List the center's members, optionally filtered by role and status."""
    members = await membership_svc.list_members(center_id, role=role, status=status)
    return [MembershipResponse.model_validate(m) for m in members]


@router.post("/members", response_model=MembershipResponse, status_code=201)
async def invite_member(
    center_id: str,
    body: MembershipInviteRequest,
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
    _: Annotated[str, Depends(require_permission("user.invite"))],
):
    """Invite a user to the center (membership starts INVITED)."""
    created = await membership_svc.invite(center_id, body.user_id, body.role)
    return MembershipResponse.model_validate(created)


@router.post("/members/me/accept", response_model=MembershipResponse)
async def accept_invitation(
    center_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Accept the caller's own invitation (INVITED -> ACTIVE)."""
    updated = await membership_svc.accept(center_id, user_id)
    return MembershipResponse.model_validate(updated)


@router.post("/members/{user_id}/suspend", response_model=MembershipResponse)
async def suspend_member(
    center_id: str,
    user_id: str,
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
    caller_id: Annotated[str, Depends(require_permission("user.suspend"))],
):
    """Suspend an ACTIVE member. Self-suspension and suspending the last active owner are rejected."""
    updated = await membership_svc.suspend(center_id, user_id, requested_by=caller_id)
    return MembershipResponse.model_validate(updated)


@router.post("/members/{user_id}/reinstate", response_model=MembershipResponse)
async def reinstate_member(
    center_id: str,
    user_id: str,
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
    _: Annotated[str, Depends(require_permission("user.suspend"))],
):
    """Reinstate a SUSPENDED member."""
    updated = await membership_svc.reinstate(center_id, user_id)
    return MembershipResponse.model_validate(updated)


@router.patch("/members/{user_id}/role", response_model=MembershipResponse)
async def change_member_role(
    center_id: str,
    user_id: str,
    body: MembershipRoleUpdate,
    membership_svc: Annotated[MembershipService, Depends(get_membership_service)],
    _: Annotated[str, Depends(require_permission("user.change_role"))],
):
    """Change a non-owner member's role. OWNER cannot be assigned or changed here."""
    updated = await membership_svc.change_role(center_id, user_id, body.role)
    return MembershipResponse.model_validate(updated)


@router.put(
    "/memberships/{membership_id}/overrides/{key}", response_model=OverrideResponse
)
async def set_membership_override(
    center_id: str,
    membership_id: str,
    key: str,
    body: OverrideUpsert,
    admin_svc: Annotated[PermissionAdminService, Depends(get_permission_admin_service)],
    caller_id: Annotated[str, Depends(require_permission("member.permissions.manage"))],
):
    """Grant (allowed=true) or revoke (allowed=false) one permission for one membership.

    Callers cannot edit their own overrides; only an owner edits an owner's.
    """
    row = await admin_svc.set_override(
        center_id, membership_id, key, body.allowed, requested_by=caller_id
    )
    return OverrideResponse.model_validate(row)


@router.delete("/memberships/{membership_id}/overrides/{key}", status_code=204)
async def clear_membership_override(
    center_id: str,
    membership_id: str,
    key: str,
    admin_svc: Annotated[PermissionAdminService, Depends(get_permission_admin_service)],
    caller_id: Annotated[str, Depends(require_permission("member.permissions.manage"))],
):
    """Remove an override so the membership falls back to its role default."""
    removed = await admin_svc.clear_override(
        center_id, membership_id, key, requested_by=caller_id
    )
    if not removed:
        raise ResourceNotFoundException("override", f"{membership_id}/{key}")
    return Response(status_code=204)
