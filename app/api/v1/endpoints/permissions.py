"""Permissions API: the caller's effective permissions and single checks in a center."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_authorization_service, get_current_user_id
from app.application.services.authorization_service import AuthorizationService
from app.schemas.permission import EffectivePermissionsResponse, PermissionCheckResponse

router = APIRouter()


@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    center_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Effective permission keys of the caller (empty unless the membership is ACTIVE)."""
    permissions = await auth_svc.get_effective_permissions(user_id, center_id)
    return EffectivePermissionsResponse(
        center_id=center_id, permissions=sorted(permissions)
    )


@router.get("/check", response_model=PermissionCheckResponse)
async def check_my_permission(
    center_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    key: str = Query(..., min_length=1, max_length=128),
):
    """Whether the caller holds one permission key. Unknown keys report allowed=false."""
    allowed = await auth_svc.check_permission(user_id, center_id, key)
    return PermissionCheckResponse(key=key, allowed=allowed)
