"""Write-path services (composition root). Repositories share one request session."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import IPermissionSnapshotLoader
from app.application.services.authorization_service import AuthorizationService
from app.application.services.membership_service import MembershipService
from app.application.services.permission_admin_service import PermissionAdminService
from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import (
    MembershipPermissionRepository,
    MembershipRepository,
    PermissionRepository,
    RolePermissionRepository,
)

from .authz import get_authorization_service
from .state import get_snapshot_loader, get_snapshot_store


def get_membership_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> MembershipService:
    """Membership lifecycle service; commits the request session after each change."""
    return MembershipService(
        membership_repo=MembershipRepository(db),
        authorization_service=auth_svc,
        commit=db.commit,
    )


def get_permission_admin_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    store: Annotated[PermissionSnapshotStore, Depends(get_snapshot_store)],
    loader: Annotated[IPermissionSnapshotLoader, Depends(get_snapshot_loader)],
) -> PermissionAdminService:
    """Permission administration; commits before the snapshot reload."""
    return PermissionAdminService(
        permission_repo=PermissionRepository(db),
        role_permission_repo=RolePermissionRepository(db),
        membership_permission_repo=MembershipPermissionRepository(db),
        membership_repo=MembershipRepository(db),
        snapshot_store=store,
        snapshot_loader=loader,
        authorization_service=auth_svc,
        commit=db.commit,
    )
