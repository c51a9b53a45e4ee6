"""Authorization dependencies: engine, service and route gating."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import ICacheService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.permission_engine import PermissionEngine
from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import MembershipRepository

from .auth import get_current_user_id
from .state import get_cache, get_snapshot_store


def get_permission_engine(
    store: Annotated[PermissionSnapshotStore, Depends(get_snapshot_store)],
) -> PermissionEngine:
    """Engine reading the snapshot currently published in app state."""
    return PermissionEngine(store)


async def get_membership_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MembershipRepository:
    """Membership repository on the request session."""
    return MembershipRepository(db)


async def get_authorization_service(
    membership_repo: Annotated[MembershipRepository, Depends(get_membership_repo)],
    engine: Annotated[PermissionEngine, Depends(get_permission_engine)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> AuthorizationService:
    """Build AuthorizationService with the membership repository as lookup and optional cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise cache is None and every call evaluates against the snapshot.
    """
    settings = get_settings()
    return AuthorizationService(
        membership_lookup=membership_repo,
        engine=engine,
        cache=cache,
        cache_ttl=settings.cache_ttl_permissions,
    )


def require_permission(permission_key: str):
    """Dependency factory: require JWT auth and permission_key in the path's center_id.

    Returns the caller's user id.
    """

    async def _require(
        center_id: str,
        user_id: Annotated[str, Depends(get_current_user_id)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> str:
        await auth_svc.require_permission(user_id, center_id, permission_key)
        return user_id

    return _require
