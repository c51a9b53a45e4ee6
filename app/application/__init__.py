"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repos, cache, snapshot loader).
"""

from app.application.interfaces import (
    IAuthorizationAuditHook,
    ICacheService,
    IMembershipLookup,
    IMembershipPermissionRepository,
    IMembershipRepository,
    IPermissionRepository,
    IPermissionSnapshotLoader,
    IRolePermissionRepository,
)
from app.application.services.authorization_service import AuthorizationService
from app.application.services.membership_service import MembershipService
from app.application.services.permission_admin_service import PermissionAdminService
from app.application.services.permission_engine import PermissionEngine
from app.application.services.permission_snapshot import PermissionSnapshotStore

__all__ = [
    "AuthorizationService",
    "IAuthorizationAuditHook",
    "ICacheService",
    "IMembershipLookup",
    "IMembershipPermissionRepository",
    "IMembershipRepository",
    "IPermissionRepository",
    "IPermissionSnapshotLoader",
    "IRolePermissionRepository",
    "MembershipService",
    "PermissionAdminService",
    "PermissionEngine",
    "PermissionSnapshotStore",
]
