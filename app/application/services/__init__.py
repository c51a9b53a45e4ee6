"""Application services: permission resolution, authorization, memberships, administration."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.membership_service import MembershipService
from app.application.services.permission_admin_service import PermissionAdminService
from app.application.services.permission_engine import (
    PermissionEngine,
    resolve_effective_permissions,
    resolve_permission,
)
from app.application.services.permission_snapshot import (
    PermissionSnapshot,
    PermissionSnapshotStore,
    build_snapshot,
    run_snapshot_refresh_loop,
)
from app.application.services.permission_tables import (
    MembershipOverrideTable,
    PermissionCatalog,
    RoleDefaultTable,
)

__all__ = [
    "AuthorizationService",
    "MembershipOverrideTable",
    "MembershipService",
    "PermissionAdminService",
    "PermissionCatalog",
    "PermissionEngine",
    "PermissionSnapshot",
    "PermissionSnapshotStore",
    "RoleDefaultTable",
    "build_snapshot",
    "run_snapshot_refresh_loop",
    "resolve_effective_permissions",
    "resolve_permission",
]
