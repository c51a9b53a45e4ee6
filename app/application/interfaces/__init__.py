"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IMembershipPermissionRepository,
    IMembershipRepository,
    IPermissionRepository,
    IRolePermissionRepository,
)
from app.application.interfaces.services import (
    IAuthorizationAuditHook,
    ICacheService,
    IMembershipLookup,
    IPermissionSnapshotLoader,
    IPermissionSnapshotRefresher,
)

__all__ = [
    "IAuthorizationAuditHook",
    "ICacheService",
    "IMembershipLookup",
    "IMembershipPermissionRepository",
    "IMembershipRepository",
    "IPermissionRepository",
    "IPermissionSnapshotLoader",
    "IPermissionSnapshotRefresher",
    "IRolePermissionRepository",
]
