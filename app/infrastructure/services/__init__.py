"""Infrastructure services: snapshot loading and catalog seed."""

from app.infrastructure.services.permission_seed import (
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLE_PERMISSIONS,
    seed_default_permissions,
)
from app.infrastructure.services.permission_snapshot_loader import (
    PermissionSnapshotLoader,
)

__all__ = [
    "DEFAULT_PERMISSIONS",
    "DEFAULT_ROLE_PERMISSIONS",
    "PermissionSnapshotLoader",
    "seed_default_permissions",
]
