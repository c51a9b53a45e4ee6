"""Repositories: SQLAlchemy implementations of application repository protocols."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.membership_permission_repo import (
    MembershipPermissionRepository,
)
from app.infrastructure.persistence.repositories.membership_repo import (
    MembershipRepository,
)
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from app.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)

__all__ = [
    "BaseRepository",
    "MembershipPermissionRepository",
    "MembershipRepository",
    "PermissionRepository",
    "RolePermissionRepository",
]
