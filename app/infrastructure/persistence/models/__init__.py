"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.center import Center
from app.infrastructure.persistence.models.membership import CenterMembership
from app.infrastructure.persistence.models.mixins import (
    CenterMixin,
    CenterScopedModel,
    CuidMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.permission import (
    MembershipPermission,
    Permission,
    RolePermission,
)
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Center",
    "CenterMembership",
    "CenterMixin",
    "CenterScopedModel",
    "CuidMixin",
    "MembershipPermission",
    "Permission",
    "RolePermission",
    "TimestampMixin",
    "User",
]
