"""Application DTOs (no ORM dependency)."""

from app.application.dtos.authorization import AuthorizationDecision
from app.application.dtos.membership import MembershipResult
from app.application.dtos.permission import (
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)

__all__ = [
    "AuthorizationDecision",
    "MembershipOverrideResult",
    "MembershipResult",
    "PermissionResult",
    "RoleDefaultResult",
]
