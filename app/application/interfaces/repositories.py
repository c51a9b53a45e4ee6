"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from app.domain.enums import CenterRole, MembershipStatus

if TYPE_CHECKING:
    from app.application.dtos.membership import MembershipResult
    from app.application.dtos.permission import (
        MembershipOverrideResult,
        PermissionResult,
        RoleDefaultResult,
    )


# Membership repository interface
class IMembershipRepository(Protocol):
    """Protocol for center membership repository (DIP). All reads are center-scoped."""

    async def get_by_user_and_center(
        self, user_id: str, center_id: str
    ) -> MembershipResult | None:
        """Return membership for (user, center), or None."""

    async def get_by_id_and_center(
        self, membership_id: str, center_id: str
    ) -> MembershipResult | None:
        """Return membership by id only if it belongs to center."""

    async def list_by_center(
        self,
        center_id: str,
        role: CenterRole | None = None,
        status: MembershipStatus | None = None,
    ) -> list[MembershipResult]:
        """Return center's memberships, filtered by role and/or status when given."""

    async def create_membership(
        self,
        center_id: str,
        user_id: str,
        role: CenterRole,
        status: MembershipStatus,
    ) -> MembershipResult:
        """Create membership. Raises DuplicateAssignmentException for an existing pair.

        Raises ResourceNotFoundException when the center or user does not exist.
        """

    async def update_status(
        self, membership_id: str, status: MembershipStatus
    ) -> MembershipResult:
        """Persist a new status."""

    async def update_role(self, membership_id: str, role: CenterRole) -> MembershipResult:
        """Persist a new role."""

    async def count_active_owners(self, center_id: str) -> int:
        """Return number of ACTIVE OWNER memberships in center."""


# Permission catalog repository interface
class IPermissionRepository(Protocol):
    """Protocol for the administered permission catalog."""

    async def get_by_key(self, key: str) -> PermissionResult | None:
        """Return permission by stable key, or None."""

    async def list_all(self) -> list[PermissionResult]:
        """Return every catalog entry."""

    async def create_permission(self, key: str, name: str) -> PermissionResult:
        """Create a catalog entry."""


# Role default repository interface
class IRolePermissionRepository(Protocol):
    """Protocol for role -> permission default grants."""

    async def list_all(self) -> list[RoleDefaultResult]:
        """Return every role default row."""

    async def has_default(self, role: CenterRole, permission_id: str) -> bool:
        """Return True if role grants permission_id by default."""

    async def assign(self, role: CenterRole, permission_id: str) -> RoleDefaultResult:
        """Add a default. Raises DuplicateAssignmentException if present."""

    async def remove(self, role: CenterRole, permission_id: str) -> bool:
        """Remove a default. Returns False when it did not exist."""


# Membership override repository interface
class IMembershipPermissionRepository(Protocol):
    """Protocol for per-membership overrides."""

    async def list_all(self) -> list[MembershipOverrideResult]:
        """Return every override row."""

    async def upsert_override(
        self, membership_id: str, permission_id: str, allowed: bool
    ) -> MembershipOverrideResult:
        """Create or update the single override row for (membership, permission)."""

    async def delete_override(self, membership_id: str, permission_id: str) -> bool:
        """Delete the override row. Returns False when it did not exist."""
