"""Permission administration: catalog entries, role defaults and membership overrides.

Writes go to storage first; the snapshot store is then refreshed so the next
evaluation sees the change, and affected cached permission sets are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.application.dtos.membership import MembershipResult
from app.application.dtos.permission import (
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)
from app.application.interfaces.repositories import (
    IMembershipPermissionRepository,
    IMembershipRepository,
    IPermissionRepository,
    IRolePermissionRepository,
)
from app.application.interfaces.services import (
    IPermissionSnapshotLoader,
    IPermissionSnapshotRefresher,
)
from app.application.services.authorization_service import AuthorizationService
from app.domain.enums import CenterRole
from app.domain.exceptions import (
    MembershipRuleViolationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)


class PermissionAdminService:
    """Maintains the administered permission tables.

    commit, when given, makes pending writes durable before the snapshot is
    reloaded (the loader reads through its own session).
    """

    def __init__(
        self,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        membership_permission_repo: IMembershipPermissionRepository,
        membership_repo: IMembershipRepository,
        snapshot_store: IPermissionSnapshotRefresher,
        snapshot_loader: IPermissionSnapshotLoader,
        authorization_service: AuthorizationService,
        commit: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._override_repo = membership_permission_repo
        self._membership_repo = membership_repo
        self._snapshot_store = snapshot_store
        self._snapshot_loader = snapshot_loader
        self._authz = authorization_service
        self._commit = commit

    async def _require_permission(self, key: str) -> PermissionResult:
        permission = await self._permission_repo.get_by_key(key)
        if permission is None:
            raise ResourceNotFoundException("permission", key)
        return permission

    async def _refresh(self) -> None:
        """Commit, then publish a new snapshot.

        A failed reload does not undo the committed write; it is logged and the
        refresh loop picks the change up on its next pass.
        """
        if self._commit is not None:
            await self._commit()
        try:
            await self._snapshot_store.refresh(self._snapshot_loader)
        except Exception:
            logger.exception(
                "Snapshot refresh after write failed; keeping v%s",
                self._snapshot_store.version,
            )

    async def _target_membership(
        self, center_id: str, membership_id: str, requested_by: str
    ) -> MembershipResult:
        """Return the membership whose overrides requested_by may edit.

        Nobody edits their own overrides, and only an OWNER edits an OWNER's.
        """
        membership = await self._membership_repo.get_by_id_and_center(
            membership_id, center_id
        )
        if membership is None:
            raise ResourceNotFoundException("membership", membership_id)
        if membership.user_id == requested_by:
            raise MembershipRuleViolationException(
                "Cannot change permission overrides on your own membership",
                rule="self_override",
            )
        if CenterRole(membership.role) == CenterRole.OWNER:
            caller = await self._membership_repo.get_by_user_and_center(
                requested_by, center_id
            )
            if caller is None or CenterRole(caller.role) != CenterRole.OWNER:
                raise MembershipRuleViolationException(
                    "Only an owner can change an owner's permission overrides",
                    rule="owner_override",
                )
        return membership

    async def list_permissions(self) -> list[PermissionResult]:
        """Return the catalog ordered by key."""
        permissions = await self._permission_repo.list_all()
        return sorted(permissions, key=lambda p: p.key)

    async def create_permission(self, key: str, name: str) -> PermissionResult:
        """Add a catalog entry.

        Raises:
            ValidationException: If key is malformed or already in the catalog.
        """
        try:
            normalized = PermissionKey(key).value
        except ValueError as e:
            raise ValidationException(str(e), field="key") from e
        if not name or not name.strip():
            raise ValidationException("Permission name is required", field="name")
        if await self._permission_repo.get_by_key(normalized) is not None:
            raise ValidationException(
                f"Permission with key '{normalized}' already exists", field="key"
            )
        created = await self._permission_repo.create_permission(
            normalized, name.strip()
        )
        logger.info("Created permission %s", created.key)
        await self._refresh()
        return created

    async def grant_role_default(
        self, role: CenterRole, key: str
    ) -> RoleDefaultResult:
        """Make role grant key by default. Raises DuplicateAssignmentException if already granted."""
        permission = await self._require_permission(key)
        row = await self._role_permission_repo.assign(CenterRole(role), permission.id)
        logger.info("Role %s now grants %s by default", CenterRole(role).value, key)
        await self._refresh()
        return row

    async def revoke_role_default(self, role: CenterRole, key: str) -> bool:
        """Remove a role default. Returns False when the role did not grant key."""
        permission = await self._require_permission(key)
        removed = await self._role_permission_repo.remove(
            CenterRole(role), permission.id
        )
        if removed:
            logger.info(
                "Role %s no longer grants %s by default", CenterRole(role).value, key
            )
            await self._refresh()
        return removed

    async def set_override(
        self,
        center_id: str,
        membership_id: str,
        key: str,
        allowed: bool,
        requested_by: str,
    ) -> MembershipOverrideResult:
        """Create or replace the override for (membership, key).

        A deny override for a permission the role does not grant is accepted;
        it has no effect until the role default changes.

        Raises:
            ResourceNotFoundException: If the membership is not in center or key is unknown.
            MembershipRuleViolationException: If the membership is the caller's own,
                or an OWNER's and the caller is not an OWNER.
        """
        membership = await self._target_membership(
            center_id, membership_id, requested_by
        )
        permission = await self._require_permission(key)
        if not allowed and not await self._role_permission_repo.has_default(
            CenterRole(membership.role), permission.id
        ):
            logger.info(
                "Deny override for %s on membership %s has no effect: role %s does not grant it",
                key,
                membership_id,
                CenterRole(membership.role).value,
            )
        row = await self._override_repo.upsert_override(
            membership.id, permission.id, bool(allowed)
        )
        logger.info(
            "Override %s=%s set for membership %s in center %s",
            key,
            bool(allowed),
            membership_id,
            center_id,
        )
        await self._refresh()
        await self._authz.invalidate_user_cache(membership.user_id, center_id)
        return row

    async def clear_override(
        self, center_id: str, membership_id: str, key: str, requested_by: str
    ) -> bool:
        """Delete the override for (membership, key). Returns whether a row existed.

        Same caller rules as set_override.
        """
        membership = await self._target_membership(
            center_id, membership_id, requested_by
        )
        permission = await self._require_permission(key)
        removed = await self._override_repo.delete_override(membership.id, permission.id)
        if removed:
            logger.info(
                "Override %s cleared for membership %s in center %s",
                key,
                membership_id,
                center_id,
            )
            await self._refresh()
            await self._authz.invalidate_user_cache(membership.user_id, center_id)
        return removed
