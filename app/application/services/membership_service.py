"""Membership lifecycle service: invite, accept, suspend, reinstate, change role.

Memberships are always addressed by (center_id, user_id); a membership of
another center is reported as not found. Every successful change invalidates
the affected user's cached permissions, since status and role both feed
permission resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.application.dtos.membership import MembershipResult
from app.application.interfaces.repositories import IMembershipRepository
from app.application.services.authorization_service import AuthorizationService
from app.domain.entities.membership import MembershipEntity
from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import (
    MembershipRuleViolationException,
    ResourceNotFoundException,
)
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _to_entity(m: MembershipResult) -> MembershipEntity:
    return MembershipEntity(
        id=m.id,
        center_id=m.center_id,
        user_id=m.user_id,
        role=CenterRole(m.role),
        status=MembershipStatus(m.status),
        created_at=m.created_at or utc_now(),
    )


class MembershipService:
    """Center membership lifecycle with center isolation and owner protection."""

    def __init__(
        self,
        membership_repo: IMembershipRepository,
        authorization_service: AuthorizationService,
        commit: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._membership_repo = membership_repo
        self._authz = authorization_service
        self._commit = commit

    async def _get_entity(self, center_id: str, user_id: str) -> MembershipEntity:
        membership = await self._membership_repo.get_by_user_and_center(
            user_id, center_id
        )
        if membership is None:
            raise ResourceNotFoundException("membership", f"{center_id}/{user_id}")
        return _to_entity(membership)

    async def get(self, center_id: str, user_id: str) -> MembershipResult:
        """Return the membership of user in center. Raises ResourceNotFoundException."""
        membership = await self._membership_repo.get_by_user_and_center(
            user_id, center_id
        )
        if membership is None:
            raise ResourceNotFoundException("membership", f"{center_id}/{user_id}")
        return membership

    async def list_members(
        self,
        center_id: str,
        role: CenterRole | None = None,
        status: MembershipStatus | None = None,
    ) -> list[MembershipResult]:
        """Return center's memberships ordered by creation, optionally filtered."""
        return await self._membership_repo.list_by_center(
            center_id,
            role=CenterRole(role) if role is not None else None,
            status=MembershipStatus(status) if status is not None else None,
        )

    async def invite(
        self, center_id: str, user_id: str, role: CenterRole
    ) -> MembershipResult:
        """Create an INVITED membership.

        Raises:
            DuplicateAssignmentException: If the user already has a membership in center.
        """
        created = await self._membership_repo.create_membership(
            center_id=center_id,
            user_id=user_id,
            role=CenterRole(role),
            status=MembershipStatus.INVITED,
        )
        logger.info(
            "Invited user %s to center %s as %s", user_id, center_id, created.role
        )
        await self._commit_and_invalidate(user_id, center_id)
        return created

    async def accept(self, center_id: str, user_id: str) -> MembershipResult:
        """Accept an invitation (INVITED -> ACTIVE)."""
        entity = await self._get_entity(center_id, user_id)
        entity.accept()
        return await self._save_status(entity)

    async def suspend(
        self, center_id: str, user_id: str, requested_by: str
    ) -> MembershipResult:
        """Suspend an ACTIVE membership.

        Raises:
            MembershipRuleViolationException: If requested_by is user_id, or the
                membership is the last ACTIVE OWNER of the center.
            InvalidStatusTransitionException: If the membership is not ACTIVE.
        """
        if requested_by == user_id:
            raise MembershipRuleViolationException(
                "Cannot suspend your own membership", rule="self_suspension"
            )
        entity = await self._get_entity(center_id, user_id)
        if entity.role == CenterRole.OWNER and entity.is_active():
            owners = await self._membership_repo.count_active_owners(center_id)
            if owners <= 1:
                raise MembershipRuleViolationException(
                    "Cannot suspend the last active owner of a center",
                    rule="last_active_owner",
                )
        entity.suspend()
        return await self._save_status(entity)

    async def reinstate(self, center_id: str, user_id: str) -> MembershipResult:
        """Reinstate a SUSPENDED membership (SUSPENDED -> ACTIVE)."""
        entity = await self._get_entity(center_id, user_id)
        entity.reinstate()
        return await self._save_status(entity)

    async def change_role(
        self, center_id: str, user_id: str, role: CenterRole
    ) -> MembershipResult:
        """Change the role of a non-owner membership.

        Raises:
            MembershipRuleViolationException: If the membership is an OWNER or role is OWNER.
        """
        entity = await self._get_entity(center_id, user_id)
        try:
            entity.change_role(CenterRole(role))
        except ValueError as e:
            raise MembershipRuleViolationException(str(e), rule="owner_role") from e
        updated = await self._membership_repo.update_role(entity.id, entity.role)
        logger.info(
            "Changed role of user %s in center %s to %s",
            user_id,
            center_id,
            entity.role.value,
        )
        await self._commit_and_invalidate(user_id, center_id)
        return updated

    async def _save_status(self, entity: MembershipEntity) -> MembershipResult:
        updated = await self._membership_repo.update_status(entity.id, entity.status)
        logger.info(
            "Membership %s (user %s, center %s) is now %s",
            entity.id,
            entity.user_id,
            entity.center_id,
            entity.status.value,
        )
        await self._commit_and_invalidate(entity.user_id, entity.center_id)
        return updated

    async def _commit_and_invalidate(self, user_id: str, center_id: str) -> None:
        if self._commit is not None:
            await self._commit()
        await self._authz.invalidate_user_cache(user_id, center_id)
