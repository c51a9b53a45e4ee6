"""CenterMembership repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.membership import MembershipResult
from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import DuplicateAssignmentException, ResourceNotFoundException
from app.infrastructure.persistence.models.membership import CenterMembership
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc

# Constraint names as created by the CenterMembership table (Postgres defaults for FKs).
UNIQUE_MEMBERSHIP = "uq_center_membership_user"
USER_FK = "center_membership_user_id_fkey"
CENTER_FK = "center_membership_center_id_fkey"


def _membership_to_result(m: CenterMembership) -> MembershipResult:
    """Map ORM CenterMembership to application MembershipResult."""
    return MembershipResult(
        id=m.id,
        center_id=m.center_id,
        user_id=m.user_id,
        role=CenterRole(m.role),
        status=MembershipStatus(m.status),
        created_at=ensure_utc(m.created_at),
    )


class MembershipRepository(BaseRepository[CenterMembership]):
    """Membership repository. Every lookup is scoped by center_id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CenterMembership)

    async def _get_row(self, membership_id: str) -> CenterMembership:
        row = await self.get_by_id(membership_id)
        if row is None:
            raise ResourceNotFoundException("membership", membership_id)
        return row

    async def get_by_user_and_center(
        self, user_id: str, center_id: str
    ) -> MembershipResult | None:
        result = await self.db.execute(
            select(CenterMembership).where(
                CenterMembership.user_id == user_id,
                CenterMembership.center_id == center_id,
            )
        )
        row = result.scalar_one_or_none()
        return _membership_to_result(row) if row else None

    async def get_by_id_and_center(
        self, membership_id: str, center_id: str
    ) -> MembershipResult | None:
        result = await self.db.execute(
            select(CenterMembership).where(
                CenterMembership.id == membership_id,
                CenterMembership.center_id == center_id,
            )
        )
        row = result.scalar_one_or_none()
        return _membership_to_result(row) if row else None

    async def list_by_center(
        self,
        center_id: str,
        role: CenterRole | None = None,
        status: MembershipStatus | None = None,
    ) -> list[MembershipResult]:
        stmt = select(CenterMembership).where(CenterMembership.center_id == center_id)
        if role is not None:
            stmt = stmt.where(CenterMembership.role == CenterRole(role).value)
        if status is not None:
            stmt = stmt.where(CenterMembership.status == MembershipStatus(status).value)
        stmt = stmt.order_by(CenterMembership.created_at, CenterMembership.id)
        result = await self.db.execute(stmt)
        return [_membership_to_result(m) for m in result.scalars().all()]

    async def create_membership(
        self,
        center_id: str,
        user_id: str,
        role: CenterRole,
        status: MembershipStatus,
    ) -> MembershipResult:
        row = CenterMembership(
            center_id=center_id,
            user_id=user_id,
            role=CenterRole(role).value,
            status=MembershipStatus(status).value,
        )
        try:
            created = await self.create(row)
        except IntegrityError as e:
            await self.db.rollback()
            message = str(e.orig)
            if UNIQUE_MEMBERSHIP in message:
                raise DuplicateAssignmentException(
                    "User already has a membership in this center",
                    assignment_type="center_membership",
                    details_extra={"center_id": center_id, "user_id": user_id},
                ) from None
            if USER_FK in message:
                raise ResourceNotFoundException("user", user_id) from None
            if CENTER_FK in message:
                raise ResourceNotFoundException("center", center_id) from None
            raise
        return _membership_to_result(created)

    async def update_status(
        self, membership_id: str, status: MembershipStatus
    ) -> MembershipResult:
        row = await self._get_row(membership_id)
        row.status = MembershipStatus(status).value
        await self.db.flush()
        await self.db.refresh(row)
        return _membership_to_result(row)

    async def update_role(self, membership_id: str, role: CenterRole) -> MembershipResult:
        row = await self._get_row(membership_id)
        row.role = CenterRole(role).value
        await self.db.flush()
        await self.db.refresh(row)
        return _membership_to_result(row)

    async def count_active_owners(self, center_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(CenterMembership)
            .where(
                CenterMembership.center_id == center_id,
                CenterMembership.role == CenterRole.OWNER.value,
                CenterMembership.status == MembershipStatus.ACTIVE.value,
            )
        )
        return int(result.scalar_one())
