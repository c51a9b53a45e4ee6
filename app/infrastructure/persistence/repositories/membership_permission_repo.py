"""MembershipPermission repository: per-membership overrides."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import MembershipOverrideResult
from app.infrastructure.persistence.models.permission import MembershipPermission


def _override_to_result(mp: MembershipPermission) -> MembershipOverrideResult:
    return MembershipOverrideResult(
        id=mp.id,
        membership_id=mp.membership_id,
        permission_id=mp.permission_id,
        allowed=mp.allowed,
    )


class MembershipPermissionRepository:
    """Override rows, at most one per (membership_id, permission_id)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_row(
        self, membership_id: str, permission_id: str
    ) -> MembershipPermission | None:
        result = await self.db.execute(
            select(MembershipPermission).where(
                MembershipPermission.membership_id == membership_id,
                MembershipPermission.permission_id == permission_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[MembershipOverrideResult]:
        result = await self.db.execute(select(MembershipPermission))
        return [_override_to_result(mp) for mp in result.scalars().all()]

    async def upsert_override(
        self, membership_id: str, permission_id: str, allowed: bool
    ) -> MembershipOverrideResult:
        mp = await self._get_row(membership_id, permission_id)
        if mp is None:
            mp = MembershipPermission(
                membership_id=membership_id,
                permission_id=permission_id,
                allowed=allowed,
            )
            self.db.add(mp)
        else:
            mp.allowed = allowed
        await self.db.flush()
        await self.db.refresh(mp)
        return _override_to_result(mp)

    async def delete_override(self, membership_id: str, permission_id: str) -> bool:
        mp = await self._get_row(membership_id, permission_id)
        if not mp:
            return False
        await self.db.delete(mp)
        await self.db.flush()
        return True
