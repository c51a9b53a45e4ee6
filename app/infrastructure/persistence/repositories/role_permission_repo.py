"""RolePermission repository: role default grants (single entity responsibility)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import RoleDefaultResult
from app.domain.enums import CenterRole
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.permission import RolePermission


class RolePermissionRepository:
    """Role-permission link table only. Assign/remove and list defaults."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_all(self) -> list[RoleDefaultResult]:
        result = await self.db.execute(select(RolePermission))
        return [
            RoleDefaultResult(role=CenterRole(rp.role), permission_id=rp.permission_id)
            for rp in result.scalars().all()
        ]

    async def has_default(self, role: CenterRole, permission_id: str) -> bool:
        rp = await self.db.get(RolePermission, (CenterRole(role).value, permission_id))
        return rp is not None

    async def assign(self, role: CenterRole, permission_id: str) -> RoleDefaultResult:
        duplicate = DuplicateAssignmentException(
            "Permission already granted to role",
            assignment_type="role_permission",
            details_extra={
                "role": CenterRole(role).value,
                "permission_id": permission_id,
            },
        )
        if await self.has_default(role, permission_id):
            raise duplicate
        rp = RolePermission(role=CenterRole(role).value, permission_id=permission_id)
        try:
            self.db.add(rp)
            await self.db.flush()
        except IntegrityError:
            # Concurrent assign of the same pair.
            raise duplicate from None
        return RoleDefaultResult(role=CenterRole(role), permission_id=permission_id)

    async def remove(self, role: CenterRole, permission_id: str) -> bool:
        rp = await self.db.get(RolePermission, (CenterRole(role).value, permission_id))
        if not rp:
            return False
        await self.db.delete(rp)
        await self.db.flush()
        return True
