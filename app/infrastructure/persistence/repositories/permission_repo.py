"""Permission catalog repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import PermissionResult
from app.domain.exceptions import ValidationException
from app.infrastructure.persistence.models.permission import Permission
from app.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    return PermissionResult(id=p.id, key=p.key, name=p.name)


class PermissionRepository(BaseRepository[Permission]):
    """Global permission catalog (not center-scoped)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_key(self, key: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.key == key))
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def list_all(self) -> list[PermissionResult]:
        result = await self.db.execute(select(Permission).order_by(Permission.key))
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(self, key: str, name: str) -> PermissionResult:
        try:
            created = await self.create(Permission(key=key, name=name))
        except IntegrityError:
            raise ValidationException(
                f"Permission with key '{key}' already exists", field="key"
            ) from None
        return _permission_to_result(created)
