"""Loads permission snapshots from the database (implements IPermissionSnapshotLoader)."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services.permission_snapshot import (
    PermissionSnapshot,
    build_snapshot,
)
from app.infrastructure.persistence.repositories.membership_permission_repo import (
    MembershipPermissionRepository,
)
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from app.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)

logger = logging.getLogger(__name__)


class PermissionSnapshotLoader:
    """Reads catalog, role defaults and overrides in one session and builds a snapshot.

    The three reads share one REPEATABLE READ transaction, so a write committed
    mid-load is either fully visible or not at all.

    Opens its own session per load so it can run outside a request (startup,
    background refresh) as well as after an admin write.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_snapshot(self, version: int) -> PermissionSnapshot:
        async with self._session_factory() as session:
            await session.connection(
                execution_options={"isolation_level": "REPEATABLE READ"}
            )
            permissions = await PermissionRepository(session).list_all()
            role_defaults = await RolePermissionRepository(session).list_all()
            overrides = await MembershipPermissionRepository(session).list_all()
        logger.debug(
            "Loaded %d permissions, %d role defaults, %d overrides",
            len(permissions),
            len(role_defaults),
            len(overrides),
        )
        return build_snapshot(permissions, role_defaults, overrides, version)
