"""Default permission catalog and role defaults, seeded idempotently."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import CenterRole
from app.infrastructure.persistence.models.permission import Permission, RolePermission

logger = logging.getLogger(__name__)


DEFAULT_PERMISSIONS: list[tuple[str, str]] = [
    ("center.update", "Update center settings"),
    ("center.delete", "Delete the center"),
    ("user.invite", "Invite users to the center"),
    ("user.view", "View center members"),
    ("user.suspend", "Suspend and reinstate members"),
    ("user.change_role", "Change member roles"),
    ("member.permissions.manage", "Grant or revoke individual member permissions"),
    ("class.create", "Create classes"),
    ("class.manage", "Manage classes and enrollments"),
    ("class.view", "View classes"),
    ("exercise.create", "Create exercises"),
    ("exercise.edit", "Edit exercises"),
    ("exercise.publish", "Publish exercises"),
    ("exercise.view", "View exercises"),
    ("mocktest.create", "Create mock tests"),
    ("mocktest.publish", "Publish mock tests"),
    ("mocktest.archive", "Archive mock tests"),
    ("submission.create", "Submit answers"),
    ("submission.grade", "Grade submissions"),
]

_TEACHING = [
    "class.view",
    "exercise.create",
    "exercise.edit",
    "exercise.view",
    "mocktest.create",
    "submission.grade",
]

DEFAULT_ROLE_PERMISSIONS: dict[CenterRole, list[str]] = {
    CenterRole.OWNER: [key for key, _ in DEFAULT_PERMISSIONS],
    CenterRole.ADMIN: [
        key for key, _ in DEFAULT_PERMISSIONS if key not in {"center.delete"}
    ],
    CenterRole.TEACHER: [*_TEACHING, "exercise.publish", "user.view"],
    CenterRole.STUDENT: ["class.view", "exercise.view", "submission.create"],
}


async def seed_default_permissions(db: AsyncSession) -> tuple[int, int]:
    """Insert missing catalog entries and role defaults. Existing rows are left untouched.

    Returns (permissions_created, role_defaults_created). The caller commits.
    """
    result = await db.execute(select(Permission))
    by_key = {p.key: p for p in result.scalars().all()}
    created_permissions = 0
    for key, name in DEFAULT_PERMISSIONS:
        if key in by_key:
            continue
        permission = Permission(key=key, name=name)
        db.add(permission)
        by_key[key] = permission
        created_permissions += 1
    await db.flush()

    result = await db.execute(select(RolePermission))
    existing = {(rp.role, rp.permission_id) for rp in result.scalars().all()}
    created_defaults = 0
    for role, keys in DEFAULT_ROLE_PERMISSIONS.items():
        for key in keys:
            pair = (role.value, by_key[key].id)
            if pair in existing:
                continue
            db.add(RolePermission(role=pair[0], permission_id=pair[1]))
            existing.add(pair)
            created_defaults += 1
    await db.flush()
    logger.info(
        "Seeded %d permissions and %d role defaults",
        created_permissions,
        created_defaults,
    )
    return created_permissions, created_defaults
