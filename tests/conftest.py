"""Pytest configuration and fixtures for center-authz.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. Environment defaults are set before app import so
settings validate without a .env file.
"""

import os
from datetime import UTC, datetime, timedelta

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-center-authz")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.application.dtos.membership import MembershipResult  # noqa: E402
from app.application.dtos.permission import (  # noqa: E402
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)
from app.application.services.permission_snapshot import (  # noqa: E402
    PermissionSnapshot,
    PermissionSnapshotStore,
    build_snapshot,
)
from app.core.config import get_settings  # noqa: E402
from app.domain.enums import CenterRole, MembershipStatus  # noqa: E402
from app.infrastructure.persistence import database  # noqa: E402
from app.main import app  # noqa: E402

CENTER_ID = "center-1"

# Catalog used across tests: key -> permission id.
PERMISSION_IDS: dict[str, str] = {
    "exercise.create": "perm-exercise-create",
    "exercise.edit": "perm-exercise-edit",
    "mocktest.publish": "perm-mocktest-publish",
    "mocktest.archive": "perm-mocktest-archive",
    "user.view": "perm-user-view",
    "user.invite": "perm-user-invite",
    "user.suspend": "perm-user-suspend",
    "user.change_role": "perm-user-change-role",
    "member.permissions.manage": "perm-member-permissions-manage",
}

ROLE_DEFAULTS: dict[CenterRole, list[str]] = {
    CenterRole.OWNER: list(PERMISSION_IDS),
    CenterRole.ADMIN: [k for k in PERMISSION_IDS if k != "exercise.edit"],
    CenterRole.TEACHER: ["exercise.create", "exercise.edit"],
    CenterRole.STUDENT: [],
}


def make_membership(
    membership_id: str = "m1",
    role: CenterRole = CenterRole.TEACHER,
    status: MembershipStatus = MembershipStatus.ACTIVE,
    user_id: str = "user-1",
    center_id: str = CENTER_ID,
) -> MembershipResult:
    """Membership read-model for tests."""
    return MembershipResult(
        id=membership_id,
        center_id=center_id,
        user_id=user_id,
        role=role,
        status=status,
    )


def make_snapshot(
    overrides: list[tuple[str, str, bool]] | None = None,
    version: int = 1,
    role_defaults: dict[CenterRole, list[str]] | None = None,
) -> PermissionSnapshot:
    """Snapshot over PERMISSION_IDS. overrides are (membership_id, key, allowed)."""
    permissions = [
        PermissionResult(id=pid, key=key, name=key) for key, pid in PERMISSION_IDS.items()
    ]
    defaults = [
        RoleDefaultResult(role=role, permission_id=PERMISSION_IDS[key])
        for role, keys in (role_defaults or ROLE_DEFAULTS).items()
        for key in keys
    ]
    override_rows = [
        MembershipOverrideResult(
            id=f"ov-{i}",
            membership_id=membership_id,
            permission_id=PERMISSION_IDS[key],
            allowed=allowed,
        )
        for i, (membership_id, key, allowed) in enumerate(overrides or [])
    ]
    return build_snapshot(permissions, defaults, override_rows, version)


def make_token(user_id: str, expires_delta: timedelta = timedelta(minutes=30)) -> str:
    """Signed HS256 token for user_id, as an external issuer would mint it."""
    settings = get_settings()
    claims = {"sub": user_id, "exp": datetime.now(UTC) + expires_delta}
    return jwt.encode(
        claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
    )


def auth_header(user_id: str) -> dict[str, str]:
    """Authorization header with a bearer token for user_id."""
    token = make_token(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def snapshot_store() -> PermissionSnapshotStore:
    """Store with make_snapshot() published as version 1."""
    return PermissionSnapshotStore(make_snapshot())


@pytest.fixture
async def client(snapshot_store: PermissionSnapshotStore) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI).

    Lifespan does not run under ASGITransport, so the snapshot store is placed
    on app.state directly. Dependency overrides are cleared after each test.
    """
    app.state.permission_snapshot_store = snapshot_store
    app.state.cache = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when Postgres is not configured.
    Use @pytest.mark.requires_db to mark tests that need this fixture; run
    without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: "
            "python -m scripts.seed_permissions --create-tables"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
