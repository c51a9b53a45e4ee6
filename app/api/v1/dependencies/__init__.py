"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller identity, DB-backed repositories and
application services. Routes depend only on these dependencies, not on infra
directly.
"""

from app.api.v1.dependencies.auth import get_current_user_id
from app.api.v1.dependencies.authz import (
    get_authorization_service,
    get_membership_repo,
    get_permission_engine,
    require_permission,
)
from app.api.v1.dependencies.services import (
    get_membership_service,
    get_permission_admin_service,
)
from app.api.v1.dependencies.state import (
    get_cache,
    get_snapshot_loader,
    get_snapshot_store,
)

__all__ = [
    "get_authorization_service",
    "get_cache",
    "get_current_user_id",
    "get_membership_repo",
    "get_membership_service",
    "get_permission_admin_service",
    "get_permission_engine",
    "get_snapshot_loader",
    "get_snapshot_store",
    "require_permission",
]
