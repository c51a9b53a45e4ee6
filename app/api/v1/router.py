"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import health, memberships, permissions

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    permissions.router,
    prefix="/centers/{center_id}/permissions",
    tags=["permissions"],
)
api_router.include_router(
    memberships.router, prefix="/centers/{center_id}", tags=["memberships"]
)
