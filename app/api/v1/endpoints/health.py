"""Health check endpoints. Liveness has no dependencies; readiness reports the snapshot."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_snapshot_store
from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(
    store: Annotated[PermissionSnapshotStore, Depends(get_snapshot_store)],
) -> ReadinessResponse:
    """Report the published snapshot. Version 0 means nothing was loaded and every check denies."""
    snapshot = store.current()
    return ReadinessResponse(
        status="ok" if snapshot.version > 0 else "degraded",
        snapshot_version=snapshot.version,
        permissions=len(snapshot.catalog),
    )
