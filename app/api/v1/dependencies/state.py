"""Process-wide objects created in app lifespan (app.state)."""

from __future__ import annotations

from fastapi import Request

from app.application.interfaces.services import (
    ICacheService,
    IPermissionSnapshotLoader,
)
from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.domain.exceptions import SqlNotConfiguredException


def get_snapshot_store(request: Request) -> PermissionSnapshotStore:
    """Published permission snapshot store (empty store if lifespan did not run)."""
    store = getattr(request.app.state, "permission_snapshot_store", None)
    if store is None:
        store = PermissionSnapshotStore()
        request.app.state.permission_snapshot_store = store
    return store


def get_snapshot_loader(request: Request) -> IPermissionSnapshotLoader:
    """Snapshot loader; raises SqlNotConfiguredException (503) when SQL is not configured."""
    loader = getattr(request.app.state, "permission_snapshot_loader", None)
    if loader is None:
        raise SqlNotConfiguredException()
    return loader


def get_cache(request: Request) -> ICacheService | None:
    """Redis cache when enabled and connected in lifespan; else None."""
    return getattr(request.app.state, "cache", None)
