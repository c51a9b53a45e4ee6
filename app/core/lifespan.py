"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (telemetry, cache,
permission snapshot store and its refresh task, DB engine dispose).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.application.services.permission_snapshot import (
    PermissionSnapshotStore,
    run_snapshot_refresh_loop,
)
from app.core.config import get_settings
from app.domain.exceptions import SqlNotConfiguredException

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), Redis cache (if enabled),
    snapshot store with an initial load, background refresh task.
    Until a load succeeds the store holds an empty snapshot, so every
    permission check is denied.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_redis()
        logger.info("Telemetry initialized")

    if settings.redis_enabled:
        from app.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    store = PermissionSnapshotStore()
    app.state.permission_snapshot_store = store
    app.state.permission_snapshot_loader = None
    app.state.permission_refresh_task = None

    try:
        from app.infrastructure.persistence import database
        from app.infrastructure.services.permission_snapshot_loader import (
            PermissionSnapshotLoader,
        )

        loader = PermissionSnapshotLoader(database.get_session_factory())
    except SqlNotConfiguredException:
        logger.warning(
            "DATABASE_URL not set; permission snapshot stays empty and all checks deny"
        )
    else:
        app.state.permission_snapshot_loader = loader
        from app.shared.telemetry.telemetry import get_telemetry

        telemetry_instance = get_telemetry()
        if telemetry_instance is not None and database.engine is not None:
            telemetry_instance.instrument_sqlalchemy(database.engine)
        try:
            await store.refresh(loader)
        except Exception:
            logger.exception("Initial permission snapshot load failed; denying all")
        if settings.permission_snapshot_refresh_seconds > 0:
            app.state.permission_refresh_task = asyncio.create_task(
                run_snapshot_refresh_loop(
                    store, loader, settings.permission_snapshot_refresh_seconds
                )
            )

    yield

    # ---- Shutdown ----
    refresh_task = getattr(app.state, "permission_refresh_task", None)
    if refresh_task is not None:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass
        logger.info("Permission snapshot refresh task stopped")

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    from app.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    from app.infrastructure.persistence import database

    if database.engine is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
