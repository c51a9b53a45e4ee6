"""Permission snapshots and the copy-on-write store that publishes them.

A snapshot bundles one consistent version of the catalog, role defaults and
membership overrides. Readers take the current snapshot reference once per
evaluation and never see a half-updated table; writers build a complete new
snapshot and swap the reference.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.permission import (
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)
from app.application.interfaces.services import IPermissionSnapshotLoader
from app.application.services.permission_tables import (
    MembershipOverrideTable,
    PermissionCatalog,
    RoleDefaultTable,
)
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionSnapshot:
    """Immutable view of administered permission data at one point in time."""

    catalog: PermissionCatalog
    role_defaults: RoleDefaultTable
    overrides: MembershipOverrideTable
    version: int = 0
    loaded_at: datetime = field(default_factory=utc_now)

    @classmethod
    def empty(cls) -> PermissionSnapshot:
        """Snapshot with no permissions (every check resolves to a denial)."""
        return cls(
            catalog=PermissionCatalog(),
            role_defaults=RoleDefaultTable(),
            overrides=MembershipOverrideTable(),
        )


def build_snapshot(
    permissions: Iterable[PermissionResult],
    role_defaults: Iterable[RoleDefaultResult],
    overrides: Iterable[MembershipOverrideResult],
    version: int,
) -> PermissionSnapshot:
    """Build all three tables from rows and wrap them in a snapshot.

    Raises:
        ValidationException: If the rows violate catalog or override uniqueness.
    """
    return PermissionSnapshot(
        catalog=PermissionCatalog(permissions),
        role_defaults=RoleDefaultTable(role_defaults),
        overrides=MembershipOverrideTable(overrides),
        version=version,
    )


class PermissionSnapshotStore:
    """Holds the published snapshot; reads are lock-free, publishes are serialized.

    Until the first publish the store holds PermissionSnapshot.empty().
    """

    def __init__(self, initial: PermissionSnapshot | None = None) -> None:
        self._snapshot = initial or PermissionSnapshot.empty()
        self._publish_lock = threading.Lock()
        self._refresh_lock = asyncio.Lock()

    def current(self) -> PermissionSnapshot:
        """Return the currently published snapshot."""
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    def publish(self, snapshot: PermissionSnapshot) -> bool:
        """Atomically replace the current snapshot.

        Returns False (and keeps the current snapshot) when snapshot is not
        newer than the published one.
        """
        with self._publish_lock:
            current = self._snapshot
            if snapshot.version <= current.version:
                logger.warning(
                    "Ignoring stale permission snapshot v%s (current v%s)",
                    snapshot.version,
                    current.version,
                )
                return False
            self._snapshot = snapshot
        logger.info(
            "Published permission snapshot v%s (%d permissions, %d overrides)",
            snapshot.version,
            len(snapshot.catalog),
            len(snapshot.overrides),
        )
        return True

    @traced("permission_snapshot.refresh")
    async def refresh(self, loader: IPermissionSnapshotLoader) -> PermissionSnapshot:
        """Load a new snapshot with the next version and publish it.

        Concurrent refreshes are serialized. Loader errors propagate and
        leave the current snapshot in place.
        """
        async with self._refresh_lock:
            snapshot = await loader.load_snapshot(self.version + 1)
            self.publish(snapshot)
            return self._snapshot


async def run_snapshot_refresh_loop(
    store: PermissionSnapshotStore,
    loader: IPermissionSnapshotLoader,
    interval_seconds: float,
) -> None:
    """Refresh store every interval_seconds until cancelled.

    A failed load is logged and the previously published snapshot stays in place.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await store.refresh(loader)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(
                "Permission snapshot refresh failed; keeping v%s", store.version
            )
