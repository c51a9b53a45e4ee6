"""Unit tests for permission tables, snapshots and the snapshot store."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.permission import (
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)
from app.application.services.permission_snapshot import (
    PermissionSnapshot,
    PermissionSnapshotStore,
    run_snapshot_refresh_loop,
)
from app.application.services.permission_tables import (
    MembershipOverrideTable,
    PermissionCatalog,
    RoleDefaultTable,
)
from app.domain.enums import CenterRole
from app.domain.exceptions import ValidationException
from tests.conftest import make_snapshot


class TestPermissionCatalog:
    def test_lookup_by_key_and_id(self) -> None:
        catalog = PermissionCatalog(
            [PermissionResult(id="p1", key="exercise.create", name="Create")]
        )
        assert catalog.lookup_by_key("exercise.create").id == "p1"
        assert catalog.lookup_by_id("p1").key == "exercise.create"
        assert catalog.lookup_by_key("exercise.delete") is None
        assert "exercise.create" in catalog
        assert len(catalog) == 1
        assert catalog.known_ids == {"p1"}

    def test_duplicate_key_raises(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            PermissionCatalog(
                [
                    PermissionResult(id="p1", key="exercise.create", name="a"),
                    PermissionResult(id="p2", key="exercise.create", name="b"),
                ]
            )
        assert exc_info.value.details.get("field") == "key"

    def test_duplicate_id_raises(self) -> None:
        with pytest.raises(ValidationException):
            PermissionCatalog(
                [
                    PermissionResult(id="p1", key="exercise.create", name="a"),
                    PermissionResult(id="p1", key="exercise.edit", name="b"),
                ]
            )


class TestRoleDefaultTable:
    def test_defaults_grouped_by_role(self) -> None:
        table = RoleDefaultTable(
            [
                RoleDefaultResult(role=CenterRole.TEACHER, permission_id="p1"),
                RoleDefaultResult(role=CenterRole.TEACHER, permission_id="p2"),
                RoleDefaultResult(role=CenterRole.TEACHER, permission_id="p1"),
            ]
        )
        assert table.defaults_for(CenterRole.TEACHER) == {"p1", "p2"}
        assert table.defaults_for("TEACHER") == {"p1", "p2"}
        assert table.defaults_for(CenterRole.STUDENT) == frozenset()
        assert table.roles() == {CenterRole.TEACHER}

    def test_unknown_role_has_no_defaults(self) -> None:
        assert RoleDefaultTable().defaults_for("JANITOR") == frozenset()


class TestMembershipOverrideTable:
    def test_absent_row_is_none_not_false(self) -> None:
        table = MembershipOverrideTable(
            [
                MembershipOverrideResult(
                    id="o1", membership_id="m1", permission_id="p1", allowed=False
                )
            ]
        )
        assert table.get("m1", "p1") is False
        assert table.get("m1", "p2") is None
        assert table.overrides_for("m1") == {"p1": False}
        assert table.overrides_for("m2") == {}
        assert len(table) == 1

    def test_duplicate_pair_raises(self) -> None:
        rows = [
            MembershipOverrideResult(
                id="o1", membership_id="m1", permission_id="p1", allowed=True
            ),
            MembershipOverrideResult(
                id="o2", membership_id="m1", permission_id="p1", allowed=False
            ),
        ]
        with pytest.raises(ValidationException):
            MembershipOverrideTable(rows)

    def test_overrides_for_is_read_only(self) -> None:
        table = MembershipOverrideTable(
            [
                MembershipOverrideResult(
                    id="o1", membership_id="m1", permission_id="p1", allowed=True
                )
            ]
        )
        with pytest.raises(TypeError):
            table.overrides_for("m1")["p2"] = True  # type: ignore[index]


class TestPermissionSnapshotStore:
    def test_starts_empty(self) -> None:
        store = PermissionSnapshotStore()
        assert store.version == 0
        assert len(store.current().catalog) == 0

    def test_publish_newer_replaces(self) -> None:
        store = PermissionSnapshotStore()
        snapshot = make_snapshot(version=1)
        assert store.publish(snapshot) is True
        assert store.current() is snapshot

    def test_publish_stale_is_ignored(self) -> None:
        current = make_snapshot(version=3)
        store = PermissionSnapshotStore(current)
        assert store.publish(make_snapshot(version=2)) is False
        assert store.publish(make_snapshot(version=3)) is False
        assert store.current() is current

    def test_reader_keeps_snapshot_taken_before_publish(self) -> None:
        """A reference taken before a publish still sees the old tables."""
        store = PermissionSnapshotStore(make_snapshot(version=1))
        before = store.current()
        store.publish(make_snapshot(overrides=[("m1", "exercise.create", False)], version=2))
        assert before.version == 1
        assert len(before.overrides) == 0
        assert len(store.current().overrides) == 1

    async def test_refresh_loads_next_version(self) -> None:
        store = PermissionSnapshotStore(make_snapshot(version=4))
        loader = AsyncMock()
        loader.load_snapshot.side_effect = lambda version: make_snapshot(version=version)
        refreshed = await store.refresh(loader)
        loader.load_snapshot.assert_awaited_once_with(5)
        assert refreshed.version == 5
        assert store.version == 5

    async def test_refresh_failure_keeps_current(self) -> None:
        current = make_snapshot(version=1)
        store = PermissionSnapshotStore(current)
        loader = AsyncMock()
        loader.load_snapshot.side_effect = RuntimeError("db down")
        with pytest.raises(RuntimeError):
            await store.refresh(loader)
        assert store.current() is current

    async def test_concurrent_refreshes_get_distinct_versions(self) -> None:
        store = PermissionSnapshotStore()
        loader = AsyncMock()

        async def load(version: int) -> PermissionSnapshot:
            await asyncio.sleep(0)
            return make_snapshot(version=version)

        loader.load_snapshot.side_effect = load
        await asyncio.gather(*(store.refresh(loader) for _ in range(3)))
        assert store.version == 3
        versions = [c.args[0] for c in loader.load_snapshot.await_args_list]
        assert versions == [1, 2, 3]


async def test_refresh_loop_survives_load_errors() -> None:
    """A failing load is logged and the loop keeps running until cancelled."""
    store = PermissionSnapshotStore()
    loader = AsyncMock()
    calls = 0

    async def load(version: int) -> PermissionSnapshot:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("transient")
        return make_snapshot(version=version)

    loader.load_snapshot.side_effect = load
    task = asyncio.create_task(run_snapshot_refresh_loop(store, loader, 0.001))
    for _ in range(200):
        if store.version >= 1:
            break
        await asyncio.sleep(0.005)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert calls >= 2
    assert store.version >= 1
