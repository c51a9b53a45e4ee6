"""Unit tests for permission resolution (status gate, overrides, role defaults)."""

import pytest

from app.application.services.permission_engine import (
    PermissionEngine,
    resolve_effective_permissions,
    resolve_permission,
)
from app.application.services.permission_snapshot import PermissionSnapshotStore
from app.domain.enums import CenterRole, MembershipStatus
from tests.conftest import PERMISSION_IDS, make_membership, make_snapshot


class TestExampleScenarios:
    """Role defaults combined with overrides for concrete memberships."""

    def test_teacher_default_allows_without_overrides(self) -> None:
        snapshot = make_snapshot()
        m1 = make_membership("m1", CenterRole.TEACHER)
        assert resolve_permission(snapshot, m1, "exercise.create") is True

    def test_deny_override_revokes_role_default(self) -> None:
        snapshot = make_snapshot(overrides=[("m2", "exercise.create", False)])
        m2 = make_membership("m2", CenterRole.TEACHER)
        assert resolve_permission(snapshot, m2, "exercise.create") is False

    def test_grant_override_beyond_role(self) -> None:
        snapshot = make_snapshot(overrides=[("m3", "mocktest.publish", True)])
        m3 = make_membership("m3", CenterRole.STUDENT)
        assert resolve_permission(snapshot, m3, "mocktest.publish") is True

    def test_suspended_membership_ignores_grant_override(self) -> None:
        """Status gate runs before the override lookup."""
        snapshot = make_snapshot(overrides=[("m4", "mocktest.publish", True)])
        m4 = make_membership("m4", CenterRole.ADMIN, MembershipStatus.SUSPENDED)
        assert resolve_permission(snapshot, m4, "mocktest.publish") is False

    def test_effective_set_applies_deny_override(self) -> None:
        snapshot = make_snapshot(overrides=[("m1", "exercise.edit", False)])
        m1 = make_membership("m1", CenterRole.TEACHER)
        assert resolve_effective_permissions(snapshot, m1) == {"exercise.create"}

    def test_other_membership_override_does_not_leak(self) -> None:
        snapshot = make_snapshot(overrides=[("m2", "exercise.create", False)])
        m1 = make_membership("m1", CenterRole.TEACHER)
        assert resolve_permission(snapshot, m1, "exercise.create") is True


class TestStatusGate:
    """Only ACTIVE memberships carry capability."""

    @pytest.mark.parametrize(
        "status", [MembershipStatus.INVITED, MembershipStatus.SUSPENDED]
    )
    @pytest.mark.parametrize("role", list(CenterRole))
    def test_inactive_denies_everything(
        self, role: CenterRole, status: MembershipStatus
    ) -> None:
        snapshot = make_snapshot(
            overrides=[("m1", key, True) for key in PERMISSION_IDS]
        )
        membership = make_membership("m1", role, status)
        for key in PERMISSION_IDS:
            assert resolve_permission(snapshot, membership, key) is False
        assert resolve_effective_permissions(snapshot, membership) == frozenset()

    def test_no_membership_denies(self) -> None:
        snapshot = make_snapshot()
        assert resolve_permission(snapshot, None, "exercise.create") is False
        assert resolve_effective_permissions(snapshot, None) == frozenset()

    def test_plain_string_status_is_accepted(self) -> None:
        """Memberships read from other sources may carry raw string values."""
        snapshot = make_snapshot()

        class Row:
            id = "m1"
            role = "TEACHER"
            status = "ACTIVE"

        assert resolve_permission(snapshot, Row(), "exercise.create") is True


class TestUnknownKeys:
    """Keys outside the catalog never resolve to an allow."""

    @pytest.mark.parametrize("role", list(CenterRole))
    def test_unknown_key_denied_for_every_role(self, role: CenterRole) -> None:
        snapshot = make_snapshot()
        membership = make_membership("m1", role)
        assert resolve_permission(snapshot, membership, "no.such.key") is False

    def test_empty_key_denied(self) -> None:
        snapshot = make_snapshot()
        owner = make_membership("m1", CenterRole.OWNER)
        assert resolve_permission(snapshot, owner, "") is False

    def test_override_for_id_missing_from_catalog_is_ignored(self) -> None:
        from app.application.dtos.permission import (
            MembershipOverrideResult,
            PermissionResult,
            RoleDefaultResult,
        )
        from app.application.services.permission_snapshot import build_snapshot

        snapshot = build_snapshot(
            [PermissionResult(id="p1", key="exercise.create", name="Create")],
            [
                RoleDefaultResult(role=CenterRole.TEACHER, permission_id="p1"),
                RoleDefaultResult(role=CenterRole.TEACHER, permission_id="ghost-default"),
            ],
            [
                MembershipOverrideResult(
                    id="o1", membership_id="m1", permission_id="ghost", allowed=True
                )
            ],
            version=1,
        )
        membership = make_membership("m1", CenterRole.TEACHER)
        assert resolve_effective_permissions(snapshot, membership) == {"exercise.create"}


class TestResolutionProperties:
    """Precedence, fallback and effective-set consistency over the whole catalog."""

    @pytest.mark.parametrize("role", list(CenterRole))
    @pytest.mark.parametrize("allowed", [True, False])
    def test_override_value_always_wins(self, role: CenterRole, allowed: bool) -> None:
        for key in PERMISSION_IDS:
            snapshot = make_snapshot(overrides=[("m1", key, allowed)])
            membership = make_membership("m1", role)
            assert resolve_permission(snapshot, membership, key) is allowed

    @pytest.mark.parametrize("role", list(CenterRole))
    def test_default_fallback_without_override(self, role: CenterRole) -> None:
        from tests.conftest import ROLE_DEFAULTS

        snapshot = make_snapshot()
        membership = make_membership("m1", role)
        for key in PERMISSION_IDS:
            expected = key in ROLE_DEFAULTS[role]
            assert resolve_permission(snapshot, membership, key) is expected

    @pytest.mark.parametrize("role", list(CenterRole))
    def test_effective_set_matches_is_allowed(self, role: CenterRole) -> None:
        snapshot = make_snapshot(
            overrides=[
                ("m1", "exercise.create", False),
                ("m1", "mocktest.publish", True),
                ("m1", "user.invite", False),
            ]
        )
        membership = make_membership("m1", role)
        effective = resolve_effective_permissions(snapshot, membership)
        for key in PERMISSION_IDS:
            assert (key in effective) == resolve_permission(snapshot, membership, key)

    def test_repeated_calls_are_identical(self) -> None:
        snapshot = make_snapshot(overrides=[("m1", "mocktest.publish", True)])
        membership = make_membership("m1", CenterRole.STUDENT)
        first = resolve_effective_permissions(snapshot, membership)
        for _ in range(3):
            assert resolve_effective_permissions(snapshot, membership) == first
            assert resolve_permission(snapshot, membership, "mocktest.publish") is True


class TestPermissionEngine:
    """PermissionEngine reads the published snapshot on every call."""

    def test_reads_current_snapshot(self) -> None:
        store = PermissionSnapshotStore(make_snapshot(version=1))
        engine = PermissionEngine(store)
        m1 = make_membership("m1", CenterRole.TEACHER)
        assert engine.is_allowed(m1, "exercise.create") is True

        store.publish(make_snapshot(overrides=[("m1", "exercise.create", False)], version=2))
        assert engine.is_allowed(m1, "exercise.create") is False
        assert engine.effective_permissions(m1) == {"exercise.edit"}
        assert engine.snapshot.version == 2

    def test_empty_store_denies(self) -> None:
        engine = PermissionEngine(PermissionSnapshotStore())
        owner = make_membership("m1", CenterRole.OWNER)
        assert engine.is_allowed(owner, "exercise.create") is False
        assert engine.effective_permissions(owner) == frozenset()
