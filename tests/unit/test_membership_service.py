"""Unit tests for MembershipService (lifecycle transitions and center rules)."""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.services.membership_service import MembershipService
from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import (
    InvalidStatusTransitionException,
    MembershipRuleViolationException,
    ResourceNotFoundException,
)
from tests.conftest import CENTER_ID, make_membership


@pytest.fixture
def repo() -> AsyncMock:
    repo = AsyncMock()
    repo.update_status.side_effect = lambda mid, status: make_membership(
        mid, status=status
    )
    repo.update_role.side_effect = lambda mid, role: make_membership(mid, role=role)
    return repo


@pytest.fixture
def authz() -> MagicMock:
    authz = MagicMock()
    authz.invalidate_user_cache = AsyncMock()
    return authz


@pytest.fixture
def commit() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repo: AsyncMock, authz: MagicMock, commit: AsyncMock) -> MembershipService:
    return MembershipService(repo, authz, commit=commit)


async def test_invite_creates_invited_membership(
    service: MembershipService, repo: AsyncMock, authz: MagicMock, commit: AsyncMock
) -> None:
    repo.create_membership.return_value = make_membership(
        "m9", CenterRole.STUDENT, MembershipStatus.INVITED, user_id="user-9"
    )
    created = await service.invite(CENTER_ID, "user-9", CenterRole.STUDENT)
    assert created.status == MembershipStatus.INVITED
    repo.create_membership.assert_awaited_once_with(
        center_id=CENTER_ID,
        user_id="user-9",
        role=CenterRole.STUDENT,
        status=MembershipStatus.INVITED,
    )
    commit.assert_awaited_once()
    authz.invalidate_user_cache.assert_awaited_once_with("user-9", CENTER_ID)


async def test_accept_moves_invited_to_active(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership(
        "m1", status=MembershipStatus.INVITED
    )
    updated = await service.accept(CENTER_ID, "user-1")
    assert updated.status == MembershipStatus.ACTIVE
    repo.update_status.assert_awaited_once_with("m1", MembershipStatus.ACTIVE)


async def test_accept_of_suspended_membership_is_rejected(
    service: MembershipService, repo: AsyncMock
) -> None:
    """Acceptance is not a way out of suspension."""
    repo.get_by_user_and_center.return_value = make_membership(
        "m1", status=MembershipStatus.SUSPENDED
    )
    with pytest.raises(InvalidStatusTransitionException):
        await service.accept(CENTER_ID, "user-1")
    repo.update_status.assert_not_awaited()


async def test_missing_membership_is_not_found(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.accept(CENTER_ID, "user-1")
    with pytest.raises(ResourceNotFoundException):
        await service.get(CENTER_ID, "user-1")


async def test_suspend_active_member(
    service: MembershipService, repo: AsyncMock, authz: MagicMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership("m1", CenterRole.TEACHER)
    updated = await service.suspend(CENTER_ID, "user-1", requested_by="admin-1")
    assert updated.status == MembershipStatus.SUSPENDED
    authz.invalidate_user_cache.assert_awaited_once_with("user-1", CENTER_ID)


async def test_suspend_self_is_rejected(
    service: MembershipService, repo: AsyncMock
) -> None:
    with pytest.raises(MembershipRuleViolationException) as exc_info:
        await service.suspend(CENTER_ID, "user-1", requested_by="user-1")
    assert exc_info.value.details == {"rule": "self_suspension"}
    repo.get_by_user_and_center.assert_not_awaited()


async def test_suspend_last_active_owner_is_rejected(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership("m1", CenterRole.OWNER)
    repo.count_active_owners.return_value = 1
    with pytest.raises(MembershipRuleViolationException) as exc_info:
        await service.suspend(CENTER_ID, "user-1", requested_by="owner-2")
    assert exc_info.value.details == {"rule": "last_active_owner"}
    repo.update_status.assert_not_awaited()


async def test_suspend_owner_when_another_owner_is_active(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership("m1", CenterRole.OWNER)
    repo.count_active_owners.return_value = 2
    updated = await service.suspend(CENTER_ID, "user-1", requested_by="owner-2")
    assert updated.status == MembershipStatus.SUSPENDED


async def test_suspend_already_suspended_is_rejected(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership(
        "m1", status=MembershipStatus.SUSPENDED
    )
    with pytest.raises(InvalidStatusTransitionException):
        await service.suspend(CENTER_ID, "user-1", requested_by="admin-1")


async def test_reinstate_suspended_member(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership(
        "m1", status=MembershipStatus.SUSPENDED
    )
    updated = await service.reinstate(CENTER_ID, "user-1")
    assert updated.status == MembershipStatus.ACTIVE


async def test_reinstate_invited_is_rejected(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.get_by_user_and_center.return_value = make_membership(
        "m1", status=MembershipStatus.INVITED
    )
    with pytest.raises(InvalidStatusTransitionException):
        await service.reinstate(CENTER_ID, "user-1")


async def test_change_role(service: MembershipService, repo: AsyncMock) -> None:
    repo.get_by_user_and_center.return_value = make_membership("m1", CenterRole.STUDENT)
    updated = await service.change_role(CENTER_ID, "user-1", CenterRole.TEACHER)
    assert updated.role == CenterRole.TEACHER
    repo.update_role.assert_awaited_once_with("m1", CenterRole.TEACHER)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (CenterRole.OWNER, CenterRole.ADMIN),
        (CenterRole.ADMIN, CenterRole.OWNER),
    ],
)
async def test_change_role_owner_rules(
    service: MembershipService,
    repo: AsyncMock,
    current: CenterRole,
    target: CenterRole,
) -> None:
    repo.get_by_user_and_center.return_value = make_membership("m1", current)
    with pytest.raises(MembershipRuleViolationException) as exc_info:
        await service.change_role(CENTER_ID, "user-1", target)
    assert exc_info.value.details == {"rule": "owner_role"}
    repo.update_role.assert_not_awaited()


async def test_without_commit_callable_still_invalidates(
    repo: AsyncMock, authz: MagicMock
) -> None:
    service = MembershipService(repo, authz)
    repo.get_by_user_and_center.return_value = replace(
        make_membership("m1"), status=MembershipStatus.SUSPENDED
    )
    await service.reinstate(CENTER_ID, "user-1")
    authz.invalidate_user_cache.assert_awaited_once_with("user-1", CENTER_ID)


async def test_list_members_passes_filters(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.list_by_center.return_value = [
        make_membership("m1", CenterRole.STUDENT, MembershipStatus.SUSPENDED)
    ]
    members = await service.list_members(
        CENTER_ID, role=CenterRole.STUDENT, status=MembershipStatus.SUSPENDED
    )
    assert [m.id for m in members] == ["m1"]
    repo.list_by_center.assert_awaited_once_with(
        CENTER_ID, role=CenterRole.STUDENT, status=MembershipStatus.SUSPENDED
    )


async def test_list_members_without_filters(
    service: MembershipService, repo: AsyncMock
) -> None:
    repo.list_by_center.return_value = []
    assert await service.list_members(CENTER_ID) == []
    repo.list_by_center.assert_awaited_once_with(CENTER_ID, role=None, status=None)
