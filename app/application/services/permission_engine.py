"""Permission resolution: role defaults combined with per-membership overrides.

Decision for one permission key:

1. No membership, or status other than ACTIVE -> denied. This gate runs
   before any table lookup so nothing about a suspended or invited
   membership's role is revealed.
2. Key not in the catalog -> denied (a typo never becomes an allow).
3. Override row for (membership, permission) -> its value, in both
   directions: False revokes a role default, True grants beyond the role.
4. Otherwise -> whether the role grants the permission by default.

The effective set is (role defaults | granted overrides) - revoked overrides,
restricted to catalog ids, so a key is in the set exactly when is_allowed
returns True for it. Resolution is pure and never raises.
"""

from __future__ import annotations

from typing import Protocol

from app.application.services.permission_snapshot import (
    PermissionSnapshot,
    PermissionSnapshotStore,
)
from app.domain.enums import CenterRole, MembershipStatus


class MembershipLike(Protocol):
    """Attributes resolution reads from a membership (DTO, entity or ORM row)."""

    @property
    def id(self) -> str: ...

    @property
    def role(self) -> CenterRole | str: ...

    @property
    def status(self) -> MembershipStatus | str: ...


def _is_active(membership: MembershipLike | None) -> bool:
    return membership is not None and membership.status == MembershipStatus.ACTIVE


def resolve_permission(
    snapshot: PermissionSnapshot,
    membership: MembershipLike | None,
    permission_key: str,
) -> bool:
    """Return whether membership holds permission_key under snapshot."""
    if not _is_active(membership):
        return False
    permission = snapshot.catalog.lookup_by_key(permission_key)
    if permission is None:
        return False
    override = snapshot.overrides.get(membership.id, permission.id)
    if override is not None:
        return override
    return permission.id in snapshot.role_defaults.defaults_for(membership.role)


def resolve_effective_permissions(
    snapshot: PermissionSnapshot,
    membership: MembershipLike | None,
) -> frozenset[str]:
    """Return the keys membership holds under snapshot (empty when not ACTIVE)."""
    if not _is_active(membership):
        return frozenset()
    granted: set[str] = set(snapshot.role_defaults.defaults_for(membership.role))
    for permission_id, allowed in snapshot.overrides.overrides_for(membership.id).items():
        if allowed:
            granted.add(permission_id)
        else:
            granted.discard(permission_id)
    catalog = snapshot.catalog
    # Overrides or defaults pointing at ids missing from the catalog are dropped.
    return frozenset(
        catalog.lookup_by_id(permission_id).key
        for permission_id in granted & catalog.known_ids
    )


class PermissionEngine:
    """Evaluates memberships against the snapshot currently published in a store.

    Each call reads the store once, so an evaluation that overlaps a refresh
    completes against the snapshot it started with.
    """

    def __init__(self, store: PermissionSnapshotStore) -> None:
        self._store = store

    @property
    def snapshot(self) -> PermissionSnapshot:
        return self._store.current()

    def is_allowed(self, membership: MembershipLike | None, permission_key: str) -> bool:
        """Return True if the membership may perform the action named by permission_key."""
        return resolve_permission(self._store.current(), membership, permission_key)

    def effective_permissions(self, membership: MembershipLike | None) -> frozenset[str]:
        """Return all permission keys the membership currently holds."""
        return resolve_effective_permissions(self._store.current(), membership)
