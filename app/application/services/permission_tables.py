"""Immutable in-memory tables consumed by permission resolution.

PermissionCatalog: permission rows by key and by id.
RoleDefaultTable: role -> permission ids granted by default.
MembershipOverrideTable: (membership_id, permission_id) -> allowed.

Tables are built once from administered rows and never mutated afterwards;
a refresh builds new tables and publishes them as a new snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from app.application.dtos.permission import (
    MembershipOverrideResult,
    PermissionResult,
    RoleDefaultResult,
)
from app.domain.enums import CenterRole
from app.domain.exceptions import ValidationException

_EMPTY_OVERRIDES: Mapping[str, bool] = MappingProxyType({})


class PermissionCatalog:
    """Known permissions, looked up by stable key or by id."""

    def __init__(self, permissions: Iterable[PermissionResult] = ()) -> None:
        by_key: dict[str, PermissionResult] = {}
        by_id: dict[str, PermissionResult] = {}
        for permission in permissions:
            if permission.key in by_key:
                raise ValidationException(
                    f"Duplicate permission key in catalog: {permission.key}",
                    field="key",
                )
            if permission.id in by_id:
                raise ValidationException(
                    f"Duplicate permission id in catalog: {permission.id}",
                    field="id",
                )
            by_key[permission.key] = permission
            by_id[permission.id] = permission
        self._by_key: Mapping[str, PermissionResult] = MappingProxyType(by_key)
        self._by_id: Mapping[str, PermissionResult] = MappingProxyType(by_id)
        self._known_ids = frozenset(by_id)

    def lookup_by_key(self, key: str) -> PermissionResult | None:
        """Return the permission for key, or None when the key is not in the catalog."""
        return self._by_key.get(key)

    def lookup_by_id(self, permission_id: str) -> PermissionResult | None:
        """Return the permission with this id, or None."""
        return self._by_id.get(permission_id)

    @property
    def known_ids(self) -> frozenset[str]:
        return self._known_ids

    def keys(self) -> frozenset[str]:
        return frozenset(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[PermissionResult]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)


class RoleDefaultTable:
    """Baseline policy: permission ids each role grants by default.

    Rows are unique per (role, permission_id) in storage; building a set
    here makes repeated rows harmless.
    """

    def __init__(self, rows: Iterable[RoleDefaultResult] = ()) -> None:
        grouped: dict[CenterRole, set[str]] = {}
        for row in rows:
            grouped.setdefault(CenterRole(row.role), set()).add(row.permission_id)
        self._defaults: Mapping[CenterRole, frozenset[str]] = MappingProxyType(
            {role: frozenset(ids) for role, ids in grouped.items()}
        )

    def defaults_for(self, role: CenterRole | str) -> frozenset[str]:
        """Return permission ids granted by default to role (empty for unknown roles)."""
        try:
            normalized = CenterRole(role)
        except ValueError:
            return frozenset()
        return self._defaults.get(normalized, frozenset())

    def roles(self) -> frozenset[CenterRole]:
        return frozenset(self._defaults)


class MembershipOverrideTable:
    """Sparse per-membership exceptions to role defaults.

    Absence of a row means "defer to the role default", not "denied".
    """

    def __init__(self, rows: Iterable[MembershipOverrideResult] = ()) -> None:
        pairs: dict[tuple[str, str], bool] = {}
        by_membership: dict[str, dict[str, bool]] = {}
        for row in rows:
            pair = (row.membership_id, row.permission_id)
            if pair in pairs:
                raise ValidationException(
                    "Duplicate override for membership "
                    f"{row.membership_id} and permission {row.permission_id}",
                    field="permission_id",
                )
            pairs[pair] = bool(row.allowed)
            by_membership.setdefault(row.membership_id, {})[row.permission_id] = bool(
                row.allowed
            )
        self._pairs: Mapping[tuple[str, str], bool] = MappingProxyType(pairs)
        self._by_membership: Mapping[str, Mapping[str, bool]] = MappingProxyType(
            {mid: MappingProxyType(values) for mid, values in by_membership.items()}
        )

    def get(self, membership_id: str, permission_id: str) -> bool | None:
        """Return the override value for the pair, or None when no row exists."""
        return self._pairs.get((membership_id, permission_id))

    def overrides_for(self, membership_id: str) -> Mapping[str, bool]:
        """Return a read-only mapping of permission_id -> allowed for the membership."""
        return self._by_membership.get(membership_id, _EMPTY_OVERRIDES)

    def __len__(self) -> int:
        return len(self._pairs)
