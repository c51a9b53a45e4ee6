"""DTOs for permission catalog, role defaults and overrides (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import CenterRole


@dataclass(frozen=True)
class PermissionResult:
    """Permission catalog entry. Key is the stable identifier used by callers."""

    id: str
    key: str
    name: str


@dataclass(frozen=True)
class RoleDefaultResult:
    """Role default row: the role grants permission_id unless overridden."""

    role: CenterRole
    permission_id: str


@dataclass(frozen=True)
class MembershipOverrideResult:
    """Per-membership override row. allowed=True grants, allowed=False revokes."""

    id: str
    membership_id: str
    permission_id: str
    allowed: bool
