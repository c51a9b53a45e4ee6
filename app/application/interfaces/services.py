"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.authorization import AuthorizationDecision
    from app.application.dtos.membership import MembershipResult
    from app.application.services.permission_snapshot import PermissionSnapshot


# Cache interface
class ICacheService(Protocol):
    """Minimal cache protocol for permission caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern. Returns count deleted."""


# Membership lookup interface (external collaborator)
class IMembershipLookup(Protocol):
    """Protocol for resolving the membership of a user in a center."""

    async def get_by_user_and_center(
        self, user_id: str, center_id: str
    ) -> MembershipResult | None:
        """Return the membership for (user, center) in any status, or None."""


# Snapshot loader interface
class IPermissionSnapshotLoader(Protocol):
    """Protocol for loading catalog, role defaults and overrides from storage."""

    async def load_snapshot(self, version: int) -> PermissionSnapshot:
        """Read all three tables and return them as one snapshot with the given version."""


# Snapshot refresher (used by admin services after writes)
class IPermissionSnapshotRefresher(Protocol):
    """Protocol for requesting a reload of the published snapshot."""

    @property
    def version(self) -> int:
        """Version of the published snapshot."""

    async def refresh(self, loader: IPermissionSnapshotLoader) -> PermissionSnapshot:
        """Load and publish a new snapshot."""


# Decision audit hook (extension point; nothing is persisted by default)
class IAuthorizationAuditHook(Protocol):
    """Protocol for observing authorization decisions."""

    async def record_decision(self, decision: AuthorizationDecision) -> None:
        """Receive one evaluated decision. Must not alter the decision."""
