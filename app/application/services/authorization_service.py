"""Authorization service: permission checks for a user in a center.

Resolves the caller's membership through IMembershipLookup, evaluates it with
PermissionEngine, and caches effective permission sets when a cache is
available. Every failure on the way to a decision resolves to a denial.
"""

from __future__ import annotations

import logging

from app.application.dtos.authorization import AuthorizationDecision
from app.application.dtos.membership import MembershipResult
from app.application.interfaces.services import (
    IAuthorizationAuditHook,
    ICacheService,
    IMembershipLookup,
)
from app.application.services.permission_engine import PermissionEngine
from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION
from app.domain.exceptions import AuthorizationException
from app.shared.telemetry.tracing import add_span_attributes

logger = logging.getLogger(__name__)


def _validate_key_component(value: str, name: str) -> None:
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def permission_cache_key(center_id: str, user_id: str, version: int) -> str:
    """Cache key for a user's effective permissions under one snapshot version."""
    _validate_key_component(center_id, "center_id")
    _validate_key_component(user_id, "user_id")
    return CACHE_KEY_SEP.join(
        (CACHE_PREFIX_PERMISSION, center_id, user_id, str(version))
    )


def permission_cache_pattern(center_id: str, user_id: str | None = None) -> str:
    """Glob pattern matching cached permissions for one user, or a whole center."""
    _validate_key_component(center_id, "center_id")
    if user_id is None:
        return CACHE_KEY_SEP.join((CACHE_PREFIX_PERMISSION, center_id, "*"))
    _validate_key_component(user_id, "user_id")
    return CACHE_KEY_SEP.join((CACHE_PREFIX_PERMISSION, center_id, user_id, "*"))


class AuthorizationService:
    """Centralized permission checking; uses cache when available."""

    def __init__(
        self,
        membership_lookup: IMembershipLookup,
        engine: PermissionEngine,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
        audit_hook: IAuthorizationAuditHook | None = None,
    ) -> None:
        self.membership_lookup = membership_lookup
        self.engine = engine
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.audit_hook = audit_hook

    def _cache_ready(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_membership(
        self, user_id: str, center_id: str
    ) -> MembershipResult | None:
        """Return the membership for (user, center), or None.

        Lookup errors are logged and treated as "no membership" so that an
        unavailable membership store denies instead of failing open.
        """
        try:
            return await self.membership_lookup.get_by_user_and_center(
                user_id, center_id
            )
        except Exception:
            logger.exception(
                "Membership lookup failed for user %s in center %s; denying",
                user_id,
                center_id,
            )
            return None

    async def check_permission(
        self, user_id: str, center_id: str, permission_key: str
    ) -> bool:
        """Return True if the user's membership in center grants permission_key."""
        membership = await self.get_membership(user_id, center_id)
        allowed = self.engine.is_allowed(membership, permission_key)
        add_span_attributes(
            **{"authz.permission": permission_key, "authz.allowed": allowed}
        )
        await self._record(
            AuthorizationDecision(
                user_id=user_id,
                center_id=center_id,
                membership_id=membership.id if membership else None,
                permission_key=permission_key,
                allowed=allowed,
            )
        )
        return allowed

    async def get_effective_permissions(self, user_id: str, center_id: str) -> set[str]:
        """Return the set of permission keys the user holds in center."""
        snapshot = self.engine.snapshot
        key = permission_cache_key(center_id, user_id, snapshot.version)
        if self._cache_ready():
            cached = await self.cache.get(key)
            if cached is not None:
                return set(cached)

        membership = await self.get_membership(user_id, center_id)
        permissions = set(self.engine.effective_permissions(membership))
        if self._cache_ready():
            await self.cache.set(key, sorted(permissions), ttl=self.cache_ttl)
        return permissions

    async def require_permission(
        self, user_id: str, center_id: str, permission_key: str
    ) -> None:
        """Raise AuthorizationException if the user lacks permission_key in center."""
        if not await self.check_permission(user_id, center_id, permission_key):
            raise AuthorizationException(
                permission_key=permission_key, center_id=center_id
            )

    async def invalidate_user_cache(self, user_id: str, center_id: str) -> None:
        """Invalidate cached permissions for one user in one center (all versions)."""
        if self._cache_ready():
            await self.cache.delete_pattern(permission_cache_pattern(center_id, user_id))

    async def invalidate_center_cache(self, center_id: str) -> None:
        """Invalidate all cached permissions for a center."""
        if self._cache_ready():
            await self.cache.delete_pattern(permission_cache_pattern(center_id))

    async def _record(self, decision: AuthorizationDecision) -> None:
        logger.debug(
            "Authorization %s: user=%s center=%s permission=%s",
            "granted" if decision.allowed else "denied",
            decision.user_id,
            decision.center_id,
            decision.permission_key,
        )
        if self.audit_hook is None:
            return
        try:
            await self.audit_hook.record_decision(decision)
        except Exception:
            logger.exception("Authorization audit hook failed")
