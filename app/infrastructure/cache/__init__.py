"""Cache: Redis service used by the authorization service for permission sets."""

from app.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
