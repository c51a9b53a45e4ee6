"""Security: bearer token verification."""

from app.infrastructure.security.jwt import verify_token

__all__ = ["verify_token"]
