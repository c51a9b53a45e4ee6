"""Bearer token verification.

Tokens are issued elsewhere; this service only checks the signature against
settings.secret_key and reads the caller's user id from sub.
"""

from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Decode token and return its claims.

    Raises:
        ValueError: If the signature is invalid, the token has expired, or
            exp or sub is missing.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
