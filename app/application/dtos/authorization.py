"""DTOs for authorization decisions (passed to the decision audit hook)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorizationDecision:
    """One evaluated permission check. membership_id is None when no membership was found."""

    user_id: str
    center_id: str
    membership_id: str | None
    permission_key: str
    allowed: bool
