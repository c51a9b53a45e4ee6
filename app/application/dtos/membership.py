"""DTOs for membership use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import CenterRole, MembershipStatus


@dataclass(frozen=True)
class MembershipResult:
    """Membership read-model (result of membership lookup, invite, status changes)."""

    id: str
    center_id: str
    user_id: str
    role: CenterRole
    status: MembershipStatus
    created_at: datetime | None = None
