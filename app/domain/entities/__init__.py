"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.membership import MembershipEntity

__all__ = [
    "MembershipEntity",
]
