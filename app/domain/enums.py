"""Domain enumerations for center membership authorization.

Enums represent fixed sets of domain values (membership role and status).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for check constraints)."""
        return [member.value for member in cls]


class CenterRole(_ValuesMixin, str, Enum):
    """Role held by a membership within one center. Exactly one per membership."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class MembershipStatus(_ValuesMixin, str, Enum):
    """Membership lifecycle status.

    Only ACTIVE memberships carry capability. INVITED and SUSPENDED are
    treated identically by permission resolution; the distinction exists
    for invitation and administration flows.
    """

    INVITED = "INVITED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
