"""Membership domain entity.

Binds a user to a center with a role and a lifecycle status. The status
state machine is:

    INVITED -> ACTIVE      (acceptance)
    ACTIVE -> SUSPENDED    (administrative suspension)
    SUSPENDED -> ACTIVE    (reinstatement)

There is no terminal state; removal is a delete, not a transition.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import InvalidStatusTransitionException, ValidationException
from app.shared.utils.datetime import utc_now

_ALLOWED_TRANSITIONS: dict[MembershipStatus, frozenset[MembershipStatus]] = {
    MembershipStatus.INVITED: frozenset({MembershipStatus.ACTIVE}),
    MembershipStatus.ACTIVE: frozenset({MembershipStatus.SUSPENDED}),
    MembershipStatus.SUSPENDED: frozenset({MembershipStatus.ACTIVE}),
}


@dataclass
class MembershipEntity:
    """Domain entity for a center membership (business logic separate from persistence).

    Validation runs on construction. Status changes go through accept(),
    suspend() and reinstate() so that only lifecycle transitions are possible.
    """

    id: str
    center_id: str
    user_id: str
    role: CenterRole
    status: MembershipStatus = MembershipStatus.INVITED
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate membership invariants. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Membership ID is required", field="id")
        if not self.center_id:
            raise ValidationException("Center ID is required", field="center_id")
        if not self.user_id:
            raise ValidationException("User ID is required", field="user_id")
        if not isinstance(self.role, CenterRole):
            raise ValidationException(f"Invalid role: {self.role!r}", field="role")
        if not isinstance(self.status, MembershipStatus):
            raise ValidationException(
                f"Invalid status: {self.status!r}", field="status"
            )

    def is_active(self) -> bool:
        """Return True only when status is ACTIVE (the sole status carrying capability)."""
        return self.status == MembershipStatus.ACTIVE

    def can_transition_to(self, target: MembershipStatus) -> bool:
        """Return whether the lifecycle allows moving from the current status to target."""
        return target in _ALLOWED_TRANSITIONS[self.status]

    def _transition(self, target: MembershipStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionException(
                self.id, self.status.value, target.value
            )
        self.status = target

    def accept(self) -> None:
        """Accept the invitation: INVITED -> ACTIVE.

        Raises:
            InvalidStatusTransitionException: If the membership is not INVITED.
        """
        if self.status != MembershipStatus.INVITED:
            raise InvalidStatusTransitionException(
                self.id, self.status.value, MembershipStatus.ACTIVE.value
            )
        self._transition(MembershipStatus.ACTIVE)

    def suspend(self) -> None:
        """Suspend the membership: ACTIVE -> SUSPENDED.

        Raises:
            InvalidStatusTransitionException: If the membership is not ACTIVE.
        """
        self._transition(MembershipStatus.SUSPENDED)

    def reinstate(self) -> None:
        """Reinstate a suspended membership: SUSPENDED -> ACTIVE.

        Raises:
            InvalidStatusTransitionException: If the membership is not SUSPENDED.
        """
        if self.status != MembershipStatus.SUSPENDED:
            raise InvalidStatusTransitionException(
                self.id, self.status.value, MembershipStatus.ACTIVE.value
            )
        self._transition(MembershipStatus.ACTIVE)

    def change_role(self, new_role: CenterRole) -> None:
        """Change the role of a non-owner membership.

        Owners keep their role, and ownership is not granted through a role
        change.

        Raises:
            ValueError: If the membership is an OWNER or new_role is OWNER.
        """
        if self.role == CenterRole.OWNER:
            raise ValueError("Cannot change role of an owner")
        if new_role == CenterRole.OWNER:
            raise ValueError("Ownership cannot be assigned by role change")
        self.role = new_role
