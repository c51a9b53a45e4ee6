"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import MembershipEntity
from app.domain.enums import CenterRole, MembershipStatus
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CenterAuthzException,
    DuplicateAssignmentException,
    InvalidStatusTransitionException,
    MembershipRuleViolationException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)
from app.domain.value_objects import PermissionKey

__all__ = [
    # Entities
    "MembershipEntity",
    # Enums
    "CenterRole",
    "MembershipStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CenterAuthzException",
    "DuplicateAssignmentException",
    "InvalidStatusTransitionException",
    "MembershipRuleViolationException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "ValidationException",
    # Value objects
    "PermissionKey",
]
