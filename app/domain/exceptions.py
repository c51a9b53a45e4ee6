"""Domain exceptions for the center authorization service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Permission resolution itself never raises: unknown keys and inactive
memberships resolve to a denial. These exceptions are raised by the
administration and enforcement paths around it.
"""

from typing import Any


class CenterAuthzException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CenterAuthzException):
    """Raised when input validation fails (e.g. invalid format or duplicate key)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CenterAuthzException):
    """Raised when authentication fails (e.g. invalid or missing token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CenterAuthzException):
    """Raised when the membership lacks the permission required for the operation."""

    def __init__(
        self,
        permission_key: str | None = None,
        center_id: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional permission key, center, and message.

        Args:
            permission_key: Permission that was required (e.g. 'mocktest.publish').
            center_id: Center in which the check was evaluated.
            message: Human-readable message; default used when permission_key omitted.
        """
        if permission_key:
            message = f"Permission denied: {permission_key} required"
        details: dict[str, Any] = {}
        if permission_key:
            details["permission"] = permission_key
        if center_id:
            details["center_id"] = center_id
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(CenterAuthzException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'membership', 'permission').
            resource_id: The ID or key that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateAssignmentException(CenterAuthzException):
    """Raised when a row already exists for a unique pair (membership, role default, override)."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description (e.g. 'User is already a member of this center').
            assignment_type: 'membership', 'role_permission' or 'membership_permission'.
            details_extra: Optional extra keys (e.g. center_id, user_id).
        """
        details = details_extra or {}
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class InvalidStatusTransitionException(CenterAuthzException):
    """Raised when a membership status change is not allowed by the lifecycle."""

    def __init__(self, membership_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Cannot change membership status from {current} to {target}",
            "INVALID_STATUS_TRANSITION",
            {"membership_id": membership_id, "current": current, "target": target},
        )


class MembershipRuleViolationException(CenterAuthzException):
    """Raised when a membership change breaks a center rule (e.g. last active owner)."""

    def __init__(self, message: str, rule: str) -> None:
        super().__init__(message, "MEMBERSHIP_RULE_VIOLATION", {"rule": rule})


class SqlNotConfiguredException(CenterAuthzException):
    """Raised when an operation requires Postgres but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
