"""Domain exceptions for the Taskboard application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TaskboardException(Exception):
    """Base exception for all Taskboard application errors.

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


class ValidationException(TaskboardException):
    """Raised when input validation fails (e.g. empty title, unknown role)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(TaskboardException):
    """Raised when authentication fails (e.g. missing or invalid bearer token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(TaskboardException):
    """Raised when the caller's effective capabilities lack the one required."""

    def __init__(
        self,
        capability: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional capability flag name.

        Args:
            capability: Capability flag that was missing (e.g. 'can_delete_tasks').
            message: Human-readable message; default used when capability omitted.
        """
        details: dict[str, Any] = {}
        if capability:
            message = f"Permission denied: requires {capability}"
            details["capability"] = capability
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(TaskboardException):
    """Raised when a requested resource (task, employee, approval token) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task', 'employee').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ApprovalNotFoundException(ResourceNotFoundException):
    """Raised when no approval request matches a token.

    The token is never echoed back: an unknown token and a malformed one are
    indistinguishable to the caller.
    """

    def __init__(self) -> None:
        TaskboardException.__init__(
            self,
            "Approval request not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": "approval_request"},
        )


class ApprovalExpiredException(TaskboardException):
    """Raised when an approval token is used after its expiry time."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            "Approval link has expired; ask the sender for a new one",
            "APPROVAL_EXPIRED",
            {"request_id": request_id},
        )


class ApprovalAlreadyProcessedException(TaskboardException):
    """Raised when an approval request is no longer pending (already answered or cancelled)."""

    def __init__(self, request_id: str, status: str) -> None:
        super().__init__(
            "Approval request was already processed",
            "APPROVAL_ALREADY_PROCESSED",
            {"request_id": request_id, "status": status},
        )


class ProvisioningException(TaskboardException):
    """Raised when the user-provisioning collaborator rejects or fails an invitation."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["upstream_status"] = status_code
        super().__init__(message, "PROVISIONING_ERROR", details)


class SqlNotConfiguredException(TaskboardException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
