"""
Base exception classes for relationship and membership errors.

Every business-rule rejection raised by a lifecycle service is one of four
kinds. Callers branch on the kind (class) and on the machine-readable
error_code, which names the specific reason.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed or self-referential input
    ├── NotFoundError - Referenced entity absent (or hidden from the caller)
    ├── PermissionDeniedError - Caller not authorized for this action
    └── ConflictError - An invariant would be violated

Usage:
    from core.exceptions import ConflictError, NotFoundError

    # Raise with message only
    raise NotFoundError("Group 7 not found")

    # Raise with error code and details
    raise ConflictError(
        "A pending invitation already exists",
        error_code="PENDING_EXISTS",
        details={"group_id": 7, "invitee_id": 12},
    )

    # Convert to dict for a transport layer
    try:
        ...
    except BaseApplicationError as e:
        payload = e.to_dict()

Note:
    All of these are terminal outcomes. None of them is retried internally;
    database errors that are not translated by a service propagate as-is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code naming the specific reason
        details: Additional context (ids involved, current status, etc.)

    Example:
        try:
            GroupService.leave_group(group_id, user_id)
        except ConflictError as e:
            logger.warning(f"Leave rejected: {e.error_code}")
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for a caller-facing payload.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Chat request 4 has already been accepted",
                "error_code": "ALREADY_RESOLVED",
                "details": {"request_id": 4, "status": "accepted"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input is malformed or self-referential.

    Use for:
    - Blank or over-long group names
    - Requests, conversations or invitations targeting oneself
    - Missing lookup keys (neither id nor email supplied)

    Example:
        raise ValidationError(
            "Cannot send a chat request to yourself",
            error_code="SAME_USER",
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a referenced entity does not exist.

    Also used where the caller is not allowed to learn whether the entity
    exists (a chat request or invitation the caller is not party to).

    Example:
        raise NotFoundError(
            f"Group {group_id} not found",
            error_code="GROUP_NOT_FOUND",
            details={"group_id": group_id},
        )
    """

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when an authenticated caller is not authorized for an action.

    Use for:
    - Non-receivers accepting or rejecting a chat request
    - Non-participants reading a conversation
    - Non-admins inviting, promoting, removing or updating a group

    Example:
        raise PermissionDeniedError(
            "Only group admins can invite users",
            error_code="NOT_GROUP_ADMIN",
        )

    Note:
        Credential validation happens outside this code base; every
        operation receives an already-authenticated acting user id.
    """

    default_error_code: str = "PERMISSION_DENIED"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation would violate an invariant.

    Use for:
    - Duplicate relationships (request, conversation, membership)
    - Duplicate pending invitations
    - Transitions out of a terminal status
    - Removing the last admin or abandoning a non-empty group

    Example:
        if request.status != ChatRequestStatus.PENDING:
            raise ConflictError(
                f"Chat request already {request.status}",
                error_code="ALREADY_RESOLVED",
                details={"current_status": request.status},
            )

    Note:
        Storage uniqueness violations caught during an insert are raised
        as the same ConflictError subclass the fast-path check would raise.
    """

    default_error_code: str = "CONFLICT"
