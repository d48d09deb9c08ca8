"""
Identity lookup exceptions.

Exception Hierarchy:
    UserNotFound (NotFoundError) - No ACTIVE user for the given id or email
    LookupKeyRequired (ValidationError) - Neither id nor email supplied
"""

from __future__ import annotations

from core.exceptions import NotFoundError, ValidationError


class UserNotFound(NotFoundError):
    """
    Raised when a user cannot take part in a new relationship.

    Covers both a missing account and one that is not ACTIVE; callers
    cannot tell the two apart.

    Example:
        raise UserNotFound.by_email("ana@example.com")
    """

    default_error_code: str = "USER_NOT_FOUND"

    @classmethod
    def by_id(cls, user_id: int) -> UserNotFound:
        return cls(f"User {user_id} not found", details={"user_id": user_id})

    @classmethod
    def by_email(cls, email: str) -> UserNotFound:
        return cls(f"User with email {email} not found", details={"email": email})


class LookupKeyRequired(ValidationError):
    """Raised when a lookup supplies neither a user id nor an email."""

    default_error_code: str = "LOOKUP_KEY_REQUIRED"
