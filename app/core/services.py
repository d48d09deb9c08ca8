"""
Base service layer patterns for business logic encapsulation.

Service Layer Philosophy:
    Services encapsulate business logic separate from models and from the
    (external) transport layer. Models hold data and constraints, services
    validate preconditions, mutate state inside a transaction and either
    return the affected entity or raise a typed error from core.exceptions.

Usage:
    from django.db import transaction

    from core.exceptions import ConflictError
    from core.services import BaseService

    class GroupService(BaseService):
        @classmethod
        def create_group(cls, creator_id: int, name: str) -> Group:
            if not name.strip():
                raise ValidationError("Group name is required", "NAME_REQUIRED")

            with transaction.atomic():
                group = Group.objects.create(name=name, created_by_id=creator_id)
                GroupMember.objects.create(group=group, user_id=creator_id)

            cls.get_logger().info(f"Created group {group.id}")
            return group

Related:
    - core.exceptions: Typed business-rule errors
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TypeVar

    from core.exceptions import BaseApplicationError

    T = TypeVar("T")


# SQLSTATE reported by PostgreSQL drivers for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    Check whether an IntegrityError comes from a unique constraint.

    Django re-raises driver errors with the original as __cause__:
    psycopg exposes the SQLSTATE, SQLite only the message text.
    """
    cause = exc.__cause__
    if getattr(cause, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "UNIQUE constraint failed" in str(exc)


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Translation of storage uniqueness violations into typed conflicts

    Design Notes:
        - Use @classmethod (no instance state)
        - Services are stateless and never cache entity state across calls
        - Raise core.exceptions subclasses for business-rule failures
        - Let unexpected database errors propagate
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Returns:
            Logger instance for this service

        Example:
            class GroupService(BaseService):
                @classmethod
                def leave_group(cls, group_id, user_id):
                    cls.get_logger().info(f"User {user_id} leaving {group_id}")
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def insert_or_conflict(
        cls,
        create: Callable[[], T],
        conflict: Callable[[], BaseApplicationError],
    ) -> T:
        """
        Run an insert inside a savepoint and map a uniqueness violation.

        Existence checks made before an insert are only a fast path: two
        concurrent callers can both pass them. The database constraint
        rejects the second writer, and this helper turns that rejection into
        the same typed error the fast path would have raised. The savepoint
        keeps the enclosing transaction usable so the caller's atomic block
        rolls back cleanly.

        Args:
            create: Zero-argument callable performing the insert
            conflict: Zero-argument callable building the error to raise

        Returns:
            Whatever create() returns

        Raises:
            The error built by conflict() when the insert violates a
            uniqueness constraint
            IntegrityError: Check and foreign key violations, unchanged

        Example:
            invitation = cls.insert_or_conflict(
                lambda: GroupInvitation.objects.create(...),
                lambda: PendingInvitationExists(group_id, invitee_id),
            )
        """
        try:
            with transaction.atomic():
                return create()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            error = conflict()
            cls.get_logger().warning(
                f"Constraint rejected concurrent insert ({error.error_code}): {exc}"
            )
            raise error from exc
