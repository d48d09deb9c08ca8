"""
Identity directory service.

Read-only lookups over User records, used by the relationship services for
existence and ACTIVE-status checks, plus the user search that lets people
find each other before sending a chat request.

Usage:
    from accounts.services import IdentityDirectory

    user = IdentityDirectory.find_user_by_email("ana@example.com")
    receiver = IdentityDirectory.require_active_user(user_id=42)
    matches = IdentityDirectory.search_users("ana", current_user_id=7)
"""

from __future__ import annotations

from django.db.models import Q

from accounts.exceptions import LookupKeyRequired, UserNotFound
from accounts.models import User
from core.constants import get_limit
from core.services import BaseService


class IdentityDirectory(BaseService):
    """
    Read-only user lookups.

    Methods:
        find_user_by_id: User by primary key, any status
        find_user_by_email: User by email (case-insensitive), any status
        require_active_user: Resolve by id or email to an ACTIVE user or raise
        search_users: ACTIVE users matching email or display name
    """

    @classmethod
    def find_user_by_id(cls, user_id: int) -> User | None:
        return User.objects.filter(pk=user_id).first()

    @classmethod
    def find_user_by_email(cls, email: str) -> User | None:
        if not email:
            return None
        return User.objects.filter(email__iexact=email.strip()).first()

    @classmethod
    def require_active_user(
        cls,
        user_id: int | None = None,
        email: str | None = None,
    ) -> User:
        """
        Resolve a user by id (preferred) or email and require ACTIVE status.

        Args:
            user_id: Primary key of the user
            email: Email address, used only when user_id is None

        Returns:
            The ACTIVE User

        Raises:
            LookupKeyRequired: Neither user_id nor a non-blank email given
            UserNotFound: No such user, or the user is not ACTIVE
        """
        if user_id is not None:
            user = cls.find_user_by_id(user_id)
            if user is None or not user.is_verified:
                raise UserNotFound.by_id(user_id)
            return user

        if email and email.strip():
            user = cls.find_user_by_email(email)
            if user is None or not user.is_verified:
                raise UserNotFound.by_email(email.strip())
            return user

        raise LookupKeyRequired("Either a user id or an email must be provided")

    @classmethod
    def search_users(cls, query: str, current_user_id: int) -> list[User]:
        """
        Find ACTIVE users whose email or display name contains the query.

        The caller is never part of the result. A blank query matches nobody.

        Args:
            query: Substring to look for (case-insensitive)
            current_user_id: The searching user, excluded from results

        Returns:
            Up to USER_SEARCH_MAX_RESULTS users ordered by email
        """
        query = (query or "").strip()
        if not query:
            return []

        cls.get_logger().debug(f"User {current_user_id} searching users: {query!r}")

        limit = get_limit("USER_SEARCH_MAX_RESULTS")
        return list(
            User.objects.active()
            .filter(Q(email__icontains=query) | Q(display_name__icontains=query))
            .exclude(pk=current_user_id)
            .order_by("email")[:limit]
        )
