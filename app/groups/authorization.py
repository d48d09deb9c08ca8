"""
Service-level authorization for group operations.

Every group operation starts by asking this module whether the acting user
may perform it. Checks always re-read membership from the database; nothing
is cached between calls.

Key Components:
    GroupPermissionValidator: Stateless class with membership checks

Error Codes:
    GROUP_NOT_FOUND: The group does not exist
    NOT_GROUP_MEMBER: User has no membership in the group
    NOT_GROUP_ADMIN: User is a member but not an ADMIN

Usage:
    # Inside a transaction, locking the group row for count-based checks
    with transaction.atomic():
        group = GroupPermissionValidator.require_admin(
            group_id, acting_user_id, for_update=True
        )

    # Plain predicate
    if GroupPermissionValidator.is_admin(group_id, user_id):
        ...
"""

from __future__ import annotations

from groups.exceptions import GroupNotFound, NotGroupAdmin, NotGroupMember
from groups.models import Group, GroupMember, GroupRole


class GroupPermissionValidator:
    """
    Stateless membership and role checks.

    All methods are classmethods and can be called directly without
    instantiation. The require_* methods return the Group so callers do not
    have to load it again.
    """

    @classmethod
    def get_membership(cls, group_id: int, user_id: int) -> GroupMember | None:
        return GroupMember.objects.filter(group_id=group_id, user_id=user_id).first()

    @classmethod
    def is_member(cls, group_id: int, user_id: int) -> bool:
        return GroupMember.objects.filter(group_id=group_id, user_id=user_id).exists()

    @classmethod
    def is_admin(cls, group_id: int, user_id: int) -> bool:
        return GroupMember.objects.filter(
            group_id=group_id,
            user_id=user_id,
            role=GroupRole.ADMIN,
        ).exists()

    @classmethod
    def require_member(
        cls,
        group_id: int,
        user_id: int,
        for_update: bool = False,
    ) -> Group:
        """
        Require that the user is a member of the group.

        Args:
            group_id: ID of the group
            user_id: The acting user
            for_update: Lock the group row (caller must be inside
                transaction.atomic())

        Returns:
            The Group

        Raises:
            GroupNotFound: The group does not exist
            NotGroupMember: The user is not a member
        """
        group = cls._load_group(group_id, for_update)
        if not cls.is_member(group_id, user_id):
            raise NotGroupMember(group_id, user_id)
        return group

    @classmethod
    def require_admin(
        cls,
        group_id: int,
        user_id: int,
        for_update: bool = False,
    ) -> Group:
        """
        Require that the user is an ADMIN of the group.

        Raises:
            GroupNotFound: The group does not exist
            NotGroupAdmin: The user is not an admin (including non-members)
        """
        group = cls._load_group(group_id, for_update)
        if not cls.is_admin(group_id, user_id):
            raise NotGroupAdmin(group_id, user_id)
        return group

    @classmethod
    def _load_group(cls, group_id: int, for_update: bool) -> Group:
        queryset = Group.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        group = queryset.filter(pk=group_id).first()
        if group is None:
            raise GroupNotFound(group_id)
        return group
