"""
Factory Boy factories for groups models.

Provides realistic test data generation for:
- Group: Group with a creator (no memberships)
- GroupMember: Membership, MEMBER role by default
- GroupInvitation: PENDING invitation by default

Usage:
    from groups.tests.factories import GroupFactory, GroupMemberFactory

    group = GroupFactory()
    GroupMemberFactory(group=group, user=admin, role=GroupRole.ADMIN)
"""

import factory

from accounts.tests.factories import UserFactory
from groups.models import (
    Group,
    GroupInvitation,
    GroupInvitationStatus,
    GroupMember,
    GroupRole,
)


class GroupFactory(factory.django.DjangoModelFactory):
    """
    Factory for Group model.

    Creates the group row only. Use GroupMemberFactory (or
    GroupService.create_group) to add an admin.
    """

    class Meta:
        model = Group

    name = factory.Sequence(lambda n: f"Group {n}")
    description = ""
    created_by = factory.SubFactory(UserFactory)


class GroupMemberFactory(factory.django.DjangoModelFactory):
    """
    Factory for GroupMember model.

    Examples:
        member = GroupMemberFactory(group=group)
        admin = GroupMemberFactory(group=group, role=GroupRole.ADMIN)
    """

    class Meta:
        model = GroupMember

    group = factory.SubFactory(GroupFactory)
    user = factory.SubFactory(UserFactory)
    role = GroupRole.MEMBER


class GroupInvitationFactory(factory.django.DjangoModelFactory):
    """Factory for GroupInvitation model."""

    class Meta:
        model = GroupInvitation

    group = factory.SubFactory(GroupFactory)
    inviter = factory.SubFactory(UserFactory)
    invitee = factory.SubFactory(UserFactory)
    status = GroupInvitationStatus.PENDING
