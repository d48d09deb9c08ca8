"""
Test configuration and fixtures for groups tests.

This module provides:
- User fixtures with different group roles
- A group with one admin and one member
- A pending invitation fixture

Usage:
    def test_example(group, admin_user, member_user):
        GroupService.promote_member(group.id, admin_user.id, member_user.id)
"""

import pytest

from accounts.models import UserStatus
from accounts.tests.factories import UserFactory
from groups.models import GroupRole
from groups.tests.factories import (
    GroupFactory,
    GroupInvitationFactory,
    GroupMemberFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def admin_user(db):
    """Create a user who will be the group admin."""
    return UserFactory()


@pytest.fixture
def member_user(db):
    """Create a user who will be a regular group member."""
    return UserFactory()


@pytest.fixture
def invitee_user(db):
    """Create an ACTIVE user who is not in the group."""
    return UserFactory()


@pytest.fixture
def non_member_user(db):
    """Create a user with no relation to the test group."""
    return UserFactory()


@pytest.fixture
def unverified_user(db):
    """Create a user who has not confirmed their email."""
    return UserFactory(status=UserStatus.PENDING_VERIFICATION)


# =============================================================================
# Group Fixtures
# =============================================================================


@pytest.fixture
def group(admin_user, member_user):
    """
    Create a group with one admin and one member.

    Returns a group where admin_user is ADMIN and member_user is MEMBER.
    """
    group = GroupFactory(name="Team", created_by=admin_user)
    GroupMemberFactory(group=group, user=admin_user, role=GroupRole.ADMIN)
    GroupMemberFactory(group=group, user=member_user, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def pending_invitation(group, admin_user, invitee_user):
    """PENDING invitation from admin_user to invitee_user."""
    return GroupInvitationFactory(group=group, inviter=admin_user, invitee=invitee_user)
