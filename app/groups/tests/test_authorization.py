"""
Tests for GroupPermissionValidator.

Why it matters:
    Every group operation is gated here. The validator must tell a missing
    group apart from a missing membership, and must never answer from
    stale state.
"""

import pytest

from core.exceptions import NotFoundError, PermissionDeniedError
from groups.authorization import GroupPermissionValidator
from groups.exceptions import GroupNotFound, NotGroupAdmin, NotGroupMember
from groups.models import GroupMember, GroupRole


class TestPredicates:
    """Tests for is_member(), is_admin() and get_membership()."""

    def test_admin_is_member_and_admin(self, group, admin_user):
        assert GroupPermissionValidator.is_member(group.id, admin_user.id)
        assert GroupPermissionValidator.is_admin(group.id, admin_user.id)

    def test_member_is_not_admin(self, group, member_user):
        assert GroupPermissionValidator.is_member(group.id, member_user.id)
        assert not GroupPermissionValidator.is_admin(group.id, member_user.id)

    def test_non_member(self, group, non_member_user):
        assert not GroupPermissionValidator.is_member(group.id, non_member_user.id)
        assert GroupPermissionValidator.get_membership(group.id, non_member_user.id) is None

    def test_get_membership_returns_role(self, group, member_user):
        membership = GroupPermissionValidator.get_membership(group.id, member_user.id)

        assert membership.role == GroupRole.MEMBER


class TestRequireMember:
    """Tests for require_member()."""

    def test_returns_group_for_member(self, group, member_user):
        assert GroupPermissionValidator.require_member(group.id, member_user.id) == group

    def test_locked_read_returns_group(self, group, member_user):
        assert (
            GroupPermissionValidator.require_member(group.id, member_user.id, for_update=True)
            == group
        )

    def test_non_member_is_forbidden(self, group, non_member_user):
        with pytest.raises(NotGroupMember) as exc_info:
            GroupPermissionValidator.require_member(group.id, non_member_user.id)

        assert isinstance(exc_info.value, PermissionDeniedError)
        assert exc_info.value.error_code == "NOT_GROUP_MEMBER"

    def test_missing_group_is_not_found(self, member_user):
        with pytest.raises(GroupNotFound) as exc_info:
            GroupPermissionValidator.require_member(31337, member_user.id)

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.error_code == "GROUP_NOT_FOUND"


class TestRequireAdmin:
    """Tests for require_admin()."""

    def test_returns_group_for_admin(self, group, admin_user):
        assert GroupPermissionValidator.require_admin(group.id, admin_user.id) == group

    def test_member_is_forbidden(self, group, member_user):
        with pytest.raises(NotGroupAdmin) as exc_info:
            GroupPermissionValidator.require_admin(group.id, member_user.id)

        assert exc_info.value.error_code == "NOT_GROUP_ADMIN"

    def test_non_member_is_forbidden(self, group, non_member_user):
        with pytest.raises(NotGroupAdmin):
            GroupPermissionValidator.require_admin(group.id, non_member_user.id)

    def test_reflects_promotion_immediately(self, group, member_user):
        GroupMember.objects.filter(group=group, user=member_user).update(role=GroupRole.ADMIN)

        assert GroupPermissionValidator.require_admin(group.id, member_user.id) == group
