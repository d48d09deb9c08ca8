"""
Group services for the membership lifecycle.

This module provides:
- GroupService: Group creation, role changes, removal, leaving, edits, reads
- GroupInvitationService: Invite, accept, reject, cancel and read invitations

Design Principles:
    - Services are stateless (use class methods)
    - Every mutation runs inside transaction.atomic()
    - Operations that count admins or members lock the Group row first, so
      concurrent leave/remove calls on one group run one after another
    - Existence checks before inserts are a fast path; unique constraint
      violations are translated into the same Conflict errors

Membership Invariant:
    A group with at least one member always has at least one ADMIN.
    - The only admin cannot be removed (LAST_ADMIN)
    - The only admin cannot leave while others remain (MUST_PROMOTE_FIRST)
    - When the last member leaves, the group itself is deleted

Usage:
    from groups.services import GroupInvitationService, GroupService

    group = GroupService.create_group(creator_id=1, name="Team")
    GroupInvitationService.create_invitation(group.id, inviter_id=1, invitee_id=2)
"""

from __future__ import annotations

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from accounts.services import IdentityDirectory
from core.constants import get_limit
from core.services import BaseService
from groups.authorization import GroupPermissionValidator
from groups.exceptions import (
    AlreadyAdmin,
    AlreadyMember,
    GroupDescriptionTooLong,
    GroupNameRequired,
    GroupNameTooLong,
    InvitationAlreadyResolved,
    InvitationNotFound,
    LastAdmin,
    MemberNotFound,
    MustPromoteFirst,
    NotInvitee,
    PendingInvitationExists,
    SelfInvitation,
    UseLeaveInstead,
)
from groups.models import (
    Group,
    GroupInvitation,
    GroupInvitationStatus,
    GroupMember,
    GroupRole,
)


# =============================================================================
# GroupService
# =============================================================================


class GroupService(BaseService):
    """
    Service for groups and their memberships.

    Methods:
        create_group: Create a group with the creator as ADMIN
        promote_member: MEMBER -> ADMIN (admin only)
        remove_member: Remove another member (admin only)
        leave_group: Leave; deletes the group when the last member leaves
        update_group: Edit name/description (admin only)
        get_group / list_members: Member-only reads
        list_user_groups: Groups the user belongs to
        record_message_activity: Bump last_message_at after a message
    """

    @classmethod
    def create_group(cls, creator_id: int, name: str, description: str = "") -> Group:
        """
        Create a group and enrol the creator as its first ADMIN.

        Args:
            creator_id: The acting user
            name: Group name (required, trimmed)
            description: Optional description (trimmed)

        Returns:
            The new Group

        Raises:
            GroupNameRequired: Name is blank
            GroupNameTooLong: Name over GROUP_NAME_MAX_LENGTH
            GroupDescriptionTooLong: Description over GROUP_DESCRIPTION_MAX_LENGTH
            UserNotFound: Creator missing or not ACTIVE
        """
        name = (name or "").strip()
        if not name:
            raise GroupNameRequired()
        cls._validate_name_length(name)

        description = (description or "").strip()
        cls._validate_description_length(description)

        IdentityDirectory.require_active_user(user_id=creator_id)

        with transaction.atomic():
            group = Group.objects.create(
                name=name,
                description=description,
                created_by_id=creator_id,
            )
            GroupMember.objects.create(
                group=group,
                user_id=creator_id,
                role=GroupRole.ADMIN,
            )

        cls.get_logger().info(f"User {creator_id} created group {group.id} '{name}'")
        return group

    @classmethod
    def promote_member(
        cls,
        group_id: int,
        acting_admin_id: int,
        target_user_id: int,
    ) -> GroupMember:
        """
        Promote a member to ADMIN. There is no demotion.

        Raises:
            GroupNotFound: Group does not exist
            NotGroupAdmin: Acting user is not an admin
            MemberNotFound: Target is not a member
            AlreadyAdmin: Target is already an admin
        """
        with transaction.atomic():
            GroupPermissionValidator.require_admin(
                group_id, acting_admin_id, for_update=True
            )
            membership = cls._require_target_membership(group_id, target_user_id)
            if membership.is_admin:
                raise AlreadyAdmin(group_id, target_user_id)

            membership.role = GroupRole.ADMIN
            membership.save(update_fields=["role"])

        cls.get_logger().info(
            f"User {acting_admin_id} promoted user {target_user_id} "
            f"to admin in group {group_id}"
        )
        return membership

    @classmethod
    def remove_member(
        cls,
        group_id: int,
        acting_admin_id: int,
        target_user_id: int,
    ) -> None:
        """
        Remove another member from the group.

        Raises:
            GroupNotFound: Group does not exist
            NotGroupAdmin: Acting user is not an admin
            MemberNotFound: Target is not a member
            UseLeaveInstead: Admin targeted themself
            LastAdmin: Target is the group's only admin
        """
        with transaction.atomic():
            GroupPermissionValidator.require_admin(
                group_id, acting_admin_id, for_update=True
            )
            membership = cls._require_target_membership(group_id, target_user_id)
            if target_user_id == acting_admin_id:
                raise UseLeaveInstead(group_id, acting_admin_id)
            if membership.is_admin and cls._admin_count(group_id) <= 1:
                raise LastAdmin(group_id, target_user_id)

            membership.delete()

        cls.get_logger().info(
            f"User {acting_admin_id} removed user {target_user_id} from group {group_id}"
        )

    @classmethod
    def leave_group(cls, group_id: int, acting_user_id: int) -> bool:
        """
        Leave a group.

        Implementation:
            1. Lock the group row and require membership
            2. Last member of the group: delete the group (cascades to
               memberships and invitations)
            3. Only admin while others remain: refuse
            4. Otherwise delete the membership

        Returns:
            True if the group was deleted, False otherwise

        Raises:
            GroupNotFound: Group does not exist
            NotGroupMember: User is not a member
            MustPromoteFirst: User is the only admin and others remain
        """
        with transaction.atomic():
            group = GroupPermissionValidator.require_member(
                group_id, acting_user_id, for_update=True
            )
            membership = GroupPermissionValidator.get_membership(group_id, acting_user_id)
            member_count = GroupMember.objects.filter(group_id=group_id).count()

            if member_count == 1:
                group.delete()
                cls.get_logger().info(
                    f"User {acting_user_id} left group {group_id} as last member; "
                    f"group deleted"
                )
                return True

            if membership.is_admin and cls._admin_count(group_id) == 1:
                raise MustPromoteFirst(group_id, acting_user_id, member_count)

            membership.delete()

        cls.get_logger().info(f"User {acting_user_id} left group {group_id}")
        return False

    @classmethod
    def update_group(
        cls,
        group_id: int,
        acting_admin_id: int,
        name: str | None = None,
        description: str | None = None,
    ) -> Group:
        """
        Edit a group's name and/or description.

        A blank name is ignored (the current name is kept). An empty
        description clears it.

        Raises:
            GroupNotFound: Group does not exist
            NotGroupAdmin: Acting user is not an admin
            GroupNameTooLong / GroupDescriptionTooLong: Value over its limit
        """
        with transaction.atomic():
            group = GroupPermissionValidator.require_admin(
                group_id, acting_admin_id, for_update=True
            )
            update_fields = []

            if name is not None and name.strip():
                name = name.strip()
                cls._validate_name_length(name)
                group.name = name
                update_fields.append("name")

            if description is not None:
                description = description.strip()
                cls._validate_description_length(description)
                group.description = description
                update_fields.append("description")

            if update_fields:
                group.save(update_fields=[*update_fields, "updated_at"])

        if update_fields:
            cls.get_logger().info(
                f"User {acting_admin_id} updated group {group_id}: {', '.join(update_fields)}"
            )
        return group

    @classmethod
    def get_group(cls, group_id: int, user_id: int) -> Group:
        """Get a group the user belongs to."""
        return GroupPermissionValidator.require_member(group_id, user_id)

    @classmethod
    def list_user_groups(cls, user_id: int) -> list[Group]:
        """Groups the user belongs to, most recent activity first."""
        return list(
            Group.objects.filter(memberships__user_id=user_id).order_by(
                F("last_message_at").desc(nulls_last=True), "-created_at"
            )
        )

    @classmethod
    def list_members(cls, group_id: int, user_id: int) -> list[GroupMember]:
        """Members of a group the user belongs to, in join order."""
        GroupPermissionValidator.require_member(group_id, user_id)
        return list(
            GroupMember.objects.filter(group_id=group_id)
            .select_related("user")
            .order_by("joined_at", "id")
        )

    @classmethod
    def record_message_activity(cls, group_id: int, user_id: int) -> Group:
        """Record that a member just posted a message to the group."""
        group = GroupPermissionValidator.require_member(group_id, user_id)
        group.last_message_at = timezone.now()
        group.save(update_fields=["last_message_at", "updated_at"])

        cls.get_logger().debug(
            f"Recorded message activity in group {group_id} by user {user_id}"
        )
        return group

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _admin_count(cls, group_id: int) -> int:
        return GroupMember.objects.filter(group_id=group_id, role=GroupRole.ADMIN).count()

    @classmethod
    def _require_target_membership(cls, group_id: int, user_id: int) -> GroupMember:
        membership = GroupPermissionValidator.get_membership(group_id, user_id)
        if membership is None:
            raise MemberNotFound(group_id, user_id)
        return membership

    @classmethod
    def _validate_name_length(cls, name: str) -> None:
        max_length = get_limit("GROUP_NAME_MAX_LENGTH")
        if len(name) > max_length:
            raise GroupNameTooLong(max_length)

    @classmethod
    def _validate_description_length(cls, description: str) -> None:
        max_length = get_limit("GROUP_DESCRIPTION_MAX_LENGTH")
        if len(description) > max_length:
            raise GroupDescriptionTooLong(max_length)


# =============================================================================
# GroupInvitationService
# =============================================================================


class GroupInvitationService(BaseService):
    """
    Service for the group invitation lifecycle.

    Lifecycle:
        create_invitation -> PENDING (admin)
        accept_invitation -> ACCEPTED + GroupMember(MEMBER) (invitee)
        reject_invitation -> REJECTED (invitee)
        cancel_invitation -> CANCELLED (any admin of the group)

    Resolved invitations are kept. A user may be invited again once their
    previous invitation is no longer PENDING.
    """

    @classmethod
    def create_invitation(
        cls,
        group_id: int,
        inviter_id: int,
        invitee_id: int,
    ) -> GroupInvitation:
        """
        Invite a user to a group.

        Args:
            group_id: Target group
            inviter_id: The acting admin
            invitee_id: User to invite

        Returns:
            The new PENDING GroupInvitation

        Raises:
            GroupNotFound: Group does not exist
            NotGroupAdmin: Inviter is not an admin
            SelfInvitation: Inviter and invitee are the same user
            UserNotFound: Invitee missing or not ACTIVE
            AlreadyMember: Invitee is already in the group
            PendingInvitationExists: Invitee already has a PENDING invitation
        """
        with transaction.atomic():
            GroupPermissionValidator.require_admin(group_id, inviter_id)
            if inviter_id == invitee_id:
                raise SelfInvitation(group_id, inviter_id)
            IdentityDirectory.require_active_user(user_id=invitee_id)

            if GroupPermissionValidator.is_member(group_id, invitee_id):
                raise AlreadyMember(group_id, invitee_id)
            if cls.pending_invitation_exists(group_id, invitee_id):
                raise PendingInvitationExists(group_id, invitee_id)

            invitation = cls.insert_or_conflict(
                lambda: GroupInvitation.objects.create(
                    group_id=group_id,
                    inviter_id=inviter_id,
                    invitee_id=invitee_id,
                ),
                lambda: PendingInvitationExists(group_id, invitee_id),
            )

        cls.get_logger().info(
            f"User {inviter_id} invited user {invitee_id} to group {group_id} "
            f"(invitation {invitation.id})"
        )
        return invitation

    @classmethod
    def accept_invitation(cls, invitation_id: int, acting_user_id: int) -> GroupInvitation:
        """
        Accept a PENDING invitation and join the group as MEMBER.

        The status change and the membership insert commit together or not
        at all.

        Raises:
            InvitationNotFound: No invitation with this id
            NotInvitee: Acting user is not the invitee
            InvitationAlreadyResolved: Invitation is not PENDING
            AlreadyMember: Invitee is already in the group
        """
        group_id = (
            GroupInvitation.objects.filter(pk=invitation_id)
            .values_list("group_id", flat=True)
            .first()
        )
        if group_id is None:
            raise InvitationNotFound(invitation_id)

        with transaction.atomic():
            # Lock order: group, then invitation, as in leave_group.
            Group.objects.select_for_update().filter(pk=group_id).first()
            invitation = cls._lock_invitation(invitation_id)
            if invitation.invitee_id != acting_user_id:
                raise NotInvitee(invitation_id, acting_user_id)
            cls._transition(invitation, GroupInvitationStatus.ACCEPTED)

            if GroupPermissionValidator.is_member(group_id, acting_user_id):
                raise AlreadyMember(group_id, acting_user_id)
            cls.insert_or_conflict(
                lambda: GroupMember.objects.create(
                    group_id=group_id,
                    user_id=acting_user_id,
                    role=GroupRole.MEMBER,
                ),
                lambda: AlreadyMember(group_id, acting_user_id),
            )

        cls.get_logger().info(
            f"User {acting_user_id} accepted invitation {invitation_id} "
            f"and joined group {group_id}"
        )
        return invitation

    @classmethod
    def reject_invitation(cls, invitation_id: int, acting_user_id: int) -> GroupInvitation:
        """
        Decline a PENDING invitation.

        Raises:
            InvitationNotFound: No invitation with this id
            NotInvitee: Acting user is not the invitee
            InvitationAlreadyResolved: Invitation is not PENDING
        """
        with transaction.atomic():
            invitation = cls._lock_invitation(invitation_id)
            if invitation.invitee_id != acting_user_id:
                raise NotInvitee(invitation_id, acting_user_id)
            cls._transition(invitation, GroupInvitationStatus.REJECTED)

        cls.get_logger().info(f"User {acting_user_id} rejected invitation {invitation_id}")
        return invitation

    @classmethod
    def cancel_invitation(cls, invitation_id: int, acting_admin_id: int) -> GroupInvitation:
        """
        Withdraw a PENDING invitation. Any admin of the group may cancel.

        Raises:
            InvitationNotFound: No invitation with this id
            NotGroupAdmin: Acting user is not an admin of the group
            InvitationAlreadyResolved: Invitation is not PENDING
        """
        with transaction.atomic():
            invitation = cls._lock_invitation(invitation_id)
            GroupPermissionValidator.require_admin(invitation.group_id, acting_admin_id)
            cls._transition(invitation, GroupInvitationStatus.CANCELLED)

        cls.get_logger().info(f"User {acting_admin_id} cancelled invitation {invitation_id}")
        return invitation

    @classmethod
    def get_invitation(cls, invitation_id: int, user_id: int) -> GroupInvitation:
        """
        Get an invitation as its inviter or invitee.

        Raises:
            InvitationNotFound: No such invitation, or the user is not a party
        """
        invitation = GroupInvitation.objects.filter(pk=invitation_id).first()
        if invitation is None or not invitation.involves(user_id):
            raise InvitationNotFound(invitation_id)
        return invitation

    @classmethod
    def list_pending_for_user(cls, user_id: int) -> list[GroupInvitation]:
        """PENDING invitations awaiting the user, newest first."""
        return list(
            GroupInvitation.objects.filter(
                invitee_id=user_id, status=GroupInvitationStatus.PENDING
            )
            .select_related("group", "inviter")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def list_for_group(cls, group_id: int, admin_id: int) -> list[GroupInvitation]:
        """All invitations of a group, any status, newest first. Admin only."""
        GroupPermissionValidator.require_admin(group_id, admin_id)
        return list(
            GroupInvitation.objects.filter(group_id=group_id)
            .select_related("inviter", "invitee")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def count_pending(cls, user_id: int) -> int:
        return GroupInvitation.objects.filter(
            invitee_id=user_id, status=GroupInvitationStatus.PENDING
        ).count()

    @classmethod
    def pending_invitation_exists(cls, group_id: int, invitee_id: int) -> bool:
        return GroupInvitation.objects.filter(
            group_id=group_id,
            invitee_id=invitee_id,
            status=GroupInvitationStatus.PENDING,
        ).exists()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _lock_invitation(cls, invitation_id: int) -> GroupInvitation:
        """Must be called within a transaction.atomic() block."""
        invitation = (
            GroupInvitation.objects.select_for_update().filter(pk=invitation_id).first()
        )
        if invitation is None:
            raise InvitationNotFound(invitation_id)
        return invitation

    @classmethod
    def _transition(cls, invitation: GroupInvitation, status: str) -> None:
        if not invitation.can_transition_to(status):
            raise InvitationAlreadyResolved(invitation.id, invitation.status)
        invitation.status = status
        invitation.save(update_fields=["status", "updated_at"])
