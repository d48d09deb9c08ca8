"""
Group models.

This module defines the membership store:

Models:
    Group: A named group chat
    GroupMember: A user's membership and role in a group
    GroupInvitation: An admin's invitation for a user to join a group

Design Decisions:
    - Every group with at least one member has at least one ADMIN. The
      database cannot express this; GroupService enforces it while holding
      a row lock on the Group.
    - Deleting a Group cascades to its memberships and invitations
    - Only one PENDING invitation per (group, invitee); resolved invitations
      are kept as history and do not block a new invitation
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from core.models import BaseModel


class GroupRole(models.TextChoices):
    """
    Role of a member within a group.

    ADMIN: May invite, promote, remove members and edit the group
    MEMBER: Regular member

    Roles only move upward: MEMBER -> ADMIN.
    """

    ADMIN = "admin", "Admin"
    MEMBER = "member", "Member"


class GroupInvitationStatus(models.TextChoices):
    """
    Status of a group invitation.

    PENDING: Waiting for the invitee
    ACCEPTED: Invitee joined the group
    REJECTED: Invitee declined
    CANCELLED: An admin withdrew the invitation

    All statuses except PENDING are terminal.
    """

    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"
    CANCELLED = "cancelled", "Cancelled"


class Group(BaseModel):
    """
    A group chat.

    Fields:
        name: Display name (required)
        description: Optional free text
        created_by: User who created the group (kept if they leave)
        last_message_at: Timestamp of most recent message (for sorting)

    Note:
        Name and description lengths are validated by GroupService against
        RELATIONSHIP_LIMITS; the column sizes here are the upper bound.
    """

    name = models.CharField(
        max_length=100,
        help_text="Group name",
    )

    description = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Optional group description",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_groups",
        help_text="User who created the group",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting group lists)",
    )

    class Meta:
        db_table = "groups_group"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return self.name


class GroupMember(models.Model):
    """
    Membership of a user in a group.

    Fields:
        group: The group
        user: The member
        role: ADMIN or MEMBER
        joined_at: When the user joined

    Constraints:
        - UniqueConstraint(group, user): A user holds one membership per group
    """

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="The group",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="group_memberships",
        help_text="The member",
    )

    role = models.CharField(
        max_length=10,
        choices=GroupRole.choices,
        default=GroupRole.MEMBER,
        help_text="Member role within the group",
    )

    joined_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user joined the group",
    )

    class Meta:
        db_table = "groups_group_member"
        ordering = ["joined_at", "id"]
        indexes = [
            # Admin counts for the last-admin rule
            models.Index(fields=["group", "role"], name="groups_member_group_role_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "user"],
                name="unique_group_member",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"GroupMember(group={self.group_id}, user={self.user_id}) [{self.role}]"

    @property
    def is_admin(self) -> bool:
        return self.role == GroupRole.ADMIN


class GroupInvitation(BaseModel):
    """
    An invitation for a user to join a group.

    Lifecycle:
        1. Admin invites: status=PENDING
        2. Invitee accepts: status=ACCEPTED, GroupMember(MEMBER) created
           -- or --
           Invitee rejects: status=REJECTED
           -- or --
           An admin cancels: status=CANCELLED

    Fields:
        group: Group the invitee is asked to join
        inviter: Admin who sent the invitation
        invitee: User being invited
        status: Current lifecycle status

    Constraints:
        - CheckConstraint(inviter != invitee)
        - UniqueConstraint(group, invitee) WHERE status = pending
    """

    TRANSITIONS = {
        GroupInvitationStatus.PENDING: (
            GroupInvitationStatus.ACCEPTED,
            GroupInvitationStatus.REJECTED,
            GroupInvitationStatus.CANCELLED,
        ),
        GroupInvitationStatus.ACCEPTED: (),
        GroupInvitationStatus.REJECTED: (),
        GroupInvitationStatus.CANCELLED: (),
    }

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name="invitations",
        help_text="Group the invitee is asked to join",
    )

    inviter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_group_invitations",
        help_text="Admin who sent the invitation",
    )

    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="group_invitations",
        help_text="User being invited",
    )

    status = models.CharField(
        max_length=10,
        choices=GroupInvitationStatus.choices,
        default=GroupInvitationStatus.PENDING,
        db_index=True,
        help_text="Current lifecycle status",
    )

    class Meta:
        db_table = "groups_group_invitation"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["invitee", "status"],
                name="groups_inv_invitee_status_idx",
            ),
            models.Index(
                fields=["group", "status"],
                name="groups_inv_group_status_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(inviter=F("invitee")),
                name="group_invitation_inviter_not_invitee",
            ),
            models.UniqueConstraint(
                fields=["group", "invitee"],
                condition=Q(status=GroupInvitationStatus.PENDING),
                name="unique_pending_group_invitation",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return (
            f"GroupInvitation(group={self.group_id}, "
            f"{self.inviter_id} -> {self.invitee_id}) [{self.status}]"
        )

    @property
    def is_pending(self) -> bool:
        return self.status == GroupInvitationStatus.PENDING

    def can_transition_to(self, status: str) -> bool:
        """Check if moving from the current status to `status` is allowed."""
        return status in self.TRANSITIONS.get(self.status, ())

    def involves(self, user_id: int) -> bool:
        """Check if the user is the inviter or the invitee."""
        return user_id in (self.inviter_id, self.invitee_id)
